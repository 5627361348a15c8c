"""Structured diagnostics collected during a reconciliation run."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

log = getLogger(__name__)


class Severity(StrEnum):
    WARNING = "warning"
    ERROR = "error"


class IssueType(StrEnum):
    OSM_NODE_NOTE_OPT_OUT = "osm_node_note_opt_out"
    OSM_DUPLICATE_REGISTER_REF = "osm_duplicate_register_ref"
    OSM_NOT_A_NODE = "osm_not_a_node"
    OSM_NODE_MISSING_REF = "osm_node_missing_ref"
    REGISTER_MISSING_REQUIRED_DATA = "register_missing_required_data"
    REGISTER_AED_OUTSIDE_BOUNDARY = "register_aed_outside_boundary"
    REGISTRY_DUPLICATE_REGISTER_REF = "registry_duplicate_register_ref"
    SKIPPED_DELETE_NOT_AED_ONLY = "skipped_delete_not_aed_only"
    SKIPPED_CREATE_NEARBY = "skipped_create_nearby"
    MANAGED_NODE_LOCATION_WITHIN_TOLERANCE = "managed_node_location_within_tolerance"
    AED_SPLIT_NON_STANDALONE_NODE = "aed_split_non_standalone_node"
    TAG_VALUE_TOO_LONG = "tag_value_too_long"


@dataclass(slots=True, frozen=True, kw_only=True)
class Issue:
    type: IssueType
    severity: Severity
    message: str
    register_ref: str | None = None
    osm_node_id: int | None = None
    details: dict[str, object] = field(default_factory=dict)


class IssueLog:
    """Append-only issue collection shared by every phase of a run."""

    def __init__(self) -> None:
        self._issues: list[Issue] = []

    def __iter__(self) -> Iterator[Issue]:
        return iter(self._issues)

    def __len__(self) -> int:
        return len(self._issues)

    def add(self, issue: Issue) -> Issue:
        self._issues.append(issue)
        if issue.severity is Severity.ERROR:
            log.error("%s: %s", issue.type, issue.message)
        else:
            log.debug("%s: %s", issue.type, issue.message)
        return issue

    def warning(
        self,
        issue_type: IssueType,
        message: str,
        *,
        register_ref: str | None = None,
        osm_node_id: int | None = None,
        details: dict[str, object] | None = None,
    ) -> Issue:
        return self.add(
            Issue(
                type=issue_type,
                severity=Severity.WARNING,
                message=message,
                register_ref=register_ref,
                osm_node_id=osm_node_id,
                details=details or {},
            )
        )

    def error(
        self,
        issue_type: IssueType,
        message: str,
        *,
        register_ref: str | None = None,
        osm_node_id: int | None = None,
        details: dict[str, object] | None = None,
    ) -> Issue:
        return self.add(
            Issue(
                type=issue_type,
                severity=Severity.ERROR,
                message=message,
                register_ref=register_ref,
                osm_node_id=osm_node_id,
                details=details or {},
            )
        )

    def of_type(self, issue_type: IssueType) -> list[Issue]:
        return [issue for issue in self._issues if issue.type is issue_type]

    def snapshot(self) -> tuple[Issue, ...]:
        return tuple(self._issues)
