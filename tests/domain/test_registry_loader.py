from __future__ import annotations

from aedsync.domain.issues import IssueLog, IssueType
from aedsync.domain.registry_loader import load_registry, validate_record
from tests.helpers.aeds import make_record, square_boundary


def test_validate_record_requires_guid_and_finite_coordinates() -> None:
    assert validate_record(make_record(" G ")) is not None
    assert validate_record(make_record(" G ")).guid == "G"  # type: ignore[union-attr]
    assert validate_record(make_record(None)) is None
    assert validate_record(make_record("G", lat=None)) is None
    assert validate_record(make_record("G", lon=float("inf"))) is None


def test_load_registry_indexes_accepted_assets() -> None:
    issues = IssueLog()

    registry = load_registry(
        [make_record("A"), make_record("B", lat=60.39, lon=5.33)],
        boundary=square_boundary(),
        issues=issues,
    )

    assert sorted(registry) == ["A", "B"]
    assert len(issues) == 0


def test_invalid_and_outside_records_become_issues() -> None:
    issues = IssueLog()

    registry = load_registry(
        [make_record(""), make_record("FAR", lat=59.33, lon=18.07)],
        boundary=square_boundary(east=12.0),
        issues=issues,
    )

    assert registry == {}
    assert len(issues.of_type(IssueType.REGISTER_MISSING_REQUIRED_DATA)) == 1
    (outside,) = issues.of_type(IssueType.REGISTER_AED_OUTSIDE_BOUNDARY)
    assert outside.register_ref == "FAR"


def test_duplicate_guid_keeps_first_record_and_reports_once() -> None:
    issues = IssueLog()
    first = make_record("A", site_name="First")
    records = [first, make_record("A", site_name="Second"), make_record("A", site_name="Third")]

    registry = load_registry(records, boundary=square_boundary(), issues=issues)

    assert registry["A"].record is first
    duplicates = issues.of_type(IssueType.REGISTRY_DUPLICATE_REGISTER_REF)
    assert [issue.register_ref for issue in duplicates] == ["A"]
