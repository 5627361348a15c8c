"""OpenStreetMap API adapter package."""

from __future__ import annotations

from .client import OsmAPIError, OsmAuthorizationError, OsmEditor
from .osmchange import build_changeset_comment, changeset_document, osmchange_document

__all__ = [
    "OsmAPIError",
    "OsmAuthorizationError",
    "OsmEditor",
    "build_changeset_comment",
    "changeset_document",
    "osmchange_document",
]
