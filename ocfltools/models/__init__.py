"""ocfltools data models: all Pydantic v2."""

from ocfltools.models.inventory import InventoryDocument, UserRecord, VersionDocument
from ocfltools.models.reports import Finding, Severity
from ocfltools.models.versioning import VersionFormat

__all__ = [
    # versioning
    "VersionFormat",
    # inventory document
    "InventoryDocument",
    "UserRecord",
    "VersionDocument",
    # reports
    "Finding",
    "Severity",
]
