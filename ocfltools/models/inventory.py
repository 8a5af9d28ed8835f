"""Wire models for the ``inventory.json`` document.

These mirror the JSON shape exactly (camelCase keys via aliases). The
mutable in-memory model lives in ``ocfltools.core.inventory``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class UserRecord(BaseModel):
    """Who made a version."""

    name: str = ""
    address: str = ""


class VersionDocument(BaseModel):
    """One entry of the ``versions`` block."""

    created: str = ""
    message: str = ""
    user: UserRecord = Field(default_factory=UserRecord)
    state: dict[str, list[str]] = {}


class InventoryDocument(BaseModel):
    """The full inventory document.

    ``fixity`` is optional and omitted from the output when empty.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: str
    digest_algorithm: str = Field(alias="digestAlgorithm")
    head: str
    content_directory: str = Field(default="content", alias="contentDirectory")
    manifest: dict[str, list[str]] = {}
    versions: dict[str, VersionDocument] = {}
    fixity: dict[str, dict[str, list[str]]] | None = None
