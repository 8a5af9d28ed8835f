"""Reading and writing ``inventory.json`` and its digest sidecar.

Parsing goes through the pydantic wire model and then replays each
version into an ``OcflObject`` so a loaded inventory obeys the same
invariants as one built in memory.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from pydantic import ValidationError

from ocfltools.config import OcflConfig
from ocfltools.core.errors import InventoryParseError, OcflError
from ocfltools.core.hasher import bytes_digest
from ocfltools.core.inventory import OcflObject, Version
from ocfltools.core.pathset import PathSet
from ocfltools.models.inventory import InventoryDocument, VersionDocument
from ocfltools.models.versioning import VERSION_TOKEN_RE, VersionFormat

logger = logging.getLogger(__name__)

INVENTORY_FILENAME = "inventory.json"


def sidecar_filename(algorithm: str) -> str:
    return f"{INVENTORY_FILENAME}.{algorithm}"


def sniff_field(text: str, field: str) -> str | None:
    """Pull a top-level string value out of raw inventory text.

    A plain text scan, so it still answers for inventories that do not
    parse as JSON.
    """
    match = re.search(rf'"{re.escape(field)}"\s*:\s*"([^"]*)"', text)
    return match.group(1) if match else None


# ----------------------------------------------------------------------
# Parse
# ----------------------------------------------------------------------


def _infer_format(tokens: list[str]) -> VersionFormat:
    candidates = sorted(t for t in tokens if VERSION_TOKEN_RE.match(t))
    if not candidates:
        raise InventoryParseError("Inventory has no version blocks")
    try:
        return VersionFormat.from_first_version(candidates[0])
    except OcflError as exc:
        raise InventoryParseError(str(exc)) from exc


def from_document(
    document: InventoryDocument, *, config: OcflConfig | None = None
) -> OcflObject:
    """Build an ``OcflObject`` from a parsed inventory document."""
    version_format = _infer_format(list(document.versions))
    obj = OcflObject(document.id, config=config)
    obj.type = document.type
    obj.digest_algorithm = document.digest_algorithm
    obj.content_directory = document.content_directory
    obj.version_format = version_format
    empty = sorted(d for d, paths in document.manifest.items() if not paths)
    if empty:
        raise InventoryParseError(f"Manifest digests with no content paths: {', '.join(empty)}")
    obj.manifest = {d: PathSet(paths) for d, paths in document.manifest.items()}

    try:
        numbered = sorted(
            ((version_format.parse(token), block) for token, block in document.versions.items()),
            key=lambda item: item[0],
        )
    except ValueError as exc:
        raise InventoryParseError(f"Inconsistent version names: {exc}") from exc

    try:
        for number, block in numbered:
            obj.set_version(
                number,
                Version(
                    number,
                    {d: PathSet(paths) for d, paths in block.state.items()},
                    created=block.created,
                    message=block.message,
                    user=block.user,
                ),
            )
    except OcflError as exc:
        raise InventoryParseError(f"Invalid inventory {document.id}: {exc}") from exc

    if obj.head_token != document.head:
        raise InventoryParseError(
            f"Inventory head {document.head} does not match last version {obj.head_token}"
        )

    for algorithm, block in (document.fixity or {}).items():
        for alt_digest, paths in block.items():
            for path in paths:
                obj.add_fixity(algorithm, alt_digest, path)
    return obj


def parse_inventory(text: str, *, config: OcflConfig | None = None) -> OcflObject:
    try:
        document = InventoryDocument.model_validate_json(text)
    except ValidationError as exc:
        raise InventoryParseError(f"Malformed inventory: {exc}") from exc
    return from_document(document, config=config)


def load_inventory(path: Path, *, config: OcflConfig | None = None) -> OcflObject:
    """Load an inventory file, or the inventory of an object root directory."""
    path = Path(path)
    if path.is_dir():
        path = path / INVENTORY_FILENAME
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise InventoryParseError(f"Cannot read {path}: {exc}") from exc
    logger.debug("Loading inventory %s", path)
    return parse_inventory(text, config=config)


# ----------------------------------------------------------------------
# Serialize
# ----------------------------------------------------------------------


def to_document(obj: OcflObject) -> InventoryDocument:
    versions = {
        obj.version_format.format(version.number): VersionDocument(
            created=version.created,
            message=version.message,
            user=version.user,
            state={d: paths.to_list() for d, paths in version.state.items()},
        )
        for version in obj.versions()
    }
    fixity = {
        algorithm: {d: paths.to_list() for d, paths in block.items()}
        for algorithm, block in obj.fixity.items()
    }
    return InventoryDocument(
        id=obj.id or "",
        type=obj.type,
        digest_algorithm=obj.digest_algorithm,
        head=obj.head_token,
        content_directory=obj.content_directory,
        manifest={d: paths.to_list() for d, paths in obj.manifest.items()},
        versions=versions,
        fixity=fixity or None,
    )


def dump_inventory(obj: OcflObject) -> str:
    return to_document(obj).model_dump_json(by_alias=True, exclude_none=True, indent=2)


def write_inventory(obj: OcflObject, directory: Path) -> Path:
    """Write ``inventory.json`` plus its sidecar into ``directory``.

    Returns the inventory path.
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    payload = dump_inventory(obj).encode("utf-8")
    inventory_path = directory / INVENTORY_FILENAME
    inventory_path.write_bytes(payload)
    digest = bytes_digest(payload, obj.digest_algorithm)
    (directory / sidecar_filename(obj.digest_algorithm)).write_text(
        f"{digest} {INVENTORY_FILENAME}\n", encoding="utf-8"
    )
    logger.info("Wrote %s (head %s) to %s", INVENTORY_FILENAME, obj.head_token, directory)
    return inventory_path
