"""Shared test fixtures for ocfltools."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from ocfltools.config import OcflConfig
from ocfltools.core.hasher import bytes_digest
from ocfltools.core.inventory import OcflObject
from ocfltools.core.inventory_io import write_inventory

OBJECT_ID = "urn:example:ocfltools:test-object"


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for object roots."""
    return tmp_path


@pytest.fixture
def ocfl_config() -> OcflConfig:
    """Deterministic config: sha256, unpadded versions, ``content`` directory."""
    return OcflConfig(
        digest_algorithm="sha256",
        content_directory="content",
        version_format="v%d",
    )


@pytest.fixture
def ocfl_object(ocfl_config: OcflConfig) -> OcflObject:
    """Provide an empty inventory."""
    return OcflObject(OBJECT_ID, config=ocfl_config)


@pytest.fixture
def make_object_root(tmp_dir: Path) -> Callable[..., OcflObject]:
    """Factory fixture: write a valid OCFL object root to disk.

    ``versions`` is a list of {logical path: bytes} dicts, one per version,
    each applied on top of the previous version's state.
    """

    def _factory(
        versions: list[dict[str, bytes]],
        *,
        name: str = "object",
        version_format: str = "v%d",
        algorithm: str = "sha256",
        version_inventories: bool = True,
    ) -> OcflObject:
        root = tmp_dir / name
        root.mkdir(parents=True)
        config = OcflConfig(
            digest_algorithm=algorithm,
            content_directory="content",
            version_format=version_format,
        )
        obj = OcflObject(OBJECT_ID, config=config)
        (root / config.namaste_filename).write_text("ocfl_object_1.0\n")

        for number, files in enumerate(versions, start=1):
            obj.get_or_create_version(number)
            token = obj.version_format.format(number)
            (root / token / "content").mkdir(parents=True)
            for logical, data in files.items():
                digest = bytes_digest(data, algorithm)
                is_new = digest not in obj.manifest
                if logical in obj.get_files(number):
                    obj.update_file(logical, digest, number)
                else:
                    obj.add_file(logical, digest, number)
                if is_new:
                    target = root / obj.manifest[digest].first()
                    target.parent.mkdir(parents=True, exist_ok=True)
                    target.write_bytes(data)
            obj.set_version_message(number, f"version {number}")
            obj.set_version_user(number, {"name": "Tester", "address": "mailto:t@example.org"})
            obj.set_version_created(number, "2026-01-01T00:00:00Z")
            if version_inventories:
                write_inventory(obj, root / token)

        write_inventory(obj, root)
        return obj

    return _factory


@pytest.fixture
def object_root(tmp_dir: Path, make_object_root: Callable[..., OcflObject]) -> Path:
    """A valid three-version object root with unpadded version names."""
    make_object_root(
        [
            {"a.txt": b"alpha", "b.txt": b"bravo"},
            {"a.txt": b"alpha v2", "c/d.txt": b"delta"},
            {"e.txt": b"alpha"},
        ]
    )
    return tmp_dir / "object"
