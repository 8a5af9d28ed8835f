"""Checksum cross-validation of on-disk content against the inventory.

The comparison is symmetric: files on disk that the manifest does not know
or whose digest differs are checksum errors, and manifest paths with no
file on disk are missing-file errors. Each path yields at most one error.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from ocfltools.config import OcflConfig
from ocfltools.core.errors import InventoryParseError, NotFoundError, UnsupportedDigestError
from ocfltools.core.hasher import file_digest, new_hash
from ocfltools.core.inventory import OcflObject
from ocfltools.core.inventory_io import load_inventory
from ocfltools.core.results import ValidationResults
from ocfltools.core.structure import StructuralValidator
from ocfltools.core.walk import check_cancelled, iter_files

logger = logging.getLogger(__name__)


class ChecksumValidator:
    """Recomputes content digests and compares them to the manifest.

    Parameters
    ----------
    structure:
        Supplies the object root, version directory discovery, results
        sink and cancel signal.
    inventory:
        A parsed inventory. Loaded from ``<root>/inventory.json`` when
        omitted.
    """

    def __init__(
        self,
        structure: StructuralValidator,
        *,
        inventory: OcflObject | None = None,
        config: OcflConfig | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self._structure = structure
        self._inventory = inventory
        self._config = config or OcflConfig()
        self._cancel = cancel_event
        self.results = structure.results

    @property
    def object_root(self) -> Path:
        return self._structure.object_root

    def _load_inventory(self) -> OcflObject | None:
        if self._inventory is None:
            try:
                self._inventory = load_inventory(self.object_root, config=self._config)
            except InventoryParseError as exc:
                self.results.error("E034", "verify_checksums", f"Cannot load inventory: {exc}")
                return None
        return self._inventory

    def _expected_digests(
        self, inventory: OcflObject, algorithm: str
    ) -> dict[str, str] | None:
        """Path -> expected digest, from the manifest or a fixity block."""
        if algorithm == inventory.digest_algorithm:
            return inventory.manifest_index()
        try:
            return inventory.fixity_index(algorithm)
        except NotFoundError:
            self.results.error(
                "E093",
                "verify_checksums",
                f"Requested digest {algorithm} is neither the inventory's "
                f"digestAlgorithm nor present in its fixity block",
            )
            return None

    def disk_files(self, content_directory: str) -> list[str]:
        """Object-relative paths of every file under each content directory."""
        paths: list[str] = []
        for version_dir in self._structure.version_directories():
            content = self.object_root / version_dir / content_directory
            if not content.is_dir():
                continue
            for path in iter_files(content, self._cancel):
                paths.append(path.relative_to(self.object_root).as_posix())
        return paths

    def verify_checksums(self, digest: str | None = None) -> ValidationResults:
        """Digest every content file and cross-check it with the inventory.

        ``digest`` selects an alternate algorithm; it must have a fixity
        block in the inventory. Manifest membership is always decided by
        the manifest, and only paths the fixity block covers are compared.
        """
        errors_before = self.results.error_count
        inventory = self._load_inventory()
        if inventory is None:
            return self.results

        algorithm = digest or inventory.digest_algorithm
        expected = self._expected_digests(inventory, algorithm)
        if expected is None:
            return self.results
        known = inventory.manifest_index()

        try:
            new_hash(algorithm)
        except UnsupportedDigestError as exc:
            self.results.error("E025", "verify_checksums", str(exc))
            can_digest = False
        else:
            can_digest = True

        on_disk = self.disk_files(inventory.content_directory)
        logger.info(
            "Verifying %d files in %s with %s", len(on_disk), self.object_root, algorithm
        )
        verified = 0
        for relpath in on_disk:
            check_cancelled(self._cancel)
            path = self.object_root / relpath
            if path.is_symlink():
                self.results.warning(
                    "W000",
                    "symlinked_content",
                    f"{relpath} is a symbolic link",
                    path=relpath,
                )
            if relpath not in known:
                self.results.error(
                    "E023",
                    "file_not_in_manifest",
                    f"{relpath} is on disk but not in the inventory",
                    path=relpath,
                )
                continue
            if relpath not in expected:
                self.results.warning(
                    "W000",
                    "no_fixity_digest",
                    f"{relpath} has no {algorithm} digest in the fixity block",
                    path=relpath,
                )
                continue
            if not can_digest:
                continue
            try:
                actual = file_digest(path, algorithm, chunk_size=self._config.chunk_size)
            except OSError as exc:
                self.results.error(
                    "E092",
                    "unreadable_file",
                    f"{relpath} cannot be read: {exc.strerror or exc}",
                    path=relpath,
                )
                continue
            if actual != expected[relpath].lower():
                self.results.error(
                    "E092",
                    "checksum_mismatch",
                    f"{relpath} {algorithm} digest {actual} does not match inventory "
                    f"digest {expected[relpath]}",
                    path=relpath,
                )
                continue
            verified += 1

        present = set(on_disk)
        for relpath in known:
            if relpath not in present:
                self.results.error(
                    "E092",
                    "missing_file",
                    f"{relpath} is in the inventory but missing on disk",
                    path=relpath,
                )

        if self.results.error_count == errors_before:
            self.results.ok(
                "verify_checksums",
                f"All {verified} content files match their {algorithm} digests.",
            )
        return self.results
