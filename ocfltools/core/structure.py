"""Structural validation of an OCFL object root.

Checks layout only, never file content:
- Version directory naming is inferred from the first version directory
- Required root files (inventory, sidecar, NAMASTE declaration) exist
- Version directories form the contiguous sequence v1..vN
- Each version directory holds exactly its content directory plus an
  optional inventory and sidecar

All problems are recorded in a ValidationResults; the run always completes.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from ocfltools.config import OcflConfig
from ocfltools.core.errors import FormatInferenceError
from ocfltools.core.inventory_io import INVENTORY_FILENAME, sidecar_filename, sniff_field
from ocfltools.core.results import ValidationResults
from ocfltools.core.walk import list_entries
from ocfltools.models.versioning import VERSION_TOKEN_RE, VersionFormat

logger = logging.getLogger(__name__)

LOGS_DIRECTORY = "logs"


class StructuralValidator:
    """Certifies the physical layout of one object root.

    Parameters
    ----------
    object_root:
        Path to the OCFL object root directory.
    config:
        Supplies the fallback version format, digest algorithm, content
        directory and OCFL version of the NAMASTE file.
    results:
        Report sink to record into. A new one is created when omitted.
    cancel_event:
        Checked before every directory listing.
    """

    def __init__(
        self,
        object_root: Path,
        *,
        config: OcflConfig | None = None,
        results: ValidationResults | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self.object_root = Path(object_root)
        self._config = config or OcflConfig()
        self.results = results if results is not None else ValidationResults()
        self._cancel = cancel_event
        self.version_format: VersionFormat | None = None
        self._sniffed: tuple[str, str] | None = None

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def infer_version_format(self) -> VersionFormat:
        """Deduce the format from the lexically first ``v<digits>`` directory.

        Raises FormatInferenceError when there is none or it is not version 1.
        """
        _, dirs = list_entries(self.object_root, self._cancel)
        candidates = sorted(d for d in dirs if VERSION_TOKEN_RE.match(d))
        if not candidates:
            raise FormatInferenceError(
                f"{self.object_root} contains no version directories"
            )
        return VersionFormat.from_first_version(candidates[0])

    def resolve_version_format(self) -> VersionFormat:
        """Infer the format, falling back to the configured default.

        Only an unusable configured default raises.
        """
        if self.version_format is not None:
            return self.version_format
        try:
            self.version_format = self.infer_version_format()
            logger.info(
                "Inferred version format %s for %s",
                self.version_format.template, self.object_root,
            )
        except FormatInferenceError as exc:
            self.results.error("E008", "version_format", f"OCFL no appropriate version formats: {exc}")
            self.version_format = VersionFormat.from_template(self._config.version_format)
            self.results.warning(
                "W000",
                "version_format",
                f"Falling back to default version format {self.version_format.template}",
            )
        return self.version_format

    def sniff_inventory(self) -> tuple[str, str]:
        """Return (digest algorithm, content directory) from the root inventory.

        The values come from a text scan, so a malformed inventory still
        yields a best-effort answer. Missing values fall back to config.
        """
        if self._sniffed is not None:
            return self._sniffed
        text = ""
        inventory = self.object_root / INVENTORY_FILENAME
        if inventory.is_file():
            text = inventory.read_text(encoding="utf-8", errors="replace")

        algorithm = sniff_field(text, "digestAlgorithm")
        if algorithm is None:
            algorithm = self._config.digest_algorithm
            self.results.warning(
                "W000",
                "digest_algorithm",
                f"Unable to find digestAlgorithm in {INVENTORY_FILENAME}; assuming {algorithm}",
            )
        content_directory = sniff_field(text, "contentDirectory") or self._config.content_directory
        self._sniffed = (algorithm, content_directory)
        return self._sniffed

    def version_directories(self) -> list[str]:
        """Root directories spelled in the object's version format, by number."""
        version_format = self.resolve_version_format()
        _, dirs = list_entries(self.object_root, self._cancel)
        return sorted(
            (d for d in dirs if version_format.matches(d)),
            key=version_format.parse,
        )

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    def verify_structure(self) -> ValidationResults:
        """Run every structural check and return the shared results."""
        errors_before = self.results.error_count

        version_format = self.resolve_version_format()
        algorithm, content_directory = self.sniff_inventory()
        files, dirs = list_entries(self.object_root, self._cancel)

        self._check_root_files(files, algorithm)
        version_dirs = self._check_root_directories(dirs, version_format)
        for name in version_dirs:
            self._check_version_directory(name, algorithm, content_directory)

        if self.results.error_count == errors_before:
            self.results.ok(
                "verify_structure",
                f"OCFL object root {self.object_root} passed structural validation.",
            )
        return self.results

    def _check_root_files(self, files: list[str], algorithm: str) -> None:
        required = {
            INVENTORY_FILENAME: ("E034", "OCFL object root must contain an inventory file"),
            sidecar_filename(algorithm): ("E058", "Inventory file must have a digest sidecar"),
            self._config.namaste_filename: ("E003", "OCFL object root must contain a NAMASTE declaration"),
        }
        for name, (code, message) in required.items():
            if name not in files:
                self.results.error(code, "root_files", f"{message}: {name} not found", path=name)
        for name in files:
            if name not in required:
                self.results.error(
                    "E001", "root_files", f"Unexpected file in object root: {name}", path=name
                )

    def _check_root_directories(
        self, dirs: list[str], version_format: VersionFormat
    ) -> list[str]:
        found: dict[int, str] = {}
        for name in dirs:
            if name == LOGS_DIRECTORY:
                self.results.warning(
                    "W000", "root_directories", "OCFL object root contains a logs directory", path=name
                )
            elif version_format.matches(name):
                found[version_format.parse(name)] = name
            else:
                self.results.error(
                    "E001",
                    "root_directories",
                    f"Directory {name} does not match version format {version_format.template}",
                    path=name,
                )

        if not found:
            self.results.error(
                "E008", "root_directories", "OCFL object root contains no version directories"
            )
            return []

        for number in range(1, max(found) + 1):
            if number not in found:
                expected = version_format.format(number)
                self.results.error(
                    "E010",
                    "root_directories",
                    f"Expected version directory {expected} is missing",
                    path=expected,
                )
        return [found[n] for n in sorted(found)]

    def _check_version_directory(
        self, name: str, algorithm: str, content_directory: str
    ) -> None:
        files, dirs = list_entries(self.object_root / name, self._cancel)

        optional = (INVENTORY_FILENAME, sidecar_filename(algorithm))
        for filename in optional:
            if filename not in files:
                self.results.warning(
                    "W010",
                    "version_directory",
                    f"Version directory {name} has no {filename}",
                    path=f"{name}/{filename}",
                )
        for filename in files:
            if filename not in optional:
                self.results.error(
                    "E015",
                    "version_directory",
                    f"Unexpected file {filename} in version directory {name}",
                    path=f"{name}/{filename}",
                )

        if content_directory not in dirs:
            self.results.error(
                "E016",
                "version_directory",
                f"Version directory {name} has no {content_directory} directory",
                path=f"{name}/{content_directory}",
            )
        for dirname in dirs:
            if dirname != content_directory:
                self.results.error(
                    "E015",
                    "version_directory",
                    f"Unexpected directory {dirname} in version directory {name}",
                    path=f"{name}/{dirname}",
                )
