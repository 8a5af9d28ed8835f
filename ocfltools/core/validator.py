"""One-call validation of an OCFL object root.

Runs the structural pass, then (optionally) the checksum pass, into a
single shared ValidationResults.
"""

from __future__ import annotations

import threading
from pathlib import Path

from ocfltools.config import OcflConfig
from ocfltools.core.checksums import ChecksumValidator
from ocfltools.core.inventory import OcflObject
from ocfltools.core.results import ValidationResults
from ocfltools.core.structure import StructuralValidator


class OcflValidator:
    """Validates the structure and content of one object root.

    Parameters
    ----------
    object_root:
        Path to the OCFL object root directory.
    config:
        Fallback defaults handed to both passes.
    inventory:
        An already parsed inventory for the checksum pass, if the caller
        has one.
    cancel_event:
        Set it from another thread to stop a long validation.
    """

    def __init__(
        self,
        object_root: Path,
        *,
        config: OcflConfig | None = None,
        inventory: OcflObject | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self._config = config or OcflConfig()
        self.results = ValidationResults()
        self.structure = StructuralValidator(
            object_root,
            config=self._config,
            results=self.results,
            cancel_event=cancel_event,
        )
        self.checksums = ChecksumValidator(
            self.structure,
            inventory=inventory,
            config=self._config,
            cancel_event=cancel_event,
        )

    @property
    def object_root(self) -> Path:
        return self.structure.object_root

    @property
    def version_format(self):
        return self.structure.version_format

    def verify_structure(self) -> ValidationResults:
        return self.structure.verify_structure()

    def verify_checksums(self, digest: str | None = None) -> ValidationResults:
        return self.checksums.verify_checksums(digest)

    def validate(
        self, *, checksums: bool = True, digest: str | None = None
    ) -> ValidationResults:
        """Validate everything; ``digest`` picks a fixity algorithm for content."""
        self.verify_structure()
        if checksums:
            self.verify_checksums(digest)
        return self.results
