"""ocfltools: build, inspect and validate OCFL (Oxford Common File Layout) objects.

- In-memory inventory with append-only manifest and head-only mutation
- Staged action log for delta reports
- Structural validation with version-format inference
- Checksum cross-validation of content against the manifest
"""

__version__ = "0.1.0"

from ocfltools.core.actions import ActionLog
from ocfltools.core.inventory import OcflObject
from ocfltools.core.validator import OcflValidator
from ocfltools.cli.app import app as cli

__all__ = ["ActionLog", "OcflObject", "OcflValidator", "cli", "__version__"]
