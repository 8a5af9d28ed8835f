"""Exception hierarchy for inventory mutation and object validation.

Inventory errors signal caller misuse and are raised synchronously.
Validators collect findings instead of raising; only the errors marked
below can escape a validation run.
"""

from __future__ import annotations


class OcflError(RuntimeError):
    """Base class for every error raised by ocfltools."""


class ImmutableVersionError(OcflError):
    """Raised when a mutation targets a version other than head."""


class AmbiguousStateError(OcflError):
    """Raised when a logical path would map to two digests in one version."""


class NotFoundError(OcflError, KeyError):
    """Raised when a version, file or digest lookup has no match."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep plain messages.
        return str(self.args[0]) if self.args else ""


class VersionSequenceError(OcflError):
    """Raised when materializing a version would leave a gap in 1..head."""


class InventoryStateError(OcflError):
    """Raised when a bulk state replacement does not fit the manifest."""


class InventoryParseError(OcflError):
    """Raised when an inventory document cannot be read or parsed."""


class UnsupportedDigestError(OcflError, ValueError):
    """Raised for a digest algorithm that hashlib cannot provide."""


class FormatInferenceError(OcflError):
    """Raised when no version format can be inferred or configured.

    The structural validator recovers from inference failures by falling
    back to the configured default; it only lets this escape when that
    default is unusable too.
    """


class ValidationCancelledError(OcflError):
    """Raised when a validation run observes its cancel signal."""
