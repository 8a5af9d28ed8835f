"""Validation finding models: the entries of a validation report."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Severity(str, Enum):
    """Three-tier verdict of a single check."""

    ERROR = "error"
    WARNING = "warning"
    OK = "ok"


class Finding(BaseModel):
    """A single validation result.

    ``code`` is an OCFL validation code such as ``E034`` for errors and
    warnings; pass records carry an empty code.
    """

    model_config = ConfigDict(frozen=True)

    severity: Severity
    check: str  # e.g. "verify_structure", "checksum_mismatch"
    message: str
    code: str = ""
    path: str = ""  # object-relative path the finding is about, if any
