"""Version-token format model: object-wide naming of version directories."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field

from ocfltools.core.errors import FormatInferenceError

_TEMPLATE_RE = re.compile(r"^v%(?:0(?P<width>[2-9]|[1-9]\d+))?d$")
VERSION_TOKEN_RE = re.compile(r"^v\d+$")


class VersionFormat(BaseModel):
    """How version numbers are spelled on disk and in the inventory.

    ``padding == 0`` is the unpadded form (``v1``, ``v2``, ...). Any other
    value is the zero-padded width of the digits (``v0001`` has padding 4).
    """

    model_config = ConfigDict(frozen=True)

    padding: int = Field(default=0, ge=0)

    @property
    def template(self) -> str:
        """printf-style template, e.g. ``v%d`` or ``v%04d``."""
        if self.padding:
            return f"v%0{self.padding}d"
        return "v%d"

    @property
    def max_version(self) -> int | None:
        """Highest number the format can spell, or None when unpadded."""
        if self.padding:
            return 10 ** self.padding - 1
        return None

    def format(self, number: int) -> str:
        if number < 1:
            raise ValueError(f"Version numbers start at 1, got {number}")
        return self.template % number

    def matches(self, token: str) -> bool:
        """Whether ``token`` is a version name spelled in this format."""
        if not VERSION_TOKEN_RE.match(token):
            return False
        digits = token[1:]
        if self.padding:
            return len(digits) == self.padding and int(digits) > 0
        return not digits.startswith("0")

    def parse(self, token: str) -> int:
        if not self.matches(token):
            raise ValueError(f"'{token}' is not a {self.template} version token")
        return int(token[1:])

    @classmethod
    def from_template(cls, template: str) -> VersionFormat:
        """Build a format from a printf template such as ``v%04d``."""
        match = _TEMPLATE_RE.match(template)
        if match is None:
            raise FormatInferenceError(
                f"'{template}' is not a usable version format template"
            )
        width = match.group("width")
        return cls(padding=int(width) if width else 0)

    @classmethod
    def from_first_version(cls, token: str) -> VersionFormat:
        """Infer the format from the name of the first version directory.

        One digit means unpadded; *n* digits means zero-padded to width *n*.
        The token has to spell version 1 either way.
        """
        if not VERSION_TOKEN_RE.match(token):
            raise FormatInferenceError(f"'{token}' is not a version directory name")
        digits = token[1:]
        if int(digits) != 1:
            raise FormatInferenceError(f"'{token}' is not the first version directory")
        if len(digits) == 1:
            return cls(padding=0)
        return cls(padding=len(digits))
