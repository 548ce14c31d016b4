import re
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

_VERSION_RE = re.compile(r"^\s*(\d+(?:\.\d+)*)")

# Servers before this release reject the extended forbidden-character set in names.
MINIMUM_VERSION_WITHOUT_FORBIDDEN_CHARS = (8, 1)


class ServerVersion(BaseModel):
    """Version of the connected server, as reported by its status endpoint."""

    model_config = ConfigDict(frozen=True)

    version: str
    """Raw version string, e.g. "10.13.4.2"."""
    product: str | None = None
    """Product name reported next to the version, when any."""

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        if not _VERSION_RE.match(v):
            raise ValueError(f"Invalid server version: {v!r}")
        return v.strip()

    @property
    def parts(self) -> tuple[int, ...]:
        """Numeric components of the version. Suffixes such as "beta" are ignored."""
        match = _VERSION_RE.match(self.version)
        return tuple(int(p) for p in match.group(1).split("."))  # type: ignore[union-attr]

    @property
    def has_forbidden_characters(self) -> bool:
        """Whether this server enforces the extended forbidden-character set."""
        return self.parts < MINIMUM_VERSION_WITHOUT_FORBIDDEN_CHARS

    @classmethod
    def from_status(cls, status: dict[str, Any]) -> "ServerVersion | None":
        """Build from the JSON document returned by the server's status.php."""
        version = status.get("version") or status.get("versionstring")
        if not version:
            return None
        return cls(version=str(version), product=status.get("productname"))


def version_has_forbidden_chars(version: ServerVersion | None) -> bool:
    """Select the validation policy for a server.

    An unknown version is treated as enforcing the extended set.
    """
    if version is None:
        return True
    return version.has_forbidden_characters
