from .paths import PATH_SEPARATOR

# Rejected by every server: a foreign path separator and NUL.
BASELINE_FORBIDDEN_CHARS = frozenset("\\\x00")

# Additionally rejected by servers that enforce the extended forbidden-character set.
EXTENDED_FORBIDDEN_CHARS = frozenset('<>:"|?*') | frozenset(chr(c) for c in range(0x01, 0x20)) | {"\x7f"}


def forbidden_chars(version_has_forbidden_chars: bool) -> frozenset[str]:
    """Return the characters a remote path may not contain under the given policy."""
    if version_has_forbidden_chars:
        return BASELINE_FORBIDDEN_CHARS | EXTENDED_FORBIDDEN_CHARS
    return BASELINE_FORBIDDEN_CHARS


def is_valid_path(path: str, version_has_forbidden_chars: bool) -> bool:
    """Check a full remote path against the forbidden-character policy of the server."""
    forbidden = forbidden_chars(version_has_forbidden_chars)
    return not any(c in forbidden for c in path)


def is_valid_name(name: str, version_has_forbidden_chars: bool) -> bool:
    """Check a single path segment. Unlike a path, a name may not contain the separator."""
    if PATH_SEPARATOR in name:
        return False
    return is_valid_path(name, version_has_forbidden_chars)
