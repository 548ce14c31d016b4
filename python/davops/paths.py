"""Remote path helpers.

Remote paths are slash-separated and always relative to the WebDAV root of the
server (e.g. `/docs/report.txt`). Folder paths carry a trailing separator.
"""
from urllib.parse import quote

from .errors import MalformedPathError

PATH_SEPARATOR = "/"


def parent_path(path: str) -> str:
    """Return the parent of a remote path, always ending with exactly one separator.

    A trailing separator on `path` is ignored, so the parent of `/docs/archive/` is `/docs/`.
    Raises MalformedPathError when the path has no parent (empty, root or a bare name).
    """
    stripped = path.rstrip(PATH_SEPARATOR)
    if not stripped or PATH_SEPARATOR not in stripped:
        raise MalformedPathError(f"Cannot derive parent of remote path: {path!r}")

    parent = stripped.rsplit(PATH_SEPARATOR, 1)[0].rstrip(PATH_SEPARATOR)
    return parent + PATH_SEPARATOR


def resolve_new_path(old_path: str, new_name: str, is_folder: bool) -> str:
    """Derive the remote path an entry ends up at after being renamed to `new_name`.

    Folder paths always end with the separator and file paths never do, regardless of
    trailing separators in `new_name`.
    """
    name = new_name.rstrip(PATH_SEPARATOR)
    if not name:
        raise MalformedPathError(f"Invalid new name: {new_name!r}")

    new_path = parent_path(old_path) + name
    if is_folder:
        new_path += PATH_SEPARATOR
    return new_path


def encode_path(path: str) -> str:
    """Percent-encode every segment of a remote path, keeping the separators."""
    if not path.startswith(PATH_SEPARATOR):
        path = PATH_SEPARATOR + path
    return quote(path, safe=PATH_SEPARATOR)
