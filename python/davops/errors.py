class DavOpsError(Exception):
    """Base class for all davops errors."""

class ConfigError(DavOpsError):
    """Error raised when the client configuration cannot be resolved."""

class MalformedPathError(DavOpsError, ValueError):
    """Error raised when a remote path has no derivable parent or name."""
