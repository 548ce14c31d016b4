# ruff: noqa: F401
from .client import DavClient
from .config import DavAuth, DavAuthType, DavClientConfig, resolve_client_config
from .operations import ExistenceCheckOperation, RenameOperation, execute, operation_adapter
from .outcomes import (
    DestinationConflict,
    InvalidCharacter,
    NoOp,
    OperationOutcome,
    ProtocolFailure,
    Success,
    TransportFailure,
)

__version__ = "0.1.0"
