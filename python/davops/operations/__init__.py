from typing import Annotated

from pydantic import Field, TypeAdapter

from ..client import DavClient
from ..outcomes import OperationOutcome
from .exists import ExistenceCheckOperation
from .rename import RenameOperation, target_path_is_used

RemoteOperation = Annotated[
    ExistenceCheckOperation | RenameOperation,
    Field(discriminator="type"),
]
operation_adapter = TypeAdapter(RemoteOperation)


def execute(operation: ExistenceCheckOperation | RenameOperation, client: DavClient) -> OperationOutcome:
    """Run a single operation against the server behind `client`."""
    return operation(client)
