from typing import Any, Literal

import structlog
from pydantic import model_validator

from ..client import DavClient
from ..outcomes import (
    DestinationConflict,
    InvalidCharacter,
    NoOp,
    OperationOutcome,
    ProtocolFailure,
    Success,
    TransportFailure,
)
from ..paths import PATH_SEPARATOR, resolve_new_path
from ..validation import is_valid_name, is_valid_path
from ..version import version_has_forbidden_chars
from .base import BaseOperation
from .exists import ExistenceCheckOperation

logger = structlog.get_logger("davops.operations.rename")

MOVE_SUCCESS_STATUS_CODES = (201, 204)


def target_path_is_used(client: DavClient, path: str) -> bool:
    """Check if something already exists at `path`.

    A probe that fails in transport counts as "not used": the move is attempted and
    the server refuses it on its own (Overwrite is disabled) if the path is taken.
    """
    outcome = ExistenceCheckOperation(path=path)(client)
    if isinstance(outcome, TransportFailure):
        logger.warning("existence_probe_failed", path=path, error=outcome.details)
    return outcome.success


class RenameOperation(BaseOperation):
    """Rename a remote file or folder in place, without overwriting anything."""
    type: Literal["rename"] = "rename"
    old_name: str
    new_name: str
    is_folder: bool = False
    new_path: str = ""
    """Destination path. Always derived from path and new_name when the operation is built."""
    read_timeout: float | None = 600.0
    connect_timeout: float | None = 5.0

    @model_validator(mode="after")
    def resolve_paths(self) -> "RenameOperation":
        # Frozen model. Derived from the coerced fields, never from raw input.
        object.__setattr__(self, "new_path", resolve_new_path(self.path, self.new_name, self.is_folder))
        return self

    def __call__(self, client: DavClient) -> OperationOutcome:
        strict = version_has_forbidden_chars(client.get_server_version())
        name = self.new_name.rstrip(PATH_SEPARATOR)
        if not (is_valid_name(name, strict) and is_valid_path(self.new_path, strict)):
            return self._resolved(InvalidCharacter(path=self.new_path))

        if name == self.old_name:
            return self._resolved(NoOp())

        if target_path_is_used(client, self.new_path):
            return self._resolved(DestinationConflict(path=self.new_path))

        try:
            response = client.move(
                self.url(client, self.path),
                self.url(client, self.new_path),
                overwrite=False,
                timeout=self.timeout(client),
            )
            body = client.exhaust_response(response)

            if response.status_code in MOVE_SUCCESS_STATUS_CODES:
                outcome = Success()
            else:
                outcome = ProtocolFailure.from_response(response, body)
            return self._resolved(outcome, status_code=response.status_code)

        except Exception as e:
            outcome = TransportFailure.from_exception(e)
            logger.error(
                "rename_failed",
                old_path=self.path,
                new_path=self.new_path,
                outcome=outcome.log_message,
                exc_info=True,
            )
            return outcome

    def _resolved(self, outcome: OperationOutcome, **kwargs: Any) -> OperationOutcome:
        logger.info(
            "rename_resolved",
            old_path=self.path,
            new_path=self.new_path,
            outcome=outcome.log_message,
            **kwargs,
        )
        return outcome
