from typing import Literal

import structlog

from ..client import DavClient
from ..outcomes import OperationOutcome, ProtocolFailure, Success, TransportFailure
from .base import BaseOperation

logger = structlog.get_logger("davops.operations.exists")

EXISTS_STATUS_CODES = (200, 207)
ABSENT_STATUS_CODE = 404


class ExistenceCheckOperation(BaseOperation):
    """Check whether a remote path exists with a depth 0 PROPFIND."""
    type: Literal["exists"] = "exists"
    success_if_absent: bool = False
    """Succeed when the path does not exist instead of when it does."""

    def __call__(self, client: DavClient) -> OperationOutcome:
        try:
            response = client.propfind(self.url(client, self.path), depth="0", timeout=self.timeout(client))
            body = client.exhaust_response(response)

            if self.success_if_absent:
                found = response.status_code == ABSENT_STATUS_CODE
            else:
                found = response.status_code in EXISTS_STATUS_CODES

            outcome = Success() if found else ProtocolFailure.from_response(response, body)
            logger.debug(
                "existence_checked",
                path=self.path,
                success_if_absent=self.success_if_absent,
                status_code=response.status_code,
                outcome=outcome.log_message,
            )
            return outcome

        except Exception as e:
            outcome = TransportFailure.from_exception(e)
            logger.error("existence_check_failed", path=self.path, error=outcome.details, exc_info=True)
            return outcome
