from abc import ABC, abstractmethod

import httpx
from pydantic import BaseModel, ConfigDict, field_validator

from ..client import DavClient
from ..outcomes import OperationOutcome
from ..paths import encode_path


class BaseOperation(BaseModel, ABC):
    """Base class for all remote operations.

    Operations are immutable and stateless: each call performs a single attempt
    against the server through the client it is given.
    """
    model_config = ConfigDict(frozen=True)

    type: str
    path: str
    read_timeout: float | None = None
    """Read timeout for this operation's requests. Falls back to the client's."""
    connect_timeout: float | None = None
    """Connection timeout for this operation's requests. Falls back to the client's."""

    @field_validator('path')
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Validate that the remote path is usable."""
        if not v:
            raise ValueError("Remote path cannot be empty")
        return v

    def timeout(self, client: DavClient) -> httpx.Timeout | None:
        """Timeouts to pass to the transport, or None to use the client defaults."""
        if self.read_timeout is None and self.connect_timeout is None:
            return None
        read = self.read_timeout if self.read_timeout is not None else client.config.read_timeout
        connect = self.connect_timeout if self.connect_timeout is not None else client.config.connect_timeout
        return httpx.Timeout(read, connect=connect)

    @staticmethod
    def url(client: DavClient, path: str) -> str:
        """Absolute URL of a remote path."""
        return client.webdav_url + encode_path(path)

    @abstractmethod
    def __call__(self, client: DavClient) -> OperationOutcome:
        """Execute the operation against the server behind `client`."""
        pass
