import httpx
import structlog

from .config import DavAuthType, DavClientConfig, resolve_client_config
from .version import ServerVersion

logger = structlog.get_logger("davops.client")

_PROPFIND_BODY = (
    b'<?xml version="1.0" encoding="utf-8"?>'
    b'<d:propfind xmlns:d="DAV:"><d:prop><d:resourcetype/></d:prop></d:propfind>'
)


class DavClient:
    """Authenticated WebDAV transport shared by remote operations.

    Operations use the client but never own it: retries, pooling and session
    handling live here or in the underlying httpx client.
    """

    def __init__(
        self,
        config: DavClientConfig | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.config = resolve_client_config(config)

        headers = {"User-Agent": self.config.user_agent}
        auth = None
        if self.config.auth is not None:
            if self.config.auth.type == DavAuthType.BASIC:
                auth = httpx.BasicAuth(
                    self.config.auth.username or "",
                    self.config.auth.token.get_secret_value(),
                )
            headers.update(self.config.auth.headers)

        self._http = httpx.Client(
            auth=auth,
            headers=headers,
            timeout=httpx.Timeout(self.config.read_timeout, connect=self.config.connect_timeout),
            verify=self.config.verify,
            transport=transport,
        )
        self._server_version: ServerVersion | None = None
        if self.config.server_version:
            self._server_version = ServerVersion(version=self.config.server_version)

    def __enter__(self) -> "DavClient":
        self.connect()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    @property
    def base_url(self) -> str:
        return self.config.base_url.rstrip("/")

    @property
    def webdav_url(self) -> str:
        return self.config.webdav_url

    def connect(self) -> ServerVersion | None:
        """Set up the session: ask status.php which version the server runs.

        Skipped when the version is configured or already known. Operations only
        read the result through get_server_version and never trigger the lookup.
        """
        if self._server_version is not None:
            return self._server_version

        try:
            res = self._http.get(f"{self.base_url}/status.php")
            res.raise_for_status()
            self._server_version = ServerVersion.from_status(res.json())
        except Exception as e:
            logger.warning("server_version_unavailable", base_url=self.base_url, error=str(e))

        return self._server_version

    def get_server_version(self) -> ServerVersion | None:
        """Version negotiated by connect(), or the configured one. None when unknown."""
        return self._server_version

    def move(
        self,
        source_url: str,
        destination_url: str,
        overwrite: bool = False,
        timeout: httpx.Timeout | None = None,
    ) -> httpx.Response:
        """Send a MOVE request. The response is streamed and must be passed to exhaust_response."""
        headers = {
            "Destination": destination_url,
            "Overwrite": "T" if overwrite else "F",
        }
        request = self._http.build_request(
            "MOVE",
            source_url,
            headers=headers,
            timeout=timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT,
        )
        return self._http.send(request, stream=True)

    def propfind(
        self,
        url: str,
        depth: str = "0",
        timeout: httpx.Timeout | None = None,
    ) -> httpx.Response:
        """Send a PROPFIND request asking only for the resource type."""
        headers = {
            "Depth": depth,
            "Content-Type": "application/xml; charset=utf-8",
        }
        request = self._http.build_request(
            "PROPFIND",
            url,
            headers=headers,
            content=_PROPFIND_BODY,
            timeout=timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT,
        )
        return self._http.send(request, stream=True)

    def exhaust_response(self, response: httpx.Response) -> bytes:
        """Consume and release a streamed response so its connection returns to the pool."""
        try:
            return response.read()
        finally:
            response.close()
