import os
from enum import Enum

import structlog
from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, SecretStr

from .errors import ConfigError

logger = structlog.get_logger("davops.config")


class DavAuthType(str, Enum):
    BASIC = "basic"
    BEARER = "bearer"


class DavAuth(BaseModel):
    """Credentials sent with every request to the server.
    At the moment, supports basic auth and bearer tokens.
    """

    type: DavAuthType = DavAuthType.BASIC
    """Type of authentication to use."""
    username: str | None = None
    """User name for basic auth. Ignored for bearer tokens."""
    token: SecretStr
    """Password for basic auth, or the bearer token."""

    @property
    def headers(self) -> dict[str, str]:
        """Headers to add to requests. Basic auth is handled by httpx instead."""
        if self.type == DavAuthType.BEARER:
            return {"Authorization": f"Bearer {self.token.get_secret_value()}"}
        return {}


class DavClientConfig(BaseModel):
    """Everything needed to reach a WebDAV server."""

    base_url: str
    """Server root, e.g. "https://cloud.example.com"."""
    webdav_path: str = "/remote.php/webdav"
    """WebDAV endpoint relative to the base url."""
    auth: DavAuth | None = None
    """Authentication configuration. Anonymous when unset."""
    read_timeout: float = 600.0
    """Default read timeout in seconds."""
    connect_timeout: float = 5.0
    """Default connection timeout in seconds."""
    verify: bool = True
    """Whether to verify TLS certificates."""
    user_agent: str = "davops"
    server_version: str | None = None
    """Known server version. Skips the status.php lookup when set."""

    @property
    def webdav_url(self) -> str:
        return self.base_url.rstrip("/") + "/" + self.webdav_path.strip("/")


def _env_float(name: str) -> float | None:
    value = os.getenv(name)
    if not value:
        return None
    try:
        return float(value)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {value!r}") from e


def resolve_client_config(config: DavClientConfig | None = None) -> DavClientConfig:
    """Resolve the client configuration.

    An explicit config is returned as is. Otherwise the configuration is built from
    environment variables (a .env file in the working directory is loaded first):
    DAVOPS_BASE_URL, DAVOPS_WEBDAV_PATH, DAVOPS_USERNAME, DAVOPS_PASSWORD or
    DAVOPS_TOKEN, DAVOPS_SERVER_VERSION, DAVOPS_READ_TIMEOUT and
    DAVOPS_CONNECT_TIMEOUT.
    """
    if config is not None:
        return config

    load_dotenv(find_dotenv(usecwd=True))

    base_url = os.getenv("DAVOPS_BASE_URL")
    if not base_url:
        raise ConfigError("No base url configured. Set the DAVOPS_BASE_URL environment variable.")

    kwargs = {"base_url": base_url}

    webdav_path = os.getenv("DAVOPS_WEBDAV_PATH")
    if webdav_path:
        kwargs["webdav_path"] = webdav_path

    server_version = os.getenv("DAVOPS_SERVER_VERSION")
    if server_version:
        kwargs["server_version"] = server_version

    for field, env_name in (("read_timeout", "DAVOPS_READ_TIMEOUT"), ("connect_timeout", "DAVOPS_CONNECT_TIMEOUT")):
        value = _env_float(env_name)
        if value is not None:
            kwargs[field] = value

    username = os.getenv("DAVOPS_USERNAME")
    password = os.getenv("DAVOPS_PASSWORD")
    token = os.getenv("DAVOPS_TOKEN")
    if username and password:
        kwargs["auth"] = DavAuth(type=DavAuthType.BASIC, username=username, token=password)
    elif token:
        kwargs["auth"] = DavAuth(type=DavAuthType.BEARER, token=token)
    else:
        logger.debug("no_credentials_configured", base_url=base_url)

    return DavClientConfig(**kwargs)
