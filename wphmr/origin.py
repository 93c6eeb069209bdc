"""Dev server origin parsing and resolution."""

from typing import Literal
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict

from wphmr.exceptions import InvalidOriginError

DEFAULT_PORTS = {"http": 80, "https": 443}

CLIENT_PATH = "/@vite/client"


class Origin(BaseModel):
    """Scheme, hostname and port of the Vite dev server.

    ``url`` keeps the text the origin was parsed from (minus any trailing
    slash) and is what the browser-facing script tags point at. ``hostname``
    and ``port`` are what the generated PHP connects to.
    """

    model_config = ConfigDict(frozen=True)

    url: str
    scheme: Literal["http", "https"]
    hostname: str
    port: int

    @classmethod
    def parse(cls, url: str) -> "Origin":
        """Parse an absolute http(s) URL, defaulting the port per scheme."""
        try:
            parts = urlsplit(url.strip())
        except ValueError as e:
            raise InvalidOriginError(url, str(e)) from e

        scheme = parts.scheme.lower()
        if scheme not in DEFAULT_PORTS:
            raise InvalidOriginError(url, "scheme must be http or https")
        if not parts.hostname:
            raise InvalidOriginError(url, "missing hostname")

        try:
            port = parts.port
        except ValueError as e:
            raise InvalidOriginError(url, "port is not a valid TCP port") from e

        if port is None:
            port = DEFAULT_PORTS[scheme]

        return cls(
            url=url.strip().rstrip("/"),
            scheme=scheme,
            hostname=parts.hostname,
            port=port,
        )

    @property
    def host(self) -> str:
        """Hostname as a socket address literal (IPv6 addresses bracketed)."""
        if ":" in self.hostname:
            return f"[{self.hostname}]"
        return self.hostname

    @property
    def client_url(self) -> str:
        return f"{self.url}{CLIENT_PATH}"

    def __str__(self) -> str:
        return self.url


def origin_for_server(host: str, port: int, https: bool) -> Origin:
    """Build the origin a dev server listening on ``host:port`` is reachable at."""
    protocol = "https" if https else "http"
    return Origin.parse(f"{protocol}://{host}:{port}")
