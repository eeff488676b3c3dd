"""Configuration of the web API adapter."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class WebApiConfig:
    """Web API configuration.

    Attributes:
        host: Host name of the API server.
        port: TCP port; ``None`` keeps the scheme's default port.
        scheme: ``http`` or ``https``.
        path: Path prefix of every endpoint.
        timeout: Request timeout in seconds.
        plurals: Explicit plural endpoint names, by table name.
    """

    host: str = "localhost"
    port: int | None = None
    scheme: str = "http"
    path: str = "/api"
    timeout: float = 10.0
    plurals: dict[str, str] = field(default_factory=dict)

    @property
    def base_url(self) -> str:
        netloc = self.host if self.port is None else f"{self.host}:{self.port}"
        path = "/" + self.path.strip("/") if self.path.strip("/") else ""
        return f"{self.scheme}://{netloc}{path}"

    def plural(self, table: str) -> str:
        """Endpoint name of the multi-record operations on ``table``."""
        if table in self.plurals:
            return self.plurals[table]
        if table.endswith(("s", "x", "z", "ch", "sh")):
            return f"{table}es"
        if table.endswith("y") and table[-2:-1] not in ("", *"aeiou"):
            return f"{table[:-1]}ies"
        return f"{table}s"
