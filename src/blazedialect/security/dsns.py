"""DSN parsing and redaction utilities for dialect configuration strings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import parse_qsl, urlencode, urlparse

from .redaction import redact_query_params


@dataclass
class DSNConfig:
    """
    Parsed ``scheme://[user[:password]@]name[:port][/path]?key=value`` string.

    Repeated query keys are joined with commas so ``products=a&products=b``
    reads the same as ``products=a,b``.
    """

    scheme: str
    username: Optional[str]
    password: Optional[str]
    host: Optional[str]
    port: Optional[int]
    path: str
    query: dict[str, str] = field(default_factory=dict)

    @property
    def database(self) -> Optional[str]:
        return self.path.lstrip("/") or None

    def redacted(self) -> str:
        """
        Return the DSN with credentials redacted but structure preserved.
        """

        netloc = ""
        if self.username:
            netloc += self.username
            if self.password:
                netloc += ":***"
            netloc += "@"
        if self.host:
            netloc += self.host
        if self.port:
            netloc += f":{self.port}"

        query_string = urlencode(redact_query_params(self.query)) if self.query else ""

        # Keep the double slash even when netloc is empty
        result = f"{self.scheme}://{netloc}{self.path or ''}"
        if query_string:
            result += f"?{query_string}"
        return result


def parse_dsn(dsn: str) -> DSNConfig:
    parsed = urlparse(dsn)
    query: dict[str, str] = {}
    for key, value in parse_qsl(parsed.query, keep_blank_values=True):
        if key in query and value:
            query[key] = f"{query[key]},{value}"
        else:
            query[key] = value
    return DSNConfig(
        scheme=parsed.scheme,
        username=parsed.username,
        password=parsed.password,
        host=parsed.hostname,
        port=parsed.port,
        path=parsed.path or "",
        query=query,
    )
