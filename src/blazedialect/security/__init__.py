"""Security helpers for blazedialect."""

from .dsns import DSNConfig, parse_dsn
from .redaction import redact_metadata, redact_value

__all__ = ["DSNConfig", "parse_dsn", "redact_metadata", "redact_value"]
