"""
Error hierarchy for dialect resolution and SQL generation.
"""

from __future__ import annotations

from typing import Dict, List, Mapping


class DialectError(RuntimeError):
    """Base error for dialect-related failures."""


class DialectConfigurationError(DialectError):
    """Raised when a configured dialect or an environment setting is invalid."""


class UnsupportedDialectError(DialectError):
    """Raised when no registered dialect accepts a connection identity."""

    def __init__(self, product_name: str, product_version: str) -> None:
        self.product_name = product_name
        self.product_version = product_version
        super().__init__(
            f"No registered dialect supports {product_name!r} (version {product_version!r})"
        )


class DialectConnectionError(DialectError):
    """Raised when a metadata probe against a live connection fails."""


class SchemaMismatchError(DialectError):
    """Raised when inline rows or column descriptions disagree with their schema."""


class LiteralFormatError(DialectError):
    """Raised when a value cannot be rendered as a literal of the requested type."""


class CapabilityValidationError(DialectError):
    """
    Aggregated validation error storing flag-to-messages mapping.

    Raised while building a registry, before any descriptor is handed out.
    """

    def __init__(self, errors: Mapping[str, List[str]], *, dialect: str | None = None) -> None:
        self.dialect = dialect
        self.errors: Dict[str, List[str]] = {
            key: list(messages) for key, messages in errors.items()
        }
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        segments = []
        for flag, messages in self.errors.items():
            prefix = flag if flag != "__all__" else "chain"
            segments.append(f"{prefix}: {'; '.join(messages)}")
        message = "; ".join(segments)
        if self.dialect:
            return f"Invalid dialect {self.dialect!r}: {message}"
        return message
