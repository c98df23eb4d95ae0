"""
Dialect-quoted DDL and DML statements.
"""

from .builder import ColumnDefinition, ForeignKey, IndexColumn, ReferentialAction, StatementBuilder

__all__ = ["ColumnDefinition", "ForeignKey", "IndexColumn", "ReferentialAction", "StatementBuilder"]
