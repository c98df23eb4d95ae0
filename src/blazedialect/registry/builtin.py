"""
Built-in dialect entries, most specific first.

Order matters: a derived product is registered ahead of the product whose name
it also reports (MariaDB before MySQL, Impala before Hive).
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Iterable

from ..dialects import analytic, enterprise, hadoop, mysql, postgres, sqlite
from .base import DialectRegistry, FactoryEntry
from .predicates import all_of, any_of, named, product_contains, tagged, version_contains


def builtin_entries() -> list[FactoryEntry]:
    entry = FactoryEntry.for_chain
    return [
        entry("infobright", mysql.INFOBRIGHT_CHAIN, named("infobright")),
        entry(
            "mariadb",
            mysql.MARIADB_CHAIN,
            any_of(named("mariadb"), all_of(product_contains("mysql"), version_contains("mariadb"))),
        ),
        entry("mysql", mysql.MYSQL_CHAIN, named("mysql")),
        entry("greenplum", postgres.GREENPLUM_CHAIN, named("greenplum")),
        entry("netezza", postgres.NETEZZA_CHAIN, named("netezza")),
        entry("redshift", postgres.REDSHIFT_CHAIN, named("redshift")),
        entry("postgres", postgres.POSTGRES_CHAIN, named("postgresql", "postgres")),
        entry("sqlstream", analytic.SQLSTREAM_CHAIN, named("sqlstream")),
        entry("luciddb", analytic.LUCIDDB_CHAIN, named("luciddb")),
        entry("impala", hadoop.IMPALA_CHAIN, named("impala")),
        entry("hive", hadoop.HIVE_CHAIN, named("hive")),
        entry(
            "vectorwise",
            enterprise.VECTORWISE_CHAIN,
            any_of(named("vectorwise"), all_of(product_contains("ingres"), version_contains("vw"))),
        ),
        entry("ingres", enterprise.INGRES_CHAIN, named("ingres")),
        entry("db2_old_as400", enterprise.DB2_OLD_AS400_CHAIN, tagged("db2_old_as400")),
        entry("db2", enterprise.DB2_CHAIN, named("db2")),
        entry("derby", sqlite.DERBY_CHAIN, named("derby")),
        entry("h2", sqlite.H2_CHAIN, tagged("h2")),
        entry("hsqldb", sqlite.HSQLDB_CHAIN, named("hsql")),
        entry("sqlite", sqlite.SQLITE_CHAIN, named("sqlite")),
        entry("oracle", enterprise.ORACLE_CHAIN, named("oracle")),
        entry("mssql", enterprise.MSSQL_CHAIN, named("mssql", "microsoft sql server")),
        entry("sybase", enterprise.SYBASE_CHAIN, named("sybase", "adaptive server")),
        entry("informix", enterprise.INFORMIX_CHAIN, named("informix")),
        entry("teradata", analytic.TERADATA_CHAIN, named("teradata")),
        entry("vertica", analytic.VERTICA_CHAIN, named("vertica")),
        entry("monetdb", analytic.MONETDB_CHAIN, named("monetdb")),
        entry("snowflake", analytic.SNOWFLAKE_CHAIN, named("snowflake")),
        entry("googlebigquery", analytic.BIGQUERY_CHAIN, named("googlebigquery", "bigquery")),
        entry("clickhouse", analytic.CLICKHOUSE_CHAIN, named("clickhouse")),
        entry("access", enterprise.ACCESS_CHAIN, named("access")),
        entry("interbase", enterprise.INTERBASE_CHAIN, named("interbase")),
        entry("neoview", enterprise.NEOVIEW_CHAIN, named("neoview")),
        entry("nuodb", enterprise.NUODB_CHAIN, named("nuodb")),
        entry("pdi", analytic.PDI_CHAIN, tagged("pdi", "pentaho data integration")),
        entry("opensearch", enterprise.OPENSEARCH_CHAIN, named("opensearch")),
    ]


def build_registry(configs: Iterable[Any] = ()) -> DialectRegistry:
    """
    Frozen registry with configured dialects registered ahead of the built-ins.

    ``configs`` are ``DialectConfig`` objects (anything with ``to_entry()``).
    """

    registry = DialectRegistry()
    for config in configs:
        registry.register(config.to_entry())
    for builtin in builtin_entries():
        registry.register(builtin)
    return registry.freeze()


@lru_cache(maxsize=1)
def default_registry() -> DialectRegistry:
    """Process-wide frozen registry of the built-in dialects."""
    return build_registry()
