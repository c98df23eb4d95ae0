import pytest

from blazedialect.dialects import (
    CapabilityValidationError,
    ConnectionIdentity,
    DialectDescriptor,
    DialectError,
    DialectOverlay,
    GENERIC_CHAIN,
    QuoteStyle,
    compose,
)
from blazedialect.dialects.analytic import SQLSTREAM_CHAIN
from blazedialect.dialects.mysql import MYSQL_CHAIN
from blazedialect.dialects.postgres import NETEZZA_CHAIN


def test_root_defaults_are_standard_sql():
    caps = GENERIC_CHAIN.capabilities()
    assert caps.allows_as is True
    assert caps.allows_multiple_distinct_sql_measures is True
    assert caps.supports_values_list is False
    assert caps.quote_style is QuoteStyle.DOUBLE
    assert GENERIC_CHAIN.source_of("allows_as") == "generic"


def test_nearest_overlay_wins_and_reports_source():
    assert SQLSTREAM_CHAIN.names == ("generic", "luciddb", "sqlstream")
    assert SQLSTREAM_CHAIN.flag("allows_multiple_distinct_sql_measures") is False
    assert SQLSTREAM_CHAIN.source_of("allows_multiple_distinct_sql_measures") == "luciddb"
    assert GENERIC_CHAIN.flag("allows_multiple_distinct_sql_measures") is True


def test_child_overlay_overrides_parent():
    assert NETEZZA_CHAIN.flag("supports_values_list") is False
    assert NETEZZA_CHAIN.source_of("supports_values_list") == "netezza"
    # inherited from the postgres overlay
    assert NETEZZA_CHAIN.flag("requires_alias_for_from_query") is True
    assert NETEZZA_CHAIN.source_of("requires_alias_for_from_query") == "postgres"


def test_compose_appends_overlay():
    overlay = DialectOverlay(name="custom", flags={"allows_as": False})
    chain = compose(MYSQL_CHAIN, overlay)
    assert chain.names == ("generic", "mysql", "custom")
    assert chain.flag("allows_as") is False
    assert MYSQL_CHAIN.flag("allows_as") is True


def test_unknown_flag_lookup_raises():
    with pytest.raises(DialectError):
        GENERIC_CHAIN.flag("supports_time_travel")


def test_hook_lookup_is_nearest_first():
    assert MYSQL_CHAIN.hook_source("quote_string_literal") == "mysql"
    assert MYSQL_CHAIN.hook_source("wrap_upper") == "generic"
    with pytest.raises(DialectError):
        MYSQL_CHAIN.hook("no_such_hook")


def test_contradictory_flags_fail_validation():
    overlay = DialectOverlay(
        name="broken",
        flags={"allows_count_distinct": False, "allows_multiple_count_distinct": True},
    )
    with pytest.raises(CapabilityValidationError) as exc:
        GENERIC_CHAIN.extend(overlay).validate()
    assert "allows_multiple_count_distinct" in exc.value.errors
    assert exc.value.dialect == "broken"


def test_alias_requirement_needs_from_query():
    overlay = DialectOverlay(
        name="broken",
        flags={"allows_from_query": False, "requires_alias_for_from_query": True},
    )
    with pytest.raises(CapabilityValidationError) as exc:
        GENERIC_CHAIN.extend(overlay).validate()
    assert "requires_alias_for_from_query" in exc.value.errors


def test_version_flag_conflict_fails_static_validation():
    overlay = DialectOverlay(name="nofrom", flags={"allows_from_query": False})
    with pytest.raises(CapabilityValidationError) as exc:
        MYSQL_CHAIN.extend(overlay).validate()
    [message] = exc.value.errors["requires_alias_for_from_query"]
    assert "'mysql' and 'nofrom'" in message


def test_validation_aggregates_every_problem():
    overlay = DialectOverlay(
        name="broken",
        flags={"supports_time_travel": True, "max_column_name_length": "long"},
        hooks={"quote_everything": lambda dialect, value: value},
    )
    with pytest.raises(CapabilityValidationError) as exc:
        GENERIC_CHAIN.extend(overlay).validate()
    errors = exc.value.errors
    assert "supports_time_travel" in errors
    assert "max_column_name_length" in errors
    assert "hook:quote_everything" in errors


def test_boolean_is_not_accepted_for_integer_flag():
    overlay = DialectOverlay(name="broken", flags={"max_column_name_length": True})
    with pytest.raises(CapabilityValidationError) as exc:
        GENERIC_CHAIN.extend(overlay).validate()
    assert "got bool" in exc.value.errors["max_column_name_length"][0]


def test_duplicate_overlay_names_fail_validation():
    overlay = DialectOverlay(name="twice")
    with pytest.raises(CapabilityValidationError) as exc:
        GENERIC_CHAIN.extend(overlay, overlay).validate()
    assert "__all__" in exc.value.errors
    assert str(exc.value).startswith("Invalid dialect 'twice': chain:")


def test_version_flags_are_folded_on_specialize():
    old = DialectDescriptor.create("mysql", MYSQL_CHAIN, ConnectionIdentity("MySQL", "3.23.58"))
    new = DialectDescriptor.create("mysql", MYSQL_CHAIN, ConnectionIdentity("MySQL", "8.0.33"))
    assert old.capabilities.allows_from_query is False
    assert old.capabilities.requires_alias_for_from_query is False
    assert new.capabilities.allows_from_query is True
    assert new.capabilities.supports_percentile_cont is True


def test_unknown_version_is_treated_as_current():
    descriptor = DialectDescriptor.create("mysql", MYSQL_CHAIN, ConnectionIdentity("MySQL"))
    assert descriptor.capabilities.requires_order_by_alias is True


def test_capability_groups():
    descriptor = DialectDescriptor.create("sqlstream", SQLSTREAM_CHAIN, ConnectionIdentity("SQLstream"))
    caps = descriptor.capabilities
    assert caps.aggregates.multiple_distinct_sql_measures is False
    assert caps.joins.table_as is True
    assert caps.ordering.requires_union_order_by_ordinal is True


def test_descriptor_is_immutable():
    descriptor = DialectDescriptor.create("generic", GENERIC_CHAIN, ConnectionIdentity("Anything"))
    with pytest.raises(AttributeError):
        descriptor._tag = "other"


@pytest.mark.parametrize(
    "version, expected",
    [("5.7.33-log", (5, 7, 33)), ("10.6.12-MariaDB", (10, 6, 12)), ("", ()), ("unknown", ())],
)
def test_version_tuple(version, expected):
    assert ConnectionIdentity("MySQL", version).version_tuple() == expected
