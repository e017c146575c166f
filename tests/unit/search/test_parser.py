"""Unit tests for the query DSL parser."""

import pytest

from resource_search.domain.query import FieldFilter, FilterField
from resource_search.search.parser import parse_query


pytestmark = pytest.mark.unit


class TestFreeText:
    def test_empty_query(self):
        query = parse_query("")
        assert query.is_empty
        assert query.raw == ""

    def test_whitespace_only_query(self):
        assert parse_query("   \t ").is_empty

    def test_terms_keep_order_and_case(self):
        query = parse_query("Web  eastus\tPROD")
        assert query.terms == ("Web", "eastus", "PROD")
        assert query.filters == ()

    def test_raw_string_is_retained(self):
        assert parse_query("  type:vm web ").raw == "  type:vm web "

    def test_wildcard_terms_stay_terms(self):
        assert parse_query("web-* vm-0?").terms == ("web-*", "vm-0?")

    def test_and_between_tokens_is_skipped(self):
        assert parse_query("web AND eastus and prod").terms == ("web", "eastus", "prod")

    @pytest.mark.parametrize("raw", ["and", "AND", "And"])
    def test_lone_and_is_a_term(self, raw):
        assert parse_query(raw).terms == (raw,)

    def test_leading_and_trailing_and_are_terms(self):
        assert parse_query("and web and").terms == ("and", "web", "and")


class TestFieldFilters:
    def test_scalar_filters(self):
        query = parse_query("type:vm location:eastus rg:prod-rg")
        assert query.terms == ()
        assert query.filters == (
            FieldFilter(field=FilterField.TYPE, value="vm"),
            FieldFilter(field=FilterField.LOCATION, value="eastus"),
            FieldFilter(field=FilterField.RG, value="prod-rg"),
        )

    def test_field_aliases(self):
        query = parse_query("loc:westus resourcegroup:a resource-group:b NAME:web")
        assert [f.field for f in query.filters] == [
            FilterField.LOCATION,
            FilterField.RG,
            FilterField.RG,
            FilterField.NAME,
        ]

    def test_tag_filter_splits_on_first_equals(self):
        (tag_filter,) = parse_query("tag:conn=a=b").filters
        assert tag_filter.key == "conn"
        assert tag_filter.value == "a=b"

    def test_tag_key_only(self):
        (tag_filter,) = parse_query("tag:env").filters
        assert tag_filter == FieldFilter(field=FilterField.TAG, key="env", value=None)

    def test_filter_value_wildcard_flag(self):
        (type_filter, tag_filter) = parse_query("type:virtual* tag:e?v=prod").filters
        assert type_filter.has_wildcard
        assert tag_filter.has_wildcard

    def test_mixed_terms_and_filters(self):
        query = parse_query("web type:vm prod")
        assert query.terms == ("web", "prod")
        assert len(query.filters) == 1


class TestDegradation:
    @pytest.mark.parametrize("token", ["foo:bar", "type:", "tag:", "tag:=", ":value", "http://x"])
    def test_malformed_filters_become_terms(self, token):
        query = parse_query(token)
        assert query.terms == (token,)
        assert query.filters == ()

    def test_parser_never_raises_on_odd_input(self):
        for raw in ["::::", "tag:==", "*", "?", "type:***", "\x00", "a:b:c"]:
            parse_query(raw)
