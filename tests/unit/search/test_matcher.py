"""Unit tests for query evaluation against an index generation."""

import pytest

from resource_search.domain.model import MatchField, Resource
from resource_search.search.indexer import IndexGeneration, build_generation
from resource_search.search.matcher import match_query, resolve_filter
from resource_search.search.parser import parse_query


pytestmark = pytest.mark.unit


@pytest.fixture
def generation(mixed_resources):
    return build_generation(mixed_resources, number=1)


def _names(hits, generation):
    return {generation.resources[hit.resource_id].name for hit in hits}


class TestFilters:
    def test_type_alias(self, generation):
        hits = match_query(parse_query("type:aks"), generation)
        assert _names(hits, generation) == {"production-aks"}

    def test_type_substring(self, generation):
        hits = match_query(parse_query("type:storage"), generation)
        assert _names(hits, generation) == {"webstorage"}

    def test_type_wildcard_matches_simple_segment(self, generation):
        hits = match_query(parse_query("type:virtual*"), generation)
        assert _names(hits, generation) == {"web-server-vm"}

    def test_location_and_rg_intersection(self, generation):
        hits = match_query(parse_query("location:eastus rg:production"), generation)
        assert _names(hits, generation) == {"web-server-vm", "production-aks"}

    def test_tag_key_value(self, generation):
        hits = match_query(parse_query("tag:env=production"), generation)
        assert _names(hits, generation) == {"web-server-vm", "production-aks"}

    def test_tag_key_is_exact_not_substring(self, generation):
        assert match_query(parse_query("tag:en=production"), generation) == []

    def test_tag_key_only(self, generation):
        hits = match_query(parse_query("tag:APP"), generation)
        assert len(_names(hits, generation)) == 3

    def test_tag_any_key(self, generation):
        hits = match_query(parse_query("tag:=api"), generation)
        assert _names(hits, generation) == {"production-aks"}

    def test_tag_wildcard_key(self, generation):
        hits = match_query(parse_query("tag:a*=web"), generation)
        assert _names(hits, generation) == {"web-server-vm", "webstorage"}

    def test_name_filter(self, generation):
        hits = match_query(parse_query("name:*storage"), generation)
        assert _names(hits, generation) == {"webstorage"}

    def test_filter_hits_are_marked(self, generation):
        (hit,) = match_query(parse_query("location:westus"), generation)
        assert hit.via_filter
        assert hit.field is MatchField.LOCATION
        assert hit.value == "westus"

    def test_tag_filter_hit_displays_pair(self, generation):
        hits = match_query(parse_query("tag:app=api"), generation)
        assert [hit.value for hit in hits] == ["app=api"]

    def test_disjoint_filters_short_circuit(self, generation):
        assert match_query(parse_query("location:westus type:aks"), generation) == []

    def test_filter_order_is_irrelevant(self, generation):
        left = match_query(parse_query("type:vm location:eastus"), generation)
        right = match_query(parse_query("location:eastus type:vm"), generation)
        assert {h.resource_id for h in left} == {h.resource_id for h in right}


class TestFreeText:
    def test_one_hit_per_matching_field(self, generation):
        hits = match_query(parse_query("web"), generation)

        by_resource = {}
        for hit in hits:
            by_resource.setdefault(generation.resources[hit.resource_id].name, []).append(hit.field)
        assert sorted(by_resource["web-server-vm"]) == sorted([MatchField.NAME, MatchField.TAG])
        assert sorted(by_resource["webstorage"]) == sorted([MatchField.NAME, MatchField.TAG])
        assert "production-aks" not in by_resource

    def test_terms_combine_with_and(self, generation):
        hits = match_query(parse_query("web eastus"), generation)
        assert _names(hits, generation) == {"web-server-vm"}
        # Hits from both terms are kept for the surviving resource
        assert {hit.term for hit in hits} == {"web", "eastus"}

    def test_term_can_match_resource_group(self, generation):
        hits = match_query(parse_query("staging-rg"), generation)
        assert [(hit.field, hit.value) for hit in hits] == [(MatchField.RESOURCE_GROUP, "staging-rg")]

    def test_terms_do_not_match_tag_keys(self, generation):
        assert match_query(parse_query("env"), generation) == []

    def test_terms_restricted_to_filter_candidates(self, generation):
        hits = match_query(parse_query("web* location:westus"), generation)
        assert _names(hits, generation) == {"webstorage"}
        assert sum(1 for hit in hits if hit.via_filter) == 1

    def test_no_match(self, generation):
        assert match_query(parse_query("nonexistent"), generation) == []

    def test_bare_star_matches_everything(self, generation):
        hits = match_query(parse_query("*"), generation)
        assert len(_names(hits, generation)) == 3

    def test_empty_query_and_empty_index(self, generation):
        assert match_query(parse_query(""), generation) == []
        assert match_query(parse_query("web"), IndexGeneration.empty()) == []


def test_resolve_filter_exact_and_substring():
    generation = build_generation(
        [
            Resource(id="a", name="a", location="east"),
            Resource(id="b", name="b", location="eastus"),
            Resource(id="c", name="c", location="west"),
        ],
        number=1,
    )
    (location_filter,) = parse_query("location:east").filters
    assert resolve_filter(location_filter, generation) == {"a", "b"}


def test_resolve_filter_covers_shared_values():
    generation = build_generation(
        [Resource(id=f"east-{i}", name=f"east-{i}", location="eastus") for i in range(3)]
        + [Resource(id="west", name="west", location="westus")],
        number=1,
    )

    (exact_filter,) = parse_query("location:EastUS").filters
    (substring_filter,) = parse_query("location:stus").filters
    assert resolve_filter(exact_filter, generation) == {"east-0", "east-1", "east-2"}
    assert resolve_filter(substring_filter, generation) == {"east-0", "east-1", "east-2", "west"}
