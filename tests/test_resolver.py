"""Tests for dotted key resolution and the bounded key path memo."""

from __future__ import annotations

from hypothesis import given

from dotlex.runtime.resolver import KeyResolver
from tests.strategies import dotted_keys, tree_with_key

TREE = {
    "greeting": "你好",
    "nav": {"home": "首页", "sub": {"deep": "深"}},
    "empty": "",
}


class TestResolve:
    """Tree walks along parsed key segments."""

    def test_top_level_leaf(self) -> None:
        """Single-segment key returns the leaf."""
        assert KeyResolver().resolve(TREE, "greeting") == "你好"

    def test_nested_leaf(self) -> None:
        """Each segment descends one level."""
        resolver = KeyResolver()
        assert resolver.resolve(TREE, "nav.home") == "首页"
        assert resolver.resolve(TREE, "nav.sub.deep") == "深"

    def test_subtree_is_miss(self) -> None:
        """A key ending on a subtree is not coerced to a string."""
        assert KeyResolver().resolve(TREE, "nav") is None

    def test_missing_segment_is_miss(self) -> None:
        """Absent segment at any depth returns None."""
        resolver = KeyResolver()
        assert resolver.resolve(TREE, "nav.missing") is None
        assert resolver.resolve(TREE, "missing.home") is None

    def test_descending_through_leaf_is_miss(self) -> None:
        """A string cannot be indexed further."""
        assert KeyResolver().resolve(TREE, "greeting.more") is None

    def test_empty_leaf_is_found(self) -> None:
        """The empty string is a valid translation."""
        assert KeyResolver().resolve(TREE, "empty") == ""

    def test_empty_segments_are_literal(self) -> None:
        """Keys are split strictly; "a..b" has an empty middle segment."""
        tree = {"a": {"": {"b": "x"}}}
        assert KeyResolver().resolve(tree, "a..b") == "x"

    @given(case=tree_with_key())
    def test_generated_path_resolves(self, case: tuple[dict[str, object], str, str]) -> None:
        """Property: a tree built along a key resolves that key to its leaf."""
        tree, key, leaf = case
        assert KeyResolver().resolve(tree, key) == leaf  # type: ignore[arg-type]


class TestKeyPathMemo:
    """Segment memoization is bounded and never evicts."""

    def test_parse_key_splits_on_dots(self) -> None:
        """parse_key returns the segment tuple."""
        assert KeyResolver().parse_key("a.b.c") == ("a", "b", "c")

    def test_repeated_key_memoized_once(self) -> None:
        """Parsing the same key twice stores one entry."""
        resolver = KeyResolver()
        resolver.parse_key("a.b")
        resolver.parse_key("a.b")
        assert resolver.cached_keys == 1

    def test_bound_stops_insertion(self) -> None:
        """Keys beyond the bound are still parsed but not stored."""
        resolver = KeyResolver(max_cached=2)
        for key in ("a", "b", "c", "d"):
            assert resolver.parse_key(key) == (key,)
        assert resolver.cached_keys == 2

    def test_resolution_beyond_bound_still_works(self) -> None:
        """A full memo does not affect lookup results."""
        resolver = KeyResolver(max_cached=0)
        assert resolver.resolve(TREE, "nav.home") == "首页"
        assert resolver.cached_keys == 0

    @given(key=dotted_keys)
    def test_parse_key_round_trips(self, key: str) -> None:
        """Property: joining the segments reproduces the key."""
        assert ".".join(KeyResolver().parse_key(key)) == key
