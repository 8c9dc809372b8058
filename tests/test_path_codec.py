"""Unit tests for parameter name / path / tree conversions."""

import pytest

from paramtree.core.errors import MalformedPathError
from paramtree.utils.path_codec import flatten, name_to_path, path_to_name, treeify


class TestNames:
    def test_path_to_name_prepends_slash(self) -> None:
        assert path_to_name(("cfg", "db", "port")) == "/cfg/db/port"

    def test_name_to_path_strips_single_leading_slash(self) -> None:
        assert name_to_path("/cfg/db/port") == ("cfg", "db", "port")
        assert name_to_path("cfg/db") == ("cfg", "db")

    @pytest.mark.parametrize(
        "path",
        [("a",), ("a", "b", "c"), ("with space", "dots.and-dashes", "0")],
    )
    def test_name_to_path_inverts_path_to_name(self, path: tuple[str, ...]) -> None:
        assert name_to_path(path_to_name(path)) == path

    @pytest.mark.parametrize("name", ["/a//b", "/a/b/", "", "/", "//a"])
    def test_empty_components_are_rejected(self, name: str) -> None:
        with pytest.raises(MalformedPathError) as exc_info:
            name_to_path(name)

        assert exc_info.value.code == "empty_path_component"

    def test_path_to_name_rejects_empty_path(self) -> None:
        with pytest.raises(MalformedPathError) as exc_info:
            path_to_name(())

        assert exc_info.value.code == "empty_path"

    def test_path_to_name_rejects_slash_inside_component(self) -> None:
        with pytest.raises(MalformedPathError) as exc_info:
            path_to_name(("a", "b/c"))

        assert exc_info.value.code == "slash_in_path_component"


class TestFlatten:
    def test_emits_one_pair_per_leaf_in_order(self) -> None:
        tree = {"a": {"b": 1, "c": "x"}, "d": ""}

        assert flatten(tree, ("cfg",)) == [
            (("cfg", "a", "b"), 1),
            (("cfg", "a", "c"), "x"),
            (("cfg", "d"), ""),
        ]

    def test_sequence_indices_become_components(self) -> None:
        tree = {"hosts": ["a", {"name": "b"}]}

        assert flatten(tree) == [
            (("hosts", "0"), "a"),
            (("hosts", "1", "name"), "b"),
        ]

    def test_empty_containers_emit_nothing(self) -> None:
        assert flatten({"a": {}, "b": []}) == []

    def test_keeps_falsy_scalars(self) -> None:
        pairs = flatten({"zero": 0, "off": False, "none": None})

        assert pairs == [(("zero",), 0), (("off",), False), (("none",), None)]

    @pytest.mark.parametrize("key", ["", "a/b"])
    def test_invalid_keys_are_rejected(self, key: str) -> None:
        with pytest.raises(MalformedPathError):
            flatten({"ok": {key: 1}})


class TestTreeify:
    def test_builds_nested_mappings(self) -> None:
        pairs = [(("foo", "baz"), 1), (("foo", "bar"), 2)]

        assert treeify(pairs) == {"foo": {"baz": 1, "bar": 2}}

    def test_later_pair_wins_for_same_path(self) -> None:
        pairs = [(("a", "b"), 1), (("a", "b"), 2)]

        assert treeify(pairs) == {"a": {"b": 2}}

    def test_mapping_replaces_earlier_scalar(self) -> None:
        pairs = [(("a",), 1), (("a", "b"), 2)]

        assert treeify(pairs) == {"a": {"b": 2}}

    def test_restores_contiguous_indices_as_list(self) -> None:
        pairs = [(("l", "1"), "y"), (("l", "0"), "x")]

        assert treeify(pairs) == {"l": ["x", "y"]}

    def test_sparse_indices_stay_a_mapping(self) -> None:
        pairs = [(("l", "0"), "x"), (("l", "2"), "z")]

        assert treeify(pairs) == {"l": {"0": "x", "2": "z"}}

    def test_sequence_restoration_can_be_disabled(self) -> None:
        pairs = [(("l", "0"), "x")]

        assert treeify(pairs, restore_sequences=False) == {"l": {"0": "x"}}

    def test_root_sequence_is_restored(self) -> None:
        assert treeify(flatten(["a", "b"])) == ["a", "b"]

    def test_root_stays_mapping_without_restoration(self) -> None:
        assert treeify(flatten(["a", "b"]), restore_sequences=False) == {"0": "a", "1": "b"}

    def test_empty_input_gives_empty_mapping(self) -> None:
        assert treeify([]) == {}

    def test_index_keyed_mapping_reads_back_as_list(self) -> None:
        # Keys "0".."n-1" flatten exactly like list indices.
        tree = {"codes": {"1": "one", "0": "zero"}}

        assert flatten(tree) == flatten({"codes": ["zero", "one"]})[::-1]
        assert treeify(flatten(tree)) == {"codes": ["zero", "one"]}
        assert treeify(flatten(tree), restore_sequences=False) == tree


@pytest.mark.parametrize(
    "tree",
    [
        {"a": 1},
        {"a": {"b": {"c": True, "d": 1.5}}, "e": "text"},
        {"servers": [{"host": "a", "port": 1}, {"host": "b", "port": 2}], "debug": False},
        {"matrix": [[1, 2], [3]], "none": None},
        [{"host": "a"}, {"host": "b", "tags": ["x"]}],
    ],
)
def test_treeify_inverts_flatten(tree: dict | list) -> None:
    assert treeify(flatten(tree)) == tree
