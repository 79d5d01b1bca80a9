"""Tests for field location in JSON trees."""

import pytest

from agent_lint.errors import RootNotFoundError
from agent_lint.linter.locate import (
    child_path,
    find_anchor,
    locate,
    locate_all,
    select_root,
)


class TestChildPath:
    def test_identifier_key(self):
        assert child_path("$", "metadata") == "$.metadata"

    def test_index(self):
        assert child_path("$.items", 3) == "$.items[3]"

    def test_non_identifier_key(self):
        assert child_path("$", "rate limits") == "$['rate limits']"


class TestLocate:
    def test_top_level(self):
        assert locate({"status": "ok"}, "status") == ("ok", "$.status")

    def test_missing(self):
        assert locate({"data": {"value": 1}}, "confidence") is None

    def test_shallowest_wins(self):
        tree = {"meta": {"confidence": 0.2}, "confidence": 0.9}
        assert locate(tree, "confidence") == (0.9, "$.confidence")

    def test_breadth_first_through_arrays(self):
        tree = {"items": [{"x": {"k": 1}}, {"k": 2}]}
        assert locate(tree, "k") == (2, "$.items[1].k")

    def test_document_order_breaks_ties(self):
        tree = {"a": {"k": "first"}, "b": {"k": "second"}}
        assert locate(tree, "k") == ("first", "$.a.k")

    def test_scalar_tree(self):
        assert locate(42, "status") is None

    def test_custom_base(self):
        assert locate({"k": 1}, "k", base="$.data") == (1, "$.data.k")

    def test_skip_keys_are_not_descended(self):
        tree = {"alternatives": [{"confidence": 0.3}]}
        assert locate(tree, "confidence", skip={"alternatives"}) is None
        assert locate(tree, "confidence") == (0.3, "$.alternatives[0].confidence")

    def test_locate_all(self):
        tree = {"confidence": 0.9, "alternatives": [{"confidence": 0.1}, {"confidence": 0.05}]}
        found = locate_all(tree, "confidence")
        assert [path for _, path in found] == [
            "$.confidence",
            "$.alternatives[0].confidence",
            "$.alternatives[1].confidence",
        ]


class TestFindAnchor:
    def test_prefers_object_with_most_fields(self):
        tree = {
            "confidence": 0.5,
            "meta": {"confidence": 0.9, "alternatives": []},
        }
        obj, path = find_anchor(tree, ["confidence", "alternatives", "requiresHumanReview"])
        assert path == "$.meta"
        assert obj["confidence"] == 0.9

    def test_skip_keys_hide_nested_objects(self):
        tree = {"status": "ok", "previousStates": [{"status": "new", "recommendedNextAction": "pay"}]}
        names = ["status", "recommendedNextAction"]
        assert find_anchor(tree, names)[1] == "$.previousStates[0]"
        assert find_anchor(tree, names, skip={"previousStates"})[1] == "$"

    def test_ties_go_to_shallowest(self):
        tree = {"code": "E1", "error": {"code": "E2"}}
        _, path = find_anchor(tree, ["code", "message"])
        assert path == "$"

    def test_none_when_no_fields(self):
        assert find_anchor({"data": []}, ["code"]) is None


class TestSelectRoot:
    def test_empty_root_is_whole_tree(self):
        tree = {"a": 1}
        assert select_root(tree, "") == (tree, "$")

    def test_dotted_path_with_index(self):
        tree = {"data": {"result": [{"a": 1}]}}
        assert select_root(tree, "data.result.0") == ({"a": 1}, "$.data.result[0]")

    def test_missing_root(self):
        with pytest.raises(RootNotFoundError) as exc:
            select_root({"data": {}}, "data.result")
        assert exc.value.root == "data.result"

    def test_index_out_of_range(self):
        with pytest.raises(RootNotFoundError):
            select_root({"items": [1]}, "items.4")
