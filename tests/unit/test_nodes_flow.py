"""Tests for the filter, switch and merge nodes."""
import pytest

from node_sdk import NodeOperationError
from node_sdk.nodes import FilterNode, MergeNode, SwitchNode


class TestFilterNode:
    """Test FilterNode."""

    CONFIG = {"expression": "ctx.trigger.total > 100", "nextTrue": "big", "nextFalse": "small"}

    def test_true_branch(self):
        result = FilterNode().execute(self.CONFIG, {"trigger": {"total": 150}})
        assert result.success is True
        assert result.data is True
        assert result.next_node_id == "big"
        assert result.should_stop is False

    def test_false_branch(self):
        result = FilterNode().execute(self.CONFIG, {"trigger": {"total": 50}})
        assert result.next_node_id == "small"

    def test_triple_equals_does_not_coerce(self):
        config = {"expression": "ctx.trigger.flag === 1", "nextTrue": "yes", "nextFalse": "no"}
        result = FilterNode().execute(config, {"trigger": {"flag": True}})
        assert result.next_node_id == "no"

    def test_missing_branch_stops(self):
        config = {"expression": "ctx.trigger.total > 100", "nextTrue": "big"}
        result = FilterNode().execute(config, {"trigger": {"total": 5}})
        assert result.success is True
        assert result.next_node_id is None
        assert result.should_stop is True

    def test_expression_required(self):
        with pytest.raises(NodeOperationError, match="expression is required"):
            FilterNode().execute({"expression": "  "}, {})

    def test_evaluation_error(self):
        with pytest.raises(NodeOperationError, match="Filter expression evaluation failed"):
            FilterNode().execute({"expression": "ctx.total >"}, {})


class TestSwitchNode:
    """Test SwitchNode."""

    CONFIG = {
        "keyExpr": "ctx.trigger.plan",
        "cases": [{"value": "pro", "next": "n1"}, {"value": "1", "next": "n2"}],
        "defaultNext": "fallback",
    }

    def test_matching_case(self):
        result = SwitchNode().execute(self.CONFIG, {"trigger": {"plan": "pro"}})
        assert result.next_node_id == "n1"
        assert result.data == "pro"

    def test_type_strict_match(self):
        """Test 1 never matches "1"."""
        result = SwitchNode().execute(self.CONFIG, {"trigger": {"plan": 1}})
        assert result.next_node_id == "fallback"

    def test_string_one_matches(self):
        result = SwitchNode().execute(self.CONFIG, {"trigger": {"plan": "1"}})
        assert result.next_node_id == "n2"

    def test_first_match_wins(self):
        config = {"keyExpr": "ctx.k", "cases": [{"value": 2, "next": "a"}, {"value": 2, "next": "b"}]}
        assert SwitchNode().execute(config, {"k": 2}).next_node_id == "a"

    def test_no_match_no_default_stops(self):
        config = {"keyExpr": "ctx.k", "cases": [{"value": "x", "next": "a"}]}
        result = SwitchNode().execute(config, {"k": "y"})
        assert result.success is True
        assert result.next_node_id is None
        assert result.should_stop is True

    def test_key_required(self):
        with pytest.raises(NodeOperationError, match="key expression is required"):
            SwitchNode().execute({"cases": []}, {})

    def test_evaluation_error(self):
        with pytest.raises(NodeOperationError, match="Switch key expression evaluation failed"):
            SwitchNode().execute({"keyExpr": "ctx.k +"}, {})


class TestMergeNode:
    """Test MergeNode."""

    def test_pass_through(self):
        result = MergeNode().execute({"sources": ["a", "b"]}, {})
        assert result.data == {"strategy": "pass-through", "sources": ["a", "b"]}

    def test_combine(self):
        result = MergeNode().execute({"strategy": "combine", "sources": ["a"]}, {})
        assert result.data == {"strategy": "combine", "sources": ["a"], "merged": True}

    def test_sources_required(self):
        with pytest.raises(NodeOperationError, match="at least one source"):
            MergeNode().execute({"strategy": "combine", "sources": []}, {})

    def test_unknown_strategy(self):
        with pytest.raises(NodeOperationError, match="Unknown merge strategy: zip"):
            MergeNode().execute({"strategy": "zip", "sources": ["a"]}, {})
