"""Tests for the safe expression evaluator."""
import pytest

from node_sdk.expressions import (
    ExpressionError,
    SafeExpressionEvaluator,
    evaluate_expression,
    strict_equals,
    translate_js_operators,
)


class TestTranslateJsOperators:
    """Test JS operator translation."""

    def test_operators(self):
        assert translate_js_operators("a === b && c !== d || !e") == "a  is  b  and  c  is not  d  or   not e"

    def test_literals(self):
        assert translate_js_operators("x == null || y === undefined") == "x == None  or  y  is  None"
        assert translate_js_operators("true && false") == "True  and  False"

    def test_string_literals_untouched(self):
        assert translate_js_operators("ctx.a == 'true && !x'") == "ctx.a == 'true && !x'"


class TestEvaluateExpression:
    """Test evaluate_expression."""

    def test_comparison(self, trigger_ctx):
        assert evaluate_expression("ctx.trigger.total > 100", trigger_ctx) is True
        assert evaluate_expression("ctx.trigger.total < 100", trigger_ctx) is False

    def test_js_style(self, trigger_ctx):
        assert evaluate_expression("ctx.trigger.plan === 'pro' && ctx.trigger.total >= 150", trigger_ctx) is True
        assert evaluate_expression("!(ctx.trigger.plan === 'free')", trigger_ctx) is True

    @pytest.mark.parametrize(
        "expression,ctx,expected",
        [
            ("ctx.flag === 1", {"flag": True}, False),
            ("ctx.n === false", {"n": 0}, False),
            ("ctx.s === 1", {"s": "1"}, False),
            ("ctx.n === 1.0", {"n": 1}, True),
            ("ctx.flag !== 1", {"flag": True}, True),
            ("ctx.s !== 'a'", {"s": "a"}, False),
            ("ctx.missing === null", {}, True),
        ],
    )
    def test_triple_equals_is_type_strict(self, expression, ctx, expected):
        assert evaluate_expression(expression, ctx) is expected

    def test_double_equals_stays_loose(self):
        assert evaluate_expression("ctx.flag == 1", {"flag": True}) is True

    def test_python_style(self, trigger_ctx):
        assert evaluate_expression("ctx['trigger']['plan'] == 'pro' and not False", trigger_ctx) is True

    def test_missing_key_is_none(self):
        assert evaluate_expression("ctx.trigger.missing", {"trigger": {}}) is None
        assert evaluate_expression("ctx.a.b.c == null", {}) is True

    def test_ordering_with_none_is_false(self):
        assert evaluate_expression("ctx.missing > 1", {}) is False
        assert evaluate_expression("ctx.missing <= 1", {}) is False

    def test_length(self, trigger_ctx):
        assert evaluate_expression("ctx.trigger.items.length", trigger_ctx) == 2
        assert evaluate_expression("ctx.trigger.name.length == 3", trigger_ctx) is True

    def test_subscript_index(self, trigger_ctx):
        assert evaluate_expression("ctx.trigger.items[1]['sku']", trigger_ctx) == "B-2"
        assert evaluate_expression("ctx.trigger.items[9]", trigger_ctx) is None

    def test_arithmetic_and_builtins(self, trigger_ctx):
        assert evaluate_expression("ctx.trigger.total * 2 - 50", trigger_ctx) == 250
        assert evaluate_expression("len(ctx.trigger.items) + max(1, 3)", trigger_ctx) == 5

    def test_membership(self, trigger_ctx):
        assert evaluate_expression("'pro' in ['pro', 'team']", trigger_ctx) is True
        assert evaluate_expression("'x' in ctx.missing", {}) is False

    def test_conditional_expression(self):
        assert evaluate_expression("'big' if ctx.n > 10 else 'small'", {"n": 11}) == "big"

    def test_helpers_available(self):
        value = evaluate_expression("formatDate(ctx.d, 'YYYY')", {"d": "2021-05-01"})
        assert value == "2021"

    def test_short_circuit(self):
        """Test the right side is not evaluated when the left decides."""
        assert evaluate_expression("false && undefined_name", {}) is False

    def test_unknown_name_raises(self):
        with pytest.raises(ExpressionError, match="not defined"):
            evaluate_expression("open('/etc/passwd')", {})

    def test_syntax_error_raises(self):
        with pytest.raises(ExpressionError, match="Syntax error"):
            evaluate_expression("ctx.a >", {})

    def test_method_calls_rejected(self):
        with pytest.raises(ExpressionError, match="can be called"):
            evaluate_expression("ctx.get('a')", {"a": 1})

    def test_lambda_rejected(self):
        with pytest.raises(ExpressionError, match="Unsupported"):
            evaluate_expression("lambda: 1", {})

    def test_extra_names(self):
        evaluator = SafeExpressionEvaluator(extra_names={"limit": 10})
        assert evaluator.evaluate("ctx.n < limit", {"n": 3}) is True


class TestStrictEquals:
    """Test strict_equals."""

    @pytest.mark.parametrize(
        "left,right,expected",
        [
            ("pro", "pro", True),
            (1, "1", False),
            (True, 1, False),
            (1, 1.0, True),
            (None, None, True),
            (None, "", False),
            (False, False, True),
        ],
    )
    def test_values(self, left, right, expected):
        assert strict_equals(left, right) is expected

    def test_containers_compare_by_identity(self):
        value = {"a": 1}
        assert strict_equals(value, value) is True
        assert strict_equals({"a": 1}, {"a": 1}) is False
