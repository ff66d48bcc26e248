"""Tests for the custom code node and its sandbox."""
import pytest

from node_sdk import CodeExecutionError, NodeOperationError
from node_sdk.nodes import CodeNode
from node_sdk.sandbox import SAFE_BUILTINS, compile_code, run_code


class TestSandbox:
    """Test run_code and compile_code."""

    def test_returns_value(self, trigger_ctx):
        code = """
total = sum(item["price"] for item in ctx["trigger"]["items"])
return {"total": total, "count": len(ctx["trigger"]["items"])}
"""
        assert run_code(code, trigger_ctx) == {"total": 42.5, "count": 2}

    def test_can_mutate_context(self):
        ctx = {}
        run_code("ctx['seen'] = True", ctx)
        assert ctx == {"seen": True}

    def test_no_return_gives_none(self):
        assert run_code("x = 1", {}) is None

    def test_helpers_available(self):
        value = run_code("return formatDate('2020-02-03', 'DD/MM')", {})
        assert value == "03/02"

    def test_json_helpers(self):
        assert run_code("return json_parse('{\"a\": [1]}')", {}) == {"a": [1]}
        assert run_code("return json_stringify({'a': 1})", {}) == '{"a": 1}'

    def test_await_runs_to_completion(self):
        code = """
async def double(x):
    return x * 2
return await double(ctx["n"])
"""
        assert run_code(code, {"n": 21}) == 42

    def test_import_rejected(self):
        with pytest.raises(CodeExecutionError, match="Import"):
            compile_code("import os\nreturn os.getcwd()")

    def test_dunder_access_rejected(self):
        with pytest.raises(CodeExecutionError, match="__class__"):
            compile_code("return ctx.__class__")

    def test_open_not_available(self):
        with pytest.raises(NameError):
            run_code("return open('/etc/passwd').read()", {})

    def test_frame_walk_rejected(self):
        code = """
def gen():
    yield frame.gi_frame.f_back
frame = gen()
outer = next(frame)
while "builtins" not in outer.f_globals:
    outer = outer.f_back
return outer.f_globals["builtins"].open("/etc/hostname").read()
"""
        with pytest.raises(CodeExecutionError, match="is not allowed"):
            run_code(code, {})

    @pytest.mark.parametrize(
        "attr",
        ["gi_frame", "cr_frame", "ag_frame", "f_back", "f_globals", "tb_frame", "co_code", "func_globals", "format", "mro"],
    )
    def test_internal_attributes_rejected(self, attr):
        with pytest.raises(CodeExecutionError, match=f"Access to '{attr}' is not allowed"):
            compile_code(f"return ctx.{attr}")

    def test_builtins_table_is_curated(self):
        assert "open" not in SAFE_BUILTINS
        assert "getattr" not in SAFE_BUILTINS
        assert "__import__" not in SAFE_BUILTINS

    def test_syntax_error(self):
        with pytest.raises(CodeExecutionError, match="Syntax error"):
            compile_code("return (")


class TestCodeNode:
    """Test CodeNode.execute."""

    def test_saves_result(self):
        ctx = {"trigger": {"n": 2}}
        result = CodeNode().execute({"code": "return ctx['trigger']['n'] + 1"}, ctx)

        assert result.success is True
        assert result.data == 3
        assert ctx["result"] == 3

    def test_save_as(self):
        ctx = {}
        CodeNode().execute({"code": "return 'x'", "saveAs": "out"}, ctx)
        assert ctx == {"out": "x"}

    def test_code_required(self):
        with pytest.raises(NodeOperationError, match="Code is required"):
            CodeNode().execute({"code": ""}, {})

    def test_raised_error_is_wrapped(self):
        with pytest.raises(CodeExecutionError, match="Code execution failed: ValueError: bad input"):
            CodeNode().execute({"code": "raise ValueError('bad input')"}, {})

    def test_sandbox_violation_is_wrapped(self):
        with pytest.raises(CodeExecutionError, match="Code execution failed: 'Import'"):
            CodeNode().execute({"code": "import os"}, {})

    def test_disabled_by_settings(self, monkeypatch):
        from workflow_service.config import reset_settings

        monkeypatch.setenv("WORKFLOW_CODE_NODE_ENABLED", "false")
        reset_settings()

        with pytest.raises(CodeExecutionError, match="disabled"):
            CodeNode().execute({"code": "return 1"}, {})
