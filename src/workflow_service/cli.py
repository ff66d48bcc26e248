"""
CLI for the workflow engine.

Provides terminal access to:
- Board compilation
- Single-node execution
- Template preview
- cURL import
- The HTTP API
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from template_engine import extract_template_paths, preview_template
from workflow_runtime import ExecutionContext, NodeExecutor, compile_board, parse_curl_command
from workflow_service.observability import setup_logging


def load_json(value: str | None, default: Any = None) -> Any:
    """Load JSON from a file path, '-' for stdin, or an inline JSON string."""
    if value is None:
        return default
    if value == "-":
        return json.load(sys.stdin)
    if value.lstrip().startswith(("{", "[")):
        return json.loads(value)
    path = Path(value)
    if path.exists():
        return json.loads(path.read_text())
    return json.loads(value)


def print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def cmd_compile(args: argparse.Namespace) -> int:
    """Compile a board file into an ExecWorkflow."""
    setup_logging()

    board = load_json(args.board)
    workflow = compile_board(board, name=args.name)
    print_json(workflow.to_dict())

    if args.strict and workflow.warnings:
        return 1
    return 0


def cmd_run_node(args: argparse.Namespace) -> int:
    """Execute one node against a context."""
    setup_logging()

    node = load_json(args.node)
    if args.ctx is not None:
        ctx = ExecutionContext(load_json(args.ctx))
    else:
        ctx = ExecutionContext.from_trigger(load_json(args.trigger, default={}))

    result = NodeExecutor().execute_node(node, ctx)
    print_json({"result": result.to_dict(), "ctx": dict(ctx)})
    return 0 if result.success else 1


def cmd_preview(args: argparse.Namespace) -> int:
    """Preview a template against sample data."""
    data = load_json(args.data, default={})
    print(preview_template(args.template, data))

    if args.paths:
        for path in extract_template_paths(args.template):
            print(f"  ctx.{path}")
    return 0


def cmd_curl(args: argparse.Namespace) -> int:
    """Convert a cURL command into http node config."""
    result = parse_curl_command(args.command_line)
    if not result.success:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1

    print_json(result.to_config())
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("workflow_service.api.main:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Workflow engine CLI - compile boards, run nodes, preview templates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # compile command
    compile_parser = subparsers.add_parser("compile", help="Compile a board into an ExecWorkflow")
    compile_parser.add_argument("board", help="Board JSON file, '-' for stdin, or inline JSON")
    compile_parser.add_argument("--name", default="Untitled", help="Workflow name")
    compile_parser.add_argument("--strict", action="store_true", help="Exit non-zero if drift warnings were found")

    # run-node command
    run_parser = subparsers.add_parser("run-node", help="Execute a single node")
    run_parser.add_argument("node", help="Node JSON ({id, kind, cfg} or {kind, data: {config}})")
    run_parser.add_argument("--ctx", help="Run context JSON")
    run_parser.add_argument("--trigger", help="Trigger payload JSON (used when --ctx is not given)")

    # preview command
    preview_parser = subparsers.add_parser("preview", help="Preview a template")
    preview_parser.add_argument("template", help="Template text")
    preview_parser.add_argument("--data", help="Sample data JSON")
    preview_parser.add_argument("--paths", action="store_true", help="Also list referenced ctx paths")

    # curl command
    curl_parser = subparsers.add_parser("curl", help="Convert a cURL command into http node config")
    curl_parser.add_argument("command_line", help="cURL command (quote it)")

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.add_argument("--reload", action="store_true")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "compile":
        return cmd_compile(args)
    elif args.command == "run-node":
        return cmd_run_node(args)
    elif args.command == "preview":
        return cmd_preview(args)
    elif args.command == "curl":
        return cmd_curl(args)
    elif args.command == "serve":
        return cmd_serve(args)
    else:
        print(f"Unknown command: {args.command}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
