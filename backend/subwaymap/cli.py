"""
Command line entry point.

    python -m subwaymap list
    python -m subwaymap render wmap --format svg -o wmap.svg
    python -m subwaymap validate dataflow --strict
    python -m subwaymap serve --port 8000
"""

import argparse
import json
import sys
from contextlib import redirect_stdout
from pathlib import Path
from typing import List, Optional

from subwaymap.api.serializers import serialize_compiled_map
from subwaymap.catalog.registry import get_map_registry
from subwaymap.compiler.compiler import compile_map
from subwaymap.compiler.render_d2 import render_d2
from subwaymap.config import STATUS_TICK_INTERVAL_MS
from subwaymap.ir.errors import UnknownMapError
from subwaymap.renderer.html_page import render_page
from subwaymap.renderer.svg_renderer import render_svg
from subwaymap.validation import validate_topology

FORMATS = ("svg", "d2", "json", "html")


def _render(map_id: str, fmt: str) -> str:
    compiled = compile_map(get_map_registry().get(map_id))
    if fmt == "svg":
        return render_svg(compiled)
    if fmt == "d2":
        return render_d2(compiled)
    if fmt == "html":
        return render_page(compiled, STATUS_TICK_INTERVAL_MS)
    return json.dumps(serialize_compiled_map(compiled), indent=2)


def cmd_list(args) -> int:
    for topology in get_map_registry().list_all():
        mode = "auto" if topology.layout is not None else "manual"
        print(f"{topology.id:<12} {len(topology.nodes):>4} nodes  {len(topology.edges):>4} edges  "
              f"{mode:<6}  {topology.title}")
    return 0


def cmd_render(args) -> int:
    # Keep diagnostics out of the rendered document
    with redirect_stdout(sys.stderr):
        output = _render(args.map_id, args.format)
    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
        print(f"Wrote {args.format} for '{args.map_id}' to {args.output}")
    else:
        print(output)
    return 0


def cmd_validate(args) -> int:
    topology = get_map_registry().get(args.map_id)
    result = validate_topology(topology, strict=args.strict)
    print(f"{topology.id}: {result.get_summary()}")
    for issue in result.issues:
        print(f"  [{issue.severity.value}] {issue.code}: {issue.message}")
    return 0 if result.is_valid else 1


def cmd_serve(args) -> int:
    import uvicorn

    uvicorn.run("subwaymap.main:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="subwaymap", description="Subway-map service topology renderer.")
    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="List registered maps")
    p_list.set_defaults(func=cmd_list)

    p_render = sub.add_parser("render", help="Render a map")
    p_render.add_argument("map_id")
    p_render.add_argument("--format", "-f", choices=FORMATS, default="svg")
    p_render.add_argument("--output", "-o", help="Write to file instead of stdout")
    p_render.set_defaults(func=cmd_render)

    p_validate = sub.add_parser("validate", help="Validate a map")
    p_validate.add_argument("map_id")
    p_validate.add_argument("--strict", action="store_true",
                            help="Treat warnings as failures")
    p_validate.set_defaults(func=cmd_validate)

    p_serve = sub.add_parser("serve", help="Run the HTTP server")
    p_serve.add_argument("--host", default="127.0.0.1")
    p_serve.add_argument("--port", type=int, default=8000)
    p_serve.add_argument("--reload", action="store_true")
    p_serve.set_defaults(func=cmd_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except UnknownMapError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
