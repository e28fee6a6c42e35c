from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import NoReturn, Optional, Sequence

from .cache import GenerationCache
from .compiler import compile_graph, reconcile
from .config import EditorConfig
from .constants import OUTPUT_FORMAT_DEFAULT, OUTPUT_FORMATS
from .errors import ConfigError, GraphSyntaxError
from .io import load_config, load_edges
from .renderer import MermaidCliRenderer, Renderer
from .scheduler import GenerationScheduler
from .session import DiagramSession, DiagramState
from .validate import validate_edges
from .writer import write_md, write_mmd, write_png


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="edge-diagram",
        description="Compile an edge list (A->B, A<-B) into a Mermaid flowchart and render it.",
    )
    parser.add_argument(
        "input",
        type=Path,
        nargs="?",
        help="Edge-list file, one relation per line",
    )
    parser.add_argument(
        "-o",
        "--out",
        type=Path,
        default=None,
        help="Output path (default: input path with the format's extension)",
    )
    parser.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default=OUTPUT_FORMAT_DEFAULT,
        help="png renders through the Mermaid CLI; mmd/md write the generated source",
    )
    parser.add_argument(
        "--disable",
        action="append",
        default=[],
        metavar="VERTEX",
        help="Mark a vertex inactive (repeatable)",
    )
    parser.add_argument("--config", type=Path, default=None, help="YAML config file")
    parser.add_argument("--mmdc", type=str, default=None, help="Mermaid CLI executable")
    parser.add_argument(
        "--timeout", type=float, default=None, help="Render timeout in seconds"
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Validate the edge list, report every problem and exit",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="With --check, fail on warnings (duplicate edges, unsafe ids). Errors always fail.",
    )
    parser.add_argument(
        "--list-vertices",
        action="store_true",
        help="Print the vertices found in the edge list and exit",
    )
    parser.add_argument(
        "--check-renderer",
        action="store_true",
        help="Check that the Mermaid CLI is installed and exit",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def _fail(message: str, code: int = 2) -> NoReturn:
    print(f"error: {message}", file=sys.stderr)
    raise SystemExit(code)


async def _render(
    text: str, disabled: Sequence[str], cfg: EditorConfig, renderer: Renderer
) -> DiagramState:
    scheduler = GenerationScheduler(
        renderer,
        GenerationCache(cfg.cache_size),
        debounce=cfg.debounce_seconds,
        timeout=cfg.render_timeout_seconds,
    )
    session = DiagramSession(scheduler)
    try:
        session.update_edges(text)
        known = [v for v in disabled if v in session.state.vertex_states]
        if known:
            session.bulk_toggle_vertices(known, False)
        await scheduler.wait()
        return session.state
    finally:
        session.dispose()


def main(argv: Optional[Sequence[str]] = None) -> None:
    """CLI entrypoint."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        cfg = load_config(args.config) if args.config else EditorConfig()
        cfg = cfg.with_overrides(mmdc_command=args.mmdc, render_timeout_seconds=args.timeout)
    except (ConfigError, FileNotFoundError) as e:
        _fail(f"config: {e}")

    renderer = MermaidCliRenderer(
        cfg.mmdc_command,
        scale=cfg.scale,
        background_color=cfg.background_color,
        timeout=cfg.render_timeout_seconds,
    )

    if args.check_renderer:
        ok, info = asyncio.run(renderer.check_available())
        if not ok:
            _fail(
                f"Mermaid CLI is not installed or not working: {info}\n"
                "Install it with: npm install -g @mermaid-js/mermaid-cli",
                code=1,
            )
        print(info)
        return

    if args.input is None:
        parser.error("the following arguments are required: input")

    try:
        lines = load_edges(args.input)
    except FileNotFoundError as e:
        _fail(f"input file not found: {e}")

    vertex_states = reconcile(lines, {v: False for v in args.disable})
    for vertex in args.disable:
        if vertex not in vertex_states:
            print(f"warning: --disable {vertex!r} does not match any vertex", file=sys.stderr)

    if args.list_vertices:
        for vertex, active in vertex_states.items():
            print(f"[{'x' if active else ' '}] {vertex}")
        return

    if args.check:
        errors, warnings = validate_edges(lines)
        for warning in warnings:
            print(f"warning: {warning}", file=sys.stderr)
        if errors or (args.strict and warnings):
            for error in errors:
                print(f"error: {error}", file=sys.stderr)
            raise SystemExit(2)
        return

    try:
        code = compile_graph(lines, vertex_states)
    except GraphSyntaxError as e:
        _fail(str(e))

    out: Path = args.out or args.input.with_suffix(f".{args.format}")
    if out.resolve() == args.input.resolve():
        _fail(f"output path {out} would overwrite the input file")

    if args.format == "mmd":
        write_mmd(out, code)
    elif args.format == "md":
        write_md(out, args.input.stem, code)
    else:
        state = asyncio.run(_render("\n".join(lines), args.disable, cfg, renderer))
        if state.image is None:
            _fail(state.error or "diagram generation produced no image", code=1)
        write_png(out, state.image)

    print(str(out))
