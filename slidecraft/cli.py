# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/cli.py
from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

from slidecraft.slides import SlideRenderer
from slidecraft.types import CssConfigOptions, RendererOptions


def _read(path: Optional[str]) -> Optional[str]:
    if not path:
        return None
    return Path(path).read_text(encoding="utf-8")


async def render_deck(console: Console, deck: Path, out: Path,
                      config: Optional[str] = None, css: Optional[str] = None) -> int:
    """Writes slide-N.html / slide-N.css; returns the number of slides that failed."""
    renderer = SlideRenderer(RendererOptions(
        css=CssConfigOptions(custom_config_raw=config, custom_css=css or ""),
    ))
    failed = 0
    try:
        sources = renderer.parse(deck.read_text(encoding="utf-8"))
        slides = await renderer.render(sources)
        out.mkdir(parents=True, exist_ok=True)
        for slide in slides:
            html = await slide.component.render()
            styles = await slide.css()
            (out / f"slide-{slide.no}.html").write_text(html, encoding="utf-8")
            (out / f"slide-{slide.no}.css").write_text(styles.css or "", encoding="utf-8")

            status = "[green]ok[/green]"
            if slide.component.last_error is not None:
                failed += 1
                status = f"[red]failed[/red] {slide.component.last_error}"
            elif styles.custom_config_error is not None:
                status = f"[yellow]no css[/yellow] {styles.custom_config_error}"
            console.print(f"slide {slide.no}: {status}")
    finally:
        renderer.dispose()
    return failed


def main(argv: Optional[List[str]] = None) -> None:
    console = Console()
    parser = argparse.ArgumentParser(prog="slidecraft", description="Compile Markdown decks into slides")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    render = commands.add_parser("render", help="Render every slide of a deck")
    render.add_argument("deck", help="Deck markdown file")
    render.add_argument("-o", "--out", required=True, help="Output directory")
    render.add_argument("--config", help="Atomic CSS configuration program")
    render.add_argument("--css", help="Custom CSS merged into its own layer")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    deck = Path(args.deck)
    if not deck.is_file():
        raise SystemExit(f"Deck not found: {deck}")
    try:
        failed = asyncio.run(render_deck(console, deck, Path(args.out), _read(args.config), _read(args.css)))
    except OSError as exc:
        raise SystemExit(f"Cannot read or write files: {exc}") from exc
    if failed:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
