"""CLI interface for SkyBlock Patch Notes."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import click
import orjson

from .fetcher import REQUEST_TIMEOUT, PageFetcher
from .models import ImageRef, PatchNotesResult, StyleHint, TextLine
from .scraper import HYPIXEL_FORUMS_URL, PatchNotesScraper
from .utils import strip_format_codes

# Terminal styling per style hint
STYLE_MAP = {
    StyleHint.PLAIN: {"fg": "white"},
    StyleHint.BOLD: {"bold": True},
    StyleHint.HEADER: {"fg": "yellow", "bold": True},
    StyleHint.LIST_ITEM: {"fg": "white"},
    StyleHint.LINK: {"fg": "blue", "underline": True},
    StyleHint.ERROR: {"fg": "red", "bold": True},
}


def _setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def render_result(result: PatchNotesResult) -> str:
    """Render a result as styled terminal text, one block per line."""
    lines = [click.style(result.title, fg="yellow", bold=True), ""]
    if result.source_url:
        lines.append("Source: " + click.style(result.source_url, **STYLE_MAP[StyleHint.LINK]))
    if result.header_image_url:
        lines.append("Header image: " + result.header_image_url)
    lines.append("")

    for block in result.blocks:
        if isinstance(block, ImageRef):
            lines.append(click.style(f"[image] {block.url}", fg="cyan"))
        elif isinstance(block, TextLine):
            text = strip_format_codes(block.text)
            lines.append(click.style(text, **STYLE_MAP[block.style]) if text else "")
    return "\n".join(lines)


def _fetch(root_url: str, timeout: float) -> PatchNotesResult:
    scraper = PatchNotesScraper(root_url=root_url, timeout=timeout)
    return scraper.fetch_in_background().result()


@click.group()
def main():
    """SkyBlock Patch Notes - latest Hypixel SkyBlock update from the forums."""
    pass


@main.command()
@click.option('--root-url', default=HYPIXEL_FORUMS_URL, show_default=True,
              help='Forum index to start from')
@click.option('--timeout', default=REQUEST_TIMEOUT, show_default=True, type=float,
              help='Per-request timeout in seconds')
@click.option('-v', '--verbose', is_flag=True, help='Enable debug logging')
def show(root_url, timeout, verbose):
    """Print the latest patch notes."""
    _setup_logging(verbose)
    result = _fetch(root_url, timeout)
    click.echo(render_result(result))
    if result.is_fallback:
        raise SystemExit(1)


@main.command()
@click.option('--root-url', default=HYPIXEL_FORUMS_URL, show_default=True,
              help='Forum index to start from')
@click.option('--timeout', default=REQUEST_TIMEOUT, show_default=True, type=float,
              help='Per-request timeout in seconds')
@click.option('--output', '-o', type=click.Path(dir_okay=False, path_type=Path),
              help='Write JSON here instead of stdout')
@click.option('-v', '--verbose', is_flag=True, help='Enable debug logging')
def export(root_url, timeout, output: Optional[Path], verbose):
    """Export the latest patch notes as JSON."""
    _setup_logging(verbose)
    result = _fetch(root_url, timeout)
    data = orjson.dumps(result.to_dict(), option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS)

    if output is None:
        click.echo(data.decode("utf-8"))
    else:
        output.write_bytes(data)
        click.echo(f"Wrote {len(result.blocks)} blocks to {output}")
    if result.is_fallback:
        raise SystemExit(1)


@main.command()
@click.argument('url')
@click.option('--output', '-o', required=True,
              type=click.Path(dir_okay=False, path_type=Path),
              help='File to write the image bytes to')
@click.option('--timeout', default=REQUEST_TIMEOUT, show_default=True, type=float,
              help='Request timeout in seconds')
@click.option('-v', '--verbose', is_flag=True, help='Enable debug logging')
def image(url, output: Path, timeout, verbose):
    """Download one image referenced by the patch notes."""
    _setup_logging(verbose)
    data = asyncio.run(_download_image(url, timeout))
    if data is None:
        raise click.ClickException(f"Could not download {url}")
    output.write_bytes(data)
    click.echo(f"Saved {len(data)} bytes to {output}")


async def _download_image(url: str, timeout: float) -> Optional[bytes]:
    async with PageFetcher(timeout=timeout) as fetcher:
        return await fetcher.fetch_image(url)


if __name__ == '__main__':
    main()
