"""
Command-line interface for playlist-mangler.

This module implements the CLI using Click, with rich-click for colored
help output.

Commands:
    plm info <playlist>                         Show title, dialect and entries
    plm dedup <playlist> [-o <out>]             Remove duplicate entries
    plm merge <a> <b> ... -o <out> [--dedup]    Concatenate playlists
    plm convert <playlist> --to <fmt> -o <out>  Rewrite in another dialect

Options:
    --config <path>                             Use this playlist_mangler.yaml
    --format <name>                             Skip dialect detection on input
    -v / --verbose                              Debug output on the console

Usage:
    plm info road_trip.m3u8
    plm dedup road_trip.m3u8 -o road_trip.clean.m3u8
    plm merge morning.m3u8 evening.m3u8 -o day.m3u8 --dedup
    plm convert files.txt --to extm3u -o files.m3u8

Exit Codes:
    0   success
    1   a playlist could not be read, parsed or written, or bad configuration
    2   usage error (click)
"""

import sys
from pathlib import Path
from typing import Optional

import rich_click as click
from tqdm import tqdm

# Configure rich-click for better help formatting
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = ""
click.rich_click.MAX_WIDTH = 100

from playlist_mangler import __version__
from playlist_mangler.core import (
    Config,
    FormatError,
    PlaylistManglerError,
    get_logger,
    load_config,
    log_format_failure,
    setup_logging,
    shutdown_logging,
)
from playlist_mangler.formats import FORMATS, get_format, open_playlist
from playlist_mangler.playlist import Playlist, entry_title
from playlist_mangler.utils import format_duration

logger = get_logger(__name__)


FORMAT_CHOICE = click.Choice(sorted(FORMATS), case_sensitive=False)


def _fail(message: str) -> None:
    """Print an error and exit with status 1."""
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _config(ctx: click.Context) -> Config:
    return ctx.obj["config"]


def _open(ctx: click.Context, reference: str, format_name: Optional[str]) -> Playlist:
    """
    Open one playlist, logging parse failures to the failures report.

    Raises:
        PlaylistManglerError: Passed on to the caller after logging.
    """
    try:
        return open_playlist(reference, config=_config(ctx), format_name=format_name)
    except FormatError as e:
        log_format_failure(logger, reference, e.reason, e.line_number, e.line)
        raise


@click.group()
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    metavar="<config.yaml>",
    help="Configuration file (default: ./playlist_mangler.yaml if present)"
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Show debug messages on the console"
)
@click.version_option(__version__, prog_name="playlist-mangler")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], verbose: bool) -> None:
    """
    playlist-mangler: read, reshape and write playlist files.

    Works with plain file listings, M3U and extended M3U. The dialect of
    each input is detected from its header and extension unless --format
    is given.

    \b
    EXAMPLES:
        plm info road_trip.m3u8
        plm dedup road_trip.m3u8
        plm merge a.m3u8 b.m3u8 -o both.m3u8 --dedup
        plm convert files.txt --to extm3u -o files.m3u8
    """
    try:
        config = load_config(config_path)
    except PlaylistManglerError as e:
        _fail(f"Configuration error: {e.message}")

    level = "DEBUG" if verbose else config.logging.level
    setup_logging(config.logging.directory, level)
    ctx.call_on_close(shutdown_logging)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@cli.command()
@click.argument("playlist", metavar="<playlist>")
@click.option("--format", "format_name", type=FORMAT_CHOICE, default=None,
              help="Dialect of the input (default: detect)")
@click.pass_context
def info(ctx: click.Context, playlist: str, format_name: Optional[str]) -> None:
    """Show a playlist's title, dialect and entries."""
    try:
        loaded = _open(ctx, playlist, format_name)
    except PlaylistManglerError as e:
        _fail(e.message)

    meta = loaded.get_metadata()
    click.echo(f"Title:    {meta.title() or '-'}")
    click.echo(f"Location: {meta.filename()}")
    click.echo(f"Format:   {loaded.format.name}")
    click.echo(f"Entries:  {loaded.count()}")

    for position, entry in enumerate(loaded, start=1):
        metadata = entry.metadata()
        length = metadata.length() if metadata is not None else None
        duration = f" [{format_duration(length)}]" if length is not None else ""
        click.echo(f"{position:>5}. {entry_title(entry)}{duration}  ->  {entry.filename()}")


@cli.command()
@click.argument("playlist", metavar="<playlist>")
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), default=None,
              metavar="<out>", help="Write the result here instead of in place")
@click.option("--format", "format_name", type=FORMAT_CHOICE, default=None,
              help="Dialect of the input (default: detect)")
@click.pass_context
def dedup(
    ctx: click.Context,
    playlist: str,
    output: Optional[Path],
    format_name: Optional[str]
) -> None:
    """Remove duplicate entries, keeping the first of each."""
    try:
        loaded = _open(ctx, playlist, format_name)
        removed = loaded.dedup_entries()
        written = loaded.save_to(output) if output is not None else loaded.save()
    except PlaylistManglerError as e:
        _fail(e.message)

    logger.info(f"Removed {removed} duplicate(s), {loaded.count()} entries left")
    click.echo(f"{removed} removed -> {written}")


@cli.command()
@click.argument("playlists", nargs=-1, required=True, metavar="<playlist>...")
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), required=True,
              metavar="<out>", help="Where to write the merged playlist")
@click.option("--to", "target", type=FORMAT_CHOICE, default=None,
              help="Dialect of the result (default: dialect of the first input)")
@click.option("--dedup", "do_dedup", is_flag=True, help="Remove duplicates after merging")
@click.option("--skip-invalid", is_flag=True,
              help="Skip inputs that cannot be read or parsed instead of stopping")
@click.pass_context
def merge(
    ctx: click.Context,
    playlists: tuple[str, ...],
    output: Path,
    target: Optional[str],
    do_dedup: bool,
    skip_invalid: bool
) -> None:
    """
    Concatenate playlists in the order given.

    The result keeps the title of the first playlist and is written to
    <out>. Inputs in other dialects are converted first.
    """
    merged: Optional[Playlist] = None
    skipped = 0

    for reference in tqdm(playlists, desc="Merging", unit="playlist", disable=len(playlists) < 2):
        try:
            loaded = _open(ctx, reference, None)
        except PlaylistManglerError as e:
            if not skip_invalid:
                _fail(e.message)
            logger.warning(f"Skipping {reference}: {e.message}")
            skipped += 1
            continue

        if merged is None:
            fmt = get_format(target, _config(ctx)) if target else loaded.format
            merged = loaded if loaded.format.name == fmt.name else loaded.convert(fmt)
            continue

        if loaded.format.name != merged.format.name:
            loaded = loaded.convert(merged.format)
        merged = merged.merge(loaded)

    if merged is None:
        _fail("No playlist could be read")

    removed = merged.dedup_entries() if do_dedup else 0
    try:
        written = merged.save(output)
    except PlaylistManglerError as e:
        _fail(e.message)

    logger.info(
        f"Merged {len(playlists) - skipped} playlist(s) into {written} "
        f"({merged.count()} entries, {removed} duplicate(s) removed)"
    )
    click.echo(f"{merged.count()} entries -> {written}")


@cli.command()
@click.argument("playlist", metavar="<playlist>")
@click.option("--to", "target", type=FORMAT_CHOICE, required=True,
              help="Dialect to convert to")
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), required=True,
              metavar="<out>", help="Where to write the converted playlist")
@click.option("--format", "format_name", type=FORMAT_CHOICE, default=None,
              help="Dialect of the input (default: detect)")
@click.pass_context
def convert(
    ctx: click.Context,
    playlist: str,
    target: str,
    output: Path,
    format_name: Optional[str]
) -> None:
    """Rewrite a playlist in another dialect."""
    try:
        loaded = _open(ctx, playlist, format_name)
        converted = loaded.convert(get_format(target, _config(ctx)))
        written = converted.save(output)
    except PlaylistManglerError as e:
        _fail(e.message)

    click.echo(f"{loaded.format.name} -> {converted.format.name}: {written}")


def main() -> None:
    """
    Entry point for the CLI.

    This function is called when running `plm` from the command line.
    """
    cli()


if __name__ == "__main__":
    main()
