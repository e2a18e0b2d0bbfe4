"""
Resolve Command - Episode source resolution from the command line.

This module implements the ``resolve`` and ``variants`` commands. Titles
come from options or from an AniList media JSON file; the search strings
are generated from them and handed to the plugin manager.
"""

import asyncio
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from rich.markup import escape
from rich.table import Table

from anisource.cli.context import get_config_manager, is_debug
from anisource.core import PluginManager
from anisource.core.exceptions import InvalidRequestError
from anisource.core.models import (
    CanonicalTitles,
    ResolutionRequest,
    ResolutionResult,
    TitleVariant,
)
from anisource.core.titles import generate_variants, titles_from_media
from anisource.ui import display_warning, get_console, handle_error, status_spinner


# Exit code for a well-formed request that found no playable source
EXIT_NOT_FOUND = 2


def _load_media(media_file: Path) -> Dict[str, Any]:
    """Read an AniList media object, bare or wrapped in ``{"data": {"Media": ...}}``."""
    try:
        with open(media_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise InvalidRequestError(f"Cannot read media file: {e}", "media", str(media_file))

    if isinstance(data, dict) and isinstance(data.get("data"), dict):
        data = data["data"].get("Media") or data["data"].get("media") or data
    if not isinstance(data, dict):
        raise InvalidRequestError("Media file must contain a JSON object", "media", str(media_file))
    return data


def build_titles(
    romaji: Optional[str],
    english: Optional[str],
    synonyms: Optional[List[str]],
    media_file: Optional[Path],
) -> CanonicalTitles:
    """
    Combine title options with an optional media file.

    Explicit options override the media file's titles; synonyms from both
    are kept, media synonyms first.
    """
    base = titles_from_media(_load_media(media_file)) if media_file else CanonicalTitles()

    return CanonicalTitles(
        romaji=romaji if romaji is not None else base.romaji,
        english=english if english is not None else base.english,
        synonyms=list(base.synonyms) + list(synonyms or []),
    )


def _variants_table(variants: List[TitleVariant]) -> Table:
    table = Table(title="Search Variants", show_header=True, header_style="table.header")
    table.add_column("#", justify="right", style="muted")
    table.add_column("Search String", style="primary")
    table.add_column("From", style="accent")

    for position, variant in enumerate(variants, start=1):
        table.add_row(str(position), escape(variant.text), str(variant.source or ""))

    return table


def _sources_table(result: ResolutionResult, episode: int) -> Table:
    table = Table(
        title=f"Episode {episode} via {result.provider}",
        show_header=True,
        header_style="table.header",
    )
    table.add_column("#", justify="right", style="muted")
    table.add_column("Quality", style="accent")
    table.add_column("Type")
    table.add_column("URL", style="link", overflow="fold")

    for position, source in enumerate(result.sources, start=1):
        table.add_row(
            str(position),
            source.quality or "unknown",
            "HLS" if source.is_playlist else "file",
            escape(source.url),
        )

    return table


def _attempts_table(result: ResolutionResult) -> Table:
    table = Table(title="Attempt Trail", show_header=True, header_style="table.header")
    table.add_column("Provider", style="muted")
    table.add_column("Query", style="primary")
    table.add_column("Outcome")
    table.add_column("Detail", style="muted", overflow="fold")

    for attempt in result.attempts:
        outcome_style = "success" if attempt.outcome == "resolved" else "warning"
        table.add_row(
            attempt.provider or "",
            escape(attempt.query),
            f"[{outcome_style}]{attempt.outcome}[/{outcome_style}]",
            escape(attempt.detail or ""),
        )

    return table


async def _resolve(
    request: ResolutionRequest,
    source: Optional[str],
    timeout: float,
    dub_suffix: str,
) -> ResolutionResult:
    plugin_manager = PluginManager(get_config_manager())
    try:
        return await plugin_manager.resolve_episode(
            request,
            source=source,
            timeout=timeout,
            dub_suffix=dub_suffix,
        )
    finally:
        await plugin_manager.cleanup()


def resolve_episode(
    episode: int = typer.Argument(..., help="Episode number (1-based)"),
    romaji: Optional[str] = typer.Option(None, "--romaji", "-r", help="Romanized title"),
    english: Optional[str] = typer.Option(None, "--english", "-e", help="English title"),
    synonym: Optional[List[str]] = typer.Option(
        None, "--synonym", "-s", help="Alternative title (repeatable)"
    ),
    media: Optional[Path] = typer.Option(
        None, "--media", "-m", help="AniList media JSON file to read titles from",
        exists=True, dir_okay=False,
    ),
    dub: Optional[bool] = typer.Option(
        None, "--dub/--sub", help="Look for the dubbed or subbed release"
    ),
    index: Optional[int] = typer.Option(
        None, "--index", "-i", help="Search result to pick when not dubbed"
    ),
    source: Optional[str] = typer.Option(
        None, "--source", help="Only use this provider plugin"
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", "-t", help="Seconds allowed for each provider call"
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Print the result as JSON"
    ),
) -> None:
    """
    ▶️  Resolve playable sources for an episode.

    Examples:

        anisource resolve 5 --romaji "Shingeki no Kyojin" --english "Attack on Titan"

        anisource resolve 1 --media media.json --dub --json
    """
    console = get_console()

    try:
        resolver_settings = get_config_manager().settings.resolver
        titles = build_titles(romaji, english, synonym, media)
        request = ResolutionRequest(
            title_variants=generate_variants(titles),
            episode_number=episode,
            dubbed=resolver_settings.dubbed if dub is None else dub,
            index=resolver_settings.index if index is None else index,
        )
        call_timeout = timeout if timeout is not None else resolver_settings.provider_timeout

        if json_output:
            result = asyncio.run(_resolve(request, source, call_timeout, resolver_settings.dub_suffix))
        else:
            with status_spinner(f"Resolving episode {episode}..."):
                result = asyncio.run(_resolve(request, source, call_timeout, resolver_settings.dub_suffix))

    except KeyboardInterrupt:
        console.print("\n[yellow]Resolution cancelled[/yellow]")
        raise typer.Exit(130)
    except Exception as e:
        handle_error(e, f"Failed to resolve episode {episode}", show_traceback=is_debug())
        raise typer.Exit(1)

    if json_output:
        typer.echo(json.dumps(result.model_dump(mode="json"), indent=2))
    elif result.found:
        console.print(_sources_table(result, episode))
        console.print(
            f"[muted]Matched[/muted] [primary]{escape(str(result.candidate))}[/primary] "
            f"[muted]using[/muted] '{escape(str(result.variant))}'"
        )

    if is_debug() and not json_output and result.attempts:
        console.print(_attempts_table(result))

    if not result.found:
        if not json_output:
            display_warning(
                f"No playable source for episode {episode} "
                f"after {len(result.attempts)} attempts.",
                title="🔍 Not Found",
            )
        raise typer.Exit(EXIT_NOT_FOUND)


def show_variants(
    romaji: Optional[str] = typer.Option(None, "--romaji", "-r", help="Romanized title"),
    english: Optional[str] = typer.Option(None, "--english", "-e", help="English title"),
    synonym: Optional[List[str]] = typer.Option(
        None, "--synonym", "-s", help="Alternative title (repeatable)"
    ),
    media: Optional[Path] = typer.Option(
        None, "--media", "-m", help="AniList media JSON file to read titles from",
        exists=True, dir_okay=False,
    ),
) -> None:
    """
    🔤 Show the search strings generated for a title.
    """
    try:
        variants = generate_variants(build_titles(romaji, english, synonym, media))
    except Exception as e:
        handle_error(e, "Failed to generate search variants")
        raise typer.Exit(1)

    if not variants:
        display_warning("No titles given; pass --romaji, --english, --synonym or --media.")
        return

    get_console().print(_variants_table(variants))


__all__ = ["resolve_episode", "show_variants", "build_titles", "EXIT_NOT_FOUND"]
