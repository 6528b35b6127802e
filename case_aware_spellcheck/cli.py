"""Command-line interface for the case-aware spellcheck enhancer."""

import asyncio
import logging
from collections.abc import Coroutine
from pathlib import Path
from typing import Any, TypeVar

import click
from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress
from rich.table import Table

from case_aware_spellcheck.cache_manager import CacheManager
from case_aware_spellcheck.config import Settings, get_settings
from case_aware_spellcheck.dictionary_client import SUPPORTED_LANGUAGES, HunspellDictionaryClient
from case_aware_spellcheck.exceptions import OracleLoadError, SpellcheckError
from case_aware_spellcheck.session import SpellcheckSession
from case_aware_spellcheck.spell_engine import (
    ProgressCallback,
    ScanReport,
    SpellDecisionEngine,
    WordStatus,
)
from case_aware_spellcheck.tokenizer import WORD_PATTERN
from case_aware_spellcheck.watcher import DocumentWatcher

T = TypeVar("T")

console = Console(soft_wrap=True)


def configure_verbose_logging() -> None:
    """Configure verbose debug logging."""
    logger.remove()
    logger.add(
        lambda msg: console.print(msg, end="", markup=False, highlight=False),
        level="DEBUG",
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )
    console.print("[dim]Debug logging enabled[/dim]")


def configure_quiet_logging() -> None:
    """Configure quiet logging - only warnings and errors reach the console."""
    logger.remove()
    logger.add(
        lambda msg: console.print(msg, end="", markup=False, highlight=False),
        level="WARNING",
        format="<level>{level: <8}</level> | {message}",
    )

    # Suppress noisy library loggers
    logging.getLogger("requests").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests_cache").setLevel(logging.WARNING)


def load_settings_or_abort() -> Settings:
    """Load settings from the environment / .env file or abort with the validation error."""
    try:
        return get_settings()
    except ValidationError as e:
        console.print("[bold red]Error:[/bold red] Invalid configuration")
        console.print(f"\nDetails: {escape(str(e))}")
        raise click.Abort from e


def prepare(ctx: click.Context) -> Settings:
    """Load settings and configure logging for a command."""
    settings = load_settings_or_abort()
    if ctx.obj.get("verbose") or settings.debug_mode:
        configure_verbose_logging()
    else:
        configure_quiet_logging()
    return settings


def build_dictionary_client(settings: Settings) -> HunspellDictionaryClient:
    cache_manager = CacheManager(settings.dictionaries_dir, settings.http_cache_name)
    return HunspellDictionaryClient(cache_manager.session, settings.dictionaries_dir)


def load_oracles(session: SpellcheckSession, settings: Settings) -> None:
    """Load the selected language dictionaries, reporting the ones that failed."""
    failed = session.load_selected_dictionaries(build_dictionary_client(settings))
    for language in failed:
        console.print(f"[yellow]Warning:[/yellow] Failed to load {language} dictionary")


def run_or_abort(coroutine: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine, turning configuration and dictionary errors into an abort."""
    try:
        return asyncio.run(coroutine)
    except SpellcheckError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise click.Abort from e
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"[bold red]Error:[/bold red] Failed to read document: {escape(str(e))}")
        raise click.Abort from e


def print_report(report: ScanReport) -> None:
    table = Table(title="Scan Summary")
    table.add_column("Result")
    table.add_column("Count", justify="right")
    table.add_row("[blue]Words scanned[/blue]", str(report.total))
    table.add_row("[green]Known[/green]", str(report.known))
    table.add_row("[green]Correct[/green]", str(report.correct))
    table.add_row("[cyan]Learned[/cyan]", str(len(report.learned)))
    table.add_row("[yellow]Misspelled[/yellow]", str(len(report.misspelled)))
    table.add_row("[red]Failed[/red]", str(len(report.failed)))
    console.print(table)

    if report.learned:
        console.print(f"\nLearned: [cyan]{', '.join(report.learned)}[/cyan]")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Learn correctly spelled compound words (camelCase, snake_case, ...)
    into the system spellcheck dictionary."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


def abort_if_not_allowed(watcher: DocumentWatcher, document: Path) -> None:
    if not watcher.is_allowed(document):
        console.print(
            f"[bold red]Error:[/bold red] File extension of {document} is not allowed "
            f"(allowed: {', '.join(watcher.settings.allowed_extensions)})"
        )
        raise click.Abort


async def scan_document(
    session: SpellcheckSession,
    watcher: DocumentWatcher,
    document: Path,
    progress: ProgressCallback | None = None,
) -> ScanReport:
    await session.open()
    try:
        return await watcher.scan_file(document, progress=progress)
    finally:
        session.close()


async def watch_document(
    session: SpellcheckSession, watcher: DocumentWatcher, document: Path, cycles: int | None
) -> list[ScanReport]:
    await session.open()
    try:
        return await watcher.watch(document, cycles=cycles)
    finally:
        session.close()


@cli.command()
@click.argument(
    "document",
    type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--progress/--no-progress",
    default=None,
    help="Show a progress bar (default: PROGRESS_BAR_ENABLED setting)",
)
@click.pass_context
def scan(ctx: click.Context, document: Path, progress: bool | None) -> None:
    """Scan DOCUMENT once and learn compound words found in it."""
    settings = prepare(ctx)
    session = SpellcheckSession(settings)
    watcher = DocumentWatcher(SpellDecisionEngine(session), settings)
    abort_if_not_allowed(watcher, document)

    load_oracles(session, settings)

    show_progress = settings.progress_bar_enabled if progress is None else progress
    if show_progress:
        with Progress(console=console) as progress_bar:
            task = progress_bar.add_task("Spellchecking...", total=None)

            def on_progress(done: int, total: int) -> None:
                progress_bar.update(task, completed=done, total=total)

            report = run_or_abort(scan_document(session, watcher, document, on_progress))
    else:
        report = run_or_abort(scan_document(session, watcher, document))

    print_report(report)


@cli.command()
@click.argument(
    "document",
    type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path),
)
@click.option("--cycles", type=click.IntRange(min=1), default=None, help="Stop after N scans")
@click.pass_context
def watch(ctx: click.Context, document: Path, cycles: int | None) -> None:
    """Rescan DOCUMENT every REFRESH_INTERVAL_SECONDS until interrupted."""
    settings = prepare(ctx)
    session = SpellcheckSession(settings)
    watcher = DocumentWatcher(SpellDecisionEngine(session), settings)
    abort_if_not_allowed(watcher, document)

    load_oracles(session, settings)

    console.print(
        f"Watching [cyan]{document}[/cyan] every {settings.refresh_interval_seconds}s "
        "(Ctrl+C to stop)"
    )
    try:
        reports = run_or_abort(watch_document(session, watcher, document, cycles))
    except KeyboardInterrupt:
        console.print("\n[dim]Stopped[/dim]")
        return

    learned = [word for report in reports for word in report.learned]
    console.print(f"\nScans completed: [blue]{len(reports)}[/blue]")
    console.print(f"Words learned: [cyan]{len(learned)}[/cyan]")


@cli.command()
@click.argument("word")
@click.pass_context
def check(ctx: click.Context, word: str) -> None:
    """Show how WORD would be classified."""
    settings = prepare(ctx)
    session = SpellcheckSession(settings)
    load_oracles(session, settings)
    try:
        asyncio.run(session.open())
    except SpellcheckError as e:
        console.print(f"[yellow]Warning:[/yellow] User dictionary not loaded: {escape(str(e))}")

    engine = SpellDecisionEngine(session)
    status = engine.classify(word)
    console.print(f"{word}: [bold]{status.value}[/bold]")

    if status is WordStatus.LEARNED:
        style, parts = engine.find_learnable_split(word)
        console.print(f"Split as {style.value}: {' + '.join(parts)}")


async def add_to_dictionary(session: SpellcheckSession, word: str) -> bool:
    await session.open()
    return await SpellDecisionEngine(session).add_word(word)


@cli.command()
@click.argument("word")
@click.pass_context
def add(ctx: click.Context, word: str) -> None:
    """Add WORD to the user dictionary."""
    settings = prepare(ctx)
    word = word.strip()
    if not WORD_PATTERN.fullmatch(word):
        console.print(f"[bold red]Error:[/bold red] Not a valid dictionary word: '{word}'")
        raise click.Abort

    session = SpellcheckSession(settings)
    added = run_or_abort(add_to_dictionary(session, word))

    if added:
        console.print(f"[green]✓[/green] Added [cyan]{word}[/cyan] to {session.dictionary.path}")
    else:
        console.print(f"[yellow]{word}[/yellow] is already in the dictionary")


@cli.command()
@click.pass_context
def fetch(ctx: click.Context) -> None:
    """Download the selected spellcheck dictionaries."""
    settings = prepare(ctx)
    client = build_dictionary_client(settings)

    failed = 0
    for language in settings.selected_dictionaries:
        name = SUPPORTED_LANGUAGES.get(language, language)
        try:
            client.load_oracle(language)
        except OracleLoadError as e:
            console.print(f"  [red]✗ {name}:[/red] {escape(str(e))}")
            failed += 1
        else:
            console.print(f"  [green]✓ {name}[/green]")

    if failed:
        raise click.Abort


@cli.command("bust-cache")
@click.argument("language", required=False)
@click.option("--all", "clear_all", is_flag=True, help="Remove every cached dictionary")
@click.pass_context
def bust_cache(ctx: click.Context, language: str | None, clear_all: bool) -> None:
    """Remove cached dictionary downloads for LANGUAGE (or all with --all)."""
    settings = prepare(ctx)
    cache_manager = CacheManager(settings.dictionaries_dir, settings.http_cache_name)

    if clear_all:
        cache_manager.clear_all_cache()
        console.print("[green]✓[/green] Cleared all cached dictionaries")
        return

    if not language:
        console.print("[bold red]Error:[/bold red] Provide a LANGUAGE or --all")
        raise click.Abort

    try:
        deleted = cache_manager.bust_language_cache(language)
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise click.Abort from e

    console.print(f"Deleted [blue]{deleted}[/blue] cache entries for '{language}'")


if __name__ == "__main__":
    cli()
