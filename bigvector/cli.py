"""
Command-line interface for bigvector.

Builds a corpus from a directory of text files or from a MediaWiki dump and
prints the document, word and word-to-document rankings.
"""

from pathlib import Path
from typing import List, Optional

import click
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, MofNCompleteColumn, TimeElapsedColumn

from . import __version__
from .config import ConfigManager, VectorConfig, create_default_config_file
from .engine.corpus import CorpusModel, build_corpus
from .engine.parallel import ParallelDriver
from .engine.ranking import (
    rank_documents_by_similarity,
    rank_documents_by_word,
    top_words_by_similarity,
)
from .errors import BigVectorError, ConfigurationError, CorpusBuildError, DocumentReadError, MissingKeyError
from .reporting import RankingReporter
from .sources import DocumentSource, iter_wiki_articles, list_directory
from .utils.logging_setup import setup_logging, log_operation

console = Console(stderr=True)

EXIT_USAGE_ERROR = 1
EXIT_INPUT_ERROR = 2


def _engine_options(func):
    """Options shared by the corpus-building commands."""
    options = [
        click.option("--query-document", help="Identifier of the query document"),
        click.option("--query-word", help="Word whose neighbours are listed"),
        click.option("--top-k", type=int, help="Number of words in the word match"),
        click.option("--dimension", type=int, help="Vector dimensionality"),
        click.option("--window-size", type=int, help="Context window size (odd)"),
        click.option("--workers", "max_workers", type=int, help="Number of parallel workers"),
        click.option("--threads", "use_threads", is_flag=True, help="Use threads instead of processes"),
        click.option("--on-error", type=click.Choice(["abort", "skip"]), help="Policy for unreadable documents"),
        click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
                     show_default=True, help="Output format"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _load_config(ctx: click.Context, **overrides) -> VectorConfig:
    use_threads = overrides.pop("use_threads", False)
    if use_threads:
        overrides["use_processes"] = False
    try:
        return ConfigManager(ctx.obj["config_path"]).update(**overrides)
    except ConfigurationError as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        ctx.exit(EXIT_USAGE_ERROR)


def _build(ctx: click.Context, sources: List[DocumentSource], config: VectorConfig) -> CorpusModel:
    """Build the corpus with a progress bar."""
    logger = ctx.obj["logger"]
    log_operation(logger, "build_corpus", documents=len(sources))

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Processing documents", total=len(sources))
        driver = ParallelDriver(
            dim=config.dimension,
            window_size=config.window_size,
            max_workers=config.max_workers,
            use_processes=config.use_processes,
            encoding=config.encoding,
            progress_callback=lambda result: progress.advance(task),
        )
        try:
            return build_corpus(sources, config, driver=driver)
        except CorpusBuildError as e:
            console.print(f"[red]✗ {e.message}[/red]")
            for failure in e.failures:
                console.print(f"  • {failure.task_id}: {failure.error}")
            ctx.exit(EXIT_INPUT_ERROR)


def _report(corpus: CorpusModel, config: VectorConfig, output_format: str,
            query_document: Optional[str]) -> int:
    """Print the three rankings; returns the exit status."""
    reporter = RankingReporter(Console(), labels=config.labels, output_format=output_format)
    reporter.summary(corpus.get_stats())
    status = 0

    sections = []
    if query_document is not None:
        sections.append(("document match", reporter.documents,
                         lambda: rank_documents_by_similarity(corpus, query_document)))
    sections.extend([
        ("word match", reporter.words,
         lambda: top_words_by_similarity(corpus, config.query_word, config.top_k)),
        ("word to document match", reporter.documents,
         lambda: rank_documents_by_word(corpus, config.query_word)),
    ])

    for title, emit, query in sections:
        try:
            emit(title, query())
        except MissingKeyError as e:
            console.print(f"[red]✗ {title}: {e}[/red]")
            status = EXIT_USAGE_ERROR

    reporter.flush()
    return status


@click.group()
@click.version_option(__version__, prog_name="bigvector")
@click.option("--config", "-c", "config_path", type=click.Path(dir_okay=False), help="Path to configuration file")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--log-dir", type=click.Path(file_okay=False), help="Also write JSON logs to this directory")
@click.pass_context
def cli(ctx, config_path, verbose, log_dir):
    """Random-indexing document and word vectors."""
    logger = setup_logging(
        "bigvector",
        level="DEBUG" if verbose else "WARNING",
        log_dir=Path(log_dir) if log_dir else None,
        file=log_dir is not None,
    )
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config_path) if config_path else None
    ctx.obj["logger"] = logger


@cli.command(name="match")
@click.option("--data", "data_dir", type=click.Path(file_okay=False), help="Directory of documents")
@_engine_options
@click.pass_context
def match(ctx, data_dir, output_format, **overrides):
    """Rank the documents of a directory and the words of the corpus."""
    config = _load_config(ctx, data_dir=data_dir, **overrides)
    try:
        sources = list_directory(config.data_dir)
    except DocumentReadError as e:
        console.print(f"[red]✗ {e}[/red]")
        ctx.exit(EXIT_INPUT_ERROR)

    corpus = _build(ctx, sources, config)
    ctx.exit(_report(corpus, config, output_format, config.query_document))


@cli.command(name="wiki")
@click.argument("dump", type=click.Path(exists=True, dir_okay=False))
@click.option("--limit", type=int, help="Only read the first N articles")
@_engine_options
@click.pass_context
def wiki(ctx, dump, limit, output_format, **overrides):
    """
    Build vectors for the articles of a MediaWiki XML dump.

    Every article text is held in memory until the corpus is built; use
    --limit to bound the cost on large dumps.
    """
    config = _load_config(ctx, **overrides)
    try:
        sources = list(iter_wiki_articles(dump, limit))
    except DocumentReadError as e:
        console.print(f"[red]✗ {e}[/red]")
        ctx.exit(EXIT_INPUT_ERROR)

    corpus = _build(ctx, sources, config)
    query_document = overrides.get("query_document")
    ctx.exit(_report(corpus, config, output_format, query_document))


@cli.group(name="config")
def config_group():
    """Manage configuration."""
    pass


@config_group.command(name="init")
@click.option("--path", type=click.Path(dir_okay=False), default=ConfigManager.DEFAULT_CONFIG_FILE,
              show_default=True, help="Path for config file")
@click.option("--force", is_flag=True, help="Overwrite an existing file")
@click.pass_context
def config_init(ctx, path, force):
    """Write a default configuration file."""
    config_path = Path(path)
    if config_path.exists() and not force:
        if not click.confirm(f"Config file {path} already exists. Overwrite?"):
            console.print("[yellow]Aborted[/yellow]")
            return

    if create_default_config_file(config_path):
        console.print(f"[green]✓ Created config file at {path}[/green]")
    else:
        console.print("[red]✗ Failed to create config file[/red]")
        ctx.exit(EXIT_INPUT_ERROR)


@config_group.command(name="show")
@click.pass_context
def config_show(ctx):
    """Display the effective configuration."""
    manager = ConfigManager(ctx.obj["config_path"])
    try:
        manager.display()
    except BigVectorError as e:
        console.print(f"[red]✗ {e}[/red]")
        ctx.exit(EXIT_USAGE_ERROR)


def main():
    """Console script entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
