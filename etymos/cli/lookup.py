"""CLI for etymology lookups.

Commands:
- lookup: Query the live collaborators for a word
- extract: Run the pipeline over local documents only
- stats: Look words up and report the cross-reference index
"""

import asyncio
from pathlib import Path
from typing import Optional

import click
import orjson
from rich.console import Console
from rich.table import Table

from etymos.config import get_settings, load_policy
from etymos.core.types import DictionaryEntry, EtymologyResult, ScrapedPage, SourceDocuments
from etymos.errors import EtymosError
from etymos.services import EtymologyPipeline, EtymologyService
from etymos.sources import DictionaryClient, EtymonlineClient, WiktionaryClient
from etymos.storage import CrossReferenceIndex, HTMLCleaner


console = Console()


def build_pipeline(index: CrossReferenceIndex) -> EtymologyPipeline:
    settings = get_settings()
    return EtymologyPipeline(index, settings=settings, policy=load_policy(settings))


def build_service(index: CrossReferenceIndex) -> EtymologyService:
    settings = get_settings()
    return EtymologyService(
        build_pipeline(index),
        wiki=WiktionaryClient(settings),
        scraper=EtymonlineClient(settings),
        dictionary=DictionaryClient(settings)
    )


def render_result(result: EtymologyResult, as_json: bool) -> None:
    if as_json:
        click.echo(orjson.dumps(result.model_dump(mode="json"), option=orjson.OPT_INDENT_2).decode())
        return

    word = result.source_word
    console.print(f"\n[bold]{word.text}[/bold] ({word.language})")
    if word.part_of_speech or word.definition:
        console.print(f"  [dim]{word.part_of_speech or ''}[/dim] {word.definition or ''}")

    if not result.connections:
        console.print("[yellow]No connections found[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Word")
    table.add_column("Lang")
    table.add_column("Type", style="cyan")
    table.add_column("Conf", justify="right")
    table.add_column("Source", style="dim")
    table.add_column("Shared root")

    for connection in result.connections:
        relationship = connection.relationship
        table.add_row(
            connection.word.text,
            connection.word.language,
            relationship.type,
            f"{relationship.confidence:.2f}",
            relationship.source,
            relationship.shared_root or ""
        )

    console.print(table)


@click.group()
def cli():
    """Etymos etymology lookup"""
    pass


@cli.command()
@click.argument('word')
@click.option('--language', '-l', default='en', help='Language code of WORD')
@click.option('--json', 'as_json', is_flag=True, help='Print the result as JSON')
def lookup(word, language, as_json):
    """Look WORD up across the live sources."""

    async def _lookup():
        with CrossReferenceIndex() as index:
            return await build_service(index).find_connections(word, language)

    try:
        result = asyncio.run(_lookup())
    except EtymosError as e:
        raise click.ClickException(e.message)

    render_result(result, as_json)


@cli.command()
@click.argument('word')
@click.option('--language', '-l', default='en', help='Language code of WORD')
@click.option('--wiki', 'wiki_file', type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='File with wiki markup for WORD')
@click.option('--html', 'html_file', type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='File with a dictionary-style HTML page for WORD')
@click.option('--origin', default=None, help='Plain origin sentence for WORD')
@click.option('--json', 'as_json', is_flag=True, help='Print the result as JSON')
def extract(word, language, wiki_file: Optional[Path], html_file: Optional[Path], origin, as_json):
    """Run the pipeline for WORD over local documents, without network access."""
    page = None
    if html_file is not None:
        html = HTMLCleaner().clean(html_file.read_text(encoding="utf-8"))
        page = ScrapedPage(html=html, url=html_file.resolve().as_uri())

    documents = SourceDocuments(
        wiki_markup=wiki_file.read_text(encoding="utf-8") if wiki_file else None,
        page=page,
        dictionary=DictionaryEntry(word=word, origin=origin) if origin else None
    )

    with CrossReferenceIndex() as index:
        result = build_pipeline(index).run(word, language, documents)

    render_result(result, as_json)


@cli.command()
@click.argument('words', nargs=-1)
@click.option('--language', '-l', default='en', help='Language code of WORDS')
def stats(words, language):
    """Look WORDS up in turn, then report the cross-reference index."""

    async def _stats():
        with CrossReferenceIndex() as index:
            service = build_service(index)
            for word in words:
                result = await service.find_connections(word, language)
                console.print(f"  {result.source_word.text}: {len(result.connections)} connections")
            return service.index_stats()

    try:
        summary = asyncio.run(_stats())
    except EtymosError as e:
        raise click.ClickException(e.message)

    console.print("\n[bold]Cross-Reference Index[/bold]")
    console.print(f"Root keys: {summary.root_keys}")
    console.print(f"Entries: {summary.total_entries}")
    console.print(f"Source words: {summary.source_words}")
    console.print(f"Cognate groups: {summary.cognate_groups}")
    console.print(f"Shortened-form keys: {summary.shortened_keys}")

    if summary.largest_clusters:
        table = Table("Root key", "Entries")
        for key, size in summary.largest_clusters.items():
            table.add_row(key, str(size))
        console.print(table)


if __name__ == '__main__':
    cli()
