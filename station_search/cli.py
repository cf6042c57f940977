"""
Command Line Interface for the station search engine
"""
import json
import sys
from typing import List

import click

from station_search.core.config import Config
from station_search.core.exceptions import ConfigurationError, SearchError
from station_search.core.models import Record, SearchField, SearchFilters, SearchResult, SearchStrategy
from station_search.search.engine import SearchEngine
from station_search.search.patterns import highlight_matches
from station_search.search.phonetic import phonetic_code
from station_search.utils.helpers import format_duration, measure_search_performance
from station_search.utils.logger import setup_logging


def load_records(path: str) -> List[Record]:
    """Load a JSON array of record objects"""
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise click.ClickException(f"{path} must contain a JSON array of records")
    try:
        return [Record.model_validate(item) for item in data]
    except ValueError as e:
        raise click.ClickException(f"Invalid record in {path}: {e}")


def print_results(results: List[SearchResult], as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps([result.model_dump() for result in results], indent=2))
        return

    if not results:
        click.echo("No results found.")
        return

    for i, result in enumerate(results, 1):
        record = result.record
        score = "-" if result.score is None else f"{result.score:.3f}"
        flag = " (obsolete)" if record.obsolete else ""
        click.echo(f"  {i}. [{record.code}] {record.name}, {record.country}{flag}  score={score}")
        for span in result.matches:
            click.echo(f"     {span.field}: {highlight_matches(span.value, [span])}")


@click.group()
@click.option('--config', '-c', 'config_file', help='Configuration file path')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.pass_context
def cli(ctx, config_file, verbose):
    """Station Search CLI"""
    try:
        config = Config.load_from_file(config_file) if config_file else Config.from_env()
    except ConfigurationError as e:
        raise click.ClickException(str(e))

    setup_logging(
        'DEBUG' if verbose else config.logging.level,
        config.logging.file,
        config.logging.format,
    )

    ctx.ensure_object(dict)
    ctx.obj['config'] = config
    ctx.obj['engine'] = SearchEngine(config.search)


@cli.command()
@click.argument('records_file', type=click.Path(exists=True, dir_okay=False))
@click.argument('query', default='')
@click.option('--strategy', '-s', default=SearchStrategy.SUBSTRING.value,
              type=click.Choice([s.value for s in SearchStrategy] + ['partial', 'soundex']),
              help='Matching strategy')
@click.option('--field', '-f', 'fields', multiple=True,
              type=click.Choice([f.value for f in SearchField]),
              help='Field to search (can be specified multiple times)')
@click.option('--country', default='all', help='Country name or code to filter on')
@click.option('--include-obsolete', is_flag=True, help='Include obsolete records')
@click.option('--json', 'as_json', is_flag=True, help='Print results as JSON')
@click.pass_context
def search(ctx, records_file, query, strategy, fields, country, include_obsolete, as_json):
    """Search records with one strategy"""
    engine = ctx.obj['engine']
    records = load_records(records_file)
    filters = SearchFilters(
        query=query,
        strategy=strategy,
        fields=list(fields),
        country_filter=country,
        include_obsolete=include_obsolete,
    )

    try:
        results, duration = measure_search_performance(
            lambda: engine.search(records, filters), strategy, query
        )
    except SearchError as e:
        click.echo(f"Search error: {e}", err=True)
        sys.exit(1)

    if not as_json:
        click.echo(f"{len(results)} results in {format_duration(duration)}")
    print_results(results, as_json)


@cli.command()
@click.argument('records_file', type=click.Path(exists=True, dir_okay=False))
@click.argument('query')
@click.option('--threshold', type=float, help='Fuzzy score threshold (0-1)')
@click.option('--max-results', type=int, help='Maximum number of results')
@click.option('--field', '-f', 'fields', multiple=True,
              type=click.Choice([f.value for f in SearchField]),
              help='Field to search (can be specified multiple times)')
@click.option('--json', 'as_json', is_flag=True, help='Print results as JSON')
@click.pass_context
def multi(ctx, records_file, query, threshold, max_results, fields, as_json):
    """Search with exact, substring and fuzzy matching combined"""
    engine = ctx.obj['engine']
    records = load_records(records_file)

    try:
        results = engine.multi_search(
            records,
            query,
            threshold=threshold,
            max_results=max_results,
            fields=list(fields) or None,
        )
    except SearchError as e:
        click.echo(f"Search error: {e}", err=True)
        sys.exit(1)

    print_results(results, as_json)


@cli.command()
@click.argument('records_file', type=click.Path(exists=True, dir_okay=False))
@click.argument('query')
@click.option('--max-suggestions', '-n', type=int, help='Maximum number of suggestions')
@click.pass_context
def suggest(ctx, records_file, query, max_suggestions):
    """Print autocomplete suggestions for a partial query"""
    engine = ctx.obj['engine']
    records = load_records(records_file)

    for value in engine.suggest(records, query, max_suggestions):
        click.echo(value)


@cli.command()
@click.argument('words', nargs=-1, required=True)
def soundex(words):
    """Print the phonetic code of each word"""
    for word in words:
        click.echo(f"{word}\t{phonetic_code(word) or '-'}")


@cli.command()
@click.option('--output', '-o', default='station_search.json', help='Output configuration file')
@click.pass_context
def init_config(ctx, output):
    """Initialize a configuration file with default settings"""
    Config().save_to_file(output)
    click.echo(f"Configuration file created: {output}")
    click.echo("Edit the file to customize settings, then use:")
    click.echo(f"  station-search --config {output} search <records.json> <query>")


def main():
    """Main entry point"""
    cli()


if __name__ == '__main__':
    main()
