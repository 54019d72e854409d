"""CLI entry point for iss-graphql."""

import json
from pathlib import Path

import click
from graphql import GraphQLSchema, print_schema

from iss_graphql.client import IssClient
from iss_graphql.config import get_settings
from iss_graphql.errors import IssGraphQLError
from iss_graphql.generator.schema import build_schema
from iss_graphql.generator.specs import load_specs
from iss_graphql.log import configure_logging
from iss_graphql.parser.reference import parse_reference
from iss_graphql.server import create_app, execute_query

specs_option = click.option(
    "--specs",
    "specs_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML file with generation specs (defaults to the packaged table).",
)


def _client() -> IssClient:
    settings = get_settings()
    return IssClient(base_url=settings.base_url, timeout=settings.request_timeout)


def _build(specs_path: Path | None) -> GraphQLSchema:
    """Build the schema, turning build failures into a CLI error."""
    settings = get_settings()
    if specs_path is None and settings.specs_path:
        specs_path = Path(settings.specs_path)
    try:
        return build_schema(load_specs(specs_path), _client(), max_workers=settings.max_workers)
    except IssGraphQLError as e:
        raise click.ClickException(f"schema generation failed: {e}") from e


@click.group()
@click.option("--log-level", default=None, type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]), help="Log level.")
@click.option("--log-format", default=None, type=click.Choice(["console", "json"]), help="Log output format.")
def main(log_level: str | None, log_format: str | None):
    """ISS GraphQL — expose MOEX ISS references as a GraphQL schema."""
    settings = get_settings()
    configure_logging(log_level or settings.log_level, log_format or settings.log_format)


@main.command()
@specs_option
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Write the SDL to this file.")
def schema(specs_path: Path | None, output: Path | None):
    """Print the generated schema in SDL."""
    sdl = print_schema(_build(specs_path))
    if output is None:
        click.echo(sdl)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(sdl + "\n", encoding="utf-8")
    click.echo(f"Schema saved to {output}")


@main.command()
@click.argument("query_text")
@specs_option
@click.option("--variables", default=None, help="Query variables as a JSON object.")
def query(query_text: str, specs_path: Path | None, variables: str | None):
    """Execute one GraphQL query and print the JSON result."""
    try:
        variable_values = json.loads(variables) if variables else None
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="--variables") from e

    result = execute_query(_build(specs_path), query_text, variable_values)
    click.echo(json.dumps(result, indent=2, ensure_ascii=False))
    if result.get("errors"):
        raise SystemExit(1)


@main.command()
@click.argument("ref_id", type=int)
def describe(ref_id: int):
    """Parse one ISS reference page and print its descriptor."""
    try:
        descriptor = parse_reference(_client().fetch_reference(ref_id))
    except IssGraphQLError as e:
        raise click.ClickException(str(e)) from e
    click.echo(descriptor.model_dump_json(indent=2))


@main.command()
@specs_option
@click.option("--host", default=None, help="Interface to listen on.")
@click.option("--port", default=None, type=int, help="Port to listen on.")
def serve(specs_path: Path | None, host: str | None, port: int | None):
    """Build the schema, then serve it over HTTP at /graphql."""
    import uvicorn

    settings = get_settings()
    app = create_app(_build(specs_path))
    host = host or settings.host
    port = port or settings.port
    click.echo(f"App is ready at http://{host}:{port}/graphql")
    uvicorn.run(app, host=host, port=port, log_config=None)
