"""ActiveResource CLI - Main Entry Point.

Commands:
    fetch    - Fetch a collection, or one element with --id
    count    - Count the elements matching the filters
"""

import functools
import json
import logging
import sys
from typing import Optional, Tuple, Type

import click

from . import __version__, __cli_name__
from ..config import ConfigError, ConfigLoader, QueryConfig
from ..faults import Fault
from ..models import Model, Query


# ============================================================================
# Helpers
# ============================================================================


def _build_model(
    api_url: str,
    resource: str,
    primary_key: str,
    collection_envelope: Optional[str],
    pagination_envelope: Optional[str],
) -> Type[Model]:
    """Create a throwaway model class describing the target resource."""
    meta = type("Meta", (), {
        "api_url": api_url,
        "resource_name": resource,
        "primary_key": primary_key,
        "collection_envelope": collection_envelope,
        "pagination_envelope": pagination_envelope,
    })
    return type("CliResource", (Model,), {"Meta": meta, "__module__": __name__})


def _parse_where(pairs: Tuple[str, ...]) -> dict:
    conditions = {}
    for pair in pairs:
        if "=" not in pair:
            raise click.BadParameter(f"expected KEY=VALUE, got '{pair}'", param_hint="--where")
        key, value = pair.split("=", 1)
        conditions[key.strip()] = value
    return conditions


def _load_config(path: Optional[str]) -> QueryConfig:
    loader = ConfigLoader.load(paths=[path] if path else None)
    return loader.query_config()


def _build_query(ctx: click.Context, where: Tuple[str, ...], select: Tuple[str, ...],
                 limit: Optional[int], offset: Optional[int]) -> Query:
    opts = ctx.obj
    model_cls = _build_model(
        opts["api_url"],
        opts["resource"],
        opts["primary_key"],
        opts["collection_envelope"],
        opts["pagination_envelope"],
    )
    query = Query(model_cls, config=_load_config(opts["config"]))
    query.where(_parse_where(where)).limit(limit).offset(offset)
    if select:
        query.select(list(select))
    return query


def _report_faults(func):
    """Print faults to stderr and exit with status 1."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except Fault as fault:
            ctx = click.get_current_context()
            if ctx.obj.get("json_errors"):
                click.echo(json.dumps(fault.to_dict(), default=str), err=True)
            else:
                click.echo(click.style(f"Error: {fault}", fg="red"), err=True)
            sys.exit(1)
        except ConfigError as exc:
            click.echo(click.style(f"Config error: {exc}", fg="red"), err=True)
            sys.exit(1)
    return wrapper


def _resource_options(func):
    """Arguments and options shared by every command."""
    options = [
        click.argument("api_url"),
        click.argument("resource"),
        click.option("--where", "-w", multiple=True, help="Filter as KEY=VALUE (repeatable)"),
        click.option("--select", "-s", multiple=True, help="Field to return (repeatable)"),
        click.option("--limit", type=click.IntRange(min=0), default=None, help="Limit"),
        click.option("--offset", type=click.IntRange(min=0), default=None, help="Offset"),
        click.option("--primary-key", default="id", show_default=True, help="Primary key attribute"),
        click.option("--collection-envelope", default=None, help="Response key wrapping elements"),
        click.option("--pagination-envelope", default=None, help="Response key wrapping pagination"),
        click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False),
                     default=None, help="JSON or YAML config file"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _remember(ctx: click.Context, api_url: str, resource: str, primary_key: str,
              collection_envelope: Optional[str], pagination_envelope: Optional[str],
              config_path: Optional[str]) -> None:
    ctx.obj.update(
        api_url=api_url,
        resource=resource,
        primary_key=primary_key,
        collection_envelope=collection_envelope,
        pagination_envelope=pagination_envelope,
        config=config_path,
    )


# ============================================================================
# Commands
# ============================================================================


@click.group()
@click.version_option(version=__version__, prog_name=__cli_name__)
@click.option('--verbose', '-v', is_flag=True, help='Log HTTP traffic (DEBUG)')
@click.option('--json-errors', is_flag=True, help='Print faults as JSON on stderr')
@click.pass_context
def cli(ctx, verbose: bool, json_errors: bool):
    """Query REST resources.

    \b
    Examples:
      ar fetch https://api.example.com/v1 users --where status=active
      ar fetch https://api.example.com/v1 users --id 42
      ar count https://api.example.com/v1 users
    """
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    ctx.obj['json_errors'] = json_errors
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command('fetch')
@_resource_options
@click.option("--id", "element_id", default=None, help="Fetch one element by id")
@click.pass_context
@_report_faults
def fetch(ctx, api_url, resource, where, select, limit, offset, primary_key,
          collection_envelope, pagination_envelope, config_path, element_id):
    """Fetch a collection, or a single element with --id."""
    _remember(ctx, api_url, resource, primary_key, collection_envelope,
              pagination_envelope, config_path)
    with _build_query(ctx, where, select, limit, offset) as query:
        if element_id is not None:
            model = query.one(element_id)
            payload = model.to_dict() if model is not None else None
        else:
            payload = [model.to_dict() for model in query.all()]
    click.echo(json.dumps(payload, indent=2, default=str))


@cli.command('count')
@_resource_options
@click.pass_context
@_report_faults
def count(ctx, api_url, resource, where, select, limit, offset, primary_key,
          collection_envelope, pagination_envelope, config_path):
    """Count the elements matching the filters."""
    _remember(ctx, api_url, resource, primary_key, collection_envelope,
              pagination_envelope, config_path)
    with _build_query(ctx, where, select, limit, offset) as query:
        click.echo(query.count())


def main():
    """Entry point for `ar` command."""
    cli(obj={})


if __name__ == '__main__':
    main()
