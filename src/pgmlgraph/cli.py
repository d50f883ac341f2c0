import click
import json
import logging
from functools import wraps
from importlib.metadata import version as package_version
from pgmlgraph.errors import PgmlError
from pgmlgraph.parser import StackParser
from pgmlgraph.tree_utils import count_shapes, format_tree
from pgmlgraph.utils import load_config, load_owners, LogFormatter

log = logging.getLogger(__name__)


def setup_command(func):
    """Decorator to handle common CLI setup (logging, config and owners loading, version)."""

    @wraps(func)
    def wrapper(config, debug, owners, version=False, **kwargs):
        if version:
            click.echo(package_version("pgmlgraph"))
            return

        log_handler = logging.StreamHandler()
        log_handler.setFormatter(LogFormatter())
        logging.basicConfig(level=logging.DEBUG if debug else logging.WARNING, handlers=[log_handler], force=True)

        config_obj = load_config(config)
        if debug:
            log.debug(json.dumps(config_obj.model_dump(), indent=4))
        owners_obj = load_owners(owners) if owners is not None else {}

        parser = StackParser(owners=owners_obj, config=config_obj)
        return func(parser=parser, debug=debug, **kwargs)

    return wrapper


def common_options(func):
    func = click.option("--version", is_flag=True, help="Show the application's version.")(func)
    func = click.option("--owners", default=None, help="YAML or JSON file mapping owner ids to model elements.")(func)
    func = click.option("--debug", default=False, is_flag=True, help="Enable debug.")(func)
    func = click.option("--config", default=None, help="Configuration file.")(func)
    return func


def read(parser: StackParser, path: str):
    try:
        return parser.parse(path)
    except (PgmlError, OSError) as error:
        raise click.ClickException(f"{path}: {error}") from error


@click.group()
def cli():
    pass


@click.command()
@click.argument("path", required=False)
@common_options
@setup_command
def show(parser, debug, path):
    """Print shape tree of a PGML diagram."""
    if path is None:
        raise click.UsageError("Missing argument 'PATH'.")
    diagram = read(parser, path)
    click.echo(format_tree(diagram))


@click.command()
@click.argument("path", required=False)
@common_options
@setup_command
def names(parser, debug, path):
    """List shapes registered under a name."""
    if path is None:
        raise click.UsageError("Missing argument 'PATH'.")
    read(parser, path)
    for name, shape in sorted(parser.shapes.items()):
        click.echo(f"{name}\t{shape.kind}")


@click.command()
@click.argument("paths", nargs=-1)
@common_options
@setup_command
def check(parser, debug, paths):
    """Check that PGML diagrams can be read."""
    failed = 0
    for path in paths:
        try:
            diagram = parser.parse(path)
        except (PgmlError, OSError) as error:
            failed += 1
            click.echo(f"✗ {path}: {error}", err=True)
            continue
        click.echo(f"✓ {path}: {count_shapes(diagram)} shapes")
    if failed:
        raise click.ClickException(f"{failed} of {len(paths)} diagrams failed")


cli.add_command(show)
cli.add_command(names)
cli.add_command(check)

if __name__ == "__main__":
    cli()
