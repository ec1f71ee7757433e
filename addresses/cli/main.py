"""
Core CLI implementation for the addresses package.
"""

import dataclasses
import click
from pathlib import Path
from typing import Optional, Tuple

from .config import Config, OUTPUT_FORMATS
from .logging import setup_logging, get_logger
from ..commands import (
    DESIGNATIONS,
    AddAddressCommand,
    DeleteAddressesCommand,
    DesignatedAddressCommand,
    ImportAddressesCommand,
    InitDbCommand,
    ListAddressesCommand,
    PurgeOwnerCommand,
    RestoreAddressCommand,
    ShowAddressCommand,
    TestConnectionCommand
)

format_option = click.option(
    '--format', 'output_format',
    type=click.Choice(OUTPUT_FORMATS),
    default=None,
    help='Output format (defaults to OUTPUT_FORMAT or text)'
)


def _config(ctx: click.Context, output_format: Optional[str] = None) -> Config:
    config = ctx.obj['config']
    if output_format:
        config = dataclasses.replace(config, output_format=output_format)
    return config


@click.group()
@click.option('--debug', is_flag=True, help='Enable detailed debug output')
@click.pass_context
def cli(ctx, debug: bool):
    """Manage postal addresses owned by application records"""
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug

    try:
        config = Config.from_env()
        config.validate()
    except Exception as e:
        click.echo(f"Error initializing configuration: {str(e)}", err=True)
        ctx.exit(1)

    setup_logging(debug=debug, level=config.log_level)
    logger = get_logger('cli')
    if debug:
        logger.debug(f"Using database: {config.database_url}")
    ctx.obj['config'] = config


@cli.command('init-db')
@click.pass_context
def init_db(ctx):
    """Create the addresses table"""
    InitDbCommand(_config(ctx)).execute()


@cli.command('test-connection')
@click.pass_context
def test_connection(ctx):
    """Test database connectivity"""
    TestConnectionCommand(_config(ctx)).execute()


@cli.command('add')
@click.argument('owner_type')
@click.argument('owner_id', type=int)
@click.option('--label', help='Name of the address, e.g. Home')
@click.option('--street')
@click.option('--housenumber')
@click.option('--housenumber-postfix')
@click.option('--postal-code')
@click.option('--city')
@click.option('--state')
@click.option('--country', help='Two letter country code')
@click.option('--latitude', type=float)
@click.option('--longitude', type=float)
@click.option('--primary/--no-primary', 'is_primary', default=None)
@click.option('--billing/--no-billing', 'is_billing', default=None)
@click.option('--shipping/--no-shipping', 'is_shipping', default=None)
@click.option('--public/--no-public', 'is_public', default=None)
@click.pass_context
def add(ctx, owner_type: str, owner_id: int, **fields):
    """Add an address to OWNER_TYPE OWNER_ID"""
    supplied = {name: value for name, value in fields.items() if value is not None}
    AddAddressCommand(_config(ctx), owner_type, owner_id, supplied).execute()


@cli.command('list')
@click.argument('owner_type')
@click.argument('owner_id', type=int)
@click.option('--flag', type=click.Choice(DESIGNATIONS), help='Only addresses carrying this flag')
@click.option('--country', help='Only addresses in this country')
@click.option('--with-trashed', is_flag=True, help='Include soft deleted addresses')
@format_option
@click.pass_context
def list_addresses(ctx, owner_type: str, owner_id: int, flag: Optional[str], country: Optional[str],
                   with_trashed: bool, output_format: Optional[str]):
    """List the addresses of OWNER_TYPE OWNER_ID"""
    ListAddressesCommand(
        _config(ctx, output_format), owner_type, owner_id, flag, country, with_trashed
    ).execute()


@cli.command('show')
@click.argument('address_id', type=int)
@format_option
@click.pass_context
def show(ctx, address_id: int, output_format: Optional[str]):
    """Show a single address"""
    ShowAddressCommand(_config(ctx, output_format), address_id).execute()


@cli.command('designated')
@click.argument('owner_type')
@click.argument('owner_id', type=int)
@click.argument('designation', type=click.Choice(DESIGNATIONS))
@click.option('--direction', type=click.Choice(['asc', 'desc']), default='desc', show_default=True)
@format_option
@click.pass_context
def designated(ctx, owner_type: str, owner_id: int, designation: str, direction: str,
               output_format: Optional[str]):
    """Show the primary, billing, shipping or public address of an owner"""
    DesignatedAddressCommand(
        _config(ctx, output_format), owner_type, owner_id, designation, direction
    ).execute()


@cli.command('delete')
@click.argument('owner_type')
@click.argument('owner_id', type=int)
@click.argument('address_ids', type=int, nargs=-1, required=True)
@click.option('--force', is_flag=True, help='Erase permanently instead of soft deleting')
@click.pass_context
def delete(ctx, owner_type: str, owner_id: int, address_ids: Tuple[int, ...], force: bool):
    """Delete addresses of OWNER_TYPE OWNER_ID"""
    DeleteAddressesCommand(_config(ctx), owner_type, owner_id, list(address_ids), force).execute()


@cli.command('restore')
@click.argument('address_id', type=int)
@click.pass_context
def restore(ctx, address_id: int):
    """Restore a soft deleted address"""
    RestoreAddressCommand(_config(ctx), address_id).execute()


@cli.command('purge-owner')
@click.argument('owner_type')
@click.argument('owner_id', type=int)
@click.option('--force', is_flag=True, help='Erase the addresses permanently')
@click.pass_context
def purge_owner(ctx, owner_type: str, owner_id: int, force: bool):
    """Remove every address of a deleted owner"""
    PurgeOwnerCommand(_config(ctx), owner_type, owner_id, force).execute()


@cli.command('import')
@click.argument('file', type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path))
@click.option('--output', type=click.Path(file_okay=True, dir_okay=False, path_type=Path), help='Save import results to file')
@click.pass_context
def import_addresses(ctx, file: Path, output: Optional[Path]):
    """Import addresses from a CSV file with owner_type and owner_id columns"""
    command = ImportAddressesCommand(_config(ctx), file, output)
    if not command.validate():
        raise click.Abort()
    command.execute()
