"""
Address commands for the addresses CLI.
Handles adding, listing, deleting and importing owner addresses.
"""

import json
import click
import pandas as pd
from typing import Any, Dict, List, Optional

from ..cli.base import BaseCommand, FileInputCommand, command_error_handler
from ..cli.config import Config
from ..db.models.address import Address
from ..processors.address import AddressImportProcessor

DESIGNATIONS = ('primary', 'billing', 'shipping', 'public')


def format_address(address: Address) -> str:
    """One-line summary of an address for terminal output."""
    street = " ".join(
        part for part in (address.street, address.housenumber, address.housenumber_postfix) if part
    )
    locality = " ".join(part for part in (address.postal_code, address.city) if part)
    place = ", ".join(part for part in (street, locality, address.state, address.country) if part)
    flags = [flag[3:] for flag in ('is_primary', 'is_billing', 'is_shipping', 'is_public') if getattr(address, flag)]
    line = f"[{address.id}] {address.label}"
    if place:
        line += f": {place}"
    if flags:
        line += f" ({', '.join(flags)})"
    if address.trashed:
        line += " [deleted]"
    return line


def echo_addresses(addresses: List[Address], output_format: str) -> None:
    if output_format == 'json':
        click.echo(json.dumps([address.to_dict() for address in addresses], indent=2))
        return
    if not addresses:
        click.echo("No addresses found")
        return
    for address in addresses:
        click.echo(f"  - {format_address(address)}")


class InitDbCommand(BaseCommand):
    """Command to create the addresses table."""

    @command_error_handler
    def execute(self) -> None:
        self.store.create_schema()
        click.secho(f"Table '{self.config.schema.addresses_table}' is ready.", fg='green')


class AddAddressCommand(BaseCommand):
    """Command to add an address to an owner."""

    def __init__(self, config: Config, owner_type: str, owner_id: int, fields: Dict[str, Any]):
        super().__init__(config)
        self.owner_type = owner_type
        self.owner_id = owner_id
        self.fields = fields

    @command_error_handler
    def execute(self) -> None:
        address = self.association(self.owner_type, self.owner_id).add_address(self.fields)
        click.secho(f"Added {format_address(address)}", fg='green')


class ListAddressesCommand(BaseCommand):
    """Command to list an owner's addresses."""

    def __init__(
        self,
        config: Config,
        owner_type: str,
        owner_id: int,
        flag: Optional[str] = None,
        country: Optional[str] = None,
        with_trashed: bool = False
    ):
        super().__init__(config)
        self.owner_type = owner_type
        self.owner_id = owner_id
        self.flag = flag
        self.country = country
        self.with_trashed = with_trashed

    @command_error_handler
    def execute(self) -> None:
        query = self.association(self.owner_type, self.owner_id).query()
        if self.flag:
            query = query.filter(f"is_{self.flag}")
        if self.country:
            query = query.in_country(self.country.upper())
        if self.with_trashed:
            query = query.with_trashed()
        addresses = query.all()
        if self.config.output_format == 'text':
            click.echo(f"{len(addresses)} addresses for {self.owner_type} {self.owner_id}:")
        echo_addresses(addresses, self.config.output_format)


class ShowAddressCommand(BaseCommand):
    """Command to show a single address."""

    def __init__(self, config: Config, address_id: int):
        super().__init__(config)
        self.address_id = address_id

    @command_error_handler
    def execute(self) -> None:
        address = self.store.find_by_id(self.address_id, with_trashed=True)
        if self.config.output_format == 'json':
            click.echo(json.dumps(address.to_dict(), indent=2))
        else:
            click.echo(format_address(address))
            click.echo(f"  owner: {address.owner_type} {address.owner_id}")
            if address.latitude is not None and address.longitude is not None:
                click.echo(f"  location: {address.latitude}, {address.longitude}")


class DesignatedAddressCommand(BaseCommand):
    """Command to show an owner's primary, billing, shipping or public address."""

    def __init__(self, config: Config, owner_type: str, owner_id: int, designation: str, direction: str = 'desc'):
        super().__init__(config)
        self.owner_type = owner_type
        self.owner_id = owner_id
        self.designation = designation
        self.direction = direction

    @command_error_handler
    def execute(self) -> None:
        association = self.association(self.owner_type, self.owner_id)
        getter = getattr(association, f"get_{self.designation}_address")
        address = getter(self.direction)
        if address is None:
            click.echo(f"No {self.designation} address for {self.owner_type} {self.owner_id}")
            return
        echo_addresses([address], self.config.output_format)


class DeleteAddressesCommand(BaseCommand):
    """Command to delete some of an owner's addresses."""

    def __init__(self, config: Config, owner_type: str, owner_id: int, address_ids: List[int], force: bool = False):
        super().__init__(config)
        self.owner_type = owner_type
        self.owner_id = owner_id
        self.address_ids = address_ids
        self.force = force

    @command_error_handler
    def execute(self) -> None:
        association = self.association(self.owner_type, self.owner_id)
        outcomes = association.delete_addresses(self.address_ids, force=self.force)
        verb = 'Purged' if self.force else 'Deleted'
        for outcome in outcomes:
            if outcome.deleted:
                click.secho(f"{verb} address {outcome.address_id}", fg='green')
            else:
                click.secho(f"Skipped address {outcome.address_id}: {outcome.reason}", fg='yellow')
        if not all(outcome.deleted for outcome in outcomes):
            raise click.exceptions.Exit(1)


class RestoreAddressCommand(BaseCommand):
    """Command to undo a soft delete."""

    def __init__(self, config: Config, address_id: int):
        super().__init__(config)
        self.address_id = address_id

    @command_error_handler
    def execute(self) -> None:
        address = self.store.restore(self.address_id)
        click.secho(f"Restored {format_address(address)}", fg='green')


class PurgeOwnerCommand(BaseCommand):
    """Command to cascade an owner's deletion to its addresses."""

    def __init__(self, config: Config, owner_type: str, owner_id: int, force: bool = False):
        super().__init__(config)
        self.owner_type = owner_type
        self.owner_id = owner_id
        self.force = force

    @command_error_handler
    def execute(self) -> None:
        count = self.association(self.owner_type, self.owner_id).on_owner_deleted(force=self.force)
        verb = 'Purged' if self.force else 'Removed'
        click.secho(f"{verb} {count} addresses of {self.owner_type} {self.owner_id}", fg='green')


class ImportAddressesCommand(FileInputCommand):
    """Command to bulk import addresses from a CSV file."""

    @command_error_handler
    def execute(self) -> None:
        self.logger.info(f"Importing addresses from {self.input_file}...")

        # Read every column as a string so ids and postal codes survive intact
        df = pd.read_csv(self.input_file, dtype=str, skipinitialspace=True)

        processor = AddressImportProcessor(
            self.store,
            batch_size=self.config.batch_size,
            error_limit=self.config.error_limit,
            debug=self.debug
        )
        processed_df = processor.process(df)
        stats = processor.get_stats()

        click.echo("\nAddress Import Summary:")
        click.echo(f"Rows Processed: {stats['total_processed']}")
        click.echo(f"Addresses Created: {stats['addresses_created']}")
        click.echo(f"Invalid Rows: {stats['invalid_rows']}")
        click.echo(f"Owners: {stats['owners_seen']}")
        click.echo(f"Failed Batches: {stats['failed_batches']}")

        processor.error_tracker.log_summary(self.logger)

        if self.output_file:
            address_ids = []
            if 'address_id' in processed_df.columns:
                address_ids = [int(value) for value in processed_df['address_id'].dropna()]
            results = {
                'stats': stats,
                'address_ids': address_ids,
                'errors': processor.error_tracker.get_summary()
            }
            with open(self.output_file, 'w') as f:
                json.dump(results, f, indent=2, default=str)
            click.echo(f"\nDetailed results saved to {self.output_file}")
