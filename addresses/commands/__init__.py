"""
Commands for the addresses CLI.
"""

from .addresses import (
    InitDbCommand,
    AddAddressCommand,
    ListAddressesCommand,
    ShowAddressCommand,
    DesignatedAddressCommand,
    DeleteAddressesCommand,
    RestoreAddressCommand,
    PurgeOwnerCommand,
    ImportAddressesCommand,
    DESIGNATIONS
)
from .utils import TestConnectionCommand

__all__ = [
    'InitDbCommand',
    'AddAddressCommand',
    'ListAddressesCommand',
    'ShowAddressCommand',
    'DesignatedAddressCommand',
    'DeleteAddressesCommand',
    'RestoreAddressCommand',
    'PurgeOwnerCommand',
    'ImportAddressesCommand',
    'DESIGNATIONS',
    'TestConnectionCommand'
]
