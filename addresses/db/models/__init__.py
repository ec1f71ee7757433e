"""Table definitions and records for address storage."""

from .address import Address, build_address_table

__all__ = [
    'Address',
    'build_address_table'
]
