"""Schema and validation settings for address storage."""

from dataclasses import dataclass, field
from typing import Dict

# Designated-address flags, in the order they appear on the table
FLAGS = ('is_public', 'is_primary', 'is_billing', 'is_shipping')

DEFAULT_RULES: Dict[str, str] = {
    'label': 'required|string|max:255',
    'street': 'nullable|string|max:140',
    'housenumber': 'nullable|string|max:140',
    'housenumber_postfix': 'nullable|string|max:140',
    'postal_code': 'nullable|string|max:140',
    'city': 'nullable|string|max:140',
    'state': 'nullable|string|max:140',
    'country': 'nullable|alpha|size:2',
    'latitude': 'nullable|numeric',
    'longitude': 'nullable|numeric',
    'is_public': 'sometimes|boolean',
    'is_primary': 'sometimes|boolean',
    'is_billing': 'sometimes|boolean',
    'is_shipping': 'sometimes|boolean',
}


@dataclass(frozen=True)
class SchemaConfig:
    """Table, column and rule settings shared by the store and validator."""

    addresses_table: str = 'addresses'
    owner_type_column: str = 'addressable_type'
    owner_id_column: str = 'addressable_id'
    relation_column: str = 'relation'
    relation_name: str = 'addresses'
    rules: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_RULES))
