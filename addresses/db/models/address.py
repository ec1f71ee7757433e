"""Address table and the record type returned by the store."""
from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    Index,
    Integer,
    MetaData,
    String,
    Table,
)

from ...schema import SchemaConfig


def build_address_table(metadata: MetaData, schema: SchemaConfig) -> Table:
    """Build the polymorphic addresses table for the given schema settings.

    The owner columns take their database names from ``schema`` but always
    carry the keys ``owner_type``, ``owner_id`` and ``relation``.
    """
    return Table(
        schema.addresses_table,
        metadata,
        Column('id', Integer, primary_key=True, autoincrement=True),
        Column(schema.owner_type_column, String(255), key='owner_type', nullable=False),
        Column(schema.owner_id_column, Integer, key='owner_id', nullable=False),
        Column(schema.relation_column, String(64), key='relation', nullable=False,
               default=schema.relation_name),
        Column('label', String(255), nullable=False),
        Column('street', String(140)),
        Column('housenumber', String(140)),
        Column('housenumber_postfix', String(140)),
        Column('postal_code', String(140)),
        Column('city', String(140)),
        Column('state', String(140)),
        Column('country', String(2)),
        Column('latitude', Float),
        Column('longitude', Float),
        Column('is_public', Boolean, nullable=False, default=False),
        Column('is_primary', Boolean, nullable=False, default=False),
        Column('is_billing', Boolean, nullable=False, default=False),
        Column('is_shipping', Boolean, nullable=False, default=False),
        Column('created_at', DateTime, nullable=False, default=datetime.utcnow),
        Column('updated_at', DateTime, nullable=False, default=datetime.utcnow),
        Column('deleted_at', DateTime),
        Index(f'ix_{schema.addresses_table}_owner', 'owner_type', 'owner_id'),
    )


@dataclass
class Address:
    """A stored address."""

    id: int
    owner_type: str
    owner_id: int
    relation: str
    label: str
    street: Optional[str] = None
    housenumber: Optional[str] = None
    housenumber_postfix: Optional[str] = None
    postal_code: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    is_public: bool = False
    is_primary: bool = False
    is_billing: bool = False
    is_shipping: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, table: Table, row) -> 'Address':
        """Create a record from a result row selected from ``table``."""
        mapping = row._mapping
        return cls(**{column.key: mapping[column] for column in table.c})

    def __hash__(self):
        return hash(self.id)

    @property
    def trashed(self) -> bool:
        """Whether the address has been soft deleted."""
        return self.deleted_at is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the record to plain values, datetimes as ISO strings."""
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, datetime):
                result[f.name] = value.isoformat()
            else:
                result[f.name] = value
        return result

    def __repr__(self):
        """String representation of the address."""
        return f"<Address(id={self.id}, label='{self.label}', owner='{self.owner_type}:{self.owner_id}')>"
