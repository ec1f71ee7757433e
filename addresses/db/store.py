"""Persistence for addresses and the queries the owner helpers build on."""
import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional, Tuple

from sqlalchemy import MetaData, Table, delete, func, insert, select, update
from sqlalchemy.orm import Session

from ..exceptions import AddressDoesNotExist
from ..schema import FLAGS, SchemaConfig
from .models.address import Address, build_address_table
from .session import SessionManager

DIRECTIONS = ('asc', 'desc')


class AddressQuery:
    """A lazily evaluated, chainable query over one owner's addresses.

    Every chained call returns a new query; nothing touches the database
    until ``all``, ``first``, ``count``, ``exists`` or ``delete`` runs.
    Results are always ordered by ``id`` last, so addresses that tie on the
    requested ordering come back lowest id first.
    """

    def __init__(
        self,
        store: 'AddressStore',
        criteria: Tuple = (),
        ordering: Tuple = (),
        trashed: str = 'without'
    ):
        self.store = store
        self._criteria = criteria
        self._ordering = ordering
        self._trashed = trashed

    def _copy(self, **changes) -> 'AddressQuery':
        state = {
            'criteria': self._criteria,
            'ordering': self._ordering,
            'trashed': self._trashed
        }
        state.update(changes)
        return AddressQuery(self.store, **state)

    def where(self, *clauses) -> 'AddressQuery':
        """Add raw SQLAlchemy criteria against ``store.table``."""
        return self._copy(criteria=self._criteria + clauses)

    def filter(self, flag: str, value: bool = True) -> 'AddressQuery':
        """Keep addresses whose designated flag equals ``value``."""
        if flag not in FLAGS:
            raise ValueError(f"Unknown address flag '{flag}', expected one of: {', '.join(FLAGS)}")
        return self.where(self.store.table.c[flag] == bool(value))

    def is_public(self) -> 'AddressQuery':
        return self.filter('is_public')

    def is_primary(self) -> 'AddressQuery':
        return self.filter('is_primary')

    def is_billing(self) -> 'AddressQuery':
        return self.filter('is_billing')

    def is_shipping(self) -> 'AddressQuery':
        return self.filter('is_shipping')

    def in_country(self, country: str) -> 'AddressQuery':
        """Keep addresses in the given two letter country."""
        return self.where(self.store.table.c.country == country)

    def order_by(self, column: str, direction: str = 'desc') -> 'AddressQuery':
        """Order by a column of the table, ``desc`` unless told otherwise."""
        direction = direction.lower()
        if direction not in DIRECTIONS:
            raise ValueError(f"Order direction must be 'asc' or 'desc', got '{direction}'")
        if column not in self.store.table.c:
            raise ValueError(f"Unknown address column '{column}'")
        col = self.store.table.c[column]
        clause = col.desc() if direction == 'desc' else col.asc()
        return self._copy(ordering=self._ordering + (clause,))

    def with_trashed(self) -> 'AddressQuery':
        """Include soft deleted addresses."""
        return self._copy(trashed='with')

    def only_trashed(self) -> 'AddressQuery':
        """Only soft deleted addresses."""
        return self._copy(trashed='only')

    def _conditions(self) -> List:
        table = self.store.table
        conditions = list(self._criteria)
        if self._trashed == 'without':
            conditions.append(table.c.deleted_at.is_(None))
        elif self._trashed == 'only':
            conditions.append(table.c.deleted_at.is_not(None))
        return conditions

    def statement(self):
        """The SELECT this query runs."""
        table = self.store.table
        return (
            select(table)
            .where(*self._conditions())
            .order_by(*self._ordering, table.c.id.asc())
        )

    def all(self) -> List[Address]:
        with self.store.session() as session:
            rows = session.execute(self.statement()).all()
            return [Address.from_row(self.store.table, row) for row in rows]

    def first(self) -> Optional[Address]:
        with self.store.session() as session:
            row = session.execute(self.statement().limit(1)).first()
            return Address.from_row(self.store.table, row) if row else None

    def count(self) -> int:
        table = self.store.table
        stmt = select(func.count()).select_from(table).where(*self._conditions())
        with self.store.session() as session:
            return session.execute(stmt).scalar_one()

    def exists(self) -> bool:
        return self.count() > 0

    def ids(self) -> List[int]:
        table = self.store.table
        stmt = (
            select(table.c.id)
            .where(*self._conditions())
            .order_by(*self._ordering, table.c.id.asc())
        )
        with self.store.session() as session:
            return list(session.execute(stmt).scalars())

    def delete(self, force: bool = False) -> int:
        """Delete every matching address, returning how many were affected.

        Soft deletes stamp ``deleted_at``; forced deletes remove the rows.
        """
        table = self.store.table
        conditions = self._conditions()
        if force:
            stmt = delete(table).where(*conditions)
        else:
            now = datetime.utcnow()
            stmt = (
                update(table)
                .where(*conditions, table.c.deleted_at.is_(None))
                .values(deleted_at=now, updated_at=now)
            )
        with self.store.session() as session:
            affected = session.execute(stmt).rowcount
        self.store.logger.debug(f"{'Purged' if force else 'Soft deleted'} {affected} addresses")
        return affected

    def __iter__(self) -> Iterator[Address]:
        return iter(self.all())


class AddressStore:
    """Create, read, update and delete addresses.

    Each operation runs in its own session unless called inside
    ``transaction()``, in which case they all share one.
    """

    def __init__(self, session_manager: SessionManager, schema: Optional[SchemaConfig] = None):
        self.session_manager = session_manager
        self.schema = schema or SchemaConfig()
        self.metadata = MetaData()
        self.table: Table = build_address_table(self.metadata, self.schema)
        self.logger = logging.getLogger(self.__class__.__name__)
        self._active_session: Optional[Session] = None
        self._columns = {column.key for column in self.table.c}

    def create_schema(self) -> None:
        """Create the addresses table if it does not exist."""
        self.metadata.create_all(self.session_manager.engine)
        self.logger.debug(f"Ensured table {self.schema.addresses_table} exists")

    def drop_schema(self) -> None:
        self.metadata.drop_all(self.session_manager.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Yield the active transaction's session, or a fresh committed one."""
        if self._active_session is not None:
            yield self._active_session
            return
        with self.session_manager.scope() as session:
            yield session

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Run several store operations in one session, committed together."""
        if self._active_session is not None:
            yield self._active_session
            return
        with self.session_manager.scope() as session:
            self._active_session = session
            try:
                yield session
            finally:
                self._active_session = None

    def _writable(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        protected = {'id', 'owner_type', 'owner_id', 'relation',
                     'created_at', 'updated_at', 'deleted_at'}
        return {
            key: value for key, value in fields.items()
            if key in self._columns and key not in protected
        }

    def create(self, fields: Dict[str, Any], owner_type: str, owner_id: int) -> Address:
        """Persist a new address linked to the given owner."""
        now = datetime.utcnow()
        values = self._writable(fields)
        values.update(
            owner_type=owner_type,
            owner_id=owner_id,
            relation=self.schema.relation_name,
            created_at=now,
            updated_at=now
        )
        with self.session() as session:
            result = session.execute(insert(self.table).values(**values))
            address_id = result.inserted_primary_key[0]
            row = session.execute(
                select(self.table).where(self.table.c.id == address_id)
            ).first()
            address = Address.from_row(self.table, row)
        self.logger.debug(f"Created address {address_id} for {owner_type}:{owner_id}")
        return address

    def find_by_id(self, address_id: int, with_trashed: bool = False) -> Address:
        """Fetch one address, raising AddressDoesNotExist when there is none.

        Soft deleted addresses count as missing unless ``with_trashed``.
        """
        stmt = select(self.table).where(self.table.c.id == address_id)
        if not with_trashed:
            stmt = stmt.where(self.table.c.deleted_at.is_(None))
        with self.session() as session:
            row = session.execute(stmt).first()
            if row is None:
                raise AddressDoesNotExist.with_id(address_id)
            return Address.from_row(self.table, row)

    def update(self, address_id: int, fields: Dict[str, Any]) -> Address:
        """Apply ``fields`` to a live address and return the stored result."""
        values = self._writable(fields)
        values['updated_at'] = datetime.utcnow()
        stmt = (
            update(self.table)
            .where(self.table.c.id == address_id, self.table.c.deleted_at.is_(None))
            .values(**values)
        )
        with self.session() as session:
            if session.execute(stmt).rowcount == 0:
                raise AddressDoesNotExist.with_id(address_id)
        self.logger.debug(f"Updated address {address_id}: {sorted(values)}")
        return self.find_by_id(address_id)

    def delete(self, address_id: int, force: bool = False) -> bool:
        """Soft delete an address, or erase it when ``force`` is set.

        Returns whether a row was affected.
        """
        query = AddressQuery(self).where(self.table.c.id == address_id)
        if force:
            query = query.with_trashed()
        return query.delete(force=force) > 0

    def restore(self, address_id: int) -> Address:
        """Undo a soft delete."""
        stmt = (
            update(self.table)
            .where(self.table.c.id == address_id, self.table.c.deleted_at.is_not(None))
            .values(deleted_at=None, updated_at=datetime.utcnow())
        )
        with self.session() as session:
            if session.execute(stmt).rowcount == 0:
                raise AddressDoesNotExist.with_id(address_id)
        self.logger.debug(f"Restored address {address_id}")
        return self.find_by_id(address_id)

    def query(self) -> AddressQuery:
        """A query over every live address."""
        return AddressQuery(self)

    def query_by_owner(self, owner_type: str, owner_id: int) -> AddressQuery:
        """A query over the live addresses linked to one owner, in storage order."""
        table = self.table
        return AddressQuery(self).where(
            table.c.owner_type == owner_type,
            table.c.owner_id == owner_id,
            table.c.relation == self.schema.relation_name
        )
