"""Addresses owned by arbitrary entities.

Any object exposing ``owner_type`` and ``owner_id`` can own addresses. The
host application wraps it in an ``OwnerAssociation`` and calls
``on_owner_deleted`` from its own deletion path so the addresses follow the
owner out.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Set, Union, runtime_checkable

from .db.models.address import Address
from .db.store import AddressStore
from .exceptions import AddressNotOwned
from .validation import AddressValidator

AddressRef = Union[int, Address, Iterable[Union[int, Address]]]


@runtime_checkable
class OwnerEntity(Protocol):
    """Anything that can own addresses."""

    owner_type: str
    owner_id: int


@dataclass(frozen=True)
class OwnerRef:
    """A bare (type, id) owner, for callers without an entity object at hand."""

    owner_type: str
    owner_id: int


@dataclass(frozen=True)
class DeleteOutcome:
    """Result of deleting one address out of a batch."""

    address_id: int
    deleted: bool
    reason: Optional[str] = None


def _address_id(ref: Any) -> int:
    # bool is an int subclass but never a valid id
    if isinstance(ref, bool):
        raise TypeError("Address reference must be an id or an Address, not a bool")
    if isinstance(ref, int):
        return ref
    if isinstance(ref, Address):
        return ref.id
    raise TypeError(f"Address reference must be an id or an Address, got {type(ref).__name__}")


def _is_batch(ref: Any) -> bool:
    return not isinstance(ref, (int, Address, str, bytes, Mapping)) and isinstance(ref, Iterable)


class OwnerAssociation:
    """Links one owner entity to its addresses."""

    def __init__(
        self,
        owner: OwnerEntity,
        store: AddressStore,
        validator: Optional[AddressValidator] = None
    ):
        self.owner = owner
        self.store = store
        self.validator = validator or AddressValidator(store.schema.rules)
        self.logger = logging.getLogger(self.__class__.__name__)
        self._loaded: Optional[List[Address]] = None

    def query(self):
        """Query over this owner's live addresses."""
        return self.store.query_by_owner(self.owner.owner_type, self.owner.owner_id)

    @property
    def addresses(self) -> List[Address]:
        """The owner's addresses, loaded on first access."""
        if self._loaded is None:
            self._loaded = self.query().all()
        return self._loaded

    def refresh(self) -> List[Address]:
        """Drop the loaded addresses and load them again."""
        self._loaded = None
        return self.addresses

    def _owned_ids(self) -> Set[int]:
        return {address.id for address in self.addresses}

    def has_addresses(self) -> bool:
        return bool(self.addresses)

    def has_address(self, addresses: Union[AddressRef, Set, frozenset]) -> bool:
        """Whether the owner has (one of) the given address(es).

        A list or tuple matches when any of its entries is owned; a set
        matches when it shares at least one address with the owner.
        """
        owned = self._owned_ids()
        if isinstance(addresses, (set, frozenset)):
            return bool(owned & {_address_id(ref) for ref in addresses})
        if _is_batch(addresses):
            return any(self.has_address(ref) for ref in addresses)
        return _address_id(addresses) in owned

    def get_address_labels(self) -> List[str]:
        return [address.label for address in self.addresses]

    def add_address(self, attributes: Mapping[str, Any]) -> Address:
        """Validate ``attributes`` and store them as a new address of this owner."""
        validated = self.validator.validate(attributes)
        address = self.store.create(validated, self.owner.owner_type, self.owner.owner_id)
        self._loaded = None
        self.logger.info(f"Added address {address.id} ({address.label}) to "
                         f"{self.owner.owner_type}:{self.owner.owner_id}")
        return address

    def update_address(self, address: Union[int, Address], attributes: Mapping[str, Any]) -> bool:
        """Validate ``attributes`` and apply them to one of this owner's addresses.

        Raises:
            ValidationError: if the attributes are invalid; nothing is written
            AddressNotOwned: if the address is not linked to this owner
        """
        validated = self.validator.validate(attributes)
        address_id = _address_id(address)
        if not self.has_address(address_id):
            raise AddressNotOwned.with_id(address_id, self.owner)
        self.store.update(address_id, validated)
        self._loaded = None
        return True

    def delete_address(self, addresses: AddressRef, force: bool = False) -> bool:
        """Delete one address, or each address of a list, if owned.

        For a single address the result says whether it was deleted. For a
        list the result is True once every entry has been tried, whether or
        not each one was owned; use ``delete_addresses`` for a per-address
        report.
        """
        if _is_batch(addresses):
            self.delete_addresses(addresses, force=force)
            return True
        return self._delete_one(addresses, force).deleted

    def delete_addresses(self, addresses: Iterable[Union[int, Address]], force: bool = False) -> List[DeleteOutcome]:
        """Delete each owned address and report what happened to every entry."""
        outcomes = []
        deleted_ids = set()
        for ref in addresses:
            address_id = _address_id(ref)
            if address_id in deleted_ids:
                outcomes.append(DeleteOutcome(address_id, False, 'already deleted'))
                continue
            outcome = self._delete_one(address_id, force)
            if outcome.deleted:
                deleted_ids.add(address_id)
            outcomes.append(outcome)
        return outcomes

    def force_delete_address(self, addresses: AddressRef) -> bool:
        return self.delete_address(addresses, force=True)

    def _delete_one(self, ref: Union[int, Address], force: bool) -> DeleteOutcome:
        address_id = _address_id(ref)
        if not self.has_address(address_id):
            # Soft deleted rows drop out of the loaded set but still belong to the owner
            if self.query().only_trashed().where(self.store.table.c.id == address_id).exists():
                return DeleteOutcome(address_id, False, 'already deleted')
            self.logger.warning(f"Skipping delete of address {address_id}: not linked to "
                                f"{self.owner.owner_type}:{self.owner.owner_id}")
            return DeleteOutcome(address_id, False, 'not owned')
        deleted = self.query().where(self.store.table.c.id == address_id).delete(force=force) > 0
        self._loaded = None
        return DeleteOutcome(address_id, deleted, None if deleted else 'already deleted')

    def _designated(self, flag: str, direction: str) -> Optional[Address]:
        return self.query().filter(flag).order_by(flag, direction).first()

    def get_primary_address(self, direction: str = 'desc') -> Optional[Address]:
        return self._designated('is_primary', direction)

    def get_billing_address(self, direction: str = 'desc') -> Optional[Address]:
        return self._designated('is_billing', direction)

    def get_shipping_address(self, direction: str = 'desc') -> Optional[Address]:
        return self._designated('is_shipping', direction)

    def get_public_address(self, direction: str = 'desc') -> Optional[Address]:
        return self._designated('is_public', direction)

    def remove_all(self) -> int:
        """Soft delete every address of this owner."""
        count = self.query().delete(force=False)
        self._loaded = None
        return count

    def purge_all(self) -> int:
        """Permanently erase every address of this owner, trashed ones included."""
        count = self.query().with_trashed().delete(force=True)
        self._loaded = None
        return count

    def on_owner_deleted(self, force: bool = False) -> int:
        """Cascade the owner's deletion to its addresses.

        A permanently purged owner takes its addresses with it; otherwise
        they are soft deleted.
        """
        count = self.purge_all() if force else self.remove_all()
        self.logger.info(f"{'Purged' if force else 'Removed'} {count} addresses of "
                         f"{self.owner.owner_type}:{self.owner.owner_id}")
        return count

    def to_dict(self) -> Dict[str, Any]:
        return {
            'owner_type': self.owner.owner_type,
            'owner_id': self.owner.owner_id,
            'addresses': [address.to_dict() for address in self.addresses]
        }
