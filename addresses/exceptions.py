"""Exceptions raised by the address package."""

from typing import List, Optional


class AddressError(Exception):
    """Base class for address errors."""


class ValidationError(AddressError):
    """Raised when address fields fail validation.

    Carries every failure message, not just the first.
    """

    def __init__(self, errors: List[str] | str):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__('[Addresses] ' + ' '.join(self.errors))


class AddressDoesNotExist(AddressError):
    """Raised when an address id does not resolve to a stored address."""

    def __init__(self, message: str, address_id: Optional[int] = None):
        super().__init__(message)
        self.address_id = address_id

    @classmethod
    def with_id(cls, address_id: int) -> 'AddressDoesNotExist':
        return cls(f"There is no address with id `{address_id}`.", address_id)


class AddressNotOwned(AddressDoesNotExist):
    """Raised when an address exists but belongs to another owner."""

    @classmethod
    def with_id(cls, address_id: int, owner=None) -> 'AddressNotOwned':
        if owner is None:
            return cls(f"Address `{address_id}` is not linked to this owner.", address_id)
        return cls(
            f"Address `{address_id}` is not linked to {owner.owner_type} `{owner.owner_id}`.",
            address_id
        )
