"""Polymorphic postal addresses for arbitrary owner entities."""

from .association import OwnerAssociation, OwnerEntity, OwnerRef, DeleteOutcome
from .db import AddressStore, AddressQuery, SessionManager
from .db.models import Address
from .exceptions import AddressError, ValidationError, AddressDoesNotExist, AddressNotOwned
from .processors import AddressImportProcessor
from .validation import AddressValidator
from .schema import SchemaConfig, DEFAULT_RULES, FLAGS

__all__ = [
    'OwnerAssociation',
    'OwnerEntity',
    'OwnerRef',
    'DeleteOutcome',
    'AddressStore',
    'AddressQuery',
    'SessionManager',
    'Address',
    'AddressError',
    'ValidationError',
    'AddressDoesNotExist',
    'AddressNotOwned',
    'AddressValidator',
    'AddressImportProcessor',
    'SchemaConfig',
    'DEFAULT_RULES',
    'FLAGS'
]
