"""Database access for addresses."""

from .session import SessionManager
from .store import AddressStore, AddressQuery

__all__ = ['SessionManager', 'AddressStore', 'AddressQuery']
