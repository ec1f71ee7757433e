"""Shared test fixtures and utilities."""

import csv
from pathlib import Path

import pytest

from ..association import OwnerAssociation, OwnerRef
from ..db.session import SessionManager
from ..db.store import AddressStore
from ..validation import AddressValidator


@pytest.fixture
def database_url(tmp_path):
    """URL of a throwaway SQLite database file."""
    return f"sqlite:///{tmp_path / 'addresses.db'}"


@pytest.fixture
def session_manager(database_url):
    """Create a session manager for testing."""
    manager = SessionManager(database_url)
    yield manager
    manager.dispose()


@pytest.fixture
def store(session_manager):
    """Address store with its table created."""
    store = AddressStore(session_manager)
    store.create_schema()
    return store


@pytest.fixture
def validator():
    return AddressValidator()


@pytest.fixture
def customer():
    return OwnerRef('customer', 1)


@pytest.fixture
def company():
    """An owner sharing the customer's id but not its type."""
    return OwnerRef('company', 1)


@pytest.fixture
def customer_addresses(customer, store, validator):
    return OwnerAssociation(customer, store, validator)


@pytest.fixture
def company_addresses(company, store, validator):
    return OwnerAssociation(company, store, validator)


@pytest.fixture
def home_and_work(customer_addresses):
    """Customer with a primary home address and a billing work address."""
    home = customer_addresses.add_address({
        'label': 'Home',
        'street': 'Keizersgracht',
        'housenumber': '123',
        'postal_code': '1015 CJ',
        'city': 'Amsterdam',
        'country': 'NL',
        'is_primary': True
    })
    work = customer_addresses.add_address({
        'label': 'Work',
        'street': 'Damrak',
        'housenumber': '1',
        'city': 'Amsterdam',
        'country': 'NL',
        'is_primary': False,
        'is_billing': True
    })
    return home, work


def create_test_csv(path: Path, rows, fieldnames=None) -> Path:
    """Write rows to a CSV file and return its path."""
    fieldnames = fieldnames or list(rows[0].keys())
    with open(path, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
    return path
