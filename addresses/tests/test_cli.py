"""Tests for the addresses command line interface."""
import json

import pytest
from click.testing import CliRunner

from ..cli.config import Config
from ..cli.main import cli
from .conftest import create_test_csv


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def env(database_url):
    return {'DATABASE_URL': database_url, 'LOG_LEVEL': 'WARNING'}


@pytest.fixture
def invoke(runner, env):
    def _invoke(*args):
        return runner.invoke(cli, list(args), env=env)
    _invoke('init-db')
    return _invoke


def test_missing_database_url(runner):
    result = runner.invoke(cli, ['init-db'], env={'DATABASE_URL': ''})

    assert result.exit_code == 1
    assert 'DATABASE_URL environment variable is required' in result.output


def test_test_connection(runner, env):
    result = runner.invoke(cli, ['test-connection'], env=env)

    assert result.exit_code == 0
    assert 'Successfully connected to the database!' in result.output
    assert "Table 'addresses' is missing" in result.output


def test_add_and_list(invoke):
    result = invoke('add', 'customer', '1', '--label', 'Home', '--street', 'Main St',
                    '--housenumber', '12', '--city', 'Springfield', '--country', 'US', '--primary')
    assert result.exit_code == 0, result.output
    assert 'Added [1] Home: Main St 12, Springfield, US (primary)' in result.output

    invoke('add', 'customer', '1', '--label', 'Work', '--billing')

    result = invoke('list', 'customer', '1')
    assert result.exit_code == 0
    assert '2 addresses for customer 1:' in result.output
    assert '  - [2] Work (billing)' in result.output

    result = invoke('list', 'customer', '1', '--flag', 'billing', '--format', 'json')
    assert result.exit_code == 0
    assert [address['label'] for address in json.loads(result.output)] == ['Work']


def test_add_invalid_address(invoke):
    result = invoke('add', 'customer', '1', '--label', 'X', '--country', 'USA')

    assert result.exit_code == 1
    assert 'The country must be 2 characters.' in result.output
    assert 'No addresses found' in invoke('list', 'customer', '1').output


def test_add_without_label(invoke):
    result = invoke('add', 'customer', '1', '--city', 'Springfield')

    assert result.exit_code == 1
    assert 'No label given.' in result.output


def test_designated(invoke):
    invoke('add', 'customer', '1', '--label', 'Home', '--primary')
    invoke('add', 'customer', '1', '--label', 'Work')

    result = invoke('designated', 'customer', '1', 'primary')
    assert result.exit_code == 0
    assert '[1] Home' in result.output

    result = invoke('designated', 'customer', '1', 'shipping', '--direction', 'asc')
    assert result.exit_code == 0
    assert 'No shipping address for customer 1' in result.output


def test_delete_and_restore(invoke):
    invoke('add', 'customer', '1', '--label', 'Home')
    invoke('add', 'company', '1', '--label', 'Office')

    result = invoke('delete', 'customer', '1', '1', '2')
    assert result.exit_code == 1
    assert 'Deleted address 1' in result.output
    assert 'Skipped address 2: not owned' in result.output

    assert '[deleted]' in invoke('show', '1').output

    result = invoke('restore', '1')
    assert result.exit_code == 0
    assert 'Restored [1] Home' in result.output


def test_show_missing(invoke):
    result = invoke('show', '42')

    assert result.exit_code == 1
    assert 'There is no address with id `42`.' in result.output


def test_purge_owner(invoke):
    invoke('add', 'customer', '1', '--label', 'Home')
    invoke('add', 'customer', '1', '--label', 'Work')

    result = invoke('purge-owner', 'customer', '1')
    assert result.exit_code == 0
    assert 'Removed 2 addresses of customer 1' in result.output

    result = invoke('purge-owner', 'customer', '1', '--force')
    assert 'Purged 2 addresses of customer 1' in result.output
    assert '0 addresses' in invoke('list', 'customer', '1', '--with-trashed').output


def test_import(invoke, tmp_path):
    path = create_test_csv(tmp_path / 'addresses.csv', [
        {'owner_type': 'customer', 'owner_id': '1', 'label': 'Home', 'country': 'NL'},
        {'owner_type': 'customer', 'owner_id': '1', 'label': 'Away', 'country': 'NLD'},
    ])
    output = tmp_path / 'results.json'

    result = invoke('import', str(path), '--output', str(output))

    assert result.exit_code == 0, result.output
    assert 'Addresses Created: 1' in result.output
    assert 'Invalid Rows: 1' in result.output
    results = json.loads(output.read_text())
    assert results['address_ids'] == [1]
    assert results['errors']['counts'] == {'VALIDATION_ERROR': 1}


def test_config_from_env(monkeypatch):
    monkeypatch.setenv('DATABASE_URL', 'sqlite://')
    monkeypatch.setenv('ADDRESSES_TABLE', 'locations')
    monkeypatch.setenv('ADDRESSES_OWNER_TYPE_COLUMN', 'model_type')
    monkeypatch.setenv('BATCH_SIZE', '25')

    config = Config.from_env()

    assert config.schema.addresses_table == 'locations'
    assert config.schema.owner_type_column == 'model_type'
    assert config.schema.owner_id_column == 'addressable_id'
    assert config.batch_size == 25
    assert config.validate()


@pytest.mark.parametrize('changes', [
    {'batch_size': 0},
    {'error_limit': -1},
    {'output_format': 'csv'},
])
def test_config_validation(changes):
    config = Config(database_url='sqlite://', **changes)
    with pytest.raises(ValueError):
        config.validate()
