"""Tests for address field validation."""
from decimal import Decimal

import pytest

from ..exceptions import ValidationError
from ..validation import AddressValidator, FieldRule


def test_missing_label_fails_before_rule_pass(validator):
    """A missing label is reported on its own, even with other bad fields."""
    with pytest.raises(ValidationError) as exc_info:
        validator.validate({'country': 'USA', 'latitude': 'north'})

    assert exc_info.value.errors == ['No label given.']
    assert str(exc_info.value) == '[Addresses] No label given.'


def test_none_label_counts_as_missing(validator):
    with pytest.raises(ValidationError) as exc_info:
        validator.validate({'label': None})
    assert exc_info.value.errors == ['No label given.']


def test_blank_label_is_required(validator):
    with pytest.raises(ValidationError) as exc_info:
        validator.validate({'label': '   '})
    assert exc_info.value.errors == ['The label field is required.']


@pytest.mark.parametrize('country, message', [
    ('USA', 'The country must be 2 characters.'),
    ('N', 'The country must be 2 characters.'),
    ('N1', 'The country may only contain letters.'),
    (12, 'The country may only contain letters.'),
])
def test_country_must_be_two_letters(validator, country, message):
    with pytest.raises(ValidationError) as exc_info:
        validator.validate({'label': 'Home', 'country': country})
    assert exc_info.value.errors == [message]


def test_all_failures_are_aggregated(validator):
    """Every failing field is reported, not just the first."""
    with pytest.raises(ValidationError) as exc_info:
        validator.validate({
            'label': 'Home',
            'street': 'x' * 141,
            'country': 'USA',
            'latitude': 'north',
            'is_primary': 'yes'
        })

    assert exc_info.value.errors == [
        'The street may not be greater than 140 characters.',
        'The country must be 2 characters.',
        'The latitude must be a number.',
        'The is_primary field must be true or false.'
    ]
    assert str(exc_info.value).startswith('[Addresses] The street')


def test_label_length_limit(validator):
    validator.validate({'label': 'x' * 255})
    with pytest.raises(ValidationError) as exc_info:
        validator.validate({'label': 'x' * 256})
    assert exc_info.value.errors == ['The label may not be greater than 255 characters.']


def test_non_string_street_is_rejected(validator):
    with pytest.raises(ValidationError) as exc_info:
        validator.validate({'label': 'Home', 'street': 12})
    assert exc_info.value.errors == ['The street must be a string.']


def test_absent_optional_fields_are_ignored(validator):
    assert validator.validate({'label': 'Home'}) == {'label': 'Home'}


def test_nullable_fields_accept_none(validator):
    result = validator.validate({'label': 'Home', 'street': None, 'latitude': None})
    assert result == {'label': 'Home', 'street': None, 'latitude': None}


def test_unknown_fields_are_dropped(validator):
    result = validator.validate({'label': 'Home', 'nickname': 'casa', 'id': 99})
    assert result == {'label': 'Home'}


def test_values_are_coerced(validator):
    result = validator.validate({
        'label': 'Home',
        'latitude': '52.3731',
        'longitude': 4,
        'is_primary': '1',
        'is_billing': 0,
        'is_shipping': True
    })

    assert result['latitude'] == pytest.approx(52.3731)
    assert result['longitude'] == 4.0
    assert result['is_primary'] is True
    assert result['is_billing'] is False
    assert result['is_shipping'] is True


@pytest.mark.parametrize('value', [
    'nan', 'NaN', 'inf', '-Infinity', '1_000', '0x1A', '1e', '', float('nan'), float('inf'),
    Decimal('NaN'), Decimal('Infinity'), 10 ** 400,
])
def test_non_finite_and_non_decimal_numbers_are_rejected(validator, value):
    with pytest.raises(ValidationError) as exc_info:
        validator.validate({'label': 'Home', 'latitude': value})
    assert exc_info.value.errors == ['The latitude must be a number.']


@pytest.mark.parametrize('value, expected', [
    (' -52.5 ', -52.5),
    ('+4', 4.0),
    ('.5', 0.5),
    ('1.', 1.0),
    ('1.5e2', 150.0),
    (Decimal('52.1'), 52.1),
])
def test_decimal_notation_and_decimals_are_accepted(validator, value, expected):
    result = validator.validate({'label': 'Home', 'latitude': value})
    assert result['latitude'] == pytest.approx(expected)
    assert isinstance(result['latitude'], float)


def test_bool_is_not_a_number(validator):
    with pytest.raises(ValidationError) as exc_info:
        validator.validate({'label': 'Home', 'longitude': True})
    assert exc_info.value.errors == ['The longitude must be a number.']


def test_flag_cannot_be_null(validator):
    """Flags are ``sometimes`` but not ``nullable``."""
    with pytest.raises(ValidationError) as exc_info:
        validator.validate({'label': 'Home', 'is_public': None})
    assert exc_info.value.errors == ['The is_public field must be true or false.']


def test_check_returns_messages_without_raising(validator):
    assert validator.check({'label': 'Home', 'country': 'NL'}) == []
    assert validator.check({'country': 'NL'}) == ['The label field is required.']


def test_custom_rule_table():
    validator = AddressValidator({'label': 'required|string|max:5', 'floor': 'nullable|numeric|max:10'})

    assert validator.validate({'label': 'Flat', 'floor': '3'}) == {'label': 'Flat', 'floor': 3.0}
    with pytest.raises(ValidationError) as exc_info:
        validator.validate({'label': 'Headquarters', 'floor': 12})
    assert exc_info.value.errors == [
        'The label may not be greater than 5 characters.',
        'The floor may not be greater than 10.'
    ]


def test_rule_parsing():
    rule = FieldRule.parse('country', 'nullable|alpha|size:2')
    assert rule == FieldRule(field='country', nullable=True, type='alpha', size=2)

    assert FieldRule.parse('is_primary', 'sometimes|boolean').required is False


@pytest.mark.parametrize('rule', ['required|uuid', 'nullable|string|max:many', 'string|numeric'])
def test_bad_rules_fail_at_construction(rule):
    with pytest.raises(ValueError):
        AddressValidator({'label': rule})
