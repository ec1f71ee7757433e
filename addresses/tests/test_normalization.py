"""Tests for import value cleaning."""
import math

from ..utils.normalization import clean_field


def test_clean_field():
    assert clean_field('  12   Main  St ') == '12 Main St'
    assert clean_field('NL') == 'NL'
    assert clean_field(52.1) == 52.1
    assert clean_field(0) == 0

    # Missing values
    assert clean_field(None) is None
    assert clean_field(math.nan) is None
    assert clean_field('   ') is None
    assert clean_field('') is None
