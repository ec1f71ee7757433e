"""Field validation for address records.

Rules are written as ``|`` separated tokens, for example
``nullable|string|max:140``. They are parsed once when the validator is
built so that a bad rule table fails at startup rather than on first use.
"""
import logging
import math
import numbers
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

from .exceptions import ValidationError
from .schema import DEFAULT_RULES

TYPE_RULES = ('string', 'alpha', 'numeric', 'boolean')
PRESENCE_RULES = ('required', 'nullable', 'sometimes')
SIZED_RULES = ('max', 'size')

TRUE_VALUES = (True, 1, '1')

# Plain decimal notation with an optional exponent; no underscores, nan or inf
NUMERIC_PATTERN = re.compile(r'[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?', re.ASCII)


@dataclass(frozen=True)
class FieldRule:
    """Parsed constraints for a single field."""

    field: str
    required: bool = False
    nullable: bool = False
    type: Optional[str] = None
    max: Optional[float] = None
    size: Optional[int] = None

    @classmethod
    def parse(cls, field: str, rule: str) -> 'FieldRule':
        """Parse a rule string such as ``required|string|max:255``."""
        options: Dict[str, Any] = {}
        types = []
        for token in filter(None, (part.strip() for part in rule.split('|'))):
            name, _, argument = token.partition(':')
            if name in PRESENCE_RULES:
                if name != 'sometimes':
                    options[name] = True
            elif name in TYPE_RULES:
                types.append(name)
            elif name in SIZED_RULES:
                try:
                    options[name] = int(argument) if name == 'size' else float(argument)
                except ValueError:
                    raise ValueError(f"Rule '{token}' for field '{field}' needs a numeric argument")
            else:
                raise ValueError(f"Unknown validation rule '{token}' for field '{field}'")
        if len(types) > 1:
            raise ValueError(f"Field '{field}' has more than one type rule: {', '.join(types)}")
        return cls(field=field, type=types[0] if types else None, **options)


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, str):
        value = value.strip()
        if not NUMERIC_PATTERN.fullmatch(value):
            return False
    elif not isinstance(value, (numbers.Real, Decimal)):
        return False
    try:
        return math.isfinite(float(value))
    except (OverflowError, ValueError):
        return False


def _size_of(rule: FieldRule, value: Any) -> float:
    if isinstance(value, str) and rule.type != 'numeric':
        return len(value)
    return float(value)


def _is_boolean(value: Any) -> bool:
    # 1 == True in Python, so compare types explicitly
    if isinstance(value, bool):
        return True
    if isinstance(value, int):
        return value in (0, 1)
    return isinstance(value, str) and value in ('0', '1')


class AddressValidator:
    """Validates a flat field map against a rule table."""

    def __init__(self, rules: Optional[Mapping[str, str]] = None):
        rules = DEFAULT_RULES if rules is None else rules
        self.rules: Dict[str, FieldRule] = {
            field: FieldRule.parse(field, rule) for field, rule in rules.items()
        }
        self.logger = logging.getLogger(self.__class__.__name__)

    def check(self, fields: Mapping[str, Any]) -> List[str]:
        """Return every failure message for ``fields``; empty when valid."""
        errors = []
        for name, rule in self.rules.items():
            errors.extend(self._check_field(rule, name in fields, fields.get(name)))
        return errors

    def _check_field(self, rule: FieldRule, present: bool, value: Any) -> List[str]:
        name = rule.field
        empty = value is None or (isinstance(value, str) and not value.strip())

        if rule.required and (not present or empty):
            return [f"The {name} field is required."]
        if not present:
            return []
        if value is None and rule.nullable:
            return []

        errors = []
        if rule.type == 'string' and not isinstance(value, str):
            errors.append(f"The {name} must be a string.")
        elif rule.type == 'alpha' and not (isinstance(value, str) and value.isalpha()):
            errors.append(f"The {name} may only contain letters.")
        elif rule.type == 'numeric' and not _is_number(value):
            errors.append(f"The {name} must be a number.")
        elif rule.type == 'boolean' and not _is_boolean(value):
            errors.append(f"The {name} field must be true or false.")
        if errors:
            return errors

        if rule.size is not None and isinstance(value, str) and len(value) != rule.size:
            unit = ' characters' if rule.type in ('string', 'alpha', None) else ''
            errors.append(f"The {name} must be {rule.size}{unit}.")
        if rule.max is not None and _size_of(rule, value) > rule.max:
            if isinstance(value, str) and rule.type != 'numeric':
                errors.append(f"The {name} may not be greater than {int(rule.max)} characters.")
            else:
                errors.append(f"The {name} may not be greater than {rule.max:g}.")
        return errors

    def _coerce(self, rule: FieldRule, value: Any) -> Any:
        if value is None:
            return None
        if rule.type == 'boolean':
            return value in TRUE_VALUES
        if rule.type == 'numeric':
            return float(value.strip()) if isinstance(value, str) else float(value)
        return value

    def validate(self, fields: Mapping[str, Any]) -> Dict[str, Any]:
        """Validate ``fields`` and return the values to store.

        Raises:
            ValidationError: when ``label`` is missing, or with every failing
                rule message when any field is invalid

        Only fields named in the rule table are returned; booleans come back
        as ``bool`` and numerics as ``float``.
        """
        if fields.get('label') is None:
            raise ValidationError('No label given.')

        errors = self.check(fields)
        if errors:
            self.logger.debug(f"Address failed validation: {errors}")
            raise ValidationError(errors)

        return {
            name: self._coerce(rule, fields[name])
            for name, rule in self.rules.items()
            if name in fields
        }