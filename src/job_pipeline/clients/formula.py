"""
Airtable filterByFormula builders.

Small composable helpers so query code reads as logic rather than string
concatenation. Values are quoted with double quotes; embedded quotes and
backslashes are escaped.
"""

from typing import Iterable


def field_ref(name: str) -> str:
    return '{' + name + '}'


def quote(value: str) -> str:
    escaped = value.replace('\\', '\\\\').replace('"', '\\"')
    return f'"{escaped}"'


def eq(field: str, value: str) -> str:
    return f'{field_ref(field)} = {quote(value)}'


def ne(field: str, value: str) -> str:
    return f'{field_ref(field)} != {quote(value)}'


def is_true(field: str) -> str:
    return f'{field_ref(field)} = TRUE()'


def is_blank(field: str) -> str:
    return f'{field_ref(field)} = BLANK()'


def not_blank(field: str) -> str:
    return f'{field_ref(field)} != BLANK()'


def lte_today(field: str) -> str:
    return f'{field_ref(field)} <= TODAY()'


def is_same_day_today(field: str) -> str:
    return f"IS_SAME({field_ref(field)}, TODAY(), 'day')"


def and_(*clauses: str) -> str:
    return f"AND({', '.join(clauses)})"


def or_(*clauses: str) -> str:
    return f"OR({', '.join(clauses)})"


def not_(clause: str) -> str:
    return f'NOT({clause})'


def any_of(field: str, values: Iterable[str]) -> str:
    """True when the field equals any of the given values."""
    return or_(*(eq(field, v) for v in values))
