"""
Column types.
"""
from decimal import Decimal

from sqlalchemy import String
from sqlalchemy.types import TypeDecorator


class DecimalString(TypeDecorator):
    """
    Stores a Decimal as its plain decimal string.

    Backends without a native decimal type (SQLite) would otherwise round
    Numeric values through binary floats; a string column keeps every
    digit of currency amounts and quantities exactly.
    """

    impl = String(64)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if not isinstance(value, Decimal):
            value = Decimal(str(value))
        return format(value, "f")

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value)
