from __future__ import annotations

import math
from enum import Enum
from typing import TYPE_CHECKING, Union

from suite_money.domain.monetary import currency_table as _currency_table
from suite_money.domain.monetary.currency_record import CurrencyRecord

if TYPE_CHECKING:
    from suite_money.domain.monetary.currency_table import CurrencyTable

# Accepted forms of currency identifier: "usd", "USD", enum member (symbolic token) or existing Currency
CurrencyLike = Union[str, Enum, "Currency"]


class UnknownCurrency(ValueError):
    """Raised when a currency identifier has no entry in the currency table.

    Attributes:
        identifier (str): The normalized (lower-case) identifier that was not found.
    """

    def __init__(self, identifier: str):
        super().__init__(f"Unknown currency '{identifier}'")
        self.identifier = identifier


def normalize_identifier(identifier: CurrencyLike) -> str:
    """Convert accepted identifier forms to the canonical lower-case key.

    The key is a fresh plain `str`; nothing is interned or stored, so repeated
    lookups of bogus identifiers leave no trace in any global structure.

    Args:
        identifier: Currency identifier as string, enum member or Currency.

    Returns:
        str: Lower-case identifier (e.g. "usd").

    Raises:
        TypeError: If $identifier has unsupported type.
    """
    if isinstance(identifier, Currency):
        return identifier.id

    if isinstance(identifier, Enum):
        # Symbolic token: use its string value when available, otherwise its member name
        value = identifier.value
        text = value if isinstance(value, str) else identifier.name
        return str(text).strip().lower()

    if isinstance(identifier, str):
        return identifier.strip().lower()

    raise TypeError(f"$identifier must be str, Enum or Currency, but provided value is: {identifier!r} (type '{type(identifier).__name__}')")


class Currency:
    """Immutable currency value looked up from the currency table.

    Two currencies are equal if their identifiers are equal. Ordering uses $priority
    (lower priority sorts first), so `Currency("usd") < Currency("eur")`.

    Attributes:
        id (str): Canonical lower-case identifier (e.g. "usd").
        priority (int): Ordering key, lower value means more common currency.
        iso_code (str): ISO 4217 alphabetic code.
        iso_numeric (str): ISO 4217 numeric code.
        name (str): Display name.
        symbol (str | None): Display symbol.
        subunit (str | None): Name of the minor unit.
        subunit_to_unit (int): How many subunits make one unit.
        symbol_first (bool): True if the symbol is written before the amount.
        html_entity (str): HTML representation of the symbol.
        decimal_mark (str): Decimal mark, also available as $separator.
        thousands_separator (str): Thousands separator, also available as $delimiter.
    """

    __slots__ = ("_id", "_record")

    # Field order used by `inspect`
    INSPECT_FIELDS = (
        "id",
        "priority",
        "symbol_first",
        "thousands_separator",
        "html_entity",
        "decimal_mark",
        "name",
        "symbol",
        "subunit_to_unit",
        "iso_code",
        "iso_numeric",
        "subunit",
    )

    def __init__(self, identifier: CurrencyLike, table: CurrencyTable | None = None):
        """Create Currency by looking up $identifier in the currency table.

        Args:
            identifier: Case-insensitive identifier ("usd", "USD"), enum member or Currency.
            table: Table to look the identifier up in. Defaults to the process-wide table.

        Raises:
            UnknownCurrency: If the table has no entry for $identifier.
            TypeError: If $identifier has unsupported type.
        """
        key = normalize_identifier(identifier)
        if table is None:
            table = _currency_table.get_currency_table()

        record = table.record(key)
        if record is None:
            raise UnknownCurrency(key)

        # Slots are written once here, `__setattr__` rejects any later assignment
        object.__setattr__(self, "_id", key)
        object.__setattr__(self, "_record", record)

    def __setattr__(self, name: str, value) -> None:
        raise AttributeError(f"Cannot set ${name} because `{self.__class__.__name__}` is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"Cannot delete ${name} because `{self.__class__.__name__}` is immutable")

    # region Lookup helpers

    @classmethod
    def find(cls, identifier: CurrencyLike | None) -> Currency | None:
        """Find currency in the process-wide table, returning None if it does not exist."""
        return _currency_table.get_currency_table().find(identifier)

    @classmethod
    def wrap(cls, value: CurrencyLike | None) -> Currency | None:
        """Return $value if it is a Currency, otherwise find it in the process-wide table."""
        return _currency_table.get_currency_table().wrap(value)

    def to_currency(self) -> Currency:
        return self

    # endregion

    # region Fields

    @property
    def id(self) -> str:
        """Get the currency identifier (lower case)."""
        return self._id

    @property
    def record(self) -> CurrencyRecord:
        """Get the table record this currency was created from."""
        return self._record

    @property
    def priority(self) -> int:
        """Get the currency priority."""
        return self._record.priority

    @property
    def iso_code(self) -> str:
        """Get the ISO 4217 alphabetic code."""
        return self._record.iso_code

    @property
    def iso_numeric(self) -> str:
        """Get the ISO 4217 numeric code."""
        return self._record.iso_numeric

    @property
    def name(self) -> str:
        """Get the currency name."""
        return self._record.name

    @property
    def symbol(self) -> str | None:
        """Get the currency symbol."""
        return self._record.symbol

    @property
    def subunit(self) -> str | None:
        """Get the subunit name."""
        return self._record.subunit

    @property
    def subunit_to_unit(self) -> int:
        """Get the number of subunits in one unit."""
        return self._record.subunit_to_unit

    @property
    def symbol_first(self) -> bool:
        """Check if the symbol precedes the amount."""
        return self._record.symbol_first

    @property
    def html_entity(self) -> str:
        """Get the HTML entity of the symbol."""
        return self._record.html_entity

    @property
    def decimal_mark(self) -> str:
        """Get the decimal mark."""
        return self._record.decimal_mark

    @property
    def thousands_separator(self) -> str:
        """Get the thousands separator."""
        return self._record.thousands_separator

    @property
    def separator(self) -> str:
        """Alias for $decimal_mark."""
        return self._record.decimal_mark

    @property
    def delimiter(self) -> str:
        """Alias for $thousands_separator."""
        return self._record.thousands_separator

    @property
    def exponent(self) -> int:
        """Number of decimal digits implied by $subunit_to_unit (e.g. 2 for 100, 0 for 1)."""
        return round(math.log10(self._record.subunit_to_unit))

    @property
    def code(self) -> str:
        """Get the symbol, or the upper-case ISO code if the currency has no distinct symbol.

        Returns:
            str: "$" for USD, "AZN" for AZN (which has no symbol).
        """
        symbol = self._record.symbol
        if symbol:
            return symbol
        return self._record.iso_code.upper()

    # endregion

    # region Comparison

    def compare(self, other: Currency) -> int:
        """Compare by $priority.

        Returns:
            int: -1 if $self sorts before $other, 0 if priorities are equal, 1 otherwise.

        Raises:
            TypeError: If $other is not Currency.
        """
        if not isinstance(other, Currency):
            raise TypeError(f"Cannot call `Currency.compare` because $other is not Currency (got type '{type(other).__name__}')")
        return (self.priority > other.priority) - (self.priority < other.priority)

    def __lt__(self, other) -> bool:
        if not isinstance(other, Currency):
            return NotImplemented
        return self.priority < other.priority

    def __le__(self, other) -> bool:
        if not isinstance(other, Currency):
            return NotImplemented
        return self.priority <= other.priority

    def __gt__(self, other) -> bool:
        if not isinstance(other, Currency):
            return NotImplemented
        return self.priority > other.priority

    def __ge__(self, other) -> bool:
        if not isinstance(other, Currency):
            return NotImplemented
        return self.priority >= other.priority

    def __eq__(self, other) -> bool:
        """Check equality with another Currency (same $id)."""
        if self is other:
            return True
        if not isinstance(other, Currency):
            return False
        return self._id == other._id

    def __hash__(self) -> int:
        """Hash based on $id."""
        return hash(self._id)

    # endregion

    # region String representations

    def __str__(self) -> str:
        """Return upper-case ISO code like 'USD'."""
        return self._record.iso_code.upper()

    def inspect(self) -> str:
        """Return all fields in fixed order, like '<Currency id: usd, priority: 1, ...>'."""
        parts = []
        for field_name in self.INSPECT_FIELDS:
            value = getattr(self, field_name)
            parts.append(f"{field_name}: {'' if value is None else value}")
        return f"<{self.__class__.__name__} {', '.join(parts)}>"

    def __repr__(self) -> str:
        return self.inspect()

    # endregion
