from __future__ import annotations

import re
from dataclasses import dataclass
from collections.abc import Mapping
from typing import Any, ClassVar


@dataclass(frozen=True)
class CurrencyRecord:
    """Static definition of one currency, as stored in the currency table.

    Example:
        >>> record = CurrencyRecord.from_dict({"priority": 1, "iso_code": "USD", "iso_numeric": "840", ...})
        >>> record.iso_code
        'USD'

    Attributes:
        priority: Default ordering key, lower value means more common currency.
        iso_code: ISO 4217 alphabetic code (e.g. "USD").
        iso_numeric: ISO 4217 numeric code as 3-digit string (e.g. "840").
        name: Display name (e.g. "United States Dollar").
        symbol: Display symbol (e.g. "$"), None if the currency has no distinct symbol.
        subunit: Name of the minor unit (e.g. "Cent"), None if there is no minor unit.
        subunit_to_unit: How many subunits make one unit (e.g. 100).
        symbol_first: True if the symbol is written before the amount.
        html_entity: HTML representation of the symbol.
        decimal_mark: Character separating whole units from subunits.
        thousands_separator: Separator of thousands groups.
    """

    priority: int
    iso_code: str
    iso_numeric: str
    name: str
    symbol: str | None
    subunit: str | None
    subunit_to_unit: int
    symbol_first: bool
    html_entity: str
    decimal_mark: str
    thousands_separator: str

    ISO_CODE_PATTERN: ClassVar[re.Pattern] = re.compile(r"^[A-Z]{3}$")
    ISO_NUMERIC_PATTERN: ClassVar[re.Pattern] = re.compile(r"^[0-9]{3}$")

    def __post_init__(self) -> None:
        # Raise: $priority must be a positive int (bool is rejected, it is an int subclass)
        if not isinstance(self.priority, int) or isinstance(self.priority, bool) or self.priority <= 0:
            raise ValueError(f"$priority must be a positive integer, but provided value is: {self.priority!r}")

        # Raise: $iso_code must be 3 uppercase letters
        if not isinstance(self.iso_code, str) or not self.ISO_CODE_PATTERN.match(self.iso_code):
            raise ValueError(f"$iso_code must be 3 uppercase letters, but provided value is: {self.iso_code!r}")

        # Raise: $iso_numeric must be 3 digits
        if not isinstance(self.iso_numeric, str) or not self.ISO_NUMERIC_PATTERN.match(self.iso_numeric):
            raise ValueError(f"$iso_numeric must be a 3-digit string, but provided value is: {self.iso_numeric!r}")

        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError(f"$name must be a non-empty string, but provided value is: {self.name!r}")

        if self.symbol is not None and not isinstance(self.symbol, str):
            raise ValueError(f"$symbol must be a string or None, but provided value is: {self.symbol!r}")

        if self.subunit is not None and not isinstance(self.subunit, str):
            raise ValueError(f"$subunit must be a string or None, but provided value is: {self.subunit!r}")

        if not isinstance(self.subunit_to_unit, int) or isinstance(self.subunit_to_unit, bool) or self.subunit_to_unit <= 0:
            raise ValueError(f"$subunit_to_unit must be a positive integer, but provided value is: {self.subunit_to_unit!r}")

        if not isinstance(self.symbol_first, bool):
            raise ValueError(f"$symbol_first must be a bool, but provided value is: {self.symbol_first!r}")

        for field_name in ("html_entity", "decimal_mark", "thousands_separator"):
            value = getattr(self, field_name)
            if not isinstance(value, str):
                raise ValueError(f"${field_name} must be a string, but provided value is: {value!r}")

        if len(self.decimal_mark) != 1:
            raise ValueError(f"$decimal_mark must be a single character, but provided value is: {self.decimal_mark!r}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CurrencyRecord:
        """Build a record from one entry of the JSON currency definitions.

        Keys `symbol` and `subunit` are optional (missing means None). Unknown keys are ignored.

        Args:
            data: Mapping with currency fields.

        Returns:
            CurrencyRecord: New validated record.

        Raises:
            ValueError: If a required field is missing or has an invalid value.
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Currency definition must be a mapping, but provided value is: {data!r}")

        try:
            return cls(
                priority=data["priority"],
                iso_code=data["iso_code"],
                iso_numeric=data["iso_numeric"],
                name=data["name"],
                symbol=data.get("symbol"),
                subunit=data.get("subunit"),
                subunit_to_unit=data["subunit_to_unit"],
                symbol_first=data["symbol_first"],
                html_entity=data["html_entity"],
                decimal_mark=data["decimal_mark"],
                thousands_separator=data["thousands_separator"],
            )
        except KeyError as e:
            raise ValueError(f"Currency definition is missing required field ${e.args[0]}") from e
