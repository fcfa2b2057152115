from __future__ import annotations

import json
import logging
import threading
from contextlib import contextmanager
from enum import Enum
from importlib.resources import files
from pathlib import Path
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any

from bidict import bidict, DuplicationError

from suite_money.config import currency_table_path
from suite_money.domain.monetary.currency_record import CurrencyRecord

if TYPE_CHECKING:
    from suite_money.domain.monetary.currency import Currency, CurrencyLike

logger = logging.getLogger(__name__)

BUNDLED_DEFINITIONS = "currency_iso.json"


class CurrencyTable:
    """Read-only mapping from lower-case currency identifier to `CurrencyRecord`.

    The table is never mutated after construction. To use different definitions,
    build a new table and swap it in with `set_currency_table` or
    `replaced_currency_table`.
    """

    __slots__ = ("_records", "_iso_numeric_by_identifier", "_source")

    # region Init

    def __init__(self, records: Mapping[str, CurrencyRecord], source: str = "<memory>"):
        """Initialize table from already parsed records.

        Args:
            records: Mapping identifier -> CurrencyRecord. Identifiers are lower-cased.
            source: Human readable origin of the records (used in logs and errors).

        Raises:
            ValueError: If identifiers collide after lower-casing or two records share $iso_numeric.
            TypeError: If a key is not str or a value is not CurrencyRecord.
        """
        self._source = source
        self._records: dict[str, CurrencyRecord] = {}
        # Bi-directional index identifier <-> iso_numeric
        self._iso_numeric_by_identifier: bidict[str, str] = bidict()

        for identifier, record in records.items():
            # Raise: keys must be strings and values must be parsed records
            if not isinstance(identifier, str):
                raise TypeError(f"Cannot call `CurrencyTable.__init__` because identifier {identifier!r} is not str (got type '{type(identifier).__name__}')")
            if not isinstance(record, CurrencyRecord):
                raise TypeError(f"Cannot call `CurrencyTable.__init__` because record for '{identifier}' is not CurrencyRecord (got type '{type(record).__name__}')")

            key = identifier.strip().lower()

            # Raise: identifier must be unique after lower-casing
            if key in self._records:
                raise ValueError(f"Cannot call `CurrencyTable.__init__` because identifier '{key}' is defined more than once in {source}")

            try:
                self._iso_numeric_by_identifier[key] = record.iso_numeric
            except DuplicationError as e:
                other = self._iso_numeric_by_identifier.inverse[record.iso_numeric]
                raise ValueError(f"Cannot call `CurrencyTable.__init__` because '{key}' and '{other}' share $iso_numeric '{record.iso_numeric}' in {source}") from e

            self._records[key] = record

    @classmethod
    def from_mapping(cls, data: Mapping[str, Mapping[str, Any]], source: str = "<memory>") -> CurrencyTable:
        """Build table from raw definitions, e.g. parsed JSON.

        Args:
            data: Mapping identifier -> dict with record fields.
            source: Human readable origin of $data.

        Returns:
            CurrencyTable: New table.

        Raises:
            ValueError: If any definition is invalid. The message names the identifier.
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Currency definitions in {source} must be a mapping of identifier -> definition")

        records: dict[str, CurrencyRecord] = {}
        for identifier, definition in data.items():
            try:
                records[str(identifier)] = CurrencyRecord.from_dict(definition)
            except ValueError as e:
                raise ValueError(f"Invalid definition of currency '{identifier}' in {source}: {e}") from e

        return cls(records, source=source)

    @classmethod
    def from_json(cls, path: str | Path) -> CurrencyTable:
        """Load table from a JSON file with definitions keyed by identifier.

        Raises:
            ValueError: If the file is not valid JSON or contains invalid definitions.
            OSError: If the file cannot be read.
        """
        path = Path(path)
        return cls._from_json_text(path.read_text(encoding="utf-8"), source=str(path))

    @classmethod
    def _from_json_text(cls, text: str, source: str) -> CurrencyTable:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Currency definitions in {source} are not valid JSON: {e}") from e

        table = cls.from_mapping(data, source=source)
        logger.info(f"Loaded {len(table)} currency definition(s) from {source}")
        return table

    # endregion

    # region Lookup

    def record(self, identifier: str) -> CurrencyRecord | None:
        """Get raw record for an already normalized (lower-case) identifier."""
        return self._records.get(identifier)

    def find(self, identifier: CurrencyLike | None) -> Currency | None:
        """Find currency by case-insensitive identifier.

        Args:
            identifier: "usd", "USD", enum member or Currency.

        Returns:
            Currency | None: Matching currency, or None if the identifier is unknown or has unsupported type.
        """
        from suite_money.domain.monetary.currency import Currency, normalize_identifier

        if not isinstance(identifier, (str, Enum, Currency)):
            return None

        key = normalize_identifier(identifier)
        if key not in self._records:
            logger.debug(f"Currency '{key}' not found in {self._source}")
            return None

        return Currency(key, table=self)

    def wrap(self, value: CurrencyLike | None) -> Currency | None:
        """Normalize $value to Currency.

        Returns:
            Currency | None: $value itself if it is a Currency, None if $value is None,
            otherwise result of `find`.
        """
        from suite_money.domain.monetary.currency import Currency

        if value is None:
            return None
        if isinstance(value, Currency):
            return value
        return self.find(value)

    def find_by_iso_numeric(self, number: str | int | None) -> Currency | None:
        """Find currency by ISO 4217 numeric code, e.g. "840" or 840 for USD.

        Returns:
            Currency | None: Matching currency, or None if no currency has this numeric code.
        """
        if isinstance(number, bool) or not isinstance(number, (str, int)):
            return None

        iso_numeric = str(number).strip().zfill(3)
        identifier = self._iso_numeric_by_identifier.inverse.get(iso_numeric)
        if identifier is None:
            return None
        return self.find(identifier)

    def identifiers(self) -> list[str]:
        return list(self._records.keys())

    def all(self) -> list[Currency]:
        """All currencies sorted by $priority, ties broken by identifier."""
        return list(self)

    @property
    def source(self) -> str:
        return self._source

    # endregion

    # region Container protocol

    def __contains__(self, identifier: object) -> bool:
        return self.find(identifier) is not None

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Currency]:
        from suite_money.domain.monetary.currency import Currency

        ordered = sorted(self._records.items(), key=lambda item: (item[1].priority, item[0]))
        for identifier, _ in ordered:
            yield Currency(identifier, table=self)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(source={self._source!r}, size={len(self)})"

    # endregion


# region Process-wide table

_default_table: CurrencyTable | None = None
_default_table_lock = threading.Lock()


def load_currency_table() -> CurrencyTable:
    """Load table from the configured JSON file, or from the bundled definitions.

    Raises:
        ValueError: If the configured path is invalid or definitions are malformed.
    """
    path = currency_table_path()
    if path is not None:
        return CurrencyTable.from_json(path)

    resource = files("suite_money") / "data" / BUNDLED_DEFINITIONS
    return CurrencyTable._from_json_text(resource.read_text(encoding="utf-8"), source=f"bundled {BUNDLED_DEFINITIONS}")


def get_currency_table() -> CurrencyTable:
    """Get the process-wide table, loading it on first use."""
    global _default_table

    table = _default_table
    if table is not None:
        return table

    with _default_table_lock:
        if _default_table is None:
            _default_table = load_currency_table()
        return _default_table


def set_currency_table(table: CurrencyTable | None) -> CurrencyTable | None:
    """Replace the process-wide table.

    Passing None drops the current table, so the next `get_currency_table` call loads it again.
    Must not run concurrently with readers.

    Returns:
        CurrencyTable | None: The previous table (None if it was not loaded yet).
    """
    global _default_table

    # Raise: only CurrencyTable (or None) can become the process-wide table
    if table is not None and not isinstance(table, CurrencyTable):
        raise TypeError(f"Cannot call `set_currency_table` because $table is not CurrencyTable (got type '{type(table).__name__}')")

    with _default_table_lock:
        previous = _default_table
        _default_table = table

    logger.info(f"Replaced process-wide currency table with {table!r}")
    return previous


@contextmanager
def replaced_currency_table(table: CurrencyTable) -> Iterator[CurrencyTable]:
    """Temporarily use $table as the process-wide table.

    The previous table is restored on exit, also when the body raises.

    Example:
        >>> with replaced_currency_table(CurrencyTable.from_mapping({...})):
        ...     Currency("eur")
    """
    previous = set_currency_table(table)
    try:
        yield table
    finally:
        set_currency_table(previous)

# endregion
