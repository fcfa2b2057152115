__version__ = "0.0.1"

from suite_money.domain.monetary.currency import Currency, UnknownCurrency
from suite_money.domain.monetary.currency_record import CurrencyRecord
from suite_money.domain.monetary.currency_table import (
    CurrencyTable,
    get_currency_table,
    replaced_currency_table,
    set_currency_table,
)

__all__ = [
    "Currency",
    "CurrencyRecord",
    "CurrencyTable",
    "UnknownCurrency",
    "get_currency_table",
    "replaced_currency_table",
    "set_currency_table",
]
