from __future__ import annotations

import gc
import tracemalloc
from enum import Enum

import pytest

from suite_money.domain.monetary.currency import Currency, UnknownCurrency
from suite_money.domain.monetary.currency_table import get_currency_table, replaced_currency_table
from tests.helpers.test_assistant import TEST_ASSISTANT


class CurrencyToken(Enum):
    usd = 1
    EUR = 2


class CurrencyCode(str, Enum):
    USD = "USD"
    EUR = "eur"


# region find / wrap


def test_find_returns_currency_matching_given_id():
    with replaced_currency_table(TEST_ASSISTANT.currency.create_usd_eur_table()):
        expected = Currency("eur")
        assert Currency.find(CurrencyToken.EUR) == expected
        assert Currency.find(CurrencyCode.EUR) == expected
        assert Currency.find("eur") == expected
        assert Currency.find("EUR") == expected


def test_find_returns_none_for_unknown_id():
    assert Currency.find("ZZZ") is None
    assert Currency.find(None) is None
    assert Currency.find(840) is None


def test_wrap():
    usd = Currency("usd")

    assert Currency.wrap(None) is None
    assert Currency.wrap(usd) is usd
    assert Currency.wrap(CurrencyToken.usd) == usd
    assert Currency.wrap("USD") == usd
    assert Currency.wrap("ZZZ") is None


# endregion

# region Construction


def test_init_looks_up_data_from_loaded_table():
    currency = Currency("USD")

    assert currency.id == "usd"
    assert currency.priority == 1
    assert currency.iso_code == "USD"
    assert currency.iso_numeric == "840"
    assert currency.name == "United States Dollar"
    assert currency.decimal_mark == "."
    assert currency.separator == "."
    assert currency.thousands_separator == ","
    assert currency.delimiter == ","
    assert currency.symbol == "$"
    assert currency.subunit == "Cent"
    assert currency.subunit_to_unit == 100
    assert currency.symbol_first is True
    assert currency.html_entity == "$"


def test_init_accepts_enum_and_currency():
    usd = Currency(CurrencyCode.USD)

    assert usd.id == "usd"
    assert Currency(CurrencyToken.usd) == usd
    assert Currency(usd) == usd


def test_init_uses_explicit_table():
    table = TEST_ASSISTANT.currency.create_usd_eur_table()

    assert Currency("eur", table=table).symbol_first is False
    with pytest.raises(UnknownCurrency):
        Currency("cad", table=table)


def test_init_raises_unknown_currency_with_unknown_id():
    with pytest.raises(UnknownCurrency, match="xxx") as exc_info:
        Currency("xxx")

    assert exc_info.value.identifier == "xxx"
    assert isinstance(exc_info.value, ValueError)


def test_init_raises_type_error_for_unsupported_identifier():
    with pytest.raises(TypeError, match="identifier"):
        Currency(840)
    with pytest.raises(TypeError):
        Currency(None)


def test_repeated_unknown_lookups_do_not_grow_memory():
    table = get_currency_table()
    size_before = len(table)

    # Warm up lazy imports and caches before measuring
    with pytest.raises(UnknownCurrency):
        Currency("bogus")

    gc.collect()
    tracemalloc.start()
    try:
        before = tracemalloc.take_snapshot()
        for i in range(10_000):
            with pytest.raises(UnknownCurrency):
                Currency(f"bogus{i}")
        gc.collect()
        after = tracemalloc.take_snapshot()
    finally:
        tracemalloc.stop()

    only_suite_money = [tracemalloc.Filter(True, "*suite_money*")]
    stats = after.filter_traces(only_suite_money).compare_to(before.filter_traces(only_suite_money), "filename")
    growth = sum(stat.size_diff for stat in stats)

    # 10_000 retained identifiers would take several hundred KiB
    assert growth < 64 * 1024
    assert len(table) == size_before
    assert get_currency_table() is table


def test_currency_is_immutable():
    usd = Currency("usd")

    with pytest.raises(AttributeError):
        usd.priority = 2
    with pytest.raises(AttributeError):
        usd.extra = "value"
    with pytest.raises(AttributeError):
        usd._id = "eur"
    with pytest.raises(AttributeError):
        del usd._record

    assert usd.id == "usd"
    assert usd in {Currency("usd")}


# endregion

# region Comparison


def test_compares_objects_by_priority():
    assert Currency("cad") > Currency("usd")
    assert Currency("usd") < Currency("eur")
    assert Currency("usd") <= Currency("usd")
    assert Currency("eur") >= Currency("usd")


def test_compare_returns_sign_of_priority_difference():
    assert Currency("usd").compare(Currency("eur")) == -1
    assert Currency("eur").compare(Currency("usd")) == 1
    assert Currency("usd").compare(Currency("usd")) == 0

    with pytest.raises(TypeError):
        Currency("usd").compare("eur")


def test_sorted_orders_by_priority():
    currencies = [Currency("cad"), Currency("eur"), Currency("usd")]

    assert sorted(currencies) == [Currency("usd"), Currency("eur"), Currency("cad")]


def test_ordering_against_other_types_is_not_supported():
    with pytest.raises(TypeError):
        Currency("usd") < "eur"


def test_equal_to_itself():
    currency = Currency("eur")

    assert currency == currency


def test_equal_if_id_is_equal():
    assert Currency("eur") == Currency("eur")
    assert Currency("eur") != Currency("usd")
    assert Currency("eur") != "eur"


def test_hash_is_same_for_equal_objects():
    assert hash(Currency("eur")) == hash(Currency("eur"))
    assert hash(Currency("eur")) != hash(Currency("usd"))


def test_hash_allows_intersection_of_currency_collections():
    intersection = {Currency("eur"), Currency("usd")} & {Currency("eur")}

    assert intersection == {Currency("eur")}
    assert [c for c in [Currency("eur"), Currency("usd")] if c in {Currency("eur")}] == [Currency("eur")]


# endregion

# region String representations


def test_inspect():
    expected = "<Currency id: usd, priority: 1, symbol_first: True, thousands_separator: ,, html_entity: $, decimal_mark: ., name: United States Dollar, symbol: $, subunit_to_unit: 100, iso_code: USD, iso_numeric: 840, subunit: Cent>"

    assert Currency("usd").inspect() == expected
    assert repr(Currency("usd")) == expected


def test_inspect_renders_missing_fields_as_empty_text():
    assert "subunit: >" in Currency("jpy").inspect()
    assert ", symbol: ," in Currency("azn").inspect()


def test_str():
    assert str(Currency("usd")) == "USD"
    assert str(Currency("eur")) == "EUR"


def test_to_currency():
    usd = Currency("usd")

    assert usd.to_currency() is usd


def test_code():
    assert Currency("usd").code == "$"
    assert Currency("azn").code == "AZN"


def test_exponent():
    assert Currency("usd").exponent == 2
    assert Currency("jpy").exponent == 0
    assert Currency("bhd").exponent == 3


# endregion
