from collections import Counter

import pytest

from vending_service.change_calculator import calculate_change

EURO_STOCK = {200: 10, 100: 10, 50: 10, 20: 10, 10: 10}


def test_zero_amount_needs_no_coins():
    assert calculate_change(0, EURO_STOCK) == []
    assert calculate_change(0, {}) == []


def test_empty_stock_cannot_pay_anything():
    assert calculate_change(10, {}) is None
    assert calculate_change(1, {}) is None


def test_largest_coins_first():
    assert calculate_change(50, EURO_STOCK) == [50]
    assert calculate_change(380, EURO_STOCK) == [200, 100, 50, 20, 10]
    assert calculate_change(90, EURO_STOCK) == [50, 20, 20]


def test_runs_out_of_a_denomination_and_uses_smaller_ones():
    assert calculate_change(190, {100: 1, 50: 1, 20: 5}) == [100, 50, 20, 20]


def test_result_sums_to_amount_and_respects_counts():
    available = {200: 1, 100: 2, 50: 1, 20: 3, 10: 2, 5: 1}
    for amount in (5, 15, 35, 75, 130, 265, 475):
        coins = calculate_change(amount, available)
        assert coins is not None, amount
        assert sum(coins) == amount
        for value, used in Counter(coins).items():
            assert used <= available[value]


def test_unreachable_amount_fails():
    assert calculate_change(5, {10: 3}) is None
    assert calculate_change(70, {50: 1, 10: 1}) is None


def test_greedy_does_not_backtrack():
    # three 10s would work, but the 25 is taken first and strands 5
    assert calculate_change(30, {25: 1, 10: 3}) is None


def test_does_not_modify_available():
    available = {50: 2, 10: 1}
    calculate_change(60, available)
    assert available == {50: 2, 10: 1}


def test_zero_count_denominations_are_skipped():
    assert calculate_change(20, {50: 0, 20: 1}) == [20]


def test_negative_amount_is_rejected():
    with pytest.raises(ValueError):
        calculate_change(-10, EURO_STOCK)
