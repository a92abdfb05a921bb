"""
Tests for digits.py: column carry/borrow decomposition.
"""
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from columnmath.utils.digits import (
    borrow_into,
    calculate_borrow_adjustments,
    calculate_carry_positions,
    calculate_column_sums,
    carry_width,
    digits_of,
    get_digit_at_place,
    needs_borrow,
    needs_carry,
    pad_number,
    parse_into_place_values,
)


def _value_of(digits: list[int]) -> int:
    # Column values may exceed 9 after a borrow; weight each by its place.
    width = len(digits)
    return sum(d * 10 ** (width - 1 - i) for i, d in enumerate(digits))


# ── pad_number ────────────────────────────────────────────────────────────────

class TestPadNumber:
    def test_pads_left_with_zeros(self):
        assert pad_number(34, 3) == "034"
        assert pad_number(7, 4) == "0007"

    def test_exact_width_unchanged(self):
        assert pad_number(434, 3) == "434"

    def test_never_truncates(self):
        assert pad_number(12345, 3) == "12345"

    def test_zero(self):
        assert pad_number(0, 3) == "000"

    def test_round_trips_through_int(self):
        for n in range(0, 10000, 37):
            for width in range(len(str(n)), 6):
                assert int(pad_number(n, width)) == n


class TestDigitsOf:
    def test_most_significant_first(self):
        assert digits_of(423, 3) == [4, 2, 3]

    def test_padded(self):
        assert digits_of(42, 4) == [0, 0, 4, 2]

    def test_keeps_low_digits_when_too_wide(self):
        assert digits_of(1598, 3) == [5, 9, 8]

    def test_zero_width(self):
        assert digits_of(5, 0) == []


class TestCarryWidth:
    def test_three_digit_sum(self):
        assert carry_width(156, 278, 434) == 3

    def test_answer_grows_a_digit(self):
        assert carry_width(799, 799, 1598) == 4


# ── calculate_carry_positions ─────────────────────────────────────────────────

class TestCarryPositions:
    def test_worked_example(self):
        # 6+8=14 carries into tens, 5+7+1=13 carries into hundreds, 1+2+1=4
        assert calculate_carry_positions(156, 278, 3) == [True, True, False]

    def test_no_carry(self):
        assert calculate_carry_positions(123, 456, 3) == [False, False, False]

    def test_carry_only_from_ones(self):
        assert calculate_carry_positions(118, 123, 3) == [False, True, False]

    def test_carry_chain_through_nines(self):
        # 9+1 → carry, 9+0+1 → carry
        assert calculate_carry_positions(199, 1, 3) == [True, True, False]

    def test_carry_out_of_top_column_dropped(self):
        assert calculate_carry_positions(900, 100, 3) == [False, False, False]

    def test_length_always_width(self):
        for width in range(1, 6):
            assert len(calculate_carry_positions(57, 68, width)) == width

    def test_matches_column_sums(self):
        for a in range(0, 1000, 23):
            for b in range(0, 1000, 41):
                width = carry_width(a, b, a + b)
                carries = calculate_carry_positions(a, b, width)
                sums, _ = calculate_column_sums(a, b, width)
                for i in range(1, width):
                    assert carries[i - 1] == (sums[i] >= 10), (a, b, i)


class TestColumnSums:
    def test_includes_incoming_carry(self):
        sums, final = calculate_column_sums(156, 278, 3)
        assert sums == [4, 13, 14]
        assert final == 0

    def test_final_carry(self):
        sums, final = calculate_column_sums(799, 799, 3)
        assert sums == [15, 19, 18]
        assert final == 1


# ── calculate_borrow_adjustments ──────────────────────────────────────────────

class TestBorrowAdjustments:
    def test_worked_example(self):
        borrows, adjusted = calculate_borrow_adjustments(423, 187, 3)
        assert borrows == [False, True, True]
        assert adjusted == [3, 11, 13]

    def test_no_borrow(self):
        borrows, adjusted = calculate_borrow_adjustments(468, 123, 3)
        assert borrows == [False, False, False]
        assert adjusted == [4, 6, 8]

    def test_cascade_through_zero(self):
        borrows, adjusted = calculate_borrow_adjustments(503, 187, 3)
        assert borrows == [False, False, True]
        assert adjusted == [4, 9, 13]

    def test_cascade_through_two_zeros(self):
        borrows, adjusted = calculate_borrow_adjustments(1000, 1, 4)
        assert borrows == [False, False, False, True]
        assert adjusted == [0, 9, 9, 10]

    def test_top_column_never_borrows(self):
        borrows, adjusted = calculate_borrow_adjustments(100, 200, 3)
        assert borrows[0] is False
        assert adjusted[0] == 1

    def test_underflow_leaves_digits_untouched(self):
        # 005 - 009: nothing to the left can give
        borrows, adjusted = calculate_borrow_adjustments(5, 9, 3)
        assert borrows == [False, False, False]
        assert adjusted == [0, 0, 5]

    def test_adjusted_subtraction_reproduces_difference(self):
        for a in range(0, 1000, 7):
            for b in range(0, a + 1, 13):
                _, adjusted = calculate_borrow_adjustments(a, b, 3)
                bottom = digits_of(b, 3)
                diffs = [t - d for t, d in zip(adjusted, bottom)]
                assert all(0 <= d <= 9 for d in diffs), (a, b, adjusted)
                assert _value_of(diffs) == a - b
                assert _value_of(adjusted) == a

    def test_length_always_width(self):
        for width in range(1, 6):
            borrows, adjusted = calculate_borrow_adjustments(42, 17, width)
            assert len(borrows) == width
            assert len(adjusted) == width


class TestBorrowInto:
    def test_neighbour_gives(self):
        assert borrow_into([4, 2, 3], 2) == ([4, 1, 13], 1)

    def test_zeros_become_nine(self):
        assert borrow_into([5, 0, 3], 2) == ([4, 9, 13], 0)

    def test_nothing_to_give(self):
        assert borrow_into([0, 0, 3], 2) is None

    def test_input_not_mutated(self):
        digits = [4, 2, 3]
        borrow_into(digits, 2)
        assert digits == [4, 2, 3]


# ── place values ──────────────────────────────────────────────────────────────

class TestPlaceValues:
    def test_four_places(self):
        assert parse_into_place_values(4827) == (4, 8, 2, 7)

    def test_small_number(self):
        pv = parse_into_place_values(7)
        assert pv.thousands == 0
        assert pv.ones == 7

    def test_truncates_above_four_places(self):
        assert parse_into_place_values(12345) == (2, 3, 4, 5)

    def test_digit_at_place(self):
        assert get_digit_at_place(4827, "thousands") == 4
        assert get_digit_at_place(4827, "hundreds") == 8
        assert get_digit_at_place(4827, "tens") == 2
        assert get_digit_at_place(4827, "ones") == 7


# ── needs_carry / needs_borrow ────────────────────────────────────────────────

class TestNeedsCarry:
    def test_ones_carry(self):
        assert needs_carry(156, 278)

    def test_no_carry(self):
        assert not needs_carry(123, 456)

    def test_hundreds_overflow_counts(self):
        assert needs_carry(700, 400)


class TestNeedsBorrow:
    def test_ones_borrow(self):
        assert needs_borrow(423, 187)

    def test_tens_borrow(self):
        assert needs_borrow(468, 192)

    def test_no_borrow(self):
        assert not needs_borrow(468, 123)
