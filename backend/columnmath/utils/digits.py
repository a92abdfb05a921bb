"""
digits.py: deterministic column arithmetic over zero-padded digit strings.

Column 0 is the most significant digit. Every function here is pure and
total over non-negative integers: it never raises and always returns
lists of exactly `width` items.
"""
import logging
from typing import Literal, NamedTuple, Optional

logger = logging.getLogger("columnmath.digits")

Place = Literal["thousands", "hundreds", "tens", "ones"]

PLACE_VALUES: dict[str, int] = {
    "thousands": 1000,
    "hundreds": 100,
    "tens": 10,
    "ones": 1,
}

# Sampler operands are 3-digit, so carry/borrow eligibility is judged at this width.
SAMPLER_WIDTH = 3


class BorrowAdjustment(NamedTuple):
    borrows: list[bool]
    adjusted: list[int]


class PlaceValues(NamedTuple):
    thousands: int
    hundreds: int
    tens: int
    ones: int


def pad_number(num: int, length: int) -> str:
    """Zero-left-pad. Never truncates: pad_number(12345, 3) → "12345"."""
    return str(num).zfill(length)


def digits_of(num: int, width: int) -> list[int]:
    """Low `width` digits of num, most significant first."""
    return [int(c) for c in pad_number(num, width)[-width:]] if width > 0 else []


def carry_width(num1: int, num2: int, answer: int) -> int:
    return max(len(str(num1)), len(str(num2)), len(str(answer)))


def calculate_carry_positions(num1: int, num2: int, width: int) -> list[bool]:
    """
    carries[i] is True when a carry flows INTO column i from column i+1.
    The carry out of column 0 is dropped.
    Example: 156 + 278, width 3 → [True, True, False]
    """
    top = digits_of(num1, width)
    bottom = digits_of(num2, width)
    carries = [False] * width
    carry = 0

    for i in range(width - 1, -1, -1):
        total = top[i] + bottom[i] + carry
        carry = 1 if total >= 10 else 0
        if carry and i > 0:
            carries[i - 1] = True

    return carries


def calculate_column_sums(num1: int, num2: int, width: int) -> tuple[list[int], int]:
    """Per-column sums including the incoming carry, plus the carry out of column 0."""
    top = digits_of(num1, width)
    bottom = digits_of(num2, width)
    column_sums = [0] * width
    carry = 0

    for i in range(width - 1, -1, -1):
        total = top[i] + bottom[i] + carry
        column_sums[i] = total
        carry = 1 if total >= 10 else 0

    return column_sums, carry


def borrow_into(digits: list[int], receiver: int) -> Optional[tuple[list[int], int]]:
    """
    Borrow ten into digits[receiver] from the nearest non-zero column to its
    left; zeros passed over become 9. Returns (new_digits, giver), or None
    when no column to the left can give.
    """
    giver = receiver - 1
    while giver >= 0 and digits[giver] == 0:
        giver -= 1
    if giver < 0:
        return None

    out = list(digits)
    out[receiver] += 10
    for k in range(receiver - 1, giver, -1):
        out[k] = 9
    out[giver] -= 1
    return out, giver


def calculate_borrow_adjustments(num1: int, num2: int, width: int) -> BorrowAdjustment:
    """
    Top-row digits after every borrow cascade.

    borrows[i] marks a column that received 10. A column with nothing to
    its left that can give keeps its digit as it is; that only happens when
    num1 < num2 within the width.
    Example: 423 - 187, width 3 → borrows [False, True, True], adjusted [3, 11, 13]
    """
    adjusted = digits_of(num1, width)
    bottom = digits_of(num2, width)
    borrows = [False] * width

    for i in range(width - 1, 0, -1):
        if adjusted[i] >= bottom[i]:
            continue

        step = borrow_into(adjusted, i)
        if step is None:
            logger.warning(
                "borrow underflow: no column left of %d can give (num1=%d, num2=%d)",
                i, num1, num2,
            )
            continue

        adjusted, _ = step
        borrows[i] = True

    return BorrowAdjustment(borrows, adjusted)


def get_digit_at_place(number: int, place: Place) -> int:
    value = PLACE_VALUES[place]
    return (number % (value * 10)) // value


def parse_into_place_values(number: int) -> PlaceValues:
    """Four fixed places; 12345 → PlaceValues(2, 3, 4, 5)."""
    return PlaceValues(
        thousands=(number // 1000) % 10,
        hundreds=(number // 100) % 10,
        tens=(number // 10) % 10,
        ones=number % 10,
    )


def needs_carry(num1: int, num2: int) -> bool:
    """Any 3-digit column sum reaching 10, the hundreds column included."""
    column_sums, _ = calculate_column_sums(num1, num2, SAMPLER_WIDTH)
    return any(total >= 10 for total in column_sums)


def needs_borrow(num1: int, num2: int) -> bool:
    top = digits_of(num1, SAMPLER_WIDTH)
    bottom = digits_of(num2, SAMPLER_WIDTH)
    return any(t < b for t, b in zip(top, bottom))
