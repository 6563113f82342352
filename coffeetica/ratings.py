"""Rating aggregation - the single rounding policy for half-star ratings.

Both the backend (coffee details, catalog) and the client (legacy local
aggregate) call these functions, so an average computed on either side is
identical for the same set of ratings.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Union

Number = Union[int, float, Decimal]

MIN_RATING = Decimal('0.5')
MAX_RATING = Decimal('5')
RATING_STEP = Decimal('0.5')


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps 4.5 as 4.5 instead of its binary expansion
    return Decimal(str(value))


def round_to_half_star(value: Number) -> float:
    """
    Round to the nearest multiple of 0.5, ties rounding up.

    Doubles the value, rounds half-up to an integer and halves it again.

    Example:
        >>> round_to_half_star(3.25)
        3.5
        >>> round_to_half_star(3.2)
        3.0
    """
    doubled = (_to_decimal(value) * 2).quantize(Decimal('1'), rounding=ROUND_HALF_UP)
    return float(doubled / 2)


def average(ratings: Iterable[Number]) -> float:
    """
    Average rating rounded to half-star granularity.

    Args:
        ratings: Individual review ratings

    Returns:
        0 for an empty collection, otherwise round_to_half_star(mean)
    """
    values = [_to_decimal(r) for r in ratings]
    if not values:
        return 0.0
    return round_to_half_star(sum(values) / len(values))


def is_half_star(value: Number) -> bool:
    """True if value is one of 0.5, 1.0, ..., 5.0."""
    try:
        rating = _to_decimal(value)
    except (ArithmeticError, ValueError, TypeError):
        return False
    if not rating.is_finite():
        return False
    if rating < MIN_RATING or rating > MAX_RATING:
        return False
    return rating % RATING_STEP == 0
