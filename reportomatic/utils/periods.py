"""Month helpers used to name archive folders and to plan a run."""

from __future__ import annotations

from typing import List, Optional

from .errors import InvalidRangeError

# Folder labels used on the shared drive; the numeric prefix keeps them sorted.
MONTH_LABELS: tuple[str, ...] = (
    "1.Enero",
    "2.Febrero",
    "3.Marzo",
    "4.Abril",
    "5.Mayo",
    "6.Junio",
    "7.Julio",
    "8.Agosto",
    "9.Septiembre",
    "10.Octubre",
    "11.Noviembre",
    "12.Diciembre",
)


def _check_month(month: int) -> int:
    if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
        raise InvalidRangeError(f"Month must be an integer between 1 and 12, got {month!r}")
    return month


def month_label(month: int) -> str:
    """Return the archive label for *month* (``3`` → ``"3.Marzo"``).

    Raises:
        InvalidRangeError: When *month* is outside 1–12.
    """
    return MONTH_LABELS[_check_month(month) - 1]


def generate_months(start: Optional[int] = None, end: Optional[int] = None) -> List[int]:
    """Return the months a run should iterate, in order.

    Args:
        start: First month (inclusive) or ``None``.
        end: Last month (inclusive) or ``None``.

    Returns:
        ``[1..12]`` when both bounds are ``None``; ``start..end`` when both are
        given; a one-element list with whichever bound was supplied otherwise.

    Raises:
        InvalidRangeError: When a bound lies outside 1–12 or *start* > *end*.
    """
    if start is None and end is None:
        return list(range(1, 13))
    if start is not None and end is not None:
        _check_month(start)
        _check_month(end)
        if start > end:
            raise InvalidRangeError(
                f"Start month ({start}) cannot be greater than end month ({end})"
            )
        return list(range(start, end + 1))
    single = start if start is not None else end
    return [_check_month(single)]


__all__ = ["MONTH_LABELS", "month_label", "generate_months"]
