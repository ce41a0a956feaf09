"""Overlap checks between shift windows."""

from __future__ import annotations

from shiftguard.domain.models import ShiftWindow
from shiftguard.services.time_math import absolute_span


def spans_overlap(a: tuple[int, int], b: tuple[int, int]) -> bool:
    """Half-open interval intersection: a.start < b.end and b.start < a.end."""
    a_start, a_end = a
    b_start, b_end = b
    return a_start < b_end and b_start < a_end


def window_span(window: ShiftWindow) -> tuple[int, int]:
    return absolute_span(window.date, window.start, window.end)


def overlaps(a: ShiftWindow, b: ShiftWindow) -> bool:
    """Return True if the two windows share any instant.

    Overlap rule: conflict if a.start < b.end AND b.start < a.end, with
    overnight ends pushed into the next day. Exact boundary touches
    (a.end == b.start) are NOT overlaps, so back-to-back shifts are legal.
    """
    return spans_overlap(window_span(a), window_span(b))
