"""Pure phase rules derived from the session counter."""

from __future__ import annotations

from .constants import PHASE_LONG_BREAK, PHASE_SHORT_BREAK, PHASE_WORK


def phase_for_session(session_number: int, long_break_interval: int) -> str:
    """Map a session counter onto the phase it represents.

    Odd counters are breaks and even counters are work. Every
    ``2 * long_break_interval - 1``-th counter is a long break, so with an
    interval of 4 the long break falls on counter 7, after the fourth work
    session.

    Only positive counters are breaks; a counter driven below zero by
    reverting past the first session maps back to work.
    """
    if session_number > 0 and session_number % 2 == 1:
        if session_number % (long_break_interval * 2 - 1) == 0:
            return PHASE_LONG_BREAK
        return PHASE_SHORT_BREAK
    return PHASE_WORK


def next_session_number(session_number: int, *, is_previous: bool) -> int:
    return session_number - 1 if is_previous else session_number + 1
