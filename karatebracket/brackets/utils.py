"""Utility functions for bracket arithmetic and round labels."""

from __future__ import annotations

ROUND_LABELS = {
    1: "Final",
    2: "Semifinal",
    3: "Quarterfinal",
    4: "Round of 16",
}


def next_power_of_two(n: int) -> int:
    """Return the smallest power of two greater than or equal to n."""
    power = 1
    while power < n:
        power *= 2
    return power


def bracket_size(total_competitors: int) -> int:
    """Number of round-1 slots for the given competitor count."""
    return next_power_of_two(total_competitors)


def total_byes(total_competitors: int) -> int:
    """Number of automatic passes needed to fill round 1."""
    return bracket_size(total_competitors) - total_competitors


def total_rounds(size: int) -> int:
    """Number of rounds in a bracket of the given (power of two) size."""
    return max(size.bit_length() - 1, 0)


def round_name(round_number: int, rounds: int) -> str:
    """Label a round by how far it is from the final."""
    remaining = rounds - round_number + 1
    return ROUND_LABELS.get(remaining, f"Round {round_number}")
