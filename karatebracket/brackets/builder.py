"""Build the rounds of a single-elimination bracket from a seed order."""

from __future__ import annotations

import random
from typing import Optional

from karatebracket.core.constants import (
    MATCH_FINISHED,
    MATCH_PENDING,
    MIN_COMPETITORS,
    SLOT_BYE,
)
from karatebracket.errors import ValidationError

from .models import BracketMatch, Competitor, Round, Slot, empty_slot
from .seeding import seed_competitors
from .utils import bracket_size, round_name, total_byes, total_rounds


def insert_byes(
    seed_sequence: list[Competitor], byes: int
) -> list[Optional[Competitor]]:
    """Spread `byes` placeholders through the seed order.

    Placeholders go in front of every `step`-th competitor, inserted from the
    back so earlier insertions do not shift later targets.
    """
    slots: list[Optional[Competitor]] = list(seed_sequence)
    if byes <= 0:
        return slots

    step = max(1, len(seed_sequence) // byes)
    for position in reversed([i * step for i in range(byes)]):
        slots.insert(position, None)
    return slots


def _bye_slot() -> Slot:
    return {"state": SLOT_BYE}


def _first_round_match(
    number: int,
    position: int,
    first: Optional[Competitor],
    second: Optional[Competitor],
) -> BracketMatch:
    """Pair two seeds, finishing the match at once when one side is a bye."""
    if first is None and second is None:
        raise ValueError(f"Round 1 match {number} would pair two byes.")

    match: BracketMatch = {
        "number": number,
        "position": position,
        "order": position + 1,
        "competitor1": first.ref.to_slot() if first else _bye_slot(),
        "competitor2": second.ref.to_slot() if second else _bye_slot(),
        "winner": None,
        "venue": None,
        "notes": None,
        "status": MATCH_PENDING,
    }

    walkover = first or second
    if first is None or second is None:
        match["winner"] = walkover.ref.to_winner()  # type: ignore[union-attr]
        match["status"] = MATCH_FINISHED
    return match


def _placeholder_match(number: int, position: int) -> BracketMatch:
    return {
        "number": number,
        "position": position,
        "order": position + 1,
        "competitor1": empty_slot(),
        "competitor2": empty_slot(),
        "winner": None,
        "venue": None,
        "notes": None,
        "status": MATCH_PENDING,
    }


def build_rounds(seed_sequence: list[Competitor], modality: str) -> list[Round]:
    """Lay out every round for an already seeded list of competitors."""
    if not seed_sequence:
        raise ValidationError("No competitors registered in this category.")
    if len(seed_sequence) < MIN_COMPETITORS:
        raise ValidationError("Insufficient competitors to build a bracket.")
    mismatched = [c.ref.id for c in seed_sequence if c.ref.kind != modality]
    if mismatched:
        raise ValueError(
            f"Competitors {mismatched} do not match bracket modality {modality}."
        )

    size = bracket_size(len(seed_sequence))
    rounds_count = total_rounds(size)
    slots = insert_byes(seed_sequence, total_byes(len(seed_sequence)))

    match_number = 1
    first_round: Round = {
        "number": 1,
        "name": round_name(1, rounds_count),
        "matches": [],
    }
    for position, index in enumerate(range(0, len(slots), 2)):
        first_round["matches"].append(
            _first_round_match(match_number, position, slots[index], slots[index + 1])
        )
        match_number += 1

    rounds = [first_round]
    for number in range(2, rounds_count + 1):
        matches = []
        for position in range(size // 2**number):
            matches.append(_placeholder_match(match_number, position))
            match_number += 1
        rounds.append(
            {"number": number, "name": round_name(number, rounds_count), "matches": matches}
        )

    return rounds


def generate_rounds(
    competitors: list[Competitor],
    modality: str,
    rng: Optional[random.Random] = None,
) -> list[Round]:
    """Seed the competitors and build the full bracket."""
    return build_rounds(seed_competitors(competitors, rng=rng), modality)
