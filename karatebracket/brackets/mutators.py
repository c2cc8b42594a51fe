"""Administrative overrides applied to a whole bracket."""

from __future__ import annotations

import copy
from typing import Any

from karatebracket.core.constants import BRACKET_GENERATED, MATCH_PENDING

from .models import Bracket, OrderChange, SlotSwap, empty_slot
from .progression import find_match, find_round, has_bye


def reset_bracket(bracket: Bracket) -> Bracket:
    """Roll the bracket back to its freshly generated state.

    Round-1 byes keep their automatic result; every other result, venue and
    note is cleared and all slots after round 1 are emptied.
    """
    for round_ in bracket.get("rounds", []):
        for match in round_["matches"]:
            if not has_bye(match):
                match["winner"] = None
                match["status"] = MATCH_PENDING
                match["venue"] = None
                match["notes"] = None

    for round_ in bracket.get("rounds", [])[1:]:
        for match in round_["matches"]:
            match["competitor1"] = empty_slot()
            match["competitor2"] = empty_slot()
            match["winner"] = None
            match["status"] = MATCH_PENDING

    bracket["status"] = BRACKET_GENERATED
    return bracket


def swap_slots(bracket: Bracket, swaps: list[SlotSwap]) -> Bracket:
    """Exchange slot contents between matches.

    This is a manual override: nothing checks that the result is still a
    consistent bracket.
    """
    for swap in swaps:
        first = find_match(
            find_round(bracket, swap.first.round_number), swap.first.match_number
        )
        second = find_match(
            find_round(bracket, swap.second.round_number), swap.second.match_number
        )
        first_slot = first[swap.first.slot]  # type: ignore[literal-required]
        first[swap.first.slot] = second[swap.second.slot]  # type: ignore[literal-required]
        second[swap.second.slot] = first_slot  # type: ignore[literal-required]
    return bracket


def reorder_matches(
    bracket: Bracket, round_number: int, changes: list[OrderChange]
) -> Bracket:
    """Overwrite the execution order of matches in one round."""
    round_ = find_round(bracket, round_number)
    for change in changes:
        find_match(round_, change.match_number)["order"] = change.order
    return bracket


def copy_bracket(
    bracket: Bracket,
    category_id: str,
    public_token: str,
    created_by: str,
    category_name: str | None = None,
) -> dict[str, Any]:
    """Deep copy a bracket's structure into a new document for another category."""
    keep = (
        "modality",
        "rounds",
        "totalCompetitors",
        "bracketSize",
        "status",
        "competitorIds",
        "dojoIds",
    )
    duplicate: dict[str, Any] = {
        key: copy.deepcopy(bracket[key]) for key in keep if key in bracket  # type: ignore[literal-required]
    }
    duplicate.update(
        {
            "categoryId": category_id,
            "categoryName": category_name or bracket.get("categoryName", ""),
            "publicToken": public_token,
            "createdBy": created_by,
            "version": 1,
        }
    )
    return duplicate
