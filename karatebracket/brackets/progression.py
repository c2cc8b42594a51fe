"""Recording results and advancing winners through the bracket."""

from __future__ import annotations

from typing import Optional

from karatebracket.core.constants import (
    BRACKET_FINISHED,
    BRACKET_GENERATED,
    BRACKET_IN_PROGRESS,
    MATCH_FINISHED,
    MATCH_IN_PROGRESS,
    MATCH_PENDING,
    SLOT_BYE,
    SLOT_EMPTY,
)
from karatebracket.errors import ConflictError, NotFoundError, ValidationError

from .models import Bracket, BracketMatch, CompetitorRef, Round


def find_round(bracket: Bracket, round_number: int) -> Round:
    """Return the round with the given number."""
    for round_ in bracket.get("rounds", []):
        if round_["number"] == round_number:
            return round_
    raise NotFoundError(f"Round {round_number} not found.")


def find_match(round_: Round, match_number: int) -> BracketMatch:
    """Return the match with the given global number inside a round."""
    for match in round_["matches"]:
        if match["number"] == match_number:
            return match
    raise NotFoundError(
        f"Match {match_number} not found in round {round_['number']}."
    )


def has_bye(match: BracketMatch) -> bool:
    """True when either side of the match is an automatic pass."""
    return SLOT_BYE in (
        match["competitor1"].get("state"),
        match["competitor2"].get("state"),
    )


def seated_competitors(match: BracketMatch) -> list[CompetitorRef]:
    """Competitors currently occupying the match's slots."""
    seated = []
    for name in ("competitor1", "competitor2"):
        ref = CompetitorRef.from_slot(match[name])  # type: ignore[literal-required]
        if ref is not None:
            seated.append(ref)
    return seated


def advancement_target(position: int) -> tuple[int, str]:
    """Next-round match position and slot fed by the match at `position`."""
    return position // 2, "competitor1" if position % 2 == 0 else "competitor2"


def compute_status(bracket: Bracket) -> str:
    """Derive the overall bracket status from its matches.

    Bye matches finish at generation and are not results, so only contested
    matches can move a bracket out of `generated`.
    Advancing a bye winner therefore leaves a fresh bracket `generated`,
    unlike recording a contested result.
    """
    matches = [m for r in bracket.get("rounds", []) for m in r["matches"]]
    if matches and all(m["status"] == MATCH_FINISHED for m in matches):
        return BRACKET_FINISHED
    if any(m["status"] != MATCH_PENDING and not has_bye(m) for m in matches):
        return BRACKET_IN_PROGRESS
    return BRACKET_GENERATED


def _resolve_winner(
    bracket: Bracket, match: BracketMatch, winner_id: str, strict: bool
) -> CompetitorRef:
    for ref in seated_competitors(match):
        if ref.id == winner_id:
            return ref
    if strict:
        raise ValidationError(
            f"Competitor {winner_id} is not seated in match {match['number']}."
        )
    return CompetitorRef(kind=bracket["modality"], id=winner_id)


def _next_match(
    bracket: Bracket, round_number: int, match: BracketMatch
) -> tuple[Optional[BracketMatch], str]:
    """Match and slot the winner of `match` advances into, if any."""
    target_position, slot_name = advancement_target(match["position"])
    if round_number >= len(bracket["rounds"]):
        return None, slot_name
    for target in find_round(bracket, round_number + 1)["matches"]:
        if target["position"] == target_position:
            return target, slot_name
    return None, slot_name


def record_result(  # noqa: PLR0913
    bracket: Bracket,
    round_number: int,
    match_number: int,
    winner_id: str,
    venue: Optional[int] = None,
    notes: Optional[str] = None,
    strict: bool = True,
) -> BracketMatch:
    """Finish a match, advance its winner and refresh the bracket status.

    Mutates `bracket` in place and returns the updated match.
    """
    if not winner_id:
        raise ValidationError("A winner is required.")

    round_ = find_round(bracket, round_number)
    match = find_match(round_, match_number)
    if SLOT_EMPTY in (
        match["competitor1"].get("state"),
        match["competitor2"].get("state"),
    ):
        raise ValidationError(
            f"Match {match_number} cannot finish before both competitors are known."
        )
    winner = _resolve_winner(bracket, match, winner_id, strict)

    target, slot_name = _next_match(bracket, round_number, match)
    if target is not None:
        seated = CompetitorRef.from_slot(target[slot_name])  # type: ignore[literal-required]
        if target["status"] != MATCH_PENDING and (seated is None or seated.id != winner.id):
            raise ConflictError(
                f"Match {target['number']} has already started; reset the bracket "
                "or swap pairings before changing this result."
            )

    match["winner"] = winner.to_winner()
    match["status"] = MATCH_FINISHED
    if venue is not None:
        match["venue"] = venue
    if notes is not None:
        match["notes"] = notes

    if target is not None:
        target[slot_name] = winner.to_slot()  # type: ignore[literal-required]

    bracket["status"] = compute_status(bracket)
    return match


def update_match_details(  # noqa: PLR0913
    bracket: Bracket,
    round_number: int,
    match_number: int,
    venue: Optional[int] = None,
    notes: Optional[str] = None,
    started: bool = False,
) -> BracketMatch:
    """Set venue/notes and optionally mark a pending match as in progress."""
    match = find_match(find_round(bracket, round_number), match_number)

    if venue is not None:
        match["venue"] = venue
    if notes is not None:
        match["notes"] = notes

    if started:
        if match["status"] == MATCH_FINISHED:
            raise ValidationError(f"Match {match_number} is already finished.")
        if len(seated_competitors(match)) < 2:  # noqa: PLR2004
            raise ValidationError(
                f"Match {match_number} cannot start before both competitors are known."
            )
        match["status"] = MATCH_IN_PROGRESS

    bracket["status"] = compute_status(bracket)
    return match
