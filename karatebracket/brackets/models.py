"""Data models for the brackets blueprint."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, TypedDict

from karatebracket.core.constants import (
    MODALITIES,
    SLOT_EMPTY,
    SLOT_FILLED,
    SLOT_NAMES,
)
from karatebracket.core.types import FirestoreDocument
from karatebracket.errors import ValidationError


class Slot(TypedDict, total=False):
    """A competitor slot inside a match: empty, bye or filled."""

    state: str
    kind: str
    id: str
    dojoId: Optional[str]

    # Read views only, never persisted
    details: dict[str, Any]


class Winner(TypedDict, total=False):
    """The winner reference of a finished match."""

    kind: str
    id: str

    # Read views only, never persisted
    details: dict[str, Any]


class BracketMatch(TypedDict, total=False):
    """A single match (combat) inside a round."""

    number: int
    position: int
    order: int
    competitor1: Slot
    competitor2: Slot
    winner: Optional[Winner]
    venue: Optional[int]
    notes: Optional[str]
    status: str


class Round(TypedDict):
    """An ordered list of matches sharing a round number."""

    number: int
    name: str
    matches: list[BracketMatch]


class Bracket(FirestoreDocument, total=False):
    """A bracket document in Firestore, keyed by its category id."""

    categoryId: str
    categoryName: str
    modality: str
    publicToken: str
    rounds: list[Round]
    totalCompetitors: int
    bracketSize: int
    status: str
    createdBy: str
    competitorIds: list[str]
    dojoIds: list[str]
    version: int


@dataclass(frozen=True)
class CompetitorRef:
    """Tagged reference to an individual participant or a team."""

    kind: str
    id: str
    dojo_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Reject unknown variants."""
        if self.kind not in MODALITIES:
            raise ValueError(f"Unknown competitor kind: {self.kind}")

    def to_slot(self) -> Slot:
        """Render the reference as a filled slot."""
        return {
            "state": SLOT_FILLED,
            "kind": self.kind,
            "id": self.id,
            "dojoId": self.dojo_id,
        }

    def to_winner(self) -> Winner:
        """Render the reference as a match winner."""
        return {"kind": self.kind, "id": self.id}

    @classmethod
    def from_slot(cls, slot: Slot | None) -> CompetitorRef | None:
        """Return the reference held by a filled slot, or None."""
        if not slot or slot.get("state") != SLOT_FILLED:
            return None
        return cls(kind=slot["kind"], id=slot["id"], dojo_id=slot.get("dojoId"))


@dataclass
class Competitor:
    """An eligible competitor as handed over by the registration stores."""

    ref: CompetitorRef
    name: str = ""
    dojo_name: str = ""
    attributes: dict[str, Any] = field(default_factory=dict)

    @property
    def dojo_id(self) -> Optional[str]:
        """Dojo affiliation used for seeding separation."""
        return self.ref.dojo_id


def empty_slot() -> Slot:
    """Return a slot awaiting seeding or advancement."""
    return {"state": SLOT_EMPTY}


@dataclass
class ResultSubmission:
    """Body of a record-result request."""

    winner_id: Optional[str]
    venue: Optional[int] = None
    notes: Optional[str] = None
    expected_version: Optional[int] = None

    @classmethod
    def from_json(cls, payload: dict[str, Any] | None) -> ResultSubmission:
        """Build a submission from a JSON body."""
        payload = payload or {}
        return cls(
            winner_id=payload.get("winnerId"),
            venue=optional_int(payload.get("venue"), "venue"),
            notes=optional_str(payload.get("notes"), "notes"),
            expected_version=optional_int(
                payload.get("expectedVersion"), "expectedVersion"
            ),
        )

    def validate(self) -> None:
        """Validate the submission for obvious errors."""
        if not self.winner_id or not isinstance(self.winner_id, str):
            raise ValidationError("A winner is required.")
        if self.venue is not None and self.venue < 1:
            raise ValidationError("Venue must be a positive tatami number.")
        if self.notes is not None and not isinstance(self.notes, str):
            raise ValidationError("'notes' must be text.")


@dataclass
class MatchDetailsSubmission:
    """Body of a match-details request (venue, notes, start)."""

    venue: Optional[int] = None
    notes: Optional[str] = None
    started: bool = False
    expected_version: Optional[int] = None

    @classmethod
    def from_json(cls, payload: dict[str, Any] | None) -> MatchDetailsSubmission:
        """Build a submission from a JSON body."""
        payload = payload or {}
        return cls(
            venue=optional_int(payload.get("venue"), "venue"),
            notes=optional_str(payload.get("notes"), "notes"),
            started=bool(payload.get("started", False)),
            expected_version=optional_int(
                payload.get("expectedVersion"), "expectedVersion"
            ),
        )

    def validate(self) -> None:
        """Validate the submission for obvious errors."""
        if self.venue is not None and self.venue < 1:
            raise ValidationError("Venue must be a positive tatami number.")
        if self.notes is not None and not isinstance(self.notes, str):
            raise ValidationError("'notes' must be text.")


@dataclass(frozen=True)
class SlotLocator:
    """Points at one competitor slot of one match."""

    round_number: int
    match_number: int
    slot: str

    @classmethod
    def from_json(cls, payload: Any) -> SlotLocator:
        """Parse `{round, match, slot}`."""
        if not isinstance(payload, dict):
            raise ValidationError("Each swap side needs round, match and slot.")
        slot = payload.get("slot")
        if slot not in SLOT_NAMES:
            raise ValidationError(f"Slot must be one of {', '.join(SLOT_NAMES)}.")
        return cls(
            round_number=_required_int(payload.get("round"), "round"),
            match_number=_required_int(payload.get("match"), "match"),
            slot=slot,
        )


@dataclass(frozen=True)
class SlotSwap:
    """Exchange the contents of two slots."""

    first: SlotLocator
    second: SlotLocator

    @classmethod
    def list_from_json(cls, payload: dict[str, Any] | None) -> list[SlotSwap]:
        """Parse `{swaps: [{first, second}, ...]}`."""
        swaps = (payload or {}).get("swaps")
        if not isinstance(swaps, list) or not swaps:
            raise ValidationError("At least one swap is required.")
        parsed = []
        for item in swaps:
            if not isinstance(item, dict):
                raise ValidationError("Each swap needs a first and a second side.")
            parsed.append(
                cls(
                    first=SlotLocator.from_json(item.get("first")),
                    second=SlotLocator.from_json(item.get("second")),
                )
            )
        return parsed


@dataclass(frozen=True)
class OrderChange:
    """New execution order for one match."""

    match_number: int
    order: int

    @classmethod
    def list_from_json(cls, payload: dict[str, Any] | None) -> list[OrderChange]:
        """Parse `{orders: [{match, order}, ...]}`."""
        orders = (payload or {}).get("orders")
        if not isinstance(orders, list) or not orders:
            raise ValidationError("At least one order change is required.")
        parsed = []
        for item in orders:
            if not isinstance(item, dict):
                raise ValidationError("Each order change needs match and order.")
            change = cls(
                match_number=_required_int(item.get("match"), "match"),
                order=_required_int(item.get("order"), "order"),
            )
            if change.order < 1:
                raise ValidationError("Order must be 1 or greater.")
            parsed.append(change)
        return parsed


def _required_int(value: Any, name: str) -> int:
    parsed = optional_int(value, name)
    if parsed is None:
        raise ValidationError(f"'{name}' is required.")
    return parsed


def optional_int(value: Any, name: str) -> Optional[int]:
    """Parse an optional integer field from a JSON body."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError(f"'{name}' must be an integer.")
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError(f"'{name}' must be an integer.")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"'{name}' must be an integer.") from e


def optional_str(value: Any, name: str) -> Optional[str]:
    """Parse an optional text field from a JSON body."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"'{name}' must be text.")
    return value
