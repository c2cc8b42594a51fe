"""Service layer for bracket persistence and orchestration."""

from __future__ import annotations

import copy
import logging
import random
import secrets
from typing import TYPE_CHECKING, Any, Callable, Optional, cast

from firebase_admin import firestore

from karatebracket.core.constants import (
    BRACKET_GENERATED,
    BRACKETS_COLLECTION,
    CATEGORIES_COLLECTION,
    DEFAULT_PUBLIC_TOKEN_BYTES,
    MIN_COMPETITORS,
    MODALITIES,
)
from karatebracket.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)

from . import mutators, progression
from .builder import generate_rounds
from .competitors import fetch_eligible_competitors, populate_bracket
from .models import (
    Bracket,
    Competitor,
    MatchDetailsSubmission,
    OrderChange,
    ResultSubmission,
    SlotSwap,
)
from .utils import bracket_size

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.document import DocumentReference
    from google.cloud.firestore_v1.transaction import Transaction


def new_public_token(nbytes: int = DEFAULT_PUBLIC_TOKEN_BYTES) -> str:
    """Generate an opaque token for unauthenticated sharing."""
    return secrets.token_hex(nbytes)


def _with_id(snapshot: Any) -> Bracket:
    data = cast(Bracket, snapshot.to_dict() or {})
    data["id"] = snapshot.id
    return data


def can_view(bracket: Bracket, viewer: dict[str, Any]) -> bool:
    """Admins see every bracket; senseis only those with their dojo's competitors."""
    if viewer.get("is_admin"):
        return True
    dojo_id = viewer.get("dojoId")
    return bool(dojo_id) and dojo_id in bracket.get("dojoIds", [])


class BracketService:
    """Handles business logic and data access for brackets."""

    @staticmethod
    def _ref(db: Client, bracket_id: str) -> DocumentReference:
        return db.collection(BRACKETS_COLLECTION).document(bracket_id)

    @staticmethod
    def _mutate(
        db: Client,
        bracket_id: str,
        mutation: Callable[[Bracket], Any],
        expected_version: Optional[int] = None,
    ) -> Bracket:
        """Apply `mutation` to the bracket as one transactional read-modify-write.

        The mutation works on a copy; any exception aborts the transaction
        before anything is written.
        """
        ref = BracketService._ref(db, bracket_id)

        @firestore.transactional
        def apply(transaction: Transaction) -> None:
            snapshot = ref.get(transaction=transaction)
            if not snapshot.exists:
                raise NotFoundError("Bracket not found.")
            current = cast(Bracket, snapshot.to_dict() or {})
            version = current.get("version", 1)
            if expected_version is not None and expected_version != version:
                raise ConflictError(
                    "Bracket was modified by someone else. Reload and try again."
                )

            working = copy.deepcopy(current)
            mutation(working)
            working["version"] = version + 1
            working["updatedAt"] = firestore.SERVER_TIMESTAMP
            transaction.set(ref, working)

        apply(db.transaction())
        return BracketService.get_bracket(bracket_id, db=db)

    @staticmethod
    def create_bracket(  # noqa: PLR0913
        category_id: str,
        category: dict[str, Any],
        competitors: list[Competitor],
        created_by: str,
        db: Client | None = None,
        rng: Optional[random.Random] = None,
        token_bytes: int = DEFAULT_PUBLIC_TOKEN_BYTES,
    ) -> Bracket:
        """Seed, build and store the bracket for one category."""
        if db is None:
            db = firestore.client()

        modality = category.get("modality")
        if modality not in MODALITIES:
            raise ValidationError(f"Category {category_id} has an unknown modality.")

        rounds = generate_rounds(competitors, modality, rng=rng)
        payload: dict[str, Any] = {
            "categoryId": category_id,
            "categoryName": category.get("name", ""),
            "modality": modality,
            "publicToken": new_public_token(token_bytes),
            "rounds": rounds,
            "totalCompetitors": len(competitors),
            "bracketSize": bracket_size(len(competitors)),
            "status": BRACKET_GENERATED,
            "createdBy": created_by,
            "competitorIds": sorted(c.ref.id for c in competitors),
            "dojoIds": sorted({c.dojo_id for c in competitors if c.dojo_id}),
            "version": 1,
            "createdAt": firestore.SERVER_TIMESTAMP,
            "updatedAt": firestore.SERVER_TIMESTAMP,
        }
        BracketService._insert(db, category_id, payload)
        return BracketService.get_bracket(category_id, db=db)

    @staticmethod
    def _insert(db: Client, category_id: str, payload: dict[str, Any]) -> None:
        """Store a new bracket, refusing to replace the category's existing one."""
        ref = BracketService._ref(db, category_id)

        @firestore.transactional
        def insert(transaction: Transaction) -> None:
            if ref.get(transaction=transaction).exists:
                raise ConflictError("A bracket already exists for this category.")
            transaction.set(ref, payload)

        insert(db.transaction())

    @staticmethod
    def generate_all(
        created_by: str,
        db: Client | None = None,
        rng: Optional[random.Random] = None,
        token_bytes: int = DEFAULT_PUBLIC_TOKEN_BYTES,
    ) -> dict[str, list[dict[str, Any]]]:
        """Generate brackets for every active category that lacks one.

        Each category is an isolated unit of work: failures are collected in
        `errors` and never stop the remaining categories.
        """
        if db is None:
            db = firestore.client()

        results: dict[str, list[dict[str, Any]]] = {
            "generated": [],
            "warnings": [],
            "errors": [],
        }
        categories = (
            db.collection(CATEGORIES_COLLECTION)
            .where(filter=firestore.FieldFilter("active", "==", True))
            .stream()
        )

        for category_doc in categories:
            category = category_doc.to_dict() or {}
            name = category.get("name", category_doc.id)
            try:
                if BracketService._ref(db, category_doc.id).get().exists:
                    results["warnings"].append({
                        "category": name,
                        "message": "A bracket already exists for this category.",
                    })
                    continue

                competitors = fetch_eligible_competitors(db, category_doc.id, category)
                if not competitors:
                    results["warnings"].append({
                        "category": name,
                        "message": "No competitors registered in this category.",
                    })
                    continue
                if len(competitors) < MIN_COMPETITORS:
                    results["warnings"].append({
                        "category": name,
                        "message": "Only 1 competitor registered.",
                        "competitor": competitors[0].name,
                    })
                    continue

                bracket = BracketService.create_bracket(
                    category_doc.id,
                    category,
                    competitors,
                    created_by,
                    db=db,
                    rng=rng,
                    token_bytes=token_bytes,
                )
                results["generated"].append({
                    "category": name,
                    "bracketId": bracket["id"],
                    "competitors": bracket["totalCompetitors"],
                    "rounds": len(bracket["rounds"]),
                })
            except Exception as e:
                logging.exception(f"Bracket generation failed for category {name}")
                results["errors"].append({"category": name, "error": str(e)})

        return results

    @staticmethod
    def get_bracket(bracket_id: str, db: Client | None = None) -> Bracket:
        """Fetch a bracket by id or raise NotFoundError."""
        if db is None:
            db = firestore.client()
        snapshot = BracketService._ref(db, bracket_id).get()
        if not snapshot.exists:
            raise NotFoundError("Bracket not found.")
        return _with_id(snapshot)

    @staticmethod
    def get_bracket_for_viewer(
        bracket_id: str, viewer: dict[str, Any], db: Client | None = None
    ) -> Bracket:
        """Fetch a bracket with display details, enforcing read filtering."""
        if db is None:
            db = firestore.client()
        bracket = BracketService.get_bracket(bracket_id, db=db)
        if not can_view(bracket, viewer):
            raise AuthorizationError("You cannot view this bracket.")
        return populate_bracket(db, bracket)

    @staticmethod
    def get_public_bracket(token: str, db: Client | None = None) -> Bracket:
        """Fetch a bracket through its public share token."""
        if not token:
            raise NotFoundError("Bracket not found.")
        if db is None:
            db = firestore.client()
        docs = list(
            db.collection(BRACKETS_COLLECTION)
            .where(filter=firestore.FieldFilter("publicToken", "==", token))
            .limit(1)
            .stream()
        )
        if not docs:
            raise NotFoundError("Bracket not found.")
        return populate_bracket(db, _with_id(docs[0]))

    @staticmethod
    def list_brackets(
        viewer: dict[str, Any], db: Client | None = None
    ) -> list[Bracket]:
        """List brackets visible to the viewer."""
        if db is None:
            db = firestore.client()
        collection = db.collection(BRACKETS_COLLECTION)
        if viewer.get("is_admin"):
            docs = collection.stream()
        elif viewer.get("dojoId"):
            docs = collection.where(
                filter=firestore.FieldFilter("dojoIds", "array_contains", viewer["dojoId"])
            ).stream()
        else:
            return []
        brackets = [_with_id(doc) for doc in docs if doc.exists]
        brackets.sort(key=lambda b: b.get("categoryName", ""))
        return brackets

    @staticmethod
    def record_result(  # noqa: PLR0913
        bracket_id: str,
        round_number: int,
        match_number: int,
        submission: ResultSubmission,
        strict: bool = True,
        db: Client | None = None,
    ) -> Bracket:
        """Record a match winner and advance it."""
        if db is None:
            db = firestore.client()
        submission.validate()
        return BracketService._mutate(
            db,
            bracket_id,
            lambda bracket: progression.record_result(
                bracket,
                round_number,
                match_number,
                cast(str, submission.winner_id),
                venue=submission.venue,
                notes=submission.notes,
                strict=strict,
            ),
            expected_version=submission.expected_version,
        )

    @staticmethod
    def update_match_details(
        bracket_id: str,
        round_number: int,
        match_number: int,
        submission: MatchDetailsSubmission,
        db: Client | None = None,
    ) -> Bracket:
        """Set venue/notes on a match and optionally start it."""
        if db is None:
            db = firestore.client()
        submission.validate()
        return BracketService._mutate(
            db,
            bracket_id,
            lambda bracket: progression.update_match_details(
                bracket,
                round_number,
                match_number,
                venue=submission.venue,
                notes=submission.notes,
                started=submission.started,
            ),
            expected_version=submission.expected_version,
        )

    @staticmethod
    def reset_bracket(
        bracket_id: str,
        expected_version: Optional[int] = None,
        db: Client | None = None,
    ) -> Bracket:
        """Clear every recorded result."""
        if db is None:
            db = firestore.client()
        return BracketService._mutate(
            db, bracket_id, mutators.reset_bracket, expected_version=expected_version
        )

    @staticmethod
    def swap_pairings(
        bracket_id: str,
        swaps: list[SlotSwap],
        expected_version: Optional[int] = None,
        db: Client | None = None,
    ) -> Bracket:
        """Exchange competitor slots between matches."""
        if db is None:
            db = firestore.client()
        return BracketService._mutate(
            db,
            bracket_id,
            lambda bracket: mutators.swap_slots(bracket, swaps),
            expected_version=expected_version,
        )

    @staticmethod
    def reorder_matches(
        bracket_id: str,
        round_number: int,
        changes: list[OrderChange],
        expected_version: Optional[int] = None,
        db: Client | None = None,
    ) -> Bracket:
        """Change the execution order of matches in a round."""
        if db is None:
            db = firestore.client()
        return BracketService._mutate(
            db,
            bracket_id,
            lambda bracket: mutators.reorder_matches(bracket, round_number, changes),
            expected_version=expected_version,
        )

    @staticmethod
    def duplicate_bracket(
        bracket_id: str,
        target_category_id: str,
        created_by: str,
        db: Client | None = None,
        token_bytes: int = DEFAULT_PUBLIC_TOKEN_BYTES,
    ) -> Bracket:
        """Copy a bracket onto another category."""
        if db is None:
            db = firestore.client()
        if not target_category_id:
            raise ValidationError("A target category is required.")

        source = BracketService.get_bracket(bracket_id, db=db)
        target_doc = db.collection(CATEGORIES_COLLECTION).document(target_category_id).get()
        if not target_doc.exists:
            raise NotFoundError("Target category not found.")

        payload = mutators.copy_bracket(
            source,
            target_category_id,
            new_public_token(token_bytes),
            created_by,
            category_name=(target_doc.to_dict() or {}).get("name"),
        )
        payload["createdAt"] = firestore.SERVER_TIMESTAMP
        payload["updatedAt"] = firestore.SERVER_TIMESTAMP
        BracketService._insert(db, target_category_id, payload)
        return BracketService.get_bracket(target_category_id, db=db)

    @staticmethod
    def delete_bracket(category_id: str, db: Client | None = None) -> None:
        """Delete the category's bracket so it can be regenerated."""
        if db is None:
            db = firestore.client()
        ref = BracketService._ref(db, category_id)
        if not ref.get().exists:
            raise NotFoundError("Bracket not found.")
        ref.delete()
