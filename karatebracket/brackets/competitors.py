"""Lookups against the registration stores (participants, teams, dojos)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, cast

from firebase_admin import firestore

from karatebracket.core.constants import (
    DOJOS_COLLECTION,
    GENDER_MIXED,
    LEVEL_GRADES,
    MODALITY_INDIVIDUAL,
    MODALITY_TEAM,
    PARTICIPANTS_COLLECTION,
    TEAM_ACTIVE,
    TEAMS_COLLECTION,
)
from karatebracket.errors import ValidationError

from .models import Bracket, Competitor, CompetitorRef

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client


def is_eligible_participant(category: dict[str, Any], participant: dict[str, Any]) -> bool:
    """Apply the category's age, gender and level rules to a participant."""
    age = participant.get("age")
    age_min = category.get("ageMin")
    age_max = category.get("ageMax")
    if age_min is not None and (age is None or age < age_min):
        return False
    if age_max is not None and (age is None or age > age_max):
        return False

    gender = category.get("gender")
    if gender and gender != GENDER_MIXED and participant.get("gender") != gender:
        return False

    grades = LEVEL_GRADES.get(category.get("level") or "")
    if grades is not None and participant.get("grade") not in grades:
        return False

    return True


def _dojo_names(db: Client, dojo_ids: Iterable[str | None]) -> dict[str, str]:
    """Fetch dojo display names for the given ids."""
    unique_ids = {dojo_id for dojo_id in dojo_ids if dojo_id}
    if not unique_ids:
        return {}
    refs = [db.collection(DOJOS_COLLECTION).document(d) for d in unique_ids]
    docs = cast(list["DocumentSnapshot"], db.get_all(refs))
    return {
        doc.id: (doc.to_dict() or {}).get("name", "Unknown Dojo")
        for doc in docs
        if doc.exists
    }


def fetch_eligible_competitors(
    db: Client, category_id: str, category: dict[str, Any]
) -> list[Competitor]:
    """Return every competitor eligible for the category, per its modality."""
    modality = category.get("modality")

    if modality == MODALITY_INDIVIDUAL:
        discipline = category.get("discipline")
        if not discipline:
            raise ValidationError(f"Category {category_id} has no discipline.")
        docs = (
            db.collection(PARTICIPANTS_COLLECTION)
            .where(filter=firestore.FieldFilter("disciplines", "array_contains", discipline))
            .stream()
        )
        records = []
        for doc in docs:
            data = doc.to_dict()
            if data and is_eligible_participant(category, data):
                records.append((doc.id, data))
    elif modality == MODALITY_TEAM:
        docs = (
            db.collection(TEAMS_COLLECTION)
            .where(filter=firestore.FieldFilter("categoryId", "==", category_id))
            .stream()
        )
        records = []
        for doc in docs:
            data = doc.to_dict()
            if data and data.get("status") == TEAM_ACTIVE:
                records.append((doc.id, data))
    else:
        raise ValidationError(f"Category {category_id} has an unknown modality.")

    dojo_names = _dojo_names(db, (data.get("dojoId") for _, data in records))

    competitors = []
    for doc_id, data in records:
        dojo_id = data.get("dojoId")
        attributes: dict[str, Any]
        if modality == MODALITY_INDIVIDUAL:
            attributes = {"grade": data.get("grade"), "age": data.get("age")}
        else:
            attributes = {"memberIds": list(data.get("memberIds", []))}
        competitors.append(
            Competitor(
                ref=CompetitorRef(kind=modality, id=doc_id, dojo_id=dojo_id),
                name=data.get("name", ""),
                dojo_name=dojo_names.get(dojo_id or "", ""),
                attributes=attributes,
            )
        )
    return competitors


def _collect_refs(bracket: Bracket) -> set[str]:
    ids = set()
    for round_ in bracket.get("rounds", []):
        for match in round_["matches"]:
            for slot in (match["competitor1"], match["competitor2"], match.get("winner")):
                if slot and slot.get("id"):
                    ids.add(slot["id"])
    return ids


def populate_bracket(db: Client, bracket: Bracket) -> Bracket:
    """Attach display details to every seated competitor and winner.

    Details are looked up from the registration stores at read time; the
    caller must not persist the populated copy.
    """
    ids = _collect_refs(bracket)
    if not ids:
        return bracket

    collection = (
        PARTICIPANTS_COLLECTION
        if bracket.get("modality") == MODALITY_INDIVIDUAL
        else TEAMS_COLLECTION
    )
    refs = [db.collection(collection).document(i) for i in ids]
    docs = cast(list["DocumentSnapshot"], db.get_all(refs))
    records = {doc.id: doc.to_dict() or {} for doc in docs if doc.exists}

    member_names: dict[str, str] = {}
    if bracket.get("modality") == MODALITY_TEAM:
        member_ids = {m for r in records.values() for m in r.get("memberIds", [])}
        if member_ids:
            member_refs = [
                db.collection(PARTICIPANTS_COLLECTION).document(m) for m in member_ids
            ]
            member_docs = cast(list["DocumentSnapshot"], db.get_all(member_refs))
            member_names = {
                doc.id: (doc.to_dict() or {}).get("name", "Unknown")
                for doc in member_docs
                if doc.exists
            }

    dojo_names = _dojo_names(db, (r.get("dojoId") for r in records.values()))

    details: dict[str, dict[str, Any]] = {}
    for competitor_id, record in records.items():
        entry: dict[str, Any] = {
            "name": record.get("name", ""),
            "dojoName": dojo_names.get(record.get("dojoId") or "", ""),
        }
        if bracket.get("modality") == MODALITY_INDIVIDUAL:
            entry["grade"] = record.get("grade")
            entry["age"] = record.get("age")
        else:
            entry["members"] = [
                member_names.get(m, "Unknown") for m in record.get("memberIds", [])
            ]
        details[competitor_id] = entry

    for round_ in bracket.get("rounds", []):
        for match in round_["matches"]:
            for slot in (match["competitor1"], match["competitor2"], match.get("winner")):
                if slot and slot.get("id") in details:
                    slot["details"] = details[slot["id"]]
    return bracket
