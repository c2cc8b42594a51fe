"""Shared fixtures for bracket tests."""

from __future__ import annotations

import unittest
from unittest.mock import patch

from karatebracket.brackets.models import Competitor, CompetitorRef
from karatebracket.core.constants import MODALITY_INDIVIDUAL
from tests.mock_utils import EnhancedMockFirestore, MockFirestoreBuilder, patch_mockfirestore


def make_competitor(competitor_id, dojo_id=None, kind=MODALITY_INDIVIDUAL, name=None):
    """Build an eligible competitor without touching Firestore."""
    return Competitor(
        ref=CompetitorRef(kind=kind, id=competitor_id, dojo_id=dojo_id),
        name=name or competitor_id.upper(),
    )


class FirestoreTestCase(unittest.TestCase):
    """Runs each test against a fresh in-memory Firestore."""

    patch_targets = (
        "karatebracket.brackets.services.firestore",
        "karatebracket.brackets.competitors.firestore",
        "karatebracket.firestore",
    )

    def setUp(self):
        patch_mockfirestore()
        self.db = EnhancedMockFirestore()
        self.mock_firestore_module = MockFirestoreBuilder.firestore_module(self.db)
        for target in self.patch_targets:
            patcher = patch(target, new=self.mock_firestore_module)
            patcher.start()
            self.addCleanup(patcher.stop)

    def add_dojo(self, dojo_id, name):
        self.db.collection("dojos").document(dojo_id).set({"name": name})

    def add_category(self, category_id, **fields):
        data = {
            "name": category_id.title(),
            "modality": MODALITY_INDIVIDUAL,
            "discipline": "kata",
            "active": True,
        }
        data.update(fields)
        self.db.collection("categories").document(category_id).set(data)
        return data

    def add_participant(self, participant_id, dojo_id, **fields):
        data = {
            "name": participant_id.title(),
            "dojoId": dojo_id,
            "disciplines": ["kata"],
            "age": 12,
            "gender": "male",
            "grade": "8 Kyu",
        }
        data.update(fields)
        self.db.collection("participants").document(participant_id).set(data)
        return data

    def add_team(self, team_id, category_id, dojo_id, member_ids, status="active"):
        data = {
            "name": team_id.title(),
            "categoryId": category_id,
            "dojoId": dojo_id,
            "memberIds": list(member_ids),
            "status": status,
        }
        self.db.collection("teams").document(team_id).set(data)
        return data
