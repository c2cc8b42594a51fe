"""Tests for building bracket rounds."""

import random
import unittest

from karatebracket.brackets.builder import build_rounds, generate_rounds, insert_byes
from karatebracket.core.constants import MODALITY_INDIVIDUAL, MODALITY_TEAM
from karatebracket.errors import ValidationError
from tests.helpers import make_competitor


def _ids(slots):
    return [c.ref.id if c else None for c in slots]


class TestInsertByes(unittest.TestCase):
    def test_no_byes(self):
        seeds = [make_competitor(x) for x in "abcd"]
        self.assertEqual(_ids(insert_byes(seeds, 0)), ["a", "b", "c", "d"])

    def test_five_competitors(self):
        seeds = [make_competitor(x) for x in "abcde"]
        self.assertEqual(
            _ids(insert_byes(seeds, 3)),
            [None, "a", None, "b", None, "c", "d", "e"],
        )

    def test_six_competitors(self):
        seeds = [make_competitor(x) for x in "abcdef"]
        self.assertEqual(
            _ids(insert_byes(seeds, 2)),
            [None, "a", "b", "c", None, "d", "e", "f"],
        )

    def test_byes_never_meet(self):
        for n in range(2, 70):
            seeds = [make_competitor(f"p{i}") for i in range(n)]
            size = 1
            while size < n:
                size *= 2
            slots = insert_byes(seeds, size - n)
            self.assertEqual(len(slots), size)
            for i in range(0, size, 2):
                self.assertFalse(slots[i] is None and slots[i + 1] is None, n)

            rounds = build_rounds(seeds, MODALITY_INDIVIDUAL)
            self.assertEqual(2 ** len(rounds), size, n)
            for k, round_ in enumerate(rounds, start=1):
                self.assertEqual(round_["number"], k)
                self.assertEqual(len(round_["matches"]), size // 2**k, n)
            numbers = [m["number"] for r in rounds for m in r["matches"]]
            self.assertEqual(numbers, list(range(1, size)), n)
            first = rounds[0]["matches"]
            self.assertEqual(sum(m["status"] == "finished" for m in first), size - n, n)


class TestBuildRounds(unittest.TestCase):
    def test_five_competitor_layout(self):
        seeds = [make_competitor(x) for x in "abcde"]
        rounds = build_rounds(seeds, MODALITY_INDIVIDUAL)

        self.assertEqual([r["name"] for r in rounds], ["Quarterfinal", "Semifinal", "Final"])
        self.assertEqual([len(r["matches"]) for r in rounds], [4, 2, 1])
        numbers = [m["number"] for r in rounds for m in r["matches"]]
        self.assertEqual(numbers, list(range(1, 8)))

        first = rounds[0]["matches"]
        for match, winner in zip(first[:3], "abc"):
            self.assertEqual(match["competitor1"], {"state": "bye"})
            self.assertEqual(match["competitor2"]["id"], winner)
            self.assertEqual(match["winner"], {"kind": "individual", "id": winner})
            self.assertEqual(match["status"], "finished")

        contested = first[3]
        self.assertEqual(contested["competitor1"]["id"], "d")
        self.assertEqual(contested["competitor2"]["id"], "e")
        self.assertIsNone(contested["winner"])
        self.assertEqual(contested["status"], "pending")

        for round_ in rounds[1:]:
            for match in round_["matches"]:
                self.assertEqual(match["competitor1"], {"state": "empty"})
                self.assertEqual(match["competitor2"], {"state": "empty"})
                self.assertEqual(match["status"], "pending")

    def test_two_competitors_make_a_final(self):
        rounds = build_rounds(
            [make_competitor("a"), make_competitor("b")], MODALITY_INDIVIDUAL
        )
        self.assertEqual(len(rounds), 1)
        self.assertEqual(rounds[0]["name"], "Final")
        match = rounds[0]["matches"][0]
        self.assertEqual(match["number"], 1)
        self.assertEqual(match["position"], 0)
        self.assertEqual(match["order"], 1)
        self.assertEqual(match["status"], "pending")

    def test_positions_and_order_start_in_topology_order(self):
        rounds = build_rounds([make_competitor(f"p{i}") for i in range(8)], MODALITY_INDIVIDUAL)
        for round_ in rounds:
            positions = [m["position"] for m in round_["matches"]]
            self.assertEqual(positions, list(range(len(positions))))
            self.assertEqual([m["order"] for m in round_["matches"]], [p + 1 for p in positions])
        # Power of two: no byes anywhere
        for match in rounds[0]["matches"]:
            self.assertEqual(match["competitor1"]["state"], "filled")
            self.assertEqual(match["competitor2"]["state"], "filled")
            self.assertEqual(match["status"], "pending")

    def test_empty_and_single_are_rejected(self):
        with self.assertRaises(ValidationError):
            build_rounds([], MODALITY_INDIVIDUAL)
        with self.assertRaises(ValidationError):
            build_rounds([make_competitor("a")], MODALITY_INDIVIDUAL)

    def test_modality_mismatch_is_rejected(self):
        with self.assertRaises(ValueError):
            build_rounds(
                [make_competitor("a"), make_competitor("b")], MODALITY_TEAM
            )

    def test_slots_carry_dojo(self):
        rounds = build_rounds(
            [make_competitor("a", "d1"), make_competitor("b", "d2")], MODALITY_INDIVIDUAL
        )
        match = rounds[0]["matches"][0]
        self.assertEqual(match["competitor1"]["dojoId"], "d1")
        self.assertEqual(match["competitor1"]["state"], "filled")

    def test_generate_rounds_places_everyone_once(self):
        competitors = [
            make_competitor(f"t{i}", f"d{i % 3}", kind=MODALITY_TEAM) for i in range(13)
        ]
        rounds = generate_rounds(competitors, MODALITY_TEAM, rng=random.Random(5))
        seated = [
            slot["id"]
            for m in rounds[0]["matches"]
            for slot in (m["competitor1"], m["competitor2"])
            if slot["state"] == "filled"
        ]
        self.assertEqual(sorted(seated), sorted(c.ref.id for c in competitors))
        self.assertEqual(len(rounds[0]["matches"]), 8)
        byes = [m for m in rounds[0]["matches"] if m["status"] == "finished"]
        self.assertEqual(len(byes), 3)
