"""Tests for administrative bracket overrides."""

import unittest

from karatebracket.brackets import mutators, progression
from karatebracket.brackets.models import OrderChange, SlotLocator, SlotSwap
from karatebracket.errors import NotFoundError
from tests.test_progression import five_competitor_bracket


class TestResetBracket(unittest.TestCase):
    def test_reset_clears_results_and_keeps_byes(self):
        bracket = five_competitor_bracket()
        progression.record_result(bracket, 1, 1, "a")
        progression.record_result(bracket, 1, 2, "b")
        progression.record_result(bracket, 1, 4, "d", venue=1, notes="Hansoku")
        progression.update_match_details(bracket, 2, 5, venue=2, started=True)

        mutators.reset_bracket(bracket)

        self.assertEqual(bracket["status"], "generated")
        first = bracket["rounds"][0]["matches"]
        self.assertEqual(first[0]["winner"]["id"], "a")
        self.assertEqual(first[0]["status"], "finished")
        self.assertIsNone(first[3]["winner"])
        self.assertEqual(first[3]["status"], "pending")
        self.assertIsNone(first[3]["venue"])
        self.assertIsNone(first[3]["notes"])
        self.assertEqual(first[3]["competitor1"]["id"], "d")
        for round_ in bracket["rounds"][1:]:
            for match in round_["matches"]:
                self.assertEqual(match["competitor1"], {"state": "empty"})
                self.assertEqual(match["competitor2"], {"state": "empty"})
                self.assertIsNone(match["winner"])
                self.assertEqual(match["status"], "pending")

    def test_reset_of_fresh_bracket_is_a_no_op(self):
        bracket = five_competitor_bracket()
        expected = five_competitor_bracket()
        mutators.reset_bracket(bracket)
        self.assertEqual(bracket["rounds"], expected["rounds"])


class TestSwapSlots(unittest.TestCase):
    def test_swap_between_matches(self):
        bracket = five_competitor_bracket()
        swap = SlotSwap(
            first=SlotLocator(round_number=1, match_number=1, slot="competitor2"),
            second=SlotLocator(round_number=1, match_number=4, slot="competitor1"),
        )
        mutators.swap_slots(bracket, [swap])
        first = bracket["rounds"][0]["matches"]
        self.assertEqual(first[0]["competitor2"]["id"], "d")
        self.assertEqual(first[3]["competitor1"]["id"], "a")

    def test_swap_with_unknown_match_fails(self):
        bracket = five_competitor_bracket()
        swap = SlotSwap(
            first=SlotLocator(round_number=1, match_number=1, slot="competitor2"),
            second=SlotLocator(round_number=1, match_number=99, slot="competitor1"),
        )
        with self.assertRaises(NotFoundError):
            mutators.swap_slots(bracket, [swap])


class TestReorderMatches(unittest.TestCase):
    def test_reorder_changes_only_order(self):
        bracket = five_competitor_bracket()
        mutators.reorder_matches(
            bracket,
            1,
            [OrderChange(match_number=4, order=1), OrderChange(match_number=1, order=4)],
        )
        first = bracket["rounds"][0]["matches"]
        self.assertEqual(first[3]["order"], 1)
        self.assertEqual(first[0]["order"], 4)
        self.assertEqual(first[3]["position"], 3)
        self.assertEqual(first[0]["number"], 1)

    def test_reorder_unknown_round(self):
        with self.assertRaises(NotFoundError):
            mutators.reorder_matches(
                five_competitor_bracket(), 8, [OrderChange(match_number=1, order=2)]
            )


class TestCopyBracket(unittest.TestCase):
    def test_copy_is_deep_and_retargeted(self):
        bracket = five_competitor_bracket()
        bracket.update({"categoryId": "kata-u12", "categoryName": "Kata U12", "publicToken": "abc"})
        duplicate = mutators.copy_bracket(bracket, "kata-u14", "xyz", "admin1", "Kata U14")

        self.assertEqual(duplicate["categoryId"], "kata-u14")
        self.assertEqual(duplicate["categoryName"], "Kata U14")
        self.assertEqual(duplicate["publicToken"], "xyz")
        self.assertEqual(duplicate["createdBy"], "admin1")
        self.assertEqual(duplicate["version"], 1)
        self.assertEqual(duplicate["rounds"], bracket["rounds"])

        duplicate["rounds"][0]["matches"][3]["notes"] = "changed"
        self.assertIsNone(bracket["rounds"][0]["matches"][3]["notes"])
