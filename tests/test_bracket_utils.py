"""Tests for bracket arithmetic and round labels."""

import unittest

from karatebracket.brackets.utils import (
    bracket_size,
    next_power_of_two,
    round_name,
    total_byes,
    total_rounds,
)


class TestBracketUtils(unittest.TestCase):
    def test_next_power_of_two(self):
        self.assertEqual(next_power_of_two(1), 1)
        self.assertEqual(next_power_of_two(2), 2)
        self.assertEqual(next_power_of_two(5), 8)
        self.assertEqual(next_power_of_two(16), 16)
        self.assertEqual(next_power_of_two(17), 32)

    def test_byes_fill_the_bracket(self):
        self.assertEqual(bracket_size(5), 8)
        self.assertEqual(total_byes(5), 3)
        self.assertEqual(total_byes(8), 0)

    def test_total_rounds(self):
        self.assertEqual(total_rounds(2), 1)
        self.assertEqual(total_rounds(8), 3)
        self.assertEqual(total_rounds(64), 6)

    def test_round_names_count_back_from_final(self):
        self.assertEqual(round_name(3, 3), "Final")
        self.assertEqual(round_name(2, 3), "Semifinal")
        self.assertEqual(round_name(1, 3), "Quarterfinal")
        self.assertEqual(round_name(2, 5), "Round of 16")

    def test_early_rounds_use_generic_label(self):
        self.assertEqual(round_name(1, 6), "Round 1")
        self.assertEqual(round_name(2, 6), "Round 2")
