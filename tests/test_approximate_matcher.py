"""Tests for approximate phrase matching."""

import pytest

from warden.moderation.approximate_matcher import (
    is_confusable,
    similarity,
    substitution_cost,
    weighted_edit_distance,
)


class TestSimilarity:
    """Tests for the similarity score."""

    @pytest.mark.parametrize("text", ["a", "hello", "free nitro here", "ÅNGSTRÖM"])
    def test_identical_strings_score_100(self, text):
        assert similarity(text, text) == 100

    def test_empty_inputs(self):
        assert similarity("", "") == 100
        assert similarity("", "x") == 0
        assert similarity("x", "") == 0

    def test_substring_shortcut(self):
        assert similarity("hello world", "hello") == pytest.approx(100 * 5 / 11)

    def test_case_insensitive(self):
        assert similarity("FREE NITRO", "free nitro") == 100

    def test_confusable_scores_between_plain_mismatch_and_exact(self):
        confusable = similarity("m0use", "mouse")
        plain = similarity("mxuse", "mouse")

        assert plain < confusable < 100
        assert confusable == pytest.approx(90.0)
        assert plain == pytest.approx(80.0)

    def test_multi_character_confusable(self):
        """'rn' standing in for 'm' costs half an edit."""
        assert similarity("rnoney", "money") == pytest.approx((6 - 0.5) / 6 * 100)

    def test_score_never_negative(self):
        assert similarity("abc", "xyzxyzxyz") == 0


class TestEditDistance:
    """Tests for the weighted edit distance."""

    def test_insert_and_delete_cost_one(self):
        assert weighted_edit_distance("abc", "ab") == 1
        assert weighted_edit_distance("ab", "abc") == 1

    def test_substitution_costs(self):
        assert substitution_cost("a", "a") == 0
        assert substitution_cost("0", "o") == 0.5
        assert substitution_cost("o", "0") == 0.5
        assert substitution_cost("a", "b") == 1

    def test_sequence_confusable_in_both_directions(self):
        assert weighted_edit_distance("phone", "fone") == 0.5
        assert weighted_edit_distance("fone", "phone") == 0.5

    def test_is_confusable(self):
        assert is_confusable("rn", "m")
        assert is_confusable("m", "rn")
        assert is_confusable("5", "s")
        assert not is_confusable("a", "b")
