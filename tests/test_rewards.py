"""
Unit tests for reward value estimation: category rates, credit tiers,
point values and the monetary value factor.
"""
import math

import pytest

from app.schemas.answers import AnswerRecord
from app.schemas.card import Card, Reward
from app.scoring.rewards import (
    estimate_point_value, estimate_value, map_credit_score, resolve_category_rate, score_value,
)


def _rewards(*rows) -> list[Reward]:
    return [Reward(category=category, rate=rate) for category, rate in rows]


def _make_card(**overrides) -> Card:
    doc = {"id": "card-1", "name": "Test Card"}
    doc.update(overrides)
    return Card.model_validate(doc)


class TestCategoryRate:
    def test_label_substring(self):
        assert resolve_category_rate(_rewards(("Dining", 3)), "Dining") == 3.0

    def test_case_insensitive(self):
        assert resolve_category_rate(_rewards(("GROCERIES at US supermarkets", 6)), "Groceries") == 6.0

    def test_keyword_match(self):
        assert resolve_category_rate(_rewards(("Restaurants worldwide", 4)), "Dining") == 4.0

    def test_online_shopping_keyword(self):
        assert resolve_category_rate(_rewards(("Amazon.com purchases", 5)), "Online Shopping") == 5.0

    def test_best_rate_wins(self):
        rewards = _rewards(("Dining", 3), ("Restaurants", 4), ("Food delivery", 2))
        assert resolve_category_rate(rewards, "Dining") == 4.0

    def test_catch_all_fallback(self):
        rewards = _rewards(("Gas", 3), ("catch_all", 1.5))
        assert resolve_category_rate(rewards, "Groceries") == 1.5

    def test_everything_fallback(self):
        assert resolve_category_rate(_rewards(("everything", 2)), "Travel") == 2.0

    def test_specific_match_beats_catch_all(self):
        rewards = _rewards(("catch_all", 1), ("Hotels booked direct", 6))
        assert resolve_category_rate(rewards, "Travel") == 6.0

    def test_default_multiplier(self):
        assert resolve_category_rate([], "Dining") == 1.0
        assert resolve_category_rate(_rewards(("Gas", 3)), "Dining") == 1.0

    def test_non_numeric_rate_ignored(self):
        card = _make_card(rewards=[{"category": "Dining", "rate": "lots"}, "junk", {"category": "Dining", "rate": "3"}])
        assert len(card.rewards) == 2
        assert resolve_category_rate(card.rewards, "Dining") == 3.0

    def test_zero_rate_falls_through_to_default(self):
        assert resolve_category_rate(_rewards(("Dining", 0)), "Dining") == 1.0


class TestCreditTier:
    @pytest.mark.parametrize("tier,score", [
        ("poor", 550), ("fair", 630), ("good", 700), ("very_good", 740), ("excellent", 800),
    ])
    def test_known_tiers(self, tier, score):
        assert map_credit_score(tier) == score

    def test_unknown_is_zero(self):
        assert map_credit_score("stellar") == 0
        assert map_credit_score(None) == 0

    def test_answer_normalization(self):
        answers = AnswerRecord.model_validate({"creditScore": "Very Good"})
        assert map_credit_score(answers.credit_score) == 740


class TestPointValue:
    def test_defaults(self):
        assert estimate_point_value(None, None, None) == pytest.approx(0.01)

    def test_max_defaults_to_one_and_a_half_baseline(self):
        assert estimate_point_value("yes", None, None) == pytest.approx(0.015)

    def test_sometimes_is_mean(self):
        assert estimate_point_value("sometimes", 0.01, 0.02) == pytest.approx(0.015)

    def test_yes_uses_max(self):
        assert estimate_point_value("yes", 0.0125, 0.02) == pytest.approx(0.02)

    def test_non_positive_values_ignored(self):
        assert estimate_point_value("no", -1, 0) == pytest.approx(0.01)


class TestValueEstimate:
    def test_groceries_example(self):
        card = _make_card(annual_fee=0, rewards=[{"category": "groceries", "rate": 3}], point_value_baseline=0.01)
        answers = AnswerRecord.model_validate({"spendGroceries": 500, "redemption_value": "no"})

        estimate = estimate_value(card, answers)
        assert estimate.yearly_rewards == pytest.approx(15.0)
        assert estimate.net_first_year == pytest.approx(15.0)

        result = score_value(card, answers)
        assert result.score == pytest.approx(0.15)
        assert result.reasons[0].startswith("Estimated $15 in yearly rewards")
        assert "No annual fee" in result.reasons

    def test_bonus_and_fee(self):
        card = _make_card(
            annual_fee=95,
            rewards=[{"category": "catch_all", "rate": 1}],
            sign_up_bonus={"description": "75k points", "value_estimate": 750},
        )
        answers = AnswerRecord.model_validate({"spendOther": 1000})

        result = score_value(card, answers)
        assert result.score == pytest.approx(6.65)  # (10 + 750 - 95) / 100
        assert result.reasons == (
            "Estimated $10 in yearly rewards based on your spending",
            "Sign-up bonus worth ~$750",
            "Annual fee: $95",
        )

    def test_no_spend(self):
        result = score_value(_make_card(), AnswerRecord())
        assert result.score == 0.0
        assert result.reasons == ("No annual fee",)

    def test_sums_all_categories(self):
        card = _make_card(rewards=[{"category": "Dining", "rate": 4}, {"category": "catch_all", "rate": 1}])
        answers = AnswerRecord.model_validate({"spendDining": 1000, "spendGas": 500, "spendRent": 0})
        # 1000×4×0.01 + 500×1×0.01
        assert estimate_value(card, answers).yearly_rewards == pytest.approx(45.0)

    def test_overflowing_spend_saturates(self):
        card = _make_card(rewards=[{"category": "Groceries", "rate": 3}])
        answers = AnswerRecord.model_validate({"spendGroceries": 1e308})

        estimate = estimate_value(card, answers)
        assert math.isfinite(estimate.yearly_rewards)
        assert math.isfinite(estimate.net_first_year)

        result = score_value(card, answers)
        assert math.isfinite(result.score)
        assert result.reasons[0].startswith("Estimated $")

    def test_numeric_string_and_negative_spend(self):
        answers = AnswerRecord.model_validate({"spendDining": "1200", "spendGas": -300, "spendTravel": "abc"})
        assert answers.spend_dining == 1200.0
        assert answers.spend_gas == 0.0
        assert answers.spend_travel == 0.0
