"""
Integration tests for the v2.0 ranking engine.
"""
import pytest

from app.schemas.answers import AnswerRecord
from app.schemas.card import Card
from app.scoring.engine import rank_cards, score_card


def _make_card(card_id: str = "card-1", **overrides) -> Card:
    doc = {"id": card_id, "name": f"Card {card_id}"}
    doc.update(overrides)
    return Card.model_validate(doc)


def _make_answers(**overrides) -> AnswerRecord:
    return AnswerRecord.model_validate(overrides)


def _catalog() -> list[Card]:
    return [
        _make_card(
            "sapphire", annual_fee=95, min_credit_score=700,
            rewards=[{"category": "Travel", "rate": 2}, {"category": "Dining", "rate": 3}],
            transfer_partners=["United MileagePlus", "Hyatt"], foreign_fees="None",
            recommended_goals=["travel"], sign_up_bonus={"value_estimate": 750},
        ),
        _make_card(
            "double-cash", annual_fee=0, rewards=[{"category": "everything", "rate": 2}],
            recommended_goals=["cashback"], pairing_synergy=["Citi Premier"],
        ),
        _make_card("biz", is_business=True, rewards=[{"category": "catch_all", "rate": 2}]),
        _make_card("golden1", available_regions=["CA"], quiz_metadata={"region_priority": ["CA"]}),
    ]


class TestRanking:
    def test_single_card_value(self):
        card = _make_card(annual_fee=0, rewards=[{"category": "groceries", "rate": 3}], point_value_baseline=0.01)
        answers = _make_answers(spendGroceries=500, redemption_value="no")

        results = rank_cards([card], answers)
        assert len(results) == 1
        assert results[0].score == 0.15
        assert results[0].reasons[0].startswith("Estimated $15 in yearly rewards")
        assert "No annual fee" in results[0].reasons

    def test_sorted_descending(self):
        answers = _make_answers(state="CA", spendDining=3000, spendTravel=2000, goal="travel", travelFrequency="frequently")
        scores = [r.score for r in rank_cards(_catalog(), answers)]
        assert scores == sorted(scores, reverse=True)

    def test_deterministic(self):
        answers = _make_answers(state="CA", creditScore="excellent", spendDining=1200, goal="cashback", perks=["lounge"])
        first = [r.model_dump() for r in rank_cards(_catalog(), answers)]
        second = [r.model_dump() for r in rank_cards(_catalog(), answers)]
        assert first == second

    def test_ties_keep_catalog_order(self):
        cards = [_make_card(card_id) for card_id in ("c", "a", "b")]
        assert [r.id for r in rank_cards(cards, _make_answers())] == ["c", "a", "b"]

    def test_empty_catalog(self):
        assert rank_cards([], _make_answers(state="CA")) == []


class TestEligibilityInRanking:
    def _cards(self) -> list[Card]:
        return [
            _make_card("hidden", visibility=False),
            _make_card("retired", availability_status="discontinued"),
            _make_card("national"),
            _make_card("us", available_regions=["US"]),
            _make_card("local-ca", available_regions=["CA"]),
        ]

    def test_no_state(self):
        assert {r.id for r in rank_cards(self._cards(), _make_answers())} == {"national", "us"}

    def test_matching_state(self):
        ids = {r.id for r in rank_cards(self._cards(), _make_answers(state="CA"))}
        assert ids == {"national", "us", "local-ca"}

    def test_other_state(self):
        assert {r.id for r in rank_cards(self._cards(), _make_answers(state="TX"))} == {"national", "us"}

    def test_credit_band(self):
        cards = [_make_card("premium", min_credit_score=700)]
        assert rank_cards(cards, _make_answers(creditScore="fair")) == []
        assert [r.id for r in rank_cards(cards, _make_answers(creditScore="good"))] == ["premium"]
        assert [r.id for r in rank_cards(cards, _make_answers())] == ["premium"]


class TestBusinessPenalty:
    def test_business_card_kept_but_ranked_last(self):
        rewards = [{"category": "Dining", "rate": 3}]
        cards = [
            _make_card("business", is_business=True, rewards=rewards),
            _make_card("personal", rewards=rewards),
        ]
        answers = _make_answers(businessCards="no", spendDining=1000, redemption_value="no")

        results = {r.id: r for r in rank_cards(cards, answers)}
        assert set(results) == {"business", "personal"}
        assert results["business"].score - results["personal"].score == pytest.approx(-5.0, abs=0.011)
        assert "Business card (you prefer personal cards)" in results["business"].reasons
        assert [r.id for r in rank_cards(cards, answers)] == ["personal", "business"]


class TestReasons:
    def _busy_card(self) -> Card:
        return _make_card(
            "busy", annual_fee=95, sign_up_bonus={"value_estimate": 600},
            rewards=[{"category": "Travel", "rate": 3}],
            transfer_partners=["United MileagePlus", "Hyatt"], foreign_fees="None",
            recommended_goals=["travel"], credits_and_benefits=["Priority Pass lounge access"],
        )

    def _busy_answers(self) -> AnswerRecord:
        return _make_answers(
            spendTravel=2000, goal="travel", travelFrequency="frequently",
            airline=["united"], perks=["lounge"],
        )

    def test_capped_at_six(self):
        scored = score_card(self._busy_card(), self._busy_answers())
        assert sum(len(f.reasons) for f in scored.factor_scores) > 6
        assert len(scored.reasons) == 6

        result = rank_cards([self._busy_card()], self._busy_answers())[0]
        assert len(result.reasons) == 6

    def test_value_reasons_lead(self):
        scored = score_card(self._busy_card(), self._busy_answers())
        assert scored.reasons[:3] == (
            "Estimated $60 in yearly rewards based on your spending",
            "Sign-up bonus worth ~$600",
            "Annual fee: $95",
        )

    def test_factor_breakdown(self):
        scored = score_card(self._busy_card(), self._busy_answers())
        assert [f.factor_name for f in scored.factor_scores] == [
            "Value", "Goal", "FeePreference", "TravelFit", "LoyaltyAlignment", "Perks",
            "CardStrategy", "BusinessPreference", "RegionBoost", "QuizTags", "LowInterest", "ApprovalComfort",
        ]
        assert scored.total_score == round(sum(f.score for f in scored.factor_scores), 2)


class TestResultSnapshot:
    def test_source_card_untouched(self):
        card = _make_card(annual_fee=95, rewards=[{"category": "Dining", "rate": 3}])
        before = card.model_dump()

        result = rank_cards([card], _make_answers(spendDining=500))[0]

        assert card.model_dump() == before
        assert result is not card
        assert not hasattr(card, "score")

    def test_catalog_fields_passed_through(self):
        card = _make_card(issuer="Chase", apply_link="https://example.com/apply", image="sapphire.png")
        result = rank_cards([card], _make_answers())[0]
        dumped = result.model_dump()
        assert dumped["issuer"] == "Chase"
        assert dumped["apply_link"] == "https://example.com/apply"
        assert dumped["image"] == "sapphire.png"


class TestMalformedInput:
    def test_garbage_fields_score_without_error(self):
        card = Card.model_validate({
            "id": 7,
            "annual_fee": "free",
            "rewards": "not json",
            "available_regions": None,
            "quiz_metadata": "[]",
            "sign_up_bonus": 5,
            "credits_and_benefits": [{"name": "Lounge", "description": "Priority Pass"}, 3],
            "min_credit_score": True,
        })
        answers = AnswerRecord.model_validate({
            "perks": "lounge",
            "spendDining": "abc",
            "airline": None,
            "creditScore": 5,
            "travelFrequency": ["often"],
        })

        results = rank_cards([card], answers)
        assert [r.id for r in results] == ["7"]
        assert isinstance(results[0].score, float)

    def test_json_text_columns(self):
        card = Card.model_validate({
            "id": "db-row",
            "rewards": '[{"category": "Dining", "rate": 4}]',
            "quiz_metadata": '{"recommended_for": ["good_credit"]}',
        })
        assert card.rewards[0].rate == 4.0
        assert card.quiz_metadata.recommended_for == ["good_credit"]

        result = rank_cards([card], _make_answers(spendDining=1000, creditScore="good"))[0]
        # 1000×4×0.01 / 100 + one quiz tag
        assert result.score == pytest.approx(0.4 + 0.4)
