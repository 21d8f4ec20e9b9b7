"""
Unit tests for the eligibility filter.
"""
from app.schemas.card import Card
from app.scoring.eligibility import Exclusion, check_eligibility, is_national


def _make_card(**overrides) -> Card:
    doc = {"id": "card-1", "name": "Test Card"}
    doc.update(overrides)
    return Card.model_validate(doc)


class TestCatalogStatus:
    def test_hidden(self):
        assert check_eligibility(_make_card(visibility=False), None, 0) == Exclusion.HIDDEN

    def test_visibility_unset_is_visible(self):
        assert check_eligibility(_make_card(), None, 0) is None

    def test_inactive(self):
        assert check_eligibility(_make_card(availability_status="discontinued"), None, 0) == Exclusion.INACTIVE

    def test_active(self):
        assert check_eligibility(_make_card(availability_status="active"), None, 0) is None
        assert check_eligibility(_make_card(availability_status="ACTIVE"), None, 0) is None


class TestRegion:
    def test_national_markers(self):
        assert is_national(_make_card())
        assert is_national(_make_card(available_regions=["US"]))
        assert is_national(_make_card(available_regions=["United States"]))
        assert is_national(_make_card(available_regions=["national"]))
        assert not is_national(_make_card(available_regions=["CA"]))

    def test_national_without_state(self):
        assert check_eligibility(_make_card(available_regions=["US"]), None, 0) is None

    def test_national_with_any_state(self):
        assert check_eligibility(_make_card(available_regions=[]), "TX", 0) is None

    def test_local_requires_state(self):
        assert check_eligibility(_make_card(available_regions=["CA"]), None, 0) == Exclusion.REGION
        assert check_eligibility(_make_card(available_regions=["CA"]), "  ", 0) == Exclusion.REGION

    def test_local_state_match_case_insensitive(self):
        assert check_eligibility(_make_card(available_regions=["CA", "NV"]), "nv", 0) is None

    def test_local_other_state(self):
        assert check_eligibility(_make_card(available_regions=["CA"]), "TX", 0) == Exclusion.REGION


class TestCreditBand:
    def test_far_below_minimum(self):
        # fair = 630; 630 + 20 < 700
        assert check_eligibility(_make_card(min_credit_score=700), None, 630) == Exclusion.CREDIT

    def test_meets_minimum(self):
        assert check_eligibility(_make_card(min_credit_score=700), None, 700) is None

    def test_within_leeway(self):
        assert check_eligibility(_make_card(min_credit_score=700), None, 680) is None

    def test_unknown_user_score(self):
        assert check_eligibility(_make_card(min_credit_score=800), None, 0) is None

    def test_no_minimum(self):
        assert check_eligibility(_make_card(min_credit_score=None), None, 550) is None
        assert check_eligibility(_make_card(min_credit_score=0), None, 550) is None
        assert check_eligibility(_make_card(min_credit_score="n/a"), None, 550) is None
