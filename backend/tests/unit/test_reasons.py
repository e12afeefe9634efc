"""Unit tests for match explanation text"""

from decimal import Decimal

import pytest

from matching.reasons import compose_reason, format_amount, tier_label
from models.enums import Category
from fixtures.factories import make_request, make_listing


class TestTierLabel:
    """Test score tiers"""

    @pytest.mark.parametrize("score,label", [
        (100, "Excellent match!"),
        (80, "Excellent match!"),
        (79, "Good match."),
        (65, "Good match."),
        (64, "Potential match."),
        (50, "Potential match."),
    ])
    def test_tiers(self, score, label):
        assert tier_label(score) == label


class TestFormatAmount:
    """Test number rendering inside reason text"""

    def test_whole_float_drops_decimal(self):
        assert format_amount(900.0) == "900"

    def test_fractional_float_kept(self):
        assert format_amount(900.5) == "900.5"

    def test_decimal(self):
        assert format_amount(Decimal("1250.00")) == "1250"

    def test_int(self):
        assert format_amount(12) == "12"


class TestComposeReason:
    """Test clause selection and ordering"""

    def test_all_clauses(self):
        reason = compose_reason(make_request(), make_listing(), 91)

        assert reason == (
            "Excellent match! White teff grain matches your agricultural products requirement. "
            "Price (900 ETB) is within your budget. "
            "Sufficient quantity available (600 kg). "
            "Verified seller."
        )

    def test_only_category_clause(self):
        listing = make_listing(price=1100.0, quantity=400, seller_verified=False)

        reason = compose_reason(make_request(), listing, 58)

        assert reason == "Potential match. White teff grain matches your agricultural products requirement."

    def test_good_tier_with_verified_seller(self):
        listing = make_listing(price=1100.0, quantity=400)

        reason = compose_reason(make_request(), listing, 70)

        assert reason.startswith("Good match. ")
        assert reason.endswith("requirement. Verified seller.")

    def test_budget_clause_needs_declared_budget(self):
        reason = compose_reason(make_request(max_budget=None), make_listing(), 85)
        assert "within your budget" not in reason

    def test_quantity_clause_needs_declared_quantity(self):
        reason = compose_reason(make_request(quantity=None), make_listing(), 85)
        assert "Sufficient quantity" not in reason

    def test_quantity_clause_without_unit(self):
        reason = compose_reason(make_request(), make_listing(unit=None), 85)
        assert "Sufficient quantity available (600)." in reason

    def test_category_label_is_humanised(self):
        request = make_request(category=Category.MACHINERY_EQUIPMENT)
        listing = make_listing(category=Category.MACHINERY_EQUIPMENT, title="Tractor")

        reason = compose_reason(request, listing, 60)

        assert "Tractor matches your machinery equipment requirement" in reason

    def test_reason_ends_with_period(self):
        for score in (50, 70, 95):
            assert compose_reason(make_request(), make_listing(), score).endswith(".")
