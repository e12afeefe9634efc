"""Unit tests for marketplace model definitions"""

import pytest

from models import Base, User, Match, Product
from models.enums import Category, Urgency


class TestUserModel:
    """Test User validation and serialization"""

    def test_email_lowercased(self):
        assert User(email="Buyer@Example.COM").email == "buyer@example.com"

    def test_invalid_email_rejected(self):
        with pytest.raises(ValueError, match="Invalid email format"):
            User(email="not-an-email")

    def test_public_profile_omits_email(self):
        profile = User(email="seller@test.com", business_name="Abay Traders").to_dict()

        assert "email" not in profile
        assert profile["business_name"] == "Abay Traders"


class TestMatchTable:
    """Test constraints declared on the match table"""

    def constraint_names(self):
        return {constraint.name for constraint in Match.__table__.constraints}

    def test_pair_uniqueness(self):
        assert "uq_match_request_product" in self.constraint_names()

    def test_score_and_party_checks(self):
        names = self.constraint_names()
        assert "ck_match_score_range" in names
        assert "ck_match_distinct_parties" in names
        assert "ck_match_status" in names

    def test_registered_tables(self):
        assert set(Base.metadata.tables) == {"user", "product", "buy_request", "match", "notification"}


class TestEnums:
    """Test marketplace enumerations"""

    def test_category_label(self):
        assert Category.FOOD_BEVERAGES.label == "food beverages"
        assert Category.OTHER.label == "other"

    def test_urgency_order(self):
        ranks = [urgency.rank for urgency in (Urgency.LOW, Urgency.NORMAL, Urgency.HIGH, Urgency.URGENT)]
        assert ranks == sorted(ranks)

    def test_product_to_dict(self):
        product = Product(title="Tractor", category=Category.MACHINERY_EQUIPMENT.value, price=150000)

        data = product.to_dict()

        assert data["price"] == 150000.0
        assert data["category"] == "MACHINERY_EQUIPMENT"
