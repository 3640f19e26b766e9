"""
tests/conftest.py
Global pytest configuration and fixtures.
"""

import pytest
from src.advisor.schema import CardMechanicsData, MechanicTag
from src.advisor.strategy import StrategyDetector
from src.advisor.engine import MechanicalRecommendationEngine


def build_card(name, *tags):
    """
    Create a tagged card. Each tag is either a mechanic name or a (name, priority) pair.
    """
    mechanic_tags = []
    for tag in tags:
        if isinstance(tag, tuple):
            tag_name, priority = tag
        else:
            tag_name, priority = tag, 5
        mechanic_tags.append(MechanicTag(name=tag_name, category="test", priority=priority))

    return CardMechanicsData(
        card_id=name.lower().replace(" ", "-"),
        card_name=name,
        primary_type="creature",
        mechanic_tags=mechanic_tags,
    )


@pytest.fixture
def make_card():
    return build_card


@pytest.fixture
def detector():
    return StrategyDetector()


@pytest.fixture
def engine():
    return MechanicalRecommendationEngine()
