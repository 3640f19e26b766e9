"""
src/advisor/strategy.py
Strategy Detection.
Classifies a deck into an archetype from the mechanic tags its cards carry.
"""

import math
from decimal import ROUND_HALF_UP, Decimal
from functools import cmp_to_key
from typing import Dict, Iterable, List, Optional, Tuple
from src.advisor.schema import (
    CardMechanicsData,
    CommanderAbility,
    StrategyMechanicMapping,
    StrategyProfile,
    StrategyScore,
    StrategyType,
)
from src.advisor.strategy_catalog import StrategyCatalog
from src import constants
from src.logger import create_logger

logger = create_logger()


def extract_deck_mechanics(
    cards: Iterable[CardMechanicsData], commander: Optional[CardMechanicsData] = None
) -> Dict[str, int]:
    """
    Count every mechanic tag across the commander and the deck.
    A card with several tags increments several counters; a card without tags adds nothing.
    """
    mechanics_count: Dict[str, int] = {}

    if commander is not None:
        for tag in commander.mechanic_tags:
            mechanics_count[tag.name] = mechanics_count.get(tag.name, 0) + 1

    for card in cards:
        for tag in card.mechanic_tags:
            mechanics_count[tag.name] = mechanics_count.get(tag.name, 0) + 1

    return mechanics_count


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _format_density(value: float) -> str:
    # One decimal place, exact ties rounded away from zero
    return str(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _compare_scores(
    a: Tuple[StrategyMechanicMapping, StrategyScore],
    b: Tuple[StrategyMechanicMapping, StrategyScore],
) -> float:
    confidence_diff = b[1].confidence - a[1].confidence
    if abs(confidence_diff) < constants.CONFIDENCE_TIE_WINDOW:
        return b[1].synergy_density - a[1].synergy_density
    return confidence_diff


class StrategyDetector:
    def __init__(self, catalog: Optional[StrategyCatalog] = None):
        self.catalog = catalog if catalog is not None else StrategyCatalog()

    def analyze_strategy(
        self,
        cards: List[CardMechanicsData],
        commander: Optional[CardMechanicsData] = None,
    ) -> StrategyProfile:
        all_mechanics = extract_deck_mechanics(cards, commander)
        strategy_scores = self.rank_strategies(all_mechanics)

        if not strategy_scores:
            profile = self.create_fallback_strategy(all_mechanics)
            logger.info(f"No archetype reached its density floor, falling back to {profile.primary.value}")
            return profile

        primary_mapping, primary_score = strategy_scores[0]
        secondary = [
            mapping.strategy
            for mapping, _ in strategy_scores[1 : 1 + constants.MAX_SECONDARY_STRATEGIES]
        ]

        logger.info(
            f"Detected strategy: {primary_mapping.strategy.value} "
            f"(confidence: {primary_score.confidence:.2f})"
        )
        logger.debug(f"Mechanical basis: {', '.join(primary_score.mechanical_basis)}")

        return StrategyProfile(
            primary=primary_mapping.strategy,
            secondary=secondary,
            confidence=primary_score.confidence,
            mechanical_basis=list(primary_score.mechanical_basis),
            synergy_density=primary_score.synergy_density,
            explanation=self.generate_strategy_explanation(primary_mapping, primary_score),
        )

    def rank_strategies(
        self, mechanics: Dict[str, int]
    ) -> List[Tuple[StrategyMechanicMapping, StrategyScore]]:
        """
        Score every archetype, drop the ones below their density floor and order the rest.
        Confidences within 0.1 of each other are ordered by synergy density instead.
        """
        strategy_scores = []
        for mapping in self.catalog.mappings:
            score = self.score_strategy(mechanics, mapping)
            if score.meets_minimum:
                strategy_scores.append((mapping, score))

        return sorted(strategy_scores, key=cmp_to_key(_compare_scores))

    def score_strategy(
        self, mechanics: Dict[str, int], mapping: StrategyMechanicMapping
    ) -> StrategyScore:
        """
        Score how well the aggregated mechanics fit one archetype.
        Every required mechanic must be present or the archetype scores zero.
        """
        confidence = 0.0
        total_cards = 0
        mechanical_basis = []

        for mechanic in mapping.required_mechanics:
            count = mechanics.get(mechanic, 0)
            if count <= 0:
                return StrategyScore()
            mechanical_basis.append(f"{mechanic}({count})")
            total_cards += count
            confidence += constants.REQUIRED_MECHANIC_CONFIDENCE

        # Diminishing returns per supporting mechanic
        for mechanic in mapping.supporting_mechanics:
            count = mechanics.get(mechanic, 0)
            if count > 0:
                mechanical_basis.append(f"{mechanic}({count})")
                total_cards += count
                confidence += min(
                    constants.SUPPORTING_MECHANIC_CAP,
                    count * constants.SUPPORTING_MECHANIC_WEIGHT,
                )

        for mechanic in mapping.anti_synergies:
            count = mechanics.get(mechanic, 0)
            if count > 0:
                confidence -= count * constants.ANTI_SYNERGY_PENALTY

        # Entries below the floor are filtered out by rank_strategies, so the
        # halved confidence is only visible when calling this directly.
        meets_minimum = total_cards >= mapping.minimum_density
        if not meets_minimum:
            confidence *= constants.BELOW_DENSITY_MULTIPLIER

        synergy_density = total_cards / max(1, len(mechanical_basis))

        return StrategyScore(
            confidence=max(0.0, min(1.0, confidence)),
            synergy_density=synergy_density,
            mechanical_basis=mechanical_basis,
            meets_minimum=meets_minimum,
        )

    def create_fallback_strategy(self, mechanics: Dict[str, int]) -> StrategyProfile:
        """Midrange profile for decks where no archetype reaches its density floor."""
        categories: Dict[str, int] = {}

        for mechanic, count in mechanics.items():
            category = constants.FALLBACK_CATEGORY_MIDRANGE
            for candidate, fragments in constants.FALLBACK_CATEGORY_KEYWORDS:
                if any(fragment in mechanic for fragment in fragments):
                    category = candidate
                    break
            categories[category] = categories.get(category, 0) + count

        top_category = constants.FALLBACK_CATEGORY_UNKNOWN
        if categories:
            top_category = max(categories.items(), key=lambda x: x[1])[0]

        return StrategyProfile(
            primary=StrategyType.MIDRANGE,
            secondary=[],
            confidence=constants.FALLBACK_CONFIDENCE,
            mechanical_basis=list(mechanics.keys())[: constants.FALLBACK_BASIS_COUNT],
            synergy_density=constants.FALLBACK_SYNERGY_DENSITY,
            explanation=f"Balanced midrange strategy with {top_category} elements",
        )

    def generate_strategy_explanation(
        self, mapping: StrategyMechanicMapping, score: StrategyScore
    ) -> str:
        key_mechanics = ", ".join(score.mechanical_basis[: constants.EXPLANATION_BASIS_COUNT])
        return (
            f"{mapping.description}. Key mechanics: {key_mechanics}. "
            f"Synergy density: {_format_density(score.synergy_density)} cards per mechanic."
        )

    def to_commander_abilities(self, profile: StrategyProfile) -> List[CommanderAbility]:
        """
        Convert a profile into prioritised strategy hints for a commander.
        The primary strategy only counts when the classifier is reasonably sure of it;
        secondary strategies are always included at a lower priority.
        """
        abilities = []

        if profile.confidence > constants.PRIMARY_ABILITY_CONFIDENCE:
            abilities.append(
                CommanderAbility(
                    type=profile.primary,
                    keywords=list(profile.mechanical_basis),
                    priority=_round_half_up(profile.confidence * constants.PRIMARY_ABILITY_PRIORITY_SCALE),
                    context=profile.explanation,
                )
            )

        for secondary_strategy in profile.secondary:
            abilities.append(
                CommanderAbility(
                    type=secondary_strategy,
                    keywords=list(profile.mechanical_basis),
                    priority=_round_half_up(profile.confidence * constants.SECONDARY_ABILITY_PRIORITY_SCALE),
                    context=f"Secondary strategy: {secondary_strategy.value}",
                )
            )

        return abilities
