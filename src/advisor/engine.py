"""
src/advisor/engine.py
Mechanical Recommendation Engine.
Ranks a card pool by how strongly each card's mechanics interact with the
mechanics already in the deck, and reports synergy gaps.
"""

from typing import Dict, Iterable, List, Optional
from src.advisor.schema import (
    CardMechanicsData,
    CardSynergyScore,
    RecommendationQuery,
    RecommendationResult,
    StrategyType,
    SynergyAnalysis,
)
from src.advisor.strategy import extract_deck_mechanics
from src.advisor.strategy_catalog import StrategyCatalog
from src.advisor.synergy_rules import SynergyRuleTable
from src import constants
from src.logger import create_logger

logger = create_logger()


def existing_mechanics_from_cards(cards: Iterable[CardMechanicsData]) -> Dict[str, int]:
    """Build the existing-mechanics profile for a query from the cards already in a deck."""
    return extract_deck_mechanics(cards)


class MechanicalRecommendationEngine:
    def __init__(
        self,
        rule_table: Optional[SynergyRuleTable] = None,
        catalog: Optional[StrategyCatalog] = None,
    ):
        self.rule_table = rule_table if rule_table is not None else SynergyRuleTable()
        self.catalog = catalog if catalog is not None else StrategyCatalog()

    def generate_recommendations(
        self, query: RecommendationQuery, card_pool: List[CardMechanicsData]
    ) -> RecommendationResult:
        logger.info(
            "Existing mechanics: "
            + ", ".join(f"{m}({c})" for m, c in query.existing_mechanics.items())
        )

        # Gap analysis only looks at the deck, never at the pool
        synergy_analysis = self.analyze_synergy_potential(query.existing_mechanics)

        scored_cards = []
        for card in card_pool:
            synergy_score = self.calculate_card_synergy_score(
                card, query.existing_mechanics, query.target_strategy
            )
            logger.debug(f"{card.card_name}: {synergy_score.total_score:.1f}")
            if synergy_score.total_score > 0:
                scored_cards.append((card, synergy_score))

        scored_cards = sorted(scored_cards, key=lambda x: x[1].total_score, reverse=True)

        selected = scored_cards[: max(0, query.deck_slots)]

        logger.info(
            f"Recommending {len(selected)} of {len(scored_cards)} scoring cards "
            f"for {query.target_strategy.value}"
        )

        return RecommendationResult(
            recommended_cards=[card for card, _ in selected],
            synergy_explanations={
                card.card_name: list(score.explanations) for card, score in selected
            },
            mechanic_gaps=synergy_analysis.missing_mechanics,
            overrepresented=synergy_analysis.overrepresented,
        )

    def calculate_card_synergy_score(
        self,
        card: CardMechanicsData,
        existing_mechanics: Dict[str, int],
        target_strategy: StrategyType,
    ) -> CardSynergyScore:
        """
        Score a single card against the deck.

        Logic:
        1. Each tag starts at its own priority.
        2. A rule from the tag to an existing mechanic adds strength * count * 0.5.
        3. A rule from an existing mechanic back to the tag adds strength * count * 0.3.
        4. Tags listed for the target strategy add priority * 0.5.
        """
        if not card.mechanic_tags:
            return CardSynergyScore()

        total_score = 0.0
        explanations = []

        for tag in card.mechanic_tags:
            mechanic_score = float(tag.priority)

            for existing_mechanic, count in existing_mechanics.items():
                synergy = self.rule_table.find_rule(tag.name, existing_mechanic)
                if synergy:
                    mechanic_score += (
                        synergy.strength * count * constants.FORWARD_SYNERGY_MULTIPLIER
                    )
                    explanations.append(
                        f"{tag.name} {synergy.synergy_type.value} existing {existing_mechanic} "
                        f"({count} cards): {synergy.description}"
                    )

                reverse_synergy = self.rule_table.find_rule(existing_mechanic, tag.name)
                if reverse_synergy:
                    mechanic_score += (
                        reverse_synergy.strength * count * constants.REVERSE_SYNERGY_MULTIPLIER
                    )
                    explanations.append(
                        f"Existing {existing_mechanic} ({count} cards) benefits from "
                        f"{tag.name}: {reverse_synergy.description}"
                    )

            total_score += mechanic_score

        strategy_bonus = self.calculate_strategy_alignment(card, target_strategy)
        total_score += strategy_bonus

        if strategy_bonus > 0:
            explanations.append(
                f"Aligns with {target_strategy.value} strategy (+{strategy_bonus:.1f})"
            )

        return CardSynergyScore(total_score=total_score, explanations=explanations)

    def calculate_strategy_alignment(
        self, card: CardMechanicsData, target_strategy: StrategyType
    ) -> float:
        strategy_mechanics = self.catalog.strategy_mechanics(target_strategy)

        alignment_score = 0.0
        for tag in card.mechanic_tags:
            if tag.name in strategy_mechanics:
                alignment_score += tag.priority * constants.STRATEGY_ALIGNMENT_MULTIPLIER

        return alignment_score

    def analyze_synergy_potential(self, existing_mechanics: Dict[str, int]) -> SynergyAnalysis:
        """
        Find strong enablers missing from the deck and mechanics that are over-saturated.
        """
        missing_mechanics = []
        overrepresented = []

        for mechanic, count in existing_mechanics.items():
            for synergy in self.rule_table.rules_targeting(mechanic):
                if (
                    synergy.source_mechanic not in existing_mechanics
                    and synergy.strength >= constants.GAP_STRENGTH_THRESHOLD
                    and synergy.source_mechanic not in missing_mechanics
                ):
                    missing_mechanics.append(synergy.source_mechanic)

            if count > constants.OVERREPRESENTED_THRESHOLD:
                overrepresented.append(mechanic)

        return SynergyAnalysis(
            missing_mechanics=missing_mechanics,
            overrepresented=overrepresented,
            synergy_potential=len(missing_mechanics) * constants.SYNERGY_POTENTIAL_PER_GAP,
        )
