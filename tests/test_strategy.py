"""
tests/test_strategy.py
Verifies archetype gating, density floors, tie-breaks and the midrange fallback.
"""

import pytest
from src.advisor.schema import StrategyMechanicMapping, StrategyProfile, StrategyScore, StrategyType
from src.advisor.strategy import StrategyDetector, extract_deck_mechanics
from src.advisor.strategy_catalog import StrategyCatalog


def deck_of(make_card, mechanic, count):
    return [make_card(f"{mechanic} {i}", mechanic) for i in range(count)]


def test_extract_deck_mechanics_counts_commander_first(make_card):
    commander = make_card("Commander", "landfall", "token_creation")
    cards = [
        make_card("Card A", "token_creation", "anthem_effect"),
        make_card("Card B", "token_creation"),
        make_card("Vanilla"),
    ]

    mechanics = extract_deck_mechanics(cards, commander)

    assert mechanics == {"landfall": 1, "token_creation": 3, "anthem_effect": 1}
    assert list(mechanics.keys()) == ["landfall", "token_creation", "anthem_effect"]


def test_extract_deck_mechanics_without_commander(make_card):
    assert extract_deck_mechanics([make_card("Card", "mill")], None) == {"mill": 1}


def test_token_swarm_passes_density_floor(detector, make_card):
    cards = deck_of(make_card, "token_creation", 10)
    commander = make_card("Commander")

    profile = detector.analyze_strategy(cards, commander)

    assert profile.primary == StrategyType.TOKEN_SWARM
    assert profile.secondary == []
    # token_creation is both required and supporting for token_swarm
    assert profile.confidence == pytest.approx(0.55)
    assert profile.mechanical_basis == ["token_creation(10)", "token_creation(10)"]
    assert profile.synergy_density == pytest.approx(10.0)
    assert profile.explanation == (
        "Create numerous creature tokens to overwhelm opponents through combat. "
        "Key mechanics: token_creation(10), token_creation(10). "
        "Synergy density: 10.0 cards per mechanic."
    )


def test_empty_deck_falls_back_to_midrange(detector, make_card):
    profile = detector.analyze_strategy([], make_card("Commander"))

    assert profile.primary == StrategyType.MIDRANGE
    assert profile.secondary == []
    assert profile.confidence == pytest.approx(0.3)
    assert profile.mechanical_basis == []
    assert profile.synergy_density == pytest.approx(1.0)
    assert profile.explanation == "Balanced midrange strategy with varied elements"


def test_missing_required_mechanic_never_selected(detector, make_card):
    # death_value needs both death_trigger and sacrifice_ability
    cards = deck_of(make_card, "death_trigger", 12)

    profile = detector.analyze_strategy(cards, make_card("Commander"))

    assert profile.primary == StrategyType.MIDRANGE
    assert StrategyType.DEATH_VALUE not in profile.secondary
    assert profile.mechanical_basis == ["death_trigger"]
    assert profile.explanation == "Balanced midrange strategy with midrange elements"


def test_below_density_floor_is_excluded(detector, make_card):
    # 3 cards count twice for token_swarm (required + supporting) = 6 < 8
    cards = deck_of(make_card, "token_creation", 3)

    profile = detector.analyze_strategy(cards, make_card("Commander"))

    assert profile.primary == StrategyType.MIDRANGE
    assert profile.confidence == pytest.approx(0.3)
    assert profile.explanation == "Balanced midrange strategy with tribal elements"


def test_score_strategy_halves_confidence_below_floor(detector):
    mapping = detector.catalog.get_mapping(StrategyType.TOKEN_SWARM)

    score = detector.score_strategy({"token_creation": 3}, mapping)

    assert score.meets_minimum is False
    assert score.confidence == pytest.approx((0.4 + 0.09) * 0.5)
    assert score.synergy_density == pytest.approx(3.0)


def test_score_strategy_rejects_missing_required(detector):
    mapping = detector.catalog.get_mapping(StrategyType.COMBO)

    score = detector.score_strategy({"activated_abilities": 20}, mapping)

    assert score.confidence == 0.0
    assert score.synergy_density == 0.0
    assert score.mechanical_basis == []
    assert score.meets_minimum is False


def test_anti_synergy_reduces_confidence(detector, make_card):
    cards = deck_of(make_card, "equip_ability", 6) + deck_of(make_card, "board_wipe", 2)

    profile = detector.analyze_strategy(cards, make_card("Commander"))

    assert profile.primary == StrategyType.VOLTRON
    assert profile.confidence == pytest.approx(0.4 + 0.15 - 2 * 0.05)
    assert profile.synergy_density == pytest.approx(6.0)


def test_explanation_rounds_density_half_up(detector, make_card):
    cards = (
        deck_of(make_card, "equip_ability", 1)
        + deck_of(make_card, "evasion", 3)
        + deck_of(make_card, "hexproof", 4)
    )

    profile = detector.analyze_strategy(cards, make_card("Commander"))

    assert profile.primary == StrategyType.VOLTRON
    # equip_ability is both required and supporting: 9 cards over 4 basis entries
    assert profile.synergy_density == pytest.approx(2.25)
    assert profile.explanation == (
        "Focus on making one creature extremely powerful and protecting it. "
        "Key mechanics: equip_ability(1), evasion(3), equip_ability(1). "
        "Synergy density: 2.3 cards per mechanic."
    )


DENSITY_FORMAT_TESTS = [
    # (synergy density, formatted text)
    (0.0, "0.0"),
    (1.25, "1.3"),
    (2.25, "2.3"),
    (3.75, "3.8"),
    (1.15, "1.1"),
    (10.0, "10.0"),
    (7 / 3, "2.3"),
]


@pytest.mark.parametrize("density, expected", DENSITY_FORMAT_TESTS)
def test_explanation_density_format(detector, density, expected):
    mapping = detector.catalog.get_mapping(StrategyType.BURN)
    score = StrategyScore(
        confidence=0.5, synergy_density=density, mechanical_basis=["damage_dealing(5)"], meets_minimum=True
    )

    explanation = detector.generate_strategy_explanation(mapping, score)

    assert explanation.endswith(f"Synergy density: {expected} cards per mechanic.")


def test_supporting_bonus_is_capped(detector):
    mapping = StrategyMechanicMapping(
        strategy=StrategyType.BURN,
        required_mechanics=["damage_dealing"],
        supporting_mechanics=["damage_trigger"],
        minimum_density=1,
    )

    few = detector.score_strategy({"damage_dealing": 1, "damage_trigger": 2}, mapping)
    many = detector.score_strategy({"damage_dealing": 1, "damage_trigger": 40}, mapping)

    assert few.confidence == pytest.approx(0.46)
    assert many.confidence == pytest.approx(0.55)


def test_confidence_is_clamped(detector):
    mapping = StrategyMechanicMapping(
        strategy=StrategyType.PERMISSION,
        required_mechanics=["counterspell"],
        anti_synergies=["token_creation"],
        minimum_density=1,
    )

    score = detector.score_strategy({"counterspell": 1, "token_creation": 20}, mapping)

    assert score.confidence == 0.0
    assert score.meets_minimum is True


class TestTieBreak:
    @pytest.fixture
    def catalog(self):
        return StrategyCatalog(
            [
                StrategyMechanicMapping(
                    strategy=StrategyType.STAX,
                    required_mechanics=["alpha"],
                    minimum_density=1,
                    description="Alpha",
                ),
                StrategyMechanicMapping(
                    strategy=StrategyType.PRISON,
                    required_mechanics=["beta"],
                    minimum_density=1,
                    description="Beta",
                ),
                StrategyMechanicMapping(
                    strategy=StrategyType.COMBO,
                    required_mechanics=["gamma", "delta"],
                    minimum_density=1,
                    description="Gamma",
                ),
            ]
        )

    def test_close_confidence_prefers_higher_density(self, catalog):
        detector = StrategyDetector(catalog)

        ranked = detector.rank_strategies({"alpha": 2, "beta": 5})

        assert [mapping.strategy for mapping, _ in ranked] == [
            StrategyType.PRISON,
            StrategyType.STAX,
        ]

    def test_profile_uses_density_tie_break(self, catalog, make_card):
        detector = StrategyDetector(catalog)
        cards = deck_of(make_card, "alpha", 2) + deck_of(make_card, "beta", 5)

        profile = detector.analyze_strategy(cards, None)

        assert profile.primary == StrategyType.PRISON
        assert profile.secondary == [StrategyType.STAX]
        assert profile.synergy_density == pytest.approx(5.0)

    def test_clear_confidence_gap_beats_density(self, catalog, make_card):
        detector = StrategyDetector(catalog)
        cards = (
            deck_of(make_card, "beta", 5)
            + deck_of(make_card, "gamma", 1)
            + deck_of(make_card, "delta", 1)
        )

        profile = detector.analyze_strategy(cards, None)

        assert profile.primary == StrategyType.COMBO
        assert profile.confidence == pytest.approx(0.8)
        assert profile.secondary == [StrategyType.PRISON]


def test_secondary_limited_to_two(make_card):
    catalog = StrategyCatalog(
        [
            StrategyMechanicMapping(strategy=strategy, required_mechanics=[mechanic], minimum_density=1)
            for strategy, mechanic in [
                (StrategyType.AGGRO, "m1"),
                (StrategyType.BURN, "m2"),
                (StrategyType.MILL, "m3"),
                (StrategyType.STAX, "m4"),
            ]
        ]
    )
    cards = [make_card(f"Card {i}", f"m{i}") for i in range(1, 5)]

    profile = StrategyDetector(catalog).analyze_strategy(cards, None)

    assert profile.primary == StrategyType.AGGRO
    assert profile.secondary == [StrategyType.BURN, StrategyType.MILL]


def test_commander_tags_count_toward_density(detector, make_card):
    commander = make_card("Commander", "token_creation")
    cards = deck_of(make_card, "token_creation", 3)

    profile = detector.analyze_strategy(cards, commander)

    assert profile.primary == StrategyType.TOKEN_SWARM
    assert profile.mechanical_basis[0] == "token_creation(4)"


def test_card_without_tags_contributes_nothing(detector, make_card):
    cards = deck_of(make_card, "token_creation", 10) + [make_card("Vanilla")]

    profile = detector.analyze_strategy(cards, None)

    assert profile.mechanical_basis == ["token_creation(10)", "token_creation(10)"]


COMMANDER_ABILITY_TESTS = [
    # (confidence, secondary, expected (strategy, priority) list)
    (0.55, [], [(StrategyType.TOKEN_SWARM, 11)]),
    (0.625, [StrategyType.VOLTRON], [(StrategyType.TOKEN_SWARM, 13), (StrategyType.VOLTRON, 9)]),
    (0.5, [StrategyType.VOLTRON, StrategyType.BURN], [(StrategyType.VOLTRON, 8), (StrategyType.BURN, 8)]),
    (0.3, [], []),
]


@pytest.mark.parametrize("confidence, secondary, expected", COMMANDER_ABILITY_TESTS)
def test_to_commander_abilities(detector, confidence, secondary, expected):
    profile = StrategyProfile(
        primary=StrategyType.TOKEN_SWARM,
        secondary=secondary,
        confidence=confidence,
        mechanical_basis=["token_creation(10)"],
        synergy_density=10.0,
        explanation="Tokens",
    )

    abilities = detector.to_commander_abilities(profile)

    assert [(a.type, a.priority) for a in abilities] == expected
    for ability in abilities:
        assert ability.keywords == ["token_creation(10)"]
    for ability in abilities:
        if ability.type in secondary:
            assert ability.context == f"Secondary strategy: {ability.type.value}"
