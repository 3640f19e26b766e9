"""
src/advisor/strategy_catalog.py
Archetype definitions used by the strategy classifier and the recommendation engine.
"""

import json
from typing import Dict, Iterable, List, Mapping, Optional, Tuple
from pydantic import ValidationError
from src.advisor.schema import StrategyMechanicMapping, StrategyType
from src.constants import (
    TABLE_FIELD_MAPPINGS,
    TABLE_FIELD_STRATEGY_MECHANICS,
    TABLE_FILE_ENCODING,
)
from src.logger import create_logger

logger = create_logger()

S = StrategyType

# token_swarm lists token_creation as both required and supporting, so the same
# count earns the required bonus and the supporting bonus.
DEFAULT_STRATEGY_MAPPINGS: Tuple[StrategyMechanicMapping, ...] = (
    # Win Conditions
    StrategyMechanicMapping(
        strategy=S.TOKEN_SWARM,
        required_mechanics=["token_creation"],
        supporting_mechanics=["doubling_effect", "anthem_effect", "token_creation", "attack_trigger", "etb_trigger"],
        anti_synergies=["board_wipe"],
        minimum_density=8,
        description="Create numerous creature tokens to overwhelm opponents through combat",
    ),
    StrategyMechanicMapping(
        strategy=S.VOLTRON,
        required_mechanics=["equip_ability"],
        supporting_mechanics=["protection_static", "evasion", "equip_ability", "attach_aura", "hexproof"],
        anti_synergies=["board_wipe", "token_creation"],
        minimum_density=6,
        description="Focus on making one creature extremely powerful and protecting it",
    ),
    StrategyMechanicMapping(
        strategy=S.COMBO,
        required_mechanics=["activated_abilities", "alternative_cost"],
        supporting_mechanics=["tutor", "cost_reduction", "alternative_cost", "activated_abilities", "untap_abilities"],
        anti_synergies=[],
        minimum_density=4,
        description="Assemble specific card combinations for immediate victory",
    ),
    StrategyMechanicMapping(
        strategy=S.BURN,
        required_mechanics=["damage_dealing"],
        supporting_mechanics=["damage_dealing", "damage_trigger", "doubling_effect", "etb_trigger"],
        anti_synergies=["board_wipe"],
        minimum_density=10,
        description="Deal direct damage to opponents to reduce their life totals",
    ),
    # Value Engines
    StrategyMechanicMapping(
        strategy=S.CARD_ADVANTAGE,
        required_mechanics=["card_draw"],
        supporting_mechanics=["card_draw", "scry", "surveil", "tutor", "etb_trigger"],
        anti_synergies=[],
        minimum_density=12,
        description="Generate card advantage to outvalue opponents over time",
    ),
    StrategyMechanicMapping(
        strategy=S.ETB_VALUE,
        required_mechanics=["etb_trigger"],
        supporting_mechanics=["etb_trigger", "flicker_effect", "reanimation", "bounce_effect"],
        anti_synergies=[],
        minimum_density=15,
        description="Repeatedly trigger enter-the-battlefield abilities for value",
    ),
    StrategyMechanicMapping(
        strategy=S.DEATH_VALUE,
        required_mechanics=["death_trigger", "sacrifice_ability"],
        supporting_mechanics=["death_trigger", "sacrifice_ability", "token_creation", "reanimation"],
        anti_synergies=[],
        minimum_density=10,
        description="Gain value when creatures die through sacrifice outlets and death triggers",
    ),
    StrategyMechanicMapping(
        strategy=S.CAST_VALUE,
        required_mechanics=["spell_trigger"],
        supporting_mechanics=["spell_trigger", "spell_copying", "cost_reduction", "storm"],
        anti_synergies=[],
        minimum_density=8,
        description="Generate value by casting multiple spells per turn",
    ),
    StrategyMechanicMapping(
        strategy=S.LANDFALL_VALUE,
        required_mechanics=["landfall"],
        supporting_mechanics=["landfall", "land_ramp", "land_synergy", "fetchlands"],
        anti_synergies=[],
        minimum_density=8,
        description="Trigger abilities by playing additional lands",
    ),
    # Resources
    StrategyMechanicMapping(
        strategy=S.RAMP,
        required_mechanics=["mana_generation", "land_ramp"],
        supporting_mechanics=["mana_generation", "land_ramp", "treasure_generation", "cost_reduction"],
        anti_synergies=[],
        minimum_density=12,
        description="Accelerate mana development to cast expensive spells early",
    ),
    StrategyMechanicMapping(
        strategy=S.ARTIFACT_RAMP,
        required_mechanics=["mana_ability"],
        supporting_mechanics=["mana_ability", "artifact_synergy", "cost_reduction"],
        anti_synergies=[],
        minimum_density=10,
        description="Use artifact mana sources for acceleration and synergy",
    ),
    # Tribal
    StrategyMechanicMapping(
        strategy=S.CREATURE_TRIBAL,
        required_mechanics=["generic_tribal"],
        supporting_mechanics=["generic_tribal", "anthem_effect", "tribal_synergy", "creature_synergy"],
        anti_synergies=["board_wipe"],
        minimum_density=20,
        description="Focus on a specific creature type with tribal synergies",
    ),
    # Control
    StrategyMechanicMapping(
        strategy=S.PERMISSION,
        required_mechanics=["counterspell"],
        supporting_mechanics=["counterspell", "card_draw", "instant_synergy"],
        anti_synergies=["token_creation"],
        minimum_density=8,
        description="Control the game through counterspells and instant-speed interaction",
    ),
    StrategyMechanicMapping(
        strategy=S.REMOVAL_CONTROL,
        required_mechanics=["spot_removal", "board_wipe"],
        supporting_mechanics=["spot_removal", "board_wipe", "bounce_effect", "exile_effect"],
        anti_synergies=["token_creation"],
        minimum_density=12,
        description="Control through destroying and removing threats",
    ),
    # Synergy
    StrategyMechanicMapping(
        strategy=S.GRAVEYARD_SYNERGY,
        required_mechanics=["reanimation", "graveyard_recursion"],
        supporting_mechanics=["reanimation", "graveyard_recursion", "mill", "dredge", "death_trigger"],
        anti_synergies=["graveyard_hate"],
        minimum_density=8,
        description="Use the graveyard as an extension of your hand",
    ),
    StrategyMechanicMapping(
        strategy=S.ARTIFACT_SYNERGY,
        required_mechanics=["artifact_synergy"],
        supporting_mechanics=["artifact_synergy", "mana_ability", "sacrifice_ability"],
        anti_synergies=[],
        minimum_density=15,
        description="Build around artifacts-matter synergies and interactions",
    ),
    StrategyMechanicMapping(
        strategy=S.BLINK_SYNERGY,
        required_mechanics=["flicker_effect"],
        supporting_mechanics=["flicker_effect", "etb_trigger", "bounce_effect"],
        anti_synergies=[],
        minimum_density=8,
        description="Repeatedly exile and return permanents for value",
    ),
    StrategyMechanicMapping(
        strategy=S.COUNTER_SYNERGY,
        required_mechanics=["plus_one_counters", "counter_manipulation"],
        supporting_mechanics=["plus_one_counters", "counter_manipulation", "proliferate"],
        anti_synergies=["board_wipe"],
        minimum_density=10,
        description="Build around +1/+1 counters and proliferate effects",
    ),
)

# Mechanics a recommended card should carry to line up with each strategy
DEFAULT_STRATEGY_MECHANICS: Dict[StrategyType, List[str]] = {
    S.TOKEN_SWARM: ["token_creation", "doubling_effect", "anthem_effect", "attack_trigger"],
    S.VOLTRON: ["equip_ability", "protection_static", "evasion", "aura_synergy"],
    S.COMBO: ["activated_abilities", "alternative_cost", "tutor", "cost_reduction"],
    S.BURN: ["damage_dealing", "damage_trigger", "doubling_effect"],
    S.MILL: ["mill", "library_manipulation"],
    S.ALTERNATIVE_WINCON: ["alternative_wincon"],
    S.CARD_ADVANTAGE: ["card_draw", "scry", "tutor", "graveyard_recursion"],
    S.ETB_VALUE: ["etb_trigger", "flicker_effect", "reanimation", "bounce_effect"],
    S.DEATH_VALUE: ["death_trigger", "sacrifice_ability", "token_creation"],
    S.CAST_VALUE: ["spell_trigger", "spell_copying", "cost_reduction", "storm"],
    S.LANDFALL_VALUE: ["landfall", "land_ramp", "land_synergy"],
    S.RAMP: ["mana_generation", "land_ramp", "treasure_generation"],
    S.ARTIFACT_RAMP: ["mana_ability", "artifact_synergy"],
    S.LAND_RAMP: ["land_ramp", "land_synergy"],
    S.RITUAL_COMBO: ["temporary_mana", "storm"],
    S.CREATURE_TRIBAL: ["generic_tribal", "anthem_effect", "tribal_synergy"],
    S.TYPE_MATTERS: ["artifact_synergy", "enchantment_synergy"],
    S.PERMISSION: ["counterspell", "instant_synergy"],
    S.REMOVAL_CONTROL: ["spot_removal", "board_wipe", "bounce_effect"],
    S.STAX: ["resource_denial", "tax_effects"],
    S.PRISON: ["lock_effects", "denial_effects"],
    S.AGGRO: ["haste", "low_cost", "damage_dealing"],
    S.MIDRANGE: ["versatile_threats", "efficient_answers"],
    S.TEMPO_CONTROL: ["efficient_threats", "instant_synergy"],
    S.GRAVEYARD_SYNERGY: ["reanimation", "graveyard_recursion", "mill", "dredge"],
    S.ARTIFACT_SYNERGY: ["artifact_synergy", "mana_ability", "sacrifice_ability"],
    S.ENCHANTMENT_SYNERGY: ["enchantment_synergy", "aura_synergy"],
    S.INSTANT_SORCERY: ["spell_trigger", "spell_copying", "flashback"],
    S.SACRIFICE_SYNERGY: ["sacrifice_ability", "death_trigger", "token_creation"],
    S.BLINK_SYNERGY: ["flicker_effect", "etb_trigger", "bounce_effect"],
    S.COUNTER_SYNERGY: ["plus_one_counters", "proliferate", "counter_manipulation"],
    S.TRIGGERED_ABILITIES: ["etb_trigger", "attack_trigger", "spell_trigger", "landfall"],
}


class StrategyCatalog:
    """
    Read-only archetype table plus the strategy -> aligned mechanics map.
    """

    def __init__(
        self,
        mappings: Iterable[StrategyMechanicMapping] = DEFAULT_STRATEGY_MAPPINGS,
        strategy_mechanics: Optional[Mapping[StrategyType, List[str]]] = None,
    ):
        self._mappings: Tuple[StrategyMechanicMapping, ...] = tuple(mappings)
        if strategy_mechanics is None:
            strategy_mechanics = DEFAULT_STRATEGY_MECHANICS
        self._strategy_mechanics: Dict[StrategyType, Tuple[str, ...]] = {
            StrategyType(k): tuple(v) for k, v in strategy_mechanics.items()
        }

    def __len__(self) -> int:
        return len(self._mappings)

    @property
    def mappings(self) -> Tuple[StrategyMechanicMapping, ...]:
        return self._mappings

    def get_mapping(self, strategy: StrategyType) -> Optional[StrategyMechanicMapping]:
        for mapping in self._mappings:
            if mapping.strategy == strategy:
                return mapping
        return None

    def strategy_mechanics(self, strategy: StrategyType) -> List[str]:
        return list(self._strategy_mechanics.get(strategy, ()))

    @classmethod
    def from_file(cls, file_path: str):
        """
        Load a catalog from a local JSON file.
        The strategy_mechanics section is optional; the defaults are used when it's absent.
        """
        try:
            with open(file_path, "r", encoding=TABLE_FILE_ENCODING) as f:
                data = json.load(f)
            mappings = [
                StrategyMechanicMapping.model_validate(m)
                for m in data[TABLE_FIELD_MAPPINGS]
            ]
            strategy_mechanics = None
            if TABLE_FIELD_STRATEGY_MECHANICS in data:
                strategy_mechanics = {
                    StrategyType(k): list(v)
                    for k, v in data[TABLE_FIELD_STRATEGY_MECHANICS].items()
                }
            return cls(mappings, strategy_mechanics)
        except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError, ValidationError) as e:
            logger.error(f"Failed to load strategy catalog from {file_path}: {e}")
            return None

    def to_file(self, file_path: str) -> bool:
        """Save the catalog to a file in JSON format."""
        data = {
            TABLE_FIELD_MAPPINGS: [m.model_dump(mode="json") for m in self._mappings],
            TABLE_FIELD_STRATEGY_MECHANICS: {
                k.value: list(v) for k, v in self._strategy_mechanics.items()
            },
        }
        try:
            with open(file_path, "w", encoding=TABLE_FILE_ENCODING) as f:
                json.dump(data, f, ensure_ascii=False, indent=4)
        except OSError as e:
            logger.error(f"Failed to save strategy catalog to {file_path}: {e}")
            return False
        return True
