"""
src/advisor/schema.py
Data models for mechanic tags, synergy rules, strategy classification and recommendations.
"""

from enum import Enum
from typing import Dict, List
from pydantic import BaseModel, ConfigDict, Field


class SynergyType(str, Enum):
    AMPLIFIES = "amplifies"  # Makes the mechanic stronger (doubling, anthems)
    ENABLES = "enables"  # Allows the mechanic to work (cost reduction, permission)
    TRIGGERS = "triggers"  # Causes the mechanic to activate (ETB triggers landfall)
    PROTECTS = "protects"  # Prevents the mechanic from being disrupted
    RECURSES = "recurses"  # Brings back cards with the mechanic
    TUTORS = "tutors"  # Finds cards with the mechanic
    CONVERTS = "converts"  # Changes one resource into the mechanic
    REPEATS = "repeats"  # Allows the mechanic to happen multiple times


class StrategyType(str, Enum):
    # Win Conditions
    TOKEN_SWARM = "token_swarm"
    VOLTRON = "voltron"
    COMBO = "combo"
    BURN = "burn"
    MILL = "mill"
    ALTERNATIVE_WINCON = "alternative_wincon"

    # Value Engines
    CARD_ADVANTAGE = "card_advantage"
    ETB_VALUE = "etb_value"
    DEATH_VALUE = "death_value"
    CAST_VALUE = "cast_value"
    LANDFALL_VALUE = "landfall_value"

    # Resources
    RAMP = "ramp"
    ARTIFACT_RAMP = "artifact_ramp"
    LAND_RAMP = "land_ramp"
    RITUAL_COMBO = "ritual_combo"

    # Tribal
    CREATURE_TRIBAL = "creature_tribal"
    TYPE_MATTERS = "type_matters"

    # Control
    PERMISSION = "permission"
    REMOVAL_CONTROL = "removal_control"
    STAX = "stax"
    PRISON = "prison"

    # Tempo
    AGGRO = "aggro"
    MIDRANGE = "midrange"
    TEMPO_CONTROL = "tempo_control"

    # Synergy
    GRAVEYARD_SYNERGY = "graveyard_synergy"
    ARTIFACT_SYNERGY = "artifact_synergy"
    ENCHANTMENT_SYNERGY = "enchantment_synergy"
    INSTANT_SORCERY = "instant_sorcery"
    SACRIFICE_SYNERGY = "sacrifice_synergy"
    BLINK_SYNERGY = "blink_synergy"
    COUNTER_SYNERGY = "counter_synergy"
    TRIGGERED_ABILITIES = "triggered_abilities"


class MechanicTag(BaseModel):
    name: str
    category: str = ""
    priority: int = 1  # 1-10, how important the mechanic is for the card
    confidence: float = 1.0  # 0-1, how sure the tagger is that it applies
    evidence: List[str] = Field(default_factory=list)
    is_manual: bool = False


class CardMechanicsData(BaseModel):
    card_id: str = ""
    card_name: str = ""
    primary_type: str = ""
    functional_roles: List[str] = Field(default_factory=list)
    mechanic_tags: List[MechanicTag] = Field(default_factory=list)
    synergy_keywords: List[str] = Field(default_factory=list)
    power_level: int = 1
    archetype_relevance: List[str] = Field(default_factory=list)


class SynergyRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    source_mechanic: str
    target_mechanic: str
    synergy_type: SynergyType
    strength: int  # 1-10
    description: str = ""


class StrategyMechanicMapping(BaseModel):
    model_config = ConfigDict(frozen=True)

    strategy: StrategyType
    required_mechanics: List[str] = Field(default_factory=list)
    supporting_mechanics: List[str] = Field(default_factory=list)
    anti_synergies: List[str] = Field(default_factory=list)
    minimum_density: int = 0
    description: str = ""


class StrategyScore(BaseModel):
    confidence: float = 0.0
    synergy_density: float = 0.0
    mechanical_basis: List[str] = Field(default_factory=list)
    meets_minimum: bool = False


class StrategyProfile(BaseModel):
    primary: StrategyType
    secondary: List[StrategyType] = Field(default_factory=list)
    confidence: float = 0.0
    mechanical_basis: List[str] = Field(default_factory=list)
    synergy_density: float = 0.0
    explanation: str = ""


class CommanderAbility(BaseModel):
    type: StrategyType
    keywords: List[str] = Field(default_factory=list)
    priority: int = 0
    context: str = ""


class RecommendationQuery(BaseModel):
    existing_mechanics: Dict[str, int] = Field(default_factory=dict)
    target_strategy: StrategyType
    deck_slots: int = 0
    # Accepted for interface compatibility; scoring does not consult these yet
    avoid_mechanics: List[str] = Field(default_factory=list)
    priority_mechanics: List[str] = Field(default_factory=list)


class CardSynergyScore(BaseModel):
    total_score: float = 0.0
    explanations: List[str] = Field(default_factory=list)


class SynergyAnalysis(BaseModel):
    missing_mechanics: List[str] = Field(default_factory=list)
    overrepresented: List[str] = Field(default_factory=list)
    synergy_potential: int = 0


class RecommendationResult(BaseModel):
    recommended_cards: List[CardMechanicsData] = Field(default_factory=list)
    synergy_explanations: Dict[str, List[str]] = Field(default_factory=dict)
    mechanic_gaps: List[str] = Field(default_factory=list)
    overrepresented: List[str] = Field(default_factory=list)
