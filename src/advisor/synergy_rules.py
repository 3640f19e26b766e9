"""
src/advisor/synergy_rules.py
Directed mechanic-to-mechanic interaction table.
Lookups are exact (source, target) pairs; the table never chains rules together.
"""

import json
from typing import Dict, Iterable, List, Optional, Tuple
from pydantic import ValidationError
from src.advisor.schema import SynergyRule, SynergyType
from src.constants import TABLE_FIELD_RULES, TABLE_FILE_ENCODING
from src.logger import create_logger

logger = create_logger()


def _rule(source, target, synergy_type, strength, description):
    return SynergyRule(
        source_mechanic=source,
        target_mechanic=target,
        synergy_type=synergy_type,
        strength=strength,
        description=description,
    )


DEFAULT_SYNERGY_RULES: Tuple[SynergyRule, ...] = (
    # Tokens
    _rule("doubling_effect", "token_creation", SynergyType.AMPLIFIES, 9,
          "Doubles token production for exponential value"),
    _rule("anthem_effect", "token_creation", SynergyType.AMPLIFIES, 8,
          "Makes tokens larger and more threatening"),
    _rule("sacrifice_ability", "token_creation", SynergyType.CONVERTS, 7,
          "Converts tokens into other resources"),
    # ETB
    _rule("flicker_effect", "etb_trigger", SynergyType.REPEATS, 9,
          "Repeatedly triggers enter-the-battlefield abilities"),
    _rule("reanimation", "etb_trigger", SynergyType.REPEATS, 8,
          "Reanimates creatures to retrigger ETB abilities"),
    _rule("bounce_effect", "etb_trigger", SynergyType.REPEATS, 6,
          "Bounces creatures to hand for repeated ETB value"),
    # Spells
    _rule("cost_reduction", "spell_trigger", SynergyType.ENABLES, 8,
          "Reduces spell costs to enable multiple casts per turn"),
    _rule("spell_copying", "spell_trigger", SynergyType.AMPLIFIES, 9,
          "Copies spells to multiply spell-based triggers"),
    _rule("card_draw", "spell_trigger", SynergyType.ENABLES, 7,
          "Provides more spells to cast for triggers"),
    # Graveyard
    _rule("mill", "reanimation", SynergyType.ENABLES, 8,
          "Fills graveyard with reanimation targets"),
    _rule("sacrifice_ability", "reanimation", SynergyType.ENABLES, 7,
          "Puts creatures in graveyard for reanimation"),
    _rule("death_trigger", "sacrifice_ability", SynergyType.TRIGGERS, 8,
          "Sacrifice outlets trigger death abilities for value"),
    # Counters
    _rule("proliferate", "plus_one_counters", SynergyType.AMPLIFIES, 9,
          "Proliferate multiplies +1/+1 counter value"),
    _rule("counter_manipulation", "plus_one_counters", SynergyType.AMPLIFIES, 8,
          "Manipulates counters for additional value"),
    # Tribal
    _rule("anthem_effect", "generic_tribal", SynergyType.AMPLIFIES, 8,
          "Tribal anthems boost all creatures of the type"),
    _rule("tutor", "generic_tribal", SynergyType.TUTORS, 7,
          "Tutors find specific tribal pieces"),
    # Artifacts
    _rule("artifact_synergy", "mana_ability", SynergyType.AMPLIFIES, 7,
          "Artifacts-matter effects boost mana rocks"),
    _rule("sacrifice_ability", "artifact_synergy", SynergyType.CONVERTS, 6,
          "Sacrifice artifacts for value and synergy"),
    # Protection
    _rule("protection_static", "voltron", SynergyType.PROTECTS, 9,
          "Protects voltron creatures from removal"),
    _rule("counterspell", "combo", SynergyType.PROTECTS, 8,
          "Protects combo pieces from disruption"),
    # Landfall
    _rule("land_ramp", "landfall", SynergyType.TRIGGERS, 8,
          "Extra land drops trigger landfall abilities"),
    _rule("land_synergy", "landfall", SynergyType.ENABLES, 7,
          "Land synergies enable consistent landfall triggers"),
    # Card advantage
    _rule("tutor", "card_draw", SynergyType.AMPLIFIES, 6,
          "Tutors provide virtual card advantage"),
    _rule("graveyard_recursion", "card_draw", SynergyType.AMPLIFIES, 7,
          "Recursion provides additional card advantage"),
)


class SynergyRuleTable:
    """
    Read-only collection of synergy rules keyed by (source, target).
    If two rules share a pair, the first one listed is the one that's used.
    """

    def __init__(self, rules: Iterable[SynergyRule] = DEFAULT_SYNERGY_RULES):
        self._rules: Tuple[SynergyRule, ...] = tuple(rules)
        self._index: Dict[Tuple[str, str], SynergyRule] = {}
        for rule in self._rules:
            self._index.setdefault((rule.source_mechanic, rule.target_mechanic), rule)

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self):
        return iter(self._rules)

    @property
    def rules(self) -> Tuple[SynergyRule, ...]:
        return self._rules

    def find_rule(self, source: str, target: str) -> Optional[SynergyRule]:
        return self._index.get((source, target))

    def rules_targeting(self, target: str) -> List[SynergyRule]:
        return [rule for rule in self._rules if rule.target_mechanic == target]

    def add_rule(self, rule: SynergyRule) -> "SynergyRuleTable":
        """Return a new table with the rule appended. This table is left untouched."""
        return SynergyRuleTable(self._rules + (rule,))

    @classmethod
    def from_file(cls, file_path: str):
        """Load a rule table from a local JSON file."""
        try:
            with open(file_path, "r", encoding=TABLE_FILE_ENCODING) as f:
                data = json.load(f)
            rules = [SynergyRule.model_validate(r) for r in data[TABLE_FIELD_RULES]]
            return cls(rules)
        except (OSError, json.JSONDecodeError, KeyError, TypeError, ValidationError) as e:
            logger.error(f"Failed to load synergy rules from {file_path}: {e}")
            return None

    def to_file(self, file_path: str) -> bool:
        """Save the rule table to a file in JSON format."""
        try:
            with open(file_path, "w", encoding=TABLE_FILE_ENCODING) as f:
                json.dump(
                    {TABLE_FIELD_RULES: [r.model_dump(mode="json") for r in self._rules]},
                    f,
                    ensure_ascii=False,
                    indent=4,
                )
        except OSError as e:
            logger.error(f"Failed to save synergy rules to {file_path}: {e}")
            return False
        return True
