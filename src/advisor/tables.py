"""
src/advisor/tables.py
Resolves which synergy rule table and strategy catalog the advisor runs with.
"""

from typing import Optional, Tuple
from src.advisor.engine import MechanicalRecommendationEngine
from src.advisor.strategy import StrategyDetector
from src.advisor.strategy_catalog import StrategyCatalog
from src.advisor.synergy_rules import SynergyRuleTable
from src.configuration import Configuration, read_configuration
from src.constants import TABLE_FIELD_MAPPINGS, TABLE_FIELD_RULES
from src.logger import create_logger, set_debug_logging
from src.utils import Result, check_file_integrity

logger = create_logger()


def _load_rule_table(file_path: str) -> SynergyRuleTable:
    if file_path:
        result, _ = check_file_integrity(file_path, [TABLE_FIELD_RULES])
        if result == Result.VALID:
            table = SynergyRuleTable.from_file(file_path)
            if table is not None:
                logger.info(f"Loaded {len(table)} synergy rules from {file_path}")
                return table
        else:
            logger.error(f"Synergy rule file {file_path} rejected: {result.name}")

    logger.info("Using the built-in synergy rules")
    return SynergyRuleTable()


def _load_catalog(file_path: str) -> StrategyCatalog:
    if file_path:
        result, _ = check_file_integrity(file_path, [TABLE_FIELD_MAPPINGS])
        if result == Result.VALID:
            catalog = StrategyCatalog.from_file(file_path)
            if catalog is not None:
                logger.info(f"Loaded {len(catalog)} strategy mappings from {file_path}")
                return catalog
        else:
            logger.error(f"Strategy catalog file {file_path} rejected: {result.name}")

    logger.info("Using the built-in strategy catalog")
    return StrategyCatalog()


def load_tables(configuration: Configuration) -> Tuple[SynergyRuleTable, StrategyCatalog]:
    """
    Return the (rule table, catalog) pair for this configuration.
    Custom files are only consulted when the feature is enabled; any file that can't be
    used falls back to the built-in table.
    """
    if not configuration.features.custom_tables_enabled:
        return SynergyRuleTable(), StrategyCatalog()

    return (
        _load_rule_table(configuration.settings.synergy_rules_path),
        _load_catalog(configuration.settings.strategy_catalog_path),
    )


def create_advisor(
    configuration: Optional[Configuration] = None,
) -> Tuple[StrategyDetector, MechanicalRecommendationEngine]:
    """
    Build a classifier and recommender that share the same tables.
    Reads the user configuration from disk when none is supplied.
    """
    if configuration is None:
        configuration, _ = read_configuration()

    set_debug_logging(configuration.settings.debug_logging)

    rule_table, catalog = load_tables(configuration)
    return (
        StrategyDetector(catalog),
        MechanicalRecommendationEngine(rule_table, catalog),
    )
