import os

APPLICATION_VERSION = "1.0.2"
APPLICATION_NAME = "MTG_Strategy_Advisor"

PLATFORM_ID_OSX = "darwin"
PLATFORM_ID_WINDOWS = "win32"
PLATFORM_ID_LINUX = "linux"

CONFIG_FILE_NAME = "config.json"

LOG_NAME = "strategy_advisor"
DEBUG_LOG_FOLDER = os.path.join(os.getcwd(), "Debug")
DEBUG_LOG_FILE = os.path.join(DEBUG_LOG_FOLDER, "debug.log")
DEBUG_LOG_MAX_BYTES = 1000000
DEBUG_LOG_BACKUP_COUNT = 3

TABLE_FILE_ENCODING = "utf-8"
TABLE_FIELD_RULES = "rules"
TABLE_FIELD_MAPPINGS = "mappings"
TABLE_FIELD_STRATEGY_MECHANICS = "strategy_mechanics"

# Strategy classification weights
REQUIRED_MECHANIC_CONFIDENCE = 0.4
SUPPORTING_MECHANIC_WEIGHT = 0.03
SUPPORTING_MECHANIC_CAP = 0.15
ANTI_SYNERGY_PENALTY = 0.05
BELOW_DENSITY_MULTIPLIER = 0.5
CONFIDENCE_TIE_WINDOW = 0.1
MAX_SECONDARY_STRATEGIES = 2
EXPLANATION_BASIS_COUNT = 3

# Fallback profile
FALLBACK_CONFIDENCE = 0.3
FALLBACK_SYNERGY_DENSITY = 1.0
FALLBACK_BASIS_COUNT = 5
FALLBACK_CATEGORY_TRIBAL = "tribal"
FALLBACK_CATEGORY_VALUE = "value"
FALLBACK_CATEGORY_AGGRO = "aggro"
FALLBACK_CATEGORY_CONTROL = "control"
FALLBACK_CATEGORY_MIDRANGE = "midrange"
FALLBACK_CATEGORY_UNKNOWN = "varied"

# Checked in order; the first category with a matching fragment wins
FALLBACK_CATEGORY_KEYWORDS = [
    (FALLBACK_CATEGORY_TRIBAL, ["token", "tribal"]),
    (FALLBACK_CATEGORY_VALUE, ["draw", "tutor"]),
    (FALLBACK_CATEGORY_AGGRO, ["damage", "attack"]),
    (FALLBACK_CATEGORY_CONTROL, ["counter", "removal"]),
]

# Recommendation weights
FORWARD_SYNERGY_MULTIPLIER = 0.5
REVERSE_SYNERGY_MULTIPLIER = 0.3
STRATEGY_ALIGNMENT_MULTIPLIER = 0.5

# Gap analysis
OVERREPRESENTED_THRESHOLD = 8
GAP_STRENGTH_THRESHOLD = 7
SYNERGY_POTENTIAL_PER_GAP = 2

# Commander ability conversion
PRIMARY_ABILITY_CONFIDENCE = 0.5
PRIMARY_ABILITY_PRIORITY_SCALE = 20
SECONDARY_ABILITY_PRIORITY_SCALE = 15
