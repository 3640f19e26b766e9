import json
from enum import Enum
from src.constants import TABLE_FILE_ENCODING


class Result(Enum):
    """Enumeration class for file integrity results"""

    VALID = 0
    ERROR_MISSING_FILE = 1
    ERROR_UNREADABLE_FILE = 2


def check_file_integrity(filename, required_fields):
    """
    Extracts data from a table file to determine if it's formatted correctly.
    Every entry in required_fields must be a list in the top-level JSON object.
    """
    result = Result.VALID
    json_data = {}

    try:
        with open(filename, "r", encoding=TABLE_FILE_ENCODING, errors="replace") as json_file:
            json_data = json_file.read()
    except FileNotFoundError:
        return Result.ERROR_MISSING_FILE, json_data
    except OSError:
        return Result.ERROR_UNREADABLE_FILE, json_data

    try:
        json_data = json.loads(json_data)

        if not isinstance(json_data, dict):
            return Result.ERROR_UNREADABLE_FILE, json_data

        for field in required_fields:
            if not isinstance(json_data.get(field), list):
                return Result.ERROR_UNREADABLE_FILE, json_data

    except json.JSONDecodeError:
        return Result.ERROR_UNREADABLE_FILE, json_data

    return result, json_data
