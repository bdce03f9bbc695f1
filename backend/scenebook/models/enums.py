"""
Short-code enumerations used across the breakdown schema.

Codes are what the database stores; labels are what search filters and
display surfaces use. Both tables are part of the external contract.
"""
from enum import Enum
from typing import Dict, List, Optional, Type


class CodeEnum(str, Enum):
    """String enum carrying a human label next to its stored code."""

    @classmethod
    def labels(cls) -> Dict[str, str]:
        return {member.value: LABELS[cls][member.value] for member in cls}

    @classmethod
    def codes(cls) -> set:
        return {member.value for member in cls}

    @classmethod
    def codes_in_order(cls) -> List[str]:
        return [member.value for member in cls]

    @classmethod
    def from_label(cls, label: str) -> Optional["CodeEnum"]:
        for code, text in LABELS[cls].items():
            if text == label:
                return cls(code)
        return None

    @property
    def label(self) -> str:
        return LABELS[type(self)][self.value]


class Gender(CodeEnum):
    MALE = "M"
    FEMALE = "F"
    OTHER = "O"


class CharacterType(CodeEnum):
    MAIN = "M"
    PRIMARY = "P"
    SECONDARY = "S"
    TERTIARY = "T"
    OTHER = "O"


class IntExt(CodeEnum):
    INTERIOR = "I"
    EXTERIOR = "E"
    INTERIOR_EXTERIOR = "IE"


class SetLoc(CodeEnum):
    SET = "S"
    LOCATION = "L"
    SET_LOCATION = "SL"


class SceneType(CodeEnum):
    MONTAGE = "M"
    DIALOGUE = "D"
    ACTION = "A"
    TITLE = "T"
    STUNT = "S"
    GRAPHICAL = "G"
    OTHERS = "O"
    BALANCED = "B"


class RoleType(CodeEnum):
    """How a character appears in a scene."""
    DIALOGUE = "D"
    NO_DIALOGUE = "N"
    OFF_SCREEN = "O"
    BACKGROUND = "B"


class Relevance(CodeEnum):
    MUST_HAVE = "M"
    GOOD_TO_HAVE = "G"
    FILLER = "F"
    VALUE_ADDITION = "V"
    UNIMPORTANT = "U"


class Cost(CodeEnum):
    EXTREMELY_EXPENSIVE = "E"
    VERY_EXPENSIVE = "V"
    MODERATELY_EXPENSIVE = "M"
    REASONABLY_EXPENSIVE = "R"
    INEXPENSIVE = "I"


LABELS: Dict[Type[CodeEnum], Dict[str, str]] = {
    Gender: {"M": "Male", "F": "Female", "O": "Other"},
    CharacterType: {"M": "Main", "P": "Primary", "S": "Secondary", "T": "Tertiary", "O": "Other"},
    IntExt: {"I": "INT.", "E": "EXT.", "IE": "INT./EXT."},
    SetLoc: {"S": "Set", "L": "Location", "SL": "Set/Location"},
    SceneType: {
        "M": "Montage",
        "D": "Dialogue",
        "A": "Action",
        "T": "Title",
        "S": "Stunt",
        "G": "Graphical",
        "O": "Others",
        "B": "Balanced",
    },
    RoleType: {"D": "Dialogue", "N": "No-Dialogue", "O": "Off-Screen", "B": "Background"},
    Relevance: {
        "M": "Must-have",
        "G": "Good-to-have",
        "F": "Filler",
        "V": "Value-addition",
        "U": "Unimportant",
    },
    Cost: {
        "E": "Extremely-expensive",
        "V": "Very-expensive",
        "M": "Moderately-expensive",
        "R": "Reasonably-expensive",
        "I": "Inexpensive",
    },
}

# Listing order for characters: Main first, Other last
CHARACTER_TYPE_RANK: Dict[str, int] = {"M": 1, "P": 2, "S": 3, "T": 4, "O": 5}

DEFAULT_FLAG_YES = "Y"
DEFAULT_FLAG_NO = "N"
