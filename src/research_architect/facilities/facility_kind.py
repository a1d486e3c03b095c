"""
Facility identifiers and supported response languages
"""

from enum import Enum


class FacilityKind(str, Enum):
    QUESTION_EXPLORER = "QUESTION_EXPLORER"
    HYPOTHESIS_ENGINE = "HYPOTHESIS_ENGINE"
    PROJECT_MAPPER = "PROJECT_MAPPER"
    EXPERTISE_DETECTOR = "EXPERTISE_DETECTOR"
    LIT_STRATEGY = "LIT_STRATEGY"
    SPEC_VIEWER = "SPEC_VIEWER"

    @property
    def is_generative(self) -> bool:
        return self is not FacilityKind.SPEC_VIEWER

    @classmethod
    def parse(cls, value: str) -> "FacilityKind":
        """Accept enum values as well as lower/kebab case spellings such as 'hypothesis-engine'"""
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().upper().replace("-", "_")
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(f"Unknown facility '{value}'. Expected one of: {', '.join(k.value for k in cls)}")


# Order in which a project is normally worked through
FACILITY_SEQUENCE = [
    FacilityKind.QUESTION_EXPLORER,
    FacilityKind.HYPOTHESIS_ENGINE,
    FacilityKind.PROJECT_MAPPER,
    FacilityKind.EXPERTISE_DETECTOR,
    FacilityKind.LIT_STRATEGY,
]


class Language(str, Enum):
    EN = "en"
    ES = "es"

    @property
    def display_name(self) -> str:
        return LANGUAGE_NAMES[self]

    @classmethod
    def parse(cls, value) -> "Language":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unsupported language '{value}'. Expected one of: {', '.join(l.value for l in cls)}")


LANGUAGE_NAMES = {
    Language.EN: "English",
    Language.ES: "Spanish",
}
