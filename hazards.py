"""
Spotter Network hazard catalog
Maps the numeric hazard code in the feed to a hazard kind, display name and broad hazard type
"""
from enum import Enum

from domain import HazardType

OTHER_KIND_LABEL = "SN Other"


class UnknownHazardCode(Exception):
    """Raised when the feed carries a hazard code outside 1-10"""

    def __init__(self, code):
        self.code = code
        super().__init__(f"unknown code: {code}")


class Hazard(Enum):
    TORNADO = "1"
    FUNNEL = "2"
    WALL_CLOUD = "3"
    HAIL = "4"
    WIND = "5"
    FLOOD = "6"
    FLASH_FLOOD = "7"
    OTHER = "8"
    FREEZING_RAIN = "9"
    SNOW = "10"

    @property
    def code(self) -> str:
        return self.value

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    def to_hazard_type(self) -> HazardType:
        return _HAZARD_TYPES[self]


_DISPLAY_NAMES = {
    Hazard.TORNADO: "Tornado",
    Hazard.FUNNEL: "Funnel",
    Hazard.WALL_CLOUD: "Wall Cloud",
    Hazard.HAIL: "Hail",
    Hazard.WIND: "Wind",
    Hazard.FLOOD: "Flood",
    Hazard.FLASH_FLOOD: "Flash Flood",
    Hazard.OTHER: "Other",
    Hazard.FREEZING_RAIN: "Freezing Rain",
    Hazard.SNOW: "Snow",
}

_HAZARD_TYPES = {
    Hazard.TORNADO: HazardType("Tornado"),
    Hazard.FUNNEL: HazardType("Funnel"),
    Hazard.WALL_CLOUD: HazardType("WallCloud"),
    Hazard.HAIL: HazardType("Hail"),
    Hazard.WIND: HazardType("Wind"),
    Hazard.FLOOD: HazardType("Flood"),
    Hazard.FLASH_FLOOD: HazardType("Flood"),
    Hazard.OTHER: HazardType("Other", kind=OTHER_KIND_LABEL),
    Hazard.FREEZING_RAIN: HazardType("FreezingRain"),
    Hazard.SNOW: HazardType("Snow"),
}

_BY_CODE = {hazard.code: hazard for hazard in Hazard}


def resolve(code: str) -> Hazard:
    """Look up a hazard by its exact feed code ("1" through "10")"""
    try:
        return _BY_CODE[code]
    except (KeyError, TypeError):
        raise UnknownHazardCode(code) from None
