"""Riot API constants, enum definitions and static routing tables."""

from enum import Enum
from typing import Dict, Union


class Region(str, Enum):
    """Riot API regions for regional routing (Account-V1, Match-V5)."""

    AMERICAS = "americas"
    ASIA = "asia"
    EUROPE = "europe"
    SEA = "sea"


class Platform(str, Enum):
    """Riot API platforms for platform routing (Summoner, League, Mastery, Spectator)."""

    BR1 = "br1"
    EUN1 = "eun1"
    EUW1 = "euw1"
    JP1 = "jp1"
    KR = "kr"
    LA1 = "la1"
    LA2 = "la2"
    ME1 = "me1"
    NA1 = "na1"
    OC1 = "oc1"
    PH2 = "ph2"
    RU = "ru"
    SG2 = "sg2"
    TH2 = "th2"
    TR1 = "tr1"
    TW2 = "tw2"
    VN2 = "vn2"


class QueueType(int, Enum):
    """Riot API queue ids used for match filtering."""

    NORMAL_DRAFT_5X5 = 400
    RANKED_SOLO_5X5 = 420
    NORMAL_BLIND_PICK_5X5 = 430
    RANKED_FLEX_5X5 = 440
    ARAM = 450


# Platforms not listed here route through the Americas cluster (NA, BR, LA1, LA2).
PLATFORM_REGIONS: Dict[str, Region] = {
    "kr": Region.ASIA,
    "jp1": Region.ASIA,
    "euw1": Region.EUROPE,
    "eun1": Region.EUROPE,
    "tr1": Region.EUROPE,
    "ru": Region.EUROPE,
    "me1": Region.EUROPE,
    "oc1": Region.SEA,
    "ph2": Region.SEA,
    "sg2": Region.SEA,
    "th2": Region.SEA,
    "tw2": Region.SEA,
    "vn2": Region.SEA,
}


def normalize_platform(platform: Union[Platform, str]) -> str:
    """Lower-case platform code from an enum or a raw string like ``LA2``."""
    value = platform.value if isinstance(platform, Platform) else platform
    return value.strip().lower()


def platform_to_region(platform: Union[Platform, str]) -> Region:
    """Map a platform code to the regional cluster serving its accounts and matches."""
    return PLATFORM_REGIONS.get(normalize_platform(platform), Region.AMERICAS)
