"""Categorical value -> engine numeric code conversions.

Every table here is a fixed lookup the engines were validated against.
Changing an entry changes engine output, so edit ``CODE_TABLE_VERSION``
alongside any change. Each table is checked for completeness when this
module is imported.
"""

from __future__ import annotations

from enum import Enum
from typing import Mapping

from epredict.core.errors import ConfigurationError
from epredict.domains.risk.domain_logic.definitions import (
    AdmitPriorCategory,
    AlcoholCategory4,
    AlcoholCategory6,
    DiabetesStatus,
    Ethnicity,
    Gender,
    HeartburnIndigestionCategory,
    ProtonPumpInhibitorUseCategory,
    SmokingCategory,
    StrategicHealthAuthority,
)

CODE_TABLE_VERSION = "1.0"


def _require_complete(table: Mapping[Enum, int], enum_type: type[Enum]) -> Mapping[Enum, int]:
    missing = [member.name for member in enum_type if member not in table]
    if missing:
        raise ConfigurationError(
            f"Code table for {enum_type.__name__} is missing: {', '.join(missing)}"
        )
    return table


# ---------------------------------------------------------------------------
# Code tables
# ---------------------------------------------------------------------------

# Several ethnicities deliberately share bucket 1 (white / unrecorded) or
# bucket 9 (mixed and other groups).
ETHRISK_CODES = _require_complete({
    Ethnicity.NOT_RECORDED: 1,
    Ethnicity.BRITISH: 1,
    Ethnicity.IRISH: 1,
    Ethnicity.OTHER_WHITE_BACKGROUND: 1,
    Ethnicity.WHITE_AND_BLACK_CARIBBEAN_MIXED: 9,
    Ethnicity.WHITE_AND_BLACK_AFRICAN_MIXED: 9,
    Ethnicity.WHITE_AND_ASIAN_MIXED: 9,
    Ethnicity.OTHER_MIXED: 9,
    Ethnicity.INDIAN: 2,
    Ethnicity.PAKISTANI: 3,
    Ethnicity.BANGLADESHI: 4,
    Ethnicity.OTHER_ASIAN: 5,
    Ethnicity.CARIBBEAN: 6,
    Ethnicity.BLACK_AFRICAN: 7,
    Ethnicity.OTHER_BLACK: 9,
    Ethnicity.CHINESE: 8,
    Ethnicity.OTHER_ETHNIC_GROUP: 9,
    Ethnicity.NOT_STATED: 1,
}, Ethnicity)

# NotKnown is treated as a non-smoker.
SMOKING_CODES = _require_complete({
    SmokingCategory.NON_SMOKER: 0,
    SmokingCategory.EX_SMOKER: 1,
    SmokingCategory.LIGHT_SMOKER: 2,
    SmokingCategory.MODERATE_SMOKER: 3,
    SmokingCategory.HEAVY_SMOKER: 4,
    SmokingCategory.NOT_KNOWN: 0,
}, SmokingCategory)

# Not_known folds into the lowest drinking bucket.
ALCOHOL4_CODES = _require_complete({
    AlcoholCategory4.NONE: 0,
    AlcoholCategory4.LESS_THAN_1_UNIT_PER_DAY: 1,
    AlcoholCategory4.ONE_TO_TWO_UNITS_PER_DAY: 2,
    AlcoholCategory4.THREE_OR_MORE_UNITS_PER_DAY: 3,
    AlcoholCategory4.NOT_KNOWN: 1,
}, AlcoholCategory4)

ALCOHOL6_CODES = _require_complete({
    AlcoholCategory6.NONE: 0,
    AlcoholCategory6.LESS_THAN_1_UNIT_PER_DAY: 1,
    AlcoholCategory6.ONE_TO_TWO_UNITS_PER_DAY: 2,
    AlcoholCategory6.THREE_TO_SIX_UNITS_PER_DAY: 3,
    AlcoholCategory6.SEVEN_TO_NINE_UNITS_PER_DAY: 4,
    AlcoholCategory6.OVER_NINE_UNITS_PER_DAY: 5,
    AlcoholCategory6.NOT_KNOWN: 1,
}, AlcoholCategory6)

PPI_CODES = _require_complete({
    ProtonPumpInhibitorUseCategory.NONE: 0,
    ProtonPumpInhibitorUseCategory.ONE_PRESCRIPTION: 1,
    ProtonPumpInhibitorUseCategory.TWO_PRESCRIPTIONS: 2,
    ProtonPumpInhibitorUseCategory.THREE_TO_FIVE_PRESCRIPTIONS: 3,
    ProtonPumpInhibitorUseCategory.SIX_TO_TWELVE_PRESCRIPTIONS: 4,
    ProtonPumpInhibitorUseCategory.OVER_TWELVE_PRESCRIPTIONS: 5,
    ProtonPumpInhibitorUseCategory.NOT_KNOWN: 0,
}, ProtonPumpInhibitorUseCategory)

HEARTBURN_INDIGESTION_CODES = _require_complete({
    HeartburnIndigestionCategory.NEITHER: 0,
    HeartburnIndigestionCategory.HEARTBURN: 1,
    HeartburnIndigestionCategory.INDIGESTION: 2,
}, HeartburnIndigestionCategory)

ADMIT_PRIOR_CODES = _require_complete({
    AdmitPriorCategory.NONE: 0,
    AdmitPriorCategory.ONE: 1,
    AdmitPriorCategory.TWO: 2,
    AdmitPriorCategory.THREE_OR_MORE: 3,
}, AdmitPriorCategory)

# Wales, Isle of Man and Other have no region of their own in the engines.
SHA_CODES = _require_complete({
    StrategicHealthAuthority.EAST_MIDLANDS: 1,
    StrategicHealthAuthority.EAST_OF_ENGLAND: 2,
    StrategicHealthAuthority.LONDON: 3,
    StrategicHealthAuthority.NORTH_EAST: 4,
    StrategicHealthAuthority.NORTH_WEST: 5,
    StrategicHealthAuthority.SOUTH_CENTRAL: 6,
    StrategicHealthAuthority.SOUTH_EAST: 7,
    StrategicHealthAuthority.SOUTH_WEST: 8,
    StrategicHealthAuthority.WEST_MIDLANDS: 9,
    StrategicHealthAuthority.YORKS_AND_HUMBER: 10,
    StrategicHealthAuthority.WALES: 1,
    StrategicHealthAuthority.ISLE_OF_MAN: 1,
    StrategicHealthAuthority.OTHER: 1,
}, StrategicHealthAuthority)


# ---------------------------------------------------------------------------
# Conversions
# ---------------------------------------------------------------------------

def bool_to_int(value: bool) -> int:
    return 1 if value else 0


def gender_to_int(gender: Gender) -> int:
    """Female -> 0, Male -> 1."""
    return 0 if gender is Gender.FEMALE else 1


def diabetes_status_to_type1(status: DiabetesStatus) -> int:
    return 1 if status is DiabetesStatus.TYPE1 else 0


def diabetes_status_to_type2(status: DiabetesStatus) -> int:
    return 1 if status is DiabetesStatus.TYPE2 else 0


def ethnicity_to_ethrisk(ethnicity: Ethnicity) -> int:
    """Collapse the 18 recorded ethnicities into the engines' 9 ethrisk buckets."""
    return ETHRISK_CODES[ethnicity]


def smoking_category_to_int(category: SmokingCategory) -> int:
    return SMOKING_CODES[category]


def alcohol_category4_to_int(category: AlcoholCategory4) -> int:
    return ALCOHOL4_CODES[category]


def alcohol_category6_to_int(category: AlcoholCategory6) -> int:
    return ALCOHOL6_CODES[category]


def proton_pump_inhibitor_category_to_int(category: ProtonPumpInhibitorUseCategory) -> int:
    return PPI_CODES[category]


def heartburn_indigestion_category_to_int(category: HeartburnIndigestionCategory) -> int:
    return HEARTBURN_INDIGESTION_CODES[category]


def admit_prior_category_to_int(category: AdmitPriorCategory) -> int:
    return ADMIT_PRIOR_CODES[category]


def strategic_health_authority_to_int(authority: StrategicHealthAuthority) -> int:
    return SHA_CODES[authority]
