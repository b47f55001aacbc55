"""Shared vocabulary for the risk engines: enumerations and valid ranges.

This is the superset of the standard definitions shipped with each
calculator. Enum values are the textual member names used on the wire and
in the reference test packs, so ``SmokingCategory("NonSmoker")`` parses a
test-pack cell directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


# ---------------------------------------------------------------------------
# Engines
# ---------------------------------------------------------------------------

class Engine(str, Enum):
    """Calculation engines this gateway knows how to drive."""

    QRISK3 = "QRisk3"
    QDIABETES = "QDiabetes"
    QFRACTURE = "QFracture"
    X05 = "X05"


# ---------------------------------------------------------------------------
# Result vocabulary
# ---------------------------------------------------------------------------

class ResultStatus(str, Enum):
    NO_CALCULATION_POSSIBLE_AS_PATIENT_FAILED_CRITERIA = "NO_CALCULATION_POSSIBLE_AS_PATIENT_FAILED_CRITERIA"
    CALCULATED_USING_PATIENTS_OWN_DATA = "CALCULATED_USING_PATIENTS_OWN_DATA"
    CALCULATED_USING_ESTIMATED_OR_CORRECTED_DATA = "CALCULATED_USING_ESTIMATED_OR_CORRECTED_DATA"
    NO_CALCULATION_POSSIBLE_AS_ENGINE_LOCKED = "NO_CALCULATION_POSSIBLE_AS_ENGINE_LOCKED"


class InvalidityReason(str, Enum):
    VALID = "VALID"
    AGE_OUT_OF_RANGE = "AGE_OUT_OF_RANGE"
    ALREADY_HAD_A_CVD_EVENT = "ALREADY_HAD_A_CVD_EVENT"
    ETHNICITY_OUT_OF_RANGE = "ETHNICITY_OUT_OF_RANGE"
    VARIABLE_NON_BOOLEAN = "VARIABLE_NON_BOOLEAN"
    QRISK_ENGINE_LOCKED = "QRISK_ENGINE_LOCKED"
    SMOKING_STATUS_OUT_OF_RANGE = "SMOKING_STATUS_OUT_OF_RANGE"


class ParameterQuality(str, Enum):
    """Whether an input parameter was used as given, missing, or out of range."""

    OK = "OK"
    MISSING = "MISSING"
    OUT_OF_RANGE = "OUT_OF_RANGE"


# ---------------------------------------------------------------------------
# Patient vocabulary
# ---------------------------------------------------------------------------

class Gender(str, Enum):
    FEMALE = "Female"
    MALE = "Male"


class DiabetesStatus(str, Enum):
    NONE = "None"
    TYPE1 = "Type1"
    TYPE2 = "Type2"


class SmokingCategory(str, Enum):
    NON_SMOKER = "NonSmoker"
    EX_SMOKER = "ExSmoker"
    LIGHT_SMOKER = "LightSmoker"
    MODERATE_SMOKER = "ModerateSmoker"
    HEAVY_SMOKER = "HeavySmoker"
    NOT_KNOWN = "NotKnown"


class Ethnicity(str, Enum):
    NOT_RECORDED = "NotRecorded"
    BRITISH = "British"
    IRISH = "Irish"
    OTHER_WHITE_BACKGROUND = "OtherWhiteBackground"
    WHITE_AND_BLACK_CARIBBEAN_MIXED = "WhiteAndBlackCaribbeanMixed"
    WHITE_AND_BLACK_AFRICAN_MIXED = "WhiteAndBlackAfricanMixed"
    WHITE_AND_ASIAN_MIXED = "WhiteAndAsianMixed"
    OTHER_MIXED = "OtherMixed"
    INDIAN = "Indian"
    PAKISTANI = "Pakistani"
    BANGLADESHI = "Bangladeshi"
    OTHER_ASIAN = "OtherAsian"
    CARIBBEAN = "Caribbean"
    BLACK_AFRICAN = "BlackAfrican"
    OTHER_BLACK = "OtherBlack"
    CHINESE = "Chinese"
    OTHER_ETHNIC_GROUP = "OtherEthnicGroup"
    NOT_STATED = "NotStated"


class AlcoholCategory4(str, Enum):
    NONE = "None"
    LESS_THAN_1_UNIT_PER_DAY = "Less_than_1_unit_per_day"
    ONE_TO_TWO_UNITS_PER_DAY = "One_to_two_units_per_day"
    THREE_OR_MORE_UNITS_PER_DAY = "Three_or_more_units_per_day"
    NOT_KNOWN = "Not_known"


class AlcoholCategory6(str, Enum):
    NONE = "None"
    LESS_THAN_1_UNIT_PER_DAY = "Less_than_1_unit_per_day"
    ONE_TO_TWO_UNITS_PER_DAY = "One_to_two_units_per_day"
    THREE_TO_SIX_UNITS_PER_DAY = "Three_to_six_units_per_day"
    SEVEN_TO_NINE_UNITS_PER_DAY = "Seven_to_nine_units_per_day"
    OVER_NINE_UNITS_PER_DAY = "Over_nine_units_per_day"
    NOT_KNOWN = "Not_known"


class ProtonPumpInhibitorUseCategory(str, Enum):
    """Number of proton pump inhibitor prescriptions in the last year."""

    NONE = "None"
    ONE_PRESCRIPTION = "One_prescription"
    TWO_PRESCRIPTIONS = "Two_prescriptions"
    THREE_TO_FIVE_PRESCRIPTIONS = "Three_to_five_prescriptions"
    SIX_TO_TWELVE_PRESCRIPTIONS = "Six_to_twelve_prescriptions"
    OVER_TWELVE_PRESCRIPTIONS = "Over_twelve_prescriptions"
    NOT_KNOWN = "Not_known"


class AdmitPriorCategory(str, Enum):
    NONE = "None"
    ONE = "One"
    TWO = "Two"
    THREE_OR_MORE = "ThreeOrMore"


class StrategicHealthAuthority(str, Enum):
    EAST_MIDLANDS = "EastMidlands"
    EAST_OF_ENGLAND = "EastOfEngland"
    LONDON = "London"
    NORTH_EAST = "NorthEast"
    NORTH_WEST = "NorthWest"
    SOUTH_CENTRAL = "SouthCentral"
    SOUTH_EAST = "SouthEast"
    SOUTH_WEST = "SouthWest"
    WEST_MIDLANDS = "WestMidlands"
    YORKS_AND_HUMBER = "YorksAndHumber"
    WALES = "Wales"
    ISLE_OF_MAN = "IsleOfMan"
    OTHER = "Other"


class HeartburnIndigestionCategory(str, Enum):
    NEITHER = "Neither"
    HEARTBURN = "Heartburn"
    INDIGESTION = "Indigestion"


# ---------------------------------------------------------------------------
# Valid ranges
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ValidRange:
    """Closed interval an engine accepts without substituting a value."""

    low: float
    high: float

    def contains(self, value: float) -> bool:
        return self.low <= value <= self.high


TOWNSEND_RANGE = ValidRange(-8.0, 12.0)
CHOLESTEROL_RATIO_RANGE = ValidRange(1.0, 12.0)
BMI_RANGE = ValidRange(20.0, 40.0)
SYSTOLIC_BP_RANGE = ValidRange(70.0, 210.0)
HBA1C_RANGE = ValidRange(15.0, 47.99)
FASTING_BLOOD_SUGAR_RANGE = ValidRange(2.0, 6.99)

# Keyed by canonical input field name.
RANGES: dict[str, ValidRange] = {
    "townsend_score": TOWNSEND_RANGE,
    "cholesterol_ratio": CHOLESTEROL_RATIO_RANGE,
    "bmi": BMI_RANGE,
    "systolic_blood_pressure_mean": SYSTOLIC_BP_RANGE,
    "hba1c": HBA1C_RANGE,
    "fasting_blood_glucose": FASTING_BLOOD_SUGAR_RANGE,
}

DEFAULT_PREDICTION_YEARS = 10
