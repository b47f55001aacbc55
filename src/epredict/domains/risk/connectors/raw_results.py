"""Raw result shapes returned by the calculation engines.

These mirror what the engines hand back: their own status, reason and
data-quality codes, engine-specific score fields, and a per-parameter
substitution report. The integer values of the code enums are the engines'
wire values; the gateway maps them with explicit tables, never by ordinal.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any


class CalcResultStatus(IntEnum):
    NO_CALCULATION_POSSIBLE_AS_PATIENT_FAILED_CRITERIA = 0
    CALCULATED_USING_PATIENTS_OWN_DATA = 1
    CALCULATED_USING_ESTIMATED_OR_CORRECTED_DATA = 2
    NO_CALCULATION_POSSIBLE_AS_ENGINE_LOCKED = 3


class CalcReasonInvalid(IntEnum):
    VALID = 0
    AGE_OUT_OF_RANGE = 1
    ALREADY_HAD_A_CVD_EVENT = 2
    ETHNICITY_OUT_OF_RANGE = 3
    VARIABLE_NON_BOOLEAN = 4
    QRISK_ENGINE_LOCKED = 5
    SMOKING_STATUS_OUT_OF_RANGE = 6


class CalcDataStatus(IntEnum):
    OK = 0
    MISSING = 1
    OUT_OF_RANGE = 2


@dataclass(frozen=True)
class SubstitutionReport:
    """Engine's verdict on one input parameter and the value it used instead."""

    data: CalcDataStatus
    substitute_value: Any = None


# ---------------------------------------------------------------------------
# QRisk3
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class QRisk3DataQuality:
    smoking_status: SubstitutionReport
    sbp: SubstitutionReport
    sbps5: SubstitutionReport
    ratio: SubstitutionReport
    ethnicity: SubstitutionReport
    bmi: SubstitutionReport
    townsend: SubstitutionReport


@dataclass(frozen=True)
class QRisk3RawResult:
    result_status: CalcResultStatus
    reason: CalcReasonInvalid
    score: float | None = None
    typical_score: float | None = None
    heart_age: float | None = None       # optional even when calculated
    data_quality: QRisk3DataQuality | None = None


# ---------------------------------------------------------------------------
# QDiabetes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class QDiabetesDataQuality:
    smoking_status: SubstitutionReport
    ethnicity: SubstitutionReport
    bmi: SubstitutionReport
    town: SubstitutionReport


@dataclass(frozen=True)
class QDiabetesRawResult:
    result_status: CalcResultStatus
    reason: CalcReasonInvalid
    patient_score: float | None = None
    reference_score: float | None = None
    data_quality: QDiabetesDataQuality | None = None


# ---------------------------------------------------------------------------
# QFracture
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class QFractureDataQuality:
    smoking_status: SubstitutionReport
    ethnicity: SubstitutionReport
    bmi: SubstitutionReport


@dataclass(frozen=True)
class QFractureRawResult:
    result_status: CalcResultStatus
    reason: CalcReasonInvalid
    fracture4_score: float | None = None          # major osteoporotic fracture
    reference_fracture4_score: float | None = None
    nof_score: float | None = None                # hip (neck of femur)
    reference_nof_score: float | None = None
    data_quality: QFractureDataQuality | None = None


# ---------------------------------------------------------------------------
# X05 (oesophageal cancer)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class X05DataQuality:
    smoking_status: SubstitutionReport
    ethnicity: SubstitutionReport
    bmi: SubstitutionReport


@dataclass(frozen=True)
class X05RawResult:
    result_status: CalcResultStatus
    reason: CalcReasonInvalid
    cancer_score: float | None = None
    reference_cancer_score: float | None = None
    death_score: float | None = None
    reference_death_score: float | None = None
    all_cause_death_score: float | None = None
    reference_all_cause_death_score: float | None = None
    data_quality: X05DataQuality | None = None
