"""Mock calculation engines. Always available.

Stand-ins for the licensed engines, used when none are installed and in
tests. They reproduce the engines' *contract* (eligibility checks, missing
and out-of-range substitution, status codes, result shapes) but return
fixed placeholder scores. Nothing here is a risk formula.
"""

from __future__ import annotations

from typing import Any

from epredict.domains.risk.connectors.raw_results import (
    CalcDataStatus,
    CalcReasonInvalid,
    CalcResultStatus,
    QDiabetesDataQuality,
    QDiabetesRawResult,
    QFractureDataQuality,
    QFractureRawResult,
    QRisk3DataQuality,
    QRisk3RawResult,
    SubstitutionReport,
    X05DataQuality,
    X05RawResult,
)
from epredict.domains.risk.domain_logic.definitions import (
    RANGES,
    DiabetesStatus,
    Engine,
    Ethnicity,
    SmokingCategory,
    ValidRange,
)
from epredict.domains.risk.models.engine_inputs import (
    QDiabetesInput,
    QFractureInput,
    QRisk3Input,
    X05Input,
)

MOCK_ENGINE_VERSION = "mock-1.0"

# Values the engines put in place of a missing parameter. A missing
# deprivation score or blood pressure variability is zeroed without marking
# the result as estimated.
DEFAULT_BMI = 25.0
DEFAULT_SBP = 125.0
DEFAULT_SBP_SD = 0.0
DEFAULT_RATIO = 4.0
DEFAULT_TOWNSEND = 0.0
DEFAULT_ETHNICITY = Ethnicity.BRITISH
DEFAULT_SMOKING = SmokingCategory.NON_SMOKER

# Eligible age band per engine (inclusive).
AGE_LIMITS: dict[Engine, tuple[int, int]] = {
    Engine.QRISK3: (25, 84),
    Engine.QDIABETES: (25, 84),
    Engine.QFRACTURE: (30, 99),
    Engine.X05: (25, 84),
}

# Placeholder (score, typical score) pairs returned for every eligible patient.
MOCK_SCORES: dict[str, tuple[float, float]] = {
    "qrisk3": (4.2, 3.9),
    "qdiabetes": (2.7, 2.1),
    "qfracture_major": (3.4, 3.0),
    "qfracture_hip": (0.6, 0.5),
    "x05_cancer": (0.2, 0.2),
    "x05_death": (0.1, 0.1),
    "x05_all_cause_death": (6.5, 6.1),
}


# ---------------------------------------------------------------------------
# Substitution helpers
# ---------------------------------------------------------------------------

class _Substitutions:
    """Collects substitution reports and remembers whether any value was replaced."""

    def __init__(self) -> None:
        self.substituted = False

    def numeric(
        self,
        value: float | None,
        default: float,
        valid: ValidRange | None = None,
        *,
        estimated_if_missing: bool = True,
    ) -> SubstitutionReport:
        if value is None:
            if estimated_if_missing:
                self.substituted = True
            return SubstitutionReport(CalcDataStatus.MISSING, default)
        if valid is not None and not valid.contains(value):
            self.substituted = True
            return SubstitutionReport(CalcDataStatus.OUT_OF_RANGE, min(max(value, valid.low), valid.high))
        return SubstitutionReport(CalcDataStatus.OK)

    def smoking(self, status: SmokingCategory) -> SubstitutionReport:
        if status is SmokingCategory.NOT_KNOWN:
            self.substituted = True
            return SubstitutionReport(CalcDataStatus.MISSING, DEFAULT_SMOKING)
        return SubstitutionReport(CalcDataStatus.OK)

    def ethnicity(self, ethnicity: Ethnicity) -> SubstitutionReport:
        if ethnicity in (Ethnicity.NOT_RECORDED, Ethnicity.NOT_STATED):
            self.substituted = True
            return SubstitutionReport(CalcDataStatus.MISSING, DEFAULT_ETHNICITY)
        return SubstitutionReport(CalcDataStatus.OK)

    @property
    def status(self) -> CalcResultStatus:
        if self.substituted:
            return CalcResultStatus.CALCULATED_USING_ESTIMATED_OR_CORRECTED_DATA
        return CalcResultStatus.CALCULATED_USING_PATIENTS_OWN_DATA


def _age_eligible(engine: Engine, age: int) -> bool:
    low, high = AGE_LIMITS[engine]
    return low <= age <= high


class _MockEngine:
    engine: Engine
    input_type: type

    def __init__(self, version: str = MOCK_ENGINE_VERSION) -> None:
        self._version = version

    @property
    def name(self) -> str:
        return self.engine.value

    def version(self) -> str:
        return self._version

    def _check_input(self, engine_input: Any) -> None:
        if not isinstance(engine_input, self.input_type):
            raise TypeError(
                f"{self.name} expects {self.input_type.__name__}, "
                f"got {type(engine_input).__name__}"
            )


# ---------------------------------------------------------------------------
# Engines
# ---------------------------------------------------------------------------

class MockQRisk3Engine(_MockEngine):
    engine = Engine.QRISK3
    input_type = QRisk3Input

    def compute(self, engine_input: QRisk3Input) -> QRisk3RawResult:
        self._check_input(engine_input)
        subs = _Substitutions()
        quality = QRisk3DataQuality(
            smoking_status=subs.smoking(engine_input.smoking_status),
            sbp=subs.numeric(
                engine_input.systolic_blood_pressure_mean, DEFAULT_SBP, RANGES["systolic_blood_pressure_mean"]
            ),
            sbps5=subs.numeric(
                engine_input.systolic_blood_pressure_st_dev, DEFAULT_SBP_SD, estimated_if_missing=False
            ),
            ratio=subs.numeric(engine_input.cholesterol_ratio, DEFAULT_RATIO, RANGES["cholesterol_ratio"]),
            ethnicity=subs.ethnicity(engine_input.ethnicity),
            bmi=subs.numeric(engine_input.bmi, DEFAULT_BMI, RANGES["bmi"]),
            townsend=subs.numeric(
                engine_input.townsend_score, DEFAULT_TOWNSEND, RANGES["townsend_score"], estimated_if_missing=False
            ),
        )

        if not _age_eligible(self.engine, engine_input.age):
            return QRisk3RawResult(
                result_status=CalcResultStatus.NO_CALCULATION_POSSIBLE_AS_PATIENT_FAILED_CRITERIA,
                reason=CalcReasonInvalid.AGE_OUT_OF_RANGE,
                data_quality=quality,
            )
        if engine_input.cvd:
            return QRisk3RawResult(
                result_status=CalcResultStatus.NO_CALCULATION_POSSIBLE_AS_PATIENT_FAILED_CRITERIA,
                reason=CalcReasonInvalid.ALREADY_HAD_A_CVD_EVENT,
                data_quality=quality,
            )

        score, typical = MOCK_SCORES["qrisk3"]
        return QRisk3RawResult(
            result_status=subs.status,
            reason=CalcReasonInvalid.VALID,
            score=score,
            typical_score=typical,
            heart_age=float(engine_input.age),
            data_quality=quality,
        )


class MockQDiabetesEngine(_MockEngine):
    engine = Engine.QDIABETES
    input_type = QDiabetesInput

    def compute(self, engine_input: QDiabetesInput) -> QDiabetesRawResult:
        self._check_input(engine_input)
        subs = _Substitutions()
        quality = QDiabetesDataQuality(
            smoking_status=subs.smoking(engine_input.smoking_status),
            ethnicity=subs.ethnicity(engine_input.ethnicity),
            bmi=subs.numeric(engine_input.bmi, DEFAULT_BMI, RANGES["bmi"]),
            town=subs.numeric(
                engine_input.townsend_score, DEFAULT_TOWNSEND, RANGES["townsend_score"], estimated_if_missing=False
            ),
        )

        if not _age_eligible(self.engine, engine_input.age):
            return QDiabetesRawResult(
                result_status=CalcResultStatus.NO_CALCULATION_POSSIBLE_AS_PATIENT_FAILED_CRITERIA,
                reason=CalcReasonInvalid.AGE_OUT_OF_RANGE,
                data_quality=quality,
            )
        # Already diabetic: the outcome has happened.
        if engine_input.diabetes_status is not DiabetesStatus.NONE:
            return QDiabetesRawResult(
                result_status=CalcResultStatus.NO_CALCULATION_POSSIBLE_AS_PATIENT_FAILED_CRITERIA,
                reason=CalcReasonInvalid.VALID,
                data_quality=quality,
            )

        score, typical = MOCK_SCORES["qdiabetes"]
        return QDiabetesRawResult(
            result_status=subs.status,
            reason=CalcReasonInvalid.VALID,
            patient_score=score,
            reference_score=typical,
            data_quality=quality,
        )


class MockQFractureEngine(_MockEngine):
    engine = Engine.QFRACTURE
    input_type = QFractureInput

    def compute(self, engine_input: QFractureInput) -> QFractureRawResult:
        self._check_input(engine_input)
        subs = _Substitutions()
        quality = QFractureDataQuality(
            smoking_status=subs.smoking(engine_input.smoking_status),
            ethnicity=subs.ethnicity(engine_input.ethnicity),
            bmi=subs.numeric(engine_input.bmi, DEFAULT_BMI, RANGES["bmi"]),
        )

        if not _age_eligible(self.engine, engine_input.age):
            return QFractureRawResult(
                result_status=CalcResultStatus.NO_CALCULATION_POSSIBLE_AS_PATIENT_FAILED_CRITERIA,
                reason=CalcReasonInvalid.AGE_OUT_OF_RANGE,
                data_quality=quality,
            )

        major, major_typical = MOCK_SCORES["qfracture_major"]
        hip, hip_typical = MOCK_SCORES["qfracture_hip"]
        return QFractureRawResult(
            result_status=subs.status,
            reason=CalcReasonInvalid.VALID,
            fracture4_score=major,
            reference_fracture4_score=major_typical,
            nof_score=hip,
            reference_nof_score=hip_typical,
            data_quality=quality,
        )


class MockX05Engine(_MockEngine):
    engine = Engine.X05
    input_type = X05Input

    def compute(self, engine_input: X05Input) -> X05RawResult:
        self._check_input(engine_input)
        subs = _Substitutions()
        quality = X05DataQuality(
            smoking_status=subs.smoking(engine_input.smoking_status),
            ethnicity=subs.ethnicity(engine_input.ethnicity),
            bmi=subs.numeric(engine_input.bmi, DEFAULT_BMI, RANGES["bmi"]),
        )

        if not _age_eligible(self.engine, engine_input.age):
            return X05RawResult(
                result_status=CalcResultStatus.NO_CALCULATION_POSSIBLE_AS_PATIENT_FAILED_CRITERIA,
                reason=CalcReasonInvalid.AGE_OUT_OF_RANGE,
                data_quality=quality,
            )

        cancer, cancer_typical = MOCK_SCORES["x05_cancer"]
        death, death_typical = MOCK_SCORES["x05_death"]
        any_cause, any_cause_typical = MOCK_SCORES["x05_all_cause_death"]
        return X05RawResult(
            result_status=subs.status,
            reason=CalcReasonInvalid.VALID,
            cancer_score=cancer,
            reference_cancer_score=cancer_typical,
            death_score=death,
            reference_death_score=death_typical,
            all_cause_death_score=any_cause,
            reference_all_cause_death_score=any_cause_typical,
            data_quality=quality,
        )


def get_mock_engines(version: str = MOCK_ENGINE_VERSION) -> list[_MockEngine]:
    """One mock engine per supported engine family."""
    return [
        MockQRisk3Engine(version),
        MockQDiabetesEngine(version),
        MockQFractureEngine(version),
        MockX05Engine(version),
    ]
