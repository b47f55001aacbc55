"""Result normalization: raw engine results -> engine-agnostic ``EngineResult``.

Every engine family follows the same steps:

1. Resolve the engine descriptor (a missing engine is a configuration fault).
2. Map the engine's status / reason codes through explicit tables.
3. Emit one ``PredictionResult`` per score, id = engine URI + fixed suffix.
4. Emit one ``DataQualityAnnotation`` per parameter the engine may substitute.
5. Reconcile the engine input back into a canonical record for audit.

A result is never returned half-built: a field the engine contract
guarantees but the raw result lacks raises ``NormalizationError``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping

from epredict.core.errors import ConfigurationError
from epredict.core.registry.models import EngineDescriptor
from epredict.core.registry.registry import EngineRegistry
from epredict.domains.risk.connectors.raw_results import (
    CalcDataStatus,
    CalcReasonInvalid,
    CalcResultStatus,
    QDiabetesRawResult,
    QFractureRawResult,
    QRisk3RawResult,
    SubstitutionReport,
    X05RawResult,
)
from epredict.domains.risk.domain_logic.definitions import (
    DEFAULT_PREDICTION_YEARS,
    Engine,
    InvalidityReason,
    ParameterQuality,
    ResultStatus,
)
from epredict.domains.risk.domain_logic.projection import reconcile
from epredict.domains.risk.models.engine_inputs import EngineInput
from epredict.domains.risk.models.results import (
    CalculationMeta,
    DataQualityAnnotation,
    EngineResult,
    PredictionResult,
)

logger = logging.getLogger(__name__)


class NormalizationError(Exception):
    """Raised when a raw engine result breaks the engine's own contract."""


# ---------------------------------------------------------------------------
# Code tables
# ---------------------------------------------------------------------------

def _exhaustive(table: Mapping[Enum, Enum], source: type[Enum]) -> Mapping[Enum, Enum]:
    missing = [member.name for member in source if member not in table]
    if missing:
        raise ConfigurationError(f"No mapping for {source.__name__}: {', '.join(missing)}")
    return table


@dataclass(frozen=True)
class CodeTables:
    """One engine's native status, reason and data-quality codes -> canonical."""

    status: Mapping[CalcResultStatus, ResultStatus]
    reason: Mapping[CalcReasonInvalid, InvalidityReason]
    data: Mapping[CalcDataStatus, ParameterQuality]

    def __post_init__(self) -> None:
        _exhaustive(self.status, CalcResultStatus)
        _exhaustive(self.reason, CalcReasonInvalid)
        _exhaustive(self.data, CalcDataStatus)


STANDARD_STATUS: dict[CalcResultStatus, ResultStatus] = {
    CalcResultStatus.NO_CALCULATION_POSSIBLE_AS_PATIENT_FAILED_CRITERIA:
        ResultStatus.NO_CALCULATION_POSSIBLE_AS_PATIENT_FAILED_CRITERIA,
    CalcResultStatus.CALCULATED_USING_PATIENTS_OWN_DATA:
        ResultStatus.CALCULATED_USING_PATIENTS_OWN_DATA,
    CalcResultStatus.CALCULATED_USING_ESTIMATED_OR_CORRECTED_DATA:
        ResultStatus.CALCULATED_USING_ESTIMATED_OR_CORRECTED_DATA,
    CalcResultStatus.NO_CALCULATION_POSSIBLE_AS_ENGINE_LOCKED:
        ResultStatus.NO_CALCULATION_POSSIBLE_AS_ENGINE_LOCKED,
}

STANDARD_REASON: dict[CalcReasonInvalid, InvalidityReason] = {
    CalcReasonInvalid.VALID: InvalidityReason.VALID,
    CalcReasonInvalid.AGE_OUT_OF_RANGE: InvalidityReason.AGE_OUT_OF_RANGE,
    CalcReasonInvalid.ALREADY_HAD_A_CVD_EVENT: InvalidityReason.ALREADY_HAD_A_CVD_EVENT,
    CalcReasonInvalid.ETHNICITY_OUT_OF_RANGE: InvalidityReason.ETHNICITY_OUT_OF_RANGE,
    CalcReasonInvalid.VARIABLE_NON_BOOLEAN: InvalidityReason.VARIABLE_NON_BOOLEAN,
    CalcReasonInvalid.QRISK_ENGINE_LOCKED: InvalidityReason.QRISK_ENGINE_LOCKED,
    CalcReasonInvalid.SMOKING_STATUS_OUT_OF_RANGE: InvalidityReason.SMOKING_STATUS_OUT_OF_RANGE,
}

STANDARD_DATA: dict[CalcDataStatus, ParameterQuality] = {
    CalcDataStatus.OK: ParameterQuality.OK,
    CalcDataStatus.MISSING: ParameterQuality.MISSING,
    CalcDataStatus.OUT_OF_RANGE: ParameterQuality.OUT_OF_RANGE,
}

# All four engines are built on the same standard definitions today; each
# keeps its own entry so one can diverge without touching the others.
CODE_TABLES: dict[Engine, CodeTables] = {
    Engine.QRISK3: CodeTables(STANDARD_STATUS, STANDARD_REASON, STANDARD_DATA),
    Engine.QDIABETES: CodeTables(STANDARD_STATUS, STANDARD_REASON, STANDARD_DATA),
    Engine.QFRACTURE: CodeTables(STANDARD_STATUS, STANDARD_REASON, STANDARD_DATA),
    Engine.X05: CodeTables(STANDARD_STATUS, STANDARD_REASON, STANDARD_DATA),
}

# Score identifier suffixes, appended to the engine URI. Part of each
# engine's published contract.
HEART_AGE_SUFFIX = "HeartAge"
HIP_FRACTURE_SUFFIX = "Hip"
CANCER_DEATH_SUFFIX = "Death"
ANY_CAUSE_DEATH_SUFFIX = "DeathAnyCause"

QRISK3_PREDICTION_YEARS = 10
QDIABETES_PREDICTION_YEARS = 10


# ---------------------------------------------------------------------------
# Shared steps
# ---------------------------------------------------------------------------

def _lookup(tables: Mapping[Any, Any], code: Any, what: str, engine: Engine) -> Any:
    try:
        return tables[code]
    except (KeyError, TypeError):
        raise NormalizationError(f"{engine.value}: unrecognised {what} code {code!r}") from None


def _meta(engine: Engine, raw: Any) -> CalculationMeta:
    tables = CODE_TABLES[engine]
    return CalculationMeta(
        result_status=_lookup(tables.status, raw.result_status, "result status", engine),
        reason=_lookup(tables.reason, raw.reason, "reason", engine),
    )


def _require(value: float | None, field_name: str, engine: Engine) -> float:
    if value is None:
        raise NormalizationError(f"{engine.value}: calculated result is missing {field_name}")
    return float(value)


def _optional(value: float | None) -> float | None:
    return None if value is None else float(value)


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _annotations(
    engine: Engine,
    data_quality: Any,
    tracked: tuple[tuple[str, str], ...],
    required: bool,
) -> tuple[DataQualityAnnotation, ...]:
    """Build annotations for ``(canonical parameter, raw attribute)`` pairs."""
    if data_quality is None:
        if required:
            raise NormalizationError(f"{engine.value}: calculated result has no data quality report")
        return ()

    data_table = CODE_TABLES[engine].data
    annotations: list[DataQualityAnnotation] = []
    for parameter, attribute in tracked:
        report: SubstitutionReport | None = getattr(data_quality, attribute, None)
        if report is None:
            raise NormalizationError(f"{engine.value}: data quality report lacks {attribute!r}")
        annotations.append(DataQualityAnnotation(
            parameter=parameter,
            quality=_lookup(data_table, report.data, "data quality", engine),
            substitute_value=_stringify(report.substitute_value),
        ))
    return tuple(annotations)


def _horizon(engine_input: EngineInput) -> int:
    years = getattr(engine_input, "prediction_years", None)
    return DEFAULT_PREDICTION_YEARS if years is None else years


def _is_calculated(meta: CalculationMeta) -> bool:
    return meta.result_status in (
        ResultStatus.CALCULATED_USING_PATIENTS_OWN_DATA,
        ResultStatus.CALCULATED_USING_ESTIMATED_OR_CORRECTED_DATA,
    )


# ---------------------------------------------------------------------------
# Per-engine score extraction
# ---------------------------------------------------------------------------

# Quality parameters are reported under canonical input field names.
QRISK3_TRACKED = (
    ("smoking_status", "smoking_status"),
    ("systolic_blood_pressure_mean", "sbp"),
    ("systolic_blood_pressure_st_dev", "sbps5"),
    ("cholesterol_ratio", "ratio"),
    ("ethnicity", "ethnicity"),
    ("bmi", "bmi"),
    ("townsend_score", "townsend"),
)
QDIABETES_TRACKED = (
    ("smoking_status", "smoking_status"),
    ("ethnicity", "ethnicity"),
    ("bmi", "bmi"),
    ("townsend_score", "town"),
)
QFRACTURE_TRACKED = (
    ("smoking_status", "smoking_status"),
    ("ethnicity", "ethnicity"),
    ("bmi", "bmi"),
)
X05_TRACKED = QFRACTURE_TRACKED


def _qrisk3_scores(raw: QRisk3RawResult, uri: str, engine_input: EngineInput) -> list[PredictionResult]:
    engine = Engine.QRISK3
    results = [PredictionResult(
        id=uri,
        score=_require(raw.score, "score", engine),
        typical_score=_optional(raw.typical_score),
        prediction_years=QRISK3_PREDICTION_YEARS,
    )]
    if raw.heart_age is not None:
        results.append(PredictionResult(
            id=uri + HEART_AGE_SUFFIX,
            score=float(raw.heart_age),
            prediction_years=QRISK3_PREDICTION_YEARS,
        ))
    return results


def _qdiabetes_scores(raw: QDiabetesRawResult, uri: str, engine_input: EngineInput) -> list[PredictionResult]:
    return [PredictionResult(
        id=uri,
        score=_require(raw.patient_score, "patient_score", Engine.QDIABETES),
        typical_score=_optional(raw.reference_score),
        prediction_years=QDIABETES_PREDICTION_YEARS,
    )]


def _qfracture_scores(raw: QFractureRawResult, uri: str, engine_input: EngineInput) -> list[PredictionResult]:
    engine = Engine.QFRACTURE
    years = _horizon(engine_input)
    return [
        PredictionResult(
            id=uri,
            score=_require(raw.fracture4_score, "fracture4_score", engine),
            typical_score=_optional(raw.reference_fracture4_score),
            prediction_years=years,
        ),
        PredictionResult(
            id=uri + HIP_FRACTURE_SUFFIX,
            score=_require(raw.nof_score, "nof_score", engine),
            typical_score=_optional(raw.reference_nof_score),
            prediction_years=years,
        ),
    ]


def _x05_scores(raw: X05RawResult, uri: str, engine_input: EngineInput) -> list[PredictionResult]:
    engine = Engine.X05
    years = _horizon(engine_input)
    pairs = (
        ("", raw.cancer_score, raw.reference_cancer_score, "cancer_score"),
        (CANCER_DEATH_SUFFIX, raw.death_score, raw.reference_death_score, "death_score"),
        (ANY_CAUSE_DEATH_SUFFIX, raw.all_cause_death_score,
         raw.reference_all_cause_death_score, "all_cause_death_score"),
    )
    return [
        PredictionResult(
            id=uri + suffix,
            score=_require(score, name, engine),
            typical_score=_optional(typical),
            prediction_years=years,
        )
        for suffix, score, typical, name in pairs
    ]


@dataclass(frozen=True)
class _EngineNormalizer:
    raw_type: type
    scores: Callable[[Any, str, EngineInput], list[PredictionResult]]
    tracked: tuple[tuple[str, str], ...]


_NORMALIZERS: dict[Engine, _EngineNormalizer] = {
    Engine.QRISK3: _EngineNormalizer(QRisk3RawResult, _qrisk3_scores, QRISK3_TRACKED),
    Engine.QDIABETES: _EngineNormalizer(QDiabetesRawResult, _qdiabetes_scores, QDIABETES_TRACKED),
    Engine.QFRACTURE: _EngineNormalizer(QFractureRawResult, _qfracture_scores, QFRACTURE_TRACKED),
    Engine.X05: _EngineNormalizer(X05RawResult, _x05_scores, X05_TRACKED),
}


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def normalize(
    engine: Engine,
    raw_result: Any,
    engine_input: EngineInput,
    registry: EngineRegistry,
) -> EngineResult:
    """Convert one engine's raw result into an ``EngineResult``.

    Scores are only read when the engine reports a calculated status; a
    patient who failed the engine's criteria yields a normal result with
    no scores.

    Raises:
        EngineNotFoundError: If *engine* is not in the registry.
        NormalizationError: If the raw result is of the wrong type or lacks
            a field the engine guarantees.
    """
    descriptor: EngineDescriptor = registry.lookup(engine.value)

    normalizer = _NORMALIZERS.get(engine)
    if normalizer is None:
        raise ConfigurationError(f"No normalizer declared for engine {engine.value!r}")
    if not isinstance(raw_result, normalizer.raw_type):
        raise NormalizationError(
            f"{engine.value}: expected {normalizer.raw_type.__name__}, "
            f"got {type(raw_result).__name__}"
        )

    meta = _meta(engine, raw_result)
    calculated = _is_calculated(meta)
    results = normalizer.scores(raw_result, descriptor.uri, engine_input) if calculated else []
    quality = _annotations(engine, raw_result.data_quality, normalizer.tracked, required=calculated)

    logger.debug(
        "Normalized %s result: %s, %d scores, %d quality annotations",
        engine.value, meta.result_status.value, len(results), len(quality),
    )
    return EngineResult(
        engine_name=engine,
        engine_version=descriptor.version,
        calculation_meta=meta,
        results=tuple(results),
        quality=quality,
        engine_input=reconcile(engine_input, engine),
    )
