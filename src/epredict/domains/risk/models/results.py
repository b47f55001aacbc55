"""Engine-agnostic result records and the prediction envelope."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from epredict.domains.risk.domain_logic.definitions import (
    Engine,
    InvalidityReason,
    ParameterQuality,
    ResultStatus,
)
from epredict.domains.risk.models.input_record import CanonicalInputRecord


@dataclass(frozen=True)
class PredictionResult:
    """One score produced by an engine."""

    id: str                              # score URI: engine URI + fixed suffix
    score: float
    typical_score: float | None = None   # score for a typical person of same age/sex
    prediction_years: int = 10

    def to_dict(self) -> dict[str, Any]:
        return {
            "@id": self.id,
            "score": self.score,
            "typical_score": self.typical_score,
            "prediction_years": self.prediction_years,
        }


@dataclass(frozen=True)
class DataQualityAnnotation:
    """Whether a parameter was used as given, and what replaced it if not."""

    parameter: str
    quality: ParameterQuality
    substitute_value: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "parameter": self.parameter,
            "quality": self.quality.value,
            "substitute_value": self.substitute_value,
        }


@dataclass(frozen=True)
class CalculationMeta:
    result_status: ResultStatus
    reason: InvalidityReason = InvalidityReason.VALID
    error_type: str | None = None        # exception class name when the engine faulted

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "result_status": self.result_status.value,
            "reason": self.reason.value,
        }
        if self.error_type:
            out["error_type"] = self.error_type
        return out


@dataclass(frozen=True)
class EngineResult:
    """One engine's normalized answer to one request."""

    engine_name: Engine
    engine_version: str
    calculation_meta: CalculationMeta
    results: tuple[PredictionResult, ...] = ()
    quality: tuple[DataQualityAnnotation, ...] = ()
    engine_input: CanonicalInputRecord | None = None

    @property
    def calculated(self) -> bool:
        return self.calculation_meta.result_status in (
            ResultStatus.CALCULATED_USING_PATIENTS_OWN_DATA,
            ResultStatus.CALCULATED_USING_ESTIMATED_OR_CORRECTED_DATA,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "engine_name": self.engine_name.value,
            "engine_version": self.engine_version,
            "results": [r.to_dict() for r in self.results],
            "quality": [q.to_dict() for q in self.quality],
            "calculation_meta": self.calculation_meta.to_dict(),
            "engine_input": self.engine_input.to_dict() if self.engine_input else None,
        }


@dataclass(frozen=True)
class ServiceMeta:
    service_version: str
    request_timestamp_utc: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "service_version": self.service_version,
            "request_timestamp_utc": self.request_timestamp_utc.isoformat(),
        }


@dataclass(frozen=True)
class PredictionEnvelope:
    """Everything returned for one prediction request."""

    meta: ServiceMeta
    input: CanonicalInputRecord
    engine_results: list[EngineResult] = field(default_factory=list)

    def result_for(self, engine: Engine) -> EngineResult | None:
        for result in self.engine_results:
            if result.engine_name is engine:
                return result
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "engine_results": [r.to_dict() for r in self.engine_results],
            "meta": self.meta.to_dict(),
            "input": self.input.to_dict(),
        }
