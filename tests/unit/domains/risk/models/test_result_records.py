"""Tests for result records and the prediction envelope."""

from __future__ import annotations

from datetime import datetime, timezone

from epredict.domains.risk.domain_logic.definitions import (
    Engine,
    InvalidityReason,
    ParameterQuality,
    ResultStatus,
)
from epredict.domains.risk.models.results import (
    CalculationMeta,
    DataQualityAnnotation,
    EngineResult,
    PredictionEnvelope,
    PredictionResult,
    ServiceMeta,
)


def _engine_result(engine: Engine, status: ResultStatus) -> EngineResult:
    return EngineResult(
        engine_name=engine,
        engine_version="1.0",
        calculation_meta=CalculationMeta(result_status=status),
    )


class TestSerialization:
    def test_prediction_result_uses_json_ld_id(self):
        body = PredictionResult(id="urn:x", score=4.2, typical_score=3.9).to_dict()
        assert body == {"@id": "urn:x", "score": 4.2, "typical_score": 3.9, "prediction_years": 10}

    def test_quality_annotation(self):
        annotation = DataQualityAnnotation("bmi", ParameterQuality.MISSING, "25.0")
        assert annotation.to_dict() == {
            "parameter": "bmi", "quality": "MISSING", "substitute_value": "25.0",
        }

    def test_calculation_meta_error_type(self):
        meta = CalculationMeta(
            ResultStatus.NO_CALCULATION_POSSIBLE_AS_ENGINE_LOCKED, error_type="RuntimeError",
        )
        body = meta.to_dict()
        assert body["result_status"] == "NO_CALCULATION_POSSIBLE_AS_ENGINE_LOCKED"
        assert body["reason"] == "VALID"
        assert body["error_type"] == "RuntimeError"

    def test_envelope(self, sample_record):
        stamp = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        envelope = PredictionEnvelope(
            meta=ServiceMeta("0.1.0", stamp),
            input=sample_record,
            engine_results=[_engine_result(Engine.QRISK3, ResultStatus.CALCULATED_USING_PATIENTS_OWN_DATA)],
        )
        body = envelope.to_dict()
        assert body["meta"] == {"service_version": "0.1.0", "request_timestamp_utc": stamp.isoformat()}
        assert body["input"]["age"] == 64
        assert body["engine_results"][0]["engine_name"] == "QRisk3"
        assert body["engine_results"][0]["engine_input"] is None


class TestEnvelopeLookup:
    def test_result_for(self, sample_record):
        qrisk = _engine_result(Engine.QRISK3, ResultStatus.CALCULATED_USING_PATIENTS_OWN_DATA)
        envelope = PredictionEnvelope(
            meta=ServiceMeta("0.1.0", datetime.now(timezone.utc)),
            input=sample_record,
            engine_results=[qrisk],
        )
        assert envelope.result_for(Engine.QRISK3) is qrisk
        assert envelope.result_for(Engine.X05) is None

    def test_calculated(self):
        assert _engine_result(
            Engine.QRISK3, ResultStatus.CALCULATED_USING_ESTIMATED_OR_CORRECTED_DATA
        ).calculated
        assert not _engine_result(
            Engine.QRISK3, ResultStatus.NO_CALCULATION_POSSIBLE_AS_PATIENT_FAILED_CRITERIA
        ).calculated

    def test_reason_defaults_valid(self):
        assert CalculationMeta(ResultStatus.CALCULATED_USING_PATIENTS_OWN_DATA).reason is InvalidityReason.VALID
