"""Tests for the mock calculation engines."""

from __future__ import annotations

import pytest

from epredict.domains.risk.connectors import CalculationEngine
from epredict.domains.risk.connectors.mock_engines import (
    DEFAULT_BMI,
    DEFAULT_ETHNICITY,
    MOCK_ENGINE_VERSION,
    MockQDiabetesEngine,
    MockQFractureEngine,
    MockQRisk3Engine,
    MockX05Engine,
    get_mock_engines,
)
from epredict.domains.risk.connectors.raw_results import (
    CalcDataStatus,
    CalcReasonInvalid,
    CalcResultStatus,
)
from epredict.domains.risk.domain_logic.definitions import (
    DiabetesStatus,
    Engine,
    Ethnicity,
    SmokingCategory,
)
from epredict.domains.risk.domain_logic.projection import project


class TestMockEngineFamily:
    def test_one_engine_per_family(self):
        engines = get_mock_engines()
        assert [e.name for e in engines] == [e.value for e in Engine]
        assert all(e.version() == MOCK_ENGINE_VERSION for e in engines)

    def test_custom_version(self):
        assert get_mock_engines("9.9")[0].version() == "9.9"

    def test_satisfy_engine_protocol(self):
        assert all(isinstance(e, CalculationEngine) for e in get_mock_engines())

    def test_rejects_other_engines_input(self, sample_record):
        with pytest.raises(TypeError, match="QRisk3Input"):
            MockQRisk3Engine().compute(project(sample_record, Engine.X05))


class TestMockQRisk3:
    def test_own_data_when_only_optional_values_missing(self, sample_record):
        raw = MockQRisk3Engine().compute(project(sample_record, Engine.QRISK3))
        assert raw.result_status is CalcResultStatus.CALCULATED_USING_PATIENTS_OWN_DATA
        assert raw.reason is CalcReasonInvalid.VALID
        assert raw.score is not None
        assert raw.heart_age == 64.0
        assert raw.data_quality.townsend.data is CalcDataStatus.MISSING
        assert raw.data_quality.sbp.data is CalcDataStatus.OK

    def test_missing_bmi_is_estimated(self, record_factory):
        raw = MockQRisk3Engine().compute(project(record_factory(bmi=None), Engine.QRISK3))
        assert raw.result_status is CalcResultStatus.CALCULATED_USING_ESTIMATED_OR_CORRECTED_DATA
        assert raw.data_quality.bmi.data is CalcDataStatus.MISSING
        assert raw.data_quality.bmi.substitute_value == DEFAULT_BMI

    def test_out_of_range_value_is_clamped(self, record_factory):
        raw = MockQRisk3Engine().compute(
            project(record_factory(systolic_blood_pressure_mean=260.0), Engine.QRISK3)
        )
        assert raw.result_status is CalcResultStatus.CALCULATED_USING_ESTIMATED_OR_CORRECTED_DATA
        assert raw.data_quality.sbp.data is CalcDataStatus.OUT_OF_RANGE
        assert raw.data_quality.sbp.substitute_value == 210.0

    def test_unknown_smoking_and_ethnicity(self, record_factory):
        record = record_factory(smoking_status=SmokingCategory.NOT_KNOWN, ethnicity=Ethnicity.NOT_STATED)
        raw = MockQRisk3Engine().compute(project(record, Engine.QRISK3))
        assert raw.data_quality.smoking_status.data is CalcDataStatus.MISSING
        assert raw.data_quality.ethnicity.substitute_value is DEFAULT_ETHNICITY

    @pytest.mark.parametrize("age", [24, 85])
    def test_age_out_of_range(self, age, record_factory):
        raw = MockQRisk3Engine().compute(project(record_factory(age=age), Engine.QRISK3))
        assert raw.result_status is CalcResultStatus.NO_CALCULATION_POSSIBLE_AS_PATIENT_FAILED_CRITERIA
        assert raw.reason is CalcReasonInvalid.AGE_OUT_OF_RANGE
        assert raw.score is None

    def test_prior_cvd_event(self, record_factory):
        raw = MockQRisk3Engine().compute(project(record_factory(cvd=True), Engine.QRISK3))
        assert raw.result_status is CalcResultStatus.NO_CALCULATION_POSSIBLE_AS_PATIENT_FAILED_CRITERIA
        assert raw.reason is CalcReasonInvalid.ALREADY_HAD_A_CVD_EVENT


class TestOtherMockEngines:
    def test_qdiabetes_already_diabetic(self, record_factory):
        record = record_factory(diabetes_status=DiabetesStatus.TYPE2)
        raw = MockQDiabetesEngine().compute(project(record, Engine.QDIABETES))
        assert raw.result_status is CalcResultStatus.NO_CALCULATION_POSSIBLE_AS_PATIENT_FAILED_CRITERIA
        assert raw.patient_score is None

    def test_qdiabetes_scores(self, sample_record):
        raw = MockQDiabetesEngine().compute(project(sample_record, Engine.QDIABETES))
        assert raw.patient_score is not None
        assert raw.data_quality.town.data is CalcDataStatus.MISSING

    def test_qfracture_accepts_older_patients(self, record_factory):
        raw = MockQFractureEngine().compute(project(record_factory(age=95), Engine.QFRACTURE))
        assert raw.fracture4_score is not None
        assert raw.nof_score is not None

    def test_x05_scores(self, sample_record):
        raw = MockX05Engine().compute(project(sample_record, Engine.X05))
        assert None not in (raw.cancer_score, raw.death_score, raw.all_cause_death_score)
