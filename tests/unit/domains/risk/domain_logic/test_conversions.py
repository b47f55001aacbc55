"""Tests for categorical -> engine code conversions."""

from __future__ import annotations

import pytest

from epredict.core.errors import ConfigurationError
from epredict.domains.risk.domain_logic.conversions import (
    ETHRISK_CODES,
    _require_complete,
    admit_prior_category_to_int,
    alcohol_category4_to_int,
    alcohol_category6_to_int,
    bool_to_int,
    diabetes_status_to_type1,
    diabetes_status_to_type2,
    ethnicity_to_ethrisk,
    gender_to_int,
    heartburn_indigestion_category_to_int,
    proton_pump_inhibitor_category_to_int,
    smoking_category_to_int,
    strategic_health_authority_to_int,
)
from epredict.domains.risk.domain_logic.definitions import (
    RANGES,
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


class TestSimpleConversions:
    def test_bool_to_int(self):
        assert bool_to_int(True) == 1
        assert bool_to_int(False) == 0

    def test_gender_to_int(self):
        assert gender_to_int(Gender.FEMALE) == 0
        assert gender_to_int(Gender.MALE) == 1

    @pytest.mark.parametrize(
        "status, type1, type2",
        [
            (DiabetesStatus.NONE, 0, 0),
            (DiabetesStatus.TYPE1, 1, 0),
            (DiabetesStatus.TYPE2, 0, 1),
        ],
    )
    def test_diabetes_flags_are_mutually_exclusive(self, status, type1, type2):
        assert diabetes_status_to_type1(status) == type1
        assert diabetes_status_to_type2(status) == type2


class TestEthrisk:
    @pytest.mark.parametrize(
        "ethnicity",
        [
            Ethnicity.NOT_RECORDED,
            Ethnicity.BRITISH,
            Ethnicity.IRISH,
            Ethnicity.OTHER_WHITE_BACKGROUND,
            Ethnicity.NOT_STATED,
        ],
    )
    def test_white_and_unrecorded_share_bucket_one(self, ethnicity):
        assert ethnicity_to_ethrisk(ethnicity) == 1

    @pytest.mark.parametrize(
        "ethnicity",
        [
            Ethnicity.WHITE_AND_BLACK_CARIBBEAN_MIXED,
            Ethnicity.WHITE_AND_BLACK_AFRICAN_MIXED,
            Ethnicity.WHITE_AND_ASIAN_MIXED,
            Ethnicity.OTHER_MIXED,
            Ethnicity.OTHER_BLACK,
            Ethnicity.OTHER_ETHNIC_GROUP,
        ],
    )
    def test_mixed_and_other_share_bucket_nine(self, ethnicity):
        assert ethnicity_to_ethrisk(ethnicity) == 9

    def test_distinct_groups(self):
        assert [
            ethnicity_to_ethrisk(e)
            for e in (
                Ethnicity.INDIAN,
                Ethnicity.PAKISTANI,
                Ethnicity.BANGLADESHI,
                Ethnicity.OTHER_ASIAN,
                Ethnicity.CARIBBEAN,
                Ethnicity.BLACK_AFRICAN,
                Ethnicity.CHINESE,
            )
        ] == [2, 3, 4, 5, 6, 7, 8]

    def test_every_code_in_range(self):
        assert set(ETHRISK_CODES.values()) == set(range(1, 10))


class TestFoldedUnknowns:
    def test_smoking_not_known_is_non_smoker(self):
        assert smoking_category_to_int(SmokingCategory.NOT_KNOWN) == 0
        assert smoking_category_to_int(SmokingCategory.NON_SMOKER) == 0
        assert smoking_category_to_int(SmokingCategory.HEAVY_SMOKER) == 4

    def test_alcohol_not_known_folds_to_one(self):
        assert alcohol_category4_to_int(AlcoholCategory4.NOT_KNOWN) == 1
        assert alcohol_category6_to_int(AlcoholCategory6.NOT_KNOWN) == 1
        assert alcohol_category6_to_int(AlcoholCategory6.OVER_NINE_UNITS_PER_DAY) == 5

    def test_unmapped_authorities_fold_to_one(self):
        for authority in (
            StrategicHealthAuthority.WALES,
            StrategicHealthAuthority.ISLE_OF_MAN,
            StrategicHealthAuthority.OTHER,
        ):
            assert strategic_health_authority_to_int(authority) == 1
        assert strategic_health_authority_to_int(StrategicHealthAuthority.YORKS_AND_HUMBER) == 10

    def test_admit_prior_and_ppi(self):
        assert admit_prior_category_to_int(AdmitPriorCategory.THREE_OR_MORE) == 3
        assert proton_pump_inhibitor_category_to_int(ProtonPumpInhibitorUseCategory.NOT_KNOWN) == 0
        assert proton_pump_inhibitor_category_to_int(
            ProtonPumpInhibitorUseCategory.OVER_TWELVE_PRESCRIPTIONS
        ) == 5

    def test_heartburn_indigestion(self):
        assert [
            heartburn_indigestion_category_to_int(HeartburnIndigestionCategory(name))
            for name in ("Neither", "Heartburn", "Indigestion")
        ] == [0, 1, 2]


class TestCompleteness:
    def test_incomplete_table_is_rejected(self):
        with pytest.raises(ConfigurationError, match="NotKnown|NOT_KNOWN"):
            _require_complete({SmokingCategory.NON_SMOKER: 0}, SmokingCategory)


class TestValidRanges:
    @pytest.mark.parametrize(
        "field_name, low, high",
        [
            ("townsend_score", -8.0, 12.0),
            ("cholesterol_ratio", 1.0, 12.0),
            ("bmi", 20.0, 40.0),
            ("systolic_blood_pressure_mean", 70.0, 210.0),
            ("hba1c", 15.0, 47.99),
            ("fasting_blood_glucose", 2.0, 6.99),
        ],
    )
    def test_bounds_are_inclusive(self, field_name, low, high):
        valid = RANGES[field_name]
        assert valid.contains(low)
        assert valid.contains(high)
        assert not valid.contains(high + 0.01)
        assert not valid.contains(low - 0.01)
