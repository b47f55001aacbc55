"""Per-engine input shapes.

Each class holds exactly the fields one engine consumes, named as on
``CanonicalInputRecord`` and with the same defaults. A numeric left at
``None`` reaches the engine as missing and is substituted there.
"""

from __future__ import annotations

from dataclasses import dataclass

from epredict.domains.risk.domain_logic.definitions import (
    AlcoholCategory6,
    DiabetesStatus,
    Ethnicity,
    Gender,
    ProtonPumpInhibitorUseCategory,
    SmokingCategory,
)


@dataclass(frozen=True)
class QRisk3Input:
    """Ten-year cardiovascular risk (QRisk3)."""

    sex: Gender
    age: int
    cvd: bool = False
    atrial_fibrillation: bool = False
    atypical_antipsychotic_medication: bool = False
    systemic_corticosteroids: bool = False
    impotence: bool = False
    migraines: bool = False
    rheumatoid_arthritis: bool = False
    chronic_renal_disease: bool = False
    severe_mental_illness: bool = False
    systemic_lupus_erythematosus: bool = False
    blood_pressure_treatment: bool = False
    diabetes_status: DiabetesStatus = DiabetesStatus.NONE
    bmi: float | None = None
    ethnicity: Ethnicity = Ethnicity.NOT_RECORDED
    family_history_chd: bool = False
    cholesterol_ratio: float | None = None
    systolic_blood_pressure_mean: float | None = None
    systolic_blood_pressure_st_dev: float | None = None
    smoking_status: SmokingCategory = SmokingCategory.NON_SMOKER
    townsend_score: float | None = None


@dataclass(frozen=True)
class QDiabetesInput:
    """Ten-year type 2 diabetes risk (QDiabetes)."""

    sex: Gender
    age: int
    cvd: bool = False
    atypical_antipsychotic_medication: bool = False
    systemic_corticosteroids: bool = False
    blood_pressure_treatment: bool = False
    gestational_diabetes: bool = False
    learning_disabilities: bool = False
    manic_depression_schizophrenia: bool = False
    polycystic_ovaries: bool = False
    statins: bool = False
    family_history_diabetes: bool = False
    fasting_blood_glucose: float | None = None
    hba1c: float | None = None
    diabetes_status: DiabetesStatus = DiabetesStatus.NONE
    bmi: float | None = None
    ethnicity: Ethnicity = Ethnicity.NOT_RECORDED
    smoking_status: SmokingCategory = SmokingCategory.NON_SMOKER
    townsend_score: float | None = None


@dataclass(frozen=True)
class QFractureInput:
    """Osteoporotic and hip fracture risk (QFracture)."""

    sex: Gender
    age: int
    prediction_years: int | None = None
    cvd: bool = False
    systemic_corticosteroids: bool = False
    diabetes_status: DiabetesStatus = DiabetesStatus.NONE
    bmi: float | None = None
    ethnicity: Ethnicity = Ethnicity.NOT_RECORDED
    smoking_status: SmokingCategory = SmokingCategory.NON_SMOKER
    alcohol_status: AlcoholCategory6 = AlcoholCategory6.NONE
    taking_antidepressants: bool = False
    any_cancer: bool = False
    asthma_or_copd: bool = False
    living_in_care_home: bool = False
    dementia: bool = False
    endocrine_problems: bool = False
    epilepsy_or_anticonvulsants: bool = False
    history_of_falls: bool = False
    wrist_spine_hip_shoulder_fracture: bool = False
    taking_oestrogen_hrt: bool = False
    chronic_liver_disease: bool = False
    chronic_renal_disease: bool = False
    malabsorption: bool = False
    parkinsons_disease: bool = False
    rheumatoid_arthritis_or_sle: bool = False
    family_history_osteoporosis: bool = False


@dataclass(frozen=True)
class X05Input:
    """Oesophageal cancer risk (X05)."""

    sex: Gender
    age: int
    prediction_years: int | None = None
    diabetes_status: DiabetesStatus = DiabetesStatus.NONE
    bmi: float | None = None
    ethnicity: Ethnicity = Ethnicity.NOT_RECORDED
    smoking_status: SmokingCategory = SmokingCategory.NON_SMOKER
    alcohol_status: AlcoholCategory6 = AlcoholCategory6.NONE
    barretts_oesophagus: bool = False
    blood_cancer: bool = False
    breast_cancer: bool = False
    hiatus_hernia: bool = False
    h_pylori_infection: bool = False
    lung_cancer: bool = False
    anaemia: bool = False
    proton_pump_inhibitor_status: ProtonPumpInhibitorUseCategory = ProtonPumpInhibitorUseCategory.NONE


EngineInput = QRisk3Input | QDiabetesInput | QFractureInput | X05Input
