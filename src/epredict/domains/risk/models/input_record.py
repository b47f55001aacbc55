"""The engine-agnostic prediction request record."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Mapping

from epredict.domains.risk.domain_logic.definitions import (
    AlcoholCategory6,
    DiabetesStatus,
    Engine,
    Ethnicity,
    Gender,
    ProtonPumpInhibitorUseCategory,
    SmokingCategory,
)


class InputValidationError(ValueError):
    """Raised when a request payload cannot be turned into an input record."""


@dataclass(frozen=True)
class CanonicalInputRecord:
    """One scoring request, in the shape shared by every engine.

    Optional numerics use ``None`` for "not supplied", which the engines
    report as MISSING and substitute. ``requested_engines`` is the only
    part that grows after construction: reconciliation appends the engine
    that consumed a record.
    """

    sex: Gender
    age: int
    requested_engines: list[Engine] = field(default_factory=list)

    # Cardiovascular history and treatment
    cvd: bool = False
    atrial_fibrillation: bool = False
    atypical_antipsychotic_medication: bool = False
    systemic_corticosteroids: bool = False
    blood_pressure_treatment: bool = False
    impotence: bool = False
    migraines: bool = False
    rheumatoid_arthritis: bool = False
    chronic_renal_disease: bool = False
    severe_mental_illness: bool = False
    systemic_lupus_erythematosus: bool = False
    family_history_chd: bool = False

    # Diabetes risk factors
    gestational_diabetes: bool = False
    learning_disabilities: bool = False
    manic_depression_schizophrenia: bool = False
    polycystic_ovaries: bool = False
    statins: bool = False
    family_history_diabetes: bool = False

    # Fracture risk factors
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
    malabsorption: bool = False
    parkinsons_disease: bool = False
    rheumatoid_arthritis_or_sle: bool = False
    family_history_osteoporosis: bool = False

    # Oesophageal cancer risk factors
    barretts_oesophagus: bool = False
    blood_cancer: bool = False
    breast_cancer: bool = False
    hiatus_hernia: bool = False
    h_pylori_infection: bool = False
    lung_cancer: bool = False
    anaemia: bool = False

    # Categorical
    diabetes_status: DiabetesStatus = DiabetesStatus.NONE
    ethnicity: Ethnicity = Ethnicity.NOT_RECORDED
    smoking_status: SmokingCategory = SmokingCategory.NON_SMOKER
    alcohol_status: AlcoholCategory6 = AlcoholCategory6.NONE
    proton_pump_inhibitor_status: ProtonPumpInhibitorUseCategory = ProtonPumpInhibitorUseCategory.NONE

    # Measurements
    bmi: float | None = None
    cholesterol_ratio: float | None = None
    systolic_blood_pressure_mean: float | None = None
    systolic_blood_pressure_st_dev: float | None = None
    townsend_score: float | None = None
    fasting_blood_glucose: float | None = None
    hba1c: float | None = None

    prediction_years: int | None = None

    # -----------------------------------------------------------------
    # Serialization
    # -----------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CanonicalInputRecord:
        """Build a record from a structured request body.

        Categoricals are given by their textual member value (``"Type2"``,
        ``"NonSmoker"``). Unknown keys and unknown categorical values are
        rejected, never defaulted.

        Raises:
            InputValidationError: If any field is missing, unknown, or of
                the wrong type.
        """
        unknown = sorted(set(data) - set(INPUT_FIELD_NAMES))
        if unknown:
            raise InputValidationError(f"Unknown input fields: {', '.join(unknown)}")
        for required in ("sex", "age"):
            if required not in data:
                raise InputValidationError(f"Missing required input field: {required}")

        kwargs: dict[str, Any] = {}
        for name, value in data.items():
            if name == "requested_engines":
                if value is None:
                    value = []
                if not isinstance(value, list):
                    raise InputValidationError("requested_engines: expected a list of engine names")
                kwargs[name] = [parse_enum(Engine, engine, name) for engine in value]
            else:
                kwargs[name] = _coerce(name, value)
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Enum):
                value = value.value
            elif f.name == "requested_engines":
                value = [engine.value for engine in value]
            out[f.name] = value
        return out


# ---------------------------------------------------------------------------
# Field typing
# ---------------------------------------------------------------------------

INPUT_FIELD_NAMES: tuple[str, ...] = tuple(f.name for f in fields(CanonicalInputRecord))

ENUM_FIELDS: dict[str, type[Enum]] = {
    "sex": Gender,
    "diabetes_status": DiabetesStatus,
    "ethnicity": Ethnicity,
    "smoking_status": SmokingCategory,
    "alcohol_status": AlcoholCategory6,
    "proton_pump_inhibitor_status": ProtonPumpInhibitorUseCategory,
}

FLOAT_FIELDS: frozenset[str] = frozenset({
    "bmi",
    "cholesterol_ratio",
    "systolic_blood_pressure_mean",
    "systolic_blood_pressure_st_dev",
    "townsend_score",
    "fasting_blood_glucose",
    "hba1c",
})

INT_FIELDS: frozenset[str] = frozenset({"age", "prediction_years"})

BOOL_FIELDS: frozenset[str] = frozenset(
    set(INPUT_FIELD_NAMES) - set(ENUM_FIELDS) - FLOAT_FIELDS - INT_FIELDS - {"requested_engines"}
)


def parse_enum(enum_type: type[Enum], value: Any, field_name: str) -> Any:
    """Parse *value* into *enum_type*, failing loudly on anything unknown."""
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_type)
        raise InputValidationError(
            f"{field_name}: {value!r} is not one of {allowed}"
        ) from None


def _coerce(name: str, value: Any) -> Any:
    if name in ENUM_FIELDS:
        return parse_enum(ENUM_FIELDS[name], value, name)
    if name in BOOL_FIELDS:
        if not isinstance(value, bool):
            raise InputValidationError(f"{name}: expected a boolean, got {value!r}")
        return value
    if name in INT_FIELDS:
        if value is None and name != "age":
            return None
        if isinstance(value, bool) or not isinstance(value, int):
            raise InputValidationError(f"{name}: expected an integer, got {value!r}")
        if name == "prediction_years" and value < 1:
            raise InputValidationError(f"{name}: must be at least 1, got {value}")
        return value
    # FLOAT_FIELDS
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InputValidationError(f"{name}: expected a number, got {value!r}")
    return float(value)
