"""Projection between the canonical input record and per-engine input shapes.

Every engine has an explicit field map: pairs of (canonical field, engine
field). The maps are checked against both dataclasses when this module is
imported, so a renamed or misspelt field fails at start-up instead of
being silently dropped at request time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any

from epredict.core.errors import ConfigurationError
from epredict.domains.risk.domain_logic.definitions import Engine
from epredict.domains.risk.models.engine_inputs import (
    EngineInput,
    QDiabetesInput,
    QFractureInput,
    QRisk3Input,
    X05Input,
)
from epredict.domains.risk.models.input_record import CanonicalInputRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldMap:
    """Which canonical fields feed which fields of one engine's input."""

    engine: Engine
    input_type: type
    pairs: tuple[tuple[str, str], ...]   # (canonical field, engine field)

    def validate(self) -> None:
        """Check every pair against the declared dataclass fields.

        Raises:
            ConfigurationError: On an unknown field on either side, a field
                mapped twice, or an engine field left unmapped.
        """
        canonical_names = {f.name for f in fields(CanonicalInputRecord)}
        engine_names = {f.name for f in fields(self.input_type)}
        label = self.input_type.__name__

        seen: set[str] = set()
        for canonical_field, engine_field in self.pairs:
            if canonical_field not in canonical_names:
                raise ConfigurationError(f"{label}: unknown canonical field {canonical_field!r}")
            if engine_field not in engine_names:
                raise ConfigurationError(f"{label}: unknown engine field {engine_field!r}")
            if engine_field in seen:
                raise ConfigurationError(f"{label}: engine field {engine_field!r} mapped twice")
            seen.add(engine_field)

        unmapped = engine_names - seen
        if unmapped:
            raise ConfigurationError(f"{label}: unmapped engine fields {sorted(unmapped)}")


def _same_names(*names: str) -> tuple[tuple[str, str], ...]:
    return tuple((name, name) for name in names)


FIELD_MAPS: dict[Engine, FieldMap] = {
    Engine.QRISK3: FieldMap(
        engine=Engine.QRISK3,
        input_type=QRisk3Input,
        pairs=_same_names(
            "sex",
            "age",
            "cvd",
            "atrial_fibrillation",
            "atypical_antipsychotic_medication",
            "systemic_corticosteroids",
            "impotence",
            "migraines",
            "rheumatoid_arthritis",
            "chronic_renal_disease",
            "severe_mental_illness",
            "systemic_lupus_erythematosus",
            "blood_pressure_treatment",
            "diabetes_status",
            "bmi",
            "ethnicity",
            "family_history_chd",
            "cholesterol_ratio",
            "systolic_blood_pressure_mean",
            "systolic_blood_pressure_st_dev",
            "smoking_status",
            "townsend_score",
        ),
    ),
    Engine.QDIABETES: FieldMap(
        engine=Engine.QDIABETES,
        input_type=QDiabetesInput,
        pairs=_same_names(
            "sex",
            "age",
            "cvd",
            "atypical_antipsychotic_medication",
            "systemic_corticosteroids",
            "blood_pressure_treatment",
            "gestational_diabetes",
            "learning_disabilities",
            "manic_depression_schizophrenia",
            "polycystic_ovaries",
            "statins",
            "family_history_diabetes",
            "fasting_blood_glucose",
            "hba1c",
            "diabetes_status",
            "bmi",
            "ethnicity",
            "smoking_status",
            "townsend_score",
        ),
    ),
    Engine.QFRACTURE: FieldMap(
        engine=Engine.QFRACTURE,
        input_type=QFractureInput,
        pairs=_same_names(
            "sex",
            "age",
            "prediction_years",
            "cvd",
            "systemic_corticosteroids",
            "diabetes_status",
            "bmi",
            "ethnicity",
            "smoking_status",
            "alcohol_status",
            "taking_antidepressants",
            "any_cancer",
            "asthma_or_copd",
            "living_in_care_home",
            "dementia",
            "endocrine_problems",
            "epilepsy_or_anticonvulsants",
            "history_of_falls",
            "wrist_spine_hip_shoulder_fracture",
            "taking_oestrogen_hrt",
            "chronic_liver_disease",
            "chronic_renal_disease",
            "malabsorption",
            "parkinsons_disease",
            "rheumatoid_arthritis_or_sle",
            "family_history_osteoporosis",
        ),
    ),
    Engine.X05: FieldMap(
        engine=Engine.X05,
        input_type=X05Input,
        pairs=_same_names(
            "sex",
            "age",
            "prediction_years",
            "diabetes_status",
            "bmi",
            "ethnicity",
            "smoking_status",
            "alcohol_status",
            "barretts_oesophagus",
            "blood_cancer",
            "breast_cancer",
            "hiatus_hernia",
            "h_pylori_infection",
            "lung_cancer",
            "anaemia",
            "proton_pump_inhibitor_status",
        ),
    ),
}

for _field_map in FIELD_MAPS.values():
    _field_map.validate()


def field_map_for(engine: Engine) -> FieldMap:
    try:
        return FIELD_MAPS[engine]
    except KeyError:
        raise ConfigurationError(f"No field map declared for engine {engine.value!r}") from None


def project(record: CanonicalInputRecord, engine: Engine) -> EngineInput:
    """Restrict *record* to the fields *engine* consumes.

    Canonical fields the engine does not use are dropped. A mapped field
    whose canonical value is ``None`` is left at the engine type's default.
    """
    field_map = field_map_for(engine)
    kwargs: dict[str, Any] = {}
    for canonical_field, engine_field in field_map.pairs:
        value = getattr(record, canonical_field)
        if value is None:
            continue
        kwargs[engine_field] = value
    projected = field_map.input_type(**kwargs)
    logger.debug("Projected request onto %s (%d fields)", engine.value, len(kwargs))
    return projected


def reconcile(engine_input: EngineInput, engine: Engine) -> CanonicalInputRecord:
    """Rebuild a canonical record from what *engine* was actually given.

    The inverse of ``project``: only mapped fields are populated, every
    other canonical field keeps its default, and *engine* is appended to
    ``requested_engines``. The result is the audit copy of the engine's
    input, independent of what the caller originally sent.
    """
    field_map = field_map_for(engine)
    if not isinstance(engine_input, field_map.input_type):
        raise ConfigurationError(
            f"{engine.value} expects {field_map.input_type.__name__}, "
            f"got {type(engine_input).__name__}"
        )
    kwargs = {
        canonical_field: getattr(engine_input, engine_field)
        for canonical_field, engine_field in field_map.pairs
    }
    record = CanonicalInputRecord(**kwargs)
    record.requested_engines.append(engine)
    return record
