"""Reference test-pack loader.

Builds ``CanonicalInputRecord`` fixtures from the published QRisk3 test
pack so engine output can be checked against the reference vectors. Not
part of the request-serving path.

Columns are matched by header name rather than position, and the header
is checked before any row is read. Parsing is strict: a cell that does not
parse fails its whole row, which is reported and skipped without stopping
the rest of the file.
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping

from epredict.domains.risk.domain_logic.definitions import (
    DiabetesStatus,
    Engine,
    Ethnicity,
    Gender,
    SmokingCategory,
)
from epredict.domains.risk.models.input_record import (
    CanonicalInputRecord,
    InputValidationError,
    parse_enum,
)

logger = logging.getLogger(__name__)


class ReferenceRowError(InputValidationError):
    """Raised when one test-pack row cannot be parsed."""

    def __init__(self, row_id: str, column: str, message: str) -> None:
        super().__init__(f"row {row_id}: column {column!r}: {message}")
        self.row_id = row_id
        self.column = column


# ---------------------------------------------------------------------------
# Cell parsers
# ---------------------------------------------------------------------------

def _flag(cell: str) -> bool:
    if cell not in ("0", "1"):
        raise ValueError(f"expected '0' or '1', got {cell!r}")
    return cell == "1"


def _sex(cell: str) -> Gender:
    if cell == "0":
        return Gender.FEMALE
    if cell == "1":
        return Gender.MALE
    raise ValueError(f"expected '0' (female) or '1' (male), got {cell!r}")


def _integer(cell: str) -> int:
    return int(cell)


def _decimal(cell: str) -> float:
    return float(cell)


def _categorical(enum_type: type) -> Callable[[str], Any]:
    def parse(cell: str) -> Any:
        return parse_enum(enum_type, cell, enum_type.__name__)
    return parse


# Test-pack column -> (canonical field, parser). ``row_id`` is the 23rd
# column and only labels errors.
REFERENCE_COLUMNS: dict[str, tuple[str, Callable[[str], Any]]] = {
    "CVD": ("cvd", _flag),
    "sex": ("sex", _sex),
    "age": ("age", _integer),
    "atrialFibrillation": ("atrial_fibrillation", _flag),
    "atypicalAntipsychoticMedication": ("atypical_antipsychotic_medication", _flag),
    "systemicCorticosteroids": ("systemic_corticosteroids", _flag),
    "impotence": ("impotence", _flag),
    "migraines": ("migraines", _flag),
    "rheumatoidArthritis": ("rheumatoid_arthritis", _flag),
    "chronicRenalDisease": ("chronic_renal_disease", _flag),
    "severeMentalIllness": ("severe_mental_illness", _flag),
    "systemicLupusErythematosus": ("systemic_lupus_erythematosus", _flag),
    "bloodPressureTreatment": ("blood_pressure_treatment", _flag),
    "diabetesStatus": ("diabetes_status", _categorical(DiabetesStatus)),
    "BMI": ("bmi", _decimal),
    "ethnicity": ("ethnicity", _categorical(Ethnicity)),
    "familyHistoryCHD": ("family_history_chd", _flag),
    "cholesterolRatio": ("cholesterol_ratio", _decimal),
    "systolicBloodPressureMean": ("systolic_blood_pressure_mean", _decimal),
    "systolicBloodPressureStDev": ("systolic_blood_pressure_st_dev", _decimal),
    "smokingStatus": ("smoking_status", _categorical(SmokingCategory)),
    "townsendScore": ("townsend_score", _decimal),
}

ROW_ID_COLUMN = "row_id"
HEADER: tuple[str, ...] = (ROW_ID_COLUMN, *REFERENCE_COLUMNS)


def check_header(columns: list[str] | tuple[str, ...] | None) -> None:
    """Raise ``InputValidationError`` if any test-pack column is absent."""
    present = set(columns or ())
    missing = [name for name in HEADER if name not in present]
    if missing:
        raise InputValidationError(f"Reference pack is missing columns: {', '.join(missing)}")


def parse_reference_row(row: Mapping[str, str]) -> CanonicalInputRecord:
    """Parse one named-column test-pack row into a QRisk3 request record.

    Raises:
        ReferenceRowError: On the first cell that fails to parse.
    """
    row_id = (row.get(ROW_ID_COLUMN) or "?").strip()
    kwargs: dict[str, Any] = {"requested_engines": [Engine.QRISK3]}
    for column, (field_name, parser) in REFERENCE_COLUMNS.items():
        cell = row.get(column)
        if cell is None:
            raise ReferenceRowError(row_id, column, "column is missing")
        try:
            kwargs[field_name] = parser(cell.strip())
        except (ValueError, InputValidationError) as exc:
            raise ReferenceRowError(row_id, column, str(exc)) from exc
    return CanonicalInputRecord(**kwargs)


@dataclass
class ReferencePackResult:
    """Records parsed from a test pack, plus the rows that were rejected."""

    records: list[CanonicalInputRecord] = field(default_factory=list)
    errors: list[ReferenceRowError] = field(default_factory=list)


def load_reference_pack(path: str | Path) -> ReferencePackResult:
    """Read a comma-separated test pack with a header row.

    Raises:
        InputValidationError: If the header lacks a required column.
    """
    result = ReferencePackResult()
    with open(path, newline="") as f:
        reader = csv.DictReader(f)
        check_header(reader.fieldnames)
        for row in reader:
            try:
                result.records.append(parse_reference_row(row))
            except ReferenceRowError as exc:
                logger.warning("Skipping reference row: %s", exc)
                result.errors.append(exc)

    logger.info(
        "Loaded %d reference records from %s (%d rejected)",
        len(result.records), path, len(result.errors),
    )
    return result
