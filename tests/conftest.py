"""Shared test fixtures for Endeavour Predict tests."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import pytest

# ---------------------------------------------------------------------------
# Test hermeticity
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _force_hermetic_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENGINE_CATALOG_PATH", "")
    monkeypatch.setenv("FAILED_ENGINE_POLICY", "no_calculation")
    monkeypatch.setenv("DEFAULT_PREDICTION_YEARS", "10")
    monkeypatch.setenv("SERVICE_VERSION", "0.1.0-test")

# Allow running tests without `pip install -e .` by making `src/` importable.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_SRC_DIR = _PROJECT_ROOT / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"

from epredict.core.config.settings import Settings  # noqa: E402
from epredict.core.registry.loader import load_engine_catalog  # noqa: E402
from epredict.core.registry.registry import EngineRegistry, build_registry  # noqa: E402
from epredict.domains.risk.connectors.mock_engines import get_mock_engines  # noqa: E402
from epredict.domains.risk.domain_logic.definitions import (  # noqa: E402
    DiabetesStatus,
    Engine,
    Ethnicity,
    Gender,
    SmokingCategory,
)
from epredict.domains.risk.domain_logic.prediction import PredictionService  # noqa: E402
from epredict.domains.risk.models.input_record import CanonicalInputRecord  # noqa: E402


def _make_record(**overrides: Any) -> CanonicalInputRecord:
    """A 64-year-old female QRisk3 request with sensible measurements.

    The Townsend score is left unset so the engine reports it missing.
    """
    values: dict[str, Any] = {
        "sex": Gender.FEMALE,
        "age": 64,
        "requested_engines": [Engine.QRISK3],
        "bmi": 25.0,
        "cholesterol_ratio": 4.0,
        "systolic_blood_pressure_mean": 180.0,
        "systolic_blood_pressure_st_dev": 20.0,
        "ethnicity": Ethnicity.BRITISH,
        "smoking_status": SmokingCategory.NON_SMOKER,
        "diabetes_status": DiabetesStatus.NONE,
    }
    values.update(overrides)
    return CanonicalInputRecord(**values)


class _FailingEngine:
    """Engine stand-in whose compute always raises."""

    def __init__(self, name: str, exc: Exception | None = None) -> None:
        self._name = name
        self._exc = exc or RuntimeError("engine crashed")
        self.calls = 0

    @property
    def name(self) -> str:
        return self._name

    def version(self) -> str:
        return "broken-1.0"

    def compute(self, engine_input: Any) -> Any:
        self.calls += 1
        raise self._exc


@pytest.fixture
def catalog():
    """The engine catalog packaged with epredict."""
    return load_engine_catalog()


@pytest.fixture
def mock_engines():
    return get_mock_engines()


@pytest.fixture
def engine_registry(mock_engines, catalog) -> EngineRegistry:
    """Registry describing the four mock engines."""
    return build_registry(mock_engines, catalog)


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def prediction_service(engine_registry, mock_engines, settings) -> PredictionService:
    return PredictionService(engine_registry, mock_engines, settings)


@pytest.fixture
def sample_record() -> CanonicalInputRecord:
    return _make_record()


@pytest.fixture
def record_factory():
    """Build request records: ``record_factory(age=30, bmi=None)``."""
    return _make_record


@pytest.fixture
def failing_engine_factory():
    """Build engines that raise from compute: ``failing_engine_factory("QRisk3")``."""
    return _FailingEngine
