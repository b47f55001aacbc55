"""Prediction service: fan a request out to its engines and collect the results."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Iterable

from epredict.core.config.settings import Settings
from epredict.core.errors import ConfigurationError, EngineNotFoundError
from epredict.core.registry.registry import EngineRegistry
from epredict.domains.risk.connectors import CalculationEngine
from epredict.domains.risk.domain_logic.definitions import (
    Engine,
    InvalidityReason,
    ResultStatus,
)
from epredict.domains.risk.domain_logic.normalization import normalize
from epredict.domains.risk.domain_logic.projection import project, reconcile
from epredict.domains.risk.models.input_record import (
    CanonicalInputRecord,
    InputValidationError,
)
from epredict.domains.risk.models.results import (
    CalculationMeta,
    EngineResult,
    PredictionEnvelope,
    ServiceMeta,
)

logger = logging.getLogger(__name__)


class PredictionService:
    """Runs one canonical request through every engine it names.

    Holds only read-only collaborators (the registry, the installed
    engines, settings), so one instance can serve concurrent requests.

    Usage::

        service = PredictionService(registry, engines, settings)
        envelope = service.predict(record)
    """

    def __init__(
        self,
        registry: EngineRegistry,
        engines: Iterable[CalculationEngine],
        settings: Settings,
    ) -> None:
        self._registry = registry
        self._engines: dict[str, CalculationEngine] = {}
        for engine in engines:
            if engine.name not in registry:
                raise ConfigurationError(f"Engine {engine.name!r} is installed but not registered")
            self._engines[engine.name] = engine
        self._settings = settings

    @property
    def registry(self) -> EngineRegistry:
        return self._registry

    # ---------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------

    def predict(self, record: CanonicalInputRecord) -> PredictionEnvelope:
        """Score *record* with each requested engine, one after another.

        Raises:
            InputValidationError: If no engine was requested.
            EngineNotFoundError: If a requested engine is not installed.
        """
        started = datetime.now(timezone.utc)
        engines = self._resolve(record)
        prepared = self._with_defaults(record)
        results = [self._run_engine(engine, prepared) for engine in engines]
        return self._envelope(record, started, results)

    async def apredict(self, record: CanonicalInputRecord) -> PredictionEnvelope:
        """Like ``predict`` but runs the engines concurrently on worker threads.

        Results keep the order in which the engines were requested.
        """
        started = datetime.now(timezone.utc)
        engines = self._resolve(record)
        prepared = self._with_defaults(record)
        results = await asyncio.gather(
            *(asyncio.to_thread(self._run_engine, engine, prepared) for engine in engines)
        )
        return self._envelope(record, started, list(results))

    # ---------------------------------------------------------------
    # Internals
    # ---------------------------------------------------------------

    def _resolve(self, record: CanonicalInputRecord) -> list[Engine]:
        if not record.requested_engines:
            raise InputValidationError("requested_engines must name at least one engine")

        engines: list[Engine] = []
        for engine in record.requested_engines:
            # Both checks fail the whole request before any engine runs.
            self._registry.lookup(engine.value)
            if engine.value not in self._engines:
                raise EngineNotFoundError(engine.value)
            if engine not in engines:
                engines.append(engine)
        return engines

    def _with_defaults(self, record: CanonicalInputRecord) -> CanonicalInputRecord:
        if record.prediction_years is None:
            return replace(record, prediction_years=self._settings.default_prediction_years)
        return record

    def _run_engine(self, engine: Engine, record: CanonicalInputRecord) -> EngineResult | None:
        engine_input = project(record, engine)
        try:
            raw = self._engines[engine.value].compute(engine_input)
            return normalize(engine, raw, engine_input, self._registry)
        except ConfigurationError:
            raise
        except Exception as exc:
            logger.exception(
                "Engine %s failed; applying %r policy",
                engine.value,
                self._settings.failed_engine_policy,
            )
            if self._settings.failed_engine_policy == "omit":
                return None
            descriptor = self._registry.lookup(engine.value)
            return EngineResult(
                engine_name=engine,
                engine_version=descriptor.version,
                calculation_meta=CalculationMeta(
                    result_status=ResultStatus.NO_CALCULATION_POSSIBLE_AS_ENGINE_LOCKED,
                    reason=InvalidityReason.VALID,
                    error_type=type(exc).__name__,
                ),
                engine_input=reconcile(engine_input, engine),
            )

    def _envelope(
        self,
        record: CanonicalInputRecord,
        started: datetime,
        results: list[EngineResult | None],
    ) -> PredictionEnvelope:
        kept = [r for r in results if r is not None]
        logger.info(
            "Prediction complete: %d of %d engine results returned",
            len(kept), len(results),
        )
        return PredictionEnvelope(
            meta=ServiceMeta(
                service_version=self._settings.service_version,
                request_timestamp_utc=started,
            ),
            input=record,
            engine_results=kept,
        )
