"""MCP tools for running risk predictions.

Tools:
- list_engines: the engines this gateway can run, with version and URI
- predict: score one canonical input record with its requested engines
- regularise_postcode: validate and normalise a UK postcode
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from fastmcp import FastMCP

from epredict.domains.risk.domain_logic.blood_pressure import summarise_systolic_readings
from epredict.domains.risk.domain_logic.postcode import (
    POSTCODE_INVALID,
    validate_and_regularise_postcode,
)
from epredict.domains.risk.models.input_record import (
    CanonicalInputRecord,
    InputValidationError,
)

if TYPE_CHECKING:
    from epredict.domains.risk.domain_logic.prediction import PredictionService

logger = logging.getLogger(__name__)

READINGS_KEY = "systolic_blood_pressure_readings"


def _record_from_request(request: dict[str, Any]) -> CanonicalInputRecord:
    """Build the canonical record, folding raw BP readings into mean and SD.

    Readings only fill in the summary fields the caller left out.
    """
    body = dict(request)
    readings = body.pop(READINGS_KEY, None)
    if readings is not None:
        if not isinstance(readings, list) or any(
            isinstance(r, bool) or not isinstance(r, (int, float)) for r in readings
        ):
            raise InputValidationError(f"{READINGS_KEY}: expected a list of numbers")
        mean, st_dev = summarise_systolic_readings(readings)
        body.setdefault("systolic_blood_pressure_mean", mean)
        body.setdefault("systolic_blood_pressure_st_dev", st_dev)
    return CanonicalInputRecord.from_dict(body)


def register_prediction_tools(mcp: FastMCP, service: PredictionService) -> None:
    """Register the prediction tools on the MCP server."""

    @mcp.tool
    def list_engines() -> str:
        """List the risk engines available on this server."""
        descriptors = service.registry.all()
        return json.dumps({
            "engine_count": len(descriptors),
            "engines": [d.to_dict() for d in descriptors],
        })

    @mcp.tool
    async def predict(request: dict[str, Any]) -> str:
        """Run a risk prediction for one patient.

        Args:
            request: Canonical input record. ``sex`` and ``age`` are required;
                ``requested_engines`` names one or more of QRisk3, QDiabetes,
                QFracture, X05. Categoricals use their textual names (e.g.
                ``"NonSmoker"``, ``"Type2"``). Numeric measurements may be
                omitted or null when not known. Instead of a pre-computed
                systolic mean and standard deviation, a list of raw readings
                may be sent as ``systolic_blood_pressure_readings``.
        """
        try:
            record = _record_from_request(request)
        except InputValidationError as exc:
            logger.info("Rejected prediction request: %s", exc)
            return json.dumps({"status": "invalid_input", "error": str(exc)})

        try:
            envelope = await service.apredict(record)
        except InputValidationError as exc:
            logger.info("Rejected prediction request: %s", exc)
            return json.dumps({"status": "invalid_input", "error": str(exc)})

        return json.dumps(envelope.to_dict())

    @mcp.tool
    def regularise_postcode(postcode: str) -> str:
        """Validate a UK postcode and return it in its regular spaced form.

        Args:
            postcode: Postcode in any case and spacing (e.g. 'sw1a1aa').
        """
        regular = validate_and_regularise_postcode(postcode)
        return json.dumps({
            "postcode": regular,
            "valid": regular != POSTCODE_INVALID,
        })
