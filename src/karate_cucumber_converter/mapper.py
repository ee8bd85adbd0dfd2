"""Core mapping logic from Karate feature results to Cucumber JSON features.

This module is the "T" (Transform) of the converter. It takes one decoded
Karate JSON document and turns it into one `CucumberFeature`:

- Feature fields are copied 1:1; `description` deliberately repeats `name`.
- Each scenario result becomes one Cucumber element, in execution order.
- Each step result becomes one Cucumber step, in execution order.
- Start times (epoch ms) become ISO-8601 UTC strings; durations (ms) become
  integral nanoseconds.
- Step status is derived from Karate's boolean `failed` flag.
- A step without a `match` record gets the location `"unknown"`; a present
  `match` has its `location` copied as-is, even when null or empty.

Everything here is pure: no file I/O and no shared state, so documents may be
mapped concurrently by a caller.
"""
from __future__ import annotations

import logging
from typing import Any, List, Optional

from pydantic import ValidationError

from .errors import (
    MISSING_SCENARIO_RESULTS,
    DurationConversionError,
    TimestampConversionError,
    ValidationFailure,
)
from .mapping.time_utils import epoch_ms_to_iso, millis_to_nanos
from .models.cucumber import (
    CucumberElement,
    CucumberFeature,
    CucumberMatch,
    CucumberResult,
    CucumberStep,
)
from .models.karate import KarateFeatureResult, KarateScenarioResult, KarateStepResult

__all__ = [
    "UNKNOWN_LOCATION",
    "decode_feature_result",
    "map_feature_result",
    "map_document",
]

UNKNOWN_LOCATION = "unknown"
logger = logging.getLogger(__name__)


def _document_context(raw: Any, source: Optional[str]) -> Optional[str]:
    """Best identifier for diagnostics: relativePath, else the source file."""
    if isinstance(raw, dict):
        rel = raw.get("relativePath")
        if isinstance(rel, str) and rel:
            return rel
    return source


def _format_validation_errors(exc: ValidationError) -> List[str]:
    details: List[str] = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ())) or "<root>"
        details.append(f"{loc}: {err.get('msg')}")
    return details


def decode_feature_result(raw: Any, source: Optional[str] = None) -> KarateFeatureResult:
    """Validate a decoded JSON value into a `KarateFeatureResult`.

    The scenario list is checked first so the most common defect (a document
    that is not a feature result at all) gets a stable, readable reason.
    Remaining shape problems are reported with their field paths.

    Args:
        raw: Value produced by `json.loads` for one input document.
        source: Optional file path, used as context when the document carries
            no `relativePath`.

    Returns:
        The validated source model.

    Raises:
        ValidationFailure: If the document does not have the Karate shape.
    """
    context = _document_context(raw, source)
    if not isinstance(raw, dict):
        raise ValidationFailure(
            f"expected a JSON object, got {type(raw).__name__}", context
        )
    if not isinstance(raw.get("scenarioResults"), list):
        raise ValidationFailure(MISSING_SCENARIO_RESULTS, context)
    try:
        return KarateFeatureResult.model_validate(raw)
    except ValidationError as e:
        raise ValidationFailure(
            "invalid document shape", context, details=_format_validation_errors(e)
        ) from e


def _map_step(step: KarateStepResult) -> CucumberStep:
    if step.match is not None:
        location = step.match.location
    else:
        location = UNKNOWN_LOCATION
    return CucumberStep(
        result=CucumberResult(
            duration=millis_to_nanos(step.durationMillis),
            status="failed" if step.failed else "passed",
        ),
        line=step.line,
        name=step.name,
        match=CucumberMatch(location=location),
        keyword=step.keyword,
    )


def _map_scenario(scenario: KarateScenarioResult) -> CucumberElement:
    return CucumberElement(
        start_timestamp=epoch_ms_to_iso(scenario.startTime),
        line=scenario.line,
        name=scenario.name,
        description=scenario.description,
        id=scenario.refId,
        steps=[_map_step(s) for s in scenario.stepResults],
    )


def map_feature_result(feature: KarateFeatureResult) -> CucumberFeature:
    """Map one validated Karate feature result to a Cucumber feature.

    Raises:
        TimestampConversionError: If a scenario start time is not a valid
            epoch millisecond value.
        DurationConversionError: If a step duration is not a finite number.
    """
    elements = [_map_scenario(s) for s in feature.scenarioResults]
    logger.debug(
        "Mapped feature %s: %d scenario(s), %d step(s)",
        feature.relativePath,
        len(elements),
        sum(len(e.steps) for e in elements),
    )
    return CucumberFeature(
        line=feature.line,
        name=feature.name,
        description=feature.name,
        id=feature.packageQualifiedName,
        uri=feature.relativePath,
        elements=elements,
    )


def map_document(raw: Any, source: Optional[str] = None) -> CucumberFeature:
    """Decode and map one raw Karate document.

    Conversion errors raised while mapping are re-raised as
    `ValidationFailure` carrying the document context, so a batch caller only
    has to handle one failure family per document.
    """
    feature = decode_feature_result(raw, source)
    try:
        return map_feature_result(feature)
    except (TimestampConversionError, DurationConversionError) as e:
        raise ValidationFailure(
            "invalid time value", _document_context(raw, source), details=[str(e)]
        ) from e
