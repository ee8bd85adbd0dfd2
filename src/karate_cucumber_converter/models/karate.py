"""Pydantic models for Karate JSON feature results (the conversion source).

Karate writes one JSON document per feature file it executes. Only the fields
the Cucumber mapping consumes are modelled here; everything else Karate emits
(step logs, embeds, call depth, ...) is ignored during validation.

Field names mirror Karate's camelCase keys so raw documents validate directly.
"""
from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, StrictBool, StrictFloat, StrictInt, StrictStr

# Karate reports integral and fractional millisecond values alike. No coercion:
# booleans and numeric strings are rejected.
Millis = Union[StrictInt, StrictFloat]


class KarateStepMatch(BaseModel):
    model_config = ConfigDict(extra="ignore")

    location: Optional[StrictStr] = None


class KarateStepResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    durationMillis: Millis
    failed: Optional[StrictBool] = False  # null counts as not failed
    line: Optional[StrictInt] = None
    name: Optional[StrictStr] = None
    match: Optional[KarateStepMatch] = None
    keyword: Optional[StrictStr] = None


class KarateScenarioResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    startTime: Millis
    line: Optional[StrictInt] = None
    name: Optional[StrictStr] = None
    description: Optional[StrictStr] = None
    refId: Optional[StrictStr] = None
    stepResults: List[KarateStepResult]


class KarateFeatureResult(BaseModel):
    """One Karate feature result document.

    `scenarioResults` is the only mandatory feature-level field: without it
    there is nothing to map, and the mapper reports the document as invalid.
    """

    model_config = ConfigDict(extra="ignore")

    line: Optional[StrictInt] = None
    name: Optional[StrictStr] = None
    packageQualifiedName: Optional[StrictStr] = None
    relativePath: Optional[StrictStr] = None
    scenarioResults: List[KarateScenarioResult]
