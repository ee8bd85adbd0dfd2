"""Pydantic models for the Cucumber JSON report format (the conversion target).

These models define the structure that Cucumber report consumers (e.g.
cucumber-html-reporter, the Jenkins Cucumber plugin) read. They are the
target data structure of the `mapper` module and are frozen: each record is
built once from one Karate document and never changed afterwards.

Field declaration order is the serialization order.
"""
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

StepStatus = Literal["passed", "failed"]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class CucumberResult(_Frozen):
    duration: int  # nanoseconds
    status: StepStatus


class CucumberMatch(_Frozen):
    location: Optional[str] = None


class CucumberStep(_Frozen):
    result: CucumberResult
    line: Optional[int] = None
    name: Optional[str] = None
    match: CucumberMatch
    keyword: Optional[str] = None


class CucumberElement(_Frozen):
    """A single scenario run, called an "element" in Cucumber JSON."""

    start_timestamp: str
    line: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None
    id: Optional[str] = None
    type: Literal["scenario"] = "scenario"
    keyword: Literal["Scenario"] = "Scenario"
    steps: List[CucumberStep] = Field(default_factory=list)


class CucumberFeature(_Frozen):
    """Top level Cucumber record; a report is a JSON array of these."""

    line: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None
    id: Optional[str] = None
    keyword: Literal["Feature"] = "Feature"
    uri: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    elements: List[CucumberElement] = Field(default_factory=list)
