from __future__ import annotations

import copy
from typing import Any, Dict, List

import pytest
from pydantic import ValidationError

from karate_cucumber_converter.errors import TimestampConversionError, ValidationFailure
from karate_cucumber_converter.mapper import (
    UNKNOWN_LOCATION,
    decode_feature_result,
    map_document,
    map_feature_result,
)
from karate_cucumber_converter.models.cucumber import CucumberFeature


def _step(name: str, **overrides: Any) -> Dict[str, Any]:
    step: Dict[str, Any] = {
        "durationMillis": 250,
        "failed": False,
        "line": 7,
        "name": name,
        "match": {"location": "users.feature:7"},
        "keyword": "Given",
    }
    step.update(overrides)
    return step


def _scenario(name: str, steps: List[Dict[str, Any]], **overrides: Any) -> Dict[str, Any]:
    scenario: Dict[str, Any] = {
        "startTime": 1_700_000_000_123,
        "line": 5,
        "name": name,
        "description": f"{name} description",
        "refId": f"[1:5] {name}",
        "stepResults": steps,
        # Karate emits plenty of fields the mapping does not use
        "executorName": "pool-1-thread-1",
        "durationMillis": 123.4,
    }
    scenario.update(overrides)
    return scenario


def _karate_doc(scenarios: List[Dict[str, Any]] | None = None) -> Dict[str, Any]:
    if scenarios is None:
        scenarios = [
            _scenario("create user", [_step("url base"), _step("method post", keyword="When")]),
            _scenario("delete user", [_step("path id")]),
        ]
    return {
        "line": 1,
        "name": "users",
        "packageQualifiedName": "examples.users.users",
        "relativePath": "examples/users/users.feature",
        "resultDate": "2024-01-01 10:00:00 AM",
        "scenarioResults": scenarios,
    }


def test_feature_level_fields():
    feature = map_document(_karate_doc())
    assert isinstance(feature, CucumberFeature)
    assert feature.line == 1
    assert feature.name == "users"
    assert feature.description == feature.name == "users"
    assert feature.id == "examples.users.users"
    assert feature.keyword == "Feature"
    assert feature.uri == "examples/users/users.feature"
    assert feature.tags == []


def test_scenario_and_step_counts_preserved():
    doc = _karate_doc()
    feature = map_document(doc)
    assert len(feature.elements) == len(doc["scenarioResults"])
    for element, scenario in zip(feature.elements, doc["scenarioResults"]):
        assert len(element.steps) == len(scenario["stepResults"])


def test_order_is_preserved():
    scenarios = [
        _scenario(f"s{i}", [_step(f"s{i}-step{j}") for j in range(4)], startTime=10_000 - i)
        for i in range(5)
    ]
    feature = map_document(_karate_doc(scenarios))
    assert [e.name for e in feature.elements] == [f"s{i}" for i in range(5)]
    for i, element in enumerate(feature.elements):
        assert [s.name for s in element.steps] == [f"s{i}-step{j}" for j in range(4)]


def test_element_fields():
    element = map_document(_karate_doc()).elements[0]
    assert element.start_timestamp == "2023-11-14T22:13:20.123Z"
    assert element.line == 5
    assert element.name == "create user"
    assert element.description == "create user description"
    assert element.id == "[1:5] create user"
    assert element.type == "scenario"
    assert element.keyword == "Scenario"


def test_epoch_start_time():
    doc = _karate_doc([_scenario("epoch", [], startTime=0)])
    assert map_document(doc).elements[0].start_timestamp == "1970-01-01T00:00:00.000Z"


def test_duration_converted_to_nanoseconds():
    doc = _karate_doc([_scenario("d", [_step("a", durationMillis=250), _step("b", durationMillis=0.1)])])
    steps = map_document(doc).elements[0].steps
    assert steps[0].result.duration == 250_000_000
    assert steps[1].result.duration == 100_000


def test_status_derivation():
    plain = _step("absent")
    del plain["failed"]
    doc = _karate_doc(
        [_scenario("st", [_step("boom", failed=True), _step("ok", failed=False), plain, _step("null", failed=None)])]
    )
    statuses = [s.result.status for s in map_document(doc).elements[0].steps]
    assert statuses == ["failed", "passed", "passed", "passed"]


def test_match_location_fallback_and_passthrough():
    no_match = _step("no match")
    del no_match["match"]
    doc = _karate_doc(
        [
            _scenario(
                "m",
                [
                    no_match,
                    _step("with match", match={"location": "foo.feature:12"}),
                    _step("null match", match=None),
                    _step("null location", match={"location": None}),
                    _step("empty location", match={"location": ""}),
                    _step("match without location", match={}),
                ],
            )
        ]
    )
    locations = [s.match.location for s in map_document(doc).elements[0].steps]
    assert locations == [UNKNOWN_LOCATION, "foo.feature:12", UNKNOWN_LOCATION, None, "", None]


def test_keyword_passed_through_verbatim():
    doc = _karate_doc([_scenario("k", [_step("a", keyword="* "), _step("b", keyword="Aber")])])
    assert [s.keyword for s in map_document(doc).elements[0].steps] == ["* ", "Aber"]


def test_missing_optional_fields_become_null():
    doc = {"scenarioResults": [{"startTime": 0, "stepResults": [{"durationMillis": 1}]}]}
    dumped = map_document(doc).model_dump(mode="json")
    assert dumped["name"] is None
    assert dumped["description"] is None
    assert dumped["uri"] is None
    step = dumped["elements"][0]["steps"][0]
    assert step == {
        "result": {"duration": 1_000_000, "status": "passed"},
        "line": None,
        "name": None,
        "match": {"location": "unknown"},
        "keyword": None,
    }


def test_serialized_key_order():
    dumped = map_document(_karate_doc()).model_dump(mode="json")
    assert list(dumped) == ["line", "name", "description", "id", "keyword", "uri", "tags", "elements"]
    element = dumped["elements"][0]
    assert list(element) == [
        "start_timestamp",
        "line",
        "name",
        "description",
        "id",
        "type",
        "keyword",
        "steps",
    ]
    assert list(element["steps"][0]) == ["result", "line", "name", "match", "keyword"]


def test_mapping_is_pure_and_deterministic():
    doc = _karate_doc()
    snapshot = copy.deepcopy(doc)
    first = map_document(doc)
    second = map_document(doc)
    assert first == second
    assert doc == snapshot


def test_target_records_are_frozen():
    feature = map_document(_karate_doc())
    with pytest.raises(ValidationError):
        feature.name = "changed"  # type: ignore[misc]


@pytest.mark.parametrize(
    "scenario_results",
    ["not a list", 3, None, {"0": {}}],
)
def test_non_list_scenario_results_rejected(scenario_results):
    doc = _karate_doc()
    doc["scenarioResults"] = scenario_results
    with pytest.raises(ValidationFailure) as exc_info:
        map_document(doc)
    assert exc_info.value.reason == "missing or non-list scenario results"
    assert exc_info.value.context == "examples/users/users.feature"


def test_missing_scenario_results_uses_source_as_context():
    doc = _karate_doc()
    del doc["scenarioResults"]
    del doc["relativePath"]
    with pytest.raises(ValidationFailure) as exc_info:
        map_document(doc, source="reports/users.karate-json.txt")
    assert exc_info.value.reason == "missing or non-list scenario results"
    assert exc_info.value.context == "reports/users.karate-json.txt"
    assert "reports/users.karate-json.txt" in str(exc_info.value)


def test_non_object_document_rejected():
    with pytest.raises(ValidationFailure) as exc_info:
        map_document([1, 2, 3], source="list.json")
    assert exc_info.value.context == "list.json"


def test_shape_errors_carry_field_paths():
    bad_step = _step("broken")
    del bad_step["durationMillis"]
    doc = _karate_doc([_scenario("ok", [_step("fine")]), _scenario("bad", [bad_step])])
    with pytest.raises(ValidationFailure) as exc_info:
        decode_feature_result(doc)
    assert exc_info.value.reason == "invalid document shape"
    assert any(
        d.startswith("scenarioResults.1.stepResults.0.durationMillis") for d in exc_info.value.details
    )


def test_missing_step_results_is_a_shape_error():
    scenario = _scenario("no steps", [])
    del scenario["stepResults"]
    with pytest.raises(ValidationFailure) as exc_info:
        map_document(_karate_doc([scenario]))
    assert any("stepResults" in d for d in exc_info.value.details)


def test_invalid_start_time_fails_loudly():
    feature = decode_feature_result(_karate_doc([_scenario("nan", [], startTime=float("nan"))]))
    with pytest.raises(TimestampConversionError):
        map_feature_result(feature)
    with pytest.raises(ValidationFailure) as exc_info:
        map_document(_karate_doc([_scenario("nan", [], startTime=float("nan"))]))
    assert exc_info.value.reason == "invalid time value"
    assert exc_info.value.context == "examples/users/users.feature"


def test_non_numeric_start_time_rejected_at_decode():
    with pytest.raises(ValidationFailure):
        map_document(_karate_doc([_scenario("text", [], startTime="yesterday")]))


@pytest.mark.parametrize(
    "scenario_overrides, step_overrides, bad_field",
    [
        ({"startTime": True}, {}, "startTime"),
        ({"startTime": "1700000000000"}, {}, "startTime"),
        ({}, {"durationMillis": "250"}, "durationMillis"),
        ({}, {"durationMillis": False}, "durationMillis"),
        ({}, {"failed": "false"}, "failed"),
        ({}, {"failed": 1}, "failed"),
        ({"line": "5"}, {}, "line"),
        ({}, {"keyword": 3}, "keyword"),
    ],
)
def test_values_are_not_coerced_at_decode(scenario_overrides, step_overrides, bad_field):
    doc = _karate_doc([_scenario("strict", [_step("s", **step_overrides)], **scenario_overrides)])
    with pytest.raises(ValidationFailure) as exc_info:
        map_document(doc)
    assert exc_info.value.reason == "invalid document shape"
    assert any(bad_field in d for d in exc_info.value.details)
