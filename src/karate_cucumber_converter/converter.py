"""Batch conversion of Karate report files into Cucumber features.

Documents are processed in the order given. A document that cannot be read,
decoded or mapped is logged once and skipped; the remaining documents are
still converted.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from .errors import MappingFailure
from .mapper import map_document
from .models.cucumber import CucumberFeature
from .reports import load_document

logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    """Ordered features that converted, plus (path, failure) for each skip."""

    features: List[CucumberFeature] = field(default_factory=list)
    failures: List[Tuple[str, MappingFailure]] = field(default_factory=list)

    @property
    def converted(self) -> int:
        return len(self.features)

    @property
    def skipped(self) -> int:
        return len(self.failures)


def convert_files(paths: Iterable[str], *, encoding: str = "utf-8") -> ConversionResult:
    """Load and map every path in order, collecting successes and failures."""
    result = ConversionResult()
    for path in paths:
        try:
            raw = load_document(path, encoding=encoding)
            feature = map_document(raw, source=path)
        except MappingFailure as e:
            logger.error("Error processing file %s: %s", path, e)
            result.failures.append((path, e))
            continue
        logger.debug(
            "Converted %s -> feature %s with %d element(s)", path, feature.id, len(feature.elements)
        )
        result.features.append(feature)
    logger.info(
        "Converted %d document(s), skipped %d", result.converted, result.skipped
    )
    return result


__all__ = ["ConversionResult", "convert_files"]
