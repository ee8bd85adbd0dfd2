"""Reading Karate report files and writing the combined Cucumber report."""
from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path
from typing import Any, Iterable, List, Sequence

from .errors import ParseFailure, PersistFailure
from .models.cucumber import CucumberFeature

logger = logging.getLogger(__name__)

DEFAULT_INPUT_GLOB = "*.karate-json.txt"


def collect_input_paths(inputs: Iterable[str], pattern: str = DEFAULT_INPUT_GLOB) -> List[str]:
    """Expand CLI inputs into an ordered list of report file paths.

    Files (and paths that do not exist, so the loader can report them) pass
    through untouched. A directory contributes its direct children matching
    `pattern`, sorted by name.
    """
    paths: List[str] = []
    for item in inputs:
        p = Path(item)
        if p.is_dir():
            matches = sorted(str(child) for child in p.glob(pattern) if child.is_file())
            if not matches:
                logger.warning("No files matching %s in directory %s", pattern, item)
            paths.extend(matches)
        else:
            paths.append(item)
    return paths


def load_document(path: str, encoding: str = "utf-8") -> Any:
    """Read and JSON-decode one report file.

    Raises:
        ParseFailure: If the file cannot be read or is not valid JSON.
    """
    try:
        with open(path, "r", encoding=encoding) as f:
            return json.load(f)
    except (OSError, UnicodeDecodeError) as e:
        raise ParseFailure("unable to read file", path, details=[str(e)]) from e
    except json.JSONDecodeError as e:
        raise ParseFailure("invalid JSON", path, details=[str(e)]) from e


def write_report(
    path: str,
    features: Sequence[CucumberFeature],
    *,
    indent: int = 4,
    encoding: str = "utf-8",
) -> None:
    """Atomically write the features as one Cucumber JSON array to `path`.

    The report is written to a sibling temp file first and moved into place,
    so the destination never holds a half-written report.

    Raises:
        PersistFailure: If the report cannot be written.
    """
    payload = [feature.model_dump(mode="json") for feature in features]
    text = json.dumps(payload, indent=indent or None, ensure_ascii=False)
    tmp_path = f"{path}.tmp"
    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(tmp_path, "w", encoding=encoding) as f:
            f.write(text)
        os.replace(tmp_path, path)
    except OSError as e:
        with contextlib.suppress(OSError):
            os.remove(tmp_path)
        raise PersistFailure(path, e) from e
    logger.debug("Wrote %d feature(s) to %s", len(payload), path)


__all__ = ["DEFAULT_INPUT_GLOB", "collect_input_paths", "load_document", "write_report"]
