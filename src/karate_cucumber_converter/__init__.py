"""Package initialization for karate-cucumber-converter.

Having this file allows relative imports (e.g. `from .models import ...`) to
resolve under tooling (mypy/ruff) and matches the CLI usage pattern
`python -m karate_cucumber_converter convert` documented in DESIGN.md.
"""

__all__ = []
