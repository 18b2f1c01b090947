"""Built-in settings, the weakest configuration layer.

Kept as a plain dict so it merges like any file layer. ``deep_merge`` copies,
so this mapping is never mutated.
"""

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {  # pyright: ignore[reportExplicitAny]
    "logging": {
        "level": "info",
        "format": "json",
        "file": "",
    },
    "scan": {
        "patterns": ["**/*.yaml", "**/*.yml"],
        "feature_suffixes": [".feature.yaml", ".feature.yml"],
        "max_workers": 1,
    },
    "integrity": {
        "orphan_types": ["operation", "event", "presentation", "experiment"],
        "require_tests_for": [],
    },
    "implementations": {
        "output_dir": "./src",
        "extension": ".py",
        "include_explicit": True,
        "include_discovered": True,
        "include_convention": True,
        "compute_hashes": True,
    },
    "fix": {
        "prefer_ai": False,
        "dry_run": False,
    },
}
