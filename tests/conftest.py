"""Pytest configuration for the heap test suite.

Hypothesis profiles:
- dev: local development, 200 examples (default)
- ci: 50 examples, derandomized (selected when CI=true)
- verbose: 100 examples with progress output

Override manually: HYPOTHESIS_PROFILE=verbose pytest
"""

import os

from hypothesis import Phase, Verbosity, settings

settings.register_profile(
    "dev",
    max_examples=200,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=False,
)

settings.register_profile(
    "ci",
    max_examples=50,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=True,
    print_blob=True,
)

settings.register_profile(
    "verbose",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=False,
    verbosity=Verbosity.verbose,
)


def _detect_profile():
    """Pick the Hypothesis profile: HYPOTHESIS_PROFILE, then CI, then dev."""
    explicit = os.environ.get("HYPOTHESIS_PROFILE")
    if explicit in ("dev", "ci", "verbose"):
        return explicit
    if os.environ.get("CI") == "true":
        return "ci"
    return "dev"


settings.load_profile(_detect_profile())
