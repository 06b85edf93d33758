"""flexvers - semantic versioning automation.

Classifies the commits made since the last tag, cuts releases where the
commit messages ask for them, tags them with a generated changelog and
publishes them to the hosting service.
"""

from __future__ import annotations

__title__ = "flexvers"
__version__ = "0.1.0"
__homepage__ = "https://github.com/bsmithcompsci/semver"
