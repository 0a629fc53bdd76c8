"""
Google Chrome artifact path patterns.

Patterns are globs relative to the data source root and are matched
case-insensitively by the evidence filesystem. Both the Vista+ profile
layout (Users/) and the XP layout (Documents and Settings/) are covered;
``*`` in the profile slot matches Default, Profile 1, etc.

Usage:
    from extractors.browser.chromium._patterns import get_patterns

    for path in evidence_fs.iter_paths_any(get_patterns("history")):
        ...
"""

from __future__ import annotations

from typing import List

CHROME_ROOTS = [
    "Users/*/AppData/Local/Google/Chrome/User Data",
    "Documents and Settings/*/Local Settings/Application Data/Google/Chrome/User Data",
]

# Artifact file locations relative to a profile directory
CHROME_ARTIFACTS = {
    "history": ["History"],
    "bookmarks": ["Bookmarks"],
    # Chrome 96+ moved cookies to Network/ subdirectory
    "cookies": ["Network/Cookies", "Cookies"],
}


def get_patterns(artifact: str) -> List[str]:
    """
    Build glob patterns for one Chrome artifact across all profile roots.

    Raises:
        ValueError: If the artifact name is unknown

    Example:
        >>> get_patterns("history")[0]
        'Users/*/AppData/Local/Google/Chrome/User Data/*/History'
    """
    try:
        relatives = CHROME_ARTIFACTS[artifact]
    except KeyError:
        raise ValueError(f"Unknown Chrome artifact: {artifact}") from None
    return [f"{root}/*/{relative}" for root in CHROME_ROOTS for relative in relatives]
