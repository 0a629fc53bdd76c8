"""
Firefox artifact path patterns.

Firefox uses randomized profile names (e.g., abc123.default-release), so the
profile slot is always a wildcard. Profile data lives under Roaming on
Vista+ and under Application Data on XP.

Usage:
    from extractors.browser.firefox._patterns import get_patterns

    patterns = get_patterns("places")
"""

from __future__ import annotations

from typing import List

FIREFOX_PROFILE_ROOTS = [
    "Users/*/AppData/Roaming/Mozilla/Firefox/Profiles",
    "Documents and Settings/*/Application Data/Mozilla/Firefox/Profiles",
]

FIREFOX_ARTIFACTS = {
    # History and bookmarks share places.sqlite
    "places": ["places.sqlite"],
    "cookies": ["cookies.sqlite"],
}


def get_patterns(artifact: str) -> List[str]:
    """
    Build glob patterns for one Firefox artifact across all profile roots.

    Raises:
        ValueError: If the artifact name is unknown
    """
    try:
        relatives = FIREFOX_ARTIFACTS[artifact]
    except KeyError:
        raise ValueError(f"Unknown Firefox artifact: {artifact}") from None
    return [f"{root}/*/{relative}" for root in FIREFOX_PROFILE_ROOTS for relative in relatives]
