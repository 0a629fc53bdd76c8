"""
Internet Explorer artifact path patterns.

Globs match case-insensitively and ``*`` also crosses directory
separators, so a single Favorites pattern covers nested folders.
"""

from __future__ import annotations

from typing import Dict, List

IE_ARTIFACTS: Dict[str, List[str]] = {
    "favorites": [
        "Users/*/Favorites/*.url",
        "Documents and Settings/*/Favorites/*.url",
    ],
    "cookies": [
        "Users/*/AppData/Roaming/Microsoft/Windows/Cookies/*.txt",
        "Users/*/AppData/Roaming/Microsoft/Windows/Cookies/Low/*.txt",
        "Documents and Settings/*/Cookies/*.txt",
    ],
}


def get_patterns(artifact: str) -> List[str]:
    """
    Return glob patterns for one IE artifact.

    Raises:
        ValueError: If the artifact name is unknown
    """
    try:
        return list(IE_ARTIFACTS[artifact])
    except KeyError:
        raise ValueError(f"Unknown Internet Explorer artifact: {artifact}") from None
