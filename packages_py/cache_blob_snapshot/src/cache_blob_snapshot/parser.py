"""
Cache-Control header parsing.
"""
from typing import Optional

from .types import CacheControlDirectives


def parse_cache_control(header: Optional[str]) -> CacheControlDirectives:
    """Parse the Cache-Control directives the snapshot policy acts on."""
    directives = CacheControlDirectives()

    if not header:
        return directives

    for part in header.split(","):
        key = part.split("=", 1)[0].strip().lower()

        # no-cache="Set-Cookie" still counts as no-cache
        if key == "no-cache":
            directives.no_cache = True

    return directives
