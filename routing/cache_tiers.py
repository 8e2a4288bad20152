import posixpath
from enum import Enum
from typing import List


class CacheTier(Enum):
    IMMUTABLE = "immutable"
    OPTIMIZED = "optimized"
    DISABLED = "disabled"


# Fingerprinted build output: scripts, stylesheets, images and fonts
STATIC_ASSET_EXTENSIONS = frozenset({
    "js", "mjs", "map",
    "css",
    "png", "jpg", "jpeg", "gif", "svg", "webp", "avif", "ico",
    "woff", "woff2", "ttf", "otf", "eot",
})

CACHE_CONTROL = {
    CacheTier.IMMUTABLE: "public, max-age=31536000, immutable",
    CacheTier.OPTIMIZED: "public, max-age=86400",
    CacheTier.DISABLED: "no-cache, no-store, must-revalidate",
}


def document_tier(is_spa: bool) -> CacheTier:
    # SPA documents must never be stale, a deploy replaces the whole app shell
    return CacheTier.DISABLED if is_spa else CacheTier.OPTIMIZED


def classify(path: str, is_spa: bool) -> CacheTier:
    # Case-sensitive, like the CloudFront path patterns and deployment filters
    extension = posixpath.splitext(path)[1].lstrip(".")
    if extension in STATIC_ASSET_EXTENSIONS:
        return CacheTier.IMMUTABLE
    return document_tier(is_spa)


def asset_path_patterns() -> List[str]:
    return [f"*.{extension}" for extension in sorted(STATIC_ASSET_EXTENSIONS)]
