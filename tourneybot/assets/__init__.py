"""Build-time cache-busting for the published TourneyBot site."""

from __future__ import annotations

from .hashing import (
    DEFAULT_MANIFEST,
    AssetSpec,
    HashedAsset,
    MissingAssetError,
    hash_assets,
    hashed_name,
    preflight_check,
    short_digest,
)

__all__ = [
    "DEFAULT_MANIFEST",
    "AssetSpec",
    "HashedAsset",
    "MissingAssetError",
    "hash_assets",
    "hashed_name",
    "preflight_check",
    "short_digest",
]
