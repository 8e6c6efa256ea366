"""Content-hash published assets and rewrite their HTML references.

A build copies the site into a publish directory; this module then renames
each compiled asset to include the first eight hex characters of its MD5
digest (``css/admin.min.css`` becomes ``css/admin.min.1a2b3c4d.css``) and
replaces references to the old file name in the HTML pages that load it.
"""

from __future__ import annotations

import dataclasses as dc
import hashlib
import typing as typ
from pathlib import PurePosixPath

if typ.TYPE_CHECKING:
    from pathlib import Path

HASH_LENGTH = 8


@dc.dataclass(frozen=True, slots=True)
class AssetSpec:
    """One asset to hash and the pages that reference it.

    Attributes
    ----------
    path
        Asset path relative to the publish directory, POSIX separators.
    html_files
        HTML pages, relative to the publish directory, whose references to
        the asset's file name are rewritten.

    """

    path: str
    html_files: tuple[str, ...]


@dc.dataclass(frozen=True, slots=True)
class HashedAsset:
    """Result of hashing one asset."""

    original: str
    hashed: str
    digest: str


DEFAULT_MANIFEST: tuple[AssetSpec, ...] = (
    AssetSpec("css/admin.min.css", ("admin/index.html",)),
    AssetSpec("css/client.min.css", ("index.html",)),
    AssetSpec("js/admin.min.js", ("admin/index.html",)),
    AssetSpec("js/client.min.js", ("index.html",)),
)


class MissingAssetError(FileNotFoundError):
    """Raised when expected build outputs or pages are absent."""

    def __init__(self, missing: list[str]) -> None:
        """Record every missing path."""
        self.missing = missing
        super().__init__(f"missing build assets: {', '.join(missing)}")


def short_digest(content: bytes) -> str:
    """Return the first ``HASH_LENGTH`` hex characters of the MD5 of *content*."""
    return hashlib.md5(content, usedforsecurity=False).hexdigest()[:HASH_LENGTH]


def hashed_name(path: str, digest: str) -> str:
    """Insert *digest* before the final suffix of *path*.

    Examples
    --------
    >>> hashed_name("js/client.min.js", "deadbeef")
    'js/client.min.deadbeef.js'

    """
    posix = PurePosixPath(path)
    return str(posix.with_name(f"{posix.stem}.{digest}{posix.suffix}"))


def preflight_check(root: Path, paths: typ.Iterable[str]) -> None:
    """Ensure every file in *paths* exists under *root*.

    Raises
    ------
    MissingAssetError
        Listing all missing files, not only the first.

    """
    missing = [path for path in paths if not (root / path).is_file()]
    if missing:
        raise MissingAssetError(missing)


def _rewrite_references(root: Path, renames: dict[str, list[tuple[str, str]]]) -> None:
    for html_file, replacements in renames.items():
        page = root / html_file
        contents = page.read_text(encoding="utf-8")
        for old_name, new_name in replacements:
            contents = contents.replace(old_name, new_name)
        page.write_text(contents, encoding="utf-8")


def hash_assets(
    root: Path,
    manifest: typ.Sequence[AssetSpec] = DEFAULT_MANIFEST,
) -> list[HashedAsset]:
    """Rename every manifest asset to its hashed name and update HTML.

    Parameters
    ----------
    root
        Publish directory containing the assets and HTML pages.
    manifest
        Assets to process; defaults to the admin and client bundles.

    Returns
    -------
    list[HashedAsset]
        One entry per asset, in manifest order.

    Raises
    ------
    MissingAssetError
        If any asset or HTML page is missing; nothing is renamed in that
        case.

    """
    pages = dict.fromkeys(page for spec in manifest for page in spec.html_files)
    preflight_check(root, [*(spec.path for spec in manifest), *pages])

    results: list[HashedAsset] = []
    renames: dict[str, list[tuple[str, str]]] = {}
    for spec in manifest:
        source = root / spec.path
        digest = short_digest(source.read_bytes())
        target = hashed_name(spec.path, digest)
        source.rename(root / target)
        results.append(HashedAsset(original=spec.path, hashed=target, digest=digest))

        old_name = PurePosixPath(spec.path).name
        new_name = PurePosixPath(target).name
        for html_file in spec.html_files:
            renames.setdefault(html_file, []).append((old_name, new_name))

    _rewrite_references(root, renames)
    return results


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
