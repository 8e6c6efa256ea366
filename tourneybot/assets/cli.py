"""Command-line entrypoint for hashing published assets."""

from __future__ import annotations

import argparse
from pathlib import Path

from .hashing import MissingAssetError, hash_assets


def main(argv: list[str] | None = None) -> int:
    """Hash the built assets in a publish directory and rewrite its HTML.

    Parameters
    ----------
    argv : list[str] | None, optional
        Command-line arguments. ``None`` defaults to ``sys.argv``.

    Returns
    -------
    int
        Exit code: 0 on success, 1 when build assets are missing.

    """
    parser = argparse.ArgumentParser(description=main.__doc__)
    parser.add_argument(
        "publish_dir", type=Path, help="Directory holding the published site"
    )
    args = parser.parse_args(argv)

    publish_dir: Path = args.publish_dir
    try:
        hashed = hash_assets(publish_dir)
    except MissingAssetError as exc:
        print(f"Could not hash assets in {publish_dir}:")
        for path in exc.missing:
            print(f"  - missing {path}")
        return 1

    for asset in hashed:
        print(f"{publish_dir / asset.original} → {publish_dir / asset.hashed}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
