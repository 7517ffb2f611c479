from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence, Tuple

import pandas as pd

from ..config import load_settings
from ..exceptions import ConfigError
from .storage import SqlDocumentStore


def fetch_store_stats(store: SqlDocumentStore) -> Tuple[int, pd.DataFrame]:
    """Return total document count and per-city stats."""
    rows = store.count_by_partition()
    df = pd.DataFrame(rows, columns=["city", "documents", "first_created", "last_created"])
    total = int(df["documents"].sum()) if not df.empty else 0
    return total, df


def latest_conditions(store: SqlDocumentStore, city: str) -> Optional[dict]:
    """Most recent stored document for a city, or None."""
    items = store.read_items(city)
    return items[-1] if items else None


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Verify stored city weather documents (counts and write ranges)")
    p.add_argument("--city", default="", help="Optional city to show the latest stored conditions for")
    return p.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    try:
        settings = load_settings()
    except ConfigError as e:
        print(str(e), file=sys.stderr)
        return 2
    store = SqlDocumentStore.from_settings(settings)

    try:
        total, stats = fetch_store_stats(store)
        print(f"Total documents: {total}")
        if stats.empty:
            print("No documents found.")
        else:
            with pd.option_context("display.max_rows", None, "display.width", 120):
                print(stats.to_string(index=False))

        if args.city:
            doc = latest_conditions(store, args.city)
            if doc is None:
                print(f"No documents for {args.city}.")
            else:
                cur = doc["current"]
                print(
                    f"{args.city} @ {doc['location']['localtime']}: "
                    f"{cur['temp_c']}C, {cur['condition']['text']} (code {cur['condition']['code']})"
                )
    finally:
        store.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
