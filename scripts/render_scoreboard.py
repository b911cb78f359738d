# scripts/render_scoreboard.py
from __future__ import annotations

import argparse
from pathlib import Path

from remi.config import STORAGE_BUCKET, STORAGE_DIR
from remi.state_store import StateStore
from remi.storage import FileKeyValueStore
from render.renderer import ScoreboardRenderer


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--storage", type=str, default=str(STORAGE_DIR))
    ap.add_argument("--bucket", type=str, default=STORAGE_BUCKET)
    ap.add_argument("--match-id", type=int, default=None, help="History match id (default: active match)")
    ap.add_argument("--out", type=str, default="scoreboard.png")
    args = ap.parse_args()

    store = StateStore(FileKeyValueStore(Path(args.storage), args.bucket))

    if args.match_id is None:
        match = store.state.active_match
        if match is None:
            raise SystemExit("ERROR: no active match, pass --match-id")
    else:
        match = store.get_match(args.match_id)
        if match is None:
            raise SystemExit(f"ERROR: match {args.match_id} not found in history")

    out_path = ScoreboardRenderer(match).save(Path(args.out))
    print(f"Saved scoreboard: {out_path}")


if __name__ == "__main__":
    main()
