"""Render the stored photo dump of an event to a PNG file.

Usage (from backend/):
    python -m scripts.render_dump <event_id> --out dump.png [--width 1080] [--db path/to/daylog.db]
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from db import SessionLocal, init_db, make_session_factory
from domain.models import RenderContext
from repositories import SqlDumpStore
from services.render_image import render_dump_png
from settings import settings

LOG = logging.getLogger("render_dump")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Render an event's photo dump to PNG")
    parser.add_argument("event_id")
    parser.add_argument("--out", default=None, help="Output path (default: dump_<event_id>.png)")
    parser.add_argument("--width", type=int, default=settings.RENDER_WIDTH)
    parser.add_argument("--db", default=None, help="SQLite file (default: DAYLOG_DB_PATH)")
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")

    if args.db:
        session_factory = make_session_factory(f"sqlite:///{args.db}")
    else:
        init_db()
        session_factory = SessionLocal
    store = SqlDumpStore(session_factory)
    dump = store.get_dump(args.event_id)
    if dump is None:
        LOG.error("No dump stored for event %s", args.event_id)
        return 1

    out = Path(args.out or f"dump_{args.event_id}.png")
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(render_dump_png(dump, RenderContext(canvas_width_px=args.width)))
    LOG.info("Wrote %s (%s, %d photos)", out, dump.layout.value, len(dump.photos))
    return 0


if __name__ == "__main__":
    sys.exit(main())
