"""Run one automatic clock-out pass.

Meant for cron, e.g. ``59 23 * * * cd /srv/timeclock && python scripts/run_auto_clock_out.py``.
``--time HH:MM`` overrides the configured cutoff for this run.
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.timeclock.timeclock.container import build_container


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--time", dest="cutoff", help="cutoff time HH:MM (24-hour)")
    args = parser.parse_args()

    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        auto_clock_out=getattr(settings, "AUTO_CLOCK_OUT", {}),
        leave=getattr(settings, "LEAVE", {}),
    )

    result = container.auto_clock_out.run_once(cutoff=args.cutoff)
    if not result.enabled:
        print("Auto clock-out is disabled in configuration")
        return 0

    print(f"OK: auto-clocked out {result.closed_count} session(s)")
    for s in result.closed_sessions:
        print(f"  employee={s.employee_id} in={s.clock_in_time:%Y-%m-%d %H:%M} out={s.clock_out_time:%Y-%m-%d %H:%M}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
