"""Run the absence sweep from cron.

SIGTERM/SIGINT stop the sweep between employees; running it again resumes
safely because already flagged days are skipped.
"""

from __future__ import annotations

import argparse
import importlib
import logging
import signal
import sys
import threading
from pathlib import Path

SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from dotenv import load_dotenv

from household_attendance.common.datetime_utils import parse_iso_date
from household_attendance.config import get_settings_module
from household_attendance.container import build_container


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Flag scheduled employees who did not clock in.")
    parser.add_argument("--date", help="Day to check (YYYY-MM-DD), defaults to today")
    args = parser.parse_args(argv)

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(
        level=getattr(logging, str(getattr(settings, "LOG_LEVEL", "INFO")).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    cancel = threading.Event()
    signal.signal(signal.SIGTERM, lambda *_: cancel.set())
    signal.signal(signal.SIGINT, lambda *_: cancel.set())

    container = build_container(settings=settings)
    report = container.absence_sweep.run(parse_iso_date(args.date) if args.date else None, cancel=cancel)
    print(report.to_dict())
    return 1 if report.errors or report.cancelled else 0


if __name__ == "__main__":
    sys.exit(main())
