"""Run one attendance issue sweep; meant to be invoked from cron.

Example crontab entry (every 15 minutes)::

    */15 * * * * cd /srv/punctuality && python scripts/run_sweep.py
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from punctuality_engine.common.datetime_utils import now_local
from punctuality_engine.container import build_container
from punctuality_engine.main import load_settings

logger = logging.getLogger("run_sweep")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Detect missing check-ins and create attendance issues.")
    parser.add_argument("--as-of", help="Local timestamp YYYY-MM-DDTHH:MM (defaults to now)")
    args = parser.parse_args(argv)

    settings = load_settings()
    as_of = datetime.fromisoformat(args.as_of) if args.as_of else now_local()

    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        slack_timeout=float(getattr(settings, "SLACK_TIMEOUT_SECONDS", 10)),
        slack_username=getattr(settings, "SLACK_USERNAME", None),
    )
    created = container.issue_detector.sweep(as_of)
    for issue in created:
        logger.info("Created %s issue for user %s on %s", issue.issue_type.value, issue.user_id, issue.issue_date)
    return 0


if __name__ == "__main__":
    sys.exit(main())
