# src/pulse_stage/scripts/decay_reputation.py
"""
Run reputation decay cycles outside the API process.

Meant for deployments that disable the in-process scheduler
(``REPUTATION_DECAY_ENABLED=false``) and drive decay from cron instead.
"""

from __future__ import annotations

import argparse
import logging

from pulse_stage.core.settings import settings
from pulse_stage.db.session import SessionLocal
from pulse_stage.services.reputation import apply_reputation_decay

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Apply reputation decay to every post.")
    parser.add_argument(
        "--cycles",
        type=int,
        default=1,
        help="Number of decay cycles to apply back to back (default: 1)",
    )
    return parser


def run(cycles: int = 1) -> int:
    """Apply ``cycles`` decay cycles; returns the rows touched by the last one."""
    updated = 0
    db = SessionLocal()
    try:
        for _ in range(max(1, cycles)):
            updated = apply_reputation_decay(db)
            logger.info("Decayed reputation of %d posts", updated)
    finally:
        db.close()
    return updated


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=settings.log_level.upper())
    run(args.cycles)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
