#!/usr/bin/env python3
"""
Scrape the Smalls Jazz Club calendar (smallslive.com) and save each night
as JSON, with every set's musicians pulled from its detail page.

Raw pages are cached under cache/html and per-day JSON under cache/json, so
a second run against the same calendar makes no network requests.

Usage:
    python scrape.py                        # Current month
    python scrape.py --month November       # Reuse/fetch the November calendar
    python scrape.py --cache-dir /tmp/smalls
    python scrape.py --refresh-calendar     # Re-download this month's calendar page
"""

import argparse
import sys
import traceback
from datetime import datetime

from smalls import config
from smalls.errors import ScrapeError
from smalls.pipeline.io import save_run_log, save_status
from smalls.pipeline.run import prepare_cache_dirs, run_pipeline


def log_summary(report, log):
    """Log the per-day summary table."""
    log("")
    log("=" * 60)
    log("DAY SUMMARY")
    log("=" * 60)
    log(f"{'Day':<24} {'Events':>7} {'Artists':>8} {'Errors':>7} {'Time':>9}")
    log("-" * 60)
    for label, m in report.days.items():
        time_str = f"{m.duration_ms:.0f}ms"
        log(f"{label:<24} {m.event_count:>7} {m.musician_count:>8} {m.errors:>7} {time_str:>9}")
    log("-" * 60)
    total_musicians = sum(m.musician_count for m in report.days.values())
    total_errors = sum(m.errors for m in report.days.values())
    log(f"{'TOTAL':<24} {report.event_count:>7} {total_musicians:>8} {total_errors:>7}")
    log("=" * 60)

    log(f"\nDays saved: {len(report.written_paths)} of {len(report.schedule)}")
    log(f"Pages fetched this run: {report.fetch_count}")

    if report.failures:
        log(f"WARNING: {len(report.failures)} failures", "ERROR")
        for failure in report.failures:
            log(f"  [{failure.unit}] {failure.key}: {failure.reason}", "ERROR")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Scrape the Smalls Jazz Club calendar")
    parser.add_argument(
        "--month",
        type=str,
        help="Month name used for the cached calendar page (default: current month)",
    )
    parser.add_argument(
        "--cache-dir",
        type=str,
        help=f"Root directory for html/json caches (default: {config.CACHE_DIR})",
    )
    parser.add_argument(
        "--refresh-calendar",
        action="store_true",
        help="Discard the cached calendar page before scraping",
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    settings = config.Settings.from_env(month=args.month, cache_dir=args.cache_dir)
    run_timestamp = datetime.utcnow().isoformat() + "Z"
    log_lines = []  # Collect log entries

    def log(message, level="INFO"):
        """Log a message to both console and log buffer."""
        timestamp = datetime.utcnow().strftime("%Y-%m-%d %H:%M:%S")
        log_entry = f"[{timestamp}] [{level}] {message}"
        print(message)
        log_lines.append(log_entry)

    log(f"Starting scrape run at {run_timestamp} ({settings.month})")

    exit_code = 0
    try:
        store = prepare_cache_dirs(settings)
        if args.refresh_calendar and store.discard(settings.calendar_cache_stem):
            log(f"Discarded cached calendar for {settings.month}")
        report = run_pipeline(settings, store=store, log_func=log)
    except ScrapeError as e:
        log(f"ERROR: Run aborted: {e}", "ERROR")
        log(f"Traceback:\n{traceback.format_exc()}", "ERROR")
        exit_code = 2
    else:
        log_summary(report, log)
        save_status(settings.status_path, report, run_timestamp)
        log(f"Status saved to {settings.status_path}")
        exit_code = 0 if report.ok else 1

    try:
        save_run_log(settings.log_path, log_lines, retention_days=config.LOG_RETENTION_DAYS)
        print(f"Log saved to {settings.log_path}")
    except OSError as e:
        print(f"Warning: Could not save log: {e}")

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
