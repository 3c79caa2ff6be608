import json
import re
from datetime import datetime, timedelta
from pathlib import Path

from smalls.errors import CacheIOError
from smalls.pipeline.cache import replace_atomic
from smalls.pipeline.metrics import Failure
from smalls.utils.dates import day_filename


def trim_log_by_time(log_path, retention_days=14):
    """
    Remove log entries older than retention_days.
    Returns list of lines to keep.
    """
    log_path = Path(log_path)
    if not log_path.exists():
        return []

    cutoff = datetime.utcnow() - timedelta(days=retention_days)
    cutoff_str = cutoff.strftime("%Y-%m-%d %H:%M:%S")

    kept_lines = []
    current_entry_recent = False

    with open(log_path, "r") as f:
        for line in f:
            match = re.match(r"\[(\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2})\]", line)
            if match:
                current_entry_recent = match.group(1) >= cutoff_str

            if current_entry_recent:
                kept_lines.append(line)

    return kept_lines


def save_run_log(log_path, log_lines, retention_days=14):
    """Append this run's entries to the log file, dropping expired ones."""
    log_path = Path(log_path)
    existing_log = trim_log_by_time(log_path, retention_days=retention_days)
    log_content = existing_log + ["\n--- New Run ---\n"] + [line + "\n" for line in log_lines]

    log_path.parent.mkdir(parents=True, exist_ok=True)
    with open(log_path, "w") as f:
        f.writelines(log_content)


def day_json_path(json_cache_dir, date_label):
    return Path(json_cache_dir) / f"{day_filename(date_label)}.json"


def save_day_events(json_cache_dir, date_label, events):
    """
    Write one day's events as a JSON array to <MM-DD-YYYY>_<weekday>.json.
    The file is replaced atomically; it is derived from the cached pages.
    """
    path = day_json_path(json_cache_dir, date_label)
    data = json.dumps([e.to_dict() for e in events], indent=2).encode("utf-8")
    try:
        replace_atomic(path, data)
    except OSError as e:
        raise CacheIOError(path, str(e)) from e
    return path


def persist_schedule(schedule, json_cache_dir, log_func=None):
    """
    Write every day of the schedule independently.
    Returns (written_paths, failures); one bad day never blocks the others.
    """
    log = log_func or print
    Path(json_cache_dir).mkdir(parents=True, exist_ok=True)

    written = []
    failures = []
    for date_label, events in schedule.items():
        try:
            path = save_day_events(json_cache_dir, date_label, events)
        except (ValueError, CacheIOError) as e:
            log(f"  ERROR: Could not save {date_label}: {e}")
            failures.append(Failure(unit="day", key=date_label, reason=str(e), day=date_label))
            continue
        written.append(path)
        log(f"  Saved {len(events)} events to {path.name}")

    return written, failures


def save_status(status_path, report, run_timestamp):
    """Save the run status file next to the caches."""
    status_data = {
        "last_run": run_timestamp,
        "month": report.month,
        "all_success": report.ok,
        "calendar_cached": report.calendar_cached,
        "fetch_count": report.fetch_count,
        "total_events": report.event_count,
        "days": {
            label: {
                "success": not m.errors,
                "event_count": m.event_count,
                "musician_count": m.musician_count,
                "errors": m.error_messages,
            }
            for label, m in report.days.items()
        },
        "failures": [f.to_dict() for f in report.failures],
    }

    status_path = Path(status_path)
    status_path.parent.mkdir(parents=True, exist_ok=True)
    with open(status_path, "w") as f:
        json.dump(status_data, f, indent=2)
    return status_data
