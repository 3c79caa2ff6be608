from functools import partial

from smalls.calendar import parse_schedule
from smalls.enrich import enrich_schedule
from smalls.errors import CacheIOError
from smalls.pipeline.cache import HtmlCache
from smalls.pipeline.fetch import fetch
from smalls.pipeline.io import persist_schedule
from smalls.pipeline.metrics import RunReport
from smalls.utils.html import soupify


def prepare_cache_dirs(settings):
    """Create both cache roots. Any failure here aborts the run."""
    store = HtmlCache(settings.html_cache_dir)
    store.ensure_root()
    try:
        settings.json_cache_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise CacheIOError(settings.json_cache_dir, str(e)) from e
    return store


def load_calendar(settings, store, fetcher, report, log_func=None):
    """Return the parsed calendar page, cached as <month>.html."""
    log = log_func or print
    stem = settings.calendar_cache_stem
    if store.exists(store.path_for(stem)):
        log("Schedule is cached. Loading from file...")
    else:
        log(f"Schedule is not cached. Loading from: {settings.calendar_url}")

    html, hit = store.fetch_through(stem, settings.calendar_url, fetcher)
    report.calendar_cached = hit
    if not hit:
        report.fetch_count += 1
    return soupify(html)


def run_pipeline(settings, fetcher=None, store=None, log_func=None):
    """
    Scrape the calendar for settings.month, enrich every event and persist each day.

    Calendar fetch and cache-directory problems raise (FetchError/CacheIOError);
    everything below that is collected on the returned RunReport.
    """
    log = log_func or print
    fetcher = fetcher or partial(fetch, timeout=settings.request_timeout)
    store = store or prepare_cache_dirs(settings)
    report = RunReport(month=settings.month)

    doc = load_calendar(settings, store, fetcher, report, log_func=log)

    schedule, failures = parse_schedule(doc, log_func=log)
    report.schedule = schedule
    for label, events in schedule.items():
        report.day_metrics(label).event_count = len(events)
    report.add_failures(failures)

    log("\nEnriching events with musician data...")
    report.add_failures(enrich_schedule(schedule, settings, store, fetcher, report=report, log_func=log))

    log("\nSaving days...")
    written, failures = persist_schedule(schedule, settings.json_cache_dir, log_func=log)
    report.written_paths = written
    report.add_failures(failures)

    return report
