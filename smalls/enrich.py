"""
Performer enrichment from event detail pages.
"""

import time

from smalls import config
from smalls.errors import CacheIOError, FetchError, StructuralParseError
from smalls.models import Musician
from smalls.pipeline.metrics import Failure
from smalls.utils.events import cache_key
from smalls.utils.html import first_child_text, nested_text, soupify


def parse_musician(block):
    """
    Read one mini-artist-info block.
    Expects:
        <h2 class="mini-artist-info__title"><a href="...">Name</a></h2>
        <p class="mini-artist-info__instrument">Piano</p>
        <p class="mini-artist-info__bio">Bio text</p>
    Raises StructuralParseError naming the first missing piece.
    """
    name = nested_text(block.select_one(config.ARTIST_TITLE_SELECTOR), levels=2)
    if name is None:
        raise StructuralParseError("musician", "?", "No artist name found")

    instrument = first_child_text(block.select_one(config.ARTIST_INSTRUMENT_SELECTOR))
    if instrument is None:
        raise StructuralParseError("musician", name, "No instrument found")

    biography = first_child_text(block.select_one(config.ARTIST_BIO_SELECTOR))
    if biography is None:
        raise StructuralParseError("musician", name, "No bio found")

    return Musician(name=name, instrument=instrument, biography=biography)


def parse_musicians(soup):
    """
    Return (musicians, errors) for every artist-info block on a detail page,
    in page order. A broken block is reported and the rest are still read.
    """
    musicians = []
    errors = []
    for position, block in enumerate(soup.select(config.ARTIST_INFO_SELECTOR), start=1):
        try:
            musicians.append(parse_musician(block))
        except StructuralParseError as e:
            errors.append((position, e))
    return musicians, errors


def enrich_event(event, soup, event_key="", day=None, log_func=None):
    """
    Append the detail page's musicians to event, in page order.
    Returns failures for blocks that could not be read.
    """
    log = log_func or print
    musicians, errors = parse_musicians(soup)
    event.musicians.extend(musicians)

    failures = []
    for position, e in errors:
        reason = f"{event.name} ({event.time}) artist #{position}: {e}"
        log(f"  ERROR: {reason}")
        failures.append(Failure(unit="musician", key=f"{event_key}#{position}", reason=reason, day=day))

    log(f"  Found info for {len(musicians)} artists")
    return failures


def enrich_schedule(schedule, settings, store, fetcher, report=None, log_func=None):
    """
    Fetch (or reuse) each event's detail page and attach its musicians.
    Pages are cached as <sha1 of "date time">.html; a cached page is never refetched.
    A fetch, cache or markup problem fails only the event it belongs to.
    Returns the list of failures.
    """
    log = log_func or print
    counts = {
        "cache_hit": 0,
        "fetched": 0,
        "musicians": 0,
        "failed": 0,
    }
    failures = []

    for date_label, events in schedule.items():
        start_time = time.time()
        for event in events:
            key = cache_key(date_label, event.time)
            log(f"Fetching musicians for {date_label} {event.time}")
            try:
                html, hit = store.fetch_through(key, event.detail_url(settings.base_url), fetcher)
            except (FetchError, CacheIOError) as e:
                log(f"  ERROR: {e}")
                counts["failed"] += 1
                failures.append(Failure(unit="event", key=key, reason=f"{event.name} ({event.time}): {e}", day=date_label))
                continue

            counts["cache_hit" if hit else "fetched"] += 1
            event_failures = enrich_event(event, soupify(html), event_key=key, day=date_label, log_func=log)
            failures.extend(event_failures)
            counts["musicians"] += len(event.musicians)
            if report is not None:
                report.day_metrics(date_label).musician_count += len(event.musicians)
        if report is not None:
            report.day_metrics(date_label).duration_ms += (time.time() - start_time) * 1000

    if report is not None:
        report.fetch_count += counts["fetched"]

    log(
        f"  Detail pages: cache_hit={counts['cache_hit']} fetched={counts['fetched']} "
        f"musicians={counts['musicians']} failed={counts['failed']}"
    )
    return failures
