"""
Calendar page parsing for smallslive.com.

The schedule section holds one div.day per night:

    <section class="schedule">
      <div class="day">
        <h2>Friday 11/16/2018</h2>
        <dl>
          <dt>7:30 PM - 9:30 PM</dt>
          <dd><a href="/events/1234-some-band/">Some Band</a></dd>
          ...
        </dl>
      </div>
    </section>
"""

from smalls import config
from smalls.errors import StructuralParseError
from smalls.models import Event
from smalls.pipeline.metrics import Failure
from smalls.utils.html import attr, child_elements, find_anchor, first_child_text, first_text


def parse_event_pair(time_node, detail_node, position=""):
    """
    Build one Event from a <dt>/<dd> pair.
    Raises StructuralParseError when the time, anchor, href or name is missing.
    position labels the pair in errors when it has no readable time.
    """
    time_text = first_text(time_node)
    if time_text is None:
        raise StructuralParseError("event", position or "?", "No time found for event")

    anchor = find_anchor(detail_node)
    if anchor is None:
        raise StructuralParseError("event", time_text, "No anchor found for event")

    name = first_child_text(anchor)
    if name is None:
        raise StructuralParseError("event", time_text, "No name found for event")

    href = attr(anchor, "href")
    if href is None:
        context = Event(name=name, time=time_text, url="").to_json()
        raise StructuralParseError("event", context, "No href found for event")

    return Event(name=name, time=time_text, url=href)


def parse_description_list(nodes, date_label="", log_func=None):
    """
    Chunk the element children of a <dl> into Events.
    Chunks consist of 2 consecutive elements, a <dt> and a <dd>:
    the <dt> holds the event time, e.g. 10:30 PM - 1:00 AM,
    the <dd> holds the event name and detail URL.
    Returns (events, failures). A trailing unpaired element is dropped with a warning.
    """
    log = log_func or print
    nodes = list(nodes)

    if len(nodes) % 2:
        log(f"  WARNING: {date_label or 'description list'} has {len(nodes)} items; "
            f"dropping unpaired trailing <{nodes[-1].name}>")
        nodes = nodes[:-1]

    events = []
    failures = []
    for i in range(0, len(nodes), 2):
        time_node, detail_node = nodes[i], nodes[i + 1]
        try:
            event = parse_event_pair(time_node, detail_node, position=f"{date_label} #{i // 2 + 1}".strip())
        except StructuralParseError as e:
            log(f"  ERROR: {e}")
            failures.append(Failure(unit="event", key=e.context, reason=str(e), day=date_label or None))
            continue
        log(f"  {event}")
        events.append(event)

    return events, failures


def parse_schedule(soup, log_func=None):
    """
    Parse every night on the calendar page.
    Returns (schedule, failures) where schedule maps date label -> [Event]
    in document order. A malformed day is skipped and reported, never stored empty.
    """
    log = log_func or print
    schedule = {}
    failures = []

    days = []
    section = soup.select_one(config.SCHEDULE_SELECTOR)
    if section is not None:
        days = section.find_all("div", class_=config.DAY_CLASS, recursive=False)
    log(f"Found {len(days)} nights with events")

    for index, day in enumerate(days, start=1):
        date_label = first_text(day.find("h2"))
        if date_label is None:
            reason = f"Day section #{index} has no heading"
            log(f"  ERROR: {reason}")
            failures.append(Failure(unit="day", key=f"#{index}", reason=reason))
            continue

        if date_label in schedule:
            reason = f"Duplicate day heading {date_label!r} in section #{index}"
            log(f"  ERROR: {reason}")
            failures.append(Failure(unit="day", key=date_label, reason=reason, day=date_label))
            continue

        dl = day.find("dl")
        if dl is None:
            reason = f"Day {date_label!r} has no description list"
            log(f"  ERROR: {reason}")
            failures.append(Failure(unit="day", key=date_label, reason=reason, day=date_label))
            continue

        log(date_label)
        events, event_failures = parse_description_list(child_elements(dl), date_label, log_func=log)
        schedule[date_label] = events
        failures.extend(event_failures)

    return schedule, failures
