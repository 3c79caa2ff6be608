import json
import re
from pathlib import Path

import pytest

responses = pytest.importorskip("responses")

from smalls import config
from smalls.pipeline.run import run_pipeline
from smalls.utils.events import cache_key

FIXTURES = Path(__file__).resolve().parents[1] / "fixtures"
DETAIL_URL = re.compile(r"https://www\.smallslive\.com/events/\d+-[\w-]+/")


def quiet(*_):
    pass


def register_site(rsps, detail_status=200):
    rsps.add(rsps.GET, config.CALENDAR_URL, body=(FIXTURES / "calendar.html").read_text(), status=200)
    rsps.add(rsps.GET, DETAIL_URL, body=(FIXTURES / "event_detail.html").read_text(), status=detail_status)


def test_pipeline_scrapes_enriches_and_persists(tmp_path):
    settings = config.Settings.from_env(month="November", cache_dir=tmp_path)

    with responses.RequestsMock() as rsps:
        register_site(rsps)
        report = run_pipeline(settings, log_func=quiet)
        fetched_urls = [call.request.url for call in rsps.calls]

    assert report.ok
    assert report.fetch_count == 7
    assert fetched_urls[0] == config.CALENDAR_URL
    assert "https://www.smallslive.com/events/8001-ari-hoenig-trio/" in fetched_urls
    assert report.event_count == 6
    assert report.succeeded_days == ["Friday 11/16/2018", "Saturday 11/17/2018", "Sunday 11/18/2018"]

    assert (settings.html_cache_dir / "November.html").exists()
    key = cache_key("Friday 11/16/2018", "7:30 PM - 9:30 PM")
    assert (settings.html_cache_dir / f"{key}.html").exists()

    friday = json.loads((settings.json_cache_dir / "11-16-2018_friday.json").read_text())
    assert [e["Name"] for e in friday] == ["Ari Hoenig Trio", "Jason Lindner Quartet", "After Hours Jam Session"]
    assert friday[0]["Time"] == "7:30 PM - 9:30 PM"
    assert friday[0]["Url"] == "/events/8001-ari-hoenig-trio/"
    assert friday[0]["Musicians"][0] == {
        "Name": "Ari Hoenig",
        "Instrument": "Drums",
        "Bio": "Ari Hoenig is a drummer and composer based in New York.",
    }
    assert (settings.json_cache_dir / "11-18-2018_sunday.json").exists()


def test_second_run_makes_no_requests(tmp_path):
    settings = config.Settings.from_env(month="November", cache_dir=tmp_path)

    with responses.RequestsMock() as rsps:
        register_site(rsps)
        run_pipeline(settings, log_func=quiet)

    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        report = run_pipeline(settings, log_func=quiet)
        assert len(rsps.calls) == 0

    assert report.ok
    assert report.calendar_cached is True
    assert report.fetch_count == 0
    assert report.event_count == 6
    assert all(len(e.musicians) == 3 for events in report.schedule.values() for e in events)


def test_failed_detail_fetch_only_fails_that_event(tmp_path):
    settings = config.Settings.from_env(month="November", cache_dir=tmp_path)
    broken_url = "https://www.smallslive.com/events/8002-jason-lindner-quartet/"

    with responses.RequestsMock() as rsps:
        rsps.add(rsps.GET, broken_url, status=500)
        register_site(rsps)
        report = run_pipeline(settings, log_func=quiet)

    assert not report.ok
    assert [f.unit for f in report.failures] == ["event"]
    assert report.failures[0].day == "Friday 11/16/2018"
    assert "Jason Lindner Quartet" in report.failures[0].reason
    assert report.failed_days == ["Friday 11/16/2018"]

    friday = report.schedule["Friday 11/16/2018"]
    assert [len(e.musicians) for e in friday] == [3, 0, 3]
    assert len(report.written_paths) == 3

    key = cache_key("Friday 11/16/2018", "10:00 PM - 12:30 AM")
    assert not (settings.html_cache_dir / f"{key}.html").exists()


def test_unreadable_cached_page_only_fails_that_event(tmp_path):
    settings = config.Settings.from_env(month="November", cache_dir=tmp_path)
    key = cache_key("Friday 11/16/2018", "7:30 PM - 9:30 PM")
    (settings.html_cache_dir / f"{key}.html").mkdir(parents=True)

    with responses.RequestsMock() as rsps:
        register_site(rsps)
        report = run_pipeline(settings, log_func=quiet)
        fetched_urls = [call.request.url for call in rsps.calls]

    assert [f.unit for f in report.failures] == ["event"]
    assert report.failures[0].key == key
    assert "Ari Hoenig Trio" in report.failures[0].reason
    assert "https://www.smallslive.com/events/8001-ari-hoenig-trio/" not in fetched_urls

    friday = report.schedule["Friday 11/16/2018"]
    assert [len(e.musicians) for e in friday] == [0, 3, 3]
    assert report.succeeded_days == ["Saturday 11/17/2018", "Sunday 11/18/2018"]
    assert len(report.written_paths) == 3
