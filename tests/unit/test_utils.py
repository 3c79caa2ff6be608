import hashlib

import pytest

from smalls.models import Event, Musician
from smalls.utils.dates import day_filename
from smalls.utils.events import cache_key
from smalls.utils.html import attr, child_elements, first_child_text, first_text, nested_text, soupify


def test_day_filename():
    assert day_filename("Friday 11/16/2018") == "11-16-2018_friday"
    assert day_filename("SUNDAY 01/06/2019") == "01-06-2019_sunday"


def test_day_filename_rejects_unexpected_labels():
    with pytest.raises(ValueError):
        day_filename("")
    with pytest.raises(ValueError):
        day_filename("Friday, Nov 16 2018")


def test_cache_key_is_sha1_of_date_and_time():
    key = cache_key("Friday 11/16/2018", "7:30 PM - 9:30 PM")
    expected = hashlib.sha1("Friday 11/16/2018 7:30 PM - 9:30 PM".encode("utf-8")).hexdigest()
    assert key == expected
    assert len(key) == 40
    assert cache_key("Friday 11/16/2018", "7:30 PM - 9:30 PM") == key


def test_cache_key_differs_by_time_and_day():
    key = cache_key("Friday 11/16/2018", "7:30 PM - 9:30 PM")
    assert cache_key("Friday 11/16/2018", "10:00 PM - 12:30 AM") != key
    assert cache_key("Saturday 11/17/2018", "7:30 PM - 9:30 PM") != key


def test_first_text_is_verbatim_and_skips_blank_nodes():
    soup = soupify("<dt>\n  <span> 7:30 PM - 9:30 PM </span></dt>")
    assert first_text(soup.dt) == " 7:30 PM - 9:30 PM "
    assert first_text(soupify("<h2>  </h2>").h2) is None
    assert first_text(None) is None


def test_first_child_text_requires_text_first():
    assert first_child_text(soupify("<p>Piano<br>more</p>").p) == "Piano"
    assert first_child_text(soupify("<p><em>Piano</em></p>").p) is None
    assert first_child_text(soupify("<p></p>").p) is None


def test_nested_text_two_levels():
    soup = soupify('<h2 class="t">\n  <a href="/artists/1/">Ari Hoenig</a>\n</h2>')
    assert nested_text(soup.h2, levels=2) == "Ari Hoenig"
    assert nested_text(soupify("<h2>Ari Hoenig</h2>").h2, levels=2) is None
    assert nested_text(None) is None


def test_child_elements_and_attr():
    soup = soupify("<dl>\n<dt>7 PM</dt>\n<dd><a href=''>x</a></dd>\n</dl>")
    assert [n.name for n in child_elements(soup.dl)] == ["dt", "dd"]
    assert attr(soup.a, "href") is None
    assert attr(soup.a, "title") is None


def test_event_to_dict_shape():
    event = Event(name="Ari Hoenig Trio", time="7:30 PM - 9:30 PM", url="/events/8001/")
    event.musicians.append(Musician(name="Ari Hoenig", instrument="Drums", biography="Drummer."))
    assert event.to_dict() == {
        "Name": "Ari Hoenig Trio",
        "Time": "7:30 PM - 9:30 PM",
        "Url": "/events/8001/",
        "Musicians": [{"Name": "Ari Hoenig", "Instrument": "Drums", "Bio": "Drummer."}],
    }
    assert event.detail_url("https://www.smallslive.com") == "https://www.smallslive.com/events/8001/"


def test_musician_str():
    assert str(Musician("Ari Hoenig", "Drums", "Drummer.")) == "Ari Hoenig - Drums - Drummer."
