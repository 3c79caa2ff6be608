"""Data models for the Smalls calendar scrape."""

import json
from dataclasses import dataclass, field
from urllib.parse import urljoin


@dataclass
class Musician:
    """One performer block from an event detail page."""

    name: str
    instrument: str
    biography: str

    def to_dict(self) -> dict:
        return {"Name": self.name, "Instrument": self.instrument, "Bio": self.biography}

    def __str__(self):
        return f"{self.name} - {self.instrument} - {self.biography}"


@dataclass
class Event:
    """
    A single set on the calendar.

    time is kept exactly as scraped (e.g. "7:30 PM - 9:30 PM").
    url is the relative detail page link and is never empty.
    """

    name: str
    time: str
    url: str
    musicians: list[Musician] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert event to the persisted JSON shape."""
        return {
            "Name": self.name,
            "Time": self.time,
            "Url": self.url,
            "Musicians": [m.to_dict() for m in self.musicians],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    def detail_url(self, base_url: str) -> str:
        """Absolute URL of the event detail page."""
        return urljoin(base_url, self.url)

    def __str__(self):
        return self.to_json()
