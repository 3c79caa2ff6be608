from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Failure:
    """One unit (day, event or musician) that could not be produced."""
    unit: str
    key: str
    reason: str
    day: Optional[str] = None

    def to_dict(self):
        return {"unit": self.unit, "key": self.key, "day": self.day, "reason": self.reason}


@dataclass
class DayMetrics:
    """Track scraping metrics for each calendar day."""
    label: str
    event_count: int = 0
    musician_count: int = 0
    errors: int = 0
    error_messages: list = field(default_factory=list)
    duration_ms: float = 0.0


@dataclass
class RunReport:
    """Outcome of one pipeline run: what was produced and what failed."""
    month: str
    schedule: dict = field(default_factory=dict)
    days: dict = field(default_factory=dict)
    failures: list = field(default_factory=list)
    calendar_cached: bool = False
    fetch_count: int = 0
    written_paths: list = field(default_factory=list)

    def day_metrics(self, label):
        if label not in self.days:
            self.days[label] = DayMetrics(label=label)
        return self.days[label]

    def add_failures(self, failures):
        """Record failures and charge each one to its day, when it has one."""
        for failure in failures:
            self.failures.append(failure)
            if failure.day is None:
                continue
            metrics = self.day_metrics(failure.day)
            metrics.errors += 1
            metrics.error_messages.append(failure.reason)

    @property
    def event_count(self):
        return sum(len(events) for events in self.schedule.values())

    @property
    def failed_days(self):
        return [label for label, m in self.days.items() if m.errors]

    @property
    def succeeded_days(self):
        return [label for label, m in self.days.items() if not m.errors]

    @property
    def ok(self):
        return not self.failures
