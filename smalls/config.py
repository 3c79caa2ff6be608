import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

REPO_ROOT = Path(__file__).resolve().parents[1]
CACHE_DIR = Path(os.environ.get("SMALLS_CACHE_DIR", REPO_ROOT / "cache"))
HTML_CACHE_DIR = Path(os.environ.get("SMALLS_HTML_CACHE_DIR", CACHE_DIR / "html"))
JSON_CACHE_DIR = Path(os.environ.get("SMALLS_JSON_CACHE_DIR", CACHE_DIR / "json"))
STATUS_PATH = Path(os.environ.get("SMALLS_STATUS_PATH", CACHE_DIR / "scrape-status.json"))
LOG_PATH = Path(os.environ.get("SMALLS_LOG_PATH", CACHE_DIR / "scrape-log.txt"))

LOG_RETENTION_DAYS = int(os.environ.get("LOG_RETENTION_DAYS", "14"))

BASE_URL = "https://www.smallslive.com"
CALENDAR_URL = f"{BASE_URL}/events/calendar/"

REQUEST_TIMEOUT = float(os.environ.get("REQUEST_TIMEOUT", "30"))
REQUEST_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Connection": "keep-alive",
}

# Markup hooks on smallslive.com
SCHEDULE_SELECTOR = "section.schedule"
DAY_CLASS = "day"
ARTIST_INFO_SELECTOR = "div.mini-artist-info"
ARTIST_TITLE_SELECTOR = "h2.mini-artist-info__title"
ARTIST_INSTRUMENT_SELECTOR = "p.mini-artist-info__instrument"
ARTIST_BIO_SELECTOR = "p.mini-artist-info__bio"


@dataclass(frozen=True)
class Settings:
    """Everything a run needs, resolved once and passed down explicitly."""
    html_cache_dir: Path
    json_cache_dir: Path
    month: str
    base_url: str = BASE_URL
    calendar_url: str = CALENDAR_URL
    request_timeout: float = REQUEST_TIMEOUT
    status_path: Path = STATUS_PATH
    log_path: Path = LOG_PATH

    @classmethod
    def from_env(cls, month=None, cache_dir=None):
        """
        Build settings from the module defaults.
        month defaults to the current month name (e.g. "November").
        cache_dir, when given, re-roots both cache directories and the status/log files.
        """
        month = month or datetime.now().strftime("%B")
        if cache_dir is not None:
            root = Path(cache_dir)
            return cls(
                html_cache_dir=root / "html",
                json_cache_dir=root / "json",
                month=month,
                status_path=root / "scrape-status.json",
                log_path=root / "scrape-log.txt",
            )
        return cls(html_cache_dir=HTML_CACHE_DIR, json_cache_dir=JSON_CACHE_DIR, month=month)

    @property
    def calendar_cache_stem(self):
        return self.month
