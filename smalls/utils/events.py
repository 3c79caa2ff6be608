import hashlib


def cache_key(date_label, time_text):
    """
    Content-addressable key for an event's detail page.
    Format: sha1 hex digest of "<date label> <time>", e.g.
    cache_key("Friday 11/16/2018", "7:30 PM - 9:30 PM").
    The same date and time always map to the same cached file across runs.
    """
    s = f"{date_label} {time_text}"
    return hashlib.sha1(s.encode("utf-8")).hexdigest()
