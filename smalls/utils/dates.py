def day_filename(date_label):
    """
    Canonical filename stem for a day's JSON output.
    Handles: "Friday 11/16/2018" -> "11-16-2018_friday"
    Raises ValueError for labels not shaped "<Weekday> <MM/DD/YYYY>".
    """
    if not date_label:
        raise ValueError("Empty date label")

    parts = date_label.split()
    if len(parts) != 2:
        raise ValueError(f"Unexpected date label: {date_label!r}")

    weekday, date = parts
    return f"{date.replace('/', '-')}_{weekday}".lower()
