from datetime import date, datetime, time, timedelta


def normalize_date(value):
    """Coerce a date-like value to a ``date``.

    Accepts dates, datetimes, ISO strings (date or datetime, optionally with a
    trailing ``Z``) and ``dd/mm/yyyy`` strings as typed into the item form.
    Anything else, including unparseable text, yields ``None``.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        value_text = value.strip()
        if not value_text:
            return None
        if "/" in value_text:
            parts = value_text.split("/")
            if len(parts) != 3:
                return None
            try:
                day, month, year = (int(part) for part in parts)
                return date(year, month, day)
            except ValueError:
                return None
        try:
            return date.fromisoformat(value_text)
        except ValueError:
            pass
        if value_text.endswith("Z"):
            value_text = value_text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(value_text).date()
        except ValueError:
            return None
    return None


def start_of_day(now=None):
    if now is None:
        now = datetime.now()
    return datetime.combine(now.date(), time.min, tzinfo=now.tzinfo)


def days_until(target, today=None):
    target = normalize_date(target)
    if target is None:
        return None
    if today is None:
        today = date.today()
    return (target - today).days


def end_of_day(value):
    value = normalize_date(value)
    if value is None:
        return None
    return datetime.combine(value + timedelta(days=1), time.min) - timedelta(microseconds=1)
