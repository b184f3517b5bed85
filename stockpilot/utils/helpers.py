# utils/helpers.py
from datetime import date, datetime, timedelta
import logging
import uuid
from typing import Union, Optional

NumberLike = Union[float, int, str]

_log = logging.getLogger(__name__)


def now_iso() -> str:
    """Local wall-clock timestamp, ISO 8601 with seconds."""
    return datetime.now().isoformat(timespec="seconds")


def new_id() -> str:
    """
    Opaque record id: a sortable timestamp prefix plus a short random suffix so
    two records created within the same millisecond never collide.
    """
    return f"{datetime.now().strftime('%Y%m%d%H%M%S%f')}-{uuid.uuid4().hex[:6]}"


def parse_dt(value: Union[str, datetime, date]) -> datetime:
    """
    Parse a stored ISO timestamp into a naive local datetime.

    Accepts plain dates ('2024-05-01'), naive timestamps and the UTC 'Z'
    timestamps written by the browser build of the app.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        dt = datetime.fromisoformat(text)
    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)
    return dt


def as_date(value: Union[str, datetime, date]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_dt(value).date()


def add_days(value: Union[str, datetime], days: int) -> str:
    """Shift an ISO timestamp by whole days, keeping the ISO form."""
    return (parse_dt(value) + timedelta(days=days)).isoformat(timespec="seconds")


def fmt_date(value: Union[str, datetime, date, None]) -> str:
    if value in (None, ""):
        return ""
    try:
        return as_date(value).strftime("%d/%m/%Y")
    except ValueError:
        return str(value)


def money(v: NumberLike) -> float:
    """Round to cents."""
    return round(float(v), 2)


def fmt_money(
    v: NumberLike,
    places: int = 2,
    *,
    strict: bool = False,
    sentinel: Optional[str] = None,
) -> str:
    """
    Format a number as money with thousands separators and a fixed number of decimals.

    Behavior on parse failure:
      - By default (strict=False, sentinel=None), returns str(v).
      - If `sentinel` is provided (e.g., "N/A"), returns that sentinel instead.
      - If `strict=True`, raises ValueError on parse failures.
    """
    try:
        x = float(v)
    except (TypeError, ValueError) as e:
        _log.debug("fmt_money: failed to parse %r as float: %s", v, e)
        if strict:
            raise ValueError(f"Could not parse {v!r} as a number.") from e
        return str(sentinel) if sentinel is not None else str(v)
    return f"{x:,.{places}f}"
