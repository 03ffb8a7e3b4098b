"""Tests for the system clock."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from dish_of_the_day.adapters.clock import SystemClock


def test_today_uses_local_date_by_default() -> None:
    before = date.today().isoformat()
    today = SystemClock().today()
    after = date.today().isoformat()

    assert today in {before, after}


def test_today_uses_configured_timezone() -> None:
    tz = ZoneInfo("Pacific/Kiritimati")
    before = datetime.now(tz=tz).date().isoformat()
    today = SystemClock("Pacific/Kiritimati").today()
    after = datetime.now(tz=tz).date().isoformat()

    assert today in {before, after}


def test_today_is_sortable_iso_date() -> None:
    value = SystemClock().today()

    assert date.fromisoformat(value).isoformat() == value
