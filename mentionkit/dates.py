"""Parsing of date expressions into :class:`Period` values.

Single dates are handed to ``dateparser`` in the article language, which
understands written, numeric and relative forms ("14 mars dernier",
"lundi 14 mars 2015", "March 14, 2015"). Two dates joined by
``from/to``, ``between/and``, ``de/à``, ``entre/et`` or ``du/au`` form a
period, as do year ranges (``2010-2012``).

``dateparser`` always returns a complete datetime, filling whatever the
text omits from its relative base. The text is therefore parsed against
two unrelated bases: a component that changes with the base was not
written, and is left unknown (``0``) unless a reference date (usually the
article publishing date) is given to resolve it.

Anything else yields ``None``: the DATE mention stays valid, it just has
no value.
"""

import re
from datetime import datetime
from functools import lru_cache

from dateparser.date import DateDataParser
from dateparser.search import search_dates
from pydantic import ValidationError

from mentionschema import ArticleLanguage, PartialDate, Period

_LANGUAGE_CODES = {ArticleLanguage.EN: "en", ArticleLanguage.FR: "fr"}
_DATE_ORDERS = {ArticleLanguage.EN: "MDY", ArticleLanguage.FR: "DMY"}

_BASES = (datetime(2001, 2, 3, 4, 5), datetime(2012, 11, 24, 19, 37))

_RANGE_WORDS: dict[ArticleLanguage, list[tuple[str, str]]] = {
    ArticleLanguage.EN: [("from", "to"), ("from", "until"), ("between", "and")],
    ArticleLanguage.FR: [("de", "[aà]"), ("du", "au"), ("entre", "et"), ("depuis", "jusqu'[aà]")],
}

_YEAR_RANGE = re.compile(r"^(\d{4})\s*-\s*(\d{4})$")
_DAY = re.compile(r"^(\d{1,2})(?:er|st|nd|rd|th)?$")
_ORDINAL = re.compile(r"\b(\d{1,2})(?:er|st|nd|rd|th)\b")
_OF = re.compile(r"\b(\d{1,2})\s+of\s+", re.IGNORECASE)


@lru_cache(maxsize=64)
def _parser(language: ArticleLanguage, base: datetime) -> DateDataParser:
    return DateDataParser(
        languages=[_LANGUAGE_CODES[language]],
        settings={
            "RELATIVE_BASE": base,
            "DATE_ORDER": _DATE_ORDERS[language],
            "PREFER_DAY_OF_MONTH": "first",
            "PREFER_DATES_FROM": "current_period",
            "RETURN_AS_TIMEZONE_AWARE": False,
        },
    )


def _normalize(text: str) -> str:
    """Ordinals and "the 14th of March" are not understood by dateparser."""
    text = " ".join(text.split())
    text = _ORDINAL.sub(r"\1", text)
    text = _OF.sub(r"\1 ", text)
    if text.lower().startswith("the "):
        text = text[4:]
    return text


def _date(year: int = 0, month: int = 0, day: int = 0) -> PartialDate | None:
    try:
        date = PartialDate(year=year, month=month, day=day)
    except ValidationError:
        return None
    return None if date.is_empty else date


def _resolve(text: str, language: ArticleLanguage, base: datetime) -> tuple[datetime, str] | None:
    data = _parser(language, base).get_date_data(text)
    if data.date_obj is None:
        return None
    return data.date_obj, data.period or "day"


def _truncated(year: int, month: int, day: int, period: str) -> PartialDate | None:
    if period == "year":
        return _date(year)
    if period == "month":
        return _date(year, month)
    return _date(year, month, day)


def _parse_single(text: str, language: ArticleLanguage, reference: datetime | None) -> PartialDate | None:
    if m := _DAY.match(text):
        return _date(day=int(m.group(1)))

    if reference is not None:
        resolved = _resolve(text, language, reference)
        if resolved is None:
            return None
        date, period = resolved
        return _truncated(date.year, date.month, date.day, period)

    first, second = (_resolve(text, language, base) for base in _BASES)
    if first is None or second is None:
        return None
    (one, period), (other, _) = first, second
    return _truncated(
        one.year if one.year == other.year else 0,
        one.month if one.month == other.month else 0,
        one.day if one.day == other.day else 0,
        period,
    )


def _period(start: PartialDate | None, end: PartialDate | None) -> Period | None:
    if start is None or end is None:
        return None
    # "from 3 to 5 May 2015": the first bound inherits what it omits
    start = PartialDate(
        year=start.year or end.year,
        month=start.month or (0 if start.year else end.month),
        day=start.day,
    )
    return Period(start=start, end=end)


def _search(text: str, language: ArticleLanguage, reference: datetime | None) -> Period | None:
    """Fall back on the dates dateparser finds inside a longer text."""
    settings = {"DATE_ORDER": _DATE_ORDERS[language], "PREFER_DAY_OF_MONTH": "first"}
    if reference is not None:
        settings["RELATIVE_BASE"] = reference
    found = search_dates(text, languages=[_LANGUAGE_CODES[language]], settings=settings) or []
    dates = [_parse_single(_normalize(substring), language, reference) for substring, _ in found[:2]]
    if len(dates) == 2:
        return _period(*dates)
    if len(dates) == 1 and dates[0] is not None:
        return Period.single(dates[0])
    return None


def parse_date(text: str, language: ArticleLanguage | None, reference: datetime | None = None) -> Period | None:
    """Parse a DATE mention text, or return None if it is not understood.

    Args:
        text: The mention text.
        language: The article language; an unknown language is parsed as English.
        reference: Date that relative or year-less expressions are resolved
            against. Without it, the components such expressions omit stay unknown.
    """
    language = language or ArticleLanguage.EN
    if reference is not None:
        reference = reference.replace(tzinfo=None)
    normalized = _normalize(text)
    if not normalized:
        return None

    if m := _YEAR_RANGE.match(normalized):
        return _period(_date(int(m.group(1))), _date(int(m.group(2))))

    for opener, closer in _RANGE_WORDS[language]:
        if m := re.match(rf"^{opener}\s+(.+?)\s+{closer}\s+(.+)$", normalized, re.IGNORECASE):
            return _period(
                _parse_single(m.group(1), language, reference),
                _parse_single(m.group(2), language, reference),
            )

    date = _parse_single(normalized, language, reference)
    if date is not None:
        return Period.single(date)
    return _search(normalized, language, reference)
