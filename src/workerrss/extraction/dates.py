"""日期解析与格式化."""

import logging
from datetime import UTC, datetime
from email.utils import format_datetime, parsedate_to_datetime

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

# 超过该值的数字时间戳视为毫秒
MILLISECOND_THRESHOLD = 9_999_999_999


def _as_utc(value: datetime) -> datetime:
    """无时区信息的时间视为 UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def parse_date(value: object) -> datetime | None:
    """
    解析日期文本为 UTC datetime.

    先按 RFC 2822 解析，失败后交给 dateutil；都失败返回 None。
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return _as_utc(value)

    text = str(value).strip()
    if not text:
        return None

    try:
        return _as_utc(parsedate_to_datetime(text))
    except (TypeError, ValueError, IndexError):
        pass

    try:
        return _as_utc(date_parser.parse(text))
    except (ValueError, OverflowError, TypeError):
        logger.debug(f"无法解析日期: {text}")
        return None


def from_timestamp(value: object, unit: str = "ms") -> datetime | None:
    """Unix 时间戳（秒或毫秒）转为 UTC datetime."""
    try:
        number = float(str(value).strip())
        seconds = number / 1000 if unit == "ms" else number
        return datetime.fromtimestamp(seconds, UTC)
    except (ValueError, OverflowError, OSError):
        return None


def guess_timestamp_unit(number: float) -> str:
    """根据数值大小判断时间戳单位."""
    return "ms" if number > MILLISECOND_THRESHOLD else "s"


def format_rfc2822(value: datetime) -> str:
    """格式化为 RFC 2822，如 ``Mon, 01 Jan 2024 00:00:00 GMT``."""
    return format_datetime(_as_utc(value), usegmt=True)


def format_iso(value: datetime) -> str:
    """格式化为 ISO 8601（毫秒精度，Z 结尾）."""
    value = _as_utc(value)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def normalize_pub_date(value: object, now: datetime | None = None) -> str:
    """解析日期并输出 RFC 2822；无法解析时使用当前时间."""
    parsed = parse_date(value)
    return format_rfc2822(parsed or now or datetime.now(UTC))
