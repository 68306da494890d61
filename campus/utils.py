# utils.py
import calendar
import re
import uuid
from datetime import date, datetime, timedelta, timezone as dt_timezone

from django.utils import timezone

from .exceptions import ValidationError


# ==================== DATES ====================
def normalize_date(value, field_name='date'):
    """Return a calendar date; aware datetimes are converted to UTC first."""
    if isinstance(value, datetime):
        if timezone.is_aware(value):
            value = value.astimezone(dt_timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
        except ValueError:
            raise ValidationError(f"Invalid {field_name}: '{value}'. Use YYYY-MM-DD.")
        return normalize_date(parsed, field_name)
    raise ValidationError(f"{field_name} is required.")


def today_utc():
    return timezone.now().astimezone(dt_timezone.utc).date()


def expand_date_range(start_date, end_date):
    """Every calendar day from start_date to end_date, both inclusive."""
    days = (end_date - start_date).days
    return [start_date + timedelta(days=offset) for offset in range(days + 1)]


def month_bounds(month):
    """'YYYY-MM' -> (first_day, last_day)."""
    match = re.fullmatch(r'(\d{4})-(\d{2})', month or '')
    if not match or not 1 <= int(match.group(2)) <= 12:
        raise ValidationError(f"Invalid month: '{month}'. Use YYYY-MM.")
    year, month_number = int(match.group(1)), int(match.group(2))
    last_day = calendar.monthrange(year, month_number)[1]
    return date(year, month_number, 1), date(year, month_number, last_day)


# ==================== IDENTIFIERS ====================
def parse_uuid(value, field_name='id'):
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise ValidationError(f"Invalid {field_name}: '{value}' is not a valid UUID.")


def subject_code_base(name, standard):
    """Initials of a multi-word name, or the first three letters of a single word."""
    words = name.split()
    if len(words) > 1:
        prefix = ''.join(word[0] for word in words)
    else:
        prefix = name[:3]
    return f"{prefix.upper()}-{standard}"


def timestamp_numbers(count, now=None):
    """Admission and GR numbers for a batch; index suffix keeps them distinct."""
    base = int((now or timezone.now()).timestamp() * 1000)
    return [(f"ADM-{base + index}", f"GR-{base + index}") for index in range(count)]


def next_employee_code(last_code):
    number = 0
    if last_code:
        digits = re.sub(r'\D', '', last_code)
        number = int(digits) if digits else 0
    return f"EMP{number + 1:05d}"


def username_base(first_name, last_name):
    base = f"{first_name}.{last_name}".lower()
    return re.sub(r'[^a-z0-9.]', '', base) or 'student'
