from datetime import date, datetime, timedelta, timezone

import pytest

from campus.exceptions import ValidationError
from campus.utils import (
    expand_date_range, month_bounds, next_employee_code, normalize_date, subject_code_base, timestamp_numbers,
    username_base,
)


def test_normalize_date_converts_aware_datetimes_to_utc():
    evening_in_new_york = datetime(2025, 1, 1, 21, 30, tzinfo=timezone(timedelta(hours=-5)))
    assert normalize_date(evening_in_new_york) == date(2025, 1, 2)


def test_normalize_date_accepts_iso_strings_and_dates():
    assert normalize_date('2025-03-04') == date(2025, 3, 4)
    assert normalize_date('2025-03-04T23:00:00-02:00') == date(2025, 3, 5)
    assert normalize_date(date(2025, 3, 4)) == date(2025, 3, 4)


@pytest.mark.parametrize('value', ['04/03/2025', '', None])
def test_normalize_date_rejects_bad_input(value):
    with pytest.raises(ValidationError):
        normalize_date(value, 'start_date')


def test_expand_date_range_is_inclusive():
    days = expand_date_range(date(2025, 1, 30), date(2025, 2, 2))
    assert days == [date(2025, 1, 30), date(2025, 1, 31), date(2025, 2, 1), date(2025, 2, 2)]
    assert expand_date_range(date(2025, 1, 1), date(2025, 1, 1)) == [date(2025, 1, 1)]


def test_month_bounds():
    assert month_bounds('2024-02') == (date(2024, 2, 1), date(2024, 2, 29))
    with pytest.raises(ValidationError):
        month_bounds('2024-13')


def test_subject_code_base():
    assert subject_code_base('Social Science', '8') == 'SS-8'
    assert subject_code_base('Mathematics', '10') == 'MAT-10'


def test_timestamp_numbers_are_distinct():
    numbers = timestamp_numbers(3, now=datetime(2025, 6, 1, tzinfo=timezone.utc))
    assert len({adm for adm, _ in numbers}) == 3
    assert numbers[0][0].startswith('ADM-') and numbers[0][1].startswith('GR-')


def test_next_employee_code():
    assert next_employee_code(None) == 'EMP00001'
    assert next_employee_code('EMP00041') == 'EMP00042'


def test_username_base_strips_unsupported_characters():
    assert username_base("Ma'ya", 'De Souza') == 'maya.desouza'
