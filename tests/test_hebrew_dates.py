"""Tests for Gregorian <-> Hebrew conversion and Rosh Hashana lookup"""
from datetime import date, datetime, timedelta

import pytest
from hypothesis import given
from hypothesis import strategies as st

from errors import InvalidArgumentError, OutOfRangeError
from hebrew_dates import (
    HebrewDate, YearType, earliest_hebrew_year, erev_rosh_hashana,
    format_hebrew_date, is_leap_year, month_length, month_name, months_in_year,
    parse_hebrew_date, parse_iso_date, rosh_hashana, to_gregorian, to_hebrew,
    year_length, year_type,
)

VALID_YEAR_LENGTHS = {353, 354, 355, 383, 384, 385}


class TestRoshHashana:
    @pytest.mark.parametrize("year, expected", [
        (5783, date(2022, 9, 26)),
        (5784, date(2023, 9, 16)),
        (5785, date(2024, 10, 3)),
        (5786, date(2025, 9, 23)),
        (5787, date(2026, 9, 12)),
    ])
    def test_known_dates(self, year, expected):
        assert rosh_hashana(year) == expected

    def test_erev_matches_dates_hardcoded_by_the_old_ui(self):
        # The old UI hardcoded the evening the holiday starts for these years
        assert erev_rosh_hashana(5786) == date(2025, 9, 22)
        assert erev_rosh_hashana(5787) == date(2026, 9, 11)

    def test_is_first_of_tishrei(self):
        assert to_hebrew(rosh_hashana(5786)) == HebrewDate(5786, 7, 1)

    @given(st.integers(min_value=5610, max_value=13000))
    def test_monotonic_with_valid_gaps(self, year):
        gap = (rosh_hashana(year + 1) - rosh_hashana(year)).days
        assert gap > 0
        assert gap in VALID_YEAR_LENGTHS
        assert gap == year_length(year)

    @given(st.integers(min_value=5610, max_value=13000))
    def test_never_on_sunday_wednesday_or_friday(self, year):
        # date.weekday(): Sunday=6, Wednesday=2, Friday=4
        assert rosh_hashana(year).weekday() not in (6, 2, 4)

    @pytest.mark.parametrize("bad", ["5785", 5785.0, True, None, [5785]])
    def test_rejects_non_integer_year(self, bad):
        with pytest.raises(InvalidArgumentError):
            rosh_hashana(bad)

    def test_rejects_non_positive_year(self):
        with pytest.raises(InvalidArgumentError):
            rosh_hashana(0)

    def test_before_supported_range(self):
        with pytest.raises(OutOfRangeError):
            rosh_hashana(earliest_hebrew_year() - 1)

    def test_beyond_gregorian_range(self):
        with pytest.raises(OutOfRangeError):
            rosh_hashana(20000)

    def test_earliest_year_contains_1850(self):
        assert earliest_hebrew_year() == 5610
        assert rosh_hashana(5610) < date(1850, 1, 1) < rosh_hashana(5611)


class TestYearStructure:
    def test_leap_years(self):
        assert is_leap_year(5784)
        assert not is_leap_year(5785)
        assert not is_leap_year(5786)
        assert is_leap_year(5787)

    def test_seven_leap_years_per_metonic_cycle(self):
        for start in (5700, 5719, 5785):
            assert sum(is_leap_year(y) for y in range(start, start + 19)) == 7

    def test_months_in_year(self):
        assert months_in_year(5784) == 13
        assert months_in_year(5785) == 12

    def test_year_types(self):
        assert year_length(5784) == 383
        assert year_type(5784) is YearType.DEFICIENT
        assert year_length(5785) == 355
        assert year_type(5785) is YearType.COMPLETE
        assert year_length(5786) == 354
        assert year_type(5786) is YearType.REGULAR

    def test_cheshvan_and_kislev_follow_year_type(self):
        assert month_length(5785, 8) == 30   # complete year: long Cheshvan
        assert month_length(5786, 8) == 29
        assert month_length(5784, 9) == 29   # deficient year: short Kislev
        assert month_length(5786, 9) == 30

    def test_fixed_month_lengths(self):
        assert month_length(5785, 1) == 30   # Nissan
        assert month_length(5785, 2) == 29   # Iyar
        assert month_length(5785, 7) == 30   # Tishrei
        assert month_length(5785, 12) == 29  # Adar in a common year
        assert month_length(5784, 12) == 30  # Adar I
        assert month_length(5784, 13) == 29  # Adar II

    def test_month_lengths_add_up_to_year_length(self):
        for year in (5784, 5785, 5786, 5787):
            total = sum(month_length(year, m) for m in range(1, months_in_year(year) + 1))
            assert total == year_length(year)

    def test_no_deprecation_warnings(self, recwarn):
        for year in (5784, 5785):
            for m in range(1, months_in_year(year) + 1):
                month_length(year, m)
        assert not [w for w in recwarn if issubclass(w.category, DeprecationWarning)]

    def test_adar_ii_only_in_leap_years(self):
        with pytest.raises(InvalidArgumentError):
            month_length(5785, 13)

    def test_month_names(self):
        assert month_name(5785, 1) == 'Nissan'
        assert month_name(5785, 12) == 'Adar'
        assert month_name(5784, 12) == 'Adar I'
        assert month_name(5784, 13) == 'Adar II'


class TestHebrewDate:
    def test_valid(self):
        h = HebrewDate(5785, 8, 30)
        assert h.month_name == 'Cheshvan'

    @pytest.mark.parametrize("year, month, day", [
        (5786, 8, 30),   # regular year: Cheshvan has 29 days
        (5785, 2, 30),   # Iyar is always 29
        (5785, 13, 1),   # no Adar II in a common year
        (5785, 0, 1),
        (5785, 14, 1),
        (5785, 1, 0),
        (0, 1, 1),
    ])
    def test_invalid(self, year, month, day):
        with pytest.raises(InvalidArgumentError):
            HebrewDate(year, month, day)

    def test_rejects_non_integer_parts(self):
        with pytest.raises(InvalidArgumentError):
            HebrewDate(5785, 1, '15')

    def test_str(self):
        assert str(HebrewDate(5785, 1, 15)) == '15 Nissan 5785'
        assert format_hebrew_date(HebrewDate(5744, 13, 5)) == '5 Adar II 5744'


class TestConversion:
    @pytest.mark.parametrize("g, expected", [
        (date(2025, 4, 13), HebrewDate(5785, 1, 15)),    # Pesach
        (date(2024, 10, 12), HebrewDate(5785, 7, 10)),   # Yom Kippur
        (date(2024, 3, 24), HebrewDate(5784, 13, 14)),   # Purim in Adar II
        (date(2025, 1, 10), HebrewDate(5785, 10, 10)),   # Asara b'Tevet
    ])
    def test_known_dates(self, g, expected):
        assert to_hebrew(g) == expected
        assert to_gregorian(expected) == g

    def test_display(self):
        assert str(to_hebrew(date(2025, 4, 13))) == '15 Nissan 5785'

    def test_datetime_is_reduced_to_date(self):
        assert to_hebrew(datetime(2025, 4, 13, 23, 59)) == HebrewDate(5785, 1, 15)

    def test_round_trip_every_day(self):
        d = date(2023, 1, 1)
        while d <= date(2026, 12, 31):
            assert to_gregorian(to_hebrew(d)) == d
            d += timedelta(days=1)

    @given(st.dates(min_value=date(1850, 1, 1), max_value=date(9998, 1, 1)))
    def test_round_trip_across_range(self, d):
        assert to_gregorian(to_hebrew(d)) == d

    def test_consecutive_days_are_consecutive_hebrew_days(self):
        d = date(2024, 9, 1)
        prev = to_hebrew(d)
        for _ in range(400):
            d += timedelta(days=1)
            cur = to_hebrew(d)
            if cur.day == 1:
                assert prev.day in (29, 30)
            else:
                assert cur.day == prev.day + 1 and cur.month == prev.month
            prev = cur

    def test_before_1850_is_out_of_range(self):
        with pytest.raises(OutOfRangeError):
            to_hebrew(date(1849, 12, 31))

    def test_hebrew_before_supported_range(self):
        with pytest.raises(OutOfRangeError):
            to_gregorian(HebrewDate(5600, 1, 1))

    @pytest.mark.parametrize("bad", ["2025-04-13", None, 20250413])
    def test_rejects_non_dates(self, bad):
        with pytest.raises(InvalidArgumentError):
            to_hebrew(bad)


class TestParsing:
    @pytest.mark.parametrize("text, expected", [
        ('15 Nissan 5785', HebrewDate(5785, 1, 15)),
        ('15 Nisan 5785', HebrewDate(5785, 1, 15)),
        ('1 Tishri 5786', HebrewDate(5786, 7, 1)),
        ('  10   Tevet  5785 ', HebrewDate(5785, 10, 10)),
        ('5 Adar II 5744', HebrewDate(5744, 13, 5)),
        ('5 adar 2 5744', HebrewDate(5744, 13, 5)),
        ('12 Adar I 5784', HebrewDate(5784, 12, 12)),
        ("3 Sh'vat 5785", HebrewDate(5785, 11, 3)),
    ])
    def test_parse_hebrew_date(self, text, expected):
        assert parse_hebrew_date(text) == expected

    @pytest.mark.parametrize("text", [
        'Nissan 15 5785', '15 Nivember 5785', '1 Adar II 5785', '', 'garbage',
    ])
    def test_parse_hebrew_date_invalid(self, text):
        with pytest.raises(InvalidArgumentError):
            parse_hebrew_date(text)

    def test_display_round_trip(self):
        h = HebrewDate(5784, 12, 30)
        assert parse_hebrew_date(str(h)) == h

    def test_parse_iso_date(self):
        assert parse_iso_date('2025-01-10') == date(2025, 1, 10)
        assert parse_iso_date('2025-01-10T00:00:00.000Z') == date(2025, 1, 10)
        assert parse_iso_date(date(2025, 1, 10)) == date(2025, 1, 10)

    @pytest.mark.parametrize("bad", ['2025-02-30', '10/01/2025', '20250110', '', None, 5])
    def test_parse_iso_date_invalid(self, bad):
        with pytest.raises(InvalidArgumentError):
            parse_iso_date(bad)
