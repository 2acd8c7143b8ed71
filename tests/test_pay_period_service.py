"""
Tests for PayPeriodService: the 26th-to-25th five-week timesheet grid.

These are pure date calculations, so no app or database fixtures are needed.
"""
from datetime import date, timedelta

import pytest

from services.pay_period_service import MAX_YEAR, MIN_YEAR, MONTH_NAMES, PayPeriodService


def _dates(week):
    return [day.date for day in week.days]


# ---------------------------------------------------------------------------
# Month helpers
# ---------------------------------------------------------------------------

class TestMonthHelpers:
    @pytest.mark.parametrize('year,month,expected', [
        (2024, 2, 29),
        (2023, 2, 28),
        (2000, 2, 29),
        (1900, 2, 28),
        (2024, 4, 30),
        (2024, 12, 31),
    ])
    def test_days_in_month_follows_gregorian_rule(self, year, month, expected):
        assert PayPeriodService.days_in_month(year, month) == expected

    def test_month_names_are_case_insensitive(self):
        assert PayPeriodService.normalise_month('  march ') == 'MARCH'
        assert PayPeriodService.is_valid_month('December') is True

    def test_unknown_month_is_not_valid(self):
        assert PayPeriodService.normalise_month('FOOBAR') is None
        assert PayPeriodService.is_valid_month(3) is False

    @pytest.mark.parametrize('year,expected', [
        (MIN_YEAR, True),
        (MAX_YEAR, True),
        (MIN_YEAR - 1, False),
        (MAX_YEAR + 1, False),
        (1, False),
        (True, False),
        ('2024', False),
    ])
    def test_is_valid_year(self, year, expected):
        assert PayPeriodService.is_valid_year(year) is expected

    def test_current_month_name(self):
        assert PayPeriodService.current_month_name(date(2026, 10, 19)) == 'OCTOBER'


# ---------------------------------------------------------------------------
# Known calendars
# ---------------------------------------------------------------------------

class TestBuildPayPeriod:
    def test_march_2024_uses_leap_february(self):
        period = PayPeriodService.build_pay_period('MARCH', 2024)
        assert period.weeks[0].label == 'Week1(adjustment week 26 – 29 FEB)'

    def test_march_2023_uses_common_february(self):
        period = PayPeriodService.build_pay_period('MARCH', 2023)
        assert period.weeks[0].label == 'Week1(adjustment week 26 – 28 FEB)'

    def test_march_2024_grid(self):
        period = PayPeriodService.build_pay_period('march', 2024)
        assert period.month == 'MARCH'
        # 26 Feb 2024 is a Monday, so week 1 is a full week
        assert _dates(period.weeks[0]) == [date(2024, 2, 26) + timedelta(days=i) for i in range(7)]
        assert _dates(period.weeks[1])[0] == date(2024, 3, 4)
        assert _dates(period.weeks[3])[-1] == date(2024, 3, 24)
        # Only Monday 25 March is left for week 5
        assert _dates(period.weeks[4]) == [date(2024, 3, 25)]

    def test_january_wraps_to_previous_december(self):
        period = PayPeriodService.build_pay_period('JANUARY', 2025)
        assert period.weeks[0].label == 'Week1(adjustment week 26 – 31 DEC)'
        # Thu 26 Dec 2024 .. Sun 29 Dec 2024
        assert _dates(period.weeks[0]) == [
            date(2024, 12, 26), date(2024, 12, 27), date(2024, 12, 28), date(2024, 12, 29)
        ]
        assert _dates(period.weeks[1])[0] == date(2024, 12, 30)
        assert _dates(period.weeks[4]) == [date(2025, 1, d) for d in range(20, 26)]

    def test_december_adjustment_uses_november(self):
        period = PayPeriodService.build_pay_period('DECEMBER', 2024)
        assert period.weeks[0].label == 'Week1(adjustment week 26 – 30 NOV)'

    def test_week_one_single_day_when_26th_is_sunday(self):
        # 26 Jan 2025 is a Sunday
        period = PayPeriodService.build_pay_period('FEBRUARY', 2025)
        week1, week2 = period.weeks[0], period.weeks[1]
        assert len(week1.days) == 1
        assert week1.days[0].date == date(2025, 1, 26)
        assert week1.days[0].weekday_name == 'Sun'
        assert week2.days[0].date == date(2025, 1, 27)
        assert week2.days[0].weekday_name == 'Mon'
        assert len(period.weeks[4].days) == 7

    def test_week_five_can_be_empty(self):
        # 26 Feb 2018 is a Monday, so week 4 already ends on Sunday 25 March
        period = PayPeriodService.build_pay_period('MARCH', 2018)
        assert _dates(period.weeks[0])[-1] == date(2018, 3, 4)
        assert _dates(period.weeks[3])[-1] == date(2018, 3, 25)
        assert period.weeks[4].days == ()
        assert period.end_date == date(2018, 3, 25)

    def test_plain_labels_for_later_weeks(self):
        period = PayPeriodService.build_pay_period('JUNE', 2025)
        assert [week.label for week in period.weeks[1:]] == ['Week 2', 'Week 3', 'Week 4', 'Week 5']

    def test_unrecognised_month_returns_empty_grid(self):
        period = PayPeriodService.build_pay_period('FOOBAR', 2025)
        assert [week.label for week in period.weeks] == ['Week 1', 'Week 2', 'Week 3', 'Week 4', 'Week 5']
        assert all(week.days == () for week in period.weeks)
        assert period.is_empty is True
        assert period.start_date is None

    @pytest.mark.parametrize('month,year', [('JANUARY', 1), ('MARCH', 10000), ('JUNE', 0), ('MAY', -5)])
    def test_unsupported_year_returns_empty_grid(self, month, year):
        period = PayPeriodService.build_pay_period(month, year)
        assert period.month == month
        assert period.is_empty is True
        assert [week.label for week in period.weeks] == ['Week 1', 'Week 2', 'Week 3', 'Week 4', 'Week 5']

    def test_supported_year_range_edges(self):
        first = PayPeriodService.build_pay_period('JANUARY', MIN_YEAR)
        assert first.start_date == date(MIN_YEAR - 1, 12, 26)
        last = PayPeriodService.build_pay_period('DECEMBER', MAX_YEAR)
        assert last.end_date == date(MAX_YEAR, 12, 25)

    def test_same_inputs_give_identical_output(self):
        first = PayPeriodService.build_pay_period('AUGUST', 2026)
        second = PayPeriodService.build_pay_period('August', 2026)
        assert first == second
        assert first.to_dict() == second.to_dict()


# ---------------------------------------------------------------------------
# Invariants across many months
# ---------------------------------------------------------------------------

ALL_PERIODS = [(month, year) for year in range(1999, 2031) for month in MONTH_NAMES]


class TestGridInvariants:
    @pytest.mark.parametrize('month,year', ALL_PERIODS)
    def test_invariants(self, month, year):
        period = PayPeriodService.build_pay_period(month, year)
        weeks = period.weeks
        assert [week.index for week in weeks] == [1, 2, 3, 4, 5]

        # Consecutive days inside every week
        for week in weeks:
            dates = _dates(week)
            assert len(dates) <= 7
            assert all(b - a == timedelta(days=1) for a, b in zip(dates, dates[1:]))
            assert [day.position for day in week.days] == list(range(1, len(dates) + 1))

        # Week 1 opens on the 26th and closes on a Sunday
        assert weeks[0].days[0].date.day == 26
        assert weeks[0].days[-1].weekday_name == 'Sun'

        # Weeks 2-4 are full Monday-Sunday runs, 7 days apart
        for week in weeks[1:4]:
            assert len(week.days) == 7
            assert week.days[0].weekday_name == 'Mon'
        assert weeks[1].days[0].date == weeks[0].days[-1].date + timedelta(days=1)
        assert weeks[2].days[0].date == weeks[1].days[0].date + timedelta(days=7)
        assert weeks[3].days[0].date == weeks[2].days[0].date + timedelta(days=7)
        # Week 4 can never run past the 25th of the closing month
        assert weeks[3].days[-1].date <= date(year, MONTH_NAMES.index(month) + 1, 25)

        # Week 5 never passes the 25th
        assert all(day.date.day <= 25 for day in weeks[4].days)
        if weeks[4].days:
            assert weeks[4].days[0].date == weeks[3].days[-1].date + timedelta(days=1)


# ---------------------------------------------------------------------------
# Template field output
# ---------------------------------------------------------------------------

class TestFieldOutput:
    def test_short_date_format(self):
        period = PayPeriodService.build_pay_period('MARCH', 2024)
        day = period.weeks[0].days[0]
        assert day.short_date == '26-02-24'
        assert day.weekday_name == 'Mon'

    def test_week_labels(self):
        labels = PayPeriodService.build_pay_period('MARCH', 2024).week_labels()
        assert labels == {
            'week1': 'Week1(adjustment week 26 – 29 FEB)',
            'week2': 'Week 2',
            'week3': 'Week 3',
            'week4': 'Week 4',
            'week5': 'Week 5',
        }

    def test_day_fields(self):
        fields = PayPeriodService.build_pay_period('MARCH', 2024).day_fields()
        assert fields['day_w1_d1'] == 'Mon'
        assert fields['date_w1_d1'] == '26-02-24'
        assert fields['day_w2_d7'] == 'Sun'
        assert fields['date_w2_d7'] == '10-03-24'
        assert fields['date_w5_d1'] == '25-03-24'
        assert 'day_w5_d2' not in fields

    def test_to_dict(self):
        data = PayPeriodService.build_pay_period('MARCH', 2024).to_dict()
        assert data['month'] == 'MARCH'
        assert data['year'] == 2024
        assert data['start_date'] == '2024-02-26'
        assert data['end_date'] == '2024-03-25'
        assert data['weeks'][4]['days'] == [{'position': 1, 'weekday': 'Mon', 'date': '25-03-24'}]
