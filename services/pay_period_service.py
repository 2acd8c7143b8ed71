"""
Pay Period Service
Builds the five-week timesheet grid for a 26th-to-25th pay period
"""
import calendar
from dataclasses import dataclass, field
from datetime import date, timedelta

from dateutil.relativedelta import relativedelta


MONTH_NAMES = (
    'JANUARY', 'FEBRUARY', 'MARCH', 'APRIL', 'MAY', 'JUNE',
    'JULY', 'AUGUST', 'SEPTEMBER', 'OCTOBER', 'NOVEMBER', 'DECEMBER',
)

WEEKDAY_NAMES = ('Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun')

PERIOD_START_DAY = 26
PERIOD_END_DAY = 25
WEEK_COUNT = 5
DAYS_PER_WEEK = 7

SUNDAY = 6

# Supported closing years; the period opens in the previous month
MIN_YEAR = 1900
MAX_YEAR = 9999


@dataclass(frozen=True)
class DaySlot:
    """A single day cell in the timesheet grid"""
    position: int
    date: date

    @property
    def weekday_name(self):
        return WEEKDAY_NAMES[self.date.weekday()]

    @property
    def short_date(self):
        return self.date.strftime('%d-%m-%y')

    def to_dict(self):
        return {
            'position': self.position,
            'weekday': self.weekday_name,
            'date': self.short_date,
        }


@dataclass(frozen=True)
class WeekSlot:
    """One of the five week rows of the timesheet"""
    index: int
    label: str
    days: tuple = field(default_factory=tuple)

    def to_dict(self):
        return {
            'index': self.index,
            'label': self.label,
            'days': [day.to_dict() for day in self.days],
        }


@dataclass(frozen=True)
class PayPeriod:
    """The full grid for one (month, year) pay period"""
    month: str
    year: int
    weeks: tuple

    @property
    def is_empty(self):
        return not any(week.days for week in self.weeks)

    @property
    def start_date(self):
        for week in self.weeks:
            if week.days:
                return week.days[0].date
        return None

    @property
    def end_date(self):
        for week in reversed(self.weeks):
            if week.days:
                return week.days[-1].date
        return None

    def week_labels(self):
        """Template field values for the week header fields (week1..week5)"""
        return {f'week{week.index}': week.label for week in self.weeks}

    def day_fields(self):
        """Template field values for every populated day cell"""
        values = {}
        for week in self.weeks:
            for day in week.days:
                values[f'day_w{week.index}_d{day.position}'] = day.weekday_name
                values[f'date_w{week.index}_d{day.position}'] = day.short_date
        return values

    def to_dict(self):
        return {
            'month': self.month,
            'year': self.year,
            'start_date': self.start_date.isoformat() if self.start_date else None,
            'end_date': self.end_date.isoformat() if self.end_date else None,
            'weeks': [week.to_dict() for week in self.weeks],
        }


class PayPeriodService:
    """Service for pay period week-grid calculations"""

    @staticmethod
    def normalise_month(month):
        """Canonical uppercase month name, or None if not recognised"""
        if not isinstance(month, str):
            return None
        name = month.strip().upper()
        return name if name in MONTH_NAMES else None

    @staticmethod
    def is_valid_month(month):
        return PayPeriodService.normalise_month(month) is not None

    @staticmethod
    def current_month_name(today=None):
        today = today or date.today()
        return MONTH_NAMES[today.month - 1]

    @staticmethod
    def is_valid_year(year):
        return isinstance(year, int) and not isinstance(year, bool) and MIN_YEAR <= year <= MAX_YEAR

    @staticmethod
    def days_in_month(year, month_number):
        return calendar.monthrange(year, month_number)[1]

    @staticmethod
    def empty_pay_period(month, year):
        """Fallback grid: plain labels and no days"""
        weeks = tuple(
            WeekSlot(index=i, label=f'Week {i}')
            for i in range(1, WEEK_COUNT + 1)
        )
        return PayPeriod(month=month, year=year, weeks=weeks)

    @staticmethod
    def adjustment_label(previous_month_start):
        """Week 1 label, e.g. 'Week1(adjustment week 26 – 29 FEB)'"""
        days = PayPeriodService.days_in_month(previous_month_start.year, previous_month_start.month)
        abbreviation = MONTH_NAMES[previous_month_start.month - 1][:3]
        return f'Week1(adjustment week {PERIOD_START_DAY} – {days} {abbreviation})'

    @staticmethod
    def build_pay_period(month, year):
        """
        Build the 5-week grid for the pay period that closes on the 25th of
        ``month``/``year`` and opens on the 26th of the previous month.

        Args:
            month: Month name, case-insensitive (e.g. "march", "MARCH")
            year: Gregorian year of the closing month

        Returns:
            PayPeriod. An unrecognised month, or a year outside
            MIN_YEAR..MAX_YEAR, yields the plain-labelled, day-less grid
            instead of raising.
        """
        name = PayPeriodService.normalise_month(month)
        if name is None or not PayPeriodService.is_valid_year(year):
            fallback = name or (month.strip().upper() if isinstance(month, str) else str(month))
            return PayPeriodService.empty_pay_period(fallback, year)

        month_start = date(year, MONTH_NAMES.index(name) + 1, 1)
        previous_month_start = month_start - relativedelta(months=1)

        # Week 1: 26th of the previous month up to and including Sunday
        cursor = previous_month_start.replace(day=PERIOD_START_DAY)
        first_week = []
        while len(first_week) < DAYS_PER_WEEK:
            first_week.append(DaySlot(position=len(first_week) + 1, date=cursor))
            cursor += timedelta(days=1)
            if first_week[-1].date.weekday() == SUNDAY:
                break

        weeks = [WeekSlot(
            index=1,
            label=PayPeriodService.adjustment_label(previous_month_start),
            days=tuple(first_week),
        )]

        # Weeks 2-4: full Monday-Sunday runs; week 4 never passes the 25th
        for index in range(2, 5):
            days = tuple(
                DaySlot(position=offset + 1, date=cursor + timedelta(days=offset))
                for offset in range(DAYS_PER_WEEK)
            )
            weeks.append(WeekSlot(index=index, label=f'Week {index}', days=days))
            cursor += timedelta(days=DAYS_PER_WEEK)

        # Week 5: run on until the period closes on the 25th
        last_week = []
        while cursor.day <= PERIOD_END_DAY and len(last_week) < DAYS_PER_WEEK:
            last_week.append(DaySlot(position=len(last_week) + 1, date=cursor))
            cursor += timedelta(days=1)
        weeks.append(WeekSlot(index=WEEK_COUNT, label=f'Week {WEEK_COUNT}', days=tuple(last_week)))

        return PayPeriod(month=name, year=year, weeks=tuple(weeks))
