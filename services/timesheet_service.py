"""
Timesheet Service
Runs the generate-and-email loop over a batch of learners
"""
from dataclasses import dataclass, replace
from pathlib import Path

from flask import current_app

from services.document_service import DocumentService
from services.errors import TimesheetError
from services.mail_service import MailService
from services.pay_period_service import MAX_YEAR, MIN_YEAR, PayPeriodService


@dataclass(frozen=True)
class GenerationResult:
    learner_name: str
    month: str
    year: int
    recipient: str
    output_path: Path
    emailed: bool

    @property
    def summary(self):
        action = 'generated & emailed' if self.emailed else 'generated'
        return f'{self.learner_name} ({self.month}) → {action}'

    def to_dict(self):
        return {
            'learner': self.learner_name,
            'month': self.month,
            'year': self.year,
            'email': self.recipient,
            'file': self.output_path.name,
            'emailed': self.emailed,
            'summary': self.summary,
        }


class TimesheetService:
    """Service tying the record source, document filler and notifier together"""

    @staticmethod
    def apply_overrides(learner, month=None, year=None):
        """
        Return ``learner`` with the requested month/year in place of the
        spreadsheet values.

        Raises:
            TimesheetError: if ``month`` is given but is not a month name, or
                ``year`` is outside MIN_YEAR..MAX_YEAR
        """
        changes = {}
        if month:
            name = PayPeriodService.normalise_month(month)
            if name is None:
                raise TimesheetError(f"Unrecognised month '{month}'")
            changes['month'] = name
        if year is not None:
            try:
                year = int(year)
            except (TypeError, ValueError, OverflowError):
                raise TimesheetError(f"Invalid year '{year}'")
            if not PayPeriodService.is_valid_year(year):
                raise TimesheetError(f'Year {year} is outside {MIN_YEAR}-{MAX_YEAR}')
            changes['year'] = year
        return replace(learner, **changes) if changes else learner

    @staticmethod
    def generate_one(learner, template_path, output_dir, mail_settings, send=True):
        pay_period = PayPeriodService.build_pay_period(learner.month, learner.year)
        if pay_period.is_empty:
            current_app.logger.warning(
                f"Month '{learner.month}' for {learner.learner_name} is not recognised; "
                f"filling plain week labels only"
            )

        output_path = Path(output_dir) / DocumentService.output_filename(learner)
        DocumentService.fill_timesheet(template_path, learner, pay_period, output_path)

        emailed = False
        if send:
            emailed = MailService.send_timesheet(
                mail_settings, learner.email, output_path, learner.month,
                learner_name=learner.learner_name, year=learner.year,
            )

        return GenerationResult(
            learner_name=learner.learner_name,
            month=learner.month,
            year=learner.year,
            recipient=learner.email,
            output_path=output_path,
            emailed=emailed,
        )

    @staticmethod
    def generate_all(learners, template_path, output_dir, mail_settings, month=None, year=None, send=True):
        """
        Fill and email a timesheet for every learner.

        Args:
            learners: Iterable of LearnerRecord
            template_path: Fillable PDF template
            output_dir: Directory for the filled PDFs
            mail_settings: MailSettings for the notifier
            month: Optional month name overriding every learner's month
            year: Optional year overriding every learner's year
            send: False to generate without emailing

        Returns:
            List of GenerationResult, in learner order. The first failure
            stops the run and propagates.
        """
        results = []
        for learner in learners:
            learner = TimesheetService.apply_overrides(learner, month=month, year=year)
            result = TimesheetService.generate_one(
                learner, template_path, output_dir, mail_settings, send=send
            )
            current_app.logger.info(result.summary)
            results.append(result)
        return results
