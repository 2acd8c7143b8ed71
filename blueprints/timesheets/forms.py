"""
Timesheet Forms
Workbook upload for the generate pipeline
"""
from flask_wtf import FlaskForm
from flask_wtf.file import FileAllowed, FileField, FileRequired
from wtforms import IntegerField, StringField
from wtforms.validators import NumberRange, Optional, ValidationError

from services.pay_period_service import MAX_YEAR, MIN_YEAR, PayPeriodService


class UploadLearnersForm(FlaskForm):
    """Learner workbook upload with optional month/year override"""

    # Machine-facing endpoint; there is no page to carry a CSRF token
    class Meta:
        csrf = False

    file = FileField('Learner Workbook', validators=[
        FileRequired(message='A learner workbook is required'),
        FileAllowed(['xlsx'], message='Only .xlsx workbooks are accepted'),
    ])
    month = StringField('Month', validators=[Optional()])
    year = IntegerField('Year', validators=[
        Optional(),
        NumberRange(min=MIN_YEAR, max=MAX_YEAR, message=f'Year must be between {MIN_YEAR} and {MAX_YEAR}'),
    ])

    def validate_month(self, field):
        if field.data and not PayPeriodService.is_valid_month(field.data):
            raise ValidationError(f"'{field.data}' is not a month name")
