"""
Learner Service
Loads learner records from the 'Learners' sheet of an Excel workbook
"""
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from zipfile import BadZipFile

import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException

from services.errors import LearnerDataError
from services.pay_period_service import MAX_YEAR, MIN_YEAR, PayPeriodService


# (attribute, canonical column, fallback header)
LEARNER_COLUMNS = (
    ('learner_name', 'name', 'Learner Name'),
    ('id_number', 'idNumber', 'ID Number'),
    ('contact', 'contact', 'Contact'),
    ('email', 'email', 'Email'),
    ('employer', 'employer', 'Employer'),
    ('physical_address', 'physicalAddress', 'Physical Address'),
    ('suburb', 'suburb', 'Suburb'),
    ('city_town', 'cityTown', 'City/Town'),
    ('postal_code', 'postalCode', 'Postal Code'),
    ('local_municipality', 'localMunicipality', 'Local Municipality'),
    ('district_municipality', 'districtMunicipality', 'District Municipality'),
    ('metropolitan_municipality', 'metropolitanMunicipality', 'Metropolitan Municipality'),
    ('province', 'province', 'Province'),
    ('supervisor_name', 'supervisorName', 'Supervisor Name'),
    ('supervisor_contact', 'supervisorContact', 'Supervisor Contact'),
    ('supervisor_email', 'supervisorEmail', 'Supervisor Email'),
    ('activities_count', 'activitiesCount', None),
    ('tvet_college', 'tvetCollege', 'TVET College'),
)

# Template text field names for each learner attribute
TEMPLATE_FIELDS = {
    'learner_name': 'learnerName',
    'id_number': 'idNumber',
    'contact': 'contact',
    'email': 'email',
    'employer': 'employer',
    'physical_address': 'physicalAddress',
    'suburb': 'suburb',
    'city_town': 'cityTown',
    'postal_code': 'postalCode',
    'local_municipality': 'localMunicipality',
    'district_municipality': 'districtMunicipality',
    'metropolitan_municipality': 'metropolitanMunicipality',
    'province': 'province',
    'supervisor_name': 'supervisorName',
    'supervisor_contact': 'supervisorContact',
    'supervisor_email': 'supervisorEmail',
    'activities_count': 'activitiesCount',
    'tvet_college': 'tvetCollege',
    'month': 'month',
}


@dataclass(frozen=True)
class LearnerRecord:
    learner_name: str = ''
    id_number: str = ''
    contact: str = ''
    email: str = ''
    employer: str = ''
    physical_address: str = ''
    suburb: str = ''
    city_town: str = ''
    postal_code: str = ''
    local_municipality: str = ''
    district_municipality: str = ''
    metropolitan_municipality: str = ''
    province: str = ''
    supervisor_name: str = ''
    supervisor_contact: str = ''
    supervisor_email: str = ''
    activities_count: str = ''
    tvet_college: str = ''
    month: str = ''
    year: int = 0

    def template_values(self):
        """Field name -> value mapping for the PDF template"""
        return {field: getattr(self, attr) for attr, field in TEMPLATE_FIELDS.items()}


def _clean(value):
    """Render a spreadsheet cell as a trimmed string ('' for blanks)"""
    if value is None:
        return ''
    try:
        if pd.isna(value):
            return ''
    except (TypeError, ValueError):
        pass
    text = str(value).strip()
    # Whole numbers come back from Excel as floats (e.g. phone numbers)
    if text.endswith('.0') and text[:-2].lstrip('-').isdigit():
        text = text[:-2]
    return text


def _first_value(row, *keys):
    for key in keys:
        if key and key in row:
            value = _clean(row[key])
            if value:
                return value
    return ''


class LearnerService:
    """Service for reading learner records from a workbook"""

    DEFAULT_SHEET = 'Learners'

    @staticmethod
    def record_from_row(row, today=None, row_number=None):
        """
        Build a LearnerRecord from one spreadsheet row.

        The canonical camelCase column wins; the human header is the
        fallback. Month defaults to the current month and year to the
        current year.
        """
        today = today or date.today()
        values = {
            attr: _first_value(row, canonical, header)
            for attr, canonical, header in LEARNER_COLUMNS
        }

        month = _first_value(row, 'month', 'Month') or PayPeriodService.current_month_name(today)
        values['month'] = month.upper()

        raw_year = _first_value(row, 'year', 'Year')
        if raw_year:
            where = f' on row {row_number}' if row_number is not None else ''
            try:
                year = int(float(raw_year))
            except (ValueError, OverflowError):
                raise LearnerDataError(f"Invalid year '{raw_year}'{where}")
            if not PayPeriodService.is_valid_year(year):
                raise LearnerDataError(
                    f"Year {year}{where} is outside {MIN_YEAR}-{MAX_YEAR}"
                )
            values['year'] = year
        else:
            values['year'] = today.year

        return LearnerRecord(**values)

    @staticmethod
    def load_learners(path, sheet_name=DEFAULT_SHEET, today=None):
        """
        Read every learner from ``sheet_name`` of the workbook at ``path``.

        Returns:
            List of LearnerRecord, in sheet order, blank rows skipped
        """
        path = Path(path)
        if not path.exists():
            raise LearnerDataError(
                f"{path.name} not found. Please create it with a '{sheet_name}' sheet."
            )

        try:
            frame = pd.read_excel(path, sheet_name=sheet_name, dtype=object, engine='openpyxl')
        except ValueError as exc:
            # pandas raises ValueError for a missing worksheet
            raise LearnerDataError(f"Could not read sheet '{sheet_name}' from {path.name}: {exc}") from exc
        except (OSError, BadZipFile, InvalidFileException) as exc:
            raise LearnerDataError(f"Could not open {path.name}: {exc}") from exc

        frame = frame.dropna(how='all')
        frame.columns = [str(column).strip() for column in frame.columns]

        learners = []
        # Row numbers as seen in Excel: header is row 1
        for index, row in zip(frame.index, frame.to_dict(orient='records')):
            learners.append(LearnerService.record_from_row(row, today=today, row_number=index + 2))
        return learners
