"""
Document Service
Fills the fillable PDF timesheet template for a learner

The template is a single AcroForm PDF whose text fields are named after the
learner attributes (learnerName, idNumber, ...), the week headers
(week1..week5) and the day cells (day_w{week}_d{pos} / date_w{week}_d{pos}).
Fields missing from a given template are skipped, so older templates
without the day grid still fill.
"""
import re
from pathlib import Path

from flask import current_app
from pypdf import PdfReader, PdfWriter
from reportlab.lib.pagesizes import A4, landscape
from reportlab.pdfgen import canvas

from services.errors import TemplateNotFoundError
from services.pay_period_service import DAYS_PER_WEEK, WEEK_COUNT


# Header block layout for create_template(): (field, label)
HEADER_FIELDS = (
    ('learnerName', 'Learner Name'),
    ('idNumber', 'ID Number'),
    ('contact', 'Contact'),
    ('email', 'Email'),
    ('employer', 'Employer'),
    ('physicalAddress', 'Physical Address'),
    ('suburb', 'Suburb'),
    ('cityTown', 'City/Town'),
    ('postalCode', 'Postal Code'),
    ('localMunicipality', 'Local Municipality'),
    ('districtMunicipality', 'District Municipality'),
    ('metropolitanMunicipality', 'Metropolitan Municipality'),
    ('province', 'Province'),
    ('supervisorName', 'Supervisor Name'),
    ('supervisorContact', 'Supervisor Contact'),
    ('supervisorEmail', 'Supervisor Email'),
    ('activitiesCount', 'Activities Count'),
    ('tvetCollege', 'TVET College'),
    ('month', 'Month'),
)


class DocumentService:
    """Service for filling and creating timesheet PDFs"""

    @staticmethod
    def output_filename(learner):
        """e.g. timesheet-Jane_Doe-MARCH.pdf"""
        safe_name = re.sub(r'[^a-zA-Z0-9]', '_', learner.learner_name)
        safe_month = re.sub(r'[^a-zA-Z0-9]', '_', learner.month)
        return f'timesheet-{safe_name}-{safe_month}.pdf'

    @staticmethod
    def build_field_values(learner, pay_period):
        """All template field values for one learner and pay period"""
        values = learner.template_values()
        values.update(pay_period.week_labels())
        values.update(pay_period.day_fields())
        return values

    @staticmethod
    def fill_timesheet(template_path, learner, pay_period, output_path):
        """
        Write a filled copy of the template to ``output_path``.

        Values for fields the template does not define are dropped.

        Returns:
            Path of the written PDF
        """
        template_path = Path(template_path)
        output_path = Path(output_path)
        if not template_path.exists():
            raise TemplateNotFoundError(f'Timesheet template not found: {template_path}')

        reader = PdfReader(template_path)
        writer = PdfWriter(clone_from=reader)

        available = set((reader.get_fields() or {}).keys())
        values = DocumentService.build_field_values(learner, pay_period)
        skipped = sorted(name for name in values if name not in available)
        if skipped:
            current_app.logger.debug(
                f'Template {template_path.name} has no fields for: {", ".join(skipped)}'
            )
        values = {name: value or '' for name, value in values.items() if name in available}

        for page in writer.pages:
            if '/Annots' in page:
                writer.update_page_form_field_values(page, values)
        writer.set_need_appearances_writer(True)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'wb') as f:
            writer.write(f)

        current_app.logger.info(
            f'Filled {len(values)} fields for {learner.learner_name} ({learner.month}) -> {output_path.name}'
        )
        return output_path

    @staticmethod
    def template_field_names():
        """Every field name a complete template carries"""
        names = [name for name, _ in HEADER_FIELDS]
        names.extend(f'week{w}' for w in range(1, WEEK_COUNT + 1))
        for w in range(1, WEEK_COUNT + 1):
            for d in range(1, DAYS_PER_WEEK + 1):
                names.append(f'day_w{w}_d{d}')
                names.append(f'date_w{w}_d{d}')
        return names

    @staticmethod
    def create_template(path):
        """
        Draw a blank fillable timesheet template with reportlab.

        Page 1 carries the learner details, page 2 the five-week grid.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        width, height = landscape(A4)
        c = canvas.Canvas(str(path), pagesize=(width, height))
        form = c.acroForm

        c.setFont('Helvetica-Bold', 14)
        c.drawString(40, height - 40, 'Learner Timesheet')
        c.setFont('Helvetica', 9)
        column_x = (40, 420)
        rows_per_column = (len(HEADER_FIELDS) + 1) // 2
        for i, (name, label) in enumerate(HEADER_FIELDS):
            x = column_x[i // rows_per_column]
            y = height - 80 - (i % rows_per_column) * 24
            c.drawString(x, y + 5, label)
            form.textfield(
                name=name, tooltip=label,
                x=x + 130, y=y, width=220, height=16,
                borderStyle='underlined', fontSize=9,
            )
        c.showPage()

        c.setFont('Helvetica-Bold', 12)
        c.drawString(40, height - 40, 'Attendance')
        c.setFont('Helvetica', 8)
        cell_width = 100
        for w in range(1, WEEK_COUNT + 1):
            top = height - 70 - (w - 1) * 95
            form.textfield(
                name=f'week{w}', tooltip=f'Week {w}',
                x=40, y=top, width=300, height=16,
                borderStyle='underlined', fontSize=9,
            )
            for d in range(1, DAYS_PER_WEEK + 1):
                x = 40 + (d - 1) * (cell_width + 10)
                form.textfield(
                    name=f'day_w{w}_d{d}', x=x, y=top - 22,
                    width=cell_width, height=14, fontSize=8,
                )
                form.textfield(
                    name=f'date_w{w}_d{d}', x=x, y=top - 40,
                    width=cell_width, height=14, fontSize=8,
                )
        c.showPage()
        c.save()
        return path
