"""
Shared pytest fixtures for the Learner Timesheets test suite.

The app is built once per session from TestingConfig (mail suppressed,
rate limiting off) with every input/output path pointed at a temporary
directory. A single app context is pushed for the whole session so the
services can log through current_app.
"""
import pandas as pd
import pytest

from app import create_app
from services.document_service import DocumentService


LEARNER_ROWS = [
    {
        'name': 'Jane Doe',
        'idNumber': '9001015009087',
        'contact': '0821234567',
        'email': 'jane@example.com',
        'employer': 'Acme Works',
        'City/Town': 'Pretoria',
        'supervisorName': 'Sam Supervisor',
        'TVET College': 'Tshwane South',
        'month': 'march',
        'year': 2024,
    },
    {
        'Learner Name': 'John Smith',
        'Email': 'john@example.com',
        'Employer': 'Beta Labs',
        'month': 'JANUARY',
        'year': 2025,
    },
]


def write_workbook(path, rows, sheet_name='Learners'):
    """Write ``rows`` to an .xlsx workbook the way learners are supplied"""
    pd.DataFrame(rows).to_excel(path, sheet_name=sheet_name, index=False)
    return path


# ---------------------------------------------------------------------------
# Application lifecycle
# ---------------------------------------------------------------------------

@pytest.fixture(scope='session')
def template_path(tmp_path_factory):
    """A complete fillable template drawn by DocumentService"""
    path = tmp_path_factory.mktemp('templates') / 'timesheet-template.pdf'
    return DocumentService.create_template(path)


@pytest.fixture(scope='session')
def app(tmp_path_factory, template_path):
    """Create a test Flask application with temporary data directories."""
    root = tmp_path_factory.mktemp('timesheets')
    application = create_app('testing')
    application.config.update(
        TEMPLATE_PATH=str(template_path),
        LEARNER_DATA_PATH=str(root / 'data.xlsx'),
        OUTPUT_DIR=str(root / 'output'),
        UPLOAD_FOLDER=str(root / 'uploads'),
    )
    ctx = application.app_context()
    ctx.push()
    yield application
    ctx.pop()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def workbook(tmp_path):
    """A two-learner workbook mixing canonical keys and header fallbacks"""
    return write_workbook(tmp_path / 'learners.xlsx', LEARNER_ROWS)


# ---------------------------------------------------------------------------
# SMTP double
# ---------------------------------------------------------------------------

class FakeSMTP:
    """Stands in for smtplib.SMTP / SMTP_SSL and records what was sent"""

    instances = []
    fail_with = None

    def __init__(self, host, port, timeout=None, context=None):
        self.host = host
        self.port = port
        self.started_tls = False
        self.logged_in_as = None
        self.sent = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False

    def starttls(self, context=None):
        self.started_tls = True

    def login(self, username, password):
        self.logged_in_as = username

    def send_message(self, message):
        if FakeSMTP.fail_with is not None:
            raise FakeSMTP.fail_with
        self.sent.append(message)


@pytest.fixture
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    FakeSMTP.fail_with = None
    monkeypatch.setattr('services.mail_service.smtplib.SMTP', FakeSMTP)
    monkeypatch.setattr('services.mail_service.smtplib.SMTP_SSL', FakeSMTP)
    yield FakeSMTP
    FakeSMTP.fail_with = None


@pytest.fixture
def make_workbook(tmp_path):
    """Factory for ad-hoc workbooks: make_workbook(rows, name=..., sheet_name=...)"""
    def _make(rows, name='learners.xlsx', sheet_name='Learners'):
        return write_workbook(tmp_path / name, rows, sheet_name=sheet_name)
    return _make
