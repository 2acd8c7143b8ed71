"""
Errors raised by the timesheet glue services
"""


class TimesheetError(Exception):
    """Base class for timesheet generation failures"""


class LearnerDataError(TimesheetError):
    """The learner workbook is missing or unreadable"""


class TemplateNotFoundError(TimesheetError):
    """The fillable timesheet template does not exist"""


class MailError(TimesheetError):
    """A filled timesheet could not be emailed"""
