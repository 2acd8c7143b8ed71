import os
import json
import logging
import click
from logging.handlers import RotatingFileHandler
from pathlib import Path
from flask import Flask, current_app, jsonify
from werkzeug.exceptions import HTTPException
from config import config
from extensions import limiter
from services.pay_period_service import MAX_YEAR, MIN_YEAR


def configure_logging(app):
    """Configure application logging"""
    if not app.debug and not app.testing:
        # Create logs directory if it doesn't exist
        if not os.path.exists('logs'):
            os.mkdir('logs')

        # File handler for errors
        file_handler = RotatingFileHandler(
            'logs/timesheets.log',
            maxBytes=10240000,  # 10MB
            backupCount=10
        )
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s '
            '[in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(logging.INFO)
        app.logger.addHandler(file_handler)

        app.logger.setLevel(logging.INFO)
        app.logger.info('Learner Timesheets startup')
    else:
        # Development logging to console
        app.logger.setLevel(logging.DEBUG)
        app.logger.info('Learner Timesheets startup (DEBUG mode)')


def create_app(config_name=None):
    """Application factory pattern"""

    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config[config_name])
    config[config_name].init_app(app)

    # Configure logging
    configure_logging(app)

    # Initialize extensions
    limiter.init_app(app)

    # Add security headers
    @app.after_request
    def add_security_headers(response):
        """Add security headers to all responses"""
        headers = app.config.get('SECURITY_HEADERS', {})
        for header, value in headers.items():
            response.headers[header] = value
        return response

    # Register blueprints
    from blueprints.timesheets import timesheets_bp

    app.register_blueprint(timesheets_bp)

    # Register error handlers
    register_error_handlers(app)

    # Register CLI commands
    register_commands(app)

    return app


def register_error_handlers(app):
    """Register global error handlers"""

    @app.errorhandler(HTTPException)
    def http_error(error):
        return jsonify({
            'status': 'error',
            'error': error.description,
        }), error.code

    @app.errorhandler(500)
    def internal_error(error):
        app.logger.error(f'Internal Server Error: {error}')
        return jsonify({'status': 'error', 'error': 'Internal Server Error'}), 500


def register_commands(app):
    """Register Flask CLI commands."""

    @app.cli.group()
    def timesheets():
        """Generate and email learner timesheets."""
        pass

    @timesheets.command('generate')
    @click.option('--data', 'data_path', type=click.Path(dir_okay=False), help='Learner workbook (defaults to LEARNER_DATA_PATH).')
    @click.option('--month', help='Fill every timesheet for this month instead of the sheet value.')
    @click.option('--year', type=click.IntRange(MIN_YEAR, MAX_YEAR), help='Fill every timesheet for this year instead of the sheet value.')
    @click.option('--no-send', is_flag=True, help='Generate the PDFs without emailing them.')
    def generate(data_path, month, year, no_send):
        """Fill and email a timesheet for every learner in the workbook."""
        from services.errors import TimesheetError
        from services.learner_service import LearnerService
        from services.mail_service import MailSettings
        from services.timesheet_service import TimesheetService

        cfg = current_app.config
        try:
            learners = LearnerService.load_learners(
                data_path or cfg['LEARNER_DATA_PATH'], sheet_name=cfg['LEARNER_SHEET']
            )
            results = TimesheetService.generate_all(
                learners,
                template_path=cfg['TEMPLATE_PATH'],
                output_dir=cfg['OUTPUT_DIR'],
                mail_settings=MailSettings.from_config(cfg),
                month=month,
                year=year,
                send=not no_send,
            )
        except TimesheetError as exc:
            current_app.logger.exception('Timesheet generation failed')
            raise click.ClickException(str(exc))

        for result in results:
            click.echo(result.summary)
        click.echo(f'SUCCESS: {len(results)} timesheet(s) processed.')

    @timesheets.command('calendar')
    @click.argument('month')
    @click.argument('year', type=int)
    @click.option('--json', 'as_json', is_flag=True, help='Print the pay period as JSON.')
    def calendar(month, year, as_json):
        """Show the five-week grid for MONTH YEAR."""
        from services.pay_period_service import PayPeriodService

        pay_period = PayPeriodService.build_pay_period(month, year)
        if as_json:
            click.echo(json.dumps(pay_period.to_dict(), indent=2))
            return

        if pay_period.is_empty:
            click.echo(
                f'WARNING: "{month} {year}" is not a supported month and year '
                f'({MIN_YEAR}-{MAX_YEAR}); showing plain week labels.',
                err=True,
            )
        for week in pay_period.weeks:
            days = '  '.join(f'{day.weekday_name} {day.short_date}' for day in week.days)
            click.echo(f'{week.label:<40} {days}')

    @timesheets.command('create-template')
    @click.argument('path', required=False, type=click.Path(dir_okay=False))
    @click.option('--force', is_flag=True, help='Overwrite an existing template.')
    def create_template(path, force):
        """Write a blank fillable timesheet template (defaults to TEMPLATE_PATH)."""
        from services.document_service import DocumentService

        target = Path(path or current_app.config['TEMPLATE_PATH'])
        if target.exists() and not force:
            click.echo(f'ERROR: {target} already exists (use --force to overwrite)', err=True)
            return
        DocumentService.create_template(target)
        click.echo(f'SUCCESS: Fillable template created at {target}')


if __name__ == '__main__':
    app = create_app()
    # SECURITY: Only bind to localhost in development
    # Never use 0.0.0.0 with debug mode - it exposes the debugger to the network
    app.run(host='127.0.0.1', port=5000, debug=True)
