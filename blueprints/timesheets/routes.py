"""
Timesheet Routes
HTTP triggers for the generate-and-email pipeline
"""
from datetime import datetime
from pathlib import Path

from flask import current_app, jsonify, request
from werkzeug.utils import secure_filename

from . import timesheets_bp
from .forms import UploadLearnersForm
from extensions import limiter
from services.learner_service import LearnerService
from services.mail_service import MailSettings
from services.pay_period_service import MAX_YEAR, MIN_YEAR, PayPeriodService
from services.timesheet_service import TimesheetService


def _generate_rate_limit():
    return current_app.config.get('GENERATE_RATE_LIMIT', '5 per minute')


def _run_pipeline(data_path, month=None, year=None):
    """Load learners from ``data_path`` and fill/email their timesheets"""
    cfg = current_app.config
    learners = LearnerService.load_learners(data_path, sheet_name=cfg['LEARNER_SHEET'])
    current_app.logger.info(f'Loaded {len(learners)} learner(s) from {Path(data_path).name}')
    return TimesheetService.generate_all(
        learners,
        template_path=cfg['TEMPLATE_PATH'],
        output_dir=cfg['OUTPUT_DIR'],
        mail_settings=MailSettings.from_config(cfg),
        month=month,
        year=year,
    )


def _success(results):
    return jsonify({
        'status': 'success',
        'count': len(results),
        'results': [result.to_dict() for result in results],
    })


def _failure(exc):
    current_app.logger.exception(f'Timesheet generation failed: {exc}')
    return jsonify({'status': 'error', 'error': str(exc)}), 500


@timesheets_bp.route('/health')
@limiter.exempt
def health():
    return jsonify({'status': 'ok'})


@timesheets_bp.route('/generate', methods=['POST'])
@limiter.limit(_generate_rate_limit)
def generate():
    """Generate and email timesheets for every learner in the configured workbook"""
    payload = request.get_json(silent=True)
    if payload is None:
        payload = request.form
    elif not isinstance(payload, dict):
        return jsonify({'status': 'error', 'error': 'Request body must be a JSON object'}), 400
    month = payload.get('month') or None
    year = payload.get('year') or None

    if month and not PayPeriodService.is_valid_month(month):
        return jsonify({'status': 'error', 'error': f"'{month}' is not a month name"}), 400
    if year is not None:
        try:
            year = int(year)
        except (TypeError, ValueError, OverflowError):
            return jsonify({'status': 'error', 'error': f"'{year}' is not a valid year"}), 400
        if not PayPeriodService.is_valid_year(year):
            return jsonify({'status': 'error', 'error': f'Year must be between {MIN_YEAR} and {MAX_YEAR}'}), 400

    try:
        results = _run_pipeline(current_app.config['LEARNER_DATA_PATH'], month=month, year=year)
    except Exception as exc:
        return _failure(exc)

    return _success(results)


@timesheets_bp.route('/upload', methods=['POST'])
@limiter.limit(_generate_rate_limit)
def upload():
    """Accept a learner workbook upload, then generate and email from it"""
    form = UploadLearnersForm()
    if not form.validate_on_submit():
        return jsonify({'status': 'error', 'errors': form.errors}), 400

    upload_dir = Path(current_app.config['UPLOAD_FOLDER'])
    upload_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    filename = secure_filename(form.file.data.filename) or 'learners.xlsx'
    saved_path = upload_dir / f'{stamp}_{filename}'
    form.file.data.save(saved_path)
    current_app.logger.info(f'Saved uploaded workbook to {saved_path}')

    try:
        results = _run_pipeline(saved_path, month=form.month.data or None, year=form.year.data)
    except Exception as exc:
        return _failure(exc)

    return _success(results)


@timesheets_bp.route('/pay-period/<month>/<int:year>')
def pay_period(month, year):
    """Preview the five-week grid for a month; unsupported input gives the empty grid"""
    return jsonify(PayPeriodService.build_pay_period(month, year).to_dict())
