from flask import Blueprint

timesheets_bp = Blueprint('timesheets', __name__)

from . import routes
