import os


basedir = os.path.abspath(os.path.dirname(__file__))


def env_flag(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('true', '1', 'yes', 'on')


class Config:
    """Base configuration"""

    # Secret key for signing
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'

    # Timesheet inputs and outputs
    TEMPLATE_PATH = os.environ.get('TEMPLATE_PATH') or \
        os.path.join(basedir, 'templates', 'timesheet-template.pdf')
    LEARNER_DATA_PATH = os.environ.get('LEARNER_DATA_PATH') or os.path.join(basedir, 'data.xlsx')
    LEARNER_SHEET = os.environ.get('LEARNER_SHEET') or 'Learners'
    OUTPUT_DIR = os.environ.get('OUTPUT_DIR') or os.path.join(basedir, 'output')

    # Uploads
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER') or os.path.join(basedir, 'uploads')
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024  # 10MB workbooks

    # Outgoing mail (SMTP)
    MAIL_SERVER = os.environ.get('MAIL_SERVER') or 'smtp.gmail.com'
    MAIL_PORT = int(os.environ.get('MAIL_PORT') or 587)
    MAIL_USE_TLS = env_flag('MAIL_USE_TLS', True)
    MAIL_USE_SSL = env_flag('MAIL_USE_SSL', False)
    MAIL_USERNAME = os.environ.get('MAIL_USERNAME')
    MAIL_PASSWORD = os.environ.get('MAIL_PASSWORD')
    MAIL_DEFAULT_SENDER = os.environ.get('MAIL_DEFAULT_SENDER') or os.environ.get('MAIL_USERNAME')
    MAIL_SENDER_NAME = os.environ.get('MAIL_SENDER_NAME') or 'Timesheet Bot'
    MAIL_SUPPRESS_SEND = env_flag('MAIL_SUPPRESS_SEND', False)
    MAIL_TIMEOUT = 30

    # Rate Limiting
    RATELIMIT_STORAGE_URI = os.environ.get('RATELIMIT_STORAGE_URI') or 'memory://'
    RATELIMIT_STRATEGY = 'fixed-window'
    RATELIMIT_HEADERS_ENABLED = True
    GENERATE_RATE_LIMIT = os.environ.get('GENERATE_RATE_LIMIT') or '5 per minute'

    # Security Headers
    SECURITY_HEADERS = {
        'Strict-Transport-Security': 'max-age=31536000; includeSubDomains',
        'X-Content-Type-Options': 'nosniff',
        'X-Frame-Options': 'SAMEORIGIN',
        'X-XSS-Protection': '1; mode=block',
        'Referrer-Policy': 'strict-origin-when-cross-origin'
    }

    @classmethod
    def init_app(cls, app):
        pass


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    # Print mail to the log instead of sending unless explicitly enabled
    MAIL_SUPPRESS_SEND = env_flag('MAIL_SUPPRESS_SEND', True)


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False

    # MUST set these environment variables in production
    SECRET_KEY = os.environ.get('SECRET_KEY')  # Generate with: python -c 'import secrets; print(secrets.token_hex(32))'

    PREFERRED_URL_SCHEME = 'https'

    # Validate required settings
    @classmethod
    def init_app(cls, app):
        Config.init_app(app)

        if not app.config.get('SECRET_KEY'):
            raise ValueError("SECRET_KEY environment variable must be set in production!")

        if not app.config.get('MAIL_SUPPRESS_SEND'):
            if not app.config.get('MAIL_USERNAME') or not app.config.get('MAIL_PASSWORD'):
                raise ValueError("MAIL_USERNAME and MAIL_PASSWORD must be set in production!")

        if app.config.get('RATELIMIT_STORAGE_URI', '').startswith('memory://'):
            import warnings
            warnings.warn("In-memory rate limit storage is per-worker. Use Redis with multiple gunicorn workers.")


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    RATELIMIT_ENABLED = False
    MAIL_SERVER = 'localhost'
    MAIL_USE_TLS = False
    MAIL_USERNAME = None
    MAIL_PASSWORD = None
    MAIL_DEFAULT_SENDER = 'timesheets@example.com'
    MAIL_SUPPRESS_SEND = True


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
