"""
Gunicorn Configuration for Learner Timesheets
Production WSGI server settings

    gunicorn -c deployment/gunicorn_config.py wsgi:app
"""
import os

# Server Socket
bind = os.environ.get('GUNICORN_BIND', '127.0.0.1:8000')
backlog = 2048

# Worker Processes
# Generation is a short synchronous batch; a couple of workers is plenty
workers = int(os.environ.get('GUNICORN_WORKERS', 2))
worker_class = 'sync'
max_requests = 1000
max_requests_jitter = 50
# A batch fills and emails every learner inside one request
timeout = int(os.environ.get('GUNICORN_TIMEOUT', 300))
keepalive = 5

# Logging
accesslog = os.environ.get('GUNICORN_ACCESS_LOG', 'logs/gunicorn_access.log')
errorlog = os.environ.get('GUNICORN_ERROR_LOG', 'logs/gunicorn_error.log')
loglevel = 'info'
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# Process Naming
proc_name = 'learner-timesheets'

# Server Mechanics
daemon = False
umask = 0o007

# Security
limit_request_line = 4094
limit_request_fields = 100
limit_request_field_size = 8190


def on_starting(server):
    """Called just before the master process is initialized"""
    os.makedirs(os.path.dirname(accesslog) or '.', exist_ok=True)


def post_fork(server, worker):
    """Called after a worker has been forked"""
    server.log.info("Worker spawned (pid: %s)", worker.pid)


def when_ready(server):
    """Called when the server is ready"""
    server.log.info("Server is ready. Spawning workers")


def worker_abort(worker):
    """Called when a worker fails to boot or times out"""
    worker.log.info("worker received SIGABRT signal (batch exceeded timeout?)")
