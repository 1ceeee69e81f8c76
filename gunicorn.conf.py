"""
Gunicorn configuration for production: uvicorn workers serving main:app.

    gunicorn main:app -c gunicorn.conf.py
"""
import multiprocessing
from pathlib import Path

# Bind, worker count and LOG_DIR come from .env (via framework.config)
from framework.config import settings

LOG_DIR = Path(settings.LOG_DIR)
LOG_DIR.mkdir(parents=True, exist_ok=True)

# Server
bind = settings.GUNICORN_BIND
backlog = 2048

# Workers
workers = settings.GUNICORN_WORKERS or min(multiprocessing.cpu_count() * 2 + 1, 8)
worker_class = "uvicorn.workers.UvicornWorker"
max_requests = 2000
max_requests_jitter = 100
timeout = settings.GUNICORN_TIMEOUT
graceful_timeout = 30
keepalive = 5

proc_name = (settings.GUNICORN_PROC_NAME or settings.APP_NAME.lower().replace(" ", "-"))[:32]

# Logging; application logs go through loguru into the same directory
accesslog = str(LOG_DIR / "gunicorn_access.log")
errorlog = str(LOG_DIR / "gunicorn_error.log")
loglevel = "info"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)s %(D)sus trace=%({x-trace-id}o)s'

# Process management (systemd supervises)
daemon = False
pidfile = str(LOG_DIR / "gunicorn.pid")
umask = 0o007

# DB engine is created lazily, after fork
preload_app = True
worker_tmp_dir = "/dev/shm"

# Request limits
limit_request_line = 4094
limit_request_fields = 100
limit_request_field_size = 8190


def when_ready(server):
    server.log.info("%s is ready. Listening on %s (%s workers)", settings.APP_NAME, server.address, workers)


def post_fork(server, worker):
    server.log.info("Worker spawned (pid: %s)", worker.pid)


def worker_abort(worker):
    worker.log.warning("Worker %s timed out after %ss", worker.pid, timeout)


def on_exit(server):
    server.log.info("%s is shutting down.", settings.APP_NAME)
