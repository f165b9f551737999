"""
Gunicorn configuration for SecureFeedback.

    gunicorn -c deploy/gunicorn.conf.py securefeedback.wsgi:app

Binds to the same PORT the development server uses. Worker timeouts are sized
from the database retry settings so a worker is never killed while the pool
manager is still waiting between connection attempts.
"""

from __future__ import annotations

import logging
import multiprocessing
import os

log = logging.getLogger("securefeedback.gunicorn")


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, ""))
    except ValueError:
        return default


def _retry_window_seconds() -> float:
    attempts = _env_int("DB_CONNECT_ATTEMPTS", 3)
    try:
        delay = float(os.environ.get("DB_RETRY_DELAY_SECONDS", "3"))
    except ValueError:
        delay = 3.0
    return max(attempts - 1, 0) * delay


# ===== Binding =====
bind = os.environ.get("GUNICORN_BIND", f"0.0.0.0:{_env_int('PORT', 8080)}")

# ===== Workers =====
# gthread: threads in a worker share that worker's pool manager.
worker_class = "gthread"
workers = _env_int("GUNICORN_WORKERS", min(multiprocessing.cpu_count() * 2 + 1, 8))
threads = _env_int("GUNICORN_THREADS", 4)
# Keep total threads per worker within the SQLAlchemy pool size.
threads = min(threads, _env_int("DB_POOL_MAX", 10))

# ===== Timeouts =====
# Connect attempts plus 15s per attempt for the ODBC login timeout.
timeout = _env_int(
    "GUNICORN_TIMEOUT",
    int(_retry_window_seconds() + 15 * _env_int("DB_CONNECT_ATTEMPTS", 3)) + 10,
)
graceful_timeout = _env_int("GUNICORN_GRACEFUL_TIMEOUT", 30)

# ===== Logging =====
accesslog = os.environ.get("GUNICORN_ACCESSLOG", "-")
errorlog = "-"
loglevel = os.environ.get("LOG_LEVEL", "info").lower()
access_log_format = '%(h)s "%(r)s" %(s)s %(b)s %(M)sms'

# Registration bodies are small form or JSON documents.
limit_request_line = 4094
limit_request_fields = 50

proc_name = "securefeedback"


def when_ready(server):
    log.info("SecureFeedback listening on %s (%s workers x %s threads)", bind, workers, threads)


def worker_exit(server, worker):
    """Dispose the worker's database pool on shutdown."""
    app = getattr(worker, "wsgi", None)
    manager = getattr(app, "extensions", {}).get("pool_manager")
    if manager is not None:
        manager.close()


def worker_abort(worker):
    log.warning("Worker %s exceeded %ss; database connect attempts may be hanging", worker.pid, timeout)
