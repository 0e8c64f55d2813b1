"""
Gunicorn configuration for boxtracker.

The master process reconciles box numbers (``inventory.backfill``) in
``on_starting``, before any worker is forked, so no request can allocate a box
number while legacy boxes are still being numbered. A failed backfill stops
gunicorn from starting.

Environment Variables:
    GUNICORN_BIND - Bind address (default: unix socket)
    GUNICORN_WORKERS - Number of worker processes (default: CPU * 2 + 1)
    GUNICORN_WORKER_CLASS - Worker class (default: sync)
    GUNICORN_THREADS - Threads per worker for gthread (default: 1)
    GUNICORN_TIMEOUT - Worker timeout in seconds (default: 60)
    GUNICORN_GRACEFUL_TIMEOUT - Graceful shutdown timeout (default: 30)
    GUNICORN_KEEPALIVE - Keep-alive timeout (default: 5)
    GUNICORN_MAX_REQUESTS - Max requests per worker before restart (default: 1000)
    GUNICORN_MAX_REQUESTS_JITTER - Random jitter for max_requests (default: 50)
    GUNICORN_LOG_LEVEL - Logging level (default: info)
    GUNICORN_ACCESS_LOG - Access log file (default: -)
    GUNICORN_ERROR_LOG - Error log file (default: -)
    DJANGO_SETTINGS_MODULE - Settings used by the startup backfill (default: boxtracker.settings)
"""

import multiprocessing
import os


def get_env_int(key: str, default: int) -> int:
    """Get integer from environment variable with fallback."""
    try:
        return int(os.getenv(key, default))
    except (ValueError, TypeError):
        return default


def get_env_str(key: str, default: str) -> str:
    """Get string from environment variable with fallback."""
    return os.getenv(key, default)


# =============================================================================
# Server Socket
# =============================================================================

# TCP (0.0.0.0:8000) or Unix socket (unix:/run/boxtracker/boxtracker.sock)
bind = get_env_str('GUNICORN_BIND', 'unix:/run/boxtracker/boxtracker.sock')
backlog = get_env_int('GUNICORN_BACKLOG', 2048)

wsgi_app = 'boxtracker.wsgi:application'

# =============================================================================
# Worker Processes
# =============================================================================

workers = get_env_int('GUNICORN_WORKERS', multiprocessing.cpu_count() * 2 + 1)
worker_class = get_env_str('GUNICORN_WORKER_CLASS', 'sync')
threads = get_env_int('GUNICORN_THREADS', 1)

timeout = get_env_int('GUNICORN_TIMEOUT', 60)
graceful_timeout = get_env_int('GUNICORN_GRACEFUL_TIMEOUT', 30)
keepalive = get_env_int('GUNICORN_KEEPALIVE', 5)

# Recycle workers periodically; jitter keeps them from restarting together
max_requests = get_env_int('GUNICORN_MAX_REQUESTS', 1000)
max_requests_jitter = get_env_int('GUNICORN_MAX_REQUESTS_JITTER', 50)

# =============================================================================
# Logging
# =============================================================================

accesslog = get_env_str('GUNICORN_ACCESS_LOG', '-')
errorlog = get_env_str('GUNICORN_ERROR_LOG', '-')
loglevel = get_env_str('GUNICORN_LOG_LEVEL', 'info')
access_log_format = get_env_str(
    'GUNICORN_ACCESS_LOG_FORMAT',
    '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'
)

# =============================================================================
# Process
# =============================================================================

proc_name = get_env_str('GUNICORN_PROC_NAME', 'boxtracker')
daemon = False
pidfile = get_env_str('GUNICORN_PIDFILE', '/run/boxtracker/boxtracker.pid')
user = get_env_str('GUNICORN_USER', None)
group = get_env_str('GUNICORN_GROUP', None)
chdir = get_env_str('GUNICORN_CHDIR', os.getcwd())

# Workers load the app after the master has finished the backfill
preload_app = False

# =============================================================================
# Server Hooks
# =============================================================================

def run_startup_backfill(server):
    """
    Reconcile box numbers once, in the master process.

    Raises whatever the backfill raised; gunicorn then exits instead of
    forking workers against a half-numbered pool.
    """
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'boxtracker.settings')

    import django
    django.setup()

    from django.conf import settings
    from django.db import connections

    if not getattr(settings, 'BOX_NUMBER_BACKFILL_ON_STARTUP', True):
        server.log.info("Box number backfill disabled (BOX_NUMBER_BACKFILL_ON_STARTUP=False)")
        return

    from inventory.backfill import backfill_box_numbers

    try:
        result = backfill_box_numbers()
    except Exception:
        server.log.exception("Box number backfill failed; refusing to start workers")
        raise
    finally:
        # Forked workers must open their own connections
        connections.close_all()

    if result.changed:
        server.log.info(
            f"Box number backfill: reserved {result.reserved}, assigned {result.assigned}"
        )
    else:
        server.log.info("Box numbers are up to date")


def on_starting(server):
    """Called just before the master process is initialized."""
    server.log.info("Starting boxtracker with Gunicorn")
    server.log.info(f"Workers: {workers}, Bind: {bind}")
    server.log.info(f"Worker class: {worker_class}, Timeout: {timeout}s")
    run_startup_backfill(server)


def on_reload(server):
    """Called to recycle workers during a reload via SIGHUP."""
    server.log.info("Reloading boxtracker workers")


def when_ready(server):
    """Called just after the server is started."""
    server.log.info("boxtracker is ready to accept connections")


def post_fork(server, worker):
    """Called just after a worker has been forked."""
    server.log.debug(f"Worker {worker.pid} spawned")


def worker_abort(worker):
    """Called when a worker receives the SIGABRT signal."""
    worker.log.warning(f"Worker {worker.pid} aborted (timeout?)")


def child_exit(server, worker):
    """Called just after a worker has been exited."""
    server.log.debug(f"Worker {worker.pid} exited")


def on_exit(server):
    """Called just before exiting Gunicorn."""
    server.log.info("Shutting down boxtracker")


# =============================================================================
# Security
# =============================================================================

limit_request_line = get_env_int('GUNICORN_LIMIT_REQUEST_LINE', 4094)
limit_request_field_size = get_env_int('GUNICORN_LIMIT_REQUEST_FIELD_SIZE', 8190)
limit_request_fields = get_env_int('GUNICORN_LIMIT_REQUEST_FIELDS', 100)
