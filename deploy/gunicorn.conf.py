"""Gunicorn configuration for the debate dashboard service.

Usage:
    gunicorn main:app -c deploy/gunicorn.conf.py

Dashboard state (audit feed, backup jobs, session logs) lives in process,
so the default is a single worker. Scale out with WORKERS only when the
notification store is Redis and per-worker state is acceptable.
"""

import os

# ─── Server socket ──────────────────────────────────────────────

bind = os.getenv("BIND", "0.0.0.0:5000")
backlog = 2048

# ─── Worker processes ───────────────────────────────────────────

workers = int(os.getenv("WORKERS", 1))
worker_class = "uvicorn.workers.UvicornWorker"

# ─── Timeouts ───────────────────────────────────────────────────
#
# The audit SSE feed holds a connection open for as long as the
# dashboard tab stays visible.

timeout = 120
graceful_timeout = 30   # Let in-flight exports and SSE streams drain
keepalive = 120

# ─── Worker recycling ──────────────────────────────────────────

max_requests = 0             # Recycling would drop in-process dashboard state
max_requests_jitter = 0

# ─── Logging ────────────────────────────────────────────────────

accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info")
access_log_format = (
    '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" %(D)sμs'
)

# ─── Process naming ─────────────────────────────────────────────

proc_name = "debate-dashboard"

# ─── Server hooks ───────────────────────────────────────────────


def on_starting(server):
    """Called just before the master process is initialized."""
    server.log.info(
        "Starting Debate Dashboard — workers=%d, timeout=%ds, bind=%s",
        workers,
        timeout,
        bind,
    )


def post_fork(server, worker):
    server.log.info("Worker spawned (pid: %s)", worker.pid)


def worker_exit(server, worker):
    server.log.info("Worker exit (pid: %s)", worker.pid)
