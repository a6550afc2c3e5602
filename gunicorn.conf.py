"""
Gunicorn configuration for ChannelKit production deployment.

Uses Uvicorn workers for async ASGI support. Run with:
    gunicorn channelkit.main:app -c gunicorn.conf.py
"""

import multiprocessing
import os

# ─── Server Socket ───────────────────────────────────────────
bind = f"0.0.0.0:{os.getenv('PORT', os.getenv('APP_PORT', '8000'))}"

# ─── Worker Processes ────────────────────────────────────────
worker_class = "uvicorn.workers.UvicornWorker"

# Workers = (2 × CPU cores) + 1, capped by WEB_CONCURRENCY
workers = min(multiprocessing.cpu_count() * 2 + 1, int(os.getenv("WEB_CONCURRENCY", "4")))

# Concurrency is via asyncio
threads = 1

# ─── Timeouts ────────────────────────────────────────────────
# Packages download images one by one, each bounded by IMAGE_FETCH_TIMEOUT_SECONDS
timeout = int(os.getenv("GUNICORN_TIMEOUT", "300"))

graceful_timeout = 30

keepalive = 5

# ─── Worker Lifecycle ────────────────────────────────────────
# Restart workers periodically; document and archive buffers are held in memory
max_requests = int(os.getenv("GUNICORN_MAX_REQUESTS", "500"))

max_requests_jitter = 50

preload_app = False  # async engines don't fork well

# ─── Logging ─────────────────────────────────────────────────
# structlog handles formatting; gunicorn just forwards to stdout
accesslog = None  # LoggingMiddleware logs each request
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

# ─── Server Mechanics ────────────────────────────────────────
forwarded_allow_ips = "*"
