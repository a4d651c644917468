# Gunicorn configuration for production
# Usage: gunicorn -c gunicorn.conf.py media_ingest.main:app

import os

# Bind to all interfaces on port 8000
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")

# Crawl jobs run inside the request; a couple of workers is enough
workers = int(os.getenv("GUNICORN_WORKERS", os.getenv("WEB_CONCURRENCY", 2)))

# Use Uvicorn workers for async support
worker_class = "uvicorn.workers.UvicornWorker"

# A 500-page crawl at 300 ms pacing runs for minutes
timeout = int(os.getenv("GUNICORN_TIMEOUT", 900))

# Graceful timeout (seconds)
graceful_timeout = int(os.getenv("GUNICORN_GRACEFUL_TIMEOUT", 30))

# Keep-alive timeout (seconds)
keepalive = int(os.getenv("GUNICORN_KEEPALIVE", 5))

# Logging
accesslog = os.getenv("GUNICORN_ACCESS_LOG", "-")  # stdout
errorlog = os.getenv("GUNICORN_ERROR_LOG", "-")  # stderr
loglevel = os.getenv("GUNICORN_LOG_LEVEL", "info")

# Access log format (JSON-friendly)
access_log_format = '{"time": "%(t)s", "status": %(s)s, "method": "%(m)s", "path": "%(U)s", "query": "%(q)s", "duration_ms": %(D)s, "size": %(B)s, "remote_addr": "%(h)s", "user_agent": "%(a)s"}'
