"""
Gunicorn configuration for the Vine Portal API.

Env vars that override defaults:
  PORT    : TCP port to bind (the platform usually injects it)
  WORKERS : number of worker processes (default: 2)
"""
import os

wsgi_app = "vine_portal.main:app"

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

# 2 workers fit a 512 MB container.
workers = int(os.environ.get("WORKERS", "2"))

# Uvicorn's ASGI event loop inside Gunicorn's process manager.
worker_class = "uvicorn.workers.UvicornWorker"

keepalive = 5

# Must stay above AUTH_TIMEOUT_SECONDS plus the slowest data-store call.
timeout = 60

# stdout only; request ids are exposed in the X-Request-ID response header.
loglevel = os.environ.get("LOG_LEVEL", "info").lower()
accesslog = "-"
errorlog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)sB %(D)sµs rid=%({x-request-id}o)s'

graceful_timeout = 30
