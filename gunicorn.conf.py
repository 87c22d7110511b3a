"""
Gunicorn configuration for production deployment.

Usage:
    gunicorn -c gunicorn.conf.py wsgi:app
"""

import multiprocessing
import os

# --- Bind ---
# PORT is the same variable the app reads for the development server.
bind = os.environ.get('GUNICORN_BIND', f"0.0.0.0:{os.environ.get('PORT', '3000')}")

# --- Workers ---
# Pre-fork sync workers: one request per worker at a time. The MongoClient
# is created after fork, inside each worker's create_app().
workers = min(multiprocessing.cpu_count() * 2 + 1, 4)
worker_class = 'sync'

# --- Timeouts ---
# Request timeouts are owned here, not by the application.
timeout = 30
graceful_timeout = 10
keepalive = 2

# --- Worker Recycling ---
max_requests = 1000
max_requests_jitter = 50

# --- Request limits ---
limit_request_line = 8190
limit_request_fields = 50
limit_request_field_size = 8190

# --- Logging ---
# Access log excludes request bodies, cookies and authorization headers.
accesslog = '-'
errorlog = '-'
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" %(L)s'
loglevel = os.environ.get('LOG_LEVEL', 'info')

# --- Process Naming ---
proc_name = 'yelpcamp'

# --- Forwarded Headers ---
# Only trust X-Forwarded-* from the reverse proxy.
forwarded_allow_ips = os.environ.get('FORWARDED_ALLOW_IPS', '127.0.0.1')
