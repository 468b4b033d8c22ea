import os

wsgi_app = "gateway_admin.wsgi:app"
bind = os.getenv("ADMIN_BIND", "0.0.0.0:9180")
workers = int(os.getenv("GUNICORN_WORKERS", 4))
worker_class = "sync"
timeout = 30
keepalive = 5
max_requests = 1000
max_requests_jitter = 50

# Logging
accesslog = "-"  # stdout
errorlog = "-"  # stderr
loglevel = os.getenv("LOG_LEVEL", "info")

# For development with reload
reload = os.getenv("FLASK_ENV") == "development"
