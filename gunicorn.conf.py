import os

bind = "0.0.0.0:5000"
wsgi_app = "webtarot.app:create_app()"
# Socket.IO subscriptions and the in-process broadcaster need one process
workers = 1
worker_class = "gthread"
threads = int(os.getenv("GUNICORN_THREADS", 32))
timeout = 120
keepalive = 5

# Logging
accesslog = "-"  # stdout
errorlog = "-"  # stderr
loglevel = os.getenv("LOG_LEVEL", "info").lower()

# For development with reload
reload = os.getenv("FLASK_ENV") == "development"
