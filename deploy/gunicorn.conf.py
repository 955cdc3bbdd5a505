import multiprocessing
import os

from tuition.config import settings


wsgi_app = "tuition.main:app"
worker_class = "uvicorn.workers.UvicornWorker"
bind = os.getenv("GUNICORN_BIND", "127.0.0.1:8000")

# SQLite takes one writer at a time; fan out only on a server database.
_default_workers = 2 if settings.database_url.startswith("sqlite") else (multiprocessing.cpu_count() * 2) + 1
workers = int(os.getenv("WEB_CONCURRENCY", _default_workers))

# AI helper calls can take up to ai_helper_timeout_seconds.
timeout = max(60, int(settings.ai_helper_timeout_seconds) + 15)
graceful_timeout = 30
keepalive = 5
loglevel = "info"
accesslog = "-"
errorlog = "-"
