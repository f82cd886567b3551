import multiprocessing
import os

bind = os.getenv("GUNICORN_BIND", "unix:/var/www/farm-visits/gunicorn.sock")
workers = int(os.getenv("GUNICORN_WORKERS", multiprocessing.cpu_count() * 2 + 1))
worker_class = "sync"
worker_tmp_dir = "/dev/shm"
max_requests = 1000
max_requests_jitter = 100
# PDF exports render in-request
timeout = 60
keepalive = 5

# Logging
accesslog = os.getenv("GUNICORN_ACCESS_LOG", "/var/log/farm-visits/access.log")
errorlog = os.getenv("GUNICORN_ERROR_LOG", "/var/log/farm-visits/error.log")
loglevel = os.getenv("GUNICORN_LOG_LEVEL", "info")
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

proc_name = "farm-visits"

daemon = False
pidfile = "/var/run/farm-visits/gunicorn.pid"
umask = 0o007


def when_ready(server):
    server.log.info("Farm visit API ready. Spawning workers")


def worker_abort(worker):
    worker.log.info("Worker received SIGABRT signal")
