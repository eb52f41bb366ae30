import os

bind = os.getenv("GUNICORN_BIND", "unix:/var/www/jbr-website/gunicorn.sock")
workers = int(os.getenv("GUNICORN_WORKERS", 3))
worker_class = "sync"
worker_tmp_dir = "/dev/shm"
max_requests = 1000
max_requests_jitter = 100
# Leaves room for a slow SMTP handshake (EMAIL_TIMEOUT)
timeout = 60
keepalive = 5

# Logging
accesslog = "/var/log/jbr-website/access.log"
errorlog = "/var/log/jbr-website/error.log"
loglevel = "info"
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# Process naming
proc_name = "jbr-website"

# Server mechanics
daemon = False
pidfile = "/var/run/jbr-website/gunicorn.pid"
user = "deploy"
group = "deploy"
umask = 0o007

# Server hooks
def on_starting(server):
    """Called just before the master process is initialized."""
    server.log.info("Starting Gunicorn server")

def when_ready(server):
    """Called just after the server is started."""
    server.log.info("Gunicorn server is ready. Spawning workers")

def worker_int(worker):
    """Called when a worker receives the SIGINT or SIGQUIT signal."""
    worker.log.info("Worker received SIGINT or SIGQUIT signal")

def worker_exit(server, worker):
    """Called in the worker just before it exits; releases the contact services."""
    from django.apps import apps

    if apps.ready:
        services = apps.get_app_config('contact').services
        if services is not None:
            services.close()
    server.log.info(f"Worker {worker.pid} exited")
