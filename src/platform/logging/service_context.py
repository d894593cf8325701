"""
Service context for log lines: `<service>@<environment>:<instance>`.
"""

from functools import lru_cache
import os
import socket


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'reservation-service')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')

    # Containers get a short hostname; locally fall back to the PID
    hostname = os.getenv('HOSTNAME') or socket.gethostname()
    instance = hostname[:12] if os.getenv('KUBERNETES_SERVICE_HOST') else str(os.getpid())

    return f'{service_name}@{deploy_env}:{instance}'
