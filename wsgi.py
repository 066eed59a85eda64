"""WSGI entrypoint for Gunicorn.

Usage:
  gunicorn -w 2 --threads 8 -b 0.0.0.0:3000 wsgi:app
"""

from lottery import create_app
from lottery.logging_config import install_exception_hooks

install_exception_hooks()
app = create_app()
