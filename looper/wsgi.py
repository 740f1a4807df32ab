"""WSGI entry point for the looper service."""

import os

from looper.looper_app import create_app

app = create_app(os.getenv("FLASK_ENV", "production"))
