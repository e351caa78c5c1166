"""ASGI entrypoint for the upload tracker API."""

from upload_tracker.api.app import create_app
from upload_tracker.containers import build_container

app = create_app(build_container())
