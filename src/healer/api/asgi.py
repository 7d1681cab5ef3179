"""ASGI entrypoint for the meal planner API."""

from healer.api.app import create_app
from healer.containers import build_container

app = create_app(build_container())
