"""ASGI entrypoint for the shoot planner API."""

from shoot_planner.api.app import create_app
from shoot_planner.containers import build_container

app = create_app(build_container())
