"""ASGI entrypoint for the meal analytics API."""

from meal_analytics.api.app import create_app
from meal_analytics.containers import build_container

app = create_app(build_container())
