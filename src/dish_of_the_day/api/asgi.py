"""ASGI entrypoint for the dish of the day API."""

from dish_of_the_day.api.app import create_app
from dish_of_the_day.containers import build_container

app = create_app(build_container())
