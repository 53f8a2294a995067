"""ASGI entrypoint for the Cattle Keeper API."""

from cattle_keeper.api.app import create_app
from cattle_keeper.containers import build_container

app = create_app(build_container())
