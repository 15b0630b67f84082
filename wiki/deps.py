"""Shared dependencies: process-scoped objects held on the application state."""

from fastapi import Request

from wiki.config import Settings
from wiki.services.renderer import Renderer
from wiki.services.store import PageStore


def get_app_settings(request: Request) -> Settings:
    settings: Settings = request.app.state.settings
    return settings


def get_store(request: Request) -> PageStore:
    store: PageStore = request.app.state.store
    return store


def get_renderer(request: Request) -> Renderer:
    renderer: Renderer = request.app.state.renderer
    return renderer
