from __future__ import annotations

from fastapi import Request

from app.config import Settings
from app.observability.history import RequestHistory
from app.services.catalog import CatalogStore
from app.services.inventory import InventoryAdjuster


def get_catalog(request: Request) -> CatalogStore:
    return request.app.state.catalog


def get_adjuster(request: Request) -> InventoryAdjuster:
    return request.app.state.adjuster


def get_history(request: Request) -> RequestHistory:
    return request.app.state.history


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
