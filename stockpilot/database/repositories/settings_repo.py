from __future__ import annotations
from dataclasses import dataclass

from ...constants import APP_NAME, COL_SETTINGS
from ...utils.validators import require_text
from ..store import CollectionStore
from .base import Record


@dataclass
class AppSettings(Record):
    app_name: str = APP_NAME
    logo_url: str = ""


class SettingsRepo:
    """The settings collection holds a single object, not a list."""

    def __init__(self, store: CollectionStore):
        self.store = store

    def load(self) -> AppSettings:
        data = self.store.get(COL_SETTINGS) or {}
        return AppSettings.from_dict(data)

    def save(self, settings: AppSettings) -> AppSettings:
        settings.app_name = require_text(settings.app_name, "app_name", "Application name")
        self.store.set(COL_SETTINGS, settings.to_dict())
        return settings
