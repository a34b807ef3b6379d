"""Persisted preferred-model name."""

from __future__ import annotations

import logging

from .logging import log_event
from .settings import BoostSettings


class PreferenceStore:
    """Reads and writes the user's preferred model name.

    Names are not checked against the model registry here; an unknown name
    is caught when the registry resolves it.
    """

    def __init__(self, settings: BoostSettings) -> None:
        self.settings = settings

    def get(self) -> str:
        return self.settings.preferred_model()

    def set(self, name: str) -> None:
        self.settings.set_preferred_model(name)
        log_event(
            "preference_updated",
            level=logging.INFO,
            key="preferredModel",
            value=name,
            settings_file=self.settings.location,
        )
