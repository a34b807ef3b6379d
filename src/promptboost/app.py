"""Application object wiring settings, registry and commands together."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

from .ai.runtime import ModelDiscovery, ProviderDiscovery
from .ai.types import ModelEndpoint
from .boost import BoostResult, BoostStatus, ErrorKind
from .editor import BoostTarget, LineRange, open_in_editor, read_target, replace_target
from .eligibility import (
    EligibilityContext,
    describe_patterns,
    determine_boost_enabled,
    log_patterns,
)
from .instructions import ensure_instruction_file, instruction_file_path
from .logging import log_event
from .preferences import PreferenceStore
from .progress import ConsoleProgressReporter, boost_with_progress
from .registry import ModelRegistry
from .settings import BoostSettings
from .tool import NO_MODEL_MESSAGE, BoostPromptTool
from .ui.interaction import ThreadedConsoleInteraction, UserInteractionPort


class PromptBoostApp:
    """One configured promptboost session.

    Nothing talks to a vendor until :meth:`activate` runs discovery.
    """

    def __init__(
        self,
        settings: BoostSettings,
        storage_dir: str | Path,
        *,
        discovery: Optional[ModelDiscovery] = None,
        interaction: Optional[UserInteractionPort] = None,
        reporter: Optional[ConsoleProgressReporter] = None,
        log_file: Optional[str] = None,
    ) -> None:
        self.settings = settings
        self.storage_dir = Path(storage_dir)
        self.interaction = interaction if interaction is not None else ThreadedConsoleInteraction()
        self.reporter = reporter
        self.log_file = log_file
        self.preferences = PreferenceStore(settings)
        self.registry = ModelRegistry(
            discovery if discovery is not None else ProviderDiscovery(settings),
            self.preferences,
            self.interaction,
            settings.vendor(),
        )
        self.tool = BoostPromptTool(
            self.registry, settings, self.storage_dir, self.interaction
        )

    async def activate(self, *, discover: bool = True) -> None:
        log_event(
            "app_activate",
            level=logging.INFO,
            vendor=self.registry.vendor,
            storage_dir=str(self.storage_dir),
            settings_file=self.settings.location,
        )
        if discover:
            await self.registry.discover()
        ensure_instruction_file(self.storage_dir)
        log_patterns(self.settings)

    def check(self, path: Optional[str | Path]) -> EligibilityContext:
        return determine_boost_enabled(path, self.settings)

    def list_models(self) -> list[ModelEndpoint]:
        return self.registry.list_cached()

    async def select_model(self) -> Optional[ModelEndpoint]:
        return await self.registry.select_model()

    async def edit_instructions(self) -> int:
        """Open the instruction template in the user's editor."""
        path = ensure_instruction_file(self.storage_dir)
        return open_in_editor(path)

    async def boost(
        self,
        path: Optional[str | Path] = None,
        line_range: Optional[LineRange] = None,
        *,
        force: bool = False,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
    ) -> Optional[BoostResult]:
        """Boost a file, a line range of it, or stdin.

        Returns ``None`` when nothing was sent (ineligible file, empty
        text). A successful file boost is written back in place; a stdin
        boost is printed to ``stdout``.
        """
        target = read_target(path, line_range, stdin)

        if not target.is_stdin and not force:
            eligibility = self.check(target.path)
            if not eligibility["enabled"]:
                await self.interaction.error(
                    f"Boost is not enabled for {target.path.name}. "
                    f"Enabled patterns: {describe_patterns(self.settings.file_patterns())} "
                    "(use --force to boost anyway)"
                )
                return None

        if not target.text.strip():
            await self.interaction.error("Nothing to boost: the prompt text is empty.")
            return None

        endpoint = await self.registry.resolve_preferred_or_prompt()
        if endpoint is None:
            if not self.registry.list_cached():
                return BoostResult(target.text, BoostStatus.TERMINATED, ErrorKind.NO_MODELS)
            await self.interaction.warn(NO_MODEL_MESSAGE)
            return BoostResult(target.text, BoostStatus.TERMINATED, ErrorKind.NO_SELECTION)

        result = await boost_with_progress(
            target.text,
            endpoint,
            self.storage_dir,
            interaction=self.interaction,
            reporter=self.reporter,
            max_response_chars=self.settings.max_response_chars(),
            timeout_sec=self.settings.response_timeout(),
            log_file=self.log_file,
        )
        if result.ok:
            self._apply(target, result.text, stdout)
        return result

    def _apply(self, target: BoostTarget, text: str, stdout: Optional[TextIO]) -> None:
        if target.is_stdin:
            out = stdout if stdout is not None else sys.stdout
            out.write(text)
            if not text.endswith("\n"):
                out.write("\n")
            out.flush()
            return
        replace_target(target, text)

    def instruction_file(self) -> Path:
        return instruction_file_path(self.storage_dir)
