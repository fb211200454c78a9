"""Optional reformat capability for generated Solidity."""

from __future__ import annotations

import logging
import shutil
import subprocess
from abc import ABC, abstractmethod
from typing import Any, Callable

from .errors import ConfigurationError
from . import constants

logger = logging.getLogger(__name__)


class Formatter(ABC):
    """Single-operation capability: reformat source text."""

    @abstractmethod
    def format(self, source: str) -> str: ...


class ForgeFormatter(Formatter):
    """Pipes source through Foundry's ``forge fmt``.

    The subprocess runner is injectable for testing.
    """

    def __init__(
        self,
        executable: str = constants.FORGE_EXECUTABLE,
        runner: Callable[..., Any] = subprocess.run,
    ):
        self._executable = executable
        self._runner = runner

    def is_available(self) -> bool:
        return shutil.which(self._executable) is not None

    def format(self, source: str) -> str:
        logger.debug(
            "ForgeFormatter.format: executable=%s, %d chars", self._executable, len(source)
        )
        result = self._runner(
            [self._executable, "fmt", "--raw", "-"],
            input=source,
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout


def default_formatter() -> Formatter | None:
    """The formatter used when none is injected, or None if it cannot run here."""
    formatter = ForgeFormatter()
    return formatter if formatter.is_available() else None


def resolve_formatter(
    prettify: bool | None,
    formatter: Formatter | None = None,
    default_factory: Callable[[], Formatter | None] = default_formatter,
) -> Formatter | None:
    """Decide which formatter a run uses.

    Args:
        prettify: True to require formatting, False to skip it, None to
            format only when a formatter is available.
        formatter: Pre-built formatter for DI/testing.
        default_factory: Produces the fallback formatter, or None.

    Raises:
        ConfigurationError: If formatting is required but unavailable.
    """
    if prettify is False:
        return None
    if formatter is not None:
        return formatter
    resolved = default_factory()
    if resolved is None and prettify:
        raise ConfigurationError(
            "Output formatting was requested but no formatter is available "
            f"(is `{constants.FORGE_EXECUTABLE}` on PATH?)"
        )
    return resolved
