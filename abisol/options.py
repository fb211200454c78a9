"""Generation options (pure data, no business logic)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from . import constants


class GenerationMode(Enum):
    """Standalone source file, or an interface to splice into another file."""

    NORMAL = "normal"
    EMBEDDED = "embedded"


@dataclass(frozen=True)
class GenerateOptions:
    """Groups the caller-facing generation settings."""

    name: str = constants.DEFAULT_INTERFACE_NAME
    solidity_version: str = constants.DEFAULT_SOLIDITY_VERSION
    license: str = constants.DEFAULT_LICENSE
    mode: GenerationMode = GenerationMode.NORMAL
    output_attribution: bool = True
    output_source: bool = True
    # None: format when a formatter is available
    prettify_output: bool | None = None
