"""Exception hierarchy for ABI → Solidity interface generation."""

from __future__ import annotations


class AbiSolError(Exception):
    """Base class for every error raised by abisol."""

    pass


class AbiFormatError(AbiSolError, ValueError):
    """Raised when the input cannot be read as a contract ABI."""

    pass


class ConfigurationError(AbiSolError):
    """Raised before generation starts when the run cannot be set up.

    Covers an unusable version range and a reformat step that was
    requested but has no formatter to run.
    """

    pass


class VersionIncompatibilityError(AbiSolError):
    """Raised when the requested version range cannot express a construct."""

    def __init__(self, message: str, feature: str = "", version_range: str = ""):
        super().__init__(message)
        self.feature = feature
        self.version_range = version_range
