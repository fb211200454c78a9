"""ABI → Solidity interface generator package."""

from .constants import PACKAGE_VERSION as __version__  # noqa: F401
from .api import generate_solidity  # noqa: F401
from .abi import load_abi  # noqa: F401
from .options import GenerateOptions, GenerationMode  # noqa: F401
from .versions import AMBIGUOUS, resolve_features  # noqa: F401
from .errors import (  # noqa: F401
    AbiFormatError,
    AbiSolError,
    ConfigurationError,
    VersionIncompatibilityError,
)
