"""Composable API for generating Solidity interfaces from ABIs.

``generate_solidity`` is the programmatic equivalent of the ``abisol``
command line, callable without argparse.
"""

from __future__ import annotations

import logging
from typing import Any

from .abi import load_abi
from .abi_features import collect_abi_features
from .declarations import collect_declarations
from .formatter import Formatter, resolve_formatter
from .generator import SolidityGenerator
from .options import GenerateOptions
from .versions import resolve_features

logger = logging.getLogger(__name__)


def generate_solidity(
    abi: Any,
    options: GenerateOptions | None = None,
    formatter: Formatter | None = None,
) -> str:
    """Generate Solidity interface source for *abi*.

    Pipeline: resolve version features → collect ABI features → collect
    struct declarations → emit, then optionally reformat.

    Args:
        abi: Anything ``load_abi`` accepts (entry list, artifact dict,
            JSON text, or parsed entries).
        options: Generation settings; defaults to ``GenerateOptions()``.
        formatter: Pre-built formatter for DI/testing. Ignored when
            ``options.prettify_output`` is False.

    Returns:
        The generated source text.

    Raises:
        ConfigurationError: Formatting was required but no formatter is
            available, or the version range is unusable. Raised before
            any generation work.
        VersionIncompatibilityError: The range cannot express a construct
            the ABI needs.
        AbiFormatError: *abi* is not a valid ABI.
    """
    options = options or GenerateOptions()
    active_formatter = resolve_formatter(options.prettify_output, formatter)

    entries = load_abi(abi)
    logger.info(
        "Generating interface %s for %d ABI entries (solidity %s)",
        options.name,
        len(entries),
        options.solidity_version,
    )
    version_features = resolve_features(options.solidity_version)
    abi_features = collect_abi_features(entries)
    declarations = collect_declarations(entries, options.name, version_features)

    generated = SolidityGenerator(
        options=options,
        version_features=version_features,
        abi_features=abi_features,
        declarations=declarations,
    ).generate(entries)

    if active_formatter is None:
        return generated
    return _reformat(generated, active_formatter)


def _reformat(source: str, formatter: Formatter) -> str:
    try:
        return formatter.format(source)
    except Exception:
        logger.warning(
            "%s failed; returning unformatted output",
            type(formatter).__name__,
            exc_info=True,
        )
        return source
