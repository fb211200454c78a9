"""Shared fixtures and helpers for the abisol unit tests."""

import pytest

from abisol.abi import Entry, load_abi
from abisol.abi_features import collect_abi_features
from abisol.declarations import collect_declarations
from abisol.generator import SolidityGenerator
from abisol.options import GenerateOptions
from abisol.versions import resolve_features

POINT_COMPONENTS = [
    {"name": "x", "type": "uint256"},
    {"name": "y", "type": "uint256"},
]


@pytest.fixture(autouse=True)
def no_default_formatter(monkeypatch):
    """Keep output unformatted even where ``forge`` happens to be installed."""
    monkeypatch.setattr("abisol.formatter.shutil.which", lambda executable: None)


def plain_options(**overrides) -> GenerateOptions:
    """Options for interface ``I`` without attribution, echoed ABI or formatting."""
    settings = dict(
        name="I", output_attribution=False, output_source=False, prettify_output=False
    )
    settings.update(overrides)
    return GenerateOptions(**settings)


def tuple_param(name: str, components=None, type_: str = "tuple", internal_type=None) -> dict:
    """ABI dict for a tuple-typed parameter (a point by default)."""
    param = {
        "name": name,
        "type": type_,
        "components": POINT_COMPONENTS if components is None else components,
    }
    if internal_type:
        param["internalType"] = internal_type
    return param


def function_entry(name: str, inputs=(), outputs=(), mutability: str = "nonpayable") -> dict:
    return {
        "type": "function",
        "name": name,
        "inputs": list(inputs),
        "outputs": list(outputs),
        "stateMutability": mutability,
    }


def build_generator(abi: list[Entry], options: GenerateOptions) -> SolidityGenerator:
    """Run the collection stages and return a ready generator."""
    features = resolve_features(options.solidity_version)
    return SolidityGenerator(
        options=options,
        version_features=features,
        abi_features=collect_abi_features(abi),
        declarations=collect_declarations(abi, options.name, features),
    )


def generate(raw_abi, **overrides) -> str:
    """Generate through the pipeline stages without the public API wrapper."""
    options = plain_options(**overrides)
    abi = load_abi(raw_abi)
    return build_generator(abi, options).generate(abi)


def parse_solidity(source: str):
    """Parse *source* with the tree-sitter Solidity grammar; skip if unavailable.

    ``get_parser`` fetches the grammar on first use, so offline runs skip
    unless the tree-sitter-language-pack cache is already populated.
    """
    tslp = pytest.importorskip("tree_sitter_language_pack")
    try:
        parser = tslp.get_parser("solidity")
    except Exception as exc:
        pytest.skip(f"tree-sitter solidity grammar unavailable: {exc}")
    return parser.parse(source.encode("utf-8"))
