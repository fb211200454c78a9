"""Version Feature Resolver: which syntax a Solidity version range allows.

Every tracked feature maps each compiler release to the syntax it needs
(a boolean or a keyword). A range resolves a feature to a concrete value
only when every known release it admits agrees; otherwise the feature
resolves to ``AMBIGUOUS`` and the generator must refuse to pick a variant.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from enum import Enum

import semantic_version

from .errors import ConfigurationError, VersionIncompatibilityError
from . import constants

logger = logging.getLogger(__name__)


class Ambiguity(Enum):
    """Resolution state for a feature whose syntax varies across the range."""

    AMBIGUOUS = "ambiguous"

    def __repr__(self) -> str:
        return "AMBIGUOUS"


AMBIGUOUS = Ambiguity.AMBIGUOUS

FeatureValue = bool | str | None

# feature → ordered (range, value) rows; the first matching row wins
FEATURE_TABLE: dict[str, tuple[tuple[str, FeatureValue], ...]] = {
    constants.FEATURE_RECEIVE_KEYWORD: ((">=0.6.0", True), ("<0.6.0", False)),
    constants.FEATURE_FALLBACK_KEYWORD: ((">=0.6.0", True), ("<0.6.0", False)),
    constants.FEATURE_ARRAY_PARAMETER_LOCATION: (
        (">=0.7.0", "calldata"),
        ("^0.5.0 || ^0.6.0", "memory"),
        ("<0.5.0", None),
    ),
    constants.FEATURE_ABIENCODER_V2_DEFAULT: ((">=0.8.0", True), ("<0.8.0", False)),
    constants.FEATURE_GLOBAL_STRUCTS: ((">=0.6.0", True), ("<0.6.0", False)),
    constants.FEATURE_STRUCTS_IN_INTERFACES: ((">=0.5.0", True), ("<0.5.0", False)),
    constants.FEATURE_CUSTOM_ERRORS: ((">=0.8.4", True), ("<0.8.4", False)),
}

_COMPILED_TABLE: dict[str, tuple[tuple[semantic_version.NpmSpec, FeatureValue], ...]] = {
    feature: tuple((semantic_version.NpmSpec(spec), value) for spec, value in rows)
    for feature, rows in FEATURE_TABLE.items()
}


def known_releases() -> list[semantic_version.Version]:
    """Every tracked compiler release, oldest first."""
    return [
        semantic_version.Version(f"{major}.{minor}.{patch}")
        for (major, minor), last_patch in sorted(constants.KNOWN_RELEASES.items())
        for patch in range(last_patch + 1)
    ]


def _parse_range(version_range: str) -> semantic_version.NpmSpec:
    try:
        return semantic_version.NpmSpec(version_range.strip())
    except ValueError as exc:
        raise ConfigurationError(
            f"Invalid Solidity version range {version_range!r}: {exc}"
        ) from exc


def _value_at(feature: str, version: semantic_version.Version) -> FeatureValue:
    return next(
        value for spec, value in _COMPILED_TABLE[feature] if spec.match(version)
    )


class FeatureMatrix(Mapping):
    """Per-feature resolution for one version range.

    Indexing yields the concrete value, or ``AMBIGUOUS``.
    """

    def __init__(self, version_range: str, values: dict[str, FeatureValue | Ambiguity]):
        self.version_range = version_range
        self._values = dict(values)

    def __getitem__(self, feature: str) -> FeatureValue | Ambiguity:
        return self._values[feature]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def is_true(self, feature: str) -> bool:
        """True only when *feature* is concretely enabled across the range."""
        return self._values[feature] is True

    def require(self, feature: str, construct: str) -> FeatureValue:
        """Return the concrete value of *feature*, or raise when it is ambiguous.

        *construct* names what the caller is trying to emit, for the message.
        """
        value = self._values[feature]
        if value is AMBIGUOUS:
            raise VersionIncompatibilityError(
                f"Desired Solidity range {self.version_range!r} lacks "
                f"unambiguous {construct}.",
                feature=feature,
                version_range=self.version_range,
            )
        return value

    def __repr__(self) -> str:
        return f"FeatureMatrix({self.version_range!r}, {self._values!r})"


def resolve_features(version_range: str) -> FeatureMatrix:
    """Resolve every tracked feature for *version_range*.

    Raises:
        ConfigurationError: If the range does not parse, or admits no
            known release.
    """
    spec = _parse_range(version_range)
    admitted = [version for version in known_releases() if spec.match(version)]
    if not admitted:
        raise ConfigurationError(
            f"Solidity version range {version_range!r} admits no known release"
        )

    values: dict[str, FeatureValue | Ambiguity] = {}
    for feature in FEATURE_TABLE:
        seen = {_value_at(feature, version) for version in admitted}
        values[feature] = seen.pop() if len(seen) == 1 else AMBIGUOUS

    logger.info(
        "Resolved features for %r over %d releases (%s..%s)",
        version_range,
        len(admitted),
        admitted[0],
        admitted[-1],
    )
    return FeatureMatrix(version_range, values)
