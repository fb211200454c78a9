"""Named constants: eliminates magic strings across the codebase."""

from __future__ import annotations

PACKAGE_NAME = "abisol"
PACKAGE_VERSION = "0.1.0"

# ── feature keys ────────────────────────────────────────────────

FEATURE_RECEIVE_KEYWORD = "receive-keyword"
FEATURE_FALLBACK_KEYWORD = "fallback-keyword"
FEATURE_ARRAY_PARAMETER_LOCATION = "array-parameter-location"
FEATURE_ABIENCODER_V2_DEFAULT = "abiencoder-v2-default"
FEATURE_GLOBAL_STRUCTS = "global-structs"
FEATURE_STRUCTS_IN_INTERFACES = "structs-in-interfaces"
FEATURE_CUSTOM_ERRORS = "custom-errors"

# ── known compiler releases: minor → last patch ────────────────

KNOWN_RELEASES: dict[tuple[int, int], int] = {
    (0, 4): 26,
    (0, 5): 17,
    (0, 6): 12,
    (0, 7): 6,
    (0, 8): 33,
}

# ── generation defaults ─────────────────────────────────────────

DEFAULT_INTERFACE_NAME = "MyInterface"
DEFAULT_SOLIDITY_VERSION = ">=0.7.0 <0.9.0"
DEFAULT_LICENSE = "UNLICENSED"

# Wrapper interface that hosts shared structs when file-level structs
# are unavailable for the requested range.
SHARED_SCOPE_INTERFACE = "__SharedTypes"

SYNTHETIC_IDENTIFIER_PREFIX = "S_"
UNNAMED_MEMBER_PREFIX = "_"

TUPLE_TYPE = "tuple"
FUNCTION_TYPE = "function"
DYNAMIC_ELEMENTARY_TYPES: frozenset[str] = frozenset({"bytes", "string"})

OUTPUT_PARAMETER_LOCATION = "memory"
INDEXED_MODIFIER = "indexed"
PAYABLE_MODIFIER = "payable"

STRUCT_INTERNAL_TYPE_PATTERN = r"^struct (?:([^.\[]+)\.)?([^.\[]+)"

INDENT_UNIT = "    "

ENCODER_PRAGMA = "pragma experimental ABIEncoderV2;"

INCOMPLETE_FUNCTION_TYPE = (
    "/* warning: the following type may be incomplete. "
    "the receiving contract may expect additional input or output parameters. */ "
    "function() external"
)

SOURCE_NOTICE_HEADER = "// THIS FILE WAS AUTOGENERATED FROM THE FOLLOWING ABI JSON:"

# ── formatter ───────────────────────────────────────────────────

FORGE_EXECUTABLE = "forge"
