"""ABI Feature Collector: coarse properties of an ABI gathered in one scan."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from .abi import (
    Entry,
    EntryKind,
    Parameter,
    check_dispatch_table,
    entry_parameters,
)
from . import constants

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AbiFeatures:
    defines_receive: bool = False
    defines_fallback: bool = False
    needs_abiencoder_v2: bool = False


def needs_extended_encoding(parameter: Parameter) -> bool:
    """Whether *parameter* can only be encoded with ABI coder v2.

    Tuples, arrays of tuples, arrays of ``bytes``/``string`` and nested
    arrays all qualify.
    """
    type_ = parameter.type
    return (
        type_.startswith(constants.TUPLE_TYPE)
        or "string[" in type_
        or "bytes[" in type_
        or "][" in type_
    )


class AbiFeaturesCollector:
    """Scans entries once; ``collect`` may be called repeatedly."""

    def __init__(self):
        self._defines_receive = False
        self._defines_fallback = False
        self._needs_abiencoder_v2 = False
        self._ENTRY_DISPATCH: dict[EntryKind, Callable[[Entry], None]] = {
            EntryKind.FUNCTION: self._visit_parameters,
            EntryKind.CONSTRUCTOR: self._visit_parameters,
            EntryKind.FALLBACK: self._visit_fallback,
            EntryKind.RECEIVE: self._visit_receive,
            EntryKind.EVENT: self._visit_parameters,
            EntryKind.ERROR: self._visit_parameters,
        }
        check_dispatch_table(self._ENTRY_DISPATCH, type(self).__name__)

    def collect(self, abi: list[Entry]) -> AbiFeatures:
        self._defines_receive = False
        self._defines_fallback = False
        self._needs_abiencoder_v2 = False
        for entry in abi:
            self._ENTRY_DISPATCH[entry.kind](entry)
        features = AbiFeatures(
            defines_receive=self._defines_receive,
            defines_fallback=self._defines_fallback,
            needs_abiencoder_v2=self._needs_abiencoder_v2,
        )
        logger.debug("Collected ABI features: %s", features)
        return features

    def _visit_parameters(self, entry: Entry) -> None:
        if any(needs_extended_encoding(p) for p in entry_parameters(entry)):
            self._needs_abiencoder_v2 = True

    def _visit_fallback(self, entry: Entry) -> None:
        self._defines_fallback = True

    def _visit_receive(self, entry: Entry) -> None:
        self._defines_receive = True


def collect_abi_features(abi: list[Entry]) -> AbiFeatures:
    return AbiFeaturesCollector().collect(abi)
