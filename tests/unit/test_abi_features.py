"""Tests for the one-pass ABI feature scan."""

import pytest

from abisol.abi import Parameter, load_abi
from abisol.abi_features import (
    AbiFeatures,
    AbiFeaturesCollector,
    collect_abi_features,
    needs_extended_encoding,
)
from tests.unit.conftest import function_entry, tuple_param


class TestNeedsExtendedEncoding:
    @pytest.mark.parametrize(
        "type_",
        ["tuple", "tuple[]", "tuple[3]", "string[]", "bytes[2]", "uint256[][]", "address[2][]"],
    )
    def test_requires_v2(self, type_):
        components = [] if type_.startswith("tuple") else None
        assert needs_extended_encoding(Parameter(type=type_, components=components))

    @pytest.mark.parametrize(
        "type_", ["uint256", "string", "bytes", "bytes32[]", "address[4]", "bool"]
    )
    def test_v1_encodable(self, type_):
        assert not needs_extended_encoding(Parameter(type=type_))


class TestCollectAbiFeatures:
    def test_empty_abi(self):
        assert collect_abi_features([]) == AbiFeatures()

    def test_receive_and_fallback(self):
        features = collect_abi_features(
            load_abi([{"type": "receive"}, {"type": "fallback"}])
        )
        assert features.defines_receive
        assert features.defines_fallback
        assert not features.needs_abiencoder_v2

    def test_struct_input(self):
        features = collect_abi_features(
            load_abi([function_entry("move", inputs=[tuple_param("p")])])
        )
        assert features.needs_abiencoder_v2

    def test_string_array_output(self):
        features = collect_abi_features(
            load_abi([function_entry("names", outputs=[{"name": "", "type": "string[]"}])])
        )
        assert features.needs_abiencoder_v2

    def test_event_and_error_parameters_count(self):
        features = collect_abi_features(
            load_abi(
                [
                    {"type": "event", "name": "E", "inputs": [tuple_param("p")]},
                    {"type": "error", "name": "X", "inputs": []},
                ]
            )
        )
        assert features.needs_abiencoder_v2

    def test_constructor_parameters_count(self):
        features = collect_abi_features(
            load_abi([{"type": "constructor", "inputs": [tuple_param("p")]}])
        )
        assert features.needs_abiencoder_v2

    def test_plain_functions(self):
        features = collect_abi_features(
            load_abi(
                [
                    function_entry(
                        "transfer",
                        inputs=[
                            {"name": "to", "type": "address"},
                            {"name": "data", "type": "bytes"},
                        ],
                        outputs=[{"name": "", "type": "bool"}],
                    )
                ]
            )
        )
        assert features == AbiFeatures()


class TestAbiFeaturesCollector:
    def test_collect_resets_between_calls(self):
        collector = AbiFeaturesCollector()
        first = collector.collect(load_abi([{"type": "receive"}]))
        second = collector.collect(load_abi([function_entry("ping")]))
        assert first.defines_receive
        assert second == AbiFeatures()
