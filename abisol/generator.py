"""SolidityGenerator: ABI entries → Solidity interface source."""

from __future__ import annotations

import logging
from typing import Callable

from .abi import (
    ConstructorEntry,
    Entry,
    EntryKind,
    ErrorEntry,
    EventEntry,
    FallbackEntry,
    FunctionEntry,
    Parameter,
    ReceiveEntry,
    StateMutability,
    check_dispatch_table,
    dump_abi,
)
from .abi_features import AbiFeatures
from .declarations import Declaration, Declarations, array_suffix
from .errors import VersionIncompatibilityError
from .options import GenerateOptions, GenerationMode
from .versions import FeatureMatrix
from . import constants

logger = logging.getLogger(__name__)

ParameterModifiers = Callable[[Parameter], list[str]]


def _indent(text: str, level: int = 1) -> str:
    """Indent all non-empty lines by *level* units."""
    prefix = constants.INDENT_UNIT * level
    return "\n".join((prefix + line) if line.strip() else line for line in text.splitlines())


def _is_dynamic(type_: str) -> bool:
    return (
        type_.startswith(constants.TUPLE_TYPE)
        or "[" in type_
        or type_ in constants.DYNAMIC_ELEMENTARY_TYPES
    )


def _event_modifiers(parameter: Parameter) -> list[str]:
    return [constants.INDEXED_MODIFIER] if parameter.indexed else []


def _no_modifiers(parameter: Parameter) -> list[str]:
    return []


class SolidityGenerator:
    """Emits one Solidity interface (plus sibling struct scopes) for an ABI.

    Everything the traversal consults is fixed at construction: the
    options, the resolved version features, the ABI features and the
    declaration table. ``generate`` walks the entries once, dispatching
    on the entry kind; an instance generates exactly one output.
    """

    def __init__(
        self,
        options: GenerateOptions,
        version_features: FeatureMatrix,
        abi_features: AbiFeatures,
        declarations: Declarations,
    ):
        self._options = options
        self._version_features = version_features
        self._abi_features = abi_features
        self._declarations = declarations
        self._generated = False
        self._ENTRY_DISPATCH: dict[EntryKind, Callable[[Entry, str], str]] = {
            EntryKind.FUNCTION: self._emit_function,
            EntryKind.CONSTRUCTOR: self._emit_constructor,
            EntryKind.FALLBACK: self._emit_fallback,
            EntryKind.RECEIVE: self._emit_receive,
            EntryKind.EVENT: self._emit_event,
            EntryKind.ERROR: self._emit_error,
        }
        check_dispatch_table(self._ENTRY_DISPATCH, type(self).__name__)

    # ── entry point ──────────────────────────────────────────────

    def generate(self, abi: list[Entry]) -> str:
        if self._generated:
            raise RuntimeError("SolidityGenerator instances are single-use")
        self._generated = True

        if self._options.mode == GenerationMode.EMBEDDED:
            sections = [self._generate_interface(abi), self._generate_declarations()]
        else:
            sections = [
                self._generate_header(),
                self._generate_interface(abi),
                self._generate_declarations(),
                self._generate_source_notice(abi),
            ]
        logger.info("Generated interface %s", self._options.name)
        return "\n\n".join(section for section in sections if section) + "\n"

    # ── entries ──────────────────────────────────────────────────

    def _emit_entry(self, entry: Entry, interface_name: str) -> str:
        logger.debug("Emitting %s entry %s", entry.type, getattr(entry, "name", ""))
        return self._ENTRY_DISPATCH[entry.kind](entry, interface_name)

    def _emit_function(self, entry: FunctionEntry, interface_name: str) -> str:
        inputs = self._emit_parameters(entry.inputs, interface_name, self._input_modifiers)
        parts = [f"function {entry.name}({inputs})", "external"]
        if entry.state_mutability != StateMutability.NONPAYABLE:
            parts.append(entry.state_mutability.value)
        if entry.outputs:
            outputs = self._emit_parameters(
                entry.outputs, interface_name, self._output_modifiers
            )
            parts.append(f"returns ({outputs})")
        return " ".join(parts) + ";"

    def _emit_constructor(self, entry: ConstructorEntry, interface_name: str) -> str:
        # interfaces cannot declare constructors
        return ""

    def _emit_fallback(self, entry: FallbackEntry, interface_name: str) -> str:
        serves_as_receive = self._abi_features.defines_receive and not (
            self._version_features.is_true(constants.FEATURE_RECEIVE_KEYWORD)
        )
        payable = entry.state_mutability == StateMutability.PAYABLE or serves_as_receive
        return self._fallback_declaration(payable)

    def _emit_receive(self, entry: ReceiveEntry, interface_name: str) -> str:
        if self._version_features.is_true(constants.FEATURE_RECEIVE_KEYWORD):
            return f"receive() external {constants.PAYABLE_MODIFIER};"
        # the fallback entry is emitted payable and covers plain transfers
        if self._abi_features.defines_fallback:
            return ""
        return self._fallback_declaration(payable=True)

    def _emit_event(self, entry: EventEntry, interface_name: str) -> str:
        params = self._emit_parameters(entry.inputs, interface_name, _event_modifiers)
        anonymous = " anonymous" if entry.anonymous else ""
        return f"event {entry.name}({params}){anonymous};"

    def _emit_error(self, entry: ErrorEntry, interface_name: str) -> str:
        if not self._version_features.is_true(constants.FEATURE_CUSTOM_ERRORS):
            raise VersionIncompatibilityError(
                f"ABI defines custom error {entry.name!r}, which Solidity range "
                f"{self._options.solidity_version!r} cannot declare; "
                "use Solidity v0.8.4 or higher",
                feature=constants.FEATURE_CUSTOM_ERRORS,
                version_range=self._options.solidity_version,
            )
        params = self._emit_parameters(entry.inputs, interface_name, _no_modifiers)
        return f"error {entry.name}({params});"

    def _fallback_declaration(self, payable: bool) -> str:
        dedicated = self._version_features.require(
            constants.FEATURE_FALLBACK_KEYWORD, "fallback syntax"
        )
        keyword = "fallback" if dedicated else "function"
        suffix = f" {constants.PAYABLE_MODIFIER}" if payable else ""
        return f"{keyword}() external{suffix};"

    # ── parameters ───────────────────────────────────────────────

    def _emit_parameters(
        self,
        parameters: list[Parameter],
        interface_name: str,
        modifiers: ParameterModifiers,
    ) -> str:
        return ", ".join(
            self._emit_parameter(parameter, interface_name, modifiers)
            for parameter in parameters
        )

    def _emit_parameter(
        self, parameter: Parameter, interface_name: str, modifiers: ParameterModifiers
    ) -> str:
        parts = [
            self._resolve_type(parameter, interface_name),
            *modifiers(parameter),
            parameter.name,
        ]
        return " ".join(part for part in parts if part)

    def _input_modifiers(self, parameter: Parameter) -> list[str]:
        if not _is_dynamic(parameter.type):
            return []
        location = self._version_features.require(
            constants.FEATURE_ARRAY_PARAMETER_LOCATION,
            f"location specifier for parameter of type {parameter.type!r}",
        )
        return [location] if location else []

    def _output_modifiers(self, parameter: Parameter) -> list[str]:
        if not _is_dynamic(parameter.type):
            return []
        return [constants.OUTPUT_PARAMETER_LOCATION]

    # ── types ────────────────────────────────────────────────────

    def _resolve_type(self, parameter: Parameter, interface_name: str) -> str:
        """Solidity spelling of *parameter*'s type as seen from *interface_name*."""
        if parameter.is_tuple():
            declaration = self._declarations.resolve(parameter)
            return self._qualified_identifier(declaration, interface_name) + array_suffix(
                parameter.type
            )
        if parameter.type != constants.FUNCTION_TYPE:
            return parameter.type
        if parameter.internal_type:
            return parameter.internal_type
        logger.warning(
            "Parameter %r has an external function type without internalType; "
            "emitting a placeholder",
            parameter.name,
        )
        return constants.INCOMPLETE_FUNCTION_TYPE

    @staticmethod
    def _qualified_identifier(declaration: Declaration, interface_name: str) -> str:
        if declaration.scope and declaration.scope != interface_name:
            return f"{declaration.scope}.{declaration.identifier}"
        return declaration.identifier

    # ── structs ──────────────────────────────────────────────────

    def _require_struct_support(self) -> None:
        if not self._version_features.is_true(constants.FEATURE_STRUCTS_IN_INTERFACES):
            raise VersionIncompatibilityError(
                "ABI uses struct types, which Solidity range "
                f"{self._options.solidity_version!r} cannot declare in an "
                "interface; use Solidity v0.5.0 or higher",
                feature=constants.FEATURE_STRUCTS_IN_INTERFACES,
                version_range=self._options.solidity_version,
            )

    def _generate_structs(self, scope: str) -> list[str]:
        declarations = self._declarations.for_scope(scope)
        if declarations:
            self._require_struct_support()
        return [self._emit_struct(declaration, scope) for declaration in declarations]

    def _emit_struct(self, declaration: Declaration, scope: str) -> str:
        lines = [f"struct {declaration.identifier} {{"]
        for index, component in enumerate(declaration.components):
            name = component.name or f"{constants.UNNAMED_MEMBER_PREFIX}{index}"
            lines.append(_indent(f"{self._resolve_type(component, scope)} {name};"))
        lines.append("}")
        return "\n".join(lines)

    def _generate_declarations(self) -> str:
        """Struct scopes other than the generated interface, shared scope first."""
        shared = self._declarations.shared_scope
        scopes = sorted(
            (s for s in self._declarations.scopes if s != self._options.name),
            key=lambda scope: scope != shared,
        )
        blocks: list[str] = []
        for scope in scopes:
            structs = self._generate_structs(scope)
            if scope == "":
                blocks.extend(structs)
            else:
                blocks.append(self._wrap_interface(scope, "\n\n".join(structs)))
        return "\n\n".join(blocks)

    # ── interface / header / footer ──────────────────────────────

    @staticmethod
    def _wrap_interface(name: str, body: str) -> str:
        if not body:
            return f"interface {name} {{}}"
        return f"interface {name} {{\n{_indent(body)}\n}}"

    def _generate_interface(self, abi: list[Entry]) -> str:
        name = self._options.name
        embedded = self._options.mode == GenerationMode.EMBEDDED
        blocks: list[str] = []
        if embedded and self._options.output_attribution:
            blocks.append(self._generate_attribution())
        blocks.extend(self._generate_structs(name))
        members = [line for entry in abi if (line := self._emit_entry(entry, name))]
        if members:
            blocks.append("\n".join(members))
        if embedded:
            notice = self._generate_source_notice(abi)
            if notice:
                blocks.append(notice)
        return self._wrap_interface(name, "\n\n".join(blocks))

    def _generate_header(self) -> str:
        lines = [f"// SPDX-License-Identifier: {self._options.license}"]
        if self._options.output_attribution:
            lines.append(self._generate_attribution())
        lines.append(f"pragma solidity {self._options.solidity_version};")
        if self._abi_features.needs_abiencoder_v2 and not self._version_features.is_true(
            constants.FEATURE_ABIENCODER_V2_DEFAULT
        ):
            lines.append(constants.ENCODER_PRAGMA)
        return "\n".join(lines)

    def _generate_attribution(self) -> str:
        unit = "FILE" if self._options.mode == GenerationMode.NORMAL else "INTERFACE"
        see_source = " SEE SOURCE BELOW." if self._options.output_source else ""
        return (
            f"// !! THIS {unit} WAS AUTOGENERATED BY "
            f"{constants.PACKAGE_NAME} v{constants.PACKAGE_VERSION}.{see_source} !!"
        )

    def _generate_source_notice(self, abi: list[Entry]) -> str:
        if not self._options.output_source:
            return ""
        return "\n".join([constants.SOURCE_NOTICE_HEADER, "/*", dump_abi(abi), "*/"])
