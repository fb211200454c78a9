"""Declaration Collector: struct discovery, deduplication and placement.

Every tuple-typed value in the ABI refers to a struct. Structs are keyed
by signature, so two references with the same member list share one
declaration no matter where they occur. Each reference is attributed to
a container: the interface named by its ``internalType`` hint, the empty
container for a file-level struct hint, or otherwise the container of
whatever encloses it (the generated interface at the top level).

Placement: a signature referenced from exactly one named container is
declared there; anything referenced from the empty container or from
several containers is declared once in the shared scope.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from .abi import Entry, Parameter, entry_parameters
from .versions import FeatureMatrix
from . import constants

logger = logging.getLogger(__name__)

_STRUCT_HINT_RE = re.compile(constants.STRUCT_INTERNAL_TYPE_PATTERN)


# ── signatures ───────────────────────────────────────────────────


def array_suffix(type_: str) -> str:
    """``tuple[2][]`` → ``[2][]``."""
    return type_[len(constants.TUPLE_TYPE) :]


def tuple_signature(components: list[Parameter]) -> str:
    """Canonical signature of an ordered member list, e.g. ``(uint256 a,address b)``."""
    members = [
        f"{type_signature(c)} {c.name}" if c.name else type_signature(c)
        for c in components
    ]
    return "(" + ",".join(members) + ")"


def struct_signature(parameter: Parameter) -> str:
    """Signature of the struct a tuple-typed parameter refers to."""
    return parameter.signature or tuple_signature(parameter.components or [])


def type_signature(parameter: Parameter) -> str:
    if not parameter.is_tuple():
        return parameter.type
    return struct_signature(parameter) + array_suffix(parameter.type)


# ── name hints ───────────────────────────────────────────────────


@dataclass(frozen=True)
class StructHint:
    identifier: str
    container: str  # "" for a file-level struct


def parse_struct_hint(internal_type: str | None) -> StructHint | None:
    """``struct Pool.Position[]`` → ``StructHint("Position", "Pool")``."""
    if not internal_type:
        return None
    m = _STRUCT_HINT_RE.match(internal_type)
    if not m:
        return None
    return StructHint(identifier=m.group(2), container=m.group(1) or "")


# ── declaration table ────────────────────────────────────────────


@dataclass(frozen=True)
class Declaration:
    signature: str
    identifier: str
    components: tuple[Parameter, ...]
    scope: str  # "" = file level


@dataclass
class Declarations:
    signature_declarations: dict[str, Declaration] = field(default_factory=dict)
    # container → signatures referenced from it, first-encounter order
    container_signatures: dict[str, list[str]] = field(default_factory=dict)
    # scope → signatures declared in it, deterministic order
    scopes: dict[str, list[str]] = field(default_factory=dict)
    shared_scope: str = ""

    def __len__(self) -> int:
        return len(self.signature_declarations)

    def for_scope(self, scope: str) -> list[Declaration]:
        return [self.signature_declarations[s] for s in self.scopes.get(scope, [])]

    def resolve(self, parameter: Parameter) -> Declaration:
        """The declaration a tuple-typed parameter refers to."""
        return self.signature_declarations[struct_signature(parameter)]


class DeclarationCollector:
    """Builds the declaration table for one ABI.

    An instance serves exactly one collection pass; the synthetic
    identifier counter belongs to it.
    """

    def __init__(self, interface_name: str, shared_scope: str = ""):
        self._interface_name = interface_name
        self._shared_scope = shared_scope
        self._identifier_counter = 0
        self._used_identifiers: set[str] = set()
        self._components: dict[str, list[Parameter]] = {}
        self._hints: dict[str, str] = {}
        self._container_signatures: dict[str, list[str]] = {}
        self._signature_containers: dict[str, list[str]] = {}
        self._collected = False

    def collect(self, abi: list[Entry]) -> Declarations:
        if self._collected:
            raise RuntimeError("DeclarationCollector instances are single-use")
        self._collected = True

        for entry in abi:
            for parameter in entry_parameters(entry):
                self._visit_parameter(parameter, self._interface_name)

        identifiers = self._assign_identifiers()
        scopes = self._place()
        scope_of = {
            signature: scope
            for scope, signatures in scopes.items()
            for signature in signatures
        }
        declarations = Declarations(
            signature_declarations={
                signature: Declaration(
                    signature=signature,
                    identifier=identifiers[signature],
                    components=tuple(components),
                    scope=scope_of[signature],
                )
                for signature, components in self._components.items()
            },
            container_signatures={
                container: list(signatures)
                for container, signatures in self._container_signatures.items()
            },
            scopes=scopes,
            shared_scope=self._shared_scope,
        )
        logger.info(
            "Collected %d struct declarations across %d scopes",
            len(declarations),
            len(scopes),
        )
        return declarations

    # ── traversal ────────────────────────────────────────────────

    def _visit_parameter(self, parameter: Parameter, enclosing_container: str) -> None:
        if not parameter.is_tuple():
            return
        signature = struct_signature(parameter)
        hint = parse_struct_hint(parameter.internal_type)
        container = hint.container if hint else enclosing_container

        if signature not in self._components:
            self._components[signature] = list(parameter.components or [])
        if hint and signature not in self._hints:
            self._hints[signature] = hint.identifier

        signatures = self._container_signatures.setdefault(container, [])
        if signature not in signatures:
            signatures.append(signature)
        containers = self._signature_containers.setdefault(signature, [])
        if container not in containers:
            containers.append(container)

        for component in parameter.components or []:
            self._visit_parameter(component, container)

    # ── identifiers ──────────────────────────────────────────────

    def _claim(self, identifier: str) -> str:
        candidate = identifier
        suffix = 1
        while candidate in self._used_identifiers:
            candidate = f"{identifier}_{suffix}"
            suffix += 1
        self._used_identifiers.add(candidate)
        return candidate

    def _next_synthetic_identifier(self) -> str:
        while True:
            candidate = f"{constants.SYNTHETIC_IDENTIFIER_PREFIX}{self._identifier_counter}"
            self._identifier_counter += 1
            if candidate not in self._used_identifiers:
                self._used_identifiers.add(candidate)
                return candidate

    def _assign_identifiers(self) -> dict[str, str]:
        identifiers: dict[str, str] = {}
        for signature in self._components:
            if signature in self._hints:
                identifiers[signature] = self._claim(self._hints[signature])
        for signature in self._components:
            if signature not in identifiers:
                identifiers[signature] = self._next_synthetic_identifier()
        for signature in self._components:
            logger.debug("Struct %s → %s", signature, identifiers[signature])
        return {signature: identifiers[signature] for signature in self._components}

    # ── placement ────────────────────────────────────────────────

    def _place(self) -> dict[str, list[str]]:
        scopes: dict[str, list[str]] = {}
        for signatures in self._container_signatures.values():
            for signature in signatures:
                containers = self._signature_containers[signature]
                if len(containers) == 1 and containers[0] != "":
                    scope = containers[0]
                else:
                    scope = self._shared_scope
                placed = scopes.setdefault(scope, [])
                if signature not in placed:
                    placed.append(signature)
        return scopes


def collect_declarations(
    abi: list[Entry], interface_name: str, version_features: FeatureMatrix
) -> Declarations:
    """Collect declarations, hosting the shared scope where the range allows.

    File-level structs need ``global-structs``; without it the shared
    scope becomes a synthetic wrapper interface.
    """
    if version_features.is_true(constants.FEATURE_GLOBAL_STRUCTS):
        shared_scope = ""
    else:
        shared_scope = constants.SHARED_SCOPE_INTERFACE
    return DeclarationCollector(interface_name, shared_scope).collect(abi)
