"""ABI data model: contract ABI entries as a closed set of pydantic models."""

from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Annotated, Any, Callable, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    model_validator,
)

from .errors import AbiFormatError
from . import constants

logger = logging.getLogger(__name__)


class EntryKind(str, Enum):
    FUNCTION = "function"
    CONSTRUCTOR = "constructor"
    FALLBACK = "fallback"
    RECEIVE = "receive"
    EVENT = "event"
    ERROR = "error"


class StateMutability(str, Enum):
    PURE = "pure"
    VIEW = "view"
    NONPAYABLE = "nonpayable"
    PAYABLE = "payable"


class Parameter(BaseModel):
    """A parameter of an entry, or a member (component) of a tuple type."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    type: str
    internal_type: str | None = Field(default=None, alias="internalType")
    components: list[Parameter] | None = None
    signature: str | None = None  # explicit struct signature hint
    indexed: bool | None = None  # event parameters only

    @model_validator(mode="after")
    def _tuple_has_components(self) -> Parameter:
        if self.type.startswith(constants.TUPLE_TYPE) and self.components is None:
            raise ValueError(f"tuple parameter {self.name!r} has no components")
        return self

    def is_tuple(self) -> bool:
        return self.type.startswith(constants.TUPLE_TYPE) and self.components is not None


class _EntryModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    @property
    def kind(self) -> EntryKind:
        return EntryKind(self.type)


class FunctionEntry(_EntryModel):
    type: Literal["function"] = "function"
    name: str
    inputs: list[Parameter] = []
    outputs: list[Parameter] = []
    state_mutability: StateMutability = Field(
        default=StateMutability.NONPAYABLE, alias="stateMutability"
    )


class ConstructorEntry(_EntryModel):
    type: Literal["constructor"] = "constructor"
    inputs: list[Parameter] = []
    state_mutability: StateMutability = Field(
        default=StateMutability.NONPAYABLE, alias="stateMutability"
    )


class FallbackEntry(_EntryModel):
    type: Literal["fallback"] = "fallback"
    state_mutability: StateMutability = Field(
        default=StateMutability.NONPAYABLE, alias="stateMutability"
    )


class ReceiveEntry(_EntryModel):
    type: Literal["receive"] = "receive"
    state_mutability: StateMutability = Field(
        default=StateMutability.PAYABLE, alias="stateMutability"
    )


class EventEntry(_EntryModel):
    type: Literal["event"] = "event"
    name: str
    inputs: list[Parameter] = []
    anonymous: bool = False


class ErrorEntry(_EntryModel):
    type: Literal["error"] = "error"
    name: str
    inputs: list[Parameter] = []


Entry = Annotated[
    Union[
        FunctionEntry,
        ConstructorEntry,
        FallbackEntry,
        ReceiveEntry,
        EventEntry,
        ErrorEntry,
    ],
    Field(discriminator="type"),
]

_ABI_ADAPTER: TypeAdapter[list[Entry]] = TypeAdapter(list[Entry])

_MUTABLE_KINDS: frozenset[str] = frozenset(
    {
        EntryKind.FUNCTION.value,
        EntryKind.CONSTRUCTOR.value,
        EntryKind.FALLBACK.value,
        EntryKind.RECEIVE.value,
    }
)


# ── loading ──────────────────────────────────────────────────────


def _legacy_state_mutability(raw: dict[str, Any]) -> str:
    """Derive ``stateMutability`` from the pre-0.4.16 ``payable``/``constant`` flags."""
    if raw["type"] == EntryKind.RECEIVE.value or raw.get("payable"):
        return StateMutability.PAYABLE.value
    if raw["type"] == EntryKind.FUNCTION.value and raw.get("constant"):
        return StateMutability.VIEW.value
    return StateMutability.NONPAYABLE.value


def _normalize_entry(raw: Any) -> Any:
    if isinstance(raw, _EntryModel):
        return raw.model_dump(by_alias=True, exclude_none=True)
    if not isinstance(raw, dict):
        return raw
    entry = dict(raw)
    entry.setdefault("type", EntryKind.FUNCTION.value)
    if entry["type"] in _MUTABLE_KINDS and "stateMutability" not in entry:
        entry["stateMutability"] = _legacy_state_mutability(entry)
    return entry


def load_abi(source: Any) -> list[Entry]:
    """Read an ABI into validated entry models.

    Args:
        source: A list of entry dicts (or entry models), an artifact dict
            with an ``"abi"`` list, or a JSON string of either.

    Returns:
        The entries, in input order.

    Raises:
        AbiFormatError: If *source* is not a readable ABI.
    """
    if isinstance(source, (str, bytes)):
        try:
            source = json.loads(source)
        except json.JSONDecodeError as exc:
            raise AbiFormatError(f"ABI is not valid JSON: {exc}") from exc
    if isinstance(source, dict):
        if "abi" not in source:
            raise AbiFormatError("ABI object has no 'abi' field")
        source = source["abi"]
    if not isinstance(source, list):
        raise AbiFormatError(
            f"ABI must be a list of entries, got {type(source).__name__}"
        )
    try:
        entries = _ABI_ADAPTER.validate_python(
            [_normalize_entry(raw) for raw in source]
        )
    except ValidationError as exc:
        raise AbiFormatError(f"Invalid ABI: {exc}") from exc
    logger.debug("Loaded %d ABI entries", len(entries))
    return entries


def dump_abi(entries: list[Entry]) -> str:
    """Serialize normalized entries back to compact ABI JSON."""
    return _ABI_ADAPTER.dump_json(entries, by_alias=True, exclude_none=True).decode(
        "utf-8"
    )


# ── traversal helpers ────────────────────────────────────────────


def entry_parameters(entry: Entry) -> list[Parameter]:
    """All top-level parameters of *entry*: inputs first, then outputs."""
    return [*getattr(entry, "inputs", []), *getattr(entry, "outputs", [])]


def check_dispatch_table(table: dict[EntryKind, Callable], owner: str) -> None:
    """Raise ``TypeError`` unless *table* has a handler for every entry kind."""
    missing = [kind.value for kind in EntryKind if kind not in table]
    if missing:
        raise TypeError(f"{owner} has no handler for entry kinds: {missing}")
