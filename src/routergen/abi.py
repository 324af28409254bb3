"""ABI Model

Parses JSON ABI entries into typed records, computes canonical function
signatures and 4-byte selectors, and renders a (merged) ABI as a Solidity
interface declaration.

Only the entries a router dispatches on are modelled: functions plus the
optional fallback and receive handlers. Events, errors and constructors are
ignored.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from eth_utils import keccak

logger = logging.getLogger(__name__)

SELECTOR_SIZE = 4


def selector_to_hex(selector: bytes) -> str:
    """Render a selector as ``0x`` followed by 8 lowercase hex digits."""
    return "0x" + selector.hex()


def selector_from_signature(signature: str) -> bytes:
    """Compute the 4-byte selector of a canonical signature such as ``transfer(address,uint256)``."""
    return keccak(text=signature)[:SELECTOR_SIZE]


@dataclass(frozen=True)
class AbiParameter:
    """A function input or output."""

    name: str
    type: str
    internal_type: Optional[str] = None
    components: Tuple["AbiParameter", ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AbiParameter":
        return cls(
            name=data.get("name") or "",
            type=data["type"],
            internal_type=data.get("internalType"),
            components=tuple(cls.from_dict(c) for c in data.get("components") or ()),
        )

    @property
    def is_tuple(self) -> bool:
        return self.type.startswith("tuple")

    @property
    def array_suffix(self) -> str:
        """Trailing array dimensions of a tuple type, e.g. ``[]`` for ``tuple[]``."""
        return self.type[len("tuple"):] if self.is_tuple else ""

    def canonical_type(self) -> str:
        """Type as it appears in a signature; tuples expand to their components."""
        if self.is_tuple:
            inner = ",".join(c.canonical_type() for c in self.components)
            return f"({inner}){self.array_suffix}"
        return self.type

    @property
    def struct_name(self) -> Optional[str]:
        """Struct name from ``internalType`` (``struct Lib.Data[]`` -> ``Data``)."""
        if not self.internal_type or not self.internal_type.startswith("struct "):
            return None
        name = self.internal_type[len("struct "):]
        name = name.split("[", 1)[0]
        return name.rsplit(".", 1)[-1]

    @property
    def is_reference_type(self) -> bool:
        return self.is_tuple or self.type.endswith("]") or self.type in ("string", "bytes")


@dataclass(frozen=True)
class AbiFunction:
    """A callable function entry of an ABI."""

    name: str
    inputs: Tuple[AbiParameter, ...] = ()
    outputs: Tuple[AbiParameter, ...] = ()
    state_mutability: str = "nonpayable"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AbiFunction":
        return cls(
            name=data["name"],
            inputs=tuple(AbiParameter.from_dict(p) for p in data.get("inputs") or ()),
            outputs=tuple(AbiParameter.from_dict(p) for p in data.get("outputs") or ()),
            state_mutability=data.get("stateMutability", "nonpayable"),
        )

    @property
    def signature(self) -> str:
        types = ",".join(p.canonical_type() for p in self.inputs)
        return f"{self.name}({types})"

    @property
    def selector(self) -> bytes:
        return selector_from_signature(self.signature)


@dataclass(frozen=True)
class SpecialHandler:
    """A ``fallback`` or ``receive`` entry."""

    kind: str
    state_mutability: str = "nonpayable"


@dataclass
class ContractAbi:
    """
    Functions grouped by name (overloads kept in declaration order) plus the
    optional fallback and receive handlers.

    The same shape describes a single module's ABI and the merged interface
    of a whole router.
    """

    functions: Dict[str, List[AbiFunction]] = field(default_factory=dict)
    fallback: Optional[SpecialHandler] = None
    receive: Optional[SpecialHandler] = None

    @classmethod
    def from_json(cls, entries: Sequence[Dict[str, Any]]) -> "ContractAbi":
        abi = cls()
        for entry in entries:
            entry_type = entry.get("type", "function")
            if entry_type == "function":
                abi.add_function(AbiFunction.from_dict(entry))
            elif entry_type in ("fallback", "receive"):
                handler = SpecialHandler(entry_type, entry.get("stateMutability", "nonpayable"))
                setattr(abi, entry_type, handler)
        return abi

    def add_function(self, function: AbiFunction) -> None:
        self.functions.setdefault(function.name, []).append(function)

    def iter_functions(self):
        """Yield every function, overloads included, in declaration order."""
        for overloads in self.functions.values():
            yield from overloads

    def to_solidity(self, interface_name: str) -> str:
        """Render the ABI as ``interface <interface_name> { ... }``."""
        return render_interface(self, interface_name)


class _StructCollector:
    """Assigns names to tuple types and remembers their definitions in first-seen order."""

    def __init__(self):
        self.definitions: Dict[str, str] = {}
        self._anonymous: Dict[Tuple[str, ...], str] = {}

    def type_name(self, param: AbiParameter) -> str:
        if not param.is_tuple:
            return param.type

        name = param.struct_name
        if name is None:
            key = tuple(c.canonical_type() for c in param.components)
            name = self._anonymous.setdefault(key, f"Struct{len(self._anonymous)}")

        if name not in self.definitions:
            # Reserve the slot first so recursive structs keep a stable order
            self.definitions[name] = ""
            fields = [
                f"        {self.type_name(c)} {c.name or f'field{i}'};"
                for i, c in enumerate(param.components)
            ]
            self.definitions[name] = "\n".join(
                [f"    struct {name} {{"] + fields + ["    }"]
            )
        return name + param.array_suffix


def _render_params(params: Sequence[AbiParameter], structs: _StructCollector) -> str:
    rendered = []
    for param in params:
        text = structs.type_name(param)
        if param.is_reference_type:
            text += " memory"
        if param.name:
            text += f" {param.name}"
        rendered.append(text)
    return ", ".join(rendered)


def _render_function(function: AbiFunction, structs: _StructCollector) -> str:
    text = f"    function {function.name}({_render_params(function.inputs, structs)}) external"
    if function.state_mutability != "nonpayable":
        text += f" {function.state_mutability}"
    if function.outputs:
        text += f" returns ({_render_params(function.outputs, structs)})"
    return text + ";"


def _render_special(handler: SpecialHandler) -> str:
    text = f"    {handler.kind}() external"
    if handler.state_mutability == "payable":
        text += " payable"
    return text + ";"


def render_interface(abi: ContractAbi, interface_name: str) -> str:
    """
    Render an ABI as a Solidity interface.

    Struct definitions come first, then fallback/receive, then functions
    ordered by name (overloads in declaration order) so the output does not
    depend on dict insertion order.

    Args:
        abi: ABI to render
        interface_name: Name of the interface, e.g. ``ICoreRouter``

    Returns:
        Solidity source text without a trailing newline
    """
    structs = _StructCollector()

    specials = [_render_special(h) for h in (abi.fallback, abi.receive) if h is not None]
    functions = [
        _render_function(function, structs)
        for name in sorted(abi.functions)
        for function in abi.functions[name]
    ]

    sections = [
        "\n".join(section)
        for section in (list(structs.definitions.values()), specials, functions)
        if section
    ]
    if not sections:
        return f"interface {interface_name} {{}}"

    logger.debug(
        f"Rendered interface {interface_name}: {len(functions)} functions, "
        f"{len(structs.definitions)} structs"
    )
    return f"interface {interface_name} {{\n" + "\n\n".join(sections) + "\n}"
