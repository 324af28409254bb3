"""Module Collector & ABI Merger

Builds the validated selector -> module binding table for one router and the
merged interface description of all its modules.

Validation failures are hard errors:
    - requested module missing from the compiled output (all names reported)
    - module without ABI, or without (decodable) bytecode when addresses are
      predicted
    - two requested modules sharing a constant name (and so an identifier)
    - two functions with the same selector
    - more than one fallback or receive handler
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from eth_utils import decode_hex, keccak

from routergen.abi import ContractAbi, selector_to_hex
from routergen.casing import to_constant_case
from routergen.deployment import DeploymentTarget
from routergen.errors import (
    ArtifactError,
    DuplicateModule,
    DuplicateSelector,
    MissingAbi,
    MissingBytecode,
    ModuleNotFound,
    MultipleSpecialHandlers,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompiledModule:
    """
    Compiled data for one module, as read from a build artifact.

    ``bytecode`` is the creation code as hex text. It may still hold library
    link placeholders; it is only decoded when addresses are predicted.
    """

    name: str
    abi: Optional[ContractAbi] = None
    bytecode: Optional[str] = None

    def creation_code(self) -> bytes:
        """
        Decode the creation bytecode.

        Raises:
            MissingBytecode: If the module has no bytecode
            ArtifactError: If the bytecode is not plain hex (e.g. unlinked libraries)
        """
        if not self.bytecode:
            raise MissingBytecode(self.name)
        try:
            code = decode_hex(self.bytecode)
        except ValueError as e:
            raise ArtifactError(
                f"Invalid bytecode for contract `{self.name}` (unlinked libraries?): {e}"
            ) from e
        if not code:
            raise MissingBytecode(self.name)
        return code


def module_identifier(module_name: str) -> str:
    """Runtime identifier of a module: ``keccak256(CONSTANT_CASE_NAME)`` as 0x-prefixed hex."""
    return "0x" + keccak(text=to_constant_case(module_name)).hex()


@dataclass(frozen=True)
class ModuleBinding:
    """
    One function of one module, resolved for dispatch.

    Attributes:
        module_name: Contract name of the module (e.g. "CoreModule")
        function_name: Bare function name (e.g. "transfer")
        signature: Canonical signature (e.g. "transfer(address,uint256)")
        selector: 4-byte selector
        identifier: keccak256 of the module's constant-case name
        address: Predicted CREATE2 address, when a deployment target was given
    """

    module_name: str
    function_name: str
    signature: str
    selector: bytes
    identifier: str
    address: Optional[str] = None

    @property
    def constant_name(self) -> str:
        return to_constant_case(self.module_name)

    @property
    def selector_hex(self) -> str:
        return selector_to_hex(self.selector)

    def describe(self) -> str:
        return f"{self.module_name}.{self.signature}"


class SelectorSet:
    """
    All bindings of one router keyed by selector.

    Uniqueness is enforced on insert; iteration is in ascending selector order.
    """

    def __init__(self):
        self._bindings: Dict[bytes, ModuleBinding] = {}

    def add(self, binding: ModuleBinding) -> None:
        """
        Insert a binding.

        Raises:
            DuplicateSelector: If the selector is already bound
        """
        existing = self._bindings.get(binding.selector)
        if existing is not None:
            raise DuplicateSelector(binding.selector, existing.describe(), binding.describe())
        self._bindings[binding.selector] = binding

    def __getitem__(self, selector: bytes) -> ModuleBinding:
        return self._bindings[selector]

    def __contains__(self, selector: object) -> bool:
        return selector in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)

    def __iter__(self) -> Iterator[ModuleBinding]:
        for selector in sorted(self._bindings):
            yield self._bindings[selector]

    def selectors(self) -> List[bytes]:
        return sorted(self._bindings)

    def modules(self) -> List[ModuleBinding]:
        """
        One representative binding per module, sorted by module name.

        Modules are identified by their runtime identifier, which is what every
        renderer keys its per-module output on.
        """
        unique: Dict[str, ModuleBinding] = {}
        for binding in self:
            unique.setdefault(binding.identifier, binding)
        return sorted(unique.values(), key=lambda b: b.module_name)


def _merge_special(
    merged: ContractAbi,
    abi: ContractAbi,
    kind: str,
    module_name: str,
    owners: Dict[str, str],
) -> None:
    handler = getattr(abi, kind)
    if handler is None:
        return
    if getattr(merged, kind) is not None:
        raise MultipleSpecialHandlers(kind, (owners[kind], module_name))
    setattr(merged, kind, handler)
    owners[kind] = module_name


def collect_modules(
    module_names: Sequence[str],
    compiled: Mapping[str, CompiledModule],
    deployment: Optional[DeploymentTarget] = None,
) -> Tuple[SelectorSet, ContractAbi]:
    """
    Collect and validate the selectors of a set of modules.

    Args:
        module_names: Requested module names (duplicates are ignored)
        compiled: Compiled modules keyed by requested name
        deployment: Deployer and salt; when given, every binding carries the
            module's predicted CREATE2 address and bytecode becomes mandatory

    Returns:
        Tuple of (SelectorSet, merged interface)

    Raises:
        ModuleNotFound: Listing every requested name absent from ``compiled``
        DuplicateModule: Two requested modules share a constant name
        MissingBytecode: A module has no bytecode while ``deployment`` is set
        ArtifactError: A module has undecodable bytecode while ``deployment`` is set
        MissingAbi: A module has no ABI
        DuplicateSelector: Two functions share a selector
        MultipleSpecialHandlers: More than one fallback or receive handler
    """
    requested = list(dict.fromkeys(module_names))

    missing = [name for name in requested if name not in compiled]
    if missing:
        raise ModuleNotFound(missing)

    owners: Dict[str, str] = {}
    for name in requested:
        constant_name = to_constant_case(compiled[name].name)
        if constant_name in owners:
            raise DuplicateModule(constant_name, owners[constant_name], name)
        owners[constant_name] = name

    sources = sorted((compiled[name] for name in requested), key=lambda m: m.name)

    selector_set = SelectorSet()
    merged = ContractAbi()
    special_owners: Dict[str, str] = {}

    for module in sources:
        address = None
        if deployment is not None:
            address = deployment.address_for(module.creation_code())

        if module.abi is None:
            raise MissingAbi(module.name)

        identifier = module_identifier(module.name)

        for function in module.abi.iter_functions():
            selector_set.add(
                ModuleBinding(
                    module_name=module.name,
                    function_name=function.name,
                    signature=function.signature,
                    selector=function.selector,
                    identifier=identifier,
                    address=address,
                )
            )
            merged.add_function(function)

        _merge_special(merged, module.abi, "fallback", module.name, special_owners)
        _merge_special(merged, module.abi, "receive", module.name, special_owners)

        logger.debug(
            f"Collected module {module.name}: "
            f"{sum(len(f) for f in module.abi.functions.values())} functions"
            + (f", address {address}" if address else "")
        )

    logger.info(f"Collected {len(selector_set)} selectors from {len(sources)} modules")
    return selector_set, merged
