"""Unit tests for module collection and ABI merging."""

import pytest

from routergen.abi import ContractAbi
from routergen.errors import (
    ArtifactError,
    DuplicateModule,
    DuplicateSelector,
    MissingAbi,
    MissingBytecode,
    ModuleNotFound,
    MultipleSpecialHandlers,
)
from routergen.modules import (
    CompiledModule,
    ModuleBinding,
    SelectorSet,
    collect_modules,
    module_identifier,
)
from tests.helpers import abi_function, abi_special


def _module(name: str, *entries: dict, bytecode: str | None = "0x6080") -> CompiledModule:
    return CompiledModule(name=name, abi=ContractAbi.from_json(list(entries)), bytecode=bytecode)


class TestModuleIdentifier:
    """Tests for module_identifier."""

    def test_is_32_byte_hex(self):
        identifier = module_identifier("CoreModule")
        assert identifier.startswith("0x")
        assert len(identifier) == 66

    def test_uses_constant_case_name(self):
        """Names with the same constant case share an identifier."""
        assert module_identifier("USDToken") == module_identifier("USD_TOKEN")

    def test_distinct_modules_differ(self):
        assert module_identifier("CoreModule") != module_identifier("OwnerModule")


class TestSelectorSet:
    """Tests for SelectorSet."""

    def _binding(self, module: str, selector: bytes) -> ModuleBinding:
        return ModuleBinding(
            module_name=module,
            function_name="f",
            signature="f()",
            selector=selector,
            identifier=module_identifier(module),
        )

    def test_add_and_lookup(self):
        selectors = SelectorSet()
        binding = self._binding("A", b"\x00\x00\x00\x01")
        selectors.add(binding)

        assert selectors[b"\x00\x00\x00\x01"] is binding
        assert b"\x00\x00\x00\x01" in selectors
        assert len(selectors) == 1

    def test_duplicate_insert_fails(self):
        selectors = SelectorSet()
        selectors.add(self._binding("A", b"\x00\x00\x00\x01"))

        with pytest.raises(DuplicateSelector) as exc_info:
            selectors.add(self._binding("B", b"\x00\x00\x00\x01"))

        assert exc_info.value.existing == "A.f()"
        assert exc_info.value.duplicate == "B.f()"

    def test_iteration_is_ascending(self):
        selectors = SelectorSet()
        for value in (5, 1, 3):
            selectors.add(self._binding(f"M{value}", value.to_bytes(4, "big")))

        assert [b.selector for b in selectors] == [
            (1).to_bytes(4, "big"),
            (3).to_bytes(4, "big"),
            (5).to_bytes(4, "big"),
        ]

    def test_modules_unique_and_sorted(self):
        selectors = SelectorSet()
        selectors.add(self._binding("Zeta", b"\x00\x00\x00\x01"))
        selectors.add(self._binding("Alpha", b"\x00\x00\x00\x02"))
        selectors.add(self._binding("Zeta", b"\x00\x00\x00\x03"))

        assert [m.module_name for m in selectors.modules()] == ["Alpha", "Zeta"]


class TestCollectModules:
    """Tests for collect_modules."""

    def test_collects_all_functions(self, compiled_modules):
        selectors, interface = collect_modules(list(compiled_modules), compiled_modules)

        assert len(selectors) == 9
        assert set(interface.functions) == {
            "transfer", "approve", "transferFrom",
            "name", "symbol", "decimals",
            "balanceOf", "totalSupply", "allowance",
        }

    def test_no_address_without_deployment(self, compiled_modules):
        selectors, _ = collect_modules(list(compiled_modules), compiled_modules)
        assert all(b.address is None for b in selectors)

    def test_addresses_with_deployment(self, compiled_modules, deployment):
        selectors, _ = collect_modules(list(compiled_modules), compiled_modules, deployment)

        addresses = {b.module_name: b.address for b in selectors}
        assert all(a and a.startswith("0x") and len(a) == 42 for a in addresses.values())
        # Each module has its own creation code, so its own address
        assert len(set(addresses.values())) == 3

    def test_bindings_of_one_module_share_address(self, compiled_modules, deployment):
        selectors, _ = collect_modules(list(compiled_modules), compiled_modules, deployment)

        token = {b.address for b in selectors if b.module_name == "TokenModule"}
        assert token == {deployment.address_for(compiled_modules["TokenModule"].creation_code())}

    def test_same_contract_name_from_two_sources(self):
        """A.sol:Token and B.sol:Token would share one constant and identifier."""
        compiled = {
            "A.sol:Token": _module("Token", abi_function("a")),
            "B.sol:Token": _module("Token", abi_function("b")),
        }

        with pytest.raises(DuplicateModule) as exc_info:
            collect_modules(["A.sol:Token", "B.sol:Token"], compiled)

        assert exc_info.value.constant_name == "TOKEN"
        assert exc_info.value.first == "A.sol:Token"
        assert exc_info.value.second == "B.sol:Token"

    def test_names_with_same_constant_case(self):
        compiled = {
            "USDToken": _module("USDToken", abi_function("a")),
            "USD_Token": _module("USD_Token", abi_function("b")),
        }

        with pytest.raises(DuplicateModule, match="USD_TOKEN"):
            collect_modules(["USDToken", "USD_Token"], compiled)

    def test_module_order_independent_of_request_order(self, compiled_modules):
        names = list(compiled_modules)
        forward, _ = collect_modules(names, compiled_modules)
        backward, _ = collect_modules(list(reversed(names)), compiled_modules)

        expected = ["BalanceModule", "MetadataModule", "TokenModule"]
        assert [m.module_name for m in forward.modules()] == expected
        assert [m.module_name for m in backward.modules()] == expected

    def test_missing_modules_all_reported(self, compiled_modules):
        with pytest.raises(ModuleNotFound) as exc_info:
            collect_modules(["TokenModule", "Ghost", "Phantom"], compiled_modules)

        assert list(exc_info.value.names) == ["Ghost", "Phantom"]
        assert "Ghost" in str(exc_info.value)
        assert "Phantom" in str(exc_info.value)

    def test_repeated_request_is_ignored(self, compiled_modules):
        selectors, _ = collect_modules(["TokenModule", "TokenModule"], compiled_modules)
        assert len(selectors) == 3

    def test_duplicate_selector_across_modules(self):
        """ModuleA.transfer and ModuleB.transfer collide."""
        compiled = {
            "ModuleA": _module("ModuleA", abi_function("transfer", "address", "uint256")),
            "ModuleB": _module("ModuleB", abi_function("transfer", "address", "uint256")),
        }

        with pytest.raises(DuplicateSelector) as exc_info:
            collect_modules(["ModuleA", "ModuleB"], compiled)

        assert exc_info.value.selector == bytes.fromhex("a9059cbb")
        assert "ModuleA.transfer(address,uint256)" in str(exc_info.value)
        assert "ModuleB.transfer(address,uint256)" in str(exc_info.value)

    def test_multiple_fallbacks_fail(self):
        compiled = {
            "ModuleA": _module("ModuleA", abi_function("a"), abi_special("fallback")),
            "ModuleB": _module("ModuleB", abi_function("b"), abi_special("fallback")),
        }

        with pytest.raises(MultipleSpecialHandlers) as exc_info:
            collect_modules(["ModuleA", "ModuleB"], compiled)

        assert exc_info.value.kind == "fallback"
        assert set(exc_info.value.modules) == {"ModuleA", "ModuleB"}

    def test_multiple_receives_fail(self):
        compiled = {
            "ModuleA": _module("ModuleA", abi_special("receive")),
            "ModuleB": _module("ModuleB", abi_special("receive")),
        }

        with pytest.raises(MultipleSpecialHandlers) as exc_info:
            collect_modules(["ModuleA", "ModuleB"], compiled)

        assert exc_info.value.kind == "receive"

    def test_single_fallback_and_receive_merged(self):
        compiled = {
            "ModuleA": _module("ModuleA", abi_special("fallback")),
            "ModuleB": _module("ModuleB", abi_special("receive")),
        }

        _, interface = collect_modules(["ModuleA", "ModuleB"], compiled)

        assert interface.fallback is not None
        assert interface.receive is not None

    def test_overloads_merged_under_one_name(self):
        compiled = {
            "ModuleA": _module("ModuleA", abi_function("mint", "uint256")),
            "ModuleB": _module("ModuleB", abi_function("mint", "address", "uint256")),
        }

        selectors, interface = collect_modules(["ModuleA", "ModuleB"], compiled)

        assert len(selectors) == 2
        assert len(interface.functions["mint"]) == 2

    def test_missing_abi(self):
        compiled = {"ModuleA": CompiledModule(name="ModuleA", abi=None, bytecode="0x00")}

        with pytest.raises(MissingAbi, match="ModuleA"):
            collect_modules(["ModuleA"], compiled)

    def test_missing_bytecode_with_deployment(self, deployment):
        compiled = {"ModuleA": _module("ModuleA", abi_function("a"), bytecode=None)}

        with pytest.raises(MissingBytecode, match="ModuleA"):
            collect_modules(["ModuleA"], compiled, deployment)

    def test_missing_bytecode_without_deployment_is_fine(self):
        compiled = {"ModuleA": _module("ModuleA", abi_function("a"), bytecode=None)}

        selectors, _ = collect_modules(["ModuleA"], compiled)

        assert len(selectors) == 1

    def test_unlinked_bytecode_without_deployment_is_fine(self):
        """Library link placeholders only matter when addresses are predicted."""
        linked = "0x6080__$1234567890abcdef1234567890abcdef12$__6080"
        compiled = {"ModuleA": _module("ModuleA", abi_function("a"), bytecode=linked)}

        selectors, _ = collect_modules(["ModuleA"], compiled)

        assert len(selectors) == 1

    def test_unlinked_bytecode_with_deployment(self, deployment):
        linked = "0x6080__$1234567890abcdef1234567890abcdef12$__6080"
        compiled = {"ModuleA": _module("ModuleA", abi_function("a"), bytecode=linked)}

        with pytest.raises(ArtifactError, match="ModuleA"):
            collect_modules(["ModuleA"], compiled, deployment)


class TestCreationCode:
    """Tests for CompiledModule.creation_code."""

    def test_decodes_hex(self):
        assert CompiledModule(name="A", bytecode="0x6080").creation_code() == b"\x60\x80"

    def test_empty_is_missing(self):
        with pytest.raises(MissingBytecode):
            CompiledModule(name="A", bytecode="0x").creation_code()

    def test_none_is_missing(self):
        with pytest.raises(MissingBytecode):
            CompiledModule(name="A").creation_code()
