"""Shared pytest fixtures for routergen tests.

Provides ABI fixtures for a small ERC20-style module set, compiled module
mappings, and an on-disk artifacts directory in the Foundry layout.
"""

from pathlib import Path

import pytest

from routergen.abi import ContractAbi
from routergen.deployment import DEFAULT_DEPLOYER, DEFAULT_SALT, DeploymentTarget
from routergen.generator import GenerationSettings
from routergen.modules import CompiledModule
from tests.helpers import abi_function, module_bytecode, write_artifact

# =============================================================================
# ABI Fixtures
# =============================================================================

# Three modules with three functions each: nine selectors, exactly one leaf
MODULE_ABIS = {
    "TokenModule": [
        abi_function("transfer", "address", "uint256", outputs=("bool",)),
        abi_function("approve", "address", "uint256", outputs=("bool",)),
        abi_function("transferFrom", "address", "address", "uint256", outputs=("bool",)),
    ],
    "MetadataModule": [
        abi_function("name", outputs=("string",), mutability="view"),
        abi_function("symbol", outputs=("string",), mutability="view"),
        abi_function("decimals", outputs=("uint8",), mutability="view"),
    ],
    "BalanceModule": [
        abi_function("balanceOf", "address", outputs=("uint256",), mutability="view"),
        abi_function("totalSupply", outputs=("uint256",), mutability="view"),
        abi_function("allowance", "address", "address", outputs=("uint256",), mutability="view"),
    ],
}

OWNER_ABI = [abi_function("owner", outputs=("address",), mutability="view")]


@pytest.fixture
def module_abis() -> dict:
    """Return the JSON ABIs of the three-module set."""
    return {name: list(entries) for name, entries in MODULE_ABIS.items()}


@pytest.fixture
def compiled_modules(module_abis: dict) -> dict[str, CompiledModule]:
    """Return compiled modules (ABI + bytecode unique per module) keyed by module name."""
    return {
        name: CompiledModule(
            name=name, abi=ContractAbi.from_json(entries), bytecode=module_bytecode(name)
        )
        for name, entries in module_abis.items()
    }


@pytest.fixture
def owner_module() -> CompiledModule:
    """Return a one-function module that pushes the set past nine selectors."""
    return CompiledModule(
        name="OwnerModule",
        abi=ContractAbi.from_json(OWNER_ABI),
        bytecode=module_bytecode("OwnerModule"),
    )


@pytest.fixture
def deployment() -> DeploymentTarget:
    """Return the default CREATE2 deployment target."""
    return DeploymentTarget.from_hex(DEFAULT_DEPLOYER, DEFAULT_SALT)


@pytest.fixture
def settings(deployment: DeploymentTarget) -> GenerationSettings:
    """Return generation settings with the default deployment target."""
    return GenerationSettings(deployment=deployment)


# =============================================================================
# Filesystem Fixtures
# =============================================================================


@pytest.fixture
def artifacts_dir(tmp_path: Path, module_abis: dict) -> Path:
    """Create a Foundry-style out/ directory holding the three-module set."""
    out = tmp_path / "out"
    for name, entries in module_abis.items():
        write_artifact(out, name, entries, bytecode=module_bytecode(name))
    write_artifact(out, "OwnerModule", OWNER_ABI, bytecode=module_bytecode("OwnerModule"))
    # Compiler metadata that must be skipped
    (out / "build-info").mkdir()
    (out / "build-info" / "abc123.json").write_text("{}", encoding="utf-8")
    return out


@pytest.fixture
def temp_project(tmp_path: Path) -> Path:
    """Create a temporary project directory for tests that write files."""
    project = tmp_path / "test-project"
    project.mkdir()
    return project
