"""Compiled Artifact Loader

Reads build artifacts produced by an external compiler run and turns them
into CompiledModule records. Nothing is compiled here.

Supported layouts:
    Foundry: <out>/<File>.sol/<Contract>.json, bytecode as {"object": "0x..."}
    Hardhat: <artifacts>/<path>/<File>.sol/<Contract>.json, bytecode as "0x..."

Bytecode is kept as hex text; it is decoded only when module addresses are
predicted, so artifacts with unlinked library placeholders still load.

Module names are either a bare contract name ("CoreModule") or a
source-qualified one ("src/modules/CoreModule.sol:CoreModule").
"""

import json
import logging
from pathlib import Path, PurePosixPath
from typing import Any, Dict, List, Optional, Sequence, Tuple

from routergen.abi import ContractAbi
from routergen.errors import ArtifactError
from routergen.modules import CompiledModule

logger = logging.getLogger(__name__)

# Directories of compiler metadata that never hold contract artifacts
SKIPPED_DIRECTORIES = {"build-info", "cache"}


def parse_module_name(module_name: str) -> Tuple[Optional[str], str]:
    """Split ``path/File.sol:Contract`` into (``path/File.sol``, ``Contract``)."""
    if ":" in module_name:
        path, name = module_name.rsplit(":", 1)
        return path, name
    return None, module_name


def _raw_bytecode(raw: Any, path: Path) -> Optional[str]:
    """Creation bytecode as hex text, undecoded; link placeholders are kept as is."""
    if isinstance(raw, dict):
        raw = raw.get("object")
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise ArtifactError(f"Invalid bytecode in {path}: expected a hex string")
    if raw in ("", "0x"):
        return None
    return raw


def load_artifact_file(path: Path, name: Optional[str] = None) -> CompiledModule:
    """
    Parse one artifact JSON file.

    Args:
        path: Artifact file
        name: Module name (defaults to the file stem)

    Raises:
        ArtifactError: If the file cannot be read or is not valid JSON
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ArtifactError(f"Invalid JSON in artifact {path}: {e}")
    except OSError as e:
        raise ArtifactError(f"Cannot read artifact {path}: {e}")

    if not isinstance(data, dict):
        raise ArtifactError(f"Artifact {path} is not a JSON object")

    abi_entries = data.get("abi")
    abi = ContractAbi.from_json(abi_entries) if abi_entries is not None else None

    return CompiledModule(
        name=name or path.stem,
        abi=abi,
        bytecode=_raw_bytecode(data.get("bytecode"), path),
    )


def index_artifacts(artifacts_dir: Path) -> Dict[str, List[Path]]:
    """
    Map contract name to every artifact file with that name, in path order.

    Raises:
        ArtifactError: If the directory does not exist
    """
    if not artifacts_dir.is_dir():
        raise ArtifactError(f"Artifacts directory not found: {artifacts_dir}")

    index: Dict[str, List[Path]] = {}
    for path in sorted(artifacts_dir.rglob("*.json")):
        relative = path.relative_to(artifacts_dir)
        if SKIPPED_DIRECTORIES.intersection(relative.parts[:-1]):
            continue
        if path.name.endswith(".dbg.json"):
            continue
        index.setdefault(path.stem, []).append(path)
    return index


def _matches_source(artifact: Path, source_path: str) -> bool:
    return artifact.parent.name == PurePosixPath(source_path).name


def _select(candidates: List[Path], module_name: str, source_path: Optional[str]) -> Optional[Path]:
    if source_path is not None:
        candidates = [c for c in candidates if _matches_source(c, source_path)]
        # Prefer an artifact nested under the full source path when names collide
        nested = [c for c in candidates if c.parent.as_posix().endswith(source_path)]
        candidates = nested or candidates

    if not candidates:
        return None
    if len(candidates) > 1:
        logger.warning(
            f"Module {module_name} matches {len(candidates)} artifacts, using {candidates[0]}"
        )
    return candidates[0]


def load_artifacts(artifacts_dir: Path, module_names: Sequence[str]) -> Dict[str, CompiledModule]:
    """
    Load the artifacts of the requested modules.

    Names that cannot be resolved are left out of the result so that the
    collector can report every missing module at once.

    Args:
        artifacts_dir: Compiler output directory
        module_names: Requested module names

    Returns:
        Requested name -> CompiledModule (named after the contract)
    """
    index = index_artifacts(artifacts_dir)
    compiled: Dict[str, CompiledModule] = {}

    for module_name in dict.fromkeys(module_names):
        source_path, contract_name = parse_module_name(module_name)
        path = _select(index.get(contract_name, []), module_name, source_path)
        if path is None:
            logger.debug(f"No artifact found for module {module_name}")
            continue
        compiled[module_name] = load_artifact_file(path, contract_name)
        logger.debug(f"Loaded artifact for {module_name}: {path}")

    return compiled
