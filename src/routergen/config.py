"""routergen Configuration

Configuration loading with environment variable support and sensible
defaults, plus parsing of batch router definition files.

Environment Variables:
    ROUTERGEN_CONFIG_PATH: Path to config file (default: routergen.yaml in the base dir)
    ROUTERGEN_ARTIFACTS_PATH: Override paths.artifacts
    ROUTERGEN_OUTPUT_PATH: Override paths.output
    ROUTERGEN_DEPLOYER: Override generation.deployer
    ROUTERGEN_SALT: Override generation.salt

Configuration Schema:
    generation:
        variant: str - Router variant (default: "deterministic")
        max_leaf_width: int - Maximum selectors per switch statement (default: 9)
        deployer: str - CREATE2 deployer address
        salt: str - CREATE2 salt (32 bytes hex)
    paths:
        artifacts: str - Compiler output directory (default: "out")
        output: str - Generated router directory (default: "src/generated/routers")
    logging:
        level: str - Logging level (default: "INFO")

Router Definition Schema (TOML or YAML):
    [router.CoreRouter]
    modules = ["CoreModule", "OwnerModule"]
    variant = "immutable"   # optional
"""

import copy
import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from routergen.deployment import DEFAULT_DEPLOYER, DEFAULT_SALT, DeploymentTarget
from routergen.errors import ConfigurationError
from routergen.generator import GenerationSettings, RouterDefinition
from routergen.tree import MAX_SELECTORS_PER_SWITCH_STATEMENT

logger = logging.getLogger(__name__)

CONFIG_FILE = "routergen.yaml"

# Default configuration values
DEFAULT_CONFIG: Dict[str, Any] = {
    "generation": {
        "variant": "deterministic",
        "max_leaf_width": MAX_SELECTORS_PER_SWITCH_STATEMENT,
        "deployer": DEFAULT_DEPLOYER,
        "salt": DEFAULT_SALT,
    },
    "paths": {
        "artifacts": "out",
        "output": "src/generated/routers",
    },
    "logging": {
        "level": "INFO",
    },
}

# Environment variable -> (section, key)
ENV_OVERRIDES: Dict[str, Tuple[str, str]] = {
    "ROUTERGEN_ARTIFACTS_PATH": ("paths", "artifacts"),
    "ROUTERGEN_OUTPUT_PATH": ("paths", "output"),
    "ROUTERGEN_DEPLOYER": ("generation", "deployer"),
    "ROUTERGEN_SALT": ("generation", "salt"),
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge override dict into base dict.

    Args:
        base: Base dictionary (defaults)
        override: Override dictionary (user config)

    Returns:
        Merged dictionary with override values taking precedence
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def apply_overrides(config: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Return config with command-line overrides (same shape as the file) merged on top."""
    return _deep_merge(config, overrides)


def _resolve_path(path: Optional[str], base_dir: Path) -> Optional[Path]:
    """
    Resolve a path, making relative paths absolute from base_dir.

    Returns:
        Resolved absolute Path or None if path was None
    """
    if path is None:
        return None

    path_obj = Path(path)
    if path_obj.is_absolute():
        return path_obj
    return (base_dir / path_obj).resolve()


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}")
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}")
    if not isinstance(data, dict):
        raise ConfigurationError(f"Expected a mapping at the top of {path}")
    return data


def load_config(
    config_path: Optional[str] = None,
    base_dir: Optional[Path] = None,
) -> Dict[str, Any]:
    """
    Load configuration from YAML file with environment variable overrides.

    Configuration Loading Order (later overrides earlier):
    1. Default values (DEFAULT_CONFIG)
    2. Config file (config_path, ROUTERGEN_CONFIG_PATH, or routergen.yaml)
    3. Environment variable overrides (ENV_OVERRIDES)

    Args:
        config_path: Explicit config file path (overrides ROUTERGEN_CONFIG_PATH)
        base_dir: Directory for relative path resolution (default: cwd)

    Returns:
        Merged configuration dictionary

    Raises:
        ConfigurationError: If an explicit config file is missing or invalid

    Examples:
        # Load with defaults (no config file required)
        config = load_config()

        # Load from specific file
        config = load_config("/path/to/routergen.yaml")
    """
    if base_dir is None:
        base_dir = Path.cwd()

    config = copy.deepcopy(DEFAULT_CONFIG)

    file_path = config_path or os.environ.get("ROUTERGEN_CONFIG_PATH")

    if file_path:
        # Explicit config path - must exist and be valid
        resolved_path = _resolve_path(file_path, base_dir)
        if not resolved_path.exists():
            raise ConfigurationError(f"Config file not found: {file_path}")
        config = _deep_merge(config, _read_yaml(resolved_path))
        logger.info(f"Loaded configuration from: {resolved_path}")
    else:
        # Default config file is optional
        default_config_path = base_dir / CONFIG_FILE
        if default_config_path.exists():
            config = _deep_merge(config, _read_yaml(default_config_path))
            logger.info(f"Loaded configuration from: {default_config_path}")
        else:
            logger.debug("No config file found, using defaults")

    for env_var, (section, key) in ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value:
            config.setdefault(section, {})[key] = value
            logger.info(f"{section}.{key} override from env: {value}")

    return config


def _hex_value(value: Any, size: int) -> Optional[str]:
    """Normalise a hex setting; unquoted 0x... values arrive from YAML as integers."""
    if value is None or value == "":
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return f"0x{value:0{size * 2}x}"
    return str(value)


def get_generation_settings(config: Dict[str, Any]) -> GenerationSettings:
    """
    Build GenerationSettings from the ``generation`` section.

    Raises:
        ConfigurationError: If max_leaf_width, deployer or salt is invalid
    """
    generation = config.get("generation", {})

    max_leaf_width = generation.get("max_leaf_width", MAX_SELECTORS_PER_SWITCH_STATEMENT)
    if isinstance(max_leaf_width, bool) or not isinstance(max_leaf_width, int) or max_leaf_width < 1:
        raise ConfigurationError(
            f"generation.max_leaf_width must be a positive integer, got {max_leaf_width!r}"
        )

    deployment = None
    deployer = _hex_value(generation.get("deployer"), 20)
    salt = _hex_value(generation.get("salt"), 32)
    if deployer and salt:
        deployment = DeploymentTarget.from_hex(deployer, salt)

    return GenerationSettings(
        variant=generation.get("variant"),
        max_leaf_width=max_leaf_width,
        deployment=deployment,
    )


def get_paths(config: Dict[str, Any], base_dir: Optional[Path] = None) -> Tuple[Path, Path]:
    """
    Resolve the artifacts and output directories.

    Returns:
        Tuple of (artifacts_dir, output_dir)
    """
    if base_dir is None:
        base_dir = Path.cwd()
    paths = {**DEFAULT_CONFIG["paths"], **config.get("paths", {})}
    return (
        _resolve_path(str(paths["artifacts"]), base_dir),
        _resolve_path(str(paths["output"]), base_dir),
    )


def get_log_level(config: Dict[str, Any]) -> int:
    """Return the configured logging level, INFO when unknown."""
    name = str(config.get("logging", {}).get("level", "INFO")).upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def load_router_definitions(path: Path) -> List[RouterDefinition]:
    """
    Load batch router definitions from a TOML or YAML file.

    Args:
        path: ``.toml``, ``.yaml`` or ``.yml`` file with a ``router`` table

    Returns:
        Definitions in file order

    Raises:
        ConfigurationError: If the file is unreadable or a definition is invalid
    """
    if path.suffix == ".toml":
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid TOML in {path}: {e}")
        except OSError as e:
            raise ConfigurationError(f"Cannot read {path}: {e}")
    elif path.suffix in (".yaml", ".yml"):
        data = _read_yaml(path)
    else:
        raise ConfigurationError(
            f"Unsupported router definition format '{path.suffix}' (use .toml, .yaml or .yml)"
        )

    routers = data.get("router")
    if not isinstance(routers, dict) or not routers:
        raise ConfigurationError(f"No [router.<name>] entries found in {path}")

    definitions = []
    for name, entry in routers.items():
        if not isinstance(entry, dict):
            raise ConfigurationError(f"Router '{name}' must be a table")
        modules = entry.get("modules")
        if (
            not isinstance(modules, list)
            or not modules
            or not all(isinstance(m, str) and m for m in modules)
        ):
            raise ConfigurationError(f"Router '{name}' needs a non-empty 'modules' list of names")
        variant = entry.get("variant")
        if variant is not None and not isinstance(variant, str):
            raise ConfigurationError(f"Router '{name}' has an invalid 'variant': {variant!r}")
        definitions.append(RouterDefinition(name=name, modules=tuple(modules), variant=variant))

    logger.info(f"Loaded {len(definitions)} router definitions from {path}")
    return definitions
