"""Router Variant Abstract Interface

Defines the interface for interchangeable router variants and the registry
the generator uses to look them up by name.

Architecture:
    Module Collector → Dispatch Tree Builder → Tree Renderer → RouterVariant

    Every variant shares the same tree and traversal. A variant only decides
    what a ``case`` entry returns, which per-module sections the template
    needs, and which template skeleton is filled.

Variants:
    - deterministic: modules live at precomputed CREATE2 addresses
    - immutable: module addresses are passed to the constructor
    - dynamic: modules are resolved at call time from their identifier
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence

from routergen.abi import ContractAbi
from routergen.errors import ConfigurationError
from routergen.modules import ModuleBinding
from routergen.templates import load_template, substitute


class RouterVariant(ABC):
    """
    Abstract interface for router variants.

    Subclasses implement render_entry() and render_sections() and name the
    template they fill. render() assembles the final document.
    """

    template_name: str = ""

    #: Whether bindings must carry predicted addresses (deployer and salt required)
    requires_deployment: bool = False

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry name of the variant (e.g. 'deterministic')."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of how modules are resolved."""
        pass

    @abstractmethod
    def render_entry(self, binding: ModuleBinding) -> str:
        """
        Render the ``case`` line of one selector.

        Args:
            binding: Binding of the selector

        Returns:
            Single line without indentation, e.g.
            ``case 0xa9059cbb { result := TOKEN_MODULE } // TokenModule.transfer()``
        """
        pass

    @abstractmethod
    def render_sections(
        self,
        router_name: str,
        modules: Sequence[ModuleBinding],
        interface: ContractAbi,
    ) -> Dict[str, str]:
        """
        Render the variant specific template sections.

        Args:
            router_name: Normalised router name
            modules: One binding per module, sorted by module name
            interface: Merged interface of all modules

        Returns:
            Placeholder name -> text, for every placeholder except ``selectors``
        """
        pass

    def render(
        self,
        router_name: str,
        selectors: str,
        modules: Sequence[ModuleBinding],
        interface: ContractAbi,
    ) -> str:
        """Fill the variant template with the rendered tree and sections."""
        values = self.render_sections(router_name, modules, interface)
        values["selectors"] = selectors
        return substitute(load_template(self.template_name), values)


def render_case(binding: ModuleBinding, result: str) -> str:
    """Shared ``case`` line format of all variants."""
    return (
        f"case {binding.selector_hex} {{ result := {result} }} "
        f"// {binding.module_name}.{binding.function_name}()"
    )


# Variant registry for factory function
_VARIANT_REGISTRY: Dict[str, type] = {}

DEFAULT_VARIANT = "deterministic"


def register_variant(name: str):
    """
    Decorator to register a router variant implementation.

    Usage:
        @register_variant("deterministic")
        class DeterministicRouter(RouterVariant):
            ...
    """
    def decorator(cls):
        _VARIANT_REGISTRY[name] = cls
        return cls
    return decorator


def get_default_variant() -> str:
    """Get the default variant name, falling back to the first registered one."""
    if DEFAULT_VARIANT in _VARIANT_REGISTRY:
        return DEFAULT_VARIANT
    if _VARIANT_REGISTRY:
        return next(iter(_VARIANT_REGISTRY.keys()))
    raise ConfigurationError("No router variants registered")


def get_available_variants() -> List[str]:
    """Return the registered variant names."""
    return list(_VARIANT_REGISTRY.keys())


def create_variant(name: Optional[str] = None) -> RouterVariant:
    """
    Create a router variant by name.

    Args:
        name: Variant name; the default variant when None

    Raises:
        ConfigurationError: If the variant is unknown
    """
    variant_name = name or get_default_variant()
    if variant_name not in _VARIANT_REGISTRY:
        available = list(_VARIANT_REGISTRY.keys())
        raise ConfigurationError(
            f"Unknown router variant: '{variant_name}'. "
            f"Available variants: {available}"
        )
    return _VARIANT_REGISTRY[variant_name]()
