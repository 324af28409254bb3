"""Deterministic router: modules are called at their predicted CREATE2 addresses."""

from typing import Dict, Sequence

from routergen.abi import ContractAbi
from routergen.errors import ConfigurationError
from routergen.modules import ModuleBinding
from routergen.render import render_modules_with_template
from routergen.variant import RouterVariant, register_variant, render_case


@register_variant("deterministic")
class DeterministicRouter(RouterVariant):
    """Each module address is baked into the router as an ``address constant``."""

    template_name = "RouterTemplate.sol"
    requires_deployment = True

    @property
    def name(self) -> str:
        return "deterministic"

    @property
    def description(self) -> str:
        return "Module addresses precomputed from deployer, salt and bytecode (CREATE2)"

    def render_entry(self, binding: ModuleBinding) -> str:
        return render_case(binding, binding.constant_name)

    def render_sections(
        self,
        router_name: str,
        modules: Sequence[ModuleBinding],
        interface: ContractAbi,
    ) -> Dict[str, str]:
        unresolved = [m.module_name for m in modules if m.address is None]
        if unresolved:
            raise ConfigurationError(
                f"Deterministic router '{router_name}' needs a deployer and salt "
                f"to compute addresses for: {', '.join(unresolved)}"
            )

        return {
            "interface": interface.to_solidity(f"I{router_name}"),
            "router_name": router_name,
            "modules": render_modules_with_template(
                modules,
                lambda m: f"    address constant {m.constant_name} = {m.address};",
            ),
        }
