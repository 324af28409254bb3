"""Dynamic router: modules are looked up at call time by identifier."""

from typing import Dict, Sequence

from routergen.abi import ContractAbi
from routergen.modules import ModuleBinding
from routergen.render import render_modules_with_template
from routergen.variant import RouterVariant, register_variant, render_case


@register_variant("dynamic")
class DynamicRouter(RouterVariant):
    """
    Abstract router whose deriving contract implements
    ``_getModuleImplementation(bytes32)``; no addresses are known at
    generation time.
    """

    template_name = "DynamicRouterTemplate.sol"

    @property
    def name(self) -> str:
        return "dynamic"

    @property
    def description(self) -> str:
        return "Module identifiers resolved to live addresses at call time"

    def render_entry(self, binding: ModuleBinding) -> str:
        return render_case(binding, binding.identifier)

    def render_sections(
        self,
        router_name: str,
        modules: Sequence[ModuleBinding],
        interface: ContractAbi,
    ) -> Dict[str, str]:
        return {
            "interface": interface.to_solidity(f"I{router_name}"),
            "router_name": router_name,
            "resolver": render_modules_with_template(
                modules,
                lambda m: f'        if (moduleId == {m.identifier}) return "{m.constant_name}";',
            ),
        }
