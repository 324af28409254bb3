"""Immutable router: module addresses are injected through the constructor.

Solidity cannot read immutables from inline assembly, so the lookup returns
the module identifier and ``_resolveImplementation`` maps it to the
immutable address.
"""

from typing import Dict, Sequence

from routergen.abi import ContractAbi
from routergen.casing import to_lower_camel_case
from routergen.modules import ModuleBinding
from routergen.render import render_modules_with_template
from routergen.variant import RouterVariant, register_variant, render_case


@register_variant("immutable")
class ImmutableRouter(RouterVariant):
    """
    Module addresses stored as immutables set from a ``Modules`` struct.

    The constructor takes the single struct ``Modules memory $``, one
    ``address`` field per module in module-name order. The flat
    ``constructor_args`` list (``address coreModule, address ownerModule``)
    only documents that field order in the constructor's NatSpec; it is not
    a parameter list.
    """

    template_name = "ImmutableRouterTemplate.sol"

    @property
    def name(self) -> str:
        return "immutable"

    @property
    def description(self) -> str:
        return "Module addresses passed to the constructor and stored as immutables"

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
            "modules": render_modules_with_template(
                modules, lambda m: f"    address immutable internal {m.constant_name};"
            ),
            "resolver": render_modules_with_template(
                modules,
                lambda m: f"        if (implementation == {m.identifier}) return {m.constant_name};",
            ),
            "constructor_args": render_modules_with_template(
                modules, lambda m: f"address {to_lower_camel_case(m.module_name)}", separator=", "
            ),
            "immutables": render_modules_with_template(
                modules,
                lambda m: f"        {m.constant_name} = $.{to_lower_camel_case(m.module_name)};",
            ),
            "struct": render_modules_with_template(
                modules, lambda m: f"        address {to_lower_camel_case(m.module_name)};"
            ),
        }
