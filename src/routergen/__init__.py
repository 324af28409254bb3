"""routergen - selector dispatch-tree router generator.

Turns the selectors of a set of compiled modules into a balanced binary
lookup tree and renders it as a Solidity router contract.
"""

__version__ = "0.1.0"

from routergen.generator import (
    BatchResult,
    GenerationSettings,
    RouterDefinition,
    RouterDocument,
    generate_router,
    generate_routers,
)

__all__ = [
    "__version__",
    "BatchResult",
    "GenerationSettings",
    "RouterDefinition",
    "RouterDocument",
    "generate_router",
    "generate_routers",
]
