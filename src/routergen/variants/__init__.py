"""Router variant implementations.

Importing this package registers every variant with the registry in
routergen.variant.
"""

from routergen.variants.deterministic import DeterministicRouter
from routergen.variants.dynamic import DynamicRouter
from routergen.variants.immutable import ImmutableRouter

__all__ = ["DeterministicRouter", "DynamicRouter", "ImmutableRouter"]
