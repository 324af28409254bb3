"""Router Generation Orchestrator

Runs collection → tree building → rendering → template assembly for one
router, or for every router of a batch definition. Each router is generated
independently; a failure in one never produces partial output and never
affects the others.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import routergen.variants  # noqa: F401 - imported for side effect (variant registration)
from routergen.casing import to_pascal_case
from routergen.deployment import DeploymentTarget
from routergen.errors import ConfigurationError, RouterGenerationError
from routergen.modules import CompiledModule, collect_modules
from routergen.render import render_tree
from routergen.tree import MAX_SELECTORS_PER_SWITCH_STATEMENT, build_tree
from routergen.variant import create_variant

logger = logging.getLogger(__name__)

ROUTER_FILE_SUFFIX = ".g.sol"


@dataclass(frozen=True)
class GenerationSettings:
    """Knobs shared by every router of one run."""

    variant: Optional[str] = None
    max_leaf_width: int = MAX_SELECTORS_PER_SWITCH_STATEMENT
    deployment: Optional[DeploymentTarget] = None


@dataclass(frozen=True)
class RouterDefinition:
    """One generation request: router name, its modules and optionally a variant."""

    name: str
    modules: Tuple[str, ...]
    variant: Optional[str] = None


@dataclass(frozen=True)
class RouterDocument:
    """Generated router source and what it was generated from."""

    name: str
    variant: str
    text: str
    module_names: Tuple[str, ...]
    selector_count: int

    @property
    def filename(self) -> str:
        return f"{self.name}{ROUTER_FILE_SUFFIX}"


@dataclass
class BatchResult:
    """Outcome of a batch: generated documents and per-router failures."""

    documents: List[RouterDocument] = field(default_factory=list)
    failures: Dict[str, RouterGenerationError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures


def generate_router(
    router_name: str,
    module_names: Sequence[str],
    compiled: Mapping[str, CompiledModule],
    variant: Optional[str] = None,
    settings: Optional[GenerationSettings] = None,
) -> RouterDocument:
    """
    Generate one router.

    Args:
        router_name: Router name; whitespace separated words are joined in PascalCase
        module_names: Modules the router dispatches to
        compiled: Compiled modules keyed by requested name
        variant: Variant name, overriding ``settings.variant``
        settings: Shared settings (defaults when None)

    Returns:
        The generated RouterDocument

    Raises:
        ConfigurationError: Unknown variant, empty router name, or a
            deterministic router without deployer and salt
        RouterGenerationError: Any collection failure (see collect_modules)
    """
    settings = settings or GenerationSettings()
    name = to_pascal_case(router_name)
    if not name:
        raise ConfigurationError("Router name must not be empty")

    router_variant = create_variant(variant or settings.variant)

    deployment = None
    if router_variant.requires_deployment:
        if settings.deployment is None:
            raise ConfigurationError(
                f"Router '{name}' uses the {router_variant.name} variant, "
                "which requires a deployer and salt"
            )
        deployment = settings.deployment

    selector_set, interface = collect_modules(module_names, compiled, deployment)

    tree = build_tree(selector_set.selectors(), settings.max_leaf_width)
    selectors = render_tree(tree, selector_set, router_variant.render_entry)

    modules = selector_set.modules()
    text = router_variant.render(name, selectors, modules, interface)

    logger.info(
        f"Generated {router_variant.name} router {name}: "
        f"{len(selector_set)} selectors across {len(modules)} modules"
    )
    return RouterDocument(
        name=name,
        variant=router_variant.name,
        text=text,
        module_names=tuple(m.module_name for m in modules),
        selector_count=len(selector_set),
    )


def generate_routers(
    definitions: Iterable[RouterDefinition],
    compiled: Mapping[str, CompiledModule],
    settings: Optional[GenerationSettings] = None,
) -> BatchResult:
    """
    Generate every router of a batch.

    Failures are collected per router name instead of aborting the batch.
    Documents are returned sorted by router name.
    """
    result = BatchResult()
    for definition in definitions:
        try:
            document = generate_router(
                definition.name,
                definition.modules,
                compiled,
                variant=definition.variant,
                settings=settings,
            )
        except RouterGenerationError as e:
            logger.error(f"Router {definition.name} failed: {e}")
            result.failures[definition.name] = e
            continue
        result.documents.append(document)

    result.documents.sort(key=lambda d: d.name)
    return result
