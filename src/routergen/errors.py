"""Router Generation Errors

Every failure raised while generating a router derives from
RouterGenerationError. All of them are terminal: the inputs are deterministic,
so retrying cannot help, and no output is written for the failing router.
"""

from typing import Iterable, Sequence


class RouterGenerationError(Exception):
    """Base class for all router generation failures."""
    pass


class ConfigurationError(RouterGenerationError):
    """Raised when configuration or a router definition is invalid."""
    pass


class ArtifactError(RouterGenerationError):
    """Raised when a compiled artifact cannot be read or parsed."""
    pass


class TemplateError(RouterGenerationError):
    """Raised when a router template cannot be loaded or filled."""
    pass


class ModuleNotFound(RouterGenerationError):
    """One or more requested modules are absent from the compiled output."""

    def __init__(self, names: Iterable[str]):
        self.names: Sequence[str] = tuple(names)
        super().__init__(f"Modules not found: {', '.join(self.names)}")


class MissingAbi(RouterGenerationError):
    """A module artifact has no ABI."""

    def __init__(self, module: str):
        self.module = module
        super().__init__(f"No ABI found for contract `{module}`")


class MissingBytecode(RouterGenerationError):
    """A module artifact has no creation bytecode (required for CREATE2 addresses)."""

    def __init__(self, module: str):
        self.module = module
        super().__init__(f"No bytecode found for contract `{module}`")


class DuplicateSelector(RouterGenerationError):
    """Two functions across the module set share the same 4-byte selector.

    Attributes:
        selector: The colliding selector
        existing: "Module.signature" of the function inserted first
        duplicate: "Module.signature" of the function that collided
    """

    def __init__(self, selector: bytes, existing: str, duplicate: str):
        self.selector = selector
        self.existing = existing
        self.duplicate = duplicate
        super().__init__(
            f"Duplicate selector found 0x{selector.hex()}: "
            f"{duplicate} collides with {existing}"
        )


class MultipleSpecialHandlers(RouterGenerationError):
    """More than one module declares a fallback or a receive handler."""

    def __init__(self, kind: str, modules: Iterable[str] = ()):
        self.kind = kind
        self.modules: Sequence[str] = tuple(modules)
        message = f"Multiple {kind} functions found"
        if self.modules:
            message += f" ({', '.join(self.modules)})"
        super().__init__(message)


class DuplicateModule(RouterGenerationError):
    """Two requested modules resolve to the same module identity.

    Both would share one constant name and identifier in the router, so
    the selectors of one would dispatch to the other.

    Attributes:
        constant_name: The shared CONSTANT_CASE name
        first: Requested name of the module seen first
        second: Requested name of the colliding module
    """

    def __init__(self, constant_name: str, first: str, second: str):
        self.constant_name = constant_name
        self.first = first
        self.second = second
        super().__init__(
            f"Modules `{first}` and `{second}` both resolve to {constant_name}; "
            "rename one of the contracts"
        )
