"""Router template loading and placeholder substitution.

Templates are Solidity skeletons shipped as package data. Placeholders are
written ``{name}`` and only the names in PLACEHOLDERS are recognised, so the
braces of ordinary Solidity blocks are left alone. Substitution is a single
pass: text inserted for one placeholder is never scanned again.
"""

import re
from pathlib import Path
from typing import Mapping

from routergen.errors import TemplateError

TEMPLATES_DIR = Path(__file__).parent / "templates"

PLACEHOLDERS = (
    "selectors",
    "modules",
    "interface",
    "router_name",
    "resolver",
    "constructor_args",
    "immutables",
    "struct",
)

_PLACEHOLDER_PATTERN = re.compile(r"\{(" + "|".join(PLACEHOLDERS) + r")\}")


def load_template(name: str) -> str:
    """
    Read a template shipped in ``routergen/templates``.

    Raises:
        TemplateError: If the template does not exist
    """
    try:
        return (TEMPLATES_DIR / name).read_text(encoding="utf-8")
    except (FileNotFoundError, IsADirectoryError) as e:
        raise TemplateError(f"Router template not found: {name}") from e


def substitute(template: str, values: Mapping[str, str]) -> str:
    """
    Fill every placeholder of ``template`` from ``values`` in one pass.

    Raises:
        TemplateError: If the template uses a placeholder with no value
    """
    missing = sorted({m.group(1) for m in _PLACEHOLDER_PATTERN.finditer(template)} - set(values))
    if missing:
        raise TemplateError(f"No value for template placeholders: {', '.join(missing)}")
    return _PLACEHOLDER_PATTERN.sub(lambda m: values[m.group(1)], template)
