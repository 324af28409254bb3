"""Write generated routers to disk."""

import logging
from pathlib import Path

from routergen.generator import RouterDocument

logger = logging.getLogger(__name__)


def write_router(document: RouterDocument, output_dir: Path) -> Path:
    """
    Write a router to ``<output_dir>/<RouterName>.g.sol``, creating the directory.

    Returns:
        Path of the written file
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    router_path = output_dir / document.filename
    router_path.write_text(document.text, encoding="utf-8")
    logger.info(f"Wrote router file: {router_path}")
    return router_path
