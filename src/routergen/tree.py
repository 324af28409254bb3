"""Dispatch Tree Builder

Splits a sorted selector set into a balanced binary decision tree whose
leaves hold at most ``max_leaf_width`` selectors each. Balancing is purely by
count: a node over the limit gives its first ``(n + 1) // 2`` selectors to the
left child and the rest to the right child.

Each internal node branches on its threshold, the smallest selector of its
right subtree: ``selector < threshold`` goes left, everything else right.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Tuple

logger = logging.getLogger(__name__)

MAX_SELECTORS_PER_SWITCH_STATEMENT = 9


@dataclass(frozen=True)
class DispatchNode:
    """A leaf (selectors, no children) or an internal node (two children, no selectors)."""

    selectors: Tuple[bytes, ...] = ()
    children: Tuple["DispatchNode", ...] = ()

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def left(self) -> "DispatchNode":
        return self.children[0]

    @property
    def right(self) -> "DispatchNode":
        return self.children[1]

    def first_selector(self) -> Optional[bytes]:
        """Smallest selector under this node (found in the leftmost leaf)."""
        node = self
        while not node.is_leaf:
            node = node.left
        return node.selectors[0] if node.selectors else None

    @property
    def threshold(self) -> bytes:
        """Branch key of an internal node."""
        if self.is_leaf:
            raise ValueError("Leaf nodes have no threshold")
        return self.right.first_selector()

    def leaves(self) -> Iterator["DispatchNode"]:
        """Yield leaves left to right."""
        if self.is_leaf:
            yield self
        else:
            for child in self.children:
                yield from child.leaves()

    def depth(self) -> int:
        if self.is_leaf:
            return 0
        return 1 + max(child.depth() for child in self.children)


def _split(selectors: Tuple[bytes, ...], max_leaf_width: int) -> DispatchNode:
    if len(selectors) <= max_leaf_width:
        return DispatchNode(selectors=selectors)

    mid = (len(selectors) + 1) // 2
    left = _split(selectors[:mid], max_leaf_width)
    right = _split(selectors[mid:], max_leaf_width)
    return DispatchNode(children=(left, right))


def build_tree(
    selectors: Iterable[bytes],
    max_leaf_width: int = MAX_SELECTORS_PER_SWITCH_STATEMENT,
) -> DispatchNode:
    """
    Build the dispatch tree for a selector set.

    Args:
        selectors: Selectors to dispatch on (duplicates collapse)
        max_leaf_width: Maximum selectors per leaf switch statement

    Returns:
        Root node; an empty input yields a single empty leaf

    Raises:
        ValueError: If max_leaf_width is smaller than 1
    """
    if max_leaf_width < 1:
        raise ValueError(f"max_leaf_width must be at least 1, got {max_leaf_width}")

    ordered = tuple(sorted(set(selectors)))
    root = _split(ordered, max_leaf_width)

    logger.debug(
        f"Built dispatch tree: {len(ordered)} selectors, "
        f"{sum(1 for _ in root.leaves())} leaves, depth {root.depth()}"
    )
    return root
