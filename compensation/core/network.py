"""
Downline tree operations.

Compression, spillover placement and downline statistics over
caller-owned NetworkNode trees. Trees are assumed finite and acyclic.
"""

from collections import deque
from decimal import Decimal
from typing import Any, Iterable, Mapping, TypeVar

from loguru import logger

from compensation.core.models import (
    DownlineStats,
    NetworkNode,
    SpilloverResult,
    TopPerformer,
)
from compensation.types import LevelDescriptor


TOP_PERFORMERS_LIMIT = 5

_FLAG_ALIASES = {
    "is_active": "isActive",
    "has_active_downline": "hasActiveDownline",
}

LevelT = TypeVar("LevelT", bound=LevelDescriptor | Mapping[str, Any])


def _flag(level: Any, name: str) -> bool:
    if isinstance(level, Mapping):
        return bool(level.get(name, level.get(_FLAG_ALIASES[name], False)))
    return bool(getattr(level, name, False))


def is_compressible(level: Any) -> bool:
    """
    Check whether a level is skipped by compression.

    A level is skipped when it is inactive and has no active descendant.
    """
    return not (_flag(level, "is_active") or _flag(level, "has_active_downline"))


def compress_levels(levels: Iterable[LevelT]) -> list[LevelT]:
    """
    Drop inactive levels that have no active downline.

    Relative order is preserved and the input is not modified, so
    compressing twice gives the same result as compressing once.

    Args:
        levels: Level descriptors: NetworkNode, any object with
            `is_active` / `has_active_downline`, or mappings with
            snake_case or camelCase keys

    Returns:
        New list with the kept levels

    Example:
        >>> compress_levels([
        ...     {"isActive": False, "hasActiveDownline": False},
        ...     {"isActive": True, "hasActiveDownline": False},
        ... ])
        [{'isActive': True, 'hasActiveDownline': False}]
    """
    return [level for level in levels if not is_compressible(level)]


def place_spillover(
    node: NetworkNode,
    max_width: int,
    max_depth: int | None = None,
) -> SpilloverResult:
    """
    Move children beyond `max_width` into free slots lower in the tree.

    Children at index >= max_width are detached from `node` and placed
    one by one into the first node, in breadth-first order starting at
    `node`, that has fewer than `max_width` children. A node keeps
    receiving children while it has room. Placed children are queued
    too, so later spillovers can land under them. With `max_depth`
    (matrix plans) only nodes above that depth, root = 0, receive
    children.

    The tree is mutated in place. Children that find no free slot are
    returned in `unplaced` and are no longer part of the tree.

    Args:
        node: Root of the subtree
        max_width: Maximum direct children per node (2 for binary plans)
        max_depth: Deepest level a placed child may land on, None = unbounded

    Returns:
        SpilloverResult with the same root, placements and leftovers

    Raises:
        ValueError: If max_width or max_depth is less than 1
    """
    if max_width < 1:
        raise ValueError(f"max_width must be at least 1, got {max_width}")
    if max_depth is not None and max_depth < 1:
        raise ValueError(f"max_depth must be at least 1, got {max_depth}")

    if len(node.children) <= max_width:
        return SpilloverResult(node=node)

    pending = deque(node.children[max_width:])
    del node.children[max_width:]

    placed: list[tuple[str, str]] = []
    queue = deque([(node, 0)])
    while queue and pending:
        current, depth = queue.popleft()
        if max_depth is not None and depth >= max_depth:
            continue
        while pending and len(current.children) < max_width:
            child = pending.popleft()
            current.children.append(child)
            placed.append((current.id, child.id))
            logger.debug(
                "Spillover node placed",
                extra={"parent_id": current.id, "child_id": child.id},
            )
        queue.extend((child, depth + 1) for child in current.children)

    return SpilloverResult(node=node, placed=placed, unplaced=list(pending))


def apply_spillover(
    node: NetworkNode,
    max_width: int,
    max_depth: int | None = None,
) -> NetworkNode:
    """
    Apply spillover and return the same, mutated, root node.

    Nodes that cannot be placed because the tree is saturated are
    dropped; use place_spillover to get them back.
    """
    result = place_spillover(node, max_width, max_depth)
    if result.unplaced:
        logger.warning(
            "Spillover dropped nodes, no free slot left",
            extra={
                "root_id": node.id,
                "max_width": max_width,
                "dropped_ids": [n.id for n in result.unplaced],
            },
        )
    return result.node


def summarize_downline(root: NetworkNode) -> DownlineStats:
    """
    Aggregate member, activity and sales figures below `root`.

    The root itself is not counted. Depth 1 means direct children.

    Args:
        root: Node whose downline is summarized

    Returns:
        DownlineStats
    """
    total_members = 0
    active_members = 0
    total_sales = Decimal("0")
    level_distribution: dict[int, int] = {}
    performers: list[NetworkNode] = []

    stack = [(child, 1) for child in reversed(root.children)]
    while stack:
        current, depth = stack.pop()
        total_members += 1
        if current.is_active:
            active_members += 1
        level_distribution[depth] = level_distribution.get(depth, 0) + 1
        if current.total_sales:
            total_sales += current.total_sales
            performers.append(current)
        stack.extend((child, depth + 1) for child in reversed(current.children))

    # sorted() is stable: equal sales keep traversal order
    top = sorted(performers, key=lambda n: n.total_sales, reverse=True)[:TOP_PERFORMERS_LIMIT]

    return DownlineStats(
        total_members=total_members,
        active_members=active_members,
        total_sales=total_sales,
        level_distribution=level_distribution,
        top_performers=tuple(
            TopPerformer(id=n.id, username=n.username, sales=n.total_sales, rank=n.rank)
            for n in top
        ),
    )
