"""Tree walking strategies for TreeFS.

Walkers implement the traversal algorithms (depth-first, breadth-first)
and visit timing (pre-order, post-order). Navigation (listing children,
deciding whether a node is descended into) is delegated to a
FileSystemAdapter created fresh for every walk.

Every operation in TreeFS (remove, rename, find, copy) is a visitor
plugged into one of these walkers.
"""

import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Callable, Iterator, List, Optional, Tuple, Union

from .._common import PathLike
from ..config import TraversalOrder, WalkConfig
from .adapter import FileSystemAdapter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VisitResult:
    """What a visitor hands back to the walker.

    ``continue_with`` replaces the path of the node just visited: in
    pre-order the walk descends into the replacement instead, and when the
    node is the walk's root the base path passed to later visits becomes
    the replacement too.
    """
    continue_with: Optional[PathLike] = None


Visitor = Callable[[str, str], Optional[VisitResult]]


class _WalkState:
    """Mutable per-walk state: only the base path."""

    def __init__(self, root: str):
        self.base = root


class TreeWalker(ABC):
    """Abstract base class for walk strategies.

    A walker visits each node of a rooted subtree exactly once, calling
    ``visit(path, base)`` where ``base`` is the walk's root path. The
    root is passed through unchanged (not normalised or made absolute),
    so visitors can compute paths relative to it with ``os.path.relpath``.
    """

    def __init__(self, config: Optional[WalkConfig] = None):
        """Initialize walker with a configuration.

        Args:
            config: Walk configuration (defaults to depth-first pre-order)

        Raises:
            ValueError: If the configuration does not validate
        """
        config = config or WalkConfig()
        errors = config.validate()
        if errors:
            raise ValueError(f"Invalid WalkConfig: {'; '.join(errors)}")
        self.config = config

    def create_adapter(self) -> FileSystemAdapter:
        """Create the navigation adapter for one walk."""
        return FileSystemAdapter(
            follow_links=self.config.follow_links,
            resolve_root=self.config.resolve_root,
        )

    def walk(self, root: PathLike, visit: Visitor) -> None:
        """Walk the tree under ``root``, calling ``visit`` for every node.

        Errors raised by the visitor or by the filesystem abort the walk.

        Raises:
            NotFoundError: If ``root`` does not exist
            LinkCycleError: If a followed link does not resolve
        """
        for _ in self.iter_visits(root, visit):
            pass

    def iter_visits(self,
                    root: PathLike,
                    visit: Optional[Visitor] = None) -> Iterator[Tuple[str, str]]:
        """Lazily walk the tree, yielding ``(path, base)`` at each visit point.

        The generator is suspended at each visit point, so a consumer
        iterating it sees nodes in exactly the order a visitor would. When
        ``visit`` is given it is called just before the corresponding
        yield, and its VisitResult is honoured.
        """
        root = os.fspath(root)
        adapter = self.create_adapter()
        adapter.check_root(root)

        logger.debug("Walking %s (%s, %s, follow_links=%s)",
                     root, self.config.order.value, self.config.timing.value,
                     self.config.follow_links)

        yield from self._iterate(root, adapter, _WalkState(root), visit)

    @abstractmethod
    def _iterate(self,
                 root: str,
                 adapter: FileSystemAdapter,
                 state: _WalkState,
                 visit: Optional[Visitor]) -> Iterator[Tuple[str, str]]:
        pass

    def _visit_point(self, path: str, depth: int, state: _WalkState,
                     visit: Optional[Visitor]):
        """Run the visitor for one node and yield it.

        Returns the path the walk continues with (the replacement, if the
        visitor supplied one).
        """
        base = state.base
        result = visit(path, base) if visit is not None else None
        yield path, base

        if result is None:
            return path
        if not isinstance(result, VisitResult):
            raise TypeError(
                f"Visitor must return VisitResult or None, got {type(result).__name__}"
            )
        if result.continue_with is None:
            return path

        replacement = os.fspath(result.continue_with)
        if depth == 0:
            state.base = replacement
        return replacement

    def _should_explore(self, depth: int) -> bool:
        """Check if children of a node at given depth should be explored."""
        max_depth = self.config.max_depth
        if max_depth is None:
            return True
        return depth < max_depth


class DepthFirstWalker(TreeWalker):
    """Depth-first walk, pre-order or post-order.

    Post-order guarantees every descendant is visited strictly before its
    ancestor, which is what destructive visitors (remove, rename) rely on.
    An explicit stack is used instead of recursion, so tree depth is not
    bounded by the interpreter's recursion limit.
    """

    def _iterate(self, root, adapter, state, visit):
        post = self.config.is_post_order

        # (path, depth, children_already_pushed)
        stack: List[Tuple[str, int, bool]] = [(root, 0, False)]

        while stack:
            path, depth, expanded = stack.pop()

            if expanded:
                yield from self._visit_point(path, depth, state, visit)
                continue

            if not post:
                path = yield from self._visit_point(path, depth, state, visit)

            if self._should_explore(depth) and adapter.should_expand(path, is_root=depth == 0):
                children = adapter.get_children(path)
                if post:
                    stack.append((path, depth, True))
                stack.extend((child, depth + 1, False) for child in reversed(children))
            elif post:
                yield from self._visit_point(path, depth, state, visit)


class BreadthFirstWalker(TreeWalker):
    """Breadth-first walk, level by level.

    Pre-order visits happen as each level is processed. Post-order visits
    for a level happen once the whole next level has been discovered and
    queued, NOT once it has been processed: the guarantee is
    level-synchronous, so parents are still visited before their children.
    Callers that need strict child-before-parent ordering must use
    DepthFirstWalker with post-order timing.
    """

    def _iterate(self, root, adapter, state, visit):
        post = self.config.is_post_order
        level: List[str] = [root]
        depth = 0

        while level:
            next_level: List[str] = []
            seen: List[str] = []

            for path in level:
                if not post:
                    path = yield from self._visit_point(path, depth, state, visit)
                if self._should_explore(depth) and adapter.should_expand(path, is_root=depth == 0):
                    next_level.extend(adapter.get_children(path))
                seen.append(path)

            if post:
                for path in seen:
                    yield from self._visit_point(path, depth, state, visit)

            level = next_level
            depth += 1


_WALKERS = {
    TraversalOrder.DEPTH_FIRST: DepthFirstWalker,
    TraversalOrder.BREADTH_FIRST: BreadthFirstWalker,
}

_ORDER_NAMES = {
    'dfs': TraversalOrder.DEPTH_FIRST,
    'depth_first': TraversalOrder.DEPTH_FIRST,
    'bfs': TraversalOrder.BREADTH_FIRST,
    'breadth_first': TraversalOrder.BREADTH_FIRST,
}


def parse_order(order: Union[TraversalOrder, str]) -> TraversalOrder:
    """Parse a traversal order from an enum value or a name.

    Raises:
        ValueError: If the name is not recognized
    """
    if isinstance(order, TraversalOrder):
        return order

    order_lower = str(order).lower()
    if order_lower not in _ORDER_NAMES:
        raise ValueError(
            f"Unknown traversal order: {order}. "
            f"Choose from: {', '.join(_ORDER_NAMES.keys())}"
        )
    return _ORDER_NAMES[order_lower]


def create_walker(order: Union[TraversalOrder, str, None] = None,
                  config: Optional[WalkConfig] = None) -> TreeWalker:
    """Create a walker instance.

    Args:
        order: Traversal order (enum or name: dfs, depth_first, bfs,
            breadth_first). Overrides ``config.order`` when given.
        config: Walk configuration

    Returns:
        TreeWalker instance

    Raises:
        ValueError: If the order name is not recognized or the config is
            invalid
    """
    config = config or WalkConfig()
    if order is not None:
        config = replace(config, order=parse_order(order))

    errors = config.validate()
    if errors:
        raise ValueError(f"Invalid WalkConfig: {'; '.join(errors)}")
    return _WALKERS[config.order](config)


def traverse(root: PathLike,
             visit: Visitor,
             config: Optional[WalkConfig] = None) -> None:
    """Walk ``root`` with ``config``, calling ``visit(path, base)`` per node.

    Extra context for the visitor is bound into it (closure or
    ``functools.partial``) rather than passed through here.

    Example:
        >>> seen = []
        >>> traverse("project", lambda path, base: seen.append(path))
    """
    create_walker(config=config).walk(root, visit)
