"""Configuration system for TreeFS.

This module defines how callers specify a walk (order, visit timing,
symbolic-link policy) and the per-operation options records used by the
remove, rename, copy and move operations.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, List


class TraversalOrder(Enum):
    """Order in which a walk expands the tree."""
    DEPTH_FIRST = "dfs"       # Finish a subtree before its siblings
    BREADTH_FIRST = "bfs"     # Level by level


class VisitTiming(Enum):
    """When the visitor runs relative to a directory's children."""
    PRE_ORDER = "pre"         # Parent before children
    POST_ORDER = "post"       # Children before parent


class LinkPolicy(Enum):
    """How a tree copy treats symbolic links found below the source."""
    PRESERVE = "preserve"         # Recreate the link with the same target string
    DEREFERENCE = "dereference"   # Copy what the link points to


@dataclass(frozen=True)
class WalkConfig:
    """Complete configuration for one walk.

    Instances are immutable; use the presets or ``dataclasses.replace``
    to derive variants.
    """

    order: TraversalOrder = TraversalOrder.DEPTH_FIRST
    timing: VisitTiming = VisitTiming.PRE_ORDER

    # Descend into directory-valued links below the root
    follow_links: bool = False

    # Resolve the root once even when follow_links is off
    resolve_root: bool = True

    # Depth limit, root = 0 (None = unlimited)
    max_depth: Optional[int] = None

    @property
    def is_post_order(self) -> bool:
        return self.timing is VisitTiming.POST_ORDER

    @classmethod
    def pre_order(cls, **kwargs) -> 'WalkConfig':
        """Depth-first, visitor before children (copy, find)."""
        return cls(order=TraversalOrder.DEPTH_FIRST,
                   timing=VisitTiming.PRE_ORDER, **kwargs)

    @classmethod
    def post_order(cls, **kwargs) -> 'WalkConfig':
        """Depth-first, visitor after children (remove, rename).

        This is the only configuration that guarantees every descendant
        is visited strictly before its ancestor.
        """
        return cls(order=TraversalOrder.DEPTH_FIRST,
                   timing=VisitTiming.POST_ORDER, **kwargs)

    @classmethod
    def breadth_first(cls, timing: VisitTiming = VisitTiming.PRE_ORDER,
                      **kwargs) -> 'WalkConfig':
        """Level-by-level walk."""
        return cls(order=TraversalOrder.BREADTH_FIRST, timing=timing, **kwargs)

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not isinstance(self.order, TraversalOrder):
            errors.append(f"order must be a TraversalOrder, got {self.order!r}")

        if not isinstance(self.timing, VisitTiming):
            errors.append(f"timing must be a VisitTiming, got {self.timing!r}")

        if self.max_depth is not None:
            if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int):
                errors.append("max_depth must be an integer")
            elif self.max_depth < 0:
                errors.append("max_depth cannot be negative")

        return errors


@dataclass(frozen=True)
class OperationOptions:
    """Options shared by every mutating operation."""

    dry_run: bool = False     # Traverse and log, never mutate
    verbose: bool = False     # Log each action at INFO instead of DEBUG

    @classmethod
    def build(cls, options: Optional['OperationOptions'] = None,
              **overrides) -> 'OperationOptions':
        """Build an options record once per call.

        Keyword shortcuts that are None are ignored, so callers can pass
        their own optional arguments straight through.

        Raises:
            TypeError: If ``options`` is not an instance of ``cls`` or an
                override names an unknown option
            ValueError: If the resulting record does not validate
        """
        if options is None:
            options = cls()
        elif not isinstance(options, cls):
            raise TypeError(
                f"{cls.__name__} expected, got {type(options).__name__}"
            )

        overrides = {k: v for k, v in overrides.items() if v is not None}
        if overrides:
            options = replace(options, **overrides)

        errors = options.validate()
        if errors:
            raise ValueError(f"Invalid {cls.__name__}: {'; '.join(errors)}")
        return options

    def validate(self) -> List[str]:
        return []


@dataclass(frozen=True)
class CopyOptions(OperationOptions):
    """Options for copy operations."""

    link_policy: LinkPolicy = LinkPolicy.PRESERVE
    block_size: int = 64 * 1024   # Bytes per read/write cycle

    @property
    def dereference(self) -> bool:
        return self.link_policy is LinkPolicy.DEREFERENCE

    def validate(self) -> List[str]:
        errors = []
        if not isinstance(self.link_policy, LinkPolicy):
            errors.append(f"link_policy must be a LinkPolicy, got {self.link_policy!r}")
        if self.block_size <= 0:
            errors.append("block_size must be positive")
        return errors
