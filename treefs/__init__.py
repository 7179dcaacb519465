"""TreeFS - recursive filesystem operations on a configurable tree walker.

Everything is built on one walk engine: pick an order and a visit
timing, plug in a visitor.

━━━━━━━━━━━━━━━━━━━━━━━━━━
Operations:
    from treefs import remove, rename, find, copy, move, mk_dirs

Custom walks:
    from treefs import traverse, WalkConfig, VisitResult
━━━━━━━━━━━━━━━━━━━━━━━━━━

Only depth-first post-order walks guarantee that children are visited
before their parent directory.
"""

__version__ = "0.1.0"

from .config import (
    TraversalOrder,
    VisitTiming,
    LinkPolicy,
    WalkConfig,
    OperationOptions,
    CopyOptions,
)
from .errors import (
    TreeFSError,
    NotFoundError,
    NotADirError,
    NotAFileError,
    NotEmptyError,
    SelfCopyError,
    LinkCycleError,
    ShortWriteError,
    DestinationRequiredError,
)
from .core import (
    NodeKind,
    node_kind,
    is_symlink,
    resolve_link,
    VisitResult,
    TreeWalker,
    DepthFirstWalker,
    BreadthFirstWalker,
    create_walker,
    traverse,
)
from .operations import (
    remove,
    rename,
    find,
    copy,
    copy_file,
    copy_tree,
    move,
    mk_dirs,
)

__all__ = [
    "__version__",
    # Config
    "TraversalOrder",
    "VisitTiming",
    "LinkPolicy",
    "WalkConfig",
    "OperationOptions",
    "CopyOptions",
    # Errors
    "TreeFSError",
    "NotFoundError",
    "NotADirError",
    "NotAFileError",
    "NotEmptyError",
    "SelfCopyError",
    "LinkCycleError",
    "ShortWriteError",
    "DestinationRequiredError",
    # Core
    "NodeKind",
    "node_kind",
    "is_symlink",
    "resolve_link",
    "VisitResult",
    "TreeWalker",
    "DepthFirstWalker",
    "BreadthFirstWalker",
    "create_walker",
    "traverse",
    # Operations
    "remove",
    "rename",
    "find",
    "copy",
    "copy_file",
    "copy_tree",
    "move",
    "mk_dirs",
]
