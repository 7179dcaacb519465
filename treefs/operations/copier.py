"""File and tree copy.

``copy_tree`` is a depth-first pre-order walk: each directory is created
in the destination before any of its children are visited, so files
always have somewhere to land.
"""

import functools
import logging
import os
from typing import Optional

from .._common import PathLike, has_trailing_separator, strip_trailing_separator
from ..config import CopyOptions, LinkPolicy, WalkConfig
from ..core.node import NodeKind, node_kind
from ..core.resolver import resolve_link
from ..core.walker import traverse
from ..errors import (
    DestinationRequiredError,
    NotADirError,
    NotAFileError,
    NotFoundError,
    SelfCopyError,
    ShortWriteError,
)
from ._actions import log_action

logger = logging.getLogger(__name__)


def copy_bytes(source: str, target: str, block_size: int) -> int:
    """Copy ``source`` to ``target`` in ``block_size`` read/write cycles.

    The target is written unbuffered so that every short write is seen.

    Returns:
        Number of bytes copied

    Raises:
        ShortWriteError: If a write accepts fewer bytes than it was given
    """
    total = 0
    with open(source, 'rb') as fsrc, open(target, 'wb', buffering=0) as fdst:
        while True:
            block = fsrc.read(block_size)
            if not block:
                break
            written = fdst.write(block)
            if written is None or written != len(block):
                raise ShortWriteError(
                    f"Short write to {target!r}: {written or 0} of {len(block)} bytes",
                    target,
                    requested=len(block),
                    written=written or 0,
                )
            total += written
    return total


def _build_options(options: Optional[CopyOptions],
                   dereference: Optional[bool],
                   dry_run: Optional[bool],
                   verbose: Optional[bool]) -> CopyOptions:
    link_policy = None
    if dereference is not None:
        link_policy = LinkPolicy.DEREFERENCE if dereference else LinkPolicy.PRESERVE
    return CopyOptions.build(options, link_policy=link_policy,
                             dry_run=dry_run, verbose=verbose)


def copy_file(src: PathLike,
              dst: PathLike,
              options: Optional[CopyOptions] = None,
              *,
              dry_run: Optional[bool] = None,
              verbose: Optional[bool] = None) -> str:
    """Copy a single file byte for byte.

    The source is always dereferenced: copying a link copies what it
    points to. If ``dst`` is an existing directory the copy lands in
    ``dst/basename(src)``; an existing file there is overwritten.

    Returns:
        The path written to

    Raises:
        NotFoundError: If ``src`` (or a link's target) does not exist
        NotAFileError: If ``src`` is not a regular file
        SelfCopyError: If source and destination are the same file
        ShortWriteError: If the destination accepts a short write
    """
    options = _build_options(options, None, dry_run, verbose)
    src = os.fspath(src)
    source = resolve_link(src)

    if node_kind(source) is not NodeKind.FILE:
        raise NotAFileError(f"Not a regular file: {src!r}", src)

    target = os.fspath(dst)
    if os.path.isdir(target):
        target = os.path.join(target, os.path.basename(strip_trailing_separator(src)))

    if os.path.exists(target) and os.path.samefile(source, target):
        raise SelfCopyError(f"{src!r} and {target!r} are the same file", target)

    log_action(logger, options, "copying %s -> %s", src, target)
    if not options.dry_run:
        copy_bytes(source, target, options.block_size)
    return target


def _copy_node(path: str, base: str,
               dest_root: str, contents_only: bool,
               options: CopyOptions) -> None:
    rel = os.path.relpath(path, base)
    is_root = rel == os.curdir
    if is_root and contents_only:
        return None
    target = dest_root if is_root else os.path.join(dest_root, rel)

    # The root is entered even when it is a link
    kind = node_kind(path, follow_symlinks=is_root)
    source = path

    if kind is NodeKind.SYMLINK:
        if not options.dereference:
            link = os.readlink(path)
            log_action(logger, options, "linking %s -> %s", target, link)
            if not options.dry_run:
                os.symlink(link, target)
            return None
        source = resolve_link(path)
        kind = node_kind(source)

    if kind is NodeKind.DIR:
        log_action(logger, options, "creating directory %s", target)
        if not options.dry_run and not os.path.isdir(target):
            os.mkdir(target)
    elif kind is NodeKind.FILE:
        log_action(logger, options, "copying %s -> %s", path, target)
        if not options.dry_run:
            copy_bytes(source, target, options.block_size)
    else:
        raise NotAFileError(f"Cannot copy {kind.value} {path!r}", path)
    return None


def _check_not_inside(src_root: str, dest_root: str) -> None:
    src_real = os.path.realpath(src_root)
    dest_real = os.path.realpath(dest_root)
    if os.path.commonpath([src_real, dest_real]) == src_real:
        raise SelfCopyError(
            f"Cannot copy {src_root!r} into itself ({dest_root!r})", dest_root
        )


def copy_tree(src: PathLike,
              dst: PathLike,
              options: Optional[CopyOptions] = None,
              *,
              dereference: Optional[bool] = None,
              dry_run: Optional[bool] = None,
              verbose: Optional[bool] = None) -> str:
    """Recursively copy the directory ``src`` to ``dst``.

    Destination layout:

    - ``src`` with a trailing separator ("contents only"): the children
      of ``src`` are mirrored straight into ``dst``, which must exist.
    - ``dst`` is an existing directory: ``src`` is recreated as
      ``dst/basename(src)``.
    - otherwise ``dst`` itself becomes the copy of ``src``.

    Links below ``src`` are recreated with the same literal target
    (``LinkPolicy.PRESERVE``) or replaced by copies of what they point to
    (``LinkPolicy.DEREFERENCE`` / ``dereference=True``), in which case
    linked directories are descended into as well.

    Returns:
        The directory the tree was copied to

    Raises:
        NotFoundError: If ``src`` does not exist
        NotADirError: If ``src`` is not a directory
        DestinationRequiredError: If a contents-only copy targets a
            missing ``dst``
        SelfCopyError: If ``dst`` lies inside ``src``
        NotAFileError: If a special file (fifo, device, socket) is met
    """
    options = _build_options(options, dereference, dry_run, verbose)
    contents_only = has_trailing_separator(src)
    src_root = strip_trailing_separator(src)
    dst = os.fspath(dst)

    kind = node_kind(src_root)
    if kind is NodeKind.NONE:
        raise NotFoundError(f"No such file or directory: {src_root!r}", src_root)
    if kind is not NodeKind.DIR:
        raise NotADirError(f"Not a directory: {src_root!r}", src_root)

    if contents_only:
        if not os.path.isdir(dst):
            raise DestinationRequiredError(
                f"Destination {dst!r} must exist to receive the contents of {src_root!r}",
                dst,
            )
        dest_root = dst
    elif os.path.isdir(dst):
        dest_root = os.path.join(dst, os.path.basename(src_root))
    else:
        dest_root = dst

    _check_not_inside(src_root, dest_root)

    config = WalkConfig.pre_order(follow_links=options.dereference)
    visit = functools.partial(_copy_node, dest_root=dest_root,
                              contents_only=contents_only, options=options)
    traverse(src_root, visit, config)
    return dest_root


def copy(src: PathLike,
         dst: PathLike,
         options: Optional[CopyOptions] = None,
         *,
         dereference: Optional[bool] = None,
         dry_run: Optional[bool] = None,
         verbose: Optional[bool] = None) -> str:
    """Copy a file or a directory tree.

    Directories (including links to directories) go through
    ``copy_tree``; anything else through ``copy_file``.

    Returns:
        The path of the copy
    """
    options = _build_options(options, dereference, dry_run, verbose)
    if node_kind(strip_trailing_separator(src)) is NodeKind.DIR:
        return copy_tree(src, dst, options)
    return copy_file(src, dst, options)
