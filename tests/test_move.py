"""Tests for move(), including the cross-device fallback."""

import errno
import os
import shutil
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from treefs import NotFoundError, ShortWriteError, move
from treefs.testing import Link, make_tree, snapshot_tree

D1_TREE = {
    'd1': {
        'f11': 'f11',
        'd12': {
            'f121': 'f121',
            'f122': 'f122',
        },
    },
}


def cross_device(*args, **kwargs):
    raise OSError(errno.EXDEV, 'Invalid cross-device link')


class MoveTestCase(unittest.TestCase):

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.test_path = Path(self.test_dir)
        make_tree(self.test_path, D1_TREE)
        self.root = os.path.join(self.test_dir, 'd1')
        self.original = snapshot_tree(self.root)

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)


class TestMove(MoveTestCase):
    """Moves within one filesystem are a plain rename."""

    def test_directory(self):
        dst = os.path.join(self.test_dir, 'moved')
        self.assertEqual(move(self.root, dst), dst)
        self.assertFalse(os.path.exists(self.root))
        self.assertEqual(snapshot_tree(dst), self.original)

    def test_file(self):
        src = os.path.join(self.root, 'f11')
        dst = os.path.join(self.test_dir, 'f11.moved')
        move(src, dst)
        self.assertFalse(os.path.exists(src))
        self.assertEqual(Path(dst).read_text(), 'f11')

    def test_into_existing_directory(self):
        dest = self.test_path / 'dest'
        dest.mkdir()
        target = move(self.root, dest)
        self.assertEqual(target, str(dest / 'd1'))
        self.assertEqual(snapshot_tree(target), self.original)

    def test_trailing_separator(self):
        dst = os.path.join(self.test_dir, 'moved')
        move(self.root + os.sep, dst)
        self.assertTrue(os.path.isdir(dst))

    def test_missing_source(self):
        with self.assertRaises(NotFoundError):
            move(self.test_path / 'missing', self.test_path / 'x')

    def test_dry_run(self):
        before = snapshot_tree(self.test_dir)
        with self.assertLogs('treefs.operations.mover', level='DEBUG') as logs:
            target = move(self.root, self.test_path / 'moved', dry_run=True)
        self.assertEqual(target, str(self.test_path / 'moved'))
        self.assertEqual(snapshot_tree(self.test_dir), before)
        self.assertTrue(logs.records[0].getMessage().startswith('[dry-run] moving'))

    def test_other_rename_errors_propagate(self):
        error = OSError(errno.EACCES, 'Permission denied')
        with mock.patch('treefs.operations.mover.os.rename', side_effect=error):
            with self.assertRaises(OSError) as ctx:
                move(self.root, self.test_path / 'moved')
        self.assertEqual(ctx.exception.errno, errno.EACCES)
        self.assertEqual(snapshot_tree(self.root), self.original)
        self.assertFalse((self.test_path / 'moved').exists())


class TestCrossDeviceMove(MoveTestCase):
    """EXDEV from rename falls back to copy and remove."""

    def test_directory(self):
        dst = os.path.join(self.test_dir, 'moved')
        with mock.patch('treefs.operations.mover.os.rename', side_effect=cross_device):
            with self.assertLogs('treefs.operations.mover', level='INFO') as logs:
                self.assertEqual(move(self.root, dst), dst)

        self.assertFalse(os.path.exists(self.root))
        self.assertEqual(snapshot_tree(dst), self.original)
        self.assertIn('different filesystems', logs.output[-1])

    def test_file(self):
        src = os.path.join(self.root, 'f11')
        dst = os.path.join(self.test_dir, 'f11.moved')
        with mock.patch('treefs.operations.mover.os.rename', side_effect=cross_device):
            move(src, dst)
        self.assertFalse(os.path.exists(src))
        self.assertEqual(Path(dst).read_text(), 'f11')

    def test_into_existing_directory(self):
        dest = self.test_path / 'dest'
        dest.mkdir()
        with mock.patch('treefs.operations.mover.os.rename', side_effect=cross_device):
            target = move(self.root, dest)
        self.assertEqual(snapshot_tree(target), self.original)
        self.assertFalse(os.path.exists(self.root))

    def test_failed_copy_leaves_source_and_cleans_target(self):
        dst = self.test_path / 'moved'
        failure = ShortWriteError("short write", str(dst), requested=4, written=1)
        with mock.patch('treefs.operations.mover.os.rename', side_effect=cross_device), \
                mock.patch('treefs.operations.copier.copy_bytes', side_effect=failure):
            with self.assertLogs('treefs.operations.mover', level='WARNING'):
                with self.assertRaises(ShortWriteError):
                    move(self.root, dst)

        self.assertEqual(snapshot_tree(self.root), self.original)
        self.assertFalse(os.path.lexists(dst))

    def test_failed_merge_keeps_existing_entries(self):
        """Only what the failed copy created is removed from an existing target."""
        dest = self.test_path / 'dest'
        make_tree(dest, {'d1': {'keep': 'mine'}})
        before = snapshot_tree(dest)
        failure = ShortWriteError("short write", str(dest), requested=4, written=1)
        with mock.patch('treefs.operations.mover.os.rename', side_effect=cross_device), \
                mock.patch('treefs.operations.copier.copy_bytes', side_effect=failure):
            with self.assertLogs('treefs.operations.mover', level='WARNING'):
                with self.assertRaises(ShortWriteError):
                    move(self.root, dest)

        self.assertEqual(snapshot_tree(dest), before)
        self.assertEqual(snapshot_tree(self.root), self.original)

    @unittest.skipIf(os.name == 'nt', "Symlink testing requires Unix-like OS")
    def test_links_moved_as_links(self):
        make_tree(self.root, {'link': Link('f11'), 'up': Link('..')})
        original = snapshot_tree(self.root)
        dst = os.path.join(self.test_dir, 'moved')
        with mock.patch('treefs.operations.mover.os.rename', side_effect=cross_device):
            move(self.root, dst)
        self.assertEqual(snapshot_tree(dst), original)

    @unittest.skipIf(os.name == 'nt', "Symlink testing requires Unix-like OS")
    def test_single_link(self):
        os.symlink('d1', self.test_path / 'link')
        with mock.patch('treefs.operations.mover.os.rename', side_effect=cross_device):
            move(self.test_path / 'link', self.test_path / 'moved')
        self.assertEqual(os.readlink(self.test_path / 'moved'), 'd1')
        self.assertFalse(os.path.lexists(self.test_path / 'link'))
        self.assertEqual(snapshot_tree(self.root), self.original)


if __name__ == '__main__':
    unittest.main()
