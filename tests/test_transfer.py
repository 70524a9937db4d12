"""
Tests for the reconciler: what gets copied, what is left alone, and the
idempotence of an update.
"""
import os
import shutil
import stat
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from bkup.core.delta import DirDelta, NotFound
from bkup.core.entries import FileEntry
from bkup.errors import CopyError, NotAFile
from bkup.operations.compare import diff_dirs
from bkup.operations.scanner import build_tree
from bkup.operations.transfer import TransferStats, apply
from tests.helpers import MS, T0, get_mtime, write_file

ACCURACY = 2.0


class TestApply(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        base = Path(self.tmpdir.name)
        self.src = base / "src"
        self.dst = base / "dst"
        self.src.mkdir()
        self.dst.mkdir()

    def tearDown(self):
        self.tmpdir.cleanup()

    def delta(self):
        return diff_dirs(build_tree(self.src), build_tree(self.dst), ACCURACY)

    def assertConverged(self):
        self.assertTrue(self.delta().is_none(), "destination should be up to date")

    def test_missing_file_is_copied_with_mtime(self):
        """Scenario 1: x is copied and keeps its mtime."""
        write_file(self.src / "x", "payload", mtime_ns=T0)
        stats = apply(self.delta(), self.dst)
        self.assertEqual((self.dst / "x").read_text(encoding="utf-8"), "payload")
        self.assertEqual(get_mtime(self.dst / "x"), T0)
        self.assertEqual(stats.files_copied, 1)
        self.assertEqual(stats.bytes_copied, len("payload"))
        self.assertConverged()

    def test_newer_source_overwrites(self):
        """Scenario 2: a strictly newer source replaces the destination."""
        write_file(self.src / "x", "new", mtime_ns=T0 + 5000 * MS)
        write_file(self.dst / "x", "old", mtime_ns=T0)
        apply(self.delta(), self.dst)
        self.assertEqual((self.dst / "x").read_text(encoding="utf-8"), "new")
        self.assertEqual(get_mtime(self.dst / "x"), T0 + 5000 * MS)
        self.assertConverged()

    def test_within_tolerance_copies_nothing(self):
        """Scenario 3: no delta, no copy."""
        write_file(self.src / "x", "new", mtime_ns=T0 + 500 * MS)
        write_file(self.dst / "x", "old", mtime_ns=T0)
        stats = apply(self.delta(), self.dst)
        self.assertEqual((self.dst / "x").read_text(encoding="utf-8"), "old")
        self.assertEqual(stats, TransferStats())

    def test_newer_destination_is_kept(self):
        write_file(self.src / "x", "src", mtime_ns=T0)
        write_file(self.dst / "x", "dst", mtime_ns=T0 + 5000 * MS)
        stats = apply(self.delta(), self.dst)
        self.assertEqual((self.dst / "x").read_text(encoding="utf-8"), "dst")
        self.assertEqual(stats.skipped_older, 1)
        self.assertEqual(stats.files_copied, 0)

    def test_missing_subtree_is_created(self):
        """Scenario 4: d/sub is created and f copied into it."""
        write_file(self.src / "d" / "sub" / "f", "f", mtime_ns=T0)
        write_file(self.src / "d" / "sub" / "deeper" / "g", "g", mtime_ns=T0)
        (self.src / "d" / "sub" / "empty").mkdir()
        (self.dst / "d").mkdir()
        stats = apply(self.delta(), self.dst)
        self.assertEqual((self.dst / "d" / "sub" / "f").read_text(encoding="utf-8"), "f")
        self.assertEqual((self.dst / "d" / "sub" / "deeper" / "g").read_text(encoding="utf-8"), "g")
        self.assertTrue((self.dst / "d" / "sub" / "empty").is_dir())
        self.assertEqual(stats.dirs_created, 3)
        self.assertEqual(stats.files_copied, 2)
        self.assertConverged()

    @unittest.skipIf(os.name == "nt", "POSIX permission bits")
    def test_permission_bits_preserved(self):
        f = write_file(self.src / "script.sh", "#!/bin/sh\n", mtime_ns=T0)
        os.chmod(f, 0o750)
        apply(self.delta(), self.dst)
        self.assertEqual(stat.S_IMODE((self.dst / "script.sh").stat().st_mode), 0o750)

    def test_idempotence(self):
        """Applying a delta and diffing again yields nothing to do."""
        write_file(self.src / "a", mtime_ns=T0)
        write_file(self.src / "b" / "c", mtime_ns=T0 + 3000 * MS)
        write_file(self.dst / "b" / "c", mtime_ns=T0)
        write_file(self.src / "b" / "d" / "e", mtime_ns=T0)
        write_file(self.dst / "only-in-dest", mtime_ns=T0)
        apply(self.delta(), self.dst)
        self.assertConverged()
        self.assertTrue((self.dst / "only-in-dest").exists(), "nothing is ever deleted")
        self.assertEqual(apply(self.delta(), self.dst), TransferStats())

    def test_dry_run_changes_nothing(self):
        write_file(self.src / "x", mtime_ns=T0)
        write_file(self.src / "d" / "y", mtime_ns=T0)
        stats = apply(self.delta(), self.dst, dry_run=True)
        self.assertEqual(list(self.dst.iterdir()), [])
        self.assertEqual(stats.files_copied, 2)
        self.assertEqual(stats.dirs_created, 1)
        self.assertEqual(stats.bytes_copied, 0)

    def test_refuses_to_write_outside_dest_root(self):
        f = write_file(self.src / "x")
        delta = NotFound(FileEntry(f), self.src.parent / "elsewhere" / "x")
        with self.assertRaises(CopyError):
            apply(delta, self.dst)
        self.assertFalse((self.src.parent / "elsewhere").exists())

    @unittest.skipUnless(hasattr(os, "symlink"), "symlinks not supported")
    def test_refuses_to_write_through_file_symlink(self):
        """A dest link is not scanned, but the copy must not follow it."""
        outside = write_file(self.src.parent / "outside" / "victim.txt", "precious")
        write_file(self.src / "x", "from source", mtime_ns=T0)
        os.symlink(outside, self.dst / "x")
        with self.assertRaises(CopyError):
            apply(self.delta(), self.dst)
        self.assertEqual(outside.read_text(encoding="utf-8"), "precious")

    @unittest.skipUnless(hasattr(os, "symlink"), "symlinks not supported")
    def test_refuses_to_write_through_dir_symlink(self):
        outside = self.src.parent / "outside"
        outside.mkdir()
        write_file(self.src / "x", mtime_ns=T0)
        write_file(self.src / "d" / "f", mtime_ns=T0)
        os.symlink(outside, self.dst / "x")
        os.symlink(outside, self.dst / "d")
        for dry_run in (True, False):
            with self.assertRaises(CopyError):
                apply(self.delta(), self.dst, dry_run=dry_run)
        self.assertEqual(list(outside.iterdir()), [])

    def test_dry_run_counts_match_real_run(self):
        write_file(self.src / "d" / "f", mtime_ns=T0)
        delta = self.delta()
        (self.dst / "d").mkdir()
        preview = apply(delta, self.dst, dry_run=True)
        stats = apply(delta, self.dst)
        self.assertEqual(preview.dirs_created, 0)
        self.assertEqual(preview.files_copied, stats.files_copied)
        self.assertEqual(preview.dirs_created, stats.dirs_created)

    def test_source_vanished_before_copy(self):
        f = write_file(self.src / "x")
        delta = self.delta()
        f.unlink()
        with self.assertRaises(NotAFile):
            apply(delta, self.dst)

    def test_copy_failure_aborts_but_keeps_earlier_copies(self):
        """No rollback: siblings already copied stay in place."""
        write_file(self.src / "a", "a", mtime_ns=T0)
        write_file(self.src / "b", "b", mtime_ns=T0)
        real_copy2 = shutil.copy2

        def failing_copy2(src, dest, **kwargs):
            if Path(src).name == "b":
                raise PermissionError("denied")
            return real_copy2(src, dest, **kwargs)

        with mock.patch("bkup.utils.file_utils.shutil.copy2", side_effect=failing_copy2):
            with self.assertRaises(CopyError):
                apply(self.delta(), self.dst)
        self.assertTrue((self.dst / "a").exists())
        self.assertFalse((self.dst / "b").exists())

    def test_existing_directory_is_tolerated(self):
        """Creating a destination directory that already exists is not an error."""
        write_file(self.src / "d" / "f", mtime_ns=T0)
        delta = self.delta()
        (self.dst / "d").mkdir()
        stats = apply(delta, self.dst)
        self.assertEqual(stats.dirs_created, 0)
        self.assertTrue((self.dst / "d" / "f").exists())

    def test_empty_delta_is_a_noop(self):
        s = build_tree(self.src)
        self.assertEqual(apply(DirDelta(s, s), self.dst), TransferStats())


if __name__ == "__main__":
    unittest.main()
