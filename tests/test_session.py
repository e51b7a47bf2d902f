"""
Tests for BrowsingSession: background scans, navigation, filtered views and
guarded deletion followed by a rescan.
"""
import os
import threading
import pytest
from unittest import mock
from dirscout.commands import DeleteCommand
from dirscout.core.models import DeletionVerdict, Entry
from dirscout.core.safety import DeletionSafetyGuard
from dirscout.session import BrowsingSession


def allowing_command():
    guard = mock.Mock(spec=DeletionSafetyGuard)
    guard.evaluate.return_value = DeletionVerdict.ALLOWED
    guard.describe.side_effect = DeletionSafetyGuard.describe
    return DeleteCommand(guard=guard)


class BlockingWalker:
    """Holds every scan until released; reports whether it was asked to stop."""

    def __init__(self):
        self.started = threading.Event()
        self.release = threading.Event()
        self.stops = []

    def scan(self, path, recursive=False, include_parent_marker=False,
             progress_callback=None, stopped_flag=None):
        self.started.set()
        self.release.wait(timeout=5)
        self.stops.append(bool(stopped_flag and stopped_flag()))
        return [Entry(path=f"{path}/result.txt", size=1)]


def names(entries):
    return [e.display_name for e in entries]


@pytest.fixture
def session(test_files, temp_dir):
    with BrowsingSession(str(temp_dir), delete_command=allowing_command()) as s:
        s.scan()
        yield s


class TestScanning:

    def test_scan_populates_entries(self, session):
        assert names(session.entries) == [
            "..", "subdir/", "dup_a.txt", "dup_b.txt", "empty.txt", "unique_a.txt", "unique_b.txt",
        ]
        assert not session.is_filtered

    def test_progress_callback_forwarded(self, session):
        calls = []
        session.scan(calls.append)
        assert calls == [6]

    def test_recursive_toggle(self, session):
        session.set_recursive(True)
        session.scan()
        assert "dup_in_subdir.txt" in names(session.entries)
        assert ".." not in names(session.entries)

    def test_async_scan_resolves_to_entries(self, session):
        future = session.scan_async()
        entries = future.result(timeout=5)
        assert entries is session.entries

    def test_discarded_scan_not_applied(self, temp_dir):
        walker = BlockingWalker()
        with BrowsingSession(str(temp_dir), walker=walker) as s:
            future = s.scan_async()
            walker.started.wait(timeout=5)
            s.discard_pending()
            walker.release.set()

            result = future.result(timeout=5)
            assert len(result) == 1
            assert s.entries == []

    def test_later_scan_wins(self, temp_dir):
        walker = BlockingWalker()
        walker.release.set()
        with BrowsingSession(str(temp_dir), walker=walker) as s:
            s.scan_async()
            s.change_directory(str(temp_dir / "other"))
            assert s.entries[0].path == f"{temp_dir / 'other'}/result.txt"

    def test_stop_reaches_walker(self, temp_dir):
        walker = BlockingWalker()
        with BrowsingSession(str(temp_dir), walker=walker) as s:
            future = s.scan_async()
            walker.started.wait(timeout=5)
            s.stop()
            walker.release.set()
            future.result(timeout=5)
            assert walker.stops == [True]

    def test_stop_leaves_queued_scan_alone(self, temp_dir):
        walker = BlockingWalker()
        with BrowsingSession(str(temp_dir), walker=walker) as s:
            first = s.scan_async()
            second = s.scan_async()
            walker.started.wait(timeout=5)
            s.stop()
            walker.release.set()
            first.result(timeout=5)
            second.result(timeout=5)

            assert walker.stops == [True, False]
            assert s.entries is second.result()

    def test_stop_without_running_scan_is_harmless(self, temp_dir):
        walker = BlockingWalker()
        walker.release.set()
        with BrowsingSession(str(temp_dir), walker=walker) as s:
            s.stop()
            s.scan()
            assert walker.stops == [False]

    def test_wait_without_pending_scan(self, temp_dir):
        with BrowsingSession(str(temp_dir)) as s:
            s.wait()
            assert s.entries == []


class TestNavigation:

    def test_enter_directory(self, session, test_files):
        session.enter(1)
        assert session.path == str(test_files["subdir"])
        assert names(session.entries) == ["..", "nested_empty/", "dup_in_subdir.txt"]

    def test_enter_parent_marker(self, session, temp_dir):
        session.enter(1)
        session.enter(0)
        assert session.path == str(temp_dir)

    def test_enter_file_rejected(self, session):
        with pytest.raises(ValueError):
            session.enter(2)

    def test_bad_index_rejected(self, session):
        with pytest.raises(IndexError):
            session.entry(99)
        with pytest.raises(IndexError):
            session.entry(-1)


class TestFilteredViews:

    def test_show_duplicates_and_restore(self, session):
        session.set_recursive(True)
        session.scan()
        all_entries = list(session.entries)

        groups = session.show_duplicates()

        assert len(groups) == 1
        assert sorted(names(session.entries)) == ["dup_a.txt", "dup_b.txt", "dup_in_subdir.txt"]
        assert all(e.is_duplicate for e in session.entries)
        assert session.is_filtered
        assert session.total_wasted_space() == 2 * len(b"hello world")

        session.restore()
        assert session.entries == all_entries
        assert not session.is_filtered
        assert session.total_wasted_space() == 0

    def test_switching_views_uses_unfiltered_listing(self, session):
        session.show_duplicates()
        found = session.show_zero_byte_files()

        assert names(found) == ["empty.txt"]
        assert names(session.entries) == ["empty.txt"]
        # duplicate marks from the previous view are cleared
        assert not any(e.is_duplicate for e in session.backup)

    def test_rescan_drops_filter(self, session):
        session.show_zero_byte_files()
        session.scan()
        assert not session.is_filtered
        assert len(session.entries) == 7


class TestDeletion:

    def test_delete_rescans(self, session, test_files):
        index = names(session.entries).index("unique_a.txt")
        result = session.delete(index, confirm=lambda verdict, message: True)

        assert result.success
        assert not test_files["unique_a"].exists()
        assert "unique_a.txt" not in names(session.entries)

    def test_declined_delete_keeps_listing(self, session, test_files):
        index = names(session.entries).index("unique_a.txt")
        result = session.delete(index, confirm=lambda verdict, message: False)

        assert not result.success
        assert test_files["unique_a"].exists()
        assert "unique_a.txt" in names(session.entries)

    def test_recursive_delete_of_directory(self, session, test_files):
        result = session.delete(1, recursive=True, confirm=lambda verdict, message: True)
        assert result.success
        assert not test_files["subdir"].exists()
        assert "subdir/" not in names(session.entries)

    def test_delete_symlink_to_directory(self, temp_dir):
        target = temp_dir / "target"
        target.mkdir()
        (target / "keep.txt").write_bytes(b"x")
        link = temp_dir / "link"
        link.symlink_to(target, target_is_directory=True)

        with BrowsingSession(str(temp_dir), delete_command=allowing_command()) as s:
            s.scan()
            index = names(s.entries).index("link/")
            assert s.entries[index].is_directory

            result = s.delete(index, confirm=lambda verdict, message: True)

            assert result.success
            assert not os.path.lexists(link)
            assert (target / "keep.txt").exists()
            assert "link/" not in names(s.entries)
