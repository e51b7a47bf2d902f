"""
Tests for the function-level API used by UI collaborators.
"""
from unittest import mock
from dirscout import api
from dirscout.core.models import DeletionVerdict, Entry
from dirscout.core.safety import DeletionSafetyGuard


class TestApi:

    def test_scan_find_duplicates_and_wasted_space(self, test_files, temp_dir):
        entries = api.scan(str(temp_dir), recursive=True)
        groups = api.find_duplicates(entries, confirm_content=True)
        assert len(groups) == 1
        assert api.total_wasted_space(groups) == 22

    def test_zero_byte_files(self, test_files, temp_dir):
        found = api.find_zero_byte_files(api.scan(str(temp_dir)))
        assert [e.path for e in found] == [str(test_files["empty"])]

    def test_sort_in_place(self):
        entries = [Entry(path="/x/b", size=1), Entry(path="/x/a", is_directory=True)]
        api.sort(entries)
        assert [e.display_name for e in entries] == ["a/", "b"]

    def test_fingerprint(self, test_files):
        assert api.compute_fingerprint(str(test_files["dup_a"])) == \
            api.compute_fingerprint(str(test_files["sub_dup"]))

    def test_evaluate_and_describe(self):
        verdict = api.evaluate_deletion("/")
        assert verdict is DeletionVerdict.BLOCKED_SYSTEM_PATH
        assert api.describe_verdict(verdict, "/") == "Cannot delete system directory: /"

    def test_unchecked_deletes(self, test_files):
        assert api.delete_file(Entry.from_path(str(test_files["dup_a"]))).success
        result = api.delete_directory(Entry.from_path(str(test_files["subdir"])), recursive=True)
        assert result.items_deleted == 2

    def test_checked_delete(self, test_files):
        with mock.patch.object(DeletionSafetyGuard, "evaluate", return_value=DeletionVerdict.ALLOWED):
            result = api.checked_delete(Entry.from_path(str(test_files["unique_a"])),
                                        confirm=lambda verdict, message: True)
        assert result.success
        assert not test_files["unique_a"].exists()
