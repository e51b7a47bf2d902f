"""Tests for ConvertUtils.bytes_to_human."""
import pytest
from dirscout.utils.convert_utils import ConvertUtils


class TestBytesToHuman:

    @pytest.mark.parametrize("size, expected", [
        (0, "0 B"),
        (-5, "0 B"),
        (1, "1.0 B"),
        (500, "500.0 B"),
        (1023, "1023.0 B"),
        (1024, "1.0 KB"),
        (1536, "1.5 KB"),
        (1048576, "1.0 MB"),
        (1073741824, "1.0 GB"),
        (1024 ** 4, "1.0 TB"),
        (1024 ** 5, "1024.0 TB"),
    ])
    def test_conversion(self, size, expected):
        assert ConvertUtils.bytes_to_human(size) == expected
