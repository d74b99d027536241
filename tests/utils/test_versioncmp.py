import pytest

from dockprov.errors import VersionParseError
from dockprov.utils.versioncmp import compare, greater_than_or_equal_to, less_than


@pytest.mark.parametrize(
    "a, b, expected",
    [
        ("1.12.0", "1.12.0", 0),
        ("1.12", "1.12.0", 0),
        ("1.11.2", "1.12.0", -1),
        ("1.12.1", "1.12.0", 1),
        ("1.12.0-rc1", "1.12.0", -1),
        ("1.12.0-rc2", "1.12.0-rc1", 1),
        ("17.03.0-ce", "1.12.0", 1),
        ("17.03.0-ce", "17.03.0", 0),
        ("v20.10.7", "20.10.7", 0),
        ("1.9.0", "1.10.0", -1),
    ],
)
def test_compare(a, b, expected):
    assert compare(a, b) == expected


def test_helpers():
    assert less_than("1.11.0", "1.12.0")
    assert greater_than_or_equal_to("1.12.0", "1.12.0")
    assert not greater_than_or_equal_to("1.11.9", "1.12.0")


@pytest.mark.parametrize("bad", ["", "latest", "abc1.2"])
def test_unparseable(bad):
    with pytest.raises(VersionParseError):
        compare(bad, "1.0.0")
