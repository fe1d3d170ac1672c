import itertools

import pytest

from codebit_core import VersionOrder, compare_versions, version_key, version_order

SAMPLES = [
    "",
    "0",
    "1",
    "01",
    "1.0",
    "1.0.1",
    "1.3.5",
    "1.8.5",
    "1.30.5",
    "2.0.0",
    "10.1",
    "10.1.0",
    "10.01.0005",
    "1234",
    "000000020",
    "Of5Ten",
    "Of10Able",
    "alpha24",
    "Lima10",
    "1.0-RC1",
    "1.0-rc2",
    "1.0a",
    "1.0B",
]


@pytest.mark.parametrize(
    "a, b, expected",
    [
        ("1234", "1234", 0),
        ("1234", "0001234", 0),
        ("1234", "000000020", 1),
        ("0005", "10", -1),
        ("10", "8", 1),
        ("Of5Ten", "Of10Able", -1),
        ("1.3.5", "2.0.0", -1),
        ("1.30.5", "2.0.0", -1),
        ("1.30.5", "1.8.5", 1),
        # every segment is numerically equal: 10 == 10, 1 == 01, 5 == 0005
        ("10.1.5", "10.01.0005", 0),
        ("alpha24", "Lima10", -1),
    ],
)
def test_reference_cases(a, b, expected):
    assert compare_versions(a, b) == expected


def test_numbers_have_unbounded_precision():
    big = "1" + "0" * 40
    assert compare_versions(big, "9" * 40) == 1
    assert compare_versions("0" * 50 + "7", "7") == 0


def test_letters_compare_case_insensitively():
    assert compare_versions("1.0-RC1", "1.0-rc1") == 0
    assert compare_versions("1.0a", "1.0B") == -1
    assert compare_versions("BETA", "alpha") == 1


def test_exhausted_side_sorts_first():
    assert compare_versions("1.0", "1.0.1") == -1
    assert compare_versions("10.1.0", "10.1") == 1
    assert compare_versions("", "1") == -1
    assert compare_versions("", "") == 0


def test_only_ascii_digits_are_numeric():
    # Arabic-Indic digits compare as ordinary characters
    assert compare_versions("١٠", "٩") == -1
    assert compare_versions("10", "9") == 1


def test_result_is_always_minus_one_zero_or_one():
    for a, b in itertools.product(SAMPLES, repeat=2):
        assert compare_versions(a, b) in (-1, 0, 1)


def test_antisymmetric():
    for a, b in itertools.product(SAMPLES, repeat=2):
        assert compare_versions(a, b) == -compare_versions(b, a), (a, b)


def test_transitive():
    for a, b, c in itertools.product(SAMPLES, repeat=3):
        if compare_versions(a, b) <= 0 and compare_versions(b, c) <= 0:
            assert compare_versions(a, c) <= 0, (a, b, c)


def test_version_key_sorts_naturally():
    versions = ["1.10", "1.9", "1.2.3", "1.02", "0.9-beta"]
    assert sorted(versions, key=version_key) == ["0.9-beta", "1.02", "1.2.3", "1.9", "1.10"]


def test_version_order_is_from_the_master_copy_point_of_view():
    assert version_order("1.5", "1.4") is VersionOrder.REMOTE_NEWER
    assert version_order("2.0", "2.0") is VersionOrder.EQUAL
    assert version_order("1.0", "3.0") is VersionOrder.LOCAL_NEWER
