"""Tests for the architecture superset ordering."""

import pytest

from archext.catalog import default_catalog, implies, is_superset


@pytest.fixture(scope="module")
def arch():
    catalog = default_catalog()
    return catalog.parse_arch


class TestImplies:
    def test_same_major_newer_implies_older(self, arch):
        assert implies(arch("armv8.2-a"), arch("armv8.1-a"))
        assert implies(arch("armv8.9-a"), arch("armv8-a"))
        assert not implies(arch("armv8.1-a"), arch("armv8.2-a"))

    def test_not_reflexive(self, arch):
        assert not implies(arch("armv8.2-a"), arch("armv8.2-a"))

    def test_v9_extends_v8_at_offset(self, arch):
        assert implies(arch("armv9-a"), arch("armv8.5-a"))
        assert not implies(arch("armv9-a"), arch("armv8.6-a"))
        assert implies(arch("armv9.1-a"), arch("armv8.6-a"))
        assert implies(arch("armv9.4-a"), arch("armv8.9-a"))

    def test_v8_never_implies_v9(self, arch):
        assert not implies(arch("armv8.9-a"), arch("armv9-a"))

    def test_profiles_are_unrelated(self, arch):
        assert not implies(arch("armv8-r"), arch("armv8-a"))
        assert not implies(arch("armv9.5-a"), arch("armv8-r"))
        assert not implies(arch("armv8-a"), arch("armv8-r"))


class TestIsSuperset:
    def test_equal_is_superset(self, arch):
        assert is_superset(arch("armv8-r"), arch("armv8-r"))
        assert is_superset(arch("armv9-a"), arch("armv9-a"))

    def test_follows_implies(self, arch):
        assert is_superset(arch("armv9.2-a"), arch("armv8.7-a"))
        assert not is_superset(arch("armv9.2-a"), arch("armv8.8-a"))
