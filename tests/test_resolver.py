"""Tests for FeatureStateResolver closure, defaults, modifiers and output."""

import dataclasses

import pytest

from archext.catalog import default_catalog
from archext.config import ArchextConfig, ResolverConfig, configure
from archext.resolver import (
    FeatureStateResolver,
    UnknownModifierError,
    UnknownTargetError,
    resolve_features,
)


def _id(catalog, name: str) -> int:
    return catalog.extensions.find(name).id


@pytest.fixture
def resolver(small_catalog):
    return FeatureStateResolver(small_catalog.extensions, negation_prefix="no")


def _enabled(resolver) -> set[str]:
    return set(resolver.enabled_names())


def _touched(resolver) -> set[str]:
    return set(resolver.extensions.names(resolver.touched))


def _assert_closed(resolver):
    ext = resolver.extensions
    for ext_id in ext.ids():
        if resolver.is_enabled(ext_id):
            for prerequisite in ext.prerequisites(ext_id):
                assert resolver.is_enabled(prerequisite), (
                    f"{ext.get(ext_id).name} enabled without {ext.get(prerequisite).name}"
                )


# =============================================================================
# Closure
# =============================================================================


class TestEnableDisable:
    def test_enable_pulls_in_prerequisites(self, resolver, small_catalog):
        resolver.enable(_id(small_catalog, "d"))
        assert _enabled(resolver) == {"a", "c", "d"}
        assert not resolver.is_enabled("b")

    def test_disable_drops_dependents(self, resolver, small_catalog):
        for name in ("a", "b", "c", "d"):
            resolver.enable(_id(small_catalog, name))
        resolver.disable(_id(small_catalog, "a"))
        assert _enabled(resolver) == set()
        assert _touched(resolver) == {"a", "b", "c", "d"}

    def test_disable_keeps_unrelated(self, resolver, small_catalog):
        resolver.enable(_id(small_catalog, "d"))
        resolver.enable(_id(small_catalog, "b"))
        resolver.disable(_id(small_catalog, "c"))
        assert _enabled(resolver) == {"a", "b"}

    def test_isolated_extension_only_changes_itself(self, resolver, small_catalog):
        resolver.enable(_id(small_catalog, "z"))
        assert _enabled(resolver) == {"z"}
        assert _touched(resolver) == {"z"}

    def test_enable_is_idempotent(self, resolver, small_catalog):
        resolver.enable(_id(small_catalog, "d"))
        first = resolver.snapshot()
        resolver.enable(_id(small_catalog, "d"))
        assert resolver.snapshot() == first

    def test_disable_is_idempotent(self, resolver, small_catalog):
        resolver.disable(_id(small_catalog, "c"))
        first = resolver.snapshot()
        resolver.disable(_id(small_catalog, "c"))
        assert resolver.snapshot() == first

    def test_disable_of_disabled_extension_is_touched(self, resolver, small_catalog):
        resolver.disable(_id(small_catalog, "b"))
        assert resolver.enabled == 0
        assert _touched(resolver) == {"b"}

    def test_touched_never_shrinks(self, resolver):
        seen = 0
        for modifier in ["d", "nob", "noa", "b", "x", "noc", "alpha"]:
            resolver.parse_modifier(modifier)
            assert resolver.touched & seen == seen
            seen = resolver.touched

    def test_closure_holds_after_every_step(self, resolver):
        for modifier in ["d", "b", "noc", "y", "now", "c", "noa", "d"]:
            resolver.parse_modifier(modifier)
            _assert_closed(resolver)

    def test_enabled_is_subset_of_touched(self, resolver):
        for modifier in ["d", "nob", "y"]:
            resolver.parse_modifier(modifier)
            assert resolver.enabled & ~resolver.touched == 0


# =============================================================================
# Defaults
# =============================================================================


class TestDefaults:
    def test_cpu_defaults_include_arch_defaults_and_closure(self, resolver, small_catalog):
        resolver.add_cpu_defaults(small_catalog.parse_cpu("cpu-x"))
        assert {"x", "y", "z", "w"} <= _enabled(resolver)
        assert resolver.base_arch.name == "armv8-a"

    def test_arch_defaults(self, resolver, small_catalog):
        resolver.add_arch_defaults(small_catalog.parse_arch("armv8.1-a"))
        assert _enabled(resolver) == {"a", "w", "y", "z"}
        assert resolver.base_arch.name == "armv8.1-a"

    def test_defaults_are_touched(self, resolver, small_catalog):
        resolver.add_arch_defaults(small_catalog.parse_arch("armv8-a"))
        assert resolver.to_feature_list() == ["+w", "+y", "+z"]

    def test_reseeding_extends_and_overwrites_base_arch(self, resolver, small_catalog):
        resolver.add_arch_defaults(small_catalog.parse_arch("armv8.1-a"))
        resolver.add_cpu_defaults(small_catalog.parse_cpu("cpu-x"))
        assert {"a", "x", "y", "z", "w"} <= _enabled(resolver)
        assert resolver.base_arch.name == "armv8-a"

    def test_fresh_resolver_is_empty(self, resolver):
        state = resolver.snapshot()
        assert (state.enabled, state.touched, state.base_arch) == (0, 0, None)
        assert resolver.to_feature_list() == []


# =============================================================================
# Modifiers
# =============================================================================


class TestParseModifier:
    def test_enable_and_disable(self, resolver):
        assert resolver.parse_modifier("d")
        assert resolver.parse_modifier("noc")
        assert _enabled(resolver) == {"a"}

    def test_alias(self, resolver):
        assert resolver.parse_modifier("alpha")
        assert resolver.is_enabled("a")
        assert resolver.parse_modifier("noalpha")
        assert not resolver.is_enabled("a")

    def test_alias_matches_canonical_on_bundled_catalog(self):
        ext = default_catalog().extensions
        via_alias = FeatureStateResolver(ext, negation_prefix="no")
        via_name = FeatureStateResolver(ext, negation_prefix="no")
        assert via_alias.parse_modifier("rdma")
        assert via_name.parse_modifier("rdm")
        assert via_alias.snapshot() == via_name.snapshot()

    def test_unknown_leaves_state_unchanged(self, resolver, small_catalog):
        resolver.add_cpu_defaults(small_catalog.parse_cpu("cpu-x"))
        before = resolver.snapshot()
        assert not resolver.parse_modifier("bogusfeature")
        assert not resolver.parse_modifier("nobogus")
        assert not resolver.parse_modifier("")
        assert resolver.snapshot() == before

    def test_negation_prefix_from_config(self, small_catalog):
        configure(ArchextConfig(resolver=ResolverConfig(negation_prefix="no-")))
        resolver = FeatureStateResolver(small_catalog.extensions)
        assert resolver.negation_prefix == "no-"
        resolver.parse_modifier("d")
        assert resolver.parse_modifier("no-c")
        assert _enabled(resolver) == {"a"}
        # With "no-" as the prefix, "noa" is just an unknown name
        assert not resolver.parse_modifier("noa")

    def test_snapshot_is_frozen(self, resolver):
        with pytest.raises(dataclasses.FrozenInstanceError):
            resolver.snapshot().enabled = 1


# =============================================================================
# Feature list
# =============================================================================


class TestFeatureList:
    def test_catalog_order_and_signs(self, resolver):
        resolver.parse_modifier("d")
        resolver.parse_modifier("nob")
        assert resolver.to_feature_list() == ["+a", "-b", "+c", "+d"]

    def test_untouched_extensions_are_omitted(self, resolver):
        resolver.parse_modifier("z")
        assert resolver.to_feature_list() == ["+z"]

    @pytest.mark.parametrize(
        "first, second",
        [
            (["nob", "d"], ["d", "nob"]),
            (["now", "d", "nob"], ["d", "nob", "now"]),
        ],
    )
    def test_output_depends_only_on_final_state(self, small_catalog, first, second):
        def run(modifiers):
            resolver = FeatureStateResolver(small_catalog.extensions, "no")
            resolver.add_cpu_defaults(small_catalog.parse_cpu("cpu-x"))
            for modifier in modifiers:
                assert resolver.parse_modifier(modifier)
            return resolver

        a, b = run(first), run(second)
        assert a.snapshot() == b.snapshot()
        assert a.to_feature_list() == b.to_feature_list()
        assert "-b" in a.to_feature_list()

    def test_empty_negation_prefix_rejected(self, small_catalog):
        with pytest.raises(ValueError, match="negation_prefix"):
            FeatureStateResolver(small_catalog.extensions, negation_prefix="")

    def test_empty_negation_prefix_from_config_rejected(self, small_catalog):
        configure(ArchextConfig(resolver=ResolverConfig(negation_prefix="")))
        with pytest.raises(ValueError, match="negation_prefix"):
            FeatureStateResolver(small_catalog.extensions)


# =============================================================================
# Sessions on the bundled catalog
# =============================================================================


class TestResolveFeatures:
    @pytest.fixture(scope="class")
    def catalog(self):
        return default_catalog()

    def test_disabling_fp16_drops_sve(self, catalog):
        resolver = resolve_features(catalog, arch="armv8.2-a", modifiers=["sve", "nofp16"])
        features = resolver.to_feature_list()
        assert "-fullfp16" in features
        assert "-sve" in features
        assert "+neon" in features
        assert not resolver.is_enabled("fp16fml")

    def test_deep_prerequisite_chain(self, catalog):
        resolver = resolve_features(catalog, modifiers=["sme-f8f16"])
        assert {"sme-f8f16", "sme2", "sme", "bf16", "fp8", "fp"} <= set(
            resolver.enabled_names()
        )
        resolver.parse_modifier("nofp")
        assert not resolver.is_enabled("sme-f8f16")
        assert resolver.is_enabled("sme2")

    def test_armv8r_enables_lse(self, catalog):
        arch_only = resolve_features(catalog, arch="armv8-r")
        assert arch_only.is_enabled("lse")
        assert arch_only.is_enabled("fp16fml")
        with_cpu = resolve_features(catalog, cpu="cortex-r82")
        assert with_cpu.is_enabled("lse")
        assert with_cpu.base_arch.name == "armv8-r"

    def test_sub_arch_name_accepted(self, catalog):
        resolver = resolve_features(catalog, arch="v8.1a")
        assert resolver.base_arch.name == "armv8.1-a"

    def test_cpu_seeded_after_arch(self, catalog):
        resolver = resolve_features(catalog, arch="armv9-a", cpu="cortex-a53")
        assert resolver.base_arch.name == "armv8-a"
        assert resolver.is_enabled("sve2")

    def test_cpu_alias(self, catalog):
        grace = resolve_features(catalog, cpu="grace").to_feature_list()
        v2 = resolve_features(catalog, cpu="neoverse-v2").to_feature_list()
        assert grace == v2

    def test_unknown_cpu(self, catalog):
        with pytest.raises(UnknownTargetError) as exc_info:
            resolve_features(catalog, cpu="pentium")
        assert exc_info.value.kind == "processor"

    def test_unknown_arch(self, catalog):
        with pytest.raises(UnknownTargetError):
            resolve_features(catalog, arch="armv7-a")

    def test_unknown_modifier(self, catalog):
        with pytest.raises(UnknownModifierError) as exc_info:
            resolve_features(catalog, cpu="cortex-a53", modifiers=["sve", "bogus"])
        assert exc_info.value.modifier == "bogus"
