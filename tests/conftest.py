"""Shared fixtures: a small hand-written catalog and isolated config."""

import pytest

import archext.config as config_module
from archext.catalog import build_catalog
from archext.cli.commands import config_cmd
from archext.core.models import CatalogSpec


def small_catalog_data() -> dict:
    """Edges a->b, a->c, c->d and w->y; armv8-a defaults {y, z}; cpu-x adds {x}."""
    return {
        "extensions": [
            {"name": name, "feature": f"+{name}"}
            for name in ("a", "b", "c", "d", "w", "x", "y", "z")
        ],
        "dependencies": [["a", "b"], ["a", "c"], ["c", "d"], ["w", "y"]],
        "architectures": [
            {
                "name": "armv8-a",
                "version": [8, 0],
                "arch_feature": "+v8a",
                "add": ["y", "z"],
            },
            {
                "name": "armv8.1-a",
                "version": [8, 1],
                "arch_feature": "+v8.1a",
                "base": "armv8-a",
                "add": ["a"],
            },
        ],
        "processors": [{"name": "cpu-x", "arch": "armv8-a", "extensions": ["x"]}],
        "aliases": {"cpu": {"xcore": "cpu-x"}, "extension": {"alpha": "a"}},
    }


@pytest.fixture
def small_spec() -> CatalogSpec:
    return CatalogSpec.model_validate(small_catalog_data())


@pytest.fixture
def small_catalog(small_spec):
    return build_catalog(small_spec)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the config file at tmp_path and clear ARCHEXT_* env vars."""
    config_dir = tmp_path / "config"
    config_file = config_dir / "config.json"
    monkeypatch.setattr(config_module, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_file)
    monkeypatch.setattr(config_cmd, "CONFIG_FILE", config_file)
    for var in (
        "ARCHEXT_CATALOG",
        "ARCHEXT_NEGATION_PREFIX",
        "ARCHEXT_MODE",
        "ARCHEXT_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)

    config_module.reset_config()
    yield config_file
    config_module.reset_config()
