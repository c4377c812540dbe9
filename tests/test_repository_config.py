"""Tests for configuration search, persistence and repository list updates."""

import json
import os

import pytest
import yaml

from constants import Constants
from repository.config import (
    Config,
    ConfigError,
    add_repository,
    find_config_file,
    list_repositories,
    load_config,
    remove_repository,
    save_config,
    update_config,
)


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run each test from an empty working directory."""
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    return work


class TestLoadConfig:
    """Config discovery and validation."""

    def test_defaults_without_file(self, workdir):
        config = load_config()
        assert config.repositories == []
        assert config.report_mode == "console"
        assert config.default_output is None
        assert config.path is None

    def test_found_in_parent_directory(self, workdir):
        (workdir / Constants.CONFIG_FILE).write_text(json.dumps({"repositories": ["/x"]}), encoding="utf-8")
        nested = workdir / "deep" / "er"
        nested.mkdir(parents=True)

        assert find_config_file(str(nested)) == str(workdir / Constants.CONFIG_FILE)
        assert load_config(search_from=str(nested)).repositories == ["/x"]

    def test_search_order_within_directory(self, workdir):
        (workdir / "nodecache.config.json").write_text(json.dumps({"repositories": ["/second"]}), encoding="utf-8")
        (workdir / ".nodecacherc.yml").write_text("repositories:\n  - /first\n", encoding="utf-8")

        assert load_config().repositories == ["/first"]

    @pytest.mark.parametrize("filename", [".node-cache-builderrc.json", "node-cache-builder.config.json"])
    def test_node_cache_builder_file_names(self, workdir, filename):
        (workdir / filename).write_text(json.dumps({"repositories": ["/x"]}), encoding="utf-8")

        config = load_config()

        assert config.repositories == ["/x"]
        assert config.path == str(workdir / filename)

    def test_nodecache_names_take_precedence(self, workdir):
        (workdir / ".node-cache-builderrc.json").write_text(json.dumps({"repositories": ["/old"]}), encoding="utf-8")
        (workdir / Constants.CONFIG_FILE).write_text(json.dumps({"repositories": ["/new"]}), encoding="utf-8")

        assert load_config().repositories == ["/new"]

    def test_yaml_config(self, workdir):
        (workdir / ".nodecacherc.yaml").write_text(
            "repositories:\n  - /a\n  - /b\ndefaultOutput: cache.tar.gz\nreportMode: file\n",
            encoding="utf-8",
        )
        config = load_config()
        assert config.repositories == ["/a", "/b"]
        assert config.default_output == "cache.tar.gz"
        assert config.report_mode == "file"

    def test_partial_file_overlays_defaults(self, workdir):
        (workdir / Constants.CONFIG_FILE).write_text(json.dumps({"defaultOutput": "out.tgz"}), encoding="utf-8")
        config = load_config()
        assert config.repositories == []
        assert config.report_mode == "console"
        assert config.default_output == "out.tgz"

    def test_explicit_missing_path_yields_defaults(self, workdir):
        config = load_config("custom.json")
        assert config.repositories == []
        assert config.path == str(workdir / "custom.json")

    @pytest.mark.parametrize("content", [
        "{broken",
        json.dumps(["not", "a", "mapping"]),
        json.dumps({"repositories": "/just/a/string"}),
        json.dumps({"repositories": [1, 2]}),
        json.dumps({"reportMode": "email"}),
        json.dumps({"defaultOutput": 5}),
    ])
    def test_invalid_files_raise(self, workdir, content):
        (workdir / Constants.CONFIG_FILE).write_text(content, encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config()


class TestSaveConfig:
    """Persisting configuration."""

    def test_save_defaults_to_cwd_json(self, workdir):
        path = save_config(Config(repositories=["/a"]))
        assert path == str(workdir / Constants.CONFIG_FILE)
        data = json.loads((workdir / Constants.CONFIG_FILE).read_text(encoding="utf-8"))
        assert data == {"repositories": ["/a"], "reportMode": "console"}

    def test_save_back_to_loaded_yaml_file(self, workdir):
        target = workdir / "nodecache.config.yml"
        target.write_text("repositories: []\n", encoding="utf-8")

        config = load_config()
        config.default_output = "ci/cache.tar.gz"
        save_config(config)

        data = yaml.safe_load(target.read_text(encoding="utf-8"))
        assert data == {"repositories": [], "defaultOutput": "ci/cache.tar.gz", "reportMode": "console"}
        assert not (workdir / Constants.CONFIG_FILE).exists()


class TestRepositoryList:
    """add/remove/list operations."""

    def test_add_repository(self, workdir, make_repo):
        repo = make_repo("app", {"a": "1.0.0"})
        config = add_repository(repo)

        assert config.repositories == [repo]
        assert list_repositories() == [repo]

    def test_add_is_idempotent(self, workdir, make_repo):
        repo = make_repo("app")
        add_repository(repo)
        config = add_repository(repo)
        assert config.repositories == [repo]

    def test_add_relative_path_is_stored_absolute(self, workdir):
        (workdir / "local").mkdir()
        (workdir / "local" / "package.json").write_text("{}", encoding="utf-8")

        config = add_repository("local")

        assert config.repositories == [str(workdir / "local")]

    def test_add_missing_path(self, workdir, tmp_path):
        with pytest.raises(ConfigError, match="does not exist"):
            add_repository(str(tmp_path / "nope"))

    def test_add_without_manifest(self, workdir, tmp_path):
        bare = tmp_path / "bare"
        bare.mkdir()
        with pytest.raises(ConfigError, match="No package.json"):
            add_repository(str(bare))
        assert not (workdir / Constants.CONFIG_FILE).exists()

    def test_remove_by_absolute_path(self, workdir, make_repo):
        a = make_repo("a")
        b = make_repo("b")
        add_repository(a)
        add_repository(b)

        config = remove_repository(a)

        assert config.repositories == [b]
        assert list_repositories() == [b]

    def test_remove_by_literal_string(self, workdir):
        (workdir / Constants.CONFIG_FILE).write_text(
            json.dumps({"repositories": ["some/relative", "/abs"]}), encoding="utf-8"
        )
        os.makedirs("elsewhere")
        os.chdir("elsewhere")

        config = remove_repository("some/relative")

        assert config.repositories == ["/abs"]

    def test_remove_unknown(self, workdir):
        with pytest.raises(ConfigError, match="not found in config"):
            remove_repository("/not/configured")

    def test_explicit_config_path(self, workdir, make_repo, tmp_path):
        target = tmp_path / "ci" / "nodecache.yml"
        target.parent.mkdir()
        repo = make_repo("app")

        add_repository(repo, config_path=str(target))

        assert yaml.safe_load(target.read_text(encoding="utf-8"))["repositories"] == [repo]
        assert list_repositories(str(target)) == [repo]
        assert list_repositories() == []


class TestUpdateConfig:
    """config --set-* behavior."""

    def test_sets_values(self, workdir):
        config = update_config(default_output="cache.tar.gz", report_mode="file")
        assert config.default_output == "cache.tar.gz"
        saved = json.loads((workdir / Constants.CONFIG_FILE).read_text(encoding="utf-8"))
        assert saved["defaultOutput"] == "cache.tar.gz"
        assert saved["reportMode"] == "file"

    def test_invalid_report_mode(self, workdir):
        with pytest.raises(ConfigError, match="Invalid report mode"):
            update_config(report_mode="email")

    def test_no_changes_no_write(self, workdir):
        update_config()
        assert not (workdir / Constants.CONFIG_FILE).exists()
