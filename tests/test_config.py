"""Tests for resolver configuration loading."""

import logging

from config import ResolverConfig, load_config, load_yaml_config


def write(path, text):
    path.write_text(text)
    return str(path)


class TestLoadYamlConfig:
    def test_reads_opam_section(self, tmp_path):
        path = write(tmp_path / "cfg.yml", "opam:\n  ocaml_version: 4.14.1\n  index_path: idx.json\nother: 1\n")
        assert load_yaml_config(path) == {"ocaml_version": "4.14.1", "index_path": "idx.json"}

    def test_whole_file_without_section(self, tmp_path):
        path = write(tmp_path / "cfg.yml", "scope: esy\n")
        assert load_yaml_config(path) == {"scope": "esy"}

    def test_missing_file(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING):
            assert load_yaml_config(str(tmp_path / "absent.yml")) == {}
        assert "Config file not found" in caplog.text

    def test_no_path(self):
        assert load_yaml_config(None) == {}


class TestLoadConfig:
    def test_defaults(self):
        assert load_config(environ={}) == ResolverConfig()
        assert ResolverConfig().scope == "opam"

    def test_precedence(self, tmp_path):
        """File < environment < explicit overrides."""
        path = write(
            tmp_path / "cfg.yml",
            "opam:\n  ocaml_version: 4.10.0\n  index_path: from-file.json\n  lockfile_path: lock.json\n",
        )
        env = {"OPAMRESOLVE_OCAML_VERSION": "4.12.0", "OPAMRESOLVE_INDEX": "from-env.json"}
        config = load_config(path, environ=env, overrides={"ocaml_version": "4.14.0", "index_path": None})
        assert config.ocaml_version == "4.14.0"
        assert config.index_path == "from-env.json"
        assert config.lockfile_path == "lock.json"

    def test_unknown_keys_ignored(self, tmp_path, caplog):
        path = write(tmp_path / "cfg.yml", "opam:\n  colour: blue\n  scope: esy\n")
        with caplog.at_level(logging.WARNING):
            config = load_config(path, environ={})
        assert config.scope == "esy"
        assert "colour" in caplog.text
