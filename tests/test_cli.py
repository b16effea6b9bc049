"""Tests for the opamresolve command line."""

import json

import pytest

from constants import ExitCodes
from opamresolve import main

INDEX = {
    "packages": {
        "foo": {
            "1.0.0": {"peerDependencies": {"ocaml": "*"}, "opam": {"checksum": "md5=100"}},
            "1.2.0": {"peerDependencies": {"ocaml": ">=4.10"}, "opam": {"checksum": "md5=120"}},
            "2.0.0": {"peerDependencies": {"ocaml": ">=4.14"}, "opam": {"checksum": "md5=200"}},
        },
        "broken": {"1.0": {}},
    }
}


@pytest.fixture
def index_path(tmp_path):
    path = tmp_path / "index.json"
    path.write_text(json.dumps(INDEX))
    return str(path)


class TestCli:
    """Exit codes and output of the CLI."""

    def test_resolves_and_prints_manifest(self, index_path, capsys):
        code = main(["-p", "@opam/foo@*", "--index", index_path, "--ocaml-version", "4.11.0"])
        assert code == ExitCodes.SUCCESS.value
        out = json.loads(capsys.readouterr().out)
        assert out["version"] == "1.2.0"
        assert out["_remote"] == {
            "type": "opam",
            "registry": "npm",
            "hash": "md5=120",
            "reference": "foo@1.2.0",
            "resolved": "foo@1.2.0",
        }

    def test_writes_output_file(self, index_path, tmp_path):
        out_path = tmp_path / "out.json"
        code = main(["-p", "@opam/foo@^1.0.0", "--index", index_path, "-o", str(out_path)])
        assert code == ExitCodes.SUCCESS.value
        assert json.loads(out_path.read_text())["version"] == "1.2.0"

    def test_not_found(self, index_path, caplog):
        code = main(["-p", "@opam/foo@^3.0.0", "--index", index_path, "--parent", "app"])
        assert code == ExitCodes.NOT_FOUND.value
        assert 'No compatible version found: "@opam/foo@^3.0.0" (dependency path: app)' in caplog.text

    def test_malformed_repository(self, index_path):
        code = main(["-p", "@opam/broken@*", "--index", index_path])
        assert code == ExitCodes.DATA_ERROR.value

    def test_rejects_foreign_pattern(self, index_path):
        assert main(["-p", "lodash@^4.0.0", "--index", index_path]) == ExitCodes.USAGE_ERROR.value

    def test_requires_index(self, monkeypatch):
        monkeypatch.delenv("OPAMRESOLVE_INDEX", raising=False)
        assert main(["-p", "@opam/foo@*"]) == ExitCodes.USAGE_ERROR.value

    def test_missing_index_file(self, tmp_path):
        code = main(["-p", "@opam/foo@*", "--index", str(tmp_path / "absent.json")])
        assert code == ExitCodes.FILE_ERROR.value

    def test_uses_current_lockfile_entry(self, index_path, tmp_path, capsys):
        lock = {
            "@opam/foo@^1.0.0": {
                "name": "foo",
                "version": "1.0.0",
                "_remote": {"type": "opam", "reference": "foo@1.0.0", "hash": "md5=100"},
            }
        }
        lock_path = tmp_path / "opam.lock.json"
        lock_path.write_text(json.dumps(lock))
        code = main(["-p", "@opam/foo@^1.0.0", "--index", index_path, "--lockfile", str(lock_path)])
        assert code == ExitCodes.SUCCESS.value
        assert json.loads(capsys.readouterr().out)["version"] == "1.0.0"

    def test_replaces_outdated_lockfile_entry(self, index_path, tmp_path, capsys):
        lock = {
            "@opam/foo@*": {
                "name": "foo",
                "version": "2.0.0",
                "peerDependencies": {"ocaml": ">=4.14"},
                "_remote": {"type": "opam", "reference": "foo@2.0.0"},
            }
        }
        lock_path = tmp_path / "opam.lock.json"
        lock_path.write_text(json.dumps(lock))
        code = main([
            "-p", "@opam/foo@*", "--index", index_path,
            "--lockfile", str(lock_path), "--ocaml-version", "4.11.0",
        ])
        assert code == ExitCodes.SUCCESS.value
        assert json.loads(capsys.readouterr().out)["version"] == "1.2.0"

    def test_malformed_lockfile_version(self, index_path, tmp_path):
        """A locked version that is not SemVer is a data error, not a crash."""
        lock = {
            "@opam/foo@*": {
                "name": "foo",
                "version": "1.0",
                "_remote": {"type": "opam", "reference": "foo@1.0"},
            }
        }
        lock_path = tmp_path / "opam.lock.json"
        lock_path.write_text(json.dumps(lock))
        code = main(["-p", "@opam/foo@*", "--index", index_path, "--lockfile", str(lock_path)])
        assert code == ExitCodes.DATA_ERROR.value

    def test_scope_option_selects_accepted_patterns(self, index_path, capsys):
        """Only patterns under the configured scope are resolved."""
        code = main(["-p", "@opam/foo@*", "--index", index_path, "--scope", "esy"])
        assert code == ExitCodes.USAGE_ERROR.value
        code = main(["-p", "@esy/foo@*", "--index", index_path, "--scope", "esy"])
        assert code == ExitCodes.SUCCESS.value
        assert json.loads(capsys.readouterr().out)["version"] == "2.0.0"
