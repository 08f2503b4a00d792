"""Tests for the badgeman CLI: `version` and `badges` workflows."""

import json
import subprocess
from unittest.mock import patch

import pytest

from badgeman.cli import add_git_tag, git_tag_command, main
from badgeman.readme import INJECTION_MARKER
from badgeman.semver import SemVer


@pytest.fixture
def package(tmp_path, monkeypatch):
    """A package.json in a fresh working directory."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "package.json").write_text(json.dumps({"name": "demo", "version": "1.2.3"}), encoding="utf-8")
    return tmp_path


def _version(path):
    return json.loads((path / "package.json").read_text(encoding="utf-8"))["version"]


class TestVersionCommand:
    def test_prints_without_saving(self, package, capsys):
        assert main(["version"]) == 0
        assert capsys.readouterr().out.splitlines() == ["Version: 1.2.3 -> 1.2.4"]
        assert _version(package) == "1.2.3"

    def test_bump_without_level_defaults_to_patch(self, package, capsys):
        assert main(["version", "--bump"]) == 0
        assert "-> 1.2.4" in capsys.readouterr().out

    def test_save(self, package, capsys):
        assert main(["version", "--bump", "minor", "--save"]) == 0
        out = capsys.readouterr().out
        assert "Version: 1.2.3 -> 1.3.0" in out
        assert f"Version saved to package file: {package / 'package.json'}" in out
        assert _version(package) == "1.3.0"

    def test_save_dry_run(self, package, capsys):
        assert main(["version", "--save", "--dry-run"]) == 0
        assert "[dry-run] Version saved to package file:" in capsys.readouterr().out
        assert _version(package) == "1.2.3"

    def test_prerelease_identifier(self, package, capsys):
        assert main(["version", "--prerelease", "beta", "--save"]) == 0
        assert _version(package) == "1.2.4-beta.0"
        assert main(["version", "--prerelease", "--save"]) == 0
        assert _version(package) == "1.2.4-beta.1"

    def test_prerelease_without_identifier_on_release(self, package, capsys):
        assert main(["version", "--prerelease"]) == 2
        assert _version(package) == "1.2.3"

    def test_package_subdirectory(self, package, capsys):
        sub = package / "packages" / "lib"
        sub.mkdir(parents=True)
        (sub / "package.json").write_text('{"version": "0.1.0"}', encoding="utf-8")
        assert main(["version", "--package", "packages/lib", "--bump", "major"]) == 0
        assert "Version: 0.1.0 -> 1.0.0" in capsys.readouterr().out

    def test_package_outside_cwd(self, package):
        assert main(["version", "--package", ".."]) == 2

    def test_missing_manifest(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert main(["version"]) == 1

    def test_git_tag(self, package):
        with patch("badgeman.cli.subprocess.run") as run:
            assert main(["version", "--save", "--git-tag", "release it"]) == 0
        cmd = run.call_args.args[0]
        assert cmd == ["git", "tag", "-a", "1.2.4", "-m", "release it"]
        assert run.call_args.kwargs["cwd"] == str(package.resolve())

    def test_git_tag_dry_run(self, package, capsys):
        with patch("badgeman.cli.subprocess.run") as run:
            assert main(["version", "--git-tag", "msg", "--dry-run"]) == 0
        run.assert_not_called()
        assert "[dry-run] git tag -a 1.2.4 -m msg" in capsys.readouterr().out

    def test_git_tag_failure_is_not_fatal(self, package, caplog):
        err = subprocess.CalledProcessError(128, ["git"], output="fatal: not a git repository")
        with patch("badgeman.cli.subprocess.run", side_effect=err):
            assert main(["version", "--git-tag", "msg"]) == 0
        assert "not a git repository" in caplog.text


class TestAddGitTag:
    def test_missing_git_binary(self, tmp_path):
        with patch("badgeman.cli.subprocess.run", side_effect=FileNotFoundError("git")):
            assert add_git_tag(SemVer(1, 0, 0), "m", cwd=tmp_path) is False

    def test_command(self):
        assert git_tag_command(SemVer(2, 0, 0), "a b") == ["git", "tag", "-a", "2.0.0", "-m", "a b"]


CONFIG = """\
username: alice
repo: project
badges:
  - type: code-size
  - type: custom
    name: hello
    label: hello
    message: world
"""


@pytest.fixture
def badge_package(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "badges.yml").write_text(CONFIG, encoding="utf-8")
    (tmp_path / "README.md").write_text("# Project\n\nBody\n", encoding="utf-8")
    return tmp_path


class TestBadgesCommand:
    def test_full_run(self, badge_package, capsys):
        assert main(["badges", "badges.yml"]) == 0
        rendered = capsys.readouterr().out.splitlines()[0]
        assert "code-size/alice/project.svg?style=flat" in rendered
        assert (badge_package / "metadata" / "badges" / "hello").is_file()
        lines = (badge_package / "README.md").read_text(encoding="utf-8").split("\n")
        assert lines[:4] == ["# Project", "", INJECTION_MARKER, rendered]

    def test_dry_run_writes_nothing(self, badge_package, capsys):
        assert main(["badges", "badges.yml", "--dry-run"]) == 0
        assert not (badge_package / "metadata").exists()
        assert (badge_package / "README.md").read_text(encoding="utf-8") == "# Project\n\nBody\n"

    def test_append(self, badge_package, capsys):
        assert main(["badges", "badges.yml", "--no-metadata"]) == 0
        assert main(["badges", "badges.yml", "--no-metadata", "--append"]) == 0
        rendered = capsys.readouterr().out.splitlines()[0]
        line = (badge_package / "README.md").read_text(encoding="utf-8").split("\n")[3]
        assert line == f"{rendered} {rendered}"
        assert not (badge_package / "metadata").exists()

    def test_style_override(self, badge_package, capsys):
        assert main(["badges", "badges.yml", "--style", "for-the-badge", "--no-readme"]) == 0
        assert "style=for-the-badge" in capsys.readouterr().out
        assert (badge_package / "README.md").read_text(encoding="utf-8") == "# Project\n\nBody\n"

    def test_bad_style(self, badge_package):
        assert main(["badges", "badges.yml", "--style", "shiny"]) == 2

    def test_missing_readme(self, badge_package):
        (badge_package / "README.md").unlink()
        assert main(["badges", "badges.yml"]) == 1

    def test_bad_config(self, badge_package):
        (badge_package / "badges.yml").write_text("repo: only\n", encoding="utf-8")
        assert main(["badges", "badges.yml"]) == 1

    def test_badge_name_escaping_package(self, tmp_path, monkeypatch):
        work = tmp_path / "outer" / "work"
        work.mkdir(parents=True)
        monkeypatch.chdir(work)
        (work / "badges.yml").write_text(
            "username: a\nrepo: b\nbadges:\n  - type: custom\n    name: ../../../escaped\n    label: x\n",
            encoding="utf-8",
        )
        assert main(["badges", "badges.yml", "--no-readme"]) == 2
        assert not (tmp_path / "outer" / "escaped").exists()
