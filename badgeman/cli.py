"""
cli.py

Responsibility: CLI entrypoint for badgeman.

Two workflows, one per subcommand:
- `version`: read package.json version -> bump -> (optional) save -> (optional) git tag
- `badges`:  parse badge config -> render -> (optional) save metadata -> (optional) splice README

This module should orchestrate behavior but keep concerns isolated:
- Version rules: `semver.py`
- Manifest / package path: `manifest.py`
- Badge rendering: `badges.py`, `config.py`
- Persistence: `metadata.py`, `readme.py`
"""

from __future__ import annotations

import argparse
import logging
import shlex
import subprocess
from pathlib import Path

from badgeman import __version__
from badgeman.config import build_collection, load_badge_config
from badgeman.errors import BadgemanError, ExternalCommandError, ValidationError
from badgeman.manifest import PackageContext, read_version, write_version
from badgeman.metadata import save_metadata
from badgeman.readme import insert_into_readme
from badgeman.semver import LEVELS, BumpDirective, SemVer, bump

logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(levelname)s] %(message)s"
DRY_RUN_PREFIX = "[dry-run]"


def _run(cmd: list[str], *, cwd: Path) -> str:
    """
    Run a subprocess command, raising an ExternalCommandError on failure.
    """
    logger.info("run command: %s on dir: %s", shlex.join(cmd), cwd)
    try:
        proc = subprocess.run(cmd, cwd=str(cwd), check=True, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True)
    except subprocess.CalledProcessError as e:
        raise ExternalCommandError(f"Command failed: {shlex.join(cmd)}\n\n{e.stdout}") from e
    except FileNotFoundError as e:
        raise ExternalCommandError(f"Command not found: {cmd[0]}") from e
    return proc.stdout


def git_tag_command(version: SemVer, message: str) -> list[str]:
    return ["git", "tag", "-a", str(version), "-m", message]


def add_git_tag(version: SemVer, message: str, *, cwd: Path, dry_run: bool = False) -> bool:
    """
    Create an annotated tag for `version`. A failing git is logged, never raised.
    """
    cmd = git_tag_command(version, message)
    if dry_run:
        print(DRY_RUN_PREFIX, shlex.join(cmd))
        return True
    try:
        _run(cmd, cwd=cwd)
    except ExternalCommandError as e:
        logger.error("exec error: %s", e)
        return False
    return True


def _package_context(package: str | None) -> PackageContext:
    return PackageContext().assign(package or ".")


def version_cmd(args: argparse.Namespace) -> int:
    ctx = _package_context(args.package)
    manifest_path = ctx.require_manifest()

    current = read_version(manifest_path)
    new = bump(current, BumpDirective(level=args.bump, prerelease=args.prerelease))
    print(f"Version: {current} -> {new}")

    if args.save:
        if not args.dry_run:
            write_version(manifest_path, new)
        prefix = f"{DRY_RUN_PREFIX} " if args.dry_run else ""
        print(f"{prefix}Version saved to package file: {manifest_path}")

    if args.git_tag:
        add_git_tag(new, args.git_tag, cwd=ctx.require_root(), dry_run=bool(args.dry_run))

    return 0


def badges_cmd(args: argparse.Namespace) -> int:
    ctx = _package_context(args.package)
    root = ctx.require_root()

    config = load_badge_config(args.config_path).with_overrides(style=args.style)
    collection = build_collection(config)
    rendered = collection.render()
    print(rendered)

    if args.dry_run:
        print(DRY_RUN_PREFIX, f"{len(collection)} badge(s) rendered; nothing written under {root}")
        return 0

    if not args.no_metadata:
        for path in save_metadata(collection, root):
            print(f"Badge metadata saved to: {path}")
    if not args.no_readme:
        path = insert_into_readme(root, rendered, replace=not args.append)
        print(f"Badges inserted into: {path}")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="badgeman", description="badgeman - shields.io badges and semantic version bumps")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("-v", "--verbose", action="store_true", help="Log progress (INFO level)")
    p.add_argument("-q", "--quiet", action="store_true", help="Only log errors")
    sub = p.add_subparsers(dest="command", required=True)

    v = sub.add_parser("version", help="Bump the version in package.json, optionally save and git-tag it")
    v.add_argument(
        "-b",
        "--bump",
        nargs="?",
        const="patch",
        default="patch",
        choices=LEVELS,
        help="Version level to increment by 1 (default: patch)",
    )
    v.add_argument(
        "-p",
        "--prerelease",
        nargs="?",
        const=True,
        default=None,
        metavar="IDENTIFIER",
        help=(
            "Continue the current prerelease (no identifier), or switch to IDENTIFIER. "
            "An IDENTIFIER is required to turn a release version into a prerelease."
        ),
    )
    v.add_argument(
        "-k",
        "--package",
        nargs="?",
        const=None,
        default=None,
        help="Package directory (default: current working directory; must be inside it)",
    )
    v.add_argument("-s", "--save", action="store_true", help="Save the new version to package.json")
    v.add_argument("--dry-run", action="store_true", help="Display what would change without writing anything")
    v.add_argument("-t", "--git-tag", default=None, metavar="MESSAGE", help="Create an annotated git tag with MESSAGE")
    v.set_defaults(func=version_cmd)

    b = sub.add_parser("badges", help="Render badges from a YAML config, save metadata, update README.md")
    b.add_argument("config_path", help="Path to the badge config YAML file")
    b.add_argument("-k", "--package", default=None, help="Package directory (default: current working directory)")
    b.add_argument("--style", default=None, help="Badge style (overrides config style)")
    b.add_argument("--append", action="store_true", help="Append to previously inserted badges instead of replacing them")
    b.add_argument("--no-readme", action="store_true", help="Do not modify README.md")
    b.add_argument("--no-metadata", action="store_true", help="Do not write metadata/badges/* schema files")
    b.add_argument("--dry-run", action="store_true", help="Only print the rendered badges")
    b.set_defaults(func=badges_cmd)
    return p


def _configure_logging(args: argparse.Namespace) -> None:
    level = logging.WARNING
    if args.verbose:
        level = logging.INFO
    elif args.quiet:
        level = logging.ERROR
    logging.basicConfig(level=level, format=LOG_FORMAT)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args)
    try:
        return int(args.func(args))
    except ValidationError as e:
        logger.error("%s", e)
        return 2
    except (BadgemanError, OSError) as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
