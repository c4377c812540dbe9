"""Archive builder: installs the merged manifest with pnpm and packs the result.

The archive holds node_modules, pnpm-lock.yaml and the synthetic package.json,
ready to be unpacked into a CI workspace.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import subprocess
import tarfile
import tempfile
from typing import Any, Callable, Dict, Iterator, List, Optional

import yaml

from common.logging_utils import Timer, extra_context, is_debug_enabled
from constants import Constants
from merging.models import MergeResult

from .lockfile import summarize_pnpm_lock

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


class ArchiveError(RuntimeError):
    """Raised when the install step or archive creation fails."""


def build_manifest(result: MergeResult) -> Dict[str, Any]:
    """Return the aggregate package.json content for a merge result."""
    return {
        "name": Constants.AGGREGATE_PACKAGE_NAME,
        "version": Constants.AGGREGATE_PACKAGE_VERSION,
        "description": Constants.AGGREGATE_PACKAGE_DESCRIPTION,
        "private": True,
        "dependencies": dict(result.merged_dependencies),
        "devDependencies": dict(result.merged_dev_dependencies),
    }


def _stderr_tail(text: Optional[str]) -> str:
    if not text:
        return ""
    lines = text.strip().splitlines()
    return "\n".join(lines[-Constants.INSTALL_STDERR_TAIL_LINES:])


def run_install(work_dir: str) -> None:
    """Run ``pnpm install`` in work_dir.

    Raises:
        ArchiveError: If pnpm is missing, exits non-zero or times out.
    """
    cmd: List[str] = [Constants.PNPM_COMMAND, "install"]
    env = os.environ.copy()
    env["npm_config_prefer_offline"] = "false"

    logger.debug("Running: %s (cwd=%s)", " ".join(cmd), work_dir)
    with Timer() as t:
        try:
            proc = subprocess.run(
                cmd,
                cwd=work_dir,
                env=env,
                capture_output=True,
                text=True,
                timeout=Constants.INSTALL_TIMEOUT_SEC,
                check=False,
            )
        except FileNotFoundError as e:
            raise ArchiveError(
                f"'{Constants.PNPM_COMMAND}' was not found; install pnpm or set NODECACHE_PNPM"
            ) from e
        except subprocess.TimeoutExpired as e:
            raise ArchiveError(
                f"pnpm install timed out after {Constants.INSTALL_TIMEOUT_SEC} seconds"
            ) from e

    if is_debug_enabled(logger):
        logger.debug(
            "Install finished",
            extra=extra_context(
                event="subprocess",
                component="archiver",
                action="pnpm_install",
                outcome="success" if proc.returncode == 0 else "failure",
                returncode=proc.returncode,
                duration_ms=t.duration_ms(),
            ),
        )
    if proc.returncode != 0:
        message = f"pnpm install failed with exit code {proc.returncode}"
        tail = _stderr_tail(proc.stderr)
        if tail:
            message += f":\n{tail}"
        raise ArchiveError(message)


def _portable(info: tarfile.TarInfo) -> tarfile.TarInfo:
    """Strip ownership so the archive unpacks the same on any machine."""
    info.uid = 0
    info.gid = 0
    info.uname = ""
    info.gname = ""
    return info


def create_tarball(source_dir: str, output_path: str, members: Optional[List[str]] = None) -> str:
    """Pack members of source_dir into a gzip tarball and return its absolute path."""
    absolute_output = os.path.abspath(output_path)
    output_dir = os.path.dirname(absolute_output)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)

    with tarfile.open(absolute_output, "w:gz") as tar:
        for member in members or Constants.ARCHIVE_MEMBERS:
            tar.add(os.path.join(source_dir, member), arcname=member, filter=_portable)
    return absolute_output


def build_archive(
    result: MergeResult,
    output_path: str,
    on_progress: Optional[ProgressCallback] = None,
) -> str:
    """Build the pnpm cache archive for a merge result.

    Args:
        result: Merge result providing the dependency mappings.
        output_path: Destination .tar.gz path; parent directories are created.
        on_progress: Optional callback receiving progress messages.

    Returns:
        Absolute path of the archive.

    Raises:
        ArchiveError: If the install or packaging fails.
    """
    log = on_progress or logger.info
    temp_dir = tempfile.mkdtemp(prefix=Constants.TEMP_DIR_PREFIX)
    try:
        log("Generating merged package.json...")
        manifest_path = os.path.join(temp_dir, Constants.PACKAGE_JSON_FILE)
        with open(manifest_path, "w", encoding="utf-8") as fh:
            json.dump(build_manifest(result), fh, indent=2)

        log("Running pnpm install...")
        run_install(temp_dir)

        if not os.path.isdir(os.path.join(temp_dir, Constants.NODE_MODULES_DIR)):
            raise ArchiveError("pnpm install did not create node_modules directory")
        lockfile_path = os.path.join(temp_dir, Constants.PNPM_LOCK_FILE)
        if not os.path.isfile(lockfile_path):
            raise ArchiveError("pnpm install did not create pnpm-lock.yaml")

        try:
            summary = summarize_pnpm_lock(lockfile_path)
        except yaml.YAMLError as e:
            raise ArchiveError(f"pnpm-lock.yaml could not be parsed: {e}") from e
        logger.info(
            "Lockfile v%s lists %d packages",
            summary.lockfile_version or "?",
            summary.package_count,
        )

        log("Creating archive...")
        try:
            archive_path = create_tarball(temp_dir, output_path)
        except (OSError, tarfile.TarError) as e:
            raise ArchiveError(f"Failed to write archive {output_path}: {e}") from e
        log(f"Archive created: {archive_path}")
        return archive_path
    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)


def _within(base: str, path: str) -> bool:
    return os.path.commonpath([base, path]) == base


def _checked_members(tar: tarfile.TarFile, target_dir: str) -> Iterator[tarfile.TarInfo]:
    """Yield members that stay inside target_dir; skip device and fifo entries.

    Used on interpreters whose tarfile lacks extraction filters.
    """
    base = os.path.realpath(target_dir)
    for member in tar.getmembers():
        dest = os.path.realpath(os.path.join(base, member.name))
        if os.path.isabs(member.name) or not _within(base, dest):
            raise ArchiveError(f"Refusing to extract {member.name!r} outside {target_dir}")
        if member.issym():
            link_dest = os.path.realpath(os.path.join(os.path.dirname(dest), member.linkname))
            if os.path.isabs(member.linkname) or not _within(base, link_dest):
                raise ArchiveError(f"Refusing to extract link {member.name!r} -> {member.linkname!r}")
        elif member.islnk():
            if not _within(base, os.path.realpath(os.path.join(base, member.linkname))):
                raise ArchiveError(f"Refusing to extract link {member.name!r} -> {member.linkname!r}")
        elif not (member.isfile() or member.isdir()):
            logger.debug("Skipping special archive member %s", member.name)
            continue
        yield member


def extract_archive(archive_path: str, target_dir: str) -> str:
    """Unpack a cache archive into target_dir, creating it if needed.

    Members that would land outside target_dir are rejected.

    Raises:
        ArchiveError: If the archive is missing, unreadable or unsafe.
    """
    absolute_archive = os.path.abspath(archive_path)
    absolute_target = os.path.abspath(target_dir)
    if not os.path.isfile(absolute_archive):
        raise ArchiveError(f"Archive not found: {absolute_archive}")

    os.makedirs(absolute_target, exist_ok=True)
    try:
        with tarfile.open(absolute_archive, "r:gz") as tar:
            if hasattr(tarfile, "data_filter"):
                tar.extractall(absolute_target, filter="data")
            else:
                tar.extractall(absolute_target, members=_checked_members(tar, absolute_target))
    except (OSError, tarfile.TarError) as e:
        raise ArchiveError(f"Failed to extract {absolute_archive}: {e}") from e
    logger.info("Extracted %s into %s", absolute_archive, absolute_target)
    return absolute_target
