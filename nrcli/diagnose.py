"""Management and execution of the New Relic Diagnostics (nrdiag) binary."""

from __future__ import annotations

import logging
import os
import platform
import shutil
import struct
import subprocess
import tempfile
import urllib.error
import urllib.request
import zipfile
from pathlib import Path

from nrcli.config import default_config_directory

__all__ = [
    "DOWNLOAD_URL",
    "DiagnoseError",
    "ConnectionFailure",
    "ValidationFailure",
    "DiscoveryFailure",
    "PostEventFailure",
    "LicenseKeyError",
    "InsightsInsertKeyError",
    "executable_location",
    "binary_path",
    "extract_binary",
    "download_binary",
    "ensure_binary_exists",
    "run_diagnostics",
    "update_binary",
]

DOWNLOAD_URL = "https://download.newrelic.com/nrdiag/nrdiag_latest.zip"

_SUBDIRS = {"windows": "win", "darwin": "mac", "linux": "linux"}

log = logging.getLogger(__name__)


class DiagnoseError(Exception):
    """Base class for diagnostics failures."""


class _WrappedFailure(DiagnoseError):
    """A failure that carries the error which caused it; its message is the inner one."""

    def __init__(self, inner: BaseException) -> None:
        super().__init__(str(inner))
        self.inner = inner
        self.__cause__ = inner


class ConnectionFailure(_WrappedFailure):
    """The New Relic platform could not be reached."""


class ValidationFailure(_WrappedFailure):
    """Posted data could not be found again."""


class DiscoveryFailure(_WrappedFailure):
    """Host information could not be discovered."""


class PostEventFailure(_WrappedFailure):
    """An event could not be posted."""


class LicenseKeyError(DiagnoseError):
    """The configured license key is not valid for the account."""


class InsightsInsertKeyError(DiagnoseError):
    """The configured Insights insert key is not valid for the account."""


def _word_bits() -> int:
    return struct.calcsize("P") * 8


def executable_location(system: str, word_bits: int) -> str:
    """The path of the right nrdiag executable inside the release archive."""
    executable = "nrdiag_x64" if word_bits == 64 else "nrdiag"
    subdir = _SUBDIRS.get(system.lower())
    if subdir is None:
        raise DiagnoseError(f"unknown operating system: {system}")
    if subdir == "win":
        executable += ".exe"
    return f"nrdiag/{subdir}/{executable}"


def binary_path(config_dir: str | os.PathLike | None = None) -> Path:
    """Where the nrdiag binary lives under the configuration directory."""
    base = Path(config_dir) if config_dir else Path(default_config_directory())
    return base / "bin" / "nrdiag"


def extract_binary(
    archive_path: str | os.PathLike,
    destination: str | os.PathLike,
    system: str,
    word_bits: int,
) -> Path:
    """Copy the executable for ``system`` out of the zip archive to ``destination``."""
    target = executable_location(system, word_bits)
    with zipfile.ZipFile(archive_path) as archive:
        member = next((info for info in archive.infolist() if info.filename == target), None)
        if member is None:
            raise DiagnoseError(f"executable {target} not found in zip file")

        log.info("Extracting... ")
        fd = os.open(destination, os.O_CREAT | os.O_WRONLY | os.O_TRUNC, 0o777)
        with os.fdopen(fd, "wb") as out, archive.open(member) as source:
            shutil.copyfileobj(source, out)
    return Path(destination)


def download_binary(config_dir: str | os.PathLike | None = None) -> Path:
    """Download the latest nrdiag release and install the binary for this system."""
    log.info("Determining OS...")
    system = platform.system()
    bits = _word_bits()
    executable_location(system, bits)

    log.info("Downloading %s", DOWNLOAD_URL)
    try:
        response = urllib.request.urlopen(DOWNLOAD_URL)
    except (urllib.error.URLError, OSError) as exc:
        log.warning("failed to download the latest nrdiag: %s", exc)
        home = config_dir or default_config_directory()
        log.info(
            "If this problem persists, you can download the zip file from %s and "
            "place the appropriate binary for your system in %s/bin, then try again.",
            DOWNLOAD_URL,
            home,
        )
        raise

    fd, tmp_name = tempfile.mkstemp(prefix="nrdiag-")
    try:
        with response, os.fdopen(fd, "wb") as tmp_file:
            shutil.copyfileobj(response, tmp_file)
        return extract_binary(tmp_name, binary_path(config_dir), system, bits)
    finally:
        os.remove(tmp_name)


def ensure_binary_exists(config_dir: str | os.PathLike | None = None) -> Path:
    """Return the binary's path, downloading it first when it is missing."""
    destination = binary_path(config_dir)
    destination.parent.mkdir(mode=0o777, parents=True, exist_ok=True)
    if not destination.exists():
        log.info("nrdiag binary not found in %s", destination)
        download_binary(config_dir)
    return destination


def run_diagnostics(
    *args: str, config_dir: str | os.PathLike | None = None
) -> subprocess.CompletedProcess:
    """Run nrdiag with ``args``; raises CalledProcessError on a non-zero exit."""
    executable = ensure_binary_exists(config_dir)
    return subprocess.run(
        [str(executable), *args],
        env={"NEWRELIC_CLI_SUBPROCESS": "true"},
        check=True,
    )


def update_binary(config_dir: str | os.PathLike | None = None) -> bool:
    """Replace the binary when nrdiag reports it is out of date.

    Returns True when a new binary was installed.
    """
    try:
        run_diagnostics("-q", "-version", config_dir=config_dir)
    except subprocess.CalledProcessError as exc:
        if exc.returncode != 1:
            raise
        download_binary(config_dir)
        return True
    return False