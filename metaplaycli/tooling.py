"""Checks for locally installed developer tools and helpers for running child processes."""

from __future__ import annotations

import contextlib
import logging
import signal
import subprocess
import sys
import threading
from collections.abc import Iterator, Sequence
from os import PathLike
from typing import Union

from packaging.version import InvalidVersion, Version

log = logging.getLogger(__name__)

VersionLike = Union[Version, str]
PathArg = Union[str, "PathLike[str]"]


class ToolVersionError(Exception):
    """A required tool is missing, unparseable or at an unsupported version."""


_DOTNET_INSTRUCTIONS = {
    "windows": (
        "\n.NET SDK is missing or outdated. Please install or upgrade .NET SDK:\n"
        "1. Go to the official .NET download page.\n"
        "2. Download and run the installer for desired .NET SDK version.\n"
        "3. Follow the installation steps and ensure 'dotnet' is added to your PATH.\n"
    ),
    "darwin": (
        "\n.NET SDK is missing or outdated. Please install or upgrade .NET SDK:\n"
        "1. Open a terminal.\n"
        "2. Install Homebrew (if not installed).\n"
        "3. Run: brew install --cask dotnet-sdk\n"
        '4. Add .NET SDK to your PATH by running: export PATH="$PATH:/usr/local/share/dotnet"\n'
        "5. Verify installation with: dotnet --version\n"
    ),
    "linux": (
        ".NET SDK is missing or outdated.\n"
        "Please install or upgrade .NET SDK using the official .NET installation guide for Linux."
    ),
}

_DOTNET_DEFAULT_INSTRUCTIONS = (
    "\n.NET SDK is missing or outdated. Please install or upgrade .NET SDK:\n"
    "Visit the official .NET download page for instructions specific to your operating system.\n"
)


def _current_platform_name() -> str:
    if sys.platform.startswith("win"):
        return "windows"
    if sys.platform == "darwin":
        return "darwin"
    if sys.platform.startswith("linux"):
        return "linux"
    return sys.platform


def dotnet_install_instructions(platform_name: str | None = None) -> str:
    """Installation instructions for the .NET SDK on the given platform ('windows', 'darwin', 'linux')."""
    if platform_name is None:
        platform_name = _current_platform_name()
    return _DOTNET_INSTRUCTIONS.get(platform_name, _DOTNET_DEFAULT_INSTRUCTIONS)


def parse_tool_version(text: str) -> Version:
    """Parse a tool's version output, eg, 'v22.13.1\\n'."""
    cleaned = text.strip()
    if cleaned.startswith("v"):
        cleaned = cleaned[1:]
    try:
        return Version(cleaned)
    except InvalidVersion as exc:
        raise ToolVersionError(f"failed to parse version from '{cleaned}': {exc}") from exc


def _as_version(value: VersionLike) -> Version:
    return value if isinstance(value, Version) else parse_tool_version(value)


def _segments(version: Version) -> tuple[int, int, int]:
    major, minor, patch = (tuple(version.release) + (0, 0, 0))[:3]
    return major, minor, patch


def check_tool_version(tool_name: str, installed: VersionLike, recommended: VersionLike) -> str:
    """Compare an installed tool version against the recommended one.

    Raises ToolVersionError if the installed version is older, or newer by major
    version. Otherwise logs and returns a message describing the match.
    """
    installed_v = _as_version(installed)
    recommended_v = _as_version(recommended)

    if installed_v < recommended_v:
        raise ToolVersionError(
            f"{tool_name} version {recommended_v} or higher is required, "
            f"but found {installed_v}. Please upgrade {tool_name}!"
        )

    inst_major, inst_minor, inst_patch = _segments(installed_v)
    req_major, req_minor, req_patch = _segments(recommended_v)

    if inst_major > req_major:
        raise ToolVersionError(
            f"installed {tool_name} version {installed_v} is too recent; "
            f"use version v{req_major}.x.y"
        )
    if inst_minor > req_minor:
        message = (
            f"Installed {tool_name} version {installed_v} minor version is more recent than "
            f"recommended; if you encounter any problems, downgrade to version v{req_major}.{req_minor}.x"
        )
        log.warning(message)
    elif inst_patch > req_patch:
        message = (
            f"Installed {tool_name} version {installed_v} is more recent than "
            f"recommended version {recommended_v}"
        )
        log.info(message)
    else:
        message = f"Installed {tool_name} version: {installed_v} matches the recommended version exactly"
        log.info(message)
    return message


def _version_output(binary: str) -> str | None:
    """Run '<binary> --version' and return its combined output, or None on failure."""
    try:
        result = subprocess.run(
            [binary, "--version"],
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            check=False,
        )
    except OSError:
        return None
    if result.returncode != 0:
        return None
    return result.stdout


def check_node_version(recommended: VersionLike) -> str:
    """Check that Node.js is installed and matches the recommended version."""
    output = _version_output("node")
    if output is None:
        raise ToolVersionError(
            "Node.js is not installed or not in PATH. Please install Node.js."
        )
    return check_tool_version("Node.js", parse_tool_version(output), recommended)


def check_pnpm_version(recommended: VersionLike) -> str:
    """Check that pnpm is installed and matches the recommended version."""
    output = _version_output("pnpm")
    if output is None:
        raise ToolVersionError("pnpm is not installed or not in PATH. Please install pnpm.")
    return check_tool_version("pnpm", parse_tool_version(output), recommended)


def check_dotnet_sdk_version(required: VersionLike) -> Version:
    """Check that a recent enough .NET SDK is installed; return its version."""
    required_v = _as_version(required)
    output = _version_output("dotnet")
    if output is None:
        raise ToolVersionError(
            ".NET SDK is not installed or not in PATH.\n" + dotnet_install_instructions()
        )

    installed = parse_tool_version(output)
    log.info(".NET SDK detected: %s [minimum: %s]", installed, required_v)

    if installed < required_v:
        raise ToolVersionError(
            f".NET SDK version {required_v} or higher is required, but found {installed}.\n"
            f"{dotnet_install_instructions()}"
        )
    return installed


def exec_child_task(working_dir: PathArg, binary: str, args: Sequence[str]) -> None:
    """Run a child process to completion with output going to this process's output."""
    log.info("Executing '%s %s'...", binary, " ".join(args))
    try:
        subprocess.run([binary, *args], cwd=working_dir, check=True)
    except (OSError, subprocess.CalledProcessError) as exc:
        raise RuntimeError(f"failed to build the project: {exc}") from exc


@contextlib.contextmanager
def _forward_signals(proc: subprocess.Popen) -> Iterator[None]:
    """Forward SIGINT and SIGTERM to the child while the block runs."""
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    def forward(signum, _frame):
        if proc.poll() is None:
            with contextlib.suppress(OSError):
                proc.send_signal(signum)

    previous = {}
    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(ValueError, OSError):
            previous[sig] = signal.signal(sig, forward)
    try:
        yield
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


def exec_child_interactive(working_dir: PathArg, binary: str, args: Sequence[str]) -> None:
    """Run a child process with stdin/stdout/stderr and interrupt signals forwarded to it."""
    try:
        proc = subprocess.Popen([binary, *args], cwd=working_dir)
    except OSError as exc:
        raise RuntimeError(f"failed to start the binary: {exc}") from exc

    with _forward_signals(proc):
        returncode = proc.wait()

    if returncode != 0:
        raise RuntimeError(f"binary exited with error: exit status {returncode}")