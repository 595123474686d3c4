"""Arguments for building and running the game server .NET project locally."""

from __future__ import annotations

from collections.abc import Sequence


def dotnet_build_args() -> list[str]:
    """The 'dotnet' arguments that build the game server project."""
    return ["build"]


def dotnet_run_args(extra_args: Sequence[str] = ()) -> list[str]:
    """The 'dotnet' arguments that run the already built game server."""
    return ["run", "--no-build", *extra_args]