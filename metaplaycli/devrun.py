"""Arguments for running a built server Docker image locally."""

from __future__ import annotations

from collections.abc import Sequence

LATEST_LOCAL = "latest-local"


def dev_image_run_args(image: str, extra_args: Sequence[str] = ()) -> list[str]:
    """The 'docker' arguments that run the game server image locally."""
    return [
        "run",
        "--rm",
        "-e", "METAPLAY_ENVIRONMENT_FAMILY=Local",
        "-p=127.0.0.1:5550:5550",  # LiveOps Dashboard & admin API
        "-p=127.0.0.1:8585:8585",  # Health probe proxy
        "-p=127.0.0.1:8888:8888",  # SystemHttpServer
        "-p=127.0.0.1:9090:9090",  # Metrics
        image,
        "gameserver",
        "-AdminApiListenHost=0.0.0.0",
        "--Environment:EnableKeyboardInput=false",
        "--Environment:EnableSystemHttpServer=true",
        "--Environment:SystemHttpListenHost=0.0.0.0",
        "--AdminApi:WebRootPath=wwwroot",
        "--Database:Backend=Sqlite",
        "--Database:SqliteInMemory=true",
        *extra_args,
    ]


def resolve_local_image(image: str, local_images: Sequence[str]) -> str:
    """Resolve the image to run.

    'latest-local' picks the first of local_images (repo tags, newest first);
    any other non-empty name is returned as-is. Raises ValueError when no
    image is given or no local image exists for 'latest-local'.
    """
    if not image:
        raise ValueError("no docker image specified; give IMAGE:TAG or 'latest-local'")
    if image != LATEST_LOCAL:
        return image
    if not local_images:
        raise ValueError(
            "no docker images matching the project found locally; "
            "build an image first with 'metaplay build image'"
        )
    return local_images[0]