"""Resolution of the values used when deploying a game server into a cloud environment."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Mapping

from packaging.specifiers import InvalidSpecifier, SpecifierSet

log = logging.getLogger(__name__)

GAME_SERVER_CHART_NAME = "metaplay-gameserver"
GAME_SERVER_POD_LABEL_SELECTOR = "app=metaplay-server"
DEFAULT_HELM_CHART_REPOSITORY = "https://charts.metaplay.dev"
MIN_GAME_SERVER_CHART_VERSION = "0.7.0"
LATEST_PRERELEASE = "latest-prerelease"

LABEL_SDK_VERSION = "io.metaplay.sdk_version"
LABEL_COMMIT_ID = "io.metaplay.commit_id"
LABEL_BUILD_NUMBER = "io.metaplay.build_number"

BADGE_UPDATE_EXISTING = "[update existing]"
BADGE_DEFAULT = "[default]"

_CONSTRAINT = re.compile(r"^(?P<op>~>|>=|<=|!=|==|=|>|<)?\s*v?(?P<version>\d[0-9A-Za-z.+-]*)$")


def coalesce_string(*args: str) -> str:
    """Return the first non-empty string among the arguments, or ''."""
    return next((value for value in args if value), "")


@dataclass(frozen=True)
class ImageLabels:
    """The Metaplay metadata labels of a game server docker image."""

    sdk_version: str
    commit_id: str
    build_number: str


def _require_label(labels: Mapping[str, str], name: str) -> str:
    try:
        value = labels[name]
    except KeyError:
        raise ValueError(
            f"invalid docker image: required label '{name}' not found in the image metadata"
        ) from None
    return value


def read_image_labels(labels: Mapping[str, str] | None) -> ImageLabels:
    """Extract the SDK version, commit ID and build number from docker image labels.

    Raises ValueError if any of the required labels is missing.
    """
    labels = labels or {}
    sdk_version = _require_label(labels, LABEL_SDK_VERSION)
    log.debug("Metaplay SDK version found in the image: %s", sdk_version)
    commit_id = _require_label(labels, LABEL_COMMIT_ID)
    log.debug("Commit ID found in the image: %s", commit_id)
    build_number = _require_label(labels, LABEL_BUILD_NUMBER)
    log.debug("Build number found in the image: %s", build_number)
    return ImageLabels(sdk_version=sdk_version, commit_id=commit_id, build_number=build_number)


def default_shard_config(production_like: bool) -> list[dict[str, Any]]:
    """Default shard configuration: larger requests for production and staging."""
    if production_like:
        requests = {"cpu": "1500m", "memory": "3000M"}
    else:
        requests = {"cpu": "250m", "memory": "500Mi"}
    return [{"name": "all", "singleton": True, "requests": requests}]


def game_server_helm_values(
    environment_name: str,
    environment_family: str,
    runtime_options_file: str,
    sdk_version: str,
    image_tag: str,
    production_like: bool,
) -> dict[str, Any]:
    """Default Helm values for a game server deployment; user values files override them."""
    return {
        "environment": environment_name,
        "environmentFamily": environment_family,
        "config": {
            "files": [
                "./Config/Options.base.yaml",
                runtime_options_file,
            ],
        },
        "tenant": {"discoveryEnabled": True},
        "sdk": {"version": sdk_version},
        "image": {"tag": image_tag},
        "shards": default_shard_config(production_like),
    }


def resolve_release_name(
    flag_name: str,
    existing_name: str | None,
    environment_id: str,
    suffix: str = "gameserver",
) -> tuple[str, str]:
    """Resolve the Helm release name and a badge describing where it came from.

    An explicit name wins (with no badge); otherwise an existing release's name
    is reused, or '<environmentID>-<suffix>' is used for a new deployment.
    """
    if flag_name:
        return flag_name, ""
    if existing_name:
        return existing_name, BADGE_UPDATE_EXISTING
    return f"{environment_id}-{suffix}", BADGE_DEFAULT


def _to_specifier(part: str) -> str:
    match = _CONSTRAINT.match(part.strip())
    if match is None:
        raise ValueError(f"malformed constraint: {part.strip()!r}")
    op = match["op"] or "=="
    version = match["version"]
    if op == "=":
        op = "=="
    elif op == "~>":
        op = "~="
        if "." not in version:
            raise ValueError(f"malformed constraint: {part.strip()!r}")
    return f"{op}{version}"


def resolve_chart_version(config_version: str, flag_version: str) -> SpecifierSet | None:
    """Resolve the accepted Helm chart versions from the project config and the override flag.

    Returns None when any version is accepted ('latest-prerelease'). Raises
    ValueError on a version constraint that cannot be parsed.
    """
    chart_version = coalesce_string(flag_version, config_version)
    if chart_version == LATEST_PRERELEASE:
        return None
    try:
        parts = chart_version.split(",")
        specifiers = SpecifierSet(",".join(_to_specifier(part) for part in parts))
    except (ValueError, InvalidSpecifier) as exc:
        raise ValueError(f"invalid Helm chart version: {exc}") from exc
    log.debug("Accepted Helm chart semver constraints: %s", specifiers)
    return specifiers