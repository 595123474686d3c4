# metaplaycli

Building blocks for the everyday workflow around a Metaplay game server
project. It checks local tool versions, runs child processes, reads pod logs
in timestamp order, builds the arguments for running the server locally, and
prepares the values for a Helm deployment.

The package is a library. Every helper is a plain function or a small
dataclass that you call from your own scripts or automation.

## Modules

| Module | What it does |
| --- | --- |
| `metaplaycli.tokens` | `decode_jwt` returns the claims of a JWT payload without verifying the signature. It returns `None` when the value does not have three parts. |
| `metaplaycli.tooling` | `parse_tool_version` and `check_tool_version` compare versions. `check_dotnet_sdk_version`, `check_node_version` and `check_pnpm_version` run `<tool> --version` and check the result. `dotnet_install_instructions` gives per-platform hints. `exec_child_task` and `exec_child_interactive` run child processes; the interactive one forwards SIGINT and SIGTERM. |
| `metaplaycli.pod_logs` | `parse_rfc3339` and `parse_log_line` parse timestamped Kubernetes log lines into `LogEntry` values. `read_log_lines` skips malformed lines and stops at a cutoff. `merge_in_time_order` and `aggregate_realtime` merge several sources into `(source index, entry)` pairs. `resolve_since` validates the since options. `right_pad`, `longest_pod_prefix` and `pod_prefixes` align the pod name prefixes. |
| `metaplaycli.devrun` | `dev_image_run_args` builds the `docker run` arguments that run a server image locally. `resolve_local_image` picks the image to run and handles `latest-local`. |
| `metaplaycli.devserver` | `dotnet_build_args` and `dotnet_run_args` build the `dotnet` arguments for the game server. |
| `metaplaycli.deploy` | `read_image_labels` reads the required image labels into `ImageLabels`. `resolve_release_name` chooses the Helm release name and its badge. `resolve_chart_version` turns a chart version constraint into a `packaging` `SpecifierSet`, or `None` for `latest-prerelease`. `default_shard_config` and `game_server_helm_values` build the default Helm values. `coalesce_string` returns the first non-empty string. |

## Examples

Read the claims of a token:

```python
from metaplaycli.tokens import decode_jwt

claims = decode_jwt(access_token)  # None if the value is not a three-part JWT
```

Check the local toolchain before building:

```python
from metaplaycli.tooling import ToolVersionError, check_dotnet_sdk_version, check_tool_version

try:
    check_dotnet_sdk_version("8.0.100")
except ToolVersionError as err:
    print(err)

check_tool_version("pnpm", "9.1.0", "9.0.0")  # logs a warning and returns the message
```

Merge logs from several pods in timestamp order:

```python
from metaplaycli.pod_logs import merge_in_time_order, pod_prefixes, read_log_lines

prefixes = pod_prefixes(["service-0", "all-0"])
for index, entry in merge_in_time_order([
    read_log_lines(pod_a_lines, cutoff),
    read_log_lines(pod_b_lines, cutoff),
]):
    print(f"{prefixes[index]}{entry.message}")
```

Run a server image or the game server locally:

```python
from metaplaycli.devrun import dev_image_run_args, resolve_local_image
from metaplaycli.devserver import dotnet_run_args

image = resolve_local_image("latest-local", ["mygame:1700000000"])
docker_args = dev_image_run_args(image, ["--name", "local-server"])
dotnet_args = dotnet_run_args(["-LogLevel=Warning"])
```

Choose values for a deployment:

```python
from metaplaycli.deploy import coalesce_string, resolve_chart_version, resolve_release_name

repo = coalesce_string("", "https://charts.example.com")
name, badge = resolve_release_name("", None, "tough-falcons", "gameserver")
# ("tough-falcons-gameserver", "[default]")
accepted = resolve_chart_version(">=0.7.0", "")
```

## Errors

Where a check fails, the helpers raise an exception that explains why. They
never exit the process.

- `ToolVersionError` for a missing tool, a version that cannot be parsed, or a
  version that is too old or too recent by major version.
- `ValueError` for a malformed token payload or log timestamp, conflicting
  since options, a missing image label, a bad chart version constraint, or no
  image to run.
- `RuntimeError` when a child process cannot start or exits with an error.

## What this package does not do

There is no command-line program. The package does not build Docker images,
talk to Kubernetes, Helm or the cloud portal, sign in or store credentials,
or collect CPU profiles and heap dumps from running servers. It gives you the
pieces above to use in your own tooling.