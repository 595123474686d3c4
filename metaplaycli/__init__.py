"""Helpers for tool checks, pod logs, local runs and deployment values of Metaplay game servers."""

__version__ = "0.1.0"

__all__ = [
    "deploy",
    "devrun",
    "devserver",
    "pod_logs",
    "tokens",
    "tooling",
]