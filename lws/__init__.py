"""LeaderWorkerSet API types, apply configurations and llama.cpp group tools."""

__version__ = "0.1.0"

__all__ = [
    "types",
    "apply_specs",
    "apply_config",
    "blobserver",
    "leader_launcher",
    "clichat",
]