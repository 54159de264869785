"""Start the inference server on a group leader, pointing it at its workers."""

from __future__ import annotations

import argparse
import json
import logging
import os
import re
import socket
import subprocess
import sys
import time
from typing import Iterable, Mapping

from lws.types import LWS_GROUP_SIZE, LWS_LEADER_ADDRESS

log = logging.getLogger(__name__)

RPC_PORT = 50052
SERVER_BINARY = "/llama-server"


class LaunchError(Exception):
    """Raised when the leader cannot prepare or run the server."""


def group_size_from_env(env: Mapping[str, str] | None = None) -> int:
    """Return the group size from the environment, 1 when it is not set."""
    env = os.environ if env is None else env
    raw = env.get(LWS_GROUP_SIZE, "")
    if not raw:
        return 1
    if not re.fullmatch(r"[+-]?[0-9]+", raw):
        raise ValueError(f"parsing {LWS_GROUP_SIZE}={json.dumps(raw)}, expected integer")
    return int(raw)


def worker_hosts(leader_address: str, size: int) -> list[str]:
    """Return the host names of workers 1..size-1 of the leader's group."""
    service, *rest = leader_address.split(".")
    domain = ".".join(rest)
    return [f"{service}-{index}.{domain}" for index in range(1, size)]


def resolve_host(host: str, max_attempts: int = 10, delay: float = 3.0) -> str:
    """Resolve host to its first IP address, retrying failed lookups."""
    attempt = 0
    while True:
        attempt += 1
        try:
            infos = socket.getaddrinfo(host, None)
        except OSError as exc:
            if attempt >= max_attempts:
                raise LaunchError(f"looking up host {json.dumps(host)}: {exc}") from exc
            log.warning("retrying lookup of host %r: %s", host, exc)
            time.sleep(delay)
            continue
        ips = list(dict.fromkeys(info[4][0] for info in infos))
        if not ips:
            raise LaunchError(f"host {json.dumps(host)} resolved, but did not return IPs")
        log.info("resolved host %r to %s", host, ips)
        return ips[0]


def build_server_args(model: str, rpc_hosts: Iterable[str], extra: Iterable[str]) -> list[str]:
    """Return the server's command-line arguments."""
    return ["--model", model, "--host", "0.0.0.0", "--rpc", ",".join(rpc_hosts), *extra]


def _describe_exit(returncode: int) -> str:
    if returncode < 0:
        return f"signal: {-returncode}"
    return f"exit status {returncode}"


def main(argv: list[str] | None = None) -> int:
    env = os.environ
    try:
        default_size = group_size_from_env(env)
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1

    parser = argparse.ArgumentParser(prog="llamacpp-leader")
    parser.add_argument("-lws-size", "--lws-size", dest="lws_size", type=int, default=default_size,
                        help="number of LeaderWorkerSet workers")
    parser.add_argument("-llm-model", "--llm-model", dest="llm_model", default=env.get("LLM_MODEL", ""),
                        help="path to LLM model")
    parser.add_argument("-v", "--v", dest="verbosity", type=int, default=0, help="log verbosity")
    parser.add_argument("args", nargs=argparse.REMAINDER, help="extra server arguments")
    opts = parser.parse_args(argv)
    extra = opts.args[1:] if opts.args[:1] == ["--"] else opts.args

    logging.basicConfig(level=logging.DEBUG if opts.verbosity >= 2 else logging.INFO)

    leader_address = env.get(LWS_LEADER_ADDRESS, "")
    try:
        rpc_hosts = [
            f"{resolve_host(host)}:{RPC_PORT}" for host in worker_hosts(leader_address, opts.lws_size)
        ]
    except LaunchError as exc:
        print(exc, file=sys.stderr)
        return 1

    args = build_server_args(opts.llm_model, rpc_hosts, extra)
    log.info("starting llama-server with args: %s", args)

    try:
        process = subprocess.Popen([SERVER_BINARY, *args])
    except OSError as exc:
        print(f"starting llama-server: {exc}", file=sys.stderr)
        return 1

    returncode = process.wait()
    if returncode != 0:
        print(f"llama-server exited with error: {_describe_exit(returncode)}", file=sys.stderr)
        return 1
    return 0