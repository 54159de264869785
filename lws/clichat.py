"""Interactive command-line chat against a llama.cpp completion endpoint."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import dataclass, field, fields
from typing import Any, Iterable, Iterator
from urllib.error import HTTPError, URLError
from urllib.parse import urlsplit, urlunsplit
from urllib.request import Request, urlopen

log = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "http://127.0.0.1:8080"
SYSTEM_PROMPT = "You are a helpful AI assistant.  Answer concisely and directly."
_PROMPT_TEMPLATE = (
    "\n"
    "\t\t<|begin_of_text|><|start_header_id|>system<|end_header_id|>\n"
    "\t\t\n"
    "\t\t{system_prompt}<|eot_id|><|start_header_id|>user<|end_header_id|>\n"
    "\t\t\n"
    "\t\t{prompt}<|eot_id|><|start_header_id|>assistant<|end_header_id|>\n"
    "\t\t"
)

# Fields left out of the JSON body when they hold their zero value.
_OMIT_EMPTY = frozenset({
    "prompt", "min_p", "stop", "mirostat_tau", "mirostat_eta", "grammar",
    "json_schema", "seed", "n_probs", "id_slot",
})


class ChatError(Exception):
    """Raised when talking to the completion endpoint fails."""


@dataclass
class CompletionRequest:
    """Body of a completion request; field names are the wire names."""

    prompt: str = ""
    temperature: float = 0.0
    top_k: int = 0
    top_p: float = 0.0
    min_p: float = 0.0
    n_predict: int | None = None
    n_keep: int = 0
    stream: bool = False
    stop: list[str] = field(default_factory=list)
    tfs_z: float = 0.0
    typical_p: float = 0.0
    repeat_penalty: float = 0.0
    repeat_last_n: int = 0
    penalize_nl: bool = False
    presence_penalty: float = 0.0
    frequency_penalty: float = 0.0
    mirostat: int = 0
    mirostat_tau: float = 0.0
    mirostat_eta: float = 0.0
    grammar: str = ""
    json_schema: str = ""
    seed: int = 0
    n_probs: int = 0
    id_slot: int = 0
    cache_prompt: bool = False
    system_prompt: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "system_prompt":
                if value is None:
                    continue
            elif f.name in _OMIT_EMPTY and not value:
                continue
            out[f.name] = list(value) if isinstance(value, list) else value
        return out


def _get(data: dict[str, Any], key: str, default: Any) -> Any:
    value = data.get(key)
    return default if value is None else value


@dataclass
class CompletionResponse:
    """One completion result, or one streamed token."""

    content: str = ""
    stop: bool = False
    model: str = ""
    stopped_eos: bool = False
    stopped_limit: bool = False
    stopped_word: bool = False
    stopping_word: str = ""
    timings: dict[str, float] = field(default_factory=dict)
    tokens_cached: int = 0
    tokens_evaluated: int = 0
    truncated: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CompletionResponse:
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        return cls(
            content=_get(data, "content", ""),
            stop=_get(data, "stop", False),
            model=_get(data, "model", ""),
            stopped_eos=_get(data, "stopped_eos", False),
            stopped_limit=_get(data, "stopped_limit", False),
            stopped_word=_get(data, "stopped_word", False),
            stopping_word=_get(data, "stopping_word", ""),
            timings=dict(_get(data, "timings", {})),
            tokens_cached=_get(data, "tokens_cached", 0),
            tokens_evaluated=_get(data, "tokens_evaluated", 0),
            truncated=_get(data, "truncated", False),
        )


def parse_stream(lines: Iterable[bytes | str]) -> Iterator[CompletionResponse]:
    """Yield the responses of a streamed completion until one says stop."""
    for raw in lines:
        if isinstance(raw, str):
            raw = raw.encode()
        if not raw.endswith(b"\n"):
            break
        line = raw.strip()
        if not line:
            continue
        log.debug("response is %s", line.decode(errors="replace"))
        if not line.startswith(b"data: "):
            raise ChatError(f"unexpected response line: {json.dumps(line.decode(errors='replace'))}")
        try:
            response = CompletionResponse.from_dict(json.loads(line[5:]))
        except ValueError as exc:
            raise ChatError(f"unmarshalling response body: {exc}") from exc
        yield response
        if response.stop:
            return
    raise ChatError("reading completion response: EOF")


def build_prompt(user_says: str) -> str:
    """Wrap the user's text in the chat template with the system prompt."""
    prompt = _PROMPT_TEMPLATE.replace("{system_prompt}", SYSTEM_PROMPT)
    return prompt.replace("{prompt}", user_says)


def _completion_endpoint(base_url: str) -> str:
    parts = urlsplit(base_url)
    return urlunsplit(parts._replace(path=parts.path.rstrip("/") + "/completion"))


@dataclass
class LlamaCppClient:
    """Client of a llama.cpp server's completion endpoint."""

    base_url: str
    timeout: float | None = None

    def _post(self, url: str, request: CompletionRequest):
        body = json.dumps(request.to_dict()).encode()
        http_request = Request(url, data=body, method="POST",
                               headers={"Content-Type": "application/json"})
        log.debug("sending request POST %s: %s", url, body.decode())
        try:
            return urlopen(http_request, timeout=self.timeout)
        except HTTPError as exc:
            return exc
        except URLError as exc:
            raise ChatError(f"making HTTP request: {exc.reason}") from exc

    def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Send a non-streaming completion request and return its result."""
        url = _completion_endpoint(self.base_url)
        try:
            with self._post(url, request) as resp:
                if resp.status != 200:
                    raise ChatError(f"unexpected status code from POST {url}: {resp.status} {resp.reason}")
                body = resp.read()
        except ChatError as exc:
            raise ChatError(f"calling llama.cpp completion: {exc}") from exc
        log.debug("response is %s", body.decode(errors="replace"))
        try:
            return CompletionResponse.from_dict(json.loads(body))
        except ValueError as exc:
            raise ChatError(f"calling llama.cpp completion: unmarshalling response body: {exc}") from exc

    def complete_streaming(self, request: CompletionRequest) -> Iterator[CompletionResponse]:
        """Send a streaming completion request and yield each response."""
        url = _completion_endpoint(self.base_url)
        with self._post(url, request) as resp:
            if resp.status != 200:
                raise ChatError(
                    f"unexpected status code from completion request: {resp.status} {resp.reason}"
                )
            yield from parse_stream(resp)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="clichat")
    parser.add_argument("-llm-endpoint", "--llm-endpoint", dest="llm_endpoint",
                        default=os.environ.get("LLM_ENDPOINT") or DEFAULT_ENDPOINT,
                        help="llama.cpp endpoint to connect to")
    parser.add_argument("-user", "--user", dest="user", default="", help="Initial prompt to use")
    parser.add_argument("-v", "--v", dest="verbosity", type=int, default=0, help="log verbosity")
    opts = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if opts.verbosity >= 2 else logging.WARNING)

    client = LlamaCppClient(opts.llm_endpoint)
    user_says = opts.user
    while True:
        if not user_says:
            print("\n> ", end="", flush=True)
            line = sys.stdin.readline()
            if not line.endswith("\n"):
                break
            user_says = line

        request = CompletionRequest(prompt=build_prompt(user_says), stream=True, n_predict=1024)
        try:
            for response in client.complete_streaming(request):
                sys.stdout.write(response.content)
                sys.stdout.flush()
        except (ChatError, OSError) as exc:
            print(f"generating with llama.cpp: {exc}", file=sys.stderr)
            return 1
        user_says = ""
    return 0