# lws

Python models and tools for the **LeaderWorkerSet** API
(`leaderworkerset.x-k8s.io/v1`): a workload in which each replica is a group
made of one leader pod and several worker pods.

The package has three parts:

* `lws.types` – the API objects (`LeaderWorkerSet`, its spec and status,
  policies and enums, group/version helpers) with conversion to and from
  plain dictionaries in the API's JSON shape.
* `lws.apply_specs` and `lws.apply_config` – chainable, declarative apply
  configurations for server-side apply, where only the fields you set are
  written out.
* Three small command-line tools for running llama.cpp across a group:
  a blob server (`lws.blobserver`), a leader launcher
  (`lws.leader_launcher`) and an interactive chat client (`lws.clichat`).

It has no runtime dependencies beyond the standard library.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## API objects

```python
from lws.types import LeaderWorkerSet, resource

lws_obj = LeaderWorkerSet.from_dict({
    "apiVersion": "leaderworkerset.x-k8s.io/v1",
    "kind": "LeaderWorkerSet",
    "metadata": {"name": "vllm", "namespace": "default"},
    "spec": {
        "replicas": 2,
        "leaderWorkerTemplate": {
            "size": 4,
            "workerTemplate": {"spec": {"containers": []}},
        },
    },
})

data = lws_obj.to_dict()             # back to the API's JSON shape
print(resource("leaderworkersets"))  # GroupResource for this API group
```

The enums (`SubdomainPolicy`, `RolloutStrategyType`, `RestartPolicyType`,
`StartupPolicyType`, `LeaderWorkerSetConditionType`) carry the same string
values the API accepts; for example `RestartPolicyType.RECREATE_GROUP_ON_POD_RESTART`
is `"RecreateGroupOnPodRestart"`. Lists of objects are handled by
`LeaderWorkerSetList`, which also has `to_dict` and `from_dict`.

`GroupVersion`, `GroupVersionKind`, `GroupVersionResource` and
`GroupResource` describe API coordinates; `GROUP_VERSION.with_kind(...)` and
`GROUP_VERSION.with_resource(...)` build them for this API group. The label
and annotation keys used on pods (for example `SET_NAME_LABEL_KEY`,
`WORKER_INDEX_LABEL_KEY`) and the environment variable names
`LWS_LEADER_ADDRESS` and `LWS_GROUP_SIZE` are module constants.

## Apply configurations

Each builder starts empty and each `with_*` method sets one field and returns
the builder, so calls can be chained. `to_dict()` produces only what was set.

```python
from lws.apply_config import leader_worker_set
from lws.apply_specs import (
    leader_worker_set_spec,
    leader_worker_template,
    rollout_strategy,
    rolling_update_configuration,
    sub_group_policy,
)

config = (
    leader_worker_set("vllm", "default")
    .with_labels({"app": "vllm"})
    .with_spec(
        leader_worker_set_spec()
        .with_replicas(3)
        .with_leader_worker_template(
            leader_worker_template()
            .with_size(4)
            .with_sub_group_policy(sub_group_policy().with_sub_group_size(2))
        )
        .with_rollout_strategy(
            rollout_strategy()
            .with_type("RollingUpdate")
            .with_rolling_update_configuration(
                rolling_update_configuration()
                .with_max_unavailable(1)
                .with_max_surge("10%")
            )
        )
    )
)

body = config.to_dict()
```

`leader_worker_set(name, namespace)` fills in the kind and `apiVersion`
already. Enum-valued fields accept either the enum or its string value and
reject anything else with `ValueError`; `max_unavailable` and `max_surge`
take an integer or a string and raise `TypeError` otherwise. Labels and
annotations given in several calls are merged, later keys winning; owner
references, finalizers and status conditions given in several calls are
appended, and a `None` among owner references or conditions raises
`ValueError`. Timestamps may be given as `datetime` objects (written in UTC
as `YYYY-MM-DDTHH:MM:SSZ`) or as strings.

`for_kind(kind)` returns a fresh, empty apply configuration for a known
`GroupVersionKind` of this API group, or `None` for any other.

## Command-line tools

### `lws-blobserver`

Serves files over HTTP on port 9999 from `~/.cache/blobserver/blobs`.
`GET /<hash>` returns the file of that name. A hash that is not present
locally is answered with a 302 redirect if one was given with
`--redirect HASH=URL` (the option may be repeated), and with 404 otherwise.
Paths with more than one segment get 404; other methods on a single-segment
path get 405.

```
lws-blobserver --redirect 0123abcd=https://downloads.example.com/model.gguf
```

### `lws-llamacpp-leader`

Runs on the leader pod of a group. It reads the group size from
`LWS_GROUP_SIZE` (or `--lws-size`), the leader's address from
`LWS_LEADER_ADDRESS` and the model path from `LLM_MODEL` (or `--llm-model`),
resolves every worker's host name to an IP address (up to ten attempts,
three seconds apart), and starts `/llama-server` with `--host 0.0.0.0` and
`--rpc` pointing at the workers on port 50052. Any further arguments are
passed through to the server. It exits with status 1 if a lookup fails or
the server exits with an error.

```
lws-llamacpp-leader --llm-model /models/model.gguf
```

### `lws-clichat`

An interactive chat client for a llama.cpp server. The endpoint is taken
from `--llm-endpoint`, else `LLM_ENDPOINT`, else `http://127.0.0.1:8080`.
Each line you type is wrapped in a chat template with a fixed system prompt,
sent to `/completion`, and the reply is streamed back as it is generated;
`--user` sends a first prompt without waiting for input. End the session
with end-of-file (Ctrl-D). `-v 2` turns on debug logging of requests and
responses.

```
lws-clichat --llm-endpoint http://localhost:8080 --user "Hello"
```

`LlamaCppClient`, `CompletionRequest`, `CompletionResponse` and
`parse_stream` can also be used from Python.

## What this package does not do

It models the LeaderWorkerSet objects but does not manage them: there is no
controller that creates pods or groups, no admission webhooks, no
certificate handling and no client that talks to a Kubernetes API server.
The apply configurations produce request bodies; sending them is up to you.
The blob server only serves and redirects; it does not download or cache
blobs itself.