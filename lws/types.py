"""LeaderWorkerSet API types, group/version metadata and their JSON mapping."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

IntOrString = Union[int, str]

GROUP = "leaderworkerset.x-k8s.io"
VERSION = "v1"

EXCLUSIVE_KEY_ANNOTATION_KEY = "leaderworkerset.sigs.k8s.io/exclusive-topology"
SUB_GROUP_EXCLUSIVE_KEY_ANNOTATION_KEY = "leaderworkerset.sigs.k8s.io/subgroup-exclusive-topology"
SET_NAME_LABEL_KEY = "leaderworkerset.sigs.k8s.io/name"
GROUP_INDEX_LABEL_KEY = "leaderworkerset.sigs.k8s.io/group-index"
WORKER_INDEX_LABEL_KEY = "leaderworkerset.sigs.k8s.io/worker-index"
SIZE_ANNOTATION_KEY = "leaderworkerset.sigs.k8s.io/size"
REPLICAS_ANNOTATION_KEY = "leaderworkerset.sigs.k8s.io/replicas"
GROUP_UNIQUE_HASH_LABEL_KEY = "leaderworkerset.sigs.k8s.io/group-key"
LEADER_POD_NAME_ANNOTATION_KEY = "leaderworkerset.sigs.k8s.io/leader-name"
REVISION_KEY = "leaderworkerset.sigs.k8s.io/template-revision-hash"
LWS_LEADER_ADDRESS = "LWS_LEADER_ADDRESS"
LWS_GROUP_SIZE = "LWS_GROUP_SIZE"
SUB_GROUP_INDEX_LABEL_KEY = "leaderworkerset.sigs.k8s.io/subgroup-index"
SUB_GROUP_SIZE_ANNOTATION_KEY = "leaderworkerset.gke.io/subgroup-size"
SUB_GROUP_UNIQUE_HASH_LABEL_KEY = "leaderworkerset.sigs.k8s.io/subgroup-key"
SUBDOMAIN_POLICY_ANNOTATION_KEY = "leaderworkerset.sigs.k8s.io/subdomainPolicy"


@dataclass(frozen=True)
class GroupResource:
    """An API group together with a resource name."""

    group: str
    resource: str


@dataclass(frozen=True)
class GroupVersionKind:
    """An API group, version and kind."""

    group: str
    version: str
    kind: str


@dataclass(frozen=True)
class GroupVersionResource:
    """An API group, version and resource."""

    group: str
    version: str
    resource: str

    def group_resource(self) -> GroupResource:
        return GroupResource(self.group, self.resource)


@dataclass(frozen=True)
class GroupVersion:
    """An API group and version."""

    group: str
    version: str

    def with_kind(self, kind: str) -> GroupVersionKind:
        return GroupVersionKind(self.group, self.version, kind)

    def with_resource(self, resource: str) -> GroupVersionResource:
        return GroupVersionResource(self.group, self.version, resource)

    def __str__(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version


GROUP_VERSION = GroupVersion(GROUP, VERSION)
SCHEME_GROUP_VERSION = GROUP_VERSION
API_VERSION = str(GROUP_VERSION)


def resource(resource: str) -> GroupResource:
    """Return the group-qualified resource for this API group."""
    return GROUP_VERSION.with_resource(resource).group_resource()


class SubdomainPolicy(str, Enum):
    SHARED = "Shared"
    UNIQUE_PER_REPLICA = "UniquePerReplica"


class RolloutStrategyType(str, Enum):
    ROLLING_UPDATE = "RollingUpdate"


class RestartPolicyType(str, Enum):
    RECREATE_GROUP_ON_POD_RESTART = "RecreateGroupOnPodRestart"
    DEPRECATED_DEFAULT = "Default"
    NONE = "None"


class StartupPolicyType(str, Enum):
    LEADER_READY = "LeaderReady"
    LEADER_CREATED = "LeaderCreated"


class LeaderWorkerSetConditionType(str, Enum):
    AVAILABLE = "Available"
    PROGRESSING = "Progressing"
    UPGRADE_IN_PROGRESS = "UpgradeInProgress"


@dataclass
class SubGroupPolicy:
    """Policy applied when splitting each group into subgroups."""

    sub_group_size: int | None = None


@dataclass
class NetworkConfig:
    """Network configuration of the groups."""

    subdomain_policy: SubdomainPolicy | None = None


@dataclass
class RollingUpdateConfiguration:
    """Parameters of a rolling update."""

    max_unavailable: IntOrString = 1
    max_surge: IntOrString = 0


@dataclass
class RolloutStrategy:
    """Strategy used to update replicas when the template changes."""

    type: RolloutStrategyType = RolloutStrategyType.ROLLING_UPDATE
    rolling_update_configuration: RollingUpdateConfiguration | None = None


@dataclass
class LeaderWorkerTemplate:
    """Pod templates and sizing of one leader/worker group."""

    worker_template: dict[str, Any] = field(default_factory=dict)
    leader_template: dict[str, Any] | None = None
    size: int | None = 1
    restart_policy: RestartPolicyType | None = RestartPolicyType.RECREATE_GROUP_ON_POD_RESTART
    sub_group_policy: SubGroupPolicy | None = None


@dataclass
class LeaderWorkerSetSpec:
    """Desired state of a LeaderWorkerSet."""

    leader_worker_template: LeaderWorkerTemplate = field(default_factory=LeaderWorkerTemplate)
    replicas: int | None = 1
    rollout_strategy: RolloutStrategy = field(default_factory=RolloutStrategy)
    startup_policy: StartupPolicyType = StartupPolicyType.LEADER_CREATED
    network_config: NetworkConfig | None = None


@dataclass
class LeaderWorkerSetStatus:
    """Observed state of a LeaderWorkerSet."""

    conditions: list[dict[str, Any]] = field(default_factory=list)
    ready_replicas: int = 0
    updated_replicas: int = 0
    replicas: int = 0
    hpa_pod_selector: str = ""


@dataclass
class ObjectMeta:
    """Object metadata."""

    name: str = ""
    generate_name: str = ""
    namespace: str = ""
    uid: str = ""
    resource_version: str = ""
    generation: int = 0
    creation_timestamp: str | None = None
    deletion_timestamp: str | None = None
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    finalizers: list[str] = field(default_factory=list)
    owner_references: list[dict[str, Any]] = field(default_factory=list)


_META_FIELDS = (
    ("name", "name"),
    ("generate_name", "generateName"),
    ("namespace", "namespace"),
    ("uid", "uid"),
    ("resource_version", "resourceVersion"),
    ("generation", "generation"),
    ("creation_timestamp", "creationTimestamp"),
    ("deletion_timestamp", "deletionTimestamp"),
    ("labels", "labels"),
    ("annotations", "annotations"),
    ("finalizers", "finalizers"),
    ("owner_references", "ownerReferences"),
)


def _meta_to_dict(meta: ObjectMeta) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for attr, key in _META_FIELDS:
        value = getattr(meta, attr)
        if value:
            out[key] = dict(value) if isinstance(value, dict) else (
                list(value) if isinstance(value, list) else value
            )
    return out


def _meta_from_dict(data: dict[str, Any]) -> ObjectMeta:
    kwargs = {attr: data[key] for attr, key in _META_FIELDS if data.get(key) is not None}
    for attr in ("labels", "annotations"):
        if attr in kwargs:
            kwargs[attr] = dict(kwargs[attr])
    for attr in ("finalizers", "owner_references"):
        if attr in kwargs:
            kwargs[attr] = list(kwargs[attr])
    return ObjectMeta(**kwargs)


def _int_or_string(value: Any) -> IntOrString:
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise TypeError(f"expected an integer or a string, got {value!r}")
    return value


def _template_to_dict(tpl: LeaderWorkerTemplate) -> dict[str, Any]:
    out: dict[str, Any] = {}
    if tpl.leader_template is not None:
        out["leaderTemplate"] = tpl.leader_template
    out["workerTemplate"] = tpl.worker_template
    if tpl.size is not None:
        out["size"] = tpl.size
    if tpl.restart_policy:
        out["restartPolicy"] = tpl.restart_policy.value
    if tpl.sub_group_policy is not None:
        sub: dict[str, Any] = {}
        if tpl.sub_group_policy.sub_group_size is not None:
            sub["subGroupSize"] = tpl.sub_group_policy.sub_group_size
        out["subGroupPolicy"] = sub
    return out


def _template_from_dict(data: dict[str, Any]) -> LeaderWorkerTemplate:
    sub = data.get("subGroupPolicy")
    restart = data.get("restartPolicy")
    return LeaderWorkerTemplate(
        worker_template=dict(data.get("workerTemplate") or {}),
        leader_template=data.get("leaderTemplate"),
        size=data.get("size"),
        restart_policy=RestartPolicyType(restart) if restart else None,
        sub_group_policy=None if sub is None else SubGroupPolicy(sub.get("subGroupSize")),
    )


def _rollout_to_dict(strategy: RolloutStrategy) -> dict[str, Any]:
    out: dict[str, Any] = {"type": strategy.type.value}
    cfg = strategy.rolling_update_configuration
    if cfg is not None:
        out["rollingUpdateConfiguration"] = {
            "maxUnavailable": cfg.max_unavailable,
            "maxSurge": cfg.max_surge,
        }
    return out


def _rollout_from_dict(data: dict[str, Any]) -> RolloutStrategy:
    cfg = data.get("rollingUpdateConfiguration")
    rolling = None
    if cfg is not None:
        rolling = RollingUpdateConfiguration(
            max_unavailable=_int_or_string(cfg.get("maxUnavailable", 0)),
            max_surge=_int_or_string(cfg.get("maxSurge", 0)),
        )
    kind = data.get("type")
    return RolloutStrategy(
        type=RolloutStrategyType(kind) if kind else RolloutStrategyType.ROLLING_UPDATE,
        rolling_update_configuration=rolling,
    )


def _spec_to_dict(spec: LeaderWorkerSetSpec) -> dict[str, Any]:
    out: dict[str, Any] = {}
    if spec.replicas is not None:
        out["replicas"] = spec.replicas
    out["leaderWorkerTemplate"] = _template_to_dict(spec.leader_worker_template)
    out["rolloutStrategy"] = _rollout_to_dict(spec.rollout_strategy)
    out["startupPolicy"] = spec.startup_policy.value
    if spec.network_config is not None:
        policy = spec.network_config.subdomain_policy
        out["networkConfig"] = {"subdomainPolicy": policy.value if policy else None}
    return out


def _spec_from_dict(data: dict[str, Any]) -> LeaderWorkerSetSpec:
    network = data.get("networkConfig")
    network_config = None
    if network is not None:
        policy = network.get("subdomainPolicy")
        network_config = NetworkConfig(SubdomainPolicy(policy) if policy else None)
    startup = data.get("startupPolicy")
    return LeaderWorkerSetSpec(
        leader_worker_template=_template_from_dict(data.get("leaderWorkerTemplate") or {}),
        replicas=data.get("replicas"),
        rollout_strategy=_rollout_from_dict(data.get("rolloutStrategy") or {}),
        startup_policy=StartupPolicyType(startup) if startup else StartupPolicyType.LEADER_CREATED,
        network_config=network_config,
    )


def _status_to_dict(status: LeaderWorkerSetStatus) -> dict[str, Any]:
    out: dict[str, Any] = {}
    if status.conditions:
        out["conditions"] = [dict(c) for c in status.conditions]
    if status.ready_replicas:
        out["readyReplicas"] = status.ready_replicas
    if status.updated_replicas:
        out["updatedReplicas"] = status.updated_replicas
    if status.replicas:
        out["replicas"] = status.replicas
    if status.hpa_pod_selector:
        out["hpaPodSelector"] = status.hpa_pod_selector
    return out


def _status_from_dict(data: dict[str, Any]) -> LeaderWorkerSetStatus:
    return LeaderWorkerSetStatus(
        conditions=[dict(c) for c in data.get("conditions") or []],
        ready_replicas=data.get("readyReplicas", 0),
        updated_replicas=data.get("updatedReplicas", 0),
        replicas=data.get("replicas", 0),
        hpa_pod_selector=data.get("hpaPodSelector", ""),
    )


@dataclass
class LeaderWorkerSet:
    """A set of leader/worker pod groups."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: LeaderWorkerSetSpec = field(default_factory=LeaderWorkerSetSpec)
    status: LeaderWorkerSetStatus = field(default_factory=LeaderWorkerSetStatus)
    api_version: str = API_VERSION
    kind: str = "LeaderWorkerSet"

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.kind:
            out["kind"] = self.kind
        if self.api_version:
            out["apiVersion"] = self.api_version
        out["metadata"] = _meta_to_dict(self.metadata)
        out["spec"] = _spec_to_dict(self.spec)
        out["status"] = _status_to_dict(self.status)
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LeaderWorkerSet:
        return cls(
            metadata=_meta_from_dict(data.get("metadata") or {}),
            spec=_spec_from_dict(data.get("spec") or {}),
            status=_status_from_dict(data.get("status") or {}),
            api_version=data.get("apiVersion", ""),
            kind=data.get("kind", ""),
        )


@dataclass
class LeaderWorkerSetList:
    """A list of LeaderWorkerSets."""

    items: list[LeaderWorkerSet] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    api_version: str = API_VERSION
    kind: str = "LeaderWorkerSetList"

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.kind:
            out["kind"] = self.kind
        if self.api_version:
            out["apiVersion"] = self.api_version
        out["metadata"] = dict(self.metadata)
        out["items"] = [item.to_dict() for item in self.items]
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LeaderWorkerSetList:
        return cls(
            items=[LeaderWorkerSet.from_dict(item) for item in data.get("items") or []],
            metadata=dict(data.get("metadata") or {}),
            api_version=data.get("apiVersion", ""),
            kind=data.get("kind", ""),
        )