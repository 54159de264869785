"""Declarative apply configuration of a whole LeaderWorkerSet object.

Also maps a group/version/kind to a fresh apply configuration of that kind.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Union

from lws.apply_specs import (
    LeaderWorkerSetSpecApplyConfiguration,
    LeaderWorkerSetStatusApplyConfiguration,
    LeaderWorkerTemplateApplyConfiguration,
    NetworkConfigApplyConfiguration,
    RollingUpdateConfigurationApplyConfiguration,
    RolloutStrategyApplyConfiguration,
    SubGroupPolicyApplyConfiguration,
)
from lws.types import API_VERSION, SCHEME_GROUP_VERSION, GroupVersionKind

Timestamp = Union[datetime, str]


def _format_time(value: Timestamp) -> str:
    if isinstance(value, str):
        return value
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass
class ObjectMetaApplyConfiguration:
    """Apply configuration of object metadata; unset fields are None."""

    name: str | None = None
    generate_name: str | None = None
    namespace: str | None = None
    uid: str | None = None
    resource_version: str | None = None
    generation: int | None = None
    creation_timestamp: Timestamp | None = None
    deletion_timestamp: Timestamp | None = None
    deletion_grace_period_seconds: int | None = None
    labels: dict[str, str] | None = None
    annotations: dict[str, str] | None = None
    owner_references: list[dict[str, Any]] = field(default_factory=list)
    finalizers: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        pairs: dict[str, Any] = {
            "name": self.name,
            "generateName": self.generate_name,
            "namespace": self.namespace,
            "uid": self.uid,
            "resourceVersion": self.resource_version,
            "generation": self.generation,
            "creationTimestamp": (
                _format_time(self.creation_timestamp)
                if self.creation_timestamp is not None else None
            ),
            "deletionTimestamp": (
                _format_time(self.deletion_timestamp)
                if self.deletion_timestamp is not None else None
            ),
            "deletionGracePeriodSeconds": self.deletion_grace_period_seconds,
            "labels": dict(self.labels) if self.labels else None,
            "annotations": dict(self.annotations) if self.annotations else None,
            "ownerReferences": copy.deepcopy(self.owner_references) or None,
            "finalizers": list(self.finalizers) or None,
        }
        return {key: value for key, value in pairs.items() if value is not None}


@dataclass
class LeaderWorkerSetApplyConfiguration:
    """Apply configuration of a LeaderWorkerSet; every ``with_*`` returns self."""

    kind: str | None = None
    api_version: str | None = None
    metadata: ObjectMetaApplyConfiguration | None = None
    spec: LeaderWorkerSetSpecApplyConfiguration | None = None
    status: LeaderWorkerSetStatusApplyConfiguration | None = None

    def _meta(self) -> ObjectMetaApplyConfiguration:
        if self.metadata is None:
            self.metadata = ObjectMetaApplyConfiguration()
        return self.metadata

    @property
    def name(self) -> str | None:
        """The configured name, or None if unset."""
        return self._meta().name

    def with_kind(self, value: str) -> LeaderWorkerSetApplyConfiguration:
        self.kind = value
        return self

    def with_api_version(self, value: str) -> LeaderWorkerSetApplyConfiguration:
        self.api_version = value
        return self

    def with_name(self, value: str) -> LeaderWorkerSetApplyConfiguration:
        self._meta().name = value
        return self

    def with_generate_name(self, value: str) -> LeaderWorkerSetApplyConfiguration:
        self._meta().generate_name = value
        return self

    def with_namespace(self, value: str) -> LeaderWorkerSetApplyConfiguration:
        self._meta().namespace = value
        return self

    def with_uid(self, value: str) -> LeaderWorkerSetApplyConfiguration:
        self._meta().uid = value
        return self

    def with_resource_version(self, value: str) -> LeaderWorkerSetApplyConfiguration:
        self._meta().resource_version = value
        return self

    def with_generation(self, value: int) -> LeaderWorkerSetApplyConfiguration:
        self._meta().generation = value
        return self

    def with_creation_timestamp(self, value: Timestamp) -> LeaderWorkerSetApplyConfiguration:
        self._meta().creation_timestamp = value
        return self

    def with_deletion_timestamp(self, value: Timestamp) -> LeaderWorkerSetApplyConfiguration:
        self._meta().deletion_timestamp = value
        return self

    def with_deletion_grace_period_seconds(self, value: int) -> LeaderWorkerSetApplyConfiguration:
        self._meta().deletion_grace_period_seconds = value
        return self

    def with_labels(self, entries: Mapping[str, str]) -> LeaderWorkerSetApplyConfiguration:
        """Merge entries into the labels, overwriting existing keys."""
        meta = self._meta()
        if meta.labels is None and entries:
            meta.labels = {}
        if entries:
            meta.labels.update(entries)
        return self

    def with_annotations(self, entries: Mapping[str, str]) -> LeaderWorkerSetApplyConfiguration:
        """Merge entries into the annotations, overwriting existing keys."""
        meta = self._meta()
        if meta.annotations is None and entries:
            meta.annotations = {}
        if entries:
            meta.annotations.update(entries)
        return self

    def with_owner_references(self, *args: dict[str, Any]) -> LeaderWorkerSetApplyConfiguration:
        """Append owner references; a None among them is an error."""
        meta = self._meta()
        if any(ref is None for ref in args):
            raise ValueError("nil value passed to with_owner_references")
        meta.owner_references.extend(copy.deepcopy(ref) for ref in args)
        return self

    def with_finalizers(self, *args: str) -> LeaderWorkerSetApplyConfiguration:
        self._meta().finalizers.extend(args)
        return self

    def with_spec(
        self, value: LeaderWorkerSetSpecApplyConfiguration | None
    ) -> LeaderWorkerSetApplyConfiguration:
        self.spec = value
        return self

    def with_status(
        self, value: LeaderWorkerSetStatusApplyConfiguration | None
    ) -> LeaderWorkerSetApplyConfiguration:
        self.status = value
        return self

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.kind is not None:
            out["kind"] = self.kind
        if self.api_version is not None:
            out["apiVersion"] = self.api_version
        if self.metadata is not None:
            out["metadata"] = self.metadata.to_dict()
        if self.spec is not None:
            out["spec"] = self.spec.to_dict()
        if self.status is not None:
            out["status"] = self.status.to_dict()
        return out


def leader_worker_set(name: str, namespace: str) -> LeaderWorkerSetApplyConfiguration:
    """Start an apply configuration for the named LeaderWorkerSet."""
    return (
        LeaderWorkerSetApplyConfiguration()
        .with_name(name)
        .with_namespace(namespace)
        .with_kind("LeaderWorkerSet")
        .with_api_version(API_VERSION)
    )


_KINDS: dict[GroupVersionKind, Callable[[], Any]] = {
    SCHEME_GROUP_VERSION.with_kind("LeaderWorkerSet"): LeaderWorkerSetApplyConfiguration,
    SCHEME_GROUP_VERSION.with_kind("LeaderWorkerSetSpec"): LeaderWorkerSetSpecApplyConfiguration,
    SCHEME_GROUP_VERSION.with_kind("LeaderWorkerSetStatus"): LeaderWorkerSetStatusApplyConfiguration,
    SCHEME_GROUP_VERSION.with_kind("LeaderWorkerTemplate"): LeaderWorkerTemplateApplyConfiguration,
    SCHEME_GROUP_VERSION.with_kind("NetworkConfig"): NetworkConfigApplyConfiguration,
    SCHEME_GROUP_VERSION.with_kind("RollingUpdateConfiguration"): RollingUpdateConfigurationApplyConfiguration,
    SCHEME_GROUP_VERSION.with_kind("RolloutStrategy"): RolloutStrategyApplyConfiguration,
    SCHEME_GROUP_VERSION.with_kind("SubGroupPolicy"): SubGroupPolicyApplyConfiguration,
}


def for_kind(kind: GroupVersionKind) -> Any:
    """Return a fresh apply configuration for kind, or None if there is none."""
    factory = _KINDS.get(kind)
    return factory() if factory is not None else None