"""Declarative apply configurations for the LeaderWorkerSet spec and status types.

Each configuration records only the fields that were set. Every ``with_*``
method returns the receiver so that calls can be chained, and ``to_dict``
yields the JSON form with unset fields left out.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

from lws.types import (
    IntOrString,
    RestartPolicyType,
    RolloutStrategyType,
    StartupPolicyType,
    SubdomainPolicy,
)


def _check_int_or_string(value: Any) -> IntOrString:
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise TypeError(f"expected an integer or a string, got {value!r}")
    return value


def _prune(pairs: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in pairs.items() if value is not None}


@dataclass
class SubGroupPolicyApplyConfiguration:
    """Apply configuration of a SubGroupPolicy."""

    sub_group_size: int | None = None

    def with_sub_group_size(self, value: int) -> SubGroupPolicyApplyConfiguration:
        self.sub_group_size = value
        return self

    def to_dict(self) -> dict[str, Any]:
        return _prune({"subGroupSize": self.sub_group_size})


@dataclass
class NetworkConfigApplyConfiguration:
    """Apply configuration of a NetworkConfig."""

    subdomain_policy: SubdomainPolicy | None = None

    def with_subdomain_policy(self, value: SubdomainPolicy | str) -> NetworkConfigApplyConfiguration:
        self.subdomain_policy = SubdomainPolicy(value)
        return self

    def to_dict(self) -> dict[str, Any]:
        policy = self.subdomain_policy
        return _prune({"subdomainPolicy": policy.value if policy is not None else None})


@dataclass
class RollingUpdateConfigurationApplyConfiguration:
    """Apply configuration of a RollingUpdateConfiguration."""

    max_unavailable: IntOrString | None = None
    max_surge: IntOrString | None = None

    def with_max_unavailable(self, value: IntOrString) -> RollingUpdateConfigurationApplyConfiguration:
        self.max_unavailable = _check_int_or_string(value)
        return self

    def with_max_surge(self, value: IntOrString) -> RollingUpdateConfigurationApplyConfiguration:
        self.max_surge = _check_int_or_string(value)
        return self

    def to_dict(self) -> dict[str, Any]:
        return _prune({"maxUnavailable": self.max_unavailable, "maxSurge": self.max_surge})


@dataclass
class RolloutStrategyApplyConfiguration:
    """Apply configuration of a RolloutStrategy."""

    type: RolloutStrategyType | None = None
    rolling_update_configuration: RollingUpdateConfigurationApplyConfiguration | None = None

    def with_type(self, value: RolloutStrategyType | str) -> RolloutStrategyApplyConfiguration:
        self.type = RolloutStrategyType(value)
        return self

    def with_rolling_update_configuration(
        self, value: RollingUpdateConfigurationApplyConfiguration | None
    ) -> RolloutStrategyApplyConfiguration:
        self.rolling_update_configuration = value
        return self

    def to_dict(self) -> dict[str, Any]:
        rolling = self.rolling_update_configuration
        return _prune({
            "type": self.type.value if self.type is not None else None,
            "rollingUpdateConfiguration": rolling.to_dict() if rolling is not None else None,
        })


@dataclass
class LeaderWorkerTemplateApplyConfiguration:
    """Apply configuration of a LeaderWorkerTemplate."""

    leader_template: dict[str, Any] | None = None
    worker_template: dict[str, Any] | None = None
    size: int | None = None
    restart_policy: RestartPolicyType | None = None
    sub_group_policy: SubGroupPolicyApplyConfiguration | None = None

    def with_leader_template(self, value: dict[str, Any]) -> LeaderWorkerTemplateApplyConfiguration:
        self.leader_template = copy.deepcopy(value)
        return self

    def with_worker_template(self, value: dict[str, Any]) -> LeaderWorkerTemplateApplyConfiguration:
        self.worker_template = copy.deepcopy(value)
        return self

    def with_size(self, value: int) -> LeaderWorkerTemplateApplyConfiguration:
        self.size = value
        return self

    def with_restart_policy(self, value: RestartPolicyType | str) -> LeaderWorkerTemplateApplyConfiguration:
        self.restart_policy = RestartPolicyType(value)
        return self

    def with_sub_group_policy(
        self, value: SubGroupPolicyApplyConfiguration | None
    ) -> LeaderWorkerTemplateApplyConfiguration:
        self.sub_group_policy = value
        return self

    def to_dict(self) -> dict[str, Any]:
        sub = self.sub_group_policy
        return _prune({
            "leaderTemplate": copy.deepcopy(self.leader_template),
            "workerTemplate": copy.deepcopy(self.worker_template),
            "size": self.size,
            "restartPolicy": self.restart_policy.value if self.restart_policy is not None else None,
            "subGroupPolicy": sub.to_dict() if sub is not None else None,
        })


@dataclass
class LeaderWorkerSetSpecApplyConfiguration:
    """Apply configuration of a LeaderWorkerSetSpec."""

    replicas: int | None = None
    leader_worker_template: LeaderWorkerTemplateApplyConfiguration | None = None
    rollout_strategy: RolloutStrategyApplyConfiguration | None = None
    startup_policy: StartupPolicyType | None = None
    network_config: NetworkConfigApplyConfiguration | None = None

    def with_replicas(self, value: int) -> LeaderWorkerSetSpecApplyConfiguration:
        self.replicas = value
        return self

    def with_leader_worker_template(
        self, value: LeaderWorkerTemplateApplyConfiguration | None
    ) -> LeaderWorkerSetSpecApplyConfiguration:
        self.leader_worker_template = value
        return self

    def with_rollout_strategy(
        self, value: RolloutStrategyApplyConfiguration | None
    ) -> LeaderWorkerSetSpecApplyConfiguration:
        self.rollout_strategy = value
        return self

    def with_startup_policy(self, value: StartupPolicyType | str) -> LeaderWorkerSetSpecApplyConfiguration:
        self.startup_policy = StartupPolicyType(value)
        return self

    def with_network_config(
        self, value: NetworkConfigApplyConfiguration | None
    ) -> LeaderWorkerSetSpecApplyConfiguration:
        self.network_config = value
        return self

    def to_dict(self) -> dict[str, Any]:
        template = self.leader_worker_template
        strategy = self.rollout_strategy
        network = self.network_config
        return _prune({
            "replicas": self.replicas,
            "leaderWorkerTemplate": template.to_dict() if template is not None else None,
            "rolloutStrategy": strategy.to_dict() if strategy is not None else None,
            "startupPolicy": self.startup_policy.value if self.startup_policy is not None else None,
            "networkConfig": network.to_dict() if network is not None else None,
        })


@dataclass
class LeaderWorkerSetStatusApplyConfiguration:
    """Apply configuration of a LeaderWorkerSetStatus."""

    conditions: list[dict[str, Any]] = field(default_factory=list)
    ready_replicas: int | None = None
    updated_replicas: int | None = None
    replicas: int | None = None
    hpa_pod_selector: str | None = None

    def with_conditions(self, *args: dict[str, Any]) -> LeaderWorkerSetStatusApplyConfiguration:
        """Append conditions; a None among them is an error."""
        if any(condition is None for condition in args):
            raise ValueError("nil value passed to with_conditions")
        self.conditions.extend(copy.deepcopy(condition) for condition in args)
        return self

    def with_ready_replicas(self, value: int) -> LeaderWorkerSetStatusApplyConfiguration:
        self.ready_replicas = value
        return self

    def with_updated_replicas(self, value: int) -> LeaderWorkerSetStatusApplyConfiguration:
        self.updated_replicas = value
        return self

    def with_replicas(self, value: int) -> LeaderWorkerSetStatusApplyConfiguration:
        self.replicas = value
        return self

    def with_hpa_pod_selector(self, value: str) -> LeaderWorkerSetStatusApplyConfiguration:
        self.hpa_pod_selector = value
        return self

    def to_dict(self) -> dict[str, Any]:
        return _prune({
            "conditions": copy.deepcopy(self.conditions) if self.conditions else None,
            "readyReplicas": self.ready_replicas,
            "updatedReplicas": self.updated_replicas,
            "replicas": self.replicas,
            "hpaPodSelector": self.hpa_pod_selector,
        })


def sub_group_policy() -> SubGroupPolicyApplyConfiguration:
    """Return an empty SubGroupPolicy apply configuration."""
    return SubGroupPolicyApplyConfiguration()


def network_config() -> NetworkConfigApplyConfiguration:
    """Return an empty NetworkConfig apply configuration."""
    return NetworkConfigApplyConfiguration()


def rolling_update_configuration() -> RollingUpdateConfigurationApplyConfiguration:
    """Return an empty RollingUpdateConfiguration apply configuration."""
    return RollingUpdateConfigurationApplyConfiguration()


def rollout_strategy() -> RolloutStrategyApplyConfiguration:
    """Return an empty RolloutStrategy apply configuration."""
    return RolloutStrategyApplyConfiguration()


def leader_worker_template() -> LeaderWorkerTemplateApplyConfiguration:
    """Return an empty LeaderWorkerTemplate apply configuration."""
    return LeaderWorkerTemplateApplyConfiguration()


def leader_worker_set_spec() -> LeaderWorkerSetSpecApplyConfiguration:
    """Return an empty LeaderWorkerSetSpec apply configuration."""
    return LeaderWorkerSetSpecApplyConfiguration()


def leader_worker_set_status() -> LeaderWorkerSetStatusApplyConfiguration:
    """Return an empty LeaderWorkerSetStatus apply configuration."""
    return LeaderWorkerSetStatusApplyConfiguration()