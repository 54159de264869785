import pytest

from lws.apply_specs import (
    leader_worker_set_spec,
    leader_worker_set_status,
    leader_worker_template,
    network_config,
    rolling_update_configuration,
    rollout_strategy,
    sub_group_policy,
)
from lws.types import (
    RestartPolicyType,
    RolloutStrategyType,
    StartupPolicyType,
    SubdomainPolicy,
)


@pytest.mark.parametrize(
    "factory",
    [
        sub_group_policy,
        network_config,
        rolling_update_configuration,
        rollout_strategy,
        leader_worker_template,
        leader_worker_set_spec,
        leader_worker_set_status,
    ],
)
def test_empty_configuration_serialises_to_empty_dict(factory):
    assert factory().to_dict() == {}


def test_sub_group_policy_chaining_returns_receiver():
    cfg = sub_group_policy()
    assert cfg.with_sub_group_size(2) is cfg
    assert cfg.to_dict() == {"subGroupSize": 2}


def test_last_call_wins():
    cfg = sub_group_policy().with_sub_group_size(2).with_sub_group_size(4)
    assert cfg.sub_group_size == 4


def test_network_config_accepts_string_and_enum():
    a = network_config().with_subdomain_policy("UniquePerReplica")
    b = network_config().with_subdomain_policy(SubdomainPolicy.UNIQUE_PER_REPLICA)
    assert a.subdomain_policy is SubdomainPolicy.UNIQUE_PER_REPLICA
    assert a.to_dict() == b.to_dict() == {"subdomainPolicy": "UniquePerReplica"}


def test_network_config_rejects_unknown_policy():
    with pytest.raises(ValueError):
        network_config().with_subdomain_policy("Bogus")


def test_rolling_update_int_and_percent():
    cfg = rolling_update_configuration().with_max_unavailable("30%").with_max_surge(2)
    assert cfg.to_dict() == {"maxUnavailable": "30%", "maxSurge": 2}


@pytest.mark.parametrize("bad", [True, 1.5, None, [1]])
def test_rolling_update_rejects_non_int_or_string(bad):
    with pytest.raises(TypeError):
        rolling_update_configuration().with_max_surge(bad)


def test_rollout_strategy_nested():
    cfg = rollout_strategy().with_type("RollingUpdate").with_rolling_update_configuration(
        rolling_update_configuration().with_max_surge(1)
    )
    assert cfg.type is RolloutStrategyType.ROLLING_UPDATE
    assert cfg.to_dict() == {
        "type": "RollingUpdate",
        "rollingUpdateConfiguration": {"maxSurge": 1},
    }


def test_leader_worker_template_copies_pod_templates():
    pod = {"spec": {"containers": [{"name": "c"}]}}
    cfg = leader_worker_template().with_worker_template(pod).with_leader_template(pod)
    pod["spec"]["containers"].append({"name": "d"})
    out = cfg.to_dict()
    assert out["workerTemplate"] == {"spec": {"containers": [{"name": "c"}]}}
    assert out["leaderTemplate"] == out["workerTemplate"]


def test_leader_worker_template_full():
    cfg = (
        leader_worker_template()
        .with_size(4)
        .with_restart_policy(RestartPolicyType.NONE)
        .with_sub_group_policy(sub_group_policy().with_sub_group_size(2))
    )
    assert cfg.to_dict() == {
        "size": 4,
        "restartPolicy": "None",
        "subGroupPolicy": {"subGroupSize": 2},
    }


def test_leader_worker_template_rejects_unknown_restart_policy():
    with pytest.raises(ValueError):
        leader_worker_template().with_restart_policy("Always")


def test_spec_full():
    spec = (
        leader_worker_set_spec()
        .with_replicas(3)
        .with_startup_policy("LeaderReady")
        .with_leader_worker_template(leader_worker_template().with_size(2))
        .with_rollout_strategy(rollout_strategy().with_type("RollingUpdate"))
        .with_network_config(network_config().with_subdomain_policy("Shared"))
    )
    assert spec.startup_policy is StartupPolicyType.LEADER_READY
    assert spec.to_dict() == {
        "replicas": 3,
        "leaderWorkerTemplate": {"size": 2},
        "rolloutStrategy": {"type": "RollingUpdate"},
        "startupPolicy": "LeaderReady",
        "networkConfig": {"subdomainPolicy": "Shared"},
    }


def test_spec_clearing_nested_with_none():
    spec = leader_worker_set_spec().with_network_config(network_config()).with_network_config(None)
    assert "networkConfig" not in spec.to_dict()


def test_status_conditions_append_across_calls():
    first = {"type": "Available", "status": "True"}
    second = {"type": "Progressing", "status": "False"}
    status = leader_worker_set_status().with_conditions(first).with_conditions(second)
    assert status.to_dict()["conditions"] == [first, second]


def test_status_conditions_reject_none():
    status = leader_worker_set_status()
    with pytest.raises(ValueError):
        status.with_conditions({"type": "Available"}, None)
    assert status.conditions == []


def test_status_scalar_fields():
    status = (
        leader_worker_set_status()
        .with_ready_replicas(1)
        .with_updated_replicas(2)
        .with_replicas(3)
        .with_hpa_pod_selector("app=x")
    )
    assert status.to_dict() == {
        "readyReplicas": 1,
        "updatedReplicas": 2,
        "replicas": 3,
        "hpaPodSelector": "app=x",
    }


def test_status_zero_values_are_kept_when_set():
    status = leader_worker_set_status().with_ready_replicas(0)
    assert status.to_dict() == {"readyReplicas": 0}


def test_factories_return_fresh_instances():
    a = leader_worker_set_status().with_conditions({"type": "Available"})
    b = leader_worker_set_status()
    assert a.conditions == [{"type": "Available"}]
    assert b.conditions == []