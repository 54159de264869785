import json

import pytest

from lws.types import (
    GROUP_VERSION,
    GroupResource,
    GroupVersion,
    GroupVersionKind,
    LeaderWorkerSet,
    LeaderWorkerSetList,
    LeaderWorkerSetSpec,
    LeaderWorkerSetStatus,
    LeaderWorkerTemplate,
    NetworkConfig,
    ObjectMeta,
    RestartPolicyType,
    RollingUpdateConfiguration,
    RolloutStrategy,
    StartupPolicyType,
    SubdomainPolicy,
    SubGroupPolicy,
    resource,
)


def _full_lws():
    return LeaderWorkerSet(
        metadata=ObjectMeta(
            name="my-lws",
            namespace="default",
            labels={"app": "demo"},
            annotations={"leaderworkerset.sigs.k8s.io/exclusive-topology": "rack"},
        ),
        spec=LeaderWorkerSetSpec(
            replicas=3,
            leader_worker_template=LeaderWorkerTemplate(
                worker_template={"spec": {"containers": [{"name": "w"}]}},
                leader_template={"spec": {"containers": [{"name": "l"}]}},
                size=4,
                restart_policy=RestartPolicyType.NONE,
                sub_group_policy=SubGroupPolicy(sub_group_size=2),
            ),
            rollout_strategy=RolloutStrategy(
                rolling_update_configuration=RollingUpdateConfiguration(
                    max_unavailable="30%", max_surge=2
                )
            ),
            startup_policy=StartupPolicyType.LEADER_READY,
            network_config=NetworkConfig(SubdomainPolicy.UNIQUE_PER_REPLICA),
        ),
        status=LeaderWorkerSetStatus(
            conditions=[{"type": "Available", "status": "True"}],
            ready_replicas=2,
            updated_replicas=1,
            replicas=3,
            hpa_pod_selector="leaderworkerset.sigs.k8s.io/name=my-lws",
        ),
    )


def test_group_version_with_kind():
    gvk = GROUP_VERSION.with_kind("LeaderWorkerSet")
    assert gvk == GroupVersionKind("leaderworkerset.x-k8s.io", "v1", "LeaderWorkerSet")


def test_resource_helper():
    assert resource("leaderworkersets") == GroupResource(
        "leaderworkerset.x-k8s.io", "leaderworkersets"
    )


def test_group_resource_drops_version():
    gvr = GroupVersion("g", "v2").with_resource("things")
    assert gvr.version == "v2"
    assert gvr.group_resource() == GroupResource("g", "things")


def test_default_lws_api_version_and_kind():
    data = LeaderWorkerSet().to_dict()
    assert data["apiVersion"] == "leaderworkerset.x-k8s.io/v1"
    assert data["kind"] == "LeaderWorkerSet"


def test_default_spec_serialization():
    spec = LeaderWorkerSet().to_dict()["spec"]
    assert spec["startupPolicy"] == "LeaderCreated"
    assert spec["rolloutStrategy"] == {"type": "RollingUpdate"}
    assert spec["leaderWorkerTemplate"]["restartPolicy"] == "RecreateGroupOnPodRestart"
    assert "networkConfig" not in spec


def test_empty_status_is_omitted_fields():
    assert LeaderWorkerSet().to_dict()["status"] == {}


def test_network_config_without_policy_serializes_null():
    lws = LeaderWorkerSet(spec=LeaderWorkerSetSpec(network_config=NetworkConfig()))
    assert lws.to_dict()["spec"]["networkConfig"] == {"subdomainPolicy": None}


def test_full_round_trip():
    lws = _full_lws()
    assert LeaderWorkerSet.from_dict(lws.to_dict()) == lws


def test_round_trip_through_json():
    lws = _full_lws()
    text = json.dumps(lws.to_dict())
    assert LeaderWorkerSet.from_dict(json.loads(text)) == lws


def test_full_serialization_keys():
    data = _full_lws().to_dict()
    tpl = data["spec"]["leaderWorkerTemplate"]
    assert tpl["subGroupPolicy"] == {"subGroupSize": 2}
    assert tpl["restartPolicy"] == "None"
    assert data["spec"]["networkConfig"] == {"subdomainPolicy": "UniquePerReplica"}
    assert data["spec"]["rolloutStrategy"]["rollingUpdateConfiguration"] == {
        "maxUnavailable": "30%",
        "maxSurge": 2,
    }
    assert data["status"]["hpaPodSelector"] == "leaderworkerset.sigs.k8s.io/name=my-lws"


def test_invalid_restart_policy_rejected():
    data = LeaderWorkerSet().to_dict()
    data["spec"]["leaderWorkerTemplate"]["restartPolicy"] = "Sometimes"
    with pytest.raises(ValueError):
        LeaderWorkerSet.from_dict(data)


def test_invalid_int_or_string_rejected():
    data = _full_lws().to_dict()
    data["spec"]["rolloutStrategy"]["rollingUpdateConfiguration"]["maxSurge"] = 1.5
    with pytest.raises(TypeError):
        LeaderWorkerSet.from_dict(data)


def test_list_round_trip():
    lst = LeaderWorkerSetList(items=[_full_lws(), LeaderWorkerSet()])
    data = lst.to_dict()
    assert data["kind"] == "LeaderWorkerSetList"
    assert len(data["items"]) == 2
    assert LeaderWorkerSetList.from_dict(data) == lst


def test_deprecated_default_policy_value():
    tpl = LeaderWorkerTemplate(restart_policy=RestartPolicyType.DEPRECATED_DEFAULT)
    data = LeaderWorkerSet(spec=LeaderWorkerSetSpec(leader_worker_template=tpl)).to_dict()
    assert data["spec"]["leaderWorkerTemplate"]["restartPolicy"] == "Default"
    parsed = LeaderWorkerSet.from_dict(data)
    assert parsed.spec.leader_worker_template.restart_policy is RestartPolicyType.DEPRECATED_DEFAULT