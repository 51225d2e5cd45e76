"""
Tests for workload pod spec lookup and manifest conversion.
"""

import pytest
from kubernetes import client

from kafkabinding.core import (
    UnsupportedWorkloadError,
    apply_binding,
    pod_spec_of,
    remove_binding,
    workload_from_dict,
    workload_to_dict,
)
from kafkabinding.tests.builders import container, pod_spec, sasl_spec


def _template(ps):
    return client.V1PodTemplateSpec(spec=ps)


def test_pod_spec_of_deployment():
    ps = pod_spec([container("app")])
    dep = client.V1Deployment(
        spec=client.V1DeploymentSpec(selector=client.V1LabelSelector(), template=_template(ps))
    )

    assert pod_spec_of(dep) is ps


def test_pod_spec_of_cronjob():
    ps = pod_spec([container("app")])
    cj = client.V1CronJob(
        spec=client.V1CronJobSpec(
            schedule="* * * * *",
            job_template=client.V1JobTemplateSpec(spec=client.V1JobSpec(template=_template(ps))),
        )
    )

    assert pod_spec_of(cj) is ps


def test_pod_spec_of_pod_and_template():
    ps = pod_spec([container("app")])

    assert pod_spec_of(client.V1Pod(spec=ps)) is ps
    assert pod_spec_of(_template(ps)) is ps
    assert pod_spec_of(ps) is ps


def test_pod_spec_of_rejects_other_objects():
    with pytest.raises(UnsupportedWorkloadError):
        pod_spec_of(client.V1ConfigMap())
    with pytest.raises(UnsupportedWorkloadError):
        pod_spec_of(client.V1Pod())


def _deployment_manifest():
    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {"name": "app", "namespace": "default"},
        "spec": {
            "selector": {"matchLabels": {"app": "app"}},
            "template": {
                "metadata": {"labels": {"app": "app"}},
                "spec": {
                    "containers": [
                        {
                            "name": "app",
                            "image": "app:1",
                            "env": [
                                {"name": "LOG_LEVEL", "value": "debug"},
                                {"name": "KAFKA_BOOTSTRAP_SERVERS", "value": "old:9092"},
                            ],
                        }
                    ]
                },
            },
        },
    }


def test_manifest_apply_roundtrip():
    dep = workload_from_dict(_deployment_manifest())
    assert isinstance(dep, client.V1Deployment)

    apply_binding(sasl_spec(), pod_spec_of(dep))
    out = workload_to_dict(dep)

    env = out["spec"]["template"]["spec"]["containers"][0]["env"]
    assert env[0] == {"name": "LOG_LEVEL", "value": "debug"}
    assert env[1] == {"name": "KAFKA_BOOTSTRAP_SERVERS", "value": "b1:9092,b2:9092"}
    assert env[3] == {
        "name": "KAFKA_NET_SASL_USER",
        "valueFrom": {"secretKeyRef": {"name": "s1", "key": "u"}},
    }
    assert out["metadata"]["name"] == "app"


def test_manifest_remove():
    dep = workload_from_dict(_deployment_manifest())

    remove_binding(pod_spec_of(dep))

    env = workload_to_dict(dep)["spec"]["template"]["spec"]["containers"][0]["env"]
    assert env == [{"name": "LOG_LEVEL", "value": "debug"}]


def test_unsupported_kind():
    with pytest.raises(UnsupportedWorkloadError, match="ConfigMap"):
        workload_from_dict({"apiVersion": "v1", "kind": "ConfigMap", "metadata": {"name": "x"}})
