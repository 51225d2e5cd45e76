"""
Tests for binding subject parsing and resolution.
"""

import pytest

from kafkabinding.core import SubjectResolutionError
from kafkabinding_operator.subject import SubjectRef, SubjectResolver


def test_named_subject_defaults_namespace():
    ref = SubjectRef.from_dict({"apiVersion": "apps/v1", "kind": "Deployment", "name": "app"}, "ns")

    assert ref.namespace == "ns"
    assert ref.name == "app"
    assert not ref.has_selector
    assert ref.describe() == "Deployment/ns/app"


def test_explicit_namespace_wins():
    ref = SubjectRef.from_dict(
        {"apiVersion": "apps/v1", "kind": "Deployment", "namespace": "other", "name": "app"}, "ns"
    )

    assert ref.namespace == "other"


def test_label_selector_rendering():
    ref = SubjectRef.from_dict(
        {
            "apiVersion": "apps/v1",
            "kind": "StatefulSet",
            "selector": {
                "matchLabels": {"tier": "db", "app": "kafka-client"},
                "matchExpressions": [
                    {"key": "env", "operator": "In", "values": ["prod", "stage"]},
                    {"key": "legacy", "operator": "DoesNotExist"},
                    {"key": "owner", "operator": "Exists"},
                ],
            },
        },
        "ns",
    )

    assert ref.label_selector() == "app=kafka-client,tier=db,env in (prod,stage),!legacy,owner"


def test_unknown_selector_operator():
    ref = SubjectRef(
        api_version="apps/v1",
        kind="Deployment",
        namespace="ns",
        match_expressions=({"key": "a", "operator": "Gt", "values": ["1"]},),
    )

    with pytest.raises(SubjectResolutionError, match="Gt"):
        ref.label_selector()


@pytest.mark.parametrize(
    "raw",
    [
        None,
        {"kind": "Deployment", "name": "app"},
        {"apiVersion": "apps/v1", "kind": "Deployment"},
        {"apiVersion": "apps/v1", "kind": "Deployment", "name": "app", "selector": {"matchLabels": {"a": "b"}}},
    ],
)
def test_malformed_subject(raw):
    with pytest.raises(SubjectResolutionError):
        SubjectRef.from_dict(raw, "ns")


def test_resolver_rejects_unknown_kind():
    ref = SubjectRef(api_version="v1", kind="Service", namespace="ns", name="svc")

    with pytest.raises(SubjectResolutionError, match="Unsupported subject"):
        SubjectResolver(apps_api=object(), batch_api=object()).resolve(ref)


def test_resolver_routes_cronjob_to_batch_api():
    calls = []

    class StubBatchApi:
        def read_namespaced_cron_job(self, name, namespace):
            calls.append((name, namespace))
            return "cronjob"

    ref = SubjectRef(api_version="batch/v1", kind="CronJob", namespace="ns", name="nightly")

    assert SubjectResolver(batch_api=StubBatchApi()).resolve(ref) == ["cronjob"]
    assert calls == [("nightly", "ns")]


@pytest.mark.parametrize(
    "selector, match",
    [
        ("app=x", "spec.subject.selector"),
        ({"matchLabels": ["app"]}, "matchLabels"),
        ({"matchLabels": {"app": 1}}, "matchLabels"),
        ({"matchExpressions": {"key": "a"}}, "matchExpressions"),
        ({"matchExpressions": ["env in (prod)"]}, r"matchExpressions\[0\]"),
        ({"matchExpressions": [{"operator": "Exists"}]}, r"matchExpressions\[0\]\.key"),
        ({"matchExpressions": [{"key": "env", "operator": "In", "values": "prod"}]}, r"\.values"),
        ({"matchExpressions": [{"key": "env", "operator": "In", "values": [1]}]}, r"\.values"),
    ],
)
def test_malformed_selector(selector, match):
    raw = {"apiVersion": "apps/v1", "kind": "Deployment", "selector": selector}

    with pytest.raises(SubjectResolutionError, match=match):
        SubjectRef.from_dict(raw, "ns")


def test_non_string_name_rejected():
    with pytest.raises(SubjectResolutionError, match="spec.subject.name"):
        SubjectRef.from_dict({"apiVersion": "apps/v1", "kind": "Deployment", "name": ["app"]}, "ns")
