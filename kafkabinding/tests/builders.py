"""
Shared builders for pod specs, env entries and binding specs.
"""

import copy
from typing import List, Optional

from kubernetes import client
from kubernetes.client.rest import ApiException

from kafkabinding.core import BindingSpec, GSSAPISpec, SASLSpec, SecretKeyRef, TLSSpec


def ref(secret: str, key: str) -> SecretKeyRef:
    return SecretKeyRef(name=secret, key=key)


def literal_env(name: str, value: str) -> client.V1EnvVar:
    return client.V1EnvVar(name=name, value=value)


def secret_env(name: str, secret: str, key: str) -> client.V1EnvVar:
    return client.V1EnvVar(
        name=name,
        value_from=client.V1EnvVarSource(
            secret_key_ref=client.V1SecretKeySelector(name=secret, key=key)
        ),
    )


def container(name: str, env=None, volume_mounts=None) -> client.V1Container:
    return client.V1Container(name=name, image="busybox", env=env, volume_mounts=volume_mounts)


def pod_spec(containers: List[client.V1Container], init_containers=None, volumes=None) -> client.V1PodSpec:
    return client.V1PodSpec(containers=containers, init_containers=init_containers, volumes=volumes)


def env_names(c: client.V1Container) -> List[str]:
    return [ev.name for ev in c.env or []]


def mount_names(c: client.V1Container) -> List[str]:
    return [vm.name for vm in c.volume_mounts or []]


def volume_names(ps: client.V1PodSpec) -> List[str]:
    return [v.name for v in ps.volumes or []]


def sasl_spec(servers=("b1:9092", "b2:9092")) -> BindingSpec:
    return BindingSpec(
        bootstrap_servers=tuple(servers),
        sasl=SASLSpec(enable=True, user=ref("s1", "u"), password=ref("s1", "p"), type=ref("s1", "t")),
    )


def gssapi(keytab: Optional[SecretKeyRef] = None, config: Optional[SecretKeyRef] = None) -> GSSAPISpec:
    return GSSAPISpec(
        enable=True,
        keytab=keytab,
        config=config,
        principal=ref("krb", "principal"),
        service=ref("krb", "service"),
        realm=ref("krb", "realm"),
        username=ref("krb", "username"),
        password=ref("krb", "password"),
    )


def tls() -> TLSSpec:
    return TLSSpec(enable=True, cert=ref("tls", "cert"), key=ref("tls", "key"), ca_cert=ref("tls", "ca"))


def full_spec() -> BindingSpec:
    """Every mechanism enabled with every reference set."""
    return BindingSpec(
        bootstrap_servers=("b1:9092", "b2:9092"),
        sasl=SASLSpec(enable=True, user=ref("s1", "u"), password=ref("s1", "p"), type=ref("s1", "t")),
        gssapi=gssapi(keytab=ref("krb", "keytab"), config=ref("krb", "conf")),
        tls=tls(),
    )


def deployment(name, labels=None, env=None):
    labels = labels or {"app": name}
    return client.V1Deployment(
        metadata=client.V1ObjectMeta(name=name, namespace="ns", labels=labels),
        spec=client.V1DeploymentSpec(
            selector=client.V1LabelSelector(match_labels=labels),
            template=client.V1PodTemplateSpec(spec=pod_spec([container("app", env=env)])),
        ),
    )


class StubAppsApi:
    """In-memory stand-in for AppsV1Api, Deployments only."""

    def __init__(self, *deployments, fail_replace_with=None):
        self.deployments = {d.metadata.name: d for d in deployments}
        self.replaced = []
        self.fail_replace_with = fail_replace_with

    def read_namespaced_deployment(self, name, namespace):
        if name not in self.deployments:
            raise ApiException(status=404, reason="Not Found")
        return copy.deepcopy(self.deployments[name])

    def list_namespaced_deployment(self, namespace, label_selector=None):
        wanted = dict(pair.split("=", 1) for pair in label_selector.split(",")) if label_selector else {}
        items = [
            copy.deepcopy(d)
            for d in self.deployments.values()
            if all((d.metadata.labels or {}).get(k) == val for k, val in wanted.items())
        ]
        return client.V1DeploymentList(items=items)

    def replace_namespaced_deployment(self, name, namespace, body):
        if self.fail_replace_with is not None:
            raise ApiException(status=self.fail_replace_with, reason="Conflict")
        self.replaced.append(name)
        self.deployments[name] = body
        return body

