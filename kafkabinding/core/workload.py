"""
Workload accessors: find the pod spec a binding targets.

Also converts manifest JSON to kubernetes client models and back, so the CLI
can run the engine against files exported with `kubectl get -o json`.
"""

import json
from typing import Any, Dict

from kubernetes import client

from .errors import UnsupportedWorkloadError

# kind -> kubernetes client model name. Job is here for offline rendering only;
# the operator does not bind Jobs since their pod template is immutable.
WORKLOAD_MODELS: Dict[str, str] = {
    "Deployment": "V1Deployment",
    "StatefulSet": "V1StatefulSet",
    "DaemonSet": "V1DaemonSet",
    "ReplicaSet": "V1ReplicaSet",
    "Job": "V1Job",
    "CronJob": "V1CronJob",
    "Pod": "V1Pod",
    "PodTemplate": "V1PodTemplate",
}

_TEMPLATED = (
    client.V1Deployment,
    client.V1StatefulSet,
    client.V1DaemonSet,
    client.V1ReplicaSet,
    client.V1Job,
)


def pod_spec_of(workload: Any) -> client.V1PodSpec:
    """
    Return the mutable pod spec inside a workload model.

    Raises:
        UnsupportedWorkloadError: If the object has no pod template
    """
    pod_spec = None
    if isinstance(workload, client.V1PodSpec):
        pod_spec = workload
    elif isinstance(workload, (client.V1Pod, client.V1PodTemplateSpec)):
        pod_spec = workload.spec
    elif isinstance(workload, client.V1PodTemplate):
        pod_spec = workload.template.spec if workload.template else None
    elif isinstance(workload, client.V1CronJob):
        job_template = workload.spec.job_template if workload.spec else None
        if job_template and job_template.spec and job_template.spec.template:
            pod_spec = job_template.spec.template.spec
    elif isinstance(workload, _TEMPLATED):
        if workload.spec and workload.spec.template:
            pod_spec = workload.spec.template.spec

    if pod_spec is None:
        raise UnsupportedWorkloadError(
            f"{type(workload).__name__} does not carry a pod template"
        )
    return pod_spec


class _JsonPayload:
    """Minimal response stand-in accepted by ApiClient.deserialize."""

    def __init__(self, obj: Dict[str, Any]):
        self.data = json.dumps(obj)


def workload_from_dict(obj: Dict[str, Any]) -> Any:
    """
    Deserialize a manifest dict into its kubernetes client model.

    Raises:
        UnsupportedWorkloadError: If the kind is not a bindable workload
    """
    kind = obj.get("kind") if isinstance(obj, dict) else None
    model = WORKLOAD_MODELS.get(kind)
    if model is None:
        raise UnsupportedWorkloadError(f"Unsupported workload kind: {kind!r}")
    return client.ApiClient().deserialize(_JsonPayload(obj), model)


def workload_to_dict(workload: Any) -> Dict[str, Any]:
    """Serialize a kubernetes client model to manifest (camelCase) JSON."""
    return client.ApiClient().sanitize_for_serialization(workload)
