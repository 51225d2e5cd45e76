"""
Binding subject resolution.

A KafkaBinding's `spec.subject` names the workload(s) to bind, either by name
or by label selector. The resolver maps the subject's apiVersion/kind onto the
kubernetes client's read/list/replace calls.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from kubernetes import client

from kafkabinding.core.errors import SubjectResolutionError

# (apiVersion, kind) -> (api group attribute, method suffix)
SUBJECT_KINDS: Dict[Tuple[str, str], Tuple[str, str]] = {
    ("apps/v1", "Deployment"): ("apps", "deployment"),
    ("apps/v1", "StatefulSet"): ("apps", "stateful_set"),
    ("apps/v1", "DaemonSet"): ("apps", "daemon_set"),
    ("apps/v1", "ReplicaSet"): ("apps", "replica_set"),
    ("batch/v1", "CronJob"): ("batch", "cron_job"),
}

_OPERATORS = {"In": "in", "NotIn": "notin"}


def _string_map(raw: Any, path: str) -> Dict[str, str]:
    if raw is None:
        return {}
    if not isinstance(raw, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in raw.items()
    ):
        raise SubjectResolutionError(f"{path}: expected an object of strings")
    return dict(raw)


def _match_expressions(raw: Any, path: str) -> Tuple[Dict[str, Any], ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise SubjectResolutionError(f"{path}: expected a list")
    exprs = []
    for i, expr in enumerate(raw):
        where = f"{path}[{i}]"
        if not isinstance(expr, dict):
            raise SubjectResolutionError(f"{where}: expected an object")
        if not isinstance(expr.get("key"), str) or not expr["key"]:
            raise SubjectResolutionError(f"{where}.key: expected a non-empty string")
        if not isinstance(expr.get("operator"), str):
            raise SubjectResolutionError(f"{where}.operator: expected a string")
        values = expr.get("values")
        if values is not None and (
            not isinstance(values, list) or not all(isinstance(v, str) for v in values)
        ):
            raise SubjectResolutionError(f"{where}.values: expected a list of strings")
        exprs.append(expr)
    return tuple(exprs)


def _selector(raw: Any) -> Tuple[Dict[str, str], Tuple[Dict[str, Any], ...]]:
    if raw is None:
        return {}, ()
    if not isinstance(raw, dict):
        raise SubjectResolutionError(
            f"spec.subject.selector: expected an object, got {type(raw).__name__}"
        )
    return (
        _string_map(raw.get("matchLabels"), "spec.subject.selector.matchLabels"),
        _match_expressions(raw.get("matchExpressions"), "spec.subject.selector.matchExpressions"),
    )


@dataclass(frozen=True)
class SubjectRef:
    """
    Reference to the workload(s) a binding targets.

    Exactly one of name and match_labels/match_expressions is set.
    """
    api_version: str
    kind: str
    namespace: str
    name: Optional[str] = None
    match_labels: Dict[str, str] = field(default_factory=dict)
    match_expressions: Tuple[Dict[str, Any], ...] = ()

    @property
    def has_selector(self) -> bool:
        return bool(self.match_labels or self.match_expressions)

    def label_selector(self) -> str:
        """Render the selector in the API server's label selector syntax."""
        parts = [f"{k}={v}" for k, v in sorted(self.match_labels.items())]
        for expr in self.match_expressions:
            key = expr.get("key")
            op = expr.get("operator")
            values = ",".join(expr.get("values") or [])
            if op in _OPERATORS:
                parts.append(f"{key} {_OPERATORS[op]} ({values})")
            elif op == "Exists":
                parts.append(key)
            elif op == "DoesNotExist":
                parts.append(f"!{key}")
            else:
                raise SubjectResolutionError(f"Unsupported selector operator: {op!r}")
        return ",".join(parts)

    def describe(self) -> str:
        target = self.name if self.name else f"selector({self.label_selector()})"
        return f"{self.kind}/{self.namespace}/{target}"

    @staticmethod
    def from_dict(raw: Any, default_namespace: str) -> "SubjectRef":
        """
        Parse `spec.subject`.

        The namespace defaults to the binding's own namespace.

        Raises:
            SubjectResolutionError: If required fields are missing, the
                selector is malformed, or both or neither of name and
                selector are given
        """
        if not isinstance(raw, dict):
            raise SubjectResolutionError("spec.subject: expected an object")

        api_version = raw.get("apiVersion")
        kind = raw.get("kind")
        if not (isinstance(api_version, str) and api_version and isinstance(kind, str) and kind):
            raise SubjectResolutionError("spec.subject: apiVersion and kind are required")

        name = raw.get("name") or None
        if name is not None and not isinstance(name, str):
            raise SubjectResolutionError("spec.subject.name: expected a string")
        match_labels, match_expressions = _selector(raw.get("selector"))

        if name and (match_labels or match_expressions):
            raise SubjectResolutionError("spec.subject: name and selector are mutually exclusive")
        if not name and not (match_labels or match_expressions):
            raise SubjectResolutionError("spec.subject: one of name or selector is required")

        return SubjectRef(
            api_version=api_version,
            kind=kind,
            namespace=raw.get("namespace") or default_namespace,
            name=name,
            match_labels=match_labels,
            match_expressions=match_expressions,
        )


class SubjectResolver:
    """
    Reads and writes subject workloads through the kubernetes API.

    API clients are created on first use unless injected.
    """

    def __init__(self, apps_api=None, batch_api=None):
        self._apis = {"apps": apps_api, "batch": batch_api}

    def _api(self, group: str):
        if self._apis[group] is None:
            self._apis[group] = client.AppsV1Api() if group == "apps" else client.BatchV1Api()
        return self._apis[group]

    def _call(self, ref: SubjectRef, verb: str):
        entry = SUBJECT_KINDS.get((ref.api_version, ref.kind))
        if entry is None:
            raise SubjectResolutionError(
                f"Unsupported subject {ref.api_version}/{ref.kind}; "
                f"supported: {', '.join(k for _, k in SUBJECT_KINDS)}"
            )
        group, suffix = entry
        return getattr(self._api(group), f"{verb}_namespaced_{suffix}")

    def resolve(self, ref: SubjectRef) -> List[Any]:
        """
        Fetch the workloads a subject refers to.

        A named subject that does not exist raises the API's 404; a selector
        matching nothing returns an empty list.
        """
        if ref.name:
            return [self._call(ref, "read")(ref.name, ref.namespace)]
        result = self._call(ref, "list")(ref.namespace, label_selector=ref.label_selector())
        return list(result.items or [])

    def replace(self, ref: SubjectRef, workload: Any) -> Any:
        return self._call(ref, "replace")(workload.metadata.name, ref.namespace, workload)
