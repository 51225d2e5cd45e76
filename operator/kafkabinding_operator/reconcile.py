"""
KafkaBinding reconciler.

Glue between the binding resource and the injection engine:
- parse the resource spec into a BindingSpec and SubjectRef
- resolve the subject workloads
- apply (or remove) the binding and write each workload back
- report the outcome on the binding's Ready condition

Retrying failed writes is left to kopf; API errors other than a missing
subject propagate to the handler.
"""

from typing import Any, Dict, Optional

from kubernetes.client.rest import ApiException

from kafkabinding.core import (
    BindingSpec,
    BindingSpecError,
    BindingStatus,
    SubjectResolutionError,
    apply_binding,
    pod_spec_of,
    remove_binding,
    spec_hash,
)
from kafkabinding.core.lifecycle import REASON_INVALID_SPEC, REASON_SUBJECT_MISSING

from .metrics import track_bound, track_failure, track_unbound
from .subject import SubjectRef, SubjectResolver


class BindingReconciler:
    def __init__(self, logger, resolver: Optional[SubjectResolver] = None):
        self.logger = logger
        self.resolver = resolver or SubjectResolver()

    def reconcile(
        self,
        name: str,
        namespace: str,
        spec: Dict[str, Any],
        generation: Optional[int] = None,
        status: Optional[Dict[str, Any]] = None,
    ) -> BindingStatus:
        """
        Bind every subject workload and return the resulting status.

        Args:
            name: Binding name
            namespace: Binding namespace (default subject namespace)
            spec: The resource's spec
            generation: metadata.generation, recorded as observedGeneration
            status: Current status, so transition times survive

        Raises:
            ApiException: For API failures other than a missing named subject
        """
        binding_status = BindingStatus.from_dict(status)
        binding_status.initialize_conditions()
        binding_status.set_observed_generation(generation)

        try:
            binding = BindingSpec.from_dict(spec)
            subject = SubjectRef.from_dict(spec.get("subject"), namespace)
        except (BindingSpecError, SubjectResolutionError) as e:
            self.logger.error(f"KafkaBinding {namespace}/{name} has an invalid spec: {e}")
            binding_status.mark_binding_unavailable(REASON_INVALID_SPEC, str(e))
            track_failure(REASON_INVALID_SPEC)
            return binding_status

        try:
            workloads = self.resolver.resolve(subject)
        except ApiException as e:
            if e.status != 404:
                raise
            message = f"Subject {subject.describe()} not found"
            self.logger.warning(message)
            binding_status.mark_binding_unavailable(REASON_SUBJECT_MISSING, message)
            track_failure(REASON_SUBJECT_MISSING)
            return binding_status
        except SubjectResolutionError as e:
            binding_status.mark_binding_unavailable(REASON_INVALID_SPEC, str(e))
            track_failure(REASON_INVALID_SPEC)
            return binding_status

        if not workloads:
            self.logger.info(f"Subject {subject.describe()} matched no workloads")

        for workload in workloads:
            apply_binding(binding, pod_spec_of(workload))
            self.resolver.replace(subject, workload)
            track_bound(subject.kind)
            self.logger.info(
                f"Bound {subject.kind} {namespace}/{workload.metadata.name} "
                f"to {binding.bootstrap_servers_value}"
            )

        binding_status.spec_hash = spec_hash(binding)
        binding_status.mark_binding_available()
        return binding_status

    def finalize(self, name: str, namespace: str, spec: Dict[str, Any]) -> int:
        """
        Remove the binding from every subject workload.

        A malformed or missing subject has nothing to clean up and is not an
        error.

        Returns:
            Number of workloads written back
        """
        try:
            subject = SubjectRef.from_dict(spec.get("subject"), namespace)
            workloads = self.resolver.resolve(subject)
        except SubjectResolutionError as e:
            self.logger.info(f"KafkaBinding {namespace}/{name}: nothing to unbind ({e})")
            return 0
        except ApiException as e:
            if e.status != 404:
                raise
            self.logger.info(f"KafkaBinding {namespace}/{name}: subject already gone")
            return 0

        for workload in workloads:
            remove_binding(pod_spec_of(workload))
            self.resolver.replace(subject, workload)
            track_unbound(subject.kind)
            self.logger.info(f"Unbound {subject.kind} {namespace}/{workload.metadata.name}")
        return len(workloads)


def subject_changed(old_spec: Optional[Dict[str, Any]], new_spec: Optional[Dict[str, Any]]) -> bool:
    return (old_spec or {}).get("subject") != (new_spec or {}).get("subject")
