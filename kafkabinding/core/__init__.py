"""
Core binding primitives.

This module provides:
- BindingSpec: Immutable connection settings (brokers, SASL, GSSAPI, TLS)
- apply_binding / remove_binding: Idempotent injection and exact ejection
- Vocabulary: The closed set of env and volume names the engine manages
- BindingStatus: Ready condition lifecycle for the binding resource
- Workload: Pod spec lookup and manifest conversion
"""

from .spec import BindingSpec, SASLSpec, GSSAPISpec, TLSSpec, SecretKeyRef
from .inject import apply_binding, remove_binding, binding_env, is_bound
from .vocabulary import Mechanism, ENV_MECHANISMS, MANAGED_ENV_NAMES, MANAGED_VOLUME_NAMES
from .lifecycle import BindingStatus, Condition
from .canonical import spec_hash
from .workload import pod_spec_of, workload_from_dict, workload_to_dict
from .errors import BindingSpecError, UnsupportedWorkloadError, SubjectResolutionError

__all__ = [
    "BindingSpec",
    "SASLSpec",
    "GSSAPISpec",
    "TLSSpec",
    "SecretKeyRef",
    "apply_binding",
    "remove_binding",
    "binding_env",
    "is_bound",
    "Mechanism",
    "ENV_MECHANISMS",
    "MANAGED_ENV_NAMES",
    "MANAGED_VOLUME_NAMES",
    "BindingStatus",
    "Condition",
    "spec_hash",
    "pod_spec_of",
    "workload_from_dict",
    "workload_to_dict",
    "BindingSpecError",
    "UnsupportedWorkloadError",
    "SubjectResolutionError",
]
