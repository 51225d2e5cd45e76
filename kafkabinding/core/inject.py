"""
Injection/ejection engine.

apply_binding and remove_binding mutate a V1PodSpec in place and never fail:
- apply first removes everything a previous apply may have left, then appends
  the binding's env, Kerberos volumes and mounts unconditionally
- remove strips exactly the managed vocabulary and leaves every other entry
  in its original relative order

Neither function keeps state between calls or performs I/O.
"""

import copy
import logging
from typing import Iterator, List, Optional

from kubernetes import client

from .spec import BindingSpec, SecretKeyRef
from .vocabulary import (
    ENABLED,
    GSSAPI_SLICE,
    KAFKA_BOOTSTRAP_SERVERS,
    KERBEROS_FILES,
    KERBEROS_MOUNT_DIR,
    SASL_SLICE,
    TLS_SLICE,
    KerberosFile,
    MechanismSlice,
    is_managed_env,
    is_managed_volume,
)

logger = logging.getLogger(__name__)


def append_env_from_secret_key_ref(
    env: List[client.V1EnvVar], name: str, ref: Optional[SecretKeyRef]
) -> List[client.V1EnvVar]:
    """
    Append an env var sourced from ref. A missing ref leaves env unchanged.
    """
    if ref is None:
        return env
    env.append(
        client.V1EnvVar(
            name=name,
            value_from=client.V1EnvVarSource(secret_key_ref=ref.to_selector()),
        )
    )
    return env


def _mechanism_env(mslice: MechanismSlice, mechanism_spec) -> List[client.V1EnvVar]:
    env = [client.V1EnvVar(name=mslice.enable_env, value=ENABLED)]
    for name, attr in mslice.secret_envs:
        append_env_from_secret_key_ref(env, name, getattr(mechanism_spec, attr))
    return env


def kerberos_volume(kfile: KerberosFile, ref: SecretKeyRef) -> client.V1Volume:
    return client.V1Volume(
        name=kfile.file_name,
        secret=client.V1SecretVolumeSource(
            secret_name=ref.name,
            items=[client.V1KeyToPath(key=ref.key, path=kfile.file_name)],
        ),
    )


def kerberos_volume_mount(kfile: KerberosFile) -> client.V1VolumeMount:
    """Mount for one Kerberos volume at the shared mount directory."""
    return client.V1VolumeMount(name=kfile.file_name, mount_path=KERBEROS_MOUNT_DIR)


def projected_kerberos_files(spec: BindingSpec) -> List[KerberosFile]:
    """Kerberos files that get a volume, mount and path env for this spec."""
    if not spec.gssapi.enable:
        return []
    return [kfile for kfile in KERBEROS_FILES if getattr(spec.gssapi, kfile.attr) is not None]


def binding_env(spec: BindingSpec) -> List[client.V1EnvVar]:
    """
    Env entries appended to every container, in emission order.

    Order: broker list, SASL slice, Kerberos file paths, GSSAPI slice, TLS slice.
    """
    env = [client.V1EnvVar(name=KAFKA_BOOTSTRAP_SERVERS, value=spec.bootstrap_servers_value)]

    if spec.sasl.enable:
        env.extend(_mechanism_env(SASL_SLICE, spec.sasl))

    if spec.gssapi.enable:
        for kfile in projected_kerberos_files(spec):
            env.append(client.V1EnvVar(name=kfile.path_env, value=kfile.path))
        env.extend(_mechanism_env(GSSAPI_SLICE, spec.gssapi))

    if spec.tls.enable:
        env.extend(_mechanism_env(TLS_SLICE, spec.tls))

    return env


def _all_containers(pod_spec: client.V1PodSpec) -> Iterator[client.V1Container]:
    for container in pod_spec.init_containers or []:
        yield container
    for container in pod_spec.containers or []:
        yield container


def apply_binding(spec: BindingSpec, pod_spec: client.V1PodSpec) -> None:
    """
    Inject the binding into pod_spec in place.

    Calls remove_binding first, so applying to an already-bound template
    (including one bound with an older spec) converges to the same result.

    Args:
        spec: Binding settings for this reconciliation
        pod_spec: Pod spec owned by the caller; mutated in place
    """
    remove_binding(pod_spec)

    kfiles = projected_kerberos_files(spec)
    if kfiles:
        volumes = list(pod_spec.volumes or [])
        for kfile in kfiles:
            volumes.append(kerberos_volume(kfile, getattr(spec.gssapi, kfile.attr)))
        pod_spec.volumes = volumes

    env = binding_env(spec)
    mounts = [kerberos_volume_mount(kfile) for kfile in kfiles]

    count = 0
    for container in _all_containers(pod_spec):
        container.env = list(container.env or []) + copy.deepcopy(env)
        if mounts:
            container.volume_mounts = list(container.volume_mounts or []) + copy.deepcopy(mounts)
        count += 1

    logger.debug(
        "Applied binding: %d env entries, %d kerberos files, %d containers",
        len(env), len(kfiles), count,
    )


def remove_binding(pod_spec: client.V1PodSpec) -> None:
    """
    Strip every managed env entry, Kerberos volume and Kerberos mount.

    Foreign entries keep their relative order. Containers with no env or
    mounts are left untouched.
    """
    for container in _all_containers(pod_spec):
        if container.env:
            container.env = [ev for ev in container.env if not is_managed_env(ev.name)]
        if container.volume_mounts:
            container.volume_mounts = [
                vm for vm in container.volume_mounts if not is_managed_volume(vm.name)
            ]

    if pod_spec.volumes:
        pod_spec.volumes = [v for v in pod_spec.volumes if not is_managed_volume(v.name)]


def is_bound(pod_spec: client.V1PodSpec) -> bool:
    """True when any container carries a managed env entry."""
    return any(
        is_managed_env(ev.name)
        for container in _all_containers(pod_spec)
        for ev in container.env or []
    )
