"""
Managed vocabulary: every env name, volume name and mount path the engine owns.

Injection and removal both read these tables, so the set of names
apply_binding can add is exactly the set remove_binding strips.
"""

import posixpath
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Tuple


class Mechanism(str, Enum):
    """Independently togglable slice of the binding."""
    BROKERS = "brokers"
    SASL = "sasl"
    GSSAPI = "gssapi"
    TLS = "tls"


KAFKA_BOOTSTRAP_SERVERS = "KAFKA_BOOTSTRAP_SERVERS"

KAFKA_NET_SASL_ENABLE = "KAFKA_NET_SASL_ENABLE"
KAFKA_NET_SASL_USER = "KAFKA_NET_SASL_USER"
KAFKA_NET_SASL_PASSWORD = "KAFKA_NET_SASL_PASSWORD"
KAFKA_NET_SASL_TYPE = "KAFKA_NET_SASL_TYPE"

KAFKA_NET_SASL_KERBEROS_ENABLE = "KAFKA_NET_SASL_KERBEROS_ENABLE"
KAFKA_NET_SASL_KERBEROS_KEYTAB_FILE = "KAFKA_NET_SASL_KERBEROS_KEYTAB_FILE"
KAFKA_NET_SASL_KERBEROS_CONFIG_FILE = "KAFKA_NET_SASL_KERBEROS_CONFIG_FILE"
KAFKA_NET_SASL_KERBEROS_PRINCIPAL = "KAFKA_NET_SASL_KERBEROS_PRINCIPAL"
KAFKA_NET_SASL_KERBEROS_SERVICE = "KAFKA_NET_SASL_KERBEROS_SERVICE"
KAFKA_NET_SASL_KERBEROS_REALM = "KAFKA_NET_SASL_KERBEROS_REALM"
KAFKA_NET_SASL_KERBEROS_USERNAME = "KAFKA_NET_SASL_KERBEROS_USERNAME"
KAFKA_NET_SASL_KERBEROS_PASSWORD = "KAFKA_NET_SASL_KERBEROS_PASSWORD"

KAFKA_NET_TLS_ENABLE = "KAFKA_NET_TLS_ENABLE"
KAFKA_NET_TLS_CERT = "KAFKA_NET_TLS_CERT"
KAFKA_NET_TLS_KEY = "KAFKA_NET_TLS_KEY"
KAFKA_NET_TLS_CA_CERT = "KAFKA_NET_TLS_CA_CERT"

ENABLED = "true"

KERBEROS_MOUNT_DIR = "/etc/"


@dataclass(frozen=True)
class MechanismSlice:
    """
    Env slice contributed by one mechanism.

    Fields:
        mechanism: Mechanism this slice belongs to
        enable_env: Env name set to "true" when the mechanism is enabled
        secret_envs: (env name, spec attribute) pairs, emitted in this order
            as secret references, each only when the attribute is set
    """
    mechanism: Mechanism
    enable_env: str
    secret_envs: Tuple[Tuple[str, str], ...]

    @property
    def env_names(self) -> Tuple[str, ...]:
        return (self.enable_env,) + tuple(name for name, _ in self.secret_envs)


@dataclass(frozen=True)
class KerberosFile:
    """
    A Kerberos file projected from a secret into every container.

    The file name doubles as the pod volume name and the key-to-path target.
    """
    file_name: str
    path_env: str
    attr: str

    @property
    def path(self) -> str:
        return posixpath.join(KERBEROS_MOUNT_DIR, self.file_name)


SASL_SLICE = MechanismSlice(
    mechanism=Mechanism.SASL,
    enable_env=KAFKA_NET_SASL_ENABLE,
    secret_envs=(
        (KAFKA_NET_SASL_USER, "user"),
        (KAFKA_NET_SASL_PASSWORD, "password"),
        (KAFKA_NET_SASL_TYPE, "type"),
    ),
)

GSSAPI_SLICE = MechanismSlice(
    mechanism=Mechanism.GSSAPI,
    enable_env=KAFKA_NET_SASL_KERBEROS_ENABLE,
    secret_envs=(
        (KAFKA_NET_SASL_KERBEROS_PRINCIPAL, "principal"),
        (KAFKA_NET_SASL_KERBEROS_SERVICE, "service"),
        (KAFKA_NET_SASL_KERBEROS_REALM, "realm"),
        (KAFKA_NET_SASL_KERBEROS_USERNAME, "username"),
        (KAFKA_NET_SASL_KERBEROS_PASSWORD, "password"),
    ),
)

TLS_SLICE = MechanismSlice(
    mechanism=Mechanism.TLS,
    enable_env=KAFKA_NET_TLS_ENABLE,
    secret_envs=(
        (KAFKA_NET_TLS_CERT, "cert"),
        (KAFKA_NET_TLS_KEY, "key"),
        (KAFKA_NET_TLS_CA_CERT, "ca_cert"),
    ),
)

# Keytab before config; both precede the GSSAPI enable flag in each container.
KERBEROS_FILES: Tuple[KerberosFile, ...] = (
    KerberosFile("krb5.keytab", KAFKA_NET_SASL_KERBEROS_KEYTAB_FILE, "keytab"),
    KerberosFile("krb5.conf", KAFKA_NET_SASL_KERBEROS_CONFIG_FILE, "config"),
)


def _build_env_mechanisms() -> Dict[str, Mechanism]:
    table = {KAFKA_BOOTSTRAP_SERVERS: Mechanism.BROKERS}
    for kfile in KERBEROS_FILES:
        table[kfile.path_env] = Mechanism.GSSAPI
    for mslice in (SASL_SLICE, GSSAPI_SLICE, TLS_SLICE):
        for name in mslice.env_names:
            table[name] = mslice.mechanism
    return table


ENV_MECHANISMS: Dict[str, Mechanism] = _build_env_mechanisms()

MANAGED_ENV_NAMES: FrozenSet[str] = frozenset(ENV_MECHANISMS)

MANAGED_VOLUME_NAMES: FrozenSet[str] = frozenset(kfile.file_name for kfile in KERBEROS_FILES)


def is_managed_env(name: str) -> bool:
    return name in MANAGED_ENV_NAMES


def is_managed_volume(name: str) -> bool:
    return name in MANAGED_VOLUME_NAMES
