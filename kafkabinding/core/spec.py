"""
Binding spec model.

A BindingSpec is built once per reconciliation from the KafkaBinding resource
and is read-only for the engine. Secret references are carried through to the
pod template as-is; resolving them is the kubelet's job.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from kubernetes import client

from .errors import BindingSpecError


@dataclass(frozen=True)
class SecretKeyRef:
    """
    Reference to one key inside a named Secret.

    Fields:
        name: Secret name
        key: Key within the Secret's data
        optional: Passed through to the env source when set
    """
    name: str
    key: str
    optional: Optional[bool] = None

    def to_selector(self) -> client.V1SecretKeySelector:
        return client.V1SecretKeySelector(name=self.name, key=self.key, optional=self.optional)

    @staticmethod
    def from_value_source(raw: Any, path: str) -> Optional["SecretKeyRef"]:
        """
        Parse a `{secretKeyRef: {name, key}}` value source.

        Returns None when the source or its secretKeyRef is absent.

        Raises:
            BindingSpecError: If the source is not a mapping or the
                reference lacks a string name or key
        """
        if raw is None:
            return None
        if not isinstance(raw, dict):
            raise BindingSpecError(f"{path}: expected an object, got {type(raw).__name__}")
        ref = raw.get("secretKeyRef")
        if ref is None:
            return None
        if not isinstance(ref, dict):
            raise BindingSpecError(f"{path}.secretKeyRef: expected an object")

        name = ref.get("name")
        key = ref.get("key")
        if not isinstance(name, str) or not name:
            raise BindingSpecError(f"{path}.secretKeyRef.name: expected a non-empty string")
        if not isinstance(key, str) or not key:
            raise BindingSpecError(f"{path}.secretKeyRef.key: expected a non-empty string")

        optional = ref.get("optional")
        if optional is not None and not isinstance(optional, bool):
            raise BindingSpecError(f"{path}.secretKeyRef.optional: expected a boolean")
        return SecretKeyRef(name=name, key=key, optional=optional)


def _enable_flag(block: Dict[str, Any], path: str) -> bool:
    value = block.get("enable", False)
    if not isinstance(value, bool):
        raise BindingSpecError(f"{path}.enable: expected a boolean")
    return value


def _block(raw: Any, path: str) -> Dict[str, Any]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise BindingSpecError(f"{path}: expected an object, got {type(raw).__name__}")
    return raw


def _refs(block: Dict[str, Any], path: str, fields: Dict[str, str]) -> Dict[str, Optional[SecretKeyRef]]:
    return {
        attr: SecretKeyRef.from_value_source(block.get(json_name), f"{path}.{json_name}")
        for attr, json_name in fields.items()
    }


@dataclass(frozen=True)
class SASLSpec:
    enable: bool = False
    user: Optional[SecretKeyRef] = None
    password: Optional[SecretKeyRef] = None
    type: Optional[SecretKeyRef] = None

    @staticmethod
    def from_dict(raw: Any, path: str = "spec.net.sasl") -> "SASLSpec":
        block = _block(raw, path)
        refs = _refs(block, path, {"user": "user", "password": "password", "type": "type"})
        return SASLSpec(enable=_enable_flag(block, path), **refs)


@dataclass(frozen=True)
class GSSAPISpec:
    """Kerberos settings; keytab and config are projected as files."""
    enable: bool = False
    keytab: Optional[SecretKeyRef] = None
    config: Optional[SecretKeyRef] = None
    principal: Optional[SecretKeyRef] = None
    service: Optional[SecretKeyRef] = None
    realm: Optional[SecretKeyRef] = None
    username: Optional[SecretKeyRef] = None
    password: Optional[SecretKeyRef] = None

    @staticmethod
    def from_dict(raw: Any, path: str = "spec.net.gssapi") -> "GSSAPISpec":
        block = _block(raw, path)
        names = ("keytab", "config", "principal", "service", "realm", "username", "password")
        refs = _refs(block, path, {n: n for n in names})
        return GSSAPISpec(enable=_enable_flag(block, path), **refs)


@dataclass(frozen=True)
class TLSSpec:
    enable: bool = False
    cert: Optional[SecretKeyRef] = None
    key: Optional[SecretKeyRef] = None
    ca_cert: Optional[SecretKeyRef] = None

    @staticmethod
    def from_dict(raw: Any, path: str = "spec.net.tls") -> "TLSSpec":
        block = _block(raw, path)
        refs = _refs(block, path, {"cert": "cert", "key": "key", "ca_cert": "caCert"})
        return TLSSpec(enable=_enable_flag(block, path), **refs)


@dataclass(frozen=True)
class BindingSpec:
    """
    Connection settings a KafkaBinding projects into its subject.

    Fields:
        bootstrap_servers: Broker addresses, order preserved in the emitted value
        sasl: SASL user/password/mechanism
        gssapi: Kerberos keytab/config files and principal details
        tls: Client certificate, key and CA
    """
    bootstrap_servers: Tuple[str, ...] = ()
    sasl: SASLSpec = field(default_factory=SASLSpec)
    gssapi: GSSAPISpec = field(default_factory=GSSAPISpec)
    tls: TLSSpec = field(default_factory=TLSSpec)

    @property
    def bootstrap_servers_value(self) -> str:
        return ",".join(self.bootstrap_servers)

    @staticmethod
    def from_dict(spec: Any) -> "BindingSpec":
        """
        Build a BindingSpec from the resource's `spec` JSON.

        Only the JSON shape is checked. A mechanism enabled without any
        secret references is accepted as-is.

        Raises:
            BindingSpecError: If any field has the wrong JSON type
        """
        spec = _block(spec, "spec")

        servers = spec.get("bootstrapServers", [])
        if not isinstance(servers, list) or not all(isinstance(s, str) for s in servers):
            raise BindingSpecError("spec.bootstrapServers: expected a list of strings")

        net = _block(spec.get("net"), "spec.net")
        return BindingSpec(
            bootstrap_servers=tuple(servers),
            sasl=SASLSpec.from_dict(net.get("sasl")),
            gssapi=GSSAPISpec.from_dict(net.get("gssapi")),
            tls=TLSSpec.from_dict(net.get("tls")),
        )
