"""
kopf entrypoint for KafkaBinding resources.

    kopf run -m kafkabinding_operator.main --all-namespaces
"""

import kopf
import kubernetes
from kubernetes.client.rest import ApiException

from kafkabinding.core.lifecycle import REASON_APPLY_FAILED

from .config import GROUP, PLURAL, VERSION, OperatorConfig
from .logging_config import get_logger, setup_logging
from .metrics import start_metrics_server, track_failure, track_reconcile_duration
from .reconcile import BindingReconciler, subject_changed

config = OperatorConfig.from_env()


def _watched(namespace, **_) -> bool:
    return config.namespace is None or namespace == config.namespace


def _retry(action: str, namespace: str, name: str, e: ApiException) -> kopf.TemporaryError:
    track_failure(REASON_APPLY_FAILED)
    return kopf.TemporaryError(
        f"{action} KafkaBinding {namespace}/{name} failed: {e.status} {e.reason}",
        delay=config.retry_delay_seconds,
    )


@kopf.on.startup()
def _startup(settings: kopf.OperatorSettings, **_):
    setup_logging(level=config.log_level, log_format=config.log_format)
    start_metrics_server(enabled=config.metrics_enabled, port=config.metrics_port)

    # In-cluster config first, kubeconfig for local development
    try:
        kubernetes.config.load_incluster_config()
    except kubernetes.config.ConfigException:
        kubernetes.config.load_kube_config()

    logger = get_logger(__name__)
    logger.info("Operator startup complete", extra={
        "metrics_enabled": config.metrics_enabled,
        "metrics_port": config.metrics_port,
        "namespace": config.namespace or "*",
    })


@kopf.on.resume(GROUP, VERSION, PLURAL, when=_watched)
@kopf.on.create(GROUP, VERSION, PLURAL, when=_watched)
@kopf.on.update(GROUP, VERSION, PLURAL, when=_watched)
def binding_reconcile(spec, name, namespace, meta, status, patch, old=None, **_):
    logger = get_logger(__name__, trace_id=f"{namespace}/{name}")
    logger.info(f"Reconciling KafkaBinding {namespace}/{name}")
    reconciler = BindingReconciler(logger)
    spec = dict(spec)

    with track_reconcile_duration("apply"):
        try:
            old_spec = dict((old or {}).get("spec") or {})
            if old and subject_changed(old_spec, spec):
                logger.info("Subject changed, unbinding previous subject")
                reconciler.finalize(name, namespace, old_spec)

            result = reconciler.reconcile(
                name,
                namespace,
                spec,
                generation=meta.get("generation"),
                status=dict(status or {}),
            )
        except ApiException as e:
            raise _retry("Applying", namespace, name, e)

    patch.setdefault("status", {}).update(result.to_dict())
    logger.info(f"KafkaBinding {namespace}/{name} ready={result.is_ready()}")


@kopf.on.delete(GROUP, VERSION, PLURAL, when=_watched)
def binding_delete(spec, name, namespace, **_):
    logger = get_logger(__name__, trace_id=f"{namespace}/{name}")
    logger.info(f"Removing KafkaBinding {namespace}/{name}")

    with track_reconcile_duration("remove"):
        try:
            count = BindingReconciler(logger).finalize(name, namespace, dict(spec))
        except ApiException as e:
            raise _retry("Removing", namespace, name, e)

    logger.info(f"KafkaBinding {namespace}/{name} removed from {count} workload(s)")
