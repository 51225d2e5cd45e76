"""
Operator configuration from environment variables.

Environment Variables:
    KAFKA_BINDING_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR - default: INFO
    KAFKA_BINDING_LOG_FORMAT: json, text - default: json
    KAFKA_BINDING_METRICS_ENABLED: true/false - default: false
    KAFKA_BINDING_METRICS_PORT: HTTP port for /metrics - default: 8080
    KAFKA_BINDING_RETRY_DELAY_SECONDS: Delay before kopf retries a conflict - default: 10
    KAFKA_BINDING_NAMESPACE: Only watch this namespace - default: all namespaces
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

GROUP = "bindings.knative.dev"
VERSION = "v1beta1"
PLURAL = "kafkabindings"


@dataclass
class OperatorConfig:
    log_level: str
    log_format: str
    metrics_enabled: bool
    metrics_port: int
    retry_delay_seconds: int
    namespace: Optional[str]

    @staticmethod
    def from_env() -> "OperatorConfig":
        return OperatorConfig(
            log_level=os.getenv("KAFKA_BINDING_LOG_LEVEL", "INFO").upper(),
            log_format=os.getenv("KAFKA_BINDING_LOG_FORMAT", "json").lower(),
            metrics_enabled=os.getenv("KAFKA_BINDING_METRICS_ENABLED", "false").lower() == "true",
            metrics_port=int(os.getenv("KAFKA_BINDING_METRICS_PORT", "8080")),
            retry_delay_seconds=int(os.getenv("KAFKA_BINDING_RETRY_DELAY_SECONDS", "10")),
            namespace=os.getenv("KAFKA_BINDING_NAMESPACE") or None,
        )
