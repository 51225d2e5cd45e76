"""
Kafka Binding Engine

Injects (and ejects) Kafka broker connection settings into Kubernetes pod templates.
"""

__version__ = "0.1.0"
