"""
kafkabinding CLI - render KafkaBinding injection offline

Commands:
- kafkabinding apply - Apply a binding to a workload manifest
- kafkabinding remove - Strip a binding from a workload manifest
- kafkabinding env - Show the env/volumes a binding projects
"""

__version__ = "0.1.0"
