"""
Kafka binding operator.

kopf handlers that keep KafkaBinding subjects bound to their brokers.
Run with: kopf run -m kafkabinding_operator.main
"""
