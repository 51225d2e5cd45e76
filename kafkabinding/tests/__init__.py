"""
Test suite for the kafka binding engine and operator.

Focus areas:
- Injection order and idempotency
- Exact removal of the managed vocabulary
- Mechanism orthogonality
- Operator reconcile/finalize against stubbed kubernetes APIs
"""
