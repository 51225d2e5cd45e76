"""
Tests for canonical spec hashing.
"""

from kafkabinding.core import BindingSpec, spec_hash
from kafkabinding.core.canonical import canonical_json_bytes, canonicalize
from kafkabinding.tests.builders import full_spec, sasl_spec


def test_canonicalize_dict_key_order():
    assert canonicalize({"z": 1, "a": 2}) == canonicalize({"a": 2, "z": 1})


def test_canonical_json_bytes_sorted_compact():
    assert canonical_json_bytes({"b": 2, "a": 1}) == b'{"a":1,"b":2}'


def test_spec_hash_deterministic():
    assert spec_hash(full_spec()) == spec_hash(full_spec())
    assert len(spec_hash(full_spec())) == 64


def test_spec_hash_tracks_changes():
    assert spec_hash(sasl_spec()) != spec_hash(full_spec())
    assert spec_hash(sasl_spec(("b1:9092",))) != spec_hash(sasl_spec(("b2:9092",)))


def test_spec_hash_matches_parsed_spec():
    """A parsed resource hashes the same as the equivalent dataclass."""
    parsed = BindingSpec.from_dict({
        "bootstrapServers": ["b1:9092", "b2:9092"],
        "net": {
            "sasl": {
                "enable": True,
                "user": {"secretKeyRef": {"name": "s1", "key": "u"}},
                "password": {"secretKeyRef": {"name": "s1", "key": "p"}},
                "type": {"secretKeyRef": {"name": "s1", "key": "t"}},
            }
        },
    })

    assert spec_hash(parsed) == spec_hash(sasl_spec())
