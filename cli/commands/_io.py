"""
Manifest file helpers shared by the CLI commands.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from kafkabinding.core import BindingSpec


def load_json(path: Path) -> Dict[str, Any]:
    with open(path, "r") as f:
        return json.load(f)


def load_binding(path: Path) -> BindingSpec:
    """Accepts a full KafkaBinding resource or just its spec."""
    raw = load_json(path)
    if isinstance(raw, dict) and raw.get("kind") == "KafkaBinding":
        raw = raw.get("spec") or {}
    return BindingSpec.from_dict(raw)


def write_json(obj: Any, output: Optional[Path]) -> None:
    text = json.dumps(obj, indent=2)
    if output is None:
        print(text)
        return
    with open(output, "w") as f:
        f.write(text + "\n")
