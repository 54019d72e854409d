"""Generation specs — which references to expose and how to name them.

The default table ships as specs.yaml next to this package.
"""

from pathlib import Path

import yaml
from pydantic import BaseModel

DEFAULT_SPECS_PATH = Path(__file__).parent.parent / "specs.yaml"


class GenerationSpec(BaseModel):
    """How to turn one ISS reference into query fields."""

    reference_id: int
    name_prefix: str | None = None
    name_suffix: str | None = None
    default_args: dict[str, str] = {}
    enum_arg_overrides: dict[str, list[str]] = {}
    arg_type_overrides: dict[str, str] = {}
    query_name_overrides: dict[str, str] = {}


def load_specs(file_path: Path | None = None) -> list[GenerationSpec]:
    """Load generation specs from a YAML file (the packaged table by default)."""
    path = file_path or DEFAULT_SPECS_PATH
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return [GenerationSpec(**item) for item in data.get("references", [])]
