from __future__ import annotations
import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from .errors import HyperflowError

DEFAULT_SETTINGS_FILE = Path("hyperflow.yaml")

# env var -> settings field
_ENV_OVERRIDES = {
    "HYPERFLOW_MODE": "mode",
    "HYPERFLOW_MAX_DEPTH": "max_depth",
    "HYPERFLOW_STRICT_REFERENCES": "strict_references",
    "HYPERFLOW_PROCESSOR_DELAY": "processor_delay",
}


class RunSettings(BaseModel):
    # "wave" runs sources plus one hop; "topological" runs every node once
    mode: Literal["wave", "topological"] = "wave"
    max_depth: int = Field(32, ge=1)
    strict_references: bool = False
    processor_delay: float = Field(0.1, ge=0)


def load_settings(path: Optional[Path] = None) -> RunSettings:
    """Read settings from a YAML file, then apply HYPERFLOW_* environment overrides.

    Without an explicit path, ./hyperflow.yaml is used when it exists.
    """
    data: Dict[str, Any] = {}
    if path is None and DEFAULT_SETTINGS_FILE.exists():
        path = DEFAULT_SETTINGS_FILE
    if path is not None:
        try:
            loaded = yaml.safe_load(Path(path).read_text())
        except (OSError, yaml.YAMLError) as e:
            raise HyperflowError(f"Could not read settings file '{path}': {e}") from e
        if loaded is not None and not isinstance(loaded, dict):
            raise HyperflowError(f"Settings file '{path}' must contain a mapping")
        data.update(loaded or {})

    for env, field in _ENV_OVERRIDES.items():
        if env in os.environ:
            data[field] = os.environ[env]

    try:
        return RunSettings(**data)
    except ValidationError as e:
        raise HyperflowError(f"Invalid settings: {e}") from e
