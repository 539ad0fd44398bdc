"""Test-run configuration and the files that feed it."""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 5000


class TesterConfig(BaseModel):
    """Settings for one test run. Read-only once built."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    base_url: str = Field(alias="baseUrl")
    headers: dict[str, str] = {}
    timeout: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0)  # milliseconds
    validate_schema: bool = Field(default=False, alias="validateSchema")
    param_values: dict[str, Any] = Field(default={}, alias="paramValues")


def _load_mapping(file_path: Path) -> dict:
    data = yaml.safe_load(Path(file_path).read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{file_path}: expected a mapping at the top level")
    return data


def load_config_file(file_path: Path) -> dict:
    """Read CLI defaults: ``{command_name: {option_name: value}}`` as YAML or JSON."""
    return _load_mapping(file_path)


def load_param_values(file_path: Path) -> dict[str, Any]:
    """Read the parameter override map. A missing file gives no overrides."""
    file_path = Path(file_path)
    if not file_path.exists():
        logger.warning("Parameters file does not exist: %s", file_path)
        return {}
    return _load_mapping(file_path)
