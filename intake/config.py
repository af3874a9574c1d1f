"""Runtime configuration for the intake wizard."""

import os
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator

CONFIG_FILE = 'intake-config.yaml'


class IntakeConfig(BaseModel):
    """Settings read from intake-config.yaml and INTAKE_* environment variables."""

    form: str = Field('vera_client', description="Form to run")
    forms_path: Optional[Path] = Field(None, description="Directory with form specs (default: bundled)")
    output_dir: Optional[Path] = Field(None, description="Where submitted records are written")
    verbose: bool = Field(False, description="Print extra diagnostics")
    log_level: str = Field('INFO', description="Logging level name")

    @field_validator('log_level')
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if value not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f"Unknown log level: {value}")
        return value


def load_config(path: Optional[Union[str, Path]] = None) -> IntakeConfig:
    """Load configuration from YAML, then apply environment overrides.

    Args:
        path: Config file (default: ./intake-config.yaml, skipped if missing)

    Returns:
        Validated IntakeConfig

    Raises:
        FileNotFoundError: If an explicitly given path doesn't exist
        ValidationError: If values don't match the schema
    """
    data = {}
    config_path = Path(path) if path else Path.cwd() / CONFIG_FILE

    if config_path.exists():
        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    elif path:
        raise FileNotFoundError(f"Config file not found: {config_path}")

    overrides = {
        'form': os.environ.get('INTAKE_FORM'),
        'output_dir': os.environ.get('INTAKE_OUTPUT_DIR'),
        'log_level': os.environ.get('INTAKE_LOG_LEVEL'),
    }
    data.update({key: value for key, value in overrides.items() if value})
    if os.environ.get('INTAKE_VERBOSE'):
        data['verbose'] = True

    return IntakeConfig(**data)
