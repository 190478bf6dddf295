"""
Layered configuration.

Merge order: defaults -> user config -> project config -> environment ->
explicit overrides (CLI flags). The result is a GeneratorConfig that is
passed to the runtime factory and the workflow.
"""

from __future__ import annotations
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field, PositiveInt, ValidationError

from .exceptions import ConfigurationError

APP_DIR_NAME = "testcase-generator"
PROJECT_CFG_NAME = "testcase-generator.toml"

ProfileName = Literal["basic", "user-stories"]
OutputFormat = Literal["excel", "text"]

ENV_VARS: Dict[str, str] = {
    "api_key": "OPENAI_API_KEY",
    "model": "OPENAI_MODEL",
    "base_url": "OPENAI_BASE_URL",
    "project_folder": "PROJECT_FOLDER",
    "profile": "TESTCASE_GENERATOR_PROFILE",
    "max_tokens": "TESTCASE_GENERATOR_MAX_TOKENS",
    "temperature": "TESTCASE_GENERATOR_TEMPERATURE",
    "max_attempts": "TESTCASE_GENERATOR_ATTEMPTS",
}


class GeneratorConfig(BaseModel):
    """Settings for one generation run."""

    api_key: Optional[str] = Field(None, description="API key for the chat completion endpoint")
    model: str = Field("gpt-4o", description="Chat model name")
    base_url: Optional[str] = Field(None, description="OpenAI-compatible base URL (default: OpenAI)")
    timeout_seconds: float = Field(300.0, gt=0)

    profile: ProfileName = Field("user-stories", description="Prompt/retry profile")
    output_format: Optional[OutputFormat] = Field(None, description="Override the profile's output format")
    project_folder: Path = Field(default_factory=lambda: Path.cwd() / "project")
    output_name: Optional[str] = Field(None, description="Output file name inside the project folder")
    feature: str = Field("Add to Cart", description="Feature under test, used in the user story prompt")

    max_tokens: Optional[PositiveInt] = Field(None, description="Override the profile's max_tokens")
    temperature: Optional[float] = Field(None, ge=0.0, le=2.0)
    max_attempts: Optional[PositiveInt] = Field(None, description="Override the profile's attempt count")


def user_config_path() -> Path:
    return Path.home() / ".config" / APP_DIR_NAME / "config.toml"


def project_config_path() -> Path:
    return Path.cwd() / PROJECT_CFG_NAME


def _read_toml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid config file {path}: {e}") from e


def _env_settings() -> Dict[str, Any]:
    env = {}
    for key, var in ENV_VARS.items():
        value = os.getenv(var)
        if value not in (None, ""):
            env[key] = value
    return env


def load_config(overrides: Optional[Dict[str, Any]] = None) -> GeneratorConfig:
    """
    Build the merged configuration.

    Args:
        overrides: Explicit values (usually CLI flags); None values are ignored

    Raises:
        ConfigurationError: If a config file or a value is invalid
    """
    fields = GeneratorConfig.model_fields.keys()
    settings: Dict[str, Any] = {}

    def overlay(d: Dict[str, Any]):
        for k in fields:
            if k in d and d[k] is not None:
                settings[k] = d[k]

    overlay(_read_toml(user_config_path()))
    overlay(_read_toml(project_config_path()))
    overlay(_env_settings())
    overlay(overrides or {})

    try:
        return GeneratorConfig(**settings)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
