"""
Generation profiles.

A profile captures everything that differs between the generic
"any document, plain text out" flow and the user story flow that produces
an Excel workbook: prompt builder, system prompt, token budget, attempts,
whether a parseable table is required, accepted inputs and default output.
"""

from __future__ import annotations
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from .config import GeneratorConfig, OutputFormat, ProfileName
from .documents import SUPPORTED_EXTENSIONS
from .prompts import (
    BASIC_SYSTEM_PROMPT,
    USER_STORY_SYSTEM_PROMPT,
    build_basic_prompt,
    build_user_story_prompt,
    extract_user_story_titles,
)


class GenerationProfile(BaseModel):
    """Knobs for one flavour of the generation pipeline."""

    model_config = ConfigDict(frozen=True)

    name: ProfileName
    system_prompt: str
    max_tokens: int
    max_attempts: int
    require_table: bool
    default_output_format: OutputFormat
    accepted_extensions: Tuple[str, ...]
    temperature: Optional[float] = None

    def build_prompt(self, document_text: str, feature: str = "Add to Cart") -> str:
        if self.name == "user-stories":
            titles = extract_user_story_titles(document_text)
            return build_user_story_prompt(document_text, titles, feature=feature)
        return build_basic_prompt(document_text)


PROFILES: Dict[str, GenerationProfile] = {
    "basic": GenerationProfile(
        name="basic",
        system_prompt=BASIC_SYSTEM_PROMPT,
        max_tokens=4000,
        max_attempts=1,
        require_table=False,
        default_output_format="text",
        accepted_extensions=tuple(SUPPORTED_EXTENSIONS),
    ),
    "user-stories": GenerationProfile(
        name="user-stories",
        system_prompt=USER_STORY_SYSTEM_PROMPT,
        max_tokens=8000,
        max_attempts=3,
        require_table=True,
        default_output_format="excel",
        accepted_extensions=(".docx",),
    ),
}


def resolve_profile(config: GeneratorConfig) -> GenerationProfile:
    """Look up the configured profile and apply token/attempt/temperature overrides."""
    profile = PROFILES[config.profile]

    updates = {}
    if config.max_tokens is not None:
        updates["max_tokens"] = config.max_tokens
    if config.max_attempts is not None:
        updates["max_attempts"] = config.max_attempts
    if config.temperature is not None:
        updates["temperature"] = config.temperature

    return profile.model_copy(update=updates) if updates else profile


def list_profiles() -> List[str]:
    return list(PROFILES)
