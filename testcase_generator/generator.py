"""
Response Generator

Sends the prompt to the LLM runtime and retries until the response is
usable: non-empty and, when the profile requires it, containing the test
case table header.
"""

from __future__ import annotations
from typing import Optional
import logging

from .exceptions import GenerationError, LLMRuntimeError
from .profiles import GenerationProfile
from .runtime import LLMRuntime
from .table_parser import has_table_header

logger = logging.getLogger(__name__)


class TestCaseGenerator:
    """Generate raw test case text with bounded retries."""

    __test__ = False

    def __init__(self, runtime: LLMRuntime, profile: GenerationProfile):
        self.runtime = runtime
        self.profile = profile

    def generate(self, prompt: str) -> str:
        """
        Generate a response for ``prompt``.

        Returns:
            The raw response text of the first valid attempt

        Raises:
            GenerationError: If every attempt failed or was invalid
        """
        max_attempts = self.profile.max_attempts
        last_response: Optional[str] = None
        last_problem = ""

        for attempt in range(1, max_attempts + 1):
            try:
                response = self.runtime.generate(
                    prompt,
                    system_prompt=self.profile.system_prompt,
                    max_tokens=self.profile.max_tokens,
                    temperature=self.profile.temperature,
                )
            except LLMRuntimeError as e:
                last_problem = str(e)
                logger.warning(f"Attempt {attempt}/{max_attempts} failed: {e}")
                continue

            logger.debug(f"Raw LLM response (attempt {attempt}):\n{response}")
            last_response = response

            problem = self._check_response(response)
            if problem is None:
                if attempt > 1:
                    logger.info(f"Received a valid response on attempt {attempt}")
                return response

            last_problem = problem
            logger.warning(f"Attempt {attempt}/{max_attempts}: {problem}")

        logger.error("All generation attempts failed")
        raise GenerationError(max_attempts, last_response, last_problem)

    def _check_response(self, response: str) -> Optional[str]:
        """Return a description of what is wrong with the response, or None."""
        if not response or not response.strip():
            return "Empty response"
        if self.profile.require_table and not has_table_header(response):
            return "Invalid or missing table format in response"
        return None
