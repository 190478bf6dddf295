"""
Test Case Generation Workflow

Runs the pipeline:
1. Document Reader → 2. Response Generator → 3. Table Parser → 4. Table Writer

Each stage raises on failure, which stops the run. The active profile
decides the prompt, retry budget and default output format, so the plain
text flow and the user story flow share one code path.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Optional, Union
import logging
import re
import time

from .config import GeneratorConfig, OutputFormat
from .documents import read_document
from .exceptions import DocumentNotFoundError, NoTestCasesError, UnsupportedDocumentError
from .generator import TestCaseGenerator
from .models import ParsedTable
from .profiles import GenerationProfile, resolve_profile
from .runtime import LLMRuntime
from .table_parser import parse_test_cases
from .writers import save_raw_text, save_test_cases_to_excel, save_test_cases_to_text

logger = logging.getLogger(__name__)

OUTPUT_SUFFIXES: Dict[str, str] = {"excel": ".xlsx", "text": ".txt"}


@dataclass
class WorkflowResult:
    """Outcome of one workflow run."""
    document_path: Path
    output_format: OutputFormat
    output_path: Optional[Path] = None
    record_count: int = 0
    skipped_rows: int = 0
    cancelled: bool = False
    timings: Dict[str, float] = field(default_factory=dict)


def default_output_name(feature: str, output_format: OutputFormat = "excel") -> str:
    """File name derived from the feature, e.g. "Add to Cart" -> "AddToCartTestCases.xlsx"."""
    words = re.findall(r'[A-Za-z0-9]+', feature)
    stem = "".join(word[:1].upper() + word[1:] for word in words)
    return f"{stem}TestCases{OUTPUT_SUFFIXES[output_format]}"


class TestCaseWorkflow:
    """
    Main workflow orchestrator.

    Holds the runtime and configuration for a run; has no other state, so
    one instance may run several documents in sequence.
    """

    __test__ = False

    def __init__(self, runtime: LLMRuntime, config: GeneratorConfig):
        self.runtime = runtime
        self.config = config
        self.profile: GenerationProfile = resolve_profile(config)

    def run(
        self,
        document_path: Union[str, Path],
        output_path: Optional[Union[str, Path]] = None,
        output_format: Optional[OutputFormat] = None,
        confirm_overwrite: Optional[Callable[[Path], bool]] = None,
    ) -> WorkflowResult:
        """
        Generate test cases for one document.

        Args:
            document_path: Requirements document (TXT, DOCX or PDF)
            output_path: Explicit output file (derived from config if None)
            output_format: "excel" or "text" (profile default if None)
            confirm_overwrite: Called with the output path when it already
                exists; returning False cancels the run before writing

        Raises:
            DocumentError: If the document cannot be read
            GenerationError: If the model produced no usable response
            NoTestCasesError: If a table was required but no rows parsed
            OutputWriteError: If the output cannot be written
        """
        document_path = Path(document_path).expanduser()
        fmt: OutputFormat = (
            output_format or self.config.output_format or self.profile.default_output_format
        )
        result = WorkflowResult(document_path=document_path, output_format=fmt)

        logger.info(f"Starting '{self.profile.name}' workflow for {document_path}")

        # Stage 1: Document Reader
        t0 = time.perf_counter()
        self._check_document(document_path)
        document_text = read_document(document_path)
        result.timings["read"] = time.perf_counter() - t0

        # Stage 2: Response Generator
        t0 = time.perf_counter()
        prompt = self.profile.build_prompt(document_text, feature=self.config.feature)
        generator = TestCaseGenerator(self.runtime, self.profile)
        raw_response = generator.generate(prompt)
        result.timings["generate"] = time.perf_counter() - t0

        # Stage 3: Table Parser
        t0 = time.perf_counter()
        table = parse_test_cases(raw_response)
        result.record_count = len(table.records)
        result.skipped_rows = len(table.skipped_rows)
        result.timings["parse"] = time.perf_counter() - t0

        # Stage 4: Table Writer
        t0 = time.perf_counter()
        project_folder = self.config.project_folder.expanduser()

        if fmt == "text" and not self.profile.require_table:
            # free-form response, keep it verbatim
            result.output_path = save_raw_text(raw_response, project_folder)
        else:
            if table.is_empty:
                raise NoTestCasesError(result.skipped_rows)

            target = Path(output_path).expanduser() if output_path else self._default_output_path(fmt)
            if target.exists() and confirm_overwrite is not None and not confirm_overwrite(target):
                logger.info("Operation cancelled: output file exists")
                result.cancelled = True
                return result

            result.output_path = self._write_table(table, target, fmt)

        result.timings["write"] = time.perf_counter() - t0

        logger.info(
            f"Workflow complete: {result.record_count} test cases, "
            f"{result.skipped_rows} skipped rows, output: {result.output_path}"
        )
        return result

    def _check_document(self, document_path: Path) -> None:
        if not document_path.is_file():
            raise DocumentNotFoundError(str(document_path))
        if document_path.suffix.lower() not in self.profile.accepted_extensions:
            raise UnsupportedDocumentError(
                str(document_path), list(self.profile.accepted_extensions)
            )

    def _default_output_path(self, fmt: OutputFormat) -> Path:
        folder = self.config.project_folder.expanduser()
        if self.config.output_name:
            name = Path(self.config.output_name)
            if fmt == "text" and name.suffix.lower() == ".xlsx":
                name = name.with_suffix(".txt")
            return folder / name
        return folder / default_output_name(self.config.feature, fmt)

    @staticmethod
    def _write_table(table: ParsedTable, target: Path, fmt: OutputFormat) -> Path:
        if fmt == "excel":
            return save_test_cases_to_excel(table, target)
        return save_test_cases_to_text(table, target)


def generate_test_cases(
    document_path: Union[str, Path],
    runtime: LLMRuntime,
    config: Optional[GeneratorConfig] = None,
    output_path: Optional[Union[str, Path]] = None,
) -> WorkflowResult:
    """
    Convenience function to run the workflow once.

    Existing output files are overwritten.
    """
    workflow = TestCaseWorkflow(runtime, config or GeneratorConfig())
    return workflow.run(document_path, output_path=output_path)
