"""
Test Case Generator

Turns requirements documents (TXT, DOCX, PDF) into QA test case tables using
an OpenAI-compatible chat model, and writes them to Excel or text files.
"""

__version__ = "0.1.0"
__all__ = [
    "TestCaseWorkflow",
    "TestCaseRecord",
    "ParsedTable",
    "GeneratorConfig",
    "parse_test_cases",
    "TestCaseGeneratorError"
]

from .config import GeneratorConfig
from .models import TestCaseRecord, ParsedTable
from .table_parser import parse_test_cases
from .workflow import TestCaseWorkflow
from .exceptions import TestCaseGeneratorError
