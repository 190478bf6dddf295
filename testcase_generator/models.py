"""
Data models for the test case generator.

TestCaseRecord is one row of the generated table; ParsedTable is what the
table parser hands to the writers. Both are immutable once built.
"""

from __future__ import annotations
from typing import Dict, List, Tuple
from pydantic import BaseModel, ConfigDict, Field


TEST_CASE_HEADERS: Tuple[str, ...] = (
    "Test ID",
    "Category",
    "Description",
    "Test Steps",
    "Expected Result",
    "Test Data",
)


class TestCaseRecord(BaseModel):
    """One row of the output table. Fields follow TEST_CASE_HEADERS order."""

    # Not a pytest test class
    __test__ = False

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    test_id: str = Field(..., alias="Test ID")
    category: str = Field(..., alias="Category")
    description: str = Field(..., alias="Description")
    test_steps: str = Field(..., alias="Test Steps")
    expected_result: str = Field(..., alias="Expected Result")
    test_data: str = Field(..., alias="Test Data")

    @classmethod
    def from_fragments(cls, fragments: List[str]) -> TestCaseRecord:
        """Pair fragments positionally with the fixed headers."""
        if len(fragments) != len(TEST_CASE_HEADERS):
            raise ValueError(
                f"Expected {len(TEST_CASE_HEADERS)} fragments, got {len(fragments)}"
            )
        return cls(**dict(zip(TEST_CASE_HEADERS, fragments)))

    def as_row(self) -> List[str]:
        """Field values in header order."""
        return [
            self.test_id,
            self.category,
            self.description,
            self.test_steps,
            self.expected_result,
            self.test_data,
        ]

    def as_dict(self) -> Dict[str, str]:
        """Field values keyed by header name."""
        return dict(zip(TEST_CASE_HEADERS, self.as_row()))


class ParsedTable(BaseModel):
    """Parser output: fixed headers, parsed records and the rows it dropped."""

    model_config = ConfigDict(frozen=True)

    headers: Tuple[str, ...] = TEST_CASE_HEADERS
    records: Tuple[TestCaseRecord, ...] = ()
    skipped_rows: Tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.records


class UserStoryTitle(BaseModel):
    """User story title and the Test ID prefix derived from it."""

    model_config = ConfigDict(frozen=True)

    full_title: str
    prefix: str
