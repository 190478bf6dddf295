"""
Table Parser (Deterministic)

Converts the model's pipe-delimited table response into TestCaseRecords.
No LLM calls, no I/O: given the same text it always returns the same table.

A malformed row (anything that does not split into exactly six fragments)
is dropped and reported in ``ParsedTable.skipped_rows``; it never aborts the
parse. Cells may carry a literal pipe escaped as ``\\|``. An unescaped pipe
inside a cell still splits the row and gets it dropped.
"""

from __future__ import annotations
import re
from typing import List, Optional
import logging

from .models import ParsedTable, TestCaseRecord, TEST_CASE_HEADERS

logger = logging.getLogger(__name__)

_HEADER_START = re.compile(r'^\|\s*' + re.escape(TEST_CASE_HEADERS[0]))
_SEPARATOR = re.compile(r'^\|[\s:|-]*-[\s:|-]*$')
_UNESCAPED_PIPE = re.compile(r'(?<!\\)\|')


class TableParser:
    """
    Scans a raw response line by line for the test case table.

    Everything before the header line is ignored, as is any line after it
    that does not start with a pipe.
    """

    @staticmethod
    def parse(text: Optional[str]) -> ParsedTable:
        if not text or not isinstance(text, str):
            logger.warning("Empty or non-text response passed to the table parser")
            return ParsedTable()

        lines = [line.strip() for line in text.split("\n")]
        lines = [line for line in lines if line]

        records: List[TestCaseRecord] = []
        skipped: List[str] = []
        table_started = False

        for line in lines:
            if TableParser.is_header_line(line):
                table_started = True
                continue

            if not table_started or not line.startswith('|'):
                continue

            if TableParser.is_separator_line(line):
                continue

            fragments = TableParser.split_row(line)
            if len(fragments) != len(TEST_CASE_HEADERS):
                logger.warning(
                    f"Skipping malformed row ({len(fragments)} columns, "
                    f"expected {len(TEST_CASE_HEADERS)}): {line}"
                )
                skipped.append(line)
                continue

            records.append(TestCaseRecord.from_fragments(fragments))

        logger.info(f"Parsed {len(records)} test cases ({len(skipped)} malformed rows skipped)")
        return ParsedTable(records=tuple(records), skipped_rows=tuple(skipped))

    @staticmethod
    def is_header_line(line: str) -> bool:
        """Header marker: ``| Test ID`` plus the next two column labels."""
        return (
            _HEADER_START.match(line) is not None
            and TEST_CASE_HEADERS[1] in line
            and TEST_CASE_HEADERS[2] in line
        )

    @staticmethod
    def is_separator_line(line: str) -> bool:
        """``|---|---|`` style rule between header and data rows (colons allowed)."""
        return _SEPARATOR.match(line.strip()) is not None

    @staticmethod
    def split_row(line: str) -> List[str]:
        """
        Split a table row on unescaped pipes.

        Fragments are trimmed and the empty fragments produced by the
        leading and trailing delimiters are dropped. Empty cells in the
        middle of the row are kept.
        """
        fragments = [part.strip() for part in _UNESCAPED_PIPE.split(line.strip())]

        if fragments and fragments[0] == "":
            fragments = fragments[1:]
        if fragments and fragments[-1] == "":
            fragments = fragments[:-1]

        return [fragment.replace('\\|', '|') for fragment in fragments]


# Convenience functions

def parse_test_cases(text: Optional[str]) -> ParsedTable:
    """Parse a raw model response into a ParsedTable."""
    return TableParser.parse(text)


def has_table_header(text: Optional[str]) -> bool:
    """True if any line of ``text`` is a test case table header."""
    if not text:
        return False
    return any(TableParser.is_header_line(line.strip()) for line in text.split("\n"))


def is_separator_line(line: str) -> bool:
    return TableParser.is_separator_line(line)


def split_row(line: str) -> List[str]:
    return TableParser.split_row(line)
