"""
Command Line Interface for the Test Case Generator

Single command that reads a requirements document, generates test cases
and writes them out:
- Prompts interactively for anything not given on the command line
- Exits non-zero with a machine-readable error report on failure
- Prints a brief summary on success (counts + output path)
"""

from __future__ import annotations
import argparse
import getpass
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional
import logging

from dotenv import find_dotenv, load_dotenv

from .config import GeneratorConfig, load_config
from .documents import SUPPORTED_EXTENSIONS
from .exceptions import (
    ConfigurationError,
    DocumentError,
    GenerationError,
    LLMRuntimeError,
    NoTestCasesError,
    OutputWriteError,
    TestCaseGeneratorError,
)
from .profiles import list_profiles
from .runtime import create_runtime
from .workflow import TestCaseWorkflow, WorkflowResult

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Reduce noise from HTTP client libraries
    for name in ('openai', 'httpx', 'httpcore', 'urllib3'):
        logging.getLogger(name).setLevel(logging.WARNING)


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""

    parser = argparse.ArgumentParser(
        prog='testcase-generator',
        description="Test Case Generator - Turn requirements documents into QA test case tables using an LLM",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # User stories (.docx) to an Excel workbook in ./project
  testcase-generator stories.docx

  # Any TXT/DOCX/PDF document, raw model output saved as text
  testcase-generator --profile basic requirements.pdf

  # Local OpenAI-compatible server, no prompts
  testcase-generator --base-url http://localhost:8080/v1 --model local-model \\
    --no-input --yes --project-folder ./out stories.docx
        """
    )

    parser.add_argument(
        'document',
        nargs='?',
        type=Path,
        help=f"Requirements document ({', '.join(s.lstrip('.').upper() for s in SUPPORTED_EXTENSIONS)}); prompted for if omitted"
    )

    gen_group = parser.add_argument_group('generation options')
    gen_group.add_argument(
        '--profile',
        choices=list_profiles(),
        help='Generation profile (default: user-stories)'
    )
    gen_group.add_argument(
        '--feature',
        help='Feature under test, used in the user story prompt (default: "Add to Cart")'
    )
    gen_group.add_argument(
        '--max-tokens',
        type=int,
        help="Maximum completion tokens (default: profile's value)"
    )
    gen_group.add_argument(
        '--temperature',
        type=float,
        help='Sampling temperature (default: model default)'
    )
    gen_group.add_argument(
        '--attempts',
        type=int,
        dest='max_attempts',
        help="Generation attempts before giving up (default: profile's value)"
    )

    runtime_group = parser.add_argument_group('LLM runtime options')
    runtime_group.add_argument(
        '--model',
        help='Chat model (default: $OPENAI_MODEL or gpt-4o)'
    )
    runtime_group.add_argument(
        '--base-url',
        help='OpenAI-compatible base URL, e.g. a local server (default: OpenAI)'
    )
    runtime_group.add_argument(
        '--api-key',
        help='API key (default: $OPENAI_API_KEY, else prompted)'
    )
    runtime_group.add_argument(
        '--check',
        action='store_true',
        help='Check that the runtime is reachable and exit'
    )

    output_group = parser.add_argument_group('output options')
    output_group.add_argument(
        '--format',
        choices=['excel', 'text'],
        dest='output_format',
        help="Output format (default: profile's format)"
    )
    output_group.add_argument(
        '--project-folder',
        type=Path,
        help='Folder for output files (default: $PROJECT_FOLDER or ./project)'
    )
    output_group.add_argument(
        '--output-name',
        help='Output file name inside the project folder'
    )
    output_group.add_argument(
        '--yes',
        '-y',
        action='store_true',
        help='Overwrite an existing output file without asking'
    )
    output_group.add_argument(
        '--no-input',
        action='store_true',
        help='Never prompt; fail instead'
    )
    output_group.add_argument(
        '--verbose',
        '-v',
        action='store_true',
        help='Enable verbose logging (includes raw model output)'
    )

    return parser


def config_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """CLI values that override file/environment configuration."""
    return {
        "api_key": args.api_key,
        "model": args.model,
        "base_url": args.base_url,
        "profile": args.profile,
        "output_format": args.output_format,
        "project_folder": args.project_folder,
        "output_name": args.output_name,
        "feature": args.feature,
        "max_tokens": args.max_tokens,
        "temperature": args.temperature,
        "max_attempts": args.max_attempts,
    }


def is_interactive(args: argparse.Namespace) -> bool:
    return not args.no_input and sys.stdin.isatty()


def prompt_for_missing(args: argparse.Namespace, config: GeneratorConfig) -> GeneratorConfig:
    """Ask for the project folder and API key when they were not supplied."""
    updates: Dict[str, Any] = {}

    if args.project_folder is None:
        default_folder = config.project_folder
        print(f"Default project folder: {default_folder}")
        answer = input(
            "Enter the project folder path to save the test cases document (press Enter for default): "
        ).strip()
        if answer:
            updates["project_folder"] = Path(answer)

    if not config.api_key and not config.base_url:
        api_key = getpass.getpass("Enter your OpenAI API key: ").strip()
        if api_key:
            updates["api_key"] = api_key

    return config.model_copy(update=updates) if updates else config


def resolve_document(args: argparse.Namespace, interactive: bool) -> Path:
    if args.document is not None:
        return args.document
    if not interactive:
        raise ValueError("A requirements document path is required")
    answer = input(
        f"Enter the path to the requirements document ({', '.join(s.lstrip('.').upper() for s in SUPPORTED_EXTENSIONS)}): "
    ).strip()
    if not answer:
        raise ValueError("A requirements document path is required")
    return Path(answer)


def ask_overwrite(path: Path) -> bool:
    logger.info(f"Output file already exists: {path}")
    answer = input("Output file already exists. Overwrite? (y/n): ")
    return answer.strip().lower() == 'y'


def print_success_summary(result: WorkflowResult) -> None:
    """Print brief success summary to stdout."""

    print(f"✅ Test Cases Generated Successfully")
    print(f"Document: {result.document_path}")
    print(f"")
    print(f"📊 Summary:")
    print(f"  Test Cases: {result.record_count}")
    if result.skipped_rows:
        print(f"  Skipped Malformed Rows: {result.skipped_rows}")
    print(f"")
    print(f"📁 Output ({result.output_format}): {result.output_path}")


def print_error_summary(error: Exception) -> None:
    """Print machine-readable error summary to stderr."""

    error_report: Dict[str, Any] = {
        "error_type": type(error).__name__,
        "message": str(error),
        "details": getattr(error, 'details', None)
    }

    if isinstance(error, DocumentError):
        error_report["path"] = error.path
    if isinstance(error, GenerationError):
        error_report["attempts"] = error.attempts
    if isinstance(error, NoTestCasesError):
        error_report["skipped_rows"] = error.skipped_rows

    print(json.dumps(error_report, indent=2), file=sys.stderr)


def run_check(config: GeneratorConfig) -> int:
    runtime = create_runtime(config)
    info = runtime.get_model_info()
    if runtime.is_available():
        print(f"✅ {info['name']} is reachable at {info['base_url']} (model: {info['model']})")
        return 0
    print(f"❌ {info['name']} is not reachable at {info['base_url']}", file=sys.stderr)
    return 2


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""

    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    # .env values never override variables that are already set
    load_dotenv(find_dotenv(usecwd=True), override=False)

    try:
        config = load_config(config_overrides(args))

        if args.check:
            return run_check(config)

        interactive = is_interactive(args)
        if interactive:
            config = prompt_for_missing(args, config)

        document = resolve_document(args, interactive)
        runtime = create_runtime(config)

        confirm = None
        if not args.yes:
            if interactive:
                confirm = ask_overwrite
            else:
                confirm = lambda path: False

        workflow = TestCaseWorkflow(runtime, config)
        result = workflow.run(document, confirm_overwrite=confirm)

        if result.cancelled:
            print("Operation cancelled.")
            return 0

        print_success_summary(result)
        return 0

    except (ConfigurationError, DocumentError, ValueError) as e:
        logger.error(f"Input validation failed: {e}")
        print_error_summary(e)
        return 2

    except (GenerationError, NoTestCasesError, LLMRuntimeError) as e:
        logger.error(f"Test case generation failed: {e}")
        print_error_summary(e)
        return 3

    except (OutputWriteError, TestCaseGeneratorError) as e:
        logger.error(f"Run failed: {e}")
        print_error_summary(e)
        return 1

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130  # Standard Unix exit code for SIGINT

    except Exception as e:
        logger.exception("Unexpected error occurred")
        print_error_summary(e)
        return 1


if __name__ == '__main__':
    sys.exit(main())
