"""Command-line entry point for the license scanner."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import json
import os
import sys
import time
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from license_scanner.config.environment import EnvironmentConfig
from license_scanner.config.exceptions import ConfigurationError
from license_scanner.config.loader import load_config
from license_scanner.config.models import AppConfig
from license_scanner.identification import IdentificationResult, LicenseIdentifier
from license_scanner.library import LicenseLibrary
from license_scanner.logging import get_logger
from license_scanner.logging.config import configure_logging
from license_scanner.normalization import NormalizerContext, TextNormalizer
from license_scanner.templates import TemplateCompiler
from license_scanner.utils.highlighting import extract_snippet, highlight_spans, truncate_text
from license_scanner.validation import TemplateValidator, ValidationStatus

logger = get_logger(__name__, component="cli")

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_CONFIG_ERROR = 2


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and resolve overrides.

    Priority: CLI > environment > config file.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level

    if env_config.resources_dir:
        app_config.resources.templates_dir = env_config.resources_dir
    if env_config.max_workers:
        app_config.matching.max_workers = env_config.max_workers

    return app_config, env_config


def build_compiler(app_config: AppConfig) -> TemplateCompiler:
    """Build a compiler using the configured varietal-spelling table.

    Raises:
        ConfigurationError: If the varietal table cannot be loaded
    """
    words_file = app_config.resources.varietal_words_file
    if not words_file:
        return TemplateCompiler()

    try:
        context = NormalizerContext.from_file(words_file)
    except (OSError, ValueError) as e:
        raise ConfigurationError(
            f"Failed to load varietal words from {words_file}: {e}",
            suggestions=["Check resources.varietal_words_file in your config"],
        ) from e
    return TemplateCompiler(normalizer=TextNormalizer(context=context))


def collect_files(paths: Sequence[Path]) -> List[Path]:
    """Expand directories into the files below them, sorted."""
    files: List[Path] = []
    for path in paths:
        if path.is_dir():
            files.extend(sorted(p for p in path.rglob("*") if p.is_file()))
        else:
            files.append(path)
    return files


def format_result(result: IdentificationResult) -> str:
    """Render one identification result as plain text."""
    lines = [result.file or "<text>"]
    if result.error:
        lines.append(f"  error: {result.error}")
        return "\n".join(lines)

    original = result.normalized.original_text if result.normalized else ""
    if not result.matches and not result.static_checks:
        lines.append("  no licenses found")
    for license_id, check in sorted(result.static_checks.items()):
        if check.passed:
            lines.append(f"  {license_id}: static blocks passed")
        else:
            lines.append(f"  {license_id}: static blocks missing {check.missing!r}")
    for license_id, matches in sorted(result.matches.items()):
        lines.append(f"  {license_id}: {len(matches)} match(es)")
        for match in matches:
            region = original[match.original_start:match.original_end]
            relative = [
                (span.original_start - match.original_start, span.original_end - match.original_start)
                for span in match.spans
            ]
            lines.append(f"    [{match.original_start}:{match.original_end}] "
                         f"{truncate_text(highlight_spans(region, relative), 120)!r}")
            for span in match.spans:
                snippet = extract_snippet(original, span.original_start, span.original_end, 20)
                lines.append(f"      {span.group_name}: {snippet!r}")

    for label, values in (
        ("copyrights", result.copyrights),
        ("keywords", result.keywords),
        ("acceptable", result.acceptable),
        ("notes", result.notes),
    ):
        if values:
            lines.append(f"  {label}: {'; '.join(values)}")
    for license_id, error in sorted(result.errors.items()):
        lines.append(f"  pattern error ({license_id}): {error}")
    return "\n".join(lines)


def run_identify(args: argparse.Namespace, app_config: AppConfig) -> int:
    templates_dir = args.templates or app_config.resources.templates_dir
    if not templates_dir:
        raise ConfigurationError(
            "No license template directory configured",
            suggestions=[
                "Pass --templates DIR",
                "Set resources.templates_dir in the config file",
                "Set LICENSE_SCANNER_RESOURCES in the environment",
            ],
        )

    library = LicenseLibrary(compiler=build_compiler(app_config))
    try:
        library.load_directory(templates_dir)
    except FileNotFoundError as e:
        raise ConfigurationError(str(e), suggestions=["Check the template directory path"]) from e

    options = app_config.matching.to_options()
    if args.force_result:
        options.force_result = True
    if args.static_blocks_only:
        options.enhancements.static_blocks_only = True

    identifier = LicenseIdentifier(
        library,
        options=options,
        acceptable_licenses=app_config.matching.acceptable_licenses,
        max_workers=args.workers or app_config.matching.max_workers,
    )
    results = identifier.identify_files(collect_files(args.paths))

    if args.json:
        print(json.dumps([r.to_dict() for r in results], indent=2, ensure_ascii=False))
    else:
        for result in results:
            print(format_result(result))

    return EXIT_FAILURES if any(not r.ok for r in results) else EXIT_OK


def run_validate(args: argparse.Namespace, app_config: AppConfig) -> int:
    settings = app_config.validation
    validator = TemplateValidator(
        output_dirs=None if args.no_persist else settings.artifact_dirs(),
        skip_ids=settings.skip_ids,
        known_issue_ids=settings.known_issue_ids,
        require_optional_blocks=settings.require_optional_blocks,
        compiler=build_compiler(app_config),
    )
    outcome = validator.validate_files(args.id, args.template, args.text)

    message = f"{outcome.license_id}: {outcome.status.value}"
    if outcome.error:
        message += f" ({outcome.error})"
    print(message)

    return EXIT_FAILURES if outcome.status == ValidationStatus.FAILED else EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="license-scanner",
        description="License Scanner - identify license texts and validate license templates",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: license-scanner.yaml if present)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    identify = subparsers.add_parser("identify", help="Identify licenses in files")
    identify.add_argument("paths", nargs="+", type=Path, help="Files or directories to scan")
    identify.add_argument("--templates", type=Path, default=None, help="License template directory")
    identify.add_argument("--workers", type=int, default=None, help="Worker threads")
    identify.add_argument(
        "--force-result",
        action="store_true",
        help="Also run patterns on files without license keywords (skipped by default)",
    )
    identify.add_argument(
        "--static-blocks-only",
        action="store_true",
        help="Only report which licenses pass the static-block pre-check",
    )
    identify.add_argument("--json", action="store_true", help="Print results as JSON")

    validate = subparsers.add_parser("validate", help="Validate a template against its example text")
    validate.add_argument("--id", required=True, help="License id")
    validate.add_argument("--template", required=True, type=Path, help="Template file")
    validate.add_argument("--text", required=True, type=Path, help="Example license text file")
    validate.add_argument("--no-persist", action="store_true", help="Do not write accepted artifacts")

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point for the license scanner.

    Returns:
        Exit code: 0 on success, 1 if a file or template failed,
        2 on configuration errors.
    """
    start_time = time.time()
    args = build_parser().parse_args(argv)

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=os.environ.get("ENVIRONMENT", "local"),
        )
        logger.info(
            "License scanner starting",
            extra={
                "event": "cli.starting",
                "command": args.command,
                "config_path": str(args.config) if args.config else None,
            },
        )

        if args.command == "identify":
            exit_code = run_identify(args, app_config)
        else:
            exit_code = run_validate(args, app_config)

        logger.info(
            "License scanner finished",
            extra={
                "event": "cli.finished",
                "command": args.command,
                "exit_code": exit_code,
                "duration_seconds": round(time.time() - start_time, 2),
            },
        )
        return exit_code

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            f"Configuration error: {e}",
            extra={"event": "config.error", "error_type": "ConfigurationError"},
        )
        return EXIT_CONFIG_ERROR
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return EXIT_FAILURES


if __name__ == "__main__":
    sys.exit(main())
