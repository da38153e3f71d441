"""Validation of license templates against their example texts.

A template is accepted when its compiled pattern matches the example text
exactly once and every static block of the template is found in the
normalized example. Accepted templates can be persisted together with their
pre-check file and example text.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from license_scanner.logging import get_logger, log_context
from license_scanner.matching import MatchError, PatternMatcher, check_static_blocks
from license_scanner.normalization import InvalidInputError
from license_scanner.templates import CompileError, TemplateCompiler

from .artifacts import copy_artifact, write_precheck_file
from .exceptions import ArtifactWriteError, ValidationMismatchError
from .models import ArtifactDirs, ValidationOutcome, ValidationStatus

logger = get_logger(__name__, component="validation")

# Licenses that cannot be validated at all (no usable example text)
DEFAULT_SKIP_IDS = frozenset({"deprecated_Nokia-Qt-exception-1.1"})

# Published template/example pairs that are known to disagree
DEFAULT_KNOWN_ISSUE_IDS = frozenset(
    {
        "Afmparse",
        "BlueOak-1.0.0",
        "CC-BY-3.0",
        "CC-BY-NC-SA-2.0-FR",
        "CC-BY-SA-3.0",
        "CECILL-2.0",
        "CECILL-2.1",
        "CECILL-B",
        "CECILL-C",
        "COIL-1.0",
        "Community-Spec-1.0",
        "D-FSL-1.0",
        "EPL-1.0",
        "EUDatagrid",
        "EUPL-1.2",
        "Elastic-2.0",
        "ErlPL-1.1",
        "FreeImage",
        "IBM-pibs",
        "LAL-1.2",
        "LAL-1.3",
        "LPL-1.0",
        "LZMA-SDK-9.11-to-9.20",
        "LZMA-SDK-9.22",
        "LiLiQ-Rplus-1.1",
        "MulanPSL-1.0",
        "Multics",
        "NCGL-UK-2.0",
        "NPL-1.1",
        "OGL-UK-1.0",
        "OSET-PL-2.1",
        "Parity-7.0.0",
        "PolyForm-Noncommercial-1.0.0",
        "PolyForm-Small-Business-1.0.0",
        "SHL-2.0",
        "SHL-2.1",
        "SSPL-1.0",
        "W3C-19980720",
        "copyleft-next-0.3.0",
        "copyleft-next-0.3.1",
        "iMatix",
    }
)


class TemplateValidator:
    """Checks templates against example texts and persists accepted ones."""

    def __init__(
        self,
        output_dirs: Optional[ArtifactDirs] = None,
        skip_ids: Iterable[str] = DEFAULT_SKIP_IDS,
        known_issue_ids: Iterable[str] = DEFAULT_KNOWN_ISSUE_IDS,
        require_optional_blocks: bool = True,
        compiler: Optional[TemplateCompiler] = None,
        matcher: Optional[PatternMatcher] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize TemplateValidator.

        Args:
            output_dirs: Where validate_files persists accepted artifacts
                (nothing is written when None)
            skip_ids: License ids that are not validated at all
            known_issue_ids: License ids whose mismatches are reported as skipped
            require_optional_blocks: Also require static blocks inside
                optional regions to be present in the example
            compiler: Template compiler (a default one is created if omitted)
            matcher: Pattern matcher (a default one is created if omitted)
            logger_instance: Optional logger instance (defaults to module logger)
        """
        self.output_dirs = output_dirs
        self.skip_ids = frozenset(skip_ids)
        self.known_issue_ids = frozenset(known_issue_ids)
        self.require_optional_blocks = require_optional_blocks
        self.compiler = compiler or TemplateCompiler()
        self.matcher = matcher or PatternMatcher()
        self.logger = logger_instance or logger

    def validate(self, license_id: str, template_text: str, example_text: str) -> ValidationOutcome:
        """Validate a template against its example text.

        Never raises for a bad template or example; the outcome carries the
        status and error message.

        Args:
            license_id: License being validated
            template_text: Raw template text
            example_text: Raw example license text

        Returns:
            ValidationOutcome
        """
        with log_context(license_id=license_id):
            if license_id in self.skip_ids:
                self.logger.info(
                    f"Skipping validation of {license_id}",
                    extra={"event": "validation.license.skipped", "reason": "skip_list"},
                )
                return ValidationOutcome(license_id, ValidationStatus.SKIPPED)

            try:
                example = self.compiler.normalizer.normalize(example_text)
                pattern = self.compiler.compile(template_text, license_id)
                matches = self.matcher.find_matches(pattern, example)
            except (InvalidInputError, CompileError, MatchError) as e:
                return self._failed(license_id, str(e))

            outcome = ValidationOutcome(
                license_id,
                ValidationStatus.ACCEPTED,
                match_count=len(matches),
                static_blocks=list(pattern.static_blocks),
            )

            try:
                if len(matches) != 1:
                    raise ValidationMismatchError(
                        f"expected 1 match for {license_id} got: {len(matches)}", license_id
                    )
                check = check_static_blocks(
                    pattern.static_blocks,
                    example.normalized_text,
                    include_optional=self.require_optional_blocks,
                )
                if not check.passed:
                    raise ValidationMismatchError(
                        f"{license_id} failed testing against static blocks: "
                        f"missing {check.missing!r}",
                        license_id,
                    )
            except ValidationMismatchError as e:
                if license_id in self.known_issue_ids:
                    self.logger.info(
                        f"Known issue for {license_id}: {e}",
                        extra={"event": "validation.license.skipped", "reason": "known_issue"},
                    )
                    outcome.status = ValidationStatus.SKIPPED
                    outcome.error = str(e)
                    return outcome
                failed = self._failed(license_id, str(e))
                failed.match_count = outcome.match_count
                failed.static_blocks = outcome.static_blocks
                return failed

            self.logger.info(
                f"Template {license_id} accepted",
                extra={
                    "event": "validation.license.accepted",
                    "static_blocks": len(outcome.static_blocks),
                },
            )
            return outcome

    def validate_files(
        self,
        license_id: str,
        template_file: Union[str, Path],
        text_file: Union[str, Path],
    ) -> ValidationOutcome:
        """Read a template and example from disk, validate, and persist.

        On acceptance, and when output directories are configured, writes
        ``<id>.json`` (static blocks), ``<id>.template.txt`` and ``<id>.txt``.

        Returns:
            ValidationOutcome (failed if a file cannot be read or written)
        """
        if license_id in self.skip_ids:
            return self.validate(license_id, "", "")

        try:
            template_bytes = Path(template_file).read_bytes()
            text_bytes = Path(text_file).read_bytes()
            template_text = template_bytes.decode("utf-8")
            example_text = text_bytes.decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            return self._failed(license_id, f"cannot read files for {license_id}: {e}")

        outcome = self.validate(license_id, template_text, example_text)
        if not outcome.accepted or self.output_dirs is None:
            return outcome

        dirs = self.output_dirs
        try:
            write_precheck_file(outcome.static_blocks, dirs.precheck_dest_dir / f"{license_id}.json")
            copy_artifact(template_bytes, dirs.template_dest_dir / f"{license_id}.template.txt")
            copy_artifact(text_bytes, dirs.text_dest_dir / f"{license_id}.txt")
        except ArtifactWriteError as e:
            self.logger.error(
                f"Failed to persist {license_id}: {e}",
                extra={"event": "validation.artifact.failed", "license_id": license_id, "path": e.path},
                exc_info=True,
            )
            outcome.status = ValidationStatus.FAILED
            outcome.error = str(e)

        return outcome

    def _failed(self, license_id: str, message: str) -> ValidationOutcome:
        self.logger.warning(
            f"Template {license_id} failed validation: {message}",
            extra={"event": "validation.license.failed", "license_id": license_id},
        )
        return ValidationOutcome(license_id, ValidationStatus.FAILED, error=message)
