"""License identification service.

Runs every pattern of a LicenseLibrary against candidate texts and collects
the optional extras requested by IdentifierOptions. Files are processed in
parallel with a thread pool; the library is read-only while identifying, so
workers share it without locking.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from license_scanner.library import LicenseLibrary
from license_scanner.logging import get_logger, log_context
from license_scanner.matching import MatchError, MatchResult, PatternMatcher, check_static_blocks
from license_scanner.normalization import InvalidInputError, TextNormalizer

from .enhancements import (
    build_text_blocks,
    find_acceptable,
    find_copyright_lines,
    find_keywords,
    has_license_keywords,
)
from .models import IdentificationResult, IdentifierOptions

logger = get_logger(__name__, component="identification")

NO_KEYWORDS_NOTE = "No license keywords found; patterns were not run (use force_result to run them)"


class LicenseIdentifier:
    """Identifies licenses in candidate texts.

    Responsibilities:
    - Normalize each candidate once
    - Run every library pattern, isolating per-pattern failures, or only
      the static-block pre-check when ``static_blocks_only`` is set
    - Compute the enhancements enabled in the options
    - Process many files concurrently, isolating per-file failures
    """

    def __init__(
        self,
        library: LicenseLibrary,
        options: Optional[IdentifierOptions] = None,
        acceptable_licenses: Iterable[str] = (),
        max_workers: int = 1,
        normalizer: Optional[TextNormalizer] = None,
        matcher: Optional[PatternMatcher] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize LicenseIdentifier.

        Args:
            library: Loaded license library
            options: Identification options (defaults to IdentifierOptions())
            acceptable_licenses: License ids reported by ``flag_acceptable``
            max_workers: Worker threads used by identify_files
            normalizer: Normalizer for candidates (defaults to the library's)
            matcher: Pattern matcher (a default one is created if omitted)
            logger_instance: Optional logger instance (defaults to module logger)

        Raises:
            ValueError: If max_workers is less than 1
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")

        self.library = library
        self.options = options or IdentifierOptions()
        self.acceptable_licenses = tuple(acceptable_licenses)
        self.max_workers = max_workers
        self.normalizer = normalizer or library.compiler.normalizer
        self.matcher = matcher or PatternMatcher()
        self.logger = logger_instance or logger

    def identify_text(self, text: str, file: str = "") -> IdentificationResult:
        """Identify the licenses in a single text.

        Text without any license keyword is not matched unless
        ``force_result`` is set; its result carries NO_KEYWORDS_NOTE instead.

        Args:
            text: Candidate text
            file: Label for the candidate, used in results and logs

        Returns:
            IdentificationResult

        Raises:
            InvalidInputError: If the text cannot be normalized
        """
        enhancements = self.options.enhancements
        result = IdentificationResult(file=file)
        if enhancements.add_notes:
            result.notes.append(enhancements.add_notes)

        with log_context(file=file):
            record = self.normalizer.normalize(text)
            result.normalized = record

            if not (self.options.force_result or has_license_keywords(record.normalized_text)):
                result.notes.append(NO_KEYWORDS_NOTE)
                self.logger.info(
                    f"No license keywords in {file or 'text'}; patterns not run",
                    extra={"event": "identification.text.skipped"},
                )
            elif enhancements.static_blocks_only:
                self._check_all(record, result)
            else:
                self._match_all(record, result)

            if enhancements.add_text_blocks:
                all_matches: List[MatchResult] = [
                    m for matches in result.matches.values() for m in matches
                ]
                result.blocks = build_text_blocks(record.original_text, all_matches)
            if enhancements.flag_copyrights:
                result.copyrights = find_copyright_lines(record.original_text)
            if enhancements.flag_keywords:
                result.keywords = find_keywords(record.normalized_text)
            if enhancements.flag_acceptable:
                result.acceptable = find_acceptable(result.matches, self.acceptable_licenses)

        return result

    def identify_file(self, path: Union[str, Path]) -> IdentificationResult:
        """Read a UTF-8 file and identify the licenses in it.

        Line endings are kept as stored so offsets index the file's own text.

        Raises:
            OSError: If the file cannot be read
            UnicodeDecodeError: If the file is not valid UTF-8
            InvalidInputError: If the text cannot be normalized
        """
        file_path = Path(path)
        text = file_path.read_bytes().decode("utf-8")
        return self.identify_text(text, file=str(file_path))

    def identify_files(self, paths: Sequence[Union[str, Path]]) -> List[IdentificationResult]:
        """Identify licenses in many files.

        A file that cannot be read or normalized yields a result with
        ``error`` set; the other files are still processed.

        Args:
            paths: Files to scan

        Returns:
            One IdentificationResult per path, in input order
        """
        start_time = time.time()

        if self.max_workers == 1 or len(paths) <= 1:
            results = [self._identify_file_safely(p) for p in paths]
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                results = list(executor.map(self._identify_file_safely, paths))

        failed = sum(1 for r in results if not r.ok)
        self.logger.info(
            f"Identified {len(results)} file(s), {failed} failed",
            extra={
                "event": "identification.batch.completed",
                "files": len(results),
                "failed": failed,
                "duration_seconds": round(time.time() - start_time, 3),
            },
        )
        return results

    def _identify_file_safely(self, path: Union[str, Path]) -> IdentificationResult:
        try:
            result = self.identify_file(path)
        except (OSError, UnicodeDecodeError, InvalidInputError) as e:
            self.logger.error(
                f"Failed to identify {path}: {e}",
                extra={
                    "event": "identification.file.failed",
                    "file": str(path),
                    "error_type": type(e).__name__,
                },
                exc_info=True,
            )
            return IdentificationResult(file=str(path), error=str(e))

        self.logger.info(
            f"Identified {len(result.matches)} license(s) in {path}",
            extra={
                "event": "identification.file.completed",
                "file": str(path),
                "licenses": result.license_ids,
                "pattern_errors": len(result.errors),
            },
        )
        return result

    def _match_all(self, record, result: IdentificationResult) -> None:
        for license_entry in self.library:
            license_matches: List[MatchResult] = []
            for pattern in license_entry.patterns:
                try:
                    license_matches.extend(self.matcher.find_matches(pattern, record))
                except MatchError as e:
                    self.logger.warning(
                        f"Pattern for {license_entry.license_id} failed: {e}",
                        extra={
                            "event": "identification.pattern.failed",
                            "license_id": license_entry.license_id,
                        },
                        exc_info=True,
                    )
                    result.errors[license_entry.license_id] = str(e)
            if license_matches:
                result.matches[license_entry.license_id] = license_matches

    def _check_all(self, record, result: IdentificationResult) -> None:
        # A license passes when any one of its patterns passes
        for license_entry in self.library:
            checks = [
                check_static_blocks(pattern.static_blocks, record.normalized_text)
                for pattern in license_entry.patterns
            ]
            if checks:
                result.static_checks[license_entry.license_id] = next(
                    (check for check in checks if check.passed), checks[0]
                )
