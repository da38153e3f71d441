"""Loading of license templates into a shared pattern library.

A library is filled once (from a directory or by adding texts directly) and
then only read. Compile failures are recorded per license id so one broken
template never prevents the rest of the library from loading.
"""

import logging
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

from license_scanner.logging import get_logger, log_context
from license_scanner.normalization import InvalidInputError
from license_scanner.templates import CompileError, PatternKind, TemplateCompiler

from .models import License

logger = get_logger(__name__, component="library")

TEMPLATE_SUFFIX = ".template.txt"
SOURCE_SUFFIX = ".txt"
DEPRECATED_PREFIX = "deprecated_"


def split_license_filename(name: str) -> Optional[tuple]:
    """Split a resource file name into (license_id, kind, deprecated).

    Returns None for files that are not license resources.

    >>> split_license_filename("MIT.template.txt")
    ('MIT', <PatternKind.TEMPLATE: 'template'>, False)
    >>> split_license_filename("deprecated_GPL-2.0.txt")
    ('GPL-2.0', <PatternKind.SOURCE: 'source'>, True)
    """
    if name.endswith(TEMPLATE_SUFFIX):
        stem, kind = name[: -len(TEMPLATE_SUFFIX)], PatternKind.TEMPLATE
    elif name.endswith(SOURCE_SUFFIX):
        stem, kind = name[: -len(SOURCE_SUFFIX)], PatternKind.SOURCE
    else:
        return None

    deprecated = stem.startswith(DEPRECATED_PREFIX)
    if deprecated:
        stem = stem[len(DEPRECATED_PREFIX):]
    if not stem:
        return None
    return stem, kind, deprecated


class LicenseLibrary:
    """Compiled license patterns, keyed by license id."""

    def __init__(
        self,
        compiler: Optional[TemplateCompiler] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize an empty LicenseLibrary.

        Args:
            compiler: Template compiler (a default one is created if omitted)
            logger_instance: Optional logger instance (defaults to module logger)
        """
        self.compiler = compiler or TemplateCompiler()
        self.logger = logger_instance or logger
        self._licenses: Dict[str, License] = {}
        self._errors: Dict[str, str] = {}

    @property
    def licenses(self) -> Dict[str, License]:
        return dict(self._licenses)

    @property
    def errors(self) -> Dict[str, str]:
        """License id to error message for every pattern that failed to load."""
        return dict(self._errors)

    def get(self, license_id: str) -> Optional[License]:
        return self._licenses.get(license_id)

    def __len__(self) -> int:
        return len(self._licenses)

    def __contains__(self, license_id: object) -> bool:
        return license_id in self._licenses

    def __iter__(self) -> Iterator[License]:
        return iter(list(self._licenses.values()))

    def add_template(self, license_id: str, text: str, deprecated: bool = False) -> bool:
        """Compile an SPDX-style template and add it under ``license_id``.

        Returns:
            True if the pattern was added, False if it failed and was recorded
        """
        return self._add(license_id, text, PatternKind.TEMPLATE, deprecated)

    def add_source_text(self, license_id: str, text: str, deprecated: bool = False) -> bool:
        """Compile a plain license text and add it under ``license_id``.

        Returns:
            True if the pattern was added, False if it failed and was recorded
        """
        return self._add(license_id, text, PatternKind.SOURCE, deprecated)

    def load_directory(self, path: Union[str, Path]) -> int:
        """Load every ``<id>.template.txt`` and ``<id>.txt`` file in ``path``.

        Files are processed in sorted order so pattern order within a license
        is stable. Files that cannot be read or compiled are recorded in
        :attr:`errors`.

        Args:
            path: Directory holding license resources

        Returns:
            Number of patterns added

        Raises:
            FileNotFoundError: If ``path`` is not a directory
        """
        directory = Path(path)
        if not directory.is_dir():
            raise FileNotFoundError(f"License directory not found: {directory}")

        added = 0
        for file_path in sorted(directory.iterdir()):
            if not file_path.is_file():
                continue
            parsed = split_license_filename(file_path.name)
            if parsed is None:
                continue
            license_id, kind, deprecated = parsed

            try:
                text = file_path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                self._record_failure(license_id, f"cannot read {file_path.name}: {e}")
                continue

            if self._add(license_id, text, kind, deprecated):
                added += 1

        entries = list(self._licenses.values())
        self.logger.info(
            f"Loaded {added} pattern(s) for {len(self._licenses)} license(s) from {directory}",
            extra={
                "event": "library.directory.loaded",
                "directory": str(directory),
                "patterns": added,
                "templates": sum(len(e.template_patterns) for e in entries),
                "source_texts": sum(len(e.source_patterns) for e in entries),
                "licenses": len(self._licenses),
                "failures": len(self._errors),
            },
        )
        return added

    def license_ids(self) -> List[str]:
        return sorted(self._licenses)

    def _add(self, license_id: str, text: str, kind: PatternKind, deprecated: bool) -> bool:
        with log_context(license_id=license_id):
            try:
                pattern = self.compiler.compile(text, license_id, kind)
            except (CompileError, InvalidInputError) as e:
                self._record_failure(license_id, str(e))
                return False

        entry = self._licenses.get(license_id)
        if entry is None:
            entry = License(license_id=license_id, deprecated=deprecated)
            self._licenses[license_id] = entry
        entry.patterns.append(pattern)
        return True

    def _record_failure(self, license_id: str, message: str) -> None:
        self.logger.warning(
            f"Skipping pattern for {license_id}: {message}",
            extra={"event": "library.license.failed", "license_id": license_id},
        )
        if license_id in self._errors:
            self._errors[license_id] = f"{self._errors[license_id]}; {message}"
        else:
            self._errors[license_id] = message
