"""Additional validation utilities for configuration."""

import warnings
from typing import Any, Dict, List


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for potential issues and return warnings.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    matching = config_dict.get("matching", {})
    if isinstance(matching, dict):
        acceptable = matching.get("acceptable_licenses", [])
        if acceptable and not matching.get("flag_acceptable", False):
            warning_messages.append(
                "acceptable_licenses is set but flag_acceptable is false; the list will be ignored"
            )

        max_workers = matching.get("max_workers", 4)
        if isinstance(max_workers, int) and max_workers > 32:
            warning_messages.append(
                f"Large max_workers ({max_workers}) rarely helps: matching is CPU-bound"
            )

        if matching.get("force_result", False):
            warning_messages.append(
                "force_result runs every pattern against every file and can be slow"
            )

        if matching.get("static_blocks_only", False):
            ignored = [
                name for name in ("add_text_blocks", "flag_acceptable") if matching.get(name, False)
            ]
            if ignored:
                warning_messages.append(
                    f"static_blocks_only reports no matches; {' and '.join(ignored)} will be empty"
                )

    validation = config_dict.get("validation", {})
    if isinstance(validation, dict):
        if validation.get("require_optional_blocks") is False:
            warning_messages.append(
                "require_optional_blocks is false; optional template text is not checked"
            )

        known = validation.get("known_issue_ids", [])
        if isinstance(known, list):
            normalized = [term.strip() for term in known if isinstance(term, str)]
            duplicates = sorted({term for term in normalized if normalized.count(term) > 1})
            if duplicates:
                warning_messages.append(
                    f"Duplicate ids in known_issue_ids will be deduplicated: {', '.join(duplicates)}"
                )

    resources = config_dict.get("resources", {})
    if isinstance(resources, dict) and not resources.get("templates_dir"):
        warning_messages.append(
            "resources.templates_dir is not set; identification needs a template directory"
        )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """
    Emit warning messages using Python's warnings module.

    Args:
        warning_messages: List of warning messages to emit
    """
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
