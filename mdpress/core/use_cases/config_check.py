"""
Config check use case — validate mdpress.yml and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from mdpress.core.config.loader import ConfigError, find_config_file, load_config
from mdpress.core.models.rules import BADGE_CLASSES, NOTE_BOX_CLASSES
from mdpress.core.models.settings import PAGE_FORMATS, PressConfig


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    config: PressConfig | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "page_format": self.config.pdf.page_format if self.config else None,
            "margin": self.config.pdf.margin if self.config else None,
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate the configuration and report issues.

    Schema violations (bad margin, negative timeout…) are errors raised
    by the loader.  On top of that:

    - a callout label listed under two severities is an error, since
      only the first would ever apply
    - a badge mapped to a class the stylesheet lacks is an error
    - an unknown page format or callout severity is a warning
    """
    result = ConfigCheckResult()

    if config_path is None:
        config_path = find_config_file()
    if config_path is None:
        result.warnings.append("No mdpress.yml found. Defaults are in effect.")
        result.config = PressConfig()
        result.valid = True
        return result

    result.config_path = config_path

    try:
        config = load_config(config_path)
    except ConfigError as e:
        result.errors.append(str(e))
        return result
    result.config = config

    # Page setup
    if config.pdf.page_format.upper() not in {f.upper() for f in PAGE_FORMATS}:
        result.warnings.append(
            f"Unknown page format '{config.pdf.page_format}'. "
            f"Known: {', '.join(PAGE_FORMATS)}."
        )

    # Callout vocabularies
    seen: dict[str, str] = {}
    for label, severity in config.enhance.callout_labels():
        key = label.casefold()
        if key in seen and seen[key] != severity:
            result.errors.append(
                f"Callout label '{label}' is listed under both "
                f"'{seen[key]}' and '{severity}'"
            )
        seen.setdefault(key, severity)

    for severity in config.enhance.callouts:
        if severity not in NOTE_BOX_CLASSES:
            result.warnings.append(
                f"Callout severity '{severity}' has no style in the print stylesheet"
            )

    # Badges
    for token, css_class in config.enhance.badges.items():
        if css_class not in BADGE_CLASSES:
            result.errors.append(
                f"Badge [{token}] uses unknown class '{css_class}' "
                f"(expected one of: {', '.join(BADGE_CLASSES)})"
            )

    result.valid = len(result.errors) == 0
    return result
