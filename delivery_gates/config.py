"""
Settings for delivery-gates.

Message templates, status labels and health policy default to the values
the dashboard ships with. A `.delivery-gates.yaml` file in the working
directory may override any of them; overrides are deep-merged over the
defaults.
"""

import logging
import string
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigurationError
from .schema import GateStatus


logger = logging.getLogger(__name__)

SETTINGS_FILENAME = ".delivery-gates.yaml"

BADGE_TONES = ("ok", "warn", "risk")


class MessageTemplates(BaseModel):
    """Templates for diagnostic messages. `{name}` is the subject's name."""
    step_pending: str = "Step pendente: {name}"
    checklist_incomplete: str = "Checklist: {name}"

    @field_validator('step_pending', 'checklist_incomplete')
    @classmethod
    def template_must_name_subject(cls, v):
        fields = [field for _, field, _, _ in string.Formatter().parse(v) if field is not None]
        if "name" not in fields:
            raise ValueError("template must contain the {name} placeholder")
        for field in fields:
            if field != "name":
                raise ValueError(f"template may only use the {{name}} placeholder, got {{{field}}}")
        # Format specs and conversions must also work for any string name.
        try:
            v.format(name="")
        except (ValueError, KeyError, IndexError) as e:
            raise ValueError(f"template cannot be formatted: {e}") from e
        return v


class StatusPresentation(BaseModel):
    """How a gate status is labelled and toned on dashboards."""
    label: str
    tone: str

    @field_validator('tone')
    @classmethod
    def tone_must_be_known(cls, v):
        if v not in BADGE_TONES:
            raise ValueError(f"tone must be one of {', '.join(BADGE_TONES)}")
        return v


def _default_presentation() -> dict[GateStatus, StatusPresentation]:
    return {
        GateStatus.PENDING: StatusPresentation(label="Pendente", tone="warn"),
        GateStatus.PASSED: StatusPresentation(label="Aprovado", tone="ok"),
        GateStatus.FAILED: StatusPresentation(label="Reprovado", tone="risk"),
        GateStatus.BLOCKED: StatusPresentation(label="Bloqueado", tone="risk"),
    }


class HealthPolicy(BaseModel):
    """How gate statuses roll up into a client's health."""
    at_risk_statuses: list[GateStatus] = Field(
        default_factory=lambda: [GateStatus.BLOCKED, GateStatus.FAILED]
    )
    # A client with no recorded gates has nothing proving delivery is on track.
    empty_is_warn: bool = True


class GateSettings(BaseModel):
    """All tunables for evaluation messages and reporting."""
    messages: MessageTemplates = Field(default_factory=MessageTemplates)
    presentation: dict[GateStatus, StatusPresentation] = Field(default_factory=_default_presentation)
    health: HealthPolicy = Field(default_factory=HealthPolicy)

    @field_validator('presentation')
    @classmethod
    def every_status_presented(cls, v):
        missing = [status.value for status in GateStatus if status not in v]
        if missing:
            raise ValueError(f"presentation missing statuses: {', '.join(missing)}")
        return v

    @classmethod
    def get_default(cls) -> dict:
        """Default settings as a plain dict (the shape of the YAML file)."""
        return cls().model_dump(mode='json')

    @classmethod
    def from_overrides(cls, overrides: Optional[dict]) -> "GateSettings":
        """
        Build settings from a (possibly partial) overrides dict.

        Raises:
            ConfigurationError: If the merged settings do not validate
        """
        merged = _deep_merge(cls.get_default(), overrides or {})
        try:
            return cls.model_validate(merged)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid delivery-gates settings: {e}") from e


DEFAULT_SETTINGS = GateSettings()


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def find_settings_path(working_dir: Optional[Path] = None) -> Optional[Path]:
    """
    Find the settings file to use.

    Args:
        working_dir: Directory to check. Defaults to cwd.

    Returns:
        Path to the settings file, or None if there is none.
    """
    if working_dir is None:
        working_dir = Path.cwd()
    else:
        working_dir = Path(working_dir)

    settings_file = working_dir / SETTINGS_FILENAME
    return settings_file if settings_file.exists() else None


def load_settings_overrides(path: Path) -> dict:
    """
    Read raw overrides from a YAML settings file.

    Raises:
        ConfigurationError: If the file is not valid YAML or not a mapping
    """
    try:
        content = Path(path).read_text()
        overrides = yaml.safe_load(content)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Could not read settings from {path}: {e}") from e

    if overrides is None:
        return {}
    if not isinstance(overrides, dict):
        raise ConfigurationError(f"Settings in {path} must be a mapping")
    return overrides


def load_settings(working_dir: Optional[Path] = None) -> GateSettings:
    """
    Load settings from `.delivery-gates.yaml`, falling back to defaults.

    Args:
        working_dir: Directory to check. Defaults to cwd.

    Returns:
        GateSettings with file overrides applied.

    Raises:
        ConfigurationError: If a settings file exists but is invalid
    """
    path = find_settings_path(working_dir)
    if path is None:
        logger.debug("No %s found, using default settings", SETTINGS_FILENAME)
        return GateSettings()

    overrides = load_settings_overrides(path)
    settings = GateSettings.from_overrides(overrides)
    logger.info("Loaded delivery-gates settings from %s", path)
    return settings
