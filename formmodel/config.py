"""
ConfigDict for formmodel - per-class form model configuration.

Provides the ConfigDict TypedDict for configuring FormModel behavior,
following the model_config convention.

Example:
    from formmodel import FormModel, ConfigDict

    class LoginForm(FormModel):
        model_config = ConfigDict(
            include_inherited=False,
            errors_snapshot=False,
        )
        login: str = ''
        password: str = ''
"""

from typing import Any, Optional, TypedDict


class ConfigDict(TypedDict, total=False):
    """Configuration dictionary for FormModel."""

    # Field discovery
    include_inherited: bool
    """If True, fields annotated on concrete parent forms are accessible too. Default: True."""

    # Error store
    errors_snapshot: bool
    """If True, errors() returns a copy of the store instead of the live mapping. Default: True."""


# Default configuration values
CONFIG_DEFAULTS: ConfigDict = {
    'include_inherited': True,
    'errors_snapshot': True,
}


def get_config_value(config: Optional[ConfigDict], key: str, default: Any = None) -> Any:
    """Get a configuration value with fallback to defaults."""
    if config is None:
        return CONFIG_DEFAULTS.get(key, default)
    return config.get(key, CONFIG_DEFAULTS.get(key, default))


__all__ = ["ConfigDict", "CONFIG_DEFAULTS", "get_config_value"]
