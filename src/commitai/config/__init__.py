"""
Configuration loading for commitai.

See :mod:`commitai.config.loader` for the layered loader and
:mod:`commitai.config.onboarding` for the interactive setup wizard.
"""

from .loader import ConfigError, load_config, masked, save_config  # noqa: F401
