"""
Interactive first-run setup.

Asks for the provider, API key and model, then writes the answers to the
user configuration file. Prompts use :mod:`click` so the wizard can be
driven from tests with :class:`click.testing.CliRunner`.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

import click

from commitai.config import loader
from commitai.config.loader import SUPPORTED_PROVIDERS, save_config
from commitai.llm.anthropic_provider import DEFAULT_ANTHROPIC_MODELS
from commitai.llm.base import LLMError
from commitai.llm.ollama_client import DEFAULT_OLLAMA_MODELS
from commitai.llm.openai_provider import DEFAULT_OPENAI_MODELS, OpenAIProvider


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


CUSTOM_MODEL = "Custom (enter manually)"


def select_from_list(prompt: str, options: List[str]) -> str:
    """Show a numbered list and return the chosen option."""
    click.echo(prompt)
    for index, option in enumerate(options, start=1):
        click.echo(f"  {index}. {option}")
    choice = click.prompt(
        "Enter your choice (number)",
        type=click.IntRange(1, len(options)),
    )
    return options[choice - 1]


def fetch_models(provider: str, api_key: str) -> List[str]:
    """Return candidate models for ``provider``."""
    if provider == "openai":
        try:
            return OpenAIProvider(api_key=api_key, request_timeout=15).list_models()
        except LLMError as exc:
            logger.debug("Model listing failed: %s", exc)
            click.echo("Unable to fetch models from OpenAI API. Using default list.")
            return list(DEFAULT_OPENAI_MODELS)
    if provider == "anthropic":
        return list(DEFAULT_ANTHROPIC_MODELS)
    return list(DEFAULT_OLLAMA_MODELS)


def run_onboarding(config_path: Optional[Path] = None) -> bool:
    """Run the setup wizard.

    Returns
    -------
    bool
        ``True`` if a configuration file was written, ``False`` if the user
        chose not to overwrite an existing one.
    """
    click.echo("Welcome to CommitAI Setup!\n")
    click.echo("This wizard will help you configure CommitAI for generating commit messages.\n")

    config: Dict[str, object] = {}
    config["provider"] = select_from_list("Select your LLM provider:", list(SUPPORTED_PROVIDERS))
    click.echo(f"Selected provider: {config['provider']}\n")

    if config["provider"] == "ollama":
        config["base_url"] = click.prompt("Ollama base URL", default="http://localhost")
        config["port"] = click.prompt("Ollama port", default=11434, type=int)
        api_key = ""
    else:
        label = "OpenAI" if config["provider"] == "openai" else "Anthropic"
        api_key = click.prompt(
            f"Enter your {label} API key", default="", show_default=False, hide_input=True
        ).strip()
        if not api_key:
            click.echo(
                "Warning: No API key provided. You will need to set it later "
                "or use environment variables."
            )
        config["api_key"] = api_key
    click.echo("")

    click.echo("Fetching available models...")
    models = fetch_models(str(config["provider"]), api_key) + [CUSTOM_MODEL]
    model = select_from_list("Select a model:", models)
    if model == CUSTOM_MODEL:
        model = click.prompt("Enter the model name").strip()
    config["model"] = model
    click.echo(f"Selected model: {model}\n")

    target = config_path or loader._get_config_path()
    if target.exists() and not click.confirm(
        "Configuration file already exists. Overwrite?", default=False
    ):
        click.echo("Setup cancelled.")
        return False

    save_config(config, target)
    click.echo(f"\nConfiguration saved to {target}")
    click.echo("\nSetup complete! You can now use CommitAI with your configured settings.")
    click.echo('Run "commitai gen" to generate commit messages from git diffs.')
    return True
