"""
Command line interface for commitai.

This module defines the ``main`` click group used as the entry point of
the ``commitai`` command. It wires together configuration loading, the
diff source, the reasoning-service providers, the grouping engine and
the execution orchestrator. Exit codes are listed below.

Commands:

* ``generate`` (aliases ``gen``, ``g``): print merged commit groups as JSON.
* ``commit`` (alias ``c``): read commit groups as JSON and commit them.
* ``setup``: interactive first-run configuration.
* ``config``: show the effective configuration.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import IO, Any, Dict, List, Optional

import click

from commitai import __version__
from commitai.config.loader import ConfigError, load_config, masked
from commitai.config.onboarding import run_onboarding
from commitai.diff.diff_extractor import NoChangesError, extract_diff_context, read_diff_stream
from commitai.execution.orchestrator import BatchResult, CommitOrchestrator, OutcomeStatus
from commitai.grouping.merger import group_document
from commitai.grouping.normalizer import EmptyBatch, InvalidInput
from commitai.llm.base import LLMError
from commitai.llm.factory import create_provider
from commitai.llm.proposal_generator import ProposalGenerator
from commitai.vcs.git_client import GitClient, GitError


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_GENERIC_ERROR = 1
EXIT_NO_REPO = 3
EXIT_NO_CHANGES = 4
EXIT_CONFIG_ERROR = 5
EXIT_VCS_FAILURE = 6
EXIT_LLM_FAILURE = 7
EXIT_INVALID_INPUT = 8
EXIT_EMPTY_BATCH = 9


# ---------------------------------------------------------------------------
# Status display utilities
# ---------------------------------------------------------------------------

def print_info(message: str, indent: int = 0, err: bool = False):
    """Print an info message."""
    prefix = "  " * indent
    click.echo(f"{prefix}ℹ {message}", err=err)


def print_success(message: str, indent: int = 0, err: bool = False):
    """Print a success message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✓ {message}", err=err)


def print_warning(message: str, indent: int = 0):
    """Print a warning message."""
    prefix = "  " * indent
    click.echo(f"{prefix}⚠ {message}", err=True)


def print_error(message: str, indent: int = 0):
    """Print an error message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✗ {message}", err=True)


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


# ---------------------------------------------------------------------------
# Interactive confirmation
# ---------------------------------------------------------------------------

def confirm_group(message: str, files: List[str], planned_command: str) -> bool:
    """Show a planned commit and ask whether to apply it.

    Used as the orchestrator's confirmation step when ``--confirm`` is
    given. Running out of input counts as declining the group, so
    the rest of the batch still gets an outcome.
    """
    click.echo(f"\n{'─'*60}")
    click.echo(f"📄 Files ({len(files)}):")
    for path in files:
        click.echo(f"   • {path}")

    click.echo("\n💬 Commit message:")
    click.echo("   ┌" + "─" * 56 + "┐")
    for line in message.splitlines():
        display_line = line[:54]
        click.echo(f"   │ {display_line.ljust(54)} │")
    click.echo("   └" + "─" * 56 + "┘")
    click.echo(f"\n$ {planned_command}\n")
    try:
        return click.confirm("   Create this commit?", default=True)
    except click.Abort:
        # no answer (end of input or Ctrl-C) declines only this group
        click.echo("")
        print_warning("No answer received, skipping this group.")
        return False


def report_outcomes(result: BatchResult) -> None:
    """Print one line per outcome followed by the batch summary."""
    for outcome in result.outcomes:
        subject = outcome.group.primary_message
        files = ", ".join(outcome.group.files)
        if outcome.status is OutcomeStatus.SUCCESS:
            print_success(f"Committed: {subject}")
            click.echo(f"  Files: {files}")
        elif outcome.status is OutcomeStatus.SKIPPED:
            print_warning(f"Skipped: {subject} ({outcome.detail})")
        else:
            print_error(f"Failed: {subject}")
            print_error(f"Error: {outcome.detail}", indent=1)

    summary = result.summary
    click.echo(
        f"\nSummary: {summary.success_count} successful, "
        f"{summary.failed_count} failed, {summary.skipped_count} skipped"
    )


# ---------------------------------------------------------------------------
# Command group
# ---------------------------------------------------------------------------

class AliasedGroup(click.Group):
    """Click group that also accepts short command aliases."""

    aliases = {"gen": "generate", "g": "generate", "c": "commit"}

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        return super().get_command(ctx, self.aliases.get(cmd_name, cmd_name))

    def resolve_command(self, ctx: click.Context, args: List[str]):
        _, cmd, args = super().resolve_command(ctx, args)
        return cmd.name if cmd else None, cmd, args


def _load_config_or_exit(overrides: Dict[str, Any]) -> Dict[str, Any]:
    try:
        return load_config(overrides)
    except ConfigError as exc:
        print_error(f"Configuration error: {exc}")
        raise click.exceptions.Exit(EXIT_CONFIG_ERROR)


def _git_client_or_exit(git_path: str) -> GitClient:
    repo_root = GitClient.find_repo_root(Path.cwd())
    if repo_root is None:
        print_error("Not inside a git repository.")
        raise click.exceptions.Exit(EXIT_NO_REPO)
    logger.debug("Using git repository at %s", repo_root)
    return GitClient(repo_root, git_path=git_path)


@click.group(cls=AliasedGroup)
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="commitai")
def main(verbose: bool) -> None:
    """Generate git commit messages from diffs using LLMs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        force=True,
    )


@main.command()
def setup() -> None:
    """Run interactive setup to configure CommitAI."""
    try:
        run_onboarding()
    except ConfigError as exc:
        print_error(f"Error during setup: {exc}")
        raise click.exceptions.Exit(EXIT_CONFIG_ERROR)
    except click.Abort:
        print_warning("Setup cancelled.")
        raise click.exceptions.Exit(EXIT_GENERIC_ERROR)


@main.command()
@click.option("-g", "--git", "git_path", help="Path to git executable.")
@click.option("-p", "--provider", help="LLM provider (openai, anthropic or ollama).")
@click.option("-m", "--model", help="Model to use.")
@click.option("-k", "--api-key", help="API key for the provider.")
@click.option("--openai-api-key", help="OpenAI API key.")
@click.option("--anthropic-api-key", help="Anthropic API key.")
@click.option("--stdin", "use_stdin", is_flag=True, help="Read diff from stdin instead of using git commands.")
def generate(
    git_path: Optional[str],
    provider: Optional[str],
    model: Optional[str],
    api_key: Optional[str],
    openai_api_key: Optional[str],
    anthropic_api_key: Optional[str],
    use_stdin: bool,
) -> None:
    """Generate commit groups from the current git diff and print them as JSON."""
    config = _load_config_or_exit(
        {
            "git": git_path,
            "provider": provider,
            "model": model,
            "api_key": api_key,
            "openai_api_key": openai_api_key,
            "anthropic_api_key": anthropic_api_key,
        }
    )
    try:
        if use_stdin:
            diff = read_diff_stream(click.get_text_stream("stdin"))
        else:
            client = _git_client_or_exit(config["git"])
            diff = extract_diff_context(client)

        print_info(f"Asking {config['provider']} ({config['model']}) for commit proposals...", err=True)
        generator = ProposalGenerator(create_provider(config))
        groups = generator.generate(diff)
    except NoChangesError as exc:
        print_error(str(exc))
        raise click.exceptions.Exit(EXIT_NO_CHANGES)
    except GitError as exc:
        print_error(f"Error running git commands: {exc}")
        print_info("Make sure you are in a git repository.", indent=1, err=True)
        raise click.exceptions.Exit(EXIT_GENERIC_ERROR)
    except ValueError as exc:
        print_error(str(exc))
        raise click.exceptions.Exit(EXIT_NO_CHANGES)
    except LLMError as exc:
        print_error(f"LLM error: {exc}")
        raise click.exceptions.Exit(EXIT_LLM_FAILURE)
    except InvalidInput as exc:
        print_error(f"The model returned an unusable answer: {exc}")
        raise click.exceptions.Exit(EXIT_INVALID_INPUT)
    except EmptyBatch as exc:
        print_error(f"The model proposed no usable commits: {exc}")
        raise click.exceptions.Exit(EXIT_EMPTY_BATCH)

    print_success(f"Proposed {_plural(len(groups), 'commit group')}", err=True)
    click.echo(json.dumps({"commits": [group.to_dict() for group in groups]}, indent=2))


@main.command()
@click.option("-g", "--git", "git_path", help="Path to git executable.")
@click.option(
    "-i",
    "--input",
    "input_file",
    type=click.File("r"),
    default="-",
    show_default=True,
    help="JSON file with commit groups ('-' reads stdin).",
)
@click.option(
    "--confirm/--no-confirm",
    default=False,
    show_default=True,
    help="Ask before creating each commit. Read the groups with --input so prompts can use the terminal.",
)
def commit(git_path: Optional[str], input_file: IO[str], confirm: bool) -> None:
    """Create git commits from JSON input."""
    config = _load_config_or_exit({"git": git_path})
    try:
        groups = group_document(input_file.read())
    except InvalidInput as exc:
        print_error(f"Error: {exc}")
        raise click.exceptions.Exit(EXIT_INVALID_INPUT)
    except EmptyBatch as exc:
        print_error(f"Error: {exc}")
        raise click.exceptions.Exit(EXIT_EMPTY_BATCH)

    client = _git_client_or_exit(config["git"])
    orchestrator = CommitOrchestrator(client, confirm=confirm_group if confirm else None)
    result = orchestrator.execute(groups)
    report_outcomes(result)

    if result.summary.has_failures:
        raise click.exceptions.Exit(EXIT_VCS_FAILURE)


@main.command("config")
def show_config() -> None:
    """Show current configuration."""
    config = _load_config_or_exit({})
    click.echo("Current configuration:")
    click.echo(json.dumps(masked(config), indent=2))
