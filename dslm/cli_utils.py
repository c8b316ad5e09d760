"""
Common CLI utilities and decorators for consistent command behavior.
"""

import json
import sys
from functools import wraps
from typing import IO, Any, Dict, List, Optional

import click

from .exit_codes import INTERRUPTED, CommandError, InvalidRepositoryError
from .services.repository_service import Repository


def command_errors(func):
    """
    Decorator that turns CommandError into a JSON error object on stdout
    (or a plain message with --pretty) and the matching exit code.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            click.echo("Interrupted by user", err=True)
            sys.exit(INTERRUPTED)
        except CommandError as e:
            if kwargs.get('pretty'):
                click.echo(f"Error: {e}", err=True)
            else:
                error_obj = {
                    "error": str(e),
                    "type": type(e).__name__,
                    "exit_code": e.exit_code
                }
                print(json.dumps(error_obj, ensure_ascii=False), flush=True)
            sys.exit(e.exit_code)

    return wrapper


def get_repository(ctx: click.Context) -> Repository:
    """
    Build the repository from --base, $DSLM_BASE or general.base.

    Raises:
        InvalidRepositoryError: No base configured, or base is invalid
    """
    base = ctx.obj.get('base')
    if not base:
        raise InvalidRepositoryError(
            "No repository base given. Use --base, set DSLM_BASE, or set general.base in the config."
        )
    repository = Repository(base)
    if not repository.valid:
        raise InvalidRepositoryError(repository.error)
    return repository


def prompt_chooser(candidates: List[str], label: str, file: Optional[IO[str]] = None) -> Optional[str]:
    """
    Ask the user to pick one of candidates on the terminal.

    Candidates are listed 1-based; 0 cancels.

    Args:
        candidates: Names to choose from, in display order
        label: What is being chosen ("core", "dist", ...)
        file: Where the numbered list goes (default: stderr)

    Returns:
        The chosen candidate, or None if cancelled
    """
    for index, candidate in enumerate(candidates, 1):
        click.echo(f"{index}. {candidate}", file=file, err=file is None)
    try:
        choice = click.prompt(
            f"Choose a {label} (0 to cancel)",
            type=click.IntRange(0, len(candidates)),
            err=True
        )
    except click.Abort:
        return None
    if choice == 0:
        return None
    return candidates[choice - 1]


def emit(record: Dict[str, Any]) -> None:
    """Print one JSONL record on stdout."""
    print(json.dumps(record, ensure_ascii=False), flush=True)
