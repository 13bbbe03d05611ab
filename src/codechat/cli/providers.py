"""Provider factory functions for CLI.

Centralizes creation of settings and the transport from environment variables.
Hides configuration details from command implementations.
"""

from typing import Any

import typer
from pydantic import ValidationError
from rich.console import Console

from ..config import ChatSettings
from ..llm import InferenceTransport, create_transport

# Default console for output
_console = Console()


def get_settings(console: Console | None = None, **overrides: Any) -> ChatSettings:
    """Load chat settings from environment variables.

    Args:
        console: Optional Rich console for output
        **overrides: Values given on the command line (None means unset)

    Returns:
        Validated settings

    Raises:
        SystemExit: If a configured value is invalid
    """
    con = console or _console
    try:
        settings = ChatSettings.from_env(**overrides)
    except ValidationError as e:
        con.print(f"[red]Error: invalid configuration[/red]\n{e}")
        raise typer.Exit(code=1)

    if not settings.has_api_key:
        con.print("[yellow]Warning: CODECHAT_API_KEY not set, requests will fail[/yellow]")
    return settings


def get_transport(settings: ChatSettings) -> InferenceTransport:
    """Create the inference transport for the configured provider.

    Raises:
        SystemExit: If the provider is not supported
    """
    try:
        return create_transport(settings.provider, **settings.transport_config())
    except ValueError as e:
        _console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)
