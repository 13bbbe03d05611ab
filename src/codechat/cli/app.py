"""Terminal chat client using Typer."""
import asyncio
import contextlib
import logging
import threading

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.panel import Panel

from ..keepalive import KeepalivePinger
from ..session import Message, Role, SessionController, SessionState
from .providers import get_settings, get_transport

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="codechat",
    help="Terminal chat client for OpenAI-compatible inference APIs",
    no_args_is_help=True,
    add_completion=False,
)

# Console for rich output
console = Console()

EXIT_COMMANDS = {"/exit", "/quit"}
THINKING_TEXT = "CodeChan AI is thinking..."
TIME_FORMAT = "%H:%M:%S"


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _render_message(message: Message) -> None:
    timestamp = message.created_at.astimezone().strftime(TIME_FORMAT)
    if message.role == Role.ASSISTANT:
        console.print(Panel(
            Markdown(message.text),
            title="[bold green]CodeChan AI[/bold green]",
            subtitle=f"[dim]{timestamp}[/dim]",
            title_align="left",
            border_style="green",
        ))
    else:
        console.print(f"[bold cyan]You[/bold cyan] [dim]{timestamp}[/dim]: {message.text}")


async def _read_line(prompt: str) -> str:
    """Read one line of input without blocking the event loop.

    The reader runs on a daemon thread rather than the default executor,
    so loop shutdown on Ctrl+C does not wait for a pending prompt.
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future[str] = loop.create_future()

    def _deliver(line: str | None, error: BaseException | None) -> None:
        if future.done():
            return
        if error is not None:
            future.set_exception(error)
        else:
            future.set_result(line)

    def _reader() -> None:
        try:
            line = console.input(prompt)
        except (EOFError, KeyboardInterrupt) as e:
            result, error = None, e
        else:
            result, error = line, None
        # The loop is gone if the session ended while we were waiting.
        with contextlib.suppress(RuntimeError):
            loop.call_soon_threadsafe(_deliver, result, error)

    threading.Thread(target=_reader, name="codechat-input", daemon=True).start()
    return await future


def _render_update(state: SessionState, seen: int) -> None:
    """Render assistant messages appended after ``seen`` and any error."""
    for message in state.log[seen:]:
        if message.role == Role.ASSISTANT:
            _render_message(message)
    if state.last_error:
        console.print(Panel(state.last_error, title="Error", border_style="red"))


@app.command()
def chat(
    model: str | None = typer.Option(
        None,
        "--model",
        "-m",
        help="Model identifier (default: CODECHAT_MODEL)"
    ),
    log_level: str = typer.Option(
        "warning",
        "--log-level",
        "-l",
        help="Log level (debug/info/warning/error)"
    ),
    keepalive: bool = typer.Option(
        True,
        "--keepalive/--no-keepalive",
        help="Ping the API periodically to keep it warm"
    ),
):
    """Start an interactive chat session. Type /exit to quit."""
    _configure_logging(log_level)
    settings = get_settings(console, model=model)

    async def _chat():
        transport = get_transport(settings)
        session = SessionController.from_settings(settings, transport)
        pinger = KeepalivePinger.from_settings(settings, transport)

        async with transport:
            if keepalive and settings.keepalive_enabled:
                pinger.start()
            try:
                _render_message(session.get_state().log[0])
                while True:
                    try:
                        line = await _read_line("[bold cyan]You[/bold cyan]: ")
                    except EOFError:
                        break
                    if line.strip().lower() in EXIT_COMMANDS:
                        break

                    seen = len(session.get_state().log)
                    with console.status(THINKING_TEXT):
                        accepted = await session.submit(line)
                    if accepted:
                        _render_update(session.get_state(), seen)
            finally:
                await pinger.stop()

    try:
        asyncio.run(_chat())
    except KeyboardInterrupt:
        pass
    console.print("[dim]Goodbye.[/dim]")


@app.command()
def ask(
    text: str = typer.Argument(..., help="Question to send"),
    model: str | None = typer.Option(
        None,
        "--model",
        "-m",
        help="Model identifier (default: CODECHAT_MODEL)"
    ),
    log_level: str = typer.Option(
        "warning",
        "--log-level",
        "-l",
        help="Log level (debug/info/warning/error)"
    ),
):
    """Send a single question and print the reply."""
    _configure_logging(log_level)
    settings = get_settings(console, model=model)

    async def _ask() -> SessionState:
        async with get_transport(settings) as transport:
            session = SessionController.from_settings(settings, transport)
            if not await session.submit(text):
                console.print("[red]Error: nothing to send[/red]")
                raise typer.Exit(code=1)
            return session.get_state()

    state = asyncio.run(_ask())
    if state.last_error:
        console.print(f"[red]Error: {state.last_error}[/red]")
        raise typer.Exit(code=1)
    console.print(Markdown(state.log[-1].text))


@app.command()
def ping(
    log_level: str = typer.Option(
        "warning",
        "--log-level",
        "-l",
        help="Log level (debug/info/warning/error)"
    ),
):
    """Send one keepalive ping and report whether it succeeded."""
    _configure_logging(log_level)
    settings = get_settings(console)

    async def _ping() -> bool:
        async with get_transport(settings) as transport:
            return await KeepalivePinger.from_settings(settings, transport).ping()

    if asyncio.run(_ping()):
        console.print("[green]Ping succeeded[/green]")
    else:
        console.print("[red]Ping failed[/red]")
        raise typer.Exit(code=1)


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
