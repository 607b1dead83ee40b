from __future__ import annotations

from rich.console import Console
from rich.markup import escape

console = Console()
err_console = Console(stderr=True)


def print_json(data) -> None:
    console.print_json(data=data)


def info(msg: str) -> None:
    err_console.print(f"[bold cyan]•[/] {escape(msg)}")


def ok(msg: str) -> None:
    err_console.print(f"[bold green]OK[/] {escape(msg)}")


def warn(msg: str) -> None:
    err_console.print(f"[bold yellow]WARN[/] {escape(msg)}")


def err(msg: str) -> None:
    err_console.print(f"[bold red]ERR[/] {escape(msg)}")


def print(*args, **kwargs):
    """Proxy to underlying rich Console.print()."""
    console.print(*args, **kwargs)


def out(text: str) -> None:
    """Write text to stdout verbatim, without rich markup or wrapping."""
    console.file.write(text)
    if not text.endswith("\n"):
        console.file.write("\n")
    console.file.flush()
