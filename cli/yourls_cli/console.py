from __future__ import annotations

from rich.console import Console
from rich.markup import escape

# values go to stdout so `$(yourls shorten ...)` captures only the result
console = Console()
err_console = Console(stderr=True)


def print_json(data) -> None:
    console.print_json(data=data)


def out(text: str) -> None:
    """Print a bare value (URL etc.) without wrapping or highlighting."""
    console.print(text, soft_wrap=True, highlight=False, markup=False)


def raw(text: str) -> None:
    err_console.print("[dim]raw response:[/]")
    err_console.print(text, soft_wrap=True, highlight=False, markup=False)


def info(msg: str) -> None:
    err_console.print(f"[bold cyan]•[/] {escape(msg)}")


def ok(msg: str) -> None:
    err_console.print(f"[bold green]OK[/] {escape(msg)}")


def warn(msg: str) -> None:
    err_console.print(f"[bold yellow]WARN[/] {escape(msg)}")


def err(msg: str) -> None:
    err_console.print(f"[bold red]ERR[/] {escape(msg)}")
