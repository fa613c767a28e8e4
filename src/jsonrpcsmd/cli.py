from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Any, Callable, List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from jsonrpcsmd.envelope.registry import ENVELOPES, available_envelopes
from jsonrpcsmd.errors import SmdError
from jsonrpcsmd.smd.assembler import Smd


app = typer.Typer(no_args_is_help=True, add_completion=False)

console = Console()
err_console = Console(stderr=True)


def _setup_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


def _load_callable(ref: Optional[str], what: str) -> Optional[Callable[..., Any]]:
    # "package.module:function"
    if not ref:
        return None
    module_name, sep, attr = ref.partition(":")
    if not sep or not module_name or not attr:
        raise typer.BadParameter(f"{what} must look like 'package.module:function', got {ref!r}")
    try:
        obj: Any = importlib.import_module(module_name)
        for part in attr.split("."):
            obj = getattr(obj, part)
    except (ImportError, AttributeError) as exc:
        raise typer.BadParameter(f"Cannot load {what} {ref!r}: {exc}") from exc
    if not callable(obj):
        raise typer.BadParameter(f"{what} {ref!r} is not callable")
    return obj


def _type_label(value: Any) -> str:
    if not value:
        return "-"
    if isinstance(value, list):
        return "|".join(value)
    return str(value)


def _fail(exc: SmdError) -> None:
    err_console.print(f"[bold red]error[/bold red]: {exc}")
    raise typer.Exit(code=1)


@app.command()
def build(
    classes: List[str] = typer.Argument(..., help="Classes to expose, as 'package.module:Class'"),
    target: str = typer.Option(..., help="Target URL of the remote calls"),
    envelope: str = typer.Option("V2", help="Envelope format name"),
    transport: str = typer.Option("POST", help="Transport method"),
    content_type: str = typer.Option("application/json", help="Content type of the calls"),
    canonical: bool = typer.Option(False, "--canonical", help="Give every method its own target URL"),
    name_resolver: Optional[str] = typer.Option(None, help="Service name resolver, 'package.module:function'"),
    validator: Optional[str] = typer.Option(None, help="Service validator, 'package.module:function'"),
    on_collision: str = typer.Option("overwrite", help="Duplicate service names: overwrite|error"),
    indent: Optional[int] = typer.Option(None, help="Indent the JSON output"),
    out: Optional[str] = typer.Option(None, help="Output path (default: print to stdout)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr"),
) -> None:
    _setup_logging(verbose)

    policy = on_collision.lower().strip()
    if policy not in ("overwrite", "error"):
        raise typer.BadParameter("on-collision must be one of: overwrite, error")

    try:
        smd = Smd(
            target=target,
            envelope=envelope,
            transport=transport,
            content_type=content_type,
            use_canonical=canonical,
            name_resolver=_load_callable(name_resolver, "name resolver"),
            service_validator=_load_callable(validator, "validator"),
            on_collision=policy,
        )
        smd.add_classes(*classes)
        text = smd.to_json(indent=indent)
    except SmdError as exc:
        _fail(exc)
        return

    if out:
        out_path = Path(out).expanduser()
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text, encoding="utf-8")
        err_console.print(f"[bold green]Wrote[/bold green] {len(smd.services)} class(es) to: {out_path}")
    else:
        # plain stdout: rich markup would mangle JSON brackets
        typer.echo(text)


@app.command("inspect")
def inspect_class(
    cls: str = typer.Argument(..., help="Class to inspect, as 'package.module:Class'"),
    target: str = typer.Option("/", help="Target URL used for the listing"),
    canonical: bool = typer.Option(False, "--canonical", help="Show per-method target URLs"),
) -> None:
    try:
        smd = Smd(target=target, use_canonical=canonical).add_class(cls)
        entries = [e for d in smd.services for e in d.entries(smd.config)]
    except SmdError as exc:
        _fail(exc)
        return

    console.print(f"[bold]{cls}[/bold]: {len(entries)} service(s)")

    table = Table(show_header=True, header_style="bold")
    table.add_column("SERVICE", no_wrap=True)
    table.add_column("PARAMETERS")
    table.add_column("RETURNS", no_wrap=True)
    table.add_column("TARGET")

    for e in entries:
        params = ", ".join(
            f"{p.name}{'?' if p.optional else ''}: {_type_label(p.type)}" for p in e.parameters
        )
        table.add_row(e.name, params, _type_label(e.returns), e.target)

    console.print(table)


@app.command()
def envelopes() -> None:
    for name in available_envelopes():
        env = ENVELOPES[name]()
        console.print(f"{name:<4} {env.protocol} (SMDVersion {env.smd_version})")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
