"""twiliosig CLI - Sign, inspect and verify webhook requests."""

import sys

import click
from rich.console import Console
import uvicorn

from twiliosig.common.errors import ConfigurationError
from twiliosig.common.logging import setup_logging
from twiliosig.common.settings import Settings
from twiliosig.server.main import create_app
from twiliosig.signature.canonical import TEXT_ERRORS, canonical_string
from twiliosig.signature.verify import compute_signature, is_valid

console = Console()
err_console = Console(stderr=True)


def _encodable(ctx: click.Context, param: click.Parameter, value):
    """Reject values holding characters that have no UTF-8 byte form."""
    values = value if isinstance(value, tuple) else (value,)
    for item in values:
        if item is None:
            continue
        try:
            item.encode("utf-8", TEXT_ERRORS)
        except UnicodeEncodeError:
            raise click.BadParameter(f"Cannot be encoded as UTF-8: {item!r}") from None
    return value


def _parse_params(params: tuple[str, ...]) -> dict[str, list[str]]:
    form: dict[str, list[str]] = {}
    for item in params:
        name, sep, value = item.partition("=")
        if not sep:
            raise click.BadParameter(f"Expected name=value, got {item!r}", param_hint="--param")
        form.setdefault(name, []).append(value)
    return form


def _resolve_token(ctx: click.Context, token: str | None) -> str:
    if token is not None:
        return token
    settings: Settings = ctx.obj["settings"]
    if settings.auth_token is None:
        err_console.print("[red]No auth token: pass --token or set TWILIOSIG_AUTH_TOKEN[/red]")
        sys.exit(2)
    return settings.auth_token


param_option = click.option(
    "-p",
    "--param",
    "params",
    multiple=True,
    callback=_encodable,
    help="Form field as name=value (repeatable)",
)
token_option = click.option(
    "--token",
    default=None,
    callback=_encodable,
    help="Auth token (defaults to TWILIOSIG_AUTH_TOKEN)",
)
method_option = click.option(
    "--method",
    default="POST",
    show_default=True,
    help="HTTP method; form fields are only signed for POST",
)


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """twiliosig CLI - Sign and verify webhook requests."""
    ctx.ensure_object(dict)
    ctx.obj["settings"] = Settings()


@cli.command()
@click.argument("url", callback=_encodable)
@param_option
@method_option
def canonical(url: str, params: tuple[str, ...], method: str) -> None:
    """Print the canonical string that gets signed for a request."""
    form = _parse_params(params) if method.upper() == "POST" else None
    console.print(
        canonical_string(url, form).decode("utf-8", "backslashreplace"),
        markup=False,
        emoji=False,
        highlight=False,
        soft_wrap=True,
    )


@cli.command()
@click.argument("url", callback=_encodable)
@param_option
@method_option
@token_option
@click.pass_context
def sign(
    ctx: click.Context,
    url: str,
    params: tuple[str, ...],
    method: str,
    token: str | None,
) -> None:
    """Compute the signature header value for a request."""
    secret = _resolve_token(ctx, token)
    form = _parse_params(params) if method.upper() == "POST" else None
    console.print(compute_signature(secret, url, form), markup=False, highlight=False)


@cli.command()
@click.argument("url", callback=_encodable)
@click.option("--signature", required=True, help="Value of the signature header")
@param_option
@method_option
@token_option
@click.pass_context
def verify(
    ctx: click.Context,
    url: str,
    signature: str,
    params: tuple[str, ...],
    method: str,
    token: str | None,
) -> None:
    """Check a signature against a request; exits 1 if it is not valid."""
    secret = _resolve_token(ctx, token)
    form = _parse_params(params)

    if is_valid(secret, method, url, form, signature):
        console.print("[green]VALID[/green]")
        return

    console.print("[red]INVALID[/red]")
    sys.exit(1)


@cli.command()
@click.option("--host", default=None, help="Bind address (defaults to TWILIOSIG_HOST)")
@click.option("--port", type=int, default=None, help="Bind port (defaults to TWILIOSIG_PORT)")
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None) -> None:
    """Run the demo webhook server."""
    settings: Settings = ctx.obj["settings"]
    setup_logging(settings.log_level, json_output=settings.log_json)

    try:
        app = create_app(settings)
    except ConfigurationError as exc:
        err_console.print(f"[red]{exc.message}[/red]")
        sys.exit(2)

    uvicorn.run(
        app,
        host=host or settings.host,
        port=port or settings.port,
        log_level=settings.log_level.lower(),
    )


def main() -> None:
    """CLI entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
