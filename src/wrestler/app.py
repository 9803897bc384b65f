"""Typer application and command-line entry point for wrestler.

The command line is a thin shell around the library: ``wrestler call``
declares a one-off endpoint from a method and URL template and invokes it
with the remaining arguments, exactly as application code would::

    wrestler call get 'items/$id' 42 verbose true --base-url http://x/
    # GET http://x/items/42?verbose=true

Stored profiles (``wrestler profile add``) remember a base URL, a response
handler and transport settings.

:func:`main` is the console-script entry point declared in
``pyproject.toml``. It maps :class:`~wrestler.exceptions.WrestlerError` to
its exit code, transport failures to :data:`EXIT_CONNECTION_ERROR`, and
anything else to a crash log.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional

import httpx
import typer

from wrestler import __version__
from wrestler.exit_codes import EXIT_CONNECTION_ERROR, EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="wrestler",
    help="Call REST endpoints declared from URL templates.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

profile_app = typer.Typer(no_args_is_help=True)
app.add_typer(profile_app, name="profile", help="Manage stored client profiles.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"wrestler {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    profile: Optional[str] = typer.Option(
        None, "--profile", "-p", help="Profile name to use."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show each request on stderr."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Print requests instead of sending them."
    ),
) -> None:
    """Install the output manager and stash shared options in ``ctx.obj``."""
    from wrestler.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj["profile"] = profile
    ctx.obj["dry_run"] = dry_run


# ------------------------------------------------------------------ #
# Dry-run transport
# ------------------------------------------------------------------ #


class DryRunTransport:
    """Transport that prints each request to stderr instead of sending it.

    Returns a synthetic ``200`` JSON response so the response handler runs
    as usual.
    """

    def __enter__(self) -> DryRunTransport:
        return self

    def __exit__(self, *args: object) -> None:
        return None

    def _show(
        self, method: str, url: str, body: Optional[str], content_type: Optional[str]
    ) -> Any:
        from wrestler.codec import encode_json
        from wrestler.models import ResponseEnvelope
        from wrestler.output import info

        info(f"[dry-run] {method} {url}")
        if body is not None:
            info(f"  Content-Type: {content_type}")
            info(f"  Body: {body}")
        return ResponseEnvelope(
            status_code=200,
            headers={"Content-Type": "application/json"},
            body=encode_json({"dry_run": True, "message": "Request was not sent"}),
            url=url,
        )

    def get(self, url: str, body: Optional[str] = None, content_type: Optional[str] = None) -> Any:
        return self._show("GET", url, body, content_type)

    def post(self, url: str, body: Optional[str] = None, content_type: Optional[str] = None) -> Any:
        return self._show("POST", url, body, content_type)

    def put(self, url: str, body: Optional[str] = None, content_type: Optional[str] = None) -> Any:
        return self._show("PUT", url, body, content_type)

    def delete(self, url: str, body: Optional[str] = None, content_type: Optional[str] = None) -> Any:
        return self._show("DELETE", url, body, content_type)


def _resolve_body(raw: str) -> str:
    """Return *raw*, or the contents of the file it names when it starts with ``@``."""
    from wrestler.exceptions import InvalidUsageError

    if raw.startswith("@"):
        file_path = Path(raw[1:])
        if not file_path.is_file():
            raise InvalidUsageError(f"Body file not found: {file_path}")
        return file_path.read_text(encoding="utf-8")
    return raw


# ------------------------------------------------------------------ #
# Commands
# ------------------------------------------------------------------ #


@app.command("call")
def call_command(
    ctx: typer.Context,
    method: str = typer.Argument(help="HTTP method: get, post, put or delete."),
    template: str = typer.Argument(help="URL template, e.g. 'items/$id.json'."),
    args: Optional[List[str]] = typer.Argument(
        None,
        help="URL values in template order, then query parameters as key value pairs.",
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", "-u", help="Base URL (overrides profile and WRESTLER_BASE_URL)."
    ),
    body: Optional[str] = typer.Option(
        None, "--body", "-b", help="JSON payload, or @filename to read it from a file."
    ),
    handler: Optional[str] = typer.Option(
        None, "--handler", help="Response handler: default, simple or raw."
    ),
) -> None:
    """Declare a one-off endpoint and call it.

    Example::

        wrestler call post 'enter_data/$location/' my-folder method fancy \\
            --body '{"user": "Ford"}' --base-url http://example.com/rest/
    """
    from wrestler.client import RestClient
    from wrestler.codec import decode_json
    from wrestler.config import resolve_base_url, resolve_profile
    from wrestler.handlers import get_handler
    from wrestler.models import RequestConfig
    from wrestler.output import format_response
    from wrestler.transport import HttpxTransport

    obj = ctx.obj or {}
    profile = resolve_profile(obj.get("profile"))
    url = resolve_base_url(base_url, profile)
    handler_name = handler or (profile.handler if profile else "default")
    request_config = profile.request if profile else RequestConfig()

    kwargs: dict[str, Any] = {}
    if body is not None:
        kwargs["json"] = decode_json(_resolve_body(body))

    transport: Any
    if obj.get("dry_run"):
        transport = DryRunTransport()
    else:
        transport = HttpxTransport(request_config)

    with transport:
        client = RestClient(url, get_handler(handler_name), transport=transport)
        endpoint = client.endpoint("call", "", method, template)
        result = endpoint(*(args or []), **kwargs)

    if result is not None:
        format_response(result)


@app.command("params")
def params_command(
    template: str = typer.Argument(help="URL template to inspect."),
) -> None:
    """List the positional parameters of a URL template, in call order."""
    from wrestler.output import format_response
    from wrestler.template import extract_params

    format_response(extract_params(template))


@profile_app.command("add")
def profile_add(
    name: str = typer.Argument(help="Profile name."),
    base_url: str = typer.Argument(help="Base URL of the API."),
    handler: str = typer.Option("default", "--handler", help="Response handler."),
    timeout: float = typer.Option(30, "--timeout", help="Request timeout in seconds."),
    no_verify: bool = typer.Option(
        False, "--no-verify", help="Do not verify TLS certificates."
    ),
    header: Optional[List[str]] = typer.Option(
        None, "--header", "-H", help="Extra header as 'Name: value'. Repeatable."
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing profile."),
) -> None:
    """Create or replace a profile."""
    from wrestler.config import profile_exists, save_profile
    from wrestler.exceptions import ConfigError, InvalidUsageError
    from wrestler.handlers import get_handler
    from wrestler.models import Profile, RequestConfig
    from wrestler.output import success

    get_handler(handler)
    if profile_exists(name) and not force:
        raise ConfigError(f"Profile '{name}' already exists (use --force to replace it)")

    headers: dict[str, str] = {}
    for item in header or []:
        key, sep, value = item.partition(":")
        if not sep or not key.strip():
            raise InvalidUsageError(f"Malformed header {item!r}; expected 'Name: value'")
        headers[key.strip()] = value.strip()

    profile = Profile(
        name=name,
        base_url=base_url,
        handler=handler,
        request=RequestConfig(timeout=timeout, verify_ssl=not no_verify, headers=headers),
    )
    path = save_profile(profile)
    success(f"Saved profile '{name}' to {path}")


@profile_app.command("list")
def profile_list() -> None:
    """List stored profiles."""
    from wrestler.config import list_profiles, load_profile
    from wrestler.output import info, print_table, suggest

    names = list_profiles()
    if not names:
        info("No profiles configured.")
        suggest("wrestler profile add NAME BASE_URL")
        return
    rows = []
    for name in names:
        profile = load_profile(name)
        rows.append([profile.name, profile.base_url, profile.handler])
    print_table(["name", "base_url", "handler"], rows, title="Profiles")


@profile_app.command("show")
def profile_show(name: str = typer.Argument(help="Profile name.")) -> None:
    """Show one profile."""
    from wrestler.config import load_profile
    from wrestler.output import format_response

    format_response(load_profile(name))


@profile_app.command("remove")
def profile_remove(name: str = typer.Argument(help="Profile name.")) -> None:
    """Delete a profile."""
    from wrestler.config import delete_profile
    from wrestler.output import success

    delete_profile(name)
    success(f"Removed profile '{name}'")


# ------------------------------------------------------------------ #
# Entry point
# ------------------------------------------------------------------ #


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write the current traceback under the data directory and return its path."""
    from wrestler.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """Console-script entry point.

    Raises:
        SystemExit: Always (either from Typer or with a mapped exit code).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from wrestler.exceptions import WrestlerError
        from wrestler.output import error

        if isinstance(exc, WrestlerError):
            error(f"Error: {exc}")
            sys.exit(exc.exit_code)
        if isinstance(exc, httpx.HTTPError):
            error(f"Error: request failed: {exc}")
            sys.exit(EXIT_CONNECTION_ERROR)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
