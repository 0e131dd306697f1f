"""Command-line interface for igrequest using Click."""

import asyncio
import json
import logging
import sys
from typing import Any, Dict, Optional, Tuple

import click

from igrequest import __version__
from igrequest.config import Config
from igrequest.exceptions import IgRequestError
from igrequest.http.client import create_retry_decorator
from igrequest.http.cookies import load_cookies_from_file
from igrequest.http.headers import (
    load_headers_from_file,
    merge_headers,
    parse_header_lines,
)
from igrequest.models import RequestOptions
from igrequest.request import SignedRequest
from igrequest.request import sign as sign_payload
from igrequest.request import sign_data as sign_fields
from igrequest.state import SessionState


# Setup logging - default to WARNING so only the response goes to stdout
# INFO and DEBUG logs are only shown when --verbose is used
logging.basicConfig(
    level=logging.WARNING,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def parse_data_fields(fields: Tuple[str, ...]) -> Dict[str, Any]:
    """Parse ``key=value`` body fields.

    Values that parse as JSON (numbers, booleans, objects...) are used as
    such, anything else is kept as a string.

    Raises:
        click.BadParameter: If a field has no '='
    """
    data = {}
    for item in fields:
        if '=' not in item:
            raise click.BadParameter(f"expected key=value, got {item!r}", param_hint='--data')
        key, value = item.split('=', 1)
        try:
            data[key] = json.loads(value)
        except ValueError:
            data[key] = value
    return data


def _load_state(config: Config) -> SessionState:
    state_path = config.get_state_path()
    if not state_path.exists():
        click.echo(f"No session state at {state_path}", err=True)
        click.echo("Create one with: igrequest state init --seed <username>", err=True)
        sys.exit(1)
    return SessionState.from_file(state_path)


@click.group(invoke_without_command=True)
@click.option('--version', '-v', is_flag=True, help='Show version and exit')
@click.pass_context
def cli(ctx, version):
    """igrequest - Signed requests for the Instagram Android private API.

    Sends requests with the Android app's headers and an HMAC-signed body,
    keeping a session state (device identity, tokens, cookies) on disk.
    """
    if version:
        click.echo(f"igrequest version {__version__}")
        ctx.exit()

    # If no subcommand, show help
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.argument('payload')
def sign(payload: str):
    """Print the HMAC-SHA256 signature of PAYLOAD."""
    click.echo(sign_payload(payload))


@cli.command('sign-data')
@click.argument('data')
def sign_data(data: str):
    """Print the signed form body for a JSON object.

    Example:
        igrequest sign-data '{"username": "alice"}'
    """
    try:
        fields = json.loads(data)
    except ValueError as e:
        raise click.BadParameter(f"invalid JSON: {e}", param_hint='DATA')

    if not isinstance(fields, dict):
        raise click.BadParameter("expected a JSON object", param_hint='DATA')

    form = sign_fields(fields)
    click.echo(json.dumps(form, ensure_ascii=False))


@cli.group()
def state():
    """Manage the saved session state."""


@state.command('init')
@click.option('--seed', required=True, help='Seed for the device identity (e.g. the username)')
@click.option('--state-file', help='Path to state file (default: ~/.igrequest/state.json)')
@click.option('--cookie-file', help='Path to cookie file (Netscape format) to seed the jar')
@click.option('--force', is_flag=True, help='Overwrite an existing state file')
def state_init(seed: str, state_file: Optional[str], cookie_file: Optional[str], force: bool):
    """Create a new session state with a device derived from SEED."""
    config = Config(state_file=state_file)
    state_path = config.get_state_path()

    if state_path.exists() and not force:
        click.echo(f"State file already exists: {state_path} (use --force to overwrite)", err=True)
        sys.exit(1)

    session = SessionState.generate(seed)
    if cookie_file:
        added = session.add_cookies(load_cookies_from_file(cookie_file))
        click.echo(f"Loaded {added} cookie(s) from {cookie_file}")

    session.save(state_path)
    click.echo(f"Device: {session.device_id} ({session.uuid})")
    click.echo(f"Saved: {state_path}")


@state.command('show')
@click.option('--state-file', help='Path to state file (default: ~/.igrequest/state.json)')
def state_show(state_file: Optional[str]):
    """Show a summary of the saved session state."""
    session = _load_state(Config(state_file=state_file))

    click.echo(f"Device ID:  {session.device_id}")
    click.echo(f"UUID:       {session.uuid}")
    click.echo(f"User agent: {session.app_user_agent}")
    click.echo(f"CSRF token: {session.csrf_token or '-'}")
    click.echo(f"Logged in:  {'yes' if session.is_logged_in else 'no'}")
    click.echo(f"Cookies:    {len(session.cookie_jar)}")


@cli.command()
@click.argument('path')
@click.option('--method', '-X', default='GET', help='HTTP method (default: GET)')
@click.option('--data', '-d', 'data_fields', multiple=True, help='Body field as key=value (repeatable)')
@click.option('--header', '-H', 'header_lines', multiple=True, help="Header as 'Name: value' (repeatable)")
@click.option('--state-file', help='Path to state file (default: ~/.igrequest/state.json)')
@click.option('--cookie-file', help='Path to cookie file (Netscape format)')
@click.option('--header-file', help='Path to header file')
@click.option('--timeout', default=30.0, help='Request timeout in seconds')
@click.option('--proxy', help='HTTP/HTTPS proxy')
@click.option('--no-ssl-verify', is_flag=True, help='Disable SSL verification')
@click.option('--max-retries', default=1, help='Maximum attempts on connection errors')
@click.option('--verbose', is_flag=True, help='Enable verbose logging')
def request(
    path: str,
    method: str,
    data_fields: Tuple[str, ...],
    header_lines: Tuple[str, ...],
    state_file: Optional[str],
    cookie_file: Optional[str],
    header_file: Optional[str],
    timeout: float,
    proxy: Optional[str],
    no_ssl_verify: bool,
    max_retries: int,
    verbose: bool,
):
    """Send a signed request to PATH and print the JSON response.

    The session state is saved back after the request, including any
    tokens or cookies the server set.

    Example:
        igrequest request qe/sync/ -X POST -d id=123 -d experiments=ig_android_login
    """
    # Enable verbose logging if requested
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        # Also enable httpx logging
        logging.getLogger('httpx').setLevel(logging.INFO)

    try:
        config = Config(
            state_file=state_file,
            cookie_file=cookie_file,
            header_file=header_file,
            timeout=timeout,
            proxy=proxy,
            verify_ssl=not no_ssl_verify,
            max_retries=max_retries,
        )
    except ValueError as e:
        raise click.UsageError(str(e))

    session = _load_state(config)

    if config.cookie_file:
        added = session.add_cookies(load_cookies_from_file(config.cookie_file))
        logger.info(f"Loaded {added} cookie(s) from {config.cookie_file}")

    # Header file first, then -H lines on top
    headers = merge_headers(
        load_headers_from_file(config.header_file) if config.header_file else None,
        parse_header_lines(header_lines),
    )

    options = RequestOptions(
        url=path,
        method=method,
        headers=headers or None,
        data=parse_data_fields(data_fields) or None,
    )

    async def send():
        """Send the request, retrying connection errors per config."""
        async with SignedRequest(session, config) as signed_request:
            @create_retry_decorator(config)
            async def _send_with_retry():
                return await signed_request.send(options)

            return await _send_with_retry()

    try:
        body = asyncio.run(send())
    except IgRequestError as e:
        click.echo(f"✗ Failed: {e}", err=True)
        sys.exit(1)
    finally:
        session.save(config.get_state_path())

    click.echo(json.dumps(body, indent=2, ensure_ascii=False))


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == '__main__':
    main()
