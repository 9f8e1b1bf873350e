import asyncio
import logging

import click
import uvicorn
from dotenv import load_dotenv

from eater.config import EnvConfigProvider
from eater.logging_config import configure_logging, get_logging_config
from eater.modules.auth.factory import AuthFactory
from eater.modules.credentials import CredentialCipher
from eater.modules.storage import StorageModule

load_dotenv()

logger = logging.getLogger(__name__)


async def _with_session(action):
    """Open storage, build the session stack and run one action against it."""
    config_provider = EnvConfigProvider()
    async with StorageModule(config_provider.get_store_config()) as redis_client:
        stack = AuthFactory.build(config_provider, redis_client)
        try:
            return await action(stack.session_manager)
        finally:
            await stack.aclose()


def _report(result):
    if result.ok:
        if result.session:
            click.echo(f"Signed in as {result.session.user_id}")
        else:
            click.echo("Not signed in")
    else:
        raise click.ClickException(result.error.message)


@click.group()
@click.option("--log-level", "log_level", default="WARNING")
def main(log_level: str):
    """Eater session core utilities."""
    configure_logging(log_level)


@main.command("mock-backend")
@click.option("--host", "host", default="127.0.0.1")
@click.option("--port", "port", default=8000)
@click.option("--log-level", "log_level", default="INFO")
def mock_backend(host: str, port: int, log_level: str):
    """Serve the in-memory auth and order backend."""
    from eater.modules.api.mock_backend import create_mock_backend_app

    uvicorn.run(
        create_mock_backend_app(),
        host=host,
        port=port,
        log_config=get_logging_config(log_level),
    )


@main.command("generate-key")
def generate_key():
    """Print a new CREDENTIAL_ENCRYPTION_KEY value."""
    click.echo(CredentialCipher.generate_key())


@main.group()
def session():
    """Inspect and change the stored session."""


@session.command("sign-in")
@click.argument("email")
@click.password_option("--password", confirmation_prompt=False)
def sign_in(email: str, password: str):
    """Sign in and store the session."""
    _report(asyncio.run(_with_session(lambda manager: manager.sign_in(email, password))))


@session.command("sign-out")
def sign_out():
    """Clear the stored session."""
    _report(asyncio.run(_with_session(lambda manager: manager.sign_out())))


@session.command("refresh")
@click.option("--force", is_flag=True, default=False)
def refresh(force: bool):
    """Refresh the stored token."""
    _report(asyncio.run(_with_session(lambda manager: manager.refresh_token(force=force))))


@session.command("status")
def status():
    """Reconcile stored slots and show whether a session exists."""
    _report(asyncio.run(_with_session(lambda manager: manager.restore())))


if __name__ == "__main__":
    main()
