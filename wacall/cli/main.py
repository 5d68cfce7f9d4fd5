"""
wacall CLI main module.

Runs the webhook server for local development and production.
"""

import typer
import uvicorn

from wacall.core.config.settings import settings

app = typer.Typer(help="wacall WhatsApp calling webhook bridge CLI")

DEFAULT_FACTORY = "wacall.core.app:create_default_app"


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(settings.port, "--port", "-p", help="Port to bind to"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload"),
    factory: str = typer.Option(
        DEFAULT_FACTORY,
        "--factory",
        "-f",
        help="Import string of a zero-argument app factory",
    ),
):
    """
    Run the webhook server.

    Examples:
        wacall serve
        wacall serve --port 8080 --reload
        wacall serve --factory myapp.main:build_app
    """
    try:
        settings.require_webhook_secrets()
    except ValueError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1) from e

    typer.echo("🚀 Starting wacall webhook server...")
    typer.echo(f"🌐 Webhook: http://{host}:{port}/webhook")
    typer.echo("💡 Press CTRL+C to stop")

    uvicorn.run(factory, factory=True, host=host, port=port, reload=reload)


@app.command()
def version():
    """Show the wacall version."""
    typer.echo(f"wacall {settings.version}")


if __name__ == "__main__":
    app()
