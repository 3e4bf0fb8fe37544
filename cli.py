"""
CLI tool for running and inspecting the bruteforce hub server.

Provides commands for starting the server and for viewing the effective
configuration.
"""

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

typer_app = typer.Typer(
    name="bruteforce-hub",
    help="Bruteforce hub - real-time presence and discovery relay",
    add_completion=False,
)
console = Console()


def uvicorn_log_config() -> dict:
    """
    Uvicorn logging config with monitoring paths filtered out of the
    access log.
    """
    from uvicorn.config import LOGGING_CONFIG

    log_config = {
        **LOGGING_CONFIG,
        "filters": {
            "exclude_monitoring_paths": {
                "()": "bruteforce_hub.uvicorn_filters.ExcludeMonitoringPathsFilter"
            }
        },
        "handlers": {
            name: dict(handler)
            for name, handler in LOGGING_CONFIG["handlers"].items()
        },
    }
    log_config["handlers"]["access"]["filters"] = ["exclude_monitoring_paths"]
    return log_config


@typer_app.command(name="serve")
def serve(
    reload: bool = typer.Option(
        False, "--reload", help="Restart the server when code changes"
    ),
):
    """
    Start the WebSocket server on WS_LISTEN_ADDR.

    Example:
        bruteforce-hub serve
        WS_LISTEN_ADDR=127.0.0.1:9000 bruteforce-hub serve --reload
    """
    import uvicorn

    from bruteforce_hub.settings import app_settings

    console.print(
        Panel.fit(
            f"[bold cyan]Listening on[/bold cyan] {app_settings.WS_LISTEN_ADDR}"
            f" [dim](websocket path {app_settings.WS_PATH})[/dim]",
            border_style="cyan",
        )
    )

    uvicorn.run(
        "bruteforce_hub:application",
        factory=True,
        host=app_settings.listen_host,
        port=app_settings.listen_port,
        reload=reload,
        log_config=uvicorn_log_config(),
    )


@typer_app.command(name="show-config")
def show_config():
    """
    Display the effective settings as a table.

    Example:
        bruteforce-hub show-config
    """
    from pydantic import ValidationError

    try:
        from bruteforce_hub.settings import Settings

        settings = Settings()
    except ValidationError as ex:
        console.print(f"[red]✗ Invalid configuration[/red]\n{ex}")
        raise typer.Exit(code=1)

    table = Table("Setting", "Value", title="Effective configuration")
    for name, value in settings.model_dump().items():
        table.add_row(f"[yellow]{name}[/yellow]", str(value))

    console.print()
    console.print(table)
    console.print()


def main() -> None:
    typer_app()


if __name__ == "__main__":
    main()
