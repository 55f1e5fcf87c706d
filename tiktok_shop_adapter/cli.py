"""Command-line interface for the TikTok Shop adapter."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Optional
import typer
from rich.console import Console
from rich.table import Table
from rich.json import JSON

from .batch import execute_batch, list_operations
from .client import TikTokShopClient
from .config import AdapterConfig
from .errors import ServiceError
from .mock_client import MockTikTokShopClient
from .signing import sign as sign_request

app = typer.Typer(
    name="tiktok-shop",
    help="TikTok Shop Open API adapter CLI"
)
console = Console()


def load_config(config_path: str) -> AdapterConfig:
    """Load configuration from JSON file."""
    config_file = Path(config_path)
    if not config_file.exists():
        console.print(f"[red]Error: Config file not found: {config_path}[/red]")
        raise typer.Exit(1)

    with open(config_file) as f:
        config_data = json.load(f)

    config = AdapterConfig(**config_data)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    return config


def parse_json_option(value: Optional[str], name: str) -> Any:
    """Parse a JSON command-line option."""
    if value is None:
        return None
    try:
        return json.loads(value)
    except json.JSONDecodeError as e:
        console.print(f"[red]Error: --{name} is not valid JSON: {e}[/red]")
        raise typer.Exit(1)


def print_json(data: Any) -> None:
    console.print(JSON(json.dumps(data, default=str, indent=2)))


def print_error(error: ServiceError) -> None:
    console.print(f"[red]✗ {error.message}[/red]")
    if error.status is not None:
        console.print(f"[bold]Status:[/bold] {error.status}")
    if error.data is not None:
        print_json(error.data)


@app.command()
def init(
    output: str = typer.Option("config.json", help="Output configuration file path")
):
    """Initialize a new configuration file with example values."""
    example_config = AdapterConfig.model_config["json_schema_extra"]["example"]

    output_path = Path(output)
    with open(output_path, 'w') as f:
        json.dump(example_config, f, indent=2)

    console.print(f"[green]✓[/green] Configuration file created: {output}")
    console.print("\n[yellow]⚠ Please edit the file and add your TikTok Shop app credentials![/yellow]")


@app.command()
def validate(
    config: str = typer.Option("config.json", help="Configuration file path"),
):
    """Validate configuration file."""
    try:
        cfg = load_config(config)
        console.print("[green]✓[/green] Configuration is valid!")
        console.print(f"\n[bold]App key:[/bold] {cfg.credentials.app_key}")
        console.print(f"[bold]API:[/bold] {cfg.api.base_url}")
        console.print(f"[bold]Access token:[/bold] {'set' if cfg.credentials.access_token else 'not set'}")
        console.print(f"[bold]Proxy:[/bold] {cfg.proxy or 'direct'}")
        console.print(f"[bold]Shop cipher:[/bold] {cfg.shop_cipher or 'not set'}")
    except Exception as e:
        console.print(f"[red]✗ Configuration error:[/red] {str(e)}")
        raise typer.Exit(1)


@app.command()
def sign(
    path: str = typer.Argument(..., help="API path, e.g. /order/202309/orders/search"),
    config: str = typer.Option("config.json", help="Configuration file path"),
    query: Optional[str] = typer.Option(None, help="Query parameters as a JSON object"),
    body: Optional[str] = typer.Option(None, help="Request body as JSON"),
    content_type: str = typer.Option("application/json", help="Content-Type of the request"),
    timestamp: Optional[int] = typer.Option(None, help="Unix timestamp in seconds (default: now)"),
):
    """Show the canonical string and signature for a request without sending it."""
    import time

    cfg = load_config(config)
    try:
        signed = sign_request(
            path,
            parse_json_option(query, "query"),
            parse_json_option(body, "body"),
            app_key=cfg.credentials.app_key,
            app_secret=cfg.credentials.app_secret,
            timestamp=timestamp if timestamp is not None else int(time.time()),
            headers={"Content-Type": content_type},
        )
    except ServiceError as e:
        print_error(e)
        raise typer.Exit(1)

    table = Table(title="Signature")
    table.add_column("Part", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Path", signed.canonical.canonical_path)
    table.add_row("Canonical query", signed.canonical.canonical_query)
    table.add_row("Canonical body", signed.canonical.canonical_body or "(empty)")
    table.add_row("Timestamp", str(signed.timestamp))
    console.print(table)
    console.print(f"[bold]Sign:[/bold] {signed.signature}")


@app.command("access-token")
def access_token(
    auth_code: str = typer.Argument(..., help="Authorization code from the seller authorization redirect"),
    config: str = typer.Option("config.json", help="Configuration file path"),
    proxy: Optional[str] = typer.Option(None, help="Proxy override"),
):
    """Exchange an authorization code for access and refresh tokens."""

    async def _run():
        cfg = load_config(config)
        async with TikTokShopClient(cfg) as shop:
            return await shop.get_access_token(auth_code, proxy=proxy)

    try:
        print_json(asyncio.run(_run()))
    except ServiceError as e:
        print_error(e)
        raise typer.Exit(1)


@app.command("refresh-token")
def refresh_token(
    token: str = typer.Argument(..., help="Refresh token"),
    config: str = typer.Option("config.json", help="Configuration file path"),
    proxy: Optional[str] = typer.Option(None, help="Proxy override"),
):
    """Refresh an access token."""

    async def _run():
        cfg = load_config(config)
        async with TikTokShopClient(cfg) as shop:
            return await shop.refresh_access_token(token, proxy=proxy)

    try:
        print_json(asyncio.run(_run()))
    except ServiceError as e:
        print_error(e)
        raise typer.Exit(1)


@app.command()
def operations():
    """List available operation groups and operations."""
    table = Table(title="Operations")
    table.add_column("Group", style="cyan")
    table.add_column("Operation", style="green")
    for group, names in list_operations().items():
        for name in names:
            table.add_row(group, name)
    console.print(table)


@app.command()
def call(
    group: str = typer.Argument(..., help="Operation group, e.g. orders"),
    operation: str = typer.Argument(..., help="Operation name, e.g. get_order_detail"),
    config: str = typer.Option("config.json", help="Configuration file path"),
    params: Optional[str] = typer.Option(None, help="JSON object, or array of objects for a batch"),
    continue_on_fail: bool = typer.Option(False, help="Record per-item errors instead of aborting"),
    sandbox: bool = typer.Option(False, help="Use canned responses instead of the live API"),
    output: Optional[str] = typer.Option(None, help="Output file for JSON (optional)"),
):
    """Call an operation once per parameter item."""
    parsed = parse_json_option(params, "params")
    items = parsed if isinstance(parsed, list) else [parsed or {}]

    async def _run():
        cfg = load_config(config)
        client = MockTikTokShopClient() if sandbox else None
        auth_client = MockTikTokShopClient() if sandbox else None
        async with TikTokShopClient(cfg, client=client, auth_client=auth_client) as shop:
            return await execute_batch(shop, group, operation, items, continue_on_fail=continue_on_fail)

    try:
        results = asyncio.run(_run())
    except ServiceError as e:
        print_error(e)
        raise typer.Exit(1)

    if output:
        output_path = Path(output)
        with open(output_path, 'w') as f:
            json.dump(results, f, indent=2, default=str)
        console.print(f"[green]✓[/green] Saved {len(results)} result(s) to {output}")
    else:
        print_json(results)


@app.command("resize-pdf")
def resize_pdf(
    source_url: str = typer.Argument(..., help="HTTPS URL of the PDF"),
    output: str = typer.Option("resized.pdf", help="Output PDF path"),
    config: str = typer.Option("config.json", help="Configuration file path"),
    width_mm: Optional[float] = typer.Option(None, help="Target page width in millimetres"),
    height_mm: Optional[float] = typer.Option(None, help="Target page height in millimetres"),
    scale: Optional[float] = typer.Option(None, help="Scale factor (instead of a target size)"),
    dpi: Optional[int] = typer.Option(None, help="DPI recorded in the metadata"),
):
    """Download a shipping document and resize its pages."""
    target = None
    if width_mm is not None or height_mm is not None:
        target = {"width_mm": width_mm, "height_mm": height_mm}

    async def _run():
        cfg = load_config(config)
        async with TikTokShopClient(cfg) as shop:
            return await shop.pdf.resize_from_url(source_url, target_page_size=target, scale=scale, dpi=dpi)

    try:
        result = asyncio.run(_run())
    except ServiceError as e:
        print_error(e)
        if e.stage:
            console.print(f"[bold]Stage:[/bold] {e.stage}")
        raise typer.Exit(1)

    Path(output).write_bytes(result.content)
    meta = result.metadata
    console.print(f"[green]✓[/green] Saved {meta.page_count} page(s) to {output}")
    console.print(
        f"[bold]Page size:[/bold] {meta.final_page_size_mm.width_mm:.1f} x "
        f"{meta.final_page_size_mm.height_mm:.1f} mm"
    )


def create_app(shop: TikTokShopClient):
    """Build the FastAPI app serving ``shop``; the client is closed on shutdown."""
    from contextlib import asynccontextmanager
    from fastapi import FastAPI
    from .router import get_tiktok_router

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        yield
        await shop.close()

    server_app = FastAPI(title="TikTok Shop Adapter", lifespan=lifespan)
    server_app.include_router(get_tiktok_router(shop))

    @server_app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return server_app


@app.command()
def serve(
    config: str = typer.Option("config.json", help="Configuration file path"),
    host: str = typer.Option("0.0.0.0", help="Host to bind to"),
    port: int = typer.Option(8000, help="Port to bind to"),
):
    """Start an HTTP server exposing the operations."""
    import uvicorn

    cfg = load_config(config)
    server_app = create_app(TikTokShopClient(cfg))

    console.print(f"[green]Starting server on {host}:{port}[/green]")
    console.print(f"[blue]Operations: http://{host}:{port}/tiktok/operations[/blue]")

    uvicorn.run(server_app, host=host, port=port)


if __name__ == "__main__":
    app()
