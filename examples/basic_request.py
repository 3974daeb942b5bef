"""
Example demonstrating a Transport with lifecycle handlers and traffic logging.

Sends a single request, prints each lifecycle notification as it fires and
writes the rendered request/response logs to a session-specific file.

Environment:
    TARGET_URL: URL to request (default: https://httpbin.org/get)
    API_TOKEN: Optional bearer token sent as Authorization header
"""

import asyncio
import os
from datetime import UTC
from datetime import datetime
from logging import basicConfig
from logging import getLogger
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from transport_http import FailEvent
from transport_http import RequestEvent
from transport_http import ResponseEvent
from transport_http import SuccessEvent
from transport_http import Transport
from transport_http import TransportOptions

load_dotenv()

logger = getLogger(__name__)
console = Console()


async def main() -> None:
    """Send one request and report every lifecycle event."""
    console.print(Panel.fit("[bold blue]transport_http Example[/bold blue]"))

    headers = [("Accept", "application/json")]
    token = os.getenv("API_TOKEN")
    if token:
        headers.append(("Authorization", f"Bearer {token}"))

    session_id = f"session-{datetime.now(UTC).strftime('%Y%m%d-%H%M%S')}"
    log_file = Path("logs") / f"{session_id}.txt"

    transport = Transport(
        TransportOptions(
            method="GET",
            uri=os.getenv("TARGET_URL", "https://httpbin.org/get"),
            headers=headers,
            timeout=15,
        ),
        log_file=log_file,
        session_id=session_id,
    )

    @transport.on_request.add_handler
    def show_request(event: RequestEvent) -> None:
        console.print(Panel(event.request, title="Request", border_style="cyan"))

    @transport.on_response.add_handler
    def show_response(event: ResponseEvent) -> None:
        console.print(Panel(event.response or "", title="Response", border_style="magenta"))

    @transport.on_success.add_handler
    def show_success(event: SuccessEvent) -> None:
        console.print(f"[green]Succeeded with status {event.status_code}[/green]")

    @transport.on_fail.add_handler
    def show_failure(event: FailEvent) -> None:
        console.print(f"[red]Failed ({event.kind.value}): {event.message}[/red]")

    result = await transport.execute()
    logger.info(f"Result: {result}")
    console.print(f"[dim]Traffic log: {log_file}[/dim]")


if __name__ == "__main__":
    basicConfig(level="INFO", handlers=[RichHandler(console=console)], format="%(message)s")
    asyncio.run(main())
