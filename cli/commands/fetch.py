"""
Request commands: fetch, all, race
"""

import json
from typing import Any, Dict, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from deferred.core import DeferredValue, RejectedError, result
from deferred.transport import Response, fetch

console = Console()


def _parse_pairs(items: Optional[List[str]], sep: str, what: str) -> Dict[str, str]:
    pairs = {}
    for item in items or []:
        if sep not in item:
            raise typer.BadParameter(f"{what} must look like KEY{sep}VALUE: {item!r}")
        key, value = item.split(sep, 1)
        pairs[key.strip()] = value.strip()
    return pairs


def _response_dict(response: Response) -> Dict[str, Any]:
    return {
        "status": response.status,
        "message": response.message,
        "headers": response.headers,
        "body": response.body,
    }


def _fail(error: RejectedError, json_output: bool) -> None:
    reason = error.reasons[0] if error.reasons else error
    if json_output:
        print(json.dumps({"error": str(reason)}))
    else:
        console.print(f"[red]Error:[/red] {reason}")
    raise typer.Exit(2)


def fetch_command(
    url: str = typer.Argument(..., help="URL to request"),
    method: str = typer.Option("GET", "--method", "-X", help="HTTP method"),
    header: Optional[List[str]] = typer.Option(None, "--header", "-H", help="Request header KEY:VALUE"),
    data: Optional[str] = typer.Option(None, "--data", "-d", help="JSON request body"),
    form: Optional[List[str]] = typer.Option(None, "--form", "-F", help="Form field KEY=VALUE"),
    timeout: Optional[float] = typer.Option(None, "--timeout", "-t", help="Socket timeout in seconds"),
    no_redirects: bool = typer.Option(False, "--no-redirects", help="Do not follow 3xx responses"),
    full: bool = typer.Option(False, "--full", help="Show status and headers"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Perform a single request.

    Exits 1 on a non-2xx status and 2 when the request fails.

    Examples:
        deferred fetch https://example.com
        deferred fetch https://httpbin.org/post -X POST -d '{"a": 1}' --full
        deferred fetch https://httpbin.org/post -X POST -F name=value --json
    """
    headers = _parse_pairs(header, ":", "header")
    fields = _parse_pairs(form, "=", "form field")

    options: Dict[str, Any] = {
        "method": method,
        "headers": headers,
        "timeout": timeout,
        "full_response": True,
    }
    if no_redirects:
        options["follow_redirects"] = False
    if data is not None:
        try:
            options["body"] = json.loads(data)
        except json.JSONDecodeError as e:
            raise typer.BadParameter(f"--data is not valid JSON: {e}")
    if fields:
        options["form"] = fields

    try:
        (response,) = result(fetch(url, **options))
    except RejectedError as e:
        _fail(e, json_output)

    if json_output:
        output = _response_dict(response) if full else {"body": response.body}
        print(json.dumps(output, indent=2))
    else:
        if full:
            table = Table(title=f"{method.upper()} {url}", show_header=False)
            table.add_column("Field", style="cyan")
            table.add_column("Value")
            table.add_row("Status", f"{response.status} {response.message}")
            for key, value in response.headers.items():
                table.add_row(key, value)
            console.print(table)
        print(response.body)

    raise typer.Exit(0 if response.ok else 1)


def all_command(
    urls: List[str] = typer.Argument(..., help="URLs to request concurrently"),
    timeout: Optional[float] = typer.Option(None, "--timeout", "-t", help="Socket timeout in seconds"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Request every URL concurrently and report them in argument order.

    Fails as soon as any request fails.

    Examples:
        deferred all https://a.example https://b.example
    """
    pending = [fetch(url, timeout=timeout, full_response=True) for url in urls]

    try:
        (responses,) = result(DeferredValue.all(pending))
    except RejectedError as e:
        _fail(e, json_output)

    if json_output:
        output = [{"url": url, "status": r.status, "bytes": len(r.body)} for url, r in zip(urls, responses)]
        print(json.dumps({"responses": output, "count": len(output)}, indent=2))
    else:
        table = Table(title="Responses")
        table.add_column("#", style="dim", justify="right")
        table.add_column("URL", style="cyan")
        table.add_column("Status", style="green")
        table.add_column("Bytes", justify="right")
        for idx, (url, r) in enumerate(zip(urls, responses)):
            style = "green" if r.ok else "red"
            table.add_row(str(idx), url, f"[{style}]{r.status}[/{style}]", str(len(r.body)))
        console.print(table)

    raise typer.Exit(0)


def race_command(
    urls: List[str] = typer.Argument(..., help="URLs to race"),
    timeout: Optional[float] = typer.Option(None, "--timeout", "-t", help="Socket timeout in seconds"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Request every URL concurrently and report whichever settles first.

    Examples:
        deferred race https://mirror-a.example https://mirror-b.example
    """
    # Tag each response with its URL: the winner settles with (url, response)
    tagged = [
        fetch(url, timeout=timeout, full_response=True).then(
            lambda response, url=url: DeferredValue.resolve(url, response)
        )
        for url in urls
    ]

    try:
        winner, response = result(DeferredValue.race(tagged))
    except RejectedError as e:
        _fail(e, json_output)

    if json_output:
        print(json.dumps({"winner": winner, "status": response.status}, indent=2))
    else:
        console.print(f"[bold]Winner:[/bold] [cyan]{winner}[/cyan] ({response.status} {response.message})")

    raise typer.Exit(0)
