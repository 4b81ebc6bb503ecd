"""Taskboard CLI — log in and manage your tasks from the terminal.

Usage:
    taskboard register alice alice@example.com   # Create account (prompts for password)
    taskboard login alice@example.com            # Log in, stores the token locally
    taskboard whoami                             # Show who the stored token belongs to
    taskboard logout                             # Forget the token
    taskboard tasks list                         # Your tasks, newest first
    taskboard tasks add "Buy milk" -d "2 litres" # Create a task
    taskboard tasks done <id>                    # Mark completed (undo to revert)
    taskboard tasks edit <id> --title "..."      # Change title/description
    taskboard tasks rm <id>                      # Delete
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import json
import os
import sys
from typing import Optional

import click
import httpx

from taskboard import __version__
from taskboard.cli.session import clear_session, load_session, save_session

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:8000/api"

# Tests swap in an httpx.MockTransport here.
_transport: Optional[httpx.AsyncBaseTransport] = None


def _api_url() -> str:
    return os.environ.get("TASKBOARD_API_URL", DEFAULT_API_URL).rstrip("/")


def _client(token: Optional[str] = None) -> httpx.AsyncClient:
    """Build an async HTTP client, with the bearer token attached if given."""
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    return httpx.AsyncClient(
        base_url=_api_url(),
        headers=headers,
        timeout=30.0,
        transport=_transport,
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from synchronous Click handler.

    Handles nested event loops (e.g. when invoked via Click CliRunner
    inside an existing async context like tests) by offloading to a thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _fail(message: str) -> None:
    click.secho(f"Error: {message}", fg="red", err=True)
    sys.exit(1)


def _require_token() -> str:
    session = load_session()
    if not session:
        _fail("Not logged in. Run: taskboard login <email>")
    return session["token"]


def _error_message(r: httpx.Response) -> str:
    try:
        return r.json().get("message") or r.reason_phrase
    except (ValueError, AttributeError):
        return r.text or r.reason_phrase


def _check(r: httpx.Response) -> httpx.Response:
    """Exit on API errors. A 401 also drops the stored session."""
    if r.status_code == 401 and load_session() is not None:
        clear_session()
        _fail(f"{_error_message(r)}. Session cleared, please log in again.")
    if r.status_code >= 400:
        _fail(_error_message(r))
    return r


def _print_tasks(tasks: list[dict]) -> None:
    header = f"{'ID':36s}  {'Done':4s}  Title"
    click.secho(header, bold=True)
    click.echo("-" * len(header))
    for t in tasks:
        mark = click.style("[x]", fg="green") if t["completed"] else "[ ]"
        click.echo(f"{t['id']:36s}  {mark:4s}  {t['title'][:60]}")
        if t.get("description"):
            click.echo(f"{'':36s}        {t['description'][:60]}")


def _pretty_json(data: dict | list) -> str:
    return json.dumps(data, indent=2, default=str)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="taskboard")
def main():
    """Taskboard — your tasks, from the terminal."""


# ---------------------------------------------------------------------------
# Account commands
# ---------------------------------------------------------------------------


@main.command()
@click.argument("username")
@click.argument("email")
@click.password_option()
def register(username: str, email: str, password: str):
    """Create an account and log in."""
    _run(_auth_impl("/auth/register", {
        "username": username, "email": email, "password": password,
    }))


@main.command()
@click.argument("email")
@click.option("--password", prompt=True, hide_input=True)
def login(email: str, password: str):
    """Log in and store the token for later commands."""
    _run(_auth_impl("/auth/login", {"email": email, "password": password}))


async def _auth_impl(path: str, body: dict):
    async with _client() as c:
        r = _check(await c.post(path, json=body))
        data = r.json()
        save_session(data["token"], data["user"])
        user = data["user"]
        click.secho(f"Logged in as {user['username']} <{user['email']}>", fg="green")


@main.command()
def logout():
    """Forget the stored token."""
    if clear_session():
        click.echo("Logged out.")
    else:
        click.echo("Not logged in.")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
def whoami(as_json: bool):
    """Show the user the stored token belongs to."""
    _run(_whoami_impl(as_json))


async def _whoami_impl(as_json: bool):
    token = _require_token()
    async with _client(token) as c:
        user = _check(await c.get("/auth/me")).json()
    if as_json:
        click.echo(_pretty_json(user))
    else:
        click.echo(f"{user['username']} <{user['email']}>")


# ---------------------------------------------------------------------------
# taskboard tasks ...
# ---------------------------------------------------------------------------


@main.group()
def tasks():
    """List and manage your tasks."""


@tasks.command("list")
@click.option("--pending", "only_pending", is_flag=True, help="Hide completed tasks")
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
def list_tasks(only_pending: bool, as_json: bool):
    """List your tasks, newest first."""
    _run(_list_impl(only_pending, as_json))


async def _list_impl(only_pending: bool, as_json: bool):
    token = _require_token()
    async with _client(token) as c:
        items = _check(await c.get("/tasks")).json()

    if only_pending:
        items = [t for t in items if not t["completed"]]
    if as_json:
        click.echo(_pretty_json(items))
        return
    if not items:
        click.echo("No tasks found.")
        return
    _print_tasks(items)


@tasks.command("add")
@click.argument("title")
@click.option("--description", "-d", default=None, help="Longer description")
def add_task(title: str, description: Optional[str]):
    """Create a task."""
    body: dict = {"title": title}
    if description is not None:
        body["description"] = description
    _run(_write_impl("POST", "/tasks", body, "Created"))


@tasks.command("edit")
@click.argument("task_id")
@click.option("--title", "-t", default=None)
@click.option("--description", "-d", default=None)
def edit_task(task_id: str, title: Optional[str], description: Optional[str]):
    """Change a task's title and/or description."""
    body: dict = {}
    if title is not None:
        body["title"] = title
    if description is not None:
        body["description"] = description
    if not body:
        _fail("Nothing to change. Pass --title and/or --description.")
    _run(_write_impl("PUT", f"/tasks/{task_id}", body, "Updated"))


@tasks.command("done")
@click.argument("task_id")
def done_task(task_id: str):
    """Mark a task completed."""
    _run(_write_impl("PUT", f"/tasks/{task_id}", {"completed": True}, "Completed"))


@tasks.command("undo")
@click.argument("task_id")
def undo_task(task_id: str):
    """Mark a task not completed."""
    _run(_write_impl("PUT", f"/tasks/{task_id}", {"completed": False}, "Reopened"))


async def _write_impl(method: str, path: str, body: dict, verb: str):
    token = _require_token()
    async with _client(token) as c:
        task = _check(await c.request(method, path, json=body)).json()
    click.secho(f"{verb}: {task['title']} ({task['id']})", fg="green")


@tasks.command("rm")
@click.argument("task_id")
@click.option("--yes", "-y", is_flag=True, help="Don't ask for confirmation")
def remove_task(task_id: str, yes: bool):
    """Delete a task."""
    if not yes:
        click.confirm(f"Delete task {task_id}?", abort=True)
    _run(_remove_impl(task_id))


async def _remove_impl(task_id: str):
    token = _require_token()
    async with _client(token) as c:
        r = _check(await c.delete(f"/tasks/{task_id}"))
    click.echo(r.json()["message"])


if __name__ == "__main__":
    main()
