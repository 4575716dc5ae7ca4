from __future__ import annotations

import sys

import click
from flask import Blueprint, current_app

from gravis.app.common.errors import BackendError
from gravis.app.extensions import backend

cli_bp = Blueprint("backend", __name__)


@cli_bp.cli.command("check")
def check_backend() -> None:
    """Check that the REST backend is reachable.

    Lists product categories once; exits non-zero when the call fails.
    """
    url = current_app.config["BACKEND_URL"]
    try:
        categories = backend.request("GET", "/product-categories")
    except BackendError as exc:
        click.echo(f"Backend at {url} failed: {exc.status_code} {exc.message}", err=True)
        sys.exit(1)

    count = len(categories) if isinstance(categories, list) else 0
    click.echo(f"Backend at {url} is reachable ({count} product categories).")
