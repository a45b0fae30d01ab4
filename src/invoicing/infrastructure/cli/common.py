"""Helpers shared by the CLI command modules."""

from __future__ import annotations

from typing import TypeVar

import click

from invoicing.application.result import Result

T = TypeVar("T")


def unwrap(result: Result[T]) -> T:
    """Return the value of a successful result or abort the command."""
    if not result.is_success:
        raise click.ClickException(f"{result.error} [{result.kind.value}]")  # type: ignore[union-attr]
    return result.value  # type: ignore[return-value]
