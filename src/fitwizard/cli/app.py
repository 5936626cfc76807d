"""Shared Typer app object, shared option types, and store utility."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..io.plan_store import PlanStore, get_default_store_dir

# Shared --store-dir option type used across all commands
StoreDirOption = Annotated[
    Optional[Path],
    typer.Option("--store-dir", "-s", help="Directory holding plans and logs (default: ~/.fitwizard)"),
]

JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

app = typer.Typer(
    name="fitwizard",
    help="Workout plan generator with OPT phases, volume landmarks and RIR progression.",
    no_args_is_help=True,
)


def get_store(store_dir: Path | None) -> PlanStore:
    """Get plan store from path or the default location."""
    if store_dir is None:
        store_dir = get_default_store_dir()
    return PlanStore(store_dir)
