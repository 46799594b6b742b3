import logging
import os
from logging import Logger
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from nethermind.pvm_contract.config import (
    BUILDER_PATH_ENV,
    SOLC_ENV,
    TARGET_JSON_ENV,
    CompileConfig,
    ScaffoldConfig,
    UnsupportedTypePolicy,
)
from nethermind.pvm_contract.types.dispatch import MemoryModel

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("pvm_contract").getChild("cli")


def cli_logger_config(instrument_logger: Logger, verbose: bool = False) -> Console:
    rich_console = Console(stderr=True)
    instrument_logger.handlers.clear()

    instrument_logger.addHandler(RichHandler(show_path=False, console=rich_console))
    instrument_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return rich_console


def group_options(*options):
    """Decorator to group multiple click options together"""

    def wrapper(function):
        for option in reversed(options):
            function = option(function)
        return function

    return wrapper


def scaffold_config(builder_path: str | None, target_json: str | None, solc_binary: str | None) -> ScaffoldConfig:
    """Builds ScaffoldConfig from CLI options.  Blank values are treated as unset"""
    builder_path = (builder_path or "").strip()
    target_json = (target_json or "").strip()
    return ScaffoldConfig(
        builder_path=Path(builder_path) if builder_path else None,
        target_json=Path(target_json) if target_json else None,
        solc_binary=solc_binary or "solc",
    )


def compile_config(strict_types: bool, collision_check: bool) -> CompileConfig:
    return CompileConfig(
        unsupported_types=UnsupportedTypePolicy.error if strict_types else UnsupportedTypePolicy.placeholder,
        detect_collisions=collision_check,
    )


# -------------------------------------------------------
#    Toolchain Paths & Overrides
# -------------------------------------------------------
builder_path_option = click.option(
    "--builder-path",
    "builder_path",
    default=os.environ.get(BUILDER_PATH_ENV),
    help="Local cargo-pvm-contract-builder checkout referenced by Cargo.toml.  If not provided, will use the "
    f"{BUILDER_PATH_ENV} environment variable, and fall back to the published crate",
)
target_json_option = click.option(
    "--target-json",
    "target_json",
    default=os.environ.get(TARGET_JSON_ENV),
    help=f"PolkaVM target specification to copy into the project.  If not provided, will use the {TARGET_JSON_ENV} "
    "environment variable",
)
solc_option = click.option(
    "--solc",
    "solc_binary",
    default=os.environ.get(SOLC_ENV, "solc"),
    show_default=True,
    help=f"Solidity compiler executable.  If not provided, will use the {SOLC_ENV} environment variable",
)

# -------------------------------------------------------
#    Code Generation Parameters
# -------------------------------------------------------
memory_model_option = click.option(
    "--memory-model",
    "memory_model",
    type=click.Choice([model.value for model in MemoryModel]),
    default=None,
    help="alloc-with-alloy decodes calls with alloy (easier API, larger binary).  no-alloc decodes fixed width "
    "arguments inline (manual encoding, smaller binary)",
)
strict_types_option = click.option(
    "--strict-types",
    is_flag=True,
    default=False,
    help="Fail on parameters that cannot be decoded without an allocator, instead of generating placeholders",
)
collision_check_option = click.option(
    "--collision-check/--no-collision-check",
    default=True,
    show_default=True,
    help="Fail when two ABI names produce the same identifier, or two functions share a selector",
)
verbose_option = click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
