import logging

import click
from rich.console import Console
from rich.table import Table

from nethermind.pvm_contract.cli.utils import (
    cli_logger_config,
    collision_check_option,
    compile_config,
    group_options,
    memory_model_option,
    strict_types_option,
    verbose_option,
)
from nethermind.pvm_contract.types.dispatch import DispatchModel

# isort: skip_file
# pylint: disable=too-many-arguments,import-outside-toplevel

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("pvm_contract").getChild("cli")


def dispatch_table(model: DispatchModel) -> Table:
    """
    Returns a rich table with the signatures, selectors and generated identifiers of a dispatch model.  Used for
    printing ABI information in the CLI
    """
    table = Table(title=f"[bold magenta]{model.contract_name} Dispatch Table", min_width=80, show_lines=True)
    table.add_column("Kind")
    table.add_column("Signature")
    table.add_column("Selector / Topic")
    table.add_column("Identifier")
    table.add_column("Min Length")

    for function in model.functions:
        min_len = str(function.decode_plan.min_payload_len) if function.decode_plan else "-"
        table.add_row(
            "function", function.signature, f"0x{function.selector.hex()}", function.selector_const, min_len
        )
    for event in model.events:
        table.add_row("event", event.signature, f"0x{event.topic.hex()}", event.const_name, "-")
    for error in model.errors:
        table.add_row("error", error.signature, f"0x{error.selector.hex()}", error.const_name, "-")

    return table


@click.command("generate")
@click.argument("abi_json", type=click.File("r"))
@click.option("--contract-name", required=True, help="Contract name, used for generated identifiers")
@click.option("--sol-file-name", default=None, help="Solidity file bound by alloc contracts.  Defaults to NAME.sol")
@click.option("--output", "-o", type=click.File("w"), default="-", help="Output file.  Defaults to stdout")
@group_options(memory_model_option, strict_types_option, collision_check_option, verbose_option)
def generate_command(
    abi_json, contract_name, sol_file_name, output, memory_model, strict_types, collision_check, verbose
):
    """
    Generate contract source from an ABI, or from solc contract metadata, without invoking solc
    """
    from nethermind.pvm_contract.compiler import compile_abi
    from nethermind.pvm_contract.exceptions import CompileError, InvalidIdentifier
    from nethermind.pvm_contract.metadata import load_abi_document
    from nethermind.pvm_contract.rendering import RustRenderer
    from nethermind.pvm_contract.types.dispatch import MemoryModel

    cli_logger_config(root_logger, verbose)
    root_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    try:
        abi = load_abi_document(abi_json.read())
        model = compile_abi(
            abi,
            contract_name,
            MemoryModel(memory_model or MemoryModel.no_alloc.value),
            compile_config(strict_types, collision_check),
        )
    except (CompileError, InvalidIdentifier) as e:
        logger.error(e)
        raise click.ClickException(str(e)) from e

    output.write(RustRenderer().render_contract(model, sol_file_name or f"{contract_name}.sol"))


@click.command("selectors")
@click.argument("abi_json", type=click.File("r"))
@click.option("--contract-name", default="Contract", show_default=True)
@group_options(verbose_option)
def selectors_command(abi_json, contract_name, verbose):
    """Print the signatures, selectors and topics of an ABI"""
    from nethermind.pvm_contract.compiler import compile_abi
    from nethermind.pvm_contract.config import CompileConfig
    from nethermind.pvm_contract.exceptions import CompileError
    from nethermind.pvm_contract.metadata import load_abi_document
    from nethermind.pvm_contract.types.dispatch import MemoryModel

    cli_logger_config(root_logger, verbose)
    root_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    try:
        abi = load_abi_document(abi_json.read())
        # Collisions are logged as warnings rather than raised
        model = compile_abi(abi, contract_name, MemoryModel.no_alloc, CompileConfig(detect_collisions=False))
    except CompileError as e:
        logger.error(e)
        raise click.ClickException(str(e)) from e

    Console().print(dispatch_table(model))
