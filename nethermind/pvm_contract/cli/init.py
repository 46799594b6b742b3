import logging
from pathlib import Path

import click

from nethermind.pvm_contract.cli.utils import (
    builder_path_option,
    cli_logger_config,
    collision_check_option,
    compile_config,
    group_options,
    memory_model_option,
    scaffold_config,
    solc_option,
    strict_types_option,
    target_json_option,
    verbose_option,
)

# isort: skip_file
# pylint: disable=too-many-arguments,import-outside-toplevel,too-many-locals

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("pvm_contract").getChild("cli")

INIT_TYPES = {
    "solidity-file": "From a Solidity interface file (.sol)",
    "example": "From an example contract",
    "blank": "Blank (empty contract)",
}


def _prompt_memory_model(memory_model: str | None):
    from nethermind.pvm_contract.types.dispatch import MemoryModel

    if memory_model is None:
        for model in MemoryModel:
            click.echo(f"  {model.value}: {model.describe()}")
        memory_model = click.prompt(
            "Which memory model do you want to use?",
            type=click.Choice([model.value for model in MemoryModel]),
        )
    return MemoryModel(memory_model)


def _prompt_contract_name(name: str | None, default: str | None = None) -> str:
    if name is None:
        name = click.prompt("What is your contract name?", default=default)
    if not name:
        raise click.ClickException("Contract name cannot be empty")

    return name


@click.command("init")
@click.option("--init-type", type=click.Choice(list(INIT_TYPES.keys())), default=None)
@click.option("--example", type=click.Choice(["MyToken", "Fibonacci"]), default=None)
@click.option("--name", "contract_name", default=None, help="Project name.  Used for the project directory")
@click.option("--sol-file", type=click.Path(dir_okay=False), default=None, help="Path to a Solidity interface file")
@group_options(
    memory_model_option,
    strict_types_option,
    collision_check_option,
    builder_path_option,
    target_json_option,
    solc_option,
    verbose_option,
)
def init_command(
    init_type,
    example,
    contract_name,
    sol_file,
    memory_model,
    strict_types,
    collision_check,
    builder_path,
    target_json,
    solc_binary,
    verbose,
):
    """Initialize a PolkaVM contract project.  Prompts for any value not passed as an option"""
    from nethermind.pvm_contract.exceptions import CompileError, InvalidIdentifier, ScaffoldError, SolcError
    from nethermind.pvm_contract.scaffold import (
        ExampleChoice,
        init_blank_contract,
        init_from_example,
        init_from_solidity_file,
    )

    console = cli_logger_config(root_logger, verbose)

    if init_type is None:
        for key, description in INIT_TYPES.items():
            click.echo(f"  {key}: {description}")
        init_type = click.prompt(
            "How do you want to initialize the project?", type=click.Choice(list(INIT_TYPES.keys()))
        )

    config = scaffold_config(builder_path, target_json, solc_binary)
    compile_opts = compile_config(strict_types, collision_check)

    try:
        match init_type:
            case "blank":
                contract_name = _prompt_contract_name(contract_name)
                logger.debug(f"Initializing blank contract: {contract_name}")
                project_dir = init_blank_contract(contract_name, config=config)

            case "example":
                if example is None:
                    for choice in ExampleChoice:
                        click.echo(f"  {choice.value}: {choice.describe()}")
                    example = click.prompt(
                        "Select an example:", type=click.Choice([choice.value for choice in ExampleChoice])
                    )
                example_choice = ExampleChoice(example)
                model = _prompt_memory_model(memory_model)
                contract_name = _prompt_contract_name(contract_name, example_choice.default_name)
                project_dir = init_from_example(
                    example_choice, contract_name, model, config=config, compile_config=compile_opts
                )

            case "solidity-file":
                if sol_file is None:
                    sol_file = click.prompt("Enter path to your .sol file")
                sol_path = Path(sol_file)
                if not sol_path.is_file():
                    raise click.ClickException(f"Solidity file not found: {sol_file}")

                model = _prompt_memory_model(memory_model)
                contract_name = _prompt_contract_name(contract_name, sol_path.stem or "contract")
                logger.debug(f"Initializing from Solidity file: {sol_file} with memory model: {model.value}")
                project_dir = init_from_solidity_file(
                    sol_path, contract_name, model, config=config, compile_config=compile_opts
                )

            case _:
                raise click.ClickException(f"Invalid init type: {init_type}")

    except (CompileError, InvalidIdentifier, ScaffoldError, SolcError) as e:
        logger.error(e)
        raise click.ClickException(str(e)) from e

    console.print(f"[green]Successfully initialized contract project: {project_dir}")
    console.print("\nNext steps:")
    console.print(f"  cd {project_dir.name}")
    console.print("  cargo build")
