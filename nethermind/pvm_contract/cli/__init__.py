import click

from nethermind.pvm_contract.cli.abi import generate_command, selectors_command
from nethermind.pvm_contract.cli.init import init_command


@click.group()
def pvm_contract_cli():
    """Scaffold PolkaVM contract projects from Solidity interfaces"""


# Adding Commands
pvm_contract_cli.add_command(init_command, name="init")
pvm_contract_cli.add_command(generate_command, name="generate")
pvm_contract_cli.add_command(selectors_command, name="selectors")
