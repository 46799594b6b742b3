from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from nethermind.pvm_contract.types.dispatch import DispatchModel


@dataclass(frozen=True)
class CargoManifest:
    """Values for a generated contract Cargo.toml"""

    contract_name: str
    """ Crate name, in kebab-case """

    bin_source: str
    """ Name of the contract source file in src/, without extension.  Also used as the binary name """

    use_alloc: bool
    builder_version: str
    builder_path: Path | None = None


class ContractRenderer(Protocol):
    """
    Abstract Protocol for turning dispatch models into contract source text.  The compiler core never depends on
    a renderer, so alternative output languages or templates can be swapped in by the scaffolder.
    """

    def render_contract(self, model: DispatchModel, sol_file_name: str) -> str:
        """Render contract source for a dispatch model.  sol_file_name is referenced by alloc contracts"""
        raise NotImplementedError()

    def render_cargo_toml(self, manifest: CargoManifest) -> str:
        """Render the project manifest"""
        raise NotImplementedError()

    def render_build_rs(self) -> str:
        """Render the build script that links the contract to PolkaVM bytecode"""
        raise NotImplementedError()

    def render_blank_contract(self) -> str:
        """Render an empty contract with deploy and call entry points"""
        raise NotImplementedError()
