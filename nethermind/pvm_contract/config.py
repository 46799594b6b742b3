import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

# pylint: disable=invalid-name

BUILDER_VERSION = "0.1.0"
""" Version of cargo-pvm-contract-builder referenced by generated Cargo.toml files """

DEFAULT_TARGET_JSON_NAME = "riscv64emac-unknown-none-polkavm.json"

BUILDER_PATH_ENV = "CARGO_PVM_CONTRACT_BUILDER_PATH"
TARGET_JSON_ENV = "PVM_TARGET_JSON"
SOLC_ENV = "SOLC"


class UnsupportedTypePolicy(Enum):
    """What to do with function parameters that cannot be decoded from a single static word"""

    placeholder = "placeholder"
    """ Emit a placeholder decode step that must be completed by hand """

    error = "error"
    """ Raise UnsupportedParamType """


@dataclass(frozen=True)
class CompileConfig:
    """Options for :func:`nethermind.pvm_contract.compiler.compile_abi`"""

    unsupported_types: UnsupportedTypePolicy = UnsupportedTypePolicy.placeholder
    detect_collisions: bool = True


@dataclass(frozen=True)
class ScaffoldConfig:
    """
    Options for creating contract projects on disk.  Nothing in the compiler core reads the environment; the
    CLI resolves environment overrides with :meth:`from_env` and passes the result explicitly.
    """

    builder_path: Path | None = None
    """ Local checkout of cargo-pvm-contract-builder.  If None, the crates.io release is referenced """

    builder_version: str = BUILDER_VERSION

    target_json: Path | None = None
    """ PolkaVM target specification to copy into the project """

    solc_binary: str = "solc"

    @classmethod
    def from_env(cls) -> "ScaffoldConfig":
        """Reads overrides from CARGO_PVM_CONTRACT_BUILDER_PATH, PVM_TARGET_JSON and SOLC"""
        builder_path = os.environ.get(BUILDER_PATH_ENV, "").strip()
        target_json = os.environ.get(TARGET_JSON_ENV, "").strip()
        return cls(
            builder_path=Path(builder_path) if builder_path else None,
            target_json=Path(target_json) if target_json else None,
            solc_binary=os.environ.get(SOLC_ENV) or "solc",
        )
