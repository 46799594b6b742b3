"""
Creates PolkaVM contract projects on disk.

A project is laid out as::

    <contract-name>/
        .cargo/config.toml
        .gitignore
        rust-toolchain.toml
        <target>.json
        <Contract>.sol
        build.rs
        Cargo.toml
        src/<contract>.rs

The compiler core never touches the filesystem; this module wires solc, :func:`compile_abi` and a renderer
together and writes the results.
"""
import logging
import shutil
from enum import Enum
from importlib import resources
from pathlib import Path

from nethermind.pvm_contract.compiler import compile_abi
from nethermind.pvm_contract.config import (
    DEFAULT_TARGET_JSON_NAME,
    CompileConfig,
    ScaffoldConfig,
)
from nethermind.pvm_contract.exceptions import ScaffoldError
from nethermind.pvm_contract.naming import to_kebab_case
from nethermind.pvm_contract.rendering import CargoManifest, ContractRenderer, RustRenderer
from nethermind.pvm_contract.solc import extract_solc_metadata
from nethermind.pvm_contract.types.dispatch import MemoryModel

# pylint: disable=invalid-name,too-many-arguments

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("pvm_contract").getChild("scaffold")

GITIGNORE = "/target\n*.polkavm\n"
RUST_TOOLCHAIN = '[toolchain]\nchannel = "nightly"\n'


class ExampleChoice(Enum):
    """Example contracts bundled with the package"""

    my_token = "MyToken"
    fibonacci = "Fibonacci"

    @property
    def sol_filename(self) -> str:
        return f"{self.value}.sol"

    @property
    def default_name(self) -> str:
        return self.value

    def describe(self) -> str:
        match self:
            case ExampleChoice.my_token:
                return "MyToken (ERC20-like token)"
            case ExampleChoice.fibonacci:
                return "Fibonacci (pure computation)"
            case _:
                raise NotImplementedError(f"Unknown example {self}")

    def read_source(self) -> bytes:
        return (resources.files("nethermind.pvm_contract") / "templates" / "examples" / self.sol_filename).read_bytes()


def cargo_config_toml(target_json_name: str) -> str:
    return (
        f'[build]\ntarget = "{target_json_name}"\n\n'
        f'[unstable]\nbuild-std = ["core", "alloc"]\n\n'
        f'[env]\nRUSTC_BOOTSTRAP = "1"\n'
    )


def _create_project_dir(root: Path, contract_name: str) -> Path:
    target_dir = root / contract_name
    if target_dir.exists():
        raise ScaffoldError(f"Directory already exists: {target_dir}")

    try:
        target_dir.mkdir(parents=True)
    except OSError as e:
        raise ScaffoldError(f"Failed to create directory: {target_dir}") from e
    return target_dir


def _check_config(config: ScaffoldConfig):
    """Validates configured paths before anything is written, so a bad config leaves no partial project"""
    if config.builder_path is not None and not config.builder_path.exists():
        raise ScaffoldError(f"Builder path does not exist: {config.builder_path}")
    if config.target_json is not None and not config.target_json.is_file():
        raise ScaffoldError(f"Target JSON not found: {config.target_json}")


def _install_target_json(target_dir: Path, config: ScaffoldConfig) -> str:
    """Copies the PolkaVM target specification into the project, and returns its file name"""
    if config.target_json is None:
        logger.warning(
            f"No target JSON configured.  Copy {DEFAULT_TARGET_JSON_NAME} from polkavm-linker into {target_dir} "
            f"before building"
        )
        return DEFAULT_TARGET_JSON_NAME

    shutil.copy(config.target_json, target_dir / config.target_json.name)
    return config.target_json.name


def _write_project_files(
    target_dir: Path,
    bin_source: str,
    contract_source: str,
    use_alloc: bool,
    config: ScaffoldConfig,
    renderer: ContractRenderer,
):
    target_json_name = _install_target_json(target_dir, config)

    (target_dir / ".cargo").mkdir()
    (target_dir / ".cargo" / "config.toml").write_text(cargo_config_toml(target_json_name))
    (target_dir / ".gitignore").write_text(GITIGNORE)
    (target_dir / "rust-toolchain.toml").write_text(RUST_TOOLCHAIN)

    (target_dir / "src").mkdir()
    (target_dir / "src" / f"{bin_source}.rs").write_text(contract_source)
    (target_dir / "build.rs").write_text(renderer.render_build_rs())

    manifest = CargoManifest(
        contract_name=target_dir.name,
        bin_source=bin_source,
        use_alloc=use_alloc,
        builder_version=config.builder_version,
        builder_path=config.builder_path,
    )
    (target_dir / "Cargo.toml").write_text(renderer.render_cargo_toml(manifest))


def init_blank_contract(
    contract_name: str,
    root: Path | None = None,
    config: ScaffoldConfig | None = None,
    renderer: ContractRenderer | None = None,
) -> Path:
    """
    Creates an empty contract project with deploy and call entry points.

    :param contract_name: Project name.  Converted to kebab-case for the directory and crate name
    :param root: Directory to create the project in.  Defaults to the current working directory
    :return: Path of the created project
    """
    config = config or ScaffoldConfig()
    renderer = renderer or RustRenderer()
    _check_config(config)

    project_name = to_kebab_case(contract_name)
    target_dir = _create_project_dir(root or Path.cwd(), project_name)

    _write_project_files(target_dir, project_name, renderer.render_blank_contract(), False, config, renderer)
    logger.info(f"Successfully initialized blank contract project: {target_dir}")
    return target_dir


def init_from_sources(
    sol_contents: bytes,
    sol_file_name: str,
    contract_name: str,
    memory_model: MemoryModel,
    root: Path | None = None,
    config: ScaffoldConfig | None = None,
    compile_config: CompileConfig | None = None,
    renderer: ContractRenderer | None = None,
) -> Path:
    """
    Creates a contract project from Solidity source.  The ABI of the first contract in the source is extracted
    with solc, and compiled into dispatch code for the memory model.

    :return: Path of the created project
    """
    config = config or ScaffoldConfig()
    renderer = renderer or RustRenderer()
    _check_config(config)

    # Extract metadata before creating anything, so solc failures leave no partial project
    metadata, actual_contract_name = extract_solc_metadata(sol_contents, sol_file_name, config.solc_binary)
    model = compile_abi(metadata.abi, actual_contract_name, memory_model, compile_config)
    contract_source = renderer.render_contract(model, sol_file_name)

    target_dir = _create_project_dir(root or Path.cwd(), to_kebab_case(contract_name))
    (target_dir / sol_file_name).write_bytes(sol_contents)

    _write_project_files(
        target_dir,
        to_kebab_case(actual_contract_name),
        contract_source,
        memory_model.uses_allocator,
        config,
        renderer,
    )
    logger.info(f"Successfully initialized contract project from {sol_file_name}: {target_dir}")
    return target_dir


def init_from_solidity_file(
    sol_file: Path | str,
    contract_name: str,
    memory_model: MemoryModel,
    root: Path | None = None,
    config: ScaffoldConfig | None = None,
    compile_config: CompileConfig | None = None,
    renderer: ContractRenderer | None = None,
) -> Path:
    """Creates a contract project from a Solidity file on disk"""
    sol_path = Path(sol_file)
    if not sol_path.is_file():
        raise ScaffoldError(f"Solidity file not found: {sol_file}")

    return init_from_sources(
        sol_path.read_bytes(),
        sol_path.name,
        contract_name,
        memory_model,
        root=root,
        config=config,
        compile_config=compile_config,
        renderer=renderer,
    )


def init_from_example(
    example: ExampleChoice,
    contract_name: str,
    memory_model: MemoryModel,
    root: Path | None = None,
    config: ScaffoldConfig | None = None,
    compile_config: CompileConfig | None = None,
    renderer: ContractRenderer | None = None,
) -> Path:
    """Creates a contract project from one of the bundled examples"""
    logger.debug(f"Initializing from example: {example.sol_filename} with memory model: {memory_model.value}")
    return init_from_sources(
        example.read_source(),
        example.sol_filename,
        contract_name,
        memory_model,
        root=root,
        config=config,
        compile_config=compile_config,
        renderer=renderer,
    )
