from nethermind.pvm_contract.compiler import compile_abi
from nethermind.pvm_contract.config import CompileConfig, ScaffoldConfig, UnsupportedTypePolicy
from nethermind.pvm_contract.decoding import CalldataDispatcher, build_decode_plan
from nethermind.pvm_contract.metadata import load_abi_document, parse_abi, parse_contract_metadata
from nethermind.pvm_contract.rendering import ContractRenderer, RustRenderer
from nethermind.pvm_contract.types.dispatch import DispatchModel, MemoryModel

__all__ = [
    "CalldataDispatcher",
    "CompileConfig",
    "ContractRenderer",
    "DispatchModel",
    "MemoryModel",
    "RustRenderer",
    "ScaffoldConfig",
    "UnsupportedTypePolicy",
    "build_decode_plan",
    "compile_abi",
    "load_abi_document",
    "parse_abi",
    "parse_contract_metadata",
]
