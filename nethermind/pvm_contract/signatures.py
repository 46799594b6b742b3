import logging
from typing import Sequence

from eth_utils.abi import (
    event_signature_to_log_topic,
    function_signature_to_4byte_selector,
)

from nethermind.pvm_contract.exceptions import EmptySignatureComponent
from nethermind.pvm_contract.types.abi import AbiParam, SignedAbiItem

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("pvm_contract").getChild("signatures")


def build_signature(name: str, params: Sequence[AbiParam], item_kind: str = "function") -> str:
    """
    Builds canonical signature from a name and its ordered parameters.  Parameter types are joined without
    escaping, so types are expected to already be canonical.

    >>> from nethermind.pvm_contract.types.abi import AbiParam
    >>> build_signature("transfer", [AbiParam(name="to", type="address"), AbiParam(name="amount", type="uint256")])
    'transfer(address,uint256)'

    :param name: Name of function, event or error
    :param params: Ordered input parameters
    :param item_kind: Kind of item, used for error messages
    """
    if not name:
        logger.error(f"Attempted to build signature for {item_kind} without a name")
        raise EmptySignatureComponent(item_kind)

    return f"{name}({','.join(param.canonical_type for param in params)})"


def abi_to_signature(abi_item: SignedAbiItem) -> str:
    """
    Converts ABI function, event, or error to its canonical signature.

    >>> from nethermind.pvm_contract.types.abi import AbiFunction
    >>> abi_to_signature(AbiFunction(name="fibonacci", inputs=[{"name": "n", "type": "uint32"}]))
    'fibonacci(uint32)'
    """
    return build_signature(abi_item.name, abi_item.inputs, abi_item.type)


def signature_to_name(signature: str) -> str:
    """
    Removes types from signature

    >>> signature_to_name("transferFrom(address,address,uint256)")
    'transferFrom'
    """
    index = signature.find("(")
    if index != -1:
        return signature[:index]
    return signature


def function_selector(signature: str) -> bytes:
    """4 byte selector of a function signature.  First 4 bytes of keccak256(signature)"""
    return function_signature_to_4byte_selector(signature)


def error_selector(signature: str) -> bytes:
    """Errors are selected the same way as functions, with the first 4 bytes of keccak256(signature)"""
    return function_signature_to_4byte_selector(signature)


def event_topic(signature: str) -> bytes:
    """32 byte topic of an event signature.  Full keccak256(signature)"""
    return event_signature_to_log_topic(signature)


def format_bytes_as_hex(data: bytes) -> str:
    """
    Formats bytes as a comma separated list of Rust hex literals

    >>> format_bytes_as_hex(bytes.fromhex("a9059cbb"))
    '0xa9, 0x05, 0x9c, 0xbb'
    """
    return ", ".join(f"0x{byte:02x}" for byte in data)


def format_bytes32_multiline(data: bytes, indent: str = "    ") -> str:
    """Formats a 32 byte hash as Rust hex literals, 8 bytes per line"""
    return f",\n{indent}".join(format_bytes_as_hex(data[i : i + 8]) for i in range(0, len(data), 8))
