import json
import logging
from typing import Any

from eth_typing import ABI
from pydantic import TypeAdapter, ValidationError

from nethermind.pvm_contract.exceptions import MetadataParseError
from nethermind.pvm_contract.types.abi import (
    AbiItem,
    ContractMetadata,
    SolcOutput,
)

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("pvm_contract").getChild("metadata")

_abi_adapter = TypeAdapter(tuple[AbiItem, ...])


def _load_json(data: str | bytes | Any, description: str) -> Any:
    if not isinstance(data, (str, bytes, bytearray)):
        return data
    try:
        return json.loads(data)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse {description} JSON: {e}")
        raise MetadataParseError(f"{description} is not valid JSON: {e}") from e


def parse_abi(abi_json: str | bytes | ABI) -> tuple[AbiItem, ...]:
    """
    Parses a JSON ABI array into typed ABI items.

    :param abi_json: ABI as JSON text, or as a list of ABI dicts
    :raises MetadataParseError: if the ABI is malformed
    """
    raw_abi = _load_json(abi_json, "ABI")
    try:
        return _abi_adapter.validate_python(raw_abi)
    except ValidationError as e:
        logger.error(f"Invalid ABI: {e}")
        raise MetadataParseError(f"Invalid ABI: {e}") from e


def parse_contract_metadata(metadata: str | bytes | dict[str, Any]) -> ContractMetadata:
    """
    Parses the contract metadata document produced by solc.  Only ``output.abi`` is read.

    :raises MetadataParseError: if the document is malformed or has no ABI
    """
    raw_metadata = _load_json(metadata, "Contract metadata")
    try:
        return ContractMetadata.model_validate(raw_metadata)
    except ValidationError as e:
        logger.error(f"Invalid contract metadata: {e}")
        raise MetadataParseError(f"Invalid contract metadata: {e}") from e


def load_abi_document(document: str | bytes | Any) -> tuple[AbiItem, ...]:
    """
    Loads ABI items from either a bare ABI array, a contract metadata document (``{"output": {"abi": [...]}}``),
    or a build artifact with a top level ``abi`` key.
    """
    raw_document = _load_json(document, "ABI document")
    match raw_document:
        case list():
            return parse_abi(raw_document)
        case {"output": {"abi": _}}:
            return parse_contract_metadata(raw_document).abi
        case {"abi": list() as abi}:
            return parse_abi(abi)
        case _:
            raise MetadataParseError("Document is neither an ABI array, nor a metadata document containing an ABI")


def parse_solc_output(stdout: str | bytes, sol_file_name: str) -> tuple[ContractMetadata, str]:
    """
    Extracts the metadata of the first contract compiled from ``sol_file_name``.

    :param stdout: Standard JSON output of solc
    :param sol_file_name: Source file name used as the key in the standard JSON input
    :return: (contract metadata, contract name)
    """
    raw_output = _load_json(stdout, "solc output")
    try:
        solc_output = SolcOutput.model_validate(raw_output)
    except ValidationError as e:
        logger.error(f"Invalid solc output: {e}")
        raise MetadataParseError(f"Failed to parse solc output: {e}") from e

    contracts_for_file = solc_output.contracts.get(sol_file_name)
    if not contracts_for_file:
        errors = raw_output.get("errors", []) if isinstance(raw_output, dict) else []
        messages = "; ".join(error.get("formattedMessage", error.get("message", "")) for error in errors)
        raise MetadataParseError(f"No contract found in solc output for {sol_file_name}. {messages}".strip())

    contract_name, contract_info = next(iter(contracts_for_file.items()))
    logger.debug(f"Found contract {contract_name} in {sol_file_name}")
    return parse_contract_metadata(contract_info.metadata), contract_name
