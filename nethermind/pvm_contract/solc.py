import json
import logging
import subprocess
from typing import Any

from nethermind.pvm_contract.exceptions import SolcError
from nethermind.pvm_contract.metadata import parse_solc_output
from nethermind.pvm_contract.types.abi import ContractMetadata

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("pvm_contract").getChild("solc")


def build_standard_json_input(sol_content: str, sol_file_name: str) -> dict[str, Any]:
    """Standard JSON input requesting only the metadata of every contract in the source file"""
    return {
        "language": "Solidity",
        "sources": {sol_file_name: {"content": sol_content}},
        "settings": {"outputSelection": {"*": {"*": ["metadata"]}}},
    }


def extract_solc_metadata(
    sol_contents: bytes,
    sol_file_name: str,
    solc_binary: str = "solc",
) -> tuple[ContractMetadata, str]:
    """
    Compiles a Solidity source with ``solc --standard-json`` and returns the metadata of the first contract
    in the file.  The compiler is fed through stdin, and its whole output is read before parsing.

    :param sol_contents: Raw bytes of the .sol file
    :param sol_file_name: File name, used as the source key
    :param solc_binary: solc executable
    :return: (contract metadata, contract name)
    :raises SolcError: if solc cannot be spawned or exits with an error
    :raises MetadataParseError: if solc output cannot be parsed
    """
    try:
        sol_content = sol_contents.decode("utf-8")
    except UnicodeDecodeError as e:
        raise SolcError(f"Solidity file {sol_file_name} is not valid UTF-8") from e

    solc_input = json.dumps(build_standard_json_input(sol_content, sol_file_name))

    logger.debug(f"Extracting metadata from {sol_file_name} with {solc_binary}")
    try:
        result = subprocess.run(
            [solc_binary, "--standard-json"],
            input=solc_input.encode("utf-8"),
            capture_output=True,
            check=False,
        )
    except FileNotFoundError as e:
        raise SolcError(f"Failed to spawn {solc_binary}. Make sure solc is installed and in PATH.") from e

    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace")
        logger.error(f"solc exited with status {result.returncode}: {stderr}")
        raise SolcError(f"solc failed: {stderr}")

    logger.debug(f"solc stdout: {result.stdout.decode('utf-8', errors='replace')}")
    return parse_solc_output(result.stdout, sol_file_name)
