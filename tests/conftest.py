import json
import logging
import random
import subprocess

import pytest
from eth_utils import to_checksum_address

from nethermind.pvm_contract.metadata import parse_abi

from .resources.ABI import FIBONACCI_ABI_JSON, MY_TOKEN_ABI_JSON, STATIC_TYPES_ABI_JSON


@pytest.fixture(name="random_address")
def fixture_random_address():
    def _generate_random_address():
        return to_checksum_address(random.randbytes(20).hex())

    return _generate_random_address


@pytest.fixture(name="my_token_abi")
def fixture_my_token_abi():
    return parse_abi(MY_TOKEN_ABI_JSON)


@pytest.fixture(name="fibonacci_abi")
def fixture_fibonacci_abi():
    return parse_abi(FIBONACCI_ABI_JSON)


@pytest.fixture(name="static_types_abi")
def fixture_static_types_abi():
    return parse_abi(STATIC_TYPES_ABI_JSON)


@pytest.fixture(name="solc_output")
def fixture_solc_output():
    """Builds solc standard-json output wrapping an ABI, the way solc embeds metadata as a JSON string"""

    def _build_solc_output(abi_json: str, sol_file_name: str, contract_name: str) -> bytes:
        metadata = {
            "compiler": {"version": "0.8.28"},
            "language": "Solidity",
            "output": {"abi": json.loads(abi_json), "devdoc": {}, "userdoc": {}},
            "version": 1,
        }
        output = {
            "contracts": {sol_file_name: {contract_name: {"metadata": json.dumps(metadata)}}},
            "sources": {sol_file_name: {"id": 0}},
        }
        return json.dumps(output).encode("utf-8")

    return _build_solc_output


@pytest.fixture(name="fake_solc")
def fixture_fake_solc(monkeypatch, solc_output):
    """Replaces the solc process with one that returns the given ABI for every source file"""

    def _install(abi_json: str, contract_name: str, returncode: int = 0, stderr: bytes = b""):
        calls = []

        def _run(args, input=None, capture_output=False, check=False):  # pylint: disable=redefined-builtin
            solc_input = json.loads(input)
            calls.append((args, solc_input))
            sol_file_name = next(iter(solc_input["sources"]))
            stdout = solc_output(abi_json, sol_file_name, contract_name) if returncode == 0 else b""
            return subprocess.CompletedProcess(args, returncode, stdout=stdout, stderr=stderr)

        monkeypatch.setattr("nethermind.pvm_contract.solc.subprocess.run", _run)
        return calls

    return _install


@pytest.fixture(scope="function")
def debug_logger():
    logger = logging.getLogger("nethermind")
    logger.setLevel(logging.DEBUG)
    return logger
