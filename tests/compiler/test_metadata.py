import json

import pytest

from nethermind.pvm_contract.exceptions import MetadataParseError
from nethermind.pvm_contract.metadata import (
    load_abi_document,
    parse_abi,
    parse_contract_metadata,
    parse_solc_output,
)
from nethermind.pvm_contract.types.abi import (
    AbiConstructor,
    AbiError,
    AbiEvent,
    AbiFallback,
    AbiFunction,
    AbiReceive,
)

from ..resources.ABI import FIBONACCI_ABI_JSON, MY_TOKEN_ABI_JSON, STATIC_TYPES_ABI_JSON


def test_parse_abi_item_kinds():
    abi = parse_abi(MY_TOKEN_ABI_JSON)

    assert [type(item) for item in abi] == [AbiEvent, AbiEvent, AbiError] + [AbiFunction] * 5
    assert abi[0].name == "Transfer"
    assert abi[0].inputs[0].indexed is True
    assert abi[0].inputs[2].indexed is False
    assert abi[3].state_mutability == "view"
    assert abi[5].inputs[1].type_name == "uint256"


def test_parse_abi_special_functions():
    abi = parse_abi(STATIC_TYPES_ABI_JSON)
    assert [type(item) for item in abi] == [AbiFunction, AbiConstructor, AbiReceive, AbiFallback]
    assert abi[0].inputs[6].name == ""


def test_parse_abi_accepts_dicts():
    abi = parse_abi(json.loads(FIBONACCI_ABI_JSON))
    assert abi[0].name == "fibonacci"
    assert abi[0].inputs[0].canonical_type == "uint32"


def test_parse_abi_rejects_invalid_json():
    with pytest.raises(MetadataParseError):
        parse_abi("[{")


def test_parse_abi_rejects_unknown_kind():
    with pytest.raises(MetadataParseError):
        parse_abi([{"type": "modifier", "name": "onlyOwner", "inputs": []}])


def test_parse_abi_rejects_param_without_type():
    with pytest.raises(MetadataParseError):
        parse_abi([{"type": "function", "name": "transfer", "inputs": [{"name": "to"}]}])


def test_parse_contract_metadata():
    metadata = parse_contract_metadata(json.dumps({"output": {"abi": json.loads(FIBONACCI_ABI_JSON)}}))
    assert len(metadata.abi) == 1

    with pytest.raises(MetadataParseError):
        parse_contract_metadata({"output": {}})


def test_load_abi_document_formats():
    raw_abi = json.loads(FIBONACCI_ABI_JSON)

    bare = load_abi_document(FIBONACCI_ABI_JSON)
    metadata = load_abi_document(json.dumps({"compiler": {}, "output": {"abi": raw_abi}}))
    artifact = load_abi_document({"contractName": "Fibonacci", "abi": raw_abi})

    assert bare == metadata == artifact

    with pytest.raises(MetadataParseError):
        load_abi_document({"bytecode": "0x00"})


def test_parse_solc_output(solc_output):
    stdout = solc_output(MY_TOKEN_ABI_JSON, "MyToken.sol", "MyToken")
    metadata, contract_name = parse_solc_output(stdout, "MyToken.sol")

    assert contract_name == "MyToken"
    assert len(metadata.abi) == 8


def test_parse_solc_output_without_contract():
    stdout = json.dumps(
        {
            "errors": [
                {
                    "severity": "error",
                    "message": "Expected ';' but got '}'",
                    "formattedMessage": "ParserError: Expected ';' but got '}'",
                }
            ]
        }
    )

    with pytest.raises(MetadataParseError) as exc:
        parse_solc_output(stdout, "Broken.sol")

    assert "Broken.sol" in str(exc.value)
    assert "ParserError" in str(exc.value)


def test_parse_solc_output_wrong_file(solc_output):
    stdout = solc_output(FIBONACCI_ABI_JSON, "Fibonacci.sol", "Fibonacci")

    with pytest.raises(MetadataParseError):
        parse_solc_output(stdout, "MyToken.sol")
