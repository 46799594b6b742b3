import logging

import pytest

from nethermind.pvm_contract.compiler import compile_abi
from nethermind.pvm_contract.config import CompileConfig, UnsupportedTypePolicy
from nethermind.pvm_contract.exceptions import (
    CompileError,
    IdentifierCollision,
    SelectorCollision,
    UnsupportedParamType,
)
from nethermind.pvm_contract.metadata import parse_abi
from nethermind.pvm_contract.types.dispatch import MemoryModel, UnsignedIntDecode

OVERLOADED_ABI = [
    {
        "type": "function",
        "name": "transfer",
        "inputs": [{"name": "to", "type": "address"}, {"name": "value", "type": "uint64"}],
    },
    {
        "type": "function",
        "name": "transfer",
        "inputs": [
            {"name": "to", "type": "address"},
            {"name": "value", "type": "uint64"},
            {"name": "data", "type": "bytes"},
        ],
    },
]

COLLIDING_SELECTOR_ABI = [
    {"type": "function", "name": "burn", "inputs": [{"name": "amount", "type": "uint256"}]},
    {"type": "function", "name": "collate_propagate_storage", "inputs": [{"name": "", "type": "bytes16"}]},
]


def test_my_token_no_alloc(my_token_abi):
    model = compile_abi(my_token_abi, "MyToken", MemoryModel.no_alloc)

    assert model.contract_name == "MyToken"
    assert model.memory_model is MemoryModel.no_alloc
    assert [f.name for f in model.functions] == ["totalSupply", "balanceOf", "transfer", "transferFrom", "mint"]
    assert [f.selector.hex() for f in model.functions[:4]] == ["18160ddd", "70a08231", "a9059cbb", "23b872dd"]
    assert model.functions[4].signature == "mint(address,uint128)"
    assert [f.selector_const for f in model.functions] == [
        "TOTAL_SUPPLY_SELECTOR",
        "BALANCE_OF_SELECTOR",
        "TRANSFER_SELECTOR",
        "TRANSFER_FROM_SELECTOR",
        "MINT_SELECTOR",
    ]
    assert [f.handler_name for f in model.functions] == [
        "total_supply",
        "balance_of",
        "transfer",
        "transfer_from",
        "mint",
    ]

    for function in model.functions:
        assert function.decode_plan is not None
        assert function.call_type is None


def test_my_token_decode_plans(my_token_abi):
    model = compile_abi(my_token_abi, "MyToken", MemoryModel.no_alloc)

    transfer = model.get_function(bytes.fromhex("a9059cbb"))
    assert transfer.signature == "transfer(address,uint256)"
    assert transfer.input_types == ("address", "uint256")
    assert transfer.input_names == ("to", "value")
    assert transfer.decode_plan.min_payload_len == 68
    assert [step.byte_range for step in transfer.decode_plan.steps] == [(4, 36), None]

    mint = model.functions[-1]
    assert mint.decode_plan.steps[1].strategy == UnsignedIntDecode(128)
    assert mint.decode_plan.steps[1].byte_range == (36, 68)

    assert model.functions[0].decode_plan.min_payload_len == 4
    assert model.call_data_buffer_len == 256


def test_events_and_errors(my_token_abi):
    model = compile_abi(my_token_abi, "MyToken", MemoryModel.no_alloc)

    assert [e.const_name for e in model.events] == ["TRANSFER_EVENT_SIGNATURE", "APPROVAL_EVENT_SIGNATURE"]
    assert model.events[0].signature == "Transfer(address,address,uint256)"
    assert model.events[0].topic.hex() == "ddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"
    assert model.events[1].topic.hex() == "8c5be1e5ebec7d5bd14f71427d1e84f3dd0314c0f7b2291e5b200ac8c7c3b925"

    assert len(model.errors) == 1
    assert model.errors[0].const_name == "INSUFFICIENT_BALANCE_ERROR"
    assert model.errors[0].signature == "InsufficientBalance(address,uint256,uint256)"
    assert len(model.errors[0].selector) == 4


def test_memory_models_share_selectors(my_token_abi):
    no_alloc = compile_abi(my_token_abi, "MyToken", MemoryModel.no_alloc)
    alloc = compile_abi(my_token_abi, "MyToken", MemoryModel.alloc_with_alloy)

    assert [f.selector for f in no_alloc.functions] == [f.selector for f in alloc.functions]
    assert [f.signature for f in no_alloc.functions] == [f.signature for f in alloc.functions]
    assert no_alloc.events == alloc.events
    assert no_alloc.errors == alloc.errors


def test_alloc_call_types(my_token_abi):
    model = compile_abi(my_token_abi, "MyToken", MemoryModel.alloc_with_alloy)

    assert [f.call_type for f in model.functions] == [
        "MyToken::totalSupplyCall",
        "MyToken::balanceOfCall",
        "MyToken::transferCall",
        "MyToken::transferFromCall",
        "MyToken::mintCall",
    ]
    for function in model.functions:
        assert function.decode_plan is None


def test_unrelated_items_are_skipped(static_types_abi):
    model = compile_abi(static_types_abi, "Config", MemoryModel.no_alloc)

    assert len(model.functions) == 1
    assert model.events == ()
    assert model.errors == ()

    configure = model.functions[0]
    assert configure.signature == "configure(address,uint8,uint24,bool,bytes32,string,uint64)"
    assert [step.param_name for step in configure.decode_plan.steps] == [
        "owner",
        "decimals",
        "fee",
        "is_active",
        "salt",
        "label",
        "param_6",
    ]
    assert [step.param_name for step in configure.decode_plan.unsupported_steps] == ["label"]
    assert configure.decode_plan.min_payload_len == 4 + 7 * 32


def test_overloaded_functions():
    abi = parse_abi(OVERLOADED_ABI)
    model = compile_abi(abi, "Token", MemoryModel.no_alloc)

    assert [f.signature for f in model.functions] == ["transfer(address,uint64)", "transfer(address,uint64,bytes)"]
    assert [f.selector_const for f in model.functions] == ["TRANSFER_SELECTOR", "TRANSFER_1_SELECTOR"]
    assert [f.handler_name for f in model.functions] == ["transfer", "transfer_1"]

    alloc_model = compile_abi(abi, "Token", MemoryModel.alloc_with_alloy)
    assert [f.call_type for f in alloc_model.functions] == ["Token::transfer_0Call", "Token::transfer_1Call"]


def test_strict_type_policy(my_token_abi):
    strict = CompileConfig(unsupported_types=UnsupportedTypePolicy.error)

    with pytest.raises(UnsupportedParamType) as exc:
        compile_abi(my_token_abi, "MyToken", MemoryModel.no_alloc, strict)

    assert exc.value.function_name == "transfer"
    assert exc.value.param_name == "value"
    assert exc.value.type_name == "uint256"

    # alloy decodes every type, so the policy only applies without an allocator
    model = compile_abi(my_token_abi, "MyToken", MemoryModel.alloc_with_alloy, strict)
    assert len(model.functions) == 5


def test_placeholder_policy_warns(my_token_abi, caplog):
    with caplog.at_level(logging.WARNING, logger="nethermind"):
        compile_abi(my_token_abi, "MyToken", MemoryModel.no_alloc)

    assert "value of transfer(address,uint256) has type uint256" in caplog.text


def test_identifier_collision():
    abi = parse_abi(
        [
            {"type": "function", "name": "balanceOf", "inputs": [{"name": "owner", "type": "address"}]},
            {"type": "function", "name": "balance_of", "inputs": [{"name": "owner", "type": "address"}]},
        ]
    )

    with pytest.raises(IdentifierCollision) as exc:
        compile_abi(abi, "Token", MemoryModel.no_alloc)

    assert exc.value.identifier == "BALANCE_OF_SELECTOR"
    assert "balanceOf(address)" in exc.value.first_source
    assert "balance_of(address)" in exc.value.second_source


def test_parameter_identifier_collision():
    abi = parse_abi(
        [
            {
                "type": "function",
                "name": "configure",
                "inputs": [{"name": "feeRate", "type": "uint8"}, {"name": "fee_rate", "type": "uint8"}],
            }
        ]
    )

    with pytest.raises(IdentifierCollision):
        compile_abi(abi, "Token", MemoryModel.no_alloc)

    # Parameters are never named in alloc contracts
    compile_abi(abi, "Token", MemoryModel.alloc_with_alloy)


def test_event_and_function_namespaces_are_distinct():
    abi = parse_abi(
        [
            {"type": "function", "name": "transfer", "inputs": [{"name": "to", "type": "address"}]},
            {"type": "event", "name": "Transfer", "inputs": [{"name": "to", "type": "address", "indexed": True}]},
            {"type": "error", "name": "Transfer", "inputs": []},
        ]
    )
    model = compile_abi(abi, "Token", MemoryModel.no_alloc)

    assert model.functions[0].selector_const == "TRANSFER_SELECTOR"
    assert model.events[0].const_name == "TRANSFER_EVENT_SIGNATURE"
    assert model.errors[0].const_name == "TRANSFER_ERROR"


def test_selector_collision():
    abi = parse_abi(COLLIDING_SELECTOR_ABI)

    with pytest.raises(SelectorCollision) as exc:
        compile_abi(abi, "Token", MemoryModel.no_alloc)

    assert exc.value.selector == bytes.fromhex("42966c68")
    assert exc.value.first_signature == "burn(uint256)"
    assert exc.value.second_signature == "collate_propagate_storage(bytes16)"
    assert isinstance(exc.value, CompileError)


def test_collision_detection_disabled(caplog):
    abi = parse_abi(COLLIDING_SELECTOR_ABI)

    with caplog.at_level(logging.WARNING, logger="nethermind"):
        model = compile_abi(abi, "Token", MemoryModel.no_alloc, CompileConfig(detect_collisions=False))

    assert len(model.functions) == 2
    assert model.functions[0].selector == model.functions[1].selector
    assert "Only burn(uint256) will be dispatched" in caplog.text


def test_compile_is_deterministic(my_token_abi):
    first = compile_abi(my_token_abi, "MyToken", MemoryModel.no_alloc)
    second = compile_abi(my_token_abi, "MyToken", MemoryModel.no_alloc)
    assert first == second


def test_empty_abi():
    model = compile_abi((), "Empty", MemoryModel.no_alloc)

    assert model.functions == ()
    assert model.call_data_buffer_len == 256
