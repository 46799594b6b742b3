import logging
from dataclasses import dataclass
from typing import Any

from eth_abi import decode as eth_abi_decode
from eth_abi.exceptions import DecodingError as EthAbiDecodingError
from eth_utils import to_checksum_address

from nethermind.pvm_contract.exceptions import CalldataError
from nethermind.pvm_contract.types.dispatch import (
    SELECTOR_LEN,
    AddressDecode,
    BoolDecode,
    DecodeStep,
    DispatchModel,
    FixedBytes32Decode,
    FunctionEntry,
    UnsignedIntDecode,
    UnsupportedDecode,
)

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("pvm_contract").getChild("decoding")


@dataclass
class DispatchedCall:
    """Function selected by a payload, and its decoded arguments"""

    name: str
    signature: str
    arguments: dict[str, Any]


def decode_word(step: DecodeStep, calldata: bytes) -> Any:
    """
    Decodes a single parameter exactly as the generated no-alloc entry point does.  Addresses are returned as
    checksummed hex strings.  Bool only inspects the last byte of the word.  Unsupported steps return None.

    :param step: Decode step from a DecodePlan
    :param calldata: Full calldata, including the selector
    """
    value_range = step.value_range
    if value_range is None:
        return None

    value = calldata[value_range[0] : value_range[1]]
    match step.strategy:
        case AddressDecode():
            return to_checksum_address("0x" + value.hex())
        case UnsignedIntDecode():
            return int.from_bytes(value, "big")
        case BoolDecode():
            return value[0] != 0
        case FixedBytes32Decode():
            return bytes(value)
        case UnsupportedDecode():
            return None
        case _:
            raise NotImplementedError(f"Unknown decode strategy {step.strategy}")


class CalldataDispatcher:
    """
    Routes raw calldata through a DispatchModel.  Mirrors the behavior of the generated contract entry point,
    and is used to verify dispatch models without compiling contracts.

    No-alloc models decode arguments word by word from their decode plans.  Alloc models delegate decoding
    to eth_abi, which also handles dynamic types.
    """

    model: DispatchModel

    function_entries: dict[bytes, FunctionEntry]
    """ Mapping from 4 byte selectors to functions """

    def __init__(self, model: DispatchModel):
        self.model = model
        self.function_entries = {}
        for function in model.functions:
            # First function wins for colliding selectors, like the generated match statement
            self.function_entries.setdefault(function.selector, function)

    def dispatch(self, calldata: bytes) -> DispatchedCall:
        """
        Selects and decodes the function called by ``calldata``.

        :param calldata: Selector followed by argument words
        :raises CalldataError: if the generated entry point would reject the payload
        """
        if len(calldata) < SELECTOR_LEN:
            raise CalldataError(f"Call data too short: {len(calldata)} bytes")

        selector = bytes(calldata[:SELECTOR_LEN])
        function = self.function_entries.get(selector)
        if function is None:
            raise CalldataError(f"Unknown function selector 0x{selector.hex()} for {self.model.contract_name}")

        if function.decode_plan is not None:
            return DispatchedCall(function.name, function.signature, self._decode_manual(function, calldata))
        return DispatchedCall(function.name, function.signature, self._decode_managed(function, calldata))

    @staticmethod
    def _decode_manual(function: FunctionEntry, calldata: bytes) -> dict[str, Any]:
        plan = function.decode_plan
        assert plan is not None

        if len(calldata) < plan.min_payload_len:
            raise CalldataError(
                f"Invalid {function.name} call data: expected at least {plan.min_payload_len} bytes, "
                f"got {len(calldata)}"
            )

        arguments = {}
        for step in plan.steps:
            if not step.is_supported:
                logger.debug(f"Skipping placeholder decode for {step.param_name} of {function.signature}")
            arguments[step.param_name] = decode_word(step, calldata)
        return arguments

    @staticmethod
    def _decode_managed(function: FunctionEntry, calldata: bytes) -> dict[str, Any]:
        try:
            decoded = eth_abi_decode(list(function.input_types), calldata[SELECTOR_LEN:])
        except (EthAbiDecodingError, OverflowError) as e:
            raise CalldataError(f"Invalid {function.name} call data: {e}") from e

        formatted = [
            to_checksum_address(value) if typ == "address" else value
            for value, typ in zip(decoded, function.input_types, strict=True)
        ]
        names = [name or f"param_{index}" for index, name in enumerate(function.input_names)]
        return dict(zip(names, formatted, strict=True))
