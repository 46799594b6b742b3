import logging
import re
from typing import Sequence

from nethermind.pvm_contract.naming import to_snake_case
from nethermind.pvm_contract.types.abi import AbiParam
from nethermind.pvm_contract.types.dispatch import (
    SELECTOR_LEN,
    WORD_LEN,
    AddressDecode,
    BoolDecode,
    DecodePlan,
    DecodeStep,
    DecodeStrategy,
    FixedBytes32Decode,
    UnsignedIntDecode,
    UnsupportedDecode,
)

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("pvm_contract").getChild("decoding")

_UINT_PATTERN = re.compile(r"^uint(\d+)$")
MAX_INLINE_UINT_BITS = 128


def classify_type(type_name: str) -> DecodeStrategy:
    """
    Selects decode strategy for a canonical ABI type.  Only types that fit in a single static word, and map
    to a native integer, are decoded inline.  All other types, including uint256, are unsupported.

    >>> classify_type("uint32")
    UnsignedIntDecode(bits=32)
    >>> classify_type("string")
    UnsupportedDecode(type_name='string')
    """
    if type_name == "address":
        return AddressDecode()
    if type_name == "bool":
        return BoolDecode()
    if type_name == "bytes32":
        return FixedBytes32Decode()

    uint_match = _UINT_PATTERN.match(type_name)
    if uint_match:
        bits = int(uint_match.group(1))
        if 0 < bits <= MAX_INLINE_UINT_BITS and bits % 8 == 0:
            return UnsignedIntDecode(bits)

    return UnsupportedDecode(type_name)


def param_identifier(param: AbiParam, index: int) -> str:
    """Snake case name for a parameter.  Unnamed parameters are named by position, ie param_0"""
    if not param.name:
        return f"param_{index}"
    return to_snake_case(param.name)


def min_payload_len(param_count: int) -> int:
    """
    Minimum calldata length for a function, assuming every parameter occupies one static word.  Dynamic
    parameters are not accounted for.
    """
    return SELECTOR_LEN + WORD_LEN * param_count


def build_decode_plan(params: Sequence[AbiParam]) -> DecodePlan:
    """
    Builds ordered decode steps for a function's input parameters.  Each parameter is assigned the next
    32 byte word after the selector.  Unsupported parameters still consume a word, but have no byte range.

    :param params: Ordered function inputs
    :return: DecodePlan
    """
    steps = []
    offset = SELECTOR_LEN
    for index, param in enumerate(params):
        strategy = classify_type(param.canonical_type)
        byte_range = None if isinstance(strategy, UnsupportedDecode) else (offset, offset + WORD_LEN)

        steps.append(DecodeStep(param_name=param_identifier(param, index), byte_range=byte_range, strategy=strategy))
        offset += WORD_LEN

    return DecodePlan(min_payload_len=min_payload_len(len(params)), steps=tuple(steps))
