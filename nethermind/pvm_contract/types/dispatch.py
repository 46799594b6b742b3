from dataclasses import dataclass, field
from enum import Enum
from typing import Union

# Disabling stupid naming check that wants enums to use UPPER_CASE
# pylint: disable=invalid-name

SELECTOR_LEN = 4
WORD_LEN = 32
DEFAULT_CALL_DATA_BUFFER_LEN = 256


class MemoryModel(Enum):
    """
    Code generation strategy for a contract.  A contract is always generated with a single memory model
    """

    alloc_with_alloy = "alloc-with-alloy"
    """ Managed strategy.  Uses an allocator, and defers calldata decoding to alloy's sol! bindings """

    no_alloc = "no-alloc"
    """ Manual strategy.  No allocator, fixed width calldata words are decoded inline """

    @property
    def uses_allocator(self) -> bool:
        return self is MemoryModel.alloc_with_alloy

    def describe(self) -> str:
        """Human readable description, used for interactive prompts"""
        match self:
            case MemoryModel.alloc_with_alloy:
                return "alloy-core + allocator (easier API, larger binary)"
            case MemoryModel.no_alloc:
                return "No allocator (manual encoding, smaller binary)"
            case _:
                raise NotImplementedError(f"Unknown memory model {self}")


# -------------------------------------------------------
#    Decode Strategies
# -------------------------------------------------------
@dataclass(frozen=True)
class AddressDecode:
    """Low 20 bytes of the word"""


@dataclass(frozen=True)
class UnsignedIntDecode:
    """Big endian unsigned integer stored in the low ``bits // 8`` bytes of the word"""

    bits: int

    @property
    def byte_len(self) -> int:
        return self.bits // 8


@dataclass(frozen=True)
class BoolDecode:
    """True if the last byte of the word is nonzero.  The other 31 bytes are never inspected"""


@dataclass(frozen=True)
class FixedBytes32Decode:
    """Raw 32 byte word"""


@dataclass(frozen=True)
class UnsupportedDecode:
    """Type that cannot be decoded from a single static word.  Generated as a placeholder"""

    type_name: str


DecodeStrategy = Union[AddressDecode, UnsignedIntDecode, BoolDecode, FixedBytes32Decode, UnsupportedDecode]


@dataclass(frozen=True)
class DecodeStep:
    """Decoding instruction for a single function parameter"""

    param_name: str
    """ Normalized (snake_case) parameter name.  Unnamed parameters are named param_{index} """

    byte_range: tuple[int, int] | None
    """ Half open [start, end) range of the 32 byte calldata word.  None for unsupported types """

    strategy: DecodeStrategy

    @property
    def is_supported(self) -> bool:
        return not isinstance(self.strategy, UnsupportedDecode)

    @property
    def value_range(self) -> tuple[int, int] | None:
        """Range of the bytes that hold the value inside the word"""
        if self.byte_range is None:
            return None

        start, end = self.byte_range
        match self.strategy:
            case AddressDecode():
                return end - 20, end
            case UnsignedIntDecode(bits=bits):
                return end - bits // 8, end
            case BoolDecode():
                return end - 1, end
            case FixedBytes32Decode():
                return start, end
            case UnsupportedDecode():
                return None
            case _:
                raise NotImplementedError(f"Unknown decode strategy {self.strategy}")


@dataclass(frozen=True)
class DecodePlan:
    """Ordered decode steps for a function, and the minimum calldata length the function accepts"""

    min_payload_len: int
    steps: tuple[DecodeStep, ...]

    @property
    def unsupported_steps(self) -> list[DecodeStep]:
        return [step for step in self.steps if not step.is_supported]


# -------------------------------------------------------
#    Dispatch Model
# -------------------------------------------------------
@dataclass(frozen=True)
class FunctionEntry:
    """Dispatch data for a single function"""

    name: str
    signature: str
    selector: bytes
    selector_const: str
    handler_name: str
    input_types: tuple[str, ...]
    input_names: tuple[str, ...]

    decode_plan: DecodePlan | None = None
    """ Populated for the no-alloc memory model """

    call_type: str | None = None
    """ Populated for the alloc memory model, ie MyToken::transferCall """


@dataclass(frozen=True)
class EventEntry:
    """Topic constant for an event"""

    name: str
    signature: str
    topic: bytes
    const_name: str


@dataclass(frozen=True)
class ErrorEntry:
    """Selector constant for a custom error"""

    name: str
    signature: str
    selector: bytes
    const_name: str


@dataclass(frozen=True)
class DispatchModel:
    """
    Contract wide dispatch model.  Built in a single pass from the ABI by
    :func:`nethermind.pvm_contract.compiler.compile_abi`, and handed to a renderer.
    """

    contract_name: str
    memory_model: MemoryModel
    functions: tuple[FunctionEntry, ...] = field(default_factory=tuple)
    events: tuple[EventEntry, ...] = field(default_factory=tuple)
    errors: tuple[ErrorEntry, ...] = field(default_factory=tuple)

    @property
    def call_data_buffer_len(self) -> int:
        """Length of the fixed calldata buffer in the no-alloc entry point"""
        longest = max((f.decode_plan.min_payload_len for f in self.functions if f.decode_plan), default=0)
        return max(DEFAULT_CALL_DATA_BUFFER_LEN, longest)

    def get_function(self, selector: bytes) -> FunctionEntry | None:
        """Returns the function dispatched by a 4 byte selector.  If no function matches, returns None"""
        for function in self.functions:
            if function.selector == selector:
                return function
        return None
