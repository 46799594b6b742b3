import logging
from collections import Counter
from typing import Sequence

from nethermind.pvm_contract.config import CompileConfig, UnsupportedTypePolicy
from nethermind.pvm_contract.decoding.plan import build_decode_plan
from nethermind.pvm_contract.exceptions import (
    IdentifierCollision,
    SelectorCollision,
    UnsupportedParamType,
)
from nethermind.pvm_contract.naming import (
    to_pascal_case,
    to_snake_case,
    to_upper_snake_case,
)
from nethermind.pvm_contract.signatures import (
    abi_to_signature,
    error_selector,
    event_topic,
    function_selector,
)
from nethermind.pvm_contract.types.abi import (
    AbiError,
    AbiEvent,
    AbiFunction,
    AbiItem,
    SignedAbiItem,
)
from nethermind.pvm_contract.types.dispatch import (
    DispatchModel,
    ErrorEntry,
    EventEntry,
    FunctionEntry,
    MemoryModel,
)

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("pvm_contract").getChild("compiler")


class _IdentifierRegistry:
    """Tracks generated identifiers, and the ABI name each one was generated from"""

    def __init__(self, detect_collisions: bool):
        self.detect_collisions = detect_collisions
        self._sources: dict[str, str] = {}

    def register(self, identifier: str, source: str) -> str:
        existing = self._sources.get(identifier)
        if existing is not None:
            if self.detect_collisions:
                logger.error(f"Identifier {identifier} generated from both {existing} and {source}")
                raise IdentifierCollision(identifier, existing, source)
            logger.warning(
                f"Identifier {identifier} generated from both {existing} and {source}.  Generated code will "
                f"not compile until one of them is renamed"
            )
        else:
            self._sources[identifier] = source
        return identifier


def _overload_names(items: Sequence[SignedAbiItem]) -> list[str]:
    """
    Returns disambiguated base names.  The first item with a name keeps it, later overloads are suffixed
    with their position, ie transfer, transfer_1, transfer_2
    """
    seen: Counter[str] = Counter()
    names = []
    for item in items:
        count = seen[item.name]
        names.append(item.name if count == 0 else f"{item.name}_{count}")
        seen[item.name] += 1
    return names


def _alloy_call_types(contract_name: str, functions: Sequence[AbiFunction]) -> list[str]:
    """
    Names of the call structs generated by alloy's sol! macro.  Overloaded functions are numbered from zero,
    ie MyToken::transfer_0Call and MyToken::transfer_1Call
    """
    contract_pascal = to_pascal_case(contract_name)
    totals = Counter(function.name for function in functions)
    seen: Counter[str] = Counter()
    call_types = []
    for function in functions:
        if totals[function.name] > 1:
            call_types.append(f"{contract_pascal}::{function.name}_{seen[function.name]}Call")
        else:
            call_types.append(f"{contract_pascal}::{function.name}Call")
        seen[function.name] += 1
    return call_types


def _check_selectors(functions: Sequence[FunctionEntry], detect_collisions: bool):
    seen: dict[bytes, str] = {}
    for function in functions:
        existing = seen.get(function.selector)
        if existing is None:
            seen[function.selector] = function.signature
            continue

        if detect_collisions:
            logger.error(f"Selector 0x{function.selector.hex()} shared by {existing} and {function.signature}")
            raise SelectorCollision(function.selector, existing, function.signature)
        logger.warning(
            f"Selector 0x{function.selector.hex()} shared by {existing} and {function.signature}.  "
            f"Only {existing} will be dispatched"
        )


def _compile_functions(
    functions: Sequence[AbiFunction],
    contract_name: str,
    memory_model: MemoryModel,
    config: CompileConfig,
    registry: _IdentifierRegistry,
) -> list[FunctionEntry]:
    call_types = _alloy_call_types(contract_name, functions) if memory_model.uses_allocator else None

    entries = []
    for index, (function, base_name) in enumerate(zip(functions, _overload_names(functions), strict=True)):
        signature = abi_to_signature(function)
        selector = function_selector(signature)
        logger.debug(f"Compiling function {signature} with selector 0x{selector.hex()}")

        selector_const = registry.register(f"{to_upper_snake_case(base_name)}_SELECTOR", f"function {signature}")
        handler_name = registry.register(to_snake_case(base_name), f"function {signature}")

        decode_plan = None
        if not memory_model.uses_allocator:
            decode_plan = build_decode_plan(function.inputs)
            param_registry = _IdentifierRegistry(config.detect_collisions)
            for step, param in zip(decode_plan.steps, function.inputs, strict=True):
                param_registry.register(step.param_name, f"parameter {param.name or step.param_name} of {signature}")
                if step.is_supported:
                    continue
                if config.unsupported_types is UnsupportedTypePolicy.error:
                    logger.error(f"Cannot decode {step.param_name}: {param.canonical_type} of {signature} inline")
                    raise UnsupportedParamType(function.name, step.param_name, param.canonical_type)
                logger.warning(
                    f"Parameter {step.param_name} of {signature} has type {param.canonical_type}, which cannot be "
                    f"decoded without an allocator.  Generating placeholder decode"
                )

        entries.append(
            FunctionEntry(
                name=function.name,
                signature=signature,
                selector=selector,
                selector_const=selector_const,
                handler_name=handler_name,
                input_types=tuple(param.canonical_type for param in function.inputs),
                input_names=tuple(param.name for param in function.inputs),
                decode_plan=decode_plan,
                call_type=call_types[index] if call_types else None,
            )
        )

    _check_selectors(entries, config.detect_collisions)
    return entries


def _compile_events(events: Sequence[AbiEvent], registry: _IdentifierRegistry) -> list[EventEntry]:
    entries = []
    for event, base_name in zip(events, _overload_names(events), strict=True):
        signature = abi_to_signature(event)
        topic = event_topic(signature)
        logger.debug(f"Compiling event {signature} with topic 0x{topic.hex()}")
        entries.append(
            EventEntry(
                name=event.name,
                signature=signature,
                topic=topic,
                const_name=registry.register(f"{to_upper_snake_case(base_name)}_EVENT_SIGNATURE", f"event {signature}"),
            )
        )
    return entries


def _compile_errors(errors: Sequence[AbiError], registry: _IdentifierRegistry) -> list[ErrorEntry]:
    entries = []
    for error, base_name in zip(errors, _overload_names(errors), strict=True):
        signature = abi_to_signature(error)
        selector = error_selector(signature)
        logger.debug(f"Compiling error {signature} with selector 0x{selector.hex()}")
        entries.append(
            ErrorEntry(
                name=error.name,
                signature=signature,
                selector=selector,
                const_name=registry.register(f"{to_upper_snake_case(base_name)}_ERROR", f"error {signature}"),
            )
        )
    return entries


def compile_abi(
    abi: Sequence[AbiItem],
    contract_name: str,
    memory_model: MemoryModel,
    config: CompileConfig | None = None,
) -> DispatchModel:
    """
    Compiles an ABI into the dispatch model for a contract's entry point.  Pure function of its arguments, and
    performs no filesystem or process access.

    Selectors, topics, and signatures are identical for both memory models.  The no-alloc model carries a
    decode plan for every function, while the alloc model carries the alloy call type for every function.

    :param abi: Parsed ABI items.  Constructors, fallback, and receive functions are skipped
    :param contract_name: Name of the contract, used for alloy call type names
    :param memory_model: Code generation strategy
    :param config: Compile options.  Defaults to placeholder decoding with collision detection
    :return: DispatchModel
    """
    config = config or CompileConfig()
    logger.info(f"Compiling {contract_name} ABI with {len(abi)} items for memory model {memory_model.value}")

    functions = [item for item in abi if isinstance(item, AbiFunction)]
    events = [item for item in abi if isinstance(item, AbiEvent)]
    errors = [item for item in abi if isinstance(item, AbiError)]

    registry = _IdentifierRegistry(config.detect_collisions)
    model = DispatchModel(
        contract_name=contract_name,
        memory_model=memory_model,
        functions=tuple(_compile_functions(functions, contract_name, memory_model, config, registry)),
        events=tuple(_compile_events(events, registry)),
        errors=tuple(_compile_errors(errors, registry)),
    )

    logger.info(
        f"Compiled {contract_name}: {len(model.functions)} functions, {len(model.events)} events, "
        f"{len(model.errors)} errors"
    )
    return model
