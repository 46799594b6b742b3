import logging
from functools import cache
from importlib import resources
from string import Template

from nethermind.pvm_contract.signatures import format_bytes32_multiline, format_bytes_as_hex
from nethermind.pvm_contract.types.dispatch import (
    AddressDecode,
    BoolDecode,
    DecodeStep,
    DecodeStrategy,
    DispatchModel,
    FixedBytes32Decode,
    FunctionEntry,
    UnsignedIntDecode,
    UnsupportedDecode,
)

from .base import CargoManifest

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("pvm_contract").getChild("rendering")

POLKAVM_DERIVE_VERSION = "0.29"
PALLET_REVIVE_UAPI_VERSION = "0.8"
ALLOY_CORE_VERSION = "1.0"
PICOALLOC_VERSION = "5.0"

_RUST_UINT_TYPES = ((8, "u8"), (16, "u16"), (32, "u32"), (64, "u64"), (128, "u128"))

RUST_KEYWORDS = frozenset(
    "as async await break const continue crate dyn else enum extern false fn for gen if impl in let loop match mod "
    "move mut pub ref return self static struct super trait true try type unsafe use where while abstract become "
    "box do final macro override priv typeof unsized virtual yield".split()
)
""" Strict and reserved Rust keywords, as of the 2024 edition """

# Keywords that cannot be written as raw identifiers
_NON_RAW_KEYWORDS = frozenset(["crate", "self", "super"])

ARM_INDENT = " " * 8
BODY_INDENT = " " * 12


@cache
def _load_template(name: str) -> Template:
    template_text = (resources.files("nethermind.pvm_contract") / "templates" / "scaffold" / name).read_text()
    return Template(template_text)


def rust_identifier(name: str) -> str:
    """
    Escapes parameter names that collide with Rust keywords.  Keywords are written as raw identifiers, except
    for the few Rust does not allow as raw identifiers, which get a trailing underscore.

    >>> rust_identifier("type")
    'r#type'
    >>> rust_identifier("self")
    'self_'
    """
    if name in _NON_RAW_KEYWORDS:
        return f"{name}_"
    if name in RUST_KEYWORDS:
        return f"r#{name}"
    return name


def rust_uint_type(bits: int) -> tuple[str, int]:
    """
    Smallest native Rust integer able to hold a uint of ``bits`` width.

    :return: (type name, width in bytes)
    """
    for type_bits, type_name in _RUST_UINT_TYPES:
        if bits <= type_bits:
            return type_name, type_bits // 8
    raise ValueError(f"uint{bits} does not fit in a native Rust integer")


def rust_value_type(strategy: DecodeStrategy) -> str | None:
    """Rust type of a decoded parameter.  None for placeholder decodes"""
    match strategy:
        case AddressDecode():
            return "[u8; 20]"
        case UnsignedIntDecode(bits=bits):
            return rust_uint_type(bits)[0]
        case BoolDecode():
            return "bool"
        case FixedBytes32Decode():
            return "[u8; 32]"
        case UnsupportedDecode():
            return None
        case _:
            raise NotImplementedError(f"Unknown decode strategy {strategy}")


def rust_decode_line(step: DecodeStep) -> str:
    """
    Single line of Rust decoding a parameter from the ``call_data`` buffer.

    >>> from nethermind.pvm_contract.types.dispatch import DecodeStep, UnsignedIntDecode
    >>> rust_decode_line(DecodeStep("n", (4, 36), UnsignedIntDecode(32)))
    'let n = u32::from_be_bytes(call_data[32..36].try_into().unwrap());'
    """
    name = rust_identifier(step.param_name)
    match step.strategy:
        case UnsupportedDecode(type_name=type_name):
            return f"// TODO: decode {step.param_name} of type {type_name}"
        case AddressDecode():
            start, end = step.value_range  # type: ignore[misc]
            return f"let {name}: [u8; 20] = call_data[{start}..{end}].try_into().unwrap();"
        case UnsignedIntDecode(bits=bits):
            rust_type, byte_len = rust_uint_type(bits)
            end = step.byte_range[1]  # type: ignore[index]
            return f"let {name} = {rust_type}::from_be_bytes(call_data[{end - byte_len}..{end}].try_into().unwrap());"
        case BoolDecode():
            # Only the last byte of the word is inspected
            return f"let {name} = call_data[{step.byte_range[1] - 1}] != 0;"  # type: ignore[index]
        case FixedBytes32Decode():
            start, end = step.byte_range  # type: ignore[misc]
            return f"let {name}: [u8; 32] = call_data[{start}..{end}].try_into().unwrap();"
        case _:
            raise NotImplementedError(f"Unknown decode strategy {step.strategy}")


def _handler_stub(function: FunctionEntry, params: list[str]) -> str:
    return "\n".join(
        [
            "",
            f"fn _{function.handler_name}({', '.join(params)}) {{",
            f"    // TODO: implement {function.signature}",
            "    api::return_value(ReturnFlags::empty(), &[]);",
            "}",
        ]
    )


class RustRenderer:
    """Renders PolkaVM contract projects in Rust, for pallet-revive's uapi"""

    def render_contract(self, model: DispatchModel, sol_file_name: str) -> str:
        """
        Renders contract source.  No-alloc models render selector constants and inline decoding, alloc models
        render alloy sol! bindings for ``sol_file_name``
        """
        if model.memory_model.uses_allocator:
            return self._render_alloc(model, sol_file_name)
        return self._render_no_alloc(model)

    def _render_no_alloc(self, model: DispatchModel) -> str:
        selector_consts = [
            f"const {f.selector_const}: [u8; 4] = [{format_bytes_as_hex(f.selector)}]; // {f.signature}"
            for f in model.functions
        ]
        event_consts = [
            f"const {e.const_name}: [u8; 32] = [\n    {format_bytes32_multiline(e.topic)}\n]; // {e.signature}"
            for e in model.events
        ]
        error_consts = [
            f"const {e.const_name}: [u8; 4] = [{format_bytes_as_hex(e.selector)}]; // {e.signature}"
            for e in model.errors
        ]

        arms, handlers = [], []
        for function in model.functions:
            plan = function.decode_plan
            if plan is None:
                raise ValueError(f"Function {function.signature} has no decode plan for no-alloc rendering")

            supported = [step for step in plan.steps if step.is_supported]
            arg_names = [rust_identifier(step.param_name) for step in supported]
            arm = [
                f"{ARM_INDENT}{function.selector_const} => {{",
                f"{BODY_INDENT}if call_data_len < {plan.min_payload_len} {{",
                f'{BODY_INDENT}    panic!("Invalid {function.name} call data");',
                f"{BODY_INDENT}}}",
            ]
            if plan.steps:
                arm.append("")
                arm.extend(f"{BODY_INDENT}{rust_decode_line(step)}" for step in plan.steps)
            arm.append(f"{BODY_INDENT}_{function.handler_name}({', '.join(arg_names)});")
            arm.append(f"{ARM_INDENT}}}")
            arms.append("\n".join(arm))

            handlers.append(
                _handler_stub(
                    function,
                    [f"{arg}: {rust_value_type(step.strategy)}" for arg, step in zip(arg_names, supported, strict=True)],
                )
            )

        return _load_template("contract_no_alloc.rs.txt").substitute(
            contract_name_upper=model.contract_name.upper(),
            selector_consts="\n".join(selector_consts),
            event_consts="\n\n".join(event_consts),
            error_consts="\n".join(error_consts),
            call_data_buffer_len=model.call_data_buffer_len,
            dispatch_arms="\n\n".join(arms),
            handlers="\n".join(handlers),
        )

    def _render_alloc(self, model: DispatchModel, sol_file_name: str) -> str:
        arms, handlers = [], []
        for function in model.functions:
            if function.call_type is None:
                raise ValueError(f"Function {function.signature} has no call type for alloc rendering")

            arms.append(
                "\n".join(
                    [
                        f"{ARM_INDENT}<{function.call_type} as SolCall>::SELECTOR => {{",
                        f"{BODY_INDENT}let call = <{function.call_type} as SolCall>::abi_decode(&call_data)",
                        f'{BODY_INDENT}    .expect("Invalid {function.name} call data");',
                        f"{BODY_INDENT}_{function.handler_name}(call);",
                        f"{ARM_INDENT}}}",
                    ]
                )
            )
            handlers.append(_handler_stub(function, [f"_call: {function.call_type}"]))

        logger.debug(f"Rendering alloc contract {model.contract_name} bound to {sol_file_name}")
        return _load_template("contract_alloc.rs.txt").substitute(
            sol_file_name=sol_file_name,
            dispatch_arms="\n\n".join(arms),
            handlers="\n".join(handlers),
        )

    def render_cargo_toml(self, manifest: CargoManifest) -> str:
        alloc_dependencies = ""
        if manifest.use_alloc:
            alloc_dependencies = (
                f'alloy-core = {{ version = "{ALLOY_CORE_VERSION}", default-features = false, '
                f'features = ["sol-types"] }}\n'
                f'picoalloc = "{PICOALLOC_VERSION}"\n'
            )

        if manifest.builder_path is not None:
            builder_dependency = f'cargo-pvm-contract-builder = {{ path = "{manifest.builder_path.as_posix()}" }}'
        else:
            builder_dependency = f'cargo-pvm-contract-builder = "{manifest.builder_version}"'

        return _load_template("cargo_toml.txt").substitute(
            contract_name=manifest.contract_name,
            bin_source=manifest.bin_source,
            polkavm_derive_version=POLKAVM_DERIVE_VERSION,
            uapi_version=PALLET_REVIVE_UAPI_VERSION,
            alloc_dependencies=alloc_dependencies,
            builder_dependency=builder_dependency,
        )

    def render_build_rs(self) -> str:
        return _load_template("build.rs.txt").template

    def render_blank_contract(self) -> str:
        return _load_template("contract_blank.rs.txt").template
