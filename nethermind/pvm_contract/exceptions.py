class CompileError(Exception):
    """

    Base class for errors raised while compiling an ABI into a dispatch model.  Any CompileError aborts the
    whole compile call, and no partial model is returned.

    """


class MetadataParseError(CompileError):
    """

    Raised when the compiler metadata or ABI document is malformed, or is missing required fields.  Typical causes:

        * solc output that is not valid JSON, or does not contain a contract for the source file
        * ABI items with an unknown ``type`` discriminant
        * ABI parameters without a ``type``

    """


class EmptySignatureComponent(CompileError):
    """Raised when a function, event or error with an empty name reaches the signature builder"""

    def __init__(self, item_kind: str):
        self.item_kind = item_kind
        super().__init__(f"Cannot build signature for {item_kind} with an empty name")


class UnsupportedParamType(CompileError):
    """
    Raised when the strict unsupported-type policy is enabled and a function parameter cannot be decoded
    from a single static calldata word.  With the default placeholder policy this error is never raised, and a
    placeholder decode step is generated instead.
    """

    def __init__(self, function_name: str, param_name: str, type_name: str):
        self.function_name = function_name
        self.param_name = param_name
        self.type_name = type_name
        super().__init__(
            f"Parameter {param_name} of function {function_name} has type {type_name}, which cannot be decoded "
            f"without an allocator"
        )


class IdentifierCollision(CompileError):
    """Raised when two distinct ABI names normalize to the same generated identifier"""

    def __init__(self, identifier: str, first_source: str, second_source: str):
        self.identifier = identifier
        self.first_source = first_source
        self.second_source = second_source
        super().__init__(
            f"Generated identifier {identifier} is produced by both {first_source} and {second_source}"
        )


class SelectorCollision(CompileError):
    """Raised when two function signatures within a contract share the same 4 byte selector"""

    def __init__(self, selector: bytes, first_signature: str, second_signature: str):
        self.selector = selector
        self.first_signature = first_signature
        self.second_signature = second_signature
        super().__init__(
            f"Selector 0x{selector.hex()} is shared by {first_signature} and {second_signature}"
        )


class InvalidIdentifier(ValueError):
    """Raised when a name cannot be turned into a legal identifier, ie it contains no alphanumeric characters"""


class CalldataError(Exception):
    """

    Raised by the reference dispatcher when a payload would be rejected by the generated entry point:

        * payloads shorter than the 4 byte selector
        * selectors that do not match any function in the contract
        * payloads shorter than the minimum length of the selected function

    """


class SolcError(Exception):
    """
    Raised when the Solidity compiler cannot be spawned, or exits with a non-zero status.  The compiler's stderr
    is included in the message.
    """


class ScaffoldError(Exception):
    """

    Raised when a contract project cannot be created on disk, ie the target directory already exists, the
    Solidity source cannot be found, or a configured builder path does not exist.

    """
