from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

# pylint: disable=too-few-public-methods


class _AbiModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class AbiParam(_AbiModel):
    """
    Single input or output parameter of an ABI item.

    ``type_name`` holds the type exactly as emitted by the compiler.  Aliases like ``uint`` are expected to be
    expanded upstream, and are never re-normalized.
    """

    name: str = ""
    type_name: str = Field(alias="type")
    indexed: bool | None = None
    components: tuple["AbiParam", ...] | None = None

    @property
    def canonical_type(self) -> str:
        """
        Type used in signatures.  Tuples are collapsed into a parenthesized list of their component types,
        keeping any array suffix.

        >>> AbiParam(name="order", type="tuple[]", components=[{"type": "address"}, {"type": "uint256"}]).canonical_type
        '(address,uint256)[]'
        """
        if not self.type_name.startswith("tuple"):
            return self.type_name

        delimited = ",".join(component.canonical_type for component in self.components or ())
        # Whatever comes after "tuple" is the array dims, "", "[]", or "[k]"
        return f"({delimited}){self.type_name[5:]}"


AbiParam.model_rebuild()


class AbiFunction(_AbiModel):
    """Callable contract function"""

    type: Literal["function"] = "function"
    name: str
    inputs: tuple[AbiParam, ...] = ()
    outputs: tuple[AbiParam, ...] = ()
    state_mutability: str = Field("nonpayable", alias="stateMutability")


class AbiEvent(_AbiModel):
    """Event emitted by the contract.  Inputs may be ``indexed``"""

    type: Literal["event"] = "event"
    name: str
    inputs: tuple[AbiParam, ...] = ()
    anonymous: bool = False


class AbiError(_AbiModel):
    """Custom error declared by the contract"""

    type: Literal["error"] = "error"
    name: str
    inputs: tuple[AbiParam, ...] = ()


class AbiConstructor(_AbiModel):
    """Contract constructor.  Constructors have no name and are never dispatched by selector"""

    type: Literal["constructor"] = "constructor"
    inputs: tuple[AbiParam, ...] = ()
    state_mutability: str = Field("nonpayable", alias="stateMutability")


class AbiFallback(_AbiModel):
    """Fallback function.  Accepted so solc output parses, but never dispatched"""

    type: Literal["fallback"] = "fallback"
    state_mutability: str = Field("nonpayable", alias="stateMutability")


class AbiReceive(_AbiModel):
    """Receive function.  Accepted so solc output parses, but never dispatched"""

    type: Literal["receive"] = "receive"
    state_mutability: str = Field("payable", alias="stateMutability")


AbiItem = Annotated[
    Union[AbiFunction, AbiEvent, AbiError, AbiConstructor, AbiFallback, AbiReceive],
    Field(discriminator="type"),
]
""" Tagged union of all ABI item kinds, discriminated by the JSON ``type`` field """

SignedAbiItem = AbiFunction | AbiEvent | AbiError
""" ABI items that carry a name, and therefore a canonical signature """


class MetadataOutput(_AbiModel):
    """``output`` section of the solc contract metadata document"""

    abi: tuple[AbiItem, ...]


class ContractMetadata(_AbiModel):
    """Contract metadata document, as embedded as a JSON string in solc's standard-json output"""

    output: MetadataOutput

    @property
    def abi(self) -> tuple[AbiItem, ...]:
        return self.output.abi


class SolcContractInfo(_AbiModel):
    """Per-contract entry of solc standard-json output.  Only the metadata string is requested"""

    metadata: str


class SolcOutput(_AbiModel):
    """solc standard-json output, keyed by source file name, then contract name"""

    contracts: dict[str, dict[str, SolcContractInfo]] = Field(default_factory=dict)
