from .base import CargoManifest, ContractRenderer
from .rust import RustRenderer, rust_decode_line, rust_identifier

__all__ = ["CargoManifest", "ContractRenderer", "RustRenderer", "rust_decode_line", "rust_identifier"]
