from .dispatcher import CalldataDispatcher, DispatchedCall, decode_word
from .plan import build_decode_plan, classify_type

__all__ = ["CalldataDispatcher", "DispatchedCall", "build_decode_plan", "classify_type", "decode_word"]
