from .boundary import BoundaryResult, CompiledBoundary, decode_payload, marshal_array
from .dispatch import FunctionTable, callable_name, parse_callable_name, resolve_name
from .handle import RuntimeHandle, RuntimeState

__all__ = [
    'BoundaryResult',
    'CompiledBoundary',
    'decode_payload',
    'marshal_array',
    'FunctionTable',
    'callable_name',
    'parse_callable_name',
    'resolve_name',
    'RuntimeHandle',
    'RuntimeState',
]
