from __future__ import annotations
from typing import Dict, Any

# Nested dict: [family][op_name] -> meta
_REGISTRY: Dict[str, Dict[str, Dict[str, Any]]] = {}

# Static op descriptors: default parameters
_OP_DESCRIPTORS: Dict[str, Dict[str, Dict[str, Any]]] = {}
# shape: [family][op_name] -> {"default_params": {...}, ...}

def register_kernel(family: str, op_name: str, **meta: Any) -> None:
    """
    Register kernel metadata for a given kernel family and operation.
    Example:
        register_kernel("mandelbrot", "slab", func=mandelbrot_slab, arg_order=[...])
    """
    _REGISTRY.setdefault(family, {})[op_name] = meta

def register_op_descriptor(family: str, op_name: str, **descriptor: Any) -> None:
    """
    Register static operation descriptor for a given family and operation.
    Example:
        register_op_descriptor("mandelbrot", "slab", default_params={"bailout": 4.0})
    """
    _OP_DESCRIPTORS.setdefault(family, {})[op_name] = descriptor

def load_kernel(family: str, op_name: str) -> Dict[str, Any]:
    """
    Load kernel metadata from the registry.
    Raises KeyError if not found.
    """
    try:
        meta = _REGISTRY[family][op_name]
    except KeyError as e:
        raise KeyError(f"Kernel not found for family='{family}', op='{op_name}'") from e
    return meta

def get_op_descriptor(family: str, op_name: str) -> Dict[str, Any]:
    """
    Get the static operation descriptor for the given family and operation.
    Raises KeyError if not found.
    """
    try:
        descriptor = _OP_DESCRIPTORS[family][op_name]
    except KeyError as e:
        raise KeyError(f"Operation descriptor not found for family='{family}', op='{op_name}'") from e
    return descriptor

def default_params(family: str, op_name: str) -> Dict[str, Any]:
    return dict(get_op_descriptor(family, op_name).get("default_params", {}))