# Kernel sources package
from .loader import bind_args, load_defaults, load_kernel
from .registry import (register_kernel, register_op_descriptor,
                       get_op_descriptor, default_params)

__all__ = [
    "load_kernel",
    "load_defaults",
    "bind_args",
    "register_kernel",
    "register_op_descriptor",
    "get_op_descriptor",
    "default_params",
]
__version__ = "0.3.0"
