from __future__ import annotations
import importlib
from typing import Dict, Any, List

from kernel_sources.registry import default_params, load_kernel as load_registered


KERNEL_ROOT = "kernel_sources"
BACKEND = "cpu"

# Appended by the executor to every slab call
TASK_ARGS = ("task_num", "task_size")

def _module_name(family: str) -> str:
    return f"{KERNEL_ROOT}.{BACKEND}.{family.lower()}"

def load_kernel(family: str, op_name: str) -> Dict[str, Any]:
    """
    Import the kernel module by convention (kernel_sources.cpu.<family>),
    which registers its kernels, and return the validated metadata.
    """
    importlib.import_module(_module_name(family))
    meta = load_registered(family, op_name)
    _validate_meta(meta, f"registry[{family}.{op_name}]")
    return meta

def load_defaults(family: str, op_name: str) -> Dict[str, Any]:
    """Default parameters from the op descriptor registered by the kernel module."""
    importlib.import_module(_module_name(family))
    return default_params(family, op_name)

def bind_args(meta: Dict[str, Any], arg_map: Dict[str, Any]) -> List[Any]:
    """
    Order the values in `arg_map` by the kernel's arg_order.
    The trailing task arguments are left for the executor to append.
    """
    names = list(meta["arg_order"])[:-len(TASK_ARGS)]
    missing = [n for n in names if n not in arg_map]
    if missing:
        raise KeyError(f"Missing kernel arguments: {', '.join(missing)}")
    return [arg_map[n] for n in names]

def _validate_meta(meta: Dict[str, Any], where: str) -> None:
    if "func" not in meta or not callable(meta["func"]):
        raise KeyError(f"{where} must provide a callable 'func'")
    if "arg_order" not in meta or not isinstance(meta["arg_order"], (list, tuple)):
        raise KeyError(f"{where} must provide an 'arg_order' list")
    if tuple(meta["arg_order"][-len(TASK_ARGS):]) != TASK_ARGS:
        raise KeyError(f"{where} arg_order must end with {', '.join(TASK_ARGS)}")
