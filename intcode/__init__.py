"""
intcode — an Intcode machine over concrete and symbolic numbers
===============================================================

One interpreter runs a program image over either of two numeric domains:
signed integers (32-bit, 64-bit or unbounded), or symbolic expression
trees whose free variables are the program's inputs.  Symbolic outputs are
reduced by a simplifier that tracks path conditions, giving a closed form
that can be evaluated many times without re-running the program.

Core modules
------------
errors
    Exception hierarchy (decode, addressing, starvation, evaluation).
numeric
    ``NumericDomain`` strategy plus ``INT32``, ``INT64``, ``BIGINT`` and
    ``SYMBOLIC``.
memory
    Dense image plus sparse overflow, zero-initialised.
instructions
    Opcodes, parameter modes and the instruction decoder.
machine
    The stepping interpreter with cooperative I/O.
expr
    Immutable symbolic expression nodes.
conditions
    Path conditions and the persistent condition list.
simplify
    Condition-aware algebraic simplification.
closed_form
    Symbolic run of a program down to a callable closed form.
disasm
    Program listings, coloured with ``termcolor``.

Addon modules
-------------
sexp
    S-expression text form (needs ``sexpdata``).

Quick start
-----------
>>> from intcode import Machine, INT64
>>> Machine([1, 0, 0, 0, 99], INT64).execute_to_end()
[]

Package layout
--------------
::

    intcode/
    ├── __init__.py            ← this file
    ├── errors.py
    ├── numeric.py
    ├── memory.py
    ├── instructions.py
    ├── machine.py
    ├── expr.py
    ├── conditions.py
    ├── simplify.py
    ├── closed_form.py
    ├── sexp.py
    └── disasm.py
"""

from __future__ import annotations

import importlib
import logging
import sys
import warnings
from typing import TYPE_CHECKING, List

# ---------------------------------------------------------------------------
# Package metadata
# ---------------------------------------------------------------------------

__version__ = "0.1.0"
__license__ = "MIT"
__all__: List[str] = []          # populated incrementally below

_log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Internal registry: (module_name, list_of_names_to_import)
#
#   CORE  — always imported; failure is fatal
#   ADDON — imported eagerly but failure only warns
# ---------------------------------------------------------------------------

_CORE_MODULES = {
    "errors": [
        "IntcodeError",
        "MachineError",
        "DecodeError",
        "DecodeFault",
        "AddressingError",
        "AddressFault",
        "InputStarvationError",
        "StepLimitExceeded",
        "ArithmeticOverflowError",
        "EvaluationError",
        "UnboundVariableError",
        "ExpressionSyntaxError",
    ],
    "numeric": [
        "NumericDomain",
        "IntegerDomain",
        "SymbolicDomain",
        "INT32",
        "INT64",
        "BIGINT",
        "SYMBOLIC",
    ],
    "memory": [
        "Memory",
        "DEFAULT_MAX_ADDRESS",
    ],
    "instructions": [
        "Opcode",
        "ParameterMode",
        "Instruction",
        "decode_instruction",
    ],
    "machine": [
        "Machine",
        "StepResult",
        "Stepped",
        "Output",
        "AwaitingInput",
        "Terminated",
        "STEPPED",
        "TERMINATED",
    ],
    "expr": [
        "Expr",
        "ExprKind",
        "Constant",
        "Zero",
        "One",
        "Sum",
        "Product",
        "IfEqual",
        "IfLess",
        "Variable",
        "ZERO",
        "ONE",
        "const",
        "var",
    ],
    "conditions": [
        "Condition",
        "ConditionKind",
        "ConditionList",
        "EMPTY",
    ],
    "simplify": [
        "simplify",
    ],
    "closed_form": [
        "ClosedForm",
        "closed_form",
        "symbolic_outputs",
    ],
    "disasm": [
        "ListingLine",
        "disassemble",
        "format_instruction",
        "format_listing",
    ],
}

_ADDON_MODULES = {
    "sexp": [
        "dumps",
        "loads",
        "dumps_conditions",
        "loads_conditions",
    ],
}


def _import_names(
    module_rel_name: str,
    names: List[str],
    *,
    fatal: bool = True,
) -> None:
    """Import *names* from a submodule and bind them in the package namespace.

    Parameters
    ----------
    module_rel_name:
        Module name relative to this package (e.g. ``"machine"``).
    names:
        Public symbols to re-export.
    fatal:
        If ``True``, an ``ImportError`` propagates.  If ``False``, a warning
        is issued and the names are skipped (addon tier).
    """
    fq_name = f"{__name__}.{module_rel_name}"
    try:
        mod = importlib.import_module(fq_name)
    except ImportError as exc:
        if fatal:
            raise ImportError(
                f"intcode: required submodule '{module_rel_name}' "
                f"failed to import: {exc}"
            ) from exc
        warnings.warn(
            f"intcode: optional submodule '{module_rel_name}' could not be "
            f"imported ({exc}); related symbols will be unavailable.",
            ImportWarning,
            stacklevel=2,
        )
        _log.debug("Skipped optional module %s: %s", module_rel_name, exc)
        return

    current_module = sys.modules[__name__]
    for name in names:
        if not hasattr(mod, name):
            msg = f"intcode.{module_rel_name} does not export '{name}'"
            if fatal:
                raise AttributeError(msg)
            _log.warning(msg)
            continue
        setattr(current_module, name, getattr(mod, name))
        __all__.append(name)

    # a module named after one of its exports (simplify, closed_form) keeps
    # the export bound
    if module_rel_name not in names:
        setattr(current_module, module_rel_name, mod)
    if module_rel_name not in __all__:
        __all__.append(module_rel_name)


for _mod, _names in _CORE_MODULES.items():
    _import_names(_mod, _names, fatal=True)

for _mod, _names in _ADDON_MODULES.items():
    _import_names(_mod, _names, fatal=False)

del _mod, _names

# ---------------------------------------------------------------------------
# Package-level utilities
# ---------------------------------------------------------------------------


def list_submodules() -> List[str]:
    """Return the names of all submodules in the package (core + addon)."""
    return sorted(set(_CORE_MODULES) | set(_ADDON_MODULES))


def package_info() -> dict:
    """Return a dict of metadata about the installed package.

    Useful in bug reports and log headers.
    """
    loaded = []
    missing = []
    for mod_name in list_submodules():
        if f"{__name__}.{mod_name}" in sys.modules:
            loaded.append(mod_name)
        else:
            missing.append(mod_name)

    return {
        "package": __name__,
        "version": __version__,
        "python": sys.version,
        "loaded_submodules": loaded,
        "missing_submodules": missing,
        "all_exports": list(__all__),
    }


__all__ += ["list_submodules", "package_info", "__version__"]

# ---------------------------------------------------------------------------
# TYPE_CHECKING block
# ---------------------------------------------------------------------------

if TYPE_CHECKING:
    from .errors import (
        IntcodeError as IntcodeError,
        MachineError as MachineError,
        DecodeError as DecodeError,
        DecodeFault as DecodeFault,
        AddressingError as AddressingError,
        AddressFault as AddressFault,
        InputStarvationError as InputStarvationError,
        StepLimitExceeded as StepLimitExceeded,
        ArithmeticOverflowError as ArithmeticOverflowError,
        EvaluationError as EvaluationError,
        UnboundVariableError as UnboundVariableError,
        ExpressionSyntaxError as ExpressionSyntaxError,
    )
    from .numeric import (
        NumericDomain as NumericDomain,
        IntegerDomain as IntegerDomain,
        SymbolicDomain as SymbolicDomain,
        INT32 as INT32,
        INT64 as INT64,
        BIGINT as BIGINT,
        SYMBOLIC as SYMBOLIC,
    )
    from .memory import Memory as Memory, DEFAULT_MAX_ADDRESS as DEFAULT_MAX_ADDRESS
    from .instructions import (
        Opcode as Opcode,
        ParameterMode as ParameterMode,
        Instruction as Instruction,
        decode_instruction as decode_instruction,
    )
    from .machine import (
        Machine as Machine,
        StepResult as StepResult,
        Stepped as Stepped,
        Output as Output,
        AwaitingInput as AwaitingInput,
        Terminated as Terminated,
        STEPPED as STEPPED,
        TERMINATED as TERMINATED,
    )
    from .expr import (
        Expr as Expr,
        ExprKind as ExprKind,
        Constant as Constant,
        Zero as Zero,
        One as One,
        Sum as Sum,
        Product as Product,
        IfEqual as IfEqual,
        IfLess as IfLess,
        Variable as Variable,
        ZERO as ZERO,
        ONE as ONE,
        const as const,
        var as var,
    )
    from .conditions import (
        Condition as Condition,
        ConditionKind as ConditionKind,
        ConditionList as ConditionList,
        EMPTY as EMPTY,
    )
    from .simplify import simplify as simplify
    from .closed_form import (
        ClosedForm as ClosedForm,
        closed_form as closed_form,
        symbolic_outputs as symbolic_outputs,
    )
    from .sexp import (
        dumps as dumps,
        loads as loads,
        dumps_conditions as dumps_conditions,
        loads_conditions as loads_conditions,
    )
    from .disasm import (
        ListingLine as ListingLine,
        disassemble as disassemble,
        format_instruction as format_instruction,
        format_listing as format_listing,
    )
