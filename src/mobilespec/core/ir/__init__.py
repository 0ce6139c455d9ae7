"""
mobilespec Internal Representation (IR).

Immutable pydantic types shared by the loader, the checkers and the
generators:

- documents.py: Per-layer decoded documents (navigation, UI, state, contract)
- navigation.py: Screen keys, screens, transitions, guard registry
- contract.py: Operation registry and response root keys
- diagnostics.py: Diagnostic model, codes and levels
"""

from .contract import (
    DataReference,
    DataRefKind,
    Operation,
    OperationRegistry,
    RootKeys,
)
from .diagnostics import (
    Diagnostic,
    DiagnosticCode,
    DiagnosticLevel,
    DiagnosticSet,
)
from .documents import (
    ContractDoc,
    DataRef,
    EventType,
    FlowScreen,
    FlowTransition,
    NavigationDoc,
    ScreenKind,
    StateData,
    StateDoc,
    StateEvent,
    StateScreen,
    TriggerKind,
    UiAction,
    UiDoc,
    UiNode,
    UiScreen,
    normalize_node,
)
from .navigation import (
    GuardDef,
    GuardRef,
    GuardRegistry,
    NavigationGraph,
    Screen,
    ScreenKey,
    Transition,
)

__all__ = [
    # Contract
    "DataReference",
    "DataRefKind",
    "Operation",
    "OperationRegistry",
    "RootKeys",
    # Diagnostics
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticLevel",
    "DiagnosticSet",
    # Documents
    "ContractDoc",
    "DataRef",
    "EventType",
    "FlowScreen",
    "FlowTransition",
    "NavigationDoc",
    "ScreenKind",
    "StateData",
    "StateDoc",
    "StateEvent",
    "StateScreen",
    "TriggerKind",
    "UiAction",
    "UiDoc",
    "UiNode",
    "UiScreen",
    "normalize_node",
    # Navigation
    "GuardDef",
    "GuardRef",
    "GuardRegistry",
    "NavigationGraph",
    "Screen",
    "ScreenKey",
    "Transition",
]
