"""Nondeterministic finite automaton runtime.

The nfakit package stores states, predicate-guarded transitions and accept
markers, and simulates every live branch of an automaton at once. It is the
engine a regular-expression or grammar compiler builds on: the compiler
creates small automata for pattern fragments and splices them together with
``Automaton.add``.

## Modules

### Automaton - The engine
- Construction: ``new_state``, ``new_transition``, ``mark_state``, ``add``
- Simulation: ``reset``, ``step``, ``get_markers``, ``feed``, ``accepts``
- Introspection: active states, combined active transitions, marked states
- Debug output: text dump, Graphviz DOT, dictionary form

### Stores - Predicate transition stores
The engine never evaluates predicates itself; each state owns a transition
store produced by an injected factory:
- SymbolTransitionStore: equality on hashable symbols
- RangeTransitionStore: inclusive character ranges
- CallableTransitionStore: arbitrary ``value -> bool`` functions

### Config - Declarative definitions
YAML/JSON definitions validated with Pydantic and built into automata.

## Quick Example

```python
from nfakit import EPSILON, Automaton

automaton = Automaton()
s0, s1, s2 = automaton.new_state(), automaton.new_state(), automaton.new_state()
automaton.new_transition(s0, s1, "a")
automaton.new_transition(s1, s2, EPSILON)
automaton.new_transition(s2, s1, "b")
automaton.mark_state(s2, "AB*")

automaton.accepts("abbb")   # True
automaton.accepts("ba")     # False
print(automaton)
# #0: 'a'>1
# #1: eps>2
# #2:AB*: 'b'>1
```
"""

from nfakit.automaton import Automaton, FeedResult
from nfakit.exceptions import (
    CompositionError,
    ConfigurationError,
    NfaError,
    NotFoundError,
    OperationError,
    SerializationError,
    UnknownStateError,
    ValidationError,
)
from nfakit.guards import EPSILON, Epsilon, Guard, Predicate
from nfakit.state import State
from nfakit.stores import (
    CallableTransitionStore,
    CharRange,
    ITransitionStore,
    RangeTransitionStore,
    StoreFactory,
    SymbolTransitionStore,
    TransitionStoreFactory,
    store_registry,
)

__version__ = "0.1.0"

__all__ = [
    "Automaton",
    "CallableTransitionStore",
    "CharRange",
    "CompositionError",
    "ConfigurationError",
    "EPSILON",
    "Epsilon",
    "FeedResult",
    "Guard",
    "ITransitionStore",
    "NfaError",
    "NotFoundError",
    "OperationError",
    "Predicate",
    "RangeTransitionStore",
    "SerializationError",
    "State",
    "StoreFactory",
    "SymbolTransitionStore",
    "TransitionStoreFactory",
    "UnknownStateError",
    "ValidationError",
    "store_registry",
]
