# qsample/__init__.py
from .config import DEFAULT_CONFIG, StateSpaceConfig
from .errors import (DegenerateStateError, NormalizationError,
                     StateAllocationError, StateSpaceError)
from .state import State
from .state_space import (NumbaStateSpace, SerialStateSpace, StateSpace,
                          get_state_space)

__all__ = [
    "DEFAULT_CONFIG", "StateSpaceConfig",
    "DegenerateStateError", "NormalizationError", "StateAllocationError", "StateSpaceError",
    "State", "StateSpace", "SerialStateSpace", "NumbaStateSpace", "get_state_space",
]
