import numpy as np
from typing import Any, Callable, Optional, TypeVar

_Numeric = TypeVar("_Numeric", int, float)

def check_number(
    value: Any,
    param_name: Optional[str] = None,
    cast_type: Callable[[Any], _Numeric] = float,
    min_allowed: Optional[_Numeric] = None,
    max_allowed: Optional[_Numeric] = None,
    inclusive_min: bool = True,
    inclusive_max: bool = True,
    allow_none: bool = False,
) -> Optional[_Numeric]:
    """
    Validate and cast a scalar numerical setting (sample counts, target
    acceptance probability, credible-interval mass...).

    Parameters
    ----------
    value : Any
        The value to validate.
    param_name : str, optional
        Name of the setting, used in error messages.
    cast_type : Callable, default: float
        Function used to cast the value (e.g., `int`, `float`).
    min_allowed, max_allowed : int or float, optional
        Allowed range. None means unbounded.
    inclusive_min, inclusive_max : bool, default: True
        Whether the bounds are inclusive.
    allow_none : bool, default: False
        If True, None is returned unchanged.

    Returns
    -------
    _Numeric or None
        The cast value.

    Raises
    ------
    ValueError
        If the value is None (and not `allow_none`), is not a scalar, fails to
        cast, or falls outside the allowed range.
    """

    if value is None:
        if allow_none:
            return None
        raise ValueError(f'{param_name} cannot be None')

    try:
        if not np.isscalar(value) or isinstance(value, (str, bytes)):
            raise TypeError("Value must be a numeric scalar.")

        # int(2.5) silently truncates
        if cast_type is int and float(value) != int(float(value)):
            raise ValueError("Value must be a whole number.")

        v_cast = cast_type(value)

        if min_allowed is not None:
            if inclusive_min and v_cast < min_allowed:
                raise ValueError(f"Value must be >= {min_allowed}.")
            if not inclusive_min and v_cast <= min_allowed:
                raise ValueError(f"Value must be > {min_allowed}.")
        if max_allowed is not None:
            if inclusive_max and v_cast > max_allowed:
                raise ValueError(f"Value must be <= {max_allowed}.")
            if not inclusive_max and v_cast >= max_allowed:
                raise ValueError(f"Value must be < {max_allowed}.")

    except (ValueError, TypeError) as e:
        raise ValueError(
            f"Could not process parameter '{param_name}' with value '{value}'.\n"
            f"Reason: {e}"
        ) from e

    return v_cast
