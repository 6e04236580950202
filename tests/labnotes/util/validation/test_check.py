import pytest
import numpy as np
from labnotes.util.validation import check_number

def test_valid_values():
    assert check_number(5, "x") == 5.0
    assert isinstance(check_number(5, "x"), float)
    assert check_number(5.0, "x", cast_type=int) == 5
    assert isinstance(check_number(np.int64(3), "x", cast_type=int), int)

def test_none():
    assert check_number(None, "x", allow_none=True) is None
    with pytest.raises(ValueError, match="cannot be None"):
        check_number(None, "x")

@pytest.mark.parametrize("bad", ["5", b"5", [1], np.array([1, 2])])
def test_not_scalar(bad):
    with pytest.raises(ValueError, match="Could not process"):
        check_number(bad, "x")

def test_whole_number_for_int():
    with pytest.raises(ValueError, match="whole number"):
        check_number(2.5, "x", cast_type=int)

def test_bounds():
    assert check_number(0, "x", min_allowed=0) == 0
    with pytest.raises(ValueError, match=">= 0"):
        check_number(-1, "x", min_allowed=0)
    with pytest.raises(ValueError, match="> 0"):
        check_number(0, "x", min_allowed=0, inclusive_min=False)

    assert check_number(1, "x", max_allowed=1) == 1
    with pytest.raises(ValueError, match="<= 1"):
        check_number(1.5, "x", max_allowed=1)
    with pytest.raises(ValueError, match="< 1"):
        check_number(1, "x", max_allowed=1, inclusive_max=False)
