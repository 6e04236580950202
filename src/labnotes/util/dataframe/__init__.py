
from .check_columns import (
    check_columns
)

from .add_group_columns import (
    add_group_columns
)
