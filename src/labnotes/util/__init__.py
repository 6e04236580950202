"""
Shared helpers: file reading, configuration, dataframe checks, argument
validation and command line construction.
"""

from . import io
from . import dataframe
from . import validation
from . import cli

from .io import (
    read_dataframe,
    read_yaml
)

from .dataframe import (
    check_columns,
    add_group_columns
)

from .validation import (
    check_number
)

from .cli import (
    generalized_main
)
