
from .read_dataframe import (
    read_dataframe
)

from .read_yaml import (
    read_yaml
)
