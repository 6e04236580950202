import yaml
import re

# Strings that are valid scientific notation (PyYAML leaves "1e-3" as str)
_SCI_NOTATION = re.compile(r'^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)$')

def _normalize_types(node):
    """
    Recursively convert scientific-notation strings to numbers and whole
    floats (12.0) to ints.
    """

    # Recurse through lists and dictionaries first.
    if isinstance(node, dict):
        return {k: _normalize_types(v) for k, v in node.items()}
    if isinstance(node, list):
        return [_normalize_types(elem) for elem in node]

    # 1. Strings: convert scientific notation to float, leave the rest.
    if isinstance(node, str):
        if _SCI_NOTATION.match(node):
            node = float(node)
        else:
            return node

    # 2. Floats (original or just converted): whole numbers become ints.
    if isinstance(node, float):
        if node.is_integer():
            return int(node)
        return node

    return node


def read_yaml(cf: str | dict | None,
              override_keys: dict | None=None,
              allowed_keys=None) -> dict:
    """
    Load a YAML configuration (run settings or prior overrides).

    Parameters
    ----------
    cf : str or dict or None
        Path to the YAML file. A dict is passed through unchanged (assume it
        was already read); None gives an empty dict.
    override_keys : dict, optional
        Values that replace keys already present in the configuration.
    allowed_keys : iterable, optional
        If given, every key in the configuration must be in this set.

    Returns
    -------
    config : dict
        A dictionary containing the configuration.

    Raises
    ------
    ValueError
        If the file is missing or cannot be parsed, if an override key is not
        already in the configuration, or if a key is not allowed.
    """

    if cf is None:
        config = {}
    elif issubclass(type(cf), dict):
        config = cf
    else:
        try:
            with open(cf, 'r') as f:
                config = yaml.safe_load(f)
        except FileNotFoundError:
            raise ValueError(f"Configuration file not found at '{cf}'")
        except yaml.YAMLError as e:
            raise ValueError(f"Error parsing YAML file '{cf}': {e}") from e

        if config is None:
            config = {}
        if not isinstance(config, dict):
            raise ValueError(f"YAML file '{cf}' must hold a mapping of keys to values.")

        # clean up floats and ints
        config = _normalize_types(config)

    # Replace keys from the configuration with keyword arguments passed in.
    if override_keys is not None:
        for k in override_keys:
            if k not in config:
                err = f"override_keys has a key '{k}' that was not in configuration."
                raise ValueError(err)
            config[k] = override_keys[k]

    # Reject keys the caller does not know how to use
    if allowed_keys is not None:
        unknown = set(config) - set(allowed_keys)
        if unknown:
            raise ValueError(
                f"Unrecognized configuration keys: {sorted(unknown)}. "
                f"Allowed keys are: {sorted(allowed_keys)}"
            )

    return config
