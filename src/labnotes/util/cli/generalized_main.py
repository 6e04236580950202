import sys
import inspect
import argparse

def generalized_main(fcn,
                     argv=None,
                     manual_arg_defaults=None,
                     manual_arg_types=None,
                     manual_arg_nargs=None):
    """
    Build a command line parser from the signature of `fcn`, parse the
    arguments and call `fcn` with them.

    Parameters without defaults become positional arguments. Parameters with
    defaults become `--flags` typed by their default value (a default of None
    is read as a string). Boolean defaults become switches that flip the
    default.

    Parameters
    ----------
    fcn : callable
        function to run.
    argv : iterable, optional
        arguments to parse. if None, use sys.argv[1:]
    manual_arg_defaults : dict, optional
        argument defaults that differ from the signature. The argument type is
        set to the type of the value specified.
    manual_arg_types : dict, optional
        argument types. Overrides the types inferred from the signature or
        manual_arg_defaults.
    manual_arg_nargs : dict, optional
        argument nargs (e.g. "+").

    Returns
    -------
    object
        whatever `fcn` returns
    """

    # Get command line arguments
    if argv is None:
        argv = sys.argv[1:]

    # Build dicts of manual arg types and defaults if not specified
    if manual_arg_types is None:
        manual_arg_types = {}
    if manual_arg_defaults is None:
        manual_arg_defaults = {}
    if manual_arg_nargs is None:
        manual_arg_nargs = {}

    # Build parser
    parser = argparse.ArgumentParser(prog=fcn.__name__,
                                     description=inspect.getdoc(fcn),
                                     formatter_class=argparse.RawTextHelpFormatter)

    # Build parser arguments using signature of fcn
    param = inspect.signature(fcn).parameters
    for p in param:

        # Grab default and type the default for the parameter. If no default
        # specified, make required.
        if param[p].default is not param[p].empty:
            default = param[p].default
            arg_type = str if default is None else type(default)
            required = False
        else:
            default = None
            arg_type = None
            required = True

        # If the argument is in manual defaults, override what we got from the
        # function signature.
        if p in manual_arg_defaults:
            default = manual_arg_defaults[p]
            arg_type = str if default is None else type(default)
            required = False

        # manual_arg_type takes precedence over any types inferred above.
        if p in manual_arg_types:
            arg_type = manual_arg_types[p]

        # assume nargs is None unless the user overrides explicitly
        nargs = manual_arg_nargs.get(p, None)

        # Add the appropriate argument to the parser. Boolean defaults become
        # switches that flip the default.
        if required:
            parser.add_argument(p, type=arg_type, nargs=nargs)
        else:
            arg_name = f"--{p}"
            if arg_type is bool:
                if default is True:
                    parser.add_argument(arg_name, action="store_false")
                else:
                    parser.add_argument(arg_name, action="store_true")
            else:
                parser.add_argument(arg_name,
                                    type=arg_type,
                                    default=default,
                                    nargs=nargs)

    # Parse args
    args = parser.parse_args(argv)

    # Call function with kwargs
    return fcn(**vars(args))
