
def check_columns(df, required_columns, df_name="dataframe"):
    """
    Check that a DataFrame contains all required columns.

    Parameters
    ----------
    df : pandas.DataFrame
        The DataFrame to check.
    required_columns : list of str
        Column names that must be present.
    df_name : str, optional
        Name used for the table in the error message.

    Raises
    ------
    ValueError
        If any of the required columns are missing. The message lists them.
    """

    required_set = set(required_columns)
    seen_set = set(df.columns)
    if not required_set.issubset(seen_set):
        missing = sorted(required_set - seen_set)
        err = f"Not all required columns seen in {df_name}. Missing columns:\n"
        for c in missing:
            err += f"    {c}\n"
        err += "\n"
        raise ValueError(err)
