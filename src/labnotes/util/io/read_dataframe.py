import pandas as pd

import os
import warnings

def read_dataframe(source, index_column=None, parse_dates=None):
    """
    Read a table from a file path or DataFrame.

    Handles .csv, .tsv, .json and .xlsx/.xls files. A spurious 'Unnamed: 0'
    column (written by `df.to_csv()` without `index=False`) is dropped, or
    used as the index if `index_column` is requested but missing.

    Parameters
    ----------
    source : pandas.DataFrame or str or os.PathLike
        A pandas DataFrame or the path to the file to read.
    index_column : str, optional
        Column to use as the DataFrame index.
    parse_dates : list of str, optional
        Columns to convert to (UTC) timestamps after reading. Columns that are
        not present are ignored.

    Returns
    -------
    pandas.DataFrame
        A copy of the table.
    """

    # 1. Handle different source types (path vs. DataFrame)
    if isinstance(source, (str, os.PathLike)):
        path = os.fspath(source)
        ext = path.split(".")[-1].strip().lower()
        try:
            if ext in ["xlsx", "xls"]:
                df = pd.read_excel(path)
            elif ext == "csv":
                df = pd.read_csv(path)
            elif ext == "tsv":
                df = pd.read_csv(path, sep="\t")
            elif ext == "json":
                df = pd.read_json(path)
            else:
                df = pd.read_csv(path, sep=None, engine="python")
        except FileNotFoundError:
            raise ValueError(f"File not found at path: {path}")
        except Exception as e:
            raise IOError(f"Error reading file {path}: {e}")

    elif isinstance(source, pd.DataFrame):
        df = source.copy()
    else:
        raise TypeError("`source` must be a file path or pandas DataFrame.")

    # 2. Handle the 'Unnamed: 0' column left by `df.to_csv()` without
    # `index=False`.
    unnamed_col = "Unnamed: 0"
    if unnamed_col in df.columns:

        # If a specific index is requested, assume 'Unnamed: 0' is it.
        if index_column is not None and index_column not in df.columns:
            warnings.warn(f"Renaming column '{unnamed_col}' to '{index_column}'")
            df = df.rename(columns={unnamed_col: index_column})
        else:
            # A spurious index is an integer column with values 0, 1, 2...
            col_data = df[unnamed_col]
            is_spurious = pd.api.types.is_integer_dtype(col_data) and \
                          col_data.equals(pd.RangeIndex(start=0, stop=len(df)).to_series())
            if is_spurious:
                df = df.drop(columns=unnamed_col)

    # 3. Parse timestamp columns as UTC
    if parse_dates is not None:
        for c in parse_dates:
            if c in df.columns:
                df[c] = pd.to_datetime(df[c], utc=True)

    # 4. Set the final index if requested
    if index_column is not None:
        if index_column in df.columns:
            df = df.set_index(index_column)
        elif df.index.name != index_column:
            raise ValueError(f"Column '{index_column}' not found in the DataFrame.")

    return df
