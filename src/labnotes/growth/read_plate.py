from labnotes.util.io import read_dataframe

import numpy as np
import pandas as pd

def read_plate(source, time_column="time"):
    """
    Read a wide plate-reader table (one row per time point, one column per
    well) and check that it describes a single shared sampling grid.

    Parameters
    ----------
    source : pandas.DataFrame or str
        Table or path to a csv/tsv/xlsx file holding the plate.
    time_column : str, optional
        Name of the column holding measurement times. If the table already
        uses this as its index name, that index is used.

    Returns
    -------
    pandas.DataFrame
        Plate with a float time index named "time" (sorted ascending) and one
        float column per well. Missing measurements are NaN.

    Raises
    ------
    ValueError
        If the time column is missing, there are no well columns, a well
        column is not numeric, or times are non-finite or duplicated.
    """

    # 1. Read and index by time
    plate = read_dataframe(source)

    if time_column in plate.columns:
        plate = plate.set_index(time_column)
    elif plate.index.name != time_column:
        raise ValueError(f"Plate has no time column '{time_column}'.")

    if len(plate.columns) == 0:
        raise ValueError("Plate has no well columns.")

    # 2. Every well column must be numeric (blank cells become NaN)
    bad_wells = []
    for c in plate.columns:
        if not pd.api.types.is_numeric_dtype(plate[c]):
            converted = pd.to_numeric(plate[c], errors="coerce")
            if np.any(pd.isna(converted) & ~pd.isna(plate[c])):
                bad_wells.append(c)
                continue
            plate[c] = converted
    if len(bad_wells) > 0:
        raise ValueError(f"Well columns must be numeric. Bad columns: {bad_wells}")

    # 3. One shared, finite, unique time grid
    times = pd.to_numeric(pd.Series(plate.index), errors="coerce").to_numpy(dtype=float)
    if not np.all(np.isfinite(times)):
        raise ValueError("All times must be finite numbers.")
    if len(np.unique(times)) != len(times):
        raise ValueError("Times must be unique; each well must share one time grid.")

    plate.index = pd.Index(times, name="time")
    plate.columns = [str(c) for c in plate.columns]
    plate = plate.sort_index().astype(float)

    return plate
