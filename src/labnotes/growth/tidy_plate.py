from labnotes.util.dataframe import add_group_columns

def tidy_plate(plate_df):
    """
    Reshape a wide plate (time index x well columns) into a long table.

    Parameters
    ----------
    plate_df : pandas.DataFrame
        Plate as returned by `read_plate`.

    Returns
    -------
    pandas.DataFrame
        One row per (time, well) with columns time, well, od, time_idx and
        well_idx. Wells are indexed in sorted order, times ascending.
    """

    long_df = plate_df.reset_index().melt(id_vars="time",
                                          var_name="well",
                                          value_name="od")
    long_df["well"] = long_df["well"].astype(str)

    long_df = add_group_columns(long_df, "well", "well_idx")
    long_df = add_group_columns(long_df, "time", "time_idx")

    long_df = long_df.sort_values(["well_idx", "time_idx"]).reset_index(drop=True)

    return long_df
