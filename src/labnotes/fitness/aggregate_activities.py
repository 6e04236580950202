from labnotes.util.dataframe import check_columns

import pandas as pd

def aggregate_activities(activities_df,
                         freq="W",
                         value="distance_km",
                         by="type",
                         agg="sum",
                         rolling=None):
    """
    Aggregate an activity value over calendar periods.

    Parameters
    ----------
    activities_df : pandas.DataFrame
        records with a start_date column
    freq : str, optional
        pandas offset alias for the period ("D", "W", "MS", ...)
    value : str, optional
        column to aggregate
    by : str, optional
        column to split on (one output column per category). None gives a
        single column named after `value`.
    agg : str, optional
        aggregation ("sum", "count", "mean", "max", ...)
    rolling : int, optional
        if given, smooth each column with a trailing rolling mean over this
        many periods

    Returns
    -------
    pandas.DataFrame
        indexed by period label (week end for "W", month start for "MS"),
        one column per category. Periods with no activity are 0 for "sum"
        and "count", NaN otherwise.
    """

    required = ["start_date", value]
    if by is not None:
        required.append(by)
    check_columns(activities_df, required, df_name="activities_df")

    grouper = pd.Grouper(key="start_date", freq=freq)
    if by is None:
        table = activities_df.groupby(grouper)[value].agg(agg).to_frame(value)
    else:
        table = activities_df.groupby([grouper, by])[value].agg(agg).unstack(by)
        table.columns.name = by

    # Fill in periods with no activity
    table = table.asfreq(freq)
    if agg in ["sum", "count"]:
        table = table.fillna(0)

    if rolling is not None:
        table = table.rolling(int(rolling), min_periods=1).mean()

    return table


def commute_share(activities_df, freq="W", value="distance_km"):
    """
    Fraction of each period's total `value` that was commuting.

    Returns
    -------
    pandas.Series
        indexed by period label. NaN for periods with nothing recorded.
    """

    check_columns(activities_df, ["start_date", "commute", value],
                  df_name="activities_df")

    df = activities_df.loc[:, ["start_date", "commute", value]].copy()
    # Commuting part of the value, 0 otherwise
    df["_commute_value"] = df[value].where(df["commute"].astype(bool), 0.0)

    grouped = df.groupby(pd.Grouper(key="start_date", freq=freq))[[value, "_commute_value"]].sum()
    grouped = grouped.asfreq(freq, fill_value=0)

    share = grouped["_commute_value"] / grouped[value].where(grouped[value] > 0)
    share.name = "commute_share"

    return share
