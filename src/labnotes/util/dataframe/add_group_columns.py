import pandas as pd

def add_group_columns(target_df,
                      group_cols,
                      group_name):
    """
    Add an integer `{group_name}` column indexing the unique combinations of
    `group_cols`.

    Groups are numbered in sorted (row-major) order so the index is
    reproducible for the same set of values regardless of row order. This is
    how wells and time points are mapped onto tensor axes.

    Parameters
    ----------
    target_df : pd.DataFrame
        dataframe to update
    group_cols : list or str
        column name(s) to use for the grouping
    group_name : str
        name of column to create

    Returns
    -------
    pd.DataFrame
        copy of target_df with the new column
    """

    if isinstance(group_cols, str):
        group_cols = [group_cols]
    group_cols = list(group_cols)

    target_df = target_df.copy()
    if group_name in target_df.columns:
        target_df = target_df.drop(columns=group_name)

    unique_groups = target_df[group_cols].drop_duplicates().copy()
    sorted_groups = unique_groups.sort_values(by=group_cols).reset_index(drop=True)
    sorted_groups[group_name] = sorted_groups.index

    # Merge preserves left row order
    target_df = target_df.merge(sorted_groups,
                                on=group_cols,
                                how="left",
                                sort=False)
    target_df[group_name] = target_df[group_name].astype(int)

    return target_df
