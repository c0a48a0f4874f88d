# -*- coding: utf-8 -*-
#  Copyright (c) 2020 - 2025 Ricardo Bartels. All rights reserved.
#
#  vcenter-inventory.py
#
#  This work is licensed under the terms of the MIT license.
#  For a copy, see file LICENSE.txt included in this
#  repository or visit: <https://opensource.org/licenses/MIT>.

# columns every row gets stamped with by the inventory walker
context_columns = ["Endpoint", "Datacenter", "Cluster"]
generated_at_column = "GeneratedAt"


def new_row(columns, data=None):
    """
    create a report row which contains every column of 'columns'. Columns
    without data are present with value None.

    Parameters
    ----------
    columns: list
        all column names of the report in order
    data: dict
        column values to set

    Returns
    -------
    dict: the new row
    """

    row = dict.fromkeys(columns)

    for column, value in (data or dict()).items():
        if column not in row:
            raise KeyError(f"Column '{column}' is not part of this report")
        row[column] = value

    return row


def stamp_row(row, context, generated_at):
    """
    add ancestor context (endpoint, datacenter, cluster) and generation time to a row
    """

    for column in context_columns:
        if column in row:
            row[column] = context.get(column)

    if generated_at_column in row:
        row[generated_at_column] = generated_at

    return row

# EOF
