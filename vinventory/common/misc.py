# -*- coding: utf-8 -*-
#  Copyright (c) 2020 - 2025 Ricardo Bartels. All rights reserved.
#
#  vcenter-inventory.py
#
#  This work is licensed under the terms of the MIT license.
#  For a copy, see file LICENSE.txt included in this
#  repository or visit: <https://opensource.org/licenses/MIT>.

import re
import sys
from pprint import pformat

# splits on commas which are not enclosed in quotes
quoted_split_regex = re.compile(r",(?=(?:[^\"']*[\"'][^\"']*[\"'])*[^\"']*$)")

time_periods = [
    ("day", 60 * 60 * 24),
    ("hour", 60 * 60),
    ("minute", 60),
    ("second", 1)
]


def grab(structure=None, path=None, separator=".", fallback=None):
    """
        get data from a complex object/json structure with a
        "." separated path information. If a part of a path
        is not present then this function returns the
        value of fallback (default: "None").

        Works on dicts (keys are compared case-insensitive), lists and
        plain objects like pyVmomi data objects. Properties which are
        not populated on a pyVmomi object are treated like missing ones.

        example path:
            "config.network.pnic.0.device"

        Parameters
        ----------
        structure: dict, list, object
            an object structure to extract data from
        path: str
            nested path to extract
        separator: str
            path separator to use. Helpful if a path element
            contains the default (.) separator.
        fallback: dict, list, str, int
            data to return if no match was found

        Returns
        -------
        str, dict, list
            the desired path element if found, otherwise fallback
    """

    if structure is None or path is None:
        return fallback

    data = structure
    for attribute in path.split(separator):

        # noinspection PyBroadException
        try:
            if isinstance(data, dict):
                data = next((v for k, v in data.items() if f"{k}".lower() == attribute.lower()), None)
            elif isinstance(data, (list, tuple)):
                data = data[int(attribute)]
            else:
                data = getattr(data, attribute)
        except Exception:
            return fallback

        if data is None:
            return fallback

    return data


def dump(obj):
    """
    return a readable multi line representation of a query result or pyVmomi object
    """

    if isinstance(obj, (dict, list, tuple)):
        return pformat(obj, width=120)

    return "\n".join(f"{obj.__class__.__name__}.{x} = {getattr(obj, x, None)}"
                     for x in dir(obj) if not x.startswith("_"))


def do_error_exit(log_text):
    """
    print an error to stderr and exit with return code 1
    """

    print(f"ERROR: {log_text}", file=sys.stderr)
    exit(1)


def get_relative_time(delta):
    """
    return a human-readable string of a time delta, like "1 hour, 2 minutes, 5 seconds"

    Parameters
    ----------
    delta: datetime.timedelta
        time delta to format

    Returns
    -------
    str: formatted string of time delta
    """

    remaining = int(delta.total_seconds())
    parts = list()

    for period_name, period_seconds in time_periods:
        period_value, remaining = divmod(remaining, period_seconds)
        if period_value > 0:
            parts.append(f"{period_value} {period_name}{plural(period_value)}")

    return ", ".join(parts) or "less than a second"


def get_string_or_none(text=None):
    """
    return stripped text or None if text is None or empty
    """

    if text is None:
        return None

    text = f"{text}".strip()

    return text if len(text) > 0 else None


def plural(length):
    """
    suffix for a count: 1 item, 2 items, 0 items
    """

    return "" if length == 1 else "s"


def quoted_split(string_to_split):
    """
        Splits a comma separated string into a list. Quoted parts
        can contain commas as well. Empty parts are dropped.

        Parameters
        ----------
        string_to_split: str
            the string to split

        Returns
        -------
        list
            of separated string parts
    """

    if not isinstance(string_to_split, str):
        return list()

    parts = [x.strip(' "\'') for x in quoted_split_regex.split(string_to_split)]

    return [x for x in parts if len(x) > 0]

# EOF
