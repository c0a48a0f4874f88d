# -*- coding: utf-8 -*-
#  Copyright (c) 2020 - 2025 Ricardo Bartels. All rights reserved.
#
#  vcenter-inventory.py
#
#  This work is licensed under the terms of the MIT license.
#  For a copy, see file LICENSE.txt included in this
#  repository or visit: <https://opensource.org/licenses/MIT>.

import csv
import os

from vinventory.common.logging import get_logger
from vinventory.common.misc import plural
from vinventory.report import default_timestamp_format

log = get_logger()


class ReportWriter:
    """
    writes report rows to CSV files named '<report>_<timestamp>.csv'
    """

    def __init__(self, output_directory="reports", timestamp_format=default_timestamp_format):
        self.output_directory = output_directory
        self.timestamp_format = timestamp_format or default_timestamp_format

    def get_file_path(self, report_name, generated_at):
        return os.path.join(self.output_directory,
                            f"{report_name}_{generated_at.strftime(self.timestamp_format)}.csv")

    def write(self, report_name, columns, rows, generated_at):
        """
        Write all rows of a report. The header contains all columns in the given
        order. An existing file with the same name is overwritten.

        Parameters
        ----------
        report_name: str
            name of the report
        columns: list
            column names in output order
        rows: list
            of dicts, every row has to contain only known columns
        generated_at: datetime
            timestamp used in the file name

        Returns
        -------
        str: path of the written file

        Raises
        ------
        OSError: if the output directory or file can't be written
        """

        os.makedirs(self.output_directory, exist_ok=True)

        file_path = self.get_file_path(report_name, generated_at)

        with open(file_path, "w", newline="", encoding="utf-8") as fp:
            writer = csv.DictWriter(fp, fieldnames=columns, restval="", extrasaction="raise")
            writer.writeheader()
            writer.writerows(rows)

        log.info(f"Report '{report_name}' with {len(rows)} row{plural(len(rows))} written to '{file_path}'")

        return file_path

# EOF
