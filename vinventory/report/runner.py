# -*- coding: utf-8 -*-
#  Copyright (c) 2020 - 2025 Ricardo Bartels. All rights reserved.
#
#  vcenter-inventory.py
#
#  This work is licensed under the terms of the MIT license.
#  For a copy, see file LICENSE.txt included in this
#  repository or visit: <https://opensource.org/licenses/MIT>.

from datetime import datetime

from vinventory.common.logging import get_logger
from vinventory.common.misc import get_relative_time
from vinventory.inventory.errors import InventoryError
from vinventory.inventory.walker import Deadline
from vinventory.report import valid_report_names
from vinventory.report.reports import get_report_class
from vinventory.report.writer import ReportWriter

log = get_logger()


class ReportResult:

    def __init__(self, name, file_path=None, row_count=0, skipped=0, failed_endpoints=None, error=None):
        self.name = name
        self.file_path = file_path
        self.row_count = row_count
        self.skipped = skipped
        self.failed_endpoints = failed_endpoints or list()
        self.error = error

    @property
    def successful(self):
        return self.error is None


class ReportRunner:
    """
    Generates the selected reports for a list of endpoints one after another.

    Every report gets its own generation timestamp and deadline. A failing report
    is logged and not written, the remaining reports are still generated.
    """

    def __init__(self, endpoints, settings=None, writer=None):
        """
        Parameters
        ----------
        endpoints: list
            connected endpoints (source handlers)
        settings: ConfigOptions
            parsed 'report' config section
        writer: ReportWriter
            writer for the report files, defaults to a writer for the configured output directory
        """

        self.endpoints = list(endpoints or list())
        self.settings = settings

        if writer is None:
            writer = ReportWriter(output_directory=getattr(settings, "output_directory", None) or "reports",
                                  timestamp_format=getattr(settings, "timestamp_format", None))

        self.writer = writer

    def run_report(self, name):

        report = get_report_class(name)(self.settings)

        generated_at = datetime.now()
        deadline = Deadline(getattr(self.settings, "report_timeout", None))

        log.info(f"Starting report '{name}'")

        try:
            rows = report.generate(self.endpoints, generated_at=generated_at, deadline=deadline)
        except InventoryError as e:
            log.error(f"Report '{name}' aborted: {e}")
            return ReportResult(name, error=e, failed_endpoints=report.failed_endpoints)

        try:
            file_path = self.writer.write(report.name, report.columns, rows, generated_at)
        except OSError as e:
            log.error(f"Unable to write report '{name}': {e}")
            return ReportResult(name, error=e, failed_endpoints=report.failed_endpoints)

        log.info(f"Report '{name}' finished after {get_relative_time(datetime.now() - generated_at)}")

        return ReportResult(name, file_path=file_path, row_count=len(rows), skipped=len(report.skipped),
                            failed_endpoints=report.failed_endpoints)

    def run(self, report_names=None):
        """
        Generate reports in the order of 'valid_report_names'.

        Parameters
        ----------
        report_names: list
            names of the reports to generate, defaults to all reports

        Returns
        -------
        list: of ReportResult
        """

        if report_names is None:
            report_names = valid_report_names

        results = list()
        for name in [x for x in valid_report_names if x in report_names]:
            results.append(self.run_report(name))

        return results

# EOF
