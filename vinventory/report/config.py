# -*- coding: utf-8 -*-
#  Copyright (c) 2020 - 2025 Ricardo Bartels. All rights reserved.
#
#  vcenter-inventory.py
#
#  This work is licensed under the terms of the MIT license.
#  For a copy, see file LICENSE.txt included in this
#  repository or visit: <https://opensource.org/licenses/MIT>.

from datetime import datetime

from vinventory.config.option import ConfigOption
from vinventory.config.group import ConfigOptionGroup
from vinventory.config.base import ConfigBase
from vinventory.config import report_config_section_name
from vinventory.common.logging import get_logger
from vinventory.report import valid_report_names, default_timestamp_format

log = get_logger()


class ReportConfig(ConfigBase):
    """Controls which reports are generated and where they are written to
    """

    section_name = report_config_section_name

    def __init__(self):
        self.options = [
            ConfigOption("output_directory",
                         str,
                         description="""directory to write the CSV reports to. Will be created if
                         it doesn't exist. Existing report files with the same name get overwritten.
                         """,
                         default_value="reports"),

            ConfigOption("reports",
                         list,
                         description=f"""comma separated list of reports to generate.
                         Available reports: {', '.join(valid_report_names)}
                         """,
                         default_value=valid_report_names,
                         config_example="vm, host_network, cluster_summary",
                         choices=valid_report_names),

            ConfigOption("timestamp_format",
                         str,
                         description="""strftime format of the timestamp which is added to each
                         report file name: <report>_<timestamp>.csv""",
                         default_value=default_timestamp_format),

            ConfigOptionGroup(title="traversal",
                              description="""options to control how the inventory of each endpoint
                              is walked""",
                              options=[
                                  ConfigOption("max_folder_depth",
                                               int,
                                               description="""maximum number of parent folders to ascend
                                               while resolving a VM folder path. A VM with a deeper
                                               or broken folder chain is skipped.""",
                                               default_value=64),
                                  ConfigOption("report_timeout",
                                               int,
                                               description="""time in seconds a single report is allowed to
                                               take. A report exceeding the timeout is aborted and not
                                               written. 0 disables the timeout.""",
                                               default_value=0),
                                  ConfigOption("max_workers",
                                               int,
                                               description="""number of threads used to process the hosts/VMs
                                               of a cluster in parallel. 1 processes everything sequentially.
                                               """,
                                               default_value=1),
                                  ConfigOption("portgroup_index_per_endpoint",
                                               bool,
                                               description="""build the distributed port group index once per
                                               endpoint. If disabled, the port groups of all endpoints are
                                               queried once and filtered for every host.""",
                                               default_value=True),
                                  ConfigOption("host_network_fail_fast",
                                               bool,
                                               description="""abort the 'host_network' report if the network
                                               configuration of a single host can't be read. If disabled,
                                               such a host is skipped.""",
                                               default_value=True)
                              ])
        ]

        super().__init__()

    def validate_options(self):

        for option in self.options:

            if option.value is None:
                continue

            if option.key == "timestamp_format":
                try:
                    datetime.now().strftime(option.value)
                except ValueError as e:
                    log.error(f"Config option 'timestamp_format' invalid: {e}")
                    self.set_validation_failed()

            if option.key == "max_folder_depth" and option.value < 1:
                log.error("Config option 'max_folder_depth' must be at least 1")
                self.set_validation_failed()

            if option.key == "report_timeout" and option.value < 0:
                log.error("Config option 'report_timeout' can't be negative")
                self.set_validation_failed()

            if option.key == "max_workers" and option.value < 1:
                log.error("Config option 'max_workers' must be at least 1")
                self.set_validation_failed()

            if option.key == "reports" and len(option.value) == 0:
                log.error("Config option 'reports' needs to contain at least one report")
                self.set_validation_failed()
