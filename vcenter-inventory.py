#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#  Copyright (c) 2020 - 2025 Ricardo Bartels. All rights reserved.
#
#  vcenter-inventory.py
#
#  This work is licensed under the terms of the MIT license.
#  For a copy, see file LICENSE.txt included in this
#  repository or visit: <https://opensource.org/licenses/MIT>.

self_description = """
Write CSV inventory reports of vCenter and ESXi hosts
"""


from datetime import datetime

from vinventory.common.misc import grab, get_relative_time, do_error_exit
from vinventory.common.cli_parser import parse_command_line
from vinventory.common.logging import setup_logging
from vinventory.sources import instantiate_sources
from vinventory.config.parser import ConfigParser
from vinventory.common.config import CommonConfig
from vinventory.config.file_output import ConfigFileOutput
from vinventory.report.config import ReportConfig
from vinventory.report.runner import ReportRunner
from vinventory import __version__, __version_date__, __description__


def main():

    start_time = datetime.now()

    # parse command line
    args = parse_command_line(self_description=self_description)

    # write out default config file and exit if "generate_config" is defined
    if args.generate_config is True:
        config_file = args.config_files[0] if len(args.config_files) > 0 else None
        if ConfigFileOutput(config_file).write() is False:
            exit(1)
        exit(0)

    # parse config files and environment variables
    config_parse_handler = ConfigParser()
    config_parse_handler.add_config_file_list(args.config_files)
    config_parse_handler.read_config()

    # read common config
    common_config = CommonConfig().parse(do_log=False)

    # cli option overwrites config file
    log_level = grab(args, "log_level", fallback=common_config.log_level)

    log_file = None
    if common_config.log_to_file is True:
        log_file = common_config.log_file

    # setup logging
    log = setup_logging(log_level, log_file)

    # now we are ready to go
    log.info(f"Starting {__description__} v{__version__} ({__version_date__})")
    for config_file in config_parse_handler.file_list:
        log.debug(f"Using config file: {config_file}")

    # exit if any parser errors occurred here
    config_parse_handler.log_end_exit_on_errors()

    # just to print config options to log/console
    CommonConfig().parse()

    report_config = ReportConfig().parse()

    # cli options overwrite config file
    if args.reports is not None:
        report_config.reports = args.reports
    if args.output_directory is not None:
        report_config.output_directory = args.output_directory

    # instantiate source handlers and connect to endpoints
    log.info("Initializing endpoints")
    endpoints = instantiate_sources()

    # all endpoints are unavailable
    if len(endpoints) == 0:
        do_error_exit("No working endpoints found. Exit.")

    results = ReportRunner(endpoints, settings=report_config).run(report_config.reports)

    for endpoint in endpoints:
        # closing all open connections
        endpoint.finish()

    failed_reports = [x.name for x in results if x.successful is False]

    if len(failed_reports) > 0:
        log.error(f"Failed to generate report(s): {', '.join(failed_reports)}")

    # finish
    log.info("Completed vCenter Inventory in %s" % get_relative_time(datetime.now() - start_time))

    if len(failed_reports) > 0:
        exit(1)


if __name__ == "__main__":
    main()

# EOF
