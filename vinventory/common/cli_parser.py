# -*- coding: utf-8 -*-
#  Copyright (c) 2020 - 2025 Ricardo Bartels. All rights reserved.
#
#  vcenter-inventory.py
#
#  This work is licensed under the terms of the MIT license.
#  For a copy, see file LICENSE.txt included in this
#  repository or visit: <https://opensource.org/licenses/MIT>.

import os

from argparse import ArgumentParser, RawDescriptionHelpFormatter

from vinventory.common.logging import valid_log_levels
from vinventory.common.misc import quoted_split
from vinventory.config import default_config_file_path
from vinventory.report import valid_report_names
from vinventory import __version__, __version_date__


def parse_command_line(self_description=None, arguments=None):
    """
    parse command line arguments, also add current version and version date to description

    Parameters
    ----------
    self_description: str
        short self-description of this program
    arguments: list
        arguments to parse, defaults to sys.argv

    Returns
    -------
    ArgumentParser object: with parsed command line arguments
    """

    # define command line options
    description = f"{self_description}\nVersion: {__version__} ({__version_date__})"

    parser = ArgumentParser(
        description=description,
        formatter_class=RawDescriptionHelpFormatter)

    parser.add_argument("-c", "--config", default=[], dest="config_files", nargs='+',
                        help=f"points to the config file to read config data from which is not installed "
                             f"under the default path '{default_config_file_path}'",
                        metavar=os.path.basename(default_config_file_path))

    parser.add_argument("-g", "--generate_config", action="store_true",
                        help="generates default config file.")

    parser.add_argument("-l", "--log_level", choices=valid_log_levels,
                        help="set log level (overrides config)")

    parser.add_argument("-r", "--reports",
                        help=f"comma separated list of reports to generate (overrides config). "
                             f"Available reports: {', '.join(valid_report_names)}")

    parser.add_argument("-o", "--output_directory",
                        help="directory to write the CSV reports to (overrides config)")

    args = parser.parse_args(arguments)

    # fix supplied config file path
    fixed_config_files = list()
    for config_file in args.config_files:

        if len(config_file) == 0:
            continue

        if config_file != default_config_file_path and config_file[0] != os.sep:
            config_file = os.path.realpath(os.getcwd() + os.sep + config_file)
        fixed_config_files.append(config_file)

    args.config_files = fixed_config_files

    if args.reports is not None:
        args.reports = quoted_split(args.reports)
        unknown_reports = [x for x in args.reports if x not in valid_report_names]
        if len(unknown_reports) > 0:
            parser.error(f"unknown report(s): {', '.join(unknown_reports)}. "
                         f"Available reports: {', '.join(valid_report_names)}")

    return args

# EOF
