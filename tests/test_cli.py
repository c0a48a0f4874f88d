# -*- coding: utf-8 -*-
#  Copyright (c) 2020 - 2025 Ricardo Bartels. All rights reserved.
#
#  vcenter-inventory.py
#
#  This work is licensed under the terms of the MIT license.
#  For a copy, see file LICENSE.txt included in this
#  repository or visit: <https://opensource.org/licenses/MIT>.

import os

import pytest

from vinventory.common.cli_parser import parse_command_line
from vinventory.config import default_config_file_path
from vinventory.config.file_output import ConfigFileOutput
from vinventory import __version__, __version_date__


class TestCommandLine:

    def test_defaults(self):
        args = parse_command_line(arguments=[])

        assert args.config_files == list()
        assert args.generate_config is False
        assert args.log_level is None
        assert args.reports is None
        assert args.output_directory is None

    def test_overrides(self):
        args = parse_command_line(arguments=["-l", "DEBUG2", "-r", "vm, host_network", "-o", "/tmp/reports"])

        assert args.log_level == "DEBUG2"
        assert args.reports == ["vm", "host_network"]
        assert args.output_directory == "/tmp/reports"

    def test_relative_config_path(self):
        args = parse_command_line(arguments=["-c", "my-settings.ini", default_config_file_path])

        assert args.config_files == [
            os.path.realpath(os.path.join(os.getcwd(), "my-settings.ini")),
            default_config_file_path
        ]

    @pytest.mark.parametrize("arguments", [
        ["-r", "vm,datastore"],
        ["-l", "TRACE"],
    ])
    def test_invalid_arguments(self, arguments):
        with pytest.raises(SystemExit):
            parse_command_line(arguments=arguments)


class TestConfigFileOutput:

    def test_ini(self, tmp_path, config_parser):
        output_file = str(tmp_path / "settings.ini")

        assert ConfigFileOutput(output_file).write() is True

        with open(output_file) as fp:
            content = fp.read()

        assert "[common]" in content
        assert "[report]" in content
        assert "[source/my-vcenter-example]" in content
        assert ";output_directory = reports" in content
        assert ";host_network_fail_fast = true" in content
        assert content.rstrip().endswith(";EOF")

    def test_yaml(self, config_parser):
        lines = ConfigFileOutput("settings.yaml").render()

        assert lines[0] == "### Welcome to the vCenter Inventory configuration file."
        assert lines[2] == f"### Version: {__version__} ({__version_date__})"
        assert lines[3] == ""
        assert "report:" in lines
        assert "source:" in lines
        assert "  my-vcenter-example:" in lines
        assert "  #output_directory: reports" in lines

    def test_existing_file_is_not_overwritten(self, tmp_path, config_parser):
        output_file = tmp_path / "settings.ini"
        output_file.write_text("keep me")

        assert ConfigFileOutput(str(output_file)).write() is False
        assert output_file.read_text() == "keep me"

    def test_unknown_file_type(self, tmp_path, config_parser):
        output_file = tmp_path / "settings.toml"

        assert ConfigFileOutput(str(output_file)).write() is False
        assert not output_file.exists()
