# -*- coding: utf-8 -*-
#  Copyright (c) 2020 - 2025 Ricardo Bartels. All rights reserved.
#
#  vcenter-inventory.py
#
#  This work is licensed under the terms of the MIT license.
#  For a copy, see file LICENSE.txt included in this
#  repository or visit: <https://opensource.org/licenses/MIT>.

import logging

import pytest

from vinventory.common.logging import logger_name
from vinventory.config.option import ConfigOption
from vinventory.report import valid_report_names
from vinventory.report.config import ReportConfig
from vinventory.sources.vmware.config import VMWareConfig


def use_content(parser, content):
    parser.content = content
    parser.parsing_finished = True


class TestConfigOption:

    def test_bool_values(self):
        option = ConfigOption("enabled", bool)

        option.set_value("yes")
        assert option.value is True

        option.set_value("off")
        assert option.value is False
        assert option.parsing_failed is False

        option.set_value("maybe")
        assert option.parsing_failed is True

    def test_int_value(self):
        option = ConfigOption("port", int, default_value=443)
        assert option.value == 443

        option.set_value("8443")
        assert option.value == 8443

        option.set_value("abc")
        assert option.parsing_failed is True
        assert option.value == 8443

    def test_list_value(self):
        option = ConfigOption("reports", list)

        option.set_value("vm, host")
        assert option.value == ["vm", "host"]

        option.set_value(["vm_network", " "])
        assert option.value == ["vm_network"]

    def test_choices(self):
        option = ConfigOption("reports", list, choices=valid_report_names)

        option.set_value("vm, everything")
        assert option.parsing_failed is True
        assert option.value is None

    def test_sensitive_value_is_masked(self):
        option = ConfigOption("password", str, sensitive=True)
        option.set_value("super-secret")

        assert option.value == "super-secret"
        assert option.sensitive_value == "sup***"

    def test_unsupported_value_type(self):
        with pytest.raises(ValueError):
            ConfigOption("ratio", float)


class TestReportConfig:

    def test_defaults(self, config_parser):
        use_content(config_parser, dict())

        settings = ReportConfig().parse(do_log=False)

        assert settings.reports == valid_report_names
        assert settings.output_directory == "reports"
        assert settings.max_folder_depth == 64
        assert settings.report_timeout == 0
        assert settings.max_workers == 1
        assert settings.portgroup_index_per_endpoint is True
        assert settings.host_network_fail_fast is True

    def test_values_from_content(self, config_parser):
        use_content(config_parser, {
            "report": {
                "reports": "vm, host_network",
                "max_workers": "4",
                "host_network_fail_fast": "false"
            }
        })

        settings = ReportConfig().parse(do_log=False)

        assert settings.reports == ["vm", "host_network"]
        assert settings.max_workers == 4
        assert settings.host_network_fail_fast is False

    def test_undefined_option_returns_none(self, config_parser):
        use_content(config_parser, dict())

        settings = ReportConfig().parse(do_log=False)

        assert settings.does_not_exist is None

    def test_unknown_option_is_ignored(self, config_parser, caplog):
        use_content(config_parser, {"report": {"Max_Workers": "2", "max_worker": "8"}})

        with caplog.at_level(logging.WARNING, logger=logger_name):
            settings = ReportConfig().parse()

        assert settings.max_workers == 2
        assert settings.max_worker is None
        assert "Found unknown config option 'max_worker' for 'report' config" in caplog.messages

    @pytest.mark.parametrize("report_config", [
        {"max_workers": "0"},
        {"max_folder_depth": "0"},
        {"report_timeout": "-1"},
        {"timestamp_format": None, "reports": "vm, all"},
    ])
    def test_invalid_values_exit(self, config_parser, report_config):
        use_content(config_parser, {"report": report_config})

        with pytest.raises(SystemExit):
            ReportConfig().parse(do_log=False)


class TestVMWareConfig:

    @staticmethod
    def parse(source_name="vc01"):
        handler = VMWareConfig()
        handler.source_name = source_name
        return handler.parse(do_log=False)

    def test_filters_are_compiled(self, config_parser):
        use_content(config_parser, {
            "source": {
                "vc01": {
                    "type": "vmware",
                    "host_fqdn": "vcenter.example.com",
                    "username": "inventory",
                    "password": "secret",
                    "vm_exclude_filter": "^backup.*"
                }
            }
        })

        settings = self.parse()

        assert settings.host_fqdn == "vcenter.example.com"
        assert settings.port == 443
        assert settings.enabled is True
        assert settings.validate_tls_certs is False
        assert settings.vm_exclude_filter.match("backup-01") is not None
        assert settings.vm_exclude_filter.match("web-01") is None
        assert settings.vm_include_filter is None

    def test_missing_mandatory_option_exits(self, config_parser):
        use_content(config_parser, {
            "source": {"vc01": {"type": "vmware", "host_fqdn": "vcenter.example.com", "username": "inventory"}}
        })

        with pytest.raises(SystemExit):
            self.parse()

    def test_proxy_needs_host_and_port(self, config_parser):
        use_content(config_parser, {
            "source": {
                "vc01": {
                    "type": "vmware",
                    "host_fqdn": "vcenter.example.com",
                    "username": "inventory",
                    "password": "secret",
                    "proxy_host": "10.10.1.10"
                }
            }
        })

        with pytest.raises(SystemExit):
            self.parse()

    def test_invalid_regex_exits(self, config_parser):
        use_content(config_parser, {
            "source": {
                "vc01": {
                    "type": "vmware",
                    "host_fqdn": "vcenter.example.com",
                    "username": "inventory",
                    "password": "secret",
                    "host_include_filter": "esx[0-9"
                }
            }
        })

        with pytest.raises(SystemExit):
            self.parse()


class TestConfigParser:

    def test_env_vars(self, config_parser, monkeypatch):
        monkeypatch.setenv("VINV_REPORT_MAX_WORKERS", "3")
        monkeypatch.setenv("VINV_SOURCE_1_NAME", "vc01")
        monkeypatch.setenv("VINV_SOURCE_1_HOST_FQDN", "vcenter.example.com")
        monkeypatch.setenv("VINV_SOURCE_1_TYPE", "vmware")

        config_parser.read_config()

        assert config_parser.parsing_finished is True
        assert config_parser.content["report"]["max_workers"] == "3"
        assert config_parser.content["source"]["vc01"] == {"host_fqdn": "vcenter.example.com", "type": "vmware"}

    def test_yaml_file_with_sources_alias(self, config_parser, tmp_path):
        config_file = tmp_path / "settings.yaml"
        config_file.write_text(
            "report:\n"
            "  reports:\n"
            "    - vm\n"
            "    - host\n"
            "sources:\n"
            "  vc01:\n"
            "    type: vmware\n"
            "    host_fqdn: vcenter.example.com\n"
            "    port: 8443\n"
        )

        config_parser.add_config_file(str(config_file))
        config_parser.read_config()

        assert config_parser.config_errors == list()
        assert config_parser.content["report"]["reports"] == ["vm", "host"]
        assert config_parser.content["source"]["vc01"]["port"] == 8443

    def test_ini_file(self, config_parser, tmp_path):
        config_file = tmp_path / "settings.ini"
        config_file.write_text(
            "[report]\n"
            "reports = vm, license\n"
            "\n"
            "[source/vc01]\n"
            "type = vmware\n"
            "host_fqdn = vcenter.example.com\n"
        )

        config_parser.add_config_file(str(config_file))
        config_parser.read_config()

        assert config_parser.config_errors == list()
        assert config_parser.content["report"]["reports"] == "vm, license"
        assert config_parser.content["source"]["vc01"]["host_fqdn"] == "vcenter.example.com"

    def test_missing_file_is_an_error(self, config_parser, tmp_path):
        config_parser.add_config_file(str(tmp_path / "missing.ini"))
        config_parser.read_config()

        assert len(config_parser.config_errors) == 1

        with pytest.raises(SystemExit):
            config_parser.log_end_exit_on_errors()
