# -*- coding: utf-8 -*-
#  Copyright (c) 2020 - 2025 Ricardo Bartels. All rights reserved.
#
#  vcenter-inventory.py
#
#  This work is licensed under the terms of the MIT license.
#  For a copy, see file LICENSE.txt included in this
#  repository or visit: <https://opensource.org/licenses/MIT>.

from vinventory.config import source_config_section_name
from vinventory.config.base import ConfigBase
from vinventory.config.option import ConfigOption
from vinventory.config.group import ConfigOptionGroup
from vinventory.sources.common.config import endpoint_enabled_option, endpoint_type_option, compile_filter_option
from vinventory.common.logging import get_logger

log = get_logger()


class VMWareConfig(ConfigBase):
    """Controls the parameters of a defined vCenter or ESXi host endpoint. The string past the slash
    will be used as the endpoint name in all reports. Endpoints can be defined multiple times.
    """

    section_name = source_config_section_name
    source_name = None
    source_name_example = "my-vcenter-example"

    def __init__(self):
        self.options = [
            endpoint_enabled_option(),

            endpoint_type_option("vmware"),

            ConfigOption("host_fqdn",
                         str,
                         description="host name / IP address of the vCenter or standalone ESXi host",
                         config_example="vcenter.example.com",
                         mandatory=True),

            ConfigOption("port",
                         int,
                         description="HTTPS port of the SDK endpoint",
                         default_value=443),

            ConfigOption("username",
                         str,
                         description="username to use to log into vCenter. Read only permissions are sufficient.",
                         config_example="inventory-reader",
                         mandatory=True),

            ConfigOption("password",
                         str,
                         description="password of the user defined in 'username'",
                         config_example="super-secret",
                         sensitive=True,
                         mandatory=True),

            ConfigOption("validate_tls_certs",
                         bool,
                         description="""Verify the TLS certificate presented by the endpoint.
                         Should be enabled whenever the endpoint serves a certificate signed
                         by a trusted CA.""",
                         default_value=False),

            ConfigOption("proxy_host",
                         str,
                         description="""host name or IP address of an HTTP proxy used to reach the endpoint.
                         SOCKS proxies are not supported.""",
                         config_example="10.10.1.10"),

            ConfigOption("proxy_port",
                         int,
                         description="""port of the HTTP proxy, needs to be set together with 'proxy_host'""",
                         config_example=3128),

            ConfigOptionGroup(title="filter",
                              description="""filters can be used to include/exclude certain objects from
                              the reports. Include filters are checked first and exclude filters after.
                              An object name has to pass both filters to be reported.
                              Unset filters are ignored. Each filter is a regular expression which has to
                              match from the start of the name, use '|' to combine expressions.
                              """,
                              config_example="""Example (skip all VMs containing "replica"
                              or starting with "backup"): vm_exclude_filter = .*replica.*|^backup.*""",
                              options=[
                                  ConfigOption("cluster_exclude_filter",
                                               str,
                                               description="""If a cluster is excluded then ALL VMs and HOSTS
                                               of this cluster are left out of the reports. The filter is
                                               matched against "Cluster-name" and "Datacenter-name/Cluster-name"
                                               """),
                                  ConfigOption("cluster_include_filter", str),
                                  ConfigOption("host_exclude_filter", str),
                                  ConfigOption("host_include_filter", str),
                                  ConfigOption("vm_exclude_filter",
                                               str, description="VMs and templates are filtered by name"),
                                  ConfigOption("vm_include_filter", str)
                              ])
        ]

        super().__init__()

    def validate_options(self):

        for option in self.options:

            if option.value is None:
                continue

            if option.key.endswith("_filter"):

                if compile_filter_option(option, self.source_name) is False:
                    self.set_validation_failed()

                continue

            if option.key == "port" and not 0 < option.value < 65536:
                log.error(f"Config option 'port' for '{self.source_name}' is not a valid TCP port")
                self.set_validation_failed()

        proxy_host = self.get_option_by_name("proxy_host")
        proxy_port = self.get_option_by_name("proxy_port")

        if proxy_host is not None and proxy_port is not None and \
                [proxy_host.value, proxy_port.value].count(None) == 1:
            log.error(f"Config options 'proxy_host' and 'proxy_port' for '{self.source_name}' "
                      f"need to be defined together")
            self.set_validation_failed()
