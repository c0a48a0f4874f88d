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
from vinventory.common.misc import grab, get_string_or_none, plural
from vinventory.inventory import default_max_folder_depth
from vinventory.inventory.errors import InventoryError, QueryFailed, HostConfigError
from vinventory.inventory.folder_path import (FolderTree, folder_properties, subject_from_inventory_object,
                                              resolve_folder_path)
from vinventory.inventory.guest_network import guest_network_columns, guest_network_properties, \
    resolve_guest_adapters
from vinventory.inventory.host_network import host_network_columns, host_network_properties, \
    resolve_host_network_config
from vinventory.inventory.lookup import (PortGroupIndex, SwitchIndex, portgroup_index_properties,
                                         switch_index_properties)
from vinventory.inventory.objects import ObjectReference
from vinventory.inventory.rows import new_row
from vinventory.inventory.walker import (InventoryWalker, Deadline, cluster_summary_columns,
                                         datacenter_summary_columns, endpoint_summary_columns)

log = get_logger()


def _as_string(value):
    """
    render enum values and timestamps of pyVmomi objects
    """

    if value is None:
        return None

    if isinstance(value, datetime):
        return value.isoformat(timespec="seconds")

    return get_string_or_none(value)


class ReportBase:
    """
    Base class of all reports. A report generates its rows for every endpoint.
    A query failure of one endpoint is logged and the remaining endpoints are
    processed. All other inventory errors abort the whole report.
    """

    name = None
    columns = list()

    def __init__(self, settings=None):
        self.settings = settings
        self.skipped = list()
        self.failed_endpoints = list()

    def setting(self, name, fallback=None):
        value = getattr(self.settings, name, None)
        return fallback if value is None else value

    def new_walker(self, endpoint, generated_at, deadline):
        return InventoryWalker(endpoint,
                               generated_at=generated_at,
                               deadline=deadline,
                               max_workers=self.setting("max_workers", 1))

    def prepare(self, endpoints, deadline):
        pass

    def generate_endpoint(self, endpoint, walker):
        raise NotImplementedError

    def generate(self, endpoints, generated_at=None, deadline=None):
        """
        generate the rows of this report

        Parameters
        ----------
        endpoints: list
            connected endpoints (source handlers)
        generated_at: datetime
            time the report generation started, added to every row
        deadline: Deadline
            time budget of the whole report

        Returns
        -------
        list: of rows
        """

        if generated_at is None:
            generated_at = datetime.now()

        if deadline is None:
            deadline = Deadline()

        self.prepare(endpoints, deadline)

        rows = list()
        for endpoint in endpoints:

            log.info(f"Generating report '{self.name}' for endpoint '{endpoint.name}'")

            walker = self.new_walker(endpoint, generated_at, deadline)

            try:
                endpoint_rows = list(self.generate_endpoint(endpoint, walker))
            except QueryFailed as e:
                log.error(f"Report '{self.name}' is incomplete, endpoint '{endpoint.name}' failed: {e}")
                self.failed_endpoints.append(endpoint.name)
                continue

            rows.extend(endpoint_rows)
            self.skipped.extend(walker.skipped)

        if len(self.skipped) > 0:
            log.warning(f"Report '{self.name}': skipped {len(self.skipped)} object{plural(len(self.skipped))}")

        return rows


class VMReport(ReportBase):

    name = "vm"

    columns = [
        "Endpoint",
        "Datacenter",
        "Cluster",
        "VM",
        "PowerState",
        "Template",
        "Host",
        "Folder",
        "GuestOS",
        "GuestHostName",
        "IPAddress",
        "CPUs",
        "MemoryMB",
        "MacAddress",
        "UUID",
        "InstanceUUID",
        "HardwareVersion",
        "ToolsStatus",
        "ToolsVersion",
        "Annotation",
        "GeneratedAt"
    ]

    properties = [
        "name",
        "parent",
        "runtime.powerState",
        "runtime.host",
        "config.template",
        "config.guestFullName",
        "config.hardware.numCPU",
        "config.hardware.memoryMB",
        "config.hardware.device",
        "config.uuid",
        "config.instanceUuid",
        "config.version",
        "config.annotation",
        "guest.hostName",
        "guest.ipAddress",
        "guest.toolsRunningStatus",
        "guest.toolsVersion"
    ]

    def generate_endpoint(self, endpoint, walker):

        folder_tree = FolderTree(walker.query("Folder", folder_properties))

        host_names = {x.ref: x.name for x in walker.query("HostSystem", ["name"])}

        max_depth = self.setting("max_folder_depth", default_max_folder_depth)

        def handle_vm(vm):

            subject = subject_from_inventory_object(vm, folder_tree)
            folder_path, _ = resolve_folder_path(subject, max_depth=max_depth)

            return [new_row(self.columns, {
                "VM": vm.name,
                "PowerState": _as_string(vm.get("runtime.powerState")),
                "Template": vm.get("config.template"),
                "Host": host_names.get(ObjectReference.from_value(vm.get("runtime.host"), vm.endpoint)),
                "Folder": folder_path,
                "GuestOS": get_string_or_none(vm.get("config.guestFullName")),
                "GuestHostName": get_string_or_none(vm.get("guest.hostName")),
                "IPAddress": get_string_or_none(vm.get("guest.ipAddress")),
                "CPUs": vm.get("config.hardware.numCPU"),
                "MemoryMB": vm.get("config.hardware.memoryMB"),
                "MacAddress": subject.mac_address,
                "UUID": vm.get("config.uuid"),
                "InstanceUUID": vm.get("config.instanceUuid"),
                "HardwareVersion": vm.get("config.version"),
                "ToolsStatus": _as_string(vm.get("guest.toolsRunningStatus")),
                "ToolsVersion": get_string_or_none(vm.get("guest.toolsVersion")),
                "Annotation": get_string_or_none(vm.get("config.annotation"))
            })]

        return walker.walk("vm", self.properties, handle_vm)


class VMNetworkReport(ReportBase):

    name = "vm_network"

    columns = guest_network_columns

    def generate_endpoint(self, endpoint, walker):

        # both indexes are built once per endpoint
        portgroup_index = PortGroupIndex(
            walker.query("DistributedVirtualPortgroup", portgroup_index_properties), endpoint=endpoint.name)
        switch_index = SwitchIndex(
            walker.query("DistributedVirtualSwitch", switch_index_properties), endpoint=endpoint.name)

        return walker.walk("vm", guest_network_properties,
                           lambda vm: resolve_guest_adapters(vm, portgroup_index, switch_index))


class HostReport(ReportBase):

    name = "host"

    columns = [
        "Endpoint",
        "Datacenter",
        "Cluster",
        "Host",
        "Vendor",
        "Model",
        "SerialNumber",
        "CPUModel",
        "CPUSockets",
        "CPUCores",
        "CPUThreads",
        "MemoryMB",
        "Product",
        "Version",
        "Build",
        "ConnectionState",
        "PowerState",
        "MaintenanceMode",
        "BootTime",
        "GeneratedAt"
    ]

    properties = [
        "name",
        "summary.hardware",
        "summary.config.product",
        "runtime.connectionState",
        "runtime.powerState",
        "runtime.inMaintenanceMode",
        "runtime.bootTime"
    ]

    # identifiers which can contain the serial number, first match wins
    serial_number_keys = ["SerialNumberTag", "ServiceTag", "EnclosureSerialNumberTag"]

    @classmethod
    def get_serial_number(cls, host):

        identifier_dict = dict()
        for item in host.get_list("summary.hardware.otherIdentifyingInfo"):
            value = grab(item, "identifierValue", fallback="")
            if len(str(value).strip()) > 0:
                identifier_dict[grab(item, "identifierType.key")] = str(value).strip()

        for serial_num_key in cls.serial_number_keys:
            if serial_num_key in identifier_dict.keys():
                log.debug2(f"Found {serial_num_key}: {identifier_dict.get(serial_num_key)}")
                return identifier_dict.get(serial_num_key)

        return None

    def generate_endpoint(self, endpoint, walker):

        def handle_host(host):

            memory_size = host.get("summary.hardware.memorySize")

            return [new_row(self.columns, {
                "Host": host.name,
                "Vendor": get_string_or_none(host.get("summary.hardware.vendor")),
                "Model": get_string_or_none(host.get("summary.hardware.model")),
                "SerialNumber": self.get_serial_number(host),
                "CPUModel": get_string_or_none(host.get("summary.hardware.cpuModel")),
                "CPUSockets": host.get("summary.hardware.numCpuPkgs"),
                "CPUCores": host.get("summary.hardware.numCpuCores"),
                "CPUThreads": host.get("summary.hardware.numCpuThreads"),
                "MemoryMB": int(memory_size / 1024 / 1024) if memory_size is not None else None,
                "Product": get_string_or_none(host.get("summary.config.product.fullName")),
                "Version": get_string_or_none(host.get("summary.config.product.version")),
                "Build": get_string_or_none(host.get("summary.config.product.build")),
                "ConnectionState": _as_string(host.get("runtime.connectionState")),
                "PowerState": _as_string(host.get("runtime.powerState")),
                "MaintenanceMode": host.get("runtime.inMaintenanceMode"),
                "BootTime": _as_string(host.get("runtime.bootTime"))
            })]

        return walker.walk("host", self.properties, handle_host)


class HostNetworkReport(ReportBase):
    """
    One row per physical and virtual host network adapter.

    With 'portgroup_index_per_endpoint' the distributed port group index is built
    once per endpoint. Otherwise, the port groups of all endpoints are queried once
    and filtered for each host. An endpoint whose port groups could not be queried
    fails in both cases.
    """

    name = "host_network"

    columns = host_network_columns

    def __init__(self, settings=None):
        super().__init__(settings)
        self.all_portgroups = None
        self.portgroup_query_errors = dict()

    def prepare(self, endpoints, deadline):

        if self.setting("portgroup_index_per_endpoint", True) is True:
            return

        self.all_portgroups = list()
        for endpoint in endpoints:
            deadline.check(f"querying distributed port groups of '{endpoint.name}'")
            try:
                self.all_portgroups.extend(
                    endpoint.query_objects("DistributedVirtualPortgroup", portgroup_index_properties))
            except QueryFailed as e:
                self.portgroup_query_errors[endpoint.name] = e

    def generate_endpoint(self, endpoint, walker):

        if endpoint.name in self.portgroup_query_errors:
            raise self.portgroup_query_errors[endpoint.name]

        portgroup_index = None
        if self.all_portgroups is None:
            portgroup_index = PortGroupIndex(
                walker.query("DistributedVirtualPortgroup", portgroup_index_properties), endpoint=endpoint.name)

        fail_fast = self.setting("host_network_fail_fast", True)

        def handle_host(host):
            try:
                return resolve_host_network_config(host, portgroup_index=portgroup_index,
                                                   all_portgroups=self.all_portgroups)
            except HostConfigError as e:
                if fail_fast is True:
                    raise
                # turns into a regular leaf failure, the host gets skipped
                raise InventoryError(str(e))

        return walker.walk("host", host_network_properties, handle_host)


class HostServicesReport(ReportBase):

    name = "host_services"

    columns = [
        "Endpoint",
        "Datacenter",
        "Cluster",
        "Host",
        "Service",
        "Label",
        "Running",
        "Policy",
        "Required",
        "Uninstallable",
        "SourcePackage",
        "GeneratedAt"
    ]

    properties = ["name", "config.service.service"]

    def generate_endpoint(self, endpoint, walker):

        def handle_host(host):

            services = host.get_list("config.service.service")
            if len(services) == 0:
                log.debug(f"Host '{host.name}' returned no services")

            return [new_row(self.columns, {
                "Host": host.name,
                "Service": grab(service, "key"),
                "Label": grab(service, "label"),
                "Running": grab(service, "running"),
                "Policy": grab(service, "policy"),
                "Required": grab(service, "required"),
                "Uninstallable": grab(service, "uninstallable"),
                "SourcePackage": grab(service, "sourcePackage.sourcePackageName")
            }) for service in services]

        return walker.walk("host", self.properties, handle_host)


class LicenseReport(ReportBase):

    name = "license"

    columns = [
        "Endpoint",
        "Name",
        "Edition",
        "LicenseKey",
        "CostUnit",
        "Total",
        "Used",
        "ExpirationDate",
        "GeneratedAt"
    ]

    def generate_endpoint(self, endpoint, walker):

        walker.deadline.check(f"querying licenses of '{endpoint.name}'")

        rows = list()
        for license_info in endpoint.query_licenses():

            license_properties = {grab(x, "key"): grab(x, "value") for x in grab(license_info, "properties",
                                                                                  fallback=list())}

            rows.append(new_row(self.columns, {
                "Endpoint": endpoint.name,
                "Name": grab(license_info, "name"),
                "Edition": grab(license_info, "editionKey"),
                "LicenseKey": grab(license_info, "licenseKey"),
                "CostUnit": grab(license_info, "costUnit"),
                "Total": grab(license_info, "total"),
                "Used": grab(license_info, "used"),
                "ExpirationDate": _as_string(license_properties.get("expirationDate")),
                "GeneratedAt": walker.generated_at
            }))

        return rows


class DatacenterSummaryReport(ReportBase):

    name = "datacenter_summary"

    columns = datacenter_summary_columns

    def generate_endpoint(self, endpoint, walker):
        return walker.datacenter_summary()


class ClusterSummaryReport(ReportBase):

    name = "cluster_summary"

    columns = cluster_summary_columns

    def generate_endpoint(self, endpoint, walker):
        return walker.cluster_summary()


class EndpointSummaryReport(ReportBase):

    name = "endpoint_summary"

    columns = endpoint_summary_columns

    def generate_endpoint(self, endpoint, walker):
        return [walker.endpoint_summary()]


# list of all available reports
available_reports = [
    VMReport,
    VMNetworkReport,
    HostReport,
    HostNetworkReport,
    HostServicesReport,
    LicenseReport,
    DatacenterSummaryReport,
    ClusterSummaryReport,
    EndpointSummaryReport
]


def get_report_class(name):
    """
    return the report class for a report name

    Raises
    ------
    KeyError: if no report with this name exists
    """

    for report_class in available_reports:
        if report_class.name == name:
            return report_class

    raise KeyError(f"Unknown report '{name}'")

# EOF
