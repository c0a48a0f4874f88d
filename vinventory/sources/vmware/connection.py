# -*- coding: utf-8 -*-
#  Copyright (c) 2020 - 2025 Ricardo Bartels. All rights reserved.
#
#  vcenter-inventory.py
#
#  This work is licensed under the terms of the MIT license.
#  For a copy, see file LICENSE.txt included in this
#  repository or visit: <https://opensource.org/licenses/MIT>.

import ssl
import http

# noinspection PyUnresolvedReferences
from packaging import version
# noinspection PyUnresolvedReferences
from pyVim import connect
# noinspection PyUnresolvedReferences
from pyVmomi import vim, vmodl

from vinventory.sources.common.source_base import SourceBase
from vinventory.sources.vmware.config import VMWareConfig
from vinventory.common.logging import get_logger, DEBUG3
from vinventory.common.misc import grab, dump, plural
from vinventory.inventory.errors import ConnectionUnavailable, QueryFailed
from vinventory.inventory.objects import ObjectReference, InventoryObject

log = get_logger()

minimum_supported_version = "6.5"

# number of objects returned by a single property collector call
query_page_size = 500

# object types which can be queried and their pyVmomi view type path
object_view_types = {
    "Datacenter": "Datacenter",
    "ClusterComputeResource": "ClusterComputeResource",
    "ComputeResource": "ComputeResource",
    "HostSystem": "HostSystem",
    "VirtualMachine": "VirtualMachine",
    "DistributedVirtualSwitch": "DistributedVirtualSwitch",
    "DistributedVirtualPortgroup": "dvs.DistributedVirtualPortgroup",
    "Network": "Network",
    "Folder": "Folder"
}


def get_view_type(object_type):
    """
    return the pyVmomi type for an object type name like "HostSystem"
    """

    view_type_path = object_view_types.get(object_type)
    if view_type_path is None:
        raise ValueError(f"Unsupported object type '{object_type}'")

    return grab(vim, view_type_path)


class VMWareHandler(SourceBase):
    """
    Source class to query inventory data from a vCenter or ESXi host
    """

    source_type = "vmware"

    # internal vars
    session = None

    def __init__(self, name=None):

        if name is None:
            raise ValueError(f"Invalid value for attribute 'name': '{name}'.")

        self.name = name
        self._sdk_instance = None

        # parse settings
        settings_handler = VMWareConfig()
        settings_handler.source_name = self.name
        self.settings = settings_handler.parse()

        if self.settings.enabled is False:
            log.info(f"Source '{name}' is currently disabled. Skipping")
            return

        self.create_sdk_session()

        if self.session is None:
            log.info(f"Source '{name}' is currently unavailable. Skipping")
            return

        self.check_version()

        self.init_successful = True

    @property
    def host_fqdn(self):
        return self.settings.host_fqdn

    @property
    def version(self):
        return grab(self.session, "about.version")

    def _ssl_context(self):

        ssl_context = ssl.create_default_context()

        if self.settings.validate_tls_certs is False:
            ssl_context.check_hostname = False
            ssl_context.verify_mode = ssl.CERT_NONE

        return ssl_context

    def _connect(self):
        """
        return a logged in service instance, connects through an HTTP proxy if one is configured
        """

        settings = self.settings

        if settings.proxy_host is None or settings.proxy_port is None:
            return connect.SmartConnect(host=settings.host_fqdn, port=settings.port, user=settings.username,
                                        pwd=settings.password, sslContext=self._ssl_context())

        log.debug(f"Using proxy '{settings.proxy_host}:{settings.proxy_port}' for '{settings.host_fqdn}'")

        smart_stub = connect.SmartStubAdapter(host=settings.host_fqdn, port=settings.port,
                                              sslContext=self._ssl_context(),
                                              httpProxyHost=settings.proxy_host,
                                              httpProxyPort=settings.proxy_port)

        service_instance = vim.ServiceInstance("ServiceInstance", smart_stub)
        service_instance.RetrieveContent().sessionManager.Login(settings.username, settings.password, None)

        return service_instance

    def create_sdk_session(self):
        """
        Open a session to the endpoint if none exists yet

        Returns
        -------
        bool: if a session is available
        """

        if self.session is not None:
            return True

        log.debug(f"Starting vCenter SDK connection to '{self.host_fqdn}'")

        failure_text = f"Unable to connect to vCenter instance '{self.host_fqdn}' on port {self.settings.port}."

        try:
            self._sdk_instance = self._connect()
            self.session = self._sdk_instance.RetrieveContent()
        except vim.fault.InvalidLogin as e:
            log.error(f"{failure_text} {e.msg}")
        except vim.fault.NoPermission as e:
            log.error(f"{failure_text} User {self.settings.username} does not have required permission. {e.msg}")
        except Exception as e:
            log.error(f"{failure_text} Reason: {e}")

        if self.session is None:
            return False

        log.info(f"Successfully connected to vCenter SDK '{self.host_fqdn}' ({grab(self.session, 'about.fullName')})")

        return True

    def check_version(self):
        """
        log a warning if the endpoint version is older than the minimum supported version
        """

        endpoint_version = self.version
        if endpoint_version is None:
            log.warning(f"Unable to determine version of '{self.settings.host_fqdn}'")
            return

        try:
            if version.parse(endpoint_version) < version.parse(minimum_supported_version):
                log.warning(f"Version '{endpoint_version}' of '{self.settings.host_fqdn}' is not supported. "
                            f"Minimum supported version is '{minimum_supported_version}'. "
                            f"Reports might be incomplete.")
        except version.InvalidVersion:
            log.warning(f"Unable to parse version '{endpoint_version}' of '{self.settings.host_fqdn}'")

    def check_session(self):
        """
        test if session is still alive and re-login if session expired

        Raises
        ------
        ConnectionUnavailable: if no session could be established
        """

        if self.session is not None:
            try:
                self.session.sessionManager.currentSession.key
            except (vim.fault.NotAuthenticated, AttributeError, http.client.RemoteDisconnected):
                log.info(f"No existing vCenter session found for '{self.name}'.")
                self.session = None

        if self.session is None:
            self.create_sdk_session()

        if self.session is None:
            raise ConnectionUnavailable(f"No session to endpoint '{self.name}' available")

    def query_objects(self, object_type, properties, search_root=None):
        """
        Query all objects of a type below a search root with a property collector.
        Only the requested properties are fetched. Properties without a value are
        not part of the returned object.

        Parameters
        ----------
        object_type: str
            name of the managed object type, e.g. "HostSystem"
        properties: list
            property paths to fetch, e.g. ["name", "config.network"]
        search_root: InventoryObject
            object (datacenter, cluster, folder) to search in, defaults to the root folder

        Returns
        -------
        list: of InventoryObject

        Raises
        ------
        ConnectionUnavailable: if no session is available
        QueryFailed: if the endpoint returned an error
        """

        self.check_session()

        view_type = get_view_type(object_type)

        container = self.session.rootFolder
        if search_root is not None:
            container = grab(search_root, "managed_object", fallback=search_root)

        property_collector = self.session.propertyCollector

        container_view = None
        try:
            container_view = self.session.viewManager.CreateContainerView(
                container=container, type=[view_type], recursive=True)

            filter_spec = vmodl.query.PropertyCollector.FilterSpec(
                objectSet=[vmodl.query.PropertyCollector.ObjectSpec(
                    obj=container_view,
                    skip=True,
                    selectSet=[vmodl.query.PropertyCollector.TraversalSpec(
                        name="traverseView", path="view", skip=False, type=vim.view.ContainerView)]
                )],
                propSet=[vmodl.query.PropertyCollector.PropertySpec(
                    type=view_type, pathSet=list(properties), all=False)]
            )

            options = vmodl.query.PropertyCollector.RetrieveOptions(maxObjects=query_page_size)

            result = property_collector.RetrievePropertiesEx(specSet=[filter_spec], options=options)

            object_contents = list()
            while result is not None:
                object_contents.extend(result.objects or list())
                if result.token is None:
                    break
                result = property_collector.ContinueRetrievePropertiesEx(token=result.token)

        except vim.fault.NotAuthenticated as e:
            self.session = None
            raise ConnectionUnavailable(f"Session to endpoint '{self.name}' expired: {e.msg}")
        except (vim.fault.VimFault, vmodl.MethodFault) as e:
            raise QueryFailed(self.name, object_type, grab(e, "msg", fallback=str(e)))
        except Exception as e:
            raise QueryFailed(self.name, object_type, e)
        finally:
            if container_view is not None:
                try:
                    container_view.Destroy()
                except Exception as e:
                    log.debug(f"Unable to destroy container view: {e}")

        inventory_objects = list()
        for object_content in object_contents:

            managed_object = object_content.obj

            property_values = dict()
            for dynamic_property in object_content.propSet or list():
                property_values[dynamic_property.name] = dynamic_property.val

            for missing_property in object_content.missingSet or list():
                log.debug2(f"Property '{missing_property.path}' of {object_type} "
                           f"'{property_values.get('name')}' not available")

            if log.isEnabledFor(DEBUG3):
                log.debug3(f"{object_type} '{property_values.get('name')}':\n{dump(property_values)}")

            inventory_objects.append(InventoryObject(
                ref=ObjectReference.from_value(managed_object, self.name),
                endpoint=self.name,
                properties=property_values,
                managed_object=managed_object
            ))

        log.debug(f"Endpoint '{self.name}' returned {len(inventory_objects)} "
                  f"{object_type}{plural(len(inventory_objects))}")

        return inventory_objects

    def query_licenses(self):
        """
        return all licenses assigned to this endpoint

        Returns
        -------
        list: of vim.LicenseManager.LicenseInfo
        """

        self.check_session()

        try:
            return list(self.session.licenseManager.licenses or list())
        except vim.fault.NotAuthenticated as e:
            self.session = None
            raise ConnectionUnavailable(f"Session to endpoint '{self.name}' expired: {e.msg}")
        except Exception as e:
            raise QueryFailed(self.name, "LicenseManager", e)

    def finish(self):

        # closing SDK session
        if self._sdk_instance is not None:
            try:
                connect.Disconnect(self._sdk_instance)
            except Exception as e:
                log.error(f"unable to close vCenter SDK connection: {e}")

        self._sdk_instance = None
        self.session = None

# EOF
