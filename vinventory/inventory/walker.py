# -*- coding: utf-8 -*-
#  Copyright (c) 2020 - 2025 Ricardo Bartels. All rights reserved.
#
#  vcenter-inventory.py
#
#  This work is licensed under the terms of the MIT license.
#  For a copy, see file LICENSE.txt included in this
#  repository or visit: <https://opensource.org/licenses/MIT>.

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime

from vinventory.common.logging import get_logger
from vinventory.common.misc import grab, plural
from vinventory.inventory.errors import ConnectionUnavailable, DeadlineExceeded, FatalLeafError
from vinventory.inventory.rows import new_row, stamp_row

log = get_logger()

cluster_summary_columns = [
    "Endpoint", "Datacenter", "Cluster", "HostCount", "VMCount", "TemplateCount", "GeneratedAt"
]

datacenter_summary_columns = [
    "Endpoint", "Datacenter", "ClusterCount", "HostCount", "VMCount", "TemplateCount", "GeneratedAt"
]

endpoint_summary_columns = [
    "Endpoint", "Version", "DatacenterCount", "ClusterCount", "HostCount", "TotalCount", "TemplateCount",
    "GeneratedAt"
]

leaf_object_types = {
    "host": "HostSystem",
    "vm": "VirtualMachine"
}


def passes_filter(name, include_filter, exclude_filter):
    """
    checks if object name passes a defined object filter.

    Parameters
    ----------
    name: str, list
        name of the object to check. If a list of names is given,
        one of them has to match the include and none the exclude filter
    include_filter: regex object
        A regex object of include filter
    exclude_filter: regex object
        A regex object of exclude filter

    Returns
    -------
    bool: True if all filter passed, otherwise False
    """

    names = [f"{x}" for x in (name if isinstance(name, list) else [name])]

    if include_filter is not None and not any(include_filter.match(x) for x in names):
        log.debug(f"Object '{names[-1]}' did not match include filter '{include_filter.pattern}'. Skipping")
        return False

    if exclude_filter is not None and any(exclude_filter.match(x) for x in names):
        log.debug(f"Object '{names[-1]}' matched exclude filter '{exclude_filter.pattern}'. Skipping")
        return False

    return True


def is_template(vm):
    return vm.get("config.template") is True


class Deadline:
    """
    Time budget of a traversal. Checked before every query and before every leaf,
    can also be cancelled from another thread.
    """

    def __init__(self, seconds=None):
        self.seconds = seconds if seconds else None
        self._expires_at = None
        if self.seconds is not None:
            self._expires_at = time.monotonic() + self.seconds
        self._cancelled = threading.Event()

    def cancel(self):
        self._cancelled.set()

    @property
    def expired(self):
        if self._cancelled.is_set():
            return True
        return self._expires_at is not None and time.monotonic() > self._expires_at

    def check(self, action=""):

        if self._cancelled.is_set():
            raise DeadlineExceeded(f"Cancelled while {action}")

        if self._expires_at is not None and time.monotonic() > self._expires_at:
            raise DeadlineExceeded(f"Timeout of {self.seconds} second{plural(self.seconds)} exceeded while {action}")


class LeafOutcome:
    """
    result of processing a single host/VM: either rows or the reason it was skipped
    """

    def __init__(self, name, rows=None, skip_reason=None):
        self.name = name
        self.rows = rows or list()
        self.skip_reason = skip_reason

    @property
    def skipped(self):
        return self.skip_reason is not None


class InventoryWalker:
    """
    Walks the inventory of one endpoint: datacenter -> cluster -> host/VM.
    Hosts outside a cluster (including directly managed ESXi hosts) are walked
    after the clusters of a datacenter, their rows have no cluster name.

    Every level is a query with the parent object as search root. Failing queries
    raise and end the walk of this endpoint. A failure while processing a single
    host/VM only skips this leaf, skipped leaves are recorded in 'skipped'.

    VMs are attributed to the cluster they were found under at query time.
    VMs moved between clusters during the walk can be attributed to either one.
    """

    def __init__(self, endpoint, scope=None, generated_at=None, deadline=None, max_workers=1):
        """
        Parameters
        ----------
        endpoint: VMWareHandler
            endpoint to query, needs 'name', 'settings' and 'query_objects()'
        scope: InventoryObject
            optional search root for the datacenter query
        generated_at: datetime
            timestamp added to every row, defaults to now
        deadline: Deadline
            time budget of this walk
        max_workers: int
            number of threads to process the leaves of a cluster
        """

        self.endpoint = endpoint
        self.scope = scope
        if generated_at is None:
            generated_at = datetime.now()
        self.generated_at = generated_at.isoformat(timespec="seconds")
        self.deadline = deadline or Deadline()
        self.max_workers = max(1, int(max_workers or 1))
        self.skipped = list()

    @property
    def endpoint_name(self):
        return self.endpoint.name

    def _setting(self, name):
        return grab(self.endpoint, f"settings.{name}")

    def query(self, object_type, properties, search_root=None):
        """
        query objects of the endpoint, every query checks the deadline first
        """

        self.deadline.check(f"querying '{object_type}' from '{self.endpoint_name}'")

        return self.endpoint.query_objects(object_type, properties, search_root=search_root)

    def datacenters(self):
        return self.query("Datacenter", ["name"], self.scope)

    def clusters(self, datacenter):

        return [
            x for x in self.query("ClusterComputeResource", ["name"], datacenter)
            if passes_filter([x.name, f"{datacenter.name}/{x.name}"],
                             self._setting("cluster_include_filter"), self._setting("cluster_exclude_filter"))
        ]

    def standalone_compute_resources(self, datacenter):
        """
        compute resources of hosts which are not part of a cluster. A 'ComputeResource'
        view also returns clusters, these are left out.
        """

        return [
            x for x in self.query("ComputeResource", ["name"], datacenter)
            if x.ref.type != "ClusterComputeResource"
        ]

    def compute_resources(self, datacenter):
        """
        return tuples of (compute resource, cluster name) of a datacenter. Clusters come
        first, hosts outside a cluster have no cluster name.
        """

        compute_resources = [(x, x.name) for x in self.clusters(datacenter)]
        compute_resources.extend((x, None) for x in self.standalone_compute_resources(datacenter))

        return compute_resources

    def hosts(self, search_root, properties=None):

        return [
            x for x in self.query("HostSystem", self._with_name(properties), search_root)
            if passes_filter(x.name, self._setting("host_include_filter"), self._setting("host_exclude_filter"))
        ]

    def virtual_machines(self, search_root, properties=None):

        return [
            x for x in self.query("VirtualMachine", self._with_name(properties), search_root)
            if passes_filter(x.name, self._setting("vm_include_filter"), self._setting("vm_exclude_filter"))
        ]

    @staticmethod
    def _with_name(properties):
        properties = list(properties or list())
        if "name" not in properties:
            properties.insert(0, "name")
        return properties

    def _run_leaf(self, leaf, handler):

        self.deadline.check(f"processing '{leaf.name}'")

        try:
            rows = handler(leaf)
        except (FatalLeafError, ConnectionUnavailable, DeadlineExceeded):
            raise
        except Exception as e:
            log.warning(f"Skipping '{leaf.name}' on endpoint '{self.endpoint_name}': {e}")
            return LeafOutcome(leaf.name, skip_reason=str(e))

        return LeafOutcome(leaf.name, rows=rows)

    def _process_leaves(self, leaves, handler):

        if self.max_workers > 1 and len(leaves) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                # map() keeps the order of the leaves and re-raises fatal errors
                return list(executor.map(lambda leaf: self._run_leaf(leaf, handler), leaves))

        return [self._run_leaf(leaf, handler) for leaf in leaves]

    def walk(self, leaf_type, properties, handler):
        """
        Iterate over all hosts or VMs of this endpoint and yield the rows
        returned by 'handler' for each of them, stamped with endpoint,
        datacenter and cluster name and the generation timestamp.

        Parameters
        ----------
        leaf_type: str
            "host" or "vm"
        properties: list
            properties to query for each leaf
        handler: callable
            gets called with each leaf (InventoryObject) and returns a list of rows

        Yields
        ------
        dict: a report row
        """

        if leaf_type not in leaf_object_types:
            raise ValueError(f"Unknown leaf type '{leaf_type}'")

        for datacenter in self.datacenters():

            log.debug(f"Walking datacenter '{datacenter.name}' of endpoint '{self.endpoint_name}'")

            for compute_resource, cluster_name in self.compute_resources(datacenter):

                if leaf_type == "host":
                    leaves = self.hosts(compute_resource, properties)
                else:
                    leaves = self.virtual_machines(compute_resource, properties)

                log.debug(f"Compute resource '{compute_resource.name}' returned "
                          f"{len(leaves)} {leaf_type}{plural(len(leaves))}")

                context = {
                    "Endpoint": self.endpoint_name,
                    "Datacenter": datacenter.name,
                    "Cluster": cluster_name
                }

                for outcome in self._process_leaves(leaves, handler):

                    if outcome.skipped:
                        self.skipped.append(outcome)
                        continue

                    for row in outcome.rows:
                        yield stamp_row(row, context, self.generated_at)

    def _count_vms(self, search_root):

        vms = self.virtual_machines(search_root, ["config.template"])
        templates = len([x for x in vms if is_template(x)])

        return len(vms) - templates, templates

    def cluster_summary(self):
        """
        one row per cluster with host, VM and template count. Templates are not counted as VMs.
        """

        rows = list()
        for datacenter in self.datacenters():
            for cluster in self.clusters(datacenter):

                vm_count, template_count = self._count_vms(cluster)

                rows.append(new_row(cluster_summary_columns, {
                    "Endpoint": self.endpoint_name,
                    "Datacenter": datacenter.name,
                    "Cluster": cluster.name,
                    "HostCount": len(self.hosts(cluster)),
                    "VMCount": vm_count,
                    "TemplateCount": template_count,
                    "GeneratedAt": self.generated_at
                }))

        return rows

    def datacenter_summary(self):
        """
        one row per datacenter. Hosts and VMs are counted under the datacenter,
        this includes the ones which are not part of a cluster.
        """

        rows = list()
        for datacenter in self.datacenters():

            vm_count, template_count = self._count_vms(datacenter)

            rows.append(new_row(datacenter_summary_columns, {
                "Endpoint": self.endpoint_name,
                "Datacenter": datacenter.name,
                "ClusterCount": len(self.clusters(datacenter)),
                "HostCount": len(self.hosts(datacenter)),
                "VMCount": vm_count,
                "TemplateCount": template_count,
                "GeneratedAt": self.generated_at
            }))

        return rows

    def endpoint_summary(self, cluster_rows=None):
        """
        a single row for this endpoint which rolls up the cluster summary rows.
        'TotalCount' is the sum of all cluster VM counts.
        """

        if cluster_rows is None:
            cluster_rows = self.cluster_summary()

        return new_row(endpoint_summary_columns, {
            "Endpoint": self.endpoint_name,
            "Version": getattr(self.endpoint, "version", None),
            "DatacenterCount": len(self.datacenters()),
            "ClusterCount": len(cluster_rows),
            "HostCount": sum(x.get("HostCount") or 0 for x in cluster_rows),
            "TotalCount": sum(x.get("VMCount") or 0 for x in cluster_rows),
            "TemplateCount": sum(x.get("TemplateCount") or 0 for x in cluster_rows),
            "GeneratedAt": self.generated_at
        })

# EOF
