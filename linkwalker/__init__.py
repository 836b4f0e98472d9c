# Copyright (c) 2019 Riverbed Technology, Inc.
#
# This software is licensed under the terms and conditions of the MIT License
# accompanying the software ("License").  This software is distributed "AS IS"
# as set forth in the License.

from linkwalker.traverser import Traverser, TraversalBuilder, Entity
from linkwalker.template import UriTemplate, TemplateVariable, VariableType
from linkwalker.mediatype import MediaType, HAL_JSON, APPLICATION_JSON
from linkwalker.link import Link
from linkwalker.discovery import LinkDiscoverer, LinkDiscoverers
from linkwalker.hal import HalLinkDiscoverer, HalResource
from linkwalker.connection import Connection, ConnectionManager
from linkwalker.exceptions import *
