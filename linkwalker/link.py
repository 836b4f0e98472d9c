# Copyright (c) 2019 Riverbed Technology, Inc.
#
# This software is licensed under the terms and conditions of the MIT License
# accompanying the software ("License").  This software is distributed "AS IS"
# as set forth in the License.

from collections import namedtuple

from linkwalker.template import UriTemplate


class Link(namedtuple('Link', ['href', 'rel'])):
    """ A link to `href` (a URI or URI template) with relation `rel`. """

    __slots__ = ()

    @property
    def template(self):
        return UriTemplate(self.href)

    @property
    def templated(self):
        """ True if `href` holds template variables. """
        return self.template.has_variables

    def expand(self, *args, **kwargs):
        """ Return a new Link with the template variables in `href` expanded.

        Arguments are the same as for `UriTemplate.expand()`.
        """
        return Link(self.template.expand(*args, **kwargs), self.rel)
