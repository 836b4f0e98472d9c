# Copyright (c) 2019 Riverbed Technology, Inc.
#
# This software is licensed under the terms and conditions of the MIT License
# accompanying the software ("License").  This software is distributed "AS IS"
# as set forth in the License.

"""
Link discovery finds the link for a relation name inside a raw
response body.  How links are represented depends on the media type
of the body, so each `LinkDiscoverer` knows a single format and a
`LinkDiscoverers` registry picks one by media type.

The registry is an explicit ordered list of (predicate, discoverer)
pairs.  For a given media type the first pair whose predicate matches
wins, so discoverers registered first take precedence:

.. code-block:: python

   >>> discoverers = LinkDiscoverers([(HAL_JSON, HalLinkDiscoverer())])
   >>> discoverers.register('application/vnd.siren+json',
   ...                      SirenLinkDiscoverer())

   >>> discoverers.find_link(body, 'application/hal+json', 'movies')
   Link(href='http://localhost/movies', rel='movies')

A predicate is either a media type (string or `MediaType`), which
matches any media type it `includes()`, or a callable that receives the
response `MediaType` and returns True on a match.

"""

import logging

from linkwalker.mediatype import MediaType
from linkwalker.exceptions import DecodeError

logger = logging.getLogger(__name__)


class LinkDiscoverer(object):
    """ This class defines the interface for finding links in a body.

    This class must be sub-classed and `find_links()` implemented.
    An instance of the new class is passed to
    `LinkDiscoverers.register()`.

    """

    def find_links(self, body, rel):
        """ Return all links with relation `rel` in `body`.

        :param body: the raw response body as a string
        :param rel: the relation name to look for

        Must return an empty list if the relation is not present and
        raise `DecodeError` if `body` cannot be parsed.

        """
        raise NotImplementedError

    def find_link(self, body, rel):
        """ Return the first link with relation `rel`, or None. """
        links = self.find_links(body, rel)
        return links[0] if links else None


class LinkDiscoverers(object):
    """ Ordered registry of link discoverers keyed by media type. """

    def __init__(self, discoverers=None):
        """ Create a registry from an iterable of (predicate, discoverer). """
        self._discoverers = []
        for predicate, discoverer in (discoverers or []):
            self.register(predicate, discoverer)

    def __len__(self):
        return len(self._discoverers)

    def __repr__(self):
        return '<LinkDiscoverers %s>' % ', '.join(
            repr(d) for _, d in self._discoverers)

    def register(self, predicate, discoverer):
        """ Append `discoverer` for media types matching `predicate`. """
        if not callable(predicate):
            predicate = MediaType.parse(predicate).includes
        self._discoverers.append((predicate, discoverer))

    def copy(self):
        registry = LinkDiscoverers()
        registry._discoverers = list(self._discoverers)
        return registry

    def discoverer_for(self, media_type):
        """ Return the first discoverer supporting `media_type`, or None. """
        media_type = MediaType.parse(media_type)
        for predicate, discoverer in self._discoverers:
            if predicate(media_type):
                return discoverer
        return None

    def find_link(self, body, media_type, rel):
        """ Find the link for `rel` in `body` using the matching discoverer.

        :raises DecodeError: if no discoverer supports `media_type`

        """
        discoverer = self.discoverer_for(media_type)
        if discoverer is None:
            raise DecodeError(
                "No link discoverer registered for media type '%s'" %
                media_type)

        logger.debug("Looking up rel '%s' with %s" % (rel, discoverer))
        return discoverer.find_link(body, rel)
