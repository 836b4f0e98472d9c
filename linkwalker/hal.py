# Copyright (c) 2019 Riverbed Technology, Inc.
#
# This software is licensed under the terms and conditions of the MIT License
# accompanying the software ("License").  This software is distributed "AS IS"
# as set forth in the License.

"""
Support for HAL (``application/hal+json``) representations.

A HAL document keeps its links in a ``_links`` object keyed by relation
name.  Each entry is either a link object or an array of link objects,
and every link object carries at least an ``href``::

   {
     "title": "The Matrix",
     "_links": {
       "self": { "href": "http://localhost/movies/1" },
       "actors": [ { "href": "http://localhost/actors/1" },
                   { "href": "http://localhost/actors/2" } ],
       "search": { "href": "http://localhost/movies{?title}",
                   "templated": true }
     },
     "_embedded": { ... }
   }

`HalLinkDiscoverer` is the default discoverer used by `Traverser`, and
`HalResource` may be passed as the `shape` of a terminal traversal
operation to decode the final document.

"""

import json
import logging

from jsonpointer import JsonPointer, resolve_pointer

from linkwalker.link import Link
from linkwalker.discovery import LinkDiscoverer
from linkwalker.exceptions import DecodeError

logger = logging.getLogger(__name__)


def decode_json(body):
    """ Decode a JSON body, raising DecodeError if it is not JSON. """
    if not isinstance(body, (str, bytes, bytearray)):
        return body
    try:
        return json.loads(body)
    except ValueError as e:
        raise DecodeError('Response body is not valid JSON: %s' % e)


def links_from_entry(rel, entry):
    """ Convert a ``_links`` entry, object or array, to a list of Links. """
    if isinstance(entry, dict):
        entry = [entry]
    elif not isinstance(entry, list):
        raise DecodeError("Link entry for rel '%s' must be an object or "
                          "an array, got: %r" % (rel, entry))

    links = []
    for obj in entry:
        if not isinstance(obj, dict) or not isinstance(obj.get('href'), str):
            raise DecodeError("Link object for rel '%s' has no href: %r" %
                              (rel, obj))
        links.append(Link(obj['href'], rel))
    return links


class HalLinkDiscoverer(LinkDiscoverer):
    """ Finds links in the ``_links`` object of a HAL document. """

    def __repr__(self):
        return '<HalLinkDiscoverer>'

    def find_links(self, body, rel):
        document = decode_json(body)
        if not isinstance(document, dict):
            return []

        links = resolve_pointer(document, '/_links', None)
        if links is None:
            return []
        if not isinstance(links, dict):
            raise DecodeError("'_links' must be an object, got: %r" % links)

        entry = JsonPointer.from_parts(['_links', rel]).resolve(document, None)
        if entry is None:
            logger.debug("No rel '%s' among %s" % (rel, list(links.keys())))
            return []
        return links_from_entry(rel, entry)


class HalResource(object):
    """ A decoded HAL document.

    `content` holds the document properties without ``_links`` and
    ``_embedded``; `links` is a list of `Link` objects and `embedded`
    maps each relation to a `HalResource` or a list of them.
    Indexing a HalResource indexes its content.

    """

    def __init__(self, content=None, links=None, embedded=None):
        self.content = content if content is not None else {}
        self.links = links or []
        self.embedded = embedded or {}

    @classmethod
    def from_json(cls, data):
        """ Build a HalResource from a decoded HAL document. """
        if not isinstance(data, dict):
            raise DecodeError('HAL document must be an object, got: %r' %
                              (data,))

        content = dict((k, v) for k, v in data.items()
                       if k not in ('_links', '_embedded'))

        raw_links = data.get('_links', {})
        if not isinstance(raw_links, dict):
            raise DecodeError("'_links' must be an object, got: %r" %
                              raw_links)
        links = []
        for rel, entry in raw_links.items():
            links.extend(links_from_entry(rel, entry))

        raw_embedded = data.get('_embedded', {})
        if not isinstance(raw_embedded, dict):
            raise DecodeError("'_embedded' must be an object, got: %r" %
                              raw_embedded)
        embedded = {}
        for rel, value in raw_embedded.items():
            if isinstance(value, list):
                embedded[rel] = [cls.from_json(v) for v in value]
            else:
                embedded[rel] = cls.from_json(value)

        return cls(content, links, embedded)

    def __repr__(self):
        return '<HalResource %s links: %s>' % (
            self.content, ','.join(sorted(set(l.rel for l in self.links))))

    def __getitem__(self, key):
        return self.content[key]

    def __contains__(self, key):
        return key in self.content

    def links_for(self, rel):
        return [l for l in self.links if l.rel == rel]

    def link(self, rel):
        """ Return the first link with relation `rel`, or None. """
        links = self.links_for(rel)
        return links[0] if links else None
