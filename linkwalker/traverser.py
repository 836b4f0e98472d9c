# Copyright (c) 2019 Riverbed Technology, Inc.
#
# This software is licensed under the terms and conditions of the MIT License
# accompanying the software ("License").  This software is distributed "AS IS"
# as set forth in the License.

"""
The `Traverser` class walks a hypermedia API by relation names instead
of hard-coded URIs.  Starting from a base URI, each relation name is
looked up in the response to the previous request and the traversal
moves on to the target of the matching link:

.. code-block:: python

   >>> traverser = Traverser('http://movies-server/api', HAL_JSON)

   # GET /api, follow 'movies', GET it, follow 'movie', GET it,
   # follow 'actor' and return the decoded actor document
   >>> traverser.follow('movies', 'movie', 'actor').to_object()
   {'name': 'Keanu Reeves', '_links': {...}}

   # Extract a single value from the final document
   >>> traverser.follow('movies', 'movie', 'actor').to_path_result('$.name')
   'Keanu Reeves'

Relation names
--------------

A relation name is normally a link relation, found in the response by
the `LinkDiscoverer` registered for the response media type.  HAL is
supported out of the box; more discoverers may be added with
`Traverser.register_discoverer()`, where the first registered match
wins.

A relation name starting with ``$`` is a JSONPath expression instead.
It is evaluated against the response body and the matched value is
followed as the link href:

.. code-block:: python

   >>> traverser.follow('movies', '$._embedded.movies[0]._links.self.href')

Template parameters and headers
-------------------------------

`follow()` returns a `TraversalBuilder` that collects the relations,
template parameters and headers for one traversal.  Template parameters
are used to expand the base URI and every link href on the way, so
templated links such as ``/movies{?page,size}`` can be followed:

.. code-block:: python

   >>> (traverser.follow('movies', 'search')
   ...           .with_template_parameters(title='Matrix', size=5)
   ...           .with_headers({'Authorization': 'Bearer abc'})
   ...           .to_object(HalResource))

Each request carries an Accept header listing the media types given to
the `Traverser`, unless an Accept header was passed in the headers.

Errors
------

A relation that cannot be found raises `LinkNotFound`, a body that
cannot be decoded or a JSONPath that does not match raises
`DecodeError`, and transport failures raise `ConnectionError` or an
`HTTPError` subclass.  No request is retried.

"""

import logging
import urllib.parse
from collections import namedtuple

from requests.structures import CaseInsensitiveDict

from linkwalker.template import UriTemplate
from linkwalker.mediatype import MediaType, HAL_JSON
from linkwalker.discovery import LinkDiscoverers
from linkwalker.hal import HalLinkDiscoverer
from linkwalker.relations import relation_for
from linkwalker.expression import evaluate
from linkwalker.converters import DEFAULT_CONVERTERS, read_body, content_type
from linkwalker.connection import ConnectionManager
from linkwalker.exceptions import ConfigurationError, LinkNotFound

logger = logging.getLogger(__name__)


class Entity(namedtuple('Entity', ['status_code', 'headers', 'body'])):
    """ The final response of a traversal with its decoded body. """

    __slots__ = ()


class Traverser(object):
    """ Follows links by relation name starting from a base URI.

    A Traverser holds the configuration shared by all traversals: the
    base URI, the accepted media types, the link discoverers, the body
    converters and the transport.  It is not modified by traversals, so
    one instance may be used from several threads, each with its own
    `TraversalBuilder`.

    """

    def __init__(self, base_uri, media_types, discoverers=None,
                 converters=None, connection=None, connection_manager=None,
                 auth=None, verify=True, timeout=None):
        """ Create a Traverser.

        :param base_uri: absolute URI (or URI template) of the root
            resource of the API

        :param media_types: media type, or non-empty list of media
            types, to send in the Accept header

        :param discoverers: a `LinkDiscoverers` registry or a list of
            (predicate, discoverer) pairs; defaults to HAL only

        :param converters: list of converters used to decode the
            final response; defaults to `DEFAULT_CONVERTERS`

        :param connection: connection to use for every request,
            whatever the host of the URI

        :param connection_manager: `ConnectionManager` to find a
            connection per host when `connection` is not given; a new
            one is created using `verify` and `timeout` if neither is
            given

        :param auth: object representing authentication credentials,
            passed on to the connection manager

        :raises ConfigurationError: if `base_uri` is None or not
            absolute, or no media types are given

        """
        if base_uri is None:
            raise ConfigurationError('Base URI must not be None')

        parts = urllib.parse.urlsplit(base_uri)
        if not (parts.scheme and parts.netloc):
            raise ConfigurationError(
                "Base URI must be absolute (e.g. https://host/api): '%s'" %
                base_uri)

        if isinstance(media_types, (str, MediaType)):
            media_types = [media_types]
        if not media_types:
            raise ConfigurationError('At least one media type must be given')

        self.base_uri = base_uri
        self.media_types = tuple(MediaType.parse(mt) for mt in media_types)

        if discoverers is None:
            discoverers = [(HAL_JSON, HalLinkDiscoverer())]
        if isinstance(discoverers, LinkDiscoverers):
            self.discoverers = discoverers.copy()
        else:
            self.discoverers = LinkDiscoverers(discoverers)

        self.converters = list(converters or DEFAULT_CONVERTERS)

        self.connection = connection
        if connection is None and connection_manager is None:
            connection_manager = ConnectionManager(verify=verify,
                                                   timeout=timeout)
        self.connection_manager = connection_manager
        self.auth = auth

    def __repr__(self):
        return '<Traverser %s (%s)>' % (self.base_uri, self.accept)

    @property
    def accept(self):
        """ Value of the Accept header sent with each request. """
        return ', '.join(str(mt) for mt in self.media_types)

    def register_discoverer(self, predicate, discoverer):
        """ Add a link discoverer for media types matching `predicate`.

        Discoverers are consulted in registration order, after the ones
        passed to the constructor.  Register discoverers before
        starting traversals.

        """
        self.discoverers.register(predicate, discoverer)

    def follow(self, *rels):
        """ Start a new traversal following the relation names `rels`. """
        return TraversalBuilder(self).follow(*rels)

    def expand(self, uri, parameters):
        """ Expand the template variables in `uri` with `parameters`. """
        return UriTemplate(uri).expand(parameters or {})

    def prepare_headers(self, headers=None):
        """ Return request headers with the Accept header filled in. """
        request_headers = CaseInsensitiveDict(headers or {})
        if 'Accept' not in request_headers:
            request_headers['Accept'] = self.accept
        return request_headers

    def get(self, uri, headers=None):
        """ Issue a GET for `uri` and return the `requests.Response`. """
        if self.connection is not None:
            conn = self.connection
        else:
            conn = self.connection_manager.find_for_uri(uri, self.auth)

        return conn.request('GET', uri,
                            extra_headers=self.prepare_headers(headers))


class TraversalBuilder(object):
    """ Collects relations, template parameters and headers of a traversal.

    Created by `Traverser.follow()`.  The configuration methods return
    the builder itself so calls can be chained; the terminal methods
    `to_uri()`, `to_object()`, `to_path_result()` and `to_entity()` run
    the traversal.

    """

    def __init__(self, traverser):
        self.traverser = traverser
        self.rels = []
        self.template_parameters = {}
        self.headers = CaseInsensitiveDict()

    def __repr__(self):
        return '<TraversalBuilder %s rels: %s>' % (self.traverser.base_uri,
                                                   ','.join(self.rels))

    def follow(self, *rels):
        """ Append relation names to follow. """
        self.rels.extend(rels)
        return self

    def with_template_parameters(self, parameters=None, **kwargs):
        """ Replace the template parameters used to expand URIs. """
        self.template_parameters = dict(parameters or {})
        self.template_parameters.update(kwargs)
        return self

    def with_headers(self, headers=None, **kwargs):
        """ Add headers sent with every request of this traversal. """
        self.headers.update(headers or {})
        self.headers.update(kwargs)
        return self

    def _traverse(self):
        traverser = self.traverser
        uri = traverser.expand(traverser.base_uri, self.template_parameters)
        logger.info("Traversing %s from %s" %
                    (self.rels or '<no rels>', uri))

        for name in self.rels:
            response = traverser.get(uri, self.headers)
            media_type = content_type(response, traverser.media_types[0])
            body = response.text

            relation = relation_for(name, traverser.discoverers)
            link = relation.resolve(body, media_type)
            if link is None:
                raise LinkNotFound(name, body)

            href = traverser.expand(link.href, self.template_parameters)
            next_uri = urllib.parse.urljoin(uri, href)
            logger.debug("Followed rel '%s' from %s to %s" %
                         (relation.rel, uri, next_uri))
            uri = next_uri

        return uri

    def _get_final(self):
        return self.traverser.get(self._traverse(), self.headers)

    def to_uri(self):
        """ Follow all relations and return the final URI without a GET. """
        return self._traverse()

    def to_object(self, shape=None):
        """ Follow all relations and return the decoded final document.

        :param shape: what to decode the body into, see
            `linkwalker.converters`; None returns the JSON value

        """
        response = self._get_final()
        return read_body(self.traverser.converters, response, shape,
                         self.traverser.media_types[0])

    def to_path_result(self, expression):
        """ Follow all relations and evaluate a JSONPath on the final body.

        :raises DecodeError: if the expression does not match

        """
        response = self._get_final()
        return evaluate(response.text, expression)

    def to_entity(self, shape=None):
        """ Follow all relations and return the final response as an Entity.

        The Entity holds the status code, the response headers and the
        body decoded as for `to_object()`.

        """
        response = self._get_final()
        body = read_body(self.traverser.converters, response, shape,
                         self.traverser.media_types[0])
        return Entity(response.status_code, response.headers, body)
