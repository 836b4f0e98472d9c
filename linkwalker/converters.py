# Copyright (c) 2019 Riverbed Technology, Inc.
#
# This software is licensed under the terms and conditions of the MIT License
# accompanying the software ("License").  This software is distributed "AS IS"
# as set forth in the License.

"""
Converters decode the body of the final response of a traversal into
the `shape` requested by the caller.

The shape describes what the caller wants back:

* ``str`` - the body text
* ``bytes`` - the raw body
* ``None``, ``object``, ``dict`` or ``list`` - the decoded JSON value;
  ``dict`` and ``list`` also check that the value is of that type
* a class with a ``from_json`` classmethod, e.g. `HalResource` -
  called with the decoded JSON value
* any other callable - called with the decoded JSON value

Converters are tried in order and the first one that `can_read()` the
shape and the media type of the response is used.

"""

import logging

from linkwalker.hal import decode_json
from linkwalker.mediatype import MediaType, ALL, APPLICATION_JSON
from linkwalker.exceptions import DecodeError, InvalidMediaType

logger = logging.getLogger(__name__)


def content_type(response, default=None):
    """ Return the MediaType of `response`, or `default` if it has none. """
    value = response.headers.get('Content-Type')
    if not value:
        return default
    try:
        return MediaType.parse(value)
    except InvalidMediaType as e:
        raise DecodeError('Response has an invalid Content-Type: %s' % e)


class Converter(object):
    """ Base class for converters.

    Subclasses set `media_types` to the types they can read and
    implement `supports()` and `read()`.

    """
    media_types = [ALL]

    def __repr__(self):
        return '<%s>' % self.__class__.__name__

    def supports(self, shape):
        raise NotImplementedError

    def can_read(self, shape, media_type):
        if not self.supports(shape):
            return False
        if media_type is None:
            return True
        return any(mt.includes(media_type) for mt in self.media_types)

    def read(self, shape, response):
        raise NotImplementedError


class StringConverter(Converter):

    def supports(self, shape):
        return shape is str

    def read(self, shape, response):
        return response.text


class BytesConverter(Converter):

    def supports(self, shape):
        return shape is bytes

    def read(self, shape, response):
        return response.content


class JsonConverter(Converter):
    """ Decodes JSON and any ``+json`` media type, HAL included. """

    media_types = [APPLICATION_JSON, MediaType.parse('application/*+json')]

    def supports(self, shape):
        return shape not in (str, bytes) and (shape is None or
                                              callable(shape))

    def read(self, shape, response):
        if not response.content:
            return None

        data = decode_json(response.content)
        if shape is None or shape is object:
            return data

        if shape in (dict, list):
            if not isinstance(data, shape):
                raise DecodeError('Expected a JSON %s, got: %r' %
                                  ('object' if shape is dict else 'array',
                                   data))
            return data

        factory = getattr(shape, 'from_json', None)
        if not callable(factory):
            factory = shape

        try:
            return factory(data)
        except (TypeError, ValueError, KeyError) as e:
            raise DecodeError('Could not decode response as %s: %s' %
                              (getattr(shape, '__name__', shape), e))


DEFAULT_CONVERTERS = [StringConverter(), BytesConverter(), JsonConverter()]


def read_body(converters, response, shape=None, default_media_type=None):
    """ Decode `response` into `shape` with the first suitable converter.

    :raises DecodeError: if no converter can read the shape and media
        type, or the body cannot be decoded

    """
    media_type = content_type(response, default_media_type)
    for converter in converters:
        if converter.can_read(shape, media_type):
            logger.debug('Reading %s response with %s' % (media_type,
                                                          converter))
            return converter.read(shape, response)

    raise DecodeError("No converter can read %s as %s" %
                      (media_type, getattr(shape, '__name__', shape)))
