# Copyright (c) 2019 Riverbed Technology, Inc.
#
# This software is licensed under the terms and conditions of the MIT License
# accompanying the software ("License").  This software is distributed "AS IS"
# as set forth in the License.

import re

from linkwalker.exceptions import InvalidMediaType

TOKEN_RE = re.compile(r"^[A-Za-z0-9!#$&^_.+*-]+$")

WILDCARD = '*'


class MediaType(object):
    """ A media type such as ``application/hal+json; charset=UTF-8``.

    Two media types are equal when type and subtype match, ignoring
    case and parameters.  Use `includes()` for wildcard matching.

    """

    def __init__(self, type, subtype, params=None):
        self.type = type.lower()
        self.subtype = subtype.lower()
        self.params = dict((k.lower(), v) for k, v in (params or {}).items())

    @classmethod
    def parse(cls, value):
        """ Parse a media type string; MediaType instances pass through. """
        if isinstance(value, MediaType):
            return value

        if not value or not isinstance(value, str):
            raise InvalidMediaType('Invalid media type: %r' % (value,))

        pieces = value.split(';')
        full_type = pieces[0].strip()
        if full_type == WILDCARD:
            full_type = '*/*'

        if full_type.count('/') != 1:
            raise InvalidMediaType("Invalid media type '%s'" % value)

        type, subtype = full_type.split('/')
        if not (TOKEN_RE.match(type) and TOKEN_RE.match(subtype)):
            raise InvalidMediaType("Invalid media type '%s'" % value)
        if type == WILDCARD and subtype != WILDCARD:
            raise InvalidMediaType(
                "Wildcard type requires wildcard subtype: '%s'" % value)

        params = {}
        for piece in pieces[1:]:
            if not piece.strip():
                continue
            if '=' not in piece:
                raise InvalidMediaType(
                    "Invalid parameter '%s' in media type '%s'" %
                    (piece.strip(), value))
            k, v = piece.split('=', 1)
            params[k.strip()] = v.strip().strip('"')

        return cls(type, subtype, params)

    def __repr__(self):
        return "<MediaType '%s'>" % str(self)

    def __str__(self):
        s = '%s/%s' % (self.type, self.subtype)
        for k, v in self.params.items():
            s += ';%s=%s' % (k, v)
        return s

    def __eq__(self, other):
        return (isinstance(other, MediaType) and
                self.type == other.type and self.subtype == other.subtype)

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash((self.type, self.subtype))

    @property
    def suffix(self):
        """ Structured syntax suffix, e.g. 'json' for 'hal+json'. """
        if '+' in self.subtype:
            return self.subtype.rsplit('+', 1)[1]
        return None

    @property
    def charset(self):
        return self.params.get('charset')

    def includes(self, other):
        """ Return True if `other` falls within this, possibly wildcard, type.

        ``*/*`` includes everything, ``application/*`` includes any
        application type, and ``application/*+json`` includes any
        application type with a ``+json`` suffix.

        """
        other = MediaType.parse(other)

        if self.type == WILDCARD:
            return True
        if self.type != other.type:
            return False
        if self.subtype == other.subtype or self.subtype == WILDCARD:
            return True

        if self.subtype.startswith('*+'):
            return other.suffix == self.subtype[2:]
        return False

    def is_compatible_with(self, other):
        other = MediaType.parse(other)
        return self.includes(other) or other.includes(self)


HAL_JSON = MediaType.parse('application/hal+json')
APPLICATION_JSON = MediaType.parse('application/json')
ALL = MediaType.parse('*/*')
