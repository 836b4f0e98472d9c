# Copyright (c) 2019 Riverbed Technology, Inc.
#
# This software is licensed under the terms and conditions of the MIT License
# accompanying the software ("License").  This software is distributed "AS IS"
# as set forth in the License.

"""
A relation name handed to `Traverser.follow()` is resolved against
each response body in one of two ways:

* `NamedRelation` - the name is a link relation, looked up by the link
  discoverer registered for the response media type.

* `PathExpressionRelation` - the name starts with ``$`` and is a
  JSONPath expression evaluated directly against the body.  The
  matched value becomes the href of the link.  The media type of the
  response is not consulted.

`relation_for()` picks one of the two for a name.

"""

import re
import logging
from numbers import Number

from linkwalker.link import Link
from linkwalker.expression import SENTINEL, compile_expression, evaluate
from linkwalker.exceptions import DecodeError

logger = logging.getLogger(__name__)

TRAILING_INDEX_RE = re.compile(r'\[.*$')


def relation_for(name, discoverers):
    """ Return the relation resolver for `name`. """
    if name.startswith(SENTINEL):
        return PathExpressionRelation(name)
    return NamedRelation(name, discoverers)


class NamedRelation(object):
    """ A relation resolved by the link discoverer for the media type. """

    def __init__(self, name, discoverers):
        self.name = name
        self.rel = name
        self.discoverers = discoverers

    def __repr__(self):
        return "<NamedRelation '%s'>" % self.name

    def __str__(self):
        return self.name

    def resolve(self, body, media_type):
        """ Return the Link for this relation in `body`, or None. """
        return self.discoverers.find_link(body, media_type, self.name)


class PathExpressionRelation(object):
    """ A relation resolved by evaluating a JSONPath expression. """

    def __init__(self, expression):
        self.expression = expression
        self._compiled = compile_expression(expression)

        last_segment = expression.rsplit('.', 1)[-1]
        self.rel = TRAILING_INDEX_RE.sub('', last_segment) or last_segment

    def __repr__(self):
        return "<PathExpressionRelation '%s' rel '%s'>" % (self.expression,
                                                          self.rel)

    def __str__(self):
        return self.expression

    def resolve(self, body, media_type=None):
        """ Evaluate the expression and return a Link to the result.

        :raises DecodeError: if the expression does not match a single
            string or number

        """
        value = evaluate(body, self._compiled)
        if isinstance(value, bool) or not isinstance(value, (str, Number)):
            raise DecodeError("JSONPath '%s' must match a single URI, got: %r"
                              % (self.expression, value))

        logger.debug("JSONPath '%s' resolved to '%s'" % (self.expression,
                                                         value))
        return Link(str(value), self.rel)
