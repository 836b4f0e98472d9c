# Copyright (c) 2019 Riverbed Technology, Inc.
#
# This software is licensed under the terms and conditions of the MIT License
# accompanying the software ("License").  This software is distributed "AS IS"
# as set forth in the License.

"""
JSONPath evaluation of response bodies.

Expressions use the `jsonpath-ng` extended syntax and start with the
root sentinel ``$``, e.g. ``$.name`` or ``$._links.movie[0].href``.

"""

import logging

from jsonpath_ng.ext import parse
from jsonpath_ng.exceptions import JSONPathError

from linkwalker.hal import decode_json
from linkwalker.exceptions import DecodeError

logger = logging.getLogger(__name__)

SENTINEL = '$'


def compile_expression(expression):
    """ Compile a JSONPath expression, raising DecodeError if invalid. """
    try:
        return parse(expression)
    except JSONPathError as e:
        raise DecodeError("Invalid JSONPath expression '%s': %s" %
                          (expression, e))


def evaluate(document, expression):
    """ Evaluate `expression` against `document`.

    :param document: a JSON string or an already decoded value
    :param expression: a JSONPath string or a compiled expression

    A single match returns the matched value, several matches return
    a list of values.

    :raises DecodeError: if `document` is not JSON or nothing matches

    """
    if isinstance(expression, str):
        compiled = compile_expression(expression)
    else:
        compiled = expression

    data = decode_json(document)
    matches = [match.value for match in compiled.find(data)]
    logger.debug("JSONPath '%s' matched %d value(s)" %
                 (expression, len(matches)))

    if not matches:
        raise DecodeError("JSONPath '%s' did not match the document" %
                          expression)
    if len(matches) == 1:
        return matches[0]
    return matches
