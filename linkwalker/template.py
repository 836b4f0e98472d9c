# Copyright (c) 2019 Riverbed Technology, Inc.
#
# This software is licensed under the terms and conditions of the MIT License
# accompanying the software ("License").  This software is distributed "AS IS"
# as set forth in the License.

"""
This module implements the subset of RFC 6570 URI templates that
hypermedia APIs hand out in their links.

A `UriTemplate` is parsed once from a string and may then be expanded
any number of times:

.. code-block:: python

   >>> template = UriTemplate('/movies{/id}{?page,size}{#section}')
   >>> template.variable_names
   ['id', 'page', 'size', 'section']

   >>> template.expand({'id': 42, 'size': 20})
   '/movies/42?size=20'

   # Positional values are bound in declaration order
   >>> template.expand(42, 1, 20, 'cast')
   '/movies/42?page=1&size=20#cast'

Supported blocks
----------------

* ``{name}`` - required path variable, substituted as given
* ``{/name}`` - optional path segment, rendered as ``/value``
* ``{?name}`` - optional request parameter
* ``{&name}`` - optional request parameter continuing a query string
* ``{#name}`` - optional fragment, at most one per template

Request parameters start the query string with ``?`` when the output
does not have one yet, whatever their marker was, and continue it with
``&`` otherwise.  A list or tuple value for a request parameter is
expanded as repeated ``name=value`` pairs.  Request parameters may not
follow a fragment, since they would end up inside it.

Variable names are taken as written, e.g. ``{movie-id}``; only an
empty name is rejected.

Values are converted with `str()` and inserted as they are.  Anything
that needs percent-encoding must be encoded by the caller.

"""

import logging
from collections import namedtuple
from collections.abc import Iterable, Mapping

from linkwalker.exceptions import \
    MalformedTemplate, MissingVariable, InvalidParameter

logger = logging.getLogger(__name__)

# Operators of RFC 6570 level 2-4 that are not expanded by this module
UNSUPPORTED_OPERATORS = '+.;=,!@|'


class VariableType(object):
    """ Expansion style of a template variable.

    The instances are fixed and exposed as class attributes, one per
    block marker: `PATH_VARIABLE`, `SEGMENT`, `FRAGMENT`,
    `REQUEST_PARAM` and `REQUEST_PARAM_CONTINUED`.

    """

    marker_map = {}

    def __init__(self, label, marker, required=False):
        self.label = label
        self.marker = marker
        self.required = required

    def __repr__(self):
        return '<VariableType %s>' % self.label

    def __eq__(self, other):
        return (isinstance(other, VariableType) and
                self.label == other.label)

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash(self.label)

    @property
    def is_query(self):
        return self.marker in ('?', '&')

    @classmethod
    def from_marker(cls, marker):
        """ Return the type for a block marker, or None if not a marker. """
        return cls.marker_map.get(marker)


VariableType.PATH_VARIABLE = VariableType('PATH_VARIABLE', '', required=True)
VariableType.SEGMENT = VariableType('SEGMENT', '/')
VariableType.FRAGMENT = VariableType('FRAGMENT', '#')
VariableType.REQUEST_PARAM = VariableType('REQUEST_PARAM', '?')
VariableType.REQUEST_PARAM_CONTINUED = VariableType(
    'REQUEST_PARAM_CONTINUED', '&')

for _vartype in (VariableType.SEGMENT, VariableType.FRAGMENT,
                 VariableType.REQUEST_PARAM,
                 VariableType.REQUEST_PARAM_CONTINUED):
    VariableType.marker_map[_vartype.marker] = _vartype


class TemplateVariable(namedtuple('TemplateVariable', ['name', 'type'])):
    """ A single named placeholder in a URI template. """

    __slots__ = ()

    @property
    def required(self):
        return self.type.required


class UriTemplate(object):
    """ A parsed URI template.

    :param template: the template string; `MalformedTemplate` is raised
        if a ``{...}`` block is not terminated, starts with an
        unsupported RFC 6570 operator or holds an empty variable name,
        and if a request parameter follows the fragment

    """

    def __init__(self, template):
        if template is None:
            raise MalformedTemplate('Template must not be None')

        self.template = template
        self._parts = self._parse(template)

        self.variables = tuple(var for part in self._parts
                               if not isinstance(part, str)
                               for var in part)

        fragments = [var for var in self.variables
                     if var.type == VariableType.FRAGMENT]
        if len(fragments) > 1:
            raise MalformedTemplate(
                "Template '%s' declares more than one fragment: %s" %
                (template, ', '.join(var.name for var in fragments)))
        self._check_query_before_fragment()

        self.variable_names = []
        for var in self.variables:
            if var.name not in self.variable_names:
                self.variable_names.append(var.name)

    @classmethod
    def parse(cls, template):
        return cls(template)

    def __repr__(self):
        return "<UriTemplate '%s'>" % self.template

    def __str__(self):
        return self.template

    def __eq__(self, other):
        return (isinstance(other, UriTemplate) and
                self.template == other.template)

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash(self.template)

    @property
    def has_variables(self):
        return bool(self.variables)

    def _check_query_before_fragment(self):
        in_fragment = False
        for part in self._parts:
            if isinstance(part, str):
                in_fragment = in_fragment or '#' in part
                continue
            for var in part:
                if var.type.is_query and in_fragment:
                    raise MalformedTemplate(
                        "Request parameter '%s' follows the fragment in '%s'"
                        % (var.name, self.template))
                if var.type == VariableType.FRAGMENT:
                    in_fragment = True

    @classmethod
    def _parse(cls, template):
        parts = []
        pos = 0
        while pos < len(template):
            start = template.find('{', pos)
            if start < 0:
                parts.append(template[pos:])
                break

            if start > pos:
                parts.append(template[pos:start])

            end = template.find('}', start)
            nested = template.find('{', start + 1)
            if end < 0 or (0 <= nested < end):
                raise MalformedTemplate(
                    "Unterminated variable block at position %d in '%s'" %
                    (start, template))

            parts.append(cls._parse_block(template[start + 1:end], template))
            pos = end + 1

        return parts

    @classmethod
    def _parse_block(cls, expression, template):
        if not expression:
            raise MalformedTemplate("Empty variable block in '%s'" %
                                    template)

        marker = expression[0]
        if marker in UNSUPPORTED_OPERATORS:
            raise MalformedTemplate("Unknown marker '%s' in '%s'" %
                                    (marker, template))

        vartype = VariableType.from_marker(marker)
        if vartype is None:
            vartype = VariableType.PATH_VARIABLE
            names = expression
        else:
            names = expression[1:]

        block = []
        for name in names.split(','):
            if not name:
                raise MalformedTemplate(
                    "Empty variable name in '%s'" % template)
            block.append(TemplateVariable(name, vartype))
        return tuple(block)

    def _bind(self, args, kwargs):
        if len(args) == 1 and isinstance(args[0], Mapping):
            values = dict(args[0])
        else:
            if len(args) > len(self.variable_names):
                raise InvalidParameter(
                    "Template '%s' has %d variables but %d values were given"
                    % (self.template, len(self.variable_names), len(args)))
            values = dict(zip(self.variable_names, args))

        values.update(kwargs)
        return values

    def _single_value(self, var, value):
        # Strings and bytes are iterable but count as one value
        if (isinstance(value, Iterable) and
                not isinstance(value, (str, bytes))):
            raise InvalidParameter(
                "Variable '%s' in '%s' does not accept %s values" %
                (var.name, self.template, type(value).__name__))
        return str(value)

    def _query_values(self, var, value):
        # Only ordered sequences repeat the parameter
        if not isinstance(value, (list, tuple)):
            value = [value]
        return [self._single_value(var, item) for item in value
                if item is not None]

    def expand(self, *args, **kwargs):
        """ Expand the template and return the resulting URI string.

        Accepts either a single mapping of variable names to values, or
        values by position in declaration order.  Keyword arguments
        are merged over either form.

        :raises MissingVariable: if a required path variable has no value
        :raises InvalidParameter: if too many positional values are given
            or a value is not supported by its variable's type

        """
        values = self._bind(args, kwargs)

        result = []
        query = False
        for part in self._parts:
            if isinstance(part, str):
                result.append(part)
                query = query or '?' in part
                continue

            emitted = False
            for var in part:
                value = values.get(var.name)
                if value is None:
                    if var.required:
                        raise MissingVariable(var.name, self.template)
                    continue

                if var.type.is_query:
                    for item in self._query_values(var, value):
                        result.append('%s%s=%s' %
                                      ('&' if query else '?', var.name, item))
                        query = True
                    continue

                text = self._single_value(var, value)
                if var.type == VariableType.PATH_VARIABLE and emitted:
                    result.append(',')
                result.append(var.type.marker + text)
                emitted = True

        uri = ''.join(result)
        logger.debug("Expanded '%s' to '%s'" % (self.template, uri))
        return uri
