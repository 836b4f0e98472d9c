# Copyright (c) 2019 Riverbed Technology, Inc.
#
# This software is licensed under the terms and conditions of the MIT License
# accompanying the software ("License").  This software is distributed "AS IS"
# as set forth in the License.

# NOTE: If any imports are made in this module, please add an
# __all__ = []
# definition as __init__.py does a from .exceptions import *.


#
# General exception and base class
#
class LinkwalkerException(Exception):
    """ Base exception class for linkwalker errors. """


class ConfigurationError(LinkwalkerException):
    """ A Traverser or one of its collaborators was configured badly. """


class InvalidMediaType(ConfigurationError):
    """ A media type string could not be parsed. """


#
# URI template exceptions
#
class TemplateError(LinkwalkerException):
    """ Base class for URI template errors. """


class MalformedTemplate(TemplateError):
    """ URI template string could not be parsed. """


class MissingVariable(TemplateError):
    """ URI template missing a required variable. """

    def __init__(self, variable, template):
        self.variable = variable
        self.template = template
        super(MissingVariable, self).__init__(
            "No value given for required variable '%s' in template '%s'" %
            (variable, template))


class InvalidParameter(TemplateError):
    """ URI template found an invalid parameter. """


#
# Traversal exceptions
#
class LinkNotFound(LinkwalkerException):
    """ Raised if a relation could not be found in a response body. """

    def __init__(self, rel, body):
        self.rel = rel
        self.body = body
        super(LinkNotFound, self).__init__(
            "Expected to find link with rel '%s' in response %s" %
            (rel, body))


class DecodeError(LinkwalkerException):
    """ Raised if a body could not be decoded or an expression did not match.
    """


#
# Transport related exceptions
#
class TransportError(LinkwalkerException):
    """ Base class for failures reported by the transport. """


class ConnectionError(TransportError):
    """ A connection error occurred. """


class URLError(ConnectionError):
    """ An error occurred when building a URL. """


#
# Request/Response related exceptions
#
class HTTPError(TransportError):
    """ Links an HTTP status with the decoded error body, if any. """
    code_map = {}

    def __init__(self, response):
        self._response = response

        self.http_code = response.status_code
        self.headers = response.headers
        self.uri = getattr(response, 'url', None)

        # Error bodies of hypermedia APIs are usually JSON, but proxies
        # and web servers in front of them answer with plain text or HTML.
        try:
            self.json_data = response.json()
            self.text = None
        except ValueError:
            self.json_data = None
            self.text = response.text

        # Prefer a message from the body, fall back to the HTTP reason
        # string, e.g. 'Not Found'.
        error_text = None
        if isinstance(self.json_data, dict):
            for key in ('message', 'error_text'):
                if self.json_data.get(key):
                    error_text = self.json_data[key]
                    break
        if error_text is None:
            error_text = response.reason
        super(HTTPError, self).__init__(error_text)

    @classmethod
    def raise_by_status(cls, response):
        exception_class = cls.code_map.get(response.status_code, None)
        if exception_class is None:
            if response.status_code >= 400 and response.status_code < 500:
                exception_class = ClientHTTPError
            elif response.status_code >= 500 and response.status_code < 600:
                exception_class = ServerHTTPError
            else:
                exception_class = HTTPError
        raise exception_class(response)


class ClientHTTPError(HTTPError):
    """ Client-side errors (4xx codes). """


class HTTPBadRequest(ClientHTTPError):
    pass
HTTPError.code_map[400] = HTTPBadRequest


class HTTPUnauthorized(ClientHTTPError):
    pass
HTTPError.code_map[401] = HTTPUnauthorized


class HTTPForbidden(ClientHTTPError):
    pass
HTTPError.code_map[403] = HTTPForbidden


class HTTPNotFound(ClientHTTPError):
    pass
HTTPError.code_map[404] = HTTPNotFound


class HTTPMethodNotAllowed(ClientHTTPError):
    pass
HTTPError.code_map[405] = HTTPMethodNotAllowed


# Server could not produce any of the media types in the Accept header
class HTTPNotAcceptable(ClientHTTPError):
    pass
HTTPError.code_map[406] = HTTPNotAcceptable


class HTTPGone(ClientHTTPError):
    pass
HTTPError.code_map[410] = HTTPGone


class HTTPUnsupportedMediaType(ClientHTTPError):
    pass
HTTPError.code_map[415] = HTTPUnsupportedMediaType


# RFC 6585
class HTTPTooManyRequests(ClientHTTPError):
    pass
HTTPError.code_map[429] = HTTPTooManyRequests


class ServerHTTPError(HTTPError):
    """ Server-side errors (5xx codes). """


class HTTPInternalServerError(ServerHTTPError):
    pass
HTTPError.code_map[500] = HTTPInternalServerError


class HTTPBadGateway(ServerHTTPError):
    pass
HTTPError.code_map[502] = HTTPBadGateway


class HTTPServiceUnavailable(ServerHTTPError):
    pass
HTTPError.code_map[503] = HTTPServiceUnavailable


class HTTPGatewayTimeout(ServerHTTPError):
    pass
HTTPError.code_map[504] = HTTPGatewayTimeout
