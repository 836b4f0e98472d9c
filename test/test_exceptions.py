# Copyright (c) 2019 Riverbed Technology, Inc.
#
# This software is licensed under the terms and conditions of the MIT License
# accompanying the software ("License").  This software is distributed "AS IS"
# as set forth in the License.

import json

import mock
import pytest
import requests

from linkwalker import HTTPError, ClientHTTPError, ServerHTTPError, \
    TransportError, LinkwalkerException, LinkNotFound, MissingVariable, \
    ConfigurationError, InvalidMediaType, HTTPNotFound, HTTPNotAcceptable


def error_response(status_code, reason, text=None):
    response = mock.Mock(requests.Response)
    response.status_code = status_code
    response.reason = reason
    response.url = 'http://movies-server/movies'
    response.headers = {'content-type': 'application/json'}
    response.text = text
    if text is None:
        response.json = mock.Mock(side_effect=ValueError('no json'))
    else:
        response.json = mock.Mock(return_value=json.loads(text))
    return response


# HTTPError's constructor takes a requests.Response argument,
# which it mines for a __str__() message.
def test_message_error_response():
    response = error_response(
        404, 'Not Found',
        '{"timestamp": 1570000000, "status": 404,'
        ' "message": "No movie with id 99", "path": "/movies/99"}')
    exc = HTTPError(response)
    assert str(exc) == 'No movie with id 99'
    assert exc.http_code == 404
    assert exc.json_data['path'] == '/movies/99'
    assert exc.uri == 'http://movies-server/movies'
    assert repr(exc) == "HTTPError('No movie with id 99')"


def test_error_text_response():
    response = error_response(
        400, 'Bad Request',
        '{"error_id": "REQUEST_INVALID_INPUT",'
        ' "error_text": "Malformed input structure"}')
    assert str(HTTPError(response)) == 'Malformed input structure'


# If there is no usable message, make sure we get the HTTP error reason
@pytest.mark.parametrize('text', [None, '[]', '{"status": 400}'])
def test_reason_fallback(text):
    exc = HTTPError(error_response(400, 'Bad Request', text))
    assert str(exc) == 'Bad Request'


# If some bits are missing, make sure we still get the HTTPError
def test_crippled_response():
    response = mock.Mock(requests.Response)
    response.status_code = 400
    response.headers = {'content-type': 'application/json'}
    response.json = mock.Mock(return_value=None)
    with pytest.raises(AttributeError):
        HTTPError(response)


def test_raise_by_status():
    with pytest.raises(HTTPNotFound):
        HTTPError.raise_by_status(error_response(404, 'Not Found'))
    with pytest.raises(HTTPNotAcceptable):
        HTTPError.raise_by_status(error_response(406, 'Not Acceptable'))
    with pytest.raises(ClientHTTPError):
        HTTPError.raise_by_status(error_response(418, "I'm a teapot"))
    with pytest.raises(ServerHTTPError):
        HTTPError.raise_by_status(error_response(599, 'Timeout'))


# Let's not egregiously typo the code map to the point where we
# use a class twice or use a base class.
def test_http_error_code_map():
    bases = set((HTTPError, ClientHTTPError, ServerHTTPError))
    assert not bases.intersection(HTTPError.code_map.values())

    assert len(HTTPError.code_map) == len(set(HTTPError.code_map.values()))


def test_hierarchy():
    assert issubclass(HTTPError, TransportError)
    assert issubclass(TransportError, LinkwalkerException)
    assert issubclass(InvalidMediaType, ConfigurationError)


def test_link_not_found():
    exc = LinkNotFound('actor', '{"_links": {}}')
    assert exc.rel == 'actor'
    assert exc.body == '{"_links": {}}'
    assert str(exc) == ("Expected to find link with rel 'actor' in "
                        "response {\"_links\": {}}")


def test_missing_variable():
    exc = MissingVariable('id', '/movies/{id}')
    assert exc.variable == 'id'
    assert exc.template == '/movies/{id}'
    assert 'id' in str(exc)
