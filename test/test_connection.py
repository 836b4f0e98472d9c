# Copyright (c) 2019 Riverbed Technology, Inc.
#
# This software is licensed under the terms and conditions of the MIT License
# accompanying the software ("License").  This software is distributed "AS IS"
# as set forth in the License.

import logging
import unittest

import mock
import requests.exceptions
import requests_mock

import linkwalker.exceptions

from linkwalker.connection import \
    Connection, ConnectionHook, ConnectionManager, URLError, host_of

logger = logging.getLogger(__name__)

HOST = 'http://movies-server:8080'


class ConnectionTest(unittest.TestCase):

    def test_hostnames(self):
        conn = Connection('http://example.com')
        self.assertEqual(conn.hostname, 'http://example.com')

        conn = Connection('https://example.com')
        self.assertEqual(conn.hostname, 'https://example.com')

        conn = Connection('https://example.com', port='20483')
        self.assertEqual(conn.hostname, 'https://example.com:20483')

        conn = Connection('https://example.com:20483', port=20483)
        self.assertEqual(conn.hostname, 'https://example.com:20483')

    def test_timeouts(self):
        self.assertEqual(Connection(HOST, timeout=5).timeout, 5.0)
        self.assertEqual(Connection(HOST, timeout=(1, 10)).timeout,
                         (1.0, 10.0))
        self.assertIsNone(Connection(HOST).timeout)
        with self.assertRaises(ValueError):
            Connection(HOST, timeout=(1, 2, 3))

    def test_requests_connection_error(self):
        def side_effect(*args, **kwargs):
            raise requests.exceptions.ConnectionError(
                "ConnectionError from 'requests'")

        conn = Connection('https://example.com')
        conn.conn.request = mock.Mock(side_effect=side_effect)

        with self.assertRaises(linkwalker.exceptions.ConnectionError):
            conn.request('GET', '/anything')

    def test_requests_ssl_error(self):
        def side_effect(*args, **kwargs):
            raise requests.exceptions.SSLError("SSLError from 'requests'")

        conn = Connection('https://example.com')
        conn.conn.request = mock.Mock(side_effect=side_effect)

        with self.assertRaises(linkwalker.exceptions.ConnectionError):
            conn.request('GET', '/anything')

    def test_missing_schema(self):
        with self.assertRaises(URLError):
            Connection('example.com', port=666)

    def test_port_mismatch(self):
        with self.assertRaises(URLError):
            Connection('http://example.com:20483', port=666)

    def test_request(self):
        conn = Connection(HOST)
        with requests_mock.Mocker() as m:
            m.get(HOST + '/movies', json={'_links': {}},
                  headers={'Content-Type': 'application/hal+json'})
            r = conn.request('GET', '/movies',
                             extra_headers={'Accept': 'application/hal+json'})

        self.assertEqual(r.json(), {'_links': {}})
        self.assertIs(conn.response, r)
        self.assertEqual(m.last_request.headers['Accept'],
                         'application/hal+json')
        self.assertEqual(m.last_request.url, HOST + '/movies')

    def test_common_headers(self):
        conn = Connection(HOST)
        conn.add_headers({'X-Client': 'linkwalker'})
        with requests_mock.Mocker() as m:
            m.get(HOST + '/', text='')
            conn.request('GET', HOST + '/')
        self.assertEqual(m.last_request.headers['X-Client'], 'linkwalker')

    def test_404(self):
        conn = Connection(HOST)
        with requests_mock.Mocker() as m:
            m.get(HOST + '/notfound', status_code=404,
                  json={'message': 'No such resource'})
            with self.assertRaises(
                    linkwalker.exceptions.HTTPNotFound) as cm:
                conn.request('GET', '/notfound')

        self.assertEqual(cm.exception.http_code, 404)
        self.assertEqual(str(cm.exception), 'No such resource')
        self.assertEqual(cm.exception.uri, HOST + '/notfound')

    def test_500_with_html_body(self):
        conn = Connection(HOST)
        with requests_mock.Mocker() as m:
            m.get(HOST + '/', status_code=500, reason='Internal Server Error',
                  text='<html>oops</html>')
            with self.assertRaises(
                    linkwalker.exceptions.HTTPInternalServerError) as cm:
                conn.request('GET', '/')

        self.assertEqual(str(cm.exception), 'Internal Server Error')
        self.assertEqual(cm.exception.text, '<html>oops</html>')
        self.assertIsNone(cm.exception.json_data)


class ConnectionManagerTest(unittest.TestCase):

    def test_host_of(self):
        self.assertEqual(host_of(HOST + '/movies/1?x=1'), HOST)
        self.assertEqual(host_of('https://example.com/a'),
                         'https://example.com')
        with self.assertRaises(URLError):
            host_of('/movies/1')

    def test_connections_cached_per_host_and_auth(self):
        manager = ConnectionManager()
        conn = manager.find_for_uri(HOST + '/movies')
        self.assertIsInstance(conn, Connection)
        self.assertEqual(conn.hostname, HOST)

        self.assertIs(manager.find_for_uri(HOST + '/actors/1'), conn)
        self.assertIsNot(manager.find(HOST, ('user', 'pass')), conn)
        self.assertIsNot(manager.find('http://other-server'), conn)
        self.assertEqual(len(manager.conns), 3)

    def test_defaults_passed_to_connections(self):
        manager = ConnectionManager(verify=False, timeout=3)
        conn = manager.find(HOST)
        self.assertFalse(conn.conn.verify)
        self.assertEqual(conn.timeout, 3.0)

    def test_add_and_reset(self):
        manager = ConnectionManager()
        conn = mock.Mock(Connection)
        manager.add(HOST, None, conn)
        self.assertIs(manager.find(HOST), conn)

        manager.reset()
        conn.close.assert_called_once_with()
        self.assertEqual(manager.conns, {})

    def test_hooks(self):
        conn = mock.Mock(Connection)
        hook = mock.Mock(ConnectionHook)
        hook.connect.return_value = conn

        manager = ConnectionManager()
        manager.add_conn_hook(hook)
        self.assertIs(manager.find(HOST, 'token'), conn)
        hook.connect.assert_called_once_with(HOST, 'token')

        manager.clear_hooks()
        self.assertIsInstance(manager.find('http://other-server'),
                              Connection)

    def test_no_hook_connects(self):
        hook = mock.Mock(ConnectionHook)
        hook.connect.return_value = None

        manager = ConnectionManager()
        manager.add_conn_hook(hook)
        with self.assertRaises(linkwalker.exceptions.ConnectionError):
            manager.find(HOST)


if __name__ == '__main__':
    logging.basicConfig(filename='test.log', level=logging.DEBUG)
    unittest.main()
