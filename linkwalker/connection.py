# Copyright (c) 2019 Riverbed Technology, Inc.
#
# This software is licensed under the terms and conditions of the MIT License
# accompanying the software ("License").  This software is distributed "AS IS"
# as set forth in the License.

"""
This module defines the transport used by `Traverser`: a `Connection`
issues requests to a single host, and a `ConnectionManager` hands out
connections as a traversal moves from host to host.

A single `ConnectionManager` instance instantiates connections
to target hosts by calling registered `ConnectionHook` instances.
A connection is established for each unique <host, auth> pair,
where the auth object represents the authentication credentials
in a form understood by the underlying connection class.

"""

import logging
import threading
import urllib.parse

import requests
import requests.exceptions
from requests.structures import CaseInsensitiveDict
from requests.packages.urllib3.util import parse_url

from linkwalker.exceptions import URLError, HTTPError, ConnectionError

logger = logging.getLogger(__name__)


def host_of(uri):
    """ Return the scheme://host[:port] part of an absolute URI. """
    p = parse_url(uri)
    if not (p.scheme and p.host):
        raise URLError("URI must be absolute (e.g. https://host/...): '%s'"
                       % uri)
    host = '%s://%s' % (p.scheme, p.host)
    if p.port:
        host += ':%d' % p.port
    return host


class ConnectionHook(object):
    """ This class defines the interface for establishing connections.

    This class may be sub-classed and the `connect()` method
    overridden.  An instance of the new class is passed to the
    `ConnectionManager.add_conn_hook()` method.

    """

    def __init__(self, verify=True, timeout=None):
        self.verify = verify
        self.timeout = timeout

    def connect(self, host, auth):
        """ Establish a new Connection to the target host.

        :param host: scheme / ip address or hostname / port of the
            target server to connect to
        :param auth: object representing authentication credentials
            to use for requests to the target host

        This method must return a `Connection` object (or similar) or
        None if this hook does not know how to connect to the named
        `host`.

        """
        return Connection(host, auth, verify=self.verify,
                          timeout=self.timeout)


class ConnectionManager(object):
    """ Caches one connection per <host, auth> pair. """

    def __init__(self, verify=True, timeout=None):
        # Index of connections by (host, auth)
        self.conns = {}

        # List of connection hooks to use
        self._conn_hooks = []
        self._default_hooks = [ConnectionHook(verify=verify,
                                              timeout=timeout)]
        self._lock = threading.Lock()

    def add(self, host, auth, conn):
        """ Manually add a connection to the given host to the manager.

        :param host: the target host of the connection
        :param auth: object representing authentication credentials
        :param conn: a `Connection` object

        Note that if a connection is already present to the target host
        it is replaced with the new connection.

        """
        with self._lock:
            self.conns[(host, auth)] = conn

    def add_conn_hook(self, hook):
        """ Add a connection hook to call to establish new connections. """
        self._conn_hooks.append(hook)

    def clear_hooks(self):
        """ Drop all connection hooks. """
        self._conn_hooks = []

    def reset(self):
        """ Close and forget all connections. """
        with self._lock:
            for conn in self.conns.values():
                conn.close()
            self.conns = {}

    def find(self, host, auth=None):
        """ Find a connection to the given host, trying hooks as needed.

        :param host: the target host of the connection
        :param auth: object representing authentication credentials

        :raises ConnectionError: if no connection to the target host
           could be found and no connection hooks succeeded in
           establishing a new connection
        """
        key = (host, auth)
        with self._lock:
            conn = self.conns.get(key)
            if conn is not None:
                logger.debug("Reusing existing connection to '%s'" % host)
                return conn

            hooks = self._conn_hooks or self._default_hooks
            for hook in hooks:
                conn = hook.connect(host, auth)
                if conn:
                    logger.info("Established new connection to '%s' via '%s'"
                                % (host, hook))
                    break
            if conn is None:
                raise ConnectionError(
                    'Failed to establish a connection to %s' % host)
            self.conns[key] = conn
        return conn

    def find_for_uri(self, uri, auth=None):
        """ Find a connection to the host of the absolute `uri`. """
        return self.find(host_of(uri), auth)


class Connection(object):

    """ Handle authentication and communication to remote machines. """
    def __init__(self, hostname, auth=None, port=None, verify=True,
                 timeout=None):
        """ Initialize new connection and setup authentication

            `hostname` - include protocol, e.g. 'https://host.com'
            `auth` - authentication object, see below
            `port` - optional port to use for connection
            `verify` - require SSL certificate validation.
            `timeout` - float timeout in seconds, or tuple
                        (connect timeout, read timeout)

            Authentication:
            For simple basic auth, passing a tuple of (user, pass) is
            sufficient as a shortcut to an instance of HTTPBasicAuth.
            Any other `requests` auth callable is passed through.
        """
        p = parse_url(hostname)
        if not p.scheme:
            raise URLError('Scheme must be provided (e.g. https:// '
                           'or http://).')
        else:
            if p.port and port and p.port != int(port):
                raise URLError('Mismatched ports provided.')
            elif not p.port and port:
                hostname = hostname + ':' + str(port)

        if isinstance(timeout, (tuple, list)):
            if len(timeout) != 2:
                raise ValueError('timeout tuple must be 2 float entries')
            timeout = (float(timeout[0]), float(timeout[1]))
        elif timeout is not None:
            timeout = float(timeout)

        self.hostname = hostname
        self.timeout = timeout

        self.conn = requests.session()
        self.conn.auth = auth
        self.conn.verify = verify

        # store last full response
        self.response = None

    def __repr__(self):
        return '<Connection %s>' % self.hostname

    def close(self):
        self.conn.close()

    def get_url(self, uri):
        """ Returns a fully qualified URL given a URI. """
        return urllib.parse.urljoin(self.hostname, uri)

    def request(self, method, uri, body=None, params=None,
                extra_headers=None):
        """ Send a request and return the `requests.Response`.

        :raises ConnectionError: if the request could not be sent or
            no response was received
        :raises HTTPError: (or a subclass by status code) if the
            response status is not a success

        """
        p = parse_url(uri)
        if not p.host:
            uri = self.get_url(uri)

        if extra_headers is not None:
            extra_headers = CaseInsensitiveDict(extra_headers)

        logger.debug('%s %s headers=%s' % (method, uri, extra_headers))
        try:
            r = self.conn.request(method, uri, data=body, params=params,
                                  headers=extra_headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise ConnectionError('Could not connect to uri %s: %s' %
                                  (uri, e))

        self.response = r

        # check if good status response otherwise raise exception
        if not r.ok:
            HTTPError.raise_by_status(r)

        return r

    def add_headers(self, headers):
        """ Add headers that are common to all requests. """
        self.conn.headers.update(headers)
