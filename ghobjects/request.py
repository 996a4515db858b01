# Copyright (c) 2009-2010 Six Apart Ltd.
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
# * Redistributions of source code must retain the above copyright notice,
#   this list of conditions and the following disclaimer.
#
# * Redistributions in binary form must reproduce the above copyright notice,
#   this list of conditions and the following disclaimer in the documentation
#   and/or other materials provided with the distribution.
#
# * Neither the name of Six Apart Ltd. nor the names of its contributors may
#   be used to endorse or promote products derived from this software without
#   specific prior written permission.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
# AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
# IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE
# ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE
# LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR
# CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF
# SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS
# INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN
# CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE)
# ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
# POSSIBILITY OF SUCH DAMAGE.

"""

Building requests.

A `Requester` is a fluent builder that accumulates the pieces of one API call
(method, path, parameters, headers, body, page size and the context values to
inject into decoded objects) and then either describes it as an immutable
`RequestSpec` or executes it.

>>> commits = (session.create_request()
...     .with_path('/repos/octocat/hello-world/commits')
...     .with_param('author', 'octocat')
...     .to_iterable(Commit))

Building a request performs no I/O. Only the terminal `fetch*()`, `send()`
methods do, and `to_iterable()` returns a `PagedIterable` that waits to be
iterated.

"""

from collections import namedtuple
from datetime import datetime
import enum
import logging
from urllib.parse import quote, urlencode

import simplejson as json

from ghobjects import fields
import ghobjects.http
from ghobjects.errors import ConfigurationError
from ghobjects.iterable import RequestIterable
from ghobjects.listobject import ListOf


log = logging.getLogger('ghobjects.request')

METHODS = ('GET', 'POST', 'PATCH', 'PUT', 'DELETE')

# Methods whose parameters travel in the query string rather than the body.
QUERY_METHODS = ('GET', 'DELETE')


class RequestSpec(namedtuple('RequestSpec', 'method api_url target params '
                             'context page_size headers body page_numbered')):

    """An immutable description of one API call.

    `target` is a path relative to `api_url` or a full URL. `params`,
    `context` and `headers` are tuples of ``(name, value)`` pairs in the order
    they were given. `page_size` is the number of items to ask for per page,
    or 0 to leave it up to the server.

    """

    __slots__ = ()

    def context_dict(self):
        return dict(self.context)

    def base_url(self):
        if '://' in self.target:
            return self.target
        return self.api_url.rstrip('/') + self.target

    def query_params(self, page_size=None):
        if self.method not in QUERY_METHODS:
            return []
        params = [(k, query_form(v)) for k, v in self.params]
        if page_size is None:
            page_size = self.page_size
        if page_size and 'per_page' not in dict(params):
            params.append(('per_page', str(page_size)))
        return params

    def url(self, page_size=None):
        """Returns the full URL of the request, with the query string holding
        its parameters for ``GET`` and ``DELETE`` requests.

        Optional parameter `page_size` overrides the request's own page size.

        """
        url = self.base_url()
        params = self.query_params(page_size)
        if not params:
            return url
        joiner = '&' if '?' in url else '?'
        return url + joiner + urlencode(params)

    def body_content(self):
        """Returns the encoded body of the request, if it has one."""
        if self.body is not None:
            if isinstance(self.body, (bytes, str)):
                return self.body
            return json.dumps(self.body)
        if self.method in QUERY_METHODS or not self.params:
            return None
        return json.dumps(dict(self.params))


def query_form(value):
    """Returns the query string form of an encoded parameter value."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    # List values go in the query string comma separated.
    if isinstance(value, tuple):
        return ','.join(str(query_form(v)) for v in value)
    return value


def encode_value(name, value, enum_cls=None):
    """Returns the form of `value` to send as parameter `name`.

    Booleans and numbers are kept as they are, so request bodies encode them
    as JSON booleans and numbers. `query_form()` spells them out for query
    strings.

    """
    if enum_cls is not None and not isinstance(value, enum_cls):
        try:
            value = enum_cls(value)
        except ValueError:
            raise ConfigurationError('%r is not a valid %s for parameter %r'
                % (value, enum_cls.__name__, name))
    if isinstance(value, enum.Enum):
        if isinstance(value.value, str):
            return value.value
        return value.name.lower().replace('_', '-')
    if isinstance(value, bool):
        return value
    if isinstance(value, datetime):
        return fields.Datetime().encode(value)
    if isinstance(value, (str, int, float)):
        return value
    if isinstance(value, (list, tuple)):
        return tuple(encode_value(name, v, enum_cls) for v in value)
    raise ConfigurationError('Cannot send %s value %r as parameter %r'
        % (type(value).__name__, value, name))


class Requester(object):

    """A fluent builder for one request to the API of a `Session`.

    Every builder method returns the `Requester` itself, so calls can be
    chained. Obtain one from `Session.create_request()`, which injects the
    session as the ``root`` context value of everything decoded.

    """

    def __init__(self, session):
        self.session = session
        self._method = 'GET'
        self._api_url = session.api_url
        self._target = None
        self._params = []
        self._accumulated = {}
        self._context = {'root': session}
        self._headers = dict(session.headers)
        self._page_size = 0
        self._body = None
        self._page_numbered = False

    def method(self, verb):
        verb = verb.upper()
        if verb not in METHODS:
            raise ConfigurationError('Unsupported HTTP method %r' % (verb,))
        self._method = verb
        return self

    def with_api_url(self, url):
        self._api_url = url
        return self

    def with_path(self, path, *items):
        """Sets the path of the request, relative to the API URL.

        Any `items` are URL-escaped and appended to `path` as further path
        segments.

        """
        if not path.startswith('/'):
            path = '/' + path
        for item in items:
            path = path.rstrip('/') + '/' + quote(str(item), safe='')
        self._target = path
        return self

    def with_url(self, url):
        """Sets the full URL of the request, as when following a URL the API
        gave in an earlier response."""
        self._target = url
        return self

    def with_param(self, name, value, enum=None):
        """Sets parameter `name` to `value`, replacing any earlier value.

        A `value` of `None` removes the parameter. If `enum` is an
        `enum.Enum` class, `value` must be one of its members or values.

        """
        self._accumulated.pop(name, None)
        if value is None:
            self._params = [(k, v) for k, v in self._params if k != name]
            return self
        self._set_param(name, encode_value(name, value, enum))
        return self

    def with_params(self, **kwargs):
        for name, value in kwargs.items():
            self.with_param(name, value)
        return self

    def append_param(self, name, value, separator=','):
        """Adds `value` to the list parameter `name`, which is sent as all the
        values added so far joined by `separator`."""
        if value is None:
            return self
        values = self._accumulated.setdefault(name, [])
        values.append(str(query_form(encode_value(name, value))))
        self._set_param(name, separator.join(values))
        return self

    def _set_param(self, name, value):
        for i, (k, v) in enumerate(self._params):
            if k == name:
                self._params[i] = (name, value)
                return
        self._params.append((name, value))

    def inject(self, name, value):
        """Binds `value` as `name` for the `fields.Injected` properties of
        objects decoded from this request's responses."""
        self._context[name] = value
        return self

    def with_header(self, name, value):
        self._headers[name.lower()] = value
        return self

    def with_body(self, body):
        """Sends `body` as the request body instead of the parameters.

        `body` may be bytes or a string, sent as is, or data to encode as
        JSON.

        """
        self._body = body
        return self

    def page_size(self, size):
        if size < 0:
            raise ConfigurationError('Page size must not be negative, not %r' % (size,))
        self._page_size = size
        return self

    def paged_by_number(self):
        """Marks the request's endpoint as one that pages by a ``page``
        parameter without sending ``Link`` headers."""
        self._page_numbered = True
        return self

    def build(self):
        """Returns the `RequestSpec` described by this builder so far."""
        if not self._target:
            raise ConfigurationError('Request has no path or URL')
        return RequestSpec(
            method=self._method,
            api_url=self._api_url,
            target=self._target,
            params=tuple(self._params),
            context=tuple(self._context.items()),
            page_size=self._page_size,
            headers=tuple(sorted(self._headers.items())),
            body=self._body,
            page_numbered=self._page_numbered,
        )

    def _exchange(self, spec, check=True, check_content_type=True):
        response, content = ghobjects.http.execute(self.session.http, spec)
        if check:
            ghobjects.http.raise_for_response(spec.url(), response, content,
                check_content_type=check_content_type)
        return response, content

    def fetch(self, cls):
        """Sends the request and decodes the response into a new instance of
        the `DataObject` class `cls`.

        Returns `None` for responses without content, unless `cls` is a list
        type that reads such a response as empty.

        """
        spec = self.build()
        response, content = self._exchange(spec)
        if (not ghobjects.http.response_has_content.get(response.status)
                and not getattr(cls, 'not_ready_is_empty', False)):
            return None
        obj = self.session.decoder.decode(content, cls, spec.context_dict())
        return self.session.rehydrator.rehydrate(obj)

    def fetch_into(self, instance):
        """Sends the request and merges the response into the existing
        `DataObject` `instance`, which is returned."""
        spec = self.build()
        response, content = self._exchange(spec)
        self.session.decoder.decode_into(content, instance, spec.context_dict())
        return self.session.rehydrator.refresh(instance)

    def fetch_status(self):
        """Sends the request and returns only the response's status code.

        Unsuccessful statuses are returned rather than raised.

        """
        response, content = self._exchange(self.build(), check=False)
        return response.status

    def fetch_raw(self):
        """Sends the request and returns the response body as bytes, whatever
        its content type."""
        response, content = self._exchange(self.build(), check_content_type=False)
        return content

    def send(self):
        """Sends the request and checks that it was successful."""
        self._exchange(self.build())

    def fetch_graphql(self, cls):
        """Sends a GraphQL request and decodes the ``data`` member of the
        response into a new instance of `cls`.

        Raises `GraphQLError` if the response reports errors.

        """
        spec = self.build()
        response, content = self._exchange(spec)
        data = self.session.decoder.load(content)
        if not isinstance(data, dict):
            raise ghobjects.http.BadResponse('GraphQL response from %s is not an object'
                % (spec.url(),), response, content)
        errors = data.get('errors')
        if errors:
            messages = '; '.join(str(e.get('message', e)) if isinstance(e, dict) else str(e)
                                 for e in errors)
            raise ghobjects.http.GraphQLError('GraphQL request failed: %s' % (messages,),
                errors, response, content)
        obj = self.session.decoder.decode_data(data.get('data'), cls, spec.context_dict())
        return self.session.rehydrator.rehydrate(obj)

    def to_iterable(self, item_cls, initializer=None, page_cls=None, items=None):
        """Returns a `PagedIterable` of the `item_cls` instances this request
        lists.

        Optional parameter `initializer` is called with each item as it is
        decoded, and its result is yielded instead; it defaults to the
        session's `Rehydrator.rehydrate`. To bind an owner, pass
        `session.rehydrator.binder(owner)`.

        Optional parameters `page_cls` and `items` are for endpoints whose
        pages are not plain JSON arrays: each page is decoded as a `page_cls`
        instance and `items(page)` gives its list of items.

        """
        if page_cls is None:
            page_cls = ListOf(item_cls)
        if initializer is None:
            initializer = self.session.rehydrator.rehydrate
        spec = self.build()
        return RequestIterable(self.session, spec, page_cls, items=items,
            initializer=initializer, page_size=spec.page_size or self.session.page_size)
