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

Sessions: the context every request and every decoded object shares.

A `Session` holds what is configurable about talking to the API (its URL,
the user agent that does the HTTP, the default page size and any extra
headers) along with the session's `Decoder`, `InternCache` and `Rehydrator`.

>>> import httplib2
>>> http = httplib2.Http()
>>> with Session(http=http, page_size=50) as session:
...     repo = session.get_repository('octocat/hello-world')

Objects decoded through a session see it as their ``root`` and use it to make
further requests. Interned objects are shared only within one session;
closing it discards them.

"""

import logging

import ghobjects.http
from ghobjects.decoder import Decoder
from ghobjects.promise import POPULATED
from ghobjects.rehydrate import InternCache, Rehydrator
from ghobjects.request import Requester
from ghobjects.resources import Repository, User


log = logging.getLogger('ghobjects.session')

DEFAULT_API_URL = 'https://api.github.com'


class Session(object):

    """A connection to one API.

    Optional parameter `api_url` is the base URL of the API, against which
    request paths are resolved.

    Optional parameter `http` is the user agent object to use for requests.
    `http` should be compatible with `httplib2.Http` instances; it is where
    authentication, caching and timeouts are configured. If not given, the
    shared `ghobjects.http.userAgent` is used.

    Optional parameter `page_size` is the number of items to request per page
    of paged requests that do not set their own. 0 leaves it to the server.

    Optional parameter `headers` are sent with every request.

    """

    def __init__(self, api_url=DEFAULT_API_URL, http=None, page_size=0, headers=None):
        self.api_url = api_url
        if http is None:
            http = ghobjects.http.userAgent
        self.http = http
        self.page_size = page_size
        self.headers = dict((k.lower(), v) for k, v in (headers or {}).items())
        self.decoder = Decoder()
        self.intern_cache = InternCache()
        self.rehydrator = Rehydrator(self.intern_cache)

    def __repr__(self):
        return '<Session %s>' % (self.api_url,)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self):
        """Discards the session's interned objects."""
        log.debug('Closing %r, discarding %d interned objects', self, len(self.intern_cache))
        self.intern_cache.clear()

    def create_request(self):
        """Returns a new `Requester` for a request to this session's API."""
        return Requester(self)

    def get_user(self, login):
        """Returns the canonical `User` with the given login, in full.

        Users the session only knows from partial representations (such as
        commit authors in a list of commits) are delivered in place, so every
        holder of the canonical instance sees the full data. A user is fetched
        at most once per session.

        """
        user = self.intern_cache.get(User, login)
        if user is None:
            user = User.from_dict({'login': login}, {'root': self})
            user.deliver()
            return self.rehydrator.rehydrate(user)
        if user.state != POPULATED:
            user.deliver()
        return user

    def get_repository(self, full_name):
        """Returns the `Repository` named `full_name` (``owner/name``)."""
        owner, name = full_name.split('/', 1)
        return self.create_request().with_path('/repos', owner, name).fetch(Repository)

    def graphql(self, query, cls, variables=None):
        """Sends a GraphQL query and returns its ``data`` decoded as a `cls`
        instance."""
        body = {'query': query}
        if variables:
            body['variables'] = variables
        return (self.create_request()
            .method('POST')
            .with_path('/graphql')
            .with_body(body)
            .fetch_graphql(cls))
