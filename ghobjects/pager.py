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

Fetching the pages of a paged response one at a time.

A `PageCursor` knows how to get the first page of a `RequestSpec` and, given
the cursor extracted from one page, the page after it. Cursors are URLs taken
from the response's ``Link`` header, or for endpoints that page by number,
the request URL with its ``page`` parameter advanced. They are never read from
the response body, so endpoints whose pages are objects rather than arrays
page the same way.

"""

import logging
import re
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

import ghobjects.http
from ghobjects.decoder import Decoder


log = logging.getLogger('ghobjects.pager')

link_pattern = re.compile(r'<([^>]*)>\s*((?:;\s*[^;,]+)*)')
rel_pattern = re.compile(r'rel\s*=\s*"?([^";]+)"?')


def parse_links(header):
    """Parses an RFC 5988 ``Link`` header into a dictionary of URLs keyed by
    their ``rel`` values."""
    links = {}
    if not header:
        return links
    for url, params in link_pattern.findall(header):
        match = rel_pattern.search(params)
        if match is None:
            continue
        for rel in match.group(1).split():
            links[rel] = url
    return links


def set_query_param(url, name, value):
    """Returns `url` with its query parameter `name` set to `value`."""
    parts = list(urlparse(url))
    queryargs = [(k, v) for k, v in parse_qsl(parts[4], keep_blank_values=True)
                 if k != name]
    queryargs.append((name, str(value)))
    parts[4] = urlencode(queryargs)
    return urlunparse(parts)


def query_param(url, name, default=None):
    for k, v in parse_qsl(urlparse(url).query, keep_blank_values=True):
        if k == name:
            return v
    return default


class Page(object):

    """One page of a paged response.

    `body` is the page's parsed JSON body; `next` and `prev` are the cursors
    of the neighboring pages, or `None` where there are none.

    """

    def __init__(self, url, body, next=None, prev=None, response=None):
        self.url = url
        self.body = body
        self.next = next
        self.prev = prev
        self.response = response

    def __repr__(self):
        return '<Page %s next=%s>' % (self.url, self.next)


class PageCursor(object):

    """Fetches the pages of the paged request `spec`.

    If `page_size` (or the request's own page size) is nonzero, every page is
    requested with that many items per page, even when the server's next page
    link says otherwise. If it is zero the server's choice stands.

    """

    def __init__(self, http, spec, page_size=None, decoder=None):
        self.http = http
        self.spec = spec
        if page_size is None:
            page_size = spec.page_size
        self.page_size = page_size
        self.decoder = decoder or Decoder()

    def first_page(self):
        return self._fetch(None)

    def next_page(self, cursor):
        if self.page_size:
            cursor = set_query_param(cursor, 'per_page', self.page_size)
        return self._fetch(cursor)

    def __iter__(self):
        page = self.first_page()
        yield page
        while page.next is not None:
            page = self.next_page(page.next)
            yield page

    def _fetch(self, url):
        if url is None:
            spec = self.spec._replace(page_size=self.page_size)
            url = spec.url()
            response, content = ghobjects.http.execute(self.http, spec)
        else:
            response, content = ghobjects.http.execute(self.http, self.spec, url)
        ghobjects.http.raise_for_response(url, response, content)

        body = self.decoder.load(content)
        links = parse_links(response.get('link'))
        next_url = links.get('next')
        if next_url is None and self.spec.page_numbered:
            next_url = self._numbered_next(url, body)
        log.debug('Fetched page %s, next page %s', url, next_url)
        return Page(url, body, next=next_url, prev=links.get('prev'),
            response=response)

    def _numbered_next(self, url, body):
        if not isinstance(body, list) or not body:
            return None
        if self.page_size and len(body) < self.page_size:
            return None
        number = int(query_param(url, 'page', 1))
        return set_query_param(url, 'page', number + 1)
