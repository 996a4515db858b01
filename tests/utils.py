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

import logging

import httplib2
import mock
import simplejson as json

from ghobjects.session import Session


API = 'https://api.example.com'


def response(content=None, status=200, link=None, **headers):
    """Returns a ``(response, content)`` pair as `httplib2.Http.request()`
    would.

    `content` that is not a string is encoded as JSON. `link` is the value of
    the response's ``Link`` header, if any.

    """
    if content is None:
        body = b''
    elif isinstance(content, bytes):
        body = content
    elif isinstance(content, str):
        body = content.encode('utf-8')
    else:
        body = json.dumps(content).encode('utf-8')

    response_info = {
        'status':       status,
        'content-type': 'application/json; charset=utf-8',
    }
    if link is not None:
        response_info['link'] = link
    response_info.update((k.replace('_', '-'), v) for k, v in headers.items())
    return httplib2.Response(response_info), body


def links(**rels):
    return ', '.join('<%s>; rel="%s"' % (url, rel) for rel, url in sorted(rels.items()))


def mock_http(*responses):
    """Returns a mock `httplib2.Http` that answers its requests with the
    given `response()` pairs, in order."""
    h = mock.NonCallableMock(spec_set=httplib2.Http)
    h.request.side_effect = list(responses)
    return h


def mock_session(*responses, **kwargs):
    return Session(API, http=mock_http(*responses), **kwargs)


def requested_uris(h):
    return [c[1]['uri'] for c in h.request.call_args_list]


def log():
    import sys
    logging.basicConfig(level=logging.DEBUG, stream=sys.stderr, format="%(asctime)s %(levelname)s %(message)s")
