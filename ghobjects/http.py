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

The HTTP side of a request: executing a `RequestSpec` once through an
`httplib2.Http` compatible user agent, and turning unsuccessful responses into
`TransportError` exceptions.

The user agent is responsible for authentication, caching, connection reuse
and timeouts. Nothing here retries a request.

"""

import http.client as httplib
import logging

import httplib2


userAgent = httplib2.Http()

log = logging.getLogger('ghobjects.http')


response_has_content = {
    httplib.OK:                True,
    httplib.ACCEPTED:          False,
    httplib.CREATED:           True,
    httplib.NO_CONTENT:        False,
    httplib.MOVED_PERMANENTLY: True,
    httplib.FOUND:             True,
    httplib.NOT_MODIFIED:      True,
}

content_types = ('application/json',)


class TransportError(httplib.HTTPException):
    """An HTTPException thrown when a request could not be completed
    successfully.

    The `response` and `content` of the failed exchange are available as
    attributes when there was one.

    """

    def __init__(self, message, response=None, content=None):
        super(TransportError, self).__init__(message)
        self.response = response
        self.content = content

    @property
    def status(self):
        if self.response is None:
            return None
        return self.response.status


class NotFound(TransportError):
    """An HTTPException thrown when the server reports that the requested
    resource was not found."""
    pass


class Unauthorized(TransportError):
    """An HTTPException thrown when the server reports that the requested
    resource is not available through an unauthenticated request.

    This exception corresponds to the HTTP status code 401. Thus when this
    exception is received, the caller may need to try again using the
    available authentication credentials.

    """
    pass


class Forbidden(TransportError):
    """An HTTPException thrown when the server reports that the client, as
    authenticated, is not authorized to request the requested resource.

    This exception corresponds to the HTTP status code 403, which the API also
    uses when the caller's rate limit is exhausted.

    """
    pass


class PreconditionFailed(TransportError):
    """An HTTPException thrown when the server reports that some of the
    conditions in a conditional request were not true.

    This exception corresponds to the HTTP status code 412.

    """
    pass


class RequestError(TransportError):
    """An HTTPException thrown when the server reports an error in the
    client's request.

    This exception corresponds to the HTTP status codes 400 and 422.

    """
    pass


class ServerError(TransportError):
    """An HTTPException thrown when the server reports an unexpected error.

    This exception corresponds to the HTTP 5xx status codes.

    """
    pass


class BadResponse(TransportError):
    """An HTTPException thrown when the client receives some other
    non-success HTTP response."""
    pass


class GraphQLError(TransportError):
    """An HTTPException thrown when a GraphQL request answered successfully
    at the HTTP level but reported errors in its body."""

    def __init__(self, message, errors=None, response=None, content=None):
        super(GraphQLError, self).__init__(message, response, content)
        self.errors = errors or []


def request_args(spec, url=None):
    """Returns the parameters for executing the `RequestSpec` `spec` as a
    dictionary of keyword arguments suitable for passing to
    `httplib2.Http.request()`.

    Optional parameter `url` replaces the URL described by `spec`, as when
    following a pagination link; such requests carry no body.

    """
    headers = {'accept': ', '.join(content_types)}
    headers.update(spec.headers)
    if url is None:
        url = spec.url()
        body = spec.body_content()
    else:
        body = None
    if body is not None:
        headers.setdefault('content-type', content_types[0])

    # Use 'uri' because httplib2.request does.
    return dict(uri=url, method=spec.method, headers=headers, body=body)


def execute(http, spec, url=None):
    """Executes the request `spec` once with the user agent `http` and
    returns its ``(response, content)`` pair.

    If `http` is `None`, the module's shared `userAgent` is used.

    """
    if http is None:
        http = userAgent
    request = request_args(spec, url)
    log.debug('%s %s', request['method'], request['uri'])
    response, content = http.request(**request)
    log.debug('%s %s answered %d', request['method'], request['uri'], response.status)
    return response, content


def content_type(response):
    return response.get('content-type', '').split(';', 1)[0].strip()


def raise_for_response(url, response, content, check_content_type=True):
    """Raises exceptions corresponding to invalid HTTP responses.

    Successful responses with content must be JSON unless
    `check_content_type` is false, as when fetching raw file content or
    diffs.

    """
    status = response.status
    if status == httplib.NOT_FOUND:
        raise NotFound('No such resource %s' % (url,), response, content)
    if status == httplib.UNAUTHORIZED:
        raise Unauthorized('Not authorized to fetch %s' % (url,), response, content)
    if status == httplib.FORBIDDEN:
        raise Forbidden('Forbidden from fetching %s' % (url,), response, content)
    if status == httplib.PRECONDITION_FAILED:
        raise PreconditionFailed('Precondition failed for request to %s' % (url,),
            response, content)

    if status in (httplib.BAD_REQUEST, httplib.UNPROCESSABLE_ENTITY) or status >= 500:
        if status >= 500:
            err_cls = ServerError
        else:
            err_cls = RequestError
        # Pull out an error if we can.
        if content_type(response) == 'text/plain' and content:
            error = content.decode('utf-8', 'replace').split('\n', 2)[0]
            exc = err_cls('%d %s requesting %s: %s'
                % (status, response.reason, url, error), response, content)
            exc.response_error = error
            raise exc
        raise err_cls('%d %s requesting %s' % (status, response.reason, url),
            response, content)

    try:
        has_content = response_has_content[status]
    except KeyError:
        # we only expect the statuses that we know do or don't have content
        raise BadResponse('Unexpected response requesting %s: %d %s'
            % (url, status, response.reason), response, content)

    if not has_content or not check_content_type:
        return

    # check that the response body was json
    if content_type(response) not in content_types:
        raise BadResponse(
            'Bad response fetching %s: content-type %s is not an expected type'
            % (url, response.get('content-type')), response, content)
