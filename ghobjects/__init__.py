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

ghobjects turns a JSON HTTP API (GitHub's, REST and GraphQL) into real Python
objects you can navigate, without making a request until one is needed.

ghobjects provides:

* a fluent request builder, whose requests are described by immutable
  `RequestSpec` values

* lazy, restartable sequences over paged responses, fetched one page at a
  time through the ``Link`` headers the API sends

* declarative conversion between Python objects and the API's JSON, through
  `DataObject` classes and their `fields`

* rehydration of decoded objects: binding the owners the API leaves out of
  each object's JSON, and keeping one instance of each user per session

* full and correct HTTP support through the `httplib2` library, including
  caching and authentication


Example
=======

    >>> import httplib2
    >>> from ghobjects import Session
    >>> with Session(http=httplib2.Http()) as session:
    ...     repo = session.get_repository('octocat/hello-world')
    ...     for commit in repo.list_commits(author='octocat'):
    ...         print(commit.sha, commit.lines_added)

Reading `lines_added` of a commit from a list fetches that commit in full, as
commit lists leave out the commits' stats.

"""

__version__ = '1.0.0'
__author__ = 'ghobjects contributors'

import ghobjects.dataobject
import ghobjects.fields as fields
from ghobjects.errors import (ConfigurationError, DecodeError, DesignError,
    GHObjectsError, StateError)
from ghobjects.http import (BadResponse, Forbidden, GraphQLError, NotFound,
    PreconditionFailed, RequestError, ServerError, TransportError, Unauthorized)
from ghobjects.dataobject import DataObject
from ghobjects.iterable import (LegacyArrayStrategy, PagedIterable,
    PagedIterator, PaginatedStrategy)
from ghobjects.listobject import ListObject, ListOf, PageObject, PageOf
from ghobjects.promise import PromiseError, PromiseObject
from ghobjects.rehydrate import InternCache, Rehydrator
from ghobjects.request import Requester, RequestSpec
from ghobjects.resources import RemoteObject
from ghobjects.session import DEFAULT_API_URL, Session

__all__ = (
    'BadResponse', 'ConfigurationError', 'DEFAULT_API_URL', 'DataObject',
    'DecodeError', 'DesignError', 'Forbidden', 'GHObjectsError',
    'GraphQLError', 'InternCache', 'LegacyArrayStrategy', 'ListObject',
    'ListOf', 'NotFound', 'PageObject', 'PageOf', 'PagedIterable',
    'PagedIterator', 'PaginatedStrategy', 'PreconditionFailed',
    'PromiseError', 'PromiseObject', 'Rehydrator', 'RemoteObject',
    'RequestError', 'RequestSpec', 'Requester', 'ServerError', 'Session',
    'StateError', 'TransportError', 'Unauthorized', 'fields',
)
