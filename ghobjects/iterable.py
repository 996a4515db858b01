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

Lazy, restartable sequences of the items of paged responses.

A `PagedIterable` fetches nothing when it is created. Each call to
`iterator()` (or `iter()`) gives a new, independent `PagedIterator` that
requests the first page the first time it is asked for an item, and each
further page only once the items of the page before it are used up.

>>> for commit in repository.list_commits():
...     print(commit.sha)

Only one page of items is held in memory at a time, except by `to_list()`
and `to_array()`, which read every page. Use those only for endpoints with a
small, bounded number of results.

"""

import logging

from ghobjects.errors import ConfigurationError, StateError
from ghobjects.pager import PageCursor


log = logging.getLogger('ghobjects.iterable')

DEFAULT_PAGE_SIZE = 10


class PagedIterator(object):

    """A single pass over the items of a sequence of pages.

    `pages` is an iterator of lists of items. `initializer`, if given, is
    called with each item when its page arrives, and its result is yielded in
    place of the item.

    A `PagedIterator` is not safe to share between threads.

    """

    def __init__(self, pages, initializer=None):
        self._pages = pages
        self._initializer = initializer
        self._items = []
        self._index = 0
        self._done = False

    def __iter__(self):
        return self

    def has_next(self):
        """Returns whether there are more items, fetching the next page if
        the current one is used up."""
        while self._index >= len(self._items):
            if self._done:
                return False
            try:
                items = next(self._pages)
            except StopIteration:
                self._done = True
                self._items, self._index = [], 0
                return False
            if self._initializer is not None:
                items = [self._initializer(item) for item in items]
            self._items, self._index = list(items), 0
        return True

    def next(self):
        if not self.has_next():
            raise StopIteration
        item = self._items[self._index]
        self._index += 1
        return item

    __next__ = next

    def next_page(self):
        """Returns the items of the current page not yet returned, fetching
        the next page if there are none."""
        if not self.has_next():
            raise StopIteration
        items = self._items[self._index:]
        self._index = len(self._items)
        return items


class PagedIterable(object):

    """A restartable, lazily fetched sequence of items.

    Subclasses implement `pages()`, a generator of lists of items.

    """

    def __init__(self, initializer=None, page_size=0):
        self.initializer = initializer
        self._page_size = page_size
        self._started = False

    @property
    def page_size(self):
        return self._page_size

    def pages(self, page_size):
        raise NotImplementedError

    def _pages(self):
        self._started = True
        for items in self.pages(self._page_size):
            yield items

    def iterator(self):
        """Returns a new `PagedIterator` over the sequence, starting from the
        first page."""
        return PagedIterator(self._pages(), self.initializer)

    def __iter__(self):
        return self.iterator()

    def with_page_size(self, size):
        """Sets the number of items to request per page.

        This must be done before any page has been fetched; afterwards it
        raises `StateError`.

        """
        if self._started:
            raise StateError('Cannot change the page size of %r once it has started fetching'
                % (self,))
        if size < 0:
            raise ConfigurationError('Page size must not be negative, not %r' % (size,))
        self._page_size = size
        return self

    def to_list(self):
        """Returns a list of every item in the sequence, fetching every
        page."""
        return list(self.iterator())

    def to_array(self):
        """Returns a tuple of every item in the sequence, fetching every
        page."""
        return tuple(self.iterator())

    def first(self):
        """Returns the first item of the sequence, or `None` if it is empty.

        Only the first page is fetched.

        """
        it = self.iterator()
        if not it.has_next():
            return None
        return it.next()


class RequestIterable(PagedIterable):

    """The items of a paged API request.

    Each page is decoded as a `page_cls` instance. Its items are
    ``items(page)`` if `items` is given, or else the page itself (a
    `ListObject` or `PageObject` is a sequence of its entries).

    """

    def __init__(self, session, spec, page_cls, items=None, initializer=None,
                 page_size=0):
        super(RequestIterable, self).__init__(initializer, page_size)
        self.session = session
        self.spec = spec
        self.page_cls = page_cls
        self.items = items

    def __repr__(self):
        return '<%s of %s from %s>' % (type(self).__name__,
            self.page_cls.__name__, self.spec.target)

    def pages(self, page_size):
        cursor = PageCursor(self.session.http, self.spec, page_size,
            self.session.decoder)
        context = self.spec.context_dict()
        for page in cursor:
            body = self.session.decoder.decode_data(page.body, self.page_cls, context)
            if self.items is not None:
                items = self.items(body)
            else:
                items = body
            yield list(items or ())


class PaginatedStrategy(RequestIterable):

    """The items of an endpoint that must always be requested with an
    explicit page size, using `DEFAULT_PAGE_SIZE` when none is set."""

    def pages(self, page_size):
        return super(PaginatedStrategy, self).pages(page_size or DEFAULT_PAGE_SIZE)


class LegacyArrayStrategy(PagedIterable):

    """A sequence of items that were already delivered in one response, for
    endpoints read without pagination.

    No request is made; the items form a single page.

    """

    def __init__(self, items, initializer=None):
        super(LegacyArrayStrategy, self).__init__(initializer)
        self.items = items

    def pages(self, page_size):
        yield list(self.items or ())
