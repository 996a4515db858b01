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

Objects for decoding the body of one page of a paged response.

Most list endpoints answer with a bare JSON array of objects, decoded with a
`ListObject`; some answer with an object that carries the list in one of its
members, decoded with a `PageObject`.

"""

import logging

import ghobjects.fields as fields
from ghobjects.dataobject import DataObject, DataObjectMetaclass
from ghobjects.errors import DecodeError


log = logging.getLogger('ghobjects.listobject')


class SequenceProxy(object):

    """An abstract class implementing the sequence protocol by proxying it to
    an instance attribute.

    `SequenceProxy` instances act like sequences by forwarding all sequence
    method calls to their `entries` attributes. The `entries` attribute should
    be a list or some other that implements the sequence protocol.

    """

    def make_sequence_method(methodname):
        """Makes a new function that proxies calls to `methodname` to the
        `entries` attribute of the instance on which the function is called as
        an instance method."""
        def seqmethod(self, *args, **kwargs):
            # Proxy these methods to self.entries.
            return getattr(self.entries or [], methodname)(*args, **kwargs)
        seqmethod.__name__ = methodname
        return seqmethod

    __len__      = make_sequence_method('__len__')
    __getitem__  = make_sequence_method('__getitem__')
    __iter__     = make_sequence_method('__iter__')
    __reversed__ = make_sequence_method('__reversed__')
    __contains__ = make_sequence_method('__contains__')

    del make_sequence_method


class PageOf(DataObjectMetaclass):

    """Metaclass defining a `PageObject` containing a set of some other
    class's instances.

    Unlike most metaclasses, this metaclass can be called directly to define
    new `PageObject` classes that contain objects of a specified other class,
    like so:

    >>> PageOfCommit = PageOf(Commit)

    This is equivalent to defining ``PageOfCommit`` yourself:

    >>> class PageOfCommit(PageObject):
    ...     entries = fields.List(fields.Object(Commit))

    """

    _subclasses = {}
    _basemodule = None

    def __new__(cls, name, bases=None, attr=None):
        """Creates a new `PageObject` subclass.

        If `bases` and `attr` are specified, as in a regular subclass
        declaration, a new class is created as per the specified settings.

        If only `name` is specified, that value is used as a reference to a
        `DataObject` class to which the new `PageObject` class is bound. The
        `name` parameter can be either a name or a `DataObject` class, as
        when declaring a `ghobjects.fields.Object` field.

        """
        direct = attr is None
        if direct:
            # Don't bother making a new subclass if we already made one for
            # this target.
            if name in cls._subclasses:
                return cls._subclasses[name]

            entryclass = name
            if callable(entryclass):
                name = cls.__name__ + entryclass.__name__
            else:
                name = cls.__name__ + entryclass

            bases = (cls._basemodule,)

            attr = {
                '__module__': __name__,
                'entries': fields.List(fields.Object(entryclass)),
            }

        newcls = super(PageOf, cls).__new__(cls, name, bases, attr)

        # Save the result for later direct invocations.
        if direct:
            cls._subclasses[entryclass] = newcls
        elif cls._basemodule is None:
            cls._basemodule = newcls

        return newcls


class PageObject(SequenceProxy, DataObject, metaclass=PageOf):

    """A `DataObject` representing one page of a set of other `DataObject`
    instances.

    The contents of regular `PageObject` instances will be decoded as with
    `Field` fields; that is, not decoded at all. To customize decoding of API
    contents, subclass `PageObject` and redefine the ``entries`` member with a
    `Field` instance that decodes the list content as necessary, or call its
    metaclass, `PageOf`, with the class of the entries.

    """

    entries = fields.List(fields.Field())


class ListOf(PageOf):

    _subclasses = {}
    _basemodule = None


class ListObject(PageObject, metaclass=ListOf):

    """A `PageObject` for endpoints that answer with a bare JSON array.

    Set `not_ready_is_empty` on a subclass for an endpoint that answers with
    an empty object (or nothing) instead of an array while it is still
    computing its result. Such a response decodes as an empty list rather
    than raising `DecodeError`.

    """

    not_ready_is_empty = False

    def update_from_dict(self, data, context=None):
        if not isinstance(data, list):
            if self.not_ready_is_empty and (data is None or isinstance(data, dict)):
                log.debug('%s data is not ready yet; decoding %r as empty',
                    type(self).__name__, data)
                data = []
            else:
                raise DecodeError('Cannot update %s from non-list data %r'
                    % (type(self).__name__, data))
        super(ListObject, self).update_from_dict({'entries': data}, context)

    def merge_from_dict(self, data, context=None):
        self.update_from_dict(data, context)

    def to_dict(self):
        return super(ListObject, self).to_dict()['entries']
