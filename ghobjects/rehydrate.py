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

Rehydrating decoded objects: binding owners the API does not repeat in each
object's JSON, and keeping one canonical instance of each remote identity per
session.

Objects come out of the decoder knowing only their own data. A commit does not
know which repository it belongs to, because the API leaves that out of the
commit's representation. The `Rehydrator` is the one place that binds such
back-references, right after decoding, through the `fields.Owner` property
the object's class declares.

"""

import logging
import threading

from ghobjects import fields
from ghobjects.dataobject import DataObject
from ghobjects.errors import DesignError


log = logging.getLogger('ghobjects.rehydrate')


def owner_property(obj):
    """Returns the `fields.Owner` property of `obj`'s class, or `None` if it
    does not declare one."""
    return getattr(type(obj), '_owner_property', None)


class InternCache(object):

    """A mapping of remote identities to their canonical instances.

    One `InternCache` belongs to each session. It is safe to use from several
    threads at once; all access is serialized by a single lock.

    """

    def __init__(self):
        self._lock = threading.RLock()
        self._objects = {}

    def __len__(self):
        with self._lock:
            return len(self._objects)

    def intern(self, candidate):
        """Returns the canonical instance with the same identity as
        `candidate`, making `candidate` canonical if there is none yet."""
        key = candidate.identity
        if key is None or key == '':
            return candidate
        with self._lock:
            return self._objects.setdefault((type(candidate), key), candidate)

    def get(self, cls, key):
        with self._lock:
            return self._objects.get((cls, key))

    def clear(self):
        with self._lock:
            self._objects.clear()


class Rehydrator(object):

    """Binds owners to decoded objects and interns their nested identities.

    Binding an object's owner walks the object's nested `Object` and `List`
    field values that were present in its data:

    * nested objects whose class declares an `intern_key` are replaced by
      their canonical instance;
    * nested objects whose class declares a `fields.Owner` property are bound
      to the same owner;
    * other nested objects are walked in turn.

    Lazy fields without data are skipped, so a walk never causes a request.

    """

    def __init__(self, cache=None):
        if cache is None:
            cache = InternCache()
        self.cache = cache

    def intern(self, candidate):
        return self.cache.intern(candidate)

    def attach(self, item, owner):
        """Binds `owner` as the owner of the decoded object `item` and of its
        nested objects, and returns `item`.

        Raises `DesignError` if `item` does not declare an owner, or already
        has one: an object belongs to one owner for its whole life.

        """
        prop = owner_property(item)
        if prop is None:
            raise DesignError('%s instances have no owner to bind'
                % (type(item).__name__,))
        prop.bind(item, owner)
        try:
            self._walk(item, owner)
        except DesignError:
            prop.unbind(item)
            raise
        log.debug('Bound %r to %r', item, owner)
        return item

    def binder(self, owner):
        """Returns a function that attaches `owner` to the item it is given,
        for use as a `PagedIterable` initializer."""
        def bind(item):
            return self.attach(item, owner)
        return bind

    def rehydrate(self, item):
        """Interns `item` and the objects nested in it, without binding an
        owner, and returns the canonical instance for `item`."""
        if not isinstance(item, DataObject):
            return item
        return self._nested(item, None)

    def refresh(self, item):
        """Rehydrates the nested objects of `item` after new data was merged
        into it, binding them to `item`'s own owner if it has one."""
        prop = owner_property(item)
        owner = None
        if prop is not None and prop.is_bound(item):
            owner = prop.__get__(item, type(item))
        self._walk(item, owner)
        return item

    def _walk(self, obj, owner):
        for name, field in obj.fields.items():
            if name not in obj.__dict__ and field.api_name not in obj.api_data:
                continue
            if isinstance(field, fields.Object):
                value = getattr(obj, name)
                if value is not None:
                    setattr(obj, name, self._nested(value, owner))
            elif isinstance(field, fields.List) and isinstance(field.fld, fields.Object):
                value = getattr(obj, name)
                if value is not None:
                    setattr(obj, name, [self._nested(v, owner) for v in value])

    def _nested(self, value, owner):
        if not isinstance(value, DataObject):
            return value
        if value.identity is not None:
            canonical = self.intern(value)
            if canonical is not value:
                return canonical
        prop = owner_property(value)
        if prop is not None and owner is not None:
            if not prop.is_bound(value):
                prop.bind(value, owner)
            elif prop.__get__(value, type(value)) is not owner:
                raise DesignError('%r is already bound to another owner' % (value,))
        self._walk(value, owner)
        return value
