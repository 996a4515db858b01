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

Objects that fetch the rest of their data when it is first needed.

Many API responses carry partial representations of objects: a commit in a
list of commits has no ``stats`` or ``files``, which only the commit's own
endpoint returns. A `PromiseObject` declares such fields ``lazy`` and fetches
its full representation the first time one of them is read.

A `PromiseObject` moves through three states:

``DECODED``
    Decoded from JSON, with no owner bound. It cannot fetch anything, and
    reading a lazy field without data raises `DesignError`.

``BOUND``
    Its owner has been bound by the `Rehydrator`. Reading a lazy field
    without data delivers the object.

``POPULATED``
    Delivered: its full representation has been merged into it. Lazy fields
    without data now simply have their default values.

"""

import logging

from ghobjects.dataobject import DataObject
from ghobjects.errors import DesignError


log = logging.getLogger('ghobjects.promise')

DECODED = 'decoded'
BOUND = 'bound'
POPULATED = 'populated'


class PromiseError(DesignError):
    """An exception representing an error delivering a `PromiseObject`
    instance."""
    pass


class PromiseObject(DataObject):

    """A `DataObject` that delays retrieval of part of its data until that
    data is used.

    Subclasses say where their full representation lives by implementing
    `delivery_request()`.

    """

    def __init__(self, **kwargs):
        """Initializes an undelivered, empty `PromiseObject`."""
        self._delivered = False
        super(PromiseObject, self).__init__(**kwargs)

    @property
    def state(self):
        if self._delivered:
            return POPULATED
        prop = getattr(type(self), '_owner_property', None)
        if prop is not None and prop.is_bound(self):
            return BOUND
        return DECODED

    def delivery_request(self):
        """Returns a `Requester` for this object's full representation, or
        `None` if there is none.

        This implementation returns `None`. Override it in subclasses with
        lazy fields.

        """
        return None

    def fill(self, field):
        state = self.state
        if state == POPULATED:
            return
        if state == DECODED:
            raise DesignError('Cannot load %s.%s of %r: it has not been bound to an owner'
                % (type(self).__name__, field.attrname, self))
        self.deliver()

    def populate(self):
        """Delivers the object unless it is delivered already or already has
        data for any of its lazy fields."""
        if self.state == POPULATED:
            return
        if any(f.api_name in self.api_data for f in self.fields.values() if f.lazy):
            return
        if self.state == DECODED:
            raise DesignError('Cannot populate %r: it has not been bound to an owner'
                % (self,))
        self.deliver()

    def deliver(self):
        """Fetches the object's full representation and merges it into the
        object.

        If the instance has already been delivered or has nowhere to fetch
        data from, `deliver()` raises a `PromiseError`. Other exceptions from
        requesting and decoding the object may also be raised.

        """
        if self._delivered:
            raise PromiseError('%s instance %r has already been delivered'
                % (type(self).__name__, self))
        request = self.delivery_request()
        if request is None:
            raise PromiseError('Instance %r has no URL from which to deliver' % (self,))

        log.debug('Delivering %r', self)
        request.fetch_into(self)
        # Any updating from a response constitutes delivery.
        self._delivered = True
