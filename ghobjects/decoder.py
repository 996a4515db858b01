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

Decoding response bodies into `DataObject` instances.

"""

import logging

import simplejson as json

from ghobjects.errors import DecodeError


log = logging.getLogger('ghobjects.decoder')


class Decoder(object):

    """Turns JSON response bodies into `DataObject` instances.

    Decoding is tolerant of members the target class does not declare; they
    are kept in the object's `api_data` so `to_dict()` returns them. Decoding
    is intolerant of data with the wrong shape: missing required fields and
    nested values of the wrong type raise `DecodeError` before the object is
    returned.

    Context bindings given to the decode methods become visible to the
    `fields.Injected` properties of the decoded object and every object
    nested in it.

    """

    def load(self, content):
        """Parses a response body into plain Python data.

        Bytes that are not valid UTF-8 are replaced with the Unicode
        replacement character rather than failing. An empty body loads as
        `None`.

        """
        if not content:
            return None
        if isinstance(content, bytes):
            content = content.decode('utf-8', 'replace')
        try:
            return json.loads(content)
        except ValueError as exc:
            raise DecodeError('Response body is not valid JSON: %s' % (exc,))

    def decode_data(self, data, cls, context=None):
        """Decodes already parsed `data` into a new `cls` instance."""
        obj = cls()
        obj.update_from_dict(data, context or {})
        obj.validate()
        return obj

    def decode(self, content, cls, context=None):
        """Decodes the response body `content` into a new instance of the
        `DataObject` class `cls`."""
        return self.decode_data(self.load(content), cls, context)

    def decode_into(self, content, instance, context=None):
        """Merges the response body `content` into the existing `DataObject`
        `instance` and returns it.

        Values `instance` already has that the body does not mention are kept.

        """
        data = self.load(content)
        log.debug('Merging %d members into %r', len(data or ()), instance)
        instance.merge_from_dict(data, context)
        instance.validate()
        return instance
