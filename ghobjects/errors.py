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

Exceptions raised by the request, decoding and rehydration machinery.

Errors reported by the remote server are `TransportError` subclasses and live
in `ghobjects.http` beside the code that raises them.

"""


class GHObjectsError(Exception):
    """Base class for errors raised by `ghobjects` itself."""
    pass


class ConfigurationError(GHObjectsError):
    """An exception raised when a request is built with bad or missing
    settings.

    These are raised as soon as the bad setting is given to the request
    builder, or at `build()` time for settings that are only missing at the
    end. They are never retried.

    """
    pass


class DecodeError(GHObjectsError):
    """An exception raised when a response body does not have the shape of
    the type it is being decoded into."""
    pass


class DesignError(GHObjectsError):
    """An exception raised when an object is used against its contract.

    Examples are binding an owner to an object that already has one, or
    asking an object that was never bound to an owner for data it would have
    to fetch through that owner.

    """
    pass


class StateError(GHObjectsError):
    """An exception raised when an object is reconfigured after it has
    started doing its work."""
    pass
