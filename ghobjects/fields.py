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

Fields are class attributes for `DataObject` subclasses that provide data
coding functionality for your properties.

The `ghobjects.fields` module also provides field-like properties through the
`Property` class: `Injected` properties, whose values come from the request
that produced an object rather than from its JSON body, and `Owner`
properties, the back-reference slot that the `Rehydrator` fills in after an
object is decoded.

"""

from datetime import datetime, tzinfo, timedelta
import time

from ghobjects.errors import DecodeError, DesignError


class Property(object):

    """An attribute that can be installed declaratively on a `DataObject` to
    provide data encoding or loading behavior.

    The primary kinds of `Property` objects are `Field` (and its subclasses),
    `Injected` and `Owner` objects. Only `Field` properties take part in
    encoding and equality.

    """

    def install(self, attrname, cls):
        """Signals to the `Property` that it has been installed on the given
        class as an attribute with the given name.

        This implementation only records the name. Override this method to
        customize the behavior to install an attribute on DataObject classes
        where your property is declared.

        """
        self.attrname = attrname
        self.of_cls = cls


class Field(Property):

    """A property for encoding object attributes as dictionary values and
    decoding dictionary values into object attributes.

    Declare a `Field` instance for each attribute of a `DataObject` that
    should be encoded to or decoded from a dictionary.

    Use a `Field` instance directly for simple `DataObject` attributes that
    can be the same type as their dictionary values. That is, use `Field`
    fields for strings, numbers, and boolean values. If your attribute data
    does need converted, use one of the `Field` subclasses from the
    `ghobjects.fields` module to encode and decode your data as appropriate.

    """

    def __init__(self, api_name=None, default=None, required=False, lazy=False):
        """Sets the field's matching deserialization field and default value.

        Optional parameter `api_name` is the key of this field's matching
        value in a dictionary. If not given, the attribute name of the field
        when its class was defined is used.

        Optional parameter `default` is the default value to use for this
        attribute when the dictionary to decode does not contain a value.
        `default` can be a value or callable function. If `default` is a
        callable function, it is called with no arguments each time a default
        is needed, as with `list` for a fresh empty list.

        Optional parameter `required` makes decoding a dictionary without a
        value for this field fail with a `DecodeError`.

        Optional parameter `lazy` marks a field the API leaves out of partial
        representations of the object. Reading a lazy field that has no value
        asks the object to `fill()` itself first (see
        `ghobjects.promise.PromiseObject`).

        """
        self.api_name = api_name
        self.default  = default
        self.required = required
        self.lazy     = lazy

    def install(self, attrname, cls):
        super(Field, self).install(attrname, cls)
        if self.api_name is None:
            self.api_name = attrname

    def __get__(self, obj, cls):
        """Returns the field's value on the given object instance, or the
        field's default value if no value for the field is available.

        Note the field's value will be decoded from API data if necessary,
        raising any exceptions that the field's `decode()` method may raise.

        """
        if obj is None:
            # Yield the real field instance when gotten through the class.
            return self

        if self.attrname not in obj.__dict__:
            if self.lazy and self.api_name not in obj.api_data:
                obj.fill(self)

            try:
                value = obj.api_data[self.api_name]
            except KeyError:
                if callable(self.default):
                    value = self.default()
                else:
                    value = self.default
            else:
                value = self.decode(value, obj._context)
            # Store the value so we need decode it only once.
            obj.__dict__[self.attrname] = value

        return obj.__dict__[self.attrname]

    def __set__(self, obj, value):
        obj.__dict__[self.attrname] = value

    def __delete__(self, obj):
        # Delete both the instance and API data, so we'll get a real
        # attribute miss next time and return the field's default.
        obj.__dict__.pop(self.attrname, None)
        obj.api_data.pop(self.api_name, None)

    def decode(self, value, context=None):
        """Decodes a dictionary value into a `DataObject` attribute value.

        This implementation returns the `value` parameter unchanged. This is
        generally only appropriate for strings, numbers, and boolean values.

        Parameter `context` holds the bindings injected by the request the
        data came from, for fields that decode into further `DataObject`
        instances.

        """
        return value

    def encode(self, value):
        """Encodes a `DataObject` attribute value into a dictionary value.

        This implementation returns the `value` parameter unchanged.

        """
        return value


class List(Field):

    """A field representing a homogeneous list of data.

    The elements of the list are decoded through another field specified when
    the `List` is declared.

    """

    def __init__(self, fld, **kwargs):
        """Sets the type of field representing the content of the list.

        Parameter `fld` is another field instance representing the list's
        content. For instance, if the field were to represent a list of
        timestamps, `fld` would be a `Datetime` instance.

        """
        super(List, self).__init__(**kwargs)
        self.fld = fld

    def install(self, attrname, cls):
        super(List, self).install(attrname, cls)

        # Make sure our content field knows its owner too.
        self.fld.install(attrname, cls)

    def decode(self, value, context=None):
        if value is None:
            return None
        if not isinstance(value, list):
            raise DecodeError('Value to decode %r for %s is not a list'
                % (value, self.attrname))
        return [self.fld.decode(v, context) for v in value]

    def encode(self, value):
        return [self.fld.encode(v) for v in value]


class AcceptsStringCls(object):
    """Mixin for fields with a ``cls`` attribute that can either be a
    ``DataObject`` subclass or a string name of a ``DataObject`` subclass (to
    allow forward references)."""

    def get_cls(self):
        cls = self.__dict__['cls']
        if not callable(cls):
            from ghobjects.dataobject import find_by_name
            cls = find_by_name(cls)
        return cls

    def set_cls(self, cls):
        self.__dict__['cls'] = cls

    cls = property(get_cls, set_cls)


class Object(AcceptsStringCls, Field):

    """A field representing a nested `DataObject`."""

    def __init__(self, cls, **kwargs):
        """Sets the the `DataObject` class the field represents.

        Parameter `cls` is the `DataObject` class representing the nested
        objects, or the name of one, in which case the referenced class is the
        leafmost `DataObject` subclass declared with that name.

        """
        super(Object, self).__init__(**kwargs)
        self.cls = cls

    def decode(self, value, context=None):
        """Decodes the dictionary value into an instance of the `DataObject`
        class the field references, with the same injected context as the
        object that contains it."""
        if value is None:
            if callable(self.default):
                return self.default()
            return self.default
        return self.cls.from_dict(value, context)

    def encode(self, value):
        return value.to_dict()


class UTC(tzinfo):
    """UTC"""
    ZERO = timedelta(0)

    def utcoffset(self, dt):
        return UTC.ZERO

    def tzname(self, dt):
        return "UTC"

    def dst(self, dt):
        return UTC.ZERO


class Datetime(Field):

    """A field representing a timestamp."""

    dateformat = "%Y-%m-%dT%H:%M:%SZ"
    utc = UTC()

    def __init__(self, dateformat=None, **kwargs):
        super(Datetime, self).__init__(**kwargs)
        if dateformat is not None:
            self.dateformat = dateformat

    def decode(self, value, context=None):
        """Decodes a timestamp string into a Python `datetime` instance.

        Timestamp strings should be of the format ``YYYY-MM-DDTHH:MM:SSZ``,
        though other ISO 8601 offsets are accepted and converted. The
        resulting `datetime` will have UTC tzinfo.

        """
        if value is None:
            if callable(self.default):
                return self.default()
            return self.default
        try:
            return datetime(*(time.strptime(value, self.dateformat))[0:6],
                    tzinfo=Datetime.utc)
        except (TypeError, ValueError):
            pass
        try:
            when = datetime.fromisoformat(value)
        except (TypeError, ValueError):
            raise DecodeError('Value to decode %r is not a valid date time stamp' % (value,))
        if when.tzinfo is None:
            return when.replace(tzinfo=Datetime.utc)
        return when.astimezone(Datetime.utc)

    def encode(self, value):
        if not isinstance(value, datetime):
            raise TypeError('Value to encode %r is not a datetime' % (value,))
        if value.tzinfo is not None:
            value = value.astimezone(Datetime.utc)
        return value.replace(microsecond=0).strftime(self.dateformat)


class Injected(Property):

    """A property whose value is bound by the request an object was decoded
    from, rather than read from the object's JSON body.

    Use this for information the API does not (and should not) repeat in
    every response, such as the session that made the request or which mode
    an endpoint was read in:

    >>> class Compare(RemoteObject):
    ...     use_paginated_commits = fields.Injected('use_paginated_commits',
    ...                                             default=False)

    The value is the binding of the given name in the decoding context, or
    `default` when the request did not inject one. `Injected` properties are
    neither encoded by `to_dict()` nor compared by `__eq__()`.

    """

    def __init__(self, name=None, default=None):
        self.name = name
        self.default = default

    def install(self, attrname, cls):
        super(Injected, self).install(attrname, cls)
        if self.name is None:
            self.name = attrname

    def __get__(self, obj, cls):
        if obj is None:
            return self
        return obj._context.get(self.name, self.default)

    def __set__(self, obj, value):
        raise AttributeError('%s.%s is injected by the request and cannot be set'
            % (type(obj).__name__, self.attrname))


class Owner(Property):

    """The back-reference slot of an object that needs its owner to make
    further requests.

    The API never repeats an object's owner in the object's own JSON, so the
    slot is empty when the object is decoded. The `Rehydrator` binds it once,
    right after decoding, and it is never rebound. Reading the slot before it
    is bound raises `DesignError`.

    """

    def install(self, attrname, cls):
        super(Owner, self).install(attrname, cls)
        cls._owner_property = self

    def __get__(self, obj, cls):
        if obj is None:
            return self
        try:
            return obj.__dict__[self.attrname]
        except KeyError:
            raise DesignError('%s instance %r has no %s; it was not bound by a Rehydrator'
                % (type(obj).__name__, obj, self.attrname))

    def __set__(self, obj, value):
        raise AttributeError('%s.%s can only be bound by a Rehydrator'
            % (type(obj).__name__, self.attrname))

    def is_bound(self, obj):
        return self.attrname in obj.__dict__

    def bind(self, obj, owner):
        if self.is_bound(obj):
            raise DesignError('%s instance %r is already bound to %r'
                % (type(obj).__name__, obj, obj.__dict__[self.attrname]))
        obj.__dict__[self.attrname] = owner

    def unbind(self, obj):
        obj.__dict__.pop(self.attrname, None)


class Enum(Field):

    """A field representing one of the members of an `enum.Enum` class,
    encoded as the member's value."""

    def __init__(self, enum_cls, **kwargs):
        super(Enum, self).__init__(**kwargs)
        self.enum_cls = enum_cls

    def decode(self, value, context=None):
        if value is None:
            return self.default
        try:
            return self.enum_cls(value)
        except ValueError:
            raise DecodeError('Value to decode %r is not a %s'
                % (value, self.enum_cls.__name__))

    def encode(self, value):
        return value.value
