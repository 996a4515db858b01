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

`DataObject` is a class of object that provides coding between object
attributes and dictionaries.

In `DataObject` is the mechanism for converting between dictionaries and
objects. These conversions are performed with aid of `Field` instances
declared on `DataObject` subclasses. `Field` classes reside in the
`ghobjects.fields` module.

A `DataObject` also carries the context bindings of the request it was
decoded from, so `fields.Injected` properties on it (and on the objects nested
inside it) can see them.

"""

from copy import deepcopy

import ghobjects.fields
from ghobjects.errors import DecodeError


classes_by_name = {}


def find_by_name(name):
    """Finds and returns the DataObject subclass with the given name.

    Parameter `name` should be a bare class name with no module. If there is
    no class by that name, raises `KeyError`.

    """
    return classes_by_name[name]


class DataObjectMetaclass(type):
    """Metaclass for `DataObject` classes.

    This metaclass installs all `ghobjects.fields.Property` instances
    declared as attributes of the new class, including all `Field`,
    `Injected` and `Owner` instances.

    This metaclass also makes the new class findable through the
    `dataobject.find_by_name()` function.

    """

    def __new__(cls, name, bases, attrs):
        """Creates and returns a new `DataObject` class with its declared
        fields and name."""
        fields = {}
        new_fields = {}
        new_properties = {}

        # Inherit all the parent DataObject classes' fields.
        for base in bases:
            if isinstance(base, DataObjectMetaclass):
                fields.update(base.fields)

        # Move all the class's attributes that are Fields to the fields set.
        for attrname, field in attrs.items():
            if isinstance(field, ghobjects.fields.Property):
                new_properties[attrname] = field
                if isinstance(field, ghobjects.fields.Field):
                    new_fields[attrname] = field
            elif attrname in fields:
                # Throw out any parent fields that the subclass defined as
                # something other than a Field.
                del fields[attrname]

        fields.update(new_fields)
        attrs['fields'] = fields
        obj_cls = super(DataObjectMetaclass, cls).__new__(cls, name, bases, attrs)

        for attrname, prop in new_properties.items():
            prop.install(attrname, obj_cls)

        # Register the new class so Object fields can have forward-referenced it.
        classes_by_name[name] = obj_cls

        return obj_cls


class DataObject(object, metaclass=DataObjectMetaclass):

    """An object that can be decoded from or encoded as a dictionary.

    DataObject subclasses should be declared with their different data
    attributes defined as instances of fields from the `ghobjects.fields`
    module. For example:

    >>> from ghobjects import dataobject, fields
    >>> class Commit(dataobject.DataObject):
    ...     sha     = fields.Field(required=True)
    ...     date    = fields.Datetime()
    ...     author  = fields.Object('User')
    ...

    A DataObject's fields then provide the coding between live DataObject
    instances and dictionaries.

    Set `intern_key` on a subclass to the name of a field that identifies
    instances across responses (such as a user's ``login``) to have sessions
    keep one canonical instance per identity.

    """

    intern_key = None

    def __init__(self, **kwargs):
        """Initializes a new `DataObject` with the given field values."""
        self.api_data = {}
        self._context = {}
        self.__dict__.update(kwargs)

    def __eq__(self, other):
        """Returns whether two `DataObject` instances are equivalent.

        If the `DataObject` instances are of the same type and contain the
        same data in all their fields, the objects are equivalent. Injected
        values and owners are not compared.

        """
        if type(self) != type(other):
            return False
        for k, field in self.fields.items():
            if self._peek(k, field) != other._peek(k, field):
                return False
        return True

    def _peek(self, attrname, field):
        # Lazy fields with no data yet read as None rather than being filled.
        if (field.lazy and attrname not in self.__dict__
                and field.api_name not in self.api_data):
            return None
        return getattr(self, attrname)

    def __repr__(self):
        key = self.intern_key
        if key is not None and key in self.fields:
            return '<%s %s=%r>' % (type(self).__name__, key, getattr(self, key))
        return '<%s at 0x%x>' % (type(self).__name__, id(self))

    def get(self, attr, *args):
        return getattr(self, attr, *args)

    def __iter__(self):
        for key in self.fields.keys():
            yield key

    @property
    def identity(self):
        """The value of this object's `intern_key` field, or `None`."""
        if self.intern_key is None:
            return None
        return getattr(self, self.intern_key)

    def to_dict(self):
        """Encodes the DataObject to a dictionary."""
        data = deepcopy(self.api_data)
        for field_name, field in self.fields.items():
            value = self._peek(field_name, field)
            if value is not None:
                data[field.api_name] = field.encode(value)
        return data

    @classmethod
    def from_dict(cls, data, context=None):
        """Decodes a dictionary into a new `DataObject` instance.

        Optional parameter `context` is the mapping of values injected by the
        request the data came from.

        """
        self = cls()
        self.update_from_dict(data, context)
        return self

    def check_data(self, data):
        if not isinstance(data, dict):
            raise DecodeError("Cannot update %s from non-dictionary data %r"
                % (type(self).__name__, data))
        missing = [f.api_name for f in self.fields.values()
                   if f.required and data.get(f.api_name) is None]
        if missing:
            raise DecodeError('%s data is missing required fields %s'
                % (type(self).__name__, ', '.join(sorted(missing))))

    def update_from_dict(self, data, context=None):
        """Replaces the content of this DataObject with a dictionary.

        Parameter `data` is the dictionary from which to update the object.

        Use this only when receiving newly updated content for a DataObject;
        that is, when the data is from the outside data source and needs
        decoded through the object's fields. Data from "inside" your
        application should be added to an object manually by setting the
        object's attributes. Data that constitutes a new object should be
        turned into another object with `from_dict()`.

        """
        self.check_data(data)
        # Clear any local instance field data
        for k in self.fields.keys():
            self.__dict__.pop(k, None)
        self.__dict__['api_data'] = data
        if context is not None:
            self._context = dict(context)

    def merge_from_dict(self, data, context=None):
        """Adds the content of a dictionary to this DataObject, keeping any
        values the dictionary does not mention.

        Use this to fill in a partially populated object from a fuller
        representation of it. Values decoded from the old data are dropped
        only for fields the new data supplies.

        """
        if not isinstance(data, dict):
            raise DecodeError("Cannot update %s from non-dictionary data %r"
                % (type(self).__name__, data))
        merged = dict(self.api_data)
        merged.update(data)
        self.check_data(merged)
        for k, field in self.fields.items():
            if field.api_name in data:
                self.__dict__.pop(k, None)
        self.__dict__['api_data'] = merged
        if context:
            self._context.update(context)

    def validate(self):
        """Decodes every field present in this object's data, so that badly
        shaped data fails now with a `DecodeError` instead of later."""
        for k, field in self.fields.items():
            if field.api_name not in self.api_data:
                continue
            value = getattr(self, k)
            if isinstance(value, DataObject):
                value.validate()
            elif isinstance(value, list):
                for v in value:
                    if isinstance(v, DataObject):
                        v.validate()

    def fill(self, field):
        """Called when the lazy `field` is read but has no data.

        A plain `DataObject` has all the data it will ever have, so this
        implementation does nothing and the field's default is used.

        """
        pass
