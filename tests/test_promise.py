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

import unittest

from ghobjects import fields, promise
from ghobjects.errors import DesignError
from tests import test_dataobject
from tests import utils


class TestDataObjects(test_dataobject.TestDataObjects):

    cls = promise.PromiseObject


class Tiny(promise.PromiseObject):

    owner  = fields.Owner()
    root   = fields.Injected('root')

    name   = fields.Field(required=True)
    detail = fields.Field(lazy=True)
    extra  = fields.Field(lazy=True)

    def delivery_request(self):
        return self.root.create_request().with_path('/tiny', self.name)


class TestPromiseObjects(unittest.TestCase):

    def test_states(self):
        session = utils.mock_session(
            utils.response({'name': 'x'}),
            utils.response({'name': 'x', 'detail': 'full'}),
        )
        t = session.create_request().with_path('/tinies/x').fetch(Tiny)
        self.assertEqual(t.state, promise.DECODED)
        self.assertEqual(t.name, 'x')
        self.assertRaises(DesignError, lambda: t.detail)
        self.assertEqual(session.http.request.call_count, 1)

        session.rehydrator.attach(t, 'someone')
        self.assertEqual(t.state, promise.BOUND)

        self.assertEqual(t.detail, 'full')
        self.assertEqual(t.state, promise.POPULATED)
        self.assertEqual(session.http.request.call_count, 2)
        self.assertEqual(utils.requested_uris(session.http)[1], utils.API + '/tiny/x')

        self.assertTrue(t.extra is None,
            'A populated object does not fetch for fields its data lacks')
        self.assertEqual(session.http.request.call_count, 2)
        self.assertEqual(t.owner, 'someone')

    def test_lazy_with_data(self):
        session = utils.mock_session(utils.response({'name': 'x', 'detail': 'already'}))
        t = session.create_request().with_path('/tinies/x').fetch(Tiny)
        self.assertEqual(t.detail, 'already')
        self.assertEqual(t.state, promise.DECODED)

        session.rehydrator.attach(t, 'someone')
        t.populate()
        self.assertEqual(session.http.request.call_count, 1,
            'Objects with lazy data already are not populated again')

    def test_populate(self):
        session = utils.mock_session(
            utils.response({'name': 'x'}),
            utils.response({'name': 'x', 'detail': 'full'}),
        )
        t = session.create_request().with_path('/tinies/x').fetch(Tiny)
        self.assertRaises(DesignError, t.populate)

        session.rehydrator.attach(t, 'someone')
        t.populate()
        t.populate()
        self.assertEqual(t.state, promise.POPULATED)
        self.assertEqual(t.detail, 'full')
        self.assertEqual(session.http.request.call_count, 2)

    def test_deliver_once(self):
        session = utils.mock_session(
            utils.response({'name': 'x'}),
            utils.response({'name': 'x', 'detail': 'full'}),
        )
        t = session.create_request().with_path('/tinies/x').fetch(Tiny)
        session.rehydrator.attach(t, 'someone')
        t.deliver()
        self.assertRaises(promise.PromiseError, t.deliver)

    def test_no_delivery_request(self):

        class Nowhere(promise.PromiseObject):
            owner  = fields.Owner()
            detail = fields.Field(lazy=True)

        n = Nowhere.from_dict({})
        Nowhere.owner.bind(n, 'someone')
        self.assertRaises(promise.PromiseError, lambda: n.detail)
        self.assertTrue(isinstance(promise.PromiseError('x'), DesignError))

    def test_equality_does_not_deliver(self):
        a = Tiny.from_dict({'name': 'x'})
        b = Tiny.from_dict({'name': 'x'})
        self.assertEqual(a, b)
        self.assertEqual(a.to_dict(), {'name': 'x'})


if __name__ == '__main__':
    unittest.main()
