# encoding=utf-8
import unittest

import tornado.testing

from webrobots.util import BraceMessage, resolve


class TestUtil(unittest.TestCase):
    def test_brace_message(self):
        message = BraceMessage('Fetching {0} for {agent}.', 'a', agent='b')

        self.assertEqual('Fetching a for b.', str(message))


class TestResolve(tornado.testing.AsyncTestCase):
    @tornado.testing.gen_test
    async def test_resolve(self):
        async def coroutine():
            return 'hello'

        self.assertEqual('hello', await resolve('hello'))
        self.assertEqual('hello', await resolve(coroutine()))
        self.assertIsNone(await resolve(None))
