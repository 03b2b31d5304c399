# encoding=utf-8
import asyncio
import unittest

import tornado.testing

from webrobots.errors import FetchFailed
from webrobots.robotstxt import RobotsTxtParser, RobotsTxtPool, RuleSet
from webrobots.url import Site


ROBOTS_TXT = '''\
# Example
User-agent: TestBot
Crawl-delay: 5
Allow: /private/ok
Disallow: /private

User-agent: *
Crawl-delay: 1.5
Disallow: /

Sitemap: http://example.com/sitemap1.xml
Sitemap: http://example.com/sitemap2.xml
Sitemap: http://example.com/sitemap1.xml
'''


class TestRuleSet(unittest.TestCase):
    def setUp(self):
        self.site = Site('http', 'example.com')

    def test_allows(self):
        rule_set = RobotsTxtParser().parse(ROBOTS_TXT, self.site, 'TestBot/1.0')

        self.assertIsInstance(rule_set, RuleSet)
        self.assertEqual(self.site, rule_set.site)
        self.assertEqual('TestBot/1.0', rule_set.user_agent)
        self.assertTrue(rule_set.allows('/'))
        self.assertTrue(rule_set.allows('/public'))
        self.assertFalse(rule_set.allows('/private'))
        self.assertFalse(rule_set.allows('/private/x?y=1'))
        self.assertTrue(rule_set.allows('/private/ok'))

    def test_default_agent(self):
        rule_set = RobotsTxtParser().parse(ROBOTS_TXT, self.site, 'OtherBot')

        self.assertFalse(rule_set.allows('/'))
        self.assertFalse(rule_set.allows('/public'))

    def test_options(self):
        rule_set = RobotsTxtParser().parse(ROBOTS_TXT, self.site, 'testbot')

        self.assertEqual({'crawl-delay': '5'}, rule_set.options())

        rule_set = RobotsTxtParser().parse(ROBOTS_TXT, self.site, 'OtherBot')

        self.assertEqual({'crawl-delay': '1.5'}, rule_set.options())

        rule_set.options()['crawl-delay'] = '100'
        self.assertEqual({'crawl-delay': '1.5'}, rule_set.options())

    def test_options_without_rules(self):
        rule_set = RobotsTxtParser().parse(
            'User-agent: *\nCrawl-delay: 10\n', self.site, 'TestBot')

        self.assertEqual({'crawl-delay': '10'}, rule_set.options())

    def test_options_raw_values(self):
        rule_set = RobotsTxtParser().parse(
            'User-agent: *\nCrawl-delay: 1234567\nDisallow: /a\n',
            self.site, 'TestBot')

        self.assertEqual({'crawl-delay': '1234567'}, rule_set.options())

        rule_set = RobotsTxtParser().parse(
            'User-agent: *\nCrawl-delay: 2.50\n', self.site, 'TestBot')

        self.assertEqual({'crawl-delay': '2.50'}, rule_set.options())

    def test_options_extended_fields(self):
        text = (
            'User-agent: FooBot\n'
            'REQUEST-RATE: 1/5\n'
            'Visit-time: 0600-0845\n'
            'Disallow: /tmp\n'
            '\n'
            'User-agent: *\n'
            'Crawl-delay: 2\n'
            'Host: example.com\n'
            'Sitemap: http://example.com/sitemap.xml\n'
        )

        rule_set = RobotsTxtParser().parse(text, self.site, 'FooBot/2.1')

        self.assertEqual(
            {'request-rate': '1/5', 'visit-time': '0600-0845'},
            rule_set.options()
        )

        rule_set = RobotsTxtParser().parse(text, self.site, 'BarBot')

        self.assertEqual(
            {'crawl-delay': '2', 'host': 'example.com'},
            rule_set.options()
        )

    def test_options_group_boundary(self):
        text = (
            'User-agent: BarBot\n'
            '# comment\n'
            'Crawl-delay: 3  # seconds\n'
            '\n'
            'Visit-time: 0100-0200\n'
            'User-agent: *\n'
            'Crawl-delay: 9\n'
        )

        rule_set = RobotsTxtParser().parse(text, self.site, 'BarBot')

        self.assertEqual({'crawl-delay': '3'}, rule_set.options())

        rule_set = RobotsTxtParser().parse(text, self.site, 'OtherBot')

        self.assertEqual({'crawl-delay': '9'}, rule_set.options())

    def test_sitemaps(self):
        rule_set = RobotsTxtParser().parse(ROBOTS_TXT, self.site, 'TestBot')

        self.assertEqual(
            [
                'http://example.com/sitemap1.xml',
                'http://example.com/sitemap2.xml',
                'http://example.com/sitemap1.xml',
            ],
            rule_set.sitemaps()
        )

        rule_set.sitemaps().clear()
        self.assertEqual(3, len(rule_set.sitemaps()))

    def test_empty(self):
        rule_set = RobotsTxtParser().parse('', self.site, 'TestBot')

        self.assertTrue(rule_set.allows('/'))
        self.assertTrue(rule_set.allows('/private/x'))
        self.assertEqual({}, rule_set.options())
        self.assertEqual([], rule_set.sitemaps())


class TestRobotsTxtPool(tornado.testing.AsyncTestCase):
    @tornado.testing.gen_test
    async def test_get_rule_set_once(self):
        pool = RobotsTxtPool()
        site = Site('http', 'example.com')
        counter = {'calls': 0}

        async def fetch_and_parse():
            counter['calls'] += 1
            return RobotsTxtParser().parse('', site, 'TestBot')

        self.assertFalse(pool.has_rule_set(site))

        rule_set_1 = await pool.get_rule_set(site, fetch_and_parse)
        rule_set_2 = await pool.get_rule_set(
            Site('http', 'example.com', 80), fetch_and_parse)

        self.assertIs(rule_set_1, rule_set_2)
        self.assertEqual(1, counter['calls'])
        self.assertTrue(pool.has_rule_set(site))
        self.assertEqual(1, len(pool))

        await pool.get_rule_set(Site('https', 'example.com'), fetch_and_parse)

        self.assertEqual(2, counter['calls'])
        self.assertEqual(2, len(pool))

    @tornado.testing.gen_test
    async def test_get_rule_set_concurrent(self):
        pool = RobotsTxtPool()
        site = Site('http', 'example.com')
        counter = {'calls': 0}

        async def fetch_and_parse():
            counter['calls'] += 1
            await asyncio.sleep(0.01)
            return RobotsTxtParser().parse('', site, 'TestBot')

        rule_sets = await asyncio.gather(*[
            pool.get_rule_set(site, fetch_and_parse) for dummy in range(5)
        ])

        self.assertEqual(1, counter['calls'])
        self.assertEqual(1, len(set(id(rule_set) for rule_set in rule_sets)))

    @tornado.testing.gen_test
    async def test_get_rule_set_error_not_stored(self):
        pool = RobotsTxtPool()
        site = Site('http', 'example.com')
        counter = {'calls': 0}

        async def fetch_and_parse():
            counter['calls'] += 1

            if counter['calls'] == 1:
                raise FetchFailed('Mock failure.')

            return RobotsTxtParser().parse('', site, 'TestBot')

        with self.assertRaises(FetchFailed):
            await pool.get_rule_set(site, fetch_and_parse)

        self.assertFalse(pool.has_rule_set(site))
        self.assertFalse(pool._locks)
        self.assertFalse(pool._lock_users)

        rule_set = await pool.get_rule_set(site, fetch_and_parse)

        self.assertTrue(rule_set.allows('/'))
        self.assertTrue(pool.has_rule_set(site))
        self.assertEqual(2, counter['calls'])
        self.assertFalse(pool._locks)
        self.assertFalse(pool._lock_users)

    @tornado.testing.gen_test
    async def test_get_rule_set_locks_released(self):
        pool = RobotsTxtPool()

        async def fetch_and_parse():
            raise FetchFailed('Mock failure.')

        for port in range(8000, 8100):
            with self.assertRaises(FetchFailed):
                await pool.get_rule_set(
                    Site('http', 'example.com', port), fetch_and_parse)

        self.assertEqual(0, len(pool))
        self.assertEqual({}, pool._locks)
        self.assertFalse(pool._lock_users)
