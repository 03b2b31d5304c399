# encoding=utf-8
'''Robots.txt exclusion directives.'''
import asyncio
import collections
import gettext
import logging
import re

import robotexclusionrulesparser

from webrobots.url import Site
from webrobots.util import BraceMessage as __


_logger = logging.getLogger(__name__)
_ = gettext.gettext

FIELD_PATTERN = re.compile(r'([a-zA-Z][a-zA-Z0-9_-]*)[ \t]*:[ \t]*(.*)$')
'''A ``Field: value`` line with the comment removed.'''

USER_AGENT_FIELDS = frozenset(['user-agent', 'useragent'])
'''Field names that start or extend a group.'''

RULE_FIELDS = frozenset(['allow', 'disallow', 'sitemap'])
'''Field names that are not extended options.'''


class RuleSet(object):
    '''Exclusion rules of a site as they apply to one user agent.

    Args:
        parser: A parsed
            :class:`robotexclusionrulesparser.RobotExclusionRulesParser`.
        site: The site the rules belong to.
        user_agent: The name of the robot.
        options (dict): Extended options of the group matching the robot,
            keyed by lowercase field name.

    Instances are not modified after creation.
    '''
    def __init__(self, parser, site: Site, user_agent: str, options=None):
        self._parser = parser
        self._site = site
        self._user_agent = user_agent
        self._options = dict(options or {})
        self._sitemaps = tuple(parser.sitemaps)

    @property
    def site(self) -> Site:
        return self._site

    @property
    def user_agent(self) -> str:
        return self._user_agent

    def allows(self, request_uri: str) -> bool:
        '''Return whether the path and query may be fetched.'''
        return self._parser.is_allowed(self._user_agent, request_uri)

    def options(self) -> dict:
        '''Return the extended options with lowercase field names.'''
        return dict(self._options)

    def sitemaps(self) -> list:
        '''Return the sitemap URLs in document order.'''
        return list(self._sitemaps)


class RobotsTxtParser(object):
    '''Parse robots.txt documents into :class:`RuleSet`.'''
    def parse(self, text: str, site: Site, user_agent: str) -> RuleSet:
        if isinstance(text, (bytes, bytearray)):
            text = text.decode('iso-8859-1')

        parser = robotexclusionrulesparser.RobotExclusionRulesParser()
        parser.parse(text)

        options = self.scan_options(text, user_agent)

        return RuleSet(parser, site, user_agent, options=options)

    @classmethod
    def scan_options(cls, text: str, user_agent: str) -> dict:
        '''Return the extended options of the group matching the robot.

        Groups are selected like the rule evaluator selects them: the first
        group naming the robot, otherwise the first group for ``*``. Values
        are kept as written.
        '''
        default_options = None

        for robot_names, options in cls.iter_groups(text):
            if '*' in robot_names:
                if default_options is None:
                    default_options = options
            elif any(name.lower() in user_agent.lower()
                     for name in robot_names):
                return options

        return default_options or {}

    @classmethod
    def iter_groups(cls, text: str):
        '''Iterate the groups as (robot names, extended options) tuples.'''
        robot_names = []
        options = collections.OrderedDict()
        previous_line_was_a_user_agent = False

        for line in text.splitlines():
            line = line.strip()

            if line.startswith('#'):
                continue

            line = line.partition('#')[0].strip()

            if not line:
                if robot_names:
                    yield robot_names, options

                robot_names = []
                options = collections.OrderedDict()
                previous_line_was_a_user_agent = False
                continue

            match = FIELD_PATTERN.match(line)

            if not match:
                continue

            field = match.group(1).lower()
            value = match.group(2).strip()

            if field in USER_AGENT_FIELDS:
                if not previous_line_was_a_user_agent and robot_names:
                    yield robot_names, options
                    robot_names = []
                    options = collections.OrderedDict()

                if value:
                    robot_names.append(value)

                previous_line_was_a_user_agent = True
                continue

            previous_line_was_a_user_agent = False

            if field not in RULE_FIELDS and robot_names:
                options[field] = value

        if robot_names:
            yield robot_names, options


class RobotsTxtPool(object):
    '''Pool of robots.txt rule sets.

    A rule set is stored once per site and kept for the lifetime of the
    pool. Concurrent lookups of a site that is not yet in the pool wait
    for a single computation of the rule set.
    '''
    def __init__(self):
        self._rule_sets = {}
        self._locks = {}
        self._lock_users = collections.Counter()

    def __len__(self):
        return len(self._rule_sets)

    def has_rule_set(self, site: Site) -> bool:
        '''Return whether a rule set has been stored for the site.'''
        return site in self._rule_sets

    async def get_rule_set(self, site: Site, fetch_and_parse) -> RuleSet:
        '''Return the rule set of the site.

        Args:
            site: The site.
            fetch_and_parse: A callable with no arguments returning an
                awaitable of the :class:`RuleSet`. It is only called if the
                site is not in the pool.

        Errors raised by `fetch_and_parse` propagate and nothing is stored.

        Coroutine.
        '''
        try:
            return self._rule_sets[site]
        except KeyError:
            pass

        lock = self._locks.setdefault(site, asyncio.Lock())
        self._lock_users[site] += 1

        try:
            async with lock:
                if site in self._rule_sets:
                    _logger.debug(__('Rule set for {0} loaded while waiting.',
                                     site.url))
                    return self._rule_sets[site]

                rule_set = await fetch_and_parse()
                self._rule_sets[site] = rule_set
        finally:
            self._lock_users[site] -= 1

            if not self._lock_users[site]:
                del self._lock_users[site]
                del self._locks[site]

        _logger.debug(__('Stored rule set for {0}.', site.url))

        return rule_set
