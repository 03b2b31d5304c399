# encoding=utf-8
'''Robots exclusion checks by URL.'''
import gettext
import logging

from webrobots.errors import FetchFailed, NotFound
from webrobots.fetcher import RobotsTxtFetcher
from webrobots.robotstxt import RobotsTxtParser, RobotsTxtPool, RuleSet
from webrobots.url import ROBOTS_TXT_PATH, Site, split_url
from webrobots.util import BraceMessage as __, resolve


_logger = logging.getLogger(__name__)
_ = gettext.gettext


class WebRobots(object):
    '''Answer robots exclusion queries for a robot.

    The robots.txt document of a site is fetched and parsed the first time
    the site is queried. The result is kept for the lifetime of the
    instance and is never refreshed.

    A document that does not exist (404) allows everything. Any other
    failure to fetch the document raises :class:`.errors.FetchFailed` to
    the caller and nothing is cached; the next query for the site fetches
    the document again.

    Args:
        user_agent: The name of the robot. It is sent as the
            ``User-Agent`` field and matched against the rules.
        http_get: A callable that accepts the robots.txt URL and returns the
            document text or an awaitable of it. It must raise
            :class:`.errors.NotFound` if the document does not exist. If not
            given, a :class:`.fetcher.RobotsTxtFetcher` is used.
        parser: An object with a ``parse(text, site, user_agent)`` method
            returning a :class:`.robotstxt.RuleSet`.
        pool: The pool in which rule sets are stored.
        fetch_params: A :class:`.fetcher.FetchParams` for the default
            ``http_get``.

    URLs given to the query methods may be strings, :class:`.url.URLInfo`
    or results of :func:`urllib.parse.urlsplit`. The methods raise
    :class:`.errors.InvalidURI`, :class:`.errors.NotAbsolute` or
    :class:`.errors.UnsupportedScheme` for unusable URLs.
    '''
    def __init__(self, user_agent: str, http_get=None,
                 parser=None, pool: RobotsTxtPool=None, fetch_params=None):
        if not user_agent:
            raise ValueError('User agent must not be empty.')

        self._user_agent = user_agent
        self._http_get = http_get or RobotsTxtFetcher(
            user_agent, params=fetch_params)
        self._parser = parser or RobotsTxtParser()
        self._pool = pool if pool is not None else RobotsTxtPool()

    @property
    def user_agent(self) -> str:
        '''Return the robot name.'''
        return self._user_agent

    @property
    def pool(self) -> RobotsTxtPool:
        '''Return the RobotsTxtPool.'''
        return self._pool

    async def allowed(self, url) -> bool:
        '''Return whether the robot may fetch the URL.

        The robots.txt document itself is always allowed.

        Coroutine.
        '''
        site, request_uri = split_url(url)

        if request_uri == ROBOTS_TXT_PATH:
            return True

        rule_set = await self._rule_set(site)

        return rule_set.allows(request_uri)

    async def disallowed(self, url) -> bool:
        '''Return whether the robot may not fetch the URL.

        Coroutine.
        '''
        return not (await self.allowed(url))

    async def options(self, url) -> dict:
        '''Return the extended options of the URL's site.

        Field names are lowercase.

        Coroutine.
        '''
        site, dummy = split_url(url)
        rule_set = await self._rule_set(site)

        return rule_set.options()

    async def option(self, url, token: str):
        '''Return the value of an extended option or None.

        Coroutine.
        '''
        options = await self.options(url)

        return options.get(token.lower())

    async def sitemaps(self, url) -> list:
        '''Return the sitemap URLs listed for the URL's site.

        Coroutine.
        '''
        site, dummy = split_url(url)
        rule_set = await self._rule_set(site)

        return rule_set.sitemaps()

    async def _rule_set(self, site: Site) -> RuleSet:
        return await self._pool.get_rule_set(
            site, lambda: self._fetch_rule_set(site)
        )

    async def _fetch_rule_set(self, site: Site) -> RuleSet:
        '''Fetch and parse the robots.txt of the site.'''
        url = site.robots_txt_url

        try:
            text = await resolve(self._http_get(url))
        except NotFound:
            _logger.debug(__('No robots.txt for {0}.', site.url))
            text = ''
        except FetchFailed as error:
            _logger.warning(__(
                _('Failed to fetch {url}: {error}.'),
                url=url, error=error))
            raise
        except Exception as error:
            _logger.warning(__(
                _('Failed to fetch {url}: {error}.'),
                url=url, error=error))
            raise FetchFailed(
                _('Failed to fetch robots.txt: {error}').format(error=error),
                url=url
            ) from error
        else:
            _logger.debug(__('Got robots.txt for {0}.', site.url))

        return self._parser.parse(text, site, self._user_agent)
