# encoding=utf-8
'''Robots.txt document retrieval.'''
import asyncio
import collections
import gettext
import logging

import tornado.httpclient
import tornado.httputil
from tornado.simple_httpclient import HTTPTimeoutError

from webrobots.errors import FetchFailed, NetworkError, NetworkTimedOut, \
    NotFound, ServerError, TooManyRedirects, URLError
from webrobots.redirect import RedirectTracker
from webrobots.string import printable_str, to_text
from webrobots.url import URLInfo
from webrobots.util import BraceMessage as __


_logger = logging.getLogger(__name__)
_ = gettext.gettext

FetchParams = collections.namedtuple(
    'FetchParamsType',
    [
        'max_redirects',
        'timeout',
        'request_timeout',
        'connect_timeout',
        'validate_cert',
        'max_body_size',
    ],
    defaults=(10, None, 20.0, 20.0, True, 100 * 1024)
)
'''FetchParams

Args:
    max_redirects (int): Maximum number of requests in a redirect chain,
        including the first request.
    timeout (float): If provided, the time in seconds in which the
        document, including all redirects, must be retrieved.
    request_timeout (float): Time in seconds for a single request.
    connect_timeout (float): Time in seconds to establish a connection.
    validate_cert (bool): If True, SSL/TLS certificates are verified.
    max_body_size (int): Number of bytes of the document to keep. The
        rest is discarded.
'''


class RobotsTxtFetcher(object):
    '''Fetch robots.txt documents with a Tornado HTTP client.

    Args:
        user_agent (str): Value of the ``User-Agent`` field.
        http_client: An object with the interface of
            :class:`tornado.httpclient.AsyncHTTPClient`. If not given, the
            shared client of the current event loop is used.
        params (FetchParams): Request parameters.

    Instances are callable and can be given to
    :class:`webrobots.robots.WebRobots` as its ``http_get``.
    '''
    def __init__(self, user_agent: str, http_client=None, params=None):
        self._user_agent = user_agent
        self._http_client = http_client
        self._params = params or FetchParams()

    @property
    def user_agent(self) -> str:
        return self._user_agent

    @property
    def params(self):
        return self._params

    async def __call__(self, url: str) -> str:
        return await self.fetch(url)

    async def fetch(self, url: str) -> str:
        '''Fetch the document and return its text.

        Redirects are followed until a final response is received.

        Raises:
            NotFound: The server responded with 404.
            FetchFailed: The document could not be retrieved.

        Coroutine.
        '''
        if self._params.timeout is None:
            return await self._fetch(url)

        try:
            return await asyncio.wait_for(
                self._fetch(url), timeout=self._params.timeout)
        except asyncio.TimeoutError as error:
            raise NetworkTimedOut(
                _('Fetching robots.txt timed out.'), url=url
            ) from error

    async def _fetch(self, url):
        redirect_tracker = RedirectTracker(
            max_redirects=self._params.max_redirects)
        referer = None

        while True:
            response = await self._request(url, referer)
            redirect_tracker.load(url, response)

            if not redirect_tracker.is_redirect():
                return self._read_content(url, response)

            if redirect_tracker.exceeded():
                raise TooManyRedirects(_('Too many redirects.'), url=url)

            referer = url
            url = self._next_url(url, redirect_tracker)

            _logger.debug(__('Redirected from {0} to {1}.',
                             referer, printable_str(url)))

    async def _request(self, url, referer=None):
        '''Send a single request without following redirects.'''
        headers = tornado.httputil.HTTPHeaders()
        headers['User-Agent'] = self._user_agent

        if referer:
            headers['Referer'] = referer

        request = tornado.httpclient.HTTPRequest(
            url,
            headers=headers,
            follow_redirects=False,
            request_timeout=self._params.request_timeout,
            connect_timeout=self._params.connect_timeout,
            validate_cert=self._params.validate_cert,
        )
        http_client = self._http_client or \
            tornado.httpclient.AsyncHTTPClient()

        _logger.debug(__('Fetching {0}.', url))

        try:
            return await http_client.fetch(request, raise_error=False)
        except HTTPTimeoutError as error:
            raise NetworkTimedOut(
                _('Request timed out.'), url=url
            ) from error
        except (tornado.httpclient.HTTPClientError, OSError) as error:
            raise NetworkError(
                _('Request failed: {error}').format(error=error), url=url
            ) from error

    def _next_url(self, url, redirect_tracker):
        '''Return the validated URL of the redirect.'''
        location = redirect_tracker.next_location()

        if not location:
            raise FetchFailed(_('Redirect location missing.'), url=url)

        try:
            return URLInfo.parse(location).url
        except URLError as error:
            raise FetchFailed(
                _('Invalid redirect location: {location}').format(
                    location=printable_str(location)),
                url=url
            ) from error

    def _read_content(self, url, response):
        '''Return the text of a final response.'''
        status_code = response.code

        if status_code == 404:
            raise NotFound(url)

        if not 200 <= status_code <= 299:
            raise ServerError(
                _('Server returned status {code} for robots.txt.').format(
                    code=status_code),
                url=url, status_code=status_code
            )

        data = response.body or b''

        if len(data) > self._params.max_body_size:
            _logger.debug(__('Truncating robots.txt from {0} at {1} bytes.',
                             url, self._params.max_body_size))
            data = data[:self._params.max_body_size]

        return to_text(data, response.headers.get('Content-Type'))
