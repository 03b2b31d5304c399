# encoding=utf8
'''Redirection tracking.'''
import webrobots.url


class RedirectTracker(object):
    '''Keeps track of HTTP document URL redirects.

    Args:
        max_redirects (int): The maximum number of requests in a chain,
            including the original request. A chain whose last allowed
            request is still answered with a redirect is exhausted.
        codes: The HTTP status codes indicating a redirect.
    '''
    REDIRECT_CODES = (301, 302, 303, 307, 308)

    def __init__(self, max_redirects=10, codes=REDIRECT_CODES):
        self._max_redirects = max_redirects
        self._codes = codes
        self._url = None
        self._response = None
        self._num_redirects = 0

    def load(self, url, response):
        '''Load the response and increment the counter.

        Args:
            url (str): The URL that was requested.
            response (:class:`tornado.httpclient.HTTPResponse`): The response
                to the request.
        '''
        self._url = url
        self._response = response

        if self.is_redirect():
            self._num_redirects += 1

    def next_location(self):
        '''Returns the next location normalized to a complete URL.

        Returns:
            str, None: If str, the location. Otherwise, no next location.
        '''
        if self._response:
            location = self._response.headers.get('Location')

            if not location:
                return location

            return webrobots.url.urljoin(self._url, location.strip())

    def is_redirect(self):
        '''Return whether the response contains a redirect code.'''
        if self._response:
            return self._response.code in self._codes

        return False

    def exceeded(self):
        '''Return whether no more redirects may be followed.'''
        return self._num_redirects >= self._max_redirects
