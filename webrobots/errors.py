# encoding=utf-8
'''Exceptions.'''


class URLError(ValueError):
    '''A URL cannot be checked against robots exclusion rules.'''


class InvalidURI(URLError):
    '''The URL string is malformed.'''


class NotAbsolute(URLError):
    '''The URL is missing a scheme or a host.'''


class UnsupportedScheme(URLError):
    '''The URL is not HTTP or HTTPS.'''


class NotFound(Exception):
    '''The robots.txt resource does not exist.

    Raised by transports to tell a missing document apart from other
    failures. It is not an error for callers of
    :class:`webrobots.robots.WebRobots`.
    '''


class FetchFailed(OSError):
    '''The robots.txt document could not be retrieved.

    Args:
        message (str): Description of the failure.
        url (str): The URL that was being fetched.
    '''
    def __init__(self, message, url=None):
        super().__init__(message)
        self.url = url


class TooManyRedirects(FetchFailed):
    '''The redirect limit was reached.'''


class ServerError(FetchFailed):
    '''Server responded with a status code other than success or 404.'''
    def __init__(self, message, url=None, status_code=None):
        super().__init__(message, url=url)
        self.status_code = status_code


class NetworkError(FetchFailed):
    '''A networking error.'''


class NetworkTimedOut(NetworkError):
    '''The deadline expired before the document was retrieved.'''
