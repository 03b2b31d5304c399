'''URL parsing and site identity.'''
import functools
import gettext
import re
import string
import urllib.parse

from webrobots.errors import InvalidURI, NotAbsolute, UnsupportedScheme


_ = gettext.gettext


RELATIVE_SCHEME_DEFAULT_PORTS = {
    'http': 80,
    'https': 443,
}
'''Schemes that may carry a robots.txt document and their default ports.'''

ROBOTS_TXT_PATH = '/robots.txt'
'''Well-known location of the robots exclusion document.'''

SCHEME_PATTERN = re.compile(r'[a-zA-Z][a-zA-Z0-9+.-]*$')
'''Valid scheme characters per RFC 3986.'''

FORBIDDEN_HOSTNAME_CHARS = frozenset('#%/:?@[\\] ')
'''Forbidden hostname characters.

Does not include non-printing characters. Meant for ASCII.
'''

VALID_IPv6_ADDRESS_CHARS = frozenset(string.hexdigits + '.:')
'''Valid IPv6 address characters.'''


class URLInfo(object):
    '''Represent parts of an absolute HTTP or HTTPS URL.

    Attributes:
        raw (str): Original string.
        scheme (str): Protocol, lowercase.
        authority (str): Raw userinfo and host.
        path (str): Location of resource. Never empty.
        query (str): Additional request parameters.
        fragment (str): Named anchor of a document.
        userinfo (str): Raw username and password.
        host (str): Raw hostname and port.
        hostname (str): Hostname or IP address, lowercase.
        port (int): IP address port number.
        request_uri (str): Path and query as sent in a request line.
        url (str): The URL without userinfo and fragment.

    Instances are only created by :meth:`parse` which raises a subclass
    of :class:`.errors.URLError` if the URL is unusable.

    All attributes are read only.
    '''

    __slots__ = ('raw', 'scheme', 'authority', 'path', 'query', 'fragment',
                 'userinfo', 'host', 'hostname', 'port')

    def __init__(self):
        self.raw = None
        self.scheme = None
        self.authority = None
        self.path = None
        self.query = None
        self.fragment = None
        self.userinfo = None
        self.host = None
        self.hostname = None
        self.port = None

    @classmethod
    @functools.lru_cache()
    def parse(cls, url):
        '''Parse a URL and return a URLInfo.'''
        url = url.strip()
        if not url.isprintable():
            raise InvalidURI(
                _('URL is not printable: {}').format(ascii(url)))

        scheme, sep, remaining = url.partition(':')

        if not sep or not SCHEME_PATTERN.match(scheme):
            raise NotAbsolute(
                _('URL missing scheme: {}').format(ascii(url)))

        scheme = scheme.lower()

        if scheme not in RELATIVE_SCHEME_DEFAULT_PORTS:
            raise UnsupportedScheme(
                _('URL is not HTTP or HTTPS: {}').format(ascii(url)))

        if not remaining.startswith('//'):
            raise NotAbsolute(
                _('URL missing host: {}').format(ascii(url)))

        remaining = remaining[2:]

        path_index = remaining.find('/')
        query_index = remaining.find('?')
        fragment_index = remaining.find('#')

        try:
            index_tuple = (path_index, query_index, fragment_index)
            authority_index = min(num for num in index_tuple if num >= 0)
        except ValueError:
            authority_index = len(remaining)

        authority = remaining[:authority_index]

        try:
            index_tuple = (query_index, fragment_index)
            path_index = min(num for num in index_tuple if num >= 0)
        except ValueError:
            path_index = len(remaining)

        path = remaining[authority_index:path_index] or '/'

        if fragment_index >= 0:
            query_index = fragment_index
        else:
            query_index = len(remaining)

        query = remaining[path_index + 1:query_index]
        fragment = remaining[query_index + 1:]

        userinfo, host = cls.parse_authority(authority)
        hostname, port = cls.parse_host(host)

        if not hostname:
            raise NotAbsolute(
                _('Hostname is empty: {}').format(ascii(url)))

        if not path.startswith('/'):
            path = '/' + path

        info = URLInfo()
        info.raw = url
        info.scheme = scheme
        info.authority = authority
        info.path = path
        info.query = query
        info.fragment = fragment
        info.userinfo = userinfo
        info.host = host
        info.hostname = hostname
        info.port = port or RELATIVE_SCHEME_DEFAULT_PORTS[scheme]

        return info

    @classmethod
    def parse_authority(cls, authority):
        '''Parse the authority part and return userinfo and host.'''
        userinfo, sep, host = authority.rpartition('@')

        return userinfo, host

    @classmethod
    def parse_host(cls, host):
        '''Parse the host and return hostname and port.'''
        if host.endswith(']'):
            return cls.parse_hostname(host), None
        else:
            hostname, sep, port = host.rpartition(':')

        if not sep:
            return cls.parse_hostname(port), None

        if not port:
            return cls.parse_hostname(hostname), None

        if not port.isdigit() or not 0 < int(port) < 65536:
            raise InvalidURI(_('Invalid port: {}').format(ascii(host)))

        return cls.parse_hostname(hostname), int(port)

    @classmethod
    def parse_hostname(cls, hostname):
        '''Parse the hostname and normalize.'''
        if hostname.startswith('['):
            return cls.parse_ipv6_hostname(hostname)

        try:
            new_hostname = normalize_hostname(hostname)
        except UnicodeError as error:
            raise InvalidURI(
                _('Invalid hostname: {}').format(ascii(hostname))
            ) from error

        if any(char in new_hostname for char in FORBIDDEN_HOSTNAME_CHARS):
            raise InvalidURI(
                _('Invalid hostname: {}').format(ascii(hostname)))

        return new_hostname

    @classmethod
    def parse_ipv6_hostname(cls, hostname):
        '''Parse and normalize a IPv6 address.'''
        if not hostname.startswith('[') or not hostname.endswith(']'):
            raise InvalidURI(
                _('Invalid IPv6 address: {}').format(ascii(hostname)))

        hostname = hostname[1:-1]

        if not hostname or \
                any(char not in VALID_IPv6_ADDRESS_CHARS for char in hostname):
            raise InvalidURI(
                _('Invalid IPv6 address: {}').format(ascii(hostname)))

        return hostname.lower()

    @property
    def request_uri(self):
        if self.query:
            return '{}?{}'.format(self.path, self.query)
        else:
            return self.path

    @property
    def url(self):
        return '{}://{}{}'.format(
            self.scheme,
            format_host(self.scheme, self.hostname, self.port),
            self.request_uri
        )

    def __repr__(self):
        return '<URLInfo at 0x{:x} url={} raw={}>'.format(
            id(self), self.url, self.raw)

    def __hash__(self):
        return hash(self.raw)

    def __eq__(self, other):
        if not isinstance(other, URLInfo):
            return NotImplemented

        return self.raw == other.raw

    def __ne__(self, other):
        if not isinstance(other, URLInfo):
            return NotImplemented

        return self.raw != other.raw


class Site(object):
    '''The scheme, host and port that own a robots.txt document.

    Two URLs belong to the same site if these three parts are equal. The
    hostname is expected to be normalized to lowercase already.
    '''
    __slots__ = ('scheme', 'hostname', 'port')

    def __init__(self, scheme, hostname, port=None):
        self.scheme = scheme
        self.hostname = hostname
        self.port = port or RELATIVE_SCHEME_DEFAULT_PORTS[scheme]

    @classmethod
    def from_url_info(cls, url_info):
        return cls(url_info.scheme, url_info.hostname, url_info.port)

    @property
    def url(self):
        '''Return the root URL of the site.'''
        return '{}://{}/'.format(
            self.scheme, format_host(self.scheme, self.hostname, self.port))

    @property
    def robots_txt_url(self):
        '''Return the URL of the robots.txt document.'''
        return self.url[:-1] + ROBOTS_TXT_PATH

    def key(self):
        return self.scheme, self.hostname, self.port

    def __repr__(self):
        return '<Site {}>'.format(self.url)

    def __hash__(self):
        return hash(self.key())

    def __eq__(self, other):
        if not isinstance(other, Site):
            return NotImplemented

        return self.key() == other.key()

    def __ne__(self, other):
        if not isinstance(other, Site):
            return NotImplemented

        return self.key() != other.key()


def split_url(url):
    '''Return the site and the request URI of a URL.

    Args:
        url: A string, a :class:`URLInfo`, or a result of
            :func:`urllib.parse.urlsplit`/:func:`urllib.parse.urlparse`.

    Returns:
        tuple: (:class:`Site`, str)

    Raises:
        InvalidURI: The URL is malformed.
        NotAbsolute: The URL is missing its scheme or host.
        UnsupportedScheme: The URL is not HTTP or HTTPS.
    '''
    if isinstance(url, URLInfo):
        url_info = url
    elif isinstance(url, str):
        url_info = URLInfo.parse(url)
    elif isinstance(url, (urllib.parse.SplitResult, urllib.parse.ParseResult)):
        url_info = URLInfo.parse(url.geturl())
    else:
        raise TypeError('Expected a URL, got {}'.format(type(url).__name__))

    return Site.from_url_info(url_info), url_info.request_uri


def format_host(scheme, hostname, port):
    '''Return the host portion but omit default port if needed.'''
    if ':' in hostname:
        hostname = '[{}]'.format(hostname)

    if RELATIVE_SCHEME_DEFAULT_PORTS.get(scheme) != port:
        return '{}:{}'.format(hostname, port)
    else:
        return hostname


@functools.lru_cache()
def normalize_hostname(hostname):
    '''Normalizes a hostname so that it is ASCII and valid domain name.'''
    new_hostname = hostname.encode('idna').decode('ascii').lower()

    if hostname != new_hostname:
        # Check for round-trip. May raise UnicodeError
        new_hostname.encode('idna')

    return new_hostname


def urljoin(base_url, url, allow_fragments=True):
    '''Join URLs like ``urllib.parse.urljoin`` but allow scheme-relative URL.'''
    if url.startswith('//') and len(url) > 2:
        scheme = base_url.partition(':')[0]
        if scheme:
            return urllib.parse.urljoin(
                base_url,
                '{0}:{1}'.format(scheme, url),
                allow_fragments=allow_fragments
            )

    return urllib.parse.urljoin(
        base_url, url, allow_fragments=allow_fragments)
