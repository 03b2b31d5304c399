# encoding=utf-8
'''String and binary data functions.'''
import codecs
import re

import chardet


BOM_CODECS = (
    (codecs.BOM_UTF8, 'utf-8-sig'),
    (codecs.BOM_UTF32_LE, 'utf-32'),
    (codecs.BOM_UTF32_BE, 'utf-32'),
    (codecs.BOM_UTF16_LE, 'utf-16'),
    (codecs.BOM_UTF16_BE, 'utf-16'),
)
'''Byte order marks and the codecs that consume them.

UTF-32 marks are listed first because the UTF-16 LE mark is a prefix of the
UTF-32 LE mark.
'''


def parse_charset(header_string):
    '''Parse a "Content-Type" string for the document encoding.

    Returns:
        str, None
    '''
    match = re.search(
        r'''charset[ ]?=[ ]?["']?([a-z0-9_-]+)''',
        header_string,
        re.IGNORECASE
    )

    if match:
        return match.group(1)


def normalize_codec_name(name):
    '''Return the Python name of the encoder/decoder

    Returns:
        str, None
    '''
    try:
        return codecs.lookup(name).name
    except (LookupError, TypeError, ValueError):
        # TypeError/ValueError occurs when name contains \x00
        pass


def sniff_bom(data):
    '''Return the codec indicated by a byte order mark, if any.'''
    for bom, codec_name in BOM_CODECS:
        if data.startswith(bom):
            return codec_name


def detect_encoding(data, encoding=None, fallback='latin1'):
    '''Detect the character encoding of the data.

    The candidates are tried in order: byte order mark, the given encoding,
    UTF-8, the guess from :mod:`chardet`, and the fallback.

    Returns:
        str: The name of the codec

    Raises:
        ValueError: The codec could not be detected. This error can only
        occur if fallback is not a "lossless" codec.
    '''
    candidates = [sniff_bom(data), encoding, 'utf-8']

    if data:
        candidates.append(chardet.detect(data).get('encoding'))

    candidates.append(fallback)

    for candidate in candidates:
        if not candidate:
            continue

        candidate = normalize_codec_name(candidate)

        if not candidate:
            continue

        if try_decoding(data, candidate):
            return candidate

    raise ValueError('Unable to detect encoding.')


def try_decoding(data, encoding):
    '''Return whether the Python codec could decode the data.'''
    try:
        data.decode(encoding, 'strict')
    except UnicodeError:
        # Data under 16 bytes is very unlikely to be truncated
        if len(data) > 16:
            for trim in (1, 2, 3):
                trimmed_data = data[:-trim]
                if trimmed_data:
                    try:
                        trimmed_data.decode(encoding, 'strict')
                    except UnicodeError:
                        continue
                    else:
                        return True
        return False
    else:
        return True


def to_text(data, content_type=None):
    '''Decode a document body.

    Args:
        data (bytes): The body.
        content_type (str): Value of the ``Content-Type`` field, if any.

    Undecodable bytes left over by truncation are replaced.
    '''
    encoding = parse_charset(content_type) if content_type else None
    encoding = detect_encoding(data, encoding)

    return data.decode(encoding, 'replace')


def printable_str(text):
    '''Escape any control or non-ASCII characters from string.

    This function is intended for use with strings from an untrusted
    source such as writing to a console or writing to logs. It is
    designed to prevent things like ANSI escape sequences from
    showing.
    '''
    if isinstance(text, str):
        new_text = ascii(text)[1:-1]
    else:
        new_text = ascii(text)

    return new_text
