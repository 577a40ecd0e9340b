"""
Recursive-descent recognizer for the PLY header.

Each rule is a function taking the whole buffer and the offset where to start,
returning the recognized value and the offset just after it; on failure a
ParseError is raised carrying the absolute offset into the buffer. Rules
decorated with @rule() append their name to the exception's chain so that
the caller can see which rules were involved.

    header        := "ply" WS format comment* element+ "end_header" EOL
    format        := "format" WS format_kind WS version WS
    version       := INT "." INT
    comment       := "comment" [ \\t]* rest_of_line WS
    element       := "element" WS identifier WS INT WS property+
    property      := "property" WS property_kind WS identifier WS
    property_kind := "list" WS data_type WS data_type | data_type
"""
import functools
import logging
from typing import Tuple

from .enum import FormatKind, data_type_from_spelling
from .exceptions import (
    ParseError,
    UnexpectedToken,
    UnknownFormatKind,
    UnknownDataType,
    InvalidInteger,
    EmptyElementList,
    MissingEndHeader,
)
from .header import (
    Version,
    Format,
    ScalarKind,
    ListKind,
    Property,
    Element,
    Header,
)


logger = logging.getLogger(__name__)


WHITESPACE = b' \t\r\n'
BLANKS = b' \t'
LINE_ENDINGS = b'\r\n'
IDENTIFIER_CHARS = b'abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_'
DIGITS = b'0123456789'

VERSION_BITS = 32
COUNT_BITS = 64

FOUND_MAX_LENGTH = 32


def rule(name):
    '''Mark a function as a grammar rule so that it shows up in the chain of the errors.'''
    def decorator(func):
        @functools.wraps(func)
        def wrapper(data, offset, *args):
            logger.debug('rule \'%s\' at offset %d' % (name, offset))
            try:
                return func(data, offset, *args)
            except ParseError as e:
                if e.chain[-1] != name:
                    e.chain.append(name)
                raise
        return wrapper
    return decorator


def _span(data, offset, charset) -> int:
    '''Return the offset of the first byte not in charset.'''
    end = offset
    while end < len(data) and data[end] in charset:
        end += 1

    return end


def _word_end(data, offset) -> int:
    end = offset
    while end < len(data) and data[end] not in WHITESPACE:
        end += 1

    return end


def peek_word(data, offset) -> bytes:
    '''The run of non-whitespace bytes starting at offset.'''
    return data[offset:_word_end(data, offset)]


def found_at(data, offset):
    '''Text to report as what was found at offset, None at the end of input.'''
    if offset >= len(data):
        return None

    word = peek_word(data, offset)
    if not word:
        word = data[offset:offset + 1]

    return word[:FOUND_MAX_LENGTH].decode('latin-1')


def multispace(data, offset) -> Tuple[None, int]:
    end = _span(data, offset, WHITESPACE)
    if end == offset:
        raise UnexpectedToken('multispace', offset, expected='whitespace', found=found_at(data, offset))

    return None, end


def tag(data, offset, literal: bytes) -> Tuple[bytes, int]:
    if not data.startswith(literal, offset):
        raise UnexpectedToken('tag', offset, expected=repr(literal.decode()), found=found_at(data, offset))

    return literal, offset + len(literal)


@rule('integer')
def integer(data, offset, bits) -> Tuple[int, int]:
    '''Unsigned run of digits that must fit a signed machine integer of the given bits.'''
    end = _span(data, offset, DIGITS)
    if end == offset:
        raise InvalidInteger('integer', offset, expected='digits', found=found_at(data, offset))

    value = int(data[offset:end])
    if value >= 1 << (bits - 1):
        raise InvalidInteger('integer', offset, expected=f'{bits}-bit integer', found=data[offset:end].decode())

    return value, end


@rule('identifier')
def identifier(data, offset) -> Tuple[str, int]:
    end = _span(data, offset, IDENTIFIER_CHARS)
    if end == offset:
        raise UnexpectedToken('identifier', offset, expected='identifier', found=found_at(data, offset))

    return data[offset:end].decode('ascii'), end


@rule('version')
def version(data, offset) -> Tuple[Version, int]:
    major, offset = integer(data, offset, VERSION_BITS)
    _, offset = tag(data, offset, b'.')
    minor, offset = integer(data, offset, VERSION_BITS)

    return Version(major, minor), offset


@rule('format_kind')
def format_kind(data, offset) -> Tuple[FormatKind, int]:
    end = _word_end(data, offset)
    word = data[offset:end].decode('latin-1')

    for kind in FormatKind:
        if word == kind.value:
            return kind, end

    raise UnknownFormatKind('format_kind', offset, expected='format kind', found=found_at(data, offset))


@rule('format')
def format_declaration(data, offset) -> Tuple[Format, int]:
    _, offset = tag(data, offset, b'format')
    _, offset = multispace(data, offset)
    kind, offset = format_kind(data, offset)
    _, offset = multispace(data, offset)
    _version, offset = version(data, offset)
    _, offset = multispace(data, offset)

    return Format(kind, _version), offset


@rule('comment')
def comment(data, offset) -> Tuple[str, int]:
    _, offset = tag(data, offset, b'comment')
    start = _span(data, offset, BLANKS)
    if start == offset and start < len(data) and data[start] not in LINE_ENDINGS:
        raise UnexpectedToken('comment', offset, expected='whitespace', found=found_at(data, offset))

    end = start
    while end < len(data) and data[end] not in LINE_ENDINGS:
        end += 1

    try:
        text = data[start:end].decode('utf-8')
    except UnicodeDecodeError:
        raise UnexpectedToken('comment', start, expected='utf-8 text', found=found_at(data, start))

    _, offset = multispace(data, end)

    return text, offset


@rule('data_type')
def data_type(data, offset):
    end = _word_end(data, offset)
    _data_type = data_type_from_spelling(data[offset:end].decode('latin-1'))
    if _data_type is None:
        raise UnknownDataType('data_type', offset, expected='data type', found=found_at(data, offset))

    return _data_type, end


@rule('property_kind')
def property_kind(data, offset):
    if peek_word(data, offset) != b'list':
        _data_type, offset = data_type(data, offset)
        return ScalarKind(_data_type), offset

    _, offset = tag(data, offset, b'list')
    _, offset = multispace(data, offset)
    count_type, offset = data_type(data, offset)
    _, offset = multispace(data, offset)
    item_type, offset = data_type(data, offset)

    return ListKind(count_type, item_type), offset


@rule('property')
def property_declaration(data, offset) -> Tuple[Property, int]:
    _, offset = tag(data, offset, b'property')
    _, offset = multispace(data, offset)
    kind, offset = property_kind(data, offset)
    _, offset = multispace(data, offset)
    name, offset = identifier(data, offset)
    _, offset = multispace(data, offset)

    return Property(name, kind), offset


@rule('element')
def element_declaration(data, offset) -> Tuple[Element, int]:
    _, offset = tag(data, offset, b'element')
    _, offset = multispace(data, offset)
    name, offset = identifier(data, offset)
    _, offset = multispace(data, offset)
    count, offset = integer(data, offset, COUNT_BITS)
    _, offset = multispace(data, offset)

    # at least one property is mandatory
    properties = []
    _property, offset = property_declaration(data, offset)
    properties.append(_property)
    while peek_word(data, offset) == b'property':
        _property, offset = property_declaration(data, offset)
        properties.append(_property)

    return Element(name, count, tuple(properties)), offset


@rule('end_header')
def end_header(data, offset) -> Tuple[None, int]:
    '''The header is closed by the keyword and exactly one line terminator,
    nothing more is consumed since it could be binary data.'''
    if peek_word(data, offset) != b'end_header':
        raise MissingEndHeader('end_header', offset, expected='\'end_header\'', found=found_at(data, offset))

    _, offset = tag(data, offset, b'end_header')
    offset = _span(data, offset, BLANKS)

    if data.startswith(b'\r\n', offset):
        return None, offset + 2
    if data.startswith(b'\n', offset):
        return None, offset + 1

    raise MissingEndHeader('end_header', offset, expected='line terminator', found=found_at(data, offset))


@rule('header')
def header(data, offset=0) -> Tuple[Header, int]:
    _, offset = tag(data, offset, b'ply')
    _, offset = multispace(data, offset)
    _format, offset = format_declaration(data, offset)

    comments = []
    while peek_word(data, offset) == b'comment':
        text, offset = comment(data, offset)
        comments.append(text)

    if peek_word(data, offset) != b'element':
        raise EmptyElementList('header', offset, expected='\'element\'', found=found_at(data, offset))

    elements = []
    while peek_word(data, offset) == b'element':
        _element, offset = element_declaration(data, offset)
        elements.append(_element)

    _, offset = end_header(data, offset)

    return Header(tuple(comments), _format, tuple(elements)), offset


def parse_header(data) -> Tuple[Header, bytes]:
    '''Recognize the header at the start of data.

    It returns the Header and the bytes following it, i.e. the data section.'''
    data = bytes(data)
    _header, offset = header(data, 0)

    logger.debug('header parsed: %d elements, body starts at offset %d' % (len(_header.elements), offset))

    return _header, data[offset:]
