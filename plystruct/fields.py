"""
A Field is the "fundamental" datatype from the format point of view: it knows
how to unpack one property occurrence from a stream, be it a fixed-width binary
value, an ascii token or a count-prefixed list of them.
"""
import logging
import math
import re
import struct
from typing import NamedTuple, Union

from .enum import DataType, Endianess, FormatKind
from .exceptions import (
    InvalidNumericToken,
    InvalidListCount,
    MissingDelimiter,
    UnexpectedEndOfInput,
)
from .header import ListKind, Property, ScalarKind


logger = logging.getLogger(__name__)


INTEGER_RE = re.compile(rb'[+-]?[0-9]+')
FLOAT_RE = re.compile(rb'[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?')
SPECIAL_FLOAT_RE = re.compile(rb'[+-]?(?:nan|inf|infinity)', re.IGNORECASE)

SIGNS = (b'+', b'-')


class Value(NamedTuple):
    '''A decoded scalar, tagged with the type that produced it.'''
    data_type: DataType
    value: Union[int, float]


def to_python(entry):
    '''Strip the tags: a Value becomes its number, a list a list of numbers.'''
    if isinstance(entry, Value):
        return entry.value

    return [to_python(_) for _ in entry]


def to_float32(value: float) -> float:
    '''Round to the nearest single precision number, as a binary file would store it.'''
    try:
        return struct.unpack('<f', struct.pack('<f', value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


class Field(object):
    """Base class to subclass from"""

    def __init__(self, name=None):
        self.logger = logging.getLogger(__name__)
        self.name = name

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.name})>'

    def _get_size(self):
        return None

    size = property(
        fget=lambda self: self._get_size(),
        doc='width in bytes of the field, None if it is not fixed')

    def unpack(self, stream):
        raise NotImplementedError(f'method {self.__class__.__name__}.unpack() not implemented')

    def unpack_many(self, stream, n):
        return [self.unpack(stream) for _ in range(n)]


class StructField(Field):
    """
    Simplest of the fields: mimic the behaviour of the struct module unpacking
    integers and floating points from bytes, with the indicated endianess.
    """

    def __init__(self, data_type: DataType, endianess=Endianess.LITTLE_ENDIAN, **kw):
        super().__init__(**kw)
        self.data_type = data_type
        self.endianess = endianess
        self._struct = struct.Struct(self.get_format())

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.data_type.name}, {self.endianess.name})>'

    def get_format(self, n=1):
        return '%s%s%s' % (self.endianess.prefix, n if n > 1 else '', self.data_type.format)

    def _get_size(self):
        return self._struct.size

    def unpack(self, stream):
        raw = stream.read(self.size)

        return Value(self.data_type, self._struct.unpack(raw)[0])

    def unpack_many(self, stream, n):
        '''Read n consecutive values in one go.'''
        if n == 0:
            return []

        raw = stream.read(self.size * n)

        return [Value(self.data_type, _) for _ in struct.unpack(self.get_format(n), raw)]


class TokenField(Field):
    """A value of an ascii body: one whitespace-delimited token parsed with
    the numeric grammar of its type."""

    def __init__(self, data_type: DataType, **kw):
        super().__init__(**kw)
        self.data_type = data_type

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.data_type.name})>'

    def unpack(self, stream, needed=1):
        token, offset = stream.read_token(needed=needed)

        return Value(self.data_type, self.convert(token, offset))

    def unpack_many(self, stream, n):
        # when the tokens run out we report how many are still missing
        return [self.unpack(stream, needed=n - idx) for idx in range(n)]

    def _invalid(self, token, offset, regex):
        prefix = regex.match(token)
        if prefix and token[prefix.end():prefix.end() + 1] in SIGNS:
            raise MissingDelimiter(
                found=token[prefix.end():].decode('latin-1'),
                offset=offset + prefix.end())

        raise InvalidNumericToken(token.decode('latin-1'), self.data_type, offset=offset)

    def convert(self, token: bytes, offset: int):
        if self.data_type.is_float:
            if not (FLOAT_RE.fullmatch(token) or SPECIAL_FLOAT_RE.fullmatch(token)):
                self._invalid(token, offset, FLOAT_RE)

            value = float(token)

            return to_float32(value) if self.data_type == DataType.FLOAT32 else value

        if not INTEGER_RE.fullmatch(token):
            self._invalid(token, offset, INTEGER_RE)

        value = int(token)
        lowest, highest = self.data_type.range
        if not lowest <= value <= highest:
            raise InvalidNumericToken(token.decode('latin-1'), self.data_type, offset=offset)

        return value


class ListField(Field):
    '''Un/Pack a count-prefixed list: the count is read with the first field
    and it's used only as the number of times to read the second one.'''

    def __init__(self, count_field: Field, item_field: Field, **kw):
        super().__init__(**kw)
        self.count_field = count_field
        self.item_field = item_field

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.count_field!r}, {self.item_field!r})>'

    def _count(self, value: Value, offset):
        count = value.value
        if isinstance(count, float):
            if not count.is_integer():
                raise InvalidListCount(count, offset=offset)
            count = int(count)

        if count < 0:
            raise InvalidListCount(count, offset=offset)

        return count

    def unpack(self, stream):
        offset = stream.tell()
        count = self._count(self.count_field.unpack(stream), offset)

        self.logger.debug('list \'%s\' with %d items at offset %d' % (self.name, count, offset))

        item_size = self.item_field.size
        if item_size is not None and stream.available < count * item_size:
            raise UnexpectedEndOfInput(needed=count * item_size, available=stream.available, offset=stream.tell())

        return self.item_field.unpack_many(stream, count)


def scalar_field(data_type: DataType, format_kind: FormatKind, name=None) -> Field:
    if format_kind == FormatKind.ASCII:
        return TokenField(data_type, name=name)
    if format_kind in (FormatKind.BINARY_BIG_ENDIAN, FormatKind.BINARY_LITTLE_ENDIAN):
        return StructField(data_type, endianess=format_kind.endianess, name=name)

    raise ValueError(f'unknown format kind {format_kind!r}')


def field_from_property(prop: Property, format_kind: FormatKind) -> Field:
    '''Build the field that decodes one occurrence of the property.'''
    if isinstance(prop.kind, ScalarKind):
        return scalar_field(prop.kind.data_type, format_kind, name=prop.name)
    if isinstance(prop.kind, ListKind):
        return ListField(
            scalar_field(prop.kind.count_type, format_kind),
            scalar_field(prop.kind.item_type, format_kind),
            name=prop.name,
        )

    raise ValueError(f'unknown property kind {prop.kind!r}')
