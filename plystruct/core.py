"""
Core module for the decoding of the data section.

The header is the decode plan: each element becomes an ElementChunk holding
one field per property, in declaration order, and the chunks are unpacked one
after the other from the same stream since the position of a record depends
on everything that precedes it.
"""
import logging
import struct
from typing import Dict, Iterator, List, NamedTuple, Optional, Tuple

from .enum import FormatKind
from .exceptions import DecodeError
from .fields import Field, Value, field_from_property
from .header import Element, Header
from .streams import Stream


logger = logging.getLogger(__name__)


class ElementData(NamedTuple):
    element: Element
    records: list


class ElementChunk(object):
    """
    Unpacks the records of a single element: a record is a list with an entry
    for each property, a Value for the scalars and a list of Value for the lists.

    When the body is binary and the element has no list property the
    records have all the same width and they are unpacked in bulk.
    """

    def __init__(self, element: Element, format_kind: FormatKind):
        self.logger = logging.getLogger(__name__)
        self.element = element
        self.format_kind = format_kind
        self._fields = [(_.name, field_from_property(_, format_kind)) for _ in element.properties]
        self._struct = None

        if format_kind.is_binary and element.is_fixed_size:
            self._struct = struct.Struct(format_kind.endianess.prefix + ''.join(
                _.kind.data_type.format for _ in element.properties))

    def __repr__(self):
        msg = []
        for field_name, field in self.get_fields():
            msg.append('%s=%s' % (field_name, repr(field)))
        return '<%s[%s](%s)>' % (self.__class__.__name__, self.element.name, ','.join(msg))

    def get_fields(self) -> List[Tuple[str, Field]]:
        '''It returns a list of couples (name, instance) for each field.'''
        return self._fields

    @property
    def size(self) -> Optional[int]:
        '''the width of a record, None if it depends on the data'''
        return self._struct.size if self._struct else None

    @property
    def layout(self) -> Dict[str, Tuple[int, int]]:
        '''Offset and size of each property inside a record, only for fixed size records.'''
        if self._struct is None:
            raise ValueError(f'element \'{self.element.name}\' has no fixed layout')

        result = {}
        offset = 0
        for name, field in self.get_fields():
            result[name] = (offset, field.size)
            offset += field.size

        return result

    def unpack(self, stream: Stream) -> list:
        '''Unpack a single record.'''
        record = []
        for field_name, field in self.get_fields():
            try:
                record.append(field.unpack(stream))
            except DecodeError as e:
                e.chain.append(field_name)
                raise

        return record

    def _bulk_records(self, stream: Stream) -> Iterator[list]:
        data_types = [_.kind.data_type for _ in self.element.properties]
        raw = stream.read(self._struct.size * self.element.count)

        for values in self._struct.iter_unpack(raw):
            yield [Value(data_type, value) for data_type, value in zip(data_types, values)]

    def iter_unpack(self, stream: Stream) -> Iterator[list]:
        '''Unpack the records of the element one at a time.'''
        self.logger.debug('unpacking %d records of \'%s\' at offset %d' % (
            self.element.count, self.element.name, stream.tell()))

        if self._struct and stream.available >= self._struct.size * self.element.count:
            yield from self._bulk_records(stream)
            return

        # if the data is not enough we go slowly to find the exact point
        for idx in range(self.element.count):
            try:
                record = self.unpack(stream)
            except DecodeError as e:
                e.chain.append(f'{self.element.name}[{idx}]')
                raise

            yield record


class BodyDecoder(object):
    '''Decode the data section following the header: consumed tells
    how many bytes were used so far.'''

    def __init__(self, header: Header, data):
        self.header = header
        self.stream = Stream(data)
        self.chunks = [ElementChunk(_, header.format.kind) for _ in header.elements]

    @property
    def consumed(self) -> int:
        return self.stream.tell()

    def iter_records(self) -> Iterator[Tuple[Element, int, list]]:
        for chunk in self.chunks:
            for idx, record in enumerate(chunk.iter_unpack(self.stream)):
                yield chunk.element, idx, record

    def decode(self) -> List[ElementData]:
        return [ElementData(_.element, list(_.iter_unpack(self.stream))) for _ in self.chunks]


def decode_body(data, header: Header) -> Tuple[List[ElementData], int]:
    '''Decode the data section described by header.

    It returns the records grouped by element, in the same order as in the
    header, and the number of bytes of data that were consumed.'''
    decoder = BodyDecoder(header, data)
    elements = decoder.decode()

    logger.debug('body decoded: %d bytes consumed out of %d' % (decoder.consumed, decoder.stream.size))

    return elements, decoder.consumed


def iter_records(data, header: Header) -> Iterator[Tuple[Element, int, list]]:
    '''Lazy version of decode_body(): it yields (element, index, record).'''
    yield from BodyDecoder(header, data).iter_records()
