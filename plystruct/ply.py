'''
# Polygon File Format

Format created at Stanford to store three-dimensional data from scanners:
a text header declaring the elements, followed by their records in
ascii or in binary (big or little endian).
'''
import logging
from typing import List, NamedTuple

from .core import BodyDecoder, ElementData
from .enum import Compliant
from .exceptions import TrailingData
from .fields import to_python
from .grammar import parse_header
from .header import Header


logger = logging.getLogger(__name__)


class PlyData(NamedTuple):
    header: Header
    elements: List[ElementData]
    consumed: int  # bytes of the data section

    def __getitem__(self, item):
        '''Allow to access the decoded element by name.'''
        if isinstance(item, str):
            for element_data in self.elements:
                if element_data.element.name == item:
                    return element_data

            raise KeyError(f'no element named \'{item}\'')

        return tuple.__getitem__(self, item)

    def to_python(self):
        '''The records of each element without the type tags.'''
        return {
            _.element.name: [to_python(record) for record in _.records] for _ in self.elements
        }


def load(data, compliant=Compliant.NONE) -> PlyData:
    '''Parse the header and decode the data section of a whole file already in memory.'''
    header, body = parse_header(data)

    decoder = BodyDecoder(header, body)
    elements = decoder.decode()
    consumed = decoder.consumed

    if decoder.stream.available:
        logger.debug('%d bytes left after the last element' % decoder.stream.available)

        if compliant & Compliant.TRAILING:
            # trailing whitespace is part of an ascii body
            if not header.format.kind.is_binary:
                decoder.stream.skip_whitespace()

            if decoder.stream.available:
                raise TrailingData(decoder.stream.available, offset=decoder.stream.tell())

    return PlyData(header, elements, consumed)
