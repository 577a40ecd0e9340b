'''
# PLY header

The header is the text preamble of the file and acts as the schema of the
data section: for each element it tells how many records follow and which
properties (scalars or count-prefixed lists) compose a record.

    ply
    format ascii 1.0
    comment made by hand
    element vertex 8
    property float x
    property float y
    property float z
    element face 6
    property list uchar int vertex_indices
    end_header

Reference at <http://paulbourke.net/dataformats/ply/>.
'''
from typing import NamedTuple, Tuple, Union

from .enum import DataType, FormatKind


class Version(NamedTuple):
    major: int
    minor: int

    def __str__(self):
        return f'{self.major}.{self.minor}'


class Format(NamedTuple):
    kind: FormatKind
    version: Version

    def __str__(self):
        return f'format {self.kind.value} {self.version}'


class ScalarKind(NamedTuple):
    data_type: DataType

    def __str__(self):
        return self.data_type.spelling


class ListKind(NamedTuple):
    '''The count is used only as a repetition bound for the items.'''
    count_type: DataType
    item_type: DataType

    def __str__(self):
        return f'list {self.count_type.spelling} {self.item_type.spelling}'


PropertyKind = Union[ScalarKind, ListKind]


class Property(NamedTuple):
    name: str
    kind: PropertyKind

    @property
    def is_list(self):
        return isinstance(self.kind, ListKind)

    def __str__(self):
        return f'property {self.kind} {self.name}'


class Element(NamedTuple):
    name: str
    count: int
    properties: Tuple[Property, ...]

    @property
    def is_fixed_size(self):
        '''True when every record has the same width, i.e. there are no lists.'''
        return not any(_.is_list for _ in self.properties)

    def get_property(self, name):
        for prop in self.properties:
            if prop.name == name:
                return prop

        raise KeyError(f'no property named \'{name}\' in element \'{self.name}\'')

    def __str__(self):
        lines = [f'element {self.name} {self.count}']
        lines.extend(str(_) for _ in self.properties)

        return '\n'.join(lines)


class Header(NamedTuple):
    comments: Tuple[str, ...]
    format: Format
    elements: Tuple[Element, ...]

    def get_element(self, name):
        for element in self.elements:
            if element.name == name:
                return element

        raise KeyError(f'no element named \'{name}\'')

    def __str__(self):
        lines = ['ply', str(self.format)]
        lines.extend(f'comment {_}' for _ in self.comments)
        lines.extend(str(_) for _ in self.elements)
        lines.append('end_header')

        return '\n'.join(lines) + '\n'

    @property
    def raw(self) -> bytes:
        '''The canonical header text, ready to be followed by a body.'''
        return str(self).encode('utf-8')
