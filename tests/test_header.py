import pytest

from plystruct.enum import DataType, FormatKind, data_type_from_spelling
from plystruct.exceptions import (
    UnexpectedToken,
    UnknownFormatKind,
    UnknownDataType,
    InvalidInteger,
    EmptyElementList,
    MissingEndHeader,
)
from plystruct.grammar import parse_header, property_declaration, version
from plystruct.header import (
    Element,
    Format,
    Header,
    ListKind,
    Property,
    ScalarKind,
    Version,
)


VERTEX_HEADER = (
    b'ply\n'
    b'format ascii 1.0\n'
    b'element vertex 1\n'
    b'property float x\n'
    b'property float y\n'
    b'property float z\n'
    b'end_header\n'
)


def test_parse_vertex_header():
    header, remaining = parse_header(VERTEX_HEADER + b'1.0 2.0 3.0\n')

    assert header.format == Format(FormatKind.ASCII, Version(1, 0))
    assert header.comments == ()
    assert header.elements == (
        Element('vertex', 1, (
            Property('x', ScalarKind(DataType.FLOAT32)),
            Property('y', ScalarKind(DataType.FLOAT32)),
            Property('z', ScalarKind(DataType.FLOAT32)),
        )),
    )
    assert remaining == b'1.0 2.0 3.0\n'


def test_parse_list_property():
    prop, offset = property_declaration(b'property list uint8 int32 vertex_indices\n', 0)

    assert prop == Property('vertex_indices', ListKind(DataType.UINT8, DataType.INT32))
    assert prop.is_list
    assert offset == 41


def test_parse_comments_and_elements_order():
    data = (
        b'ply\n'
        b'format binary_big_endian 1.0\n'
        b'comment first one\n'
        b'comment\n'
        b'comment   indented\ttext  \n'
        b'element vertex 3\n'
        b'property double x\n'
        b'element face 2\n'
        b'property list uchar uint vertex_indices\n'
        b'property ushort flags\n'
        b'end_header\n'
    )
    header, remaining = parse_header(data)

    assert header.format.kind == FormatKind.BINARY_BIG_ENDIAN
    assert header.comments == ('first one', '', 'indented\ttext  ')
    assert [_.name for _ in header.elements] == ['vertex', 'face']
    assert [_.count for _ in header.elements] == [3, 2]
    assert [_.name for _ in header.get_element('face').properties] == ['vertex_indices', 'flags']
    assert remaining == b''


def test_parse_crlf_header():
    header, remaining = parse_header(VERTEX_HEADER.replace(b'\n', b'\r\n') + b'1 2 3')

    assert header.get_element('vertex').count == 1
    assert remaining == b'1 2 3'


@pytest.mark.parametrize('spelling,data_type', [
    ('char', DataType.INT8),
    ('int8', DataType.INT8),
    ('uchar', DataType.UINT8),
    ('uint8', DataType.UINT8),
    ('short', DataType.INT16),
    ('int16', DataType.INT16),
    ('ushort', DataType.UINT16),
    ('uint16', DataType.UINT16),
    ('int', DataType.INT32),
    ('int32', DataType.INT32),
    ('uint', DataType.UINT32),
    ('uint32', DataType.UINT32),
    ('int64', DataType.INT64),
    ('uint64', DataType.UINT64),
    ('float', DataType.FLOAT32),
    ('float32', DataType.FLOAT32),
    ('double', DataType.FLOAT64),
    ('float64', DataType.FLOAT64),
])
def test_data_type_aliases(spelling, data_type):
    assert data_type_from_spelling(spelling) == data_type

    prop, _ = property_declaration(f'property {spelling} value\n'.encode(), 0)

    assert prop.kind == ScalarKind(data_type)


def test_data_type_partial_spelling_is_unknown():
    assert data_type_from_spelling('int3') is None
    assert data_type_from_spelling('in') is None

    with pytest.raises(UnknownDataType) as excinfo:
        property_declaration(b'property int8x value\n', 0)

    assert excinfo.value.found == 'int8x'
    assert excinfo.value.offset == 9


def test_data_type_plan():
    assert DataType.UINT8.range == (0, 255)
    assert DataType.INT16.range == (-32768, 32767)
    assert DataType.UINT64.range == (0, 2 ** 64 - 1)
    assert DataType.FLOAT64.size == 8
    assert DataType.FLOAT32.is_float
    assert not DataType.UINT32.is_signed

    with pytest.raises(ValueError):
        DataType.FLOAT32.range


def test_header_round_trip():
    data = (
        b'ply\n'
        b'format binary_little_endian 1.2\n'
        b'comment generated by a scanner\n'
        b'comment\n'
        b'element vertex 12\n'
        b'property float32 x\n'
        b'property float64 y\n'
        b'property uint8 red\n'
        b'property int16 s\n'
        b'property uint64 big\n'
        b'element face 5\n'
        b'property list uint8 int32 vertex_indices\n'
        b'element edge 0\n'
        b'property char a\n'
        b'end_header\n'
    )
    header, _ = parse_header(data)

    canonical = header.raw
    assert canonical.startswith(b'ply\nformat binary_little_endian 1.2\n')
    assert b'property list uchar int vertex_indices\n' in canonical
    assert canonical.endswith(b'end_header\n')

    reparsed, remaining = parse_header(canonical)

    assert reparsed == header
    assert remaining == b''
    # the canonical text is a fixed point
    assert reparsed.raw == canonical


def test_header_lookups():
    header, _ = parse_header(VERTEX_HEADER)
    vertex = header.get_element('vertex')

    assert vertex.get_property('y') == Property('y', ScalarKind(DataType.FLOAT32))
    assert vertex.is_fixed_size

    with pytest.raises(KeyError):
        header.get_element('face')
    with pytest.raises(KeyError):
        vertex.get_property('w')


def test_binary_body_is_not_eaten():
    '''whitespace-valued bytes following the header belong to the body'''
    data = (
        b'ply\n'
        b'format binary_little_endian 1.0\n'
        b'element vertex 1\n'
        b'property float x\n'
        b'end_header\n'
        b'\n\r \t'
    )

    _, remaining = parse_header(data)

    assert remaining == b'\n\r \t'


def test_version():
    assert version(b'12.34 ', 0) == (Version(12, 34), 5)


def test_invalid_version():
    data = b'ply\nformat ascii 1.x\n'

    with pytest.raises(InvalidInteger) as excinfo:
        parse_header(data)

    assert excinfo.value.offset == data.index(b'1.x') + 2
    assert excinfo.value.found == 'x'
    assert excinfo.value.rule == 'integer'
    assert excinfo.value.chain == ['integer', 'version', 'format', 'header']


def test_invalid_count():
    data = VERTEX_HEADER.replace(b'vertex 1', b'vertex 99999999999999999999')

    with pytest.raises(InvalidInteger) as excinfo:
        parse_header(data)

    assert excinfo.value.offset == data.index(b'9999')


def test_not_a_ply():
    with pytest.raises(UnexpectedToken) as excinfo:
        parse_header(b'PLY\nformat ascii 1.0\n')

    assert excinfo.value.offset == 0
    assert excinfo.value.found == 'PLY'


def test_missing_whitespace():
    with pytest.raises(UnexpectedToken) as excinfo:
        parse_header(b'plyformat ascii 1.0\n')

    assert excinfo.value.rule == 'multispace'
    assert excinfo.value.offset == 3


def test_unknown_format_kind():
    data = b'ply\nformat binary_middle_endian 1.0\n'

    with pytest.raises(UnknownFormatKind) as excinfo:
        parse_header(data)

    assert excinfo.value.found == 'binary_middle_endian'
    assert excinfo.value.offset == 11


def test_unknown_data_type():
    data = VERTEX_HEADER.replace(b'property float y', b'property flaot y')

    with pytest.raises(UnknownDataType) as excinfo:
        parse_header(data)

    assert excinfo.value.found == 'flaot'
    assert excinfo.value.offset == data.index(b'flaot')
    assert excinfo.value.chain == ['data_type', 'property_kind', 'property', 'element', 'header']


def test_empty_element_list():
    with pytest.raises(EmptyElementList) as excinfo:
        parse_header(b'ply\nformat ascii 1.0\ncomment nothing\nend_header\n')

    assert excinfo.value.found == 'end_header'
    assert excinfo.value.offset == 37


def test_element_without_properties():
    with pytest.raises(UnexpectedToken) as excinfo:
        parse_header(b'ply\nformat ascii 1.0\nelement vertex 1\nend_header\n')

    assert excinfo.value.found == 'end_header'
    assert excinfo.value.chain == ['tag', 'property', 'element', 'header']


def test_missing_end_header():
    with pytest.raises(MissingEndHeader) as excinfo:
        parse_header(VERTEX_HEADER[:-len(b'end_header\n')])

    assert excinfo.value.found is None
    assert excinfo.value.offset == len(VERTEX_HEADER) - len(b'end_header\n')


def test_end_header_without_line_terminator():
    with pytest.raises(MissingEndHeader) as excinfo:
        parse_header(VERTEX_HEADER[:-1])

    assert excinfo.value.offset == len(VERTEX_HEADER) - 1


def test_comment_after_elements():
    data = VERTEX_HEADER.replace(b'end_header', b'comment late\nend_header')

    with pytest.raises(MissingEndHeader) as excinfo:
        parse_header(data)

    assert excinfo.value.found == 'comment'
