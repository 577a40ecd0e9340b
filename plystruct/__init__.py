"""
# plystruct: PLY files for humans

A PLY file is self-describing: a text header declares the format of the data
section (ascii, binary big endian or binary little endian), some comments and
a sequence of elements, each with a number of records and an ordered list of
typed properties. The data section has no layout of its own, it is entirely
determined by the header.

For this reason the reading happens in two phases:

 1. parse_header(): recognize the text header and build a Header, that is
    the schema of the data section. It returns also the bytes following
    the header.

 2. decode_body(): walk the data section using the Header as decode plan,
    for each element, for each record, for each property in order, and
    return the decoded records together with the number of bytes consumed.

Both phases are pure functions over a buffer already in memory: on malformed
input they raise a ParseError or a DecodeError with enough information
(offsets, expected and found tokens, the chain of rules/fields involved)
to build a precise diagnostic.

load() combines the two phases for a whole file.
"""
from .enum import Compliant, DataType, Endianess, FormatKind
from .header import (
    Version,
    Format,
    ScalarKind,
    ListKind,
    Property,
    Element,
    Header,
)
from .fields import Value, to_python
from .grammar import parse_header
from .core import ElementData, decode_body, iter_records
from .ply import PlyData, load
from .exceptions import (
    PlyException,
    ParseError,
    DecodeError,
)
