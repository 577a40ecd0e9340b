from enum import Enum, Flag, auto


class Compliant(Flag):
    '''It indicates which degree of compliantness the data must reflect the format'''
    NONE     = 0
    TRAILING = 1 << 0  # refuse bytes left after the last element


class Endianess(Enum):
    LITTLE_ENDIAN = auto()
    BIG_ENDIAN    = auto()

    @property
    def prefix(self):
        '''the struct module byte order character'''
        return '<' if self == Endianess.LITTLE_ENDIAN else '>'


class FormatKind(Enum):
    ASCII                = 'ascii'
    BINARY_BIG_ENDIAN    = 'binary_big_endian'
    BINARY_LITTLE_ENDIAN = 'binary_little_endian'

    @property
    def endianess(self):
        if self == FormatKind.BINARY_LITTLE_ENDIAN:
            return Endianess.LITTLE_ENDIAN
        if self == FormatKind.BINARY_BIG_ENDIAN:
            return Endianess.BIG_ENDIAN

        return None

    @property
    def is_binary(self):
        return self.endianess is not None


class DataType(Enum):
    '''The ten primitive kinds a property can be declared with.

    The value of each member is the plan to decode it: the struct format
    character, the width in bytes and the canonical spelling in the header.'''
    INT8    = ('b', 1, 'char')
    UINT8   = ('B', 1, 'uchar')
    INT16   = ('h', 2, 'short')
    UINT16  = ('H', 2, 'ushort')
    INT32   = ('i', 4, 'int')
    UINT32  = ('I', 4, 'uint')
    INT64   = ('q', 8, 'int64')
    UINT64  = ('Q', 8, 'uint64')
    FLOAT32 = ('f', 4, 'float')
    FLOAT64 = ('d', 8, 'double')

    @property
    def format(self):
        return self.value[0]

    @property
    def size(self):
        return self.value[1]

    @property
    def spelling(self):
        return self.value[2]

    @property
    def is_float(self):
        return self.format in ('f', 'd')

    @property
    def is_signed(self):
        return self.is_float or self.format.islower()

    @property
    def range(self):
        '''Inclusive bounds of an integer type.'''
        if self.is_float:
            raise ValueError(f'{self.name} has no integer range')

        bits = self.size * 8
        if self.is_signed:
            return -(1 << (bits - 1)), (1 << (bits - 1)) - 1

        return 0, (1 << bits) - 1


# the first match wins: the most specific spelling comes before
# any spelling it starts with
DATA_TYPE_ALIASES = (
    ('uchar',   DataType.UINT8),
    ('char',    DataType.INT8),
    ('ushort',  DataType.UINT16),
    ('short',   DataType.INT16),
    ('uint8',   DataType.UINT8),
    ('uint16',  DataType.UINT16),
    ('uint32',  DataType.UINT32),
    ('uint64',  DataType.UINT64),
    ('uint',    DataType.UINT32),
    ('int8',    DataType.INT8),
    ('int16',   DataType.INT16),
    ('int32',   DataType.INT32),
    ('int64',   DataType.INT64),
    ('int',     DataType.INT32),
    ('float32', DataType.FLOAT32),
    ('float64', DataType.FLOAT64),
    ('float',   DataType.FLOAT32),
    ('double',  DataType.FLOAT64),
)


def data_type_from_spelling(token):
    '''Return the DataType spelled by the whole token, None if unknown.'''
    for spelling, data_type in DATA_TYPE_ALIASES:
        if token == spelling:
            return data_type

    return None
