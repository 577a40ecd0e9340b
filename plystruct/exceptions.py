class PlyException(Exception):
    '''Base class to extend in order to throw exception in plystruct.

    It takes as argument the chain of the layers that caused the exception,
    the innermost first; each layer appends its own name while the exception
    propagates.
    '''

    def __init__(self, chain=None):
        self.chain = chain if chain is not None else []
        super().__init__()

    def __str__(self):
        return '%s(%s)' % (self.__class__.__name__, ' <- '.join(str(_) for _ in self.chain))


class ParseError(PlyException):
    '''Failure while recognizing the header: offset is absolute in the buffer.'''

    def __init__(self, rule, offset, expected=None, found=None, chain=None):
        self.rule = rule
        self.offset = offset
        self.expected = expected
        self.found = found
        super().__init__(chain=chain if chain is not None else [rule])

    def __str__(self):
        msg = f'{self.__class__.__name__} in rule \'{self.rule}\' at offset {self.offset}'
        if self.expected is not None:
            msg += f': expected {self.expected}'
        if self.found is not None:
            msg += f', found {self.found!r}'
        if len(self.chain) > 1:
            msg += ' (%s)' % ' <- '.join(self.chain)

        return msg


class UnexpectedToken(ParseError):
    pass


class UnknownFormatKind(ParseError):
    pass


class UnknownDataType(ParseError):
    pass


class InvalidInteger(ParseError):
    pass


class EmptyElementList(ParseError):
    pass


class MissingEndHeader(ParseError):
    pass


class DecodeError(PlyException):
    '''Failure while decoding the data section: offset is relative to the body.'''

    def __init__(self, offset=None, chain=None):
        self.offset = offset
        super().__init__(chain=chain)

    def _details(self):
        return ''

    def __str__(self):
        msg = f'{self.__class__.__name__}{self._details()}'
        if self.offset is not None:
            msg += f' at body offset {self.offset}'
        if self.chain:
            msg += ' (%s)' % ' <- '.join(str(_) for _ in self.chain)

        return msg


class UnexpectedEndOfInput(DecodeError):
    '''The input is truncated: this is not a syntax problem.

    needed and available are bytes for binary bodies, tokens for ascii ones.'''

    def __init__(self, needed, available, offset=None, chain=None):
        self.needed = needed
        self.available = available
        super().__init__(offset=offset, chain=chain)

    def _details(self):
        return f'(needed={self.needed}, available={self.available})'


class InvalidNumericToken(DecodeError):

    def __init__(self, text, expected_type, offset=None, chain=None):
        self.text = text
        self.expected_type = expected_type
        super().__init__(offset=offset, chain=chain)

    def _details(self):
        return f'({self.text!r} is not a valid {self.expected_type.name})'


class MissingDelimiter(DecodeError):

    def __init__(self, found, offset=None, chain=None):
        self.found = found
        super().__init__(offset=offset, chain=chain)

    def _details(self):
        return f'(found {self.found!r} where whitespace was expected)'


class InvalidListCount(DecodeError):
    '''A list count that can't be used to repeat anything.'''

    def __init__(self, count, offset=None, chain=None):
        self.count = count
        super().__init__(offset=offset, chain=chain)

    def _details(self):
        return f'({self.count!r})'


class TrailingData(DecodeError):

    def __init__(self, unconsumed, offset=None, chain=None):
        self.unconsumed = unconsumed
        super().__init__(offset=offset, chain=chain)

    def _details(self):
        return f'({self.unconsumed} bytes not consumed)'
