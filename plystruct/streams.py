import io
import logging

from .exceptions import UnexpectedEndOfInput


logger = logging.getLogger(__name__)


WHITESPACE = b' \t\r\n\x0b\x0c'


class Stream(object):
    '''This is a simple wrapper around an in-memory buffer to
    uniform its properties: the fields need read() to fail loudly when
    the data is not enough, and the ascii fields need to read tokens.'''
    def __init__(self, obj):
        '''Here we normalize the object in order to be accessed as a normal file object'''
        self.obj = obj

        init_method_name = 'init_%s' % self.obj.__class__.__name__

        init_method = getattr(self, init_method_name, None)
        if init_method is None:
            raise ValueError('\'%s\' is the wrong kind of buffer to use' % self.obj.__class__.__name__)

        init_method()

        self.size = len(self.obj.getvalue())
        logger.debug('stream of %d bytes from %s' % (self.size, init_method_name))

    def __getattr__(self, name):
        return getattr(self.obj, name)

    def __repr__(self):
        return f'<{self.__class__.__name__}(offset={self.tell()}, size={self.size})>'

    def init_bytes(self):
        '''We think these are raw bytes'''
        self.obj = io.BytesIO(self.obj)

    def init_bytearray(self):
        self.obj = io.BytesIO(bytes(self.obj))

    def init_memoryview(self):
        self.obj = io.BytesIO(self.obj.tobytes())

    def seek(self, offset):
        if not isinstance(offset, int):
            raise ValueError('\'%s\' is the wrong kind of offset to use' % offset.__class__.__name__)

        self.obj.seek(offset)

    @property
    def available(self):
        return self.size - self.tell()

    def read(self, n):
        '''Read exactly n bytes.'''
        available = self.available
        if available < n:
            raise UnexpectedEndOfInput(needed=n, available=available, offset=self.tell())

        return self.obj.read(n)

    def peek(self, n=1):
        offset = self.tell()
        data = self.obj.read(n)
        self.obj.seek(offset)

        return data

    def _span(self, offset, whitespace):
        '''Return the first offset, starting from the given one, where
        the byte is not (whitespace=True) or is (whitespace=False) whitespace.'''
        buffer = self.obj.getbuffer()
        try:
            while offset < self.size and (buffer[offset] in WHITESPACE) == whitespace:
                offset += 1
        finally:
            buffer.release()  # otherwise the BytesIO stays locked

        return offset

    def skip_whitespace(self):
        self.obj.seek(self._span(self.tell(), True))

    def read_token(self, needed=1):
        '''Read the next whitespace-delimited token.

        The whitespace before the token is consumed, the one after is not.
        When no token is left the exception reports "needed" tokens
        missing.'''
        start = self._span(self.tell(), True)
        end = self._span(start, False)

        if start == end:
            raise UnexpectedEndOfInput(needed=needed, available=0, offset=start)

        self.obj.seek(start)

        return self.obj.read(end - start), start
