#!/usr/bin/env python3
import sys
import os
import logging

from plystruct import load, to_python
from plystruct.exceptions import PlyException

if 'DEBUG' in os.environ:
    logging.basicConfig()
    logger = logging.getLogger('plystruct')
    logger.setLevel(logging.DEBUG)


N_RECORDS = 5


def usage(progname):
    print('usage: %s <ply file> [<n records>]' % progname)
    sys.exit(1)


def dump_header(header):
    print(f'''PLY Header:
  Format:                            {header.format.kind.value}
  Version:                           {header.format.version}
  Comments:                          {len(header.comments)}''')
    for comment in header.comments:
        print(f'    {comment}')


def dump_element(element_data, n):
    element = element_data.element
    print(f'''
Element '{element.name}' contains {element.count} records:
  {" ".join(f"{_.name}:{_.kind}" for _ in element.properties)}''')
    for idx, record in enumerate(element_data.records[:n]):
        print(f'''  [{idx: >4d}] {" ".join(str(to_python(_)) for _ in record)}''')
    if element.count > n:
        print('  ...')


if __name__ == '__main__':
    if len(sys.argv) < 2:
        usage(sys.argv[0])

    path = sys.argv[1]
    n = int(sys.argv[2]) if len(sys.argv) > 2 else N_RECORDS

    with open(path, 'rb') as f:
        data = f.read()

    try:
        ply = load(data)
    except PlyException as e:
        print(f'{path}: {e}', file=sys.stderr)
        sys.exit(2)

    dump_header(ply.header)

    for element_data in ply.elements:
        dump_element(element_data, n)

    print(f'\n{ply.consumed} bytes of data decoded')
