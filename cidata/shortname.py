# -*- coding: utf-8 -*-
"""
ISO9660 level 1 names of the seed files.

A reader without Joliet support only sees the 8.3 record identifiers, lower
cased and without the ``;1`` version suffix. The table below is what such a
reader reports for the three seed files; it is authoritative. ``mangle`` is
the general rule the table was derived from, kept for cross checking and for
naming anything outside the table.
"""
import re
from typing import Optional, Union
from cidata import config

SHORT_NAMES = {
    config.USER_DATA:      'user_dat.',
    config.META_DATA:      'meta_dat.',
    config.NETWORK_CONFIG: 'network_.',
}
LONG_NAMES = {v: k for k, v in SHORT_NAMES.items()}

def mangle(name:str)->str:
    stem, dot, ext = name.rpartition('.')
    if not dot:
        stem, ext = ext, ''
    stem = re.sub('[^a-z0-9_]', '_', stem.lower())[:8]
    ext = re.sub('[^a-z0-9_]', '_', ext.lower())[:3]
    return f'{stem}.{ext}'

def short_name(name:str)->str:
    return SHORT_NAMES.get(name) or mangle(name)

def long_name(short:str)->Optional[str]:
    return LONG_NAMES.get(short)

def iso_path(name:str)->str:
    # '/USER_DAT.;1'
    return f'/{short_name(name).upper()};1'

def normalize(ident:Union[bytes, str])->str:
    if isinstance(ident, bytes):
        ident = ident.decode('ascii', 'replace')
    return ident.split(';', 1)[0].lower()
