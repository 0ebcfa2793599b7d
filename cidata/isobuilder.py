# -*- coding: utf-8 -*-
from io import BytesIO
from typing import Union
import pycdlib, os, tempfile, logging
from pycdlib.pycdlibexception import PyCdlibException
from cidata import config, shortname
from cidata.exceptions import BuildError, LocalResourceError, ValidationError
logger = logging.getLogger(__name__)

Payload = Union[str, bytes]

def to_bytes(data:Payload, fname:str='payload')->bytes:
    if data is None:
        return b''
    if isinstance(data, bytes):
        return data
    if not isinstance(data, str):
        raise ValidationError(f'{fname} must be str or bytes, not {type(data).__name__}')
    try:
        return data.encode('utf-8', 'surrogateescape')
    except UnicodeEncodeError as e:
        raise ValidationError(f'{fname} is not encodable: {e}') from e

def build(name:str, user_data:Payload, meta_data:Payload, network_config:Payload, capacity:int=config.SEED_CAPACITY)->str:
    """
    Write a cidata iso holding the three seed files into a fresh tmp directory.

    Payloads are str (utf-8) or bytes, anything else is a ValidationError
    raised before the tmp directory exists.

    Returns the image path. On BuildError the directory may still exist,
    ``e.path`` names the image inside it and the caller removes it.
    """
    logger.info(f'Creating new ISO {name}')
    # bad payloads fail here, before anything lands on disk
    payloads = [(fname, to_bytes(contents, fname)) for fname, contents in ((config.USER_DATA, user_data), (config.META_DATA, meta_data), (config.NETWORK_CONFIG, network_config))]
    try:
        tmpdir = tempfile.mkdtemp(prefix=config.SEED_TMP_PREFIX)
    except OSError as e:
        raise LocalResourceError(f'cannot create tmp directory for cloudinit ISO generation: {e}') from e
    dest = os.path.join(tmpdir, name)
    try:
        # fixed size raw container, sparse
        with open(dest, 'wb') as disk:
            disk.truncate(capacity)
    except OSError as e:
        raise BuildError(f'error while creating ISO disk {dest}: {e}', path=dest) from e
    iso = pycdlib.PyCdlib()
    try:
        iso.new(interchange_level=1, vol_ident=config.SEED_VOL_IDENT, rock_ridge=config.SEED_RR_VERSION)
    except PyCdlibException as e:
        raise BuildError(f'error while creating ISO filesystem: {e}', path=dest) from e
    try:
        for fname, data in payloads:
            try:
                iso.add_fp(BytesIO(data), len(data), shortname.iso_path(fname), rr_name=fname)
            except PyCdlibException as e:
                raise BuildError(f'error while writing {fname}: {e}', path=dest) from e
        try:
            with open(dest, 'r+b') as disk:
                iso.write_fp(disk)
                end = disk.seek(0, os.SEEK_END)
                if end < capacity:
                    disk.truncate(capacity)
        except (PyCdlibException, OSError) as e:
            raise BuildError(f'error while finalizing ISO: {e}', path=dest) from e
    finally:
        iso.close()
    size = os.path.getsize(dest)
    if size > capacity:
        raise BuildError(f'error while finalizing ISO: {size} bytes exceeds disk capacity {capacity}', path=dest)
    logger.info(f'ISO created at {dest}')
    return dest
