# -*- coding: utf-8 -*-
from io import BytesIO
from typing import IO, Dict, Generator, List, NamedTuple
import pycdlib, posixpath, logging
from pycdlib.pycdlibexception import PyCdlibException
from cidata import config, shortname
from cidata.exceptions import FormatError, ReadError
logger = logging.getLogger(__name__)

class SeedData(NamedTuple):
    user_data: str
    meta_data: str
    network_config: str
    # seed files never seen in the image, their payload above is ''
    missing: List[str]

def walk(iso:pycdlib.PyCdlib, dirpath:str='/')->Generator[str, None, None]:
    for child in iso.list_children(iso_path=dirpath):
        if child.is_dot() or child.is_dotdot():
            continue
        path = posixpath.join(dirpath, child.file_identifier().decode('ascii', 'replace'))
        if child.is_dir():
            yield from walk(iso, path)
        else:
            yield path

def read_file(iso:pycdlib.PyCdlib, path:str)->bytes:
    logger.debug(f'ISO reader: processing file {path}')
    out = BytesIO()
    try:
        iso.get_file_from_iso_fp(out, iso_path=path)
    except PyCdlibException as e:
        raise ReadError(f'error while reading {path}: {e}') from e
    return out.getvalue()

def reconstruct(fileobj:IO[bytes])->SeedData:
    """
    Read the seed files back from a cidata image.

    Only the plain ISO9660 records are used (no Joliet, no Rock Ridge names),
    so files are recognised by their 8.3 names. Every file is read whole into
    memory, seed payloads are small. Unknown files are skipped.
    """
    iso = pycdlib.PyCdlib()
    try:
        iso.open_fp(fileobj)
    except PyCdlibException as e:
        raise FormatError(f'error initializing ISO reader: {e}') from e
    found: Dict[str, bytes] = {}
    try:
        for path in walk(iso):
            data = read_file(iso, path)
            name = shortname.long_name(shortname.normalize(path).lstrip('/'))
            if name is not None:
                found[name] = data
    except PyCdlibException as e:
        raise ReadError(f'error while walking ISO: {e}') from e
    finally:
        iso.close()
    missing = [name for name in config.SEED_FILES if name not in found]
    if missing:
        logger.warning(f'seed files not found in image: {missing}')
    payload = {name: found.get(name, b'').decode('utf-8', 'surrogateescape') for name in config.SEED_FILES}
    return SeedData(payload[config.USER_DATA], payload[config.META_DATA], payload[config.NETWORK_CONFIG], missing)
