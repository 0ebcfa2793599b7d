# -*- coding: utf-8 -*-
import jinja2, tempfile, logging
from typing import IO
from cidata import config, utils
from cidata.keylock import PoolLocks, POOL_LOCKS
from cidata.exceptions import LocalResourceError, RemoteError, IntegrityError
logger = logging.getLogger(__name__)

VOLUME_TPL = jinja2.Environment(autoescape=True).from_string(
    '<volume type="file"><name>{{ name }}</name>'
    '<capacity unit="B">{{ capacity }}</capacity>'
    '<target><format type="{{ format }}"/></target></volume>')

def volume_xml(name:str, capacity:int, format:str=config.VOL_FORMAT)->str:
    return VOLUME_TPL.render(name=name, capacity=capacity, format=format)

class CountingWriter:
    def __init__(self, fh:IO[bytes]):
        self.fh = fh
        self.count = 0

    def write(self, data:bytes)->int:
        n = self.fh.write(data)
        self.count += n
        return n

@utils.time_use
def upload(backend, pool_name:str, name:str, iso:str, locks:PoolLocks=POOL_LOCKS)->str:
    """
    Create volume ``name`` in ``pool_name`` sized to the image and copy the
    image into it. Returns the backend volume key.

    Pool refresh, volume creation and the copy run under the pool lock. The
    tmp directory holding ``iso`` is removed whatever the outcome.
    """
    try:
        pool = backend.lookup_pool_by_name(pool_name)
        size = utils.file_size(iso)
        xml = volume_xml(name, size)
        with locks.locked(pool_name):
            # let the pool see volumes created/removed behind our back
            backend.refresh_pool(pool)
            try:
                vol = backend.create_volume(pool, xml)
            except Exception as e:
                raise RemoteError(f'error creating libvirt volume for cloudinit device {name}: {e}') from e
            try:
                with open(iso, 'rb') as source:
                    backend.upload_volume(vol, source, size)
            except Exception as e:
                raise RemoteError(f'error while uploading cloudinit {iso}: {e}') from e
        if not vol.key:
            raise RemoteError(f'error retrieving volume key for {name}')
        logger.info(f'{size} bytes uploaded to {pool_name}/{name}')
        return vol.key
    finally:
        utils.remove_tmpdir(iso)

@utils.time_use
def download(backend, vol)->IO[bytes]:
    """
    Copy a volume into a local tmp file, return it open and rewound.

    The file also travels on RemoteError/IntegrityError as ``e.fileobj``.
    Closing and removing it is always up to the caller.
    """
    try:
        _, size, _ = backend.get_volume_info(vol)
    except Exception as e:
        raise RemoteError(f'error retrieving info for volume {vol.name}: {e}') from e
    try:
        tmpfile = tempfile.NamedTemporaryFile(mode='w+b', buffering=size or -1, prefix=config.SEED_TMP_PREFIX, delete=False)
    except OSError as e:
        raise LocalResourceError(f'cannot create tmp file: {e}') from e
    writer = CountingWriter(tmpfile)
    try:
        backend.download_volume(vol, writer, 0, size)
    except Exception as e:
        raise RemoteError(f'error while downloading volume {vol.name}: {e}', fileobj=tmpfile) from e
    try:
        tmpfile.flush()
    except OSError as e:
        raise LocalResourceError(f'error while copying remote volume to local disk {tmpfile.name}: {e}', fileobj=tmpfile) from e
    logger.info(f'{writer.count} bytes downloaded')
    if writer.count != size:
        raise IntegrityError(f'error while copying remote volume to local disk, bytesCopied {writer.count} != {size} volume.size', fileobj=tmpfile)
    tmpfile.seek(0)
    return tmpfile
