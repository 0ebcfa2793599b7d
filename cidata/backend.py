# -*- coding: utf-8 -*-
import libvirt, contextlib, logging
from typing import IO, Tuple, Generator
from cidata.utils import AttrDict
from cidata.exceptions import RemoteError, ValidationError
logger = logging.getLogger(__name__)

def libvirt_callback(ctx, err):
    pass
libvirt.registerErrorHandler(f=libvirt_callback, ctx=None)

@contextlib.contextmanager
def libvirt_connect(uri: str)-> Generator:
    try:
        conn = libvirt.open(uri)
    except libvirt.libvirtError as e:
        raise RemoteError(f'connect {uri}: {e.get_error_message()}') from e
    with contextlib.closing(conn):
        yield conn

def pool_handle(pool:libvirt.virStoragePool)->AttrDict:
    return AttrDict(name=pool.name(), obj=pool)

def vol_handle(vol:libvirt.virStorageVol)->AttrDict:
    return AttrDict(name=vol.name(), key=vol.key(), obj=vol)

class LibvirtBackend:
    """storage pool/volume calls used by the seed code, libvirt errors become RemoteError"""
    def __init__(self, conn:libvirt.virConnect):
        self.conn = conn

    @classmethod
    @contextlib.contextmanager
    def open(cls, uri:str)-> Generator:
        with libvirt_connect(uri) as conn:
            yield cls(conn)

    def lookup_pool_by_name(self, name:str)->AttrDict:
        try:
            return pool_handle(self.conn.storagePoolLookupByName(name))
        except libvirt.libvirtError as e:
            if e.get_error_code() == libvirt.VIR_ERR_NO_STORAGE_POOL:
                raise ValidationError(f"can't find storage pool '{name}'") from e
            raise RemoteError(f"can't find storage pool '{name}': {e.get_error_message()}") from e

    def refresh_pool(self, pool:AttrDict)->None:
        try:
            if not pool.obj.isActive():
                pool.obj.create()
            pool.obj.refresh(0)
        except libvirt.libvirtError as e:
            raise RemoteError(f'refresh pool {pool.name}: {e.get_error_message()}') from e

    def create_volume(self, pool:AttrDict, xml:str)->AttrDict:
        try:
            return vol_handle(pool.obj.createXML(xml, 0))
        except libvirt.libvirtError as e:
            raise RemoteError(f'create volume in pool {pool.name}: {e.get_error_message()}') from e

    def get_volume_info(self, vol:AttrDict)->Tuple[int, int, int]:
        try:
            vtype, capacity, allocation = vol.obj.info()
            return vtype, capacity, allocation
        except libvirt.libvirtError as e:
            raise RemoteError(f'info volume {vol.name}: {e.get_error_message()}') from e

    def lookup_volume_by_key(self, key:str)->AttrDict:
        try:
            return vol_handle(self.conn.storageVolLookupByKey(key))
        except libvirt.libvirtError as e:
            raise RemoteError(f"can't retrieve volume {key}: {e.get_error_message()}") from e

    def lookup_pool_by_volume(self, vol:AttrDict)->AttrDict:
        try:
            return pool_handle(vol.obj.storagePoolLookupByVolume())
        except libvirt.libvirtError as e:
            raise RemoteError(f'pool of volume {vol.name}: {e.get_error_message()}') from e

    def download_volume(self, vol:AttrDict, sink:IO[bytes], offset:int=0, length:int=0)->None:
        def handler(stream, data, fh):
            return fh.write(data)

        stream = self.conn.newStream(0)
        try:
            vol.obj.download(stream, offset, length, 0)
            stream.recvAll(handler, sink)
            stream.finish()
        except libvirt.libvirtError as e:
            with contextlib.suppress(libvirt.libvirtError):
                stream.abort()
            raise RemoteError(f'download volume {vol.name}: {e.get_error_message()}') from e

    def upload_volume(self, vol:AttrDict, source:IO[bytes], size:int)->None:
        def handler(stream, nbytes, fh):
            return fh.read(nbytes)

        stream = self.conn.newStream(0)
        try:
            vol.obj.upload(stream, 0, size, 0)
            stream.sendAll(handler, source)
            stream.finish()
        except libvirt.libvirtError as e:
            with contextlib.suppress(libvirt.libvirtError):
                stream.abort()
            raise RemoteError(f'upload volume {vol.name}: {e.get_error_message()}') from e
