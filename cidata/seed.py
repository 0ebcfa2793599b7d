# -*- coding: utf-8 -*-
import logging
from typing import Dict, List
from cidata import config, utils, isobuilder, volume, reader, idcodec
from cidata.keylock import PoolLocks, POOL_LOCKS
from cidata.exceptions import APIException, BuildError, RemoteError, ValidationError
logger = logging.getLogger(__name__)

class SeedConfig:
    def __init__(self, name:str='', pool_name:str='', user_data:str='', meta_data:str='', network_config:str=''):
        self.name = name
        self.pool_name = pool_name
        self.user_data = user_data
        self.meta_data = meta_data
        self.network_config = network_config
        self.missing: List[str] = []

    def __repr__(self):
        return f'SeedConfig(name={self.name!r}, pool_name={self.pool_name!r})'

    def _asdict(self)->Dict:
        return {
            'name':self.name, 'pool':self.pool_name,
            config.USER_DATA:self.user_data, config.META_DATA:self.meta_data,
            config.NETWORK_CONFIG:self.network_config, 'missing':self.missing,
        }

    def create_iso(self)->str:
        """build the image locally, returns its path inside a private tmp directory"""
        if not self.name or '/' in self.name:
            raise ValidationError(f'cloudinit name "{self.name}" is not a valid file name')
        try:
            return isobuilder.build(self.name, self.user_data, self.meta_data, self.network_config)
        except BuildError as e:
            if e.path:
                utils.remove_tmpdir(e.path)
            raise

    def upload_iso(self, backend, iso:str, locks:PoolLocks=POOL_LOCKS)->str:
        """upload a built image into pool_name, returns the resource id"""
        key = volume.upload(backend, self.pool_name, self.name, iso, locks)
        return idcodec.build_key(key)

    def create(self, backend, locks:PoolLocks=POOL_LOCKS)->str:
        if not self.pool_name:
            raise ValidationError(f'cloudinit {self.name} pool name is empty')
        return self.upload_iso(backend, self.create_iso(), locks)

    @classmethod
    def from_remote_iso(cls, backend, resource_id:str)->'SeedConfig':
        key = idcodec.parse_key(resource_id)
        vol = backend.lookup_volume_by_key(key)
        if not vol.name:
            raise RemoteError(f'error retrieving cloudinit volume name for volume key: {vol.key}')
        pool = backend.lookup_pool_by_volume(vol)
        if not pool.name:
            raise RemoteError(f'error retrieving pool name for cloudinit volume: {vol.name}')
        ci = cls(name=vol.name, pool_name=pool.name)
        isofile = None
        try:
            isofile = volume.download(backend, vol)
            data = reader.reconstruct(isofile)
        except APIException as e:
            # partial download is removed here, not by whoever handles e
            isofile, e.fileobj = e.fileobj or isofile, None
            raise
        finally:
            utils.remove_tmpfile(isofile)
        ci.user_data, ci.meta_data, ci.network_config, ci.missing = data
        logger.debug(f'Read cloud-init from file: {ci._asdict()}')
        return ci
