# -*- coding: utf-8 -*-
import unittest, os
from cidata import idcodec
from cidata.seed import SeedConfig
from cidata.keylock import PoolLocks
from cidata.exceptions import ValidationError, IntegrityError, RemoteError
from testing.fakebackend import FakeBackend

class SeedConfigTest(unittest.TestCase):
    def setUp(self):
        self.backend = FakeBackend(pools=('default',))
        self.locks = PoolLocks()

    def create(self, **kwargs):
        ci = SeedConfig(**{'name':'seed1', 'pool_name':'default', **kwargs})
        return ci.create(self.backend, self.locks)

    def test_create_and_reload(self):
        resource_id = self.create(user_data='user:true', meta_data='instance-id: i-1', network_config='')
        self.assertEqual(idcodec.parse_key(resource_id), '/pool/default/seed1')
        ci = SeedConfig.from_remote_iso(self.backend, resource_id)
        self.assertEqual((ci.name, ci.pool_name), ('seed1', 'default'))
        self.assertEqual((ci.user_data, ci.meta_data, ci.network_config), ('user:true', 'instance-id: i-1', ''))
        self.assertEqual(ci.missing, [])
        self.assertFalse(any(os.path.exists(fn) for fn in self.backend.sinks))

    def test_reload_with_other_token(self):
        resource_id = self.create(user_data='#cloud-config')
        other_id = idcodec.build_key(idcodec.parse_key(resource_id))
        self.assertNotEqual(other_id, resource_id)
        self.assertEqual(SeedConfig.from_remote_iso(self.backend, other_id).user_data, '#cloud-config')

    def test_create_iso_only(self):
        ci = SeedConfig(name='local.iso', user_data='u', meta_data='m')
        iso = ci.create_iso()
        try:
            self.assertTrue(os.path.isfile(iso))
        finally:
            os.remove(iso)
            os.rmdir(os.path.dirname(iso))
        self.assertEqual(self.backend.calls, [])

    def test_bad_name(self):
        for name in ['', '../x']:
            with self.assertRaises(ValidationError):
                SeedConfig(name=name, pool_name='default').create_iso()

    def test_empty_pool(self):
        with self.assertRaises(ValidationError):
            SeedConfig(name='seed1').create(self.backend, self.locks)

    def test_bad_id(self):
        with self.assertRaises(ValidationError):
            SeedConfig.from_remote_iso(self.backend, 'not-an-id')

    def test_unknown_volume(self):
        with self.assertRaises(RemoteError):
            SeedConfig.from_remote_iso(self.backend, idcodec.build_key('/pool/default/none'))

    def test_truncated_volume(self):
        resource_id = self.create(user_data='u')
        self.backend.short_by = 100
        with self.assertRaises(IntegrityError) as ctx:
            SeedConfig.from_remote_iso(self.backend, resource_id)
        self.assertIsNone(ctx.exception.fileobj)
        self.assertFalse(os.path.exists(self.backend.sinks[-1]))

    def test_asdict(self):
        ci = SeedConfig(name='seed1', pool_name='default', user_data='u', meta_data='m', network_config='n')
        self.assertEqual(ci._asdict(), {'name':'seed1', 'pool':'default', 'user-data':'u', 'meta-data':'m', 'network-config':'n', 'missing':[]})

    def test_bad_payload_type(self):
        with self.assertRaises(ValidationError):
            self.create(user_data=5)
        with self.assertRaises(ValidationError):
            self.create(network_config='\udfff\ud800')
        self.assertEqual(self.backend.volumes, {})
