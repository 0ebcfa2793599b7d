# -*- coding: utf-8 -*-
import unittest, contextlib, io, json, os, tempfile
from unittest import mock
from cidata import main
from testing.fakebackend import FakeBackend

class CliTest(unittest.TestCase):
    def setUp(self):
        self.backend = FakeBackend(pools=('default',))
        self.uris = []
        def backend(uri):
            self.uris.append(uri)
            return contextlib.nullcontext(self.backend)
        patcher = mock.patch('cidata.main.libvirt_backend', backend)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)

    def payload(self, name, data):
        fname = os.path.join(self.tmpdir.name, name)
        with open(fname, 'wb') as fp:
            fp.write(data)
        return fname

    def run_main(self, *argv):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            rc = main.main(list(argv))
        return rc, json.loads(out.getvalue())

    def test_create_and_show(self):
        user = self.payload('user-data', b'#cloud-config\nusers: []\n')
        meta = self.payload('meta-data', b'instance-id: i-1\n')
        rc, out = self.run_main('-c', 'test:///default', 'create', '--pool', 'default', '--name', 'seed1', '--user-data', user, '--meta-data', meta)
        self.assertEqual(rc, 0)
        self.assertEqual(out['result'], 'OK')
        self.assertTrue(out['id'].startswith('/pool/default/seed1;'))
        self.assertEqual(self.uris, ['test:///default'])
        rc, out = self.run_main('show', out['id'])
        self.assertEqual(rc, 0)
        self.assertEqual(out['name'], 'seed1')
        self.assertEqual(out['pool'], 'default')
        self.assertEqual(out['user-data'], '#cloud-config\nusers: []\n')
        self.assertEqual(out['meta-data'], 'instance-id: i-1\n')
        self.assertEqual(out['network-config'], '')
        self.assertEqual(out['missing'], [])

    def test_network_config_file(self):
        user = self.payload('user-data', b'')
        meta = self.payload('meta-data', b'')
        net = self.payload('network-config', b'version: 2\n')
        rc, out = self.run_main('create', '--pool', 'default', '--name', 'seed2', '--user-data', user, '--meta-data', meta, '--network-config', net)
        self.assertEqual(rc, 0)
        rc, out = self.run_main('show', out['id'])
        self.assertEqual(out['network-config'], 'version: 2\n')

    def test_bad_id(self):
        rc, out = self.run_main('show', 'nosep')
        self.assertEqual(rc, 1)
        self.assertEqual(out['result'], 'ERR')
        self.assertEqual(out['code'], 400)
        self.assertEqual(out['name'], 'show')

    def test_unknown_pool(self):
        user = self.payload('user-data', b'u')
        meta = self.payload('meta-data', b'm')
        rc, out = self.run_main('create', '--pool', 'nopool', '--name', 'seed1', '--user-data', user, '--meta-data', meta)
        self.assertEqual(rc, 1)
        self.assertEqual(out['code'], 400)
        self.assertIn('nopool', out['desc'])

    def test_missing_file(self):
        meta = self.payload('meta-data', b'm')
        missing = os.path.join(self.tmpdir.name, 'absent')
        rc, out = self.run_main('create', '--pool', 'default', '--name', 'seed1', '--user-data', missing, '--meta-data', meta)
        self.assertEqual(rc, 1)
        self.assertEqual(out['code'], 998)
        self.assertIn('FileNotFoundError', out['desc'])
        self.assertEqual(self.backend.volumes, {})
