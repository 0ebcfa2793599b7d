#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import flask, argparse, logging, sys
from typing import Callable, Optional
from cidata import flask_app, config, utils, idcodec
from cidata.seed import SeedConfig
from cidata.keylock import PoolLocks, POOL_LOCKS
from cidata.exceptions import ValidationError
logger = logging.getLogger(__name__)

def libvirt_backend(uri:str=config.LIBVIRT_URI):
    from cidata.backend import LibvirtBackend
    return LibvirtBackend.open(uri)

class SeedApp(object):
    def __init__(self, backend_factory:Callable, locks:PoolLocks):
        self.backend_factory = backend_factory
        self.locks = locks

    @staticmethod
    def create(backend_factory:Optional[Callable]=None, locks:PoolLocks=POOL_LOCKS, cfg:dict={}) -> flask.Flask:
        myapp = SeedApp(backend_factory or libvirt_backend, locks)
        web = flask_app.create_app(cfg, json=True)
        web.add_url_rule('/seed/<string:pool>/<string:name>', view_func=myapp.create_seed, methods=['POST'])
        web.add_url_rule('/seed', view_func=myapp.show_seed, methods=['GET'])
        web.add_url_rule('/seed/key', view_func=myapp.show_key, methods=['GET'])
        return web

    @staticmethod
    def resource_id()->str:
        resource_id = flask.request.args.get('id', '')
        if not resource_id:
            raise ValidationError('id parameter is empty')
        return resource_id

    def create_seed(self, pool, name):
        req_json = flask.request.get_json(silent=True) or {}
        if not isinstance(req_json, dict):
            raise ValidationError('request body must be a json object')
        logger.info(f'create_seed {pool}/{name}')
        ci = SeedConfig(name=name, pool_name=pool,
                        user_data=req_json.get('user_data', ''),
                        meta_data=req_json.get('meta_data', ''),
                        network_config=req_json.get('network_config', ''))
        with self.backend_factory() as backend:
            resource_id = ci.create(backend, self.locks)
        return { 'result' : 'OK', 'id' : resource_id, 'key': idcodec.parse_key(resource_id) }

    def show_seed(self):
        resource_id = self.resource_id()
        with self.backend_factory() as backend:
            ci = SeedConfig.from_remote_iso(backend, resource_id)
        return { 'result' : 'OK', 'id': resource_id, **ci._asdict() }

    def show_key(self):
        resource_id = self.resource_id()
        return { 'result' : 'OK', 'id': resource_id, 'key': idcodec.parse_key(resource_id) }

def cmd_create(args)->str:
    ci = SeedConfig(name=args.name, pool_name=args.pool,
                    user_data=utils.file_load(args.user_data),
                    meta_data=utils.file_load(args.meta_data),
                    network_config=utils.file_load(args.network_config) if args.network_config else '')
    with libvirt_backend(args.connect) as backend:
        resource_id = ci.create(backend)
    return utils.return_ok(f'create {args.pool}/{args.name} ok', id=resource_id)

def cmd_show(args)->str:
    with libvirt_backend(args.connect) as backend:
        ci = SeedConfig.from_remote_iso(backend, args.id)
    return utils.return_ok(f'show {ci.pool_name}/{ci.name} ok', **ci._asdict())

def cmd_serve(args)->str:
    app = SeedApp.create(lambda: libvirt_backend(args.connect))
    app.run(host=config.HTTP_HOST, port=config.HTTP_PORT)
    return utils.return_ok('serve exit')

def main(argv=None):
    parser = argparse.ArgumentParser(description='cloud-init seed iso on libvirt storage pools')
    parser.add_argument('-c', '--connect', help=f'libvirt URI, default {config.LIBVIRT_URI}', default=config.LIBVIRT_URI)
    parser.add_argument('-d','--debug', help=f'logging level DEBUG, default {config.LOG_LEVEL}.', action="store_true")
    sub = parser.add_subparsers(dest='command', required=True)
    p = sub.add_parser('create', help='build seed iso and upload it as a new volume')
    p.add_argument('--pool', required=True, help='storage pool name')
    p.add_argument('--name', required=True, help='volume name')
    p.add_argument('--user-data', required=True, help='user-data file')
    p.add_argument('--meta-data', required=True, help='meta-data file')
    p.add_argument('--network-config', help='network-config file')
    p.set_defaults(func=cmd_create)
    p = sub.add_parser('show', help='download a seed volume and print its files')
    p.add_argument('id', help='resource id, <volume key>;<uuid>')
    p.set_defaults(func=cmd_show)
    p = sub.add_parser('serve', help=f'http api on {config.HTTP_HOST}:{config.HTTP_PORT}')
    p.set_defaults(func=cmd_serve)
    args = parser.parse_args(argv)
    logging.getLogger('cidata').setLevel(logging.DEBUG if args.debug else config.LOG_LEVEL)
    try:
        print(args.func(args))
    except Exception as e:
        print(utils.deal_except(args.command, e))
        return 1
    return 0

if __name__ == '__main__':
    sys.exit(main())
