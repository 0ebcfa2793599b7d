# -*- coding: utf-8 -*-
import os
# # env: LIBVIRT_URI, SEED_CAPACITY, SEED_VOL_IDENT, SEED_TMP_PREFIX, HTTP_HOST, HTTP_PORT, LOG
KiB = 1024
MiB = 1024 * KiB
# # backend, qemu+ssh://root@10.0.0.1:60022/system
LIBVIRT_URI      = os.environ.get('LIBVIRT_URI', 'qemu:///system')
# # seed iso: raw container size, the iso must fit in it
SEED_CAPACITY    = int(os.environ.get('SEED_CAPACITY', 10*MiB))
SEED_VOL_IDENT   = os.environ.get('SEED_VOL_IDENT', 'cidata')
SEED_TMP_PREFIX  = os.environ.get('SEED_TMP_PREFIX', 'cloudinit')
SEED_RR_VERSION  = '1.09'
##################################################################
# # const define
USER_DATA        = 'user-data'
META_DATA        = 'meta-data'
NETWORK_CONFIG   = 'network-config'
SEED_FILES       = (USER_DATA, META_DATA, NETWORK_CONFIG)
VOL_FORMAT       = 'raw'
KEY_SEP          = ';'
##################################################################
HTTP_HOST        = os.environ.get('HTTP_HOST', '0.0.0.0')
HTTP_PORT        = int(os.environ.get('HTTP_PORT', '18888'))
LOG_LEVEL        = os.environ.get('LOG', 'INFO').upper()
