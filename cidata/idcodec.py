# -*- coding: utf-8 -*-
import uuid
from cidata import config
from cidata.exceptions import ValidationError

def gen_uuid()->str:
    return "{}".format(uuid.uuid4())

def build_key(volume_key:str)->str:
    # <volume key>;<uuid>, the uuid only keeps ids of re-created seeds apart
    return f'{volume_key}{config.KEY_SEP}{gen_uuid()}'

def parse_key(resource_id:str)->str:
    # split at the last ';' deliberately, not the first: volume keys are
    # pool paths and may hold ';', the uuid never does
    parts = resource_id.rsplit(config.KEY_SEP, 1)
    if len(parts) != 2 or not parts[0]:
        raise ValidationError(f'{resource_id} is not a valid key')
    return parts[0]
