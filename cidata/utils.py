# -*- coding: utf-8 -*-
from typing import Optional, List, Dict, IO
import json, os, shutil, logging, time, functools
from cidata.exceptions import APIException, LocalResourceError
logger = logging.getLogger(__name__)

def time_use(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            runtime = time.perf_counter() - start_time
            logger.info(f"Execution of '{func.__name__}' took {runtime:.4f} seconds.")
    return wrapper

class AttrDict(dict):
    def __getattr__(self, key):
        try:
            return self[key]
        except KeyError:
            raise AttributeError(f"'{type(self).__name__}' object has no attribute '{key}'")

def file_size(fname:str)->int:
    try:
        return os.path.getsize(fname)
    except OSError as e:
        raise LocalResourceError(f"error while reading size of {fname}: {e}") from e

def file_load(fname:str)-> bytes:
    with open(fname, 'rb') as file:
        return file.read()

def remove_tmpdir(fname:str)-> None:
    # remove the tmp directory holding fname, never raise
    try:
        shutil.rmtree(os.path.dirname(fname))
    except OSError as e:
        logger.error(f'error while removing tmp directory holding {fname}: {e}')

def remove_tmpfile(fileobj:Optional[IO[bytes]])-> None:
    if fileobj is None:
        return
    try:
        fileobj.close()
        os.remove(fileobj.name)
    except OSError as e:
        logger.error(f'error while removing tmp file {fileobj.name}: {e}')

def return_ok(desc:str, **kwargs)->str:
    return json.dumps({'result':'OK','desc':desc, **kwargs}, default=str)

def return_err(code:int, name:str, desc:str)->str:
    return json.dumps({'result' : 'ERR', 'code': code,'name':name,'desc':desc}, default=str)

def deal_except(who:str, e:Exception) -> str:
    if isinstance(e, APIException):
        remove_tmpfile(e.fileobj)
        logger.error(f'{int(e.code)} {who}: {type(e).__name__} {str(e)}')
        return return_err(int(e.code), who, str(e))
    logger.exception(f'998 {who}')
    return return_err(998, who, f'{type(e).__name__} {str(e)}')
