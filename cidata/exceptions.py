# -*- coding: utf-8 -*-
from http import HTTPStatus
from typing import Optional, IO

class APIException(Exception):
    code = HTTPStatus.INTERNAL_SERVER_ERROR
    name = 'error'

    def __init__(self, desc:str, fileobj:Optional[IO[bytes]]=None):
        super().__init__(desc)
        self.desc = desc
        # tmp file handed back with the error, caller must close/remove it
        self.fileobj = fileobj

    # registered for every APIException by flask_app.create_app
    @staticmethod
    def handle(e):
        response = {'result':'ERR', 'code': int(e.code), 'name':e.name, 'desc':e.desc}
        return response, int(e.code)

class ValidationError(APIException):
    code = HTTPStatus.BAD_REQUEST
    name = 'validation'

class LocalResourceError(APIException):
    name = 'local'

class BuildError(APIException):
    name = 'build'

    def __init__(self, desc:str, path:Optional[str]=None):
        super().__init__(desc)
        # image inside the tmp directory left behind
        self.path = path

class FormatError(APIException):
    name = 'format'

class ReadError(APIException):
    name = 'read'

class RemoteError(APIException):
    code = HTTPStatus.BAD_GATEWAY
    name = 'remote'

class IntegrityError(APIException):
    code = HTTPStatus.BAD_GATEWAY
    name = 'integrity'
