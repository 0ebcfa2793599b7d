# -*- coding: utf-8 -*-
import werkzeug, flask, logging
from cidata.exceptions import APIException
logging.basicConfig(encoding='utf-8', format='[%(funcName)s@%(filename)s(%(lineno)d)]%(name)s %(levelname)s: %(message)s')
logger = logging.getLogger(__name__)

FLASK_CONF = {
    'DEBUG'               : False,
    'TESTING'             : False,
    'PROPAGATE_EXCEPTIONS': False,
}

def create_app(config: dict={}, json: bool=False) -> flask.Flask:
    cfg = {**FLASK_CONF, **config}
    logger.debug("Flask config: %s", cfg)
    # api only, no static files
    app = flask.Flask(__name__, static_folder=None)
    app.config.from_mapping(cfg)
    app.register_error_handler(APIException, APIException.handle)
    if json:
        # for unicode json
        app.json.ensure_ascii = False
        for ex in werkzeug.exceptions.default_exceptions:
            app.register_error_handler(ex, json_handle_error)
    return app

def json_handle_error(e):
    # same body as APIException.handle, so clients parse one error shape
    response = e.get_response()
    response.data = flask.json.dumps({'result':'ERR', 'code': e.code, 'name': e.name, 'desc': e.description})
    response.content_type = 'application/json'
    return response
