import logging

from flask import Flask, request

from .constants import RESPONSE_TEXTS
from .dispatcher import RequestDispatcher
from .routes import RouteRegistry, load_route_registry
from .services import TelegramClient

logger = logging.getLogger(__name__)

# O guarda de método fica no dispatcher (405 com o texto padrão)
ACCEPTED_METHODS = ['GET', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS']
TEXT_HEADERS = {'Content-Type': 'text/plain; charset=utf-8'}


def _text_response(text, status):
    return f"{text}\n", status, TEXT_HEADERS


def create_app(registry: RouteRegistry = None, sink=None, dispatcher: RequestDispatcher = None):
    app = Flask(__name__)

    if dispatcher is None:
        if registry is None:
            registry = load_route_registry()
        if sink is None:
            sink = TelegramClient()
        dispatcher = RequestDispatcher(registry, sink)
    registry = dispatcher.registry
    app.extensions['route_dispatcher'] = dispatcher
    logger.info(f"Rotas de mensagem: {[e.key for e in registry.message_routes()]}")

    if not getattr(dispatcher.sink, 'enabled', True):
        logger.warning("TG_API_TOKEN/TG_CHAT_ID não configurados: mensagens não serão entregues")

    def handle_route():
        result = dispatcher.dispatch(request.path, request.method, request.get_data(cache=False))
        return _text_response(result.text, result.status)

    for key in registry:
        app.add_url_rule(key, endpoint=f"route:{key}", view_func=handle_route, methods=ACCEPTED_METHODS,
                         provide_automatic_options=False)

    @app.errorhandler(404)
    def not_found(_error):
        logger.info(f"404 Page Not Found: {request.method} {request.path}")
        return _text_response(RESPONSE_TEXTS['not_found'], 404)

    @app.errorhandler(405)
    def method_not_allowed(_error):
        return _text_response(RESPONSE_TEXTS['bad_method'], 405)

    return app
