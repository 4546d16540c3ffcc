#!/usr/bin/env python3
import json
import os
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from app.dispatcher import (
    OUTCOME_BAD_BODY,
    OUTCOME_BAD_METHOD,
    OUTCOME_DELIVERED,
    OUTCOME_DELIVERY_FAILED,
    OUTCOME_HEARTCHECK,
    OUTCOME_TOO_DEEP,
    OUTCOME_UNKNOWN_ROUTE,
    BadBodyError,
    RequestDispatcher,
    decode_json_object,
)
from app.flattener import TooDeepError
from app.routes import build_route_registry
from app.services import DeliveryResult


class RecordingSink:
    def __init__(self, result=None):
        self.calls = []
        self.result = result or DeliveryResult(True, 'sent', 200)

    def send_message(self, route_key, text):
        self.calls.append((route_key, text))
        return self.result


def _dispatcher(sink=None, **kwargs):
    env = {'ORDERS_FILTER_KEY': 'order_id,total'}
    registry = build_route_registry(['orders', 'deploys'], env.get)
    return RequestDispatcher(registry, sink or RecordingSink(), **kwargs)


ORDER = json.dumps({'order_id': '12345', 'total': 27.97, 'extra': 'x'}).encode()


class TestRequestDispatcher(unittest.TestCase):
    def test_filtered_route_message(self):
        sink = RecordingSink()
        result = _dispatcher(sink).dispatch('/orders', 'POST', ORDER)

        self.assertEqual(result.outcome, OUTCOME_DELIVERED)
        self.assertEqual(result.status, 200)
        self.assertEqual(result.text, 'Dynamic request processed')
        self.assertEqual(sink.calls, [('/orders', 'order_id: 12345\ntotal: 27.97\n')])
        self.assertNotIn('extra', result.message)

    def test_unfiltered_route_keeps_all_keys(self):
        sink = RecordingSink()
        result = _dispatcher(sink).dispatch('/deploys', 'POST', ORDER)
        self.assertEqual(result.message, 'order_id: 12345\ntotal: 27.97\nextra: x\n')

    def test_webhook_route(self):
        sink = RecordingSink()
        result = _dispatcher(sink).dispatch('/webhook', 'POST', b'{"a": {"b": 2}}')
        self.assertEqual(result.text, 'Webhook request processed')
        self.assertEqual(sink.calls, [('/webhook', 'a: \n  b: 2\n')])

    def test_bad_bodies_are_rejected_without_delivery(self):
        sink = RecordingSink()
        dispatcher = _dispatcher(sink)
        for body in (b'[1, 2]', b'"texto"', b'null', b'{"a": ', b'', b'\xff\xfe',
                     b'{"a": NaN}', b'{"a": Infinity}', b'{"a": -Infinity}'):
            result = dispatcher.dispatch('/orders', 'POST', body)
            self.assertEqual(result.outcome, OUTCOME_BAD_BODY, body)
            self.assertEqual(result.status, 400)
            self.assertEqual(result.text, 'Failed to decode JSON payload')
        self.assertEqual(sink.calls, [])

    def test_method_guard(self):
        sink = RecordingSink()
        dispatcher = _dispatcher(sink)

        result = dispatcher.dispatch('/orders', 'GET', b'')
        self.assertEqual((result.outcome, result.status), (OUTCOME_BAD_METHOD, 405))

        result = dispatcher.dispatch('/heartcheck', 'POST', ORDER)
        self.assertEqual((result.outcome, result.status), (OUTCOME_BAD_METHOD, 405))
        self.assertEqual(sink.calls, [])

    def test_heartcheck(self):
        result = _dispatcher().dispatch('/heartcheck', 'GET', b'')
        self.assertEqual(result.outcome, OUTCOME_HEARTCHECK)
        self.assertEqual(result.status, 200)
        self.assertEqual(result.text, 'Heartcheck request processed')

    def test_unknown_route(self):
        result = _dispatcher().dispatch('/nope', 'POST', ORDER)
        self.assertEqual((result.outcome, result.status), (OUTCOME_UNKNOWN_ROUTE, 404))

    def test_too_deep_rejected(self):
        sink = RecordingSink()
        body = ('{"k": ' * 10) + '1' + ('}' * 10)
        result = _dispatcher(sink, max_depth=5).dispatch('/webhook', 'POST', body.encode())
        self.assertEqual((result.outcome, result.status), (OUTCOME_TOO_DEEP, 400))
        self.assertEqual(sink.calls, [])

    def test_nesting_beyond_parser_stack_rejected(self):
        sink = RecordingSink()
        body = '{"a": ' + '[' * 100000 + ']' * 100000 + '}'
        result = _dispatcher(sink).dispatch('/webhook', 'POST', body.encode())
        self.assertEqual((result.outcome, result.status), (OUTCOME_TOO_DEEP, 400))
        self.assertEqual(sink.calls, [])

    def test_delivery_failure_does_not_change_response(self):
        sink = RecordingSink(DeliveryResult(False, 'http_500', 500))
        result = _dispatcher(sink).dispatch('/orders', 'POST', ORDER)
        self.assertEqual((result.outcome, result.status), (OUTCOME_DELIVERED, 200))
        self.assertEqual(len(sink.calls), 1)

    def test_delivery_failure_surfaced_when_enabled(self):
        sink = RecordingSink(DeliveryResult(False, 'transport_error'))
        result = _dispatcher(sink, surface_delivery_failures=True).dispatch('/orders', 'POST', ORDER)
        self.assertEqual((result.outcome, result.status), (OUTCOME_DELIVERY_FAILED, 502))

    def test_missing_credentials_never_surfaced(self):
        sink = RecordingSink(DeliveryResult(False, 'missing_credentials'))
        result = _dispatcher(sink, surface_delivery_failures=True).dispatch('/orders', 'POST', ORDER)
        self.assertEqual((result.outcome, result.status), (OUTCOME_DELIVERED, 200))

    def test_filter_key_absent_from_document(self):
        sink = RecordingSink()
        _dispatcher(sink).dispatch('/orders', 'POST', b'{"order_id": 1, "other": 2}')
        self.assertEqual(sink.calls, [('/orders', 'order_id: 1\n')])


class TestDecodeJsonObject(unittest.TestCase):
    def test_preserves_key_order(self):
        self.assertEqual(list(decode_json_object(b'{"b": 1, "a": 2}')), ['b', 'a'])

    def test_rejects_non_object(self):
        with self.assertRaises(BadBodyError):
            decode_json_object(b'[]')

    def test_rejects_non_standard_constants(self):
        with self.assertRaises(BadBodyError):
            decode_json_object(b'{"a": NaN, "b": Infinity}')

    def test_parser_recursion_becomes_too_deep(self):
        with self.assertRaises(TooDeepError) as ctx:
            decode_json_object(('[' * 100000).encode(), max_depth=64)
        self.assertIsNone(ctx.exception.depth)


if __name__ == '__main__':
    unittest.main()
