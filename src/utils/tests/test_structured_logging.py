"""Tests for JSONFormatter and setup_structured_logging()."""

import json
import logging
import unittest

from utils.logging import JSONFormatter, setup_structured_logging


class TestJSONFormatter(unittest.TestCase):

    def _record(self, msg='User created', **extra):
        record = logging.LogRecord('adapter.sql', logging.INFO, __file__, 10, msg, (), None)
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_base_fields(self):
        data = json.loads(JSONFormatter().format(self._record()))

        self.assertEqual(data['level'], 'INFO')
        self.assertEqual(data['logger'], 'adapter.sql')
        self.assertEqual(data['message'], 'User created')
        self.assertTrue(data['timestamp'].endswith('Z'))
        self.assertNotIn('pathname', data)
        self.assertNotIn('lineno', data)

    def test_extra_fields_included(self):
        data = json.loads(JSONFormatter().format(self._record(username='alice', userId='u-1')))
        self.assertEqual(data['username'], 'alice')
        self.assertEqual(data['userId'], 'u-1')

    def test_non_json_values_stringified(self):
        from datetime import date
        data = json.loads(JSONFormatter().format(self._record(dob=date(1990, 5, 17))))
        self.assertEqual(data['dob'], '1990-05-17')

    def test_exception_included(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            import sys
            record = logging.LogRecord('x', logging.ERROR, __file__, 1, 'failed', (), sys.exc_info())

        data = json.loads(JSONFormatter().format(record))
        self.assertIn('RuntimeError: boom', data['exception'])


class TestSetupStructuredLogging(unittest.TestCase):

    def setUp(self):
        root = logging.getLogger()
        self._saved = (root.level, list(root.handlers))

    def tearDown(self):
        root = logging.getLogger()
        root.setLevel(self._saved[0])
        root.handlers = self._saved[1]

    def test_installs_json_handler_on_root(self):
        setup_structured_logging("DEBUG")

        root = logging.getLogger()
        self.assertEqual(root.level, logging.DEBUG)
        self.assertEqual(len(root.handlers), 1)
        self.assertIsInstance(root.handlers[0].formatter, JSONFormatter)
        self.assertEqual(logging.getLogger("uvicorn.access").level, logging.WARNING)


if __name__ == '__main__':
    unittest.main()
