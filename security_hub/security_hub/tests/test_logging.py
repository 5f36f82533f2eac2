import json
import logging
import logging.config

from django.test import SimpleTestCase

from security_hub.settings.utils.logging import build_logging
from security_hub.settings.utils.logging.formatters import ExtraJSONFormatter, ExtraKVFormatter


def _record(**extra):
    record = logging.LogRecord("security_hub.users.totp", logging.INFO, __file__, 1, "[TOTP启用] ok", None, None)
    for k, v in extra.items():
        setattr(record, k, v)
    return record


class FormatterTestCase(SimpleTestCase):
    def test_kv_formatter_masks_secrets(self):
        line = ExtraKVFormatter("{message}", style="{").format(_record(secret="ABCD", user_id=7))
        self.assertIn("user_id=7", line)
        self.assertIn("secret=***", line)
        self.assertNotIn("ABCD", line)

    def test_json_formatter_masks_secrets(self):
        payload = json.loads(ExtraJSONFormatter("%(message)s").format(_record(codes=["X-Y"], request_id="r1")))
        self.assertEqual(payload["codes"], "***")
        self.assertEqual(payload["request_id"], "r1")


class BuildLoggingTestCase(SimpleTestCase):
    def test_file_handlers_can_be_disabled(self):
        conf = build_logging({"ENABLE_FILE": False, "ENABLE_CONSOLE": False})
        self.assertEqual(conf["handlers"], {})
        self.assertEqual(conf["loggers"]["security_hub.users"]["handlers"], [])

    def test_console_handler_attached(self):
        conf = build_logging({"ENABLE_FILE": False, "ENABLE_CONSOLE": True})
        self.assertIn("console", conf["loggers"]["project.lock"]["handlers"])

    def test_formatters_are_class_objects(self):
        conf = build_logging({"ENABLE_FILE": False, "ENABLE_CONSOLE": False})
        self.assertIs(conf["formatters"]["verbose"]["()"], ExtraKVFormatter)
        self.assertIs(conf["formatters"]["json"]["()"], ExtraJSONFormatter)

    def test_dict_configurator_builds_formatters(self):
        conf = build_logging({"ENABLE_FILE": False, "ENABLE_CONSOLE": False})
        configurator = logging.config.DictConfigurator(conf)
        self.assertIsInstance(configurator.configure_formatter(dict(conf["formatters"]["verbose"])), ExtraKVFormatter)
        self.assertIsInstance(configurator.configure_formatter(dict(conf["formatters"]["json"])), ExtraJSONFormatter)
