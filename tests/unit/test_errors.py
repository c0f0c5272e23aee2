import json
import unittest

from rendezvous.errors import (
    ConfigError,
    ErrorCode,
    NotifyRejectedError,
    RendezvousError,
    UnbalancedLeaveError,
    invalid_config,
    unbalanced_leave,
)


class TestErrorTaxonomy(unittest.TestCase):

    def test_message_carries_code(self):
        err = unbalanced_leave("doorbell")
        self.assertIsInstance(err, UnbalancedLeaveError)
        self.assertTrue(str(err).startswith("[GROUP_001]"))
        self.assertEqual(err.details["group"], "doorbell")

    def test_subclasses_default_their_code(self):
        self.assertIs(NotifyRejectedError(message="x").code, ErrorCode.GROUP_NOTIFY_REJECTED)
        self.assertIs(ConfigError(message="x").code, ErrorCode.CONFIG_INVALID)
        self.assertIs(RendezvousError(message="x").code, ErrorCode.SYSTEM_INTERNAL_ERROR)

    def test_dict_round_trip_keeps_subclass(self):
        err = invalid_config("time_unit", -1, "must not be negative")
        restored = RendezvousError.from_dict(err.to_dict())

        self.assertIsInstance(restored, ConfigError)
        self.assertEqual(restored.details["key"], "time_unit")
        self.assertEqual(restored.message, err.message)

    def test_to_json(self):
        payload = json.loads(unbalanced_leave("g").to_json())
        self.assertEqual(payload["code"], "GROUP_001")
        self.assertEqual(payload["details"]["pending_count"], 0)

    def test_unknown_subclass_falls_back_to_base(self):
        restored = RendezvousError.from_dict({"code": "GROUP_003", "message": "bad timeout"})
        self.assertIs(type(restored), RendezvousError)
        self.assertIs(restored.code, ErrorCode.GROUP_INVALID_TIMEOUT)


if __name__ == '__main__':
    unittest.main()
