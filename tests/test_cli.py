"""
Тесты консольной утилиты.
"""

import json

import pytest
from loguru import logger

import main

FARMER_ID = "3f2b8c1e-4d5a-4b6c-8d7e-9f0a1b2c3d4e"


@pytest.fixture(autouse=True)
def reset_sinks():
    # main() добавляет sink на sys.stderr, подмененный capsys
    yield
    logger.remove()


class TestValidateCommand:
    def test_valid_update_payload(self, capsys):
        code = main.main(["validate", "orders", json.dumps({"total_amount": 120}), "--mode", "update"])
        assert code == 0
        assert json.loads(capsys.readouterr().out) == {"is_valid": True, "errors": []}

    def test_invalid_payload(self, capsys):
        payload = json.dumps({"sender_id": FARMER_ID, "receiver_id": FARMER_ID, "content": "Hello"})
        assert main.main(["validate", "messages", payload]) == 1
        output = json.loads(capsys.readouterr().out)
        assert output["is_valid"] is False
        assert [error["code"] for error in output["errors"]] == ["INVALID"]

    def test_unknown_entity(self, capsys):
        assert main.main(["validate", "tractors", "{}"]) == 1
        assert capsys.readouterr().out == ""

    @pytest.mark.parametrize("payload", ["{not json", "[1, 2]"])
    def test_payload_must_be_json_object(self, payload):
        assert main.main(["validate", "orders", payload]) == 1

    def test_bad_mode_is_an_argument_error(self):
        with pytest.raises(SystemExit) as excinfo:
            main.main(["validate", "orders", "{}", "--mode", "upsert"])
        assert excinfo.value.code == 2


class TestTransitionsCommand:
    def test_prints_graph(self, capsys):
        assert main.main(["transitions", "payments"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert "pending -> failed, succeeded" in lines

    def test_entity_without_statuses(self):
        assert main.main(["transitions", "order_items"]) == 1


def test_entities_lists_registry(capsys):
    assert main.main(["entities"]) == 0
    entities = capsys.readouterr().out.split()
    assert len(entities) == 17
    assert "negotiations" in entities
