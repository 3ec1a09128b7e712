import main
from factories import make_order
from pearlwash.client import TransportFailure
from pearlwash.domain import Order
from pearlwash.store import RecordNotFound


class StubClient:
    def __init__(self, result):
        self.result = result

    def get_order(self, order_id):
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def test_track_remote_prints_order(capsys):
    order = Order.from_record(make_order(42, status="ready"))
    assert main._track_remote(StubClient(order), "42") == 0
    assert "order#42 ready" in capsys.readouterr().out


def test_track_remote_hides_transport_detail(capsys):
    assert main._track_remote(StubClient(TransportFailure("socket reset by peer")), "42") == 1
    out = capsys.readouterr().out
    assert "try again" in out
    assert "socket" not in out


def test_track_remote_not_found(capsys):
    assert main._track_remote(StubClient(RecordNotFound("orders", 7)), "7") == 1
    assert "Order not found" in capsys.readouterr().out


def test_track_remote_bad_input(capsys):
    assert main._track_remote(StubClient(None), "abc") == 1


def test_missing_config_exits_2(tmp_path, capsys):
    assert main.main(["--config", str(tmp_path / "missing.toml"), "cli"]) == 2
    assert "[CONFIG ERROR]" in capsys.readouterr().out


def test_import_seed_into_json_store(tmp_path, capsys):
    config = tmp_path / "config.toml"
    db_path = tmp_path / "db.json"
    config.write_text(f'[store]\nbackend = "json"\npath = "{db_path.as_posix()}"\n', encoding="utf-8")
    seed = tmp_path / "seed.json"
    seed.write_text('{"services": [{"name": "Ironing", "price": 10}]}', encoding="utf-8")

    assert main.main(["--config", str(config), "import-seed", str(seed)]) == 0
    assert "services=1" in capsys.readouterr().out
    assert db_path.exists()
