import pytest

from pearlwash.cli import run_cli


@pytest.fixture
def feed(monkeypatch):
    def _feed(*answers):
        it = iter(answers)
        monkeypatch.setattr("builtins.input", lambda _msg="": next(it))
    return _feed


def test_list_services(ctx, feed, capsys):
    feed("1", "0")
    run_cli(ctx)
    out = capsys.readouterr().out
    assert "#1 Wash & Fold price=15.00" in out


def test_book_then_track(ctx, feed, capsys):
    feed("2", "Jane Doe", "+1 (555) 010-2000", "12 Harbor Street", "1, 3", "2099-01-01", "9:00 AM",
         "3", "43", "0")
    run_cli(ctx)
    out = capsys.readouterr().out
    assert "Booking confirmed! order_id=43 total=25.00" in out
    assert "[>] Scheduled" in out
    assert "- Ironing x1 @ 10.00 = 10.00" in out


def test_booking_errors_are_listed(ctx, feed, capsys):
    feed("2", "", "123", "", "", "", "", "0")
    run_cli(ctx)
    out = capsys.readouterr().out
    assert "[INPUT ERROR] customerName: Name is required" in out
    assert "[INPUT ERROR] customerPhone: Please enter a valid phone number" in out


def test_track_unknown(ctx, feed, capsys):
    feed("3", "999999", "3", "abc", "0")
    run_cli(ctx)
    out = capsys.readouterr().out
    assert "[NOT FOUND]" in out
    assert "valid numeric order ID" in out


def test_update_status_by_number(ctx, feed, capsys):
    feed("5", "42", "5", "0")
    run_cli(ctx)
    assert "Order #42 is now delivered" in capsys.readouterr().out


def test_dashboard_and_customer(ctx, feed, capsys):
    feed("4", "", "", "6", "Jane Doe", "0")
    run_cli(ctx)
    out = capsys.readouterr().out
    assert "total=3 pending=1 in_progress=1 completed=1" in out
    assert "Jane Doe: orders=2 spent=75.50" in out
    assert "most recent pickup: 2024-02-15" in out
