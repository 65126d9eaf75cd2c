import logging

from app.core.config import settings
from app.utils.logger import StructuredFileHandler, log_account_event


def read_log():
    with open(settings.LOG_FILE, encoding="utf-8") as f:
        return f.read()


def test_account_events_reach_file_log():
    log_account_event("REGISTERED", 42, "ann@x.com")
    log_account_event("OTP EMAIL", 42, "ann@x.com", error="delivery failed after signup")

    content = read_log()
    assert "SOCIAL API" in content
    assert "ACCOUNT REGISTERED" in content
    assert "ann@x.com" in content
    assert "delivery failed after signup" in content


def test_info_records_stay_out_of_file_log():
    logging.getLogger("app.services.social_graph").info("User 1 followed user 2")
    assert "User 1 followed user 2" not in read_log()


def test_serial_numbers_continue_across_handlers(tmp_path):
    path = tmp_path / "ops.txt"
    first = StructuredFileHandler(str(path))
    record = logging.LogRecord("x", logging.WARNING, __file__, 1, "first event", None, None)
    first.emit(record)
    first.close()

    second = StructuredFileHandler(str(path))
    assert second.log_counter == 2
    second.close()
