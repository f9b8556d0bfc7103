import logging

import pytest

from common.logging_utils import TRACE_LEVEL_NUM, _TraceLogger, context, setup_logging, trace_calls
from pipeflow.friction import friction_factor


def test_trace_level_registered():
    assert logging.getLevelName(TRACE_LEVEL_NUM) == "TRACE"
    assert TRACE_LEVEL_NUM < logging.DEBUG


def test_setup_logging_levels():
    setup_logging("TRACE")
    assert logging.getLogger().level == TRACE_LEVEL_NUM
    setup_logging("not-a-level")
    assert logging.getLogger().level == logging.INFO
    setup_logging(logging.WARNING)
    root = logging.getLogger()
    assert root.level == logging.WARNING and len(root.handlers) == 1


def test_trace_calls_enter_exit(caplog):
    caplog.set_level(TRACE_LEVEL_NUM)
    friction_factor(1e5, 0.0)
    msgs = [r.getMessage() for r in caplog.records if r.levelno == TRACE_LEVEL_NUM]
    assert "enter" in msgs
    assert any(m.startswith("exit ok") for m in msgs)
    assert isinstance(logging.getLogger("pipeflow.friction.friction_factor"), _TraceLogger)
    assert all(r.step == "friction_factor" for r in caplog.records if r.name.endswith("friction_factor"))


def test_trace_calls_values_and_errors(caplog):
    @trace_calls(name="demo", values=True)
    def boom(x, case="c1"):
        raise ValueError(f"bad {x}")

    caplog.set_level(TRACE_LEVEL_NUM)
    with pytest.raises(ValueError):
        boom(3, case="c1")
    assert any(r.getMessage().startswith("args: 3") for r in caplog.records)
    err = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert err and err[0].case == "c1" and "exit err: bad 3" in err[0].getMessage()


def test_log_file_gets_case_tags(tmp_path):
    path = tmp_path / "logs" / "run.log"
    setup_logging("INFO", log_file=path)
    logging.getLogger("demo").info("hello", extra=context("tanks", "solve_flow"))
    logging.getLogger("demo").info("untagged")
    for h in logging.getLogger().handlers:
        h.flush()
    text = path.read_text(encoding="utf-8")
    assert "case=tanks step=solve_flow | hello" in text
    assert "case=- step=- | untagged" in text
