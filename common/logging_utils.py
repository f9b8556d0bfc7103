"""
Logging for the worked examples.

Adds a TRACE level below DEBUG and tags every record with the case being
run and the step inside it (``case=... step=...``). Solvers pass these as
``extra=context(case, step)``; records without them print ``-``.
"""
import logging, functools, time
from pathlib import Path

TRACE_LEVEL_NUM = 5
logging.addLevelName(TRACE_LEVEL_NUM, "TRACE")


class _TraceLogger(logging.Logger):
    def trace(self, msg, *a, **k):
        if self.isEnabledFor(TRACE_LEVEL_NUM):
            self._log(TRACE_LEVEL_NUM, msg, a, **k)
logging.setLoggerClass(_TraceLogger)

_FMT = "%(asctime)s | %(levelname)s | %(name)s | case=%(case)s step=%(step)s | %(message)s"
_DATE = "%Y-%m-%d %H:%M:%S"


class _Context(logging.Filter):
    def filter(self, r):
        if not hasattr(r, "case"): r.case = "-"
        if not hasattr(r, "step"): r.step = "-"
        return True


def context(case: str = "-", step: str = "-") -> dict:
    return {"case": case, "step": step}


def _level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    lvl = logging.getLevelName(str(level).upper())
    return lvl if isinstance(lvl, int) else logging.INFO


def setup_logging(level: int | str = logging.INFO, log_file: str | Path | None = None):
    """One stderr handler on the root logger, plus an optional file copy."""
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(_level(level))
    handlers = [logging.StreamHandler()]
    if log_file is not None:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))
    for h in handlers:
        h.setFormatter(logging.Formatter(_FMT, _DATE))
        h.addFilter(_Context())
        root.addHandler(h)


def _fmt(v):
    # wrapper types from common.quantities carry a pint quantity in .q
    v = getattr(v, "q", v)
    try:
        return f"{v:.6g~P}"
    except (TypeError, ValueError):
        return repr(v)


def trace_calls(name: str | None = None, values: bool = False):
    """
    Log enter/exit (and with ``values`` the arguments and result) at TRACE.

    A ``case=`` keyword of the wrapped call becomes the record's case tag.
    Exceptions are logged at ERROR and re-raised.
    """
    def _wrap(fn):
        log = logging.getLogger(name or f"{fn.__module__}.{fn.__qualname__}")

        @functools.wraps(fn)
        def _inner(*a, **k):
            ctx = context(k.get("case", "-"), fn.__name__)
            log.trace("enter", extra=ctx)
            if values:
                arg_s = ", ".join([*map(_fmt, a), *[f"{kk}={_fmt(v)}" for kk, v in k.items()]])
                log.trace(f"args: {arg_s}", extra=ctx)
            t0 = time.perf_counter()
            try:
                out = fn(*a, **k)
            except Exception as e:
                log.exception(f"exit err: {e}", extra=ctx)
                raise
            if values:
                log.trace(f"ret: {_fmt(out)}", extra=ctx)
            log.trace(f"exit ok in {(time.perf_counter() - t0) * 1000:.2f} ms", extra=ctx)
            return out
        return _inner
    return _wrap
