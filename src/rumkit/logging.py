"""rumkit's own structured logging.

Two pluggable halves, chosen by LoggingConfig:

    LogFormatter    shape of a record     structlog (default) | stdlib
    LogDestination  where records land    stderr (default)    | jsonl

setup_logging() asks the formatter for a logging.Formatter, hands it to
the destination's handler and installs that handler on the root logger.
Everything is bridged through stdlib logging, so a host app that calls
logging.getLogger() ends up in the same stream.

Log calls are keyword-style everywhere:

    get_logger("rumkit.registry").debug("registry.begin", element="Users")

Values under sensitive keys (client tokens, user emails) are masked by
both formatters before rendering.

Extra strategies can be plugged in before configure():

    register_destination("syslog", SyslogDestination)
"""

from __future__ import annotations

import json
import logging
import sys
from functools import partialmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping, MutableMapping, Protocol, runtime_checkable

if TYPE_CHECKING:
    from rumkit.config import LoggingConfig

SENSITIVE_KEYS = frozenset({"client_token", "email", "api_key", "app_key"})
MASK = "***"


def redact(values: Mapping[str, Any]) -> dict[str, Any]:
    """Copy of `values` with sensitive keys masked (top level only)."""
    return {k: (MASK if k in SENSITIVE_KEYS and v else v) for k, v in values.items()}


def _redact_processor(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    for key in SENSITIVE_KEYS.intersection(event_dict):
        if event_dict[key]:
            event_dict[key] = MASK
    return event_dict


@runtime_checkable
class LogFormatter(Protocol):
    def setup(self, config: LoggingConfig) -> logging.Formatter: ...

    def get_logger(self, name: str, **kwargs: Any) -> Any: ...


@runtime_checkable
class LogDestination(Protocol):
    def create_handler(self, formatter: logging.Formatter) -> logging.Handler: ...

    def shutdown(self) -> None: ...


# -- formatters -------------------------------------------------------------


class StructlogFormatter:
    """structlog pipeline rendered through stdlib's ProcessorFormatter."""

    def setup(self, config: LoggingConfig) -> logging.Formatter:
        import structlog

        pre_chain = [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _redact_processor,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
        ]
        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                *pre_chain,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

        render = (
            structlog.dev.ConsoleRenderer(colors=False)
            if config.log_format == "console"
            else structlog.processors.JSONRenderer()
        )
        # foreign_pre_chain runs on records that bypassed structlog (host app, libraries)
        return structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, render],
        )

    def get_logger(self, name: str, **kwargs: Any) -> Any:
        import structlog

        return structlog.get_logger(name, **kwargs)


class StdlibFormatter:
    """No structlog at runtime: JSON (or plain text) straight from LogRecords."""

    def setup(self, config: LoggingConfig) -> logging.Formatter:
        if config.log_format == "console":
            return logging.Formatter(
                "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S",
            )
        return _StdlibJsonFormatter()

    def get_logger(self, name: str, **kwargs: Any) -> Any:
        return _StructuredStdlibLogger(logging.getLogger(name))


class _StdlibJsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%SZ"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
        }
        payload.update(redact(getattr(record, "_structured", {})))
        if record.exc_info and record.exc_info[1] is not None:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class _StructuredStdlibLogger:
    """logger.info("event", key=value) on top of a plain stdlib Logger.

    The keyword fields travel on the record as `_structured`; exc_info
    keeps its stdlib meaning.
    """

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    def log(self, level: int, event: str, **fields: Any) -> None:
        if not self._logger.isEnabledFor(level):
            return
        exc_info = fields.pop("exc_info", None)
        if exc_info is True:
            exc_info = sys.exc_info()
        record = self._logger.makeRecord(
            self._logger.name, level, "(unknown)", 0, event, (), exc_info or None
        )
        record._structured = fields  # type: ignore[attr-defined]
        self._logger.handle(record)

    debug = partialmethod(log, logging.DEBUG)
    info = partialmethod(log, logging.INFO)
    warning = partialmethod(log, logging.WARNING)
    error = partialmethod(log, logging.ERROR)
    critical = partialmethod(log, logging.CRITICAL)

    def exception(self, event: str, **fields: Any) -> None:
        fields.setdefault("exc_info", True)
        self.log(logging.ERROR, event, **fields)


# -- destinations -----------------------------------------------------------


class StderrDestination:
    def __init__(self, config: LoggingConfig | None = None) -> None:
        pass

    def create_handler(self, formatter: logging.Formatter) -> logging.Handler:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)
        return handler

    def shutdown(self) -> None:
        return None


class JsonlFileDestination:
    """One JSON document per line, appended to RUMKIT_LOG_PATH (rumkit.jsonl)."""

    def __init__(self, config: LoggingConfig) -> None:
        self.path = Path(config.jsonl_path or "rumkit.jsonl")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._handler: logging.FileHandler | None = None

    def create_handler(self, formatter: logging.Formatter) -> logging.Handler:
        self._handler = logging.FileHandler(self.path, mode="a", encoding="utf-8")
        self._handler.setFormatter(formatter)
        return self._handler

    def shutdown(self) -> None:
        if self._handler is not None:
            self._handler.close()
            self._handler = None


_FORMATTERS: dict[str, type] = {"structlog": StructlogFormatter, "stdlib": StdlibFormatter}
_DESTINATIONS: dict[str, type] = {"stderr": StderrDestination, "jsonl": JsonlFileDestination}


def register_formatter(name: str, cls: type) -> None:
    _FORMATTERS[name] = cls


def register_destination(name: str, cls: type) -> None:
    """Destination classes are instantiated with the LoggingConfig."""
    _DESTINATIONS[name] = cls


def _lookup(table: dict[str, type], kind: str, name: str, hint: str) -> type:
    try:
        return table[name]
    except KeyError:
        raise ValueError(
            f"Unknown log {kind}: {name!r}. Available: {sorted(table)}. "
            f"Add one with {hint}()."
        ) from None


# -- module state -----------------------------------------------------------

_active_formatter: LogFormatter | None = None
_active_destination: LogDestination | None = None


def _is_managed(handler: logging.Handler) -> bool:
    return getattr(handler, "_rumkit_managed", False)


def _drop_managed_handlers(root: logging.Logger) -> None:
    root.handlers = [h for h in root.handlers if not _is_managed(h)]


def setup_logging(config: LoggingConfig) -> None:
    """Install the configured formatter x destination on the root logger.

    Handlers that rumkit did not install (pytest's caplog, the host
    app's own) are left alone.
    """
    global _active_formatter, _active_destination

    formatter_cls = _lookup(_FORMATTERS, "formatter", config.log_formatter, "register_formatter")
    destination_cls = _lookup(
        _DESTINATIONS, "destination", config.log_destination, "register_destination"
    )

    formatter = formatter_cls()
    destination = destination_cls(config)

    handler = destination.create_handler(formatter.setup(config))
    handler._rumkit_managed = True  # type: ignore[attr-defined]

    root = logging.getLogger()
    _drop_managed_handlers(root)
    root.addHandler(handler)
    root.setLevel(logging.getLevelNamesMapping().get(config.log_level.upper(), logging.INFO))

    _active_formatter = formatter
    _active_destination = destination


def get_logger(name: str = "", **kwargs: Any) -> Any:
    """Logger from the active formatter; a kwargs-aware stdlib logger before setup."""
    if _active_formatter is None:
        return _StructuredStdlibLogger(logging.getLogger(name))
    return _active_formatter.get_logger(name, **kwargs)


def bind_session_context(**fields: Any) -> None:
    """Attach fields (env, service, session id) to every later structlog line."""
    import structlog

    structlog.contextvars.bind_contextvars(**redact(fields))


def clear_session_context(*keys: str) -> None:
    import structlog

    structlog.contextvars.unbind_contextvars(*keys)


def shutdown_logging() -> None:
    """Close the active destination and uninstall rumkit's handler."""
    global _active_formatter, _active_destination

    if _active_destination is not None:
        _active_destination.shutdown()
    _drop_managed_handlers(logging.getLogger())
    _active_formatter = None
    _active_destination = None
