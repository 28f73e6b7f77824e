from __future__ import annotations

import logging
import typing as tp

__all__ = ("LogSink", "NullSink", "LoggingSink")


class LogSink(tp.Protocol):
    """
    Receives the structured events the cache transports emit.

    Every method takes a message plus arbitrary key-values. `bind` returns a
    derived sink that attaches the given key-values to every event.
    """

    def debug(self, msg: str, **kwargs: tp.Any) -> None: ...

    def info(self, msg: str, **kwargs: tp.Any) -> None: ...

    def error(self, msg: str, **kwargs: tp.Any) -> None: ...

    def bind(self, **kwargs: tp.Any) -> "LogSink": ...


class NullSink:
    """A sink that drops every event."""

    def debug(self, msg: str, **kwargs: tp.Any) -> None:
        return

    def info(self, msg: str, **kwargs: tp.Any) -> None:
        return

    def error(self, msg: str, **kwargs: tp.Any) -> None:
        return

    def bind(self, **kwargs: tp.Any) -> "NullSink":
        return self


class LoggingSink:
    """
    A sink that forwards events to a standard library logger.

    Key-values are rendered as `key=value` pairs after the message and are
    also available to handlers as `record.cachette`.

    :param logger: Logger that receives the events, defaults to the "cachette" logger
    :type logger: tp.Optional[logging.Logger], optional
    """

    def __init__(
        self,
        logger: tp.Optional[logging.Logger] = None,
        context: tp.Optional[tp.Dict[str, tp.Any]] = None,
    ) -> None:
        self._logger = logger if logger is not None else logging.getLogger("cachette")
        self._context: tp.Dict[str, tp.Any] = dict(context or {})

    def debug(self, msg: str, **kwargs: tp.Any) -> None:
        self._log(logging.DEBUG, msg, kwargs)

    def info(self, msg: str, **kwargs: tp.Any) -> None:
        self._log(logging.INFO, msg, kwargs)

    def error(self, msg: str, **kwargs: tp.Any) -> None:
        self._log(logging.ERROR, msg, kwargs)

    def bind(self, **kwargs: tp.Any) -> "LoggingSink":
        return LoggingSink(self._logger, {**self._context, **kwargs})

    def _log(self, level: int, msg: str, kwargs: tp.Dict[str, tp.Any]) -> None:
        if not self._logger.isEnabledFor(level):
            return
        fields = {**self._context, **kwargs}
        rendered = " ".join(f"{key}={value}" for key, value in fields.items())
        self._logger.log(
            level,
            f"{msg} {rendered}" if rendered else msg,
            extra={"cachette": fields},
        )
