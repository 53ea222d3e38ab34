# funcbind/utils/enhanced_logging.py
import json
import inspect
import logging
from datetime import datetime
from typing import Dict, Any, Optional


class EnhancedLogger:
    """Logger that attaches context and caller information to each record as JSON."""

    def __init__(self, name: str, context: Optional[Dict[str, Any]] = None):
        self._logger = logging.getLogger(name)
        self._context: Dict[str, Any] = dict(context or {})

    def with_context(self, **context) -> 'EnhancedLogger':
        """Create a new logger with added context."""
        return EnhancedLogger(self._logger.name, {**self._context, **context})

    @property
    def context(self) -> Dict[str, Any]:
        return dict(self._context)

    def _format_message(self, msg: str, extra: Optional[Dict[str, Any]] = None) -> str:
        # Two frames up: the logging method, then its caller
        frame = inspect.currentframe().f_back.f_back
        caller = f"{frame.f_code.co_filename.split('/')[-1]}:{frame.f_code.co_name}:{frame.f_lineno}"

        context = {**self._context}
        if extra:
            context.update(extra)

        log_data = {
            "timestamp": datetime.now().isoformat(),
            "message": msg,
            "caller": caller,
        }
        if context:
            log_data["context"] = context

        return json.dumps(log_data, default=str)

    def debug(self, msg: str, *args, **kwargs) -> None:
        extra = kwargs.pop("extra", None)
        self._logger.debug(self._format_message(msg, extra), *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        extra = kwargs.pop("extra", None)
        self._logger.info(self._format_message(msg, extra), *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        extra = kwargs.pop("extra", None)
        self._logger.warning(self._format_message(msg, extra), *args, **kwargs)

    def error(self, msg: str, *args, **kwargs) -> None:
        extra = kwargs.pop("extra", None)
        self._logger.error(self._format_message(msg, extra), *args, **kwargs)

    def exception(self, msg: str, *args, **kwargs) -> None:
        """Log an error message together with the active exception."""
        extra = kwargs.pop("extra", None)
        self._logger.exception(self._format_message(msg, extra), *args, **kwargs)

    @property
    def name(self) -> str:
        return self._logger.name
