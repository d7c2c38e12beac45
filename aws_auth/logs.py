import logging
from typing import Any, Union

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

LoggerLike = Union[logging.Logger, logging.LoggerAdapter]


def configure_logging(level: str = "INFO") -> None:
    """Set the root log level, adding a stream handler if none is installed.

    The Lambda runtime installs its own handler on the root logger, in which
    case only the level is changed.
    """
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT)
    root.setLevel(level.upper())


class InvocationLogger(logging.LoggerAdapter):
    """Prefix every message with the invocation it belongs to."""

    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return f"[{self.extra['request_id']}] {msg}", kwargs


def invocation_logger(request_id: str, **extra: str) -> InvocationLogger:
    """Build a logger scoped to a single custom resource invocation."""
    return InvocationLogger(
        logging.getLogger("aws_auth"), {"request_id": request_id, **extra}
    )
