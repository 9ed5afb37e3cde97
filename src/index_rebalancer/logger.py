import logging
import sys
import json
import os
import gzip
import shutil
from datetime import datetime
from logging.handlers import TimedRotatingFileHandler
from typing import Optional, TextIO
from rebalancer_config import LoggingConfig

# Attributes every LogRecord carries; anything else came in through `extra`
_STANDARD_ATTRS = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename',
    'module', 'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process', 'taskName', 'exc_info',
    'exc_text', 'stack_info', 'message',
}


class CompressingTimedRotatingFileHandler(TimedRotatingFileHandler):
    """TimedRotatingFileHandler that gzips rotated files"""

    def doRollover(self):
        super().doRollover()

        dir_name, base_name = os.path.split(self.baseFilename)
        try:
            for file_name in os.listdir(dir_name):
                if file_name.startswith(base_name) and not file_name.endswith('.gz') and file_name != base_name:
                    full_path = os.path.join(dir_name, file_name)
                    with open(full_path, 'rb') as f_in:
                        with gzip.open(f'{full_path}.gz', 'wb') as f_out:
                            shutil.copyfileobj(f_in, f_out)
                    os.remove(full_path)
        except OSError as e:
            # Rollover itself succeeded; keep logging
            print(f"Error during log compression: {e}", file=sys.stderr)

    def getFilesToDelete(self):
        # Rotated files end in .gz once compressed, which the base matcher skips
        dir_name, base_name = os.path.split(self.baseFilename)
        prefix = base_name + "."
        rotated = sorted(
            os.path.join(dir_name, name) for name in os.listdir(dir_name)
            if name.startswith(prefix)
        )
        if len(rotated) <= self.backupCount:
            return []
        return rotated[:len(rotated) - self.backupCount]


class StructuredFormatter(logging.Formatter):
    """Text or JSON-lines formatter that keeps fields passed via `extra`"""

    def __init__(self, output_format: str = 'text'):
        super().__init__()
        self.output_format = output_format

    def format(self, record):
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage()
        }

        extras = {}
        for key, value in record.__dict__.items():
            if key in _STANDARD_ATTRS or key.startswith('_'):
                continue
            extras[key] = value.strftime('%Y-%m-%d %H:%M:%S') if isinstance(value, datetime) else value

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        if self.output_format == 'json':
            return json.dumps({**log_data, **extras}, default=str)

        base_msg = f"{log_data['timestamp']} - {log_data['logger']} - {log_data['level']} - {log_data['message']}"
        for key, value in extras.items():
            base_msg += f" [{key}={value}]"
        if 'exception' in log_data:
            base_msg += "\n" + log_data['exception']
        return base_msg


def configure_logging(config: Optional[LoggingConfig] = None, stream: Optional[TextIO] = None) -> logging.Logger:
    """Configure the root logger with structured console and optional file output"""
    config = config or LoggingConfig()
    root_logger = logging.getLogger()

    # Clear existing handlers to avoid duplicates
    root_logger.handlers.clear()

    root_logger.setLevel(getattr(logging, config.level))
    formatter = StructuredFormatter(config.format)

    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if config.file_path:
        log_dir = os.path.dirname(config.file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = CompressingTimedRotatingFileHandler(
            filename=config.file_path,
            when='midnight',
            interval=1,
            backupCount=config.retained_file_count,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    return root_logger
