from .config import add_runtime_file_handler, get_logger, setup_logging

__all__ = ["setup_logging", "get_logger", "add_runtime_file_handler"]
