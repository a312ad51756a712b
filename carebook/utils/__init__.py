from .logger import app_logger

__all__ = ["app_logger"]
