from .common import env_flag, generate_connection_id, local_timestamp
from .logsink import configure_logging, log_msg

__all__ = ["env_flag", "generate_connection_id", "local_timestamp", "configure_logging", "log_msg"]
