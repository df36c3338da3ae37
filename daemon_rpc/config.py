"""
Configuration settings for the RPC client
"""
import os
from dataclasses import dataclass
from typing import Any, Dict

DEFAULT_HOST = "http://localhost:8232"


@dataclass(frozen=True)
class ClientConfig:
    """Endpoint, credentials and transport settings for a client"""
    host: str = DEFAULT_HOST
    user: str = ""
    password: str = ""
    timeout_seconds: float = 30.0
    enable_tracing: bool = True
    service_name: str = "daemon_rpc.client"

    @classmethod
    def from_env(cls, prefix: str = "DAEMON_RPC_") -> "ClientConfig":
        """Create config from environment variables"""
        timeout = os.getenv(f"{prefix}TIMEOUT")
        try:
            timeout_seconds = float(timeout) if timeout else cls.timeout_seconds
        except ValueError:
            raise ValueError(f"Invalid {prefix}TIMEOUT: {timeout!r}") from None
        if timeout_seconds <= 0:
            raise ValueError(f"Invalid {prefix}TIMEOUT: {timeout!r}")

        return cls(
            host=os.getenv(f"{prefix}HOST", DEFAULT_HOST),
            user=os.getenv(f"{prefix}USER", ""),
            password=os.getenv(f"{prefix}PASS", ""),
            timeout_seconds=timeout_seconds,
            enable_tracing=os.getenv(f"{prefix}TRACING", "1").lower() not in ("0", "false", "no"),
        )

    @classmethod
    def default(cls) -> "ClientConfig":
        """Create default configuration"""
        return cls()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging, without the password"""
        return {
            "host": self.host,
            "user": self.user,
            "has_password": bool(self.password),
            "timeout_seconds": self.timeout_seconds,
            "enable_tracing": self.enable_tracing,
            "service_name": self.service_name,
        }
