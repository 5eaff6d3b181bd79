"""Configuration management for peerbind."""

import json
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, IPvAnyAddress, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models.common import Protocol


class BindingsConfig(BaseModel):
    """Which interfaces, protocols and addresses a node should bind to."""

    interfaces: List[str] = Field(default_factory=list, description="Interface names to restrict discovery to (e.g., ['eth0']). If empty, all interfaces are used.")
    protocols: List[Protocol] = Field(default_factory=list, description="Protocol families to accept ('IPv4', 'IPv6'). If empty, all protocols are used.")
    addresses: List[IPvAnyAddress] = Field(default_factory=list, description="Addresses to bind in addition to discovered ones.")
    listen_broadcast: bool = Field(default=True, description="Collect and listen on broadcast addresses.")

    outside_address: Optional[IPvAnyAddress] = Field(default=None, description="Externally visible address, e.g. after NAT mapping.")
    outside_tcp_port: int = Field(default=0, ge=0, le=65535, description="Externally visible TCP port. 0 means unset.")
    outside_udp_port: int = Field(default=0, ge=0, le=65535, description="Externally visible UDP port. 0 means unset.")

    @model_validator(mode="after")
    def check_outside_endpoint(self) -> "BindingsConfig":
        ports_set = self.outside_tcp_port > 0 and self.outside_udp_port > 0
        ports_unset = self.outside_tcp_port == 0 and self.outside_udp_port == 0
        if self.outside_address is None and not ports_unset:
            raise ValueError("outside ports require an outside_address")
        if self.outside_address is not None and not ports_set:
            raise ValueError("outside_address requires both outside ports to be > 0")
        return self

class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="json", description="Log format ('json' or 'console')")
    file: Optional[Path] = Field(default=None, description="Log file path")


class Config(BaseSettings):
    """Main configuration for peerbind. Loads from environment variables prefixed with PEERBIND_."""

    model_config = SettingsConfigDict(
        env_prefix='PEERBIND_',
        env_nested_delimiter='__', # e.g., PEERBIND_BINDINGS__LISTEN_BROADCAST
        extra='ignore',
        env_file='.env',
        env_file_encoding='utf-8'
    )

    bindings: BindingsConfig = Field(default_factory=BindingsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    node_name: str = Field(default="peerbind-node", description="Name of this node, used in log context.")

    @classmethod
    def from_file(cls, file_path: Path) -> "Config":
        """Create configuration strictly from a JSON file.
        Environment variables are not layered on top.
        """
        with open(file_path) as f:
            config_data = json.load(f)
        return cls.model_validate(config_data)
