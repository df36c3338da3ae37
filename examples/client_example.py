#!/usr/bin/env python
"""
RPC Client Example

Demonstrates generic and typed calls against a running daemon, with endpoint
and credentials taken from DAEMON_RPC_* environment variables.
"""

import logging
import sys
from dataclasses import dataclass, field
from typing import List

from google.protobuf.wrappers_pb2 import Int64Value

from daemon_rpc import Client, ClientConfig, Request, Response, RpcClientError
from daemon_rpc.telemetry.metrics import setup_metrics
from daemon_rpc.telemetry.tracer import setup_tracer

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@dataclass
class BlockchainInfo:
    chain: str
    blocks: int
    headers: int = 0
    softforks: List[dict] = field(default_factory=list)


def main():
    config = ClientConfig.from_env()
    logger.info(f"Using config: {config.to_dict()}")

    if config.enable_tracing:
        setup_tracer(config.service_name)
        setup_metrics(config.service_name)

    with Client.from_config(config) as client:
        try:
            # Generic result
            count = client.call("getblockcount")
            logger.info(f"getblockcount -> {count.result!r}")

            # Typed result via a wrapper message
            typed_count = client.call("getblockcount", result_type=Int64Value)
            logger.info(f"getblockcount as Int64Value -> {typed_count.result.value}")

            # Explicit request and destination
            out = Response(result_type=BlockchainInfo)
            client.do(Request(method="getblockchaininfo", id=42, jsonrpc="1.0"), out)
            if out.error is not None:
                logger.error(f"Daemon returned {out.error}")
                return 1
            logger.info(f"chain={out.result.chain} blocks={out.result.blocks}")
        except RpcClientError as e:
            logger.error(f"Call failed: {e}")
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
