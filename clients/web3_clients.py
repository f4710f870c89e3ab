# MIT License
#
# Copyright (c) 2018 Evgeny Medvedev, evge.medvedev@gmail.com
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.
#
# Modified by: Dang Tien Cuong, 2025
# Change Description: Refactored from auto.py. Per-chain AsyncWeb3 clients with chain ID validation.

from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

import aiohttp
from web3 import AsyncHTTPProvider, AsyncWeb3

from config.settings import RpcSettings
from constants.constants import ARB_NOVA_CHAIN_ID, ARB_ONE_CHAIN_ID, CHAIN_NAMES, MAINNET_CHAIN_ID
from utils.exceptions import ChainIdMismatchError, ConfigurationError
from utils.logger_utils import get_logger

logger = get_logger("Web3 Clients")

DEFAULT_TIMEOUT = 60


def get_web3_from_uri(uri_string: str, timeout: int = DEFAULT_TIMEOUT) -> AsyncWeb3:
    """
    Creates an AsyncWeb3 client based on the URI scheme.
    Currently supports HTTP/HTTPS.
    """
    uri = urlparse(uri_string)

    if uri.scheme == "http" or uri.scheme == "https":
        request_kwargs = {"timeout": aiohttp.ClientTimeout(total=timeout)}
        return AsyncWeb3(AsyncHTTPProvider(uri_string, request_kwargs=request_kwargs))
    else:
        raise ValueError(f"Unknown uri scheme {uri_string}. Supported: http, https")


@dataclass
class Web3Clients:
    primary: AsyncWeb3
    l1: AsyncWeb3
    arb1: AsyncWeb3
    nova: AsyncWeb3


def create_web3_clients(rpc_settings: RpcSettings) -> Web3Clients:
    """Builds one client per configured endpoint. Every endpoint is required."""
    urls = {
        "RPC_URL": rpc_settings.rpc_url,
        "L1_RPC_URL": rpc_settings.l1_rpc_url,
        "ARB1_RPC_URL": rpc_settings.arb1_rpc_url,
        "NOVA_RPC_URL": rpc_settings.nova_rpc_url,
    }
    missing = [name for name, url in urls.items() if not url]
    if missing:
        raise ConfigurationError(f"Missing RPC endpoint(s): {', '.join(missing)}")

    return Web3Clients(
        primary=get_web3_from_uri(rpc_settings.rpc_url, rpc_settings.timeout),
        l1=get_web3_from_uri(rpc_settings.l1_rpc_url, rpc_settings.timeout),
        arb1=get_web3_from_uri(rpc_settings.arb1_rpc_url, rpc_settings.timeout),
        nova=get_web3_from_uri(rpc_settings.nova_rpc_url, rpc_settings.timeout),
    )


def ensure_chain_id(actual: int, expected: int, label: str, message: Optional[str] = None) -> None:
    if actual != expected:
        raise ChainIdMismatchError(label, expected, actual, message)


async def validate_network(w3: AsyncWeb3, expected: int, label: str, message: Optional[str] = None) -> int:
    chain_id = await w3.eth.chain_id
    ensure_chain_id(chain_id, expected, label, message)
    logger.debug(f"{label} is on {CHAIN_NAMES.get(chain_id, chain_id)}")
    return chain_id


async def validate_web3_clients(clients: Web3Clients) -> int:
    """
    Fails fast when a chain specific endpoint points at the wrong network.
    Returns the primary provider's chain ID.
    """
    await validate_network(clients.l1, MAINNET_CHAIN_ID, "L1_RPC", "L1_RPC need to be Mainnet")
    await validate_network(clients.arb1, ARB_ONE_CHAIN_ID, "ARB1_RPC", "ARB1_RPC need to be Arbitrum")
    await validate_network(clients.nova, ARB_NOVA_CHAIN_ID, "NOVA_RPC", "NOVA_RPC need to be Nova")

    primary_chain_id = await clients.primary.eth.chain_id
    logger.info(f"Primary RPC chain ID: {primary_chain_id}")
    return primary_chain_id


def client_for_chain(clients: Web3Clients, chain_id: int) -> AsyncWeb3:
    if chain_id == MAINNET_CHAIN_ID:
        return clients.l1
    if chain_id == ARB_ONE_CHAIN_ID:
        return clients.arb1
    if chain_id == ARB_NOVA_CHAIN_ID:
        return clients.nova
    raise ConfigurationError(f"No RPC client configured for chain {chain_id}")
