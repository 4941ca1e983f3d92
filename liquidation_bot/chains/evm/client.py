"""EVM RPC client with fallback support."""
from __future__ import annotations

import logging
from typing import Any, Sequence

from web3 import AsyncWeb3
from web3.exceptions import ContractLogicError

from ...config import ChainConfig

logger = logging.getLogger(__name__)


class EvmClient:
    """AsyncWeb3 wrapper with automatic endpoint fallback for reads."""

    def __init__(self, config: ChainConfig) -> None:
        self.endpoints = list(config.rpc_endpoints)
        self.timeout = config.rpc_timeout
        self.chain_id = config.chain_id
        self.current_rpc_index = 0
        self._providers: dict[int, AsyncWeb3] = {}

    def _web3_for(self, rpc_index: int) -> AsyncWeb3:
        if rpc_index not in self._providers:
            self._providers[rpc_index] = AsyncWeb3(
                AsyncWeb3.AsyncHTTPProvider(
                    self.endpoints[rpc_index],
                    request_kwargs={"timeout": self.timeout},
                )
            )
        return self._providers[rpc_index]

    @property
    def w3(self) -> AsyncWeb3:
        """Web3 instance bound to the endpoint that last answered."""
        if not self.endpoints:
            raise RuntimeError("No RPC endpoints configured")
        return self._web3_for(self.current_rpc_index)

    @staticmethod
    def checksum(address: str) -> str:
        return AsyncWeb3.to_checksum_address(address)

    def contract(self, address: str, abi: Sequence[dict[str, Any]]) -> Any:
        return self.w3.eth.contract(address=self.checksum(address), abi=abi)

    async def call(
        self,
        address: str,
        abi: Sequence[dict[str, Any]],
        fn_name: str,
        *args: Any,
    ) -> Any:
        """Call a view function, falling back to alternative endpoints.

        Reverts are raised immediately; transport errors move on to the next
        endpoint.
        """
        if not self.endpoints:
            raise RuntimeError("No RPC endpoints configured")

        last_error: Exception | None = None
        for attempt in range(len(self.endpoints)):
            rpc_index = (self.current_rpc_index + attempt) % len(self.endpoints)
            rpc_url = self.endpoints[rpc_index]
            w3 = self._web3_for(rpc_index)

            try:
                contract = w3.eth.contract(address=self.checksum(address), abi=abi)
                result = await getattr(contract.functions, fn_name)(*args).call()
            except ContractLogicError:
                raise
            except Exception as e:
                last_error = e
                logger.warning("RPC endpoint %s failed: %s", rpc_url, e)
                if attempt < len(self.endpoints) - 1:
                    logger.info("Trying next endpoint...")
                continue

            if rpc_index != self.current_rpc_index:
                logger.info("Switched to RPC endpoint: %s", rpc_url)
                self.current_rpc_index = rpc_index
            return result

        raise RuntimeError(f"All RPC endpoints failed. Last error: {last_error}")
