"""Flash-mint liquidator handler — signs and sends liquidation transactions."""
from __future__ import annotations

import logging
from typing import Any

from ..chains.evm import EvmClient
from ..config import LiquidatorConfig
from ..errors import ExecutionError
from ..models import LiquidationParams

logger = logging.getLogger(__name__)

LIQUIDATOR_ABI = [
    {
        "inputs": [
            {"internalType": "address", "name": "_poolTokenBorrowedAddress", "type": "address"},
            {"internalType": "address", "name": "_poolTokenCollateralAddress", "type": "address"},
            {"internalType": "address", "name": "_borrower", "type": "address"},
            {"internalType": "uint256", "name": "_repayAmount", "type": "uint256"},
            {"internalType": "bool", "name": "_stakeTokens", "type": "bool"},
            {"internalType": "bytes", "name": "_path", "type": "bytes"},
        ],
        "name": "liquidate",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
]


class LiquidatorHandler:
    """Submit liquidations to the flash liquidator contract.

    Each call waits for the receipt, so callers must not run two at once.
    """

    def __init__(self, client: EvmClient, config: LiquidatorConfig, chain_id: int) -> None:
        if not config.contract:
            raise ValueError("liquidator.contract must be configured")
        self._client = client
        self._contract_address = config.contract
        self._stake_tokens = config.stake_tokens
        self._gas_limit = config.gas_limit
        self._receipt_timeout = config.receipt_timeout
        self._chain_id = chain_id
        self._account = client.w3.eth.account.from_key(config.private_key)

    async def handle_liquidation(self, params: LiquidationParams) -> Any:
        w3 = self._client.w3
        checksum = self._client.checksum
        contract = self._client.contract(self._contract_address, LIQUIDATOR_ABI)
        tx_func = contract.functions.liquidate(
            checksum(params.pool_token_borrowed),
            checksum(params.pool_token_collateral),
            checksum(params.user),
            params.amount,
            self._stake_tokens,
            params.swap_path,
        )

        logger.info("Liquidating %s (repay %d)", params.user, params.amount)
        tx_hash = b""
        try:
            nonce = await w3.eth.get_transaction_count(self._account.address, "pending")
            tx = await tx_func.build_transaction(
                {
                    "from": self._account.address,
                    "nonce": nonce,
                    "gas": self._gas_limit,
                    "chainId": self._chain_id,
                }
            )
            signed = self._account.sign_transaction(tx)
            tx_hash = await w3.eth.send_raw_transaction(signed.raw_transaction)
            logger.info("Transaction sent: 0x%s", bytes(tx_hash).hex())
            receipt = await w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self._receipt_timeout
            )
        except Exception as e:
            raise ExecutionError(
                f"Liquidation of {params.user} failed: {e}",
                user=params.user,
                tx_hash=bytes(tx_hash).hex(),
            ) from e

        if receipt.get("status") != 1:
            raise ExecutionError(
                f"Liquidation of {params.user} reverted",
                user=params.user,
                tx_hash=bytes(tx_hash).hex(),
            )
        return receipt
