"""Minimal ABIs for the Morpho-Aave lens and the Aave price oracle."""


def _address_in(name: str) -> dict:
    return {"internalType": "address", "name": name, "type": "address"}


def _uint_out(name: str, bits: int = 256) -> dict:
    return {"internalType": f"uint{bits}", "name": name, "type": f"uint{bits}"}


def _balance_fn(name: str) -> dict:
    return {
        "inputs": [_address_in("_poolToken"), _address_in("_user")],
        "name": name,
        "outputs": [
            _uint_out("balanceOnPool"),
            _uint_out("balanceInP2P"),
            _uint_out("totalBalance"),
        ],
        "stateMutability": "view",
        "type": "function",
    }


LENS_ABI = [
    {
        "inputs": [_address_in("_user")],
        "name": "getUserHealthFactor",
        "outputs": [_uint_out("healthFactor")],
        "stateMutability": "view",
        "type": "function",
    },
    _balance_fn("getCurrentSupplyBalanceInOf"),
    _balance_fn("getCurrentBorrowBalanceInOf"),
    {
        "inputs": [_address_in("_poolToken")],
        "name": "getMarketConfiguration",
        "outputs": [
            {"internalType": "address", "name": "underlying", "type": "address"},
            {"internalType": "bool", "name": "isCreated", "type": "bool"},
            {"internalType": "bool", "name": "isP2PDisabled", "type": "bool"},
            {"internalType": "bool", "name": "isPaused", "type": "bool"},
            {"internalType": "bool", "name": "isPartiallyPaused", "type": "bool"},
            _uint_out("reserveFactor", 16),
            _uint_out("p2pIndexCursor", 16),
            _uint_out("loanToValue"),
            _uint_out("liquidationThreshold"),
            _uint_out("liquidationBonus"),
            _uint_out("decimals"),
        ],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "getAllMarkets",
        "outputs": [
            {"internalType": "address[]", "name": "marketsCreated", "type": "address[]"}
        ],
        "stateMutability": "view",
        "type": "function",
    },
]

ORACLE_ABI = [
    {
        "inputs": [_address_in("asset")],
        "name": "getAssetPrice",
        "outputs": [_uint_out("")],
        "stateMutability": "view",
        "type": "function",
    },
]
