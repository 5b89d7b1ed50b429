"""Configuration for the Helios testnet toolkit."""

from env_loader import get_key

# Network: RPC list with failover, HELIOS_RPC_URL takes priority
CHAIN_ID = 42000
CHAIN_NAME = "Helios Testnet"
NATIVE_SYMBOL = "HLS"
_DEFAULT_RPCS = ["https://testnet1.helioschainlabs.org"]
_RPC_OVERRIDE = get_key("HELIOS_RPC_URL", required=False)
RPC_URLS = [_RPC_OVERRIDE] + _DEFAULT_RPCS if _RPC_OVERRIDE else _DEFAULT_RPCS
RPC_TIMEOUT = 15

# Precompile contracts
BRIDGE_CONTRACT = "0x0000000000000000000000000000000000000900"
STAKING_CONTRACT = "0x0000000000000000000000000000000000000800"
DISTRIBUTION_CONTRACT = "0x0000000000000000000000000000000000000801"  # reward claims
GOVERNANCE_CONTRACT = "0x0000000000000000000000000000000000000805"

# Tokens
HLS_TOKEN = "0xd4949664cd82660aae99bedc034a0dea8a0bd517"
STAKING_DENOM = "ahelios"

# Swap: HLS -> WETH through the Solariswap router
SWAP_ROUTER = "0xe80ee0f963e9f636035b36bb1a40d0609f437c45"
WETH_TOKEN = "0x80b5a32e4f032b2a058b4f29ec95eefeeb87adcd"
SWAP_QUOTE_URL = "https://api.solariswap.finance/v1/quote"
SWAP_DEADLINE_SECONDS = 600

# Portal API (leaderboard); token from the testnet web login
PORTAL_API_URL = "https://testnet-api.helioschain.network/api"
PORTAL_AUTH_TOKEN = get_key("HELIOS_AUTH_TOKEN", required=False)

# Bridge destinations reachable from Helios
BRIDGE_CHAINS = {
    11155111: {"name": "Sepolia", "explorer": "https://sepolia.etherscan.io"},
    137: {"name": "Polygon", "explorer": "https://polygonscan.com"},
    56: {"name": "BSC", "explorer": "https://bscscan.com"},
}
DEFAULT_BRIDGE_CHAIN = 11155111
BRIDGE_FEE_WEI = 500000000000000000  # 0.5 HLS

# Gas limits per call kind
GAS_LIMITS = {
    "bridge": 1500000,
    "delegate": 1500000,
    "claim": 1500000,
    "vote": 1500000,
    "create_proposal": 1500000,
    "approve": 100000,
    "swap": 1500000,
}

# Governance
PROPOSAL_DEPOSIT_WEI = 1000000000000000000  # 1 HLS
VOTING_STATUS = "VOTING_PERIOD"

# Staking: fallback validator when no active one can be fetched (optional)
DEFAULT_VALIDATOR = get_key("HELIOS_DEFAULT_VALIDATOR", required=False)
ACTIVE_VALIDATOR_STATUS = 3

# Random amount ranges (HLS)
BRIDGE_AMOUNT_RANGE = (0.05, 0.15)
DELEGATION_AMOUNT_RANGE = (0.01, 0.1)
SWAP_AMOUNT_RANGE = (0.5, 7.0)
