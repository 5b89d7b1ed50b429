"""Helios chain reader: RPC failover, nonces, balances, governance/staking queries,
swap quotes and the portal leaderboard.

Read-only: supplies the parameters calldata builders need. Nothing here
signs or broadcasts transactions.
"""

import logging
from typing import Dict, List, Optional

import requests
from web3 import Web3

import helios_config

logger = logging.getLogger(__name__)

ERC20_ABI = [
    {
        "inputs": [{"name": "spender", "type": "address"}, {"name": "amount", "type": "uint256"}],
        "name": "approve",
        "outputs": [{"name": "", "type": "bool"}],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [{"name": "owner", "type": "address"}, {"name": "spender", "type": "address"}],
        "name": "allowance",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]


class RPCError(RuntimeError):
    """RPC endpoint unreachable or returned a JSON-RPC error."""


class HeliosRPC:
    """Connection to the Helios testnet with endpoint failover."""

    def __init__(self, rpc_urls: Optional[List[str]] = None, timeout: int = helios_config.RPC_TIMEOUT):
        self.rpc_urls = list(rpc_urls or helios_config.RPC_URLS)
        self.timeout = timeout
        self._web3: Optional[Web3] = None
        self._request_id = 0

    def get_web3(self) -> Web3:
        """Return a connected Web3 instance, trying each RPC in order."""
        if self._web3 is not None:
            if self._web3.is_connected():
                return self._web3
            self._web3 = None

        for rpc_url in self.rpc_urls:
            try:
                w3 = Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": self.timeout}))
                if w3.is_connected():
                    self._web3 = w3
                    logger.info(f"Connected to {helios_config.CHAIN_NAME} via {rpc_url}")
                    return w3
            except Exception as e:
                logger.warning(f"RPC failed ({rpc_url}): {str(e)[:80]}")

        raise RPCError(f"All RPCs failed for {helios_config.CHAIN_NAME}")

    def get_nonce(self, address: str) -> int:
        w3 = self.get_web3()
        return w3.eth.get_transaction_count(Web3.to_checksum_address(address))

    def get_balance(self, address: str) -> int:
        """Native balance in wei."""
        w3 = self.get_web3()
        return w3.eth.get_balance(Web3.to_checksum_address(address))

    def call(self, method: str, params: list):
        """Raw JSON-RPC call for Helios-specific methods web3 doesn't know."""
        self._request_id += 1
        payload = {"jsonrpc": "2.0", "method": method, "params": params, "id": self._request_id}
        last_exc = None
        for rpc_url in self.rpc_urls:
            try:
                resp = requests.post(rpc_url, json=payload, timeout=self.timeout)
                resp.raise_for_status()
                data = resp.json()
            except (requests.RequestException, ValueError) as exc:
                logger.warning("%s failed on %s: %s", method, rpc_url, exc)
                last_exc = exc
                continue
            if data.get("error"):
                raise RPCError(f"{method}: {data['error'].get('message', data['error'])}")
            return data.get("result")
        raise RPCError(f"{method} failed on every RPC") from last_exc

    # --- Governance ---

    def get_proposals(self, page: int = 1, size: int = 10) -> List[Dict]:
        return self.call("eth_getProposalsByPageAndSize", [hex(page), hex(size)]) or []

    def get_voting_proposal(self) -> Optional[Dict]:
        """First proposal currently in its voting period, or None."""
        for proposal in self.get_proposals():
            if proposal.get("status") == helios_config.VOTING_STATUS:
                logger.info(f"Found active proposal: ID {proposal.get('id')} - {proposal.get('title')}")
                return proposal
        return None

    # --- Staking ---

    def get_validators(self, page: int = 1, size: int = 100) -> List[Dict]:
        return self.call("eth_getValidatorsByPageAndSize", [hex(page), hex(size)]) or []

    def get_active_validators(self) -> List[Dict]:
        return [
            v for v in self.get_validators()
            if v.get("status") == helios_config.ACTIVE_VALIDATOR_STATUS and not v.get("jailed")
        ]

    # --- Tokens / swap ---

    def get_gas_price(self) -> int:
        return self.get_web3().eth.gas_price

    def get_allowance(self, token: str, owner: str, spender: str) -> int:
        w3 = self.get_web3()
        contract = w3.eth.contract(address=Web3.to_checksum_address(token), abi=ERC20_ABI)
        return contract.functions.allowance(
            Web3.to_checksum_address(owner), Web3.to_checksum_address(spender)
        ).call()

    def get_swap_quote(self, token_in: str, token_out: str, amount_in: int) -> Dict:
        """Exact-input quote from the Solariswap API (carries the pool fee tier)."""
        params = {"tokenIn": token_in, "tokenOut": token_out, "amountIn": str(amount_in), "mode": "exactInput"}
        try:
            resp = requests.get(helios_config.SWAP_QUOTE_URL, params=params, timeout=self.timeout)
            resp.raise_for_status()
            return resp.json()
        except (requests.RequestException, ValueError) as exc:
            raise RPCError(f"Swap quote failed: {exc}") from exc

    # --- Portal ---

    def get_user_rank(self, auth_token: str) -> Dict:
        """Leaderboard standing for the wallet behind auth_token."""
        url = f"{helios_config.PORTAL_API_URL}/leaderboard/user-rank"
        headers = {
            "Authorization": f"Bearer {auth_token}",
            "Accept": "application/json, text/plain, */*",
            "Origin": "https://testnet.helioschain.network",
            "Referer": "https://testnet.helioschain.network/",
        }
        try:
            resp = requests.get(url, headers=headers, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except requests.HTTPError as exc:
            if exc.response is not None and exc.response.status_code == 401:
                raise RPCError("Leaderboard auth failed: token may be expired") from exc
            raise RPCError(f"Leaderboard request failed: {exc}") from exc
        except (requests.RequestException, ValueError) as exc:
            raise RPCError(f"Leaderboard request failed: {exc}") from exc

        if not data.get("success"):
            raise RPCError(f"Unexpected leaderboard response: {data}")
        return {
            "globalRank": data.get("globalRank"),
            "contributorRank": data.get("contributorRank"),
            "userXP": data.get("userXP"),
            "userContributionXP": data.get("userContributionXP"),
            "discordUsername": data.get("discordUsername"),
        }
