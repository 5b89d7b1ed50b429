"""Helios Actions: turns farming intents into unsigned transaction params.

Each action resolves its inputs (amount conversion, validator / proposal
lookup via HeliosRPC), builds calldata through the calldata codec and
returns a web3-style tx dict:

    {"from", "to", "data", "gas", "nonce", "chainId", "value"}

Swap txs are built with web3 contract objects and also carry "gasPrice".

Signing and broadcasting belong to whatever consumes these dicts.
Builder errors (ValidationError / EncodingError) propagate to the caller.
"""

import logging
import random
import time
from typing import Dict, List, Optional

from web3 import Web3

import calldata
import helios_config
import proposal_content
from abi_words import to_int
from helios_rpc import ERC20_ABI, RPCError

logger = logging.getLogger(__name__)

DEFAULT_CLAIM_ID = 10

SWAP_ROUTER_ABI = [
    {
        "inputs": [
            {
                "components": [
                    {"name": "tokenIn", "type": "address"},
                    {"name": "tokenOut", "type": "address"},
                    {"name": "fee", "type": "uint24"},
                    {"name": "recipient", "type": "address"},
                    {"name": "deadline", "type": "uint256"},
                    {"name": "amountIn", "type": "uint256"},
                    {"name": "amountOutMinimum", "type": "uint256"},
                    {"name": "sqrtPriceLimitX96", "type": "uint160"},
                ],
                "name": "params",
                "type": "tuple",
            }
        ],
        "name": "exactInputSingle",
        "outputs": [{"name": "amountOut", "type": "uint256"}],
        "stateMutability": "payable",
        "type": "function",
    }
]

# Offline instance: contract objects built from it only encode calldata
_ENCODER = Web3()


def random_amount(low: float, high: float, rng=random) -> float:
    """Random HLS amount in [low, high] rounded to 3 decimals."""
    return round(rng.uniform(low, high), 3)


class HeliosActions:
    """Builds transaction params for one wallet address."""

    def __init__(self, rpc, address: str):
        """rpc: a HeliosRPC (or anything with get_nonce / get_active_validators / get_voting_proposal)."""
        self.rpc = rpc
        self.address = Web3.to_checksum_address(address)
        self._next_nonce: Optional[int] = None

    def _nonce(self) -> int:
        # Fetched once, then incremented locally so a batch gets consecutive nonces
        if self._next_nonce is None:
            self._next_nonce = self.rpc.get_nonce(self.address)
        nonce = self._next_nonce
        self._next_nonce += 1
        return nonce

    def reset_nonce(self):
        self._next_nonce = None

    def _tx(self, kind: str, to: str, data: str, value: int = 0) -> Dict:
        return {
            "from": self.address,
            "to": Web3.to_checksum_address(to),
            "data": data,
            "gas": helios_config.GAS_LIMITS[kind],
            "nonce": self._nonce(),
            "chainId": helios_config.CHAIN_ID,
            "value": value,
        }

    # ------------------------------------------------------------------ #
    #  Bridge                                                              #
    # ------------------------------------------------------------------ #

    def bridge(self, amount_hls, recipient: Optional[str] = None,
               dest_chain_id: int = helios_config.DEFAULT_BRIDGE_CHAIN) -> Dict:
        """Bridge HLS to another chain. Recipient defaults to this wallet."""
        if dest_chain_id not in helios_config.BRIDGE_CHAINS:
            raise calldata.ValidationError("Bridge", [f"Unsupported destination chain: {dest_chain_id}"])

        recipient = recipient or self.address.lower()
        amount_wei = Web3.to_wei(amount_hls, "ether")
        data = calldata.build_bridge_calldata(
            dest_chain_id,
            helios_config.HLS_TOKEN,
            amount_wei,
            helios_config.BRIDGE_FEE_WEI,
            recipient,
        )
        chain_name = helios_config.BRIDGE_CHAINS[dest_chain_id]["name"]
        logger.info(f"Bridge {amount_hls} HLS -> {chain_name} for {recipient[:12]}...")
        return self._tx("bridge", helios_config.BRIDGE_CONTRACT, data)

    # ------------------------------------------------------------------ #
    #  Staking                                                             #
    # ------------------------------------------------------------------ #

    def pick_validator(self, rng=random) -> Optional[str]:
        """Random active validator, falling back to the configured default."""
        try:
            active = self.rpc.get_active_validators()
        except Exception as e:
            logger.warning(f"Validator fetch failed, using default: {e}")
            active = []

        if active:
            chosen = rng.choice(active)
            logger.info(f"Selected validator: {chosen.get('moniker', '?')} ({chosen['validatorAddress']})")
            return chosen["validatorAddress"]
        return helios_config.DEFAULT_VALIDATOR

    def delegate(self, amount_hls, validator: Optional[str] = None, denom: Optional[str] = None,
                 rng=random) -> Dict:
        validator = validator or self.pick_validator(rng)
        if not validator:
            raise calldata.ValidationError("Delegate", ["No validator available"])

        amount_wei = Web3.to_wei(amount_hls, "ether")
        data = calldata.build_delegate_calldata(
            self.address, validator, amount_wei, denom or helios_config.STAKING_DENOM)
        logger.info(f"Delegate {amount_hls} HLS to {validator[:12]}...")
        return self._tx("delegate", helios_config.STAKING_CONTRACT, data)

    def claim_rewards(self, amount_or_id=DEFAULT_CLAIM_ID) -> Dict:
        data = calldata.build_claim_calldata(self.address, amount_or_id)
        logger.info(f"Claim rewards ({amount_or_id})")
        return self._tx("claim", helios_config.DISTRIBUTION_CONTRACT, data)

    # ------------------------------------------------------------------ #
    #  Governance                                                          #
    # ------------------------------------------------------------------ #

    def vote(self, proposal_id=None, support: bool = True, reason: str = "") -> Optional[Dict]:
        """Vote on proposal_id, or on the active proposal. None if nothing to vote on."""
        if proposal_id is None:
            proposal = self.rpc.get_voting_proposal()
            if not proposal:
                logger.warning("No active voting proposal")
                return None
            proposal_id = int(proposal["id"])

        reason = reason or f"Vote on proposal {proposal_id}"
        data = calldata.build_vote_calldata(self.address, proposal_id, support, reason)
        logger.info(f"Vote {'YES' if support else 'NO'} on proposal {proposal_id}")
        return self._tx("vote", helios_config.GOVERNANCE_CONTRACT, data)

    def create_proposal(self, deposit_wei=None, title: Optional[str] = None,
                        description: Optional[str] = None, messages=None, rng=random) -> Dict:
        """Create a proposal; unspecified content is randomized. Deposit is sent as value."""
        deposit_wei = helios_config.PROPOSAL_DEPOSIT_WEI if deposit_wei is None else deposit_wei
        rand_title, rand_description, rand_messages = proposal_content.random_proposal(self.address, rng)
        title = rand_title if title is None else title
        description = rand_description if description is None else description
        messages = rand_messages if messages is None else messages

        data = calldata.build_create_proposal_calldata(title, description, messages, deposit_wei)
        logger.info(f'Create proposal: "{title}"')
        return self._tx("create_proposal", helios_config.GOVERNANCE_CONTRACT, data,
                        value=to_int(deposit_wei))

    # ------------------------------------------------------------------ #
    #  Swap                                                                #
    # ------------------------------------------------------------------ #

    def _contract_tx(self, kind: str, function, gas_price: int) -> Dict:
        return function.build_transaction({
            "from": self.address,
            "nonce": self._nonce(),
            "chainId": helios_config.CHAIN_ID,
            "gas": helios_config.GAS_LIMITS[kind],
            "gasPrice": gas_price,
            "value": 0,
        })

    def swap(self, amount_hls, token_in: str = helios_config.HLS_TOKEN,
             token_out: str = helios_config.WETH_TOKEN) -> List[Dict]:
        """Swap via the router's exactInputSingle.

        Returns [approve, swap] when the router allowance is short of the
        amount, otherwise [swap]. The pool fee tier comes from the quote API.
        """
        amount_wei = Web3.to_wei(amount_hls, "ether")
        if amount_wei <= 0:
            raise calldata.ValidationError("Swap", [f"Invalid amount: {amount_hls!r}"])

        router_addr = Web3.to_checksum_address(helios_config.SWAP_ROUTER)
        token_in = Web3.to_checksum_address(token_in)
        token_out = Web3.to_checksum_address(token_out)

        quote = self.rpc.get_swap_quote(token_in, token_out, amount_wei)
        try:
            fee = int(quote["pool"]["fee"])
        except (KeyError, TypeError, ValueError):
            raise RPCError(f"Swap quote has no pool fee: {quote}") from None

        gas_price = self.rpc.get_gas_price()
        txs = []

        allowance = self.rpc.get_allowance(token_in, self.address, router_addr)
        if allowance < amount_wei:
            token = _ENCODER.eth.contract(address=token_in, abi=ERC20_ABI)
            txs.append(self._contract_tx("approve", token.functions.approve(router_addr, amount_wei), gas_price))
            logger.info(f"Approve {amount_hls} for router (allowance {allowance})")
        else:
            logger.info(f"Allowance already sufficient ({allowance} >= {amount_wei})")

        router = _ENCODER.eth.contract(address=router_addr, abi=SWAP_ROUTER_ABI)
        params = (
            token_in,
            token_out,
            fee,
            self.address,
            int(time.time()) + helios_config.SWAP_DEADLINE_SECONDS,
            amount_wei,
            0,
            0,
        )
        txs.append(self._contract_tx("swap", router.functions.exactInputSingle(params), gas_price))
        logger.info(f"Swap {amount_hls} {token_in[:10]}... -> {token_out[:10]}... (fee tier {fee})")
        return txs

    # ------------------------------------------------------------------ #
    #  Cycle                                                               #
    # ------------------------------------------------------------------ #

    def plan_cycle(self, rng=random) -> Dict:
        """Tx params for one full cycle. Failed actions map to None and are logged.

        "swap" maps to a list (approve + swap, or swap alone).
        """
        steps = {
            "bridge": lambda: self.bridge(random_amount(*helios_config.BRIDGE_AMOUNT_RANGE, rng=rng)),
            "delegate": lambda: self.delegate(
                random_amount(*helios_config.DELEGATION_AMOUNT_RANGE, rng=rng), rng=rng),
            "claim": lambda: self.claim_rewards(),
            "vote": lambda: self.vote(),
            "create_proposal": lambda: self.create_proposal(rng=rng),
            "swap": lambda: self.swap(random_amount(*helios_config.SWAP_AMOUNT_RANGE, rng=rng)),
        }
        plan = {}
        for name, step in steps.items():
            try:
                plan[name] = step()
            except Exception as e:
                logger.error(f"{name} failed: {e}")
                plan[name] = None
        return plan
