"""Helios Bot: builds raw contract calls for Helios testnet farming.

Usage:
    python3 helios_bot.py --status                 # Address, nonce, balance, leaderboard rank
    python3 helios_bot.py --plan                   # Tx params for one full cycle (JSON)
    python3 helios_bot.py --calldata KIND k=v ...  # Raw calldata for one call

Calldata kinds and keys:
    bridge           dest token amount fee extra
    delegate         delegator validator amount [denom]
    claim            delegator amount
    vote             voter proposal support(yes/no) [reason]
    create_proposal  title description deposit [messages(json)]

Nothing is signed or sent. The wallet address comes from HELIOS_ADDRESS or
is derived from HELIOS_PRIVATE_KEY. The leaderboard rank needs HELIOS_AUTH_TOKEN.
"""

import json
import logging
import os
import sys
from typing import Dict, List

from eth_account import Account
from web3 import Web3

import calldata
import helios_config
from abi_words import EncodingError
from env_loader import get_key
from helios_actions import HeliosActions
from helios_rpc import HeliosRPC, RPCError

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_FILE = os.path.join(os.path.dirname(os.path.abspath(__file__)), "helios_bot.log")

logger = logging.getLogger(__name__)


def _setup_logging():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [helios] %(message)s",
        handlers=[
            logging.FileHandler(LOG_FILE),
            logging.StreamHandler(sys.stderr),
        ],
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def wallet_address() -> str:
    address = get_key("HELIOS_ADDRESS", required=False)
    if address:
        return Web3.to_checksum_address(address)
    pk = get_key("HELIOS_PRIVATE_KEY")
    return Account.from_key(pk).address


def parse_pairs(args: List[str]) -> Dict[str, str]:
    pairs = {}
    for arg in args:
        if "=" not in arg:
            raise ValueError(f"Expected key=value, got {arg!r}")
        key, _, value = arg.partition("=")
        pairs[key.strip()] = value
    return pairs


def build_calldata(kind: str, params: Dict[str, str]) -> str:
    """Dispatch a --calldata request to the matching builder."""
    try:
        if kind == "bridge":
            return calldata.build_bridge_calldata(
                params["dest"], params["token"], params["amount"], params["fee"], params["extra"])
        if kind == "delegate":
            return calldata.build_delegate_calldata(
                params["delegator"], params["validator"], params["amount"], params.get("denom"))
        if kind == "claim":
            return calldata.build_claim_calldata(params["delegator"], params["amount"])
        if kind == "vote":
            support = params["support"].lower() in ("yes", "true", "1")
            return calldata.build_vote_calldata(
                params["voter"], params["proposal"], support, params.get("reason", ""))
        if kind == "create_proposal":
            messages = json.loads(params.get("messages", "[]"))
            return calldata.build_create_proposal_calldata(
                params["title"], params["description"], messages, params["deposit"])
    except KeyError as e:
        raise ValueError(f"Missing parameter for {kind}: {e.args[0]}") from None
    raise ValueError(f"Unknown call kind: {kind}")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def show_status(rpc: HeliosRPC, address: str, auth_token=None):
    balance = rpc.get_balance(address)
    print("=" * 50)
    print(f"{helios_config.CHAIN_NAME.upper()} STATUS")
    print("=" * 50)
    print(f"Address: {address}")
    print(f"Nonce:   {rpc.get_nonce(address)}")
    print(f"Balance: {Web3.from_wei(balance, 'ether')} {helios_config.NATIVE_SYMBOL}")
    if auth_token:
        try:
            rank = rpc.get_user_rank(auth_token)
            print(f"Rank:    #{rank['globalRank']} ({rank['userXP']} XP)")
            if rank.get("contributorRank"):
                print(f"Contributor rank: #{rank['contributorRank']}")
        except RPCError as e:
            logger.warning(f"Leaderboard lookup failed: {e}")
    print("=" * 50)


def show_plan(rpc: HeliosRPC, address: str):
    actions = HeliosActions(rpc, address)
    plan = actions.plan_cycle()
    built = sum(1 for tx in plan.values() if tx)
    logger.info("Planned %d/%d actions for %s", built, len(plan), address)
    print(json.dumps(plan, indent=2))


def main():
    argv = sys.argv[1:]
    _setup_logging()

    try:
        if "--calldata" in argv:
            idx = argv.index("--calldata")
            if idx + 1 >= len(argv):
                raise ValueError("--calldata needs a call kind")
            kind = argv[idx + 1]
            print(build_calldata(kind, parse_pairs(argv[idx + 2:])))
        elif "--status" in argv:
            show_status(HeliosRPC(), wallet_address(), helios_config.PORTAL_AUTH_TOKEN)
        elif "--plan" in argv:
            show_plan(HeliosRPC(), wallet_address())
        else:
            print(__doc__)
            return 0
    except calldata.ValidationError as e:
        for err in e.errors:
            logger.error("%s: %s", e.call_name, err)
        return 2
    except (EncodingError, ValueError, RPCError, RuntimeError) as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
