"""Tests for HeliosActions against a fake RPC"""
import random

import pytest
from eth_abi import decode
from web3 import Web3

import helios_config
from calldata import ValidationError, decode_words
from helios_actions import HeliosActions, random_amount
from helios_rpc import RPCError

WALLET = "0x" + "ab" * 20
VALIDATOR = "0x" + "cd" * 20


class FakeRPC:
    def __init__(self, nonce=7, validators=None, proposal=None, validator_error=None,
                 allowance=0, fee=3000):
        self.nonce = nonce
        self.validators = validators if validators is not None else [
            {"validatorAddress": VALIDATOR, "moniker": "val-1", "status": 3, "jailed": False},
        ]
        self.proposal = proposal
        self.validator_error = validator_error
        self.nonce_calls = 0
        self.allowance = allowance
        self.fee = fee
        self.quotes = []

    def get_nonce(self, address):
        self.nonce_calls += 1
        return self.nonce

    def get_active_validators(self):
        if self.validator_error:
            raise self.validator_error
        return self.validators

    def get_voting_proposal(self):
        return self.proposal

    def get_gas_price(self):
        return 10 ** 9

    def get_allowance(self, token, owner, spender):
        return self.allowance

    def get_swap_quote(self, token_in, token_out, amount_in):
        self.quotes.append((token_in, token_out, amount_in))
        return {"tokenIn": token_in, "tokenOut": token_out, "amountIn": str(amount_in),
                "pool": {"fee": self.fee}}


def _params(data):
    return bytes.fromhex(data[10:])


def test_bridge_tx_params():
    actions = HeliosActions(FakeRPC(), WALLET)
    tx = actions.bridge(0.1)

    assert tx["from"] == Web3.to_checksum_address(WALLET)
    assert tx["to"] == Web3.to_checksum_address(helios_config.BRIDGE_CONTRACT)
    assert tx["chainId"] == helios_config.CHAIN_ID
    assert tx["gas"] == helios_config.GAS_LIMITS["bridge"]
    assert tx["nonce"] == 7
    assert tx["value"] == 0
    assert tx["data"].startswith("0x7ae4a8ff")

    dest, extra, token, amount, fee = decode(
        ["uint256", "string", "address", "uint256", "uint256"], _params(tx["data"]))
    assert dest == helios_config.DEFAULT_BRIDGE_CHAIN
    assert extra == WALLET
    assert token.lower() == helios_config.HLS_TOKEN
    assert amount == 10 ** 17
    assert fee == helios_config.BRIDGE_FEE_WEI


def test_bridge_unsupported_chain():
    with pytest.raises(ValidationError, match="Unsupported destination chain"):
        HeliosActions(FakeRPC(), WALLET).bridge(0.1, dest_chain_id=1)


def test_nonces_are_consecutive_and_fetched_once():
    rpc = FakeRPC(nonce=3)
    actions = HeliosActions(rpc, WALLET)
    nonces = [actions.claim_rewards()["nonce"] for _ in range(3)]
    assert nonces == [3, 4, 5]
    assert rpc.nonce_calls == 1

    actions.reset_nonce()
    assert actions.claim_rewards()["nonce"] == 3


def test_delegate_uses_active_validator():
    tx = HeliosActions(FakeRPC(), WALLET).delegate(1.2)
    assert tx["to"] == Web3.to_checksum_address(helios_config.STAKING_CONTRACT)
    delegator, validator, amount, denom = decode(
        ["address", "address", "uint256", "string"], _params(tx["data"]))
    assert validator.lower() == VALIDATOR
    assert amount == Web3.to_wei(1.2, "ether")
    assert denom == "ahelios"


def test_delegate_without_any_validator(monkeypatch):
    monkeypatch.setattr(helios_config, "DEFAULT_VALIDATOR", None)
    rpc = FakeRPC(validator_error=RuntimeError("rpc down"))
    with pytest.raises(ValidationError, match="No validator available"):
        HeliosActions(rpc, WALLET).delegate(0.05)


def test_delegate_falls_back_to_default_validator(monkeypatch):
    monkeypatch.setattr(helios_config, "DEFAULT_VALIDATOR", "0x" + "ef" * 20)
    tx = HeliosActions(FakeRPC(validators=[]), WALLET).delegate(0.05)
    validator = decode(["address", "address", "uint256", "string"], _params(tx["data"]))[1]
    assert validator.lower() == "0x" + "ef" * 20


def test_claim_defaults():
    tx = HeliosActions(FakeRPC(), WALLET).claim_rewards()
    assert tx["to"] == Web3.to_checksum_address(helios_config.DISTRIBUTION_CONTRACT)
    _, words = decode_words(tx["data"])
    assert words == [int(WALLET, 16), 10]


def test_vote_on_active_proposal():
    rpc = FakeRPC(proposal={"id": "12", "title": "t", "status": "VOTING_PERIOD"})
    tx = HeliosActions(rpc, WALLET).vote()
    voter, proposal_id, support, reason = decode(
        ["address", "uint256", "bool", "string"], _params(tx["data"]))
    assert (proposal_id, support, reason) == (12, True, "Vote on proposal 12")


def test_vote_without_proposal_returns_none():
    rpc = FakeRPC()
    assert HeliosActions(rpc, WALLET).vote() is None
    assert rpc.nonce_calls == 0


def test_create_proposal_sends_deposit_as_value():
    tx = HeliosActions(FakeRPC(), WALLET).create_proposal(rng=random.Random(5))
    assert tx["value"] == helios_config.PROPOSAL_DEPOSIT_WEI
    assert tx["to"] == Web3.to_checksum_address(helios_config.GOVERNANCE_CONTRACT)
    title, description, messages, deposit, proposer = decode(
        ["string", "string", "string", "uint256", "address"], _params(tx["data"]))
    assert deposit == helios_config.PROPOSAL_DEPOSIT_WEI
    assert Web3.to_checksum_address(WALLET) in messages


def test_create_proposal_explicit_content():
    tx = HeliosActions(FakeRPC(), WALLET).create_proposal(
        deposit_wei=5, title="A", description="BB", messages=[])
    _, words = decode_words(tx["data"])
    assert words[:4] == [160, 224, 288, 5]


def test_plan_cycle_builds_everything():
    rpc = FakeRPC(proposal={"id": "1", "title": "t", "status": "VOTING_PERIOD"})
    plan = HeliosActions(rpc, WALLET).plan_cycle(rng=random.Random(2))
    assert set(plan) == {"bridge", "delegate", "claim", "vote", "create_proposal", "swap"}
    assert all(plan.values())
    single = ["bridge", "delegate", "claim", "vote", "create_proposal"]
    assert [plan[k]["nonce"] for k in single] == [7, 8, 9, 10, 11]
    assert [tx["nonce"] for tx in plan["swap"]] == [12, 13]


def test_seeded_plan_picks_same_validator():
    validators = [
        {"validatorAddress": "0x" + c * 40, "moniker": c, "status": 3, "jailed": False}
        for c in "123456789"
    ]
    picks = set()
    for _ in range(3):
        plan = HeliosActions(FakeRPC(validators=validators), WALLET).plan_cycle(rng=random.Random(11))
        picks.add(plan["delegate"]["data"])
    assert len(picks) == 1


def test_plan_cycle_skips_failed_steps():
    plan = HeliosActions(FakeRPC(), WALLET).plan_cycle(rng=random.Random(2))
    assert plan["vote"] is None
    assert plan["create_proposal"]["nonce"] == 10


def test_random_amount_range():
    rng = random.Random(9)
    for _ in range(100):
        value = random_amount(0.05, 0.15, rng)
        assert 0.05 <= value <= 0.15
        assert round(value, 3) == value


def test_create_proposal_hex_deposit():
    tx = HeliosActions(FakeRPC(), WALLET).create_proposal(
        deposit_wei="0xde0b6b3a7640000", title="A", description="B", messages=[])
    assert tx["value"] == 10 ** 18
    _, words = decode_words(tx["data"])
    assert words[3] == 10 ** 18


# --- Swap ---

def test_swap_approves_then_swaps_when_allowance_short():
    rpc = FakeRPC(allowance=0, fee=500)
    txs = HeliosActions(rpc, WALLET).swap(1.5)
    assert len(txs) == 2
    approve, swap = txs

    router = Web3.to_checksum_address(helios_config.SWAP_ROUTER)
    assert approve["to"] == Web3.to_checksum_address(helios_config.HLS_TOKEN)
    assert approve["data"].startswith("0x095ea7b3")
    spender, amount = decode(["address", "uint256"], bytes.fromhex(approve["data"][10:]))
    assert (spender, amount) == (router, Web3.to_wei(1.5, "ether"))

    assert swap["to"] == router
    assert swap["data"].startswith("0x414bf389")
    assert swap["value"] == 0
    assert swap["gasPrice"] == 10 ** 9
    assert swap["chainId"] == helios_config.CHAIN_ID
    assert [approve["nonce"], swap["nonce"]] == [7, 8]

    (params,) = decode(
        ["(address,address,uint24,address,uint256,uint256,uint256,uint160)"],
        bytes.fromhex(swap["data"][10:]))
    token_in, token_out, fee, recipient, deadline, amount_in, min_out, limit = params
    assert token_in.lower() == helios_config.HLS_TOKEN
    assert token_out.lower() == helios_config.WETH_TOKEN
    assert fee == 500
    assert recipient == Web3.to_checksum_address(WALLET)
    assert amount_in == Web3.to_wei(1.5, "ether")
    assert (min_out, limit) == (0, 0)
    assert deadline > 0


def test_swap_skips_approve_when_allowance_sufficient():
    rpc = FakeRPC(allowance=10 ** 30)
    txs = HeliosActions(rpc, WALLET).swap(2)
    assert len(txs) == 1
    assert txs[0]["data"].startswith("0x414bf389")
    assert rpc.quotes[0][2] == 2 * 10 ** 18


def test_swap_quote_without_fee():
    rpc = FakeRPC()
    rpc.get_swap_quote = lambda *a: {"error": "no route"}
    with pytest.raises(RPCError, match="pool fee"):
        HeliosActions(rpc, WALLET).swap(1)


def test_swap_rejects_zero_amount():
    with pytest.raises(ValidationError):
        HeliosActions(FakeRPC(), WALLET).swap(0)
