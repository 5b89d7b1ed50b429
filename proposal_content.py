"""Proposal content: randomized governance titles, descriptions and messages.

Titles and descriptions vary across a handful of templates so consecutive
proposals from the same wallet don't look identical. Pass a seeded
random.Random for reproducible output.
"""

import random
from typing import Dict, List, Tuple

TITLE_EMOJIS = ["\U0001f680", "⚡", "\U0001f527", "\U0001f3af", "\U0001f48e",
                "\U0001f525", "\U0001f31f", "⚙️", "\U0001f528", "\U0001f3aa"]
ACTIONS = ["Upgrade", "Fix", "Modify", "Optimize", "Enhance", "Update", "Change", "Improve",
           "Adjust", "Refine", "Boost", "Tune", "Revamp", "Overhaul", "Streamline"]
OBJECTS = ["Timeout", "Gas", "Fee", "Limit", "Parameter", "Setting", "Config", "Batch",
           "Transaction", "Network", "Chain", "System", "Performance", "Speed", "Efficiency",
           "Throughput", "Capacity", "Latency", "Bandwidth", "Protocol"]
NETWORKS = ["Sepolia", "Ethereum", "Helios", "Testnet"]

CURRENT_VALUES = [3000000, 500000, 0.001, 1000000, 2000000, 0.002, 400000, 600000]
NEW_VALUES = [3600000, 600000, 0.002, 1200000, 2400000, 0.003, 500000, 700000]
BENEFITS = ["performance", "efficiency", "security", "stability", "scalability",
            "reliability", "speed", "throughput"]
COMPONENTS = ["timeout", "gas limit", "fee", "batch size", "parameter", "setting"]

TIMEOUT_MSG_TYPE = "/helios.hyperion.v1.MsgUpdateOutTxTimeout"
TIMEOUT_RANGE = (3_000_000, 5_000_000)

TITLE_TEMPLATES = [
    "{emoji} {action} {obj} #{num}",
    "Governance Proposal: {action} {obj}",
    "System Enhancement: {action} {obj}",
    "Parameter Update: {action} {obj}",
    "Let's {action_lower} {obj} #{num}",
    "{action} {obj} for {network}",
    "{speedup} {obj} #{num}",
    "Network {action}: {obj}",
    "{action} {obj} #{num}",
    "{adjective} {obj} #{num}",
]

DESCRIPTION_TEMPLATES = [
    "This proposal seeks to update the {component} parameter from {current} to {new} "
    "to improve network {benefit} and reduce transaction failures",
    "Update {component} settings for better {benefit}",
    "This governance proposal aims to enhance the network's transaction processing "
    "capabilities by updating critical {component} parameters",
    "Let's make things work better by changing {component} settings",
    "{component}: {current} → {new}",
    "System optimization through {component} adjustment to improve overall network {benefit}",
    "Improving {benefit} by updating {component} from {current} to {new}",
    "Network {component} update for enhanced {benefit}",
    "Parameter modification: {component} increased from {current} to {new} "
    "for enhanced transaction processing",
    "Updating {component} for better {benefit}",
]


def random_proposal_title(rng=random) -> str:
    action = rng.choice(ACTIONS)
    return rng.choice(TITLE_TEMPLATES).format(
        emoji=rng.choice(TITLE_EMOJIS),
        action=action,
        action_lower=action.lower(),
        obj=rng.choice(OBJECTS),
        num=rng.randint(100, 999),
        network=rng.choice(NETWORKS),
        speedup=rng.choice(["Speed Up", "Make Faster", "Improve", "Better", "Optimize"]),
        adjective=rng.choice(["Better", "Faster", "Stronger", "Smarter", "Efficient"]),
    )


def random_proposal_description(rng=random) -> str:
    return rng.choice(DESCRIPTION_TEMPLATES).format(
        component=rng.choice(COMPONENTS),
        current=rng.choice(CURRENT_VALUES),
        new=rng.choice(NEW_VALUES),
        benefit=rng.choice(BENEFITS),
    )


def timeout_update_message(signer: str, chain_id: int = 11155111, rng=random) -> Dict:
    """Hyperion message bumping the outgoing batch / tx timeouts for a counterparty chain."""
    low, high = TIMEOUT_RANGE
    return {
        "@type": TIMEOUT_MSG_TYPE,
        "signer": signer,
        "chain_id": chain_id,
        "target_batch_timeout": rng.randrange(low, high),
        "target_outgoing_tx_timeout": rng.randrange(low, high),
    }


def random_proposal(signer: str, rng=random) -> Tuple[str, str, List[Dict]]:
    return (
        random_proposal_title(rng),
        random_proposal_description(rng),
        [timeout_update_message(signer, rng=rng)],
    )
