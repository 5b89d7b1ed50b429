"""Calldata Codec: raw contract-call payloads for Helios precompiles, no ABI json.

Each call shape is a CallKind member carrying its 4-byte selector and the
ABI types of its parameters in head order. A single head/tail encoder turns
(kind, args) into calldata; builders only validate and order arguments.

Layouts:
    BRIDGE           (uint256 destChainId, string extra, address token,
                      uint256 amountWei, uint256 feeOrGas)
    DELEGATE         (address delegator, address validator, uint256 amount, string denom)
    CLAIM            (address delegator, uint256 amountOrId)
    VOTE             (address voter, uint256 proposalId, bool support, string reason)
    CREATE_PROPOSAL  (string title, string description, string messages,
                      uint256 deposit, address proposer)

Offsets in the head are measured from the first byte after the selector.
"""

import json
import logging
from enum import Enum
from typing import List, Sequence, Tuple

from abi_words import (
    WORD_SIZE,
    ZERO_ADDRESS,
    EncodedDynamicField,
    EncodingError,
    encode_address,
    encode_bool,
    encode_string,
    encode_uint,
    is_valid_address,
    pad_to_word,
    to_int,
)

logger = logging.getLogger(__name__)

DEFAULT_DENOM = "ahelios"

_STATIC_ENCODERS = {
    "uint256": encode_uint,
    "address": encode_address,
    "bool": encode_bool,
}


class ValidationError(ValueError):
    """One or more call parameters are invalid. `errors` lists every violation."""

    def __init__(self, call_name: str, errors: List[str]):
        self.call_name = call_name
        self.errors = list(errors)
        super().__init__(f"{call_name} validation failed: {', '.join(self.errors)}")


class CallKind(Enum):
    BRIDGE = ("7ae4a8ff", ("uint256", "string", "address", "uint256", "uint256"))
    DELEGATE = ("f5e56040", ("address", "address", "uint256", "string"))
    CLAIM = ("2efe8a5f", ("address", "uint256"))
    VOTE = ("9ec4d363", ("address", "uint256", "bool", "string"))
    CREATE_PROPOSAL = ("cb0dddfe", ("string", "string", "string", "uint256", "address"))

    def __init__(self, selector: str, layout: Tuple[str, ...]):
        self.selector = selector
        self.layout = layout

    @property
    def head_size(self) -> int:
        return WORD_SIZE * len(self.layout)


# --------------------------------------------------------------------------- #
#  Generic head/tail encoding                                                   #
# --------------------------------------------------------------------------- #

def _as_field(value) -> EncodedDynamicField:
    if isinstance(value, EncodedDynamicField):
        return value
    return encode_string(value)


def encode_call(kind: CallKind, args: Sequence) -> str:
    """Encode args against kind.layout and prefix the selector. Returns 0x hex."""
    if len(args) != len(kind.layout):
        raise EncodingError(
            f"{kind.name} takes {len(kind.layout)} arguments, got {len(args)}"
        )

    head: List[str] = []
    tail: List[str] = []
    offset = kind.head_size
    for abi_type, value in zip(kind.layout, args):
        if abi_type == "string":
            field = _as_field(value)
            head.append(encode_uint(offset))
            tail.append(field.length_word)
            tail.append(field.padded_data)
            offset += WORD_SIZE + len(field.padded_data) // 2
        else:
            head.append(_STATIC_ENCODERS[abi_type](value))

    calldata = "0x" + kind.selector + "".join(head) + "".join(tail)
    logger.debug("Built %s calldata (%d bytes)", kind.name, (len(calldata) - 2) // 2)
    return calldata


def dynamic_offsets(kind: CallKind, args: Sequence) -> List[int]:
    """Byte offsets the head will declare for each dynamic argument."""
    offsets = []
    offset = kind.head_size
    for abi_type, value in zip(kind.layout, args):
        if abi_type == "string":
            offsets.append(offset)
            offset += WORD_SIZE + len(_as_field(value).padded_data) // 2
    return offsets


def decode_words(calldata: str) -> Tuple[str, List[int]]:
    """Split calldata into (selector, [word values]) for inspection."""
    body = calldata[2:] if calldata.startswith("0x") else calldata
    selector, params = body[:8], body[8:]
    words = [int(params[i:i + 64], 16) for i in range(0, len(params), 64)]
    return selector, words


# --------------------------------------------------------------------------- #
#  Validation helpers                                                           #
# --------------------------------------------------------------------------- #

def _int_or_none(value):
    if value is None or isinstance(value, (bool, float)):
        return None
    try:
        return to_int(value)
    except EncodingError:
        return None


def _require_positive(errors: List[str], value, label: str):
    number = _int_or_none(value)
    if number is None or number <= 0:
        errors.append(f"Invalid {label}: {value!r} (must be a positive integer)")


def _require_address(errors: List[str], value, label: str):
    if not is_valid_address(value):
        errors.append(f"Invalid {label}: {value!r}")


def _raise_if_any(call_name: str, errors: List[str]):
    if errors:
        raise ValidationError(call_name, errors)


# --------------------------------------------------------------------------- #
#  Bridge                                                                       #
# --------------------------------------------------------------------------- #

def validate_bridge_params(dest_chain_id, token_address, amount_wei, fee_or_gas, extra_string):
    errors: List[str] = []
    chain_id = _int_or_none(dest_chain_id)
    if chain_id is None or chain_id <= 0:
        errors.append(f"Invalid destination chain ID: {dest_chain_id!r}")
    _require_address(errors, token_address, "token address")
    _require_positive(errors, amount_wei, "amount")
    _require_positive(errors, fee_or_gas, "fee/gas amount")
    if not is_valid_address(extra_string):
        errors.append(f"Invalid extra string (must be hex address): {extra_string!r}")
    _raise_if_any("Bridge", errors)


def build_bridge_calldata(dest_chain_id, token_address, amount_wei, fee_or_gas, extra_string) -> str:
    validate_bridge_params(dest_chain_id, token_address, amount_wei, fee_or_gas, extra_string)
    calldata = encode_call(
        CallKind.BRIDGE,
        (dest_chain_id, extra_string, token_address, amount_wei, fee_or_gas),
    )
    logger.info(f"Built bridge calldata for chain {dest_chain_id}")
    return calldata


# --------------------------------------------------------------------------- #
#  Delegation / claim                                                           #
# --------------------------------------------------------------------------- #

def validate_delegate_params(delegator, validator, amount, denom):
    errors: List[str] = []
    _require_address(errors, delegator, "delegator address")
    _require_address(errors, validator, "validator address")
    _require_positive(errors, amount, "amount")
    if not isinstance(denom, str) or not denom:
        errors.append(f"Invalid denom: {denom!r}")
    _raise_if_any("Delegate", errors)


def build_delegate_calldata(delegator, validator, amount, denom=None) -> str:
    """Amount is already in the smallest unit (ahelios)."""
    if denom is None:
        denom = DEFAULT_DENOM
    validate_delegate_params(delegator, validator, amount, denom)
    return encode_call(CallKind.DELEGATE, (delegator, validator, amount, denom))


def validate_claim_params(delegator, amount_or_id):
    errors: List[str] = []
    _require_address(errors, delegator, "delegator address")
    number = _int_or_none(amount_or_id)
    if number is None or number < 0:
        errors.append(f"Invalid claim amount/id: {amount_or_id!r}")
    _raise_if_any("Claim", errors)


def build_claim_calldata(delegator, amount_or_id) -> str:
    validate_claim_params(delegator, amount_or_id)
    return encode_call(CallKind.CLAIM, (delegator, amount_or_id))


# --------------------------------------------------------------------------- #
#  Governance                                                                   #
# --------------------------------------------------------------------------- #

def validate_vote_params(voter, proposal_id, support, reason):
    errors: List[str] = []
    _require_address(errors, voter, "voter address")
    number = _int_or_none(proposal_id)
    if number is None or number < 0:
        errors.append(f"Invalid proposal ID: {proposal_id!r}")
    if not isinstance(support, bool):
        errors.append(f"Invalid support flag: {support!r} (must be bool)")
    if not isinstance(reason, str):
        errors.append(f"Invalid reason: {reason!r}")
    _raise_if_any("Vote", errors)


def build_vote_calldata(voter, proposal_id, support, reason="") -> str:
    validate_vote_params(voter, proposal_id, support, reason)
    return encode_call(CallKind.VOTE, (voter, proposal_id, support, reason))


def messages_json(messages) -> str:
    # Same shape as JSON.stringify: no whitespace, non-ASCII kept as-is
    return json.dumps(messages, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def encode_messages(messages) -> EncodedDynamicField:
    """Proposal messages travel as one opaque JSON string, not an ABI array."""
    return encode_string(messages_json(messages))


def proposal_offsets(title: str, description: str) -> Tuple[int, int, int]:
    """(titleOffset, descriptionOffset, messagesOffset) for a create-proposal call."""
    title_offset = CallKind.CREATE_PROPOSAL.head_size
    description_offset = title_offset + WORD_SIZE + pad_to_word(len(title.encode("utf-8")))
    messages_offset = description_offset + WORD_SIZE + pad_to_word(len(description.encode("utf-8")))
    return title_offset, description_offset, messages_offset


def validate_create_proposal_params(title, description, messages, deposit):
    errors: List[str] = []
    if not isinstance(title, str):
        errors.append(f"Invalid title: {title!r}")
    if not isinstance(description, str):
        errors.append(f"Invalid description: {description!r}")
    if not isinstance(messages, list):
        errors.append(f"Invalid messages: expected list, got {type(messages).__name__}")
    else:
        try:
            messages_json(messages)
        except (TypeError, ValueError) as e:
            errors.append(f"Invalid messages: not JSON serialisable ({e})")
    _require_positive(errors, deposit, "deposit")
    _raise_if_any("Create proposal", errors)


def build_create_proposal_calldata(title, description, messages, deposit) -> str:
    """Proposer is always the zero address; the chain fills in the sender."""
    validate_create_proposal_params(title, description, messages, deposit)
    return encode_call(
        CallKind.CREATE_PROPOSAL,
        (title, description, encode_messages(messages), deposit, ZERO_ADDRESS),
    )
