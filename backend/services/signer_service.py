"""
Payer signing-key resolution for the Algorand ledger.

Demo mode only: keys come from demo_accounts.json, a map of
label → {"address": ..., "mnemonic": ...}. In production the payer's wallet
signs client-side and this always returns None.
"""
import json
import logging
import os
from typing import Optional

from algosdk import mnemonic as algo_mnemonic
from algosdk.error import WrongMnemonicLengthError, WrongChecksumError

from config import settings

logger = logging.getLogger(__name__)

_demo_accounts_cache: Optional[dict] = None


def _load_demo_accounts() -> dict:
    global _demo_accounts_cache

    if _demo_accounts_cache is None:
        path = settings.demo_accounts_file
        if not os.path.isabs(path):
            path = os.path.join(os.path.dirname(os.path.dirname(__file__)), path)
        try:
            with open(path) as f:
                _demo_accounts_cache = json.load(f)
            logger.info(f"  Demo accounts loaded from {path}")
        except FileNotFoundError:
            logger.warning(f"  Demo accounts file not found: {path}")
            _demo_accounts_cache = {}

    return _demo_accounts_cache


def resolve_signing_key(wallet: str) -> Optional[str]:
    """
    Look up a payer's private key (demo mode only).

    Returns:
        Private key string, or None if not found / not in demo mode.
    """
    if not settings.demo_mode:
        return None

    for label, acct in _load_demo_accounts().items():
        if acct.get("address") == wallet and acct.get("mnemonic"):
            try:
                return algo_mnemonic.to_private_key(acct["mnemonic"])
            except (WrongMnemonicLengthError, WrongChecksumError, ValueError) as e:
                logger.error(f"  Demo account '{label}' has an unusable mnemonic: {e}")
                return None

    return None


def clear_cache() -> None:
    global _demo_accounts_cache
    _demo_accounts_cache = None
