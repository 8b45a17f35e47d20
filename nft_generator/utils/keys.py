from pathlib import Path
from typing import Tuple

from pycardano import (
    Address,
    Network,
    PaymentSigningKey,
    PaymentVerificationKey,
)


def key_paths(name: str, keys_dir: Path) -> Tuple[Path, Path]:
    return keys_dir / f"{name}.skey", keys_dir / f"{name}.vkey"


def create_keys(name: str, keys_dir: Path) -> PaymentSigningKey:
    """
    Generate a fresh key pair for the wallet. Never overwrites existing keys.
    """
    skey_path, vkey_path = key_paths(name, keys_dir)
    if skey_path.exists():
        raise FileExistsError(f"Wallet {name} already exists at {skey_path}")
    keys_dir.mkdir(parents=True, exist_ok=True)
    payment_skey = PaymentSigningKey.generate()
    payment_skey.save(str(skey_path))
    PaymentVerificationKey.from_signing_key(payment_skey).save(str(vkey_path))
    return payment_skey


def get_signing_info(
    name: str, keys_dir: Path = None, network: Network = None
) -> Tuple[PaymentVerificationKey, PaymentSigningKey, Address]:
    from . import keys_dir as default_keys_dir, network as default_network

    keys_dir = Path(keys_dir) if keys_dir is not None else default_keys_dir
    network = network if network is not None else default_network
    skey_path, _ = key_paths(name, keys_dir)
    payment_skey = PaymentSigningKey.load(str(skey_path))
    payment_vkey = PaymentVerificationKey.from_signing_key(payment_skey)
    payment_address = Address(payment_part=payment_vkey.hash(), network=network)
    return payment_vkey, payment_skey, payment_address


def get_address(name: str, keys_dir: Path = None) -> Address:
    return get_signing_info(name, keys_dir)[2]


def get_pubkeyhash(name: str, keys_dir: Path = None) -> bytes:
    """
    The identity of the wallet on the chain
    """
    return get_signing_info(name, keys_dir)[0].hash().payload
