from pathlib import Path

import fire

from nft_generator.utils import keys_dir
from nft_generator.utils.keys import create_keys, get_address, get_pubkeyhash


def main(name: str = "creator", keys: str = None):
    """
    Create a new wallet with fresh keys
    """
    directory = keys_dir if keys is None else Path(keys)
    create_keys(name, directory)
    pubkeyhash = get_pubkeyhash(name, directory)
    print(f"Created wallet {name} with identity {pubkeyhash.hex()}")
    print(f"Address: {get_address(name, directory)}")
    return pubkeyhash


if __name__ == "__main__":
    fire.Fire(main)
