import fire

from nft_generator.utils.keys import get_pubkeyhash

from .util import ada_from_lovelace, stored_chain


def main(wallet: str = "creator", db: str = None):
    """
    Show the generator and the NFTs minted by the wallet
    """
    creator = get_pubkeyhash(wallet)
    with stored_chain(db) as chain:
        print(f"Generator {chain.address.hex()}")
        print(f"  owner: {chain.owner.hex()}")
        print(f"  minting price: {ada_from_lovelace(chain.minting_price)} ADA")
        print(f"  minted: {chain.next_id}")
        print(f"  balance: {ada_from_lovelace(chain.contract_balance)} ADA")
        print(f"NFTs minted by {wallet}:")
        records = [
            chain.minted_nfts(creator, i) for i in range(chain.minted_nfts_count(creator))
        ]
        for record in records:
            print(
                f"  {record.id}: {record.token_uri.decode()} held by {chain.owner_of(record.id).hex()}"
            )
    return [record.id for record in records]


if __name__ == "__main__":
    fire.Fire(main)
