from dataclasses import dataclass

from nft_generator.offchain.chain import LocalChain
from test.onchain.util import ACCOUNT1, ACCOUNT2, OWNER, TOKEN_URI

ONE_ADA = 1_000_000


@dataclass
class TestConfig:
    initial_minting_price: int = ONE_ADA
    new_minting_price: int = ONE_ADA // 2
    starting_funds: int = 100 * ONE_ADA
    token_uri: str = TOKEN_URI.decode()


DEFAULT_TEST_CONFIG = TestConfig()


def deploy_chain(config: TestConfig = DEFAULT_TEST_CONFIG) -> LocalChain:
    """
    A freshly deployed generator with funded owner and two funded accounts
    """
    chain = LocalChain.deploy(OWNER, config.initial_minting_price)
    for account in (OWNER, ACCOUNT1, ACCOUNT2):
        chain.create_account(account, config.starting_funds)
    return chain


def total_funds(chain: LocalChain) -> int:
    return sum(chain.accounts.values()) + chain.contract_balance
