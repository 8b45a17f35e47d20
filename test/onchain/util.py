from nft_generator.onchain.errors import TransferRejected
from nft_generator.onchain.nft_generator import CallContext

OWNER = b"\x01" * 28
ACCOUNT1 = b"\x02" * 28
ACCOUNT2 = b"\x03" * 28
GENERATOR = b"\x07" * 28

TOKEN_URI = b"ipfs://QmR9RNGq2ydEB73arpaLZTbU616RF6sG6ikKM64yXVEK5H"


class RecordingContext(CallContext):
    """
    Records what the generator asks of the host instead of executing it
    """

    def __init__(self, caller: bytes, value: int = 0, reject_funds: bool = False):
        self.address = GENERATOR
        self.caller = caller
        self.value = value
        self.reject_funds = reject_funds
        self.events = []
        self.minted = []
        self.sent = []

    def emit(self, event):
        self.events.append(event)

    def safe_mint(self, to, token_id, token_uri):
        self.minted.append((to, token_id, token_uri))

    def send(self, receiver, amount):
        if self.reject_funds:
            raise TransferRejected("Receiver does not accept funds")
        self.sent.append((receiver, amount))
