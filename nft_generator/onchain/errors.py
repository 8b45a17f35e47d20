"""
Errors raised by the NFT generator contract, the token ledger and the host chain.

Every error aborts the transaction it is raised in. The host chain rolls back
all effects of the aborted transaction before re-raising.
"""


class GeneratorError(Exception):
    """Base error for all rejected operations."""

    pass


class IncorrectPayment(GeneratorError):
    """Raised when the attached payment is not exactly the minting price."""

    pass


class EmptyTokenURI(GeneratorError):
    """Raised when an NFT is requested for an empty token URI."""

    pass


class InvalidTokenURI(GeneratorError):
    """Raised when the token URI is not valid UTF-8 text."""

    pass


class NotOwner(GeneratorError):
    """Raised when an admin operation is called by anyone but the owner."""

    pass


class NotPayable(GeneratorError):
    """Raised when value is attached to a call that does not accept payments."""

    pass


class InvalidOwner(GeneratorError):
    """Raised when ownership is handed to an empty identity."""

    pass


class TransferFailed(GeneratorError):
    """Raised when the withdrawal of funds could not be delivered to the receiver."""

    pass


class UnknownId(GeneratorError):
    """Raised when a token id is referenced that was never minted."""

    pass


class UnknownRecord(GeneratorError):
    """Raised when a minted NFT record index is out of range for a creator."""

    pass


class TokenAlreadyMinted(GeneratorError):
    pass


class NotTokenOwner(GeneratorError):
    pass


class InvalidReceiver(GeneratorError):
    pass


class InsufficientFunds(GeneratorError):
    """Raised when an account can not cover the value attached to its call."""

    pass


class TransferRejected(GeneratorError):
    """Raised by the host when a receiver refuses an incoming transfer."""

    pass
