from peewee import *

# initialized with the path of the database by connect()
sqlite_db = SqliteDatabase(None)

PRAGMAS = {
    "journal_mode": "wal",
    "foreign_keys": 1,
    "ignore_check_constraints": 0,
}


class BaseModel(Model):
    class Meta:
        database = sqlite_db


PubKeyHashField = lambda **kwargs: CharField(max_length=64, **kwargs)
CBORField = BlobField


class ContractInfo(BaseModel):
    """
    Mirrors the scalar part of the generator state, a single row
    """

    address = PubKeyHashField(unique=True)
    owner = PubKeyHashField()
    minting_price = IntegerField()
    next_id = IntegerField()
    balance = IntegerField()


class Account(BaseModel):
    address_raw = PubKeyHashField(unique=True, index=True)
    balance = IntegerField()


class NFT(BaseModel):
    """
    Mirrors the token ledger
    """

    token_id = IntegerField(unique=True, index=True)
    owner = PubKeyHashField(index=True)
    token_uri = BlobField()


class MintedNFT(BaseModel):
    """
    Mirrors the list of NFTs minted by each creator
    """

    creator = PubKeyHashField()
    position = IntegerField()
    token_id = IntegerField(unique=True)
    token_uri = BlobField()

    class Meta:
        indexes = ((("creator", "position"), True),)


class EventLog(BaseModel):
    position = IntegerField(unique=True, index=True)
    kind = CharField(max_length=32)
    data = CBORField()


MODELS = [ContractInfo, Account, NFT, MintedNFT, EventLog]


def connect(path: str) -> SqliteDatabase:
    """
    Open the database at the given path and make sure all tables exist.
    """
    if not sqlite_db.is_closed():
        sqlite_db.close()
    sqlite_db.init(path, pragmas=PRAGMAS)
    sqlite_db.connect()
    sqlite_db.create_tables(MODELS)
    return sqlite_db
