import factory

from blockservice.block import Block
from blockservice.blockstore.memory import MemoryBlockStore
from blockservice.cid import CID_V1, CODEC_RAW, compute_cid
from blockservice.config import ExchangeConfig
from blockservice.exchange.peer import PeerExchange
from blockservice.service import BlockService


class BlockFactory(factory.Factory):
    class Meta:
        model = Block

    class Params:
        version = CID_V1
        codec = CODEC_RAW

    data = factory.Sequence(lambda n: f"block payload {n}".encode())
    cid = factory.LazyAttribute(lambda o: compute_cid(o.data, o.version, o.codec))


class ExchangeConfigFactory(factory.Factory):
    class Meta:
        model = ExchangeConfig

    timeout = 1.0
    max_concurrent_requests = 8


class PeerExchangeFactory(factory.Factory):
    class Meta:
        model = PeerExchange

    block_store = factory.LazyFunction(MemoryBlockStore)
    peers = factory.LazyFunction(list)
    config = factory.SubFactory(ExchangeConfigFactory)


class BlockServiceFactory(factory.Factory):
    class Meta:
        model = BlockService

    store = factory.LazyFunction(MemoryBlockStore)
    exchange = None
