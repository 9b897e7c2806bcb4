from massage_api.store.gateway import StoreGateway

__all__ = ["StoreGateway"]
