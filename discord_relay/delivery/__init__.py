from .delivery_batcher import BatchState, DeliveryBatcher
