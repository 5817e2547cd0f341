from innkeeper.models.payment.payment import TRANSACTION_ID_CONSTRAINT, Payment

__all__ = ["Payment", "TRANSACTION_ID_CONSTRAINT"]
