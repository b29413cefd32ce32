from .payment import Payment, generate_transaction_id

__all__ = ["Payment", "generate_transaction_id"]
