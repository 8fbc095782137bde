from receiptvault.models.user import UserModel
from receiptvault.models.session import SessionModel
from receiptvault.models.receipt import ReceiptModel

__all__ = ["UserModel", "SessionModel", "ReceiptModel"]
