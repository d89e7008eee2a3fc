from models.base_model import Base, BaseModel, utcnow
from models.account import Account, Role
from models.rotation_token import RotationToken
from models.db_storage import DBStorage

__all__ = ["Base", "BaseModel", "utcnow", "Account", "Role", "RotationToken", "DBStorage"]
